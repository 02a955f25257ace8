"""
Title processing utilities for Auto Link Title.

Fetched titles end up as markdown link text, so before insertion they must be:
1. Escaped, so markdown-significant characters render literally
2. Shortened to the configured maximum length (0 means unlimited)
"""

import re

# No limit unless the user configures one
UNLIMITED_TITLE_LENGTH = 0

ELLIPSIS = '...'

# Characters that may arrive already backslash-escaped from the page
_ESCAPED_MARKDOWN = re.compile(r'\\([*_`~\\\[\]])')

# Characters escaped on the way out
_MARKDOWN_SPECIAL = re.compile(r'([*_`<>~\\\[\]])')

_NEWLINES = re.compile(r'(\r\n|\n|\r)')


def escape_markdown(text: str) -> str:
    """
    Escape markdown-significant characters in a title.

    Any character that is already backslash-escaped is unescaped first, so a
    title with partial escaping from upstream ends up escaped exactly once.

    Examples:
        >>> escape_markdown('a*b_c')
        'a\\\\*b\\\\_c'

        >>> escape_markdown(escape_markdown('[x]')) == escape_markdown('[x]')
        True
    """
    if not text:
        return ''

    unescaped = _ESCAPED_MARKDOWN.sub(r'\1', text)
    return _MARKDOWN_SPECIAL.sub(r'\\\1', unescaped)


def shorten_title(title: str, max_length: int = UNLIMITED_TITLE_LENGTH) -> str:
    """
    Truncate title to max_length characters and append an ellipsis.

    Titles shorter than max_length + 3 are left alone, since the ellipsis
    would make them no shorter.

    Args:
        title: The title to shorten
        max_length: Maximum length before the ellipsis (0 = unlimited)

    Returns:
        The title, possibly truncated

    Examples:
        >>> shorten_title('abcdefghij', 5)
        'abcde...'

        >>> shorten_title('ab', 5)
        'ab'
    """
    if max_length == UNLIMITED_TITLE_LENGTH:
        return title

    if len(title) < max_length + len(ELLIPSIS):
        return title

    return title[:max_length] + ELLIPSIS


def clean_title(title: str) -> str:
    """Strip line breaks and surrounding whitespace from a scraped title."""
    if not title:
        return ''
    return _NEWLINES.sub('', title).strip()


def sanitize_title(title: str, max_length: int = UNLIMITED_TITLE_LENGTH) -> str:
    """Escape then shorten a fetched title for use as link text."""
    return shorten_title(escape_markdown(title), max_length)
