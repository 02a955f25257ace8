"""
Predicates that decide whether pasted text, or the spot it lands in, should be
turned into a titled link. All of them are pure; the editor-context checks
only read the current line up to the cursor.
"""

import re
from urllib.parse import urlparse

from .editor import Editor

# Markdown link with the URL in group 2
DEFAULT_LINK_REGEX = (
    r'^\[([^\[\]]*)\]\((https?:\/\/(www\.)?[-a-zA-Z0-9@:%._\+~#=]{1,256}'
    r'\.[a-zA-Z0-9()]{1,6}\b([-a-zA-Z0-9()@:%_\+.~#?&//=]*))\)$'
)

IMAGE_EXTENSIONS = re.compile(r'\.(gif|jpe?g|tiff?|png|webp|bmp|tga|psd|ai|svg|ico)$', re.I)

_SCHEME = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.\-]*://')
_BLOCKQUOTE = re.compile(r'^\s*>')


def is_url(text: str) -> bool:
    """True if the trimmed text is a single absolute URL with a host."""
    if not text:
        return False

    text = text.strip()
    if not text or any(c.isspace() for c in text):
        return False

    if not _SCHEME.match(text):
        return False

    try:
        parsed = urlparse(text)
        parsed.port  # raises on a malformed port
    except ValueError:
        return False

    return bool(parsed.hostname)


def is_linked_url(text: str, pattern: str = DEFAULT_LINK_REGEX) -> bool:
    if not text:
        return False
    return re.search(pattern, text.strip()) is not None


def is_image(text: str) -> bool:
    """True if the URL path ends in an image file extension."""
    if not text:
        return False
    try:
        path = urlparse(text.strip()).path
    except ValueError:
        return False
    return IMAGE_EXTENSIONS.search(path) is not None


def _line_before_cursor(editor: Editor) -> str:
    cursor = editor.get_cursor()
    return editor.get_line(cursor.line)[:cursor.ch]


def is_markdown_link_already(editor: Editor) -> bool:
    """True if the cursor sits right after the `](` of a link being typed."""
    return _line_before_cursor(editor).endswith('](')


def is_after_quote(editor: Editor) -> bool:
    """True if the current line opens with a blockquote marker."""
    return _BLOCKQUOTE.match(_line_before_cursor(editor)) is not None


def get_url_from_link(link: str, pattern: str = DEFAULT_LINK_REGEX) -> str:
    """
    Extract the URL from a markdown link.

    Raises:
        ValueError: if link does not match the pattern. Callers check with
            is_linked_url() first.
    """
    match = re.search(pattern, link.strip())
    if not match:
        raise ValueError(f"Not a markdown link: {link!r}")
    return match.group(2)
