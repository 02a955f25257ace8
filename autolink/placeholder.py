"""
Placeholder-based asynchronous replacement.

A placeholder such as "Fetching Title#x7k2" is written into the document
immediately, so a paste never looks stuck. When the real value arrives the
placeholder is located again by plain string search and swapped out. If the
user deleted it in the meantime the late value is dropped.
"""

import random
import string
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from .editor import Editor, position_from_index
from .favicon import paste_favicon

FETCHING_TITLE = 'Fetching Title'
FETCHING_LINK = 'Fetching Link'

TOKEN_ALPHABET = string.ascii_lowercase + string.digits
TOKEN_LENGTH = 4


def create_block_hash(length: int = TOKEN_LENGTH) -> str:
    return ''.join(random.choices(TOKEN_ALPHABET, k=length))


@dataclass(frozen=True)
class PlaceholderToken:
    prefix: str
    token: str

    @property
    def text(self) -> str:
        return f"{self.prefix}#{self.token}"

    @classmethod
    def create(cls, prefix: str, document: str = '') -> 'PlaceholderToken':
        """New token whose text does not already occur in document."""
        while True:
            placeholder = cls(prefix, create_block_hash())
            if placeholder.text not in document:
                return placeholder


async def replace_async(
    editor: Editor,
    prefix: str,
    value: Awaitable[str],
    wrap: Optional[Callable[[str], str]] = None,
    favicon_url: Optional[str] = None,
    favicon_at_link: bool = False,
) -> Optional[int]:
    """
    Insert a placeholder at the selection, await value, then replace it.

    Args:
        editor: Editor to write into
        prefix: Human-readable placeholder prefix, e.g. FETCHING_TITLE
        value: Awaitable resolving to the replacement text
        wrap: Builds the inserted text around the placeholder, e.g. a link
        favicon_url: If set, a favicon for this URL is inserted as well
        favicon_at_link: Insert the favicon at the replaced text itself instead
            of just inside the enclosing link's opening bracket

    Returns:
        Offset where the value was written, or None if the placeholder was
        gone by the time value resolved
    """
    placeholder = PlaceholderToken.create(prefix, editor.get_value())
    editor.replace_selection(wrap(placeholder.text) if wrap else placeholder.text)

    resolved = await value

    text = editor.get_value()
    start = text.find(placeholder.text)
    if start < 0:
        print(f'Unable to find text "{placeholder.text}" in current editor, bailing out; value {resolved}')
        return None

    end = start + len(placeholder.text)
    editor.replace_range(
        resolved,
        position_from_index(text, start),
        position_from_index(text, end),
    )

    if favicon_url:
        paste_favicon(editor, favicon_url, start, at_link=favicon_at_link)

    return start
