"""Inline favicon tags placed at the start of link titles."""

from urllib.parse import urlparse

from .editor import Editor, position_from_index

FAVICON_SERVICE = 'http://www.google.com/s2/favicons?domain='


def favicon_domain(url: str) -> str:
    hostname = urlparse(url).hostname or ''
    if hostname.startswith('www.'):
        hostname = hostname[len('www.'):]
    return hostname


def favicon_tag(url: str) -> str:
    return f"<img width=16 height=16 src='{FAVICON_SERVICE}{favicon_domain(url)}'/>"


def favicon_index(text: str, anchor_index: int, at_link: bool = False) -> int:
    """
    Where the favicon goes for an anchor at anchor_index.

    With at_link the tag goes at the anchor itself (a bare URL, or a title
    start the caller already knows). Otherwise it goes right after the opening
    bracket of the link around the anchor, so it becomes part of the title.
    """
    if at_link:
        return anchor_index
    bracket = text.rfind('[', 0, anchor_index + 1)
    return bracket + 1 if bracket >= 0 else anchor_index


def paste_favicon(editor: Editor, url: str, anchor_index: int, at_link: bool = False) -> None:
    text = editor.get_value()
    index = favicon_index(text, anchor_index, at_link)
    editor.replace_range(favicon_tag(url), position_from_index(text, index))
