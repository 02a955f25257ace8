"""Auto Link Title: turn pasted URLs into titled markdown links."""

from .classify import (
    DEFAULT_LINK_REGEX,
    is_url,
    is_linked_url,
    is_image,
    is_markdown_link_already,
    is_after_quote,
    get_url_from_link,
)

from .title_utils import (
    escape_markdown,
    shorten_title,
    clean_title,
    sanitize_title,
)

from .scraper import (
    SITE_UNREACHABLE,
    FETCH_ERROR,
    get_page_title,
    fetch_url_title,
)

from .search import SEARCH_ERROR, scrape_first_url
from .favicon import favicon_tag, paste_favicon
from .editor import Editor, EditorPosition, TextBuffer, position_from_index
from .placeholder import FETCHING_TITLE, FETCHING_LINK, PlaceholderToken, replace_async
from .settings import AutoLinkSettings, SettingsStore, parse_blacklist, is_blacklisted
from .plugin import AutoLinkTitle, PasteContext, EventKind, COMMANDS

__all__ = [
    # Classifier
    'DEFAULT_LINK_REGEX',
    'is_url',
    'is_linked_url',
    'is_image',
    'is_markdown_link_already',
    'is_after_quote',
    'get_url_from_link',
    # Title utilities
    'escape_markdown',
    'shorten_title',
    'clean_title',
    'sanitize_title',
    # Fetching
    'SITE_UNREACHABLE',
    'FETCH_ERROR',
    'get_page_title',
    'fetch_url_title',
    'SEARCH_ERROR',
    'scrape_first_url',
    'favicon_tag',
    'paste_favicon',
    # Editing
    'Editor',
    'EditorPosition',
    'TextBuffer',
    'position_from_index',
    'FETCHING_TITLE',
    'FETCHING_LINK',
    'PlaceholderToken',
    'replace_async',
    # Settings
    'AutoLinkSettings',
    'SettingsStore',
    'parse_blacklist',
    'is_blacklisted',
    # Orchestrator
    'AutoLinkTitle',
    'PasteContext',
    'EventKind',
    'COMMANDS',
]
