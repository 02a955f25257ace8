"""
Auto Link Title conversion orchestrator.

Ties the pieces together for each user action:
- Paste / drop interception (when enabled in settings)
- Manual paste, normal paste
- Enhance an existing URL or link with a fetched title
- Turn selected text into a link to its first search result
- Add a favicon to an existing link

Every path that would fetch a title checks the website blacklist first,
re-reading settings so live edits apply.
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Tuple
from urllib.parse import urlparse

from .classify import (
    get_url_from_link,
    is_after_quote,
    is_image,
    is_linked_url,
    is_markdown_link_already,
    is_url,
)
from .editor import Editor, index_from_position
from .favicon import paste_favicon
from .placeholder import FETCHING_LINK, FETCHING_TITLE, replace_async
from .scraper import fetch_url_title
from .search import SEARCH_ERROR, scrape_first_url
from .settings import AutoLinkSettings, SettingsStore, is_blacklisted, parse_blacklist
from .title_utils import sanitize_title

NOTICE_OFFLINE = 'You must be online to use this feature'
NOTICE_NO_SELECTION = 'No text selected'
NOTICE_MISSING_CREDENTIALS = 'You must set your Google API Key and Custom Search Engine ID in the settings'


class EventKind(str, Enum):
    PASTE = 'paste'
    DROP = 'drop'
    MANUAL_PASTE = 'manual-paste'
    MANUAL_COMMAND = 'manual-command'


@dataclass
class PasteContext:
    """One paste or drop as seen by the handlers."""
    kind: EventKind
    text: str
    default_prevented: bool = False
    propagation_stopped: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True

    def stop_propagation(self) -> None:
        self.propagation_stopped = True


@dataclass(frozen=True)
class Command:
    id: str
    name: str
    method: str
    hotkeys: Tuple[str, ...] = field(default_factory=tuple)


COMMANDS: List[Command] = [
    Command('auto-link-title-paste', 'Paste URL and auto fetch title', 'manual_paste_url_with_title'),
    Command('auto-link-title-normal-paste', 'Normal paste (no fetching behavior)', 'normal_paste', ('Mod+Shift+V',)),
    Command('enhance-url-with-title', 'Enhance existing URL with link and title', 'add_title_to_link', ('Mod+Shift+E',)),
    Command('fetch-first-link', 'Fetch first search result of selected text', 'fetch_first_link'),
    Command('enhance-with-favicon', 'Enhance link with favicon', 'enhance_with_favicon'),
]


def assume_online() -> bool:
    """
    Default connectivity check. Handlers call it synchronously before their
    first await, so it must not touch the network. Hosts that track
    connectivity (e.g. with scraper.is_online on a background thread) pass
    their own cached flag instead.
    """
    return True


class AutoLinkTitle:
    def __init__(self, store: SettingsStore, notify: Callable[[str], None] = print,
                 online: Optional[Callable[[], bool]] = None, clipboard=None, renderer=None,
                 fetch_title=None, resolve_link=None):
        self.store = store
        self.notify = notify
        self.online = online or assume_online
        self.clipboard = clipboard
        self.renderer = renderer
        self.fetch_title = fetch_title or fetch_url_title
        self.resolve_link = resolve_link or scrape_first_url
        self.settings: AutoLinkSettings = store.load()
        self.blacklist: List[str] = parse_blacklist(self.settings.website_blacklist)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def commands(self) -> List[Tuple[Command, Callable]]:
        return [(command, getattr(self, command.method)) for command in COMMANDS]

    async def run_command(self, command_id: str, editor: Editor) -> None:
        for command, callback in self.commands():
            if command.id == command_id:
                await callback(editor)
                return
        raise KeyError(f"Unknown command: {command_id}")

    async def add_title_to_link(self, editor: Editor) -> None:
        if not self.online():
            return

        selected_text = (editor.get_selection() or '').strip()

        # A raw URL becomes a titled link
        if is_url(selected_text):
            await self.convert_url_to_titled_link(editor, selected_text)
        # The URL part of a markdown link gets its title replaced
        elif is_linked_url(selected_text, self.settings.link_regex):
            link = self.get_url_from_link(selected_text)
            await self.convert_url_to_titled_link(editor, link)

    async def fetch_first_link(self, editor: Editor) -> None:
        if not self.online():
            self.notify(NOTICE_OFFLINE)
            return

        selected_text = editor.get_selection() or ''
        if not selected_text.strip():
            self.notify(NOTICE_NO_SELECTION)
            return

        self.settings = self.store.load()
        api_key = self.settings.api_key.strip()
        cx = self.settings.custom_search_engine_id.strip()
        if not api_key or not cx:
            self.notify(NOTICE_MISSING_CREDENTIALS)
            return

        link = SEARCH_ERROR

        async def resolve():
            nonlocal link
            link = await asyncio.to_thread(self.resolve_link, api_key, cx, selected_text, self.notify)
            return link

        start = await replace_async(
            editor,
            FETCHING_LINK,
            resolve(),
            wrap=lambda placeholder: f"[{selected_text}]({placeholder})",
        )
        if start is not None and link != SEARCH_ERROR and self.settings.insert_favicons:
            # start points at the URL; the title begins right after "["
            title_start = start - len(selected_text) - len('](')
            paste_favicon(editor, link, title_start, at_link=True)

    async def enhance_with_favicon(self, editor: Editor) -> None:
        if not self.online():
            return

        raw_selection = editor.get_selection() or ''
        selected_text = raw_selection.strip()
        if not selected_text:
            return

        selection_start = index_from_position(editor.get_value(), editor.get_cursor())
        anchor = selection_start + len(raw_selection) - len(raw_selection.lstrip())

        # A raw URL gets the favicon at its start
        if is_url(selected_text):
            paste_favicon(editor, selected_text, anchor, at_link=True)
        # A markdown link gets it in front of its title
        elif is_linked_url(selected_text, self.settings.link_regex):
            link = self.get_url_from_link(selected_text)
            paste_favicon(editor, link, anchor)

    async def normal_paste(self, editor: Editor) -> None:
        clipboard_text = self._read_clipboard()
        if not clipboard_text:
            return
        editor.replace_selection(clipboard_text)

    async def manual_paste_url_with_title(self, editor: Editor) -> None:
        """
        Paste from the clipboard directly, for hosts where paste events can't
        be intercepted. Falls back to a plain paste whenever a fetch isn't
        appropriate.
        """
        await self._manual_paste(editor, self._read_clipboard())

    async def _manual_paste(self, editor: Editor, clipboard_text: str) -> None:
        if not self.online():
            if clipboard_text:
                editor.replace_selection(clipboard_text)
            return

        if not clipboard_text:
            return

        if not self._wants_title(clipboard_text):
            editor.replace_selection(clipboard_text)
            return

        await self._insert_link(editor, clipboard_text)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    async def handle_event(self, context: PasteContext, editor: Editor) -> bool:
        """Route a host event to its handler. Returns True if the host default should be skipped."""
        if context.kind == EventKind.PASTE:
            return await self.paste_url_with_title(context, editor)
        if context.kind == EventKind.DROP:
            return await self.drop_url_with_title(context, editor)
        if context.kind == EventKind.MANUAL_PASTE:
            await self._manual_paste(editor, context.text)
        else:
            await self.run_command(context.text, editor)
        return True

    async def paste_url_with_title(self, context: PasteContext, editor: Editor) -> bool:
        """Handle a paste event. Returns True if the default paste was suppressed."""
        if not self.settings.enhance_default_paste:
            return False
        return await self._intercept(context, editor)

    async def drop_url_with_title(self, context: PasteContext, editor: Editor) -> bool:
        """Handle a drop event. Returns True if the default drop was suppressed."""
        if not self.settings.enhance_drop_events:
            return False
        return await self._intercept(context, editor)

    async def _intercept(self, context: PasteContext, editor: Editor) -> bool:
        if context.default_prevented:
            return False

        if not self.online():
            return False

        text = context.text
        if not text:
            return False

        # Image URLs have no meaningful <title>, leave them to the default handler
        if not self._wants_title(text):
            return False

        context.stop_propagation()
        context.prevent_default()

        await self._insert_link(editor, text)
        return True

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def _wants_title(self, text: str) -> bool:
        return is_url(text) and not is_image(text)

    async def _insert_link(self, editor: Editor, text: str) -> None:
        # Already typing a link, or quoting: the user has their own title
        if is_markdown_link_already(editor) or is_after_quote(editor):
            editor.replace_selection(text)
            return

        url = text.strip()

        selected_text = (editor.get_selection() or '').strip()
        if selected_text and self.settings.should_preserve_selection_as_title:
            editor.replace_selection(f"[{selected_text}]({url})")
            return

        await self.convert_url_to_titled_link(editor, url)

    def is_blacklisted(self, url: str) -> bool:
        self.settings = self.store.load()
        self.blacklist = parse_blacklist(self.settings.website_blacklist)
        return is_blacklisted(url, self.blacklist)

    async def convert_url_to_titled_link(self, editor: Editor, url: str) -> Optional[int]:
        if self.is_blacklisted(url):
            domain = urlparse(url).hostname
            editor.replace_selection(f"[{domain}]({url})")
            return None

        max_length = self.settings.maximum_title_length

        async def title():
            fetched = await self.fetch_title(url, self.settings.use_new_scraper, self.renderer)
            return sanitize_title(fetched, max_length)

        return await replace_async(
            editor,
            FETCHING_TITLE,
            title(),
            wrap=lambda placeholder: f"[{placeholder}]({url})",
            favicon_url=url if self.settings.insert_favicons else None,
            favicon_at_link=True,
        )

    def get_url_from_link(self, link: str) -> str:
        return get_url_from_link(link, self.settings.link_regex)

    def _read_clipboard(self) -> str:
        if self.clipboard is None:
            return ''
        return self.clipboard.read_text() or ''
