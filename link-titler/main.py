"""
Link Titler Cloud Function

Runs the Auto Link Title pipeline against a document sent over HTTP, for
editors that cannot host the pipeline in-process.

Responsibilities:
- Rebuild the editor state (document + selection) from the request
- Dispatch a paste/drop event or a named command
- Return the edited document and any user notices

Does NOT:
- Keep any state between requests
- Persist settings (read from AUTO_LINK_TITLE_SETTINGS or the request)
"""

import asyncio
import json
import os
import sys

import functions_framework

# Add autolink package to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))
from autolink.editor import TextBuffer
from autolink.plugin import COMMANDS, AutoLinkTitle, EventKind, PasteContext
from autolink.settings import SETTINGS_PATH, SettingsStore

COMMAND_IDS = [command.id for command in COMMANDS]


class RequestClipboard:
    """Clipboard contents as sent by the caller."""

    def __init__(self, text):
        self.text = text or ''

    def read_text(self) -> str:
        return self.text


def build_store(settings_data) -> SettingsStore:
    if settings_data is not None:
        return SettingsStore(data=settings_data)
    return SettingsStore(path=SETTINGS_PATH)


def parse_event(event_json: dict) -> PasteContext:
    """Build a PasteContext from the request's event object."""
    return PasteContext(
        kind=EventKind(event_json.get('kind', 'paste')),
        text=event_json.get('text') or '',
        default_prevented=bool(event_json.get('defaultPrevented', False)),
    )


async def run(plugin: AutoLinkTitle, editor: TextBuffer, command_id, context) -> bool:
    if context is not None:
        return await plugin.handle_event(context, editor)
    await plugin.run_command(command_id, editor)
    return True


@functions_framework.http
def auto_link_title(request):
    """
    Main Cloud Function entry point.

    Expected JSON input:
    {
        "document": "See ",
        "selection": [4, 4],
        "event": {"kind": "paste", "text": "https://example.com"},
        "online": true,
        "settings": {"maximumTitleLength": 40}
    }

    or, for a command:
    {
        "document": "See https://example.com",
        "selection": [4, 23],
        "command": "enhance-url-with-title",
        "clipboard": "..."
    }
    """
    # Handle CORS
    if request.method == 'OPTIONS':
        headers = {
            'Access-Control-Allow-Origin': '*',
            'Access-Control-Allow-Methods': 'POST',
            'Access-Control-Allow-Headers': 'Content-Type',
            'Access-Control-Max-Age': '3600'
        }
        return ('', 204, headers)

    headers = {'Access-Control-Allow-Origin': '*'}

    try:
        request_json = request.get_json(silent=True)

        if not request_json or 'document' not in request_json:
            return (json.dumps({
                'error': 'Missing required field: document'
            }), 400, headers)

        command_id = request_json.get('command')
        event_json = request_json.get('event')

        if not command_id and not event_json:
            return (json.dumps({
                'error': 'Missing required field: command or event'
            }), 400, headers)

        if command_id and command_id not in COMMAND_IDS:
            return (json.dumps({
                'error': f'Unknown command: {command_id}'
            }), 400, headers)

        try:
            context = parse_event(event_json) if event_json else None
            editor = TextBuffer(request_json['document'], request_json.get('selection'))
        except (ValueError, TypeError) as e:
            return (json.dumps({'error': f'Invalid request: {e}'}), 400, headers)

        notices = []
        online = bool(request_json.get('online', True))
        plugin = AutoLinkTitle(
            build_store(request_json.get('settings')),
            notify=notices.append,
            online=lambda: online,
            clipboard=RequestClipboard(request_json.get('clipboard')),
        )

        handled = asyncio.run(run(plugin, editor, command_id, context))

        response = {
            'document': editor.get_value(),
            'selection': [editor.sel_start, editor.sel_end],
            'handled': handled,
            'defaultPrevented': context.default_prevented if context else False,
            'notices': notices,
        }
        return (json.dumps(response), 200, headers)

    except Exception as e:
        return (json.dumps({
            'error': {
                'stage': 'processing',
                'message': str(e),
                'recoverable': False
            }
        }), 500, headers)
