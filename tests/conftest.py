"""
Shared pytest fixtures for Auto Link Title tests.
"""

import pytest
import sys
import importlib.util
from pathlib import Path

from autolink.editor import TextBuffer
from autolink.plugin import AutoLinkTitle
from autolink.settings import SettingsStore

# Project root for finding Cloud Function modules
PROJECT_ROOT = Path(__file__).parent.parent


def _load_module_from_path(module_name: str, file_path: Path):
    """Load a module from a specific file path."""
    spec = importlib.util.spec_from_file_location(module_name, file_path)
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    spec.loader.exec_module(module)
    return module


# Load Cloud Function module with a unique name at module load time
_link_titler_module = _load_module_from_path(
    'link_titler_main',
    PROJECT_ROOT / 'link-titler' / 'main.py'
)


# ============================================================================
# Cloud Function Fixtures
# ============================================================================

@pytest.fixture
def auto_link_title():
    """Returns main entry point from link-titler."""
    return _link_titler_module.auto_link_title


@pytest.fixture
def mock_flask_request():
    """Factory for creating mock Flask request objects."""
    class MockRequest:
        def __init__(self, json_data=None, method='POST'):
            self._json = json_data
            self.method = method
            self.data = b''

        def get_json(self, force=False, silent=False):
            return self._json

    return MockRequest


# ============================================================================
# Pipeline Fixtures
# ============================================================================

class FakeFetcher:
    """Stands in for fetch_url_title and records every URL it is asked for."""

    def __init__(self, title='Example Title'):
        self.title = title
        self.calls = []

    async def __call__(self, url, use_new_scraper=True, renderer=None):
        self.calls.append(url)
        return self.title


class FakeClipboard:
    def __init__(self, text=''):
        self.text = text

    def read_text(self):
        return self.text


@pytest.fixture
def fake_fetch():
    return FakeFetcher()


@pytest.fixture
def notices():
    return []


@pytest.fixture
def make_plugin(fake_fetch, notices):
    """Factory for an AutoLinkTitle wired to fakes instead of the network."""
    def _make(settings=None, online=True, clipboard='', resolve_link=None, fetch=None):
        return AutoLinkTitle(
            SettingsStore(data=settings or {}),
            notify=notices.append,
            online=lambda: online,
            clipboard=FakeClipboard(clipboard),
            fetch_title=fetch or fake_fetch,
            resolve_link=resolve_link,
        )
    return _make


@pytest.fixture
def make_editor():
    """Factory for an in-memory editor; selection defaults to end of text."""
    def _make(text='', selection=None):
        return TextBuffer(text, selection)
    return _make


@pytest.fixture
def sample_page_html():
    return """
    <!DOCTYPE html>
    <html>
    <head>
        <title>Example Title</title>
        <meta property="og:title" content="Something else">
    </head>
    <body><h1>Example</h1></body>
    </html>
    """


@pytest.fixture
def multiline_title_html():
    return """
    <html><head><title>
        Line One
    Line Two
    </title></head></html>
    """


@pytest.fixture
def script_rendered_html():
    """Page whose title is filled in by JavaScript after load."""
    return '<html><head><title no-title="Loading App"></title></head><body></body></html>'


@pytest.fixture
def search_api_response():
    """Sample Google Custom Search response with one result."""
    return {
        "kind": "customsearch#search",
        "items": [
            {
                "title": "Python Requests Docs",
                "link": "https://requests.readthedocs.io/en/latest/",
                "displayLink": "requests.readthedocs.io",
            }
        ]
    }
