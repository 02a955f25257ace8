"""
Page title scraping for Auto Link Title.

Responsibilities:
- Fetch a URL and pull the text of its <title> element
- Fall back to the file name for non-HTML responses
- Fall back to the `no-title` attribute, then the URL, for empty titles
- Never raise: failures become sentinel titles

Does NOT:
- Escape or shorten titles (title_utils)
- Touch the editor (placeholder / plugin)
"""

import asyncio
import inspect
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup

from .title_utils import clean_title

USER_AGENT = 'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
REQUEST_TIMEOUT = 30

ONLINE_PROBE_URL = 'https://www.google.com/generate_204'

SITE_UNREACHABLE = 'Site Unreachable'
FETCH_ERROR = 'Error fetching title'
FILE_FALLBACK = 'File'


def blank(text) -> bool:
    return text is None or text == ''


def get_url_final_segment(url: str) -> str:
    """Last non-empty path segment of url, or 'File' if there is none."""
    try:
        segments = [s for s in urlparse(url).path.split('/') if s]
    except ValueError:
        return FILE_FALLBACK
    return segments[-1] if segments else FILE_FALLBACK


def scrape(url: str) -> str:
    """Fetch url and return its title, or a fallback string."""
    try:
        headers = {
            'User-Agent': USER_AGENT,
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
            'Accept-Language': 'en-US,en;q=0.5',
        }

        response = requests.get(url, headers=headers, timeout=REQUEST_TIMEOUT, allow_redirects=True)
        response.raise_for_status()

        content_type = response.headers.get('content-type', '')
        if 'text/html' not in content_type:
            return get_url_final_segment(url)

        # Without a header charset, bs4 sniffs <meta charset> from the raw bytes
        encoding = response.encoding if 'charset=' in content_type.lower() else None
        soup = BeautifulSoup(response.content, 'html.parser', from_encoding=encoding)
        title = soup.find('title')
        title_text = title.get_text() if title else None

        if blank(title_text) or not title_text.strip():
            # Script-rendered sites sometimes park a placeholder here until loaded
            no_title = title.get('no-title') if title else None
            if not blank(no_title):
                return no_title
            return url

        return title_text

    except Exception as e:
        print(f"Title scrape failed for {url}: {e}")
        return SITE_UNREACHABLE


def get_page_title(url: str) -> str:
    if not url.startswith('http'):
        url = 'https://' + url
    return scrape(url)


async def fetch_url_title(url: str, use_new_scraper: bool = True, renderer=None) -> str:
    """
    Fetch a display title for url.

    Args:
        url: The URL being linked
        use_new_scraper: Use the HTTP scraper even when a renderer is available
        renderer: Optional host capability, renderer(url) -> title, sync or
            async, for pages that need script execution to set their title

    Returns:
        Title with line breaks removed and whitespace trimmed
    """
    try:
        if use_new_scraper or renderer is None:
            title = await asyncio.to_thread(get_page_title, url)
        else:
            title = renderer(url)
            if inspect.isawaitable(title):
                title = await title
        return clean_title(title)
    except Exception as e:
        print(f"Error fetching title for {url}: {e}")
        return FETCH_ERROR


def is_online(probe_url: str = ONLINE_PROBE_URL, timeout: float = 3) -> bool:
    """
    Connectivity probe. Blocks for up to timeout seconds, so hosts run it off
    the event loop and hand AutoLinkTitle the cached result.
    """
    try:
        requests.head(probe_url, timeout=timeout, allow_redirects=False)
        return True
    except requests.exceptions.RequestException:
        return False
