"""Resolve free text to the first result of a Google Custom Search query."""

import requests

SEARCH_API_URL = 'https://www.googleapis.com/customsearch/v1'
SEARCH_TIMEOUT = 10

SEARCH_ERROR = 'Error'


def scrape_first_url(api_key: str, cx: str, query: str, notify=print) -> str:
    """
    Look up query and return the link of the top result.

    On success the user is told which URL the keyword resolved to. Every
    failure returns 'Error' and is only logged.
    """
    params = {
        'key': api_key,
        'cx': cx,
        'q': query,
        'num': '1',
    }

    try:
        response = requests.get(SEARCH_API_URL, params=params, timeout=SEARCH_TIMEOUT)
    except requests.exceptions.RequestException as e:
        print(f"Custom Search request failed: {e}")
        return SEARCH_ERROR

    if response.status_code != 200:
        print(f"Error fetching data from Google Custom Search API: {response.status_code} - {response.text[:200]}")
        return SEARCH_ERROR

    try:
        url = response.json()['items'][0]['link']
    except (ValueError, KeyError, IndexError, TypeError) as e:
        print(f"No usable result for '{query}': {e}")
        return SEARCH_ERROR

    notify(f"keyword: {query}\nfetched URL: {url}")
    return url
