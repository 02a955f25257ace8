"""
Persisted settings and the website blacklist derived from them.

Settings live in a JSON blob with camelCase keys. Credentials may also come
from the environment so they never have to be written to disk.
"""

import json
import os
import re
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .classify import DEFAULT_LINK_REGEX

# Configuration
GOOGLE_API_KEY = os.environ.get('GOOGLE_API_KEY')
GOOGLE_CSE_ID = os.environ.get('GOOGLE_CSE_ID')
SETTINGS_PATH = os.environ.get('AUTO_LINK_TITLE_SETTINGS')

_BLACKLIST_SEPARATORS = re.compile(r',|\n')


class AutoLinkSettings(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra='ignore')

    website_blacklist: str = ''
    maximum_title_length: int = Field(default=0, ge=0)
    insert_favicons: bool = False
    should_preserve_selection_as_title: bool = False
    enhance_default_paste: bool = True
    enhance_drop_events: bool = True
    use_new_scraper: bool = False
    api_key: str = ''
    custom_search_engine_id: str = ''
    link_regex: str = DEFAULT_LINK_REGEX

    @field_validator('link_regex')
    @classmethod
    def check_link_regex(cls, value: str) -> str:
        # The URL is read from group 2
        try:
            compiled = re.compile(value)
        except re.error as e:
            raise ValueError(f"linkRegex is not a valid pattern: {e}")
        if compiled.groups < 2:
            raise ValueError("linkRegex must capture the URL in group 2")
        return value


def parse_blacklist(text: str) -> List[str]:
    """Split the blacklist setting on commas and newlines, dropping blanks."""
    if not text:
        return []
    return [site.strip() for site in _BLACKLIST_SEPARATORS.split(text) if site.strip()]


def is_blacklisted(url: str, blacklist: List[str]) -> bool:
    # Plain substring match: "a.com" also matches "notreallya.com"
    return any(site in url for site in blacklist)


class SettingsStore:
    """
    Loads settings from a JSON file, or from an in-memory dict.

    load() always reads fresh, so edits made while the app runs are picked up
    on the next check.
    """

    def __init__(self, path: Optional[Path] = None, data: Optional[dict] = None):
        self.path = Path(path) if path else None
        self.data = data

    def _read(self) -> dict:
        if self.path is None:
            return dict(self.data or {})
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            print(f"Error loading settings from {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            print(f"Ignoring settings in {self.path}: expected a JSON object")
            return {}
        return data

    def load(self) -> AutoLinkSettings:
        data = self._read()
        try:
            settings = AutoLinkSettings.model_validate(data)
        except ValueError as e:
            print(f"Settings validation failed, using defaults: {e}")
            settings = AutoLinkSettings()

        if not settings.api_key and GOOGLE_API_KEY:
            settings.api_key = GOOGLE_API_KEY
        if not settings.custom_search_engine_id and GOOGLE_CSE_ID:
            settings.custom_search_engine_id = GOOGLE_CSE_ID

        return settings

    def save(self, settings: AutoLinkSettings) -> None:
        payload = settings.model_dump(by_alias=True)
        if self.path is None:
            self.data = payload
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            f.write(json.dumps(payload, indent=2))
