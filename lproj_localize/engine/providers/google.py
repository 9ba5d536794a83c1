"""Provider for the Google Cloud Translation v2 REST API (API key)."""

import urllib.parse
import urllib.request
from typing import Optional

from lproj_localize.engine.base import TranslationProvider
from lproj_localize.errors import TranslationError


class GoogleCloudProvider(TranslationProvider):
    """
    Google Cloud Translation (Basic, v2) with an API key.
    The endpoint can be overridden for proxies or regional hosts.
    """

    API_URL = "https://translation.googleapis.com/language/translate/v2"

    def __init__(self, api_key: str, api_url: Optional[str] = None,
                 max_rpm=300, max_daily=100000):
        super().__init__(
            name='google',
            max_requests_per_minute=max_rpm,
            max_requests_per_day=max_daily,
        )
        self.api_key = api_key
        self.api_url = api_url or self.API_URL

    def is_available(self) -> bool:
        return bool(self.api_key)

    def _translate(self, text: str, source_lang: str, target_lang: str) -> str:
        data = urllib.parse.urlencode({
            'q': text,
            'source': source_lang,
            'target': target_lang,
            'format': 'text',
            'key': self.api_key,
        }).encode('utf-8')

        req = urllib.request.Request(self.api_url, data=data, method='POST')
        req.add_header('Content-Type', 'application/x-www-form-urlencoded')
        result = self.fetch_json(req, timeout=15)

        translations = result.get('data', {}).get('translations', [])
        if not translations:
            raise TranslationError("Empty API response", provider=self.name)
        return translations[0].get('translatedText', '')
