"""Provider for the DeepL API (free or pro key)."""

import urllib.parse
import urllib.request
from typing import Optional

from lproj_localize.engine.base import TranslationProvider
from lproj_localize.errors import TranslationError


class DeepLProvider(TranslationProvider):
    """
    DeepL API. Free keys end with ':fx' and use the api-free host.
    Language codes are upper-case; source languages carry no region.
    """

    FREE_API_URL = "https://api-free.deepl.com/v2/translate"
    PRO_API_URL = "https://api.deepl.com/v2/translate"

    def __init__(self, api_key: str, api_url: Optional[str] = None,
                 max_rpm=30, max_daily=10000):
        super().__init__(
            name='deepl',
            max_requests_per_minute=max_rpm,
            max_requests_per_day=max_daily,
        )
        self.api_key = api_key
        if api_url:
            self.api_url = api_url
        elif api_key.endswith(':fx'):
            self.api_url = self.FREE_API_URL
        else:
            self.api_url = self.PRO_API_URL

    def is_available(self) -> bool:
        return bool(self.api_key)

    def lang_code(self, lang: str) -> str:
        return super().lang_code(lang).upper()

    def _translate(self, text: str, source_lang: str, target_lang: str) -> str:
        data = urllib.parse.urlencode({
            'text': text,
            'source_lang': source_lang.split('-')[0],
            'target_lang': target_lang,
        }).encode('utf-8')

        req = urllib.request.Request(self.api_url, data=data, method='POST')
        req.add_header('Content-Type', 'application/x-www-form-urlencoded')
        req.add_header('Authorization', f'DeepL-Auth-Key {self.api_key}')
        result = self.fetch_json(req, timeout=15)

        translations = result.get('translations', [])
        if not translations:
            raise TranslationError("Empty API response", provider=self.name)
        return translations[0].get('text', '')
