"""Provider for the MyMemory translation API (free, no key)."""

import urllib.parse
import urllib.request
from typing import Optional

from lproj_localize.engine.base import TranslationProvider
from lproj_localize.errors import TranslationError


class MyMemoryProvider(TranslationProvider):
    """
    MyMemory API, 5000 chars/day anonymously, 50000 with a contact email.
    """

    API_URL = "https://api.mymemory.translated.net/get"

    def __init__(self, email: Optional[str] = None, max_rpm=30, max_daily=5000):
        super().__init__(
            name='mymemory',
            max_requests_per_minute=max_rpm,
            max_requests_per_day=max_daily,
        )
        self.email = email

    def is_available(self) -> bool:
        return True

    def _translate(self, text: str, source_lang: str, target_lang: str) -> str:
        params = {
            'q': text,
            'langpair': f'{source_lang}|{target_lang}',
        }
        if self.email:
            params['de'] = self.email

        req = urllib.request.Request(f"{self.API_URL}?{urllib.parse.urlencode(params)}",
                                     headers={'User-Agent': 'lproj-localize/1.0'})
        data = self.fetch_json(req, timeout=15)

        status = data.get('responseStatus', 0)
        if status == 429:
            raise TranslationError("Rate limited", provider=self.name, is_rate_limit=True)
        if status not in (200, '200'):
            raise TranslationError(f"responseStatus={status}", provider=self.name)

        return data.get('responseData', {}).get('translatedText', '')
