"""Keyless Google Translate provider over the public gtx endpoint."""

import urllib.parse
import urllib.request

from lproj_localize.engine.base import TranslationProvider
from lproj_localize.errors import TranslationError


class GoogleFreeProvider(TranslationProvider):
    """
    Google Translate through the gtx endpoint, no API key.
    8s timeout per request; rate limits kick in around 50 req/min.
    """

    TRANSLATE_URL = "https://translate.googleapis.com/translate_a/single"

    def __init__(self, max_rpm=50, max_daily=5000):
        super().__init__(
            name='google_free',
            max_requests_per_minute=max_rpm,
            max_requests_per_day=max_daily,
        )

    def is_available(self) -> bool:
        return True

    def _translate(self, text: str, source_lang: str, target_lang: str) -> str:
        params = urllib.parse.urlencode({
            'client': 'gtx',
            'sl': source_lang,
            'tl': target_lang,
            'dt': 't',
            'q': text,
        })
        req = urllib.request.Request(f"{self.TRANSLATE_URL}?{params}", headers={
            'User-Agent': 'Mozilla/5.0',
        })
        data = self.fetch_json(req, timeout=8)

        # [[["translation","original",...],...],...]
        try:
            return ''.join(part[0] for part in data[0] if part and part[0])
        except (IndexError, TypeError) as e:
            raise TranslationError(f"Unexpected response shape: {e}", provider=self.name)
