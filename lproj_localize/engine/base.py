"""Abstract base class for translation providers."""

import json
import socket
import threading
import time
import urllib.error
import urllib.request
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from lproj_localize.errors import TranslationError


class ProviderStatus(Enum):
    AVAILABLE = "available"
    RATE_LIMITED = "rate_limited"
    ERROR = "error"
    DISABLED = "disabled"


@dataclass
class ProviderStats:
    """Usage statistics of one provider."""

    name: str
    total_requests: int = 0
    successful: int = 0
    failed: int = 0
    rate_limited: int = 0
    last_request_at: float = 0.0
    last_error_at: float = 0.0
    last_error_msg: str = ""
    cooldown_until: float = 0.0
    requests_this_window: int = 0
    window_start: float = field(default_factory=time.time)


# lproj folder names that translation APIs spell differently
LANG_ALIASES = {
    'zh-Hans': 'zh-CN',
    'zh-Hant': 'zh-TW',
    'zh-HK': 'zh-TW',
    'nb': 'no',
}


class TranslationProvider(ABC):
    """
    Interface for translation providers.

    Subclasses implement _translate() and raise TranslationError on network,
    quota or auth failures; translate() turns those into None and keeps the
    rate-limit bookkeeping.
    """

    def __init__(self, name: str, max_requests_per_minute: int = 60,
                 max_requests_per_day: int = 5000):
        self.name = name
        self.max_rpm = max_requests_per_minute
        self.max_daily = max_requests_per_day
        self.stats = ProviderStats(name=name)
        self._lock = threading.Lock()

    @abstractmethod
    def _translate(self, text: str, source_lang: str, target_lang: str) -> str:
        ...

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the provider can be used at all (credentials, binaries)."""
        ...

    def lang_code(self, lang: str) -> str:
        return LANG_ALIASES.get(lang, lang)

    def translate(self, text: str, source_lang: str, target_lang: str) -> Optional[str]:
        """Returns the translation or None on failure."""
        if not text.strip():
            return text

        try:
            translated = self._translate(text, self.lang_code(source_lang),
                                         self.lang_code(target_lang))
        except TranslationError as e:
            self.record_failure(e.message, is_rate_limit=e.is_rate_limit)
            return None

        translated = (translated or '').strip()
        if not translated or translated.lower() == text.strip().lower():
            self.record_failure("Translation empty or identical to the original")
            return None

        self.record_success()
        return translated

    def fetch_json(self, req: urllib.request.Request, timeout: float = 15):
        """Performs the request and decodes a JSON body, raising TranslationError."""
        try:
            with urllib.request.urlopen(req, timeout=timeout) as resp:
                return json.loads(resp.read().decode('utf-8'))
        except urllib.error.HTTPError as e:
            raise TranslationError(f'HTTP {e.code}', provider=self.name,
                                   is_rate_limit=e.code in (429, 456))
        except (urllib.error.URLError, socket.timeout, TimeoutError) as e:
            raise TranslationError(f'Network error: {e}', provider=self.name)
        except ValueError as e:
            raise TranslationError(f'Invalid response: {e}', provider=self.name)

    def check_rate_limit(self) -> bool:
        """
        Reserves one request in the current 60s window when allowed.
        Batch workers share a provider, so check and reservation hold the lock.
        """
        with self._lock:
            now = time.time()

            if now < self.stats.cooldown_until:
                return False

            if self.stats.total_requests >= self.max_daily:
                return False

            # Reset the 60s window
            if now - self.stats.window_start > 60:
                self.stats.requests_this_window = 0
                self.stats.window_start = now

            if self.stats.requests_this_window >= self.max_rpm:
                return False

            self.stats.requests_this_window += 1
            return True

    def record_success(self):
        with self._lock:
            self.stats.total_requests += 1
            self.stats.successful += 1
            self.stats.last_request_at = time.time()

    def record_failure(self, error_msg: str = "", is_rate_limit: bool = False):
        """Records a failure; rate limits start a progressive cooldown."""
        with self._lock:
            now = time.time()
            self.stats.total_requests += 1
            self.stats.failed += 1
            self.stats.last_error_at = now
            self.stats.last_error_msg = error_msg

            if is_rate_limit:
                self.stats.rate_limited += 1
                consecutive = min(self.stats.rate_limited, 4)
                cooldown = 30 * (2 ** consecutive)
                self.stats.cooldown_until = now + cooldown

    def get_status(self) -> ProviderStatus:
        if not self.is_available():
            return ProviderStatus.DISABLED
        if time.time() < self.stats.cooldown_until:
            return ProviderStatus.RATE_LIMITED
        return ProviderStatus.AVAILABLE
