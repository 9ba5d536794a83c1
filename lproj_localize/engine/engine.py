"""TranslationEngine: provider fallback chain behind a run-scoped cache."""

import re
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Tuple

from lproj_localize.config import log
from lproj_localize.engine.base import TranslationProvider, ProviderStatus
from lproj_localize.engine.cache import TranslationCache
from lproj_localize.patterns import PLACEHOLDER_RE

_ESCAPE_RE = re.compile(r'\\(.)')
_UNESCAPES = {'"': '"', '\\': '\\', 'n': '\n', 't': '\t'}


# =============================================================================
# Table value <-> natural text
# =============================================================================

def protect_placeholders(text: str) -> Tuple[str, Dict[str, str]]:
    """Swaps %@, %d, \\(expr)... for opaque tokens before translation."""
    mapping = {}
    counter = [0]

    def replacer(match):
        token = f"__PH{counter[0]}__"
        mapping[token] = match.group(0)
        counter[0] += 1
        return token

    protected = PLACEHOLDER_RE.sub(replacer, text)
    return protected, mapping


def restore_placeholders(text: str, mapping: Dict[str, str]) -> str:
    for token, original in mapping.items():
        text = text.replace(token, original)
    return text


def unescape_value(value: str) -> str:
    """Undoes table escapes; unknown escapes stay as written."""
    return _ESCAPE_RE.sub(lambda m: _UNESCAPES.get(m.group(1), m.group(0)), value)


def escape_value(text: str) -> str:
    return (text.replace('\\', '\\\\')
                .replace('"', '\\"')
                .replace('\n', '\\n')
                .replace('\t', '\\t'))


class TranslationEngine:
    """
    Translation engine with:
    - run-scoped cache
    - Chain of Responsibility: providers are tried in order
    - proactive rate-limit awareness
    - per-provider metrics

    Values go in and come out in table form (escaped). None means no
    provider produced a translation; callers keep the source value.
    """

    def __init__(self, providers: List[TranslationProvider],
                 cache: Optional[TranslationCache] = None,
                 max_workers: int = 4, retry_delay: float = 0.5):
        self.providers = providers
        self.cache = cache if cache is not None else TranslationCache()
        self.max_workers = max_workers
        self.retry_delay = retry_delay

        available = [p.name for p in providers if p.is_available()]
        log.info(f'[ENGINE] Initialized with providers: {[p.name for p in providers]}')
        log.debug(f'[ENGINE] Available: {available}')

    def translate(self, value: str, source_lang: str, target_lang: str) -> Optional[str]:
        if not value.strip():
            return value

        cached = self.cache.get(value, source_lang, target_lang)
        if cached is not None:
            return cached

        protected, mapping = protect_placeholders(value)
        text = unescape_value(protected)

        for provider in self.providers:
            status = provider.get_status()

            if status == ProviderStatus.DISABLED:
                continue

            if status == ProviderStatus.RATE_LIMITED:
                remaining = provider.stats.cooldown_until - time.time()
                log.debug(
                    f'[ENGINE] {provider.name} cooling down '
                    f'({remaining:.0f}s left)'
                )
                continue

            if not provider.check_rate_limit():
                log.debug(f'[ENGINE] {provider.name} hit its request limit, trying next')
                continue

            log.debug(f'[ENGINE] Trying {provider.name} for: {text[:50]}...')
            result = provider.translate(text, source_lang, target_lang)

            if result:
                translated = restore_placeholders(escape_value(result), mapping)
                self.cache.put(value, source_lang, target_lang, translated)
                return translated

            log.debug(f'[ENGINE] {provider.name} failed, trying next provider')
            if self.retry_delay:
                time.sleep(self.retry_delay)

        log.warning(
            f'[ENGINE] No translation {source_lang}->{target_lang} for: {value[:60]}'
        )
        return None

    def translate_batch(self, values: List[str], source_lang: str,
                        target_lang: str) -> List[Optional[str]]:
        """
        Translates independent values concurrently.
        Results keep the input order; a failed value yields None.
        """
        if not values:
            return []

        if self.max_workers <= 1 or len(values) == 1:
            return [self.translate(v, source_lang, target_lang) for v in values]

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            return list(pool.map(
                lambda v: self.translate(v, source_lang, target_lang), values
            ))

    def get_stats(self) -> dict:
        return {
            'cache': self.cache.get_stats(),
            'providers': {
                p.name: {
                    'status': p.get_status().value,
                    'total_requests': p.stats.total_requests,
                    'successful': p.stats.successful,
                    'failed': p.stats.failed,
                    'rate_limited': p.stats.rate_limited,
                }
                for p in self.providers
            },
        }
