"""Run-scoped in-memory LRU cache of translations."""

import threading
from collections import OrderedDict
from typing import Optional, Tuple

CacheKey = Tuple[str, str, str]


class TranslationCache:
    """
    OrderedDict keyed by (source_lang, target_lang, text).

    Lives for one pipeline run; identical strings in several groups or
    tables are translated once per target language.
    """

    def __init__(self, max_memory: int = 10_000):
        self._entries: OrderedDict = OrderedDict()
        self._max_memory = max_memory
        self._lock = threading.Lock()

        self.hits = 0
        self.misses = 0

    def get(self, text: str, source_lang: str, target_lang: str) -> Optional[str]:
        key = (source_lang, target_lang, text)
        with self._lock:
            if key in self._entries:
                self._entries.move_to_end(key)
                self.hits += 1
                return self._entries[key]
            self.misses += 1
            return None

    def put(self, text: str, source_lang: str, target_lang: str, translated: str):
        key = (source_lang, target_lang, text)
        with self._lock:
            if key in self._entries:
                self._entries.move_to_end(key)
            elif len(self._entries) >= self._max_memory:
                self._entries.popitem(last=False)
            self._entries[key] = translated

    def __len__(self):
        return len(self._entries)

    def get_stats(self) -> dict:
        total = (self.hits + self.misses) or 1
        return {
            'hits': self.hits,
            'misses': self.misses,
            'hit_rate': f'{(self.hits / total) * 100:.1f}%',
            'size': len(self._entries),
            'max': self._max_memory,
        }
