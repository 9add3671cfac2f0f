"""
Result Cache — Reuses AnalysisReports for files that have not changed.

A report is only valid for the exact (path, content, language, policy)
it was produced under, so the key covers all four. Only the newest report
per path is kept: storing a new one replaces whatever that path held
before. Expired entries are swept on every write, and the oldest entries
are evicted once the store reaches max_entries.

Batch workers read and write from several threads at once; every access
holds the lock.
"""

from __future__ import annotations

import hashlib
import threading
import time
from dataclasses import dataclass, field
from typing import Any

from code_optimizer.config import settings
from code_optimizer.models.config_models import AnalysisConfig
from code_optimizer.models.rule_models import AnalysisReport


def _sha256(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


@dataclass
class CacheEntry:
    key: str
    report: AnalysisReport
    ttl_seconds: float
    created_at: float = field(default_factory=time.time)

    def expired(self, now: float | None = None) -> bool:
        now = time.time() if now is None else now
        return (now - self.created_at) > self.ttl_seconds


class ResultCache:
    """In-memory, one-report-per-path store with TTL, size cap and hit/miss counters."""

    def __init__(
        self,
        ttl_seconds: float | None = None,
        max_entries: int | None = None,
    ) -> None:
        self.ttl_seconds = settings.cache_ttl_seconds if ttl_seconds is None else ttl_seconds
        self.max_entries = max(
            1, settings.cache_max_entries if max_entries is None else max_entries
        )
        # path -> entry, oldest write first
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    @staticmethod
    def make_key(content: str, language: str, config: AnalysisConfig) -> str:
        policy = _sha256(config.fingerprint())[:16]
        return f"{_sha256(content)}|{language}|{policy}"

    def get(
        self,
        file_path: str,
        content: str,
        language: str,
        config: AnalysisConfig,
    ) -> AnalysisReport | None:
        """Cached report, or None when absent, stale, or produced from other input."""
        key = self.make_key(content, language, config)
        with self._lock:
            entry = self._entries.get(file_path)
            if entry is not None and entry.expired():
                del self._entries[file_path]
                entry = None
            if entry is None or entry.key != key:
                self.misses += 1
                return None
            self.hits += 1
            return entry.report

    def put(
        self,
        file_path: str,
        content: str,
        language: str,
        config: AnalysisConfig,
        report: AnalysisReport,
    ) -> None:
        entry = CacheEntry(
            key=self.make_key(content, language, config),
            report=report,
            ttl_seconds=self.ttl_seconds,
        )
        with self._lock:
            self._entries.pop(file_path, None)
            self._sweep(entry.created_at)
            while len(self._entries) >= self.max_entries:
                oldest = next(iter(self._entries))
                del self._entries[oldest]
                self.evictions += 1
            self._entries[file_path] = entry

    def invalidate(self, file_path: str) -> int:
        """Forget the report stored for a path; returns how many were dropped."""
        with self._lock:
            return 1 if self._entries.pop(file_path, None) is not None else 0

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0
            self.evictions = 0

    @property
    def size(self) -> int:
        return len(self._entries)

    def stats(self) -> dict[str, Any]:
        now = time.time()
        with self._lock:
            stale = sum(1 for entry in self._entries.values() if entry.expired(now))
            return {
                "entries": len(self._entries),
                "stale_entries": stale,
                "max_entries": self.max_entries,
                "hits": self.hits,
                "misses": self.misses,
                "evictions": self.evictions,
            }

    def _sweep(self, now: float) -> None:
        for path in [p for p, entry in self._entries.items() if entry.expired(now)]:
            del self._entries[path]
