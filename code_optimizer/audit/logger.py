"""
Audit Logger — JSON-lines trail of batch analyses.

One line per request: when it ran, how many files and suggestions, which
languages, how much came from the cache.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from pathlib import Path
from typing import Any

from code_optimizer.config import settings
from code_optimizer.models.analysis_models import AuditEntry

logger = logging.getLogger("code_optimizer.audit")


class AuditLogger:
    """Appends AuditEntry records to a JSON-lines file."""

    def __init__(self, log_path: str | Path | None = None) -> None:
        self.log_path = Path(log_path or settings.audit_log_path)
        self._write_lock = threading.Lock()

    def log(self, entry: AuditEntry) -> dict[str, Any]:
        """Append an entry. Write failures are logged, never raised."""
        record = {
            "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
            **entry.model_dump(),
        }
        line = json.dumps(record, sort_keys=True)

        with self._write_lock:
            try:
                with self.log_path.open("a", encoding="utf-8") as f:
                    f.write(line + "\n")
            except OSError as e:
                logger.error(f"Failed to write audit log {self.log_path}: {e}")
        return record

    def _records(self) -> list[dict[str, Any]]:
        if not self.log_path.exists():
            return []
        try:
            raw_lines = self.log_path.read_text(encoding="utf-8").splitlines()
        except OSError as e:
            logger.error(f"Failed to read audit log {self.log_path}: {e}")
            return []

        records: list[dict[str, Any]] = []
        for raw in raw_lines:
            if not raw.strip():
                continue
            try:
                records.append(json.loads(raw))
            except json.JSONDecodeError:
                logger.debug(f"Skipping corrupt audit line: {raw[:80]!r}")
        return records

    def read_recent(self, count: int = 50) -> list[dict[str, Any]]:
        """The most recent `count` records, oldest first."""
        return self._records()[-count:] if count > 0 else []

    def find(self, analysis_id: str) -> dict[str, Any] | None:
        for record in reversed(self._records()):
            if record.get("analysis_id") == analysis_id:
                return record
        return None
