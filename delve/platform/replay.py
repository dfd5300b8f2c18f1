"""
Deterministic crawl run ids and in-memory crawl replay storage.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


VOLATILE_KEYS = {
    "started_at",
    "completed_at",
}


def deterministic_run_id(
    payload: Any,
    *,
    namespace: str = "delve.crawl.v1",
    prefix: str = "crawl",
    drop_keys: set[str] | None = None,
) -> str:
    """
    Generate a deterministic run id from a canonical payload hash.

    The same dungeon always yields the same id, whatever the key order.
    """
    normalized = _normalize_for_hash(payload, drop_keys=drop_keys or VOLATILE_KEYS)
    blob = json.dumps(normalized, sort_keys=True, separators=(",", ":"), ensure_ascii=True)
    digest = hashlib.sha256(f"{namespace}|{blob}".encode("utf-8")).hexdigest()[:16]
    return f"{prefix}_{digest}"


def _normalize_for_hash(value: Any, *, drop_keys: set[str]) -> Any:
    """Normalize nested values into stable, JSON-safe form."""
    if isinstance(value, dict):
        return {
            str(k): _normalize_for_hash(v, drop_keys=drop_keys)
            for k, v in sorted(value.items(), key=lambda item: str(item[0]))
            if str(k) not in drop_keys
        }

    if isinstance(value, (list, tuple)):
        return [_normalize_for_hash(item, drop_keys=drop_keys) for item in value]

    if isinstance(value, (set, frozenset)):
        return sorted(_normalize_for_hash(item, drop_keys=drop_keys) for item in value)

    if isinstance(value, Enum):
        return value.value

    if hasattr(value, "model_dump"):
        return _normalize_for_hash(value.model_dump(mode="json"), drop_keys=drop_keys)

    return value


@dataclass
class CrawlRun:
    """Stored outcome of one crawl."""

    run_id: str
    dungeon_name: str
    status: str = "running"
    started_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    completed_at: str | None = None
    error: dict[str, Any] | None = None
    traversal: dict[str, Any] | None = None
    rendered: str | None = None

    def summary(self) -> dict[str, Any]:
        """Compact listing representation."""
        return {
            "run_id": self.run_id,
            "dungeon_name": self.dungeon_name,
            "status": self.status,
            "started_at": self.started_at,
            "completed_at": self.completed_at,
        }

    def to_dict(self) -> dict[str, Any]:
        """Full serialization."""
        return {
            **self.summary(),
            "error": self.error,
            "traversal": self.traversal,
            "rendered": self.rendered,
        }


class ReplayStore:
    """In-memory crawl store keyed by run id, oldest runs dropped first."""

    def __init__(self, max_runs: int = 50):
        self.max_runs = max_runs
        self._runs: dict[str, CrawlRun] = {}
        self._order: list[str] = []

    def start_run(self, run_id: str, dungeon_name: str) -> CrawlRun:
        """Create a run record, or reset an existing one with the same id."""
        record = CrawlRun(run_id=run_id, dungeon_name=dungeon_name)
        if run_id in self._runs:
            self._order.remove(run_id)
        self._runs[run_id] = record
        self._order.append(run_id)
        self._trim_runs()
        return record

    def complete_run(
        self,
        run_id: str,
        *,
        traversal: dict[str, Any] | None = None,
        rendered: str | None = None,
    ) -> bool:
        """Mark a run completed and attach its traversal."""
        record = self._runs.get(run_id)
        if record is None:
            return False

        record.status = "completed"
        record.completed_at = datetime.now(timezone.utc).isoformat()
        record.traversal = traversal
        record.rendered = rendered
        return True

    def fail_run(self, run_id: str, *, code: str, message: str) -> bool:
        """Mark a run failed with the crawler error that ended it."""
        record = self._runs.get(run_id)
        if record is None:
            return False

        record.status = "failed"
        record.completed_at = datetime.now(timezone.utc).isoformat()
        record.error = {"code": code, "message": message}
        return True

    def get_run(self, run_id: str) -> dict[str, Any] | None:
        record = self._runs.get(run_id)
        return None if record is None else record.to_dict()

    def list_runs(self, limit: int = 20) -> list[dict[str, Any]]:
        """List run summaries, newest first."""
        selected = list(reversed(self._order))[: max(limit, 0)]
        return [self._runs[run_id].summary() for run_id in selected]

    def latest_run_id(self) -> str | None:
        return self._order[-1] if self._order else None

    def _trim_runs(self) -> None:
        while len(self._order) > self.max_runs:
            oldest = self._order.pop(0)
            self._runs.pop(oldest, None)
