"""
Append-only feedback history.

Every "Spot On" / "Off Base" judgment is kept in a single JSON file as an
ordered list.  The history is never pruned or de-duplicated; inaccurate
entries with comments are replayed into later system instructions (see
:func:`surfsensei.prompts.build_corrections_block`).

Storage problems must never break the page: reads fall back to an empty
history and failed writes are only logged.
"""

from __future__ import annotations

import json
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional

from .errors import PersistenceDegraded
from .models import FeedbackRecord

logger = logging.getLogger(__name__)


class FeedbackStore:
    # Shared by every instance: routes build a fresh store per request and
    # run it in the threadpool, so appends to one file must not interleave
    _lock = threading.Lock()

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _read(self) -> List[Any]:
        if not self.path.exists():
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise PersistenceDegraded(f"Unreadable feedback history at {self.path}: {exc}") from exc
        if not isinstance(raw, list):
            raise PersistenceDegraded(
                f"Feedback history at {self.path} is {type(raw).__name__}, expected a list"
            )
        return raw

    def _write(self, entries: List[Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(entries, indent=2), encoding="utf-8")
        except OSError as exc:
            raise PersistenceDegraded(f"Could not write feedback history to {self.path}: {exc}") from exc

    def all(self) -> List[FeedbackRecord]:
        """Return the full history in submission order.

        A missing or corrupt file reads as an empty history. Individual
        entries that are not objects are skipped.
        """
        try:
            entries = self._read()
        except PersistenceDegraded as exc:
            logger.warning("Failed to read feedback history: %s", exc)
            return []
        return [FeedbackRecord.from_dict(item) for item in entries if isinstance(item, dict)]

    def append(self, record: FeedbackRecord) -> bool:
        """Append ``record`` to the stored list. Returns False if it was not saved."""
        # A corrupt file is left as-is so it can still be inspected by hand
        try:
            with self._lock:
                entries = self._read()
                entries.append(record.to_dict())
                self._write(entries)
        except PersistenceDegraded as exc:
            logger.error("Failed to save feedback: %s", exc)
            return False
        return True


def record_feedback(
    store: FeedbackStore, accuracy: str, comments: str, now: Optional[datetime] = None
) -> FeedbackRecord:
    """Stamp a judgment with the current UTC time and append it to ``store``."""
    now = now or datetime.now(timezone.utc)
    record = FeedbackRecord(timestamp=now.isoformat(), accuracy=accuracy, comments=comments)
    logger.info("Feedback received: accuracy=%s comments=%d chars", accuracy, len(comments))
    store.append(record)
    return record
