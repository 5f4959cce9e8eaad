"""Idempotent storage of generated occurrences, keyed by event and date."""

from __future__ import annotations

import logging
import threading
from datetime import date as date_cls
from typing import Dict, Iterable, List, Tuple

from ..schemas.recurrence import Event, Occurrence

logger = logging.getLogger(__name__)

CREATED = "created"
UPDATED = "updated"
UNCHANGED = "unchanged"


class OccurrenceStore:
    def __init__(self) -> None:
        self._items: Dict[Tuple[str, date_cls], Occurrence] = {}
        self._lock = threading.Lock()

    def upsert(self, event_id: str, occurrence: Occurrence) -> str:
        key = (event_id, occurrence.date)
        with self._lock:
            existing = self._items.get(key)
            if existing == occurrence:
                return UNCHANGED
            self._items[key] = occurrence
        return CREATED if existing is None else UPDATED

    def for_event(self, event_id: str) -> List[Occurrence]:
        with self._lock:
            items = [occ for (eid, _), occ in self._items.items() if eid == event_id]
        return sorted(items, key=lambda occ: occ.date)


def sync_occurrences(
    event: Event, occurrences: Iterable[Occurrence], store: OccurrenceStore
) -> Dict[str, int]:
    """Upsert generated occurrences and report how many changed."""

    counts = {CREATED: 0, UPDATED: 0, UNCHANGED: 0}
    for occurrence in occurrences:
        counts[store.upsert(event.id, occurrence)] += 1
    logger.info("panchanga.occurrences.synced", extra={"event_id": event.id, "counts": counts})
    return counts
