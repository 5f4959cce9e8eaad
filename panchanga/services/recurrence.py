"""Expand recurring event rules into concrete occurrences.

Rules are matched against precomputed daily rows from a
:class:`~panchanga.services.daily_store.DailyPanchangaStore`; nothing here
talks to the ephemeris.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from datetime import timedelta
from typing import Dict, Iterable, List, Optional

from .. import config
from ..schemas.recurrence import (
    AdhikaPolicy,
    DateWindow,
    Event,
    Occurrence,
    RecurrenceRule,
    RecurrenceType,
)
from .constants import masa_index
from .daily_store import DailyInfoRow, DailyPanchangaStore

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = {
    RecurrenceType.YEARLY_LUNAR: ("tithi", "maas"),
    RecurrenceType.MONTHLY_LUNAR: ("tithi",),
    RecurrenceType.YEARLY_SANKRANTI: ("sankranti",),
}

RECOMMENDED_YEARS = {
    RecurrenceType.NONE: 0,
    RecurrenceType.YEARLY_LUNAR: 5,
    RecurrenceType.YEARLY_SANKRANTI: 5,
    RecurrenceType.MONTHLY_LUNAR: 2,
}


def recommended_window(rule_type: RecurrenceType) -> int:
    """Years of occurrences worth generating ahead for a rule type."""

    return RECOMMENDED_YEARS[RecurrenceType(rule_type)]


def _sankranti_sign(value: str) -> str:
    value = value.strip()
    if value.endswith(" Sankranti"):
        return value[: -len(" Sankranti")]
    return value


def _is_expandable(event: Event) -> bool:
    rule = event.rule
    if rule.type == RecurrenceType.NONE:
        return False
    missing = [name for name in REQUIRED_FIELDS[rule.type] if getattr(rule, name) is None]
    if missing:
        logger.warning(
            "panchanga.recurrence.rule_incomplete",
            extra={"event_id": event.id, "rule_type": rule.type.value, "missing": missing},
        )
        return False
    if rule.maas is not None and masa_index(rule.maas) is None:
        logger.warning(
            "panchanga.recurrence.rule_incomplete",
            extra={"event_id": event.id, "rule_type": rule.type.value, "maas": rule.maas},
        )
        return False
    return True


def _adhika_filter(policy: AdhikaPolicy) -> Optional[bool]:
    if policy == AdhikaPolicy.EXCLUDE:
        return False
    if policy == AdhikaPolicy.ONLY:
        return True
    return None


def _query(rule: RecurrenceRule) -> Dict[str, object]:
    """Store filter arguments for a complete rule."""

    if rule.type == RecurrenceType.YEARLY_SANKRANTI:
        return {"sankranti": _sankranti_sign(rule.sankranti)}
    if rule.type == RecurrenceType.YEARLY_LUNAR:
        return {"tithi": rule.tithi, "is_adhika": _adhika_filter(rule.adhika_policy)}
    return {"tithi": rule.tithi}


def _row_matches(row: DailyInfoRow, query: Dict[str, object]) -> bool:
    for field, expected in query.items():
        if expected is not None and getattr(row, field) != expected:
            return False
    return True


def _yearly_lunar(rule: RecurrenceRule, rows: List[DailyInfoRow]) -> List[Occurrence]:
    by_year: "OrderedDict[int, DailyInfoRow]" = OrderedDict()
    for row in rows:
        if row.maas != rule.maas:
            continue
        by_year.setdefault(row.date.year, row)
    return [Occurrence(date=row.date, end_time=row.tithi_end_time) for row in by_year.values()]


def _yearly_sankranti(rows: List[DailyInfoRow]) -> List[Occurrence]:
    return [Occurrence(date=row.date, start_time=row.sankranti_time) for row in rows]


def _monthly_lunar(rows: List[DailyInfoRow]) -> List[Occurrence]:
    """One occurrence per matching day, marking tithis that span two sunrises."""

    occurrences: List[Occurrence] = []
    for i, row in enumerate(rows):
        nxt = rows[i + 1] if i + 1 < len(rows) else None
        prev = rows[i - 1] if i > 0 else None
        if nxt is not None and nxt.date == row.date + timedelta(days=1):
            occurrences.append(
                Occurrence(
                    date=row.date,
                    end_date=nxt.date,
                    start_time="00:00",
                    end_time="23:59",
                    notes=f"Begins on this day, continues until {nxt.date.isoformat()}",
                )
            )
        elif prev is not None and row.date == prev.date + timedelta(days=1):
            occurrences.append(
                Occurrence(
                    date=row.date,
                    start_time="00:00",
                    end_time=row.tithi_end_time,
                    notes=f"Ends at {row.tithi_end_time or 'unknown time'}",
                )
            )
        else:
            occurrences.append(Occurrence(date=row.date, end_time=row.tithi_end_time))
    return occurrences


def _build(event: Event, rows: List[DailyInfoRow], max_occurrences: int) -> List[Occurrence]:
    rule = event.rule
    if rule.type == RecurrenceType.YEARLY_LUNAR:
        occurrences = _yearly_lunar(rule, rows)
    elif rule.type == RecurrenceType.MONTHLY_LUNAR:
        occurrences = _monthly_lunar(rows)
    else:
        occurrences = _yearly_sankranti(rows)

    occurrences.sort(key=lambda occ: occ.date)
    if len(occurrences) > max_occurrences:
        logger.warning(
            "panchanga.recurrence.truncated",
            extra={"event_id": event.id, "generated": len(occurrences), "limit": max_occurrences},
        )
        occurrences = occurrences[:max_occurrences]
    return occurrences


def expand(
    event: Event,
    window: DateWindow,
    store: DailyPanchangaStore,
    max_occurrences: Optional[int] = None,
    location_name: Optional[str] = None,
) -> List[Occurrence]:
    if not _is_expandable(event):
        return []
    limit = max_occurrences if max_occurrences is not None else config.max_occurrences()
    location = location_name or config.default_place()["name"]
    rows = store.find(window.start, window.end, location_name=location, **_query(event.rule))
    occurrences = _build(event, rows, limit)
    logger.info(
        "panchanga.recurrence.expanded",
        extra={"event_id": event.id, "rule_type": event.rule.type.value, "count": len(occurrences)},
    )
    return occurrences


def expand_many(
    events: Iterable[Event],
    window: DateWindow,
    store: DailyPanchangaStore,
    max_occurrences: Optional[int] = None,
    location_name: Optional[str] = None,
) -> Dict[str, List[Occurrence]]:
    """Expand a batch of events from a single store read over ``window``."""

    events = list(events)
    results: Dict[str, List[Occurrence]] = {event.id: [] for event in events}
    expandable = [event for event in events if _is_expandable(event)]
    if not expandable:
        return results

    limit = max_occurrences if max_occurrences is not None else config.max_occurrences()
    location = location_name or config.default_place()["name"]
    rows = store.find(window.start, window.end, location_name=location)
    for event in expandable:
        try:
            query = _query(event.rule)
            matching = [row for row in rows if _row_matches(row, query)]
            results[event.id] = _build(event, matching, limit)
        except (AttributeError, TypeError, ValueError):
            logger.warning(
                "panchanga.recurrence.event_failed",
                extra={"event_id": event.id},
                exc_info=True,
            )
            results[event.id] = []
    return results
