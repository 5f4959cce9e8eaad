"""Flat daily rows derived from Panchanga records and an in-memory store.

The recurrence engine only reads these rows, so any persistent backend that
implements :class:`DailyPanchangaStore` can stand in for the in-memory one.
"""

from __future__ import annotations

import threading
from datetime import date as date_cls, datetime
from typing import Dict, List, Optional, Protocol, Tuple

from pydantic import BaseModel

from ..schemas.panchanga import DailyPanchanga
from .constants import TITHI_BASE_KEYS


def tithi_key(number: int) -> str:
    if number == 15:
        return "PURNIMA"
    if number == 30:
        return "AMAVASYA"
    suffix = "SHUKLA" if number < 15 else "KRISHNA"
    return f"{TITHI_BASE_KEYS[(number - 1) % 15]}_{suffix}"


def _hhmm(moment: Optional[datetime]) -> Optional[str]:
    return moment.strftime("%H:%M") if moment is not None else None


class DailyInfoRow(BaseModel):
    date: date_cls
    location_name: str
    lat: float
    lon: float
    tithi: int
    tithi_key: str
    tithi_end_time: Optional[str] = None
    paksha: str
    nakshatra: int
    maas: Optional[str] = None
    is_adhika: bool = False
    sankranti: Optional[str] = None
    sankranti_time: Optional[str] = None
    moon_phase_pct: float
    moon_phase_type: str
    is_waxing: bool

    @classmethod
    def from_panchanga(cls, record: DailyPanchanga) -> "DailyInfoRow":
        return cls(
            date=record.date,
            location_name=record.location.name,
            lat=record.location.lat,
            lon=record.location.lon,
            tithi=record.tithi.number,
            tithi_key=tithi_key(record.tithi.number),
            tithi_end_time=_hhmm(record.tithi.end),
            paksha=record.tithi.paksha,
            nakshatra=record.nakshatra.number,
            maas=record.maas.name,
            is_adhika=record.maas.is_adhika,
            sankranti=record.sankranti.sign if record.sankranti else None,
            sankranti_time=_hhmm(record.sankranti.instant) if record.sankranti else None,
            moon_phase_pct=record.moon.illumination_pct,
            moon_phase_type=record.moon.phase_type,
            is_waxing=record.moon.waxing,
        )


class DailyPanchangaStore(Protocol):
    def upsert(self, row: DailyInfoRow) -> bool:
        """Store ``row``; return True when it was newly inserted."""
        ...

    def find(
        self,
        start: date_cls,
        end: date_cls,
        location_name: Optional[str] = None,
        tithi: Optional[int] = None,
        is_adhika: Optional[bool] = None,
        sankranti: Optional[str] = None,
    ) -> List[DailyInfoRow]:
        ...


class InMemoryDailyStore:
    def __init__(self) -> None:
        self._rows: Dict[Tuple[date_cls, str], DailyInfoRow] = {}
        self._lock = threading.Lock()
        self.find_calls = 0

    def upsert(self, row: DailyInfoRow) -> bool:
        key = (row.date, row.location_name)
        with self._lock:
            created = key not in self._rows
            self._rows[key] = row
        return created

    def find(
        self,
        start: date_cls,
        end: date_cls,
        location_name: Optional[str] = None,
        tithi: Optional[int] = None,
        is_adhika: Optional[bool] = None,
        sankranti: Optional[str] = None,
    ) -> List[DailyInfoRow]:
        with self._lock:
            self.find_calls += 1
            rows = [
                row
                for row in self._rows.values()
                if start <= row.date <= end
                and (location_name is None or row.location_name == location_name)
                and (tithi is None or row.tithi == tithi)
                and (is_adhika is None or row.is_adhika == is_adhika)
                and (sankranti is None or row.sankranti == sankranti)
            ]
        return sorted(rows, key=lambda row: (row.date, row.location_name))

    def __len__(self) -> int:
        with self._lock:
            return len(self._rows)
