"""Era years, the 60-year cycle and extended calendar numbers."""

from __future__ import annotations

from datetime import date as date_cls, datetime, timezone
from math import floor
from typing import Dict, Optional

from .constants import MASA_NAMES, SAMVATSARA_NAMES
from .provider import to_jd

VIKRAMA_OFFSET = 57
SHAKA_OFFSET = -78
GUJARATI_OFFSET = 56

# Cycle offsets calibrated on Vikrama 2082 = Kalayukta, Shaka 1947 = Vishvavasu.
VIKRAMA_CYCLE_OFFSET = 9
SHAKA_CYCLE_OFFSET = 11

# Margashirsha..Phalguna belong to the closing lunar year in Jan-Apr.
CLOSING_MONTHS = frozenset(range(MASA_NAMES.index("Margashirsha"), len(MASA_NAMES)))
NEW_YEAR_CIVIL_MONTH = 4


def modified_julian_day(jd: float) -> float:
    return jd - 2400000.5


# Midnight starting 18 February 3102 BCE (proleptic Julian calendar).
KALI_YUGA_START_JD = 588465.5


def _utc_midnight_jd(day: date_cls) -> float:
    return to_jd(datetime(day.year, day.month, day.day, tzinfo=timezone.utc))


def kali_ahargana(day: date_cls) -> int:
    """Whole days elapsed since the Kali Yuga epoch."""

    return int(floor(_utc_midnight_jd(day) - KALI_YUGA_START_JD))


def before_lunar_new_year(day: date_cls, masa_idx: Optional[int]) -> bool:
    """True when ``day`` still belongs to the previous lunar year.

    With a known lunar month the closing months (Margashirsha..Phalguna) in
    January-April decide; otherwise anything before April counts.
    """

    if masa_idx is None:
        return day.month < NEW_YEAR_CIVIL_MONTH
    return day.month <= NEW_YEAR_CIVIL_MONTH and masa_idx in CLOSING_MONTHS


def vikram_samvat(day: date_cls, masa_idx: Optional[int] = None) -> int:
    year = day.year + VIKRAMA_OFFSET
    return year - 1 if before_lunar_new_year(day, masa_idx) else year


def shaka_samvat(day: date_cls, masa_idx: Optional[int] = None) -> int:
    year = day.year + SHAKA_OFFSET
    return year - 1 if before_lunar_new_year(day, masa_idx) else year


def gujarati_samvat(day: date_cls) -> int:
    return day.year + GUJARATI_OFFSET


def samvatsara_number(year: int, cycle_offset: int) -> int:
    """1-based position in the 60-year cycle."""

    return (year + cycle_offset) % 60 + 1


def samvatsara_name(year: int, cycle_offset: int) -> str:
    return SAMVATSARA_NAMES[samvatsara_number(year, cycle_offset) - 1]


def vikrama_samvatsara(year: int) -> str:
    return samvatsara_name(year, VIKRAMA_CYCLE_OFFSET)


def shaka_samvatsara(year: int) -> str:
    return samvatsara_name(year, SHAKA_CYCLE_OFFSET)


def build_calendars_extended(day: date_cls, masa_idx: Optional[int] = None) -> Dict[str, object]:
    jd = _utc_midnight_jd(day)
    return {
        "vikram_samvat": vikram_samvat(day, masa_idx),
        "shaka_samvat": shaka_samvat(day, masa_idx),
        "gujarati_samvat": gujarati_samvat(day),
        "kali_ahargana": kali_ahargana(day),
        "julian_day": jd,
        "modified_julian_day": modified_julian_day(jd),
    }
