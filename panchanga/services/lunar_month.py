"""Lunar month naming and intercalary (Adhika) month detection.

Months are named purnimanta style: the month takes its name from the Sun's
sign at the full moon governing it. A lunar month (new moon to new moon) in
which the Sun does not change sign is intercalary.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .constants import MASA_NAMES
from .panchang_algos import (
    TITHI_COUNT,
    find_boundary,
    index_from_progress,
    lunar_day_progress,
    sun_moon_longitudes,
    tithi_getter,
)
from .provider import EphemerisProvider
from .sankranti import sun_sign_at

logger = logging.getLogger(__name__)

FULL = "full"
NEW = "new"

SYZYGY_TARGET = {FULL: 15.0, NEW: 0.0}

SYZYGY_SCAN_DAYS = 35
SYZYGY_BRACKET_HORIZON = 2.5
FALLBACK_OFFSET_DAYS = 15.0


def _near_syzygy(tithi_number: int, kind: str) -> bool:
    if kind == FULL:
        return 13 <= tithi_number <= 16
    return tithi_number >= 28 or tithi_number <= 2


async def _tithi_number_at(provider: EphemerisProvider, jd: float) -> int:
    sun, moon = await sun_moon_longitudes(provider, jd)
    return index_from_progress(lunar_day_progress(sun, moon), TITHI_COUNT)


async def find_syzygy(
    provider: EphemerisProvider, jd: float, kind: str, direction: int
) -> Optional[float]:
    """Instant of the nearest full or new moon strictly after (``direction=1``)
    or before (``direction=-1``) ``jd``. ``None`` when the scan finds nothing.
    """

    if kind not in SYZYGY_TARGET:
        raise ValueError(f"Unknown syzygy kind: {kind}")
    if direction not in (1, -1):
        raise ValueError("direction must be 1 or -1")

    progress_fn = tithi_getter(provider)
    target = SYZYGY_TARGET[kind]
    for offset in range(SYZYGY_SCAN_DAYS + 1):
        day = jd + direction * offset
        if not _near_syzygy(await _tithi_number_at(provider, day), kind):
            continue
        instant = await find_boundary(
            day - 1.0,
            progress_fn,
            target,
            float(TITHI_COUNT),
            horizon=SYZYGY_BRACKET_HORIZON,
        )
        if instant is None:
            continue
        if (instant - jd) * direction > 0:
            return instant
    return None


async def governing_full_moon(provider: EphemerisProvider, jd: float, waxing: bool) -> float:
    """Full moon naming the month: the next one while waxing, the last one while waning."""

    direction = 1 if waxing else -1
    instant = await find_syzygy(provider, jd, FULL, direction)
    if instant is None:
        logger.warning(
            "panchanga.lunar_month.full_moon_fallback",
            extra={"jd": jd, "direction": direction},
        )
        instant = jd + direction * FALLBACK_OFFSET_DAYS
    return instant


async def month_index(provider: EphemerisProvider, jd: float, waxing: bool) -> int:
    """0-based index into ``MASA_NAMES`` for the month containing ``jd``."""

    full_moon = await governing_full_moon(provider, jd, waxing)
    sign = await sun_sign_at(provider, full_moon)
    return (sign + 1) % 12


def lunar_day(tithi_number: int) -> int:
    """Continuous day of a purnimanta month (1..30) for a tithi number."""

    if tithi_number <= 15:
        return tithi_number + 15
    return tithi_number - 15


async def is_adhika(provider: EphemerisProvider, jd: float) -> bool:
    """True when no solar ingress separates the new moons around ``jd``."""

    previous_new = await find_syzygy(provider, jd, NEW, -1)
    next_new = await find_syzygy(provider, jd, NEW, 1)
    if previous_new is None or next_new is None:
        logger.warning("panchanga.lunar_month.new_moon_missing", extra={"jd": jd})
        return False
    return await sun_sign_at(provider, previous_new) == await sun_sign_at(provider, next_new)


@dataclass(frozen=True)
class LunarMonth:
    index: int
    lunar_day: int
    is_adhika: bool

    @property
    def name(self) -> str:
        return MASA_NAMES[self.index]


async def resolve_month(
    provider: EphemerisProvider, jd: float, tithi_number: int, waxing: bool
) -> LunarMonth:
    return LunarMonth(
        index=await month_index(provider, jd, waxing),
        lunar_day=lunar_day(tithi_number),
        is_adhika=await is_adhika(provider, jd),
    )
