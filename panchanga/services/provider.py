"""Ephemeris provider contract and Julian Day helpers.

The Panchanga engine never talks to an ephemeris library directly. It consumes
an object implementing :class:`EphemerisProvider`, one async method per query
kind. Instants are Julian Days in UT (``float``), which keeps the root-finding
arithmetic simple and ordered.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date as date_cls, datetime, time as time_cls, timezone
from typing import Optional, Protocol, runtime_checkable
from zoneinfo import ZoneInfo

SUN = "Sun"
MOON = "Moon"

RISE = "rise"
SET = "set"

UNIX_EPOCH_JD = 2440587.5


class EphemerisError(RuntimeError):
    """Raised when the ephemeris provider cannot answer a query."""


@dataclass(frozen=True)
class BodyPosition:
    longitude: float
    latitude: float
    distance: float
    speed: float


@dataclass(frozen=True)
class PhaseInfo:
    phase_angle: float
    illumination: float


@runtime_checkable
class EphemerisProvider(Protocol):
    """Sidereal ephemeris queries used by the Panchanga engine."""

    async def position(self, jd: float, body: str) -> BodyPosition:
        ...

    async def phase(self, jd: float, body: str) -> PhaseInfo:
        ...

    async def rise_set(
        self, jd: float, body: str, lat: float, lon: float, which: str
    ) -> Optional[float]:
        """Return the first rise/set of ``body`` after ``jd`` or ``None``."""
        ...

    async def ayanamsa(self, jd: float) -> float:
        ...


def to_jd(moment: datetime) -> float:
    """Convert a timezone-aware datetime into Julian Day (UT)."""

    if moment.tzinfo is None:
        raise ValueError("datetime must be timezone-aware")
    moment_utc = moment.astimezone(timezone.utc)
    return moment_utc.timestamp() / 86400.0 + UNIX_EPOCH_JD


def jd_to_datetime(jd: float, tz: str | ZoneInfo = "UTC") -> datetime:
    seconds = (jd - UNIX_EPOCH_JD) * 86400.0
    zone = ZoneInfo(tz) if isinstance(tz, str) else tz
    return datetime.fromtimestamp(seconds, tz=timezone.utc).astimezone(zone)


def local_midnight_jd(day: date_cls, tz: str) -> float:
    """Julian Day of local civil midnight starting ``day`` in ``tz``."""

    return to_jd(datetime.combine(day, time_cls(0, 0), tzinfo=ZoneInfo(tz)))
