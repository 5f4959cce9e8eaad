"""Deterministic ephemeris with linear Sun/Moon motion for engine tests."""

import math
from datetime import date, datetime, timezone
from typing import Iterable, Optional

from panchanga.services.provider import (
    MOON,
    RISE,
    SUN,
    BodyPosition,
    EphemerisError,
    PhaseInfo,
    local_midnight_jd,
    to_jd,
)

SUN_RATE = 360.0 / 365.2422
MOON_RATE = 360.0 / 27.321661
SYNODIC_MONTH = 360.0 / (MOON_RATE - SUN_RATE)

# Fractions of the UTC day at which events happen.
EVENT_OFFSETS = {
    (SUN, "rise"): 0.25,
    (SUN, "set"): 0.75,
    (MOON, "rise"): 0.40,
    (MOON, "set"): 0.90,
}


def utc_jd(year, month, day, hour=0, minute=0):
    return to_jd(datetime(year, month, day, hour, minute, tzinfo=timezone.utc))


class LinearProvider:
    ayanamsha_name = "synthetic"
    engine_version = "linear-test"

    def __init__(
        self,
        epoch: float,
        sun0: float = 0.0,
        moon0: float = 0.0,
        sun_rate: float = SUN_RATE,
        moon_rate: float = MOON_RATE,
        fail_on: Iterable[date] = (),
    ) -> None:
        self.epoch = epoch
        self.sun0 = sun0
        self.moon0 = moon0
        self.rates = {SUN: sun_rate, MOON: moon_rate}
        self.calls = 0
        self._fail_days = {int(math.floor(local_midnight_jd(d, "UTC"))) for d in fail_on}

    def longitude(self, jd: float, body: str) -> float:
        base = self.sun0 if body == SUN else self.moon0
        return (base + self.rates[body] * (jd - self.epoch)) % 360.0

    async def position(self, jd, body):
        self.calls += 1
        return BodyPosition(
            longitude=self.longitude(jd, body),
            latitude=0.0,
            distance=1.0,
            speed=self.rates[body],
        )

    async def phase(self, jd, body):
        self.calls += 1
        elongation = (self.longitude(jd, MOON) - self.longitude(jd, SUN)) % 360.0
        illumination = (1.0 - math.cos(math.radians(elongation))) / 2.0
        return PhaseInfo(phase_angle=abs(180.0 - elongation), illumination=illumination)

    async def rise_set(self, jd, body, lat, lon, which) -> Optional[float]:
        self.calls += 1
        midnight = math.floor(jd - 0.5) + 0.5
        if body == SUN and which == RISE and int(math.floor(midnight)) in self._fail_days:
            raise EphemerisError(f"synthetic failure at JD {jd}")
        instant = midnight + EVENT_OFFSETS[(body, which)]
        if instant <= jd:
            instant += 1.0
        return instant

    async def ayanamsa(self, jd):
        self.calls += 1
        return 24.0
