"""Solar ingress (Sankranti) detection."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .constants import RASHI_NAMES, sankranti_name, sign_index_from_lon
from .panchang_algos import find_boundary, longitude_getter
from .provider import SUN, EphemerisProvider

logger = logging.getLogger(__name__)

MINUTE_DAYS = 1.0 / (24 * 60)

# The Sun spends ~30 days per sign, so sign searches step daily.
SOLAR_SIGN_STEP_DAYS = 1.0
SOLAR_SIGN_HORIZON_DAYS = 32.0
LAST_SANKRANTI_LOOKBACK_DAYS = 35


@dataclass(frozen=True)
class Ingress:
    sign_index: int
    jd: float

    @property
    def sign(self) -> str:
        return RASHI_NAMES[self.sign_index]

    @property
    def name(self) -> str:
        return sankranti_name(self.sign_index)


async def sun_sign_at(provider: EphemerisProvider, jd: float) -> int:
    position = await provider.position(jd, SUN)
    return sign_index_from_lon(position.longitude)


async def _bisect_sign_change(
    provider: EphemerisProvider,
    low: float,
    high: float,
    sign_before: int,
    precision: float,
) -> float:
    while high - low > precision:
        mid = (low + high) / 2.0
        if await sun_sign_at(provider, mid) == sign_before:
            low = mid
        else:
            high = mid
    return (low + high) / 2.0


async def detect_sankranti(provider: EphemerisProvider, sunrise_jd: float) -> Optional[Ingress]:
    """Return the ingress happening within 24h after ``sunrise_jd``, if any."""

    day_end = sunrise_jd + 1.0
    sign_start = await sun_sign_at(provider, sunrise_jd)
    sign_end = await sun_sign_at(provider, day_end)
    if sign_start == sign_end:
        return None

    instant = await _bisect_sign_change(provider, sunrise_jd, day_end, sign_start, MINUTE_DAYS)
    logger.debug(
        "panchanga.sankranti.detected",
        extra={"sign": RASHI_NAMES[sign_end], "jd": instant},
    )
    return Ingress(sign_index=sign_end, jd=instant)


async def last_sankranti(provider: EphemerisProvider, jd: float) -> Optional[Ingress]:
    """Walk back day by day to the ingress into the Sun's current sign."""

    current = await sun_sign_at(provider, jd)
    for offset in range(1, LAST_SANKRANTI_LOOKBACK_DAYS + 1):
        probe = jd - offset
        if await sun_sign_at(provider, probe) != current:
            instant = await _bisect_sign_change(provider, probe, probe + 1.0, (current - 1) % 12, 0.0001)
            return Ingress(sign_index=current, jd=instant)
    logger.warning("panchanga.sankranti.lookback_exhausted", extra={"jd": jd})
    return None


async def next_sun_sign_change(provider: EphemerisProvider, jd: float) -> Optional[float]:
    """Instant the Sun leaves its current sign, searched over a solar horizon."""

    sign = await sun_sign_at(provider, jd)
    return await find_boundary(
        jd,
        longitude_getter(provider, SUN),
        ((sign + 1) * 30.0) % 360.0,
        360.0,
        step=SOLAR_SIGN_STEP_DAYS,
        horizon=SOLAR_SIGN_HORIZON_DAYS,
    )
