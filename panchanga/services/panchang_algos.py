"""Panchanga progress functions and the boundary finder.

Each Panchanga element is a cyclic "progress" value derived from the Sun and
Moon sidereal longitudes: its integer part is the current element (0-based)
and the instant it reaches the next integer is the element's end. The boundary
finder locates that instant by bracketing forward in fixed steps and refining
with a bisection.
"""

from __future__ import annotations

import math
from typing import Awaitable, Callable, Optional, Tuple

from .constants import FIXED_KARANA_SLOTS, MOBILE_KARANAS
from .provider import MOON, SUN, EphemerisProvider

TITHI_COUNT = 30
NAKSHATRA_COUNT = 27
YOGA_COUNT = 27
KARANA_COUNT = 60

NAKSHATRA_SPAN = 360.0 / 27.0
PADA_SPAN = NAKSHATRA_SPAN / 4.0
YOGA_SPAN = 360.0 / 27.0
TITHI_SPAN = 12.0

STEP_DAYS = 1.0 / 24.0
HORIZON_DAYS = 1.5
REFINE_ITERATIONS = 20

ProgressFn = Callable[[float], Awaitable[float]]


def normalize360(x: float) -> float:
    value = ((x % 360.0) + 360.0) % 360.0
    # Guard against float rounding producing exactly 360.0 for tiny negatives.
    return 0.0 if value >= 360.0 else value


def lunar_day_progress(sun_lon: float, moon_lon: float) -> float:
    return normalize360(moon_lon - sun_lon) / TITHI_SPAN


def mansion_progress(moon_lon: float) -> float:
    return normalize360(moon_lon) / NAKSHATRA_SPAN


def yoga_progress(sun_lon: float, moon_lon: float) -> float:
    return normalize360(sun_lon + moon_lon) / YOGA_SPAN


def half_day_progress(sun_lon: float, moon_lon: float) -> float:
    return lunar_day_progress(sun_lon, moon_lon) * 2.0


def index_from_progress(progress: float, count: int) -> int:
    """1-based element number for a progress value."""

    return int(math.floor(progress)) % count + 1


def pada_from_lon(moon_lon: float) -> int:
    return int(normalize360(moon_lon) % NAKSHATRA_SPAN // PADA_SPAN) + 1


def paksha_for(tithi_number: int) -> str:
    return "Shukla" if tithi_number <= 15 else "Krishna"


# --- K A R A N A ---


def karana_name(number: int) -> str:
    """Resolve the display name for a 1-based half-tithi slot (1..60)."""

    if number in FIXED_KARANA_SLOTS:
        return FIXED_KARANA_SLOTS[number]
    return MOBILE_KARANAS[(number - 2) % len(MOBILE_KARANAS)]


def karana_kind(number: int) -> str:
    return "Fixed" if number in FIXED_KARANA_SLOTS else "Movable"


# --- B O U N D A R Y   F I N D E R ---


def _unwrapped_delta(value: float, reference: float, modulus: float) -> float:
    """Forward distance travelled from ``reference`` to ``value`` on the cycle."""

    delta = value - reference
    if delta < 0:
        delta += modulus
    return delta


async def find_boundary(
    start_jd: float,
    progress_fn: ProgressFn,
    target: float,
    modulus: float,
    step: float = STEP_DAYS,
    horizon: float = HORIZON_DAYS,
    iterations: int = REFINE_ITERATIONS,
) -> Optional[float]:
    """Locate the first instant after ``start_jd`` where progress reaches ``target``.

    ``progress_fn`` must be monotonically increasing modulo ``modulus`` and
    move less than one full cycle per ``step``. Returns ``None`` when no
    crossing happens within ``horizon`` days.
    """

    if modulus <= 0:
        raise ValueError("modulus must be positive")
    if step <= 0 or horizon <= 0:
        raise ValueError("step and horizon must be positive")

    target = target % modulus
    t1 = start_jd
    v1 = (await progress_fn(t1)) % modulus
    origin = v1
    u1 = 0.0
    target_u = _unwrapped_delta(target, origin, modulus)

    steps = int(math.ceil(horizon / step))
    found = False
    t2 = t1
    v2 = v1
    u2 = u1
    for _ in range(steps):
        t2 = t1 + step
        v2 = (await progress_fn(t2)) % modulus
        u2 = u1 + _unwrapped_delta(v2, v1, modulus)
        if u1 <= target_u <= u2:
            found = True
            break
        t1, v1, u1 = t2, v2, u2

    if not found:
        return None

    low_t, low_v, low_u = t1, v1, u1
    high_t = t2
    for _ in range(iterations):
        mid = (low_t + high_t) / 2.0
        v_mid = (await progress_fn(mid)) % modulus
        u_mid = low_u + _unwrapped_delta(v_mid, low_v, modulus)
        if u_mid < target_u:
            low_t, low_v, low_u = mid, v_mid, u_mid
        else:
            high_t = mid

    return high_t


# --- P R O G R E S S   G E T T E R S ---


async def sun_moon_longitudes(provider: EphemerisProvider, jd: float) -> Tuple[float, float]:
    sun = await provider.position(jd, SUN)
    moon = await provider.position(jd, MOON)
    return normalize360(sun.longitude), normalize360(moon.longitude)


def tithi_getter(provider: EphemerisProvider) -> ProgressFn:
    async def _get(jd: float) -> float:
        sun, moon = await sun_moon_longitudes(provider, jd)
        return lunar_day_progress(sun, moon)

    return _get


def nakshatra_getter(provider: EphemerisProvider) -> ProgressFn:
    async def _get(jd: float) -> float:
        moon = await provider.position(jd, MOON)
        return mansion_progress(moon.longitude)

    return _get


def yoga_getter(provider: EphemerisProvider) -> ProgressFn:
    async def _get(jd: float) -> float:
        sun, moon = await sun_moon_longitudes(provider, jd)
        return yoga_progress(sun, moon)

    return _get


def karana_getter(provider: EphemerisProvider) -> ProgressFn:
    async def _get(jd: float) -> float:
        sun, moon = await sun_moon_longitudes(provider, jd)
        return half_day_progress(sun, moon)

    return _get


def longitude_getter(provider: EphemerisProvider, body: str) -> ProgressFn:
    async def _get(jd: float) -> float:
        position = await provider.position(jd, body)
        return normalize360(position.longitude)

    return _get
