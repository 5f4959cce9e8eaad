"""Swiss Ephemeris backed implementation of the ephemeris provider."""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Dict, Optional

import swisseph as swe

from .. import config
from .provider import (
    MOON,
    RISE,
    SET,
    SUN,
    BodyPosition,
    EphemerisError,
    PhaseInfo,
)

logger = logging.getLogger(__name__)

# Engine version for record metadata
try:
    ENGINE_VERSION = f"swisseph-{swe.version}"
except AttributeError:
    ENGINE_VERSION = "swisseph-2.10"

BODIES: Dict[str, int] = {
    SUN: swe.SUN,
    MOON: swe.MOON,
}

AYANAMSHA_MAP = {
    "lahiri": swe.SIDM_LAHIRI,
    "krishnamurti": swe.SIDM_KRISHNAMURTI,
    "raman": swe.SIDM_RAMAN,
}

RISE_SET_FLAGS = {
    RISE: swe.CALC_RISE,
    SET: swe.CALC_SET,
}


def _backend_flag() -> int:
    """Return the Swiss Ephemeris backend flag based on environment configuration."""

    return swe.FLG_MOSEPH if config.ephemeris_backend() == "moseph" else swe.FLG_SWIEPH


def init_paths(ephe_dir: str | os.PathLike[str] | None) -> None:
    """Set the Swiss Ephemeris file search path when available."""

    if not ephe_dir:
        return

    path = os.fspath(ephe_dir)
    if os.path.isdir(path):
        swe.set_ephe_path(path)


def _body_code(body: str) -> int:
    try:
        return BODIES[body]
    except KeyError as exc:
        raise ValueError(f"Unsupported body: {body}") from exc


class SwissEphemerisProvider:
    """Sidereal positions, phases and rise/set instants from :mod:`swisseph`.

    Blocking library calls run on worker threads to keep the event loop
    responsive. Swiss Ephemeris keeps the sidereal mode per thread, so every
    primitive applies it on the thread that computes.
    """

    engine_version = ENGINE_VERSION

    def __init__(self, ayanamsha: Optional[str] = None) -> None:
        self.ayanamsha_name = (ayanamsha or config.ayanamsha()).lower()
        mode = AYANAMSHA_MAP.get(self.ayanamsha_name)
        if mode is None:
            logger.warning(
                "panchanga.ephem.ayanamsha_unknown",
                extra={"ayanamsha": self.ayanamsha_name},
            )
            self.ayanamsha_name = "lahiri"
            mode = swe.SIDM_LAHIRI
        init_paths(config.ephe_path())
        self._sid_mode = mode
        self._flags = _backend_flag() | swe.FLG_SIDEREAL

    # Synchronous primitives ---------------------------------------------

    def _position_sync(self, jd: float, body: str) -> BodyPosition:
        try:
            swe.set_sid_mode(self._sid_mode)
            values, _ = swe.calc_ut(jd, _body_code(body), self._flags | swe.FLG_SPEED)
        except swe.Error as exc:
            raise EphemerisError(f"calc_ut failed for {body} at JD {jd}: {exc}") from exc
        lon, lat, dist, lon_speed = values[0], values[1], values[2], values[3]
        return BodyPosition(
            longitude=lon % 360.0,
            latitude=lat,
            distance=dist,
            speed=lon_speed,
        )

    def _phase_sync(self, jd: float, body: str) -> PhaseInfo:
        try:
            swe.set_sid_mode(self._sid_mode)
            attrs = swe.pheno_ut(jd, _body_code(body), self._flags)
        except swe.Error as exc:
            raise EphemerisError(f"pheno_ut failed for {body} at JD {jd}: {exc}") from exc
        return PhaseInfo(phase_angle=attrs[0], illumination=attrs[1])

    def _rise_set_sync(
        self, jd: float, body: str, lat: float, lon: float, which: str
    ) -> Optional[float]:
        geopos = (lon, lat, 0.0)
        rsmi = RISE_SET_FLAGS[which] | swe.BIT_DISC_CENTER
        try:
            result, times = swe.rise_trans(
                jd, _body_code(body), rsmi, geopos, 0.0, 0.0, _backend_flag()
            )
        except swe.Error as exc:
            raise EphemerisError(f"rise_trans failed for {body} at JD {jd}: {exc}") from exc
        # -2 means the body stays above or below the horizon (circumpolar).
        if result < 0 or not times:
            return None
        return times[0]

    def _ayanamsa_sync(self, jd: float) -> float:
        swe.set_sid_mode(self._sid_mode)
        return swe.get_ayanamsa_ut(jd)

    # Provider contract ---------------------------------------------------

    async def position(self, jd: float, body: str) -> BodyPosition:
        return await asyncio.to_thread(self._position_sync, jd, body)

    async def phase(self, jd: float, body: str) -> PhaseInfo:
        return await asyncio.to_thread(self._phase_sync, jd, body)

    async def rise_set(
        self, jd: float, body: str, lat: float, lon: float, which: str
    ) -> Optional[float]:
        return await asyncio.to_thread(self._rise_set_sync, jd, body, lat, lon, which)

    async def ayanamsa(self, jd: float) -> float:
        return await asyncio.to_thread(self._ayanamsa_sync, jd)
