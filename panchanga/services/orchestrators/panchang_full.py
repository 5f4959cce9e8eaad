"""Build the daily Panchanga record for a civil date and location.

All astronomical input comes from an :class:`EphemerisProvider`; this module
only samples it at sunrise, derives the five limbs and walks the boundary
finder to their end instants.
"""

from __future__ import annotations

import logging
import math
from datetime import date as date_cls
from typing import Optional, Tuple

from ... import config
from ...schemas.panchanga import (
    AyanamsaVM,
    DailyPanchanga,
    KaranaVM,
    Location,
    MaasVM,
    MoonVM,
    NakshatraVM,
    PravishteVM,
    SamvatsaraVM,
    SamvatVM,
    SankrantiVM,
    SignVM,
    TithiVM,
    VaraVM,
    WindowVM,
    YogaVM,
)
from ..constants import (
    NAKSHATRA_NAMES,
    RASHI_NAMES,
    TITHI_NAMES,
    VARA_NAMES,
    YOGA_NAMES,
    name_for,
    sign_index_from_lon,
)
from ..ext_calendars import (
    build_calendars_extended,
    samvatsara_number,
    shaka_samvat,
    shaka_samvatsara,
    vikram_samvat,
    vikrama_samvatsara,
    VIKRAMA_CYCLE_OFFSET,
)
from ..lunar_month import resolve_month
from ..muhurta import compute_muhurta_blocks
from ..panchang_algos import (
    KARANA_COUNT,
    NAKSHATRA_COUNT,
    TITHI_COUNT,
    YOGA_COUNT,
    ProgressFn,
    find_boundary,
    half_day_progress,
    index_from_progress,
    karana_getter,
    karana_kind,
    karana_name,
    longitude_getter,
    lunar_day_progress,
    mansion_progress,
    nakshatra_getter,
    normalize360,
    pada_from_lon,
    paksha_for,
    sun_moon_longitudes,
    tithi_getter,
    yoga_getter,
    yoga_progress,
)
from ..provider import (
    MOON,
    RISE,
    SET,
    SUN,
    EphemerisError,
    EphemerisProvider,
    jd_to_datetime,
    local_midnight_jd,
)
from ..sankranti import detect_sankranti, last_sankranti, next_sun_sign_change

logger = logging.getLogger(__name__)

MOON_SIGN_HORIZON_DAYS = 3.0


def moon_phase_type(illumination_pct: float, waxing: bool) -> str:
    if illumination_pct < 3:
        return "NEW_MOON"
    if illumination_pct > 97:
        return "FULL_MOON"

    if waxing:
        if illumination_pct < 25:
            return "WAXING_CRESCENT"
        if illumination_pct < 50:
            return "FIRST_QUARTER"
        if illumination_pct < 75:
            return "WAXING_GIBBOUS"
        return "FULL_MOON"

    if illumination_pct > 75:
        return "WANING_GIBBOUS"
    if illumination_pct > 50:
        return "LAST_QUARTER"
    if illumination_pct > 25:
        return "WANING_CRESCENT"
    return "NEW_MOON"


async def _required_event(
    provider: EphemerisProvider, jd: float, body: str, location: Location, which: str
) -> float:
    instant = await provider.rise_set(jd, body, location.lat, location.lon, which)
    if instant is None:
        raise EphemerisError(f"No {body} {which} after JD {jd} at {location.name}")
    return instant


async def _moon_event_in_day(
    provider: EphemerisProvider, midnight: float, location: Location, which: str
) -> Optional[float]:
    instant = await provider.rise_set(midnight, MOON, location.lat, location.lon, which)
    if instant is None or instant >= midnight + 1.0:
        return None
    return instant


async def _element_ends(
    progress_fn: ProgressFn,
    progress: float,
    count: int,
    sunrise: float,
    next_sunrise: float,
) -> Tuple[Optional[float], Optional[float]]:
    """End of the element current at sunrise and, when it ends before the
    next sunrise, the end of its successor."""

    boundary = math.floor(progress) + 1
    end = await find_boundary(sunrise, progress_fn, boundary, count)
    if end is None or end >= next_sunrise:
        return end, None
    next_end = await find_boundary(end, progress_fn, boundary + 1, count)
    return end, next_end


def _successor(number: int, count: int) -> int:
    return number % count + 1


async def compute_daily(
    day: date_cls, location: Location, provider: EphemerisProvider
) -> DailyPanchanga:
    tz = location.tz

    def _local(jd: Optional[float]):
        return jd_to_datetime(jd, tz) if jd is not None else None

    midnight = local_midnight_jd(day, tz)
    sunrise = await _required_event(provider, midnight, SUN, location, RISE)
    sunset = await _required_event(provider, sunrise, SUN, location, SET)
    next_sunrise = await _required_event(provider, sunset, SUN, location, RISE)
    moonrise = await _moon_event_in_day(provider, midnight, location, RISE)
    moonset = await _moon_event_in_day(provider, midnight, location, SET)
    ayanamsa_deg = await provider.ayanamsa(sunrise)

    sun_lon, moon_lon = await sun_moon_longitudes(provider, sunrise)
    tithi_p = lunar_day_progress(sun_lon, moon_lon)
    nak_p = mansion_progress(moon_lon)
    yoga_p = yoga_progress(sun_lon, moon_lon)
    karana_p = half_day_progress(sun_lon, moon_lon)

    tithi_no = index_from_progress(tithi_p, TITHI_COUNT)
    nak_no = index_from_progress(nak_p, NAKSHATRA_COUNT)
    yoga_no = index_from_progress(yoga_p, YOGA_COUNT)
    karana_no = index_from_progress(karana_p, KARANA_COUNT)

    tithi_end, next_tithi_end = await _element_ends(
        tithi_getter(provider), tithi_p, TITHI_COUNT, sunrise, next_sunrise
    )
    nak_end, next_nak_end = await _element_ends(
        nakshatra_getter(provider), nak_p, NAKSHATRA_COUNT, sunrise, next_sunrise
    )
    yoga_end, next_yoga_end = await _element_ends(
        yoga_getter(provider), yoga_p, YOGA_COUNT, sunrise, next_sunrise
    )
    karana_end, next_karana_end = await _element_ends(
        karana_getter(provider), karana_p, KARANA_COUNT, sunrise, next_sunrise
    )

    tithi = TithiVM(
        number=tithi_no,
        name=name_for(TITHI_NAMES, tithi_no, "tithi"),
        paksha=paksha_for(tithi_no),
        end=_local(tithi_end),
    )
    next_tithi = None
    if tithi_end is not None and tithi_end < next_sunrise:
        number = _successor(tithi_no, TITHI_COUNT)
        next_tithi = TithiVM(
            number=number,
            name=name_for(TITHI_NAMES, number, "tithi"),
            paksha=paksha_for(number),
            end=_local(next_tithi_end),
        )

    nakshatra = NakshatraVM(
        number=nak_no,
        name=name_for(NAKSHATRA_NAMES, nak_no, "nakshatra"),
        pada=pada_from_lon(moon_lon),
        end=_local(nak_end),
    )
    next_nakshatra = None
    if nak_end is not None and nak_end < next_sunrise:
        number = _successor(nak_no, NAKSHATRA_COUNT)
        next_nakshatra = NakshatraVM(
            number=number,
            name=name_for(NAKSHATRA_NAMES, number, "nakshatra"),
            pada=1,
            end=_local(next_nak_end),
        )

    yoga = YogaVM(number=yoga_no, name=name_for(YOGA_NAMES, yoga_no, "yoga"), end=_local(yoga_end))
    next_yoga = None
    if yoga_end is not None and yoga_end < next_sunrise:
        number = _successor(yoga_no, YOGA_COUNT)
        next_yoga = YogaVM(
            number=number, name=name_for(YOGA_NAMES, number, "yoga"), end=_local(next_yoga_end)
        )

    karana = KaranaVM(
        number=karana_no,
        name=karana_name(karana_no),
        kind=karana_kind(karana_no),
        end=_local(karana_end),
    )
    next_karana = None
    if karana_end is not None and karana_end < next_sunrise:
        number = _successor(karana_no, KARANA_COUNT)
        next_karana = KaranaVM(
            number=number,
            name=karana_name(number),
            kind=karana_kind(number),
            end=_local(next_karana_end),
        )

    # Weekday is fixed at sunrise, Sunday = 0.
    sunrise_local = _local(sunrise)
    sunset_local = _local(sunset)
    weekday = (sunrise_local.weekday() + 1) % 7
    vara = VaraVM(number=weekday, name=VARA_NAMES[weekday])

    phase = await provider.phase(sunrise, MOON)
    illumination_pct = round(phase.illumination * 100.0, 2)
    waxing = normalize360(moon_lon - sun_lon) < 180.0
    moon = MoonVM(
        illumination_pct=illumination_pct,
        phase_angle=phase.phase_angle,
        waxing=waxing,
        phase_type=moon_phase_type(illumination_pct, waxing),
    )

    blocks = compute_muhurta_blocks(sunrise_local, sunset_local, weekday)
    windows = {kind: WindowVM(kind=kind, start=start, end=end) for kind, (start, end) in blocks.items()}

    month = await resolve_month(provider, sunrise, tithi_no, waxing)
    maas = MaasVM(
        name=month.name,
        lunar_day=month.lunar_day,
        paksha=paksha_for(tithi_no),
        is_adhika=month.is_adhika,
    )

    ingress = await detect_sankranti(provider, sunrise)
    sankranti = None
    if ingress is not None:
        sankranti = SankrantiVM(sign=ingress.sign, name=ingress.name, instant=_local(ingress.jd))

    sun_sign_idx = sign_index_from_lon(sun_lon)
    moon_sign_idx = sign_index_from_lon(moon_lon)
    sun_upto = await next_sun_sign_change(provider, sunrise)
    moon_upto = await find_boundary(
        sunrise,
        longitude_getter(provider, MOON),
        ((moon_sign_idx + 1) * 30.0) % 360.0,
        360.0,
        horizon=MOON_SIGN_HORIZON_DAYS,
    )
    sun_sign = SignVM(number=sun_sign_idx + 1, name=RASHI_NAMES[sun_sign_idx], upto=_local(sun_upto))
    moon_sign = SignVM(number=moon_sign_idx + 1, name=RASHI_NAMES[moon_sign_idx], upto=_local(moon_upto))

    vikrama_year = vikram_samvat(day, month.index)
    shaka_year = shaka_samvat(day, month.index)

    pravishte = None
    last = await last_sankranti(provider, sunrise)
    if last is not None:
        pravishte = PravishteVM(
            days_since_sankranti=int(math.floor(sunrise - last.jd)) + 1,
            current_rashi=last.sign,
            last_sankranti_date=_local(last.jd).date(),
        )

    logger.debug(
        "panchanga.daily.computed",
        extra={"date": day.isoformat(), "location": location.name, "tithi": tithi_no},
    )

    return DailyPanchanga(
        date=day,
        location=location,
        sunrise=sunrise_local,
        sunset=sunset_local,
        next_sunrise=_local(next_sunrise),
        moonrise=_local(moonrise),
        moonset=_local(moonset),
        ayanamsa=AyanamsaVM(
            name=getattr(provider, "ayanamsha_name", config.ayanamsha()),
            degrees=ayanamsa_deg,
        ),
        vara=vara,
        tithi=tithi,
        nakshatra=nakshatra,
        yoga=yoga,
        karana=karana,
        next_tithi=next_tithi,
        next_nakshatra=next_nakshatra,
        next_yoga=next_yoga,
        next_karana=next_karana,
        moon=moon,
        rahu_kalam=windows["rahu_kalam"],
        yamagandam=windows["yamagandam"],
        gulika_kalam=windows["gulika_kalam"],
        abhijit=windows["abhijit"],
        maas=maas,
        sankranti=sankranti,
        sun_sign=sun_sign,
        moon_sign=moon_sign,
        vikrama_samvat=SamvatVM(year=vikrama_year, name=vikrama_samvatsara(vikrama_year)),
        shaka_samvat=SamvatVM(year=shaka_year, name=shaka_samvatsara(shaka_year)),
        samvatsara=SamvatsaraVM(
            name=vikrama_samvatsara(vikrama_year),
            number=samvatsara_number(vikrama_year, VIKRAMA_CYCLE_OFFSET),
        ),
        pravishte=pravishte,
        meta={
            "engine": getattr(provider, "engine_version", type(provider).__name__),
            "calendars": build_calendars_extended(day, month.index),
        },
    )
