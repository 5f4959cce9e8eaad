import asyncio

import pytest

from panchanga.services.sankranti import (
    MINUTE_DAYS,
    detect_sankranti,
    last_sankranti,
    next_sun_sign_change,
)

from synthetic_provider import SUN_RATE, LinearProvider

SUNRISE = 2460310.75


def test_ingress_within_the_day_is_reported_with_minute_precision():
    provider = LinearProvider(SUNRISE, sun0=29.5)
    ingress = asyncio.run(detect_sankranti(provider, SUNRISE))
    assert ingress is not None
    assert ingress.sign == "Vrishabha"
    assert ingress.name == "Vrishabha Sankranti"
    assert ingress.jd == pytest.approx(SUNRISE + 0.5 / SUN_RATE, abs=MINUTE_DAYS)


def test_no_ingress_when_sign_is_unchanged():
    provider = LinearProvider(SUNRISE, sun0=10.0)
    assert asyncio.run(detect_sankranti(provider, SUNRISE)) is None


def test_last_sankranti_walks_back_to_sign_entry():
    provider = LinearProvider(SUNRISE, sun0=40.0)
    ingress = asyncio.run(last_sankranti(provider, SUNRISE))
    assert ingress.sign == "Vrishabha"
    assert ingress.jd == pytest.approx(SUNRISE - 10.0 / SUN_RATE, abs=1e-3)


def test_last_sankranti_gives_up_without_motion():
    provider = LinearProvider(SUNRISE, sun0=40.0, sun_rate=0.0)
    assert asyncio.run(last_sankranti(provider, SUNRISE)) is None


def test_next_sign_change_uses_solar_horizon():
    provider = LinearProvider(SUNRISE, sun0=100.0)
    upto = asyncio.run(next_sun_sign_change(provider, SUNRISE))
    assert upto == pytest.approx(SUNRISE + 20.0 / SUN_RATE, abs=1e-4)
