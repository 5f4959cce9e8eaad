import asyncio
from datetime import date, datetime, timezone

import pytest

pytest.importorskip("swisseph")

from panchanga import config
from panchanga.schemas.panchanga import Location
from panchanga.services.daily_store import DailyInfoRow
from panchanga.services.ephem import SwissEphemerisProvider
from panchanga.services.orchestrators.panchang_full import compute_daily
from panchanga.services.provider import EphemerisProvider, to_jd


@pytest.fixture
def den_haag():
    return Location(**config.default_place())


def test_provider_satisfies_contract():
    assert isinstance(SwissEphemerisProvider(), EphemerisProvider)


def test_paush_purnima_2025_in_den_haag(den_haag):
    record = asyncio.run(compute_daily(date(2025, 1, 13), den_haag, SwissEphemerisProvider()))

    assert record.tithi.number == 15
    assert record.tithi.name == "Purnima"
    assert record.maas.name == "Pausha"
    assert record.vikrama_samvat.year == 2081
    assert record.shaka_samvat.year == 1946
    assert record.vara.name == "Somavara"
    assert record.sunrise.date() == date(2025, 1, 13)
    assert record.sunrise < record.sunset < record.next_sunrise
    assert 20.0 < record.ayanamsa.degrees < 30.0

    row = DailyInfoRow.from_panchanga(record)
    assert row.tithi_key == "PURNIMA"
    assert row.location_name == "Den Haag"


def test_makara_sankranti_belongs_to_the_preceding_sunrise_day(den_haag):
    provider = SwissEphemerisProvider()
    # The ingress happens before sunrise on 14 January in Europe.
    ingress_day = asyncio.run(compute_daily(date(2025, 1, 13), den_haag, provider))
    next_day = asyncio.run(compute_daily(date(2025, 1, 14), den_haag, provider))

    assert ingress_day.sankranti is not None
    assert ingress_day.sankranti.sign == "Makara"
    assert ingress_day.sankranti.instant.date() == date(2025, 1, 14)
    assert next_day.sankranti is None
    assert next_day.sun_sign.name == "Makara"


def test_lahiri_ayanamsa_applies_on_worker_threads():
    provider = SwissEphemerisProvider("lahiri")
    jd = to_jd(datetime(2025, 1, 14, tzinfo=timezone.utc))
    assert asyncio.run(provider.ayanamsa(jd)) == pytest.approx(24.21, abs=0.02)
