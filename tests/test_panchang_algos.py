import asyncio

import pytest

from panchanga.services.panchang_algos import (
    find_boundary,
    half_day_progress,
    index_from_progress,
    karana_kind,
    karana_name,
    lunar_day_progress,
    mansion_progress,
    normalize360,
    pada_from_lon,
    paksha_for,
    yoga_progress,
)


def _linear(rate, offset, modulus):
    async def _progress(t):
        return (offset + rate * t) % modulus

    return _progress


def test_normalize360_wraps_negatives_and_full_turns():
    assert normalize360(-30.0) == 330.0
    assert normalize360(720.0) == 0.0
    assert normalize360(359.5) == 359.5


def test_progress_functions_use_sidereal_differences():
    # Moon 20 degrees ahead of the Sun across the 0 degree point.
    assert lunar_day_progress(350.0, 10.0) == pytest.approx(20.0 / 12.0)
    assert half_day_progress(350.0, 10.0) == pytest.approx(40.0 / 12.0)
    assert mansion_progress(180.0) == pytest.approx(13.5)
    assert yoga_progress(200.0, 200.0) == pytest.approx(40.0 / (360.0 / 27.0))


def test_index_from_progress_is_one_based_and_cyclic():
    assert index_from_progress(0.0, 30) == 1
    assert index_from_progress(29.99, 30) == 30
    assert index_from_progress(30.0, 30) == 1


def test_pada_and_paksha():
    assert pada_from_lon(0.0) == 1
    assert pada_from_lon(13.3) == 4
    assert pada_from_lon(13.4) == 1
    assert paksha_for(15) == "Shukla"
    assert paksha_for(16) == "Krishna"


def test_karana_fixed_slots_and_mobile_cycle():
    assert karana_name(1) == "Kimstughna"
    assert karana_name(2) == "Bava"
    assert karana_name(8) == "Vishti (Bhadra)"
    assert karana_name(9) == "Bava"
    assert karana_name(57) == "Vishti (Bhadra)"
    assert karana_name(58) == "Shakuni"
    assert karana_name(59) == "Chatushpada"
    assert karana_name(60) == "Naga"
    assert karana_kind(60) == "Fixed"
    assert karana_kind(30) == "Movable"


def test_find_boundary_locates_linear_crossing():
    jd = asyncio.run(find_boundary(0.0, _linear(2.0, 3.0, 30.0), 4.0, 30.0))
    assert jd == pytest.approx(0.5, abs=1e-5)


def test_find_boundary_handles_wrap_around():
    # Progress starts at 25 and wraps through 0 after half a day.
    jd = asyncio.run(find_boundary(0.0, _linear(10.0, 25.0, 30.0), 0.0, 30.0))
    assert jd == pytest.approx(0.5, abs=1e-5)


def test_find_boundary_returns_none_beyond_horizon():
    # Reaching 20 from 25 needs 2.5 days, more than the 36h horizon.
    assert asyncio.run(find_boundary(0.0, _linear(10.0, 25.0, 30.0), 20.0, 30.0)) is None


def test_find_boundary_respects_custom_horizon():
    jd = asyncio.run(find_boundary(0.0, _linear(10.0, 25.0, 30.0), 20.0, 30.0, horizon=3.0))
    assert jd == pytest.approx(2.5, abs=1e-5)


def test_find_boundary_rejects_bad_parameters():
    with pytest.raises(ValueError):
        asyncio.run(find_boundary(0.0, _linear(1.0, 0.0, 30.0), 1.0, 0.0))
    with pytest.raises(ValueError):
        asyncio.run(find_boundary(0.0, _linear(1.0, 0.0, 30.0), 1.0, 30.0, step=0.0))
