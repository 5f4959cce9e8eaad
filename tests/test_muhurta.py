from datetime import datetime, timezone

import pytest

from panchanga.services.muhurta import compute_muhurta_blocks

SUNRISE = datetime(2024, 1, 1, 6, 0, tzinfo=timezone.utc)
SUNSET = datetime(2024, 1, 1, 18, 0, tzinfo=timezone.utc)


def _hm(window):
    return tuple(moment.strftime("%H:%M") for moment in window)


def test_monday_windows():
    blocks = compute_muhurta_blocks(SUNRISE, SUNSET, 1)
    assert _hm(blocks["rahu_kalam"]) == ("07:30", "09:00")
    assert _hm(blocks["yamagandam"]) == ("10:30", "12:00")
    assert _hm(blocks["gulika_kalam"]) == ("13:30", "15:00")
    assert _hm(blocks["abhijit"]) == ("11:36", "12:24")


def test_sunday_rahu_is_last_eighth():
    blocks = compute_muhurta_blocks(SUNRISE, SUNSET, 0)
    assert _hm(blocks["rahu_kalam"]) == ("16:30", "18:00")


def test_windows_stay_within_daylight():
    for weekday in range(7):
        blocks = compute_muhurta_blocks(SUNRISE, SUNSET, weekday)
        for start, end in blocks.values():
            assert SUNRISE <= start < end <= SUNSET


def test_rejects_inverted_day():
    with pytest.raises(ValueError):
        compute_muhurta_blocks(SUNSET, SUNRISE, 1)
