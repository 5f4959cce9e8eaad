"""Weekday based inauspicious windows (Rahu Kalam, Yamagandam, Gulika).

The daylight span between sunrise and sunset is divided into eight equal
parts; each window occupies the weekday specific part.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Dict, Tuple

# Segment indices (1-based) per weekday, Sunday = 0.
RAHU_INDEX = {
    0: 8,
    1: 2,
    2: 7,
    3: 5,
    4: 6,
    5: 4,
    6: 3,
}

YAMAGANDA_INDEX = {
    0: 5,
    1: 4,
    2: 3,
    3: 2,
    4: 1,
    5: 7,
    6: 6,
}

GULIKA_INDEX = {
    0: 7,
    1: 6,
    2: 5,
    3: 4,
    4: 3,
    5: 2,
    6: 1,
}


def _segment(start: datetime, duration: timedelta, index: int) -> Tuple[datetime, datetime]:
    """Return the ``index`` (1-based) segment within a day divided into eight parts."""

    seg = duration / 8
    seg_start = start + (index - 1) * seg
    return seg_start, seg_start + seg


def compute_muhurta_blocks(
    sunrise: datetime, sunset: datetime, weekday: int
) -> Dict[str, Tuple[datetime, datetime]]:
    if sunset <= sunrise:
        raise ValueError("sunset must follow sunrise")
    day_length = sunset - sunrise

    # Abhijit muhurta is centred on solar noon with width day_length/15
    solar_noon = sunrise + day_length / 2
    width = day_length / 15

    return {
        "rahu_kalam": _segment(sunrise, day_length, RAHU_INDEX[weekday]),
        "yamagandam": _segment(sunrise, day_length, YAMAGANDA_INDEX[weekday]),
        "gulika_kalam": _segment(sunrise, day_length, GULIKA_INDEX[weekday]),
        "abhijit": (solar_noon - width / 2, solar_noon + width / 2),
    }
