"""Environment driven settings for the Panchanga core.

Values are read at call time so tests (and long running seeding jobs) can
adjust them through the environment without reloading modules.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def ephemeris_backend() -> str:
    raw_backend = os.getenv("EPHEMERIS_BACKEND")
    return raw_backend.strip().lower() if raw_backend else "moseph"


def ephe_path() -> str | None:
    return os.getenv("EPHE_PATH") or None


def ayanamsha() -> str:
    return os.getenv("AYANAMSHA", "lahiri").strip().lower()


def cache_max_size() -> int:
    return int(os.getenv("PANCHANGA_CACHE_MAX_SIZE", "365"))


def cache_ttl_seconds() -> float:
    return float(os.getenv("PANCHANGA_CACHE_TTL_SECONDS", str(24 * 60 * 60)))


def max_occurrences() -> int:
    return int(os.getenv("RECURRENCE_MAX_OCCURRENCES", "1000"))


def default_place() -> dict:
    return {
        "name": os.getenv("DEFAULT_PLACE_LABEL", "Den Haag"),
        "lat": float(os.getenv("DEFAULT_PLACE_LAT", "52.0705")),
        "lon": float(os.getenv("DEFAULT_PLACE_LON", "4.3007")),
        "tz": os.getenv("DEFAULT_PLACE_TZ", "Europe/Amsterdam"),
    }
