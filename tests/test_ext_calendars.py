from datetime import date, datetime, timezone

from panchanga.services.constants import masa_index
from panchanga.services.ext_calendars import (
    KALI_YUGA_START_JD,
    build_calendars_extended,
    kali_ahargana,
    modified_julian_day,
    samvatsara_number,
    shaka_samvat,
    shaka_samvatsara,
    vikram_samvat,
    vikrama_samvatsara,
    VIKRAMA_CYCLE_OFFSET,
)
from panchanga.services.provider import to_jd


def test_cycle_names_match_reference_years():
    assert vikrama_samvatsara(2082) == "Kalayukta"
    assert shaka_samvatsara(1947) == "Vishvavasu"
    assert samvatsara_number(2082, VIKRAMA_CYCLE_OFFSET) == 52


def test_closing_lunar_months_belong_to_previous_year():
    pausha = masa_index("Pausha")
    assert vikram_samvat(date(2025, 1, 13), pausha) == 2081
    assert shaka_samvat(date(2025, 1, 13), pausha) == 1946
    assert vikram_samvat(date(2025, 4, 5), masa_index("Phalguna")) == 2081
    assert vikram_samvat(date(2025, 4, 5), masa_index("Chaitra")) == 2082


def test_new_year_fallback_without_lunar_month():
    assert vikram_samvat(date(2025, 3, 31)) == 2081
    assert vikram_samvat(date(2025, 4, 1)) == 2082
    assert shaka_samvat(date(2025, 11, 1)) == 1947


def test_kali_ahargana_counts_from_epoch():
    assert modified_julian_day(2451545.0) == 51544.5
    assert KALI_YUGA_START_JD == 588465.5
    assert kali_ahargana(date(2025, 1, 13)) == 1_872_223


def test_extended_block_is_consistent():
    block = build_calendars_extended(date(2025, 1, 13), masa_index("Pausha"))
    assert block["vikram_samvat"] == 2081
    assert block["gujarati_samvat"] == 2081
    assert block["kali_ahargana"] == kali_ahargana(date(2025, 1, 13))
    assert block["kali_ahargana"] > 1_860_000
    assert block["julian_day"] == to_jd(datetime(2025, 1, 13, tzinfo=timezone.utc))
    assert block["modified_julian_day"] == 60688.0
