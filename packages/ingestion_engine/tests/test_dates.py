from datetime import date, datetime, timedelta, timezone

import pytest

from packages.ingestion_engine.dates import normalize_date, serial_to_ymd, today_iso


@pytest.fixture
def today():
    return today_iso()


class TestSpreadsheetSerials:
    def test_serial_one_is_epoch(self):
        assert normalize_date(1) == "1900-01-01"

    @pytest.mark.parametrize(
        "serial, expected",
        [
            (59, "1900-02-28"),
            (60, "1900-02-29"),
            (61, "1900-03-01"),
            (45292, "2024-01-01"),
            (45306, "2024-01-15"),
            (45306.75, "2024-01-15"),
        ],
    )
    def test_serial_converts_to_calendar_date(self, serial, expected):
        assert normalize_date(serial) == expected

    @pytest.mark.parametrize("serial", [0, -1, 0.5, 2958466, 10**9])
    def test_serial_outside_valid_range_is_today(self, serial, today):
        assert normalize_date(serial) == today

    def test_serial_with_year_past_2100_is_today(self, today):
        # 2958465 is 9999-12-31: a valid serial, but out of the accepted years
        assert serial_to_ymd(2958465) == (9999, 12, 31)
        assert normalize_date(2958465) == today
        assert normalize_date(100000) == today

    def test_serial_round_trip(self):
        day = date(2031, 7, 4)
        serial = (day - date(1899, 12, 30)).days
        assert normalize_date(serial) == "2031-07-04"


class TestStrings:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("2024-01-15", "2024-01-15"),
            ("1/5/2024", "2024-01-05"),
            ("01/05/2024", "2024-01-05"),
            ("12-31-2023", "2023-12-31"),
            ("  2024-01-15  ", "2024-01-15"),
            ("March 5, 2024", "2024-03-05"),
            ("2024-01-15T10:30:00", "2024-01-15"),
        ],
    )
    def test_known_encodings(self, raw, expected):
        assert normalize_date(raw) == expected

    def test_month_length_is_not_validated(self):
        assert normalize_date("2024-02-31") == "2024-02-31"

    @pytest.mark.parametrize("raw", ["", "   ", None, "not a date", "1899-12-31", "2101-01-01"])
    def test_unusable_string_is_today(self, raw, today):
        assert normalize_date(raw) == today

    @pytest.mark.parametrize("raw", ["2024-01-15", "1900-01-01", "2100-12-31", "2024-02-30"])
    def test_idempotent_on_canonical_dates(self, raw):
        once = normalize_date(raw)
        assert normalize_date(once) == once


class TestDateObjects:
    def test_datetime_cell(self):
        assert normalize_date(datetime(2024, 1, 15, 18, 45)) == "2024-01-15"

    def test_date_cell(self):
        assert normalize_date(date(2023, 11, 2)) == "2023-11-02"

    def test_aware_datetime_is_read_in_utc(self):
        tz = timezone(timedelta(hours=-8))
        assert normalize_date(datetime(2024, 1, 15, 20, 0, tzinfo=tz)) == "2024-01-16"

    def test_out_of_range_year_is_today(self, today):
        assert normalize_date(date(1850, 1, 1)) == today

    def test_bool_is_not_a_serial(self, today):
        assert normalize_date(True) == today
