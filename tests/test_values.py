"""
Tests for the canonical scalar codec.
"""

import math
from datetime import date, datetime, timedelta, timezone

import pytest

from nosqlite import values
from nosqlite.exceptions import DateParseError, InvalidValueError


class TestEncode:
    """encode() picks the canonical form from the runtime type."""

    @pytest.mark.parametrize("value,expected", [
        ("text", "text"),
        ("", ""),
        (True, "1"),
        (False, "0"),
        (0, "0"),
        (-12, "-12"),
        (10 ** 30, "1" + "0" * 30),
        (123.45, "123.45"),
        (1e20, "1e+20"),
        (datetime(2012, 6, 12, 15, 0, 3), "2012-06-12 15:00:03"),
        (date(1970, 1, 1), "1970-01-01 00:00:00"),
    ])
    def test_scalars(self, value, expected):
        assert values.encode(value) == expected

    @pytest.mark.parametrize("value", [None, [], {}, (), b"", 1j, object()])
    def test_non_scalars_rejected(self, value):
        assert values.is_scalar(value) is False
        with pytest.raises(InvalidValueError):
            values.encode(value)


class TestDateCodec:

    def test_small_years_are_zero_padded(self):
        assert values.encode_date(datetime(5, 3, 4, 1, 2, 3)) == "0005-03-04 01:02:03"

    def test_aware_datetime_keeps_wall_clock(self):
        aware = datetime(2012, 6, 12, 15, 0, 3, tzinfo=timezone(timedelta(hours=2)))
        assert values.encode_date(aware) == "2012-06-12 15:00:03"

    def test_decode_is_inverse_of_encode(self):
        moment = datetime(2024, 2, 29, 23, 59, 59)
        assert values.decode_date(values.encode_date(moment)) == moment

    @pytest.mark.parametrize("text", [
        "2012-06-12",
        "2012-6-1 1:2:3",
        "2012-06-12 15:00:03 ",
        "2012-06-12T15:00:03",
    ])
    def test_decode_rejects_other_layouts(self, text):
        with pytest.raises(InvalidValueError):
            values.decode_date(text)


class TestParseDate:
    """Flexible date input parsing."""

    @pytest.mark.parametrize("text,expected", [
        ("2012-06-12 15:00:03", datetime(2012, 6, 12, 15, 0, 3)),
        ("2012-06-30", datetime(2012, 6, 30)),
        ("  2012-06-30  ", datetime(2012, 6, 30)),
        ("2012/06/30", datetime(2012, 6, 30)),
        ("2012/06/30 10:11", datetime(2012, 6, 30, 10, 11)),
        ("06/30/2012", datetime(2012, 6, 30)),
        ("30.06.2012", datetime(2012, 6, 30)),
        ("30 June 2012", datetime(2012, 6, 30)),
        ("30 Jun 2012", datetime(2012, 6, 30)),
        ("June 30, 2012", datetime(2012, 6, 30)),
        ("@0", datetime(1970, 1, 1)),
        ("@1339513203", datetime(2012, 6, 12, 15, 0, 3)),
    ])
    def test_formats(self, text, expected):
        assert values.parse_date(text) == expected

    def test_iso_with_zulu(self):
        parsed = values.parse_date("2012-06-12T15:00:03Z")
        assert values.encode_date(parsed) == "2012-06-12 15:00:03"

    def test_keywords(self):
        today = datetime.combine(date.today(), datetime.min.time())

        assert values.parse_date("today") == today
        assert values.parse_date("Yesterday") == today - timedelta(days=1)
        assert values.parse_date("tomorrow") == today + timedelta(days=1)
        assert values.parse_date("now").microsecond == 0

    @pytest.mark.parametrize("text", ["", "not a date", "2012-13-45", "@abc", "31/31/2012"])
    def test_unparseable(self, text):
        with pytest.raises(DateParseError):
            values.parse_date(text)


class TestNumbers:

    @pytest.mark.parametrize("text,expected", [
        ("42", 42),
        ("-7", -7),
        (" 8 ", 8),
        ("12.7", 12),
        ("-12.7", -12),
        ("1e3", 1000),
        ("0", 0),
        ("", None),
        (None, None),
        ("abc", None),
        ("inf", None),
        ("nan", None),
        ("1_000", None),
        ("\u0661\u0662", None),
        ("\uff11\uff12", None),
        ("0x10", None),
        ("1e400", None),
        (".5", 0),
        ("+3", 3),
    ])
    def test_to_integer(self, text, expected):
        assert values.to_integer(text) == expected

    def test_float_round_trip(self):
        for number in (0.1, 123.45, -2.5e-10, 1e300):
            assert values.decode_float(values.encode_float(number)) == number

    def test_int_round_trip(self):
        for number in (0, 1, -1, 2 ** 63 - 1, -(2 ** 63)):
            assert values.decode_int(values.encode_int(number)) == number

    @pytest.mark.parametrize("text", ["12.5", " 42 ", "4_2", "+42", "042", "-0", "\u0664\u0662", ""])
    def test_decode_int_rejects_non_canonical(self, text):
        with pytest.raises(InvalidValueError):
            values.decode_int(text)

    @pytest.mark.parametrize("text", ["1_0.5", " 1.5", "1.50", "1e3", "inf ", "Infinity", "\u0661.5", "abc"])
    def test_decode_float_rejects_non_canonical(self, text):
        with pytest.raises(InvalidValueError):
            values.decode_float(text)

    def test_decode_float_accepts_non_finite_reprs(self):
        assert values.decode_float("inf") == float("inf")
        assert math.isnan(values.decode_float("nan"))


class TestBooleans:

    @pytest.mark.parametrize("text,expected", [
        (None, False),
        ("", False),
        ("0", False),
        ("1", True),
        ("00", True),
        (" ", True),
    ])
    def test_decode_bool(self, text, expected):
        assert values.decode_bool(text) is expected

    def test_encode_bool(self):
        assert values.encode_bool(True) == "1"
        assert values.encode_bool(False) == "0"
