"""Tests for the no-leap time-axis builder."""

from datetime import date

import numpy as np
import pandas as pd
import pytest

pytestmark = pytest.mark.unit

from climgrid.contracts import FormatError, IrregularTimeAxisError, UnsupportedCalendarError
from climgrid.core.timeaxis import (
    build_timevec,
    check_calendar,
    count_leap_days,
    date_to_noleap,
    encode_timevec,
    noleap_to_date,
    parse_time_units,
)


class TestParseTimeUnits:

    @pytest.mark.parametrize("units, expected", [
        ("days since 1850-01-01 00:00:00", date(1850, 1, 1)),
        ("days since 2006-1-1", date(2006, 1, 1)),
        ("days since 1949.12.01", date(1949, 12, 1)),
        ("day since 2000/03/15 12:00", date(2000, 3, 15)),
    ])
    def test_anchor_extracted(self, units, expected):
        assert parse_time_units(units) == expected

    def test_no_date_fails(self):
        with pytest.raises(FormatError, match="No date"):
            parse_time_units("days since the beginning")

    def test_invalid_date_fails(self):
        with pytest.raises(FormatError, match="Invalid anchor"):
            parse_time_units("days since 2000-13-01")

    def test_hours_are_rejected(self):
        with pytest.raises(FormatError, match="do not count days"):
            parse_time_units("hours since 2000-01-01")


class TestCalendar:

    @pytest.mark.parametrize("calendar", ["noleap", "365_day", "NoLeap"])
    def test_noleap_calendars_accepted(self, calendar):
        assert check_calendar(calendar) in ("noleap", "365_day")

    @pytest.mark.parametrize("calendar", ["gregorian", "standard", "360_day", "proleptic_gregorian"])
    def test_other_calendars_rejected(self, calendar):
        with pytest.raises(UnsupportedCalendarError):
            check_calendar(calendar)


class TestNoleapConversion:

    def test_one_noleap_year_over_a_leap_year(self):
        """365 no-leap days from 2000-01-01 land one real day later than 365 days."""
        assert noleap_to_date(date(2000, 1, 1), 365) == date(2001, 1, 1)
        assert count_leap_days(date(2000, 1, 1), 365) == 1

    def test_no_leap_day_crossed(self):
        assert noleap_to_date(date(2000, 1, 1), 10) == date(2000, 1, 11)
        assert count_leap_days(date(2000, 1, 1), 10) == 0

    def test_end_of_february_skips_leap_day(self):
        assert noleap_to_date(date(2000, 1, 1), 58) == date(2000, 2, 28)
        assert noleap_to_date(date(2000, 1, 1), 59) == date(2000, 3, 1)

    def test_many_years(self):
        # 2000, 2004, 2008 are leap years
        assert count_leap_days(date(2000, 1, 1), 10 * 365) == 3
        assert noleap_to_date(date(2000, 1, 1), 10 * 365) == date(2010, 1, 1)

    def test_negative_offset(self):
        assert noleap_to_date(date(2001, 1, 1), -365) == date(2000, 1, 1)
        assert count_leap_days(date(2001, 1, 1), -365) == -1

    def test_fractional_offset_maps_to_containing_day(self):
        assert noleap_to_date(date(2006, 1, 1), 0.5) == date(2006, 1, 1)
        assert noleap_to_date(date(2006, 1, 1), 1.6) == date(2006, 1, 2)
        assert noleap_to_date(date(2006, 1, 1), 2.5) == date(2006, 1, 3)

    def test_fractional_offset_leap_count(self):
        assert count_leap_days(date(2000, 1, 1), 365.5) == 1
        assert count_leap_days(date(2000, 1, 1), 58.5) == 0

    def test_anchor_on_leap_day_rejected(self):
        with pytest.raises(FormatError):
            noleap_to_date(date(2000, 2, 29), 1)

    def test_inverse(self):
        anchor = date(1950, 1, 1)
        for offset in (0, 59, 365, 1000, 20000):
            assert date_to_noleap(anchor, noleap_to_date(anchor, offset)) == offset

    def test_leap_day_has_no_offset(self):
        with pytest.raises(FormatError):
            date_to_noleap(date(2000, 1, 1), date(2000, 2, 29))


class TestBuildTimevec:

    def test_daily_axis(self):
        timevec = build_timevec("days since 2006-01-01", "noleap", np.arange(5.0))

        assert isinstance(timevec, pd.DatetimeIndex)
        assert timevec[0] == pd.Timestamp("2006-01-01")
        assert timevec[-1] == pd.Timestamp("2006-01-05")
        assert timevec.name == "time"

    def test_axis_across_leap_year_has_no_29_february(self):
        raw = np.arange(365.0 * 2)
        timevec = build_timevec("days since 2000-01-01", "365_day", raw)

        assert len(timevec) == raw.size
        assert not ((timevec.month == 2) & (timevec.day == 29)).any()
        assert timevec[-1] == pd.Timestamp("2001-12-31")
        assert timevec.is_monotonic_increasing

    def test_offset_start(self):
        timevec = build_timevec("days since 1850-01-01", "noleap", np.array([56940.0, 56941.0]))
        assert list(timevec) == [pd.Timestamp("2006-01-01"), pd.Timestamp("2006-01-02")]

    @pytest.mark.parametrize("steps", [2, 365, 3650])
    def test_midday_offsets(self, steps):
        raw = np.arange(56940.0, 56940.0 + steps) + 0.5
        timevec = build_timevec("days since 1850-01-01", "noleap", raw)

        assert len(timevec) == steps
        assert timevec[0] == pd.Timestamp("2006-01-01")

    def test_midday_offsets_across_leap_year(self):
        raw = np.arange(0.0, 730.0) + 0.5
        timevec = build_timevec("days since 2000-01-01", "noleap", raw)

        assert timevec[-1] == pd.Timestamp("2001-12-31")
        np.testing.assert_array_equal(
            encode_timevec(timevec, "days since 2000-01-01", "noleap"), np.floor(raw)
        )

    def test_gap_is_rejected(self):
        with pytest.raises(IrregularTimeAxisError, match="gap-free"):
            build_timevec("days since 2000-01-01", "noleap", np.array([0.0, 1.0, 5.0]))

    def test_subdaily_is_rejected(self):
        with pytest.raises(IrregularTimeAxisError):
            build_timevec("days since 2000-01-01", "noleap", np.arange(0.0, 2.0, 0.25))

    def test_empty_is_rejected(self):
        with pytest.raises(IrregularTimeAxisError, match="empty"):
            build_timevec("days since 2000-01-01", "noleap", np.array([]))

    def test_unsupported_calendar(self):
        with pytest.raises(UnsupportedCalendarError):
            build_timevec("days since 2000-01-01", "gregorian", np.arange(3.0))

    def test_encode_is_inverse(self):
        raw = np.arange(50.0, 450.0)
        timevec = build_timevec("days since 2000-01-01", "noleap", raw)
        encoded = encode_timevec(timevec, "days since 2000-01-01", "noleap")

        assert encoded.dtype == np.float64
        np.testing.assert_array_equal(encoded, raw)
