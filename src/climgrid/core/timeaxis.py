"""Build calendar dates from NetCDF no-leap time offsets, and back.

Climate models commonly store daily output on a fixed 365-day ("noleap")
calendar: the raw time variable counts days since an anchor date, and no
year has a 29 February. Offsets are decoded and encoded with netCDF4
(cftime) on that calendar; a no-leap date maps to the real (Gregorian) date
with the same year, month and day.

The time axis produced here is the closed daily range between the converted
first and last offsets. Only gap-free daily series are supported; anything
else is rejected with IrregularTimeAxisError rather than silently producing
a wrong axis.
"""

import logging
import re
from datetime import date

import cftime
import numpy as np
import pandas as pd
from netCDF4 import date2num, num2date

from climgrid.contracts import (
    FormatError,
    IrregularTimeAxisError,
    UnsupportedCalendarError,
    require,
)

__all__ = [
    'parse_time_units',
    'check_calendar',
    'noleap_to_date',
    'date_to_noleap',
    'count_leap_days',
    'build_timevec',
    'encode_timevec',
]

logger = logging.getLogger(__name__)

DATE_PATTERN = re.compile(r"(\d+)[-./](\d+)[-./](\d+)")
NOLEAP_CALENDARS = ("noleap", "365_day")

DECODE_CALENDAR = "noleap"


def parse_time_units(units: str) -> date:
    """Extract the anchor date from a ``"days since YYYY-MM-DD ..."`` string.

    Parameters
    ----------
    units : str
        Value of the time variable's ``units`` attribute.

    Returns
    -------
    datetime.date
        The first date-shaped substring of ``units``.

    Raises
    ------
    FormatError
        If no date is found, the date is invalid, or the offsets are not
        counted in days.

    Examples
    --------
    >>> parse_time_units("days since 1850-01-01 00:00:00")
    datetime.date(1850, 1, 1)
    """
    match = DATE_PATTERN.search(units)
    if match is None:
        raise FormatError(f"No date found in time units '{units}'")

    verb = units.split(" since ")[0].strip().lower()
    if verb not in ("days", "day"):
        raise FormatError(f"Time units '{units}' do not count days")

    year, month, day = (int(g) for g in match.groups())
    try:
        return date(year, month, day)
    except ValueError as exc:
        raise FormatError(f"Invalid anchor date in time units '{units}'") from exc


def check_calendar(calendar: str) -> str:
    """Return the normalized calendar name, or fail for unsupported calendars.

    Raises
    ------
    UnsupportedCalendarError
        If ``calendar`` is not a 365-day calendar.
    """
    name = str(calendar).strip().lower()
    if name not in NOLEAP_CALENDARS:
        raise UnsupportedCalendarError(
            f"Calendar '{calendar}' is not supported (expected one of {NOLEAP_CALENDARS})"
        )
    return name


def _anchor_units(anchor: date) -> str:
    return f"days since {anchor.isoformat()}"


def _require_noleap_date(day: date) -> None:
    require(
        (day.month, day.day) != (2, 29),
        f"{day.isoformat()} does not exist in a no-leap calendar",
        FormatError,
    )


def noleap_to_date(anchor: date, offset: float) -> date:
    """Convert a no-leap day offset to the real calendar date.

    The offset is decoded with ``netCDF4.num2date`` on the no-leap calendar
    and mapped to the day that contains it, so ``1.5`` (noon of the second
    day) and ``1.0`` give the same date. The result equals
    ``anchor + floor(offset) + count_leap_days(anchor, offset)`` days.

    Examples
    --------
    >>> noleap_to_date(date(2000, 1, 1), 365)
    datetime.date(2001, 1, 1)
    """
    _require_noleap_date(anchor)
    stamp = num2date(float(offset), _anchor_units(anchor), calendar=DECODE_CALENDAR)
    return date(stamp.year, stamp.month, stamp.day)


def date_to_noleap(anchor: date, day: date) -> int:
    """Convert a real calendar date back to a no-leap day offset from ``anchor``.

    Raises
    ------
    FormatError
        If ``day`` (or ``anchor``) is a 29 February.
    """
    _require_noleap_date(anchor)
    _require_noleap_date(day)
    stamp = cftime.DatetimeNoLeap(day.year, day.month, day.day)
    return int(date2num(stamp, _anchor_units(anchor), calendar=DECODE_CALENDAR))


def count_leap_days(anchor: date, offset: float) -> int:
    """Number of real leap days skipped by a no-leap offset.

    The difference between the real days from ``anchor`` to the target date
    and the whole no-leap days of ``offset``. Negative for offsets before
    the anchor.

    Examples
    --------
    >>> count_leap_days(date(2000, 1, 1), 365)
    1
    >>> count_leap_days(date(2000, 1, 1), 10)
    0
    """
    target = noleap_to_date(anchor, offset)
    return (target - anchor).days - int(np.floor(float(offset)))


def build_timevec(units: str, calendar: str, raw) -> pd.DatetimeIndex:
    """Construct the daily time axis for raw no-leap offsets.

    Parameters
    ----------
    units : str
        Time ``units`` attribute, e.g. ``"days since 2006-01-01"``.

    calendar : str
        Time ``calendar`` attribute. Only ``noleap`` / ``365_day``.

    raw : array-like
        Raw numeric time offsets, in file order.

    Returns
    -------
    pd.DatetimeIndex
        One date per raw offset, from the converted first offset to the
        converted last offset, daily, without 29 February.

    Raises
    ------
    FormatError
        If ``units`` cannot be parsed.
    UnsupportedCalendarError
        If ``calendar`` is not a 365-day calendar.
    IrregularTimeAxisError
        If ``raw`` is empty or is not a gap-free daily series.
    """
    raw = np.atleast_1d(np.asarray(raw, dtype=np.float64))
    anchor = parse_time_units(units)
    check_calendar(calendar)
    require(raw.size > 0, "Time axis is empty", IrregularTimeAxisError)

    start = noleap_to_date(anchor, raw[0])
    end = noleap_to_date(anchor, raw[-1])

    days = pd.date_range(start, end, freq="D", name="time")
    timevec = days[~((days.month == 2) & (days.day == 29))]

    require(
        len(timevec) == raw.size,
        f"Time axis {start} to {end} holds {len(timevec)} days but the file has "
        f"{raw.size} time steps; only gap-free daily data is supported",
        IrregularTimeAxisError,
    )

    logger.debug("Time axis %s to %s (%d days, %s)", start, end, len(timevec), calendar)
    return timevec


def encode_timevec(timevec, units: str, calendar: str) -> np.ndarray:
    """Re-encode calendar dates as no-leap day offsets.

    Inverse of build_timevec for the dates it produces.

    Returns
    -------
    np.ndarray
        float64 offsets, one per date.
    """
    anchor = parse_time_units(units)
    check_calendar(calendar)
    _require_noleap_date(anchor)

    days = [pd.Timestamp(t).date() for t in timevec]
    for day in days:
        _require_noleap_date(day)
    stamps = [cftime.DatetimeNoLeap(day.year, day.month, day.day) for day in days]
    if not stamps:
        return np.array([], dtype=np.float64)
    return np.asarray(date2num(stamps, _anchor_units(anchor), calendar=DECODE_CALENDAR), dtype=np.float64)
