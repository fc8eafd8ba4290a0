"""ISO-8601 week arithmetic used by the weekly inventory scheduler.

ISO weeks run Monday to Sunday. The Thursday of a week decides which year the
week belongs to, so the week-year can differ from the calendar year for a few
days around January 1st.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import NamedTuple


class IsoWeek(NamedTuple):
    week: int
    year: int


def _as_utc_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


def iso_week_of(value: date | datetime) -> IsoWeek:
    """Return the ISO week number and ISO week-year of ``value``.

    Aware datetimes are converted to UTC first; naive ones are taken as UTC.
    """
    day = _as_utc_date(value)
    thursday = day + timedelta(days=3 - day.weekday())
    week = (thursday.timetuple().tm_yday - 1) // 7 + 1
    return IsoWeek(week=week, year=thursday.year)


def sunday_of(week: int, year: int) -> date:
    """Return the Sunday closing ISO week ``week`` of ``year``."""
    jan4 = date(year, 1, 4)
    week1_monday = jan4 - timedelta(days=jan4.weekday())
    return week1_monday + timedelta(weeks=week - 1, days=6)


def last_iso_week_of_year(year: int) -> int:
    # December 28th always falls in the last ISO week of its year.
    return iso_week_of(date(year, 12, 28)).week


def previous_iso_week(week: int, year: int) -> IsoWeek:
    if week > 1:
        return IsoWeek(week=week - 1, year=year)
    return IsoWeek(week=last_iso_week_of_year(year - 1), year=year - 1)
