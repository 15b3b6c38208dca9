"""Calendar helpers shared by the validators, the log queries and the generators.

Dates travel through the API and the database as ``YYYY-MM-DD`` strings and
months as ``YYYY-MM``; these helpers are the only place that turns them into
``datetime.date`` values.
"""

import re
from datetime import date, timedelta

ISO_DATE_RE = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}\Z")
MONTH_RE = re.compile(r"^[0-9]{4}-[0-9]{2}\Z")
TIME_RE = re.compile(r"^([01][0-9]|2[0-3]):([0-5][0-9])\Z")

MIN_YEAR = 1900
MAX_YEAR = 2100


def has_iso_date_format(value: object) -> bool:
    return isinstance(value, str) and bool(ISO_DATE_RE.match(value))


def parse_iso_date(value: str) -> date | None:
    """Return the calendar date for ``value`` or None when it is not a real date."""
    if not has_iso_date_format(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def is_valid_iso_date(value: object) -> bool:
    """True only for ``YYYY-MM-DD`` strings naming a real calendar day."""
    return isinstance(value, str) and parse_iso_date(value) is not None


def is_valid_month(value: object) -> bool:
    """True for ``YYYY-MM`` strings with month 01-12 and a year in 1900-2100."""
    if not isinstance(value, str) or not MONTH_RE.match(value):
        return False
    year, month = int(value[:4]), int(value[5:])
    return MIN_YEAR <= year <= MAX_YEAR and 1 <= month <= 12


def is_valid_time(value: object) -> bool:
    return isinstance(value, str) and bool(TIME_RE.match(value))


def shift_date(value: str, days: int) -> str:
    return (date.fromisoformat(value) + timedelta(days=days)).isoformat()


def month_bounds(month: str) -> tuple[str, str]:
    """First and last ISO day of a ``YYYY-MM`` month."""
    year, mon = int(month[:4]), int(month[5:])
    first = date(year, mon, 1)
    next_first = date(year + 1, 1, 1) if mon == 12 else date(year, mon + 1, 1)
    return first.isoformat(), (next_first - timedelta(days=1)).isoformat()


def months_between(birthdate: str, on_date: date | None = None) -> int:
    """Whole calendar months from ``birthdate`` to ``on_date`` (today by default).

    Only year and month take part; the day of month is ignored.
    """
    born = date.fromisoformat(birthdate)
    today = on_date or date.today()
    return (today.year - born.year) * 12 + (today.month - born.month)


def week_ranges(start: str, end: str) -> list[dict]:
    """Monday-to-Sunday blocks covering a plan period.

    The first block starts on the Monday on or before ``start``. The number of
    blocks is the count of whole weeks between the two dates plus one.
    """
    start_day = date.fromisoformat(start)
    end_day = date.fromisoformat(end)
    total_weeks = (end_day - start_day).days // 7 + 1

    current = start_day - timedelta(days=start_day.weekday())
    weeks = []
    for index in range(total_weeks):
        weeks.append(
            {
                "week": index + 1,
                "start": current.isoformat(),
                "end": (current + timedelta(days=6)).isoformat(),
            }
        )
        current += timedelta(days=7)
    return weeks
