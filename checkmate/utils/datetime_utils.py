import calendar
from datetime import date, datetime, timedelta
from typing import List, Optional

import pytz

DEFAULT_TIMEZONE = "Asia/Seoul"
KEY_FORMAT = "%Y-%m-%d"
DISPLAY_FORMAT = "%Y.%m.%d"

def now_local(tz_name: str = DEFAULT_TIMEZONE) -> datetime:
    return datetime.now(pytz.timezone(tz_name))

def today(tz_name: str = DEFAULT_TIMEZONE) -> date:
    return now_local(tz_name).date()

def to_key(d: date) -> str:
    """History key for a calendar day (YYYY-MM-DD)"""
    return d.strftime(KEY_FORMAT)

def parse_key(date_str: str) -> date:
    return datetime.strptime(date_str, KEY_FORMAT).date()

def format_display(d: date) -> str:
    return d.strftime(DISPLAY_FORMAT)

def is_valid_key(date_str: str) -> bool:
    try:
        parse_key(date_str)
    except (TypeError, ValueError):
        return False
    return True

def iso_week_number(d: date) -> int:
    """
    ISO-8601 week number.

    The Thursday of the week decides which year the week belongs to, and
    January 4th always falls into week 1 of its year.
    """
    thursday = d - timedelta(days=d.weekday()) + timedelta(days=3)
    first_thursday = date(thursday.year, 1, 4)
    diff = (thursday - first_thursday).days
    return 1 + round(diff / 7)

def monday_of_week(d: date) -> date:
    # Sunday is the 7th day of the week that started on the previous Monday
    return d - timedelta(days=d.weekday())

def week_dates(d: date, workdays_only: bool = False) -> List[date]:
    """Monday-anchored dates of the week containing `d` (Mon-Sun or Mon-Fri)"""
    monday = monday_of_week(d)
    length = 5 if workdays_only else 7
    return [monday + timedelta(days=i) for i in range(length)]

def week_keys(d: date, workdays_only: bool = False) -> List[str]:
    return [to_key(day) for day in week_dates(d, workdays_only)]

def week_seed(d: date) -> int:
    """Pairing seed shared by every day of the week: year * 100 + week number"""
    return d.year * 100 + iso_week_number(d)

def month_weeks(year: int, month: int) -> List[List[Optional[date]]]:
    """
    Sunday-first calendar rows for a month.

    Cells outside the month are None, so every row has exactly 7 entries.
    """
    cal = calendar.Calendar(firstweekday=calendar.SUNDAY)
    rows = []
    for week in cal.monthdatescalendar(year, month):
        rows.append([day if day.month == month else None for day in week])
    return rows
