"""Date manipulation utilities"""

from datetime import date, datetime, timedelta
from typing import List, Tuple, Union


def generate_date_range(start: date, end: date) -> List[date]:
    """Generate list of dates from start to end (inclusive)"""
    days = (end - start).days + 1
    return [start + timedelta(days=i) for i in range(days)]


def month_bounds(today: date, months_back: int = 0) -> Tuple[date, date]:
    """
    Return [first day, first day of next month) for the calendar month
    `months_back` months before the month containing `today`.
    """
    month_index = today.year * 12 + (today.month - 1) - months_back
    start = date(month_index // 12, month_index % 12 + 1, 1)
    next_index = month_index + 1
    end = date(next_index // 12, next_index % 12 + 1, 1)
    return start, end


def parse_date(value: Union[str, date, datetime]) -> date:
    """Accept ISO dates, ISO datetimes, or date objects and return a date"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return datetime.fromisoformat(text).date()


def short_label(day: date) -> str:
    """Chart label such as 'Oct 5'"""
    return f"{day.strftime('%b')} {day.day}"
