"""
Calendar bucketing for the analytics dashboard.

Each reporting range has one strategy that owns a fixed, ordered label set and
maps a local timestamp to a bucket index (or None when the moment falls
outside every bucket, e.g. an order at 9pm on the hourly chart). Window
arithmetic for the ranges lives here too so it can be tested against fixed
calendar dates without a database.
"""
import calendar
from datetime import datetime, timedelta, timezone, tzinfo
from enum import Enum
from typing import Optional, Tuple
from zoneinfo import ZoneInfo


class TimeRange(str, Enum):
    TODAY = "Today"
    WEEK = "Week"
    MONTH = "Month"
    YEAR = "Year"

    @classmethod
    def parse(cls, value) -> "TimeRange":
        """Case-insensitive lookup by label. Raises ValueError when unknown."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == text:
                return member
        raise ValueError(f"Unknown time range: {value}")


def _hour_label(hour: int) -> str:
    suffix = "am" if hour < 12 else "pm"
    display = hour % 12 or 12
    return f"{display}{suffix}"


class BucketStrategy:
    labels: Tuple[str, ...] = ()

    def index_for(self, moment: datetime) -> Optional[int]:
        raise NotImplementedError

    def __len__(self):
        return len(self.labels)


class HourOfDay(BucketStrategy):
    def __init__(self, first_hour: int = 10, last_hour: int = 17):
        self.first_hour = first_hour
        self.last_hour = last_hour
        self.labels = tuple(_hour_label(h) for h in range(first_hour, last_hour + 1))

    def index_for(self, moment):
        if self.first_hour <= moment.hour <= self.last_hour:
            return moment.hour - self.first_hour
        return None


class DayOfWeek(BucketStrategy):
    labels = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

    def index_for(self, moment):
        return moment.weekday()


class WeekOfMonth(BucketStrategy):
    """Days 1-7 are Week 1, 8-14 Week 2, 15-21 Week 3, 22 onwards Week 4."""
    labels = ("Week 1", "Week 2", "Week 3", "Week 4")

    def index_for(self, moment):
        return min((moment.day - 1) // 7, len(self.labels) - 1)


class MonthOfYear(BucketStrategy):
    labels = tuple(calendar.month_abbr[m] for m in range(1, 13))

    def index_for(self, moment):
        return moment.month - 1


STRATEGIES = {
    TimeRange.TODAY: HourOfDay(),
    TimeRange.WEEK: DayOfWeek(),
    TimeRange.MONTH: WeekOfMonth(),
    TimeRange.YEAR: MonthOfYear(),
}


def strategy_for(time_range: TimeRange) -> BucketStrategy:
    return STRATEGIES[TimeRange.parse(time_range)]


def subtract_months(moment: datetime, months: int) -> datetime:
    """Calendar month subtraction, clamping the day (Mar 31 - 1 month = Feb 28/29)."""
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def window_start(time_range: TimeRange, now: datetime) -> datetime:
    time_range = TimeRange.parse(time_range)
    if time_range is TimeRange.TODAY:
        return now.replace(hour=0, minute=0, second=0, microsecond=0)
    if time_range is TimeRange.WEEK:
        return now - timedelta(days=7)
    if time_range is TimeRange.MONTH:
        return subtract_months(now, 1)
    return subtract_months(now, 12)


def reporting_window(time_range: TimeRange, now: datetime) -> Tuple[datetime, datetime]:
    """
    Returns (current_start, previous_start). The current window is
    [current_start, now]; the comparison window has the same duration and ends
    where the current one starts.
    """
    start = window_start(time_range, now)
    return start, start - (now - start)


def reporting_timezone(name: str) -> tzinfo:
    if name.strip().upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)
