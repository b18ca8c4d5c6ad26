"""
Clock and Calendar Helpers

Real-time clock used for transaction timestamps and daily card windows,
plus month/quarter arithmetic for the simulated savings calendar.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone, date, timedelta
from typing import Optional
import calendar


class Clock(ABC):
    """Source of the current real date/time"""

    @abstractmethod
    def now(self) -> datetime:
        """Current timezone-aware UTC datetime"""
        pass

    def today(self) -> date:
        """Current calendar date (UTC)"""
        return self.now().date()


class SystemClock(Clock):
    """Wall clock"""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(Clock):
    """Clock frozen at a given moment; advanced manually"""

    def __init__(self, moment: Optional[datetime] = None):
        moment = moment or datetime.now(timezone.utc)
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        self._moment = moment

    def now(self) -> datetime:
        return self._moment

    def advance(self, delta: timedelta) -> datetime:
        """Move the clock forward and return the new moment"""
        self._moment = self._moment + delta
        return self._moment

    def set(self, moment: datetime) -> None:
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        self._moment = moment


def add_months(start_date: date, months: int) -> date:
    """Add months to a date, clamping the day to the end of the target month"""
    month = start_date.month - 1 + months
    year = start_date.year + month // 12
    month = month % 12 + 1
    day = min(start_date.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def quarter_of(value: date) -> int:
    """Calendar quarter (1-4) of a date"""
    return (value.month - 1) // 3 + 1


def same_month(a: date, b: date) -> bool:
    return a.year == b.year and a.month == b.month


def same_quarter(a: date, b: date) -> bool:
    return a.year == b.year and quarter_of(a) == quarter_of(b)
