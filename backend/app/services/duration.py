from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

from app.exceptions import BadRequestException
from app.repositories.holiday import HolidayRepository

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import date

    from sqlalchemy.ext.asyncio import AsyncSession

HALF_DAY = 0.5

_HOLIDAY_ONLY_MESSAGE = (
    "All dates in the leave request period are holidays. Cannot create leave request for holiday dates only."
)
_INVALID_RANGE_MESSAGE = "Invalid date range: total days must be greater than 0"


class DayCount(BaseModel):
    """Result of resolving how many leave days a date range consumes."""

    total_days: float
    calendar_days: int
    holiday_count: int

    @property
    def is_holiday_only(self) -> bool:
        return self.holiday_count >= self.calendar_days


def calendar_days(start: date, end: date) -> int:
    """Inclusive number of calendar days between start and end."""
    return (end - start).days + 1


def count_holidays_in_range(holidays: Iterable[date], start: date, end: date) -> int:
    """Count distinct holiday dates that fall within [start, end]."""
    return len({d for d in holidays if start <= d <= end})


def total_days(start: date, end: date, holiday_count: int) -> int:
    """Calendar days in range minus holidays, never negative."""
    return max(0, calendar_days(start, end) - holiday_count)


def resolve_total_days(
    start: date,
    end: date,
    holidays: Iterable[date],
    explicit_total: float | None = None,
    is_half_day: bool = False,
) -> DayCount:
    """Pick the total for a request.

    An explicit caller total wins, then the half-day shortcut for a single
    date, then the calculated count. Holidays are always counted so the
    holiday-only case can still be reported.
    """
    days = calendar_days(start, end)
    holiday_count = count_holidays_in_range(holidays, start, end)

    if explicit_total is not None:
        total = float(explicit_total)
    elif is_half_day and start == end:
        total = HALF_DAY
    else:
        total = float(total_days(start, end, holiday_count))

    return DayCount(total_days=total, calendar_days=days, holiday_count=holiday_count)


def ensure_positive_total(count: DayCount) -> None:
    """Raise when the resolved total does not consume any leave."""
    if count.total_days > 0:
        return
    if count.is_holiday_only:
        raise BadRequestException(_HOLIDAY_ONLY_MESSAGE)
    raise BadRequestException(_INVALID_RANGE_MESSAGE)


async def fetch_holiday_dates(
    session: AsyncSession,
    start: date,
    end: date,
    holidays: HolidayRepository | None = None,
) -> list[date]:
    """Fetch active holiday dates in the given range."""
    repository = holidays or HolidayRepository()
    return [h.date for h in await repository.find_by_date_range(start, end, session)]
