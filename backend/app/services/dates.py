"""Calendar-date handling for leave requests.

Leave dates are calendar dates, not instants. Date-only input such as
``"2024-06-03"`` is parsed straight into :class:`datetime.date`; only genuine
instants (``datetime`` values or ISO timestamps) are converted, using the
business timezone, before their calendar date is taken. Comparisons against
"today" always use the business timezone as well.
"""

from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

from app.config import get_settings
from app.exceptions import BadRequestException


def _business_tz(tz_name: str | None = None) -> ZoneInfo:
    return ZoneInfo(tz_name or get_settings().timezone)


def business_today(tz_name: str | None = None) -> date:
    """Return today's calendar date in the business timezone."""
    return datetime.now(_business_tz(tz_name)).date()


def instant_to_date(value: datetime, tz_name: str | None = None) -> date:
    """Calendar date of an instant in the business timezone.

    Naive datetimes are taken to be wall-clock values already in that zone.
    """
    if value.tzinfo is None:
        return value.date()
    return value.astimezone(_business_tz(tz_name)).date()


def to_calendar_date(value: date | datetime | str | None, field: str, tz_name: str | None = None) -> date:
    """Normalize a caller-supplied date into a calendar date.

    Raises BadRequestException when the value is missing or cannot be parsed.
    """
    if value is None or value == "":
        raise BadRequestException(f"{field.capitalize()} date is required")
    if isinstance(value, datetime):
        return instant_to_date(value, tz_name)
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            if len(text) == 10:
                return date.fromisoformat(text)
            return instant_to_date(datetime.fromisoformat(text), tz_name)
        except ValueError:
            raise BadRequestException(f"Invalid {field} date") from None
    raise BadRequestException(f"Invalid {field} date")


def date_key(value: date) -> str:
    """Return the ``YYYY-MM-DD`` key used for ordering and display."""
    if isinstance(value, datetime):
        value = instant_to_date(value)
    return value.isoformat()
