from __future__ import annotations

from datetime import date

from sqlmodel import Field

from app.models.base import SoftDeleteMixin, TimestampMixin, UUIDBase


class LeaveYearConfiguration(UUIDBase, TimestampMixin, SoftDeleteMixin, table=True):
    """Cutoff period of one leave year, e.g. 2024-07-01 to 2025-06-30."""

    __tablename__ = "leave_year_configuration"

    cutoff_start_date: date = Field(index=True)
    cutoff_end_date: date
    # "<start year>-<end year>" of the cutoff dates, e.g. "2024-2025".
    leave_year: str = Field(max_length=9, index=True)
    remarks: str | None = None

    @property
    def balance_year(self) -> int:
        """Balances opened for this leave year are keyed by its starting calendar year."""
        return self.cutoff_start_date.year
