# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date

from pydantic import BaseModel, Field, model_validator

from app.models.enums import LeavePolicyStatus


class CreateLeavePolicyRequest(BaseModel):
    """Request body for drafting a leave policy."""

    leave_type_id: uuid.UUID
    annual_entitlement: float = Field(ge=0)
    carry_limit: float = Field(default=0, ge=0)
    encash_limit: float = Field(default=0, ge=0)
    cycle_length_years: int = Field(default=1, ge=1)
    effective_date: date | None = None
    expiry_date: date | None = None
    minimum_service_months: int = Field(default=0, ge=0)
    allowed_employment_statuses: list[str] = Field(default_factory=list)
    remarks: str | None = None

    @model_validator(mode="after")
    def _check_dates(self) -> CreateLeavePolicyRequest:
        if self.effective_date and self.expiry_date and self.expiry_date < self.effective_date:
            raise ValueError("expiry_date must be on or after effective_date")
        return self


class UpdateLeavePolicyRequest(BaseModel):
    """Partial update of a policy. ``leave_type`` moves it to another leave type by name."""

    leave_type: str | None = Field(default=None, min_length=1, max_length=100)
    annual_entitlement: float | None = Field(default=None, ge=0)
    carry_limit: float | None = Field(default=None, ge=0)
    encash_limit: float | None = Field(default=None, ge=0)
    cycle_length_years: int | None = Field(default=None, ge=1)
    effective_date: date | None = None
    expiry_date: date | None = None
    minimum_service_months: int | None = Field(default=None, ge=0)
    allowed_employment_statuses: list[str] | None = None
    remarks: str | None = None


class LeavePolicyResponse(BaseModel):
    """Response schema for a leave policy."""

    id: uuid.UUID
    leave_type_id: uuid.UUID
    annual_entitlement: float
    carry_limit: float
    encash_limit: float
    cycle_length_years: int
    effective_date: date | None
    expiry_date: date | None
    status: LeavePolicyStatus
    minimum_service_months: int
    allowed_employment_statuses: list[str]
    remarks: str | None


class LeavePolicyListResponse(BaseModel):
    """List of leave policies."""

    items: list[LeavePolicyResponse]
    total: int


class EligibilityResult(BaseModel):
    """Outcome of a policy eligibility check."""

    eligible: bool
    reason: str | None = None
