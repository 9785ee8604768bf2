"""Pydantic schemas for billing and ledger payloads.

Domain objects use snake_case; the wire format uses camelCase. Every mapping is declared
here explicitly and validated on construction.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from elevate.models import MaintenanceStatus


class RateConfigurationPayload(BaseModel):
    """Request payload for adding a dated rate configuration."""

    maintenance_rate: Decimal | None = Field(
        None, alias="maintenanceRate", ge=0, description="Per-area rate"
    )
    fixed_maintenance_amount: Decimal | None = Field(
        None, alias="fixedMaintenanceAmount", ge=0, description="Fixed monthly amount"
    )
    effective_date: date = Field(..., alias="effectiveDate", description="First date the rate applies")

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="after")
    def require_a_rate(self) -> "RateConfigurationPayload":
        if self.maintenance_rate is None and self.fixed_maintenance_amount is None:
            raise ValueError("Either maintenanceRate or fixedMaintenanceAmount is required")
        return self


class RateConfigurationResponse(BaseModel):
    """Response schema for a rate configuration."""

    id: int
    community_id: int = Field(serialization_alias="communityId")
    maintenance_rate: float | None = Field(None, serialization_alias="maintenanceRate")
    fixed_maintenance_amount: float | None = Field(None, serialization_alias="fixedMaintenanceAmount")
    effective_date: date = Field(serialization_alias="effectiveDate")
    created_at: datetime = Field(serialization_alias="createdAt")

    model_config = ConfigDict(from_attributes=True)


class MaintenanceRecordResponse(BaseModel):
    """Response schema for a maintenance record."""

    id: int
    user_id: int = Field(serialization_alias="userId")
    unit_id: int = Field(serialization_alias="unitId")
    community_id: int = Field(serialization_alias="communityId")
    amount: int
    period_date: date = Field(serialization_alias="periodDate")
    status: MaintenanceStatus
    upi_transaction_id: str | None = Field(None, serialization_alias="upiTransactionId")
    transaction_date: date | None = Field(None, serialization_alias="transactionDate")

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)


class LedgerRequest(BaseModel):
    """Request payload for a monthly ledger summary."""

    community_id: int = Field(..., gt=0)
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=1900, le=9999)
    opening_balance: Decimal | None = Field(None, alias="openingBalance")

    model_config = ConfigDict(populate_by_name=True)

    @property
    def target_month(self) -> date:
        return date(self.year, self.month, 1)


class LedgerSummaryResponse(BaseModel):
    """Response schema for a monthly ledger summary."""

    previous_balance: Decimal = Field(serialization_alias="previousBalance")
    collected_this_month: Decimal = Field(serialization_alias="collectedThisMonth")
    pending_this_month: Decimal = Field(serialization_alias="pendingThisMonth")
    expenses_this_month: Decimal = Field(serialization_alias="expensesThisMonth")
    closing_balance: Decimal = Field(serialization_alias="closingBalance")

    model_config = ConfigDict(from_attributes=True)


class GenerationReportResponse(BaseModel):
    """Response schema for a billing generation run."""

    horizon: date = Field(description="Last billed period (first day of the as-of month)")
    communities_processed: int = Field(serialization_alias="communitiesProcessed")
    records_created: int = Field(serialization_alias="recordsCreated")
    duplicates_ignored: int = Field(serialization_alias="duplicatesIgnored")
    units_skipped: int = Field(serialization_alias="unitsSkipped")
    failed_communities: list[int] = Field(serialization_alias="failedCommunities")
    cancelled: bool
    partial: bool

    model_config = ConfigDict(from_attributes=True)


__all__ = [
    "RateConfigurationPayload",
    "RateConfigurationResponse",
    "MaintenanceRecordResponse",
    "LedgerRequest",
    "LedgerSummaryResponse",
    "GenerationReportResponse",
]
