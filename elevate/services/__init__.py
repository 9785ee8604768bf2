"""Billing services.

Exports:
  - BillingGenerator: Monthly maintenance record generation (backfill, idempotent)
  - LedgerService: Monthly community ledger summaries
  - CommunityService: Rate configuration history and opening balance
  - MaintenanceService: Record listing and payment workflow
  - RateResolver: Applicable rate for a billing period
"""

from elevate.services.billing_service import BillingGenerator, GenerationReport
from elevate.services.community_service import CommunityService
from elevate.services.ledger_service import LedgerService, LedgerSummary
from elevate.services.maintenance_service import MaintenanceService
from elevate.services.rate_resolver import ChargeRate, RateResolver

__all__ = [
    "BillingGenerator",
    "GenerationReport",
    "CommunityService",
    "LedgerService",
    "LedgerSummary",
    "MaintenanceService",
    "ChargeRate",
    "RateResolver",
]
