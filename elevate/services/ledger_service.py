"""Monthly community ledger: opening balance, carried balance, collections and expenses.

Formula for a target month [start, next_month_start):
    previous_balance = opening_balance + paid bills before start - approved expenses before start
    closing_balance  = previous_balance + paid bills in month - approved expenses in month

Pending and submitted bills of the month are reported separately and never enter a
balance. Records dated on or after next_month_start are ignored, so the summary answers
"as of the end of the target month".
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from elevate.models import Community, Expense, ExpenseStatus, MaintenanceRecord, MaintenanceStatus
from elevate.services.errors import CommunityNotFoundError
from elevate.services.money import ZERO, coerce_amount
from elevate.services.period_calculator import month_start, next_month, parse_date

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LedgerSummary:
    """Ledger figures for one community and month."""

    previous_balance: Decimal
    collected_this_month: Decimal
    pending_this_month: Decimal
    expenses_this_month: Decimal
    closing_balance: Decimal


def month_bounds(target_month: object) -> tuple[date, date]:
    """Return (first day of target month, first day of the following month)."""
    start = month_start(target_month)
    return start, next_month(start)


def _status_value(status: Any) -> str:
    # Handle both enum and raw string statuses
    return status.value if hasattr(status, "value") else str(status)


def aggregate_ledger(
    billing_records: Iterable[Any],
    expense_records: Iterable[Any],
    target_month: object,
    opening_balance: object = None,
) -> LedgerSummary:
    """Aggregate bills and expenses into a ledger summary.

    Every record lands in exactly one partition: before the month, inside it, or after
    it (ignored). Missing or non-numeric amounts count as zero.

    Args:
        billing_records: Objects with ``amount``, ``status`` and ``period_date``
        expense_records: Objects with ``amount``, ``status`` and ``date``
        target_month: Any date inside the target month
        opening_balance: Starting balance (None counts as zero)

    Returns:
        LedgerSummary
    """
    start, next_start = month_bounds(target_month)

    prior_income = ZERO
    collected = ZERO
    pending = ZERO
    for record in billing_records:
        period = parse_date(record.period_date)
        if period >= next_start:
            continue
        amount = coerce_amount(record.amount)
        is_paid = _status_value(record.status) == MaintenanceStatus.PAID.value
        if period < start:
            if is_paid:
                prior_income += amount
        elif is_paid:
            collected += amount
        else:
            pending += amount

    prior_expense = ZERO
    expenses = ZERO
    for expense in expense_records:
        if _status_value(expense.status) != ExpenseStatus.APPROVED.value:
            continue
        spent_on = parse_date(expense.date)
        if spent_on >= next_start:
            continue
        if spent_on < start:
            prior_expense += coerce_amount(expense.amount)
        else:
            expenses += coerce_amount(expense.amount)

    previous_balance = coerce_amount(opening_balance) + prior_income - prior_expense
    return LedgerSummary(
        previous_balance=previous_balance,
        collected_this_month=collected,
        pending_this_month=pending,
        expenses_this_month=expenses,
        closing_balance=previous_balance + collected - expenses,
    )


class LedgerService:
    """Read-only ledger queries over the community store."""

    def __init__(self, session: Session):
        """Initialize with database session."""
        self.session = session

    def summarize(
        self,
        community_id: int,
        target_month: object,
        opening_balance: object = None,
    ) -> LedgerSummary:
        """Ledger summary for a community as of the end of ``target_month``.

        Args:
            community_id: Community to summarize
            target_month: Any date inside the target month
            opening_balance: Override; defaults to the community's stored opening balance

        Returns:
            LedgerSummary

        Raises:
            CommunityNotFoundError: If the community does not exist
            MalformedDateError: If target_month is not a date
        """
        _, next_start = month_bounds(target_month)

        community = self.session.get(Community, community_id)
        if community is None:
            raise CommunityNotFoundError(community_id)
        if opening_balance is None:
            opening_balance = community.opening_balance

        billing_rows = self.session.execute(
            select(
                MaintenanceRecord.amount,
                MaintenanceRecord.status,
                MaintenanceRecord.period_date,
            ).where(
                MaintenanceRecord.community_id == community_id,
                MaintenanceRecord.period_date < next_start,
            )
        ).all()
        expense_rows = self.session.execute(
            select(Expense.amount, Expense.status, Expense.date).where(
                Expense.community_id == community_id,
                Expense.status == ExpenseStatus.APPROVED,
                Expense.date < next_start,
            )
        ).all()

        summary = aggregate_ledger(billing_rows, expense_rows, target_month, opening_balance)
        logger.debug(
            "Ledger for community %s month %s: %s", community_id, month_start(target_month), summary
        )
        return summary


__all__ = ["LedgerSummary", "month_bounds", "aggregate_ledger", "LedgerService"]
