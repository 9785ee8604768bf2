"""Maintenance record queries and the resident payment workflow.

Status flow: Pending -> Submitted (resident submits payment proof) -> Paid (verified by
an administrator). Administrators may also mark a Pending record as Paid directly.
"""

import logging
from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import Session

from elevate.models import MaintenanceRecord, MaintenanceStatus, User, UserRole
from elevate.services.errors import (
    InvalidTransitionError,
    PermissionDeniedError,
    RecordNotFoundError,
)

logger = logging.getLogger(__name__)

VERIFIER_ROLES = frozenset({UserRole.ADMIN, UserRole.SUPER_ADMIN, UserRole.HELPDESK_ADMIN})


class MaintenanceService:
    """Service for maintenance record reads and status transitions."""

    def __init__(self, db_session: Session):
        """Initialize with database session."""
        self.db = db_session

    def list_records(self, community_id: int, user_id: int | None = None) -> list[MaintenanceRecord]:
        """List records of a community, newest period first.

        Args:
            community_id: Community to list
            user_id: Restrict to one resident's records (optional)

        Returns:
            List of MaintenanceRecord objects
        """
        stmt = select(MaintenanceRecord).where(MaintenanceRecord.community_id == community_id)
        if user_id is not None:
            stmt = stmt.where(MaintenanceRecord.user_id == user_id)
        stmt = stmt.order_by(MaintenanceRecord.period_date.desc(), MaintenanceRecord.unit_id)
        return list(self.db.scalars(stmt))

    def submit_payment(
        self,
        record_id: int,
        user_id: int,
        transaction_ref: str,
        transaction_date: date,
        receipt_url: str | None = None,
    ) -> MaintenanceRecord:
        """Resident submits payment proof for one of their own records.

        Raises:
            RecordNotFoundError: If the record does not exist or belongs to someone else
            InvalidTransitionError: If the record is already paid
        """
        record = self.db.get(MaintenanceRecord, record_id)
        if record is None or record.user_id != user_id:
            raise RecordNotFoundError(record_id)
        if record.status == MaintenanceStatus.PAID:
            raise InvalidTransitionError(f"Maintenance record {record_id} is already paid")

        record.status = MaintenanceStatus.SUBMITTED
        record.upi_transaction_id = transaction_ref
        record.transaction_date = transaction_date
        record.payment_receipt_url = receipt_url
        self.db.commit()

        logger.info("Payment submitted for maintenance record %s by user %s", record_id, user_id)
        return record

    def verify_payment(self, record_id: int, verifier: User) -> MaintenanceRecord:
        """Mark a record as paid.

        Raises:
            PermissionDeniedError: If the verifier lacks an admin role or owns the record
            RecordNotFoundError: If the record does not exist
            InvalidTransitionError: If the record is already paid
        """
        if verifier.role not in VERIFIER_ROLES:
            raise PermissionDeniedError(f"Role {verifier.role} cannot verify payments")

        record = self.db.get(MaintenanceRecord, record_id)
        if record is None:
            raise RecordNotFoundError(record_id)
        if record.user_id == verifier.id:
            raise PermissionDeniedError("You cannot verify your own payments")
        if record.status == MaintenanceStatus.PAID:
            raise InvalidTransitionError(f"Maintenance record {record_id} is already paid")

        record.status = MaintenanceStatus.PAID
        self.db.commit()

        logger.info("Payment verified for maintenance record %s by user %s", record_id, verifier.id)
        return record


__all__ = ["MaintenanceService", "VERIFIER_ROLES"]
