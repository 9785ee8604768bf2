"""Maintenance record ORM model: one monthly bill per unit."""

from datetime import date
from enum import Enum

from sqlalchemy import Date, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from elevate.models import Base, BaseModel, enum_values


class MaintenanceStatus(str, Enum):
    """Payment status of a maintenance record."""

    PENDING = "Pending"
    """Generated, awaiting payment"""

    SUBMITTED = "Submitted"
    """Resident submitted payment proof, awaiting verification"""

    PAID = "Paid"
    """Payment verified by an administrator"""


class MaintenanceRecord(Base, BaseModel):
    """Monthly maintenance bill for a single unit.

    ``period_date`` is always the first day of the billed month. The unique
    (unit_id, period_date) constraint is the idempotency key of billing generation:
    overlapping runs that try to bill the same month twice are rejected here.
    """

    __tablename__ = "maintenance_records"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    unit_id: Mapped[int] = mapped_column(
        ForeignKey("units.id"),
        nullable=False,
        index=True,
    )
    community_id: Mapped[int] = mapped_column(
        ForeignKey("communities.id"),
        nullable=False,
        index=True,
    )
    period_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        comment="First day of the billed month (UTC)",
    )
    amount: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Rounded amount in whole currency units",
    )
    status: Mapped[MaintenanceStatus] = mapped_column(
        SQLEnum(MaintenanceStatus, values_callable=enum_values, native_enum=False, length=20),
        nullable=False,
        default=MaintenanceStatus.PENDING,
        index=True,
    )

    # Payment submission details
    upi_transaction_id: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
        comment="Transaction reference supplied by the resident",
    )
    payment_receipt_url: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
    )
    transaction_date: Mapped[date | None] = mapped_column(
        Date,
        nullable=True,
    )

    unit: Mapped["Unit"] = relationship("Unit")  # noqa: F821

    __table_args__ = (
        UniqueConstraint("unit_id", "period_date", name="uq_maintenance_record_unit_period"),
        Index("idx_maintenance_community_period", "community_id", "period_date"),
        Index("idx_maintenance_community_status", "community_id", "status"),
    )

    def __repr__(self) -> str:
        return (
            f"<MaintenanceRecord(id={self.id}, unit_id={self.unit_id}, "
            f"period_date={self.period_date}, amount={self.amount}, status={self.status})>"
        )


__all__ = ["MaintenanceRecord", "MaintenanceStatus"]
