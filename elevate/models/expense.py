"""Expense ORM model - community spending subject to approval."""

import datetime
from decimal import Decimal
from enum import Enum

from sqlalchemy import Date, ForeignKey, Index, Numeric, String, Text
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column

from elevate.models import Base, BaseModel, enum_values


class ExpenseStatus(str, Enum):
    """Approval status of an expense."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class Expense(Base, BaseModel):
    """Community expense record.

    Only approved expenses count toward the community ledger.
    """

    __tablename__ = "expenses"

    community_id: Mapped[int] = mapped_column(
        ForeignKey("communities.id"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text(), nullable=True)
    amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2), nullable=False
    )
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    status: Mapped[ExpenseStatus] = mapped_column(
        SQLEnum(ExpenseStatus, values_callable=enum_values, native_enum=False, length=20),
        nullable=False,
        default=ExpenseStatus.PENDING,
    )

    __table_args__ = (Index("idx_expense_community_date", "community_id", "date"),)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<Expense(id={self.id}, amount={self.amount}, date={self.date}, status={self.status})>"


__all__ = ["Expense", "ExpenseStatus"]
