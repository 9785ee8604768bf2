"""SQLAlchemy base model with common fields and model exports."""

from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import DateTime
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

# Base class for all models
Base = declarative_base()


class BaseModel:
    """Base model with common timestamp fields."""

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )


def enum_values(enum_cls: type[Enum]) -> list[str]:
    """Persist enum values ("Paid") rather than member names ("PAID")."""
    return [member.value for member in enum_cls]


# Import models to register them with Base (after Base is defined)
# This must be after Base declaration to avoid circular imports
from elevate.models.community import Community, CommunityStatus  # noqa: E402
from elevate.models.expense import Expense, ExpenseStatus  # noqa: E402
from elevate.models.maintenance_record import MaintenanceRecord, MaintenanceStatus  # noqa: E402
from elevate.models.rate_configuration import RateConfiguration  # noqa: E402
from elevate.models.unit import Unit  # noqa: E402
from elevate.models.user import User, UserRole  # noqa: E402

__all__ = [
    "Base",
    "BaseModel",
    "Community",
    "CommunityStatus",
    "Expense",
    "ExpenseStatus",
    "MaintenanceRecord",
    "MaintenanceStatus",
    "RateConfiguration",
    "Unit",
    "User",
    "UserRole",
]
