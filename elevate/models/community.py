"""Community ORM model holding classification, legacy rates and opening balance."""

from decimal import Decimal
from enum import Enum

from sqlalchemy import Boolean, Numeric, String
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from elevate.models import Base, BaseModel, enum_values


class CommunityStatus(str, Enum):
    """Provisioning status of a community."""

    ACTIVE = "active"
    DISABLED = "disabled"


class Community(Base, BaseModel):
    """Model representing a residential community (society, township, standalone block).

    The billing engine treats communities as read-only. ``community_type`` decides how
    the monthly charge is derived: any type containing "standalone" bills a fixed amount
    per unit, every other type bills ``rate * flat_size``.

    ``maintenance_rate`` and ``fixed_maintenance_amount`` are the legacy single-rate fields,
    used only when no dated rate configuration covers a period.
    """

    __tablename__ = "communities"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Community display name",
    )
    status: Mapped[CommunityStatus] = mapped_column(
        SQLEnum(CommunityStatus, values_callable=enum_values, native_enum=False, length=20),
        nullable=False,
        default=CommunityStatus.ACTIVE,
        index=True,
        comment="Only active communities are billed",
    )
    community_type: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
        comment="Classification, e.g. 'High-Rise Apartment' or 'Standalone Apartment'",
    )

    # Legacy flat rate fields
    maintenance_rate: Mapped[Decimal | None] = mapped_column(
        Numeric(10, 2),
        nullable=True,
        comment="Legacy per-area rate (per sq. ft.)",
    )
    fixed_maintenance_amount: Mapped[Decimal | None] = mapped_column(
        Numeric(12, 2),
        nullable=True,
        comment="Legacy fixed monthly amount for standalone communities",
    )

    # Ledger starting point
    opening_balance: Mapped[Decimal | None] = mapped_column(
        Numeric(14, 2),
        nullable=True,
        comment="Pre-system financial history; treated as 0 when absent",
    )
    opening_balance_locked: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        comment="Set once the opening balance has been secured",
    )

    # Relationships
    units: Mapped[list["Unit"]] = relationship(  # noqa: F821
        "Unit",
        back_populates="community",
    )
    rate_configurations: Mapped[list["RateConfiguration"]] = relationship(  # noqa: F821
        "RateConfiguration",
        back_populates="community",
        order_by="RateConfiguration.effective_date.desc()",
    )

    def __repr__(self) -> str:
        return (
            f"<Community(id={self.id}, name={self.name!r}, status={self.status}, "
            f"community_type={self.community_type!r})>"
        )


__all__ = ["Community", "CommunityStatus"]
