"""Unit ORM model for billable flats/houses."""

from datetime import date
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from elevate.models import Base, BaseModel


class Unit(Base, BaseModel):
    """Model representing a flat or house inside a community, assigned to one resident.

    Units without ``maintenance_start_date`` are never billed.
    """

    __tablename__ = "units"

    community_id: Mapped[int] = mapped_column(
        ForeignKey("communities.id"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"),
        nullable=False,
        index=True,
        comment="Resident billed for this unit",
    )
    flat_number: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )
    flat_size: Mapped[Decimal | None] = mapped_column(
        Numeric(10, 2),
        nullable=True,
        comment="Floor area used by rate-based communities",
    )
    maintenance_start_date: Mapped[date | None] = mapped_column(
        Date,
        nullable=True,
        comment="First billable day; null means not billable",
    )

    # Relationships
    community: Mapped["Community"] = relationship(  # noqa: F821
        "Community",
        back_populates="units",
    )
    user: Mapped["User"] = relationship(  # noqa: F821
        "User",
        back_populates="units",
    )

    __table_args__ = (Index("idx_unit_community_start", "community_id", "maintenance_start_date"),)

    def __repr__(self) -> str:
        return (
            f"<Unit(id={self.id}, community_id={self.community_id}, user_id={self.user_id}, "
            f"flat_number={self.flat_number!r}, flat_size={self.flat_size}, "
            f"maintenance_start_date={self.maintenance_start_date})>"
        )


__all__ = ["Unit"]
