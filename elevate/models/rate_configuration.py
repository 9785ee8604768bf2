"""Dated maintenance rate configuration ORM model."""

from datetime import date
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Index, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship

from elevate.models import Base, BaseModel


class RateConfiguration(Base, BaseModel):
    """A maintenance rate that applies from ``effective_date`` onwards.

    For a billing period P the applicable configuration is the one with the greatest
    ``effective_date`` on or before P. Earlier periods keep using whichever
    configuration was in force at the time, so rate changes never rewrite history.
    """

    __tablename__ = "maintenance_configurations"

    community_id: Mapped[int] = mapped_column(
        ForeignKey("communities.id"),
        nullable=False,
        index=True,
    )
    effective_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        comment="First date this configuration applies",
    )
    maintenance_rate: Mapped[Decimal | None] = mapped_column(
        Numeric(10, 2),
        nullable=True,
        comment="Per-area rate",
    )
    fixed_maintenance_amount: Mapped[Decimal | None] = mapped_column(
        Numeric(12, 2),
        nullable=True,
        comment="Fixed monthly amount (standalone communities)",
    )

    community: Mapped["Community"] = relationship(  # noqa: F821
        "Community",
        back_populates="rate_configurations",
    )

    __table_args__ = (Index("idx_rate_config_community_effective", "community_id", "effective_date"),)

    def __repr__(self) -> str:
        return (
            f"<RateConfiguration(id={self.id}, community_id={self.community_id}, "
            f"effective_date={self.effective_date}, maintenance_rate={self.maintenance_rate}, "
            f"fixed_maintenance_amount={self.fixed_maintenance_amount})>"
        )


__all__ = ["RateConfiguration"]
