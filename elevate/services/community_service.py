"""Community billing settings: rate configuration history and opening balance."""

import logging
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from elevate.models import Community, RateConfiguration
from elevate.schemas.billing import RateConfigurationPayload
from elevate.services.errors import CommunityNotFoundError, OpeningBalanceLockedError

logger = logging.getLogger(__name__)


class CommunityService:
    """Service for the billing-related settings of a community.

    Rate changes are recorded as new dated configurations instead of overwriting the
    legacy rate, so past periods keep their original rate on backfill.
    """

    def __init__(self, db_session: Session):
        """Initialize with database session."""
        self.db = db_session

    def get_community(self, community_id: int) -> Community:
        """Get community by ID.

        Raises:
            CommunityNotFoundError: If the community does not exist
        """
        community = self.db.get(Community, community_id)
        if community is None:
            raise CommunityNotFoundError(community_id)
        return community

    def list_rate_history(self, community_id: int) -> list[RateConfiguration]:
        """Rate configurations of a community, newest effective date first."""
        self.get_community(community_id)
        return list(
            self.db.scalars(
                select(RateConfiguration)
                .where(RateConfiguration.community_id == community_id)
                .order_by(RateConfiguration.effective_date.desc(), RateConfiguration.id.desc())
            )
        )

    def add_rate_configuration(
        self, community_id: int, payload: RateConfigurationPayload
    ) -> RateConfiguration:
        """Record a rate that applies from ``payload.effective_date`` onwards.

        Args:
            community_id: Community the rate belongs to
            payload: Validated rate configuration

        Returns:
            Created RateConfiguration
        """
        self.get_community(community_id)

        config = RateConfiguration(
            community_id=community_id,
            effective_date=payload.effective_date,
            maintenance_rate=payload.maintenance_rate,
            fixed_maintenance_amount=payload.fixed_maintenance_amount,
        )
        self.db.add(config)
        self.db.commit()

        logger.info(
            "Added rate configuration for community %s effective %s: rate=%s, fixed=%s",
            community_id,
            payload.effective_date,
            payload.maintenance_rate,
            payload.fixed_maintenance_amount,
        )
        return config

    def set_opening_balance(self, community_id: int, amount: Decimal) -> Community:
        """Set the opening balance once and lock it.

        Raises:
            OpeningBalanceLockedError: If the balance was already secured
        """
        community = self.get_community(community_id)
        if community.opening_balance_locked:
            raise OpeningBalanceLockedError(community_id)

        community.opening_balance = amount
        community.opening_balance_locked = True
        self.db.commit()

        logger.info("Opening balance for community %s secured: %s", community_id, amount)
        return community

    def approve_opening_balance_update(self, community_id: int, amount: Decimal) -> Community:
        """Apply an approved modification to a locked opening balance."""
        community = self.get_community(community_id)
        previous = community.opening_balance

        community.opening_balance = amount
        community.opening_balance_locked = True
        self.db.commit()

        logger.info(
            "Opening balance for community %s changed from %s to %s", community_id, previous, amount
        )
        return community


__all__ = ["CommunityService"]
