"""Resolve the maintenance rate applicable to a billing period.

Resolution is an ordered list of strategies. Each strategy may supply the per-area
rate, the fixed amount, both, or neither; a field left unset falls through to the next
strategy. The default chain is: dated configuration history, then the community's
legacy rate fields, then zero.
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, NamedTuple, Sequence

from elevate.services.money import ZERO, to_decimal
from elevate.services.period_calculator import parse_date

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChargeRate:
    """Charge formula inputs for one period."""

    rate_per_area: Decimal = ZERO
    fixed_amount: Decimal = ZERO

    @property
    def is_zero(self) -> bool:
        """No usable rate at all (ConfigurationMissing): the period is not billed."""
        return self.rate_per_area <= 0 and self.fixed_amount <= 0


class RateCandidate(NamedTuple):
    """What a single strategy could supply; None means "not set here"."""

    rate_per_area: Decimal | None
    fixed_amount: Decimal | None


class RateStrategy:
    """One step of the fallback chain."""

    name = "base"

    def candidate(self, community: Any, configs: Sequence[Any], period_date: date) -> RateCandidate:
        raise NotImplementedError


class ConfigurationHistoryStrategy(RateStrategy):
    """Most recent configuration whose effective date is on or before the period.

    ``configs`` must be ordered by effective date, newest first.
    """

    name = "configuration"

    def candidate(self, community: Any, configs: Sequence[Any], period_date: date) -> RateCandidate:
        for config in configs:
            if parse_date(config.effective_date) <= period_date:
                return RateCandidate(
                    to_decimal(config.maintenance_rate),
                    to_decimal(config.fixed_maintenance_amount),
                )
        return RateCandidate(None, None)


class LegacyCommunityRateStrategy(RateStrategy):
    """Single-rate fields stored on the community itself."""

    name = "legacy"

    def candidate(self, community: Any, configs: Sequence[Any], period_date: date) -> RateCandidate:
        return RateCandidate(
            to_decimal(getattr(community, "maintenance_rate", None)),
            to_decimal(getattr(community, "fixed_maintenance_amount", None)),
        )


class ZeroRateStrategy(RateStrategy):
    name = "zero"

    def candidate(self, community: Any, configs: Sequence[Any], period_date: date) -> RateCandidate:
        return RateCandidate(ZERO, ZERO)


DEFAULT_STRATEGIES: tuple[RateStrategy, ...] = (
    ConfigurationHistoryStrategy(),
    LegacyCommunityRateStrategy(),
    ZeroRateStrategy(),
)


class RateResolver:
    """Pure rate lookup; holds no state besides its strategy chain."""

    def __init__(self, strategies: Sequence[RateStrategy] | None = None):
        """Initialize with an ordered strategy chain (default: configuration, legacy, zero)."""
        self.strategies = tuple(strategies) if strategies is not None else DEFAULT_STRATEGIES

    def resolve(self, community: Any, configs: Sequence[Any], period_date: date) -> ChargeRate:
        """Resolve the charge rate for ``period_date``.

        Args:
            community: Object exposing legacy ``maintenance_rate`` / ``fixed_maintenance_amount``
            configs: Rate configurations ordered by effective date descending
            period_date: First day of the billed month

        Returns:
            ChargeRate; both fields zero when nothing is configured
        """
        rate_per_area: Decimal | None = None
        fixed_amount: Decimal | None = None
        rate_source = fixed_source = "unset"

        for strategy in self.strategies:
            candidate = strategy.candidate(community, configs, period_date)
            if rate_per_area is None and candidate.rate_per_area is not None:
                rate_per_area, rate_source = candidate.rate_per_area, strategy.name
            if fixed_amount is None and candidate.fixed_amount is not None:
                fixed_amount, fixed_source = candidate.fixed_amount, strategy.name
            if rate_per_area is not None and fixed_amount is not None:
                break

        logger.debug(
            "Rate for community %s period %s: rate_per_area=%s (%s), fixed_amount=%s (%s)",
            getattr(community, "id", None),
            period_date,
            rate_per_area,
            rate_source,
            fixed_amount,
            fixed_source,
        )
        return ChargeRate(
            rate_per_area=ZERO if rate_per_area is None else rate_per_area,
            fixed_amount=ZERO if fixed_amount is None else fixed_amount,
        )


__all__ = [
    "ChargeRate",
    "RateCandidate",
    "RateStrategy",
    "ConfigurationHistoryStrategy",
    "LegacyCommunityRateStrategy",
    "ZeroRateStrategy",
    "DEFAULT_STRATEGIES",
    "RateResolver",
]
