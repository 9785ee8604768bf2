"""Recurring maintenance billing generation.

For every active community and every unit with a start date, bills each month from the
unit's start month through the month containing the as-of date. Months that already
have a record for the unit are skipped, so the run is safe to repeat on any schedule
and fills gaps left by missed runs.

Error isolation:
- A unit whose dates or rate configuration cannot be interpreted is skipped and counted.
- A community whose records cannot be loaded or persisted is logged and reported as
  failed; other communities are still processed.
- Only failing to list communities at all (store unreachable) aborts the run.

Overlapping runs rely on the unique (unit_id, period_date) constraint: when a batch
insert collides with rows written by another run, the batch is retried row by row and
the colliding rows are counted as already billed.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Iterable, Sequence

from sqlalchemy import Row, String, select, type_coerce
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from elevate.models import (
    Community,
    CommunityStatus,
    MaintenanceRecord,
    MaintenanceStatus,
    RateConfiguration,
    Unit,
)
from elevate.services.errors import (
    BillingError,
    CommunityNotFoundError,
    MalformedDateError,
    PersistenceError,
    StoreUnavailableError,
)
from elevate.services.period_calculator import (
    compute_amount,
    enumerate_periods,
    month_start,
    monthly_total,
    parse_date,
)
from elevate.services.rate_resolver import RateResolver

logger = logging.getLogger(__name__)

BillingKey = tuple[int, date]

# Per-unit failures that skip the unit instead of the community
UNIT_ERRORS = (BillingError, ValueError, TypeError, ArithmeticError)


@dataclass(frozen=True)
class StagedRecord:
    """A maintenance record computed by the generator but not yet written."""

    user_id: int
    unit_id: int
    community_id: int
    period_date: date
    amount: int
    status: MaintenanceStatus = MaintenanceStatus.PENDING

    @property
    def key(self) -> BillingKey:
        return (self.unit_id, self.period_date)

    def to_model(self) -> MaintenanceRecord:
        return MaintenanceRecord(
            user_id=self.user_id,
            unit_id=self.unit_id,
            community_id=self.community_id,
            period_date=self.period_date,
            amount=self.amount,
            status=self.status,
        )


@dataclass
class CommunityResult:
    """Outcome of billing one community."""

    community_id: int
    records_created: int = 0
    duplicates_ignored: int = 0
    units_skipped: int = 0
    failed: bool = False


@dataclass
class GenerationReport:
    """Outcome of a whole generation run."""

    horizon: date
    communities_processed: int = 0
    records_created: int = 0
    duplicates_ignored: int = 0
    units_skipped: int = 0
    failed_communities: list[int] = field(default_factory=list)
    cancelled: bool = False

    @property
    def partial(self) -> bool:
        """True when some communities failed or the run was cancelled."""
        return bool(self.failed_communities) or self.cancelled

    def add(self, result: CommunityResult) -> None:
        self.units_skipped += result.units_skipped
        if result.failed:
            self.failed_communities.append(result.community_id)
            return
        self.communities_processed += 1
        self.records_created += result.records_created
        self.duplicates_ignored += result.duplicates_ignored


def plan_unit_records(
    community: Any,
    configs: Sequence[Any],
    unit: Any,
    existing_keys: set[BillingKey],
    horizon: date,
    resolver: RateResolver,
) -> list[StagedRecord]:
    """Compute the missing records for one unit, oldest period first.

    Pure: reads only its arguments. Periods whose amount is not positive are skipped
    individually; later periods are still evaluated.

    Args:
        community: Community (id, community_type, legacy rate fields)
        configs: Community rate configurations, newest effective date first
        unit: Unit (id, user_id, flat_size, maintenance_start_date)
        existing_keys: (unit_id, period_date) pairs already billed
        horizon: Last period to bill (first day of the as-of month)
        resolver: Rate resolver

    Raises:
        MalformedDateError: If the unit start date cannot be interpreted
    """
    start = parse_date(unit.maintenance_start_date)
    staged: list[StagedRecord] = []

    for period in enumerate_periods(start, horizon):
        if (unit.id, period) in existing_keys:
            continue

        rate = resolver.resolve(community, configs, period)
        if rate.is_zero:
            continue

        amount = compute_amount(monthly_total(community.community_type, rate, unit.flat_size), period, start)
        if not amount or amount <= 0:
            continue

        staged.append(
            StagedRecord(
                user_id=unit.user_id,
                unit_id=unit.id,
                community_id=community.id,
                period_date=period,
                amount=amount,
            )
        )

    return staged


class BillingGenerator:
    """Generate monthly maintenance records for all active communities.

    Each community is processed in its own session. With ``max_workers`` > 1 communities
    are processed concurrently on a bounded thread pool; they share no mutable state.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        resolver: RateResolver | None = None,
        max_workers: int = 1,
        cancel_event: threading.Event | None = None,
    ):
        """Initialize generator.

        Args:
            session_factory: Factory producing sessions bound to the store
            resolver: Rate resolver (default: configuration, legacy, zero)
            max_workers: Communities processed concurrently
            cancel_event: When set, no further communities are started
        """
        self.session_factory = session_factory
        self.resolver = resolver or RateResolver()
        self.max_workers = max(1, max_workers)
        self.cancel_event = cancel_event

    def generate(self, as_of: date | datetime | None = None) -> GenerationReport:
        """Bill every missing month up to and including the month of ``as_of``.

        Args:
            as_of: Reference date (default: now, UTC)

        Returns:
            GenerationReport with counts and failed community ids

        Raises:
            StoreUnavailableError: If active communities cannot be listed
        """
        horizon = month_start(as_of or datetime.now(timezone.utc))
        community_ids = self._load_active_community_ids()
        report = GenerationReport(horizon=horizon)

        logger.info(
            "Running maintenance generation up to period %s for %d communities",
            horizon.isoformat(),
            len(community_ids),
        )

        if self.max_workers == 1:
            results: Iterable[CommunityResult | None] = (
                self._run_community(community_id, horizon) for community_id in community_ids
            )
            self._collect(report, results)
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="billing") as pool:
                self._collect(
                    report,
                    pool.map(lambda community_id: self._run_community(community_id, horizon), community_ids),
                )

        logger.info(
            "Generation complete: %d communities, %d new records, %d duplicates ignored, "
            "%d units skipped, %d communities failed%s",
            report.communities_processed,
            report.records_created,
            report.duplicates_ignored,
            report.units_skipped,
            len(report.failed_communities),
            " (cancelled)" if report.cancelled else "",
        )
        return report

    def process_community(self, community_id: int, horizon: date) -> CommunityResult:
        """Bill one community up to ``horizon``.

        Raises:
            CommunityNotFoundError: If the community does not exist
            PersistenceError: If the staged records cannot be written
        """
        with self.session_factory() as session:
            community = session.get(Community, community_id)
            if community is None:
                raise CommunityNotFoundError(community_id)

            configs = self._load_rate_configurations(session, community_id)
            units = self._load_billable_units(session, community_id)
            existing_keys, unreadable_units = self._load_existing_keys(session, community_id)

            result = CommunityResult(community_id=community_id)
            staged: list[StagedRecord] = []

            for unit in units:
                try:
                    if unit.id in unreadable_units:
                        raise MalformedDateError(unreadable_units[unit.id])
                    staged.extend(
                        plan_unit_records(community, configs, unit, existing_keys, horizon, self.resolver)
                    )
                except UNIT_ERRORS as e:
                    result.units_skipped += 1
                    logger.warning(
                        "Skipping unit %s in community %s: %s", unit.id, community_id, e
                    )

            if staged:
                result.records_created, result.duplicates_ignored = self._persist(
                    session, community_id, staged
                )

        logger.info(
            "Community %s: %d new records, %d duplicates ignored, %d units skipped",
            community_id,
            result.records_created,
            result.duplicates_ignored,
            result.units_skipped,
        )
        return result

    def _run_community(self, community_id: int, horizon: date) -> CommunityResult | None:
        if self.cancel_event is not None and self.cancel_event.is_set():
            return None
        try:
            return self.process_community(community_id, horizon)
        except Exception:
            logger.error("Maintenance generation failed for community %s", community_id, exc_info=True)
            return CommunityResult(community_id=community_id, failed=True)

    @staticmethod
    def _collect(report: GenerationReport, results: Iterable[CommunityResult | None]) -> None:
        for result in results:
            if result is None:
                report.cancelled = True
                continue
            report.add(result)
        if report.cancelled:
            logger.warning("Generation cancelled; remaining communities left for the next run")

    def _load_active_community_ids(self) -> list[int]:
        try:
            with self.session_factory() as session:
                return list(
                    session.scalars(
                        select(Community.id)
                        .where(Community.status == CommunityStatus.ACTIVE)
                        .order_by(Community.id)
                    )
                )
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Cannot list active communities: {e}") from e

    @staticmethod
    def _load_rate_configurations(session: Session, community_id: int) -> list[RateConfiguration]:
        return list(
            session.scalars(
                select(RateConfiguration)
                .where(RateConfiguration.community_id == community_id)
                .order_by(RateConfiguration.effective_date.desc(), RateConfiguration.id.desc())
            )
        )

    @staticmethod
    def _load_billable_units(session: Session, community_id: int) -> list[Row]:
        # Start dates stay unparsed here; plan_unit_records parses them per unit
        return list(
            session.execute(
                select(
                    Unit.id,
                    Unit.user_id,
                    Unit.flat_size,
                    type_coerce(Unit.maintenance_start_date, String).label("maintenance_start_date"),
                )
                .where(Unit.community_id == community_id, Unit.maintenance_start_date.is_not(None))
                .order_by(Unit.id)
            )
        )

    @staticmethod
    def _load_existing_keys(
        session: Session, community_id: int
    ) -> tuple[set[BillingKey], dict[int, object]]:
        """Billed (unit_id, period) keys, plus units whose stored period dates cannot be read.

        Returns:
            (keys, {unit_id: unreadable period_date value})
        """
        rows = session.execute(
            select(
                MaintenanceRecord.unit_id,
                type_coerce(MaintenanceRecord.period_date, String),
            ).where(MaintenanceRecord.community_id == community_id)
        )
        keys: set[BillingKey] = set()
        unreadable: dict[int, object] = {}
        for unit_id, period_date in rows:
            try:
                keys.add((unit_id, month_start(period_date)))
            except MalformedDateError:
                unreadable.setdefault(unit_id, period_date)
        return keys, unreadable

    @staticmethod
    def _persist(session: Session, community_id: int, staged: list[StagedRecord]) -> tuple[int, int]:
        """Write staged records; return (created, rejected as duplicates)."""
        try:
            session.add_all([record.to_model() for record in staged])
            session.commit()
            return len(staged), 0
        except IntegrityError:
            session.rollback()
            logger.info(
                "Batch for community %s collided with existing records; retrying row by row",
                community_id,
            )
        except SQLAlchemyError as e:
            session.rollback()
            raise PersistenceError(
                f"Batch insert of {len(staged)} records failed for community {community_id}"
            ) from e

        created = duplicates = 0
        for record in staged:
            try:
                session.add(record.to_model())
                session.commit()
                created += 1
            except IntegrityError:
                session.rollback()
                duplicates += 1
                logger.debug("Record for unit %s period %s already exists", record.unit_id, record.period_date)
            except SQLAlchemyError as e:
                session.rollback()
                raise PersistenceError(
                    f"Insert failed for unit {record.unit_id} period {record.period_date}"
                ) from e
        return created, duplicates


__all__ = [
    "BillingKey",
    "StagedRecord",
    "CommunityResult",
    "GenerationReport",
    "plan_unit_records",
    "BillingGenerator",
]
