"""Pytest configuration: per-test SQLite database and domain object builders."""

from datetime import date
from decimal import Decimal

import pytest

from elevate.models import (
    Base,
    Community,
    CommunityStatus,
    Expense,
    ExpenseStatus,
    MaintenanceRecord,
    MaintenanceStatus,
    RateConfiguration,
    Unit,
    User,
    UserRole,
)
from elevate.services.config import Settings
from elevate.services.db import create_db_engine, create_session_factory


class BillingDataFactory:
    """Builds and commits domain rows for tests."""

    def __init__(self, session):
        self.session = session
        self._seq = 0

    def _next(self) -> int:
        self._seq += 1
        return self._seq

    def _save(self, obj):
        self.session.add(obj)
        self.session.commit()
        return obj

    def community(
        self,
        name: str | None = None,
        community_type: str = "High-Rise Apartment",
        status: CommunityStatus = CommunityStatus.ACTIVE,
        maintenance_rate: str | None = None,
        fixed_maintenance_amount: str | None = None,
        opening_balance: str | None = None,
    ) -> Community:
        return self._save(
            Community(
                name=name or f"Community {self._next()}",
                community_type=community_type,
                status=status,
                maintenance_rate=Decimal(maintenance_rate) if maintenance_rate else None,
                fixed_maintenance_amount=(
                    Decimal(fixed_maintenance_amount) if fixed_maintenance_amount else None
                ),
                opening_balance=Decimal(opening_balance) if opening_balance else None,
            )
        )

    def user(self, community: Community | None = None, role: UserRole = UserRole.RESIDENT) -> User:
        seq = self._next()
        return self._save(
            User(
                name=f"User {seq}",
                email=f"user{seq}@example.com",
                role=role,
                community_id=community.id if community else None,
            )
        )

    def unit(
        self,
        community: Community,
        start_date: date | None,
        flat_size: str | None = "1000",
        user: User | None = None,
    ) -> Unit:
        user = user or self.user(community)
        return self._save(
            Unit(
                community_id=community.id,
                user_id=user.id,
                flat_number=f"A-{self._next()}",
                flat_size=Decimal(flat_size) if flat_size else None,
                maintenance_start_date=start_date,
            )
        )

    def rate(
        self,
        community: Community,
        effective_date: date,
        maintenance_rate: str | None = None,
        fixed_maintenance_amount: str | None = None,
    ) -> RateConfiguration:
        return self._save(
            RateConfiguration(
                community_id=community.id,
                effective_date=effective_date,
                maintenance_rate=Decimal(maintenance_rate) if maintenance_rate else None,
                fixed_maintenance_amount=(
                    Decimal(fixed_maintenance_amount) if fixed_maintenance_amount else None
                ),
            )
        )

    def record(
        self,
        unit: Unit,
        period_date: date,
        amount: int,
        status: MaintenanceStatus = MaintenanceStatus.PENDING,
    ) -> MaintenanceRecord:
        return self._save(
            MaintenanceRecord(
                user_id=unit.user_id,
                unit_id=unit.id,
                community_id=unit.community_id,
                period_date=period_date,
                amount=amount,
                status=status,
            )
        )

    def expense(
        self,
        community: Community,
        amount: str,
        spent_on: date,
        status: ExpenseStatus = ExpenseStatus.APPROVED,
    ) -> Expense:
        return self._save(
            Expense(
                community_id=community.id,
                title=f"Expense {self._next()}",
                amount=Decimal(amount),
                date=spent_on,
                status=status,
            )
        )


@pytest.fixture
def database_url(tmp_path):
    """File-backed SQLite so every session gets its own connection."""
    return f"sqlite:///{tmp_path / 'test_elevate.db'}"


@pytest.fixture
def engine(database_url):
    engine = create_db_engine(
        Settings(database_url=database_url, persistence_timeout_seconds=5)
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def db_session(session_factory):
    """Create test database session."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def factory(db_session):
    return BillingDataFactory(db_session)
