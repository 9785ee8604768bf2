"""Tests for engine and session construction."""

from sqlalchemy import select
from sqlalchemy.pool import StaticPool

from elevate.models import Base, Community
from elevate.services.config import Settings
from elevate.services.db import create_db_engine, create_session_factory


class TestEngine:
    def test_in_memory_sqlite_shares_one_database(self):
        """Test in-memory SQLite sessions share one database."""
        engine = create_db_engine(Settings(database_url="sqlite:///:memory:"))
        try:
            assert isinstance(engine.pool, StaticPool)
            Base.metadata.create_all(engine)
            factory = create_session_factory(engine)

            with factory() as session:
                session.add(Community(name="Green Meadows"))
                session.commit()

            with factory() as session:
                assert session.scalars(select(Community.name)).all() == ["Green Meadows"]
        finally:
            engine.dispose()
