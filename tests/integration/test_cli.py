"""Integration tests for the billing CLI."""

import json
import logging
from datetime import date
from decimal import Decimal

import pytest

from elevate.cli.billing import main
from elevate.models import MaintenanceStatus
from elevate.services.config import get_settings


@pytest.fixture(autouse=True)
def cli_env(monkeypatch, tmp_path, database_url, engine):
    """Point the CLI at the test database and restore logging afterwards."""
    monkeypatch.setenv("DATABASE_URL", database_url)
    monkeypatch.setenv("LOG_FILE", str(tmp_path / "logs" / "billing.log"))
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()

    root_logger = logging.getLogger()
    original_handlers = root_logger.handlers.copy()
    original_level = root_logger.level
    yield
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)
    for handler in original_handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(original_level)
    get_settings.cache_clear()


def _last_json(capsys):
    lines = [line for line in capsys.readouterr().out.splitlines() if line.startswith("{")]
    return json.loads(lines[-1])


class TestGenerateCommand:
    def test_generate_prints_report(self, capsys, factory):
        """Test generate prints report."""
        community = factory.community(maintenance_rate="2")
        factory.unit(community, date(2024, 1, 1))

        exit_code = main(["generate", "--as-of", "2024-03-15"])

        assert exit_code == 0
        report = _last_json(capsys)
        assert report["horizon"] == "2024-03-01"
        assert report["recordsCreated"] == 3
        assert report["communitiesProcessed"] == 1
        assert report["failedCommunities"] == []
        assert report["partial"] is False

    def test_generate_with_workers(self, capsys, factory):
        """Test generate with workers."""
        for _ in range(3):
            factory.unit(factory.community(maintenance_rate="2"), date(2024, 3, 1))

        assert main(["generate", "--as-of", "2024-03-15", "--workers", "2"]) == 0
        assert _last_json(capsys)["recordsCreated"] == 3

    def test_generate_writes_log_file(self, tmp_path, factory):
        """Test generate writes log file."""
        factory.unit(factory.community(maintenance_rate="2"), date(2024, 3, 1))

        main(["generate", "--as-of", "2024-03-15"])

        contents = (tmp_path / "logs" / "billing.log").read_text()
        assert "Generation complete" in contents

    def test_unreachable_store_exits_1(self, monkeypatch, tmp_path):
        """Test unreachable store exits 1."""
        monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'missing' / 'x.db'}")
        get_settings.cache_clear()

        assert main(["generate", "--as-of", "2024-03-15"]) == 1

    def test_invalid_as_of_is_rejected(self):
        """Test a malformed --as-of is an argument error (exit 2)."""
        with pytest.raises(SystemExit) as exc_info:
            main(["generate", "--as-of", "15/03/2024"])

        assert exc_info.value.code == 2


class TestLedgerCommand:
    def test_ledger_prints_summary(self, capsys, factory):
        """Test ledger prints summary."""
        community = factory.community(opening_balance="1000")
        unit = factory.unit(community, date(2024, 1, 1))
        factory.record(unit, date(2024, 1, 1), 2000, MaintenanceStatus.PAID)
        factory.record(unit, date(2024, 2, 1), 2000, MaintenanceStatus.PENDING)
        factory.expense(community, "250.50", date(2024, 2, 3))

        exit_code = main(["ledger", "--community", str(community.id), "--month", "2024-02"])

        assert exit_code == 0
        summary = {key: Decimal(value) for key, value in _last_json(capsys).items()}
        assert summary == {
            "previousBalance": Decimal("3000"),
            "collectedThisMonth": Decimal("0"),
            "pendingThisMonth": Decimal("2000"),
            "expensesThisMonth": Decimal("250.50"),
            "closingBalance": Decimal("2749.50"),
        }

    def test_opening_balance_override(self, capsys, factory):
        """Test opening balance override."""
        community = factory.community(opening_balance="1000")

        main(["ledger", "--community", str(community.id), "--month", "2024-02", "--opening-balance", "50"])

        assert Decimal(_last_json(capsys)["previousBalance"]) == Decimal("50")

    def test_unknown_community_exits_1(self):
        """Test unknown community exits 1."""
        assert main(["ledger", "--community", "404", "--month", "2024-02"]) == 1

    @pytest.mark.parametrize("month", ["2024-02-15", "2024-2", "02-2024", "2024/02"])
    def test_month_must_be_exactly_year_and_month(self, month):
        """Test --month accepts only YYYY-MM."""
        with pytest.raises(SystemExit) as exc_info:
            main(["ledger", "--community", "1", "--month", month])

        assert exc_info.value.code == 2

    def test_invalid_month_exits_1(self, factory):
        """Test invalid month exits 1."""
        community = factory.community()

        assert main(["ledger", "--community", str(community.id), "--month", "2024-13"]) == 1
