"""CLI entry point for maintenance billing runs and ledger summaries.

Usage:
    python -m elevate.cli.billing generate [--as-of YYYY-MM-DD]
    python -m elevate.cli.billing ledger --community ID --month YYYY-MM [--opening-balance N]
    elevate-billing generate  (installed script, e.g. from cron)

Exit Codes:
    0 - Success (a generation run with failed communities still exits 0 and lists them)
    1 - Failure: store unreachable, unknown community or invalid ledger month
    2 - Invalid command-line arguments (reported by argparse)

Logging:
    LOG_LEVEL to both stdout and LOG_FILE (default logs/billing.log)
"""

import argparse
import json
import re
import signal
import sys
import threading
from datetime import date
from decimal import Decimal, InvalidOperation

from dotenv import load_dotenv

from elevate.schemas.billing import GenerationReportResponse, LedgerRequest, LedgerSummaryResponse
from elevate.services.billing_service import BillingGenerator
from elevate.services.config import get_settings
from elevate.services.db import create_db_engine, create_session_factory
from elevate.services.errors import BillingError
from elevate.services.ledger_service import LedgerService
from elevate.services.logging import setup_logging

MONTH_PATTERN = re.compile(r"(?P<year>\d{4})-(?P<month>\d{2})")


def _parse_month(value: str) -> tuple[int, int]:
    match = MONTH_PATTERN.fullmatch(value)
    if match is None:
        raise argparse.ArgumentTypeError(f"Expected YYYY-MM, got {value!r}")
    return int(match["year"]), int(match["month"])


def _parse_decimal(value: str) -> Decimal:
    try:
        return Decimal(value)
    except InvalidOperation as e:
        raise argparse.ArgumentTypeError(f"Not a number: {value!r}") from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="elevate-billing", description="Elevate maintenance billing")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Generate missing maintenance records")
    generate.add_argument(
        "--as-of",
        type=date.fromisoformat,
        default=None,
        help="Bill up to the month containing this date (default: today, UTC)",
    )
    generate.add_argument("--workers", type=int, default=None, help="Communities processed concurrently")

    ledger = subparsers.add_parser("ledger", help="Print a monthly ledger summary")
    ledger.add_argument("--community", type=int, required=True, help="Community ID")
    ledger.add_argument("--month", type=_parse_month, required=True, help="Target month, YYYY-MM")
    ledger.add_argument(
        "--opening-balance",
        type=_parse_decimal,
        default=None,
        help="Override the community's stored opening balance",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for billing CLI.

    Returns:
        Exit code: 0 for success, 1 for failure
    """
    args = build_parser().parse_args(argv)

    load_dotenv()
    settings = get_settings()
    logger = setup_logging(settings.log_file, settings.log_level)

    engine = create_db_engine(settings)
    session_factory = create_session_factory(engine)

    try:
        if args.command == "generate":
            cancel_event = threading.Event()
            previous_handler = None
            if threading.current_thread() is threading.main_thread():
                # SIGTERM stops the run between communities; written records stay valid
                previous_handler = signal.signal(signal.SIGTERM, lambda *_: cancel_event.set())

            generator = BillingGenerator(
                session_factory,
                max_workers=args.workers or settings.billing_workers,
                cancel_event=cancel_event,
            )
            try:
                report = generator.generate(args.as_of)
            finally:
                if previous_handler is not None:
                    signal.signal(signal.SIGTERM, previous_handler)
            payload = GenerationReportResponse.model_validate(report)
        else:
            year, month = args.month
            request = LedgerRequest(
                community_id=args.community,
                month=month,
                year=year,
                opening_balance=args.opening_balance,
            )
            with session_factory() as session:
                summary = LedgerService(session).summarize(
                    request.community_id, request.target_month, request.opening_balance
                )
            payload = LedgerSummaryResponse.model_validate(summary)

        print(json.dumps(payload.model_dump(mode="json", by_alias=True)))
        return 0

    except KeyboardInterrupt:
        logger.warning("Billing command interrupted by user")
        return 1
    except BillingError as e:
        logger.error("Billing command failed: %s", e.message)
        return 1
    except Exception as e:
        logger.error(f"Billing command failed: {e}", exc_info=True)
        return 1
    finally:
        engine.dispose()


if __name__ == "__main__":
    sys.exit(main())
