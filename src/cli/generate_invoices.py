"""CLI entry point for monthly invoice generation.

Usage:
    python -m src.cli.generate_invoices 2024-02

Exit Codes:
    0 - Success: invoices generated (or all customers already invoiced)
    1 - Failure: database or persistence error; invoices written before it are kept
    2 - Invalid competence argument

Logging:
    INFO level logs to both stdout and logs/billing.log
    Every created invoice is logged, so the log is the run's audit trail
"""

import argparse
import logging
import sys

from sqlalchemy.exc import SQLAlchemyError

from src.services.billing_period import parse_competence
from src.services.billing_service import BillingService
from src.services.config import load_config
from src.services.db import create_session
from src.services.errors import BillingError, InvalidCompetenceError
from src.services.logging import setup_server_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate monthly subscriber invoices")
    parser.add_argument("competence", help="Month to bill, YYYY-MM")
    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Run one billing generation.

    Args:
        argv: Command-line arguments (default: sys.argv[1:])

    Returns:
        Exit code: 0 for success, 1 for failure, 2 for invalid input
    """
    args = build_parser().parse_args(argv)

    try:
        config = load_config()
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    setup_server_logging(config.log_file)
    logger = logging.getLogger(__name__)

    try:
        parse_competence(args.competence)
        for session in create_session(config.database_url):
            created = BillingService(session).generate(args.competence)
            total = sum(invoice.amount for invoice in created)
            logger.info(
                "Generated %d invoices for %s, total %s", len(created), args.competence, total
            )
        return 0
    except InvalidCompetenceError as e:
        logger.error("Invalid competence: %s", e)
        return 2
    except BillingError as e:
        created = getattr(e, "created", [])
        logger.error(
            "Billing failed for %s after %d invoices: %s",
            args.competence,
            len(created),
            e,
            exc_info=True,
        )
        return 1
    except SQLAlchemyError as e:
        logger.error("Database error while billing %s: %s", args.competence, e, exc_info=True)
        return 1
    except KeyboardInterrupt:
        logger.warning("Billing interrupted by user")
        return 1


if __name__ == "__main__":
    sys.exit(main())
