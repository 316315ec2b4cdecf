"""
Transaction Analyser CLI

USAGE:
  transaction-analyser ACC334455 "20/10/2018 12:00:00" "20/10/2018 19:00:00"
  transaction-analyser ACC334455 "20/10/2018 12:00:00" "20/10/2018 19:00:00" -f ledger.csv
  python -m transaction_analyser ACC334455 "20/10/2018 12:00:00" "20/10/2018 19:00:00"

The ledger defaults to TRANSACTIONS_CSV_PATH (transactions.csv).
Results go to stdout; logs and errors go to stderr.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError

from transaction_analyser import __version__
from transaction_analyser.audit import configure_logging
from transaction_analyser.config import AnalyserSettings, get_settings
from transaction_analyser.loader import LoaderError
from transaction_analyser.models.analysis import ArgumentError
from transaction_analyser.orchestrator import create_app_components


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="transaction-analyser",
        description="Compute the relative balance of an account over a time range",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Dates use the format dd/MM/yyyy HH:mm:ss and both ends are inclusive.

Examples:
  %(prog)s ACC334455 "20/10/2018 12:00:00" "20/10/2018 19:00:00"
  %(prog)s -f ledger.csv ACC334455 "20/10/2018 12:00:00" "20/10/2018 19:00:00"
""",
    )

    parser.add_argument("account_id", help="account to compute the balance for")
    parser.add_argument("date_from", metavar="FROM", help="start of the range")
    parser.add_argument("date_to", metavar="TO", help="end of the range")

    parser.add_argument(
        "-f",
        "--file",
        type=Path,
        metavar="FILE",
        help="transactions CSV (default: TRANSACTIONS_CSV_PATH or transactions.csv)",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="enable debug logging on stderr",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser


def _load_settings() -> AnalyserSettings:
    try:
        return get_settings()
    except ValidationError as e:
        raise SystemExit(f"✗ Invalid configuration: {e}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main execution flow."""
    args = create_parser().parse_args(argv)
    settings = _load_settings()

    level = logging.DEBUG if args.verbose else settings.log_level_number
    configure_logging(level, json_output=settings.log_json)

    analysis_flow, _ = create_app_components(settings)

    try:
        analysis = analysis_flow.run(
            args.account_id,
            args.date_from,
            args.date_to,
            source=args.file,
        )
    except ArgumentError as e:
        print(f"✗ Error: {e}", file=sys.stderr)
        print("  Dates must use the format dd/MM/yyyy HH:mm:ss", file=sys.stderr)
        return 1
    except LoaderError as e:
        print(f"✗ Error: {e}", file=sys.stderr)
        return 1

    print(f"Relative balance for the period is: {analysis.relative_balance}")
    print(f"Number of transactions included is: {analysis.transaction_count}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
