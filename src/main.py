import csv
import logging
import os
import sys
from decimal import Decimal
from typing import Dict, TextIO

from models import ClientAccount
from payments_engine import PaymentsEngine

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV_VAR = "PAYMENTS_LOG_LEVEL"
DEFAULT_LOG_LEVEL = logging.WARNING


def configure_logging() -> None:
    level_name = os.environ.get(LOG_LEVEL_ENV_VAR, "").strip().upper()
    level = logging.getLevelName(level_name) if level_name else DEFAULT_LOG_LEVEL
    if not isinstance(level, int):
        level = DEFAULT_LOG_LEVEL

    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def format_decimal(value: Decimal) -> str:
    """Format decimal in plain notation, keeping its full precision."""
    return f"{value:f}"


def write_accounts(accounts: Dict[int, ClientAccount], output: TextIO) -> None:
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(["client", "available", "held", "total", "locked"])
    for client_id in sorted(accounts.keys()):
        account = accounts[client_id]
        writer.writerow([
            client_id,
            format_decimal(account.available),
            format_decimal(account.held),
            format_decimal(account.total),
            str(account.locked).lower(),
        ])


def main(argv=None) -> int:
    configure_logging()
    args = sys.argv[1:] if argv is None else argv

    if len(args) != 1:
        print("Usage: payments-engine <input.csv>", file=sys.stderr)
        return 1

    filepath = args[0]
    logger.info(f"Input CSV file: {filepath}")

    engine = PaymentsEngine()
    try:
        accounts = engine.process_file(filepath)
    except OSError as e:
        logger.error(f"Cannot read {filepath}: {e}")
        return 1

    write_accounts(accounts, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
