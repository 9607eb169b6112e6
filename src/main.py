import logging
import sys
from typing import List, Optional

from config import EngineConfig
from engine import PaymentsEngine
from errors import PaymentsError
from writer import write_accounts

logger = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) != 1:
        print("Usage: payments-engine <input.csv>", file=sys.stderr)
        return 1

    try:
        config = EngineConfig.from_env()
    except PaymentsError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=config.log_level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    engine = PaymentsEngine(resolve_policy=config.resolve_policy)
    try:
        accounts = engine.process_file(argv[0])
    except (OSError, PaymentsError) as e:
        logger.error(f"Error processing transactions: {e}")
        return 1

    write_accounts(accounts, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
