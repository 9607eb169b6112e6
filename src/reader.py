import csv
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterator, Optional, TextIO

from errors import RecordParseError
from models import Transaction, TransactionType

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("type", "client", "tx")
MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1


def read_transactions(stream: TextIO) -> Iterator[Transaction]:
    """
    Lazily parse CSV rows from stream into Transactions, in input order.

    The header row names the columns; values are trimmed and the amount
    column may be left empty or dropped entirely for dispute, resolve and
    chargeback rows. Unknown type tags are passed through for the engine to
    discard. Anything that cannot be parsed raises RecordParseError.
    """
    reader = csv.DictReader(stream)
    try:
        if reader.fieldnames is None:
            logger.info("Input stream is empty")
            return

        reader.fieldnames = [name.lstrip("\ufeff").strip().lower() for name in reader.fieldnames]
        missing = [column for column in REQUIRED_COLUMNS if column not in reader.fieldnames]
        if missing:
            raise RecordParseError(f"missing column(s) {', '.join(missing)} in header", line_number=1)

        for row in reader:
            yield parse_row(row, reader.line_num)
    except (UnicodeDecodeError, csv.Error) as e:
        # Decoding runs ahead of the csv reader, so only the last good line is known.
        raise RecordParseError(f"unreadable input after line {reader.line_num}: {e}") from e


def parse_row(row: Dict[Optional[str], Optional[str]], line_number: Optional[int] = None) -> Transaction:
    """Parse one DictReader row into a Transaction."""
    if None in row:
        raise RecordParseError(f"too many fields: {row[None]!r}", line_number)

    normalized = {key: value.strip() for key, value in row.items() if value is not None}

    raw_type = normalized.get("type", "")
    client_id = _parse_int(normalized.get("client"), "client", MAX_CLIENT_ID, line_number)
    transaction_id = _parse_int(normalized.get("tx"), "tx", MAX_TRANSACTION_ID, line_number)
    amount = _parse_amount(normalized.get("amount"), line_number)

    return Transaction(
        transaction_type=TransactionType.parse(raw_type),
        client_id=client_id,
        transaction_id=transaction_id,
        amount=amount,
        raw_type=raw_type,
    )


def _parse_int(value: Optional[str], column: str, upper_bound: int, line_number: Optional[int]) -> int:
    if not value:
        raise RecordParseError(f"missing {column}", line_number)
    try:
        parsed = int(value)
    except ValueError:
        raise RecordParseError(f"invalid {column} {value!r}", line_number) from None
    if not 0 <= parsed <= upper_bound:
        raise RecordParseError(f"{column} {parsed} out of range 0..{upper_bound}", line_number)
    return parsed


def _parse_amount(value: Optional[str], line_number: Optional[int]) -> Optional[Decimal]:
    if not value:
        return None
    try:
        amount = Decimal(value)
    except InvalidOperation:
        raise RecordParseError(f"invalid amount {value!r}", line_number) from None
    if not amount.is_finite():
        raise RecordParseError(f"invalid amount {value!r}", line_number)
    return amount
