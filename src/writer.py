import csv
from decimal import Decimal
from typing import Mapping, TextIO

from models import ClientAccount

HEADER = ["client", "available", "held", "total", "locked"]


def format_decimal(value: Decimal) -> str:
    """Render with the precision the inputs carried; no rounding."""
    return f"{value:f}"


def write_accounts(accounts: Mapping[int, ClientAccount], stream: TextIO) -> None:
    """Write one CSV row per client, in the mapping's iteration order."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(HEADER)
    for client_id, account in accounts.items():
        writer.writerow([
            client_id,
            format_decimal(account.available),
            format_decimal(account.held),
            format_decimal(account.total),
            str(account.locked).lower(),
        ])
