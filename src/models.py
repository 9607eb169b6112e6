from collections import Counter
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Dict, Optional


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @classmethod
    def parse(cls, raw: str) -> Optional["TransactionType"]:
        """Case and whitespace insensitive lookup. Returns None for unknown tags."""
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


class DisputeStage(Enum):
    NONE = "none"
    OPEN = "open"
    CHARGED_BACK = "charged_back"


class ResolvePolicy(Enum):
    """What a resolve does to the dispute stage of the entry it releases."""

    # Funds go back to available, the entry stays OPEN.
    KEEP_OPEN = "keep_open"
    # Funds go back to available, the entry returns to NONE and may be disputed again.
    CLEAR_DISPUTE = "clear_dispute"


class ProcessingResult(Enum):
    APPLIED = "applied"
    ACCOUNT_LOCKED = "account_locked"
    UNKNOWN_TYPE = "unknown_type"
    DUPLICATE_TRANSACTION = "duplicate_transaction"
    MISSING_AMOUNT = "missing_amount"
    INVALID_AMOUNT = "invalid_amount"
    UNKNOWN_CLIENT = "unknown_client"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    TRANSACTION_NOT_FOUND = "transaction_not_found"
    CLIENT_MISMATCH = "client_mismatch"
    STAGE_MISMATCH = "stage_mismatch"

    @property
    def applied(self) -> bool:
        return self is ProcessingResult.APPLIED


@dataclass(frozen=True)
class Transaction:
    transaction_type: Optional[TransactionType]
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None
    raw_type: Optional[str] = None

    @property
    def type_name(self) -> str:
        if self.transaction_type is not None:
            return self.transaction_type.value
        return repr(self.raw_type)

    def __repr__(self) -> str:
        return f"Transaction({self.type_name}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass
class LedgerEntry:
    """A deposit or withdrawal that moved funds and may later be disputed."""

    client_id: int
    amount: Decimal
    dispute_stage: DisputeStage = DisputeStage.NONE


@dataclass
class ClientAccount:
    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    locked: bool = False

    @property
    def total(self) -> Decimal:
        return self.available + self.held

    def credit(self, amount: Decimal) -> None:
        self.available += amount

    def debit(self, amount: Decimal) -> None:
        self.available -= amount

    def hold(self, amount: Decimal) -> None:
        self.available -= amount
        self.held += amount

    def release_hold(self, amount: Decimal) -> None:
        self.held -= amount
        self.available += amount

    def remove_held(self, amount: Decimal) -> None:
        self.held -= amount

    def lock(self) -> None:
        self.locked = True


class ProcessingStats:
    """Counts how many records ended with each ProcessingResult."""

    def __init__(self):
        self._counts: Counter = Counter()

    def record(self, result: ProcessingResult) -> None:
        self._counts[result] += 1

    @property
    def processed(self) -> int:
        return sum(self._counts.values())

    @property
    def applied(self) -> int:
        return self._counts[ProcessingResult.APPLIED]

    @property
    def discarded(self) -> int:
        return self.processed - self.applied

    def count(self, result: ProcessingResult) -> int:
        return self._counts[result]

    def discards_by_reason(self) -> Dict[str, int]:
        return {
            result.value: count
            for result, count in self._counts.items()
            if not result.applied
        }
