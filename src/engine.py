import logging
from typing import Dict, Iterable

from models import ClientAccount, ProcessingResult, ProcessingStats, ResolvePolicy, Transaction
from processor import TransactionProcessor
from reader import read_transactions
from state import LedgerState

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Folds a stream of transactions into per-client account snapshots.
    Owns its ledger state; independent instances never share anything.
    """

    def __init__(self, resolve_policy: ResolvePolicy = ResolvePolicy.KEEP_OPEN):
        self._state = LedgerState()
        self._processor = TransactionProcessor(self._state, resolve_policy=resolve_policy)
        self._stats = ProcessingStats()

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def apply(self, transaction: Transaction) -> ProcessingResult:
        """Apply a single record. Discarded records leave state untouched."""
        result = self._processor.process_transaction(transaction)
        self._stats.record(result)
        return result

    def snapshot(self) -> Dict[int, ClientAccount]:
        """Return a copy of every account; later records do not affect it."""
        return self._state.get_all_accounts()

    def process_records(self, transactions: Iterable[Transaction]) -> Dict[int, ClientAccount]:
        """Apply records in order and return the final account states."""
        for transaction in transactions:
            self.apply(transaction)

        logger.info(
            f"Processed: {self._stats.processed}, "
            f"Applied: {self._stats.applied}, "
            f"Discarded: {self._stats.discarded}"
        )
        for reason, count in sorted(self._stats.discards_by_reason().items()):
            logger.info(f"  Discarded as {reason}: {count}")

        return self.snapshot()

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        logger.info(f"Processing {filepath}")
        with open(filepath, "r", encoding="utf-8-sig", newline="") as f:
            return self.process_records(read_transactions(f))
