import logging
from decimal import Decimal
from typing import Tuple, Union

from models import (
    ClientAccount,
    DisputeStage,
    LedgerEntry,
    ProcessingResult,
    ResolvePolicy,
    Transaction,
    TransactionType,
)
from state import LedgerState

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Applies transactions to ledger state, one at a time, in input order.

    Every anomaly in a record (duplicate id, missing amount, unknown client,
    stage mismatch, insufficient funds, ...) discards that single record and
    is reported through the returned ProcessingResult. Nothing here raises
    for bad input; LedgerStateError only signals that the state itself is
    inconsistent.
    """

    def __init__(self, state: LedgerState, resolve_policy: ResolvePolicy = ResolvePolicy.KEEP_OPEN):
        self._state = state
        self._resolve_policy = resolve_policy

    @property
    def resolve_policy(self) -> ResolvePolicy:
        return self._resolve_policy

    def process_transaction(self, transaction: Transaction) -> ProcessingResult:
        """
        Process a single transaction.

        Returns:
            APPLIED: State was mutated
            anything else: The record was discarded and state is unchanged
        """
        if self.is_account_locked(transaction.client_id):
            return ProcessingResult.ACCOUNT_LOCKED

        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                return self._handle_deposit(transaction)
            case TransactionType.WITHDRAWAL:
                return self._handle_withdrawal(transaction)
            case TransactionType.DISPUTE:
                return self._handle_dispute(transaction)
            case TransactionType.RESOLVE:
                return self._handle_resolve(transaction)
            case TransactionType.CHARGEBACK:
                return self._handle_chargeback(transaction)
            case _:
                logger.debug(f"Tx {transaction.transaction_id}: unknown transaction type {transaction.type_name}")
                return ProcessingResult.UNKNOWN_TYPE

    # Guards

    def is_account_locked(self, client_id: int) -> bool:
        account = self._state.get_account(client_id)
        return account is not None and account.locked

    def is_duplicate(self, transaction_id: int) -> bool:
        return self._state.has_entry(transaction_id)

    @staticmethod
    def is_missing_amount(transaction: Transaction) -> bool:
        return transaction.amount is None

    @staticmethod
    def is_negative_amount(transaction: Transaction) -> bool:
        return transaction.amount is not None and transaction.amount < 0

    @staticmethod
    def has_sufficient_funds(account: ClientAccount, amount: Decimal) -> bool:
        return account.available >= amount

    def find_disputable_entry(
        self, transaction: Transaction, expected_stage: DisputeStage
    ) -> Union[Tuple[ClientAccount, LedgerEntry], ProcessingResult]:
        """
        Look up the entry a dispute, resolve or chargeback refers to.

        Returns the owning account and the entry, or the discard reason when
        the entry is missing, the client is unknown or does not own the
        entry, or the entry is not at expected_stage.
        """
        entry = self._state.get_entry(transaction.transaction_id)
        if entry is None:
            return ProcessingResult.TRANSACTION_NOT_FOUND

        account = self._state.get_account(transaction.client_id)
        if account is None:
            return ProcessingResult.UNKNOWN_CLIENT

        if entry.client_id != transaction.client_id:
            return ProcessingResult.CLIENT_MISMATCH

        if entry.dispute_stage is not expected_stage:
            return ProcessingResult.STAGE_MISMATCH

        return account, entry

    # Handlers

    def _handle_deposit(self, transaction: Transaction) -> ProcessingResult:
        if self.is_duplicate(transaction.transaction_id):
            logger.info(f"Deposit tx {transaction.transaction_id}: duplicate transaction id, skipping")
            return ProcessingResult.DUPLICATE_TRANSACTION

        if self.is_missing_amount(transaction):
            logger.debug(f"Deposit tx {transaction.transaction_id}: no amount")
            return ProcessingResult.MISSING_AMOUNT

        if self.is_negative_amount(transaction):
            logger.info(f"Deposit tx {transaction.transaction_id}: negative amount {transaction.amount}")
            return ProcessingResult.INVALID_AMOUNT

        self._state.record_entry(
            transaction.transaction_id,
            LedgerEntry(client_id=transaction.client_id, amount=transaction.amount),
        )
        self._state.open_account(transaction.client_id).credit(transaction.amount)
        return ProcessingResult.APPLIED

    def _handle_withdrawal(self, transaction: Transaction) -> ProcessingResult:
        if self.is_missing_amount(transaction):
            logger.debug(f"Withdrawal tx {transaction.transaction_id}: no amount")
            return ProcessingResult.MISSING_AMOUNT

        account = self._state.get_account(transaction.client_id)
        if account is None:
            logger.debug(f"Withdrawal tx {transaction.transaction_id}: client {transaction.client_id} has no account")
            return ProcessingResult.UNKNOWN_CLIENT

        if self.is_duplicate(transaction.transaction_id):
            logger.info(f"Withdrawal tx {transaction.transaction_id}: duplicate transaction id, skipping")
            return ProcessingResult.DUPLICATE_TRANSACTION

        if self.is_negative_amount(transaction):
            logger.info(f"Withdrawal tx {transaction.transaction_id}: negative amount {transaction.amount}")
            return ProcessingResult.INVALID_AMOUNT

        if not self.has_sufficient_funds(account, transaction.amount):
            logger.debug(
                f"Withdrawal tx {transaction.transaction_id}: insufficient funds "
                f"(available {account.available}, requested {transaction.amount})"
            )
            return ProcessingResult.INSUFFICIENT_FUNDS

        self._state.record_entry(
            transaction.transaction_id,
            LedgerEntry(client_id=transaction.client_id, amount=transaction.amount),
        )
        account.debit(transaction.amount)
        return ProcessingResult.APPLIED

    def _handle_dispute(self, transaction: Transaction) -> ProcessingResult:
        found = self.find_disputable_entry(transaction, DisputeStage.NONE)
        if isinstance(found, ProcessingResult):
            logger.debug(f"Dispute for tx {transaction.transaction_id}: {found.value}")
            return found

        account, entry = found
        account.hold(entry.amount)
        entry.dispute_stage = DisputeStage.OPEN
        return ProcessingResult.APPLIED

    def _handle_resolve(self, transaction: Transaction) -> ProcessingResult:
        found = self.find_disputable_entry(transaction, DisputeStage.OPEN)
        if isinstance(found, ProcessingResult):
            logger.debug(f"Resolve for tx {transaction.transaction_id}: {found.value}")
            return found

        account, entry = found
        account.release_hold(entry.amount)
        if self._resolve_policy is ResolvePolicy.CLEAR_DISPUTE:
            entry.dispute_stage = DisputeStage.NONE
        return ProcessingResult.APPLIED

    def _handle_chargeback(self, transaction: Transaction) -> ProcessingResult:
        found = self.find_disputable_entry(transaction, DisputeStage.OPEN)
        if isinstance(found, ProcessingResult):
            logger.debug(f"Chargeback for tx {transaction.transaction_id}: {found.value}")
            return found

        account, entry = found
        account.remove_held(entry.amount)
        entry.dispute_stage = DisputeStage.CHARGED_BACK
        account.lock()
        logger.info(f"Chargeback for tx {transaction.transaction_id}: client {account.client_id} locked")
        return ProcessingResult.APPLIED

