from dataclasses import replace
from typing import Dict, Optional

from errors import LedgerStateError
from models import ClientAccount, LedgerEntry


class LedgerState:
    """
    In-memory state owned by a single engine instance.
    Stores client accounts and the ledger entries that disputes refer back to.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        self._entries: Dict[int, LedgerEntry] = {}

    def get_account(self, client_id: int) -> Optional[ClientAccount]:
        """Return the account for a client, or None if it was never opened."""
        return self._accounts.get(client_id)

    def open_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create a zeroed one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def has_entry(self, transaction_id: int) -> bool:
        return transaction_id in self._entries

    def get_entry(self, transaction_id: int) -> Optional[LedgerEntry]:
        """Retrieve a ledger entry by transaction ID."""
        return self._entries.get(transaction_id)

    def record_entry(self, transaction_id: int, entry: LedgerEntry) -> None:
        """Store a ledger entry for future dispute lookups. Entries are never replaced."""
        if transaction_id in self._entries:
            raise LedgerStateError(f"Transaction id {transaction_id} already has a ledger entry")
        self._entries[transaction_id] = entry

    def get_all_accounts(self) -> Dict[int, ClientAccount]:
        """Return copies of all accounts (for final output)."""
        return {client_id: replace(account) for client_id, account in self._accounts.items()}
