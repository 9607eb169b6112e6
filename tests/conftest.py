"""Shared pytest fixtures for transaction tests."""

import os
import sys
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from models import Transaction, TransactionType


@pytest.fixture
def make_tx():
    """Factory building a Transaction from a type tag, client, tx id and optional amount."""

    def _make(tx_type, client_id, transaction_id, amount=None):
        return Transaction(
            transaction_type=TransactionType.parse(tx_type),
            client_id=client_id,
            transaction_id=transaction_id,
            amount=None if amount is None else Decimal(amount),
            raw_type=tx_type,
        )

    return _make
