"""
Balance calculation.

Balance is never stored. It is always derived from the entries:

    balance = sum(DEPOSIT, TRANSFER_CREDIT) - sum(WITHDRAW, TRANSFER_DEBIT)

This guarantees the balance is correct as long as the entries
are correct. Amounts and balances are integers in minor units.
"""

from typing import Iterable

from statement_ledger.models.enums import CREDIT_ENTRY_TYPES, DEBIT_ENTRY_TYPES


def calculate_balance(entries: Iterable) -> int:
    """Fold entries into a signed balance. No entries means zero."""
    balance = 0
    for entry in entries:
        if entry.entry_type in CREDIT_ENTRY_TYPES:
            balance += entry.amount
        elif entry.entry_type in DEBIT_ENTRY_TYPES:
            balance -= entry.amount
        else:
            raise ValueError(f"Unknown entry type: {entry.entry_type!r}")
    return balance


class BalanceCalculator:
    """
    Computes an account's balance from the ledger store.

    The store decides how to read the entries; a SQL store sums
    them in the database, the in-memory store folds them with
    calculate_balance().
    """

    def __init__(self, store):
        self.store = store

    def compute_balance(self, account_id) -> int:
        return self.store.get_balance(account_id)
