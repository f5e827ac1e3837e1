"""In-memory transaction store, one ordered list per user"""

import threading
import uuid
from dataclasses import replace
from typing import Dict, List

from wealthease.domain.exceptions import TransactionNotFoundError
from wealthease.domain.models import Transaction


class TransactionStore:
    """
    Owns every user's transaction list for the lifetime of the app.

    Readers get copies; analysis code never sees the stored lists. Writes
    replace a user's list wholesale under a lock, so the last write wins.
    """

    def __init__(self):
        self._transactions: Dict[str, List[Transaction]] = {}
        self._lock = threading.Lock()

    def list_transactions(self, user_id: str) -> List[Transaction]:
        with self._lock:
            return list(self._transactions.get(user_id, []))

    def add_transaction(self, user_id: str, transaction: Transaction) -> Transaction:
        """Append a transaction, assigning an id when it has none"""
        if not transaction.id:
            transaction = replace(transaction, id=str(uuid.uuid4()))

        with self._lock:
            updated = list(self._transactions.get(user_id, []))
            updated.append(transaction)
            self._transactions[user_id] = updated
        return transaction

    def update_transaction(self, user_id: str, transaction_id: str, transaction: Transaction) -> Transaction:
        """Replace a stored transaction in place, keeping its id and position"""
        transaction = replace(transaction, id=transaction_id)

        with self._lock:
            updated = list(self._transactions.get(user_id, []))
            for index, current in enumerate(updated):
                if current.id == transaction_id:
                    updated[index] = transaction
                    break
            else:
                raise TransactionNotFoundError(f"Transaction {transaction_id} not found")
            self._transactions[user_id] = updated
        return transaction

    def delete_transaction(self, user_id: str, transaction_id: str) -> None:
        with self._lock:
            current = self._transactions.get(user_id, [])
            remaining = [t for t in current if t.id != transaction_id]
            if len(remaining) == len(current):
                raise TransactionNotFoundError(f"Transaction {transaction_id} not found")
            self._transactions[user_id] = remaining

    def replace_transactions(self, user_id: str, transactions: List[Transaction]) -> None:
        with self._lock:
            self._transactions[user_id] = list(transactions)
