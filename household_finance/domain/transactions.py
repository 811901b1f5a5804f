"""Transaction use cases: validate → lookup → compute → persist"""

import uuid
from datetime import date
from typing import List, Optional, Tuple

from household_finance.domain.exceptions import NotFoundError, ValidationError
from household_finance.domain.models import Transaction, TransactionInput, TransactionPatch
from household_finance.domain.payments import TransactionPaymentAssigner
from household_finance.domain.repositories import TransactionRepository


class TransactionService:
    """
    Entry point for the transaction operations exposed to the API.

    No locking is done around lookup + save: two concurrent updates to the
    same transaction (or a closing-day change racing a create) resolve as
    last-write-wins at the storage layer.
    """

    def __init__(self, transactions: TransactionRepository, assigner: TransactionPaymentAssigner):
        self.transactions = transactions
        self.assigner = assigner

    def create_transaction(self, data: TransactionInput) -> Transaction:
        transaction = self.assigner.prepare_create(data)
        return self.transactions.save(transaction)

    def update_transaction(self, transaction_id: uuid.UUID, patch: TransactionPatch) -> Transaction:
        return self.revise_transaction(transaction_id, patch)[1]

    def revise_transaction(
        self, transaction_id: uuid.UUID, patch: TransactionPatch
    ) -> Tuple[Transaction, Transaction]:
        """Apply ``patch`` and return (previous, updated) from a single lookup"""
        existing = self.get_transaction(transaction_id)
        updated = self.assigner.prepare_update(existing, patch)
        return existing, self.transactions.save(updated)

    def get_transaction(self, transaction_id: uuid.UUID) -> Transaction:
        transaction = self.transactions.find_by_id(transaction_id)
        if transaction is None:
            raise NotFoundError(f"Transaction {transaction_id} not found", code="TransactionNotFound")
        return transaction

    def list_transactions(
        self,
        user_id: str,
        type: Optional[str] = None,
        category: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[Transaction]:
        if start_date and end_date and start_date > end_date:
            raise ValidationError({"start_date": "must not be after end_date"})
        return self.transactions.list_by_user(
            user_id, type=type, category=category, start_date=start_date, end_date=end_date
        )

    def delete_transaction(self, transaction_id: uuid.UUID) -> None:
        if not self.transactions.delete_by_id(transaction_id):
            raise NotFoundError(f"Transaction {transaction_id} not found", code="TransactionNotFound")
