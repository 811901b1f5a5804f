"""Unit tests for transaction create/update orchestration"""

import uuid
import pytest
from datetime import date
from decimal import Decimal
from household_finance.domain.exceptions import NotFoundError, ValidationError
from household_finance.domain.models import TransactionInput, TransactionPatch
from household_finance.domain.payments import TransactionPaymentAssigner
from household_finance.domain.transactions import TransactionService


@pytest.fixture
def service(card_repo, account_repo, transaction_repo) -> TransactionService:
    assigner = TransactionPaymentAssigner(card_repo, account_repo, today=lambda: date(2025, 6, 15))
    return TransactionService(transaction_repo, assigner)


def test_create_persists_with_invoice_month(service, card, transaction_repo):
    created = service.create_transaction(
        TransactionInput(
            user_id="user_1",
            type="expense",
            category="fuel",
            amount=Decimal("80.00"),
            transaction_date=date(2025, 6, 10),
            credit_card_id=card.id,
        )
    )

    stored = transaction_repo.find_by_id(created.id)
    assert stored.invoice_month == "2025-06"


def test_failed_validation_persists_nothing(service, card, account, transaction_repo):
    with pytest.raises(ValidationError):
        service.create_transaction(
            TransactionInput(
                user_id="user_1",
                type="expense",
                category="fuel",
                amount=Decimal("80.00"),
                credit_card_id=card.id,
                account_id=account.id,
            )
        )
    assert transaction_repo.saves == 0


def test_failed_lookup_persists_nothing(service, transaction_repo):
    with pytest.raises(NotFoundError):
        service.create_transaction(
            TransactionInput(
                user_id="user_1", type="expense", category="fuel", amount=Decimal("1"), credit_card_id=uuid.uuid4()
            )
        )
    assert transaction_repo.saves == 0


def test_update_recomputes_on_date_change(service, card, transaction_repo, transaction_factory):
    existing = transaction_repo.save(
        transaction_factory(transaction_date=date(2025, 6, 9), credit_card_id=card.id, invoice_month="2025-06")
    )

    updated = service.update_transaction(existing.id, TransactionPatch(transaction_date=date(2025, 6, 11)))

    assert updated.invoice_month == "2025-07"
    assert transaction_repo.find_by_id(existing.id).invoice_month == "2025-07"


def test_update_description_only(service, card, transaction_repo, transaction_factory):
    existing = transaction_repo.save(
        transaction_factory(transaction_date=date(2025, 6, 9), credit_card_id=card.id, invoice_month="2025-06")
    )

    updated = service.update_transaction(existing.id, TransactionPatch(description="note"))

    assert updated.description == "note"
    assert updated.invoice_month == "2025-06"


def test_update_missing_transaction(service):
    with pytest.raises(NotFoundError) as exc_info:
        service.update_transaction(uuid.uuid4(), TransactionPatch(description="x"))
    assert exc_info.value.code == "TransactionNotFound"


def test_list_rejects_inverted_range(service):
    with pytest.raises(ValidationError):
        service.list_transactions("user_1", start_date=date(2025, 7, 1), end_date=date(2025, 6, 1))


def test_list_filters(service, account, transaction_repo, transaction_factory):
    transaction_repo.save(transaction_factory(account_id=account.id, category="rent", transaction_date=date(2025, 6, 1)))
    transaction_repo.save(transaction_factory(account_id=account.id, category="food", transaction_date=date(2025, 6, 3)))
    transaction_repo.save(transaction_factory(account_id=account.id, category="food", transaction_date=date(2025, 7, 3)))

    june_food = service.list_transactions(
        "user_1", category="food", start_date=date(2025, 6, 1), end_date=date(2025, 6, 30)
    )
    assert len(june_food) == 1


def test_delete(service, account, transaction_repo, transaction_factory):
    existing = transaction_repo.save(transaction_factory(account_id=account.id))

    service.delete_transaction(existing.id)

    assert transaction_repo.find_by_id(existing.id) is None
    with pytest.raises(NotFoundError):
        service.delete_transaction(existing.id)


def test_revise_returns_previous_state_from_one_lookup(service, card, transaction_repo, transaction_factory):
    existing = transaction_repo.save(
        transaction_factory(transaction_date=date(2025, 6, 9), credit_card_id=card.id, invoice_month="2025-06")
    )
    transaction_repo.lookups = 0

    before, after = service.revise_transaction(existing.id, TransactionPatch(transaction_date=date(2025, 6, 20)))

    assert transaction_repo.lookups == 1
    assert before.invoice_month == "2025-06"
    assert before.transaction_date == date(2025, 6, 9)
    assert after.invoice_month == "2025-07"


def test_create_rejects_sub_cent_amount(service, card, transaction_repo):
    with pytest.raises(ValidationError) as exc_info:
        service.create_transaction(
            TransactionInput(
                user_id="user_1", type="expense", category="fuel", amount=Decimal("0.001"), credit_card_id=card.id
            )
        )
    assert exc_info.value.errors["amount"] == "must have at most 2 decimal places"
    assert transaction_repo.saves == 0
