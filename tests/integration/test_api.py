"""Integration tests for API endpoints"""

import uuid
import pytest
from decimal import Decimal
from fastapi.testclient import TestClient


@pytest.fixture
def card_id(client: TestClient) -> str:
    """Card closing on the 10th with a 5000 limit"""
    response = client.post(
        "/v1/credit-cards",
        json={"user_id": "user_1", "name": "Visa", "limit": "5000.00", "closing_day": 10, "due_day": 17},
    )
    assert response.status_code == 201
    return response.json()["id"]


@pytest.fixture
def account_id(client: TestClient) -> str:
    response = client.post(
        "/v1/accounts",
        json={"user_id": "user_1", "name": "Checking", "type": "checking", "initial_balance": "1500.00"},
    )
    assert response.status_code == 201
    return response.json()["id"]


def post_transaction(client: TestClient, **fields):
    body = {"user_id": "user_1", "type": "expense", "category": "groceries", "amount": "10.00"}
    body.update(fields)
    return client.post("/v1/transactions", json=body)


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "household_transaction_writes_total" in response.text


def test_request_id_header(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"


def test_create_card_defaults_current_invoice_month(client: TestClient, card_id: str):
    """Clock is fixed at 2025-06-15 in tests"""
    response = client.get(f"/v1/credit-cards/{card_id}")
    assert response.status_code == 200
    assert response.json()["current_invoice_month"] == "2025-06"


def test_create_card_validation(client: TestClient):
    response = client.post(
        "/v1/credit-cards",
        json={"user_id": "user_1", "name": "Visa", "limit": "100", "closing_day": 0, "due_day": 35},
    )
    assert response.status_code == 422
    assert set(response.json()["fields"]) == {"closing_day", "due_day"}


def test_card_transaction_gets_invoice_month(client: TestClient, card_id: str):
    before = post_transaction(client, credit_card_id=card_id, transaction_date="2025-06-10")
    after = post_transaction(client, credit_card_id=card_id, transaction_date="2025-06-11T09:30:00")

    assert before.status_code == 201
    assert before.json()["invoice_month"] == "2025-06"
    assert after.json()["invoice_month"] == "2025-07"
    assert after.json()["transaction_date"] == "2025-06-11"


def test_account_transaction_has_no_invoice_month(client: TestClient, account_id: str):
    response = post_transaction(client, account_id=account_id, type="income", category="salary")

    assert response.status_code == 201
    data = response.json()
    assert data["invoice_month"] is None
    assert data["transaction_date"] == "2025-06-15"


def test_both_payment_sources_rejected(client: TestClient, card_id: str, account_id: str):
    response = post_transaction(client, credit_card_id=card_id, account_id=account_id)

    assert response.status_code == 422
    assert response.json()["error"] == "MutuallyExclusivePaymentSource"
    assert client.get("/v1/transactions?user_id=user_1").json() == []


def test_no_payment_source_rejected(client: TestClient):
    response = post_transaction(client)
    assert response.status_code == 422
    assert "payment_source" in response.json()["fields"]


def test_all_violations_reported(client: TestClient):
    response = post_transaction(client, amount="0", type="gift", category="")
    assert response.status_code == 422
    assert set(response.json()["fields"]) == {"payment_source", "amount", "type", "category"}


def test_unknown_card_is_404(client: TestClient):
    response = post_transaction(client, credit_card_id=str(uuid.uuid4()))
    assert response.status_code == 404
    assert response.json()["error"] == "CreditCardNotFound"


def test_invoice_totals(client: TestClient, card_id: str):
    for amount, day in (("100.50", "2025-06-02"), ("200.00", "2025-06-08"), ("50.25", "2025-06-05")):
        assert post_transaction(client, credit_card_id=card_id, amount=amount, transaction_date=day).status_code == 201
    # Next cycle
    post_transaction(client, credit_card_id=card_id, amount="999.00", transaction_date="2025-06-20")

    response = client.get(f"/v1/credit-cards/{card_id}/invoice", params={"month": "2025-06"})

    assert response.status_code == 200
    data = response.json()
    assert Decimal(data["total"]) == Decimal("350.75")
    assert Decimal(data["available_limit"]) == Decimal("4649.25")
    assert [t["transaction_date"] for t in data["transactions"]] == ["2025-06-08", "2025-06-05", "2025-06-02"]
    assert data["card"]["id"] == card_id

    # No writes in between: same answer
    assert client.get(f"/v1/credit-cards/{card_id}/invoice", params={"month": "2025-06"}).json() == data


def test_invoice_defaults_to_current_month(client: TestClient, card_id: str):
    response = client.get(f"/v1/credit-cards/{card_id}/invoice")
    assert response.status_code == 200
    assert response.json()["invoice_month"] == "2025-06"


def test_invoice_bad_month(client: TestClient, card_id: str):
    response = client.get(f"/v1/credit-cards/{card_id}/invoice", params={"month": "2025-6"})
    assert response.status_code == 422
    assert response.json()["error"] == "InvalidInvoiceMonth"


def test_invoice_unknown_card(client: TestClient):
    response = client.get(f"/v1/credit-cards/{uuid.uuid4()}/invoice", params={"month": "2025-06"})
    assert response.status_code == 404


def test_update_description_keeps_invoice_month(client: TestClient, card_id: str):
    created = post_transaction(client, credit_card_id=card_id, transaction_date="2025-06-09").json()

    response = client.patch(f"/v1/transactions/{created['id']}", json={"description": "bakery"})

    assert response.status_code == 200
    assert response.json()["description"] == "bakery"
    assert response.json()["invoice_month"] == "2025-06"


def test_update_date_recomputes_invoice_month(client: TestClient, card_id: str):
    created = post_transaction(client, credit_card_id=card_id, transaction_date="2025-06-09").json()

    response = client.patch(f"/v1/transactions/{created['id']}", json={"transaction_date": "2025-12-20"})

    assert response.json()["invoice_month"] == "2026-01"


def test_update_switch_to_account(client: TestClient, card_id: str, account_id: str):
    created = post_transaction(client, credit_card_id=card_id).json()

    response = client.patch(
        f"/v1/transactions/{created['id']}",
        json={"account_id": account_id, "credit_card_id": None},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["account_id"] == account_id
    assert data["credit_card_id"] is None
    assert data["invoice_month"] is None


def test_update_both_sources_rejected(client: TestClient, card_id: str, account_id: str):
    created = post_transaction(client, credit_card_id=card_id).json()

    response = client.put(
        f"/v1/transactions/{created['id']}",
        json={"account_id": account_id, "credit_card_id": card_id},
    )

    assert response.status_code == 422
    assert response.json()["error"] == "MutuallyExclusivePaymentSource"
    assert client.get(f"/v1/transactions/{created['id']}").json()["credit_card_id"] == card_id


def test_update_missing_transaction(client: TestClient):
    response = client.patch(f"/v1/transactions/{uuid.uuid4()}", json={"description": "x"})
    assert response.status_code == 404
    assert response.json()["error"] == "TransactionNotFound"


def test_list_and_delete_transactions(client: TestClient, account_id: str):
    post_transaction(client, account_id=account_id, transaction_date="2025-06-01", category="rent")
    post_transaction(client, account_id=account_id, transaction_date="2025-06-03", category="food")

    listed = client.get("/v1/transactions", params={"user_id": "user_1"}).json()
    assert [t["category"] for t in listed] == ["food", "rent"]

    food = client.get("/v1/transactions", params={"user_id": "user_1", "category": "food"}).json()
    assert len(food) == 1

    assert client.delete(f"/v1/transactions/{food[0]['id']}").status_code == 204
    assert client.get(f"/v1/transactions/{food[0]['id']}").status_code == 404


def test_card_delete_guard(client: TestClient, card_id: str):
    created = post_transaction(client, credit_card_id=card_id).json()

    response = client.delete(f"/v1/credit-cards/{card_id}")
    assert response.status_code == 409
    assert response.json()["error"] == "CreditCardInUse"

    client.delete(f"/v1/transactions/{created['id']}")
    assert client.delete(f"/v1/credit-cards/{card_id}").status_code == 204


def test_card_closing_day_change_keeps_past_invoices(client: TestClient, card_id: str):
    created = post_transaction(client, credit_card_id=card_id, transaction_date="2025-06-09").json()

    response = client.patch(f"/v1/credit-cards/{card_id}", json={"closing_day": 5})
    assert response.json()["closing_day"] == 5

    assert client.get(f"/v1/transactions/{created['id']}").json()["invoice_month"] == "2025-06"
    new = post_transaction(client, credit_card_id=card_id, transaction_date="2025-06-09").json()
    assert new["invoice_month"] == "2025-07"


def test_account_crud(client: TestClient, account_id: str):
    account = client.get(f"/v1/accounts/{account_id}").json()
    assert Decimal(account["current_balance"]) == Decimal("1500.00")

    updated = client.patch(f"/v1/accounts/{account_id}", json={"name": "Main"}).json()
    assert updated["name"] == "Main"

    assert len(client.get("/v1/accounts", params={"user_id": "user_1", "type": "savings"}).json()) == 0
    assert client.delete(f"/v1/accounts/{account_id}").status_code == 204
    assert client.get(f"/v1/accounts/{account_id}").status_code == 404


def test_account_delete_guard(client: TestClient, account_id: str):
    post_transaction(client, account_id=account_id)
    response = client.delete(f"/v1/accounts/{account_id}")
    assert response.status_code == 409
    assert response.json()["error"] == "AccountInUse"


def test_monthly_report(client: TestClient, account_id: str, card_id: str):
    post_transaction(client, account_id=account_id, type="income", category="salary", amount="4000.00",
                     transaction_date="2025-06-05")
    post_transaction(client, credit_card_id=card_id, category="food", amount="250.50", transaction_date="2025-06-12")

    response = client.get("/v1/reports/monthly", params={"user_id": "user_1"})

    assert response.status_code == 200
    data = response.json()
    assert (data["year"], data["month"]) == (2025, 6)
    assert Decimal(data["income"]) == Decimal("4000.00")
    assert Decimal(data["expenses"]) == Decimal("250.50")
    assert Decimal(data["net_balance"]) == Decimal("3749.50")
    assert Decimal(data["expenses_by_category"]["food"]) == Decimal("250.50")
    assert Decimal(data["total_account_balance"]) == Decimal("1500.00")


def test_sub_cent_amount_rejected(client: TestClient, card_id: str):
    response = post_transaction(client, credit_card_id=card_id, amount="0.001")

    assert response.status_code == 422
    assert response.json()["fields"] == {"amount": "must have at most 2 decimal places"}
    assert client.get("/v1/transactions", params={"user_id": "user_1"}).json() == []


def test_amount_above_column_precision_rejected(client: TestClient, card_id: str):
    response = post_transaction(client, credit_card_id=card_id, amount="10000000000.00")

    assert response.status_code == 422
    assert "amount" in response.json()["fields"]


def test_non_ascii_invoice_month_override_rejected(client: TestClient, card_id: str):
    created = post_transaction(client, credit_card_id=card_id, transaction_date="2025-06-09").json()

    response = client.patch(f"/v1/transactions/{created['id']}", json={"invoice_month": "٢٠٢٥-٠٦"})

    assert response.status_code == 422
    assert "invoice_month" in response.json()["fields"]
    assert client.get(f"/v1/transactions/{created['id']}").json()["invoice_month"] == "2025-06"


def test_same_day_invoice_transactions_keep_insertion_order(client: TestClient, card_id: str):
    ids = [
        post_transaction(client, credit_card_id=card_id, category=category, transaction_date="2025-06-04").json()["id"]
        for category in ("bakery", "pharmacy", "fuel")
    ]
    post_transaction(client, credit_card_id=card_id, category="books", transaction_date="2025-06-07")

    response = client.get(f"/v1/credit-cards/{card_id}/invoice", params={"month": "2025-06"})

    transactions = response.json()["transactions"]
    assert transactions[0]["category"] == "books"
    assert [t["id"] for t in transactions[1:]] == ids


def test_malformed_request_id_replaced(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "x" * 100})

    request_id = response.headers["X-Request-ID"]
    assert request_id != "x" * 100
    uuid.UUID(request_id)


def test_investment_lifecycle(client: TestClient):
    created = client.post(
        "/v1/investments",
        json={
            "user_id": "user_1",
            "type": "stock",
            "asset_name": " ACME ",
            "amount_invested": "1000.00",
            "purchase_date": "2025-01-10T10:00:00",
        },
    )
    assert created.status_code == 201
    data = created.json()
    assert data["asset_name"] == "ACME"
    assert data["purchase_date"] == "2025-01-10"
    assert Decimal(data["current_value"]) == Decimal("1000.00")
    assert Decimal(data["return_amount"]) == Decimal("0")

    updated = client.patch(f"/v1/investments/{data['id']}", json={"current_value": "1123.45"}).json()
    assert Decimal(updated["return_amount"]) == Decimal("123.45")
    assert Decimal(updated["return_percentage"]) == Decimal("12.35")

    assert client.delete(f"/v1/investments/{data['id']}").status_code == 204
    missing = client.get(f"/v1/investments/{data['id']}")
    assert missing.status_code == 404
    assert missing.json()["error"] == "InvestmentNotFound"


def test_investment_list_summary(client: TestClient):
    for asset, kind, invested, current, day in (
        ("ACME", "stock", "1000.00", "1200.00", "2025-01-10"),
        ("Index", "fund", "500.00", "450.00", "2025-03-05"),
    ):
        response = client.post(
            "/v1/investments",
            json={
                "user_id": "user_1",
                "type": kind,
                "asset_name": asset,
                "amount_invested": invested,
                "current_value": current,
                "purchase_date": day,
            },
        )
        assert response.status_code == 201

    data = client.get("/v1/investments", params={"user_id": "user_1"}).json()

    assert [i["asset_name"] for i in data["investments"]] == ["Index", "ACME"]
    summary = data["summary"]
    assert Decimal(summary["total_invested"]) == Decimal("1500.00")
    assert Decimal(summary["total_current_value"]) == Decimal("1650.00")
    assert Decimal(summary["total_return"]) == Decimal("150.00")
    assert Decimal(summary["total_return_percentage"]) == Decimal("10.00")
    assert summary["count"] == 2

    stocks = client.get("/v1/investments", params={"user_id": "user_1", "type": "stock"}).json()
    assert stocks["summary"]["count"] == 1


def test_investment_validation(client: TestClient):
    response = client.post(
        "/v1/investments",
        json={
            "user_id": "user_1",
            "type": "bond",
            "asset_name": "X",
            "amount_invested": "0",
            "purchase_date": "2025-01-10",
        },
    )

    assert response.status_code == 422
    assert set(response.json()["fields"]) == {"type", "amount_invested"}
