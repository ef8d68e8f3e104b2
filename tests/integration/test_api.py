"""Integration tests for API endpoints"""

import pytest
from decimal import Decimal
from fastapi.testclient import TestClient

HEADERS = {"X-User-Id": "user_alice"}
OTHER = {"X-User-Id": "user_bob"}


@pytest.fixture
def lent_loan(client: TestClient, account):
    """LENT loan of 400.00 funded from the default account"""
    response = client.post(
        "/v1/loans",
        json={"person_name": "Sam", "loan_type": "LENT", "principal_amount": "400.00", "account_id": account.id},
        headers=HEADERS,
    )
    assert response.status_code == 201
    return response.json()


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "ledger_balance_mutations" in response.text
    assert "ledger_recurring_payments" in response.text


def test_request_id_is_echoed(client: TestClient):
    """Test caller-supplied request ID comes back on the response"""
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


def test_owner_header_required(client: TestClient):
    """Test requests without an owner identity are rejected"""
    response = client.get("/v1/loans")
    assert response.status_code == 422


def test_create_loan_with_interest(client: TestClient, account, read_balance):
    """Test POST /v1/loans computes totals and debits the account"""
    response = client.post(
        "/v1/loans",
        json={
            "person_name": "Sam",
            "loan_type": "LENT",
            "principal_amount": "1000.00",
            "interest_rate": "5",
            "account_id": account.id,
            "due_date": "2030-01-01",
        },
        headers=HEADERS,
    )

    assert response.status_code == 201
    data = response.json()
    assert Decimal(data["total_amount"]) == Decimal("1050.00")
    assert Decimal(data["remaining_amount"]) == Decimal("1050.00")
    assert data["status"] == "ACTIVE"
    assert read_balance(account.id) == Decimal("0.00")


def test_create_loan_insufficient_funds(client: TestClient, make_account, read_balance):
    """Test LENT beyond the balance returns 400 and changes nothing"""
    acc = make_account("300.00")

    response = client.post(
        "/v1/loans",
        json={"person_name": "Sam", "loan_type": "LENT", "principal_amount": "500.00", "account_id": acc.id},
        headers=HEADERS,
    )

    assert response.status_code == 400
    assert "Insufficient balance" in response.json()["detail"]
    assert read_balance(acc.id) == Decimal("300.00")
    assert client.get("/v1/loans", headers=HEADERS).json() == []


@pytest.mark.parametrize(
    "payload",
    [
        {"person_name": "Sam", "loan_type": "LENT", "principal_amount": "0"},
        {"person_name": "Sam", "loan_type": "GIFTED", "principal_amount": "10"},
        {"person_name": "Sam", "loan_type": "LENT", "principal_amount": "10", "interest_rate": "-2"},
    ],
)
def test_create_loan_invalid(client: TestClient, payload):
    """Test domain validation errors map to 400"""
    response = client.post("/v1/loans", json=payload, headers=HEADERS)
    assert response.status_code == 400


def test_loan_hidden_from_other_owner(client: TestClient, lent_loan):
    """Test foreign loans are reported as missing"""
    response = client.get(f"/v1/loans/{lent_loan['id']}", headers=OTHER)
    assert response.status_code == 404

    response = client.post(f"/v1/loans/{lent_loan['id']}/payments", json={"amount": "10.00"}, headers=OTHER)
    assert response.status_code == 404


def test_loan_payments(client: TestClient, lent_loan, account, read_balance):
    """Test POST /v1/loans/{id}/payments moves the loan through its statuses"""
    url = f"/v1/loans/{lent_loan['id']}/payments"

    first = client.post(url, json={"amount": "150.00"}, headers=HEADERS)
    assert first.status_code == 200
    assert first.json()["status"] == "PARTIALLY_PAID"
    assert Decimal(first.json()["remaining_amount"]) == Decimal("250.00")

    second = client.post(url, json={"amount": "250.00"}, headers=HEADERS)
    assert second.json()["status"] == "PAID_OFF"
    assert read_balance(account.id) == Decimal("1000.00")


def test_loan_installment(client: TestClient, lent_loan, make_account):
    """Test POST /v1/loans/{id}/installments returns a receipt"""
    wallet = make_account("0.00", name="Wallet")

    response = client.post(
        f"/v1/loans/{lent_loan['id']}/installments",
        json={"account_id": wallet.id, "amount": "100.00", "note": "first"},
        headers=HEADERS,
    )

    assert response.status_code == 201
    data = response.json()
    assert data["loan_id"] == lent_loan["id"]
    assert data["currency"] == "JD"
    assert data["status"] == "APPLIED"
    assert data["loan_status"] == "PARTIALLY_PAID"
    assert Decimal(data["remaining_balance"]) == Decimal("300.00")


def test_urgent_flag(client: TestClient, lent_loan):
    """Test POST/DELETE /v1/loans/{id}/urgent"""
    url = f"/v1/loans/{lent_loan['id']}/urgent"

    assert client.post(url, headers=HEADERS).json()["is_urgent"] is True
    assert client.post(url, headers=HEADERS).json()["is_urgent"] is True
    assert client.delete(url, headers=HEADERS).json()["is_urgent"] is False


def test_list_loans_and_summary(client: TestClient, lent_loan):
    """Test GET /v1/loans filters and GET /v1/loans/summary"""
    client.post(
        "/v1/loans",
        json={"person_name": "Kim", "loan_type": "BORROWED", "principal_amount": "150.00"},
        headers=HEADERS,
    )

    assert len(client.get("/v1/loans", headers=HEADERS).json()) == 2
    lent = client.get("/v1/loans", params={"loan_type": "LENT"}, headers=HEADERS).json()
    assert [l["id"] for l in lent] == [lent_loan["id"]]

    summary = client.get("/v1/loans/summary", headers=HEADERS).json()
    assert Decimal(summary["total_amount_lent"]) == Decimal("400.00")
    assert Decimal(summary["total_amount_borrowed"]) == Decimal("150.00")
    assert Decimal(summary["net_loan_position"]) == Decimal("250.00")


def test_recurring_expense_lifecycle(client: TestClient, account, read_balance):
    """Test create, pay, pause, resume and cancel"""
    created = client.post(
        "/v1/recurring-expenses",
        json={
            "name": "Internet",
            "amount": "50.00",
            "frequency": "MONTHLY",
            "start_date": "2024-01-31",
            "account_id": account.id,
        },
        headers=HEADERS,
    )
    assert created.status_code == 201
    expense = created.json()
    assert expense["next_due_date"] == "2024-02-29"
    base = f"/v1/recurring-expenses/{expense['id']}"

    paid = client.post(f"{base}/pay", headers=HEADERS)
    assert paid.status_code == 200
    assert paid.json()["last_paid_date"] is not None
    assert read_balance(account.id) == Decimal("950.00")

    assert client.post(f"{base}/pause", headers=HEADERS).json()["status"] == "PAUSED"
    rejected = client.post(f"{base}/pay", headers=HEADERS)
    assert rejected.status_code == 400
    assert read_balance(account.id) == Decimal("950.00")

    assert client.post(f"{base}/resume", headers=HEADERS).json()["status"] == "ACTIVE"
    assert client.post(f"{base}/cancel", headers=HEADERS).json()["status"] == "CANCELLED"
    assert client.post(f"{base}/resume", headers=HEADERS).status_code == 400
    assert client.get(base, headers=OTHER).status_code == 404


def test_recurring_expense_unknown_frequency(client: TestClient):
    """Test unsupported frequency is a 400"""
    response = client.post(
        "/v1/recurring-expenses",
        json={"name": "Gym", "amount": "20.00", "frequency": "HOURLY", "start_date": "2024-01-01"},
        headers=HEADERS,
    )
    assert response.status_code == 400


def test_process_due(client: TestClient, make_account, read_balance):
    """Test POST /v1/recurring-expenses/process-due pays what it can"""
    main = make_account("1000.00")
    poor = make_account("5.00", name="Poor")
    for name, amount, acc in [("Rent", "300.00", main), ("Gym", "40.00", poor), ("Phone", "25.00", main)]:
        client.post(
            "/v1/recurring-expenses",
            json={
                "name": name,
                "amount": amount,
                "frequency": "MONTHLY",
                "start_date": "2024-01-01",
                "next_due_date": "2024-03-01",
                "is_auto_pay": True,
                "account_id": acc.id,
            },
            headers=HEADERS,
        )

    due = client.get("/v1/recurring-expenses/due-today", params={"today": "2024-03-01"}, headers=HEADERS)
    assert len(due.json()) == 3

    response = client.post("/v1/recurring-expenses/process-due", params={"today": "2024-03-01"}, headers=HEADERS)

    assert response.status_code == 200
    data = response.json()
    assert data["examined"] == 3
    assert data["paid_count"] == 2
    assert len(data["failures"]) == 1
    assert read_balance(main.id) == Decimal("675.00")
    assert read_balance(poor.id) == Decimal("5.00")

    overdue = client.get("/v1/recurring-expenses/overdue", params={"today": "2024-03-02"}, headers=HEADERS)
    assert [e["name"] for e in overdue.json()] == ["Gym"]


def test_post_transactions(client: TestClient, make_account, read_balance):
    """Test POST /v1/transactions for income and transfer"""
    checking = make_account("100.00")
    savings = make_account("0.00", name="Savings")

    income = client.post(
        "/v1/transactions",
        json={"description": "Salary", "amount": "900.00", "type": "INCOME", "account_id": checking.id},
        headers=HEADERS,
    )
    assert income.status_code == 201
    assert income.json()["type"] == "INCOME"

    transfer = client.post(
        "/v1/transactions",
        json={
            "description": "Save",
            "amount": "400.00",
            "type": "TRANSFER",
            "account_id": checking.id,
            "transfer_to_account_id": savings.id,
        },
        headers=HEADERS,
    )
    assert transfer.status_code == 201
    assert read_balance(checking.id) == Decimal("600.00")
    assert read_balance(savings.id) == Decimal("400.00")

    overdraw = client.post(
        "/v1/transactions",
        json={"description": "TV", "amount": "5000.00", "type": "EXPENSE", "account_id": checking.id},
        headers=HEADERS,
    )
    assert overdraw.status_code == 400


def test_net_worth(client: TestClient, make_account):
    """Test GET /v1/net-worth: 10000 + 2000 lent - 3000 borrowed"""
    make_account("10000.00")
    for loan_type, amount in [("LENT", "2000.00"), ("BORROWED", "3000.00")]:
        client.post(
            "/v1/loans",
            json={"person_name": "Sam", "loan_type": loan_type, "principal_amount": amount},
            headers=HEADERS,
        )

    response = client.get("/v1/net-worth", headers=HEADERS)

    assert response.status_code == 200
    data = response.json()
    assert Decimal(data["total_net_worth"]) == Decimal("9000.00")
    assert Decimal(data["net_loan_position"]) == Decimal("-1000.00")
    assert data["currency"] == "JD"
    assert len(data["loan_summary_by_type"]) == 2

    assert Decimal(client.get("/v1/net-worth", headers=OTHER).json()["total_net_worth"]) == Decimal("0")
