"""Integration tests for API endpoints"""

import pytest
from unittest.mock import AsyncMock, patch
from datetime import datetime
from decimal import Decimal
from fastapi.testclient import TestClient
from prometheus_client import REGISTRY
from sqlalchemy.orm import Session
from card_portal.domain.exceptions import AuthenticationError, PortalAPIError, RemoteValidationError
from card_portal.domain.models import Customer, Page, PortalSession, Transaction, UserProfile
from card_portal.infrastructure.database.repositories import SessionRepository
from tests.factories import make_card, make_txn

AUTH = "card_portal.infrastructure.clients.auth.AuthClient"
CARDS = "card_portal.infrastructure.clients.cards.CardClient"
CUSTOMERS = "card_portal.infrastructure.clients.customers.CustomerClient"
TRANSACTIONS = "card_portal.infrastructure.clients.transactions.TransactionClient"


@pytest.fixture
def history() -> list[Transaction]:
    """Customer history: 100 spent, 40 paid, one declined and one pending purchase"""
    return [
        make_txn("PURCHASE", "APPROVED", Decimal("100.00"), txn_id="100", when=datetime(2026, 9, 2)),
        make_txn("PAYMENT", "SUCCESS", Decimal("40.00"), txn_id="101", when=datetime(2026, 9, 10)),
        make_txn("PURCHASE", "DECLINED", Decimal("500.00"), txn_id="102", when=datetime(2026, 9, 12)),
        make_txn("PURCHASE", "PENDING", Decimal("20.00"), txn_id="103", when=datetime(2026, 9, 15)),
    ]


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "card_portal_active_sessions" in response.text


def test_request_id_is_propagated(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


# --- Sessions ---


@patch(f"{AUTH}.login")
def test_login_opens_session(mock_login: AsyncMock, client: TestClient, db: Session, customer_user: UserProfile):
    """Test POST /v1/auth/login stores the token behind a session id"""
    mock_login.return_value = ("jwt-alice", customer_user)

    response = client.post("/v1/auth/login", json={"username": "alice", "password": "alice123"})

    assert response.status_code == 200
    data = response.json()
    assert data["user"]["username"] == "alice"
    stored = SessionRepository(db).get_session(data["sessionId"])
    assert stored is not None
    assert stored.token == "jwt-alice"
    assert stored.user == customer_user


@patch(f"{AUTH}.login")
def test_login_rejected(mock_login: AsyncMock, client: TestClient):
    mock_login.side_effect = AuthenticationError("Invalid username or password", 401)

    response = client.post("/v1/auth/login", json={"username": "alice", "password": "wrong"})

    assert response.status_code == 401
    assert response.json()["error_type"] == "authentication_failed"


def test_login_requires_credentials(client: TestClient):
    response = client.post("/v1/auth/login", json={"username": "", "password": ""})
    assert response.status_code == 422


@patch(f"{AUTH}.register")
def test_register_normalizes_fields(mock_register: AsyncMock, client: TestClient):
    """Test registration trims names, lower-cases email and sends phone digits"""
    mock_register.return_value = UserProfile(id="9", username="carol", role="CUSTOMER", email="carol@example.com")

    response = client.post(
        "/v1/auth/register",
        json={
            "username": " carol ",
            "password": "secret1",
            "email": " Carol@Example.COM ",
            "firstName": " Carol ",
            "lastName": "Diaz",
            "phone": "(555) 010-2030",
        },
    )

    assert response.status_code == 201
    assert response.json() == {
        "id": "9",
        "username": "carol",
        "role": "CUSTOMER",
        "email": "carol@example.com",
        "firstName": None,
        "lastName": None,
    }
    payload = mock_register.call_args.args[0]
    assert payload["username"] == "carol"
    assert payload["email"] == "carol@example.com"
    assert payload["firstName"] == "Carol"
    assert payload["phone"] == 5550102030
    assert payload["role"] == "CUSTOMER"


def test_missing_session_header(client: TestClient):
    response = client.get("/v1/cards")
    assert response.status_code == 401
    assert response.json()["error_type"] == "session_not_found"


def test_unknown_session_id(client: TestClient):
    response = client.get("/v1/cards", headers={"X-Session-ID": "not-a-uuid"})
    assert response.status_code == 401


def test_logout_is_idempotent(client: TestClient, db: Session, customer_headers: dict, customer_session: PortalSession):
    """Test logout closes the session and a second logout is a no-op"""
    assert client.post("/v1/auth/logout", headers=customer_headers).status_code == 204
    assert client.post("/v1/auth/logout", headers=customer_headers).status_code == 204
    assert SessionRepository(db).get_session(customer_session.session_id) is None
    assert client.get("/v1/cards", headers=customer_headers).status_code == 401


@patch(f"{CARDS}.list_by_customer")
def test_remote_401_tears_down_session(
    mock_cards: AsyncMock, client: TestClient, db: Session, customer_headers: dict, customer_session: PortalSession
):
    """Test an expired remote token logs the portal session out"""
    mock_cards.side_effect = AuthenticationError("Portal API rejected the session token", 401)

    response = client.get("/v1/cards", headers=customer_headers)

    assert response.status_code == 401
    assert response.json()["error_type"] == "authentication_failed"
    db.expire_all()
    assert SessionRepository(db).get_session(customer_session.session_id) is None


@patch(f"{AUTH}.validate_token")
def test_me_revalidates_token(mock_validate: AsyncMock, client: TestClient, customer_headers: dict):
    mock_validate.return_value = None

    response = client.get("/v1/auth/me", headers=customer_headers)

    assert response.status_code == 200
    assert response.json()["username"] == "alice"
    mock_validate.assert_awaited_once()


def test_customer_cannot_open_admin_routes(client: TestClient, customer_headers: dict):
    response = client.get("/v1/admin/dashboard", headers=customer_headers)
    assert response.status_code == 403
    assert response.json()["error_type"] == "permission_denied"


# --- Customer screens ---


@patch(f"{TRANSACTIONS}.list_by_customer")
@patch(f"{TRANSACTIONS}.fetch_all_for_customer")
def test_transactions_statistics_cover_full_set(
    mock_fetch_all: AsyncMock,
    mock_page: AsyncMock,
    client: TestClient,
    customer_headers: dict,
    history: list[Transaction],
):
    """Test totals come from every record while the list shows one page"""
    mock_fetch_all.return_value = history
    mock_page.return_value = Page(items=history[:2], number=0, size=2, total_pages=2, total_elements=4)

    response = client.get("/v1/transactions", headers=customer_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["statistics"]["totalSpent"] == 100.0
    assert data["statistics"]["totalPaid"] == 40.0
    assert data["statistics"]["pendingAmount"] == 60.0
    assert data["statistics"]["totalTransactions"] == 4
    assert data["statisticsScope"] == "all"
    assert [t["id"] for t in data["transactions"]] == ["100", "101"]
    assert data["totalElements"] == 4
    mock_fetch_all.assert_awaited_once_with("2")


@patch(f"{TRANSACTIONS}.fetch_all_for_customer")
def test_statistics_endpoint_flat_shape(
    mock_fetch_all: AsyncMock, client: TestClient, customer_headers: dict, history: list[Transaction]
):
    mock_fetch_all.return_value = history

    response = client.get("/v1/transactions/statistics", headers=customer_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["totalSpent"] == 100.0
    assert data["pendingCount"] == 1
    assert data["declinedCount"] == 1
    assert data["scope"] == "all"


@patch(f"{CARDS}.list_by_customer")
def test_statistics_for_foreign_card_is_not_found(mock_cards: AsyncMock, client: TestClient, customer_headers: dict):
    """Test a card outside the customer's own list reads as missing"""
    mock_cards.return_value = [make_card("10")]

    response = client.get("/v1/transactions/statistics", params={"cardId": "12"}, headers=customer_headers)

    assert response.status_code == 404


@patch(f"{TRANSACTIONS}.list_by_customer")
@patch(f"{TRANSACTIONS}.fetch_all_for_customer")
def test_transactions_type_and_status_filter_narrow_list_only(
    mock_fetch_all: AsyncMock,
    mock_page: AsyncMock,
    client: TestClient,
    customer_headers: dict,
    history: list[Transaction],
):
    """Test a filtered list still reports totals over every record"""
    mock_fetch_all.return_value = history

    response = client.get(
        "/v1/transactions", params={"type": "purchase", "status": "DECLINED"}, headers=customer_headers
    )

    assert response.status_code == 200
    data = response.json()
    assert [t["id"] for t in data["transactions"]] == ["102"]
    assert data["totalElements"] == 1
    assert data["totalPages"] == 1
    assert data["statistics"]["totalTransactions"] == 4
    assert data["statistics"]["totalSpent"] == 100.0
    mock_page.assert_not_awaited()


@patch(f"{TRANSACTIONS}.fetch_all_for_customer")
def test_transactions_type_filter_pages_matches(
    mock_fetch_all: AsyncMock, client: TestClient, customer_headers: dict, history: list[Transaction]
):
    mock_fetch_all.return_value = history * 4

    response = client.get("/v1/transactions", params={"type": "PURCHASE", "page": 1}, headers=customer_headers)

    data = response.json()
    assert data["totalElements"] == 12
    assert data["totalPages"] == 2
    assert data["page"] == 1
    assert len(data["transactions"]) == 2


@patch(f"{TRANSACTIONS}.fetch_all_for_customer")
@patch(f"{TRANSACTIONS}.list_by_customer")
@patch(f"{CARDS}.list_by_customer")
def test_customer_dashboard(
    mock_cards: AsyncMock,
    mock_recent: AsyncMock,
    mock_fetch_all: AsyncMock,
    client: TestClient,
    customer_headers: dict,
    history: list[Transaction],
):
    mock_cards.return_value = [make_card("10"), make_card("11", status="BLOCKED", credit_limit="1000.00")]
    mock_recent.return_value = Page(items=history[:3], number=0, size=10, total_pages=1, total_elements=4)
    mock_fetch_all.return_value = history

    response = client.get("/v1/customer/dashboard", headers=customer_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["activeCards"] == 1
    assert data["totalCreditLimit"] == 6000.0
    assert len(data["recentTransactions"]) == 3
    assert data["statistics"]["pendingAmount"] == 60.0
    assert data["cards"][0]["maskedNumber"] == "**** **** **** 1010"


@patch(f"{TRANSACTIONS}.make_payment")
@patch(f"{CARDS}.list_by_customer")
def test_payment_submitted(mock_cards: AsyncMock, mock_payment: AsyncMock, client: TestClient, customer_headers: dict):
    mock_cards.return_value = [make_card("10", available_credit="4940.00")]
    mock_payment.return_value = make_txn("PAYMENT", "SUCCESS", Decimal("60.00"), txn_id="900")

    response = client.post(
        "/v1/transactions/payments", json={"cardId": "10", "amount": "60.00"}, headers=customer_headers
    )

    assert response.status_code == 201
    data = response.json()
    assert data["transaction"]["status"] == "SUCCESS"
    assert data["outstandingBefore"] == 60.0
    mock_payment.assert_awaited_once_with("10", Decimal("60.00"), "Credit Card Payment")


@patch(f"{TRANSACTIONS}.make_payment")
@patch(f"{CARDS}.list_by_customer")
def test_overpayment_rejected_before_submit(
    mock_cards: AsyncMock, mock_payment: AsyncMock, client: TestClient, customer_headers: dict
):
    """Test paying above the outstanding balance never reaches the remote API"""
    mock_cards.return_value = [make_card("10", available_credit="4940.00")]

    response = client.post(
        "/v1/transactions/payments", json={"cardId": "10", "amount": "75.00"}, headers=customer_headers
    )

    assert response.status_code == 422
    assert response.json()["error_type"] == "invalid_payment"
    mock_payment.assert_not_called()


@patch(f"{TRANSACTIONS}.purchase")
@patch(f"{CARDS}.list_by_customer")
def test_shop_checkout(mock_cards: AsyncMock, mock_purchase: AsyncMock, client: TestClient, customer_headers: dict):
    """Test the cart becomes one purchase with an itemized description"""
    mock_cards.return_value = [make_card("10")]
    mock_purchase.return_value = make_txn("PURCHASE", "APPROVED", Decimal("45.00"), txn_id="901")

    response = client.post(
        "/v1/shop/checkout",
        json={"cardId": "10", "items": [{"name": "Mug", "price": "12.50", "quantity": 2}, {"name": "Hat", "price": "20"}]},
        headers=customer_headers,
    )

    assert response.status_code == 201
    data = response.json()
    assert data["total"] == 45.0
    assert data["description"] == "Purchase from CardHub Store: 2x Mug, 1x Hat"
    mock_purchase.assert_awaited_once_with("10", Decimal("45.00"), "Purchase from CardHub Store: 2x Mug, 1x Hat")


@patch(f"{CARDS}.list_by_customer")
def test_checkout_with_blocked_card(mock_cards: AsyncMock, client: TestClient, customer_headers: dict):
    mock_cards.return_value = [make_card("11", status="BLOCKED")]

    response = client.post(
        "/v1/shop/checkout",
        json={"cardId": "11", "items": [{"name": "Mug", "price": "12.50"}]},
        headers=customer_headers,
    )

    assert response.status_code == 422


@patch(f"{CARDS}.create")
def test_apply_for_card_uses_session_customer(mock_create: AsyncMock, client: TestClient, customer_headers: dict):
    mock_create.return_value = make_card("20", status="INACTIVE", card_type="PLATINUM")

    response = client.post(
        "/v1/cards/apply",
        json={"cardType": "PLATINUM", "cardHolderName": " Alice Moreno ", "customerId": "3"},
        headers=customer_headers,
    )

    assert response.status_code == 201
    assert mock_create.call_args.args[0] == {
        "customerId": "2",
        "cardType": "PLATINUM",
        "cardHolderName": "Alice Moreno",
    }


@patch(f"{CARDS}.block")
@patch(f"{CARDS}.list_by_customer")
def test_customer_blocks_own_card(mock_cards: AsyncMock, mock_block: AsyncMock, client: TestClient, customer_headers: dict):
    mock_cards.return_value = [make_card("10")]
    mock_block.return_value = make_card("10", status="BLOCKED")

    response = client.patch("/v1/cards/10/block", json={"reason": " Lost wallet "}, headers=customer_headers)

    assert response.status_code == 200
    assert response.json()["status"] == "BLOCKED"
    mock_block.assert_awaited_once_with("10", "Lost wallet")


@pytest.mark.parametrize("action", ["activate", "unblock"])
@patch(f"{CARDS}.list_by_customer")
def test_customer_card_actions_on_own_card(mock_cards: AsyncMock, action: str, client: TestClient, customer_headers: dict):
    mock_cards.return_value = [make_card("11", status="BLOCKED")]

    with patch(f"{CARDS}.{action}", new_callable=AsyncMock) as mock_action:
        mock_action.return_value = make_card("11", status="ACTIVE")
        response = client.patch(f"/v1/cards/11/{action}", headers=customer_headers)

    assert response.status_code == 200
    assert response.json()["status"] == "ACTIVE"
    mock_action.assert_awaited_once_with("11")


@pytest.mark.parametrize("action,body", [("activate", None), ("block", {"reason": "Lost"}), ("unblock", None)])
@patch(f"{CARDS}.list_by_customer")
def test_customer_card_actions_on_foreign_card(
    mock_cards: AsyncMock, action: str, body, client: TestClient, customer_headers: dict
):
    """Test another customer's card reads as missing and is never touched"""
    mock_cards.return_value = [make_card("10")]

    with patch(f"{CARDS}.{action}", new_callable=AsyncMock) as mock_action:
        response = client.patch(f"/v1/cards/12/{action}", json=body, headers=customer_headers)

    assert response.status_code == 404
    mock_action.assert_not_awaited()


@patch(f"{CUSTOMERS}.save")
def test_profile_save_payload(mock_save: AsyncMock, client: TestClient, customer_headers: dict):
    """Test profile fields are normalized into the remote format"""
    mock_save.return_value = Customer(id="2", user_id="2", first_name="Alice", last_name="Moreno", email="a@b.co")

    response = client.put(
        "/v1/profile",
        json={
            "firstName": " Alice ",
            "lastName": "Moreno",
            "email": "A@B.CO",
            "phone": "555-123-4567",
            "dateOfBirth": "1990-04-12",
            "state": "Texas",
            "zipCode": "73301",
        },
        headers=customer_headers,
    )

    assert response.status_code == 200
    customer_id, payload = mock_save.call_args.args
    assert customer_id == "2"
    assert payload["userId"] == "2"
    assert payload["firstName"] == "Alice"
    assert payload["email"] == "a@b.co"
    assert payload["phone"] == 5551234567
    assert payload["dateOfBirth"] == "1990-04-12T00:00:00"
    assert payload["state"] is None
    assert payload["zipCode"] == "73301"


@patch(f"{CUSTOMERS}.get_by_user")
def test_profile_not_completed(mock_get: AsyncMock, client: TestClient, customer_headers: dict):
    mock_get.return_value = None

    assert client.get("/v1/profile", headers=customer_headers).status_code == 404


@patch(f"{CARDS}.list_by_customer")
def test_remote_outage_is_503(mock_cards: AsyncMock, client: TestClient, customer_headers: dict):
    """Test an unavailable remote API answers 503 with Retry-After"""
    mock_cards.side_effect = PortalAPIError("Portal API unavailable: connection refused")

    response = client.get("/v1/cards", headers=customer_headers)

    assert response.status_code == 503
    assert response.headers["Retry-After"] == "5"
    assert response.json()["error_type"] == "portal_api_unavailable"


# --- Admin screens ---


@patch(f"{TRANSACTIONS}.list_all")
@patch(f"{CARDS}.list_all")
@patch(f"{CUSTOMERS}.list_all")
def test_admin_dashboard_is_page_scoped(
    mock_customers: AsyncMock,
    mock_cards: AsyncMock,
    mock_txns: AsyncMock,
    client: TestClient,
    admin_headers: dict,
    history: list[Transaction],
):
    """Test the dashboard aggregates only its recent page and says so"""
    mock_customers.return_value = Page(
        items=[Customer(id="2", user_id="2", first_name="Alice", last_name="Moreno", email=None, status="ACTIVE")],
        total_elements=40,
    )
    mock_cards.return_value = Page(items=[make_card("10"), make_card("11", status="BLOCKED")], total_elements=80)
    mock_txns.return_value = Page(items=history, total_pages=50, total_elements=500)

    response = client.get("/v1/admin/dashboard", headers=admin_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["statisticsScope"] == "page"
    assert data["overview"]["totalTransactions"] == 4
    assert data["overview"]["totalRevenue"] == 100.0
    assert data["overview"]["activeCards"] == 1


@patch(f"{TRANSACTIONS}.fetch_all")
@patch(f"{CARDS}.fetch_all")
@patch(f"{CUSTOMERS}.fetch_all")
def test_admin_report(
    mock_customers: AsyncMock,
    mock_cards: AsyncMock,
    mock_txns: AsyncMock,
    client: TestClient,
    admin_headers: dict,
    history: list[Transaction],
):
    mock_customers.return_value = [
        Customer(id="2", user_id="2", first_name="Alice", last_name="Moreno", email=None, status="ACTIVE"),
        Customer(id="3", user_id="3", first_name="Bob", last_name="Okafor", email=None, status="BLOCKED"),
    ]
    mock_cards.return_value = [make_card("10"), make_card("12", card_type="PLATINUM", credit_limit="10000.00")]
    mock_txns.return_value = history

    response = client.get("/v1/admin/reports", headers=admin_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["customers"] == {"total": 2, "active": 1, "inactive": 0, "blocked": 1}
    assert data["cards"]["byType"] == {"GOLD": 1, "PLATINUM": 1}
    assert data["cards"]["totalCreditLimit"] == 15000.0
    assert data["transactions"]["totalTransactions"] == 4
    assert data["transactionTypes"] == {"PURCHASE": 3, "PAYMENT": 1}
    assert data["revenue"]["totalRevenue"] == 100.0


@patch(f"{TRANSACTIONS}.list_by_status")
@patch(f"{TRANSACTIONS}.fetch_all")
def test_admin_transactions_filter_narrows_page_only(
    mock_fetch_all: AsyncMock,
    mock_by_status: AsyncMock,
    client: TestClient,
    admin_headers: dict,
    history: list[Transaction],
):
    mock_fetch_all.return_value = history
    mock_by_status.return_value = Page(items=history[3:], total_elements=1)

    response = client.get("/v1/admin/transactions", params={"status": "PENDING"}, headers=admin_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["statistics"]["totalTransactions"] == 4
    assert [t["id"] for t in data["transactions"]] == ["103"]
    mock_by_status.assert_awaited_once_with("PENDING", page=0, size=10)


@patch(f"{TRANSACTIONS}.reverse")
def test_admin_reverse_rejected_by_remote(mock_reverse: AsyncMock, client: TestClient, admin_headers: dict):
    mock_reverse.side_effect = RemoteValidationError("Only successful transactions can be reversed", 400)

    response = client.post("/v1/admin/transactions/102/reverse", json={"reason": "dup"}, headers=admin_headers)

    assert response.status_code == 422
    assert "successful" in response.json()["detail"]


@patch(f"{CARDS}.update_daily_limit")
@patch(f"{CARDS}.update_credit_limit")
def test_admin_update_limits(
    mock_credit: AsyncMock, mock_daily: AsyncMock, client: TestClient, admin_headers: dict
):
    mock_credit.return_value = make_card("10", credit_limit="7000.00")
    mock_daily.return_value = make_card("10", credit_limit="7000.00")

    response = client.patch(
        "/v1/admin/cards/10/limits", json={"creditLimit": "7000", "dailyLimit": "1500"}, headers=admin_headers
    )

    assert response.status_code == 200
    mock_credit.assert_awaited_once_with("10", Decimal("7000"))
    mock_daily.assert_awaited_once_with("10", Decimal("1500"))


@patch(f"{CUSTOMERS}.delete")
@patch(f"{CUSTOMERS}.get")
def test_admin_delete_customer_closes_sessions(
    mock_get: AsyncMock,
    mock_delete: AsyncMock,
    client: TestClient,
    db: Session,
    admin_headers: dict,
    customer_session: PortalSession,
):
    """Test deleting a customer logs its user out of the portal"""
    mock_get.return_value = Customer(id="2", user_id="2", first_name="Alice", last_name="Moreno", email=None)
    mock_delete.return_value = None

    sessions_before = REGISTRY.get_sample_value("card_portal_active_sessions")

    response = client.delete("/v1/admin/customers/2", headers=admin_headers)

    assert response.status_code == 204
    db.expire_all()
    assert SessionRepository(db).get_session(customer_session.session_id) is None
    assert REGISTRY.get_sample_value("card_portal_active_sessions") == sessions_before - 1


def test_admin_status_update_validates_status(client: TestClient, admin_headers: dict):
    response = client.patch("/v1/admin/customers/2/status", json={"status": "GONE"}, headers=admin_headers)
    assert response.status_code == 422


@patch(f"{CUSTOMERS}.update")
@patch(f"{CUSTOMERS}.get")
def test_admin_edits_customer_details(mock_get: AsyncMock, mock_update: AsyncMock, client: TestClient, admin_headers: dict):
    """Test the admin edit sends the normalized profile under the customer's own user"""
    mock_get.return_value = Customer(id="2", user_id="2", first_name="Alice", last_name="Moreno", email="a@b.co")
    mock_update.return_value = Customer(id="2", user_id="2", first_name="Alicia", last_name="Moreno", email="alicia@b.co")

    response = client.put(
        "/v1/admin/customers/2",
        json={
            "firstName": " Alicia ",
            "lastName": "Moreno",
            "email": "Alicia@B.co",
            "phone": "555-123-4567",
            "state": "tx",
        },
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["firstName"] == "Alicia"
    customer_id, payload = mock_update.call_args.args
    assert customer_id == "2"
    assert payload["userId"] == "2"
    assert payload["firstName"] == "Alicia"
    assert payload["email"] == "alicia@b.co"
    assert payload["phone"] == 5551234567
    assert payload["state"] == "TX"


@patch(f"{CUSTOMERS}.update")
@patch(f"{CUSTOMERS}.get")
def test_admin_edit_of_missing_customer(mock_get: AsyncMock, mock_update: AsyncMock, client: TestClient, admin_headers: dict):
    mock_get.return_value = None

    response = client.put(
        "/v1/admin/customers/99",
        json={"firstName": "A", "lastName": "B", "email": "a@b.co", "phone": "5551234567"},
        headers=admin_headers,
    )

    assert response.status_code == 404
    mock_update.assert_not_awaited()


def test_customer_cannot_edit_customers(client: TestClient, customer_headers: dict):
    response = client.put(
        "/v1/admin/customers/3",
        json={"firstName": "A", "lastName": "B", "email": "a@b.co", "phone": "5551234567"},
        headers=customer_headers,
    )
    assert response.status_code == 403
