"""Mock card-management API - in-memory stand-in for local development and e2e tests"""

import copy
import itertools
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import Body, Depends, FastAPI, Header, Query, Request
from fastapi.responses import JSONResponse

SEED_FILE = Path(__file__).resolve().parent / "seed.json"
SUCCESSFUL = {"SUCCESS", "APPROVED"}


class MockAPIError(Exception):
    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message


class PortalStore:
    """Users, customers, cards and transactions held in memory; reset() reloads the seed"""

    def __init__(self, seed_file: Path = SEED_FILE):
        self.seed_file = seed_file
        self.reset()

    def reset(self) -> None:
        seed = json.loads(self.seed_file.read_text())
        self.users: Dict[str, Dict[str, Any]] = {u["id"]: u for u in copy.deepcopy(seed["users"])}
        self.customers: Dict[str, Dict[str, Any]] = {c["id"]: c for c in copy.deepcopy(seed["customers"])}
        self.cards: Dict[str, Dict[str, Any]] = {c["id"]: c for c in copy.deepcopy(seed["cards"])}
        self.transactions: Dict[str, Dict[str, Any]] = {t["id"]: t for t in copy.deepcopy(seed["transactions"])}
        self.tokens: Dict[str, str] = {}
        self.ids = itertools.count(1000)

    def next_id(self) -> str:
        return str(next(self.ids))

    def revoke_all(self) -> None:
        self.tokens.clear()


store = PortalStore()
app = FastAPI(title="Mock Card Portal API", version="1.0.0")


@app.exception_handler(MockAPIError)
def mock_api_error(request: Request, exc: MockAPIError):
    return JSONResponse(status_code=exc.status_code, content={"success": False, "message": exc.message})


def ok(data: Any, message: str = "OK") -> Dict[str, Any]:
    return {"success": True, "message": message, "data": data}


def paged(items: List[Dict[str, Any]], page: int, size: int) -> Dict[str, Any]:
    size = max(size, 1)
    total_pages = max((len(items) + size - 1) // size, 1)
    content = items[page * size:(page + 1) * size]
    return ok(
        {
            "content": content,
            "number": page,
            "size": size,
            "totalPages": total_pages,
            "totalElements": len(items),
            "last": page >= total_pages - 1,
        }
    )


def public_user(user: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in user.items() if k != "password"}


def current_user(authorization: Optional[str] = Header(None)) -> Dict[str, Any]:
    token = (authorization or "").removeprefix("Bearer ").strip()
    user_id = store.tokens.get(token)
    if user_id is None:
        raise MockAPIError(401, "Invalid or expired token")
    return store.users[user_id]


def admin_user(user: Dict[str, Any] = Depends(current_user)) -> Dict[str, Any]:
    if user["role"] != "ADMIN":
        raise MockAPIError(403, "Access denied")
    return user


def lookup(collection: Dict[str, Dict[str, Any]], key: str, label: str) -> Dict[str, Any]:
    if key not in collection:
        raise MockAPIError(404, f"{label} not found with id: {key}")
    return collection[key]


def newest_first(items) -> List[Dict[str, Any]]:
    return sorted(items, key=lambda t: t.get("transactionDate") or "", reverse=True)


@app.get("/health")
def health(): return {"status": "ok"}


# --- Auth ---


@app.post("/api/auth/login")
def login(credentials: Dict[str, Any] = Body(...)):
    for user in store.users.values():
        if user["username"] == credentials.get("username") and user["password"] == credentials.get("password"):
            token = f"token-{user['id']}-{store.next_id()}"
            store.tokens[token] = user["id"]
            return ok({"token": token, "user": public_user(user)}, "Login successful")
    raise MockAPIError(401, "Invalid username or password")


@app.post("/api/auth/register", status_code=201)
def register(registration: Dict[str, Any] = Body(...)):
    if any(u["username"] == registration.get("username") for u in store.users.values()):
        return JSONResponse(status_code=409, content={"success": False, "message": "Username already exists"})
    user = {
        "id": store.next_id(),
        "username": registration["username"],
        "password": registration["password"],
        "role": registration.get("role", "CUSTOMER"),
        "email": registration.get("email"),
        "firstName": registration.get("firstName"),
        "lastName": registration.get("lastName"),
    }
    store.users[user["id"]] = user
    return ok(public_user(user), "User registered successfully")


@app.get("/api/auth/validate")
def validate(user: Dict[str, Any] = Depends(current_user)):
    return ok({"valid": True, "user": public_user(user)})


# --- Customers ---


@app.get("/api/customers")
def list_customers(page: int = 0, size: int = 10, user=Depends(admin_user)):
    return paged(sorted(store.customers.values(), key=lambda c: int(c["id"])), page, size)


@app.get("/api/customers/search")
def search_customers(keyword: str, page: int = 0, size: int = 10, user=Depends(admin_user)):
    needle = keyword.lower()
    hits = [
        c for c in store.customers.values()
        if any(needle in str(c.get(f) or "").lower() for f in ("firstName", "lastName", "email"))
    ]
    return paged(hits, page, size)


@app.get("/api/customers/status/{status}")
def customers_by_status(status: str, user=Depends(admin_user)):
    return ok([c for c in store.customers.values() if c.get("status") == status.upper()])


@app.get("/api/customers/user/{user_id}")
def customer_by_user(user_id: str, user=Depends(current_user)):
    for customer in store.customers.values():
        if customer.get("userId") == user_id:
            return ok(customer)
    raise MockAPIError(404, f"Customer not found for user: {user_id}")


@app.get("/api/customers/{customer_id}")
def get_customer(customer_id: str, user=Depends(current_user)):
    return ok(lookup(store.customers, customer_id, "Customer"))


@app.post("/api/customers", status_code=201)
def create_customer(profile: Dict[str, Any] = Body(...), user=Depends(current_user)):
    customer_id = str(profile.get("userId") or store.next_id())
    customer = {**profile, "id": customer_id, "userId": str(profile.get("userId") or ""), "status": "ACTIVE"}
    if customer.get("phone") is not None:
        customer["phone"] = str(customer["phone"])
    store.customers[customer_id] = customer
    return ok(customer, "Customer created successfully")


@app.put("/api/customers/{customer_id}")
def update_customer(customer_id: str, profile: Dict[str, Any] = Body(...), user=Depends(current_user)):
    customer = lookup(store.customers, customer_id, "Customer")
    customer.update({k: v for k, v in profile.items() if v is not None and k not in ("id", "userId")})
    if customer.get("phone") is not None:
        customer["phone"] = str(customer["phone"])
    return ok(customer, "Customer updated successfully")


@app.patch("/api/customers/{customer_id}/status")
def update_customer_status(customer_id: str, status: str, user=Depends(admin_user)):
    customer = lookup(store.customers, customer_id, "Customer")
    customer["status"] = status.upper()
    return ok(customer)


@app.delete("/api/customers/{customer_id}")
def delete_customer(customer_id: str, user=Depends(admin_user)):
    lookup(store.customers, customer_id, "Customer")
    del store.customers[customer_id]
    return ok(None, "Customer deleted successfully")


# --- Cards ---


@app.get("/api/cards")
def list_cards(page: int = 0, size: int = 10, user=Depends(admin_user)):
    return paged(sorted(store.cards.values(), key=lambda c: int(c["id"])), page, size)


@app.get("/api/cards/customer/{customer_id}")
def cards_by_customer(customer_id: str, user=Depends(current_user)):
    return ok([c for c in store.cards.values() if c.get("customerId") == customer_id])


@app.get("/api/cards/status/{status}")
def cards_by_status(status: str, user=Depends(admin_user)):
    return ok([c for c in store.cards.values() if c.get("status") == status.upper()])


@app.get("/api/cards/type/{card_type}")
def cards_by_type(card_type: str, user=Depends(admin_user)):
    return ok([c for c in store.cards.values() if c.get("cardType") == card_type.upper()])


@app.get("/api/cards/{card_id}")
def get_card(card_id: str, user=Depends(current_user)):
    return ok(lookup(store.cards, card_id, "Card"))


CARD_LIMITS = {"SILVER": 1000.0, "GOLD": 5000.0, "PLATINUM": 10000.0, "DIAMOND": 25000.0}


@app.post("/api/cards", status_code=201)
def create_card(application: Dict[str, Any] = Body(...), user=Depends(current_user)):
    customer_id = str(application.get("customerId"))
    lookup(store.customers, customer_id, "Customer")
    card_type = str(application.get("cardType", "SILVER")).upper()
    limit = CARD_LIMITS.get(card_type, 1000.0)
    card_id = store.next_id()
    card = {
        "id": card_id,
        "customerId": customer_id,
        "cardType": card_type,
        "status": "INACTIVE",
        "creditLimit": limit,
        "availableCredit": limit,
        "dailyLimit": limit / 4,
        "cardNumber": f"4111111111{int(card_id):06d}",
        "cardHolderName": str(application.get("cardHolderName", "")).upper(),
        "expiryDate": f"{datetime.now().year + 4}-12-31",
    }
    store.cards[card_id] = card
    return ok(card, "Card issued successfully")


def _set_card_status(card_id: str, status: str, user: Dict[str, Any]) -> Dict[str, Any]:
    card = lookup(store.cards, card_id, "Card")
    if user["role"] != "ADMIN" and card.get("customerId") != user["id"]:
        raise MockAPIError(403, "Access denied")
    card["status"] = status
    return ok(card)


@app.patch("/api/cards/{card_id}/activate")
def activate_card(card_id: str, user=Depends(current_user)):
    return _set_card_status(card_id, "ACTIVE", user)


@app.patch("/api/cards/{card_id}/block")
def block_card(card_id: str, reason: str = "", user=Depends(current_user)):
    return _set_card_status(card_id, "BLOCKED", user)


@app.patch("/api/cards/{card_id}/unblock")
def unblock_card(card_id: str, user=Depends(current_user)):
    return _set_card_status(card_id, "ACTIVE", user)


@app.patch("/api/cards/{card_id}/credit-limit")
def update_credit_limit(card_id: str, limit: float, user=Depends(admin_user)):
    card = lookup(store.cards, card_id, "Card")
    used = card["creditLimit"] - card["availableCredit"]
    if limit < used:
        raise MockAPIError(400, "Credit limit cannot be below the outstanding balance")
    card["creditLimit"] = limit
    card["availableCredit"] = limit - used
    return ok(card)


@app.patch("/api/cards/{card_id}/daily-limit")
def update_daily_limit(card_id: str, limit: float, user=Depends(admin_user)):
    card = lookup(store.cards, card_id, "Card")
    card["dailyLimit"] = limit
    return ok(card)


# --- Transactions ---


@app.get("/api/transactions")
def list_transactions(page: int = 0, size: int = 10, user=Depends(admin_user)):
    return paged(newest_first(store.transactions.values()), page, size)


@app.get("/api/transactions/card/{card_id}")
def transactions_by_card(card_id: str, page: int = 0, size: int = 10, user=Depends(current_user)):
    return paged(newest_first(t for t in store.transactions.values() if t.get("cardId") == card_id), page, size)


@app.get("/api/transactions/customer/{customer_id}")
def transactions_by_customer(customer_id: str, page: int = 0, size: int = 10, user=Depends(current_user)):
    rows = [t for t in store.transactions.values() if t.get("customerId") == customer_id]
    return paged(newest_first(rows), page, size)


@app.get("/api/transactions/status/{status}")
def transactions_by_status(status: str, page: int = 0, size: int = 10, user=Depends(admin_user)):
    rows = [t for t in store.transactions.values() if t.get("status") == status.upper()]
    return paged(newest_first(rows), page, size)


@app.get("/api/transactions/type/{txn_type}")
def transactions_by_type(txn_type: str, page: int = 0, size: int = 10, user=Depends(admin_user)):
    rows = [t for t in store.transactions.values() if t.get("type") == txn_type.upper()]
    return paged(newest_first(rows), page, size)


@app.get("/api/transactions/search")
def search_transactions(keyword: str = "", page: int = 0, size: int = 10, user=Depends(admin_user)):
    needle = keyword.lower()
    rows = [
        t for t in store.transactions.values()
        if needle in (t.get("description") or "").lower() or needle in (t.get("transactionReference") or "").lower()
    ]
    return paged(newest_first(rows), page, size)


@app.get("/api/transactions/{transaction_id}")
def get_transaction(transaction_id: str, user=Depends(current_user)):
    return ok(lookup(store.transactions, transaction_id, "Transaction"))


@app.post("/api/transactions", status_code=201)
def create_transaction(request_body: Dict[str, Any] = Body(...), user=Depends(current_user)):
    """Approve or decline against the card's status and available credit"""
    card = lookup(store.cards, str(request_body.get("cardId")), "Card")
    txn_type = str(request_body.get("type", "")).upper()
    amount = float(request_body.get("amount") or 0)
    if amount <= 0:
        raise MockAPIError(400, "Amount must be positive")

    status = "DECLINED"
    if card["status"] == "ACTIVE":
        if txn_type == "PURCHASE" and amount <= card["availableCredit"]:
            card["availableCredit"] = round(card["availableCredit"] - amount, 2)
            status = "APPROVED"
        elif txn_type == "PAYMENT":
            card["availableCredit"] = round(min(card["creditLimit"], card["availableCredit"] + amount), 2)
            status = "SUCCESS"

    txn_id = store.next_id()
    txn = {
        "id": txn_id,
        "cardId": card["id"],
        "customerId": card["customerId"],
        "type": txn_type,
        "status": status,
        "amount": amount,
        "transactionDate": datetime.now().replace(microsecond=0).isoformat(),
        "description": request_body.get("description") or "",
        "transactionReference": f"TXN-{txn_id}",
    }
    store.transactions[txn_id] = txn
    return ok(txn, "Transaction processed")


@app.post("/api/transactions/{transaction_id}/reverse")
def reverse_transaction(transaction_id: str, reason: str = Query(""), user=Depends(admin_user)):
    txn = lookup(store.transactions, transaction_id, "Transaction")
    if txn["status"] not in SUCCESSFUL:
        raise MockAPIError(400, "Only successful transactions can be reversed")
    card = store.cards.get(txn["cardId"])
    if card is not None and txn["type"] == "PURCHASE":
        card["availableCredit"] = round(min(card["creditLimit"], card["availableCredit"] + txn["amount"]), 2)
    txn["status"] = "REVERSED"
    txn["reversalReason"] = reason
    return ok(txn, "Transaction reversed")
