"""GET /v1/transactions - customer transaction history, statistics and payments"""

import time
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request

from card_portal.api.dependencies import get_card_client, get_portal_session, get_request_id, get_transaction_client
from card_portal.api.v1.schemas import (
    PaymentRequest,
    PaymentResponse,
    StatisticsResponse,
    StatisticsSchema,
    TransactionListResponse,
    TransactionSchema,
)
from card_portal.config import settings
from card_portal.domain.exceptions import ResourceNotFoundError
from card_portal.domain.models import Card, Page, PortalSession, Transaction
from card_portal.domain.payments import outstanding_balance, validate_payment
from card_portal.domain.statistics import aggregate_transactions
from card_portal.infrastructure.clients.base import gather_calls
from card_portal.infrastructure.clients.cards import CardClient
from card_portal.infrastructure.clients.transactions import TransactionClient
from card_portal.infrastructure.observability.logging import log_statistics
from card_portal.infrastructure.observability.metrics import record_statistics

router = APIRouter()


async def find_customer_card(card_client: CardClient, customer_id: str, card_id: str) -> Card:
    """A card of the session's customer; other customers' cards read as missing"""
    cards = await card_client.list_by_customer(customer_id)
    for card in cards:
        if card.id == str(card_id):
            return card
    raise ResourceNotFoundError(f"Card {card_id} not found")


async def _fetch_full_set(
    client: TransactionClient, customer_id: str, card_id: Optional[str]
) -> List[Transaction]:
    if card_id:
        return await client.fetch_all_for_card(card_id)
    return await client.fetch_all_for_customer(customer_id)


def _filtered_page(
    transactions: List[Transaction], txn_type: Optional[str], status: Optional[str], page: int, size: int
) -> Page[Transaction]:
    """Page ``page`` of the records matching the type and status filters"""
    matches = [
        t
        for t in transactions
        if (not txn_type or (t.type or "").upper() == txn_type.strip().upper())
        and (not status or (t.status or "").upper() == status.strip().upper())
    ]
    start = page * size
    return Page(
        items=matches[start : start + size],
        number=page,
        size=size,
        total_pages=max(1, -(-len(matches) // size)),
        total_elements=len(matches),
        last=start + size >= len(matches),
    )


@router.get("/transactions", response_model=TransactionListResponse)
async def list_transactions(
    request: Request,
    page: int = Query(0, ge=0),
    card_id: Optional[str] = Query(None, alias="cardId"),
    txn_type: Optional[str] = Query(None, alias="type"),
    status: Optional[str] = Query(None),
    session: PortalSession = Depends(get_portal_session),
    card_client: CardClient = Depends(get_card_client),
    client: TransactionClient = Depends(get_transaction_client),
):
    """
    Transaction history screen.

    Fetch policy:
    1. Statistics cover every transaction of the customer (or of one card),
       walking all pages
    2. The list holds one display page of ``display_page_size`` records
    3. A type or status filter narrows the list only; it is applied to the
       full set since the remote API cannot filter one customer's records
    """
    start_time = time.time()
    customer_id = session.user.id
    size = settings.display_page_size

    if card_id:
        await find_customer_card(card_client, customer_id, card_id)

    if txn_type or status:
        all_transactions = await _fetch_full_set(client, customer_id, card_id)
        display_page = _filtered_page(all_transactions, txn_type, status, page, size)
    else:
        if card_id:
            display = client.list_by_card(card_id, page=page, size=size)
        else:
            display = client.list_by_customer(customer_id, page=page, size=size)
        all_transactions, display_page = await gather_calls(
            _fetch_full_set(client, customer_id, card_id),
            display,
        )

    stats = aggregate_transactions(all_transactions)
    record_statistics("customer", stats.total_transactions)
    log_statistics(get_request_id(request), "customer", customer_id, stats, (time.time() - start_time) * 1000)

    return TransactionListResponse(
        statistics=StatisticsSchema.from_domain(stats),
        statistics_scope="all",
        transactions=[TransactionSchema.from_domain(t) for t in display_page.items],
        page=display_page.number,
        size=display_page.size,
        total_pages=display_page.total_pages,
        total_elements=display_page.total_elements,
    )


@router.get("/transactions/statistics", response_model=StatisticsResponse)
async def transaction_statistics(
    request: Request,
    card_id: Optional[str] = Query(None, alias="cardId"),
    session: PortalSession = Depends(get_portal_session),
    card_client: CardClient = Depends(get_card_client),
    client: TransactionClient = Depends(get_transaction_client),
):
    """All-time totals for the customer, or for one of the customer's cards"""
    start_time = time.time()
    customer_id = session.user.id
    if card_id:
        await find_customer_card(card_client, customer_id, card_id)

    stats = aggregate_transactions(await _fetch_full_set(client, customer_id, card_id))
    record_statistics("customer", stats.total_transactions)
    log_statistics(get_request_id(request), "customer", customer_id, stats, (time.time() - start_time) * 1000)

    return StatisticsResponse.from_domain(stats)


@router.post("/transactions/payments", response_model=PaymentResponse, status_code=201)
async def make_payment(
    body: PaymentRequest,
    session: PortalSession = Depends(get_portal_session),
    card_client: CardClient = Depends(get_card_client),
    client: TransactionClient = Depends(get_transaction_client),
):
    """
    Pay down a card's outstanding balance.

    Flow:
    1. Load the card from the customer's own cards
    2. Reject inactive cards and amounts outside (0, outstanding balance]
    3. Submit a PAYMENT transaction; the remote API decides the outcome
    """
    card = await find_customer_card(card_client, session.user.id, body.card_id)
    validate_payment(card, body.amount)
    balance = outstanding_balance(card)

    txn = await client.make_payment(card.id, body.amount, body.description)
    return PaymentResponse(transaction=TransactionSchema.from_domain(txn), outstanding_before=balance)
