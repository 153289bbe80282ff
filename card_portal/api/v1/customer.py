"""Customer screens - dashboard, cards and card actions, card application and profile"""

import logging
import time

from fastapi import APIRouter, Depends, Request

from card_portal.api.dependencies import (
    get_card_client,
    get_customer_client,
    get_portal_session,
    get_request_id,
    get_transaction_client,
)
from card_portal.api.v1.schemas import (
    CardApplicationRequest,
    CardListResponse,
    CardSchema,
    CustomerDashboardResponse,
    CustomerSchema,
    ProfileRequest,
    ReasonRequest,
    StatisticsSchema,
    TransactionSchema,
    UserSchema,
)
from card_portal.api.v1.transactions import find_customer_card
from card_portal.config import settings
from card_portal.domain.exceptions import ResourceNotFoundError
from card_portal.domain.models import PortalSession
from card_portal.domain.statistics import aggregate_transactions, summarize_cards
from card_portal.infrastructure.clients.base import gather_calls
from card_portal.infrastructure.clients.cards import CardClient
from card_portal.infrastructure.clients.customers import CustomerClient
from card_portal.infrastructure.clients.transactions import TransactionClient
from card_portal.infrastructure.observability.logging import log_statistics
from card_portal.infrastructure.observability.metrics import record_statistics

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/customer/dashboard", response_model=CustomerDashboardResponse)
async def customer_dashboard(
    request: Request,
    session: PortalSession = Depends(get_portal_session),
    card_client: CardClient = Depends(get_card_client),
    txn_client: TransactionClient = Depends(get_transaction_client),
):
    """Cards, recent transactions and all-time totals for the logged-in customer"""
    start_time = time.time()
    customer_id = session.user.id

    cards, recent, all_transactions = await gather_calls(
        card_client.list_by_customer(customer_id),
        txn_client.list_by_customer(customer_id, page=0, size=settings.display_page_size),
        txn_client.fetch_all_for_customer(customer_id),
    )

    card_summary = summarize_cards(cards)
    stats = aggregate_transactions(all_transactions)
    record_statistics("customer", stats.total_transactions)
    log_statistics(get_request_id(request), "customer", customer_id, stats, (time.time() - start_time) * 1000)

    return CustomerDashboardResponse(
        user=UserSchema.from_domain(session.user),
        cards=[CardSchema.from_domain(c) for c in cards],
        active_cards=card_summary.active,
        total_credit_limit=card_summary.total_credit_limit,
        recent_transactions=[TransactionSchema.from_domain(t) for t in recent.items],
        statistics=StatisticsSchema.from_domain(stats),
    )


@router.get("/cards", response_model=CardListResponse)
async def list_cards(
    session: PortalSession = Depends(get_portal_session),
    card_client: CardClient = Depends(get_card_client),
):
    cards = await card_client.list_by_customer(session.user.id)
    summary = summarize_cards(cards)
    return CardListResponse(
        cards=[CardSchema.from_domain(c) for c in cards],
        active_cards=summary.active,
        total_credit_limit=summary.total_credit_limit,
    )


@router.post("/cards/apply", response_model=CardSchema, status_code=201)
async def apply_for_card(
    body: CardApplicationRequest,
    session: PortalSession = Depends(get_portal_session),
    card_client: CardClient = Depends(get_card_client),
):
    """Apply for a card; credit limits and approval are decided remotely"""
    card = await card_client.create(
        {
            "customerId": session.user.id,
            "cardType": body.card_type,
            "cardHolderName": body.card_holder_name.strip(),
        }
    )
    return CardSchema.from_domain(card)


@router.patch("/cards/{card_id}/activate", response_model=CardSchema)
async def activate_own_card(
    card_id: str,
    session: PortalSession = Depends(get_portal_session),
    card_client: CardClient = Depends(get_card_client),
):
    card = await find_customer_card(card_client, session.user.id, card_id)
    return CardSchema.from_domain(await card_client.activate(card.id))


@router.patch("/cards/{card_id}/block", response_model=CardSchema)
async def block_own_card(
    card_id: str,
    body: ReasonRequest,
    request: Request,
    session: PortalSession = Depends(get_portal_session),
    card_client: CardClient = Depends(get_card_client),
):
    """Block one of the customer's own cards, e.g. when it is lost"""
    card = await find_customer_card(card_client, session.user.id, card_id)
    blocked = await card_client.block(card.id, body.reason.strip())
    logger.info(
        "Card blocked by customer",
        extra={"request_id": get_request_id(request), "user_id": session.user.id, "card_id": card.id},
    )
    return CardSchema.from_domain(blocked)


@router.patch("/cards/{card_id}/unblock", response_model=CardSchema)
async def unblock_own_card(
    card_id: str,
    session: PortalSession = Depends(get_portal_session),
    card_client: CardClient = Depends(get_card_client),
):
    card = await find_customer_card(card_client, session.user.id, card_id)
    return CardSchema.from_domain(await card_client.unblock(card.id))


@router.get("/profile", response_model=CustomerSchema)
async def get_profile(
    session: PortalSession = Depends(get_portal_session),
    customer_client: CustomerClient = Depends(get_customer_client),
):
    customer = await customer_client.get_by_user(session.user.id)
    if customer is None:
        raise ResourceNotFoundError("Profile not completed yet")
    return CustomerSchema.from_domain(customer)


@router.put("/profile", response_model=CustomerSchema)
async def save_profile(
    body: ProfileRequest,
    session: PortalSession = Depends(get_portal_session),
    customer_client: CustomerClient = Depends(get_customer_client),
):
    """
    Complete or update the customer profile.

    Creates the customer record on first save, updates it afterwards.
    State is sent only when it is a two-letter code.
    """
    customer = await customer_client.save(session.user.id, body.to_remote(session.user.id))
    return CustomerSchema.from_domain(customer)
