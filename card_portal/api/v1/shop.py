"""POST /v1/shop/checkout - demo store purchase flow"""

import logging

from fastapi import APIRouter, Depends, Request

from card_portal.api.dependencies import get_card_client, get_portal_session, get_request_id, get_transaction_client
from card_portal.api.v1.schemas import CheckoutRequest, CheckoutResponse, TransactionSchema
from card_portal.api.v1.transactions import find_customer_card
from card_portal.domain.exceptions import InvalidPaymentError
from card_portal.domain.models import CardStatus, CartItem, PortalSession
from card_portal.domain.payments import cart_total, describe_cart
from card_portal.infrastructure.clients.cards import CardClient
from card_portal.infrastructure.clients.transactions import TransactionClient

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/shop/checkout", response_model=CheckoutResponse, status_code=201)
async def checkout(
    body: CheckoutRequest,
    request: Request,
    session: PortalSession = Depends(get_portal_session),
    card_client: CardClient = Depends(get_card_client),
    txn_client: TransactionClient = Depends(get_transaction_client),
):
    """
    Pay for a cart with one of the customer's cards.

    The cart becomes a single PURCHASE whose description lists the items;
    approval, limits and fraud checks happen in the remote API.
    """
    card = await find_customer_card(card_client, session.user.id, body.card_id)
    if card.status != CardStatus.ACTIVE:
        raise InvalidPaymentError(f"Card {card.id} is not active")

    items = [CartItem(name=i.name, price=i.price, quantity=i.quantity) for i in body.items]
    total = cart_total(items)
    description = describe_cart(items)

    txn = await txn_client.purchase(card.id, total, description)
    logger.info(
        "Checkout submitted",
        extra={
            "request_id": get_request_id(request),
            "user_id": session.user.id,
            "card_id": card.id,
            "transaction_status": txn.status,
        },
    )
    return CheckoutResponse(transaction=TransactionSchema.from_domain(txn), total=total, description=description)
