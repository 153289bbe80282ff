"""Pre-submit checks for card payments and demo shop checkout"""

from decimal import Decimal, ROUND_HALF_UP
from typing import List
from card_portal.domain.exceptions import InvalidPaymentError
from card_portal.domain.models import Card, CardStatus, CartItem
from card_portal.domain.statistics import ZERO, to_amount

CENTS = Decimal("0.01")
STORE_NAME = "CardHub Store"


def outstanding_balance(card: Card) -> Decimal:
    """Credit in use on a card: limit minus available credit, floored at 0"""
    return max(ZERO, to_amount(card.credit_limit) - to_amount(card.available_credit))


def validate_payment(card: Card, amount: Decimal) -> None:
    """
    Reject payments the remote API would refuse anyway.

    Raises:
        InvalidPaymentError: Inactive card, non-positive amount, or an amount
            above the outstanding balance
    """
    if card.status != CardStatus.ACTIVE:
        raise InvalidPaymentError(f"Card {card.id} is not active")
    if amount <= 0:
        raise InvalidPaymentError("Payment amount must be greater than 0")
    balance = outstanding_balance(card)
    if amount > balance:
        raise InvalidPaymentError(
            f"Payment amount {amount} exceeds outstanding balance {balance}"
        )


def cart_total(items: List[CartItem]) -> Decimal:
    """Sum of price x quantity, rounded to cents"""
    total = sum((to_amount(item.price) * item.quantity for item in items), ZERO)
    return total.quantize(CENTS, rounding=ROUND_HALF_UP)


def describe_cart(items: List[CartItem]) -> str:
    listing = ", ".join(f"{item.quantity}x {item.name}" for item in items)
    return f"Purchase from {STORE_NAME}: {listing}"
