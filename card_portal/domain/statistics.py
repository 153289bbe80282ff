"""Dashboard statistics - derived totals over transaction, card and customer records"""

from collections import Counter
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, Optional
from card_portal.domain.models import (
    Card,
    CardStatus,
    CardSummary,
    Customer,
    CustomerStatus,
    CustomerSummary,
    PortalReport,
    RevenueSummary,
    Transaction,
    TransactionStatistics,
    TransactionStatus,
    TransactionType,
)
from card_portal.utils.date_utils import month_start, previous_month_range

ZERO = Decimal("0")

# The one successful-status set used by every aggregation in the portal
SUCCESSFUL_STATUSES = frozenset({TransactionStatus.SUCCESS.value, TransactionStatus.APPROVED.value})
DECLINED_STATUSES = frozenset({TransactionStatus.DECLINED.value, TransactionStatus.FAILED.value})

UNKNOWN = "UNKNOWN"


def to_amount(value: Any) -> Decimal:
    """
    Coerce a record amount to a Decimal.

    Missing, non-numeric, non-finite and negative values become 0 so a single
    malformed record cannot fail an aggregation.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return ZERO
    if not amount.is_finite() or amount < 0:
        return ZERO
    return amount


def _label(value: Optional[str]) -> str:
    return value.strip().upper() if isinstance(value, str) and value.strip() else UNKNOWN


def is_successful(txn: Transaction) -> bool:
    return _label(txn.status) in SUCCESSFUL_STATUSES


def aggregate_transactions(transactions: Iterable[Transaction]) -> TransactionStatistics:
    """
    Summarize transaction records for dashboard display.

    Requirements:
    - total_spent: successful PURCHASE amounts
    - total_paid: successful PAYMENT amounts
    - pending_amount: max(0, total_spent - total_paid)
    - total_transactions: every record, whatever its type or status

    Never raises; does not touch its input. Sums stay in Decimal, rounding
    is left to whoever displays the figures.
    """
    sums = {t.value: ZERO for t in TransactionType}
    successes: Counter = Counter()
    type_counts: Counter = Counter()
    status_counts: Counter = Counter()
    total = 0

    for txn in transactions:
        total += 1
        txn_type = _label(txn.type)
        status = _label(txn.status)
        type_counts[txn_type] += 1
        status_counts[status] += 1

        if status in SUCCESSFUL_STATUSES and txn_type in sums:
            sums[txn_type] += to_amount(txn.amount)
            successes[txn_type] += 1

    total_spent = sums[TransactionType.PURCHASE.value]
    total_paid = sums[TransactionType.PAYMENT.value]

    return TransactionStatistics(
        total_spent=total_spent,
        total_paid=total_paid,
        pending_amount=max(ZERO, total_spent - total_paid),
        total_transactions=total,
        total_refunded=sums[TransactionType.REFUND.value],
        total_cashback=sums[TransactionType.CASHBACK.value],
        purchase_count=successes[TransactionType.PURCHASE.value],
        payment_count=successes[TransactionType.PAYMENT.value],
        refund_count=successes[TransactionType.REFUND.value],
        successful_count=sum(status_counts[s] for s in SUCCESSFUL_STATUSES),
        pending_count=status_counts[TransactionStatus.PENDING.value],
        declined_count=sum(status_counts[s] for s in DECLINED_STATUSES),
        reversed_count=status_counts[TransactionStatus.REVERSED.value],
        type_counts=dict(type_counts),
        status_counts=dict(status_counts),
    )


def summarize_cards(cards: Iterable[Card]) -> CardSummary:
    """Card counts by status and type, plus the combined credit limit"""
    statuses: Counter = Counter()
    by_type: Counter = Counter()
    total_limit = ZERO
    total = 0

    for card in cards:
        total += 1
        statuses[_label(card.status)] += 1
        by_type[_label(card.card_type)] += 1
        total_limit += to_amount(card.credit_limit)

    return CardSummary(
        total=total,
        active=statuses[CardStatus.ACTIVE.value],
        inactive=statuses[CardStatus.INACTIVE.value],
        blocked=statuses[CardStatus.BLOCKED.value],
        by_type=dict(by_type),
        total_credit_limit=total_limit,
    )


def summarize_customers(customers: Iterable[Customer]) -> CustomerSummary:
    statuses = Counter(_label(c.status) for c in customers)
    return CustomerSummary(
        total=sum(statuses.values()),
        active=statuses[CustomerStatus.ACTIVE.value],
        inactive=statuses[CustomerStatus.INACTIVE.value],
        blocked=statuses[CustomerStatus.BLOCKED.value],
    )


def summarize_revenue(transactions: Iterable[Transaction], today: date) -> RevenueSummary:
    """
    Revenue from successful purchases, with a month-over-month comparison.

    Growth rules:
    - last month > 0: (this - last) / last * 100
    - last month == 0 and this month > 0: 100
    - otherwise: 0

    Purchases without a date count toward total revenue only.
    """
    this_start = month_start(today)
    last_start, last_end = previous_month_range(today)

    total = this_month = last_month = ZERO
    for txn in transactions:
        if _label(txn.type) != TransactionType.PURCHASE.value or not is_successful(txn):
            continue
        amount = to_amount(txn.amount)
        total += amount
        if txn.transaction_date is None:
            continue
        day = txn.transaction_date.date()
        if day >= this_start:
            this_month += amount
        elif last_start <= day <= last_end:
            last_month += amount

    if last_month > 0:
        growth = (this_month - last_month) / last_month * 100
    elif this_month > 0:
        growth = Decimal("100")
    else:
        growth = ZERO

    return RevenueSummary(
        total_revenue=total,
        this_month=this_month,
        last_month=last_month,
        growth_percent=growth,
    )


def build_report(
    customers: List[Customer],
    cards: List[Card],
    transactions: List[Transaction],
    today: date,
) -> PortalReport:
    """Main entry point for the admin report screen"""
    return PortalReport(
        customers=summarize_customers(customers),
        cards=summarize_cards(cards),
        transactions=aggregate_transactions(transactions),
        revenue=summarize_revenue(transactions, today),
    )
