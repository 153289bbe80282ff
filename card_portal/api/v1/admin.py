"""Admin screens - dashboard, reports, and transaction/card/customer management"""

import logging
import time
from datetime import date, datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import Response
from sqlalchemy.orm import Session

from card_portal.api.dependencies import (
    get_card_client,
    get_customer_client,
    get_request_id,
    get_transaction_client,
    require_admin,
)
from card_portal.api.v1.schemas import (
    AdminDashboardResponse,
    AdminOverviewSchema,
    CardIssueRequest,
    CardPageResponse,
    CardSchema,
    CardSummarySchema,
    CustomerListResponse,
    CustomerSchema,
    CustomerSummarySchema,
    CustomerUpdateRequest,
    LimitUpdateRequest,
    ReasonRequest,
    ReportResponse,
    RevenueSchema,
    StatisticsSchema,
    StatusUpdateRequest,
    TransactionListResponse,
    TransactionSchema,
)
from card_portal.config import settings
from card_portal.domain.exceptions import ResourceNotFoundError
from card_portal.domain.models import Page, PortalSession
from card_portal.domain.statistics import aggregate_transactions, build_report, summarize_cards
from card_portal.infrastructure.clients.base import gather_calls
from card_portal.infrastructure.clients.cards import CardClient
from card_portal.infrastructure.clients.customers import CustomerClient
from card_portal.infrastructure.clients.transactions import TransactionClient
from card_portal.infrastructure.database.repositories import SessionRepository
from card_portal.infrastructure.database.session import get_db
from card_portal.infrastructure.observability.logging import log_statistics
from card_portal.infrastructure.observability.metrics import record_logout, record_statistics

router = APIRouter(prefix="/admin")
logger = logging.getLogger(__name__)


@router.get("/dashboard", response_model=AdminDashboardResponse)
async def admin_dashboard(
    request: Request,
    session: PortalSession = Depends(require_admin),
    customer_client: CustomerClient = Depends(get_customer_client),
    card_client: CardClient = Depends(get_card_client),
    txn_client: TransactionClient = Depends(get_transaction_client),
):
    """
    Recent-activity overview.

    Only the first page of each collection is fetched, so counts and revenue
    describe that page; the response says so with statisticsScope "page".
    Full-set figures live on /admin/reports.
    """
    start_time = time.time()
    size = settings.display_page_size

    customers, cards, transactions = await gather_calls(
        customer_client.list_all(page=0, size=size),
        card_client.list_all(page=0, size=size),
        txn_client.list_all(page=0, size=size),
    )

    stats = aggregate_transactions(transactions.items)
    card_summary = summarize_cards(cards.items)
    record_statistics("admin_page", stats.total_transactions)
    log_statistics(get_request_id(request), "admin_page", session.user.id, stats, (time.time() - start_time) * 1000)

    recent = settings.recent_items
    return AdminDashboardResponse(
        overview=AdminOverviewSchema(
            total_customers=len(customers.items),
            total_cards=card_summary.total,
            active_cards=card_summary.active,
            total_transactions=stats.total_transactions,
            total_revenue=stats.total_spent,
        ),
        statistics_scope="page",
        recent_customers=[CustomerSchema.from_domain(c) for c in customers.items[:recent]],
        recent_cards=[CardSchema.from_domain(c) for c in cards.items[:recent]],
        recent_transactions=[TransactionSchema.from_domain(t) for t in transactions.items[:recent]],
    )


@router.get("/reports", response_model=ReportResponse)
async def admin_reports(
    request: Request,
    session: PortalSession = Depends(require_admin),
    customer_client: CustomerClient = Depends(get_customer_client),
    card_client: CardClient = Depends(get_card_client),
    txn_client: TransactionClient = Depends(get_transaction_client),
):
    """Portal-wide report over every customer, card and transaction"""
    start_time = time.time()

    customers, cards, transactions = await gather_calls(
        customer_client.fetch_all(),
        card_client.fetch_all(),
        txn_client.fetch_all(),
    )

    report = build_report(customers, cards, transactions, today=date.today())
    record_statistics("admin_report", report.transactions.total_transactions)
    log_statistics(
        get_request_id(request), "admin_report", session.user.id, report.transactions, (time.time() - start_time) * 1000
    )

    return ReportResponse(
        customers=CustomerSummarySchema.from_domain(report.customers),
        cards=CardSummarySchema.from_domain(report.cards),
        transactions=StatisticsSchema.from_domain(report.transactions),
        transaction_types=report.transactions.type_counts,
        transaction_statuses=report.transactions.status_counts,
        revenue=RevenueSchema.from_domain(report.revenue),
        generated_at=datetime.now(timezone.utc),
    )


@router.get("/transactions", response_model=TransactionListResponse)
async def admin_transactions(
    request: Request,
    page: int = Query(0, ge=0),
    status: Optional[str] = Query(None),
    txn_type: Optional[str] = Query(None, alias="type"),
    keyword: Optional[str] = Query(None),
    session: PortalSession = Depends(require_admin),
    txn_client: TransactionClient = Depends(get_transaction_client),
):
    """
    Manage-transactions screen.

    Statistics always cover every transaction in the portal; the optional
    keyword, status or type filter narrows the listed page only.
    """
    start_time = time.time()
    size = settings.display_page_size

    if keyword and keyword.strip():
        display = txn_client.search({"keyword": keyword.strip(), "page": page, "size": size})
    elif status:
        display = txn_client.list_by_status(status, page=page, size=size)
    elif txn_type:
        display = txn_client.list_by_type(txn_type, page=page, size=size)
    else:
        display = txn_client.list_all(page=page, size=size)

    all_transactions, display_page = await gather_calls(txn_client.fetch_all(), display)

    stats = aggregate_transactions(all_transactions)
    record_statistics("admin", stats.total_transactions)
    log_statistics(get_request_id(request), "admin", session.user.id, stats, (time.time() - start_time) * 1000)

    return TransactionListResponse(
        statistics=StatisticsSchema.from_domain(stats),
        statistics_scope="all",
        transactions=[TransactionSchema.from_domain(t) for t in display_page.items],
        page=display_page.number,
        size=display_page.size,
        total_pages=display_page.total_pages,
        total_elements=display_page.total_elements,
    )


@router.get("/transactions/{transaction_id}", response_model=TransactionSchema)
async def admin_transaction(
    transaction_id: str,
    session: PortalSession = Depends(require_admin),
    txn_client: TransactionClient = Depends(get_transaction_client),
):
    return TransactionSchema.from_domain(await txn_client.get(transaction_id))


@router.post("/transactions/{transaction_id}/reverse", response_model=TransactionSchema)
async def reverse_transaction(
    transaction_id: str,
    body: ReasonRequest,
    request: Request,
    session: PortalSession = Depends(require_admin),
    txn_client: TransactionClient = Depends(get_transaction_client),
):
    txn = await txn_client.reverse(transaction_id, body.reason.strip())
    logger.info(
        "Transaction reversed",
        extra={"request_id": get_request_id(request), "admin_id": session.user.id, "transaction_id": txn.id},
    )
    return TransactionSchema.from_domain(txn)


# --- Cards ---


@router.get("/cards", response_model=CardPageResponse)
async def admin_cards(
    page: int = Query(0, ge=0),
    status: Optional[str] = Query(None),
    card_type: Optional[str] = Query(None, alias="type"),
    session: PortalSession = Depends(require_admin),
    card_client: CardClient = Depends(get_card_client),
):
    """Paged card list; a status or type filter returns every match on one page"""
    if status or card_type:
        cards = await (card_client.list_by_status(status) if status else card_client.list_by_type(card_type))
        result = Page(items=cards, total_elements=len(cards))
    else:
        result = await card_client.list_all(page=page, size=settings.display_page_size)
    return CardPageResponse(
        cards=[CardSchema.from_domain(c) for c in result.items],
        page=result.number,
        total_pages=result.total_pages,
        total_elements=result.total_elements,
    )


@router.post("/cards", response_model=CardSchema, status_code=201)
async def issue_card(
    body: CardIssueRequest,
    session: PortalSession = Depends(require_admin),
    card_client: CardClient = Depends(get_card_client),
):
    """Issue a card for any customer"""
    card = await card_client.create(
        {
            "customerId": body.customer_id,
            "cardType": body.card_type,
            "cardHolderName": body.card_holder_name.strip(),
        }
    )
    return CardSchema.from_domain(card)


@router.patch("/cards/{card_id}/activate", response_model=CardSchema)
async def activate_card(
    card_id: str,
    session: PortalSession = Depends(require_admin),
    card_client: CardClient = Depends(get_card_client),
):
    return CardSchema.from_domain(await card_client.activate(card_id))


@router.patch("/cards/{card_id}/block", response_model=CardSchema)
async def block_card(
    card_id: str,
    body: ReasonRequest,
    session: PortalSession = Depends(require_admin),
    card_client: CardClient = Depends(get_card_client),
):
    return CardSchema.from_domain(await card_client.block(card_id, body.reason.strip()))


@router.patch("/cards/{card_id}/unblock", response_model=CardSchema)
async def unblock_card(
    card_id: str,
    session: PortalSession = Depends(require_admin),
    card_client: CardClient = Depends(get_card_client),
):
    return CardSchema.from_domain(await card_client.unblock(card_id))


@router.patch("/cards/{card_id}/limits", response_model=CardSchema)
async def update_card_limits(
    card_id: str,
    body: LimitUpdateRequest,
    session: PortalSession = Depends(require_admin),
    card_client: CardClient = Depends(get_card_client),
):
    """Update the credit and/or daily limit; an empty body just returns the card"""
    card = None
    if body.credit_limit is not None:
        card = await card_client.update_credit_limit(card_id, body.credit_limit)
    if body.daily_limit is not None:
        card = await card_client.update_daily_limit(card_id, body.daily_limit)
    if card is None:
        card = await card_client.get(card_id)
    return CardSchema.from_domain(card)


# --- Customers ---


@router.get("/customers", response_model=CustomerListResponse)
async def admin_customers(
    page: int = Query(0, ge=0),
    keyword: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    session: PortalSession = Depends(require_admin),
    customer_client: CustomerClient = Depends(get_customer_client),
):
    size = settings.display_page_size
    if keyword and keyword.strip():
        result = await customer_client.search(keyword.strip(), page=page, size=size)
    elif status:
        customers = await customer_client.list_by_status(status)
        result = Page(items=customers, total_elements=len(customers))
    else:
        result = await customer_client.list_all(page=page, size=size)
    return CustomerListResponse(
        customers=[CustomerSchema.from_domain(c) for c in result.items],
        page=result.number,
        total_pages=result.total_pages,
        total_elements=result.total_elements,
    )


@router.put("/customers/{customer_id}", response_model=CustomerSchema)
async def update_customer(
    customer_id: str,
    body: CustomerUpdateRequest,
    request: Request,
    session: PortalSession = Depends(require_admin),
    customer_client: CustomerClient = Depends(get_customer_client),
):
    """Edit a customer's details; the record keeps its link to its user"""
    customer = await customer_client.get(customer_id)
    if customer is None:
        raise ResourceNotFoundError(f"Customer {customer_id} not found")

    updated = await customer_client.update(customer_id, body.to_remote(customer.user_id))
    logger.info(
        "Customer updated",
        extra={"request_id": get_request_id(request), "admin_id": session.user.id, "customer_id": customer_id},
    )
    return CustomerSchema.from_domain(updated)


@router.patch("/customers/{customer_id}/status", response_model=CustomerSchema)
async def update_customer_status(
    customer_id: str,
    body: StatusUpdateRequest,
    session: PortalSession = Depends(require_admin),
    customer_client: CustomerClient = Depends(get_customer_client),
):
    return CustomerSchema.from_domain(await customer_client.update_status(customer_id, body.status))


@router.delete("/customers/{customer_id}", status_code=204)
async def delete_customer(
    customer_id: str,
    request: Request,
    session: PortalSession = Depends(require_admin),
    customer_client: CustomerClient = Depends(get_customer_client),
    db: Session = Depends(get_db),
):
    """Delete a customer and close any portal sessions of its user"""
    customer = await customer_client.get(customer_id)
    if customer is None:
        raise ResourceNotFoundError(f"Customer {customer_id} not found")

    await customer_client.delete(customer_id)
    closed = 0
    if customer.user_id:
        closed = SessionRepository(db).delete_sessions_for_user(customer.user_id)
        db.commit()
        record_logout(closed)

    logger.info(
        "Customer deleted",
        extra={
            "request_id": get_request_id(request),
            "admin_id": session.user.id,
            "customer_id": customer_id,
            "sessions_closed": closed,
        },
    )
    return Response(status_code=204)
