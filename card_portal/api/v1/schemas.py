"""Pydantic schemas for API request/response validation"""

import re
from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

from card_portal.domain.models import (
    Card,
    CardSummary,
    Customer,
    CustomerSummary,
    RevenueSummary,
    Transaction,
    TransactionStatistics,
    UserProfile,
)

# Amounts stay Decimal in Python; JSON carries plain numbers
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class PortalSchema(BaseModel):
    """camelCase on the wire, snake_case in Python"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Auth ---


class LoginRequest(PortalSchema):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class RegisterRequest(PortalSchema):
    username: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6)
    email: str = Field(..., min_length=3)
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=7, description="Digits only after normalization")
    role: str = "CUSTOMER"


class UserSchema(PortalSchema):
    id: str
    username: str
    role: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @classmethod
    def from_domain(cls, user: UserProfile) -> "UserSchema":
        return cls(
            id=user.id,
            username=user.username,
            role=user.role,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
        )


class LoginResponse(PortalSchema):
    session_id: str
    user: UserSchema


# --- Records ---


class TransactionSchema(PortalSchema):
    id: Optional[str] = None
    type: Optional[str] = None
    status: Optional[str] = None
    amount: Optional[Money] = None
    transaction_date: Optional[datetime] = None
    card_id: Optional[str] = None
    description: Optional[str] = None
    reference: Optional[str] = None

    @classmethod
    def from_domain(cls, txn: Transaction) -> "TransactionSchema":
        return cls(
            id=txn.id,
            type=txn.type,
            status=txn.status,
            amount=txn.amount,
            transaction_date=txn.transaction_date,
            card_id=txn.card_id,
            description=txn.description,
            reference=txn.reference,
        )


class CardSchema(PortalSchema):
    id: str
    customer_id: Optional[str] = None
    card_type: Optional[str] = None
    status: Optional[str] = None
    credit_limit: Optional[Money] = None
    available_credit: Optional[Money] = None
    daily_limit: Optional[Money] = None
    masked_number: str = ""
    card_holder_name: Optional[str] = None
    expiry_date: Optional[date] = None

    @classmethod
    def from_domain(cls, card: Card) -> "CardSchema":
        return cls(
            id=card.id,
            customer_id=card.customer_id,
            card_type=card.card_type,
            status=card.status,
            credit_limit=card.credit_limit,
            available_credit=card.available_credit,
            daily_limit=card.daily_limit,
            masked_number=card.masked_number,
            card_holder_name=card.card_holder_name,
            expiry_date=card.expiry_date,
        )


class CustomerSchema(PortalSchema):
    id: str
    user_id: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    status: Optional[str] = None
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None

    @classmethod
    def from_domain(cls, customer: Customer) -> "CustomerSchema":
        return cls(
            id=customer.id,
            user_id=customer.user_id,
            first_name=customer.first_name,
            last_name=customer.last_name,
            email=customer.email,
            status=customer.status,
            phone=customer.phone,
            date_of_birth=customer.date_of_birth,
            address=customer.address,
            city=customer.city,
            state=customer.state,
            zip_code=customer.zip_code,
        )


# --- Statistics ---


class StatisticsSchema(PortalSchema):
    """Flat dashboard totals: totalSpent, totalPaid, pendingAmount, totalTransactions, ..."""

    total_spent: Money
    total_paid: Money
    pending_amount: Money
    total_transactions: int
    total_refunded: Money
    total_cashback: Money
    purchase_count: int
    payment_count: int
    refund_count: int
    successful_count: int
    pending_count: int
    declined_count: int
    reversed_count: int

    @classmethod
    def from_domain(cls, stats: TransactionStatistics) -> "StatisticsSchema":
        return cls(
            total_spent=stats.total_spent,
            total_paid=stats.total_paid,
            pending_amount=stats.pending_amount,
            total_transactions=stats.total_transactions,
            total_refunded=stats.total_refunded,
            total_cashback=stats.total_cashback,
            purchase_count=stats.purchase_count,
            payment_count=stats.payment_count,
            refund_count=stats.refund_count,
            successful_count=stats.successful_count,
            pending_count=stats.pending_count,
            declined_count=stats.declined_count,
            reversed_count=stats.reversed_count,
        )


class StatisticsResponse(StatisticsSchema):
    """Statistics plus the scope they cover ("all" or "page")"""

    scope: str = "all"


class TransactionListResponse(PortalSchema):
    """Totals over the full set, records for one display page"""

    statistics: StatisticsSchema
    statistics_scope: str = "all"
    transactions: List[TransactionSchema]
    page: int
    size: int
    total_pages: int
    total_elements: int


# --- Customer screens ---


class CustomerDashboardResponse(PortalSchema):
    user: UserSchema
    cards: List[CardSchema]
    active_cards: int
    total_credit_limit: Money
    recent_transactions: List[TransactionSchema]
    statistics: StatisticsSchema


class CardListResponse(PortalSchema):
    cards: List[CardSchema]
    active_cards: int
    total_credit_limit: Money


class CardApplicationRequest(PortalSchema):
    card_type: str = Field("SILVER", pattern="^(SILVER|GOLD|PLATINUM|DIAMOND)$")
    card_holder_name: str = Field(..., min_length=1)
    customer_id: Optional[str] = Field(None, description="Ignored for customers; they apply for themselves")


class CardIssueRequest(CardApplicationRequest):
    customer_id: str = Field(..., min_length=1)


class PaymentRequest(PortalSchema):
    card_id: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    description: str = "Credit Card Payment"


class PaymentResponse(PortalSchema):
    transaction: TransactionSchema
    outstanding_before: Money


class CartItemSchema(PortalSchema):
    name: str = Field(..., min_length=1)
    price: Decimal = Field(..., gt=0)
    quantity: int = Field(1, ge=1)


class CheckoutRequest(PortalSchema):
    card_id: str = Field(..., min_length=1)
    items: List[CartItemSchema] = Field(..., min_length=1)


class CheckoutResponse(PortalSchema):
    transaction: TransactionSchema
    total: Money
    description: str


class ProfileRequest(PortalSchema):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    phone: str = Field(..., min_length=7)
    date_of_birth: Optional[date] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None

    def to_remote(self, user_id: Optional[str]) -> Dict[str, Any]:
        """
        Remote customer body.

        Names trimmed, email lower-cased, phone sent as its digits and the
        birth date as local midnight. State is kept only as a two-letter code.
        """
        digits = re.sub(r"\D", "", self.phone)
        state = (self.state or "").strip()
        return {
            "userId": user_id,
            "firstName": self.first_name.strip(),
            "lastName": self.last_name.strip(),
            "email": self.email.strip().lower(),
            "phone": int(digits) if digits else None,
            "dateOfBirth": f"{self.date_of_birth.isoformat()}T00:00:00" if self.date_of_birth else None,
            "address": (self.address or "").strip() or None,
            "city": (self.city or "").strip() or None,
            "state": state.upper() if len(state) == 2 else None,
            "zipCode": (self.zip_code or "").strip() or None,
        }


class CustomerUpdateRequest(ProfileRequest):
    """Admin edit of a customer's details; same rules as the customer's own profile"""


# --- Admin screens ---


class AdminOverviewSchema(PortalSchema):
    total_customers: int
    total_cards: int
    active_cards: int
    total_transactions: int
    total_revenue: Money


class AdminDashboardResponse(PortalSchema):
    """Recent-page overview; counts cover the fetched page only"""

    overview: AdminOverviewSchema
    statistics_scope: str = "page"
    recent_customers: List[CustomerSchema]
    recent_cards: List[CardSchema]
    recent_transactions: List[TransactionSchema]


class CustomerSummarySchema(PortalSchema):
    total: int
    active: int
    inactive: int
    blocked: int

    @classmethod
    def from_domain(cls, summary: CustomerSummary) -> "CustomerSummarySchema":
        return cls(total=summary.total, active=summary.active, inactive=summary.inactive, blocked=summary.blocked)


class CardSummarySchema(PortalSchema):
    total: int
    active: int
    inactive: int
    blocked: int
    by_type: Dict[str, int]
    total_credit_limit: Money

    @classmethod
    def from_domain(cls, summary: CardSummary) -> "CardSummarySchema":
        return cls(
            total=summary.total,
            active=summary.active,
            inactive=summary.inactive,
            blocked=summary.blocked,
            by_type=summary.by_type,
            total_credit_limit=summary.total_credit_limit,
        )


class RevenueSchema(PortalSchema):
    total_revenue: Money
    this_month: Money
    last_month: Money
    growth_percent: Money

    @classmethod
    def from_domain(cls, revenue: RevenueSummary) -> "RevenueSchema":
        return cls(
            total_revenue=revenue.total_revenue,
            this_month=revenue.this_month,
            last_month=revenue.last_month,
            growth_percent=revenue.growth_percent,
        )


class ReportResponse(PortalSchema):
    customers: CustomerSummarySchema
    cards: CardSummarySchema
    transactions: StatisticsSchema
    transaction_types: Dict[str, int]
    transaction_statuses: Dict[str, int]
    revenue: RevenueSchema
    generated_at: datetime


class CustomerListResponse(PortalSchema):
    customers: List[CustomerSchema]
    page: int
    total_pages: int
    total_elements: int


class CardPageResponse(PortalSchema):
    cards: List[CardSchema]
    page: int
    total_pages: int
    total_elements: int


class ReasonRequest(PortalSchema):
    reason: str = Field(..., min_length=1)


class LimitUpdateRequest(PortalSchema):
    credit_limit: Optional[Decimal] = Field(None, gt=0)
    daily_limit: Optional[Decimal] = Field(None, gt=0)


class StatusUpdateRequest(PortalSchema):
    status: str = Field(..., pattern="^(ACTIVE|INACTIVE|BLOCKED)$")
