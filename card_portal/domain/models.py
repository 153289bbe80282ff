"""Domain models - pure Python dataclasses representing portal entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


class TransactionType(str, Enum):
    PURCHASE = "PURCHASE"
    PAYMENT = "PAYMENT"
    REFUND = "REFUND"
    CASHBACK = "CASHBACK"


class TransactionStatus(str, Enum):
    SUCCESS = "SUCCESS"
    APPROVED = "APPROVED"
    PENDING = "PENDING"
    DECLINED = "DECLINED"
    FAILED = "FAILED"
    REVERSED = "REVERSED"


class CardStatus(str, Enum):
    ACTIVE = "ACTIVE"
    BLOCKED = "BLOCKED"
    INACTIVE = "INACTIVE"
    EXPIRED = "EXPIRED"


class CardType(str, Enum):
    SILVER = "SILVER"
    GOLD = "GOLD"
    PLATINUM = "PLATINUM"
    DIAMOND = "DIAMOND"


class CustomerStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    BLOCKED = "BLOCKED"


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    CUSTOMER = "CUSTOMER"


@dataclass(frozen=True)
class Transaction:
    """Money movement on a card as returned by the remote API.

    ``type`` and ``status`` stay plain strings so values outside the known
    enums survive the trip from the API to the aggregator.
    """

    id: Optional[str]
    type: Optional[str]
    status: Optional[str]
    amount: Optional[Decimal]
    transaction_date: Optional[datetime] = None
    card_id: Optional[str] = None
    description: Optional[str] = None
    reference: Optional[str] = None


@dataclass(frozen=True)
class Card:
    """Credit card issued by the remote API"""

    id: str
    customer_id: Optional[str]
    card_type: Optional[str]
    status: Optional[str]
    credit_limit: Optional[Decimal]
    available_credit: Optional[Decimal]
    daily_limit: Optional[Decimal] = None
    card_number: Optional[str] = None
    card_holder_name: Optional[str] = None
    expiry_date: Optional[date] = None

    @property
    def masked_number(self) -> str:
        if not self.card_number:
            return ""
        return f"**** **** **** {self.card_number[-4:]}"


@dataclass(frozen=True)
class Customer:
    """Customer profile held by the remote API"""

    id: str
    user_id: Optional[str]
    first_name: Optional[str]
    last_name: Optional[str]
    email: Optional[str]
    status: Optional[str] = None
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None


@dataclass(frozen=True)
class UserProfile:
    """Authenticated portal user"""

    id: str
    username: str
    role: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


@dataclass(frozen=True)
class PortalSession:
    """Logged-in portal user: bearer token plus cached profile"""

    session_id: str
    token: str
    user: UserProfile
    created_at: datetime


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of a remote collection"""

    items: List[T]
    number: int = 0
    size: int = 0
    total_pages: int = 1
    total_elements: int = 0
    last: Optional[bool] = None

    @property
    def is_last(self) -> bool:
        if self.last is not None:
            return self.last
        return self.number + 1 >= self.total_pages


@dataclass(frozen=True)
class TransactionStatistics:
    """Derived totals for dashboard display"""

    total_spent: Decimal = Decimal("0")
    total_paid: Decimal = Decimal("0")
    pending_amount: Decimal = Decimal("0")
    total_transactions: int = 0
    total_refunded: Decimal = Decimal("0")
    total_cashback: Decimal = Decimal("0")
    purchase_count: int = 0
    payment_count: int = 0
    refund_count: int = 0
    successful_count: int = 0
    pending_count: int = 0
    declined_count: int = 0
    reversed_count: int = 0
    type_counts: Dict[str, int] = field(default_factory=dict)
    status_counts: Dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class CardSummary:
    total: int
    active: int
    inactive: int
    blocked: int
    by_type: Dict[str, int]
    total_credit_limit: Decimal


@dataclass(frozen=True)
class CustomerSummary:
    total: int
    active: int
    inactive: int
    blocked: int


@dataclass(frozen=True)
class RevenueSummary:
    total_revenue: Decimal
    this_month: Decimal
    last_month: Decimal
    growth_percent: Decimal


@dataclass(frozen=True)
class PortalReport:
    """Admin report over the full customer, card and transaction sets"""

    customers: CustomerSummary
    cards: CardSummary
    transactions: TransactionStatistics
    revenue: RevenueSummary


@dataclass(frozen=True)
class CartItem:
    """Item in the demo shop cart"""

    name: str
    price: Decimal
    quantity: int = 1
