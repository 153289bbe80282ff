"""
Response shapes of the remote card-management API.

Every payload is validated here, once, and turned into domain dataclasses.
The remote API answers either with a bare body or with an envelope
``{"success": ..., "message": ..., "data": ...}``; collections arrive either
as a Spring page (``content``, ``totalPages``, ...) or as a bare list.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Annotated, Any, Callable, List, Optional, Type, TypeVar

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field, ValidationError

from card_portal.domain.exceptions import InvalidResponseError, RemoteValidationError
from card_portal.domain.models import Card, Customer, Page, Transaction, UserProfile, UserRole

M = TypeVar("M", bound="RemoteModel")
D = TypeVar("D")


def _lenient_decimal(value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return None
    return amount if amount.is_finite() else None


def _lenient_datetime(value: Any) -> Optional[datetime]:
    # Jackson may serialize LocalDateTime as [year, month, day, hour, minute, second]
    if isinstance(value, (list, tuple)) and len(value) >= 3:
        try:
            return datetime(*[int(part) for part in value[:6]])
        except (TypeError, ValueError):
            return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


def _upper(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text.upper() or None


Label = Annotated[Optional[str], BeforeValidator(_upper)]
Amount = Annotated[Optional[Decimal], BeforeValidator(_lenient_decimal)]
Timestamp = Annotated[Optional[datetime], BeforeValidator(_lenient_datetime)]


class RemoteModel(BaseModel):
    """Base for remote payloads: camelCase aliases, extra keys ignored"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)


class TransactionPayload(RemoteModel):
    id: Optional[str] = None
    type: Label = Field(None, validation_alias=AliasChoices("type", "transactionType"))
    status: Label = None
    amount: Amount = None
    transaction_date: Timestamp = Field(None, alias="transactionDate")
    card_id: Optional[str] = Field(None, alias="cardId")
    description: Optional[str] = None
    reference: Optional[str] = Field(None, alias="transactionReference")

    def to_domain(self) -> Transaction:
        return Transaction(
            id=self.id,
            type=self.type,
            status=self.status,
            amount=self.amount,
            transaction_date=self.transaction_date,
            card_id=self.card_id,
            description=self.description,
            reference=self.reference,
        )


class CardPayload(RemoteModel):
    id: str
    customer_id: Optional[str] = Field(None, alias="customerId")
    card_type: Label = Field(None, alias="cardType")
    status: Label = None
    credit_limit: Amount = Field(None, alias="creditLimit")
    available_credit: Amount = Field(None, alias="availableCredit")
    daily_limit: Amount = Field(None, alias="dailyLimit")
    card_number: Optional[str] = Field(None, alias="cardNumber")
    card_holder_name: Optional[str] = Field(None, alias="cardHolderName")
    expiry_date: Timestamp = Field(None, alias="expiryDate")

    def to_domain(self) -> Card:
        return Card(
            id=self.id,
            customer_id=self.customer_id,
            card_type=self.card_type,
            status=self.status,
            credit_limit=self.credit_limit,
            available_credit=self.available_credit,
            daily_limit=self.daily_limit,
            card_number=self.card_number,
            card_holder_name=self.card_holder_name,
            expiry_date=self.expiry_date.date() if self.expiry_date else None,
        )


class CustomerPayload(RemoteModel):
    id: str
    user_id: Optional[str] = Field(None, alias="userId")
    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")
    email: Optional[str] = None
    status: Label = None
    phone: Optional[str] = None
    date_of_birth: Timestamp = Field(None, alias="dateOfBirth")
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = Field(None, alias="zipCode")

    def to_domain(self) -> Customer:
        return Customer(
            id=self.id,
            user_id=self.user_id,
            first_name=self.first_name,
            last_name=self.last_name,
            email=self.email,
            status=self.status,
            phone=self.phone,
            date_of_birth=self.date_of_birth.date() if self.date_of_birth else None,
            address=self.address,
            city=self.city,
            state=self.state,
            zip_code=self.zip_code,
        )


class UserPayload(RemoteModel):
    id: str
    username: str = ""
    role: Label = None
    email: Optional[str] = None
    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")

    def to_domain(self) -> UserProfile:
        return UserProfile(
            id=self.id,
            username=self.username,
            role=self.role or UserRole.CUSTOMER.value,
            email=self.email,
            first_name=self.first_name,
            last_name=self.last_name,
        )


class LoginPayload(RemoteModel):
    token: str
    user: UserPayload


class PagePayload(RemoteModel):
    content: List[Any]
    number: int = 0
    size: int = 0
    total_pages: int = Field(1, alias="totalPages")
    total_elements: Optional[int] = Field(None, alias="totalElements")
    last: Optional[bool] = None


def unwrap(payload: Any) -> Any:
    """
    Strip the response envelope when present.

    Raises:
        RemoteValidationError: Envelope reports ``success: false``
    """
    if isinstance(payload, dict) and "data" in payload:
        if payload.get("success") is False:
            raise RemoteValidationError(payload.get("message") or "Request rejected by portal API")
        return payload["data"]
    return payload


def parse_model(payload: Any, model: Type[M]) -> M:
    """Validate one (possibly enveloped) object against ``model``"""
    try:
        return model.model_validate(unwrap(payload))
    except ValidationError as e:
        raise InvalidResponseError(f"Invalid {model.__name__} from portal API: {e.error_count()} error(s)") from e


def parse_page(payload: Any, model: Type[M], convert: Callable[[M], D]) -> Page[D]:
    """Normalize an enveloped or bare page/list of ``model`` into a domain Page"""
    data = unwrap(payload)
    try:
        if isinstance(data, list):
            items = [convert(model.model_validate(item)) for item in data]
            return Page(items=items, number=0, size=len(items), total_pages=1, total_elements=len(items), last=True)

        page = PagePayload.model_validate(data)
        items = [convert(model.model_validate(item)) for item in page.content]
    except ValidationError as e:
        raise InvalidResponseError(f"Invalid {model.__name__} page from portal API: {e.error_count()} error(s)") from e

    return Page(
        items=items,
        number=page.number,
        size=page.size or len(items),
        total_pages=max(page.total_pages, 1),
        total_elements=page.total_elements if page.total_elements is not None else len(items),
        last=page.last,
    )
