"""Remote transaction endpoints"""

from decimal import Decimal
from typing import Any, Dict, List

from card_portal.config import settings
from card_portal.domain.models import Page, Transaction, TransactionType
from card_portal.infrastructure.clients.base import PortalAPIClient, collect_pages
from card_portal.infrastructure.clients.schemas import TransactionPayload, parse_model, parse_page


def _page(payload: Any) -> Page[Transaction]:
    return parse_page(payload, TransactionPayload, TransactionPayload.to_domain)


class TransactionClient(PortalAPIClient):
    """Client for /api/transactions"""

    async def list_all(
        self,
        page: int = 0,
        size: int = 10,
        sort_by: str = "transactionDate",
        sort_dir: str = "DESC",
    ) -> Page[Transaction]:
        payload = await self._request(
            "GET",
            "/api/transactions",
            operation="transactions.list",
            params={"page": page, "size": size, "sortBy": sort_by, "sortDir": sort_dir},
        )
        return _page(payload)

    async def get(self, transaction_id: str) -> Transaction:
        payload = await self._request("GET", f"/api/transactions/{transaction_id}", operation="transactions.get")
        return parse_model(payload, TransactionPayload).to_domain()

    async def list_by_card(self, card_id: str, page: int = 0, size: int = 10) -> Page[Transaction]:
        payload = await self._request(
            "GET",
            f"/api/transactions/card/{card_id}",
            operation="transactions.by_card",
            params={"page": page, "size": size},
        )
        return _page(payload)

    async def list_by_customer(self, customer_id: str, page: int = 0, size: int = 10) -> Page[Transaction]:
        payload = await self._request(
            "GET",
            f"/api/transactions/customer/{customer_id}",
            operation="transactions.by_customer",
            params={"page": page, "size": size},
        )
        return _page(payload)

    async def list_by_status(self, status: str, page: int = 0, size: int = 10) -> Page[Transaction]:
        payload = await self._request(
            "GET",
            f"/api/transactions/status/{status.upper()}",
            operation="transactions.by_status",
            params={"page": page, "size": size},
        )
        return _page(payload)

    async def list_by_type(self, txn_type: str, page: int = 0, size: int = 10) -> Page[Transaction]:
        payload = await self._request(
            "GET",
            f"/api/transactions/type/{txn_type.upper()}",
            operation="transactions.by_type",
            params={"page": page, "size": size},
        )
        return _page(payload)

    async def search(self, criteria: Dict[str, Any]) -> Page[Transaction]:
        params = {key: value for key, value in criteria.items() if value is not None}
        payload = await self._request("GET", "/api/transactions/search", operation="transactions.search", params=params)
        return _page(payload)

    async def fetch_all_for_customer(self, customer_id: str) -> List[Transaction]:
        """Every transaction of a customer, across all pages (all-time totals)"""
        size = settings.stats_page_size
        return await collect_pages(lambda number: self.list_by_customer(customer_id, page=number, size=size))

    async def fetch_all_for_card(self, card_id: str) -> List[Transaction]:
        size = settings.stats_page_size
        return await collect_pages(lambda number: self.list_by_card(card_id, page=number, size=size))

    async def fetch_all(self) -> List[Transaction]:
        """Every transaction in the portal, across all pages (admin totals)"""
        size = settings.admin_stats_page_size
        return await collect_pages(lambda number: self.list_all(page=number, size=size))

    async def create(self, card_id: str, txn_type: str, amount: Decimal, description: str = "") -> Transaction:
        """
        Submit a transaction; the remote API decides whether it is approved.

        Body format expected by the remote: {cardId, type, amount, description}
        """
        payload = await self._request(
            "POST",
            "/api/transactions",
            operation="transactions.create",
            json={
                "cardId": int(card_id) if str(card_id).isdigit() else card_id,
                "type": txn_type,
                "amount": float(amount),
                "description": description,
            },
        )
        return parse_model(payload, TransactionPayload).to_domain()

    async def purchase(self, card_id: str, amount: Decimal, description: str = "Purchase") -> Transaction:
        return await self.create(card_id, TransactionType.PURCHASE.value, amount, description or "Purchase")

    async def make_payment(
        self, card_id: str, amount: Decimal, description: str = "Credit Card Payment"
    ) -> Transaction:
        return await self.create(card_id, TransactionType.PAYMENT.value, amount, description or "Credit Card Payment")

    async def reverse(self, transaction_id: str, reason: str = "") -> Transaction:
        payload = await self._request(
            "POST",
            f"/api/transactions/{transaction_id}/reverse",
            operation="transactions.reverse",
            params={"reason": reason},
        )
        return parse_model(payload, TransactionPayload).to_domain()
