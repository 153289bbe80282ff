"""Remote card endpoints"""

from decimal import Decimal
from typing import Any, Dict, List

from card_portal.config import settings
from card_portal.domain.models import Card, Page
from card_portal.infrastructure.clients.base import PortalAPIClient, collect_pages
from card_portal.infrastructure.clients.schemas import CardPayload, parse_model, parse_page


def _page(payload: Any) -> Page[Card]:
    return parse_page(payload, CardPayload, CardPayload.to_domain)


def _card(payload: Any) -> Card:
    return parse_model(payload, CardPayload).to_domain()


class CardClient(PortalAPIClient):
    """Client for /api/cards"""

    async def list_all(self, page: int = 0, size: int = 10) -> Page[Card]:
        payload = await self._request("GET", "/api/cards", operation="cards.list", params={"page": page, "size": size})
        return _page(payload)

    async def fetch_all(self) -> List[Card]:
        size = settings.admin_stats_page_size
        return await collect_pages(lambda number: self.list_all(page=number, size=size))

    async def get(self, card_id: str) -> Card:
        return _card(await self._request("GET", f"/api/cards/{card_id}", operation="cards.get"))

    async def list_by_customer(self, customer_id: str) -> List[Card]:
        payload = await self._request("GET", f"/api/cards/customer/{customer_id}", operation="cards.by_customer")
        return _page(payload).items

    async def list_by_status(self, status: str) -> List[Card]:
        payload = await self._request("GET", f"/api/cards/status/{status.upper()}", operation="cards.by_status")
        return _page(payload).items

    async def list_by_type(self, card_type: str) -> List[Card]:
        payload = await self._request("GET", f"/api/cards/type/{card_type.upper()}", operation="cards.by_type")
        return _page(payload).items

    async def create(self, application: Dict[str, Any]) -> Card:
        """Issue a card; the remote API applies the issuance rules"""
        return _card(await self._request("POST", "/api/cards", operation="cards.create", json=application))

    async def activate(self, card_id: str) -> Card:
        return _card(await self._request("PATCH", f"/api/cards/{card_id}/activate", operation="cards.activate"))

    async def block(self, card_id: str, reason: str = "") -> Card:
        payload = await self._request(
            "PATCH", f"/api/cards/{card_id}/block", operation="cards.block", params={"reason": reason}
        )
        return _card(payload)

    async def unblock(self, card_id: str) -> Card:
        return _card(await self._request("PATCH", f"/api/cards/{card_id}/unblock", operation="cards.unblock"))

    async def update_credit_limit(self, card_id: str, limit: Decimal) -> Card:
        payload = await self._request(
            "PATCH",
            f"/api/cards/{card_id}/credit-limit",
            operation="cards.credit_limit",
            params={"limit": str(limit)},
        )
        return _card(payload)

    async def update_daily_limit(self, card_id: str, limit: Decimal) -> Card:
        payload = await self._request(
            "PATCH",
            f"/api/cards/{card_id}/daily-limit",
            operation="cards.daily_limit",
            params={"limit": str(limit)},
        )
        return _card(payload)
