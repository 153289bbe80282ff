"""Remote customer endpoints"""

import logging
from typing import Any, Dict, List, Optional

from card_portal.config import settings
from card_portal.domain.exceptions import ResourceNotFoundError
from card_portal.domain.models import Customer, Page
from card_portal.infrastructure.clients.base import PortalAPIClient, collect_pages
from card_portal.infrastructure.clients.schemas import CustomerPayload, parse_model, parse_page

logger = logging.getLogger(__name__)


def _page(payload: Any) -> Page[Customer]:
    return parse_page(payload, CustomerPayload, CustomerPayload.to_domain)


def _customer(payload: Any) -> Customer:
    return parse_model(payload, CustomerPayload).to_domain()


class CustomerClient(PortalAPIClient):
    """Client for /api/customers"""

    async def list_all(self, page: int = 0, size: int = 10, sort_by: str = "id", sort_dir: str = "ASC") -> Page[Customer]:
        payload = await self._request(
            "GET",
            "/api/customers",
            operation="customers.list",
            params={"page": page, "size": size, "sortBy": sort_by, "sortDir": sort_dir},
        )
        return _page(payload)

    async def fetch_all(self) -> List[Customer]:
        size = settings.admin_stats_page_size
        return await collect_pages(lambda number: self.list_all(page=number, size=size))

    async def get(self, customer_id: str) -> Optional[Customer]:
        """Customer by id, or None when the remote answers 404"""
        try:
            payload = await self._request("GET", f"/api/customers/{customer_id}", operation="customers.get")
        except ResourceNotFoundError:
            return None
        return _customer(payload)

    async def get_by_user(self, user_id: str) -> Optional[Customer]:
        try:
            payload = await self._request("GET", f"/api/customers/user/{user_id}", operation="customers.by_user")
        except ResourceNotFoundError:
            return None
        return _customer(payload)

    async def create(self, profile: Dict[str, Any]) -> Customer:
        return _customer(await self._request("POST", "/api/customers", operation="customers.create", json=profile))

    async def update(self, customer_id: str, profile: Dict[str, Any]) -> Customer:
        payload = await self._request("PUT", f"/api/customers/{customer_id}", operation="customers.update", json=profile)
        return _customer(payload)

    async def save(self, user_id: str, profile: Dict[str, Any]) -> Customer:
        """Update the user's customer record when it exists, otherwise create it"""
        existing = await self.get_by_user(user_id)
        if existing is not None:
            logger.info("Updating existing customer", extra={"customer_id": existing.id, "user_id": user_id})
            return await self.update(existing.id, profile)
        logger.info("Creating customer", extra={"user_id": user_id})
        return await self.create(profile)

    async def delete(self, customer_id: str) -> None:
        await self._request("DELETE", f"/api/customers/{customer_id}", operation="customers.delete")

    async def search(self, keyword: str, page: int = 0, size: int = 10) -> Page[Customer]:
        payload = await self._request(
            "GET",
            "/api/customers/search",
            operation="customers.search",
            params={"keyword": keyword, "page": page, "size": size},
        )
        return _page(payload)

    async def list_by_status(self, status: str) -> List[Customer]:
        payload = await self._request("GET", f"/api/customers/status/{status.upper()}", operation="customers.by_status")
        return _page(payload).items

    async def update_status(self, customer_id: str, status: str) -> Customer:
        payload = await self._request(
            "PATCH",
            f"/api/customers/{customer_id}/status",
            operation="customers.status",
            params={"status": status.upper()},
        )
        return _customer(payload)
