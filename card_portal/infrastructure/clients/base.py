"""Shared HTTP plumbing for the remote card-management API"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar

import httpx

from card_portal.config import settings
from card_portal.domain.exceptions import (
    AuthenticationError,
    InvalidResponseError,
    PermissionDeniedError,
    PortalAPIError,
    RemoteValidationError,
    ResourceNotFoundError,
)
from card_portal.domain.models import Page
from card_portal.infrastructure.observability.metrics import portal_api_latency_histogram, record_remote_failure

logger = logging.getLogger(__name__)

T = TypeVar("T")


def error_message(response: httpx.Response) -> str:
    """
    Best human-readable message from an error response.

    Field validation errors ``{"errors": {"field": "msg"}}`` are joined one per
    line; otherwise the first of message/error/details wins.
    """
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"

    if isinstance(body, list):
        return ", ".join(str(item) for item in body)
    if not isinstance(body, dict):
        return str(body)

    errors = body.get("errors")
    if isinstance(errors, dict) and errors:
        return "\n".join(f"{field}: {message}" for field, message in errors.items())

    for key in ("message", "error", "details"):
        if body.get(key):
            return str(body[key])
    return f"HTTP {response.status_code}"


class PortalAPIClient:
    """Base client for the remote card-management API"""

    def __init__(
        self,
        token: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_base: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.token = token
        self.base_url = base_url or settings.portal_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.api_max_retries
        self.backoff_base = backoff_base if backoff_base is not None else settings.api_backoff_base
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _translate(self, operation: str, response: httpx.Response) -> PortalAPIError | PermissionDeniedError:
        status = response.status_code
        record_remote_failure(operation, status_code=status)

        if status == 401:
            return AuthenticationError("Portal API rejected the session token", status)
        if status == 403:
            return PermissionDeniedError(error_message(response))
        if status == 404:
            return ResourceNotFoundError(error_message(response), status)
        if status in (400, 409, 422):
            return RemoteValidationError(error_message(response), status)
        return PortalAPIError(f"Portal API error: {status}", status)

    async def _request(
        self,
        method: str,
        path: str,
        operation: str,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
    ) -> Any:
        """
        Send one request and return the decoded JSON body (None when empty).

        Retry strategy (GET only, other methods are sent once):
        - Exponential backoff: base, 2*base, 4*base ...
        - Retries on 5xx errors and network failures, never on 4xx

        Raises:
            PortalAPIError: On timeout, HTTP errors, or a body that is not JSON
        """
        attempts = max(self.max_retries, 1) if method == "GET" else 1
        attempt = 0

        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers=self._headers(),
            transport=self.transport,
        ) as client:
            while True:
                attempt += 1
                try:
                    with portal_api_latency_histogram.labels(operation=operation).time():
                        response = await client.request(method, path, params=params, json=json)
                    response.raise_for_status()
                except httpx.HTTPStatusError as e:
                    if e.response.status_code < 500 or attempt >= attempts:
                        raise self._translate(operation, e.response) from e
                    record_remote_failure(operation, status_code=e.response.status_code)
                except httpx.TimeoutException as e:
                    record_remote_failure(operation, kind="timeout")
                    if attempt >= attempts:
                        raise PortalAPIError(f"Portal API timeout after {self.timeout}s") from e
                except httpx.RequestError as e:
                    record_remote_failure(operation, kind="unavailable")
                    if attempt >= attempts:
                        raise PortalAPIError(f"Portal API unavailable: {e}") from e
                else:
                    if not response.content:
                        return None
                    try:
                        return response.json()
                    except ValueError as e:
                        record_remote_failure(operation, kind="invalid_response")
                        raise InvalidResponseError(f"Non-JSON response from {operation}") from e

                backoff = self.backoff_base * (2 ** (attempt - 1))
                logger.info(
                    "Retrying portal API call",
                    extra={"operation": operation, "attempt": attempt, "backoff_seconds": backoff},
                )
                await asyncio.sleep(backoff)


async def collect_pages(
    fetch_page: Callable[[int], Awaitable[Page[T]]],
    max_pages: int | None = None,
) -> List[T]:
    """
    Walk a paged collection from page 0 until the remote reports the last page.

    Used wherever totals must cover the full set rather than one display page.
    Stops after ``max_pages`` pages and logs a warning, so a misbehaving remote
    cannot make the walk unbounded.
    """
    limit = max_pages or settings.max_stats_pages
    items: List[T] = []
    number = 0
    while True:
        page = await fetch_page(number)
        items.extend(page.items)
        if page.is_last or not page.items:
            return items
        number += 1
        if number >= limit:
            logger.warning(
                "Stopped paging before the last page",
                extra={"pages_fetched": number, "items": len(items), "total_elements": page.total_elements},
            )
            return items


async def gather_calls(*calls: Awaitable[Any]) -> List[Any]:
    """
    Run remote calls concurrently and return their results in order.

    The first failure cancels the calls still running, so a dead token or an
    outage does not leave page walks going after the error response is sent.
    """
    tasks = [asyncio.ensure_future(call) for call in calls]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        raise
