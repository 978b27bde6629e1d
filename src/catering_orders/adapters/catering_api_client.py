"""Catering REST API client adapter."""

import logging
from dataclasses import dataclass
from typing import Any, Protocol

import httpx

from catering_orders.config import normalize_base_url

_logger = logging.getLogger(__name__)

GENERIC_API_ERROR = "Request failed"
NETWORK_ERROR = "Network error, please try again"


class CateringApiError(Exception):
    """Non-2xx response, network failure or unreadable body from the API."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class CateringApiClient(Protocol):
    """Interface for the external catering API."""

    async def login(self, email: str, password: str) -> dict[str, object]:
        """Authenticate and return the token and user payload."""

    async def list_categories(self, token: str) -> list[dict[str, object]]:
        """Return all categories."""

    async def create_category(self, token: str, name: str) -> dict[str, object]:
        """Create a category."""

    async def delete_category(self, token: str, category_id: int) -> None:
        """Delete a category."""

    async def list_ingredients(self, token: str) -> list[dict[str, object]]:
        """Return all ingredients."""

    async def create_ingredient(
        self, token: str, payload: dict[str, object]
    ) -> dict[str, object]:
        """Create an ingredient."""

    async def delete_ingredient(self, token: str, ingredient_id: int) -> None:
        """Delete an ingredient."""

    async def list_dishes(self, token: str) -> list[dict[str, object]]:
        """Return all dishes with nested ingredient lists."""

    async def create_dish(
        self, token: str, payload: dict[str, object]
    ) -> dict[str, object]:
        """Create a dish."""

    async def delete_dish(self, token: str, dish_id: int) -> None:
        """Delete a dish."""

    async def list_customers(self, token: str) -> list[dict[str, object]]:
        """Return all customers."""

    async def create_customer(
        self, token: str, payload: dict[str, object]
    ) -> dict[str, object]:
        """Create a customer."""

    async def delete_customer(self, token: str, customer_id: int) -> None:
        """Delete a customer."""

    async def create_order(
        self, token: str, payload: dict[str, object]
    ) -> dict[str, object]:
        """Create an order and return its id."""

    async def list_orders(self, token: str) -> list[dict[str, object]]:
        """Return order summaries."""

    async def get_order_slips(self, token: str, order_id: int) -> dict[str, object]:
        """Return the ingredient and order slip payloads for an order."""

    async def get_report(self, token: str, range_name: str) -> dict[str, object]:
        """Return report rows and totals for a range."""


@dataclass
class HttpxCateringApiClient(CateringApiClient):
    """HTTPX-backed catering API client."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 15

    @classmethod
    def create(cls, base_url: str, timeout: float = 15) -> "HttpxCateringApiClient":
        """Create an API client with a managed httpx session."""
        return cls(
            base_url=normalize_base_url(base_url),
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def login(self, email: str, password: str) -> dict[str, object]:
        """Authenticate with email and password."""
        return await self._request(
            "POST", "/auth/login", json={"email": email, "password": password}
        )

    async def list_categories(self, token: str) -> list[dict[str, object]]:
        """Return all categories."""
        return await self._request("GET", "/categories", token=token)

    async def create_category(self, token: str, name: str) -> dict[str, object]:
        """Create a category."""
        return await self._request(
            "POST", "/categories", token=token, json={"name": name}
        )

    async def delete_category(self, token: str, category_id: int) -> None:
        """Delete a category."""
        await self._request("DELETE", f"/categories/{category_id}", token=token)

    async def list_ingredients(self, token: str) -> list[dict[str, object]]:
        """Return all ingredients."""
        return await self._request("GET", "/ingredients", token=token)

    async def create_ingredient(
        self, token: str, payload: dict[str, object]
    ) -> dict[str, object]:
        """Create an ingredient."""
        return await self._request("POST", "/ingredients", token=token, json=payload)

    async def delete_ingredient(self, token: str, ingredient_id: int) -> None:
        """Delete an ingredient."""
        await self._request("DELETE", f"/ingredients/{ingredient_id}", token=token)

    async def list_dishes(self, token: str) -> list[dict[str, object]]:
        """Return all dishes."""
        return await self._request("GET", "/dishes", token=token)

    async def create_dish(
        self, token: str, payload: dict[str, object]
    ) -> dict[str, object]:
        """Create a dish."""
        return await self._request("POST", "/dishes", token=token, json=payload)

    async def delete_dish(self, token: str, dish_id: int) -> None:
        """Delete a dish."""
        await self._request("DELETE", f"/dishes/{dish_id}", token=token)

    async def list_customers(self, token: str) -> list[dict[str, object]]:
        """Return all customers."""
        return await self._request("GET", "/customers", token=token)

    async def create_customer(
        self, token: str, payload: dict[str, object]
    ) -> dict[str, object]:
        """Create a customer."""
        return await self._request("POST", "/customers", token=token, json=payload)

    async def delete_customer(self, token: str, customer_id: int) -> None:
        """Delete a customer."""
        await self._request("DELETE", f"/customers/{customer_id}", token=token)

    async def create_order(
        self, token: str, payload: dict[str, object]
    ) -> dict[str, object]:
        """Create an order."""
        return await self._request("POST", "/orders", token=token, json=payload)

    async def list_orders(self, token: str) -> list[dict[str, object]]:
        """Return order summaries."""
        return await self._request("GET", "/orders", token=token)

    async def get_order_slips(self, token: str, order_id: int) -> dict[str, object]:
        """Return slip payloads for an order."""
        return await self._request("GET", f"/orders/{order_id}/slips", token=token)

    async def get_report(self, token: str, range_name: str) -> dict[str, object]:
        """Return a report for the given range."""
        return await self._request(
            "GET", "/reports", token=token, params={"range": range_name}
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        token: str | None = None,
        json: dict[str, object] | None = None,
        params: dict[str, str] | None = None,
    ) -> Any:
        headers = {"Content-Type": "application/json"}
        if token is not None:
            headers["Authorization"] = f"Bearer {token}"
        try:
            response = await self.http_client.request(
                method,
                f"{self.base_url}{path}",
                headers=headers,
                json=json,
                params=params,
                timeout=self.timeout,
            )
        except httpx.HTTPError as exc:
            _logger.warning("Catering API %s %s failed: %s", method, path, exc)
            raise CateringApiError(NETWORK_ERROR) from exc

        body = _decode_body(response)
        if not response.is_success:
            message = _error_message(body)
            _logger.info(
                "Catering API %s %s returned %s: %s",
                method,
                path,
                response.status_code,
                message,
            )
            raise CateringApiError(message, status_code=response.status_code)
        return body


def _decode_body(response: httpx.Response) -> object | None:
    """Return the JSON body, or None for empty or non-JSON bodies."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        if response.is_success:
            raise CateringApiError(
                "Unreadable response from server", status_code=response.status_code
            ) from None
        return None


def _error_message(body: object | None) -> str:
    """Return the server's error message, if present."""
    if isinstance(body, dict):
        message = body.get("error") or body.get("message")
        if isinstance(message, str) and message.strip():
            return message
    return GENERIC_API_ERROR
