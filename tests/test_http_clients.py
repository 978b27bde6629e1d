"""Tests for the HTTP catering API adapter."""

import asyncio
import json

import httpx
import pytest

from catering_orders.adapters.catering_api_client import (
    GENERIC_API_ERROR,
    NETWORK_ERROR,
    CateringApiError,
    HttpxCateringApiClient,
)


def _client(handler) -> HttpxCateringApiClient:  # type: ignore[no-untyped-def]
    transport = httpx.MockTransport(handler)
    async_client = httpx.AsyncClient(transport=transport)
    return HttpxCateringApiClient(
        base_url="https://catering.test/api", http_client=async_client
    )


def test_login_posts_credentials_without_token() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200, json={"token": "abc", "user": {"email": "a@b.c", "role": "admin"}}
        )

    client = _client(handler)

    result = asyncio.run(client.login("a@b.c", "pw"))

    assert result["token"] == "abc"
    assert seen[0].url.path == "/api/auth/login"
    assert "authorization" not in seen[0].headers
    assert json.loads(seen[0].content) == {"email": "a@b.c", "password": "pw"}


def test_requests_carry_bearer_token_and_params() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"rows": [], "totals": {}})

    client = _client(handler)

    asyncio.run(client.get_report("tok", "monthly"))

    assert seen[0].headers["authorization"] == "Bearer tok"
    assert seen[0].url.path == "/api/reports"
    assert seen[0].url.params["range"] == "monthly"


def test_create_order_sends_json_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "POST"
        assert request.url.path == "/api/orders"
        assert json.loads(request.content)["dish_id"] == 100
        return httpx.Response(201, json={"id": 7})

    client = _client(handler)

    created = asyncio.run(client.create_order("tok", {"dish_id": 100}))

    assert created == {"id": 7}


def test_delete_accepts_empty_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "DELETE"
        assert request.url.path == "/api/categories/3"
        return httpx.Response(204)

    client = _client(handler)

    assert asyncio.run(client.delete_category("tok", 3)) is None


def test_error_message_is_taken_from_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error": "Category has ingredients"})

    client = _client(handler)

    with pytest.raises(CateringApiError) as exc_info:
        asyncio.run(client.delete_category("tok", 1))

    assert exc_info.value.message == "Category has ingredients"
    assert exc_info.value.status_code == 400


def test_error_falls_back_to_message_field_then_generic() -> None:
    responses = iter(
        [
            httpx.Response(403, json={"message": "Forbidden for role"}),
            httpx.Response(500, text="<html>oops</html>"),
        ]
    )

    def handler(request: httpx.Request) -> httpx.Response:
        return next(responses)

    client = _client(handler)

    with pytest.raises(CateringApiError) as first:
        asyncio.run(client.list_orders("tok"))
    with pytest.raises(CateringApiError) as second:
        asyncio.run(client.list_orders("tok"))

    assert first.value.message == "Forbidden for role"
    assert second.value.message == GENERIC_API_ERROR
    assert second.value.status_code == 500


def test_network_failure_is_reported_as_api_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)

    with pytest.raises(CateringApiError) as exc_info:
        asyncio.run(client.list_dishes("tok"))

    assert exc_info.value.message == NETWORK_ERROR
    assert exc_info.value.status_code is None


def test_unreadable_success_body_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="not json")

    client = _client(handler)

    with pytest.raises(CateringApiError):
        asyncio.run(client.list_customers("tok"))


def test_create_normalizes_base_url() -> None:
    client = HttpxCateringApiClient.create("https://catering.test/api//", timeout=5)

    assert client.base_url == "https://catering.test/api"
    assert client.timeout == 5
    asyncio.run(client.close())
