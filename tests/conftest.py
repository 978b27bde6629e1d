"""Shared test fixtures."""

import copy
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import pytest

from catering_orders.adapters.catering_api_client import (
    CateringApiClient,
    CateringApiError,
)
from catering_orders.config import Settings
from catering_orders.containers import AppContainer
from catering_orders.domain.sessions import ADMIN_ROLE, USER_ROLE, Session
from catering_orders.services.cache import InMemoryCache
from catering_orders.services.catalog import CatalogService
from catering_orders.services.grouping import OrderGroupService
from catering_orders.services.orders import OrderService
from catering_orders.services.reports import ReportService
from catering_orders.services.sessions import SessionService
from catering_orders.services.slips import SlipService

ADMIN = Session(token="token-admin", role=ADMIN_ROLE, email="admin@example.com")
STAFF = Session(token="token-user", role=USER_ROLE, email="staff@example.com")

ORDER_EPOCH = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


def _seed_categories() -> list[dict[str, object]]:
    return [
        {"id": 1, "name": "Grains"},
        {"id": 2, "name": "Spices"},
        {"id": 3, "name": "Meat"},
        {"id": 4, "name": "Dairy"},
    ]


def _seed_ingredients() -> list[dict[str, object]]:
    return [
        {"id": 10, "name": "Rice", "unit": "kg", "category_id": 1},
        {"id": 11, "name": "Chicken", "unit": "kg", "category_id": 3},
        {"id": 12, "name": "Salt", "unit": "g", "category_id": 2},
    ]


def _seed_dishes() -> list[dict[str, object]]:
    return [
        {
            "id": 100,
            "name": "Biryani",
            "base_quantity": 10,
            "base_unit": "kg",
            "price_per_base": 120,
            "cost_per_base": 70,
            "ingredients": [
                {
                    "ingredient_id": 10,
                    "ingredient_name": "Rice",
                    "amount_per_base": 3,
                    "unit": "kg",
                },
                {
                    "ingredient_id": 11,
                    "ingredient_name": "Chicken",
                    "amount_per_base": 4,
                    "unit": "kg",
                },
                {
                    "ingredient_id": 12,
                    "ingredient_name": "Salt",
                    "amount_per_base": 50,
                    "unit": "g",
                },
            ],
        },
        {
            "id": 101,
            "name": "Pulao",
            "base_quantity": 5,
            "base_unit": "plates",
            "ingredients": [
                {"id": 10, "name": "Rice", "amount_per_base": 2.5, "unit": "kg"},
                {"id": 12, "name": "Salt", "amount_per_base": 20, "unit": "g"},
            ],
        },
        {
            "id": 102,
            "name": "Placeholder",
            "base_quantity": 1,
            "base_unit": "tray",
            "ingredients": [],
        },
    ]


def _seed_customers() -> list[dict[str, object]]:
    return [
        {
            "id": 200,
            "name": "Asha Rao",
            "phone": "555-0100",
            "email": "asha@example.com",
            "address": "12 Market Road",
        },
        {"id": 201, "name": "Ravi Kumar", "phone": "555-0101"},
    ]


@dataclass
class FakeCateringApiClient(CateringApiClient):
    """In-memory catering API that records calls and builds slips."""

    users: dict[str, tuple[str, str]] = field(
        default_factory=lambda: {
            "admin@example.com": ("secret", "admin"),
            "staff@example.com": ("secret", "user"),
        }
    )
    categories: list[dict[str, object]] = field(default_factory=_seed_categories)
    ingredients: list[dict[str, object]] = field(default_factory=_seed_ingredients)
    dishes: list[dict[str, object]] = field(default_factory=_seed_dishes)
    customers: list[dict[str, object]] = field(default_factory=_seed_customers)
    orders: list[dict[str, object]] = field(default_factory=list)
    slips: dict[int, dict[str, object]] = field(default_factory=dict)
    reports: dict[str, dict[str, object]] = field(default_factory=dict)
    order_payloads: list[dict[str, object]] = field(default_factory=list)
    calls: list[tuple[str, object]] = field(default_factory=list)
    order_spacing_ms: int = 2000
    fail_orders_after: int | None = None
    next_id: int = 1000
    next_order_id: int = 1

    async def login(self, email: str, password: str) -> dict[str, object]:
        self.calls.append(("login", email))
        user = self.users.get(email)
        if user is None or user[0] != password:
            raise CateringApiError("Invalid credentials", status_code=401)
        return {"token": f"token-{user[1]}", "user": {"email": email, "role": user[1]}}

    async def list_categories(self, token: str) -> list[dict[str, object]]:
        self.calls.append(("list_categories", token))
        return copy.deepcopy(self.categories)

    async def create_category(self, token: str, name: str) -> dict[str, object]:
        self.calls.append(("create_category", name))
        row = {"id": self._new_id(), "name": name}
        self.categories.append(row)
        return row

    async def delete_category(self, token: str, category_id: int) -> None:
        self.calls.append(("delete_category", category_id))
        self.categories = [row for row in self.categories if row["id"] != category_id]

    async def list_ingredients(self, token: str) -> list[dict[str, object]]:
        self.calls.append(("list_ingredients", token))
        return copy.deepcopy(self.ingredients)

    async def create_ingredient(
        self, token: str, payload: dict[str, object]
    ) -> dict[str, object]:
        self.calls.append(("create_ingredient", payload))
        row = {"id": self._new_id(), "unit": None, **payload}
        self.ingredients.append(row)
        return row

    async def delete_ingredient(self, token: str, ingredient_id: int) -> None:
        self.calls.append(("delete_ingredient", ingredient_id))
        self.ingredients = [
            row for row in self.ingredients if row["id"] != ingredient_id
        ]

    async def list_dishes(self, token: str) -> list[dict[str, object]]:
        self.calls.append(("list_dishes", token))
        return copy.deepcopy(self.dishes)

    async def create_dish(
        self, token: str, payload: dict[str, object]
    ) -> dict[str, object]:
        self.calls.append(("create_dish", payload))
        row = {"id": self._new_id(), **payload}
        self.dishes.append(row)
        return row

    async def delete_dish(self, token: str, dish_id: int) -> None:
        self.calls.append(("delete_dish", dish_id))
        self.dishes = [row for row in self.dishes if row["id"] != dish_id]

    async def list_customers(self, token: str) -> list[dict[str, object]]:
        self.calls.append(("list_customers", token))
        return copy.deepcopy(self.customers)

    async def create_customer(
        self, token: str, payload: dict[str, object]
    ) -> dict[str, object]:
        self.calls.append(("create_customer", payload))
        row = {"id": self._new_id(), **payload}
        self.customers.append(row)
        return row

    async def delete_customer(self, token: str, customer_id: int) -> None:
        self.calls.append(("delete_customer", customer_id))
        self.customers = [row for row in self.customers if row["id"] != customer_id]

    async def create_order(
        self, token: str, payload: dict[str, object]
    ) -> dict[str, object]:
        self.calls.append(("create_order", payload))
        if (
            self.fail_orders_after is not None
            and len(self.order_payloads) >= self.fail_orders_after
        ):
            raise CateringApiError("Kitchen is closed", status_code=503)
        self.order_payloads.append(payload)
        order_id = self.next_order_id
        self.next_order_id += 1
        created_at = ORDER_EPOCH + timedelta(
            milliseconds=self.order_spacing_ms * len(self.orders)
        )
        self.add_order(order_id, payload, created_at)
        return {"id": order_id}

    async def list_orders(self, token: str) -> list[dict[str, object]]:
        self.calls.append(("list_orders", token))
        return copy.deepcopy(self.orders)

    async def get_order_slips(self, token: str, order_id: int) -> dict[str, object]:
        self.calls.append(("get_order_slips", order_id))
        slips = self.slips.get(order_id)
        if slips is None:
            raise CateringApiError("Order not found", status_code=404)
        return copy.deepcopy(slips)

    async def get_report(self, token: str, range_name: str) -> dict[str, object]:
        self.calls.append(("get_report", range_name))
        return self.reports.get(range_name, {"rows": [], "totals": {}})

    def add_order(
        self, order_id: int, payload: dict[str, object], created_at: datetime
    ) -> None:
        """Store an order row and the slips the API would derive from it."""
        dish = next(row for row in self.dishes if row["id"] == payload["dish_id"])
        customer = next(
            (row for row in self.customers if row["id"] == payload["customer_id"]),
            {},
        )
        names = {row["id"]: row["name"] for row in self.ingredients}
        self.orders.append(
            {
                "id": order_id,
                "dish_id": dish["id"],
                "dish_name": dish["name"],
                "customer_id": payload["customer_id"],
                "customer_name": customer.get("name"),
                "customer_phone": customer.get("phone"),
                "requested_quantity": payload["requested_quantity"],
                "requested_unit": payload["requested_unit"],
                "created_at": created_at.isoformat().replace("+00:00", "Z"),
            }
        )
        self.slips[order_id] = {
            "ingredientSlip": {
                "order_id": order_id,
                "dish_name": dish["name"],
                "requested_quantity": payload["requested_quantity"],
                "requested_unit": payload["requested_unit"],
                "customer_name": customer.get("name"),
                "customer_phone": customer.get("phone"),
                "items": [
                    {
                        "name": names.get(line["ingredient_id"], "Unknown"),
                        "scaled_amount": line["scaled_amount"],
                        "unit": line["unit"],
                    }
                    for line in payload["overrides"]
                ],
            },
            "orderSlip": {
                "order_id": order_id,
                "dish_name": dish["name"],
                "quantity": payload["requested_quantity"],
                "unit": payload["requested_unit"],
                "customer_name": customer.get("name"),
                "customer_phone": customer.get("phone"),
                "customer_email": customer.get("email"),
                "customer_address": customer.get("address"),
                "created_at": created_at.isoformat(),
                "delivery_date": payload.get("delivery_date"),
                "delivery_time": payload.get("delivery_time"),
                "delivery_address": payload.get("delivery_address"),
            },
        }

    def _new_id(self) -> int:
        self.next_id += 1
        return self.next_id


@pytest.fixture
def settings() -> Settings:
    return Settings(
        catering_api_base_url="https://catering.test/api/",
        order_group_window_ms=10_000,
        print_delay_ms=300,
    )


@pytest.fixture
def api_client() -> FakeCateringApiClient:
    return FakeCateringApiClient()


@pytest.fixture
def group_service(api_client: FakeCateringApiClient) -> OrderGroupService:
    return OrderGroupService(client=api_client, cache=InMemoryCache())


@pytest.fixture
def container(settings: Settings, api_client: FakeCateringApiClient) -> AppContainer:
    session_service = SessionService(
        client=api_client,
        store=InMemoryCache(),
        ttl_seconds=settings.session_ttl_seconds,
    )
    catalog_service = CatalogService(api_client)
    group_service = OrderGroupService(
        client=api_client,
        cache=InMemoryCache(),
        window_ms=settings.order_group_window_ms,
        ttl_seconds=settings.order_group_cache_ttl_seconds,
    )
    order_service = OrderService(client=api_client, group_service=group_service)
    slip_service = SlipService(
        client=api_client,
        group_service=group_service,
        catalog_service=catalog_service,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        api_client=api_client,
        session_service=session_service,
        catalog_service=catalog_service,
        group_service=group_service,
        order_service=order_service,
        slip_service=slip_service,
        report_service=ReportService(api_client),
        close_resources=close_resources,
    )
