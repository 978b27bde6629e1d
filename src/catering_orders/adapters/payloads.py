"""Parsers that turn catering API payloads into domain models."""

from datetime import UTC, datetime

from catering_orders.domain.catalog import (
    Category,
    Customer,
    Dish,
    DishIngredient,
    Ingredient,
)
from catering_orders.domain.orders import OrderRequest, OrderSummary
from catering_orders.domain.reports import Report, ReportRow
from catering_orders.domain.sessions import Session


def parse_session(payload: dict[str, object]) -> Session:
    """Parse a login response into a session."""
    user = payload.get("user") or {}
    return Session(
        token=str(payload["token"]),
        role=str(user.get("role", "")),
        email=str(user.get("email", "")),
    )


def parse_category(row: dict[str, object]) -> Category:
    return Category(id=int(row["id"]), name=str(row.get("name", "")))


def parse_ingredient(row: dict[str, object]) -> Ingredient:
    return Ingredient(
        id=int(row["id"]),
        name=str(row.get("name", "")),
        unit=row.get("unit"),
        category_id=_optional_int(row.get("category_id")),
        category_name=row.get("category_name"),
    )


def parse_dish(row: dict[str, object]) -> Dish:
    """Parse a dish row with its nested ingredient list."""
    ingredients = row.get("ingredients") or []
    return Dish(
        id=int(row["id"]),
        name=str(row.get("name", "")),
        base_quantity=float(row.get("base_quantity") or 0),
        base_unit=str(row.get("base_unit") or ""),
        ingredients=[_parse_dish_ingredient(item) for item in ingredients],
        price_per_base=_optional_float(row.get("price_per_base")),
        cost_per_base=_optional_float(row.get("cost_per_base")),
    )


def _parse_dish_ingredient(row: dict[str, object]) -> DishIngredient:
    ingredient_id = row.get("ingredient_id") or row.get("id")
    return DishIngredient(
        ingredient_id=int(ingredient_id),
        ingredient_name=str(row.get("ingredient_name") or row.get("name") or ""),
        amount_per_base=float(row.get("amount_per_base") or 0),
        unit=str(row.get("unit") or ""),
    )


def parse_customer(row: dict[str, object]) -> Customer:
    return Customer(
        id=int(row["id"]),
        name=str(row.get("name", "")),
        phone=row.get("phone"),
        email=row.get("email"),
        address=row.get("address"),
    )


def parse_order_summary(row: dict[str, object]) -> OrderSummary:
    """Parse an order list row."""
    return OrderSummary(
        id=int(row["id"]),
        dish_id=_optional_int(row.get("dish_id")),
        dish_name=str(row.get("dish_name") or ""),
        customer_id=_optional_int(row.get("customer_id")),
        customer_name=row.get("customer_name"),
        customer_phone=row.get("customer_phone"),
        requested_quantity=float(row.get("requested_quantity") or 0),
        requested_unit=str(row.get("requested_unit") or ""),
        created_at=parse_timestamp(row.get("created_at")),
    )


def parse_timestamp(raw: object) -> datetime:
    """Parse an ISO timestamp or epoch milliseconds, assuming UTC when naive."""
    if isinstance(raw, datetime):
        value = raw
    elif isinstance(raw, int | float):
        value = datetime.fromtimestamp(raw / 1000, tz=UTC)
    elif isinstance(raw, str) and raw:
        value = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    else:
        raise ValueError(f"Invalid timestamp: {raw!r}")
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value


def parse_report(range_name: str, payload: dict[str, object]) -> Report:
    """Parse a report payload into rows and totals."""
    totals = payload.get("totals") or {}
    return Report(
        range=range_name,
        rows=[_parse_report_row(row) for row in payload.get("rows") or []],
        totals=_parse_report_row({"period": "total", **totals}),
    )


def _parse_report_row(row: dict[str, object]) -> ReportRow:
    return ReportRow(
        period=str(row.get("period", "")),
        orders_count=int(row.get("orders_count") or 0),
        revenue=float(row.get("revenue") or 0),
        cost=float(row.get("cost") or 0),
        profit=float(row.get("profit") or 0),
    )


def order_request_payload(request: OrderRequest) -> dict[str, object]:
    """Serialize an order request for the order-creation call."""
    payload: dict[str, object] = {
        "dish_id": request.dish_id,
        "customer_id": request.customer_id,
        "requested_quantity": request.requested_quantity,
        "requested_unit": request.requested_unit,
        "overrides": [
            {
                "ingredient_id": line.ingredient_id,
                "scaled_amount": line.scaled_amount,
                "unit": line.unit,
            }
            for line in request.overrides
        ],
    }
    optional = {
        "booking_date": request.booking_date,
        "booking_time": request.booking_time,
        "delivery_date": request.delivery_date,
        "delivery_time": request.delivery_time,
        "delivery_address": request.delivery_address,
    }
    payload.update({key: value for key, value in optional.items() if value})
    return payload


def _optional_int(value: object) -> int | None:
    if value is None or value == "":
        return None
    return int(value)


def _optional_float(value: object) -> float | None:
    if value is None or value == "":
        return None
    return float(value)
