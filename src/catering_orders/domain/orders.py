"""Domain models for orders and inferred order groups."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class ScaledIngredient:
    """Concrete ingredient amount submitted with an order."""

    ingredient_id: int
    ingredient_name: str
    scaled_amount: float
    unit: str
    overridden: bool = False


@dataclass(frozen=True)
class OrderDraft:
    """Operator input for one dish line before it is composed."""

    dish_id: int | None
    customer_id: int | None
    requested_quantity: float
    overrides: dict[int, str | float] = field(default_factory=dict)
    booking_date: str | None = None
    booking_time: str | None = None
    delivery_date: str | None = None
    delivery_time: str | None = None
    delivery_address: str | None = None


@dataclass(frozen=True)
class OrderRequest:
    """Payload for the order-creation call."""

    dish_id: int
    customer_id: int
    requested_quantity: float
    requested_unit: str
    overrides: list[ScaledIngredient]
    booking_date: str | None = None
    booking_time: str | None = None
    delivery_date: str | None = None
    delivery_time: str | None = None
    delivery_address: str | None = None


@dataclass(frozen=True)
class OrderSummary:
    """Row returned by the orders list."""

    id: int
    dish_id: int | None
    dish_name: str
    customer_id: int | None
    customer_name: str | None
    customer_phone: str | None
    requested_quantity: float
    requested_unit: str
    created_at: datetime


@dataclass(frozen=True)
class OrderGroup:
    """Orders from one customer placed close together, treated as one checkout."""

    primary_order_id: int
    member_order_ids: list[int]

    @property
    def size(self) -> int:
        return len(self.member_order_ids)

    def __contains__(self, order_id: object) -> bool:
        return order_id in self.member_order_ids
