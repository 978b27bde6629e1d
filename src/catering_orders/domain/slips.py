"""Domain models for printable slips."""

from dataclasses import dataclass, field
from datetime import datetime

UNCATEGORIZED = "Uncategorized"


@dataclass(frozen=True)
class AggregatedIngredientLine:
    """Ingredient total summed across one or more orders."""

    name: str
    unit: str
    amount: float


@dataclass(frozen=True)
class CategoryBucket:
    """Aggregated lines printed under one category heading."""

    category: str
    lines: list[AggregatedIngredientLine]


@dataclass(frozen=True)
class AggregationResult:
    """Aggregated lines plus the number of unreadable source lines."""

    lines: list[AggregatedIngredientLine]
    skipped_lines: int = 0


@dataclass(frozen=True)
class SlipDish:
    """One dish line of a slip."""

    order_id: int
    dish_name: str
    quantity: float
    unit: str
    created_at: datetime | None = None


@dataclass(frozen=True)
class SlipCustomer:
    """Customer details printed on a slip."""

    name: str | None
    phone: str | None = None
    email: str | None = None
    address: str | None = None


@dataclass(frozen=True)
class IngredientSlip:
    """Ingredient requirements for an order or an order group."""

    primary_order_id: int
    order_ids: list[int]
    customer: SlipCustomer
    dishes: list[SlipDish]
    buckets: list[CategoryBucket]
    skipped_lines: int = 0

    @property
    def is_group(self) -> bool:
        return len(self.order_ids) > 1


@dataclass(frozen=True)
class OrderSlip:
    """Order summary for an order or an order group."""

    primary_order_id: int
    order_ids: list[int]
    customer: SlipCustomer
    dishes: list[SlipDish] = field(default_factory=list)
    delivery_address: str | None = None
    delivery_date: str | None = None
    delivery_time: str | None = None

    @property
    def is_group(self) -> bool:
        return len(self.order_ids) > 1
