"""Reference data loading and admin maintenance."""

import asyncio
import logging
import math
from dataclasses import dataclass

from catering_orders.adapters.catering_api_client import CateringApiClient
from catering_orders.adapters.payloads import (
    parse_category,
    parse_customer,
    parse_dish,
    parse_ingredient,
)
from catering_orders.domain.catalog import DishIngredient, ReferenceData
from catering_orders.domain.errors import InvalidInputError
from catering_orders.domain.sessions import Session

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CustomerInput:
    """Fields for a new customer."""

    name: str
    phone: str | None = None
    email: str | None = None
    address: str | None = None


@dataclass(frozen=True)
class DishInput:
    """Fields for a new dish and its per-base ingredient amounts."""

    name: str
    base_quantity: float
    base_unit: str
    ingredients: list[DishIngredient]
    price_per_base: float | None = None
    cost_per_base: float | None = None


@dataclass
class CatalogService:
    """Loads categories, ingredients, dishes and customers and edits them."""

    client: CateringApiClient

    async def load(self, session: Session) -> ReferenceData:
        """Fetch all reference collections concurrently."""
        categories, ingredients, dishes, customers = await asyncio.gather(
            self.client.list_categories(session.token),
            self.client.list_ingredients(session.token),
            self.client.list_dishes(session.token),
            self.client.list_customers(session.token),
        )
        return ReferenceData(
            categories=[parse_category(row) for row in categories],
            ingredients=[parse_ingredient(row) for row in ingredients],
            dishes=[parse_dish(row) for row in dishes],
            customers=[parse_customer(row) for row in customers],
        )

    async def create_category(self, session: Session, name: str) -> ReferenceData:
        """Create a category and reload reference data."""
        cleaned = name.strip()
        if not cleaned:
            raise InvalidInputError("Category name is required")
        await self.client.create_category(session.token, cleaned)
        return await self.load(session)

    async def delete_category(
        self, session: Session, category_id: int
    ) -> ReferenceData:
        """Delete a category that has no ingredients attached."""
        current = await self.load(session)
        category = next(
            (item for item in current.categories if item.id == category_id), None
        )
        if category is not None:
            attached = current.ingredients_in_category(category)
            if attached:
                raise InvalidInputError(
                    f"Category '{category.name}' still has "
                    f"{len(attached)} ingredient(s); delete or move them first"
                )
        await self.client.delete_category(session.token, category_id)
        return await self.load(session)

    async def create_ingredient(
        self, session: Session, name: str, category_id: int | None
    ) -> ReferenceData:
        """Create an ingredient under a category."""
        cleaned = name.strip()
        if not cleaned or category_id is None:
            raise InvalidInputError("Ingredient name and category are required")
        await self.client.create_ingredient(
            session.token, {"name": cleaned, "category_id": category_id}
        )
        return await self.load(session)

    async def delete_ingredient(
        self, session: Session, ingredient_id: int
    ) -> ReferenceData:
        await self.client.delete_ingredient(session.token, ingredient_id)
        return await self.load(session)

    async def create_customer(
        self, session: Session, customer: CustomerInput
    ) -> ReferenceData:
        """Create a customer; blank optional fields are sent as null."""
        name = customer.name.strip()
        if not name:
            raise InvalidInputError("Customer name is required")
        await self.client.create_customer(
            session.token,
            {
                "name": name,
                "phone": _blank_to_none(customer.phone),
                "email": _blank_to_none(customer.email),
                "address": _blank_to_none(customer.address),
            },
        )
        return await self.load(session)

    async def delete_customer(
        self, session: Session, customer_id: int
    ) -> ReferenceData:
        await self.client.delete_customer(session.token, customer_id)
        return await self.load(session)

    async def create_dish(self, session: Session, dish: DishInput) -> ReferenceData:
        """Validate and create a dish with its ingredient amounts."""
        payload = dish_payload(dish)
        await self.client.create_dish(session.token, payload)
        _logger.info(
            "Created dish %s with %s ingredient(s)",
            payload["name"],
            len(dish.ingredients),
        )
        return await self.load(session)

    async def delete_dish(self, session: Session, dish_id: int) -> ReferenceData:
        await self.client.delete_dish(session.token, dish_id)
        return await self.load(session)


def dish_payload(dish: DishInput) -> dict[str, object]:
    """Validate a dish and build its creation payload."""
    name = dish.name.strip()
    base_unit = dish.base_unit.strip()
    if not name or not base_unit:
        raise InvalidInputError("Dish name and base unit are required")
    if not math.isfinite(dish.base_quantity) or dish.base_quantity <= 0:
        raise InvalidInputError("Base quantity must be greater than zero")
    if not dish.ingredients:
        raise InvalidInputError("Add at least one ingredient to the dish")
    seen: set[int] = set()
    for ingredient in dish.ingredients:
        if ingredient.ingredient_id in seen:
            raise InvalidInputError(
                f"Ingredient {ingredient.ingredient_id} is already added"
            )
        seen.add(ingredient.ingredient_id)
        if not math.isfinite(ingredient.amount_per_base):
            raise InvalidInputError("Ingredient amounts must be finite numbers")
        if ingredient.amount_per_base < 0:
            raise InvalidInputError("Ingredient amounts cannot be negative")
        if not ingredient.unit.strip():
            raise InvalidInputError("Every ingredient needs a unit")
    return {
        "name": name,
        "base_quantity": dish.base_quantity,
        "base_unit": base_unit,
        "price_per_base": dish.price_per_base,
        "cost_per_base": dish.cost_per_base,
        "ingredients": [
            {
                "ingredient_id": ingredient.ingredient_id,
                "amount_per_base": ingredient.amount_per_base,
                "unit": ingredient.unit.strip(),
            }
            for ingredient in dish.ingredients
        ],
    }


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None
