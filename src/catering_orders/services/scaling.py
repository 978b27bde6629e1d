"""Recipe scaling for order composition.

Dish ingredient amounts are defined for the dish's base quantity. An order
for ``requested_quantity`` scales every amount by
``requested_quantity / base_quantity``. Amounts are rounded to four decimal
places. An operator may override any line with an explicit amount, which is
used as entered.
"""

import math

from catering_orders.domain.catalog import Dish
from catering_orders.domain.errors import InvalidInputError
from catering_orders.domain.orders import ScaledIngredient

AMOUNT_PRECISION = 4


def scale_factor(base_quantity: float, requested_quantity: float) -> float | None:
    """Return the ratio of requested to base quantity, or None if undefined.

    Infinite or NaN inputs, and ratios that overflow, are rejected.
    """
    if not (math.isfinite(base_quantity) and math.isfinite(requested_quantity)):
        raise InvalidInputError("Please enter a valid quantity")
    if base_quantity <= 0 or requested_quantity <= 0:
        return None
    factor = requested_quantity / base_quantity
    if not math.isfinite(factor):
        raise InvalidInputError("Please enter a valid quantity")
    return factor


def scale_ingredients(
    dish: Dish,
    requested_quantity: float,
    overrides: dict[int, str | float] | None = None,
) -> list[ScaledIngredient]:
    """Return the concrete amount for every dish ingredient."""
    factor = scale_factor(dish.base_quantity, requested_quantity)
    overrides = overrides or {}
    lines = []
    for ingredient in dish.ingredients:
        override = parse_override(overrides.get(ingredient.ingredient_id))
        if override is not None:
            amount = override
        elif factor is None:
            amount = 0.0
        else:
            amount = round(ingredient.amount_per_base * factor, AMOUNT_PRECISION)
            if not math.isfinite(amount):
                label = ingredient.ingredient_name or ingredient.ingredient_id
                raise InvalidInputError(f"Amount of {label} is out of range")
        lines.append(
            ScaledIngredient(
                ingredient_id=ingredient.ingredient_id,
                ingredient_name=ingredient.ingredient_name,
                scaled_amount=amount,
                unit=ingredient.unit,
                overridden=override is not None,
            )
        )
    return lines


def parse_override(raw: str | float | None) -> float | None:
    """Parse an operator-entered amount; blank means no override."""
    if raw is None:
        return None
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return None
    try:
        value = float(raw)
    except ValueError:
        raise InvalidInputError(f"Invalid ingredient amount: {raw!r}") from None
    if not math.isfinite(value) or value < 0:
        raise InvalidInputError(f"Invalid ingredient amount: {raw!r}")
    return value
