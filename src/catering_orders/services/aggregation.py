"""Ingredient aggregation across orders and category bucketing for slips."""

import logging
import math
import re
from collections.abc import Iterable

from catering_orders.domain.catalog import ReferenceData
from catering_orders.domain.slips import (
    UNCATEGORIZED,
    AggregatedIngredientLine,
    AggregationResult,
    CategoryBucket,
)
from catering_orders.services.scaling import AMOUNT_PRECISION

AMOUNT_FIELDS = (
    "scaled_amount",
    "scaledAmount",
    "amount",
    "amount_per_base",
    "total_amount",
)
NAME_FIELDS = ("name", "ingredient_name")

_WHITESPACE = re.compile(r"\s+")

_logger = logging.getLogger(__name__)


def normalize_name(name: str) -> str:
    """Trim, lowercase and collapse inner whitespace."""
    return _WHITESPACE.sub(" ", name.strip().lower())


def normalize_unit(unit: str | None) -> str:
    return (unit or "").strip().lower()


def extract_amount(line: dict[str, object]) -> float | None:
    """Return the first usable amount field of a slip line."""
    for field_name in AMOUNT_FIELDS:
        value = line.get(field_name)
        if value is None or value == "" or isinstance(value, bool):
            continue
        try:
            amount = float(value)
        except (TypeError, ValueError):
            continue
        if math.isfinite(amount):
            return amount
    return None


def extract_name(line: dict[str, object]) -> str | None:
    for field_name in NAME_FIELDS:
        value = line.get(field_name)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def aggregate_ingredients(
    slip_lines: Iterable[Iterable[dict[str, object]]],
) -> AggregationResult:
    """Sum ingredient amounts across orders by normalized name and unit.

    Each element of ``slip_lines`` is the ingredient list of one order.
    Lines without a name or a readable amount, and lines whose amount is not
    positive, are skipped and counted.
    """
    totals: dict[tuple[str, str], AggregatedIngredientLine] = {}
    skipped = 0
    for order_lines in slip_lines:
        for line in order_lines:
            name = extract_name(line)
            amount = extract_amount(line)
            if name is None or amount is None or amount <= 0:
                skipped += 1
                _logger.warning("Skipping unreadable slip line: %s", line)
                continue
            raw_unit = line.get("unit")
            unit = raw_unit.strip() if isinstance(raw_unit, str) else ""
            key = (normalize_name(name), normalize_unit(unit))
            existing = totals.get(key)
            if existing is None:
                totals[key] = AggregatedIngredientLine(
                    name=name, unit=unit, amount=round(amount, AMOUNT_PRECISION)
                )
                continue
            totals[key] = AggregatedIngredientLine(
                name=existing.name,
                unit=existing.unit,
                amount=round(existing.amount + amount, AMOUNT_PRECISION),
            )
    return AggregationResult(lines=list(totals.values()), skipped_lines=skipped)


def category_lookup(reference: ReferenceData) -> dict[str, str]:
    """Map normalized ingredient names to their category names."""
    names_by_id = {category.id: category.name for category in reference.categories}
    lookup: dict[str, str] = {}
    for ingredient in reference.ingredients:
        category = ingredient.category_name or names_by_id.get(ingredient.category_id)
        if category:
            lookup[normalize_name(ingredient.name)] = category
    return lookup


def bucket_by_category(
    lines: list[AggregatedIngredientLine], lookup: dict[str, str]
) -> list[CategoryBucket]:
    """Group lines under categories, both sorted alphabetically."""
    buckets: dict[str, list[AggregatedIngredientLine]] = {}
    for line in lines:
        category = lookup.get(normalize_name(line.name), UNCATEGORIZED)
        buckets.setdefault(category, []).append(line)
    return [
        CategoryBucket(
            category=category,
            lines=sorted(buckets[category], key=lambda line: line.name.lower()),
        )
        for category in sorted(buckets, key=str.lower)
    ]
