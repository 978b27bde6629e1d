"""Slip assembly for single orders and inferred order groups."""

import asyncio
import logging
from dataclasses import dataclass

from catering_orders.adapters.catering_api_client import CateringApiClient
from catering_orders.adapters.payloads import parse_timestamp
from catering_orders.domain.catalog import ReferenceData
from catering_orders.domain.orders import OrderGroup
from catering_orders.domain.sessions import Session
from catering_orders.domain.slips import (
    IngredientSlip,
    OrderSlip,
    SlipCustomer,
    SlipDish,
)
from catering_orders.services.aggregation import (
    aggregate_ingredients,
    bucket_by_category,
    category_lookup,
)
from catering_orders.services.catalog import CatalogService
from catering_orders.services.grouping import OrderGroupService

DISH_UNIT_ALIASES = {"kg": "dish"}

_logger = logging.getLogger(__name__)


def display_dish_unit(unit: str | None) -> str:
    """Relabel dish units reserved for ingredients ("kg" becomes "dish")."""
    cleaned = (unit or "").strip()
    return DISH_UNIT_ALIASES.get(cleaned.lower(), cleaned)


@dataclass(frozen=True)
class _MemberSlips:
    order_id: int
    ingredient_slip: dict[str, object]
    order_slip: dict[str, object]


@dataclass
class SlipService:
    """Builds ingredient and order slips, merging grouped orders."""

    client: CateringApiClient
    group_service: OrderGroupService
    catalog_service: CatalogService

    async def ingredient_slip(self, session: Session, order_id: int) -> IngredientSlip:
        """Return combined ingredient requirements for an order's group."""
        (group, members), reference = await asyncio.gather(
            self._fetch_group(session, order_id),
            self.catalog_service.load(session),
        )
        return _build_ingredient_slip(group, members, reference)

    async def order_slip(self, session: Session, order_id: int) -> OrderSlip:
        """Return customer details and every dish of an order's group."""
        group, members = await self._fetch_group(session, order_id)
        return _build_order_slip(group, members)

    async def slips(
        self, session: Session, order_id: int
    ) -> tuple[IngredientSlip, OrderSlip]:
        """Return both slips, fetching each member order once."""
        (group, members), reference = await asyncio.gather(
            self._fetch_group(session, order_id),
            self.catalog_service.load(session),
        )
        return (
            _build_ingredient_slip(group, members, reference),
            _build_order_slip(group, members),
        )

    async def _fetch_group(
        self, session: Session, order_id: int
    ) -> tuple[OrderGroup, list[_MemberSlips]]:
        group = await self.group_service.resolve(session, order_id)
        payloads = await asyncio.gather(
            *(
                self.client.get_order_slips(session.token, member_id)
                for member_id in group.member_order_ids
            )
        )
        members = [
            _MemberSlips(
                order_id=member_id,
                ingredient_slip=payload.get("ingredientSlip") or {},
                order_slip=payload.get("orderSlip") or {},
            )
            for member_id, payload in zip(
                group.member_order_ids, payloads, strict=True
            )
        ]
        return group, members


def _build_ingredient_slip(
    group: OrderGroup, members: list[_MemberSlips], reference: ReferenceData
) -> IngredientSlip:
    aggregated = aggregate_ingredients(
        member.ingredient_slip.get("items") or [] for member in members
    )
    if aggregated.skipped_lines:
        _logger.warning(
            "Ingredient slip for order %s skipped %s line(s)",
            group.primary_order_id,
            aggregated.skipped_lines,
        )
    return IngredientSlip(
        primary_order_id=group.primary_order_id,
        order_ids=list(group.member_order_ids),
        customer=_customer(members[0]),
        dishes=[_dish(member) for member in members],
        buckets=bucket_by_category(aggregated.lines, category_lookup(reference)),
        skipped_lines=aggregated.skipped_lines,
    )


def _build_order_slip(group: OrderGroup, members: list[_MemberSlips]) -> OrderSlip:
    first = members[0].order_slip
    return OrderSlip(
        primary_order_id=group.primary_order_id,
        order_ids=list(group.member_order_ids),
        customer=_customer(members[0]),
        dishes=[_dish(member) for member in members],
        delivery_address=first.get("delivery_address"),
        delivery_date=first.get("delivery_date"),
        delivery_time=first.get("delivery_time"),
    )


def _customer(member: _MemberSlips) -> SlipCustomer:
    order_slip = member.order_slip
    ingredient_slip = member.ingredient_slip
    return SlipCustomer(
        name=order_slip.get("customer_name") or ingredient_slip.get("customer_name"),
        phone=order_slip.get("customer_phone")
        or ingredient_slip.get("customer_phone"),
        email=order_slip.get("customer_email"),
        address=order_slip.get("customer_address"),
    )


def _dish(member: _MemberSlips) -> SlipDish:
    order_slip = member.order_slip
    ingredient_slip = member.ingredient_slip
    quantity = order_slip.get("quantity", ingredient_slip.get("requested_quantity"))
    unit = order_slip.get("unit") or ingredient_slip.get("requested_unit")
    created_raw = order_slip.get("created_at")
    return SlipDish(
        order_id=member.order_id,
        dish_name=str(
            order_slip.get("dish_name") or ingredient_slip.get("dish_name") or ""
        ),
        quantity=float(quantity or 0),
        unit=display_dish_unit(unit),
        created_at=parse_timestamp(created_raw) if created_raw else None,
    )
