"""Order composition and submission."""

import logging
import math
from dataclasses import dataclass

from catering_orders.adapters.catering_api_client import (
    CateringApiClient,
    CateringApiError,
)
from catering_orders.adapters.payloads import order_request_payload, parse_dish
from catering_orders.domain.catalog import Dish
from catering_orders.domain.errors import InvalidInputError
from catering_orders.domain.orders import (
    OrderDraft,
    OrderGroup,
    OrderRequest,
    ScaledIngredient,
)
from catering_orders.domain.sessions import Session
from catering_orders.services.grouping import OrderGroupService
from catering_orders.services.scaling import (
    AMOUNT_PRECISION,
    scale_factor,
    scale_ingredients,
)

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderPreview:
    """Scaled ingredient list shown before an order is placed."""

    dish: Dish
    requested_quantity: float
    scale_factor: float | None
    lines: list[ScaledIngredient]


@dataclass(frozen=True)
class PlacedOrders:
    """Ids created by one checkout and the group they form."""

    order_ids: list[int]
    group: OrderGroup


@dataclass
class OrderService:
    """Composes scaled orders and submits them to the API."""

    client: CateringApiClient
    group_service: OrderGroupService

    async def preview(
        self,
        session: Session,
        dish_id: int,
        requested_quantity: float,
        overrides: dict[int, str | float] | None = None,
    ) -> OrderPreview:
        """Return the scaled ingredient list for a dish and quantity."""
        dish = await self._find_dish(session, dish_id)
        if dish is None:
            raise InvalidInputError("Please select a dish")
        factor = scale_factor(dish.base_quantity, requested_quantity)
        return OrderPreview(
            dish=dish,
            requested_quantity=requested_quantity,
            scale_factor=(
                round(factor, AMOUNT_PRECISION) if factor is not None else None
            ),
            lines=scale_ingredients(dish, requested_quantity, overrides),
        )

    async def place_order(self, session: Session, draft: OrderDraft) -> int:
        """Validate, scale and submit one order; return the new order id."""
        placed = await self.place_orders(session, [draft])
        return placed.order_ids[0]

    async def place_orders(
        self, session: Session, drafts: list[OrderDraft]
    ) -> PlacedOrders:
        """Submit several dishes for one customer as a single checkout.

        Every draft is validated before the first call. Orders are created
        one by one in the given order, and the resulting ids are remembered
        as one order group keyed by the first id.
        """
        if not drafts:
            raise InvalidInputError("Add at least one dish to the order")
        customer_ids = {draft.customer_id for draft in drafts}
        if len(customer_ids) > 1:
            raise InvalidInputError("All dishes in one order need the same customer")
        dishes = await self._load_dishes(session)
        requests = [
            compose_order(dishes.get(draft.dish_id), draft) for draft in drafts
        ]

        order_ids: list[int] = []
        try:
            for request in requests:
                created = await self.client.create_order(
                    session.token, order_request_payload(request)
                )
                order_ids.append(int(created["id"]))
        except CateringApiError:
            if order_ids:
                _logger.warning(
                    "Checkout stopped after %s of %s orders: %s",
                    len(order_ids),
                    len(requests),
                    order_ids,
                )
                self._remember(order_ids)
            raise
        group = self._remember(order_ids)
        _logger.info("Placed order(s) %s", order_ids)
        return PlacedOrders(order_ids=order_ids, group=group)

    def _remember(self, order_ids: list[int]) -> OrderGroup:
        group = OrderGroup(primary_order_id=order_ids[0], member_order_ids=order_ids)
        if group.size > 1:
            self.group_service.remember(group)
        return group

    async def _find_dish(self, session: Session, dish_id: int) -> Dish | None:
        dishes = await self._load_dishes(session)
        return dishes.get(dish_id)

    async def _load_dishes(self, session: Session) -> dict[int, Dish]:
        rows = await self.client.list_dishes(session.token)
        dishes = [parse_dish(row) for row in rows]
        return {dish.id: dish for dish in dishes}


def compose_order(dish: Dish | None, draft: OrderDraft) -> OrderRequest:
    """Validate operator input and build the order-creation request."""
    if dish is None:
        raise InvalidInputError("Please select a dish")
    if draft.customer_id is None:
        raise InvalidInputError("Please select a customer")
    if not math.isfinite(draft.requested_quantity) or draft.requested_quantity <= 0:
        raise InvalidInputError("Please enter a valid quantity")
    if not dish.is_orderable:
        raise InvalidInputError(f"Dish '{dish.name}' has no ingredients")
    return OrderRequest(
        dish_id=dish.id,
        customer_id=draft.customer_id,
        requested_quantity=draft.requested_quantity,
        requested_unit=dish.base_unit,
        overrides=scale_ingredients(dish, draft.requested_quantity, draft.overrides),
        booking_date=draft.booking_date,
        booking_time=draft.booking_time,
        delivery_date=draft.delivery_date,
        delivery_time=draft.delivery_time,
        delivery_address=draft.delivery_address,
    )
