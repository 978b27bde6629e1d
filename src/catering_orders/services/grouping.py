"""Inference of multi-dish checkouts from the flat order list.

The API accepts one dish per order, so a checkout with several dishes shows
up as several orders for the same customer created a few seconds apart.
Orders are grouped by customer and chained while consecutive ``created_at``
values are at most ``window_ms`` apart, which is the transitive closure of
the "within the window" relation. The earliest order of a group is its
primary order.
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from catering_orders.adapters.catering_api_client import CateringApiClient
from catering_orders.adapters.payloads import parse_order_summary
from catering_orders.domain.orders import OrderGroup, OrderSummary
from catering_orders.domain.sessions import Session
from catering_orders.services.cache import Cache

DEFAULT_WINDOW_MS = 10_000

_logger = logging.getLogger(__name__)


def detect_order_groups(
    orders: list[OrderSummary], window_ms: int = DEFAULT_WINDOW_MS
) -> list[OrderGroup]:
    """Cluster orders by customer and creation-time proximity."""
    ordered = sorted(orders, key=lambda order: (order.created_at, order.id))
    clusters: list[list[OrderSummary]] = []
    open_clusters: dict[int, list[OrderSummary]] = {}
    for order in ordered:
        if order.customer_id is None:
            clusters.append([order])
            continue
        current = open_clusters.get(order.customer_id)
        if current is not None and _gap_ms(current[-1], order) <= window_ms:
            current.append(order)
            continue
        cluster = [order]
        clusters.append(cluster)
        open_clusters[order.customer_id] = cluster
    return [
        OrderGroup(
            primary_order_id=cluster[0].id,
            member_order_ids=[order.id for order in cluster],
        )
        for cluster in clusters
    ]


def _gap_ms(earlier: OrderSummary, later: OrderSummary) -> float:
    return (later.created_at - earlier.created_at).total_seconds() * 1000


def group_cache_key(primary_order_id: int) -> str:
    return f"order_group_{primary_order_id}"


def _member_cache_key(order_id: int) -> str:
    return f"order_group_member_{order_id}"


@dataclass
class OrderGroupService:
    """Detects order groups and remembers them as local hints."""

    client: CateringApiClient
    cache: Cache
    window_ms: int = DEFAULT_WINDOW_MS
    ttl_seconds: int = 7 * 86400

    async def list_grouped(
        self, session: Session
    ) -> tuple[list[OrderSummary], list[OrderGroup]]:
        """Fetch orders, detect groups and cache the multi-order ones."""
        rows = await self.client.list_orders(session.token)
        orders = [parse_order_summary(row) for row in rows]
        groups = detect_order_groups(orders, self.window_ms)
        for group in groups:
            if group.size > 1:
                self.remember(group)
        return orders, groups

    async def resolve(self, session: Session, order_id: int) -> OrderGroup:
        """Return the group containing an order, re-detecting on cache miss."""
        cached = self.cached_group(order_id)
        if cached is not None:
            return cached
        _logger.info("No cached group for order %s, detecting", order_id)
        _, groups = await self.list_grouped(session)
        for group in groups:
            if order_id in group:
                return group
        return OrderGroup(primary_order_id=order_id, member_order_ids=[order_id])

    def remember(self, group: OrderGroup) -> None:
        """Store a group under its primary id and index its members."""
        self.cache.set(
            group_cache_key(group.primary_order_id),
            {
                "orderIds": list(group.member_order_ids),
                "timestamp": datetime.now(tz=UTC).isoformat(),
            },
            self.ttl_seconds,
        )
        for member_id in group.member_order_ids:
            self.cache.set(
                _member_cache_key(member_id), group.primary_order_id, self.ttl_seconds
            )

    def cached_group(self, order_id: int) -> OrderGroup | None:
        """Return a cached group that still names the order, if any."""
        primary = self.cache.get(_member_cache_key(order_id))
        if not isinstance(primary, int):
            primary = order_id
        entry = self.cache.get(group_cache_key(primary))
        if not isinstance(entry, dict):
            return None
        order_ids = entry.get("orderIds")
        if not isinstance(order_ids, list) or order_id not in order_ids:
            return None
        return OrderGroup(primary_order_id=primary, member_order_ids=list(order_ids))
