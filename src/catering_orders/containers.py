"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from catering_orders.adapters.catering_api_client import (
    CateringApiClient,
    HttpxCateringApiClient,
)
from catering_orders.config import Settings
from catering_orders.services.cache import InMemoryCache
from catering_orders.services.catalog import CatalogService
from catering_orders.services.grouping import OrderGroupService
from catering_orders.services.orders import OrderService
from catering_orders.services.reports import ReportService
from catering_orders.services.sessions import SessionService
from catering_orders.services.slips import SlipService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    api_client: CateringApiClient
    session_service: SessionService
    catalog_service: CatalogService
    group_service: OrderGroupService
    order_service: OrderService
    slip_service: SlipService
    report_service: ReportService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    api_client = HttpxCateringApiClient.create(
        base_url=resolved_settings.catering_api_base_url,
        timeout=resolved_settings.catering_api_timeout_seconds,
    )
    session_service = SessionService(
        client=api_client,
        store=InMemoryCache(),
        ttl_seconds=resolved_settings.session_ttl_seconds,
    )
    catalog_service = CatalogService(api_client)
    group_service = OrderGroupService(
        client=api_client,
        cache=InMemoryCache(),
        window_ms=resolved_settings.order_group_window_ms,
        ttl_seconds=resolved_settings.order_group_cache_ttl_seconds,
    )
    order_service = OrderService(client=api_client, group_service=group_service)
    slip_service = SlipService(
        client=api_client,
        group_service=group_service,
        catalog_service=catalog_service,
    )
    report_service = ReportService(api_client)

    async def close_resources() -> None:
        await api_client.close()

    return AppContainer(
        settings=resolved_settings,
        api_client=api_client,
        session_service=session_service,
        catalog_service=catalog_service,
        group_service=group_service,
        order_service=order_service,
        slip_service=slip_service,
        report_service=report_service,
        close_resources=close_resources,
    )
