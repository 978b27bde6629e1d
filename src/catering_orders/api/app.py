"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import datetime

from fastapi import Depends, FastAPI, Request, Response, status
from fastapi.responses import HTMLResponse, JSONResponse

from catering_orders.adapters.catering_api_client import CateringApiError
from catering_orders.api.admin import router as admin_router
from catering_orders.api.admin import serialize_reference
from catering_orders.api.models import (
    CheckoutCreate,
    LoginRequest,
    OrderCreate,
    OrderPreviewRequest,
)
from catering_orders.api.security import SESSION_COOKIE, bearer_token, current_session
from catering_orders.api.slip_pages import render_ingredient_slip, render_order_slip
from catering_orders.app_logging import configure_logging
from catering_orders.containers import AppContainer
from catering_orders.domain.errors import AccessDeniedError, InvalidInputError
from catering_orders.domain.orders import OrderDraft, OrderGroup, OrderSummary
from catering_orders.domain.sessions import Session


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.exception_handler(InvalidInputError)
    async def invalid_input(request: Request, exc: InvalidInputError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"error": str(exc)})

    @app.exception_handler(AccessDeniedError)
    async def access_denied(request: Request, exc: AccessDeniedError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN, content={"error": str(exc)}
        )

    @app.exception_handler(CateringApiError)
    async def api_error(request: Request, exc: CateringApiError) -> JSONResponse:
        logger.warning(
            "Catering API call failed for %s: %s", request.url.path, exc.message
        )
        return JSONResponse(
            status_code=exc.status_code or status.HTTP_502_BAD_GATEWAY,
            content={"error": exc.message},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/auth/login")
    async def login(
        body: LoginRequest, request: Request, response: Response
    ) -> dict[str, str]:
        """Sign in against the catering API and start a session."""
        state_container: AppContainer = request.app.state.container
        session = await state_container.session_service.login(
            body.email, body.password
        )
        response.set_cookie(
            SESSION_COOKIE,
            session.token,
            httponly=True,
            samesite="lax",
            max_age=state_container.settings.session_ttl_seconds,
        )
        return {"token": session.token, "role": session.role, "email": session.email}

    @app.post("/auth/logout")
    async def logout(request: Request, response: Response) -> dict[str, str]:
        """End the caller's session."""
        state_container: AppContainer = request.app.state.container
        token = bearer_token(request.headers.get("authorization")) or (
            request.cookies.get(SESSION_COOKIE)
        )
        if token:
            state_container.session_service.logout(token)
        response.delete_cookie(SESSION_COOKIE)
        return {"status": "ok"}

    @app.get("/session")
    async def whoami(session: Session = Depends(current_session)) -> dict[str, str]:
        """Return the role and email of the current session."""
        return {"role": session.role, "email": session.email}

    @app.get("/reference")
    async def reference(
        request: Request, session: Session = Depends(current_session)
    ) -> dict[str, object]:
        """Return categories, ingredients, dishes and customers."""
        state_container: AppContainer = request.app.state.container
        data = await state_container.catalog_service.load(session)
        return serialize_reference(data)

    @app.post("/orders/preview")
    async def preview_order(
        body: OrderPreviewRequest,
        request: Request,
        session: Session = Depends(current_session),
    ) -> dict[str, object]:
        """Return the scaled ingredient list for a dish and quantity."""
        state_container: AppContainer = request.app.state.container
        preview = await state_container.order_service.preview(
            session, body.dish_id, body.requested_quantity, body.overrides
        )
        return {
            "dish_id": preview.dish.id,
            "base_quantity": preview.dish.base_quantity,
            "base_unit": preview.dish.base_unit,
            "requested_quantity": preview.requested_quantity,
            "scale_factor": preview.scale_factor,
            "lines": [asdict(line) for line in preview.lines],
        }

    @app.post("/orders")
    async def place_order(
        body: OrderCreate,
        request: Request,
        session: Session = Depends(current_session),
    ) -> dict[str, object]:
        """Place a single-dish order."""
        state_container: AppContainer = request.app.state.container
        order_id = await state_container.order_service.place_order(
            session,
            OrderDraft(
                dish_id=body.dish_id,
                customer_id=body.customer_id,
                requested_quantity=body.requested_quantity,
                overrides=body.overrides,
                booking_date=body.booking_date,
                booking_time=body.booking_time,
                delivery_date=body.delivery_date,
                delivery_time=body.delivery_time,
                delivery_address=body.delivery_address,
            ),
        )
        return {"id": order_id, "message": f"Order #{order_id} placed"}

    @app.post("/orders/checkout")
    async def checkout(
        body: CheckoutCreate,
        request: Request,
        session: Session = Depends(current_session),
    ) -> dict[str, object]:
        """Place several dishes for one customer as one order group."""
        state_container: AppContainer = request.app.state.container
        drafts = [
            OrderDraft(
                dish_id=line.dish_id,
                customer_id=body.customer_id,
                requested_quantity=line.requested_quantity,
                overrides=line.overrides,
                booking_date=body.booking_date,
                booking_time=body.booking_time,
                delivery_date=body.delivery_date,
                delivery_time=body.delivery_time,
                delivery_address=body.delivery_address,
            )
            for line in body.lines
        ]
        placed = await state_container.order_service.place_orders(session, drafts)
        return {
            "order_ids": placed.order_ids,
            "primary_order_id": placed.group.primary_order_id,
        }

    @app.get("/orders")
    async def list_orders(
        request: Request, session: Session = Depends(current_session)
    ) -> dict[str, object]:
        """Return orders with their inferred groups."""
        state_container: AppContainer = request.app.state.container
        orders, groups = await state_container.group_service.list_grouped(session)
        return {
            "orders": [_serialize_order(order, groups) for order in orders],
            "groups": [_serialize_group(group) for group in groups],
        }

    @app.get("/orders/{order_id}/slips")
    async def order_slips(
        order_id: int, request: Request, session: Session = Depends(current_session)
    ) -> dict[str, object]:
        """Return ingredient and order slip data for an order's group."""
        state_container: AppContainer = request.app.state.container
        ingredient_slip, order_slip = await state_container.slip_service.slips(
            session, order_id
        )
        return {
            "ingredientSlip": asdict(ingredient_slip),
            "orderSlip": asdict(order_slip),
        }

    @app.get("/orders/{order_id}/ingredient-slip", response_class=HTMLResponse)
    async def ingredient_slip_page(
        order_id: int, request: Request, session: Session = Depends(current_session)
    ) -> HTMLResponse:
        """Printable ingredient slip."""
        state_container: AppContainer = request.app.state.container
        slip = await state_container.slip_service.ingredient_slip(session, order_id)
        return HTMLResponse(
            render_ingredient_slip(
                slip,
                print_delay_ms=state_container.settings.print_delay_ms,
                generated_at=datetime.now(),
            )
        )

    @app.get("/orders/{order_id}/order-slip", response_class=HTMLResponse)
    async def order_slip_page(
        order_id: int, request: Request, session: Session = Depends(current_session)
    ) -> HTMLResponse:
        """Printable order slip."""
        state_container: AppContainer = request.app.state.container
        slip = await state_container.slip_service.order_slip(session, order_id)
        return HTMLResponse(
            render_order_slip(
                slip,
                print_delay_ms=state_container.settings.print_delay_ms,
                generated_at=datetime.now(),
            )
        )

    return app


def _serialize_order(
    order: OrderSummary, groups: list[OrderGroup]
) -> dict[str, object]:
    group = next((group for group in groups if order.id in group), None)
    return {
        **asdict(order),
        "created_at": order.created_at.isoformat(),
        "group_id": group.primary_order_id if group else order.id,
    }


def _serialize_group(group: OrderGroup) -> dict[str, object]:
    return {
        "primary_order_id": group.primary_order_id,
        "member_order_ids": group.member_order_ids,
        "size": group.size,
    }
