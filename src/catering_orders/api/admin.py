"""Admin endpoints for reference data maintenance and reports."""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Query, Request

from catering_orders.api.models import (
    CategoryCreate,
    CustomerCreate,
    DishCreate,
    IngredientCreate,
)
from catering_orders.api.security import session_with_role
from catering_orders.domain.catalog import DishIngredient, ReferenceData
from catering_orders.domain.sessions import ADMIN_ROLE, Session
from catering_orders.services.catalog import CustomerInput, DishInput

if TYPE_CHECKING:
    from catering_orders.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])

require_admin = session_with_role(ADMIN_ROLE)


def _container(request: Request) -> AppContainer:
    return request.app.state.container


@router.post("/categories")
async def create_category(
    body: CategoryCreate, request: Request, session: Session = Depends(require_admin)
) -> dict[str, object]:
    """Create a category and return the reloaded reference data."""
    reference = await _container(request).catalog_service.create_category(
        session, body.name
    )
    return serialize_reference(reference)


@router.delete("/categories/{category_id}")
async def delete_category(
    category_id: int, request: Request, session: Session = Depends(require_admin)
) -> dict[str, object]:
    """Delete an empty category."""
    reference = await _container(request).catalog_service.delete_category(
        session, category_id
    )
    return serialize_reference(reference)


@router.post("/ingredients")
async def create_ingredient(
    body: IngredientCreate, request: Request, session: Session = Depends(require_admin)
) -> dict[str, object]:
    reference = await _container(request).catalog_service.create_ingredient(
        session, body.name, body.category_id
    )
    return serialize_reference(reference)


@router.delete("/ingredients/{ingredient_id}")
async def delete_ingredient(
    ingredient_id: int, request: Request, session: Session = Depends(require_admin)
) -> dict[str, object]:
    reference = await _container(request).catalog_service.delete_ingredient(
        session, ingredient_id
    )
    return serialize_reference(reference)


@router.post("/customers")
async def create_customer(
    body: CustomerCreate, request: Request, session: Session = Depends(require_admin)
) -> dict[str, object]:
    reference = await _container(request).catalog_service.create_customer(
        session,
        CustomerInput(
            name=body.name, phone=body.phone, email=body.email, address=body.address
        ),
    )
    return serialize_reference(reference)


@router.delete("/customers/{customer_id}")
async def delete_customer(
    customer_id: int, request: Request, session: Session = Depends(require_admin)
) -> dict[str, object]:
    reference = await _container(request).catalog_service.delete_customer(
        session, customer_id
    )
    return serialize_reference(reference)


@router.post("/dishes")
async def create_dish(
    body: DishCreate, request: Request, session: Session = Depends(require_admin)
) -> dict[str, object]:
    """Create a dish with its per-base ingredient amounts."""
    dish = DishInput(
        name=body.name,
        base_quantity=body.base_quantity,
        base_unit=body.base_unit,
        price_per_base=body.price_per_base,
        cost_per_base=body.cost_per_base,
        ingredients=[
            DishIngredient(
                ingredient_id=item.ingredient_id,
                ingredient_name=item.ingredient_name,
                amount_per_base=item.amount_per_base,
                unit=item.unit,
            )
            for item in body.ingredients
        ],
    )
    reference = await _container(request).catalog_service.create_dish(session, dish)
    return serialize_reference(reference)


@router.delete("/dishes/{dish_id}")
async def delete_dish(
    dish_id: int, request: Request, session: Session = Depends(require_admin)
) -> dict[str, object]:
    reference = await _container(request).catalog_service.delete_dish(
        session, dish_id
    )
    return serialize_reference(reference)


@router.get("/reports")
async def reports(
    request: Request,
    range_name: str = Query(default="daily", alias="range"),
    session: Session = Depends(require_admin),
) -> dict[str, object]:
    """Return report rows and totals for a daily, monthly or yearly range."""
    report = await _container(request).report_service.fetch(session, range_name)
    return asdict(report)


def serialize_reference(reference: ReferenceData) -> dict[str, object]:
    """Serialize reference collections, flagging dishes that can be ordered."""
    data = asdict(reference)
    for serialized, dish in zip(data["dishes"], reference.dishes, strict=True):
        serialized["is_orderable"] = dish.is_orderable
    return data
