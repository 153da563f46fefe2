"""Draw-stock form and submission (Managers and Administrators only)."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session
from starlette.responses import Response

from inventory.api.auth import require_roles
from inventory.core.database import get_db
from inventory.core.templates import render
from inventory.models.user import ROLE_ADMINISTRATOR, ROLE_MANAGER
from inventory.schemas.auth import CurrentUser
from inventory.schemas.inventory import ProductRow
from inventory.services.stock import list_products, withdraw_stock

logger = logging.getLogger(__name__)

router = APIRouter()

require_stock_editor = require_roles(ROLE_MANAGER, ROLE_ADMINISTRATOR, action="draw stock")

INVALID_WITHDRAWAL = "Product and a valid quantity (> 0) are required."


def _positive_int(value: str) -> int | None:
    try:
        parsed = int(value.strip())
    except ValueError:
        return None
    return parsed if parsed > 0 else None


def insufficient_stock_message(
    products: list[ProductRow], product_id: int, requested: int
) -> str:
    """Shortfall message naming the product and its last-known available quantity."""
    product = next((p for p in products if p.id == product_id), None)
    name = product.name if product is not None else "selected product"
    available = product.stock_quantity if product is not None else "N/A"
    return (
        f"Error: Insufficient stock for {name}. "
        f"Requested: {requested}, Available: {available}."
    )


def _form_page(
    request: Request,
    current_user: CurrentUser,
    products: list[ProductRow],
    error: str | None = None,
    status_code: int = status.HTTP_200_OK,
) -> Response:
    return render(
        request,
        "draw_stock.html",
        {"current_user": current_user, "products": products, "error": error},
        status_code=status_code,
    )


@router.get("/draw-stock", response_model=None)
def draw_stock_form(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(require_stock_editor)],
) -> Response:
    return _form_page(request, current_user, list_products(db))


@router.post("/draw-stock", response_model=None)
def draw_stock(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(require_stock_editor)],
    product_id: Annotated[str, Form()] = "",
    quantity: Annotated[str, Form()] = "",
) -> Response:
    """
    Withdraw stock from one product.

    Input is validated before any write. The withdrawal itself is a single
    guarded update; when it changes no row the form is shown again with the
    requested and available quantities.
    """
    parsed_product_id = _positive_int(product_id)
    parsed_quantity = _positive_int(quantity)
    if parsed_product_id is None or parsed_quantity is None:
        return _form_page(
            request,
            current_user,
            list_products(db),
            error=INVALID_WITHDRAWAL,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    if not withdraw_stock(db, parsed_product_id, parsed_quantity):
        products = list_products(db)
        return _form_page(
            request,
            current_user,
            products,
            error=insufficient_stock_message(products, parsed_product_id, parsed_quantity),
            status_code=status.HTTP_409_CONFLICT,
        )

    logger.info(
        "Stock withdrawn by user %s: product_id=%s quantity=%s",
        current_user.username,
        parsed_product_id,
        parsed_quantity,
    )
    return RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
