"""Add-product form and submission (Managers and Administrators only)."""

import logging
from decimal import Decimal, InvalidOperation
from typing import Annotated

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session
from starlette.responses import Response

from inventory.api.auth import require_roles
from inventory.core.database import get_db
from inventory.core.templates import render
from inventory.models.product import MAX_STOCK_QUANTITY
from inventory.models.user import ROLE_ADMINISTRATOR, ROLE_MANAGER
from inventory.schemas.auth import CurrentUser
from inventory.schemas.inventory import NewProduct
from inventory.services.stock import add_product, category_exists, list_categories

logger = logging.getLogger(__name__)

router = APIRouter()

require_product_editor = require_roles(ROLE_MANAGER, ROLE_ADMINISTRATOR, action="add products")

MISSING_FIELDS = "All fields are required."
INVALID_NUMBERS = "Unit price and stock quantity must be valid numbers >= 0."
INVALID_CATEGORY = "Please select a valid category."
PRODUCT_NAME_MAX_LEN = 255
# Largest value Numeric(10, 2) can hold.
MAX_UNIT_PRICE = Decimal("99999999.99")


class ProductFormError(ValueError):
    """Add-product form input was rejected; message is shown to the user."""


def _parse_new_product(
    name: str, category_id: str, unit_price: str, stock_quantity: str
) -> NewProduct:
    name = name.strip()
    if not all(v.strip() for v in (name, category_id, unit_price, stock_quantity)):
        raise ProductFormError(MISSING_FIELDS)
    if len(name) > PRODUCT_NAME_MAX_LEN:
        raise ProductFormError(f"Product name must be at most {PRODUCT_NAME_MAX_LEN} characters.")
    try:
        price = Decimal(unit_price.strip())
        quantity = int(stock_quantity.strip())
    except (InvalidOperation, ValueError) as e:
        raise ProductFormError(INVALID_NUMBERS) from e
    if not price.is_finite() or price < 0 or quantity < 0:
        raise ProductFormError(INVALID_NUMBERS)
    if price > MAX_UNIT_PRICE or quantity > MAX_STOCK_QUANTITY:
        raise ProductFormError(INVALID_NUMBERS)
    try:
        category = int(category_id.strip())
    except ValueError as e:
        raise ProductFormError(INVALID_CATEGORY) from e
    return NewProduct(
        name=name,
        category_id=category,
        unit_price=price.quantize(Decimal("0.01")),
        stock_quantity=quantity,
    )


def _form_page(
    request: Request,
    db: Session,
    current_user: CurrentUser,
    error: str | None = None,
    status_code: int = status.HTTP_200_OK,
) -> Response:
    return render(
        request,
        "add_product.html",
        {
            "current_user": current_user,
            "categories": list_categories(db),
            "error": error,
        },
        status_code=status_code,
    )


@router.get("/add-product", response_model=None)
def add_product_form(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(require_product_editor)],
) -> Response:
    return _form_page(request, db, current_user)


@router.post("/add-product", response_model=None)
def submit_product(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(require_product_editor)],
    name: Annotated[str, Form()] = "",
    category_id: Annotated[str, Form()] = "",
    unit_price: Annotated[str, Form()] = "",
    stock_quantity: Annotated[str, Form()] = "",
) -> Response:
    """Validate the form and insert the product; the form is shown again with a message on bad input."""
    try:
        product = _parse_new_product(name, category_id, unit_price, stock_quantity)
        if not category_exists(db, product.category_id):
            raise ProductFormError(INVALID_CATEGORY)
    except ProductFormError as e:
        return _form_page(
            request,
            db,
            current_user,
            error=str(e),
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    product_id = add_product(db, product)
    logger.info("Product %s (%r) added by user %s", product_id, product.name, current_user.username)
    return RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
