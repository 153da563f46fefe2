"""Dashboard: the inventory list every logged-in user can see."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from starlette.responses import Response

from inventory.api.auth import require_auth
from inventory.core.database import get_db
from inventory.core.templates import render
from inventory.schemas.auth import CurrentUser
from inventory.services.stock import list_products

router = APIRouter()


@router.get("/", response_model=None)
def dashboard(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(require_auth)],
) -> Response:
    return render(
        request,
        "index.html",
        {"current_user": current_user, "products": list_products(db)},
    )
