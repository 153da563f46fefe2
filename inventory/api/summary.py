"""Inventory summary page: totals, stock per category and low-stock items."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from starlette.responses import Response

from inventory.api.auth import require_auth
from inventory.core.config import settings
from inventory.core.database import get_db
from inventory.core.templates import render
from inventory.schemas.auth import CurrentUser
from inventory.services.summary import build_inventory_summary

router = APIRouter()


@router.get("/summary", response_model=None)
def summary(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(require_auth)],
) -> Response:
    return render(
        request,
        "summary.html",
        {
            "current_user": current_user,
            "summary": build_inventory_summary(db, settings.LOW_STOCK_THRESHOLD),
            "low_stock_threshold": settings.LOW_STOCK_THRESHOLD,
        },
    )
