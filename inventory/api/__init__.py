"""HTML and health routes."""

from fastapi import APIRouter

from inventory.api import auth, dashboard, health, products, stock, summary

router = APIRouter()
router.include_router(auth.router, tags=["auth"])
router.include_router(dashboard.router, tags=["inventory"])
router.include_router(products.router, tags=["inventory"])
router.include_router(stock.router, tags=["inventory"])
router.include_router(summary.router, tags=["inventory"])
router.include_router(health.router, tags=["health"])
