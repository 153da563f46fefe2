"""FastAPI application entrypoint. No business logic; only wiring, error mapping and startup checks."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles

from inventory.api import router
from inventory.api.auth import AccessDenied, LoginRequired
from inventory.core.config import settings
from inventory.core.database import InventoryStoreError, check_engine_connected, engine
from inventory.core.templates import STATIC_DIR

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Refuse to start when the database cannot be reached."""
    if not check_engine_connected(engine):
        logger.critical("Error connecting to the database; refusing to start")
        raise RuntimeError("Database is unreachable at startup.")
    logger.info(
        "Connected to database; session backend=%s, environment=%s",
        settings.SESSION_BACKEND,
        settings.APP_ENV,
    )
    yield


app = FastAPI(
    title="CSH Inventory",
    version="0.1.0",
    docs_url="/docs" if settings.APP_ENV == "dev" else None,
    redoc_url=None,
    lifespan=lifespan,
)


@app.exception_handler(LoginRequired)
async def login_required_handler(request: Request, exc: LoginRequired) -> RedirectResponse:
    logger.info("Redirecting %s %s to /login: %s", request.method, request.url.path, exc.reason)
    response = RedirectResponse("/login", status_code=status.HTTP_303_SEE_OTHER)
    if exc.clear_cookie:
        response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return response


@app.exception_handler(AccessDenied)
async def access_denied_handler(_request: Request, exc: AccessDenied) -> PlainTextResponse:
    return PlainTextResponse(exc.message, status_code=status.HTTP_403_FORBIDDEN)


@app.exception_handler(InventoryStoreError)
async def store_error_handler(request: Request, exc: InventoryStoreError) -> PlainTextResponse:
    # Details stay in the log; the client only learns that the database failed.
    logger.error(
        "Database error on %s %s: %s",
        request.method,
        request.url.path,
        exc.message,
        exc_info=exc.cause or exc,
    )
    return PlainTextResponse("Database Error.", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
app.include_router(router)
