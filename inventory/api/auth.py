"""Session login/logout routes and the authorization gate (require_auth, require_roles)."""

import logging
from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session
from starlette.responses import Response

from inventory.core.config import settings
from inventory.core.database import InventoryStoreError, get_db
from inventory.core.security import (
    PASSWORD_MAX_LEN,
    USERNAME_MAX_LEN,
    new_session_token,
    token_hint,
)
from inventory.core.session_store import SessionStore, get_session_store
from inventory.core.templates import render
from inventory.schemas.auth import CurrentUser, SessionData
from inventory.services.auth import authenticate, load_current_user

logger = logging.getLogger(__name__)

router = APIRouter()


class LoginRequired(Exception):
    """No usable session: the client is sent to /login."""

    def __init__(self, reason: str, clear_cookie: bool = False) -> None:
        self.reason = reason
        self.clear_cookie = clear_cookie
        super().__init__(reason)


class AccessDenied(Exception):
    """Authenticated, but the user's role may not perform the action."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


def _session_token(request: Request) -> str | None:
    return request.cookies.get(settings.SESSION_COOKIE_NAME) or None


def require_auth(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    store: Annotated[SessionStore, Depends(get_session_store)],
) -> CurrentUser:
    """
    Dependency: resolve the session cookie to the current user.

    The user and role are re-read from the database on every request; a session
    whose user no longer exists is dropped. Raises LoginRequired when there is
    no valid session and InventoryStoreError when the lookup fails.
    """
    token = _session_token(request)
    if token is None:
        raise LoginRequired("No active session.")

    session_data = store.get(token)
    if session_data is None:
        raise LoginRequired("Unknown session token.", clear_cookie=True)

    user = load_current_user(db, session_data.user_id)
    if user is None:
        store.delete(token)
        logger.info(
            "Session %s references missing user_id=%s; session cleared",
            token_hint(token),
            session_data.user_id,
        )
        raise LoginRequired("Session user no longer exists.", clear_cookie=True)

    if not store.refresh(token, session_data.refreshed(user)):
        logger.info("Session %s ended while the request was in flight", token_hint(token))
        raise LoginRequired("Session ended.", clear_cookie=True)
    logger.debug("Session verified for user %s (role %s)", user.username, user.role_name)
    return user


def _describe_roles(role_names: tuple[str, ...]) -> str:
    plural = [f"{name}s" for name in role_names]
    if len(plural) == 1:
        return plural[0]
    return f"{', '.join(plural[:-1])} and {plural[-1]}"


def require_roles(*role_names: str, action: str) -> Callable[..., CurrentUser]:
    """
    Build a dependency that admits only users whose role is one of role_names.

    Layered on require_auth, so unauthenticated requests still redirect to login.
    action completes the denial message ("... can <action>.").
    """
    allowed = frozenset(role_names)
    denial = f"Access Denied: Only {_describe_roles(role_names)} can {action}."

    def guard(
        request: Request,
        current_user: Annotated[CurrentUser, Depends(require_auth)],
    ) -> CurrentUser:
        if current_user.role_name not in allowed:
            logger.warning(
                "Access denied to %s %s for user %s (role %s)",
                request.method,
                request.url.path,
                current_user.username,
                current_user.role_name,
            )
            raise AccessDenied(denial)
        return current_user

    return guard


@router.get("/login", response_model=None)
def login_form(
    request: Request,
    store: Annotated[SessionStore, Depends(get_session_store)],
) -> Response:
    """Show the login form, or go straight to the dashboard when already logged in."""
    token = _session_token(request)
    if token is not None and store.get(token) is not None:
        return RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
    return render(request, "login.html")


@router.post("/login", response_model=None)
def login(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    store: Annotated[SessionStore, Depends(get_session_store)],
    username: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
) -> Response:
    """
    Authenticate with username and password.

    On success a new opaque session token is stored server-side and sent back
    as an HttpOnly cookie. On failure the form is shown again and no session
    is created.
    """
    username = username.strip()
    if not username or not password:
        return render(
            request,
            "login.html",
            {"error": "Username and password are required.", "username": username},
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    invalid = {"error": "Invalid username or password.", "username": username}
    if len(username) > USERNAME_MAX_LEN or len(password) > PASSWORD_MAX_LEN:
        return render(request, "login.html", invalid, status_code=status.HTTP_401_UNAUTHORIZED)

    try:
        user = authenticate(db, username, password)
    except InventoryStoreError as e:
        logger.error("Error during login query: %s", e.cause or e)
        return render(
            request,
            "login.html",
            {"error": "Database error occurred.", "username": username},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    if user is None:
        return render(request, "login.html", invalid, status_code=status.HTTP_401_UNAUTHORIZED)

    token = new_session_token()
    store.save(token, SessionData.for_user(user))
    logger.info(
        "User %s logged in (role %s); session %s created",
        user.username,
        user.role_name,
        token_hint(token),
    )

    response = RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        token,
        max_age=settings.SESSION_MAX_AGE_SECONDS,
        httponly=True,
        samesite="lax",
        secure=settings.SESSION_COOKIE_SECURE,
    )
    return response


@router.get("/logout", response_model=None)
def logout(
    request: Request,
    store: Annotated[SessionStore, Depends(get_session_store)],
) -> Response:
    """Drop the server-side session (if any), clear the cookie and go to the login page."""
    response = RedirectResponse("/login", status_code=status.HTTP_303_SEE_OTHER)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    token = _session_token(request)
    if token is None:
        logger.info("Logout attempted, but no session cookie was sent")
        return response
    try:
        if store.delete(token):
            logger.info("Session %s cleared on logout", token_hint(token))
        else:
            logger.info("Logout attempted, but no active session found in store")
    except InventoryStoreError as e:
        # The cookie is still cleared; the row is left for the session purge job.
        logger.error("Could not remove session %s on logout: %s", token_hint(token), e.cause or e)
    return response
