"""Tests for the authorization gate: require_auth (session + user re-check) and require_roles."""

import unittest
from collections.abc import Generator
from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError

from inventory.core.database import get_db
from inventory.core.session_store import InMemorySessionStore, get_session_store
from inventory.main import app
from inventory.models import User
from inventory.schemas.auth import SessionData
from tests.support import AppTestCase

GATED_PAGES = ("/", "/summary", "/add-product", "/draw-stock")


class TestUnauthenticated(AppTestCase):
    """No cookie, or a token the store does not know, always redirects to /login."""

    def test_no_cookie_redirects_to_login(self) -> None:
        for path in GATED_PAGES:
            response = self.client.get(path)
            self.assertEqual(response.status_code, 303, path)
            self.assertEqual(response.headers["location"], "/login")

    def test_unknown_token_redirects_and_clears_cookie(self) -> None:
        self.client.cookies.set("sessionId", "forged-or-expired-token")
        for path in GATED_PAGES:
            response = self.client.get(path)
            self.assertEqual(response.status_code, 303, path)
            self.assertEqual(response.headers["location"], "/login")
            self.assertIn("Max-Age=0", response.headers.get("set-cookie", ""))
            self.client.cookies.set("sessionId", "forged-or-expired-token")

    def test_unknown_token_on_post_redirects(self) -> None:
        self.client.cookies.set("sessionId", "nope")
        response = self.client.post("/draw-stock", data={"product_id": "1", "quantity": "1"})
        self.assertEqual(response.status_code, 303)
        self.assertEqual(response.headers["location"], "/login")


class TestSessionReverification(AppTestCase):
    def test_valid_session_reaches_dashboard(self) -> None:
        self.login("clerk")
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        self.assertIn("clerk", response.text)

    def test_deleted_user_session_is_dropped(self) -> None:
        token = self.login("manager")
        self.db.delete(self.db.get(User, self.manager.id))
        self.db.commit()

        response = self.client.get("/")
        self.assertEqual(response.status_code, 303)
        self.assertEqual(response.headers["location"], "/login")
        self.assertIn("Max-Age=0", response.headers.get("set-cookie", ""))
        self.assertIsNone(self.store.get(token))

    def test_role_change_takes_effect_on_next_request(self) -> None:
        token = self.login("manager")
        self.assertEqual(self.client.get("/add-product").status_code, 200)

        user = self.db.get(User, self.manager.id)
        user.role_id = self.roles["Standard User"].id
        self.db.commit()

        self.assertEqual(self.client.get("/add-product").status_code, 403)
        self.assertEqual(self.store.get(token).role_name, "Standard User")

    def test_session_cache_refreshed_with_current_username(self) -> None:
        token = self.login("clerk")
        self.db.get(User, self.clerk.id).username = "clerk-renamed"
        self.db.commit()
        self.client.get("/summary")
        self.assertEqual(self.store.get(token).username, "clerk-renamed")

    def test_stale_cached_role_is_not_trusted(self) -> None:
        # A session claiming Administrator for a Standard User gets no privileges.
        self.store.save(
            "tampered",
            SessionData(
                user_id=self.clerk.id,
                username="clerk",
                role_id=self.roles["Administrator"].id,
                role_name="Administrator",
            ),
        )
        self.client.cookies.set("sessionId", "tampered")
        self.assertEqual(self.client.get("/add-product").status_code, 403)


class LogoutDuringRequestStore(InMemorySessionStore):
    """Ends the session right after it is read, as a concurrent logout would."""

    def get(self, token: str) -> SessionData | None:
        data = super().get(token)
        self.delete(token)
        return data


class TestSessionEndedMidRequest(AppTestCase):
    def test_refresh_does_not_recreate_logged_out_session(self) -> None:
        token = self.login("clerk")
        racing = LogoutDuringRequestStore()
        racing.save(token, self.store.get(token))
        app.dependency_overrides[get_session_store] = lambda: racing

        response = self.client.get("/")
        self.assertEqual(response.status_code, 303)
        self.assertEqual(response.headers["location"], "/login")
        self.assertIn("Max-Age=0", response.headers.get("set-cookie", ""))
        self.assertIsNone(racing.get(token))
        self.assertEqual(len(racing), 0)


class TestBackingStoreFailure(AppTestCase):
    def test_database_error_gives_generic_500(self) -> None:
        self.store.save(
            "tok",
            SessionData(user_id=self.clerk.id, username="clerk", role_id=3, role_name="Standard User"),
        )
        broken = MagicMock()
        broken.execute.side_effect = OperationalError(
            "SELECT", {}, Exception("password authentication failed for user root")
        )

        def broken_db() -> Generator[MagicMock, None, None]:
            yield broken

        app.dependency_overrides[get_db] = broken_db
        self.client.cookies.set("sessionId", "tok")

        response = self.client.get("/")
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.text, "Database Error.")
        self.assertNotIn("password authentication", response.text)
        # The session itself is left alone; only the lookup failed.
        self.assertIsNotNone(self.store.get("tok"))


class TestRoleGuard(AppTestCase):
    """Standard Users are denied on both the form and the submission path."""

    def test_standard_user_denied_add_product_form(self) -> None:
        self.login("clerk")
        response = self.client.get("/add-product")
        self.assertEqual(response.status_code, 403)
        self.assertEqual(
            response.text,
            "Access Denied: Only Managers and Administrators can add products.",
        )

    def test_standard_user_denied_add_product_post_regardless_of_form(self) -> None:
        self.login("clerk")
        forms = [
            {},
            {"name": "Widget", "category_id": "1", "unit_price": "1.00", "stock_quantity": "5"},
            {"name": "", "unit_price": "not-a-number"},
        ]
        for form in forms:
            response = self.client.post("/add-product", data=form)
            self.assertEqual(response.status_code, 403, form)

    def test_standard_user_denied_draw_stock(self) -> None:
        self.login("clerk")
        self.assertEqual(self.client.get("/draw-stock").status_code, 403)
        response = self.client.post("/draw-stock", data={"product_id": "1", "quantity": "1"})
        self.assertEqual(response.status_code, 403)
        self.assertIn("can draw stock", response.text)

    def test_manager_and_administrator_allowed(self) -> None:
        for username in ("manager", "admin"):
            self.client.cookies.clear()
            self.login(username)
            self.assertEqual(self.client.get("/add-product").status_code, 200, username)
            self.assertEqual(self.client.get("/draw-stock").status_code, 200, username)

    def test_standard_user_can_read(self) -> None:
        self.login("clerk")
        self.assertEqual(self.client.get("/").status_code, 200)
        self.assertEqual(self.client.get("/summary").status_code, 200)


if __name__ == "__main__":
    unittest.main()
