"""Tests for the create_user / create_category CLIs and the startup database check."""

import asyncio
import io
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest.mock import patch

from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from inventory.core.security import verify_password
from inventory.main import app, lifespan
from inventory.models import Category, Role, User
from inventory.scripts import create_category, create_user
from tests.support import make_memory_engine, seed_roles


class ScriptTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = make_memory_engine()
        self.factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def tearDown(self) -> None:
        self.engine.dispose()

    def run_main(self, module, argv: list[str]) -> tuple[int, str, str]:
        out, err = io.StringIO(), io.StringIO()
        with patch.object(module, "SessionLocal", self.factory), redirect_stdout(out), redirect_stderr(err):
            code = module.main(argv)
        return code, out.getvalue(), err.getvalue()


class TestCreateUser(ScriptTestCase):
    def test_creates_user_with_hashed_password(self) -> None:
        db = self.factory()
        seed_roles(db)
        db.close()
        with patch("inventory.scripts.create_user.hash_password", side_effect=lambda p: f"hashed:{p}"):
            code, out, _ = self.run_main(create_user, ["boss", "long-enough-pw", "Administrator"])
        self.assertEqual(code, 0)
        self.assertIn("Created user 'boss'", out)
        db = self.factory()
        try:
            user = db.scalars(select(User).where(User.username == "boss")).one()
            role = db.get(Role, user.role_id)
            self.assertEqual(role.name, "Administrator")
            self.assertEqual(user.password_hash, "hashed:long-enough-pw")
        finally:
            db.close()

    def test_password_is_really_hashed(self) -> None:
        code, _, _ = self.run_main(create_user, ["clerk", "long-enough-pw"])
        self.assertEqual(code, 0)
        db = self.factory()
        try:
            user = db.scalars(select(User).where(User.username == "clerk")).one()
            self.assertNotEqual(user.password_hash, "long-enough-pw")
            self.assertTrue(verify_password("long-enough-pw", user.password_hash))
            # Role row is created on demand when the database was not seeded.
            self.assertEqual(db.get(Role, user.role_id).name, "Standard User")
        finally:
            db.close()

    def test_duplicate_username_rejected(self) -> None:
        with patch("inventory.scripts.create_user.hash_password", return_value="x"):
            self.assertEqual(self.run_main(create_user, ["dup", "long-enough-pw"])[0], 0)
            code, _, err = self.run_main(create_user, ["dup", "long-enough-pw"])
        self.assertEqual(code, 1)
        self.assertIn("already exists", err)

    def test_short_password_rejected(self) -> None:
        code, _, err = self.run_main(create_user, ["someone", "short"])
        self.assertEqual(code, 1)
        self.assertIn("Password must be", err)


class TestCreateCategory(ScriptTestCase):
    def test_creates_category(self) -> None:
        code, out, _ = self.run_main(create_category, ["Beverages"])
        self.assertEqual(code, 0)
        self.assertIn("Created category 'Beverages'", out)
        db = self.factory()
        try:
            self.assertEqual(db.scalars(select(Category.name)).all(), ["Beverages"])
        finally:
            db.close()

    def test_duplicate_rejected(self) -> None:
        self.run_main(create_category, ["Beverages"])
        code, _, err = self.run_main(create_category, ["Beverages"])
        self.assertEqual(code, 1)
        self.assertIn("already exists", err)


class TestStartupCheck(unittest.TestCase):
    """The app refuses to start when the database is unreachable."""

    def _enter(self) -> None:
        async def run() -> None:
            async with lifespan(app):
                pass

        asyncio.run(run())

    def test_unreachable_database_is_fatal(self) -> None:
        with patch("inventory.main.check_engine_connected", return_value=False):
            with self.assertRaises(RuntimeError):
                self._enter()

    def test_reachable_database_starts(self) -> None:
        with patch("inventory.main.check_engine_connected", return_value=True):
            self._enter()


if __name__ == "__main__":
    unittest.main()
