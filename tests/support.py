"""Shared helpers for tests: throwaway SQLite databases, seed rows and an app client."""

import unittest
from collections.abc import Generator
from decimal import Decimal

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from inventory.core.database import get_db
from inventory.core.security import hash_password
from inventory.core.session_store import InMemorySessionStore, get_session_store
from inventory.main import app
from inventory.models import Base, Category, Product, Role, User
from inventory.models.user import ROLE_NAMES

# Lowest bcrypt cost; keeps tests fast.
TEST_BCRYPT_ROUNDS = 4
DEFAULT_PASSWORD = "correct-horse-battery"


def make_memory_engine() -> Engine:
    """Single shared in-memory SQLite connection with all tables created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


def make_file_engine(path: str) -> Engine:
    """File-backed SQLite (one connection per thread) with all tables created."""
    engine = create_engine(
        f"sqlite:///{path}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(engine)
    return engine


def seed_roles(db: Session) -> dict[str, Role]:
    roles = {name: Role(name=name) for name in ROLE_NAMES}
    db.add_all(roles.values())
    db.commit()
    return roles


def add_user(
    db: Session, username: str, role: Role, password: str = DEFAULT_PASSWORD
) -> User:
    user = User(
        username=username,
        password_hash=hash_password(password, rounds=TEST_BCRYPT_ROUNDS),
        role_id=role.id,
    )
    db.add(user)
    db.commit()
    return user


def add_category(db: Session, name: str) -> Category:
    category = Category(name=name)
    db.add(category)
    db.commit()
    return category


def add_product(
    db: Session,
    name: str,
    category: Category,
    stock_quantity: int,
    unit_price: str = "1.00",
) -> Product:
    product = Product(
        name=name,
        category_id=category.id,
        unit_price=Decimal(unit_price),
        stock_quantity=stock_quantity,
    )
    db.add(product)
    db.commit()
    return product


def stock_of(db: Session, product_id: int) -> int:
    db.expire_all()
    return db.get(Product, product_id).stock_quantity


class AppTestCase(unittest.TestCase):
    """
    Runs the real app against an in-memory database and an in-memory session store.

    Seeds the three roles plus one user per role (admin, manager, clerk).
    """

    def setUp(self) -> None:
        self.engine = make_memory_engine()
        self.SessionTesting = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self.db = self.SessionTesting()
        self.roles = seed_roles(self.db)
        self.admin = add_user(self.db, "admin", self.roles["Administrator"])
        self.manager = add_user(self.db, "manager", self.roles["Manager"])
        self.clerk = add_user(self.db, "clerk", self.roles["Standard User"])
        self.store = InMemorySessionStore()

        def override_get_db() -> Generator[Session, None, None]:
            db = self.SessionTesting()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_session_store] = lambda: self.store
        self.client = TestClient(app, follow_redirects=False)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        self.client.close()
        self.db.close()
        self.engine.dispose()

    def login(self, username: str, password: str = DEFAULT_PASSWORD) -> str:
        """Log in through the form and return the session token from the cookie."""
        response = self.client.post("/login", data={"username": username, "password": password})
        self.assertEqual(response.status_code, 303, response.text)
        token = self.client.cookies.get("sessionId")
        self.assertIsNotNone(token)
        return token
