"""
Create a user (e.g. the first Administrator). Run from project root:
  python -m inventory.scripts.create_user USERNAME PASSWORD [ROLE]
Example:
  python -m inventory.scripts.create_user admin your-secure-password Administrator
"""
import argparse
import sys

from inventory.core.database import SessionLocal
from inventory.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    hash_password,
)
from inventory.models.user import ROLE_NAMES, ROLE_STANDARD_USER, Role, User


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create an inventory user (no registration UI).")
    parser.add_argument("username", help=f"Username (1-{USERNAME_MAX_LEN} chars)")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("role", nargs="?", default=ROLE_STANDARD_USER, choices=ROLE_NAMES)
    args = parser.parse_args(argv)

    username = args.username.strip()
    if not username or len(username) > USERNAME_MAX_LEN:
        print("Invalid username length.", file=sys.stderr)
        return 1
    if len(args.password) < PASSWORD_MIN_LEN or len(args.password) > PASSWORD_MAX_LEN:
        print(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.",
            file=sys.stderr,
        )
        return 1

    db = SessionLocal()
    try:
        existing = db.query(User).filter(User.username == username).first()
        if existing:
            print(f"User '{username}' already exists.", file=sys.stderr)
            return 1
        role = db.query(Role).filter(Role.name == args.role).first()
        if role is None:
            role = Role(name=args.role)
            db.add(role)
            db.flush()
        user = User(
            username=username,
            password_hash=hash_password(args.password),
            role_id=role.id,
        )
        db.add(user)
        db.commit()
        print(f"Created user '{username}' with role '{args.role}'.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
