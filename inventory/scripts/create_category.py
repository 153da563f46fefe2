"""
Create a product category. Run from project root:
  python -m inventory.scripts.create_category NAME
"""
import argparse
import sys

from inventory.core.database import SessionLocal
from inventory.models.product import Category

CATEGORY_NAME_MAX_LEN = 255


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a product category.")
    parser.add_argument("name", help=f"Category name (1-{CATEGORY_NAME_MAX_LEN} chars)")
    args = parser.parse_args(argv)

    name = args.name.strip()
    if not name or len(name) > CATEGORY_NAME_MAX_LEN:
        print("Invalid category name length.", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        if db.query(Category).filter(Category.name == name).first():
            print(f"Category '{name}' already exists.", file=sys.stderr)
            return 1
        category = Category(name=name)
        db.add(category)
        db.commit()
        print(f"Created category '{name}' (id {category.id}).")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
