"""Point the app at SQLite before inventory modules create their engine."""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SESSION_BACKEND"] = "memory"
os.environ["APP_ENV"] = "dev"
