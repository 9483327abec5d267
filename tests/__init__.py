"""Test package: point settings at in-memory SQLite and cheap bcrypt before app imports."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DB_AUTO_CREATE", "false")
