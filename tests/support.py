"""Shared fixtures: fresh tables per test on the in-memory engine."""

import unittest

from app.core.database import SessionLocal, engine
from app.models import Base


class DatabaseTestCase(unittest.TestCase):
    """Creates all tables before each test and drops them afterwards."""

    def setUp(self) -> None:
        Base.metadata.create_all(bind=engine)
        self.db = SessionLocal()

    def tearDown(self) -> None:
        self.db.close()
        Base.metadata.drop_all(bind=engine)
