from __future__ import annotations

import unittest
from datetime import datetime

from apprentice_api.infrastructure.db.repositories.access_history_repository import (
    SqlAccessHistoryRepository,
)
from apprentice_api.infrastructure.db.wp_tables import WpTables


class FakeResult:
    def __init__(self, rows):
        self._rows = rows

    def mappings(self):
        return self

    def all(self):
        return self._rows


class FakeConnection:
    def __init__(self, engine):
        self._engine = engine

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, statement, params=None):
        self._engine.statements.append(str(statement))
        return FakeResult(self._engine.rows)


class FakeEngine:
    def __init__(self, rows):
        self.rows = rows
        self.statements: list[str] = []

    def connect(self):
        return FakeConnection(self)


ROW = {
    "user_id": 1,
    "product_id": 7,
    "course_id": 11,
    "status": 1,
    "source": "order",
    "created": datetime(2024, 1, 5, 10, 0, 0),
}


class AccessHistoryRepositoryTests(unittest.TestCase):
    def test_history_for_users_excludes_rows_without_product(self):
        engine = FakeEngine([ROW])
        repository = SqlAccessHistoryRepository(engine, WpTables("wp_"))

        history = repository.list_history_for_users(user_ids=[1])

        self.assertEqual([row.product_id for row in history], [7])
        self.assertEqual(len(engine.statements), 1)
        self.assertIn("wp_tva_access_history", engine.statements[0])
        self.assertIn("product_id IS NOT NULL", engine.statements[0])

    def test_history_between_excludes_rows_without_product(self):
        engine = FakeEngine([ROW])
        repository = SqlAccessHistoryRepository(engine, WpTables("wp_"))

        history = repository.list_history_between(
            since=datetime(2024, 1, 1, 0, 0, 0),
            until=datetime(2024, 2, 1, 0, 0, 0),
        )

        self.assertEqual(len(history), 1)
        self.assertIn("product_id IS NOT NULL", engine.statements[0])

    def test_no_users_skips_query(self):
        engine = FakeEngine([ROW])
        repository = SqlAccessHistoryRepository(engine, WpTables("wp_"))

        self.assertEqual(repository.list_history_for_users(user_ids=[]), [])
        self.assertEqual(engine.statements, [])
