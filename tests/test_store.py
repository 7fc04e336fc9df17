"""SQLite store tests against a temporary history database."""

from __future__ import annotations

import sqlite3
import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path

from histsift.errors import StoreError
from histsift.settings import SearchMode
from histsift.store import SqliteStore, like_pattern

SCHEMA = """
CREATE TABLE history (
    id TEXT PRIMARY KEY,
    timestamp INTEGER NOT NULL,
    duration INTEGER NOT NULL,
    exit INTEGER NOT NULL,
    command TEXT NOT NULL,
    cwd TEXT NOT NULL,
    session TEXT NOT NULL,
    hostname TEXT NOT NULL
)
"""
EPOCH_NS = 1_600_000_000 * 1_000_000_000


def _write_db(path: Path, rows: list[tuple]) -> None:
    conn = sqlite3.connect(path)
    try:
        conn.execute(SCHEMA)
        conn.executemany(
            "INSERT INTO history VALUES (?, ?, ?, ?, ?, ?, 'session', 'host')",
            rows,
        )
        conn.commit()
    finally:
        conn.close()


class SqliteStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.db_path = Path(self._tmp.name) / "history.db"
        _write_db(
            self.db_path,
            [
                ("1", EPOCH_NS + 1, 5, 0, "ls", "/home"),
                ("2", EPOCH_NS + 2, 7, 1, "git status", "/src"),
                ("3", EPOCH_NS + 3, -1, 0, "ls", "/tmp"),
                ("4", EPOCH_NS + 4, 9, 0, "git log", "/src"),
                ("5", EPOCH_NS + 5, 9, 0, "echo 100%", "/src"),
            ],
        )
        self.store = SqliteStore(self.db_path)

    def tearDown(self) -> None:
        self.store.close()
        self._tmp.cleanup()

    def test_list_unique_keeps_latest_per_command(self) -> None:
        results = self.store.list(200, True)
        self.assertEqual([r.id for r in results], ["5", "4", "3", "2"])

    def test_list_all_rows_with_limit(self) -> None:
        results = self.store.list(3, False)
        self.assertEqual([r.id for r in results], ["5", "4", "3"])

    def test_records_are_decoded(self) -> None:
        record = self.store.list(1, True)[0]
        self.assertEqual(record.command, "echo 100%")
        self.assertEqual(record.cwd, "/src")
        self.assertEqual(record.timestamp, datetime.fromtimestamp(1_600_000_000, tz=timezone.utc))
        self.assertEqual(record.timestamp_nanos, EPOCH_NS)

    def test_prefix_search(self) -> None:
        results = self.store.search(200, SearchMode.PREFIX, "git")
        self.assertEqual([r.command for r in results], ["git log", "git status"])

    def test_fulltext_search(self) -> None:
        results = self.store.search(200, SearchMode.FULLTEXT, "stat")
        self.assertEqual([r.command for r in results], ["git status"])

    def test_fuzzy_search_matches_characters_in_order(self) -> None:
        results = self.store.search(200, SearchMode.FUZZY, "gs")
        self.assertEqual([r.command for r in results], ["git status"])

    def test_search_without_limit(self) -> None:
        results = self.store.search(None, SearchMode.FUZZY, "")
        self.assertEqual(len(results), 4)

    def test_like_wildcards_in_query_are_literal(self) -> None:
        self.assertEqual([r.command for r in self.store.search(200, SearchMode.FULLTEXT, "0%")], ["echo 100%"])
        self.assertEqual(self.store.search(200, SearchMode.FULLTEXT, "_"), [])

    def test_count(self) -> None:
        self.assertEqual(self.store.count(), 5)

    def test_like_patterns(self) -> None:
        self.assertEqual(like_pattern(SearchMode.PREFIX, "ab"), "ab%")
        self.assertEqual(like_pattern(SearchMode.FULLTEXT, "ab"), "%ab%")
        self.assertEqual(like_pattern(SearchMode.FUZZY, "ab"), "%a%b%")


class SqliteStoreErrorTests(unittest.TestCase):
    def test_missing_database_raises_store_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(StoreError):
                SqliteStore(Path(tmp) / "missing.db")

    def test_missing_table_raises_store_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "empty.db"
            sqlite3.connect(path).close()
            with SqliteStore(path) as store:
                with self.assertRaises(StoreError):
                    store.count()
                with self.assertRaises(StoreError):
                    store.list(10, True)


if __name__ == "__main__":
    unittest.main()
