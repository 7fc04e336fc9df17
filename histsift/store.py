"""History store contract and a read-only SQLite implementation.

The session and batch paths only rely on the ``HistoryStore`` protocol:
results come back newest first and are never re-sorted by callers.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Protocol

from .errors import StoreError
from .history import History
from .settings import SearchMode

logger = logging.getLogger(__name__)

_UNIQUE_LATEST = (
    "h.timestamp = (SELECT max(timestamp) FROM history WHERE history.command = h.command)"
)


class HistoryStore(Protocol):
    def list(self, limit: int | None, unique: bool) -> list[History]: ...

    def search(self, limit: int | None, mode: SearchMode, query: str) -> list[History]: ...

    def count(self) -> int: ...


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def like_pattern(mode: SearchMode, query: str) -> str:
    """Translate a query into the LIKE pattern used for ``mode``."""
    if mode == SearchMode.PREFIX:
        return f"{_escape_like(query)}%"
    if mode == SearchMode.FULLTEXT:
        return f"%{_escape_like(query)}%"
    return "%" + "%".join(_escape_like(ch) for ch in query) + "%"


class SqliteStore:
    """Query a ``history`` table written by the shell hooks.

    The connection is opened read-only; ``StoreError`` wraps every
    ``sqlite3.Error`` so callers only handle one failure type.
    """

    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)
        try:
            self._conn = sqlite3.connect(f"file:{self.db_path}?mode=ro", uri=True)
        except sqlite3.Error as exc:
            raise StoreError(f"cannot open history database {self.db_path}: {exc}") from exc
        self._conn.row_factory = sqlite3.Row

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> "SqliteStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _fetch(self, sql: str, params: tuple) -> list[History]:
        try:
            rows = self._conn.execute(sql, params).fetchall()
        except sqlite3.Error as exc:
            raise StoreError(f"history query failed: {exc}") from exc
        return [History.from_row(row) for row in rows]

    def list(self, limit: int | None, unique: bool) -> list[History]:
        where = f"WHERE {_UNIQUE_LATEST}" if unique else ""
        sql = f"SELECT * FROM history h {where} ORDER BY h.timestamp DESC LIMIT ?"
        results = self._fetch(sql, (-1 if limit is None else limit,))
        logger.debug("list(limit=%s, unique=%s) -> %d rows", limit, unique, len(results))
        return results

    def search(self, limit: int | None, mode: SearchMode, query: str) -> list[History]:
        sql = (
            "SELECT * FROM history h "
            f"WHERE h.command LIKE ? ESCAPE '\\' AND {_UNIQUE_LATEST} "
            "ORDER BY h.timestamp DESC LIMIT ?"
        )
        results = self._fetch(sql, (like_pattern(mode, query), -1 if limit is None else limit))
        logger.debug("search(mode=%s, query=%r) -> %d rows", mode.value, query, len(results))
        return results

    def count(self) -> int:
        try:
            row = self._conn.execute("SELECT count(1) FROM history").fetchone()
        except sqlite3.Error as exc:
            raise StoreError(f"history count failed: {exc}") from exc
        return int(row[0])
