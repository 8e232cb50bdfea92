"""Database schema and connection management for SQLite."""

import asyncio
import sqlite3
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Callable, Optional

from common.constants import DATABASE_NAME, FILES_COLLECTION, SCHEMA_VERSION
from common.logging_config import get_logger
from locker.exceptions import StoreUnavailableError

logger = get_logger(__name__)


def _upgrade_to_v1(cursor: sqlite3.Cursor) -> None:
    """
    Create the file record collection.
    """
    cursor.execute(f"""
        CREATE TABLE IF NOT EXISTS {FILES_COLLECTION} (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            owner TEXT NOT NULL,
            name TEXT NOT NULL,
            content BLOB NOT NULL,
            notes TEXT NOT NULL DEFAULT '',
            uploaded_at INTEGER NOT NULL
        )
    """)


UPGRADES = {
    1: _upgrade_to_v1,
}


def upgrade_schema(conn: sqlite3.Connection) -> int:
    """
    Bring the schema up to SCHEMA_VERSION.

    Every upgrade step is idempotent, so repeated opens are safe.

    Returns:
        The schema version after the upgrade
    """
    cursor = conn.cursor()
    current = cursor.execute("PRAGMA user_version").fetchone()[0]

    for version in range(current + 1, SCHEMA_VERSION + 1):
        logger.info(f"Upgrading {DATABASE_NAME} schema to version {version}")
        UPGRADES[version](cursor)
        cursor.execute(f"PRAGMA user_version = {version}")

    conn.commit()
    return max(current, SCHEMA_VERSION)


class LocalDatabase:
    """
    Process-lifetime connection to the local object store.

    The connection is opened lazily on first use and reused afterwards. All
    blocking work runs on one worker thread, so operations are admitted in
    the order they were issued.
    """

    def __init__(self, path: str):
        self.path = path
        self._conn: Optional[sqlite3.Connection] = None
        self._opening: Optional[asyncio.Future] = None
        self._executor: Optional[ThreadPoolExecutor] = None

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def _get_executor(self) -> ThreadPoolExecutor:
        # Recreated after close() so the database can be opened again
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="locker-db")
        return self._executor

    def _connect(self) -> sqlite3.Connection:
        if self.path != ":memory:":
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(self.path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        try:
            upgrade_schema(conn)
        except sqlite3.Error:
            conn.close()
            raise
        return conn

    async def open(self) -> sqlite3.Connection:
        """
        Open the database, creating it and its schema if absent.

        Returns:
            The shared connection

        Raises:
            StoreUnavailableError: If the host refuses access to the database file
        """
        if self._conn is not None:
            return self._conn

        if self._opening is None:
            loop = asyncio.get_running_loop()
            self._opening = loop.run_in_executor(self._get_executor(), self._connect)

        opening = self._opening
        try:
            conn = await opening
        except (sqlite3.Error, OSError) as e:
            if self._opening is opening:
                self._opening = None
            logger.error(f"Failed to open database at {self.path}: {e}", exc_info=True)
            raise StoreUnavailableError(f"Local file store is unavailable: {e}") from e

        if self._conn is None:
            self._conn = conn
            logger.debug(f"Database open [path={self.path}]")
        return self._conn

    async def run(self, fn: Callable[..., Any], *args: Any) -> Any:
        """
        Run fn(conn, *args) on the database thread.
        """
        conn = await self.open()
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._get_executor(), fn, conn, *args)

    async def close(self) -> None:
        """Close the connection and stop the database thread. A later open() starts over."""
        if self._conn is not None:
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(self._executor, self._conn.close)
            self._conn = None
        self._opening = None
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
