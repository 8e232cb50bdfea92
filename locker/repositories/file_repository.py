"""File record repository for the local object store."""

import sqlite3
from dataclasses import dataclass
from typing import AsyncIterator, List, Optional

from common.constants import FILES_COLLECTION
from common.logging_config import get_logger
from locker.config import LIST_BATCH_SIZE
from locker.database import LocalDatabase
from locker.download import DownloadHandleRegistry
from locker.exceptions import ReadFailedError, WriteFailedError

logger = get_logger(__name__)


@dataclass
class FileRecord:
    owner: str
    name: str
    content: bytes
    uploaded_at: int
    notes: str = ""
    id: Optional[int] = None


def _row_to_record(row: sqlite3.Row) -> FileRecord:
    return FileRecord(
        id=row["id"],
        owner=row["owner"],
        name=row["name"],
        content=bytes(row["content"]),
        notes=row["notes"] or "",
        uploaded_at=row["uploaded_at"],
    )


def _insert(conn: sqlite3.Connection, record: FileRecord) -> int:
    try:
        cursor = conn.execute(
            f"""
            INSERT INTO {FILES_COLLECTION} (owner, name, content, notes, uploaded_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (record.owner, record.name, sqlite3.Binary(record.content), record.notes or "", record.uploaded_at)
        )
        conn.commit()
    except sqlite3.Error:
        conn.rollback()
        raise
    return cursor.lastrowid


def _delete(conn: sqlite3.Connection, record_id: int) -> int:
    try:
        cursor = conn.execute(f"DELETE FROM {FILES_COLLECTION} WHERE id = ?", (record_id,))
        conn.commit()
    except sqlite3.Error:
        conn.rollback()
        raise
    return cursor.rowcount


def _fetch_batch(conn: sqlite3.Connection, after_id: int, limit: int) -> List[sqlite3.Row]:
    cursor = conn.execute(
        f"""
        SELECT id, owner, name, content, notes, uploaded_at
        FROM {FILES_COLLECTION}
        WHERE id > ?
        ORDER BY id
        LIMIT ?
        """,
        (after_id, limit)
    )
    return cursor.fetchall()


class FileRepository:
    def __init__(
        self,
        database: LocalDatabase,
        handles: Optional[DownloadHandleRegistry] = None,
        batch_size: int = LIST_BATCH_SIZE,
    ):
        self.database = database
        self.handles = handles if handles is not None else DownloadHandleRegistry()
        self.batch_size = batch_size

    async def add(self, record: FileRecord) -> int:
        """
        Insert a new file record.

        Returns:
            The id assigned by the store

        Raises:
            WriteFailedError: If the write transaction is aborted
        """
        logger.debug(f"Adding file {record.name} [owner={record.owner}]")
        try:
            record_id = await self.database.run(_insert, record)
        except sqlite3.Error as e:
            logger.error(f"Failed to add file {record.name} [owner={record.owner}]: {e}", exc_info=True)
            raise WriteFailedError(f"Could not store {record.name}: {e}") from e

        logger.info(f"File stored [id={record_id}, owner={record.owner}, size={len(record.content)}]")
        return record_id

    async def list_by_owner(self, owner: str) -> AsyncIterator[FileRecord]:
        """
        Scan the collection and yield the records owned by owner.

        The scan is lazy and single-pass: rows are read in batches as the
        caller consumes them. Records come back in store order (ascending id);
        presentation ordering is up to the caller.

        Raises:
            ReadFailedError: If a read fails mid-scan
        """
        logger.debug(f"Listing files [owner={owner}]")
        last_id = 0
        while True:
            try:
                rows = await self.database.run(_fetch_batch, last_id, self.batch_size)
            except sqlite3.Error as e:
                logger.error(f"Failed to list files [owner={owner}]: {e}", exc_info=True)
                raise ReadFailedError(f"Could not read stored files: {e}") from e

            if not rows:
                return

            for row in rows:
                if row["owner"] == owner:
                    yield _row_to_record(row)

            last_id = rows[-1]["id"]

    async def collect_by_owner(self, owner: str) -> List[FileRecord]:
        return [record async for record in self.list_by_owner(owner)]

    async def count_by_owner(self, owner: str) -> int:
        count = 0
        async for _ in self.list_by_owner(owner):
            count += 1
        return count

    async def delete_by_id(self, record_id: int) -> None:
        """
        Delete the record with this id. Unknown ids are ignored.

        Raises:
            WriteFailedError: If the write transaction is aborted
        """
        logger.debug(f"Deleting file [id={record_id}]")
        try:
            deleted = await self.database.run(_delete, int(record_id))
        except sqlite3.Error as e:
            logger.error(f"Failed to delete file [id={record_id}]: {e}", exc_info=True)
            raise WriteFailedError(f"Could not delete file {record_id}: {e}") from e

        if deleted:
            logger.info(f"File deleted successfully [id={record_id}]")
        else:
            logger.debug(f"No file to delete [id={record_id}]")

    def materialize_download_handle(self, record: FileRecord) -> str:
        """
        Create a transient handle for downloading a record's content.
        """
        return self.handles.create(record)
