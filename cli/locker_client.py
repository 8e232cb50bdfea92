"""Client that drives the local file store and session for the CLI."""

import asyncio
import time
from contextlib import aclosing
from datetime import datetime
from pathlib import Path
from typing import Optional

from common.logging_config import get_logger
from cli.constants import DOWNLOADS_DIR, GREEN, RESET
from cli.utils import format_file_size
from locker import config
from locker.database import LocalDatabase
from locker.exceptions import (
    DownloadHandleError,
    IdentityRequiredError,
    InvalidCredentialsError,
    ReadFailedError,
    SignupValidationError,
    StoreUnavailableError,
    WriteFailedError,
)
from locker.kv_store import JsonFileKeyValueStore, KeyValueStore, MemoryKeyValueStore
from locker.repositories.account_repository import AccountRepository
from locker.repositories.file_repository import FileRecord, FileRepository
from locker.schemas.auth import Identity
from locker.services.session_service import SessionService

logger = get_logger(__name__)

NOT_LOGGED_IN = "Not logged in. Please run: login <email> <password>"


class LockerClient:
    """Synchronous facade over the session service and file repository."""

    def __init__(
        self,
        database: LocalDatabase,
        durable: KeyValueStore,
        ephemeral: Optional[KeyValueStore] = None,
        downloads_dir: str = DOWNLOADS_DIR,
    ):
        """
        Initialize locker client.

        Args:
            database: Local object store connection (opened lazily)
            durable: Tier that survives restarts (sessions, accounts)
            ephemeral: Tier that ends with this process (sessions, intended command); in-memory when omitted
            downloads_dir: Default directory for downloaded files
        """
        self.database = database
        self.files = FileRepository(database)
        self.session = SessionService(
            accounts=AccountRepository(durable),
            durable=durable,
            ephemeral=ephemeral if ephemeral is not None else MemoryKeyValueStore(),
        )
        self.downloads_dir = Path(downloads_dir)
        self.pending_command: Optional[str] = None
        self._loop = asyncio.new_event_loop()
        logger.info(f"Initialized LockerClient [database={database.path}]")

    @classmethod
    def from_config(cls) -> 'LockerClient':
        return cls(
            database=LocalDatabase(config.DATABASE_PATH),
            durable=JsonFileKeyValueStore(Path(config.STATE_PATH)),
        )

    def _run(self, coro):
        return self._loop.run_until_complete(coro)

    def _require_identity(self) -> Identity:
        def remember_pending() -> None:
            if self.pending_command:
                self.session.remember_destination(self.pending_command)

        return self.session.require_identity(remember_pending)

    def pop_intended_command(self) -> Optional[str]:
        return self.session.pop_intended_destination()

    def signup(self, name: str, email: str, password: str, confirm: str) -> str:
        try:
            identity = self.session.signup(name, email, password, confirm)
        except SignupValidationError as e:
            logger.warning(f"Signup rejected [reason={e.reason}]")
            return f"Signup failed: {e}"
        except Exception as e:
            logger.error(f"Unexpected error during signup: {e}", exc_info=True)
            return f"Unexpected error during signup: {e}"
        return f"Account created. Logged in as {self.session.display_name(identity)}."

    def login(self, email: str, password: str, remember: bool) -> str:
        try:
            identity = self.session.login(email, password, remember)
        except InvalidCredentialsError as e:
            return f"Login failed: {e}."
        except Exception as e:
            logger.error(f"Unexpected error during login: {e}", exc_info=True)
            return f"Unexpected error during login: {e}"
        return f"Login successful! Welcome, {self.session.display_name(identity)}."

    def logout(self) -> str:
        self.files.handles.revoke_all()
        try:
            self.session.logout()
        except Exception as e:
            logger.error(f"Unexpected error during logout: {e}", exc_info=True)
            return f"Unexpected error during logout: {e}"
        return "Logged out."

    def whoami(self) -> str:
        identity = self.session.current_identity()
        if identity is None:
            return "Not logged in."
        return f"{self.session.display_name(identity)} <{identity.email}>"

    def upload_files(self, file_paths: list[str], notes: str = "") -> str:
        """
        Store files for the logged-in user, one record per file in the given order.

        Args:
            file_paths: Local paths to read
            notes: Annotation shared by every uploaded file

        Returns:
            Formatted result message
        """
        try:
            identity = self._require_identity()
        except IdentityRequiredError:
            return NOT_LOGGED_IN

        paths = [Path(p) for p in file_paths]
        for path, raw in zip(paths, file_paths):
            if not path.is_file():
                return f"Error: File not found: {raw}"

        results = []
        try:
            for path in paths:
                record = FileRecord(
                    owner=identity.email,
                    name=path.name,
                    content=path.read_bytes(),
                    notes=notes,
                    uploaded_at=int(time.time() * 1000),
                )
                record_id = self._run(self.files.add(record))
                results.append(
                    f"{GREEN}Uploaded{RESET}: {record.name} (ID: {record_id}, Size: {format_file_size(len(record.content))})"
                )
        except (StoreUnavailableError, WriteFailedError) as e:
            results.append(f"Error: {e}")
            return "\n".join(results)
        except OSError as e:
            logger.error(f"Failed to read {path}: {e}", exc_info=True)
            results.append(f"Error: Cannot read {path}: {e.strerror}")
            return "\n".join(results)

        results.append("Upload complete.")
        return "\n".join(results)

    def list_files(self) -> str:
        try:
            identity = self._require_identity()
        except IdentityRequiredError:
            return NOT_LOGGED_IN

        try:
            records = self._run(self.files.collect_by_owner(identity.email))
        except (StoreUnavailableError, ReadFailedError) as e:
            return f"Error: {e}"

        if not records:
            return "No files uploaded yet."

        records.sort(key=lambda r: r.uploaded_at, reverse=True)
        lines = [f"Found {len(records)} file(s):"]
        for record in records:
            uploaded = datetime.fromtimestamp(record.uploaded_at / 1000).strftime('%Y-%m-%d %H:%M:%S')
            line = f"  [{record.id}] {record.name} ({format_file_size(len(record.content))}, {uploaded})"
            if record.notes:
                line += f" - {record.notes}"
            lines.append(line)
        return "\n".join(lines)

    def _find_owned(self, owner: str, file_id: int) -> Optional[FileRecord]:
        async def find() -> Optional[FileRecord]:
            async with aclosing(self.files.list_by_owner(owner)) as records:
                async for record in records:
                    if record.id == file_id:
                        return record
            return None

        return self._run(find())

    def download(self, file_id: int, output_path: Optional[str] = None) -> str:
        try:
            identity = self._require_identity()
        except IdentityRequiredError:
            return NOT_LOGGED_IN

        try:
            record = self._find_owned(identity.email, file_id)
        except (StoreUnavailableError, ReadFailedError) as e:
            return f"Error: {e}"
        if record is None:
            return f"Error: No file with ID {file_id}"

        target = Path(output_path) if output_path else self.downloads_dir / record.name
        if target.is_dir():
            target = target / record.name

        handle = self.files.materialize_download_handle(record)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(self.files.handles.resolve(handle))
        except DownloadHandleError as e:
            return f"Error: {e}"
        except OSError as e:
            logger.error(f"Failed to write download {target}: {e}")
            return f"Error: Cannot write {target}: {e.strerror}"
        finally:
            self.files.handles.revoke(handle)

        logger.info(f"Downloaded file {record.id} to {target}")
        return f"Downloaded {record.name} to {target} ({format_file_size(len(record.content))})"

    def delete(self, file_id: int) -> str:
        try:
            identity = self._require_identity()
        except IdentityRequiredError:
            return NOT_LOGGED_IN

        try:
            record = self._find_owned(identity.email, file_id)
            if record is None:
                return f"Error: No file with ID {file_id}"
            self._run(self.files.delete_by_id(file_id))
        except (StoreUnavailableError, ReadFailedError, WriteFailedError) as e:
            return f"Error: {e}"
        return f"Deleted {record.name} (ID: {file_id})"

    def close(self) -> None:
        """Revoke download handles, close the database and the event loop."""
        self.files.handles.revoke_all()
        try:
            self._run(self.database.close())
            self._run(self._loop.shutdown_asyncgens())
        finally:
            self._loop.close()
