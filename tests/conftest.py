"""Shared pytest fixtures for all tests."""

import asyncio

import pytest

from cli.locker_client import LockerClient
from locker.database import LocalDatabase
from locker.kv_store import JsonFileKeyValueStore, MemoryKeyValueStore
from locker.repositories.account_repository import AccountRepository
from locker.repositories.file_repository import FileRecord, FileRepository
from locker.services.session_service import SessionService


@pytest.fixture
def durable_store():
    """In-memory stand-in for the durable tier."""
    return MemoryKeyValueStore()


@pytest.fixture
def ephemeral_store():
    """In-memory ephemeral tier."""
    return MemoryKeyValueStore()


@pytest.fixture
def accounts(durable_store):
    return AccountRepository(durable_store)


@pytest.fixture
def session(accounts, durable_store, ephemeral_store):
    return SessionService(accounts=accounts, durable=durable_store, ephemeral=ephemeral_store)


@pytest.fixture
def database(tmp_path):
    """
    Create a local database file under tmp_path.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Unopened LocalDatabase, closed after the test
    """
    db = LocalDatabase(str(tmp_path / "files.db"))
    yield db
    asyncio.run(db.close())


@pytest.fixture
def file_repo(database):
    return FileRepository(database)


@pytest.fixture
def make_record():
    """
    Build FileRecord instances with sensible defaults.

    Returns:
        Factory taking owner, name and optional overrides
    """
    def _make(owner="ada@example.com", name="notes.txt", content=b"hello", notes="", uploaded_at=1700000000000):
        return FileRecord(owner=owner, name=name, content=content, notes=notes, uploaded_at=uploaded_at)

    return _make


@pytest.fixture
def locker_client(tmp_path):
    """
    Create a LockerClient backed by temporary files.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        LockerClient instance, closed after the test
    """
    client = LockerClient(
        database=LocalDatabase(str(tmp_path / "files.db")),
        durable=JsonFileKeyValueStore(tmp_path / "state.json"),
        downloads_dir=str(tmp_path / "downloads"),
    )
    yield client
    client.close()


@pytest.fixture
def sample_file(tmp_path):
    """
    Create a sample file for testing uploads.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to sample text file
    """
    file_path = tmp_path / 'test.txt'
    file_path.write_text('Sample content for testing')
    return file_path


@pytest.fixture
def multiple_sample_files(tmp_path):
    """
    Create multiple sample files for testing bulk uploads.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        List of Paths to sample files
    """
    files = []
    for i in range(3):
        file_path = tmp_path / f'test{i}.txt'
        file_path.write_text(f'Sample content {i}')
        files.append(file_path)
    return files
