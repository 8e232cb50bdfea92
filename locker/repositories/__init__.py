"""Repository layer for data access."""

from locker.repositories.account_repository import AccountRepository
from locker.repositories.file_repository import FileRecord, FileRepository

__all__ = [
    "AccountRepository",
    "FileRecord",
    "FileRepository",
]
