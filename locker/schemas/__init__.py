"""Pydantic schemas for persisted state."""

from locker.schemas.auth import Account, Identity, PersistenceTier

__all__ = [
    "Account",
    "Identity",
    "PersistenceTier",
]
