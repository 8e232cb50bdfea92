"""Service layer for business logic."""

from locker.services.session_service import SessionService

__all__ = [
    "SessionService",
]
