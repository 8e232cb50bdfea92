"""Pydantic schemas for persisted accounts and session identities."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class PersistenceTier(str, Enum):
    """Lifetime of a stored session identity."""
    DURABLE = "durable"
    EPHEMERAL = "ephemeral"


class Identity(BaseModel):
    """The currently authenticated user."""
    email: str
    name: str


class Account(BaseModel):
    """A locally registered credential."""
    email: str
    name: str = ""
    password: Optional[str] = None

    def to_identity(self) -> Identity:
        return Identity(email=self.email, name=self.name or self.email)
