"""Account registry kept in the durable key-value tier."""

import json
from typing import Any, List, Optional

from pydantic import ValidationError

from common.constants import ACCOUNTS_KEY
from common.logging_config import get_logger
from locker.exceptions import AccountAlreadyExistsError
from locker.kv_store import KeyValueStore
from locker.schemas.auth import Account

logger = get_logger(__name__)


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def _entry_email(entry: Any) -> Optional[str]:
    if isinstance(entry, dict) and isinstance(entry.get("email"), str):
        return normalize_email(entry["email"])
    return None


class AccountRepository:
    def __init__(self, store: KeyValueStore):
        self.store = store

    def _load_raw(self) -> List[Any]:
        raw = self.store.get(ACCOUNTS_KEY)
        if raw is None:
            return []
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Account registry is not valid JSON, treating it as empty")
            return []
        if not isinstance(data, list):
            logger.warning("Account registry is not a list, treating it as empty")
            return []
        return data

    def get_accounts(self) -> List[Account]:
        """
        Return every well-formed account in the registry.

        Malformed entries are skipped rather than reported.
        """
        accounts = []
        for entry in self._load_raw():
            try:
                accounts.append(Account.model_validate(entry))
            except ValidationError:
                logger.debug("Skipping malformed account entry")
        return accounts

    def find_by_email(self, email: Optional[str]) -> Optional[Account]:
        wanted = normalize_email(email)
        for account in self.get_accounts():
            if normalize_email(account.email) == wanted:
                return account
        return None

    def create(self, name: Optional[str], email: Optional[str], password: Optional[str]) -> Account:
        """
        Register a new account.

        The whole registry is read, extended and written back in one step.
        Entries that fail validation still claim their email.

        Raises:
            AccountAlreadyExistsError: If the normalized email is already registered
        """
        normalized = normalize_email(email)
        logger.debug(f"Creating account: {normalized}")

        entries = self._load_raw()
        if any(_entry_email(entry) == normalized for entry in entries):
            logger.warning(f"Account creation failed: '{normalized}' already exists")
            raise AccountAlreadyExistsError("Account already exists")

        account = Account(name=name or normalized, email=normalized, password=password or "")
        entries.append(account.model_dump())
        self.store.set(ACCOUNTS_KEY, json.dumps(entries))

        logger.info(f"Account created successfully: {normalized}")
        return account
