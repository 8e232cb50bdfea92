"""Session service: login, signup and the current identity."""

from typing import Callable, Mapping, Optional

from pydantic import ValidationError

from common.constants import DEMO_ACCOUNT, INTENDED_KEY, SESSION_KEY
from common.logging_config import get_logger
from locker.exceptions import (
    AccountAlreadyExistsError,
    IdentityRequiredError,
    InvalidCredentialsError,
    SignupValidationError,
)
from locker.kv_store import KeyValueStore
from locker.repositories.account_repository import AccountRepository, normalize_email
from locker.schemas.auth import Identity, PersistenceTier

logger = get_logger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


class SessionService:
    """
    Owns the current identity and its persistence tier.

    The durable tier survives restarts; the ephemeral tier lasts as long as
    the store backing it. A login writes one tier and clears the other.
    """

    def __init__(
        self,
        accounts: AccountRepository,
        durable: KeyValueStore,
        ephemeral: KeyValueStore,
        demo_account: Optional[Mapping[str, str]] = DEMO_ACCOUNT,
    ):
        self.accounts = accounts
        self.durable = durable
        self.ephemeral = ephemeral
        self.demo_account = demo_account

    def _tier(self, tier: PersistenceTier) -> KeyValueStore:
        return self.durable if tier == PersistenceTier.DURABLE else self.ephemeral

    def _store_identity(self, identity: Identity, tier: PersistenceTier) -> None:
        other = PersistenceTier.EPHEMERAL if tier == PersistenceTier.DURABLE else PersistenceTier.DURABLE
        self._tier(tier).set(SESSION_KEY, identity.model_dump_json())
        self._tier(other).remove(SESSION_KEY)
        logger.debug(f"Session stored [email={identity.email}, tier={tier.value}]")

    def _match_demo(self, email: str, password: str) -> Optional[Identity]:
        if not self.demo_account:
            return None
        demo_email = normalize_email(self.demo_account.get("email"))
        demo_password = (self.demo_account.get("password") or "").strip()
        if email == demo_email and password == demo_password:
            return Identity(email=demo_email, name=self.demo_account.get("name") or demo_email)
        return None

    def login(self, email: Optional[str], password: Optional[str], remember: bool) -> Identity:
        """
        Authenticate against the registry, then the builtin demo account.

        Args:
            email: Email as typed; trimmed and lowercased before lookup
            password: Password as typed; trimmed before comparison
            remember: Store the session in the durable tier instead of the ephemeral one

        Returns:
            The established identity

        Raises:
            InvalidCredentialsError: Unknown account or wrong password, indistinguishably
        """
        email = normalize_email(email)
        password = (password or "").strip()
        logger.info(f"Login attempt for {email} [remember={remember}]")

        identity = None
        account = self.accounts.find_by_email(email)
        if account is not None and account.password == password:
            identity = account.to_identity()
        else:
            identity = self._match_demo(email, password)

        if identity is None:
            logger.warning(f"Login failed for {email}")
            raise InvalidCredentialsError(INVALID_CREDENTIALS_MESSAGE)

        tier = PersistenceTier.DURABLE if remember else PersistenceTier.EPHEMERAL
        self._store_identity(identity, tier)
        logger.info(f"Logged in {identity.email} [tier={tier.value}]")
        return identity

    def signup(
        self,
        name: Optional[str],
        email: Optional[str],
        password: Optional[str],
        confirm: Optional[str],
    ) -> Identity:
        """
        Register an account and log it in durably.

        Raises:
            SignupValidationError: Missing fields, mismatched passwords or an existing account
        """
        name = (name or "").strip()
        email = normalize_email(email)
        password = (password or "").strip()
        confirm = (confirm or "").strip()

        if not email or not password:
            raise SignupValidationError(
                SignupValidationError.MISSING_FIELDS, "Email and password are required."
            )
        if password != confirm:
            raise SignupValidationError(
                SignupValidationError.PASSWORD_MISMATCH, "Passwords do not match."
            )

        try:
            account = self.accounts.create(name, email, password)
        except AccountAlreadyExistsError as e:
            raise SignupValidationError(SignupValidationError.ALREADY_EXISTS, str(e)) from e

        identity = account.to_identity()
        self._store_identity(identity, PersistenceTier.DURABLE)
        logger.info(f"Signed up and logged in {identity.email}")
        return identity

    def _read_identity(self, store: KeyValueStore) -> Optional[Identity]:
        raw = store.get(SESSION_KEY)
        if raw is None:
            return None
        try:
            return Identity.model_validate_json(raw)
        except ValidationError:
            logger.warning("Discarding malformed stored session")
            return None

    def current_identity(self) -> Optional[Identity]:
        return self._read_identity(self.durable) or self._read_identity(self.ephemeral)

    def logout(self) -> None:
        """Clear the session from both tiers, along with any intended destination."""
        self.durable.remove(SESSION_KEY)
        self.ephemeral.remove(SESSION_KEY)
        self.ephemeral.remove(INTENDED_KEY)
        logger.info("Logged out")

    def require_identity(self, on_missing: Callable[[], None]) -> Identity:
        """
        Return the current identity, or call on_missing and stop the caller.

        Raises:
            IdentityRequiredError: After on_missing has run
        """
        identity = self.current_identity()
        if identity is None:
            logger.debug("No identity for gated operation")
            on_missing()
            raise IdentityRequiredError("Please log in first.")
        return identity

    def remember_destination(self, destination: str) -> None:
        self.ephemeral.set(INTENDED_KEY, destination)

    def pop_intended_destination(self) -> Optional[str]:
        destination = self.ephemeral.get(INTENDED_KEY)
        if destination is not None:
            self.ephemeral.remove(INTENDED_KEY)
        return destination

    @staticmethod
    def display_name(identity: Identity) -> str:
        return identity.name or identity.email
