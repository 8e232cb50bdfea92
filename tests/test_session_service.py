"""Tests for login, signup and session tiers."""

from unittest.mock import Mock

import pytest

from common.constants import INTENDED_KEY, SESSION_KEY
from locker.exceptions import IdentityRequiredError, InvalidCredentialsError, SignupValidationError
from locker.kv_store import MemoryKeyValueStore
from locker.repositories.account_repository import AccountRepository
from locker.schemas.auth import Identity
from locker.services.session_service import SessionService

DEMO_EMAIL = "adams.tebes@gmail.com"
DEMO_PASSWORD = "soccerkid098"


class TestLogin:

    def test_demo_login_survives_restart(self, durable_store):
        session = SessionService(AccountRepository(durable_store), durable_store, MemoryKeyValueStore())

        identity = session.login(DEMO_EMAIL, DEMO_PASSWORD, True)
        assert identity == Identity(email=DEMO_EMAIL, name="Adams Tebes")

        restarted = SessionService(AccountRepository(durable_store), durable_store, MemoryKeyValueStore())
        assert restarted.current_identity() == Identity(email=DEMO_EMAIL, name="Adams Tebes")

    def test_demo_login_normalizes_email_and_trims_password(self, session):
        identity = session.login("  Adams.Tebes@Gmail.com ", f" {DEMO_PASSWORD} ", False)

        assert identity.email == DEMO_EMAIL

    def test_demo_password_is_case_sensitive(self, session):
        with pytest.raises(InvalidCredentialsError):
            session.login(DEMO_EMAIL, DEMO_PASSWORD.upper(), True)

    def test_registered_login_without_remember_is_ephemeral(self, session, accounts, durable_store, ephemeral_store):
        accounts.create("Ada", "ada@example.com", "s3cret")

        identity = session.login("ada@example.com", "s3cret", False)

        assert identity == Identity(email="ada@example.com", name="Ada")
        assert durable_store.get(SESSION_KEY) is None
        assert ephemeral_store.get(SESSION_KEY) is not None
        assert session.current_identity() == identity

        ephemeral_store.clear()
        assert session.current_identity() is None

    def test_registered_login_with_remember_is_durable(self, session, accounts, durable_store, ephemeral_store):
        accounts.create("Ada", "ada@example.com", "s3cret")

        session.login("ADA@example.com", "s3cret", True)

        assert durable_store.get(SESSION_KEY) is not None
        assert ephemeral_store.get(SESSION_KEY) is None

    def test_login_clears_other_tier(self, session, durable_store, ephemeral_store):
        session.login(DEMO_EMAIL, DEMO_PASSWORD, True)
        session.login(DEMO_EMAIL, DEMO_PASSWORD, False)

        assert durable_store.get(SESSION_KEY) is None
        assert ephemeral_store.get(SESSION_KEY) is not None

    @pytest.mark.parametrize("email,password", [
        ("nobody@example.com", "whatever"),
        ("ada@example.com", "wrong"),
        ("ada@example.com", ""),
        ("", ""),
        (DEMO_EMAIL, "wrong"),
    ])
    def test_invalid_login_leaves_tiers_untouched(self, session, accounts, durable_store, ephemeral_store, email, password):
        accounts.create("Ada", "ada@example.com", "s3cret")
        durable_before = dict(durable_store._data)
        ephemeral_before = dict(ephemeral_store._data)

        with pytest.raises(InvalidCredentialsError) as exc_info:
            session.login(email, password, True)

        assert str(exc_info.value) == "Invalid email or password"
        assert durable_store._data == durable_before
        assert ephemeral_store._data == ephemeral_before

    def test_registry_checked_before_demo(self, session, accounts):
        accounts.create("Someone Else", DEMO_EMAIL, "another")

        identity = session.login(DEMO_EMAIL, "another", True)

        assert identity.name == "Someone Else"

    def test_demo_still_matches_when_registry_password_differs(self, session, accounts):
        accounts.create("Someone Else", DEMO_EMAIL, "another")

        identity = session.login(DEMO_EMAIL, DEMO_PASSWORD, True)

        assert identity.name == "Adams Tebes"

    def test_no_demo_account(self, accounts, durable_store, ephemeral_store):
        session = SessionService(accounts, durable_store, ephemeral_store, demo_account=None)

        with pytest.raises(InvalidCredentialsError):
            session.login(DEMO_EMAIL, DEMO_PASSWORD, True)


class TestSignup:

    def test_signup_creates_account_and_durable_session(self, session, accounts, durable_store):
        identity = session.signup("Ada", " Ada@Example.com ", "s3cret", "s3cret")

        assert identity == Identity(email="ada@example.com", name="Ada")
        assert accounts.find_by_email("ada@example.com") is not None
        assert durable_store.get(SESSION_KEY) is not None
        assert session.current_identity() == identity

    def test_signup_name_defaults_to_email(self, session):
        identity = session.signup("", "ada@example.com", "s3cret", "s3cret")

        assert identity.name == "ada@example.com"

    def test_signup_password_mismatch(self, session, accounts):
        with pytest.raises(SignupValidationError) as exc_info:
            session.signup("Ada", "ada@example.com", "s3cret", "other")

        assert exc_info.value.reason == SignupValidationError.PASSWORD_MISMATCH
        assert accounts.get_accounts() == []
        assert session.current_identity() is None

    @pytest.mark.parametrize("email,password", [("", "s3cret"), ("ada@example.com", ""), ("   ", "  ")])
    def test_signup_missing_fields(self, session, accounts, email, password):
        with pytest.raises(SignupValidationError) as exc_info:
            session.signup("Ada", email, password, password)

        assert exc_info.value.reason == SignupValidationError.MISSING_FIELDS
        assert accounts.get_accounts() == []

    def test_signup_existing_account(self, session, accounts):
        accounts.create("Ada", "ada@example.com", "s3cret")

        with pytest.raises(SignupValidationError) as exc_info:
            session.signup("Ada Again", "ADA@example.com", "x", "x")

        assert exc_info.value.reason == SignupValidationError.ALREADY_EXISTS
        assert session.current_identity() is None

    def test_signed_up_account_can_log_in(self, session):
        session.signup("Ada", "ada@example.com", " s3cret ", "s3cret")
        session.logout()

        assert session.login("ada@example.com", "s3cret", False).email == "ada@example.com"


class TestCurrentIdentity:

    def test_absent_by_default(self, session):
        assert session.current_identity() is None

    def test_durable_preferred_over_ephemeral(self, session, durable_store, ephemeral_store):
        durable_store.set(SESSION_KEY, Identity(email="d@example.com", name="D").model_dump_json())
        ephemeral_store.set(SESSION_KEY, Identity(email="e@example.com", name="E").model_dump_json())

        assert session.current_identity().email == "d@example.com"

    @pytest.mark.parametrize("raw", ["{broken", "null", "42", '{"email": "x@example.com"}'])
    def test_malformed_durable_falls_back_to_ephemeral(self, session, durable_store, ephemeral_store, raw):
        durable_store.set(SESSION_KEY, raw)
        ephemeral_store.set(SESSION_KEY, Identity(email="e@example.com", name="E").model_dump_json())

        assert session.current_identity().email == "e@example.com"

    def test_malformed_everywhere_is_absent(self, session, durable_store, ephemeral_store):
        durable_store.set(SESSION_KEY, "{broken")
        ephemeral_store.set(SESSION_KEY, "")

        assert session.current_identity() is None


class TestLogoutAndGating:

    def test_logout_clears_both_tiers(self, session, durable_store, ephemeral_store):
        durable_store.set(SESSION_KEY, Identity(email="d@example.com", name="D").model_dump_json())
        ephemeral_store.set(SESSION_KEY, Identity(email="e@example.com", name="E").model_dump_json())

        session.logout()

        assert durable_store.get(SESSION_KEY) is None
        assert ephemeral_store.get(SESSION_KEY) is None
        assert session.current_identity() is None

    def test_require_identity_returns_identity(self, session):
        session.login(DEMO_EMAIL, DEMO_PASSWORD, False)
        on_missing = Mock()

        identity = session.require_identity(on_missing)

        assert identity.email == DEMO_EMAIL
        on_missing.assert_not_called()

    def test_require_identity_calls_on_missing_and_stops(self, session):
        on_missing = Mock()

        with pytest.raises(IdentityRequiredError):
            session.require_identity(on_missing)

        on_missing.assert_called_once_with()

    def test_intended_destination_round_trip(self, session, durable_store, ephemeral_store):
        session.remember_destination("list")

        assert durable_store.get(INTENDED_KEY) is None
        assert ephemeral_store.get(INTENDED_KEY) == "list"
        assert session.pop_intended_destination() == "list"
        assert session.pop_intended_destination() is None

    def test_logout_forgets_intended_destination(self, session, ephemeral_store):
        session.login(DEMO_EMAIL, DEMO_PASSWORD, True)
        session.remember_destination("delete 3")

        session.logout()

        assert ephemeral_store.get(INTENDED_KEY) is None
        assert session.pop_intended_destination() is None

    def test_display_name_falls_back_to_email(self):
        assert SessionService.display_name(Identity(email="a@example.com", name="")) == "a@example.com"
        assert SessionService.display_name(Identity(email="a@example.com", name="Ada")) == "Ada"
