"""Custom exception classes for the file locker."""


class LockerException(Exception):
    """
    Base exception class for all locker errors.
    """
    pass


class StoreUnavailableError(LockerException):
    """
    Raised when the local database cannot be opened.
    """
    pass


class WriteFailedError(LockerException):
    """
    Raised when a write transaction is aborted.
    """
    pass


class ReadFailedError(LockerException):
    """
    Raised when a read transaction fails.
    """
    pass


class InvalidCredentialsError(LockerException):
    """
    Raised when login credentials are invalid.
    """
    pass


class AccountAlreadyExistsError(LockerException):
    """
    Raised when registering an email that already exists.
    """
    pass


class SignupValidationError(LockerException):
    """
    Raised when signup input is rejected.

    The reason attribute is one of MISSING_FIELDS, PASSWORD_MISMATCH or ALREADY_EXISTS.
    """

    MISSING_FIELDS = "missing_fields"
    PASSWORD_MISMATCH = "password_mismatch"
    ALREADY_EXISTS = "already_exists"

    def __init__(self, reason: str, message: str):
        super().__init__(message)
        self.reason = reason


class IdentityRequiredError(LockerException):
    """
    Raised when a gated operation runs without a logged-in identity.
    """
    pass


class DownloadHandleError(LockerException):
    """
    Raised when a download handle is unknown or has been revoked.
    """
    pass
