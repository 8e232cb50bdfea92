"""Command request data types for CLI."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class SignupCommand:
    """Register a new local account and log it in."""

    email: str
    password: str
    confirm: str
    name: str = ""
    command: Literal["signup"] = "signup"


@dataclass(frozen=True)
class LoginCommand:
    """Login with email and password."""

    email: str
    password: str
    remember: bool = False
    command: Literal["login"] = "login"


@dataclass(frozen=True)
class LogoutCommand:
    """Clear the current session."""

    command: Literal["logout"] = "logout"


@dataclass(frozen=True)
class WhoamiCommand:
    """Show the logged-in user."""

    command: Literal["whoami"] = "whoami"


@dataclass(frozen=True)
class UploadCommand:
    """Store local files for the logged-in user."""

    file_list: tuple[str, ...]
    notes: str = ""
    command: Literal["upload"] = "upload"


@dataclass(frozen=True)
class ListCommand:
    """List the logged-in user's files."""

    command: Literal["list"] = "list"


@dataclass(frozen=True)
class DownloadCommand:
    """Write a stored file back to disk."""

    file_id: int
    output_path: str | None = None
    command: Literal["download"] = "download"


@dataclass(frozen=True)
class DeleteCommand:
    """Delete a stored file by id."""

    file_id: int
    command: Literal["delete"] = "delete"


CommandRequest = (
    SignupCommand
    | LoginCommand
    | LogoutCommand
    | WhoamiCommand
    | UploadCommand
    | ListCommand
    | DownloadCommand
    | DeleteCommand
)

GATED_COMMANDS = (UploadCommand, ListCommand, DownloadCommand, DeleteCommand)
