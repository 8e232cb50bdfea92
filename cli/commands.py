"""Command handler functions for CLI operations."""

from typing import Optional

from common.logging_config import get_logger
from cli.locker_client import LockerClient
from cli.models import (
    DeleteCommand,
    DownloadCommand,
    ListCommand,
    LoginCommand,
    LogoutCommand,
    SignupCommand,
    UploadCommand,
    WhoamiCommand,
)

logger = get_logger(__name__)


_client: Optional[LockerClient] = None


def get_client() -> LockerClient:
    """
    Get or create global LockerClient instance.

    Returns:
        LockerClient instance
    """
    global _client
    if _client is None:
        logger.debug("Creating new LockerClient instance")
        _client = LockerClient.from_config()
    return _client


def close_client() -> None:
    """Close the global LockerClient if one was created."""
    global _client
    if _client is not None:
        _client.close()
        _client = None


def handle_signup(cmd: SignupCommand, client: Optional[LockerClient] = None) -> str:
    """
    Handle 'signup' command.

    Args:
        cmd: SignupCommand with email, password, confirmation and optional name
        client: Optional LockerClient for dependency injection (testing)

    Returns:
        Success or error message
    """
    if client is None:
        client = get_client()
    return client.signup(cmd.name, cmd.email, cmd.password, cmd.confirm)


def handle_login(cmd: LoginCommand, client: Optional[LockerClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.login(cmd.email, cmd.password, cmd.remember)


def handle_logout(cmd: LogoutCommand, client: Optional[LockerClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.logout()


def handle_whoami(cmd: WhoamiCommand, client: Optional[LockerClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.whoami()


def handle_upload(cmd: UploadCommand, client: Optional[LockerClient] = None) -> str:
    """
    Handle 'upload' command.

    Args:
        cmd: UploadCommand with file_list and notes
        client: Optional LockerClient for dependency injection (testing)

    Returns:
        Upload results, one line per file
    """
    logger.info(f"Executing upload command: {len(cmd.file_list)} files")
    if client is None:
        client = get_client()
    result = client.upload_files(list(cmd.file_list), cmd.notes)
    logger.debug("Upload command completed")
    return result


def handle_list(cmd: ListCommand, client: Optional[LockerClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.list_files()


def handle_download(cmd: DownloadCommand, client: Optional[LockerClient] = None) -> str:
    """
    Handle 'download' command.

    Args:
        cmd: DownloadCommand with file id and optional output_path
        client: Optional LockerClient for dependency injection (testing)

    Returns:
        Success or error message
    """
    logger.info(f"Executing download command: id={cmd.file_id} output_path={cmd.output_path}")
    if client is None:
        client = get_client()
    return client.download(cmd.file_id, cmd.output_path)


def handle_delete(cmd: DeleteCommand, client: Optional[LockerClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.delete(cmd.file_id)
