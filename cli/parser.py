"""Command parser for CLI input."""

import shlex

from cli.models import (
    CommandRequest,
    DeleteCommand,
    DownloadCommand,
    ListCommand,
    LoginCommand,
    LogoutCommand,
    SignupCommand,
    UploadCommand,
    WhoamiCommand,
)


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a CommandRequest object.

    Args:
        input_line: Raw user input from REPL

    Returns:
        CommandRequest object

    Raises:
        ParseError: If command syntax is invalid
    """
    if not input_line.strip():
        raise ParseError("Empty command")

    try:
        tokens = shlex.split(input_line)
    except ValueError as e:
        raise ParseError(f"Invalid syntax: {e}")

    if not tokens:
        raise ParseError("Empty command")

    command_name = tokens[0]
    args = tokens[1:]

    if command_name == "signup":
        return _parse_signup(args)
    elif command_name == "login":
        return _parse_login(args)
    elif command_name == "logout":
        _expect_no_args(command_name, args)
        return LogoutCommand()
    elif command_name == "whoami":
        _expect_no_args(command_name, args)
        return WhoamiCommand()
    elif command_name == "upload":
        return _parse_upload(args)
    elif command_name == "list":
        _expect_no_args(command_name, args)
        return ListCommand()
    elif command_name == "download":
        return _parse_download(args)
    elif command_name == "delete":
        return _parse_delete(args)
    else:
        raise ParseError(f"Unknown command: {command_name}")


def _expect_no_args(command_name: str, args: list[str]) -> None:
    if args:
        raise ParseError(f"{command_name} takes no arguments")


def _parse_id(value: str) -> int:
    try:
        file_id = int(value)
    except ValueError:
        raise ParseError(f"Invalid file id: {value}")
    if file_id <= 0:
        raise ParseError(f"Invalid file id: {value}")
    return file_id


def _parse_signup(args: list[str]) -> SignupCommand:
    """Parse 'signup <email> <password> <confirm> [name...]' command."""
    if len(args) < 3:
        raise ParseError("signup requires <email> <password> <confirm> [name]")

    email, password, confirm = args[:3]
    return SignupCommand(email=email, password=password, confirm=confirm, name=" ".join(args[3:]))


def _parse_login(args: list[str]) -> LoginCommand:
    """Parse 'login <email> <password> [--remember]' command."""
    remember = "--remember" in args
    positional = [arg for arg in args if arg != "--remember"]
    if len(positional) != 2:
        raise ParseError("login requires exactly 2 arguments: <email> <password> [--remember]")

    email, password = positional
    return LoginCommand(email=email, password=password, remember=remember)


def _parse_upload(args: list[str]) -> UploadCommand:
    """Parse 'upload <path...> [--notes text]' command."""
    file_list = []
    notes = ""
    i = 0
    while i < len(args):
        if args[i] == "--notes":
            if i + 1 >= len(args):
                raise ParseError("--notes requires a value")
            notes = args[i + 1]
            i += 2
            continue
        file_list.append(args[i])
        i += 1

    if not file_list:
        raise ParseError("Please select at least one file.")

    return UploadCommand(file_list=tuple(file_list), notes=notes)


def _parse_download(args: list[str]) -> DownloadCommand:
    """Parse 'download <id> [output_path]' command."""
    if not 1 <= len(args) <= 2:
        raise ParseError("download requires <id> [output_path]")

    output_path = args[1] if len(args) > 1 else None
    return DownloadCommand(file_id=_parse_id(args[0]), output_path=output_path)


def _parse_delete(args: list[str]) -> DeleteCommand:
    """Parse 'delete <id>' command."""
    if len(args) != 1:
        raise ParseError("delete requires exactly 1 argument: <id>")

    return DeleteCommand(file_id=_parse_id(args[0]))
