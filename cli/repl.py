"""REPL with prompt_toolkit for user interaction."""

import os
import sys
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.history import InMemoryHistory

from cli.commands import (
    close_client,
    get_client,
    handle_delete,
    handle_download,
    handle_list,
    handle_login,
    handle_logout,
    handle_signup,
    handle_upload,
    handle_whoami,
)
from cli.constants import (
    COMMANDS,
    HELP_TEXT,
    LOGO,
    PROMPT_TEXT,
    STYLE,
    WELCOME_HELP,
    WELCOME_TITLE,
)
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
from cli.parser import ParseError, parse_command


def clear_screen() -> None:
    """Clear the terminal screen (cross-platform)."""
    if sys.platform == "win32":
        os.system("cls")
    else:
        os.system("clear")


def show_welcome(client: LockerClient) -> None:
    print(LOGO)
    print(WELCOME_TITLE)
    print(f"Session: {client.whoami()}")
    print(WELCOME_HELP)


def dispatch_command(cmd_obj, client: Optional[LockerClient] = None) -> str:
    """Dispatch parsed command to appropriate handler."""
    if isinstance(cmd_obj, SignupCommand):
        return handle_signup(cmd_obj, client)
    elif isinstance(cmd_obj, LoginCommand):
        return handle_login(cmd_obj, client)
    elif isinstance(cmd_obj, LogoutCommand):
        return handle_logout(cmd_obj, client)
    elif isinstance(cmd_obj, WhoamiCommand):
        return handle_whoami(cmd_obj, client)
    elif isinstance(cmd_obj, UploadCommand):
        return handle_upload(cmd_obj, client)
    elif isinstance(cmd_obj, ListCommand):
        return handle_list(cmd_obj, client)
    elif isinstance(cmd_obj, DownloadCommand):
        return handle_download(cmd_obj, client)
    elif isinstance(cmd_obj, DeleteCommand):
        return handle_delete(cmd_obj, client)
    else:
        return f"Unknown command type: {type(cmd_obj)}"


def execute_line(user_input: str, client: LockerClient) -> str:
    """
    Parse and run one command line.

    A gated command run without a session is remembered and replayed once
    a login or signup succeeds.
    """
    cmd_obj = parse_command(user_input)

    client.pending_command = user_input
    try:
        result = dispatch_command(cmd_obj, client)
    finally:
        client.pending_command = None

    if isinstance(cmd_obj, (LoginCommand, SignupCommand)) and client.session.current_identity() is not None:
        intended = client.pop_intended_command()
        if intended:
            result += f"\nResuming: {intended}\n" + execute_line(intended, client)

    return result


def repl_loop() -> None:
    """Start interactive REPL with prompt_toolkit."""
    completer = WordCompleter(COMMANDS, ignore_case=True)
    history = InMemoryHistory()
    session: PromptSession = PromptSession(
        completer=completer, history=history, style=STYLE
    )
    client = get_client()

    clear_screen()
    show_welcome(client)

    try:
        while True:
            try:
                user_input = session.prompt([("class:prompt", PROMPT_TEXT)])

                if not user_input.strip():
                    continue

                if user_input.strip() == "exit":
                    print("Goodbye!")
                    break

                if user_input.strip() == "help":
                    print(HELP_TEXT)
                    continue

                if user_input.strip() == "clear":
                    clear_screen()
                    show_welcome(client)
                    continue

                print(execute_line(user_input, client))

            except ParseError as e:
                print(f"Error: {e}")
            except KeyboardInterrupt:
                continue
            except EOFError:
                print("\nGoodbye!")
                break
    finally:
        close_client()
