"""CLI constants and configuration."""

from prompt_toolkit.styles import Style

COMMANDS = ["signup", "login", "logout", "whoami", "upload", "list", "download", "delete", "clear", "exit", "help"]

STYLE = Style.from_dict(
    {
        "prompt": "#2E86DE bold",
        "command": "#0088ff bold",
    }
)

BLUE = "\033[38;2;46;134;222m"
GREEN = "\033[32m"
RESET = "\033[0m"

LOGO = f"""{BLUE}
 _                _
| |    ___   ___ | | __ ___  _ __
| |   / _ \\ / __|| |/ // _ \\| '__|
| |__| (_) | (__ |   <|  __/| |
|_____\\___/ \\___||_|\\_\\\\___||_|
{RESET}"""

WELCOME_TITLE = "Locker - personal files stored on this machine"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "locker> "

DOWNLOADS_DIR = "downloads"

HELP_TEXT = """Available commands:
  signup <email> <password> <confirm> [name]  Create a local account and log in
  login <email> <password> [--remember]       Log in (--remember keeps you logged in across restarts)
  logout                                      Log out
  whoami                                      Show the logged-in user
  upload <path...> [--notes text]             Store files for the logged-in user
  list                                        List your files, newest first
  download <id> [output_path]                 Save a stored file (defaults to downloads/<name>)
  delete <id>                                 Delete a stored file
  clear                                       Clear screen and redisplay welcome message
  help                                        Show this help
  exit                                        Exit REPL

Examples:
  signup ada@example.com s3cret s3cret Ada Lovelace
  login ada@example.com s3cret --remember
  upload report.pdf scan.png --notes "March results"
  list
  download 3
  delete 3"""
