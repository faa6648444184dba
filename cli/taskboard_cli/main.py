"""Main entry point for the taskboard CLI."""
from __future__ import annotations

import asyncio
import logging
import sys

from taskboard.client.settings import settings

from taskboard_cli import __version__
from taskboard_cli.config import Config
from taskboard_cli.repl import Repl


def print_help():
    """Print help message."""
    print(f"""
taskboard CLI v{__version__}

Usage:
  taskboard [options] [command]

Commands:
  login --token T   Store an access token for the current API URL
                    (with --api-url, also make that URL the default)
  logout            Clear the token for the current API URL

Options:
  --api-url URL     Override API endpoint (default: http://localhost:4000)
  --board ID        Open the REPL on a board (remembered as default)
  --all             With logout: clear every environment
  -h, --help        Show this help
  -v, --version     Show version

Environment:
  TASKBOARD_API_URL       Override API endpoint (same as --api-url)
  TASKBOARD_WS_URL        Override live-update endpoint
  TASKBOARD_LOG_LEVEL     Logging level (default WARNING)
""")


def parse_args(args: list[str]) -> dict:
    """
    Parse command line arguments.

    Returns dict with:
        command: str | None (login, logout, None for REPL)
        api_url: str | None
        board_id: str | None
        token: str | None
        logout_all: bool
        show_help: bool
        show_version: bool
    """
    result = {
        "command": None,
        "api_url": None,
        "board_id": None,
        "token": None,
        "logout_all": False,
        "show_help": False,
        "show_version": False,
    }

    valued = {"--api-url": "api_url", "--board": "board_id", "--token": "token"}

    i = 0
    while i < len(args):
        arg = args[i]

        if arg in ("login", "logout"):
            result["command"] = arg
        elif arg in valued:
            if i + 1 < len(args):
                result[valued[arg]] = args[i + 1]
                i += 1
            else:
                print(f"Error: {arg} requires a value")
                sys.exit(1)
        elif arg == "--all":
            result["logout_all"] = True
        elif arg in ("--help", "-h"):
            result["show_help"] = True
        elif arg in ("--version", "-v"):
            result["show_version"] = True
        elif arg.startswith("-"):
            print(f"Unknown option: {arg}")
            print("Run 'taskboard --help' for usage.")
            sys.exit(1)
        else:
            print(f"Unknown command: {arg}")
            print("Run 'taskboard --help' for usage.")
            sys.exit(1)

        i += 1

    return result


def login(config: Config, token: str | None, remember_url: bool = False) -> bool:
    """Store the token. With --api-url, that server also becomes the default."""
    if not token:
        print("Usage: taskboard login --token <token>")
        return False
    config.token = token
    if remember_url:
        config.default_url = config.api_url
        print(f"Default API URL set to {config.api_url}")
    print(f"Token saved for {config.api_url} in {config.config_file}")
    return True


def logout(config: Config, logout_all: bool = False) -> bool:
    if logout_all:
        for env in config.list_environments():
            print(f"  Logging out of {env['url']}")
        config.clear_all()
        print("Logged out of all environments.")
        return True

    if not config.is_authenticated:
        print(f"Not logged in to {config.api_url}")
        return False

    config.clear_environment()
    print(f"Logged out of {config.api_url}")
    return True


def main():
    """Main entry point."""
    args = parse_args(sys.argv[1:])

    if args["show_help"]:
        print_help()
        return

    if args["show_version"]:
        print(f"taskboard {__version__}")
        return

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = Config(api_url_override=args["api_url"])

    if args["command"] == "login":
        sys.exit(0 if login(config, args["token"], remember_url=bool(args["api_url"])) else 1)

    elif args["command"] == "logout":
        sys.exit(0 if logout(config, logout_all=args["logout_all"]) else 1)

    if not config.is_authenticated:
        print(f"Not authenticated to {config.api_url}")
        print("Run 'taskboard login --token <token>' first.")
        sys.exit(1)

    board_id = args["board_id"] or config.default_board_id or settings.BOARD_ID
    if not board_id:
        print("No board selected. Pass --board <id>.")
        sys.exit(1)
    if args["board_id"]:
        config.default_board_id = board_id

    asyncio.run(Repl(config, board_id).start())


if __name__ == "__main__":
    main()
