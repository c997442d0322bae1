"""
rbxauth command line

Logs in interactively and writes the session cookies, or logs out a stored
session.
"""

import argparse
import io
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from .client.session_client import SessionClient
from .core.config import SessionConfig, load_session_config
from .core.exceptions import (
    APIError,
    AuthError,
    InvalidArgument,
    LoginFailed,
    MalformedResponse,
    StatusError,
    TransportError,
)
from .core.types import CredentialType
from .logging_setup import setup_logging
from .prompt.stream import PromptStream
from .storage.cookie_file import CookieFileStorage, encode_cookies

logger = logging.getLogger(__name__)

console = Console(stderr=True)


def parse_args(argv: list[str] | None = None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(description="Roblox account authentication")
    parser.add_argument("--config", help="Config file path (defaults are used if omitted)")
    parser.add_argument("--log-file", type=Path, help="Write debug logs to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Login
    login_parser = subparsers.add_parser("login", help="Log in and output session cookies")
    login_parser.add_argument(
        "-i",
        dest="input",
        default="",
        help="Input stream as string. '\\n' becomes newline. Use stdin if empty.",
    )
    login_parser.add_argument(
        "-o", dest="output", default="", help="Path to output file. Write to stdout if empty."
    )
    login_parser.add_argument(
        "-t", dest="type", default="", help="Credential type. Prompt if empty."
    )
    login_parser.add_argument(
        "-u", dest="ident", default="", help="Credential identifier. Prompt if empty."
    )

    # Logout
    logout_parser = subparsers.add_parser("logout", help="Log out a stored session")
    logout_parser.add_argument("cookie_file", help="File of Set-Cookie lines from login")

    return parser.parse_args(argv)


def build_config(config_path: str | None) -> SessionConfig:
    if not config_path:
        return SessionConfig()
    return load_session_config(config_path)


def run_login(args, client: SessionClient) -> None:
    if args.input:
        reader = io.StringIO(args.input.replace("\\n", "\n"))
        stream = PromptStream(client, reader, sys.stderr)
    else:
        stream = PromptStream.standard(client)

    kind = CredentialType.parse(args.type) if args.type else None
    credential, cookies = stream.prompt_credential(kind, args.ident)
    logger.info(f"Logged in as {credential.kind.value} {credential.identifier}")

    if args.output:
        CookieFileStorage(args.output).save(cookies)
    else:
        sys.stdout.write(encode_cookies(cookies))


def run_logout(args, client: SessionClient) -> None:
    storage = CookieFileStorage(args.cookie_file)
    cookies = storage.load()
    if not cookies:
        raise InvalidArgument(f"No cookies found in {storage.path}")
    client.logout(cookies)
    console.print("[green]Logged out[/green]")


def report_error(error: Exception) -> int:
    """Render an error by kind, returns the exit code"""
    message = escape(str(error))
    if isinstance(error, LoginFailed):
        console.print(f"[red]Login failed:[/red] {message}")
        return 1
    if isinstance(error, APIError):
        console.print(f"[red]Request rejected by provider:[/red] {message}")
        return 1
    if isinstance(error, (TransportError, StatusError, MalformedResponse)):
        console.print(f"[red]Provider unavailable:[/red] {message}")
        return 1
    if isinstance(error, (InvalidArgument, FileNotFoundError, ValueError)):
        console.print(f"[yellow]Invalid input:[/yellow] {message}")
        return 2
    console.print(f"[red]Error:[/red] {message}")
    return 1


def main(argv: list[str] | None = None) -> int:
    """Main entry point"""
    args = parse_args(argv)
    setup_logging(args.log_file, args.verbose)

    try:
        client = SessionClient(build_config(args.config))
        if args.command == "login":
            run_login(args, client)
        elif args.command == "logout":
            run_logout(args, client)
        else:
            raise ValueError(f"Unknown command: {args.command}")
    except (AuthError, FileNotFoundError, ValueError) as e:
        logger.error(f"{args.command} failed: {e}")
        return report_error(e)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
