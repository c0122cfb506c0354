"""Command-line interface for redirector."""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

import aiohttp
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from . import __version__
from .errors import RedirectError
from .http import AiohttpTransport, RedirectingClient
from .logging_config import level_for, setup_logging
from .models.config import RedirectConfig
from .models.events import EventType, RedirectEvent
from .models.messages import Request


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="redirector",
        description="Follow the redirect chain of a URL and show every hop",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Follow redirects with default settings
  redirector http://example.com/old

  # Allow at most 2 redirects and send Referer headers
  redirector http://example.com/old --max 2 --referer

  # Only allow https targets and show the visited URIs
  redirector https://example.com --protocol https --history

  # Keep POST on 301/302
  redirector http://example.com/form -X POST -d 'a=b' --strict
        """,
    )

    parser.add_argument(
        "url",
        nargs="?",
        help="URL to request",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    # Request
    request_group = parser.add_argument_group("request")
    request_group.add_argument(
        "--method",
        "-X",
        default="GET",
        help="HTTP method (default: GET)",
    )
    request_group.add_argument(
        "--header",
        "-H",
        action="append",
        default=[],
        metavar="NAME:VALUE",
        help="Extra request header (repeatable)",
    )
    request_group.add_argument(
        "--data",
        "-d",
        default=None,
        help="Request body",
    )
    request_group.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        metavar="SECONDS",
        help="Per-hop timeout (default: 30)",
    )

    # Redirect policy
    redirect_group = parser.add_argument_group("redirect policy")
    redirect_group.add_argument(
        "--config",
        type=Path,
        default=None,
        metavar="FILE",
        help="YAML file with redirect options",
    )
    redirect_group.add_argument(
        "--max",
        type=int,
        default=None,
        help="Maximum redirects to follow (default: 5)",
    )
    redirect_group.add_argument(
        "--strict",
        action="store_true",
        help="Keep method and body on 301/302",
    )
    redirect_group.add_argument(
        "--referer",
        action="store_true",
        help="Send a Referer header on redirects",
    )
    redirect_group.add_argument(
        "--protocol",
        action="append",
        default=None,
        metavar="SCHEME",
        help="Allowed redirect scheme (repeatable, default: http and https)",
    )
    redirect_group.add_argument(
        "--history",
        action="store_true",
        help="Print the redirect history of the final response",
    )
    redirect_group.add_argument(
        "--no-follow",
        action="store_true",
        help="Do not follow redirects",
    )

    # Output control
    output_group = parser.add_argument_group("output control")
    output_group.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Verbose output",
    )
    output_group.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Suppress output",
    )

    return parser


def parse_headers(values: list[str]) -> list[tuple[str, str]]:
    """
    Parse ``NAME:VALUE`` header arguments.

    Raises:
        ValueError: If an argument has no colon or an empty name
    """
    headers = []
    for value in values:
        name, sep, header_value = value.partition(":")
        if not sep or not name.strip():
            raise ValueError(f"Invalid header {value!r}, expected NAME:VALUE")
        headers.append((name.strip(), header_value.strip()))
    return headers


def build_config(args: argparse.Namespace) -> Optional[RedirectConfig]:
    """Build the redirect config from a YAML file and command-line overrides."""
    if args.no_follow:
        return None

    config_kwargs: dict = {}
    if args.config:
        config_kwargs = RedirectConfig.from_yaml_file(args.config).model_dump()

    if args.max is not None:
        config_kwargs["max"] = args.max
    if args.strict:
        config_kwargs["strict"] = True
    if args.referer:
        config_kwargs["referer"] = True
    if args.protocol:
        config_kwargs["protocols"] = args.protocol
    if args.history:
        config_kwargs["track_history"] = True

    return RedirectConfig(**config_kwargs)


def run_chain(args: argparse.Namespace) -> int:
    """Follow the redirect chain for the given arguments."""
    console = Console()

    if not args.url:
        console.print("[red]Error:[/red] Please provide a URL")
        return 1

    setup_logging(level_for(args.verbose, args.quiet), force=True)

    try:
        config = build_config(args)
        request = Request.build(args.method, args.url, headers=parse_headers(args.header), body=args.data)
    except (ValidationError, ValueError, OSError) as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        return 1

    table = Table(title=f"{request.method} {request.url}")
    table.add_column("Hop", justify="right")
    table.add_column("Status")
    table.add_column("From")
    table.add_column("To")

    def on_event(event: RedirectEvent) -> None:
        if event.type == EventType.REDIRECT_FOLLOWED:
            table.add_row(str(event.hop), str(event.status_code), event.url or "", event.target or "")
        elif event.type == EventType.REDIRECT_REFUSED:
            table.add_row(str(event.hop), f"[red]{event.status_code}[/red]", event.url or "", f"[red]{event.error}[/red]")

    async def run() -> int:
        try:
            async with AiohttpTransport(default_timeout=args.timeout) as transport:
                client = RedirectingClient(transport, redirects=config if config is not None else False, emit=on_event)
                response = await client.send(request)
        except RedirectError as e:
            if not args.quiet:
                console.print(table)
            console.print(f"[red]Redirect refused:[/red] {e}")
            return 1
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            console.print(f"[red]Error:[/red] {e}")
            if args.verbose:
                import traceback

                traceback.print_exc()
            return 1

        if not args.quiet:
            if table.row_count:
                console.print(table)
            console.print(f"[bold]Final:[/bold] {response.status_code} {response.url}")
            if args.history and response.redirect_history:
                console.print("[bold]History:[/bold]")
                for status, uri in zip(response.redirect_status_history, response.redirect_history):
                    console.print(f"  {status} -> {uri}")

        return 0

    return asyncio.run(run())


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    return run_chain(args)


if __name__ == "__main__":
    sys.exit(main())
