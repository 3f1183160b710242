#!/usr/bin/env python3
"""
Gyazo Command-Line Client

A small front end for the gyazo package: authorize with OAuth2, check the
caller identity, upload images (with an access token or a device ID), list
and delete uploaded images.

Credentials are read from the environment or a .env file:
    GYAZO_ACCESS_TOKEN, GYAZO_DEVICE_ID,
    GYAZO_CLIENT_ID, GYAZO_CLIENT_SECRET, GYAZO_REDIRECT_URL

Usage:
    uv run main.py auth
    uv run main.py upload screenshot.png --public
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

import requests
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

from gyazo.auth import HTTPAuthorizeConf, OAuth2Config, authorize_by_http
from gyazo.config import GyazoConfig
from gyazo.errors import GyazoError
from gyazo.models import UploadMetadata
from gyazo.uploaders import DeviceIDUploader, Oauth2Client, Uploader

# Load environment variables from .env file
_ = load_dotenv()

# Initialize Rich console for output
console = Console()


class MissingCredentialError(Exception):
    """Raised when a command needs a credential that was not supplied."""
    pass


def configure_logging(verbose: bool) -> None:
    """Route library logging through Rich.

    Args:
        verbose: Show DEBUG records (HTTP requests) when True
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def require(value: str | None, env_name: str, flag: str) -> str:
    """Return a credential or explain where to set it.

    Args:
        value: Value from the command line or environment
        env_name: Environment variable that can hold the value
        flag: Command-line flag that can hold the value

    Returns:
        The non-empty value

    Raises:
        MissingCredentialError: If value is empty
    """
    if not value:
        raise MissingCredentialError(
            f"{env_name} is not set. Pass {flag} or add {env_name}=... to your .env file."
        )
    return value


def access_token(args: argparse.Namespace) -> str:
    token: str | None = getattr(args, "token", None) or os.getenv("GYAZO_ACCESS_TOKEN")
    return require(token, "GYAZO_ACCESS_TOKEN", "--token")


def cmd_auth(args: argparse.Namespace, config: GyazoConfig) -> int:
    """Run the OAuth2 flow and print the issued access token."""
    client_id = require(args.client_id or os.getenv("GYAZO_CLIENT_ID"), "GYAZO_CLIENT_ID", "--client-id")
    client_secret = require(
        args.client_secret or os.getenv("GYAZO_CLIENT_SECRET"), "GYAZO_CLIENT_SECRET", "--client-secret"
    )
    redirect_url: str = (
        args.redirect_url
        or os.getenv("GYAZO_REDIRECT_URL")
        or f"http://localhost:{args.port}{args.path}"
    )

    conf = OAuth2Config.for_gyazo(client_id, client_secret, redirect_url, config)
    token = authorize_by_http(
        conf,
        HTTPAuthorizeConf(path=args.path, port=args.port),
        timeout=args.timeout,
    )
    console.print("[green]✓[/green] Authorized")
    console.print(f"GYAZO_ACCESS_TOKEN={token.access_token}")
    return 0


def cmd_me(args: argparse.Namespace, config: GyazoConfig) -> int:
    """Print the account that owns the access token."""
    with Oauth2Client(access_token(args), config) as client:
        user = client.get_caller_identity()
    console.print(f"[green]✓[/green] Logged in as '{user.name}' (UID: {user.uid})")
    if user.email:
        console.print(f"[blue]Email:[/blue] {user.email}")
    return 0


def build_uploader(args: argparse.Namespace, config: GyazoConfig) -> Uploader:
    """Pick the uploader for the supplied credential.

    An explicit --device-id wins; otherwise an access token is preferred
    over GYAZO_DEVICE_ID from the environment.
    """
    if args.device_id:
        return DeviceIDUploader(args.device_id, config)
    token: str | None = args.token or os.getenv("GYAZO_ACCESS_TOKEN")
    if token:
        return Oauth2Client(token, config)
    device_id = require(os.getenv("GYAZO_DEVICE_ID"), "GYAZO_ACCESS_TOKEN or GYAZO_DEVICE_ID", "--token")
    return DeviceIDUploader(device_id, config)


def cmd_upload(args: argparse.Namespace, config: GyazoConfig) -> int:
    """Upload one image file."""
    image_path: Path = args.image
    if not image_path.is_file():
        console.print(f"[red]Error: File does not exist: {image_path}[/red]")
        return 1

    metadata = UploadMetadata(
        is_public=args.public,
        created_at=args.created_at,
        referer_url=args.referer_url or "",
        title=args.title or "",
        desc=args.desc or "",
        collection_id=args.collection_id or "",
        app=args.app or "",
    )
    uploader = build_uploader(args, config)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        task_id = progress.add_task(f"Uploading {image_path.name}...", total=None)

        def on_progress(sent: int, total: int) -> None:
            progress.update(task_id, completed=sent, total=total)

        try:
            with image_path.open("rb") as image:
                result = uploader.upload(image, metadata, progress_callback=on_progress)
        finally:
            if isinstance(uploader, Oauth2Client):
                uploader.close()

    console.print(f"[green]✓[/green] Uploaded {image_path.name}")
    console.print(f"[blue]Permalink:[/blue] {result.permalink_url}")
    if result.url:
        console.print(f"[blue]Image URL:[/blue] {result.url}")
    if result.device_id:
        console.print(f"[dim]GYAZO_DEVICE_ID={result.device_id}[/dim]")
    return 0


def cmd_list(args: argparse.Namespace, config: GyazoConfig) -> int:
    """Print one page of images as a table."""
    with Oauth2Client(access_token(args), config) as client:
        page = client.list(args.page, args.per_page)

    table = Table(title=f"Images (page {page.current_page}, {page.total_count} total)")
    table.add_column("ID", style="cyan")
    table.add_column("Type")
    table.add_column("Created")
    table.add_column("Title")
    table.add_column("Permalink", style="green")
    for image in page.images:
        title = image.metadata.title if image.metadata else ""
        table.add_row(image.image_id, image.type, image.created_at, title, image.permalink_url)

    console.print(table)
    return 0


def cmd_delete(args: argparse.Namespace, config: GyazoConfig) -> int:
    """Delete one image."""
    with Oauth2Client(access_token(args), config) as client:
        deleted = client.delete(args.image_id)
    console.print(f"[green]✓[/green] Deleted {deleted.image_id} ({deleted.type})")
    return 0


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Arguments to parse, defaults to sys.argv

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        description="Upload and manage images on Gyazo",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  uv run main.py auth --port 3000            # Authorize and print an access token
  uv run main.py me                          # Show the token's owner
  uv run main.py upload shot.png --public    # Upload an image
  uv run main.py list --page 2 --per-page 50 # List uploaded images
  uv run main.py delete 8980c52421e452ac3355ca3e5cfe7a0c
        """
    )

    _ = parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log HTTP requests for debugging"
    )

    _ = parser.add_argument(
        "--token",
        help="OAuth2 access token (default: $GYAZO_ACCESS_TOKEN)"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    auth = subparsers.add_parser("auth", help="Authorize with OAuth2 and print an access token")
    _ = auth.add_argument("--client-id", help="OAuth2 client ID (default: $GYAZO_CLIENT_ID)")
    _ = auth.add_argument("--client-secret", help="OAuth2 client secret (default: $GYAZO_CLIENT_SECRET)")
    _ = auth.add_argument("--redirect-url", help="Registered redirect URL (default: $GYAZO_REDIRECT_URL)")
    _ = auth.add_argument("--port", type=int, default=3000, help="Callback listener port (default: 3000)")
    _ = auth.add_argument("--path", default="/", help="Callback path (default: /)")
    _ = auth.add_argument("--timeout", type=float, default=None, help="Seconds to wait for the redirect")
    auth.set_defaults(handler=cmd_auth)

    me = subparsers.add_parser("me", help="Show the user that owns the access token")
    me.set_defaults(handler=cmd_me)

    upload = subparsers.add_parser("upload", help="Upload an image")
    _ = upload.add_argument("image", type=Path, help="Image file to upload")
    _ = upload.add_argument("--device-id", help="Upload with a device ID instead of an access token")
    _ = upload.add_argument("--public", action="store_true", help="Make the image metadata public")
    _ = upload.add_argument("--referer-url", help="Page the image was captured from")
    _ = upload.add_argument("--app", help="Application the image was captured from")
    _ = upload.add_argument("--title", help="Title of the captured page")
    _ = upload.add_argument("--desc", help="Description")
    _ = upload.add_argument("--created-at", type=int, help="Capture time as a unix timestamp")
    _ = upload.add_argument("--collection-id", help="Collection to add the image to")
    upload.set_defaults(handler=cmd_upload)

    list_parser = subparsers.add_parser("list", help="List uploaded images")
    _ = list_parser.add_argument("--page", type=int, default=1, help="Page number (default: 1)")
    _ = list_parser.add_argument("--per-page", type=int, default=20, help="Images per page, 1-100 (default: 20)")
    list_parser.set_defaults(handler=cmd_list)

    delete = subparsers.add_parser("delete", help="Delete an image")
    _ = delete.add_argument("image_id", help="ID of the image to delete")
    delete.set_defaults(handler=cmd_delete)

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the Gyazo client.

    Returns:
        Process exit status
    """
    args = parse_arguments(argv)
    verbose_mode: bool = getattr(args, "verbose", False)
    configure_logging(verbose_mode)

    try:
        config = GyazoConfig.from_env()
        return args.handler(args, config)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user.[/yellow]")
        return 1
    except MissingCredentialError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1
    except (GyazoError, ValueError, requests.exceptions.RequestException, OSError) as e:
        console.print(f"[red]Error: {e}[/red]")
        if verbose_mode:
            import traceback
            console.print(f"[dim]{traceback.format_exc()}[/dim]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
