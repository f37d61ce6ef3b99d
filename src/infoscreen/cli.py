"""Command line interface.

Usage:
    # Run the server (default)
    infoscreen

    # Generate missing or stale thumbnails
    infoscreen thumbnails

    # Regenerate every thumbnail, then drop orphans
    infoscreen thumbnails --force

    # Only remove thumbnails whose image is gone
    infoscreen thumbnails --cleanup
"""

import argparse
import sys
import time

from .config import Settings, get_settings
from .logging_config import configure_logging


def create_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="infoscreen",
        description="Info screen slideshow server",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP and WebSocket server")
    serve_parser.add_argument("--host", help="Bind address (overrides INFOSCREEN_HOST)")
    serve_parser.add_argument("--port", type=int, help="Bind port (overrides INFOSCREEN_PORT)")

    thumbs_parser = subparsers.add_parser("thumbnails", help="Batch thumbnail generation")
    mode = thumbs_parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--force",
        "-f",
        action="store_true",
        help="Regenerate all thumbnails, even up-to-date ones",
    )
    mode.add_argument(
        "--cleanup",
        "-c",
        action="store_true",
        help="Only remove orphaned thumbnails",
    )

    return parser


def run_thumbnails(settings: Settings, force: bool = False, cleanup_only: bool = False) -> int:
    """
    Run batch thumbnail generation and print a summary.

    Args:
        settings: Application settings.
        force: Regenerate thumbnails that are already up to date.
        cleanup_only: Skip generation and only remove orphans.

    Returns:
        Process exit code, 1 if any thumbnail failed.
    """
    # Import here to avoid loading Pillow for the server command
    from .services.thumbnail_service import ThumbnailService

    service = ThumbnailService(settings)
    started = time.monotonic()

    if cleanup_only:
        removed = service.cleanup_orphans()
        print(f"Removed {removed} orphaned thumbnail(s)")
        return 0

    stats = service.generate_all(force=force)
    stats.removed = service.cleanup_orphans()
    duration = time.monotonic() - started

    print("Summary:")
    print(f"  Total images:    {stats.total}")
    print(f"  Processed:       {stats.processed}")
    print(f"  Skipped (fresh): {stats.skipped}")
    print(f"  Failed:          {stats.failed}")
    print(f"  Orphans removed: {stats.removed}")
    print(f"  Time:            {duration:.1f}s")

    return 1 if stats.failed else 0


def run_server(settings: Settings, host: str | None = None, port: int | None = None) -> None:
    """Run the application under uvicorn."""
    import uvicorn

    uvicorn.run(
        "infoscreen.main:app",
        host=host or settings.host,
        port=port or settings.port,
        log_config=None,
    )


def main(argv: list[str] | None = None) -> None:
    """Entry point for the info screen CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)
    settings = get_settings()

    if args.command == "thumbnails":
        configure_logging(settings.log_level)
        sys.exit(run_thumbnails(settings, force=args.force, cleanup_only=args.cleanup))
    elif args.command == "serve":
        run_server(settings, host=args.host, port=args.port)
    elif args.command is None:
        run_server(settings)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
