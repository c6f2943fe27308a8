"""CLI entry point for schemaledger."""

import argparse
import sys
from pathlib import Path
from typing import NoReturn

from loguru import logger

from .. import __version__
from ..core.config import Config
from . import commands


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="schemaledger",
        description="Apply versioned SQL migrations exactly once",
    )
    parser.add_argument(
        "-V", "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="TOML config file (default: $SCHEMALEDGER_CONFIG)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", required=False)

    apply_parser = subparsers.add_parser("apply", help="Apply pending migrations")
    commands.add_connection_arguments(apply_parser)
    apply_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List pending migrations without applying them",
    )
    apply_parser.add_argument(
        "--strict-order",
        action="store_true",
        default=None,
        help="Fail if a pending migration sorts before an applied one",
    )

    status_parser = subparsers.add_parser("status", help="Show migration status")
    commands.add_connection_arguments(status_parser)

    return parser


def configure_logging(verbose: bool) -> None:
    """Send log output to stderr at INFO, or DEBUG when verbose."""
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "INFO",
        format="<green>{time:HH:mm:ss}</green> <level>{level: <8}</level> {message}",
    )


def run(argv: list[str] | None = None) -> int:
    """Parse arguments, dispatch the command and return the exit code."""
    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = Config.from_env_or_file(args.config)

        if args.command == "apply":
            return commands.handle_apply(args, config)
        elif args.command == "status":
            return commands.handle_status(args, config)

        parser.print_help()
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def main() -> NoReturn:
    """Main entry point."""
    sys.exit(run())


if __name__ == "__main__":
    main()
