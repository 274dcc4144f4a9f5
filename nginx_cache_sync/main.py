#!/usr/bin/env python3
"""
nginx-cache-sync - Main Entry Point

Loads configuration from the environment and runs the sync loop.

Usage:
    nginx-cache-sync                      # Run forever
    nginx-cache-sync --once               # Run a single cycle (cron)
    nginx-cache-sync --dry-run            # Print config and exit
    nginx-cache-sync --env-file my.env    # Read settings from a custom .env

Exit codes:
    0 - stopped by SIGTERM/SIGINT, dry run, or a successful --once cycle
    1 - invalid configuration, or a failed --once cycle
"""

import argparse
import signal
import sys

from . import __version__
from .common.config import DEFAULT_ENV_FILE, Settings, load_settings
from .common.exceptions import ConfigError
from .common.logging_setup import configure_logging, get_logger, log_fields
from .sync.service import CycleOutcome, SyncService

logger = get_logger("main")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="nginx-cache-sync",
        description="Clear the nginx cache when WordPress signals a purge",
    )
    parser.add_argument(
        "--env-file",
        default=DEFAULT_ENV_FILE,
        help=f"Read settings from this .env file as well (default: {DEFAULT_ENV_FILE})",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single cycle and exit",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the configuration and exit",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser.parse_args(argv)


def print_config_summary(settings: Settings) -> None:
    """Print a summary of the configuration."""
    print("\n" + "=" * 60)
    print("  NGINX CACHE SYNC")
    print("=" * 60)
    for key, value in settings.summary().items():
        print(f"  {key:<20} {value}")
    print("=" * 60 + "\n")


def setup_signal_handlers(service: SyncService) -> None:
    """
    Stop the loop gracefully on SIGTERM/SIGINT.

    The handler only flips the service's stop flag: it may run while the
    main thread is inside a logging or I/O call, so it neither logs nor
    takes locks. The stop is logged once the loop returns.
    """

    def handle_shutdown(signum, frame):
        service.stop()

    for sig in (signal.SIGTERM, signal.SIGINT):
        signal.signal(sig, handle_shutdown)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging()

    try:
        settings = load_settings(args.env_file or None)
    except ConfigError as e:
        logger.error(e.message, extra=log_fields(errors=e.errors))
        return 1

    configure_logging(settings.log_level, json_format=settings.log_format == "json")

    if args.dry_run:
        print_config_summary(settings)
        return 0

    service = SyncService(settings)
    try:
        if args.once:
            outcome = service.run_cycle()
            return 1 if outcome is CycleOutcome.FAILED else 0

        setup_signal_handlers(service)
        service.run()
        if service.stopped:
            logger.info("Received shutdown signal, exiting")
    finally:
        service.close()

    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
