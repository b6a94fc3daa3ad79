"""Command line entry point for updating a server file."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from app.version import get_app_version
from services.server_update import (
    LATEST_VERSION,
    ConfigurationError,
    create_default_registry,
    run_update,
    update_project,
)
from services.server_update.http import configure_http
from shared.logging_config import LogVerbosity, ensure_app_logging, set_file_log_verbosity


_LOGGER = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Download the latest build of a server jar.")
    parser.add_argument("project", nargs="?", help="Provider name, e.g. 'paper' or 'bungeecord'.")
    parser.add_argument(
        "--version",
        default=LATEST_VERSION,
        help="Version to install; '%(default)s' picks the provider's latest.",
    )
    parser.add_argument("--output", type=Path, default=None, help="Server file to update.")
    parser.add_argument(
        "--working-directory",
        type=Path,
        default=Path("."),
        help="Directory holding the checksum file.",
    )
    parser.add_argument(
        "--checksum-file",
        default=None,
        help="Checksum file name, relative to the working directory.",
    )
    parser.add_argument(
        "--check-only",
        action="store_true",
        help="Report whether an update is available without downloading it.",
    )
    parser.add_argument("--user-agent", default=None, help="User-Agent header sent with every request.")
    parser.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds.")
    parser.add_argument("--list-providers", action="store_true", help="List provider names and exit.")
    parser.add_argument("--verbose", action="store_true", help="Print progress details.")
    parser.add_argument("--app-version", action="version", version=get_app_version())
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    ensure_app_logging(logging.DEBUG if args.verbose else logging.INFO)
    if args.verbose:
        set_file_log_verbosity(LogVerbosity.VERBOSE)

    configure_http(user_agent=args.user_agent, timeout=args.timeout)
    registry = create_default_registry()
    if args.list_providers:
        for name in sorted(registry.names()):
            print(name)
        return 0
    if not args.project:
        print("A project name is required (see --list-providers).", file=sys.stderr)
        return 2

    builder = (
        update_project(args.project)
        .version(args.version)
        .working_directory(args.working_directory)
        .checksum_file(args.checksum_file)
        .check_only(args.check_only)
    )
    if args.output is not None:
        builder.output_file(args.output)
    if args.verbose:
        builder.diagnostics(print)

    try:
        config = builder.build()
    except ConfigurationError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    _LOGGER.info("Updating %s (version %s) into %s", config.project, config.version, config.output_file)
    outcome = run_update(config, registry)
    print(f"{outcome.status.name}: {outcome.message}")
    return 0 if outcome.is_success else 1


if __name__ == "__main__":
    raise SystemExit(main())
