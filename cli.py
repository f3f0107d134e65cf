"""Lightweight CLI for market admin maintenance.

Usage:
    mkadmin ping            # check that the backend API answers
    mkadmin ping -v         # same, with request logs
    mkadmin log-level       # print the log level in settings.toml
    mkadmin log-level DEBUG # set log level in settings.toml
"""

import argparse
import logging
import re
import sys
from time import perf_counter

from settings_service import SETTINGS_PATH, _load_settings, clear_settings_cache

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def cmd_ping(args: argparse.Namespace) -> int:
    """Fetch the region list to check the backend is reachable."""
    if not args.verbose:
        # Suppress library logs before repository imports set up handlers
        logging.disable(logging.INFO)

    from config import get_api_config
    from repositories.base import ApiError
    from repositories.region_repo import RegionRepository

    api = get_api_config()
    print(f"pinging {api.base_url} …", end=" ", flush=True)
    t0 = perf_counter()
    try:
        regions = RegionRepository(api).get_all_regions(use_cache=False, fallback=False)
    except ApiError as e:
        elapsed = round((perf_counter() - t0) * 1000)
        print(f"error ({elapsed} ms): {e}")
        return 1

    elapsed = round((perf_counter() - t0) * 1000)
    print(f"ok ({elapsed} ms, {len(regions)} regions)")
    return 0


def cmd_log_level(args: argparse.Namespace) -> int:
    """Get or set the log level in settings.toml."""
    settings = _load_settings()
    current = settings["env"]["log_level"]

    if args.level is None:
        print(current)
        return 0

    level = args.level.upper()
    if level not in VALID_LOG_LEVELS:
        print(f"invalid level: {args.level} (expected one of {', '.join(VALID_LOG_LEVELS)})")
        return 1

    if level == current:
        print(f"already {level}")
        return 0

    content = SETTINGS_PATH.read_text()
    updated = re.sub(
        r'(log_level\s*=\s*)"[^"]*"',
        rf'\1"{level}"',
        content,
    )
    SETTINGS_PATH.write_text(updated)
    clear_settings_cache()
    print(f"{current} → {level}")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="mkadmin", description="market admin CLI tools")
    sub = parser.add_subparsers(dest="command")

    ping_parser = sub.add_parser("ping", help="Check that the backend API is reachable")
    ping_parser.add_argument("-v", "--verbose", action="store_true", help="Show request logs")

    ll_parser = sub.add_parser("log-level", help="Get or set the log level in settings.toml")
    ll_parser.add_argument("level", nargs="?", default=None, help="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")

    args = parser.parse_args(argv)

    if args.command == "ping":
        return cmd_ping(args)
    if args.command == "log-level":
        return cmd_log_level(args)

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
