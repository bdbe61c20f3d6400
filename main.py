"""CLI entrypoint for the availability_date supplemental feed generator."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import asdict
from pathlib import Path

from dotenv import load_dotenv

from config_store import (
    config_path_for,
    generate_secret,
    load_config,
    save_config,
    update_config,
    verify_secret,
)
from errors import FeedError
from models import RunConfig
from pipeline import format_summary, run_pipeline

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_FORBIDDEN = 3

MAX_DAYS_OFFSET = 365


def _days_offset(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not an integer: {raw!r}") from exc
    if not 0 <= value <= MAX_DAYS_OFFSET:
        raise argparse.ArgumentTypeError(f"must be between 0 and {MAX_DAYS_OFFSET}")
    return value


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with its run / test-run / config commands."""
    overrides = argparse.ArgumentParser(add_help=False)
    overrides.add_argument("--source", dest="source_location", help="Source feed URL or path (XML or CSV)")
    overrides.add_argument("--target", dest="target_location", help="Path of the supplemental feed to write")
    overrides.add_argument(
        "--days-offset",
        type=_days_offset,
        help="availability_date = now + N days (UTC), 0-365",
    )
    overrides.add_argument("--shop-url", dest="shop_base_url", help="Shop URL used as the channel <link>")
    overrides.add_argument("--regen-secret", action="store_true", help="Generate a new cron secret")

    parser = argparse.ArgumentParser(
        description="Generate a Google Shopping supplemental feed with availability_date for products not in stock",
    )
    parser.add_argument("--config", default=None, help="Config file (default: $FEED_CONFIG_PATH or availability_config.json)")
    commands = parser.add_subparsers(dest="command", required=True)

    run_cmd = commands.add_parser("run", help="Unattended run (cron); requires the configured secret")
    run_cmd.add_argument("--secret", default=os.getenv("FEED_CRON_SECRET"), help="Cron secret token")

    commands.add_parser(
        "test-run",
        parents=[overrides],
        help="Save any given settings, then generate the feed now",
    )

    config_cmd = commands.add_parser("config", help="Show or change the stored configuration")
    config_actions = config_cmd.add_subparsers(dest="action", required=True)
    config_actions.add_parser("show", help="Print the current configuration")
    config_actions.add_parser("set", parents=[overrides], help="Update and save the configuration")

    return parser


def apply_overrides(config: RunConfig, args: argparse.Namespace) -> RunConfig:
    """Merge CLI settings into ``config`` the way the settings form does."""
    config = update_config(
        config,
        source_location=args.source_location,
        target_location=args.target_location,
        days_offset=args.days_offset,
        shop_base_url=args.shop_base_url,
    )
    if args.regen_secret:
        config = update_config(config, cron_secret=generate_secret())
    return config


def cron_command(config: RunConfig) -> str:
    return (
        f"0 5 * * * {sys.executable} {os.path.abspath(__file__)} run --secret {config.cron_secret}"
        " >> /var/log/availability_feed.log 2>&1"
    )


def run_unattended(config: RunConfig, secret: str | None) -> int:
    """Cron entry: check the secret, run, print plain text."""
    if not verify_secret(config, secret):
        logging.warning("Rejected unattended run: invalid secret")
        print("Error: Invalid secret token.", file=sys.stderr)
        return EXIT_FORBIDDEN

    try:
        result = run_pipeline(config)
    except FeedError as exc:
        logging.error("Unattended run failed: %s", exc)
        print(str(exc), file=sys.stderr)
        return EXIT_FAILED

    print(format_summary(result))
    return EXIT_OK


def run_interactive(config: RunConfig) -> int:
    """Manual test run: same pipeline, result wrapped in a status line."""
    try:
        result = run_pipeline(config)
    except FeedError as exc:
        print(f"Test run finished: {exc}")
        return EXIT_FAILED

    print(f"Test run finished: {format_summary(result)}")
    return EXIT_OK


def store_config(config: RunConfig, config_path: Path) -> bool:
    """Save ``config``; on failure print a plain-text error and return False."""
    try:
        save_config(config, config_path)
    except OSError as exc:
        logging.error("Saving configuration to %s failed: %s", config_path, exc)
        print(f"Error: Could not save configuration: {exc}", file=sys.stderr)
        return False
    return True


def main(argv: list[str] | None = None) -> int:
    """Initialize config and dispatch the requested command."""
    load_dotenv()
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(message)s",
    )
    args = build_parser().parse_args(argv)
    config_path = config_path_for(args.config)
    config = load_config(config_path)

    if args.command == "run":
        return run_unattended(config, args.secret)

    if args.command == "test-run":
        config = apply_overrides(config, args)
        if not store_config(config, config_path):
            return EXIT_FAILED
        return run_interactive(config)

    if args.action == "set":
        config = apply_overrides(config, args)
        if not store_config(config, config_path):
            return EXIT_FAILED
        print("Configuration saved.")
        return EXIT_OK

    print(json.dumps(asdict(config), indent=4))
    print(f"Cron: {cron_command(config)}")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
