"""Main entry point for clockrules."""

import argparse
import asyncio
import logging
import sys
from datetime import date
from getpass import getpass
from pathlib import Path

from clockrules.app import ClockRulesApp
from clockrules.clockify.debug import DEFAULT_DEBUG_DIR
from clockrules.config import DEFAULT_CONFIG_PATH, Config, RunOptions
from clockrules.database import FirstDateCache
from clockrules.errors import ClockRulesError, ConfigNotFoundError
from clockrules.log import DEFAULT_LOG_FILE, setup_logging
from clockrules.overrides import DEFAULT_SETTINGS_PATH, GlobalSettings
from clockrules.report import build_report
from clockrules.summary import print_report

logger = logging.getLogger(__name__)

EARLIEST_START_DATE = date(2023, 1, 1)
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def configure() -> Config:
    """Interactive configuration setup."""
    sys.stdout.write("ClockRules Configuration\n")
    sys.stdout.write("=" * 40 + "\n")
    token = getpass("Clockify API token: ")

    config = Config(clockify_token=token)
    config.save()
    sys.stdout.write("\n✓ Configuration saved successfully!\n")
    sys.stdout.write(f"Config file: {DEFAULT_CONFIG_PATH}\n")
    return config


def start_date(value: str) -> date:
    """Parse a YYYY-MM-DD start date no earlier than 2023-01-01."""
    try:
        parsed = date.fromisoformat(value)
    except ValueError as e:
        msg = f"invalid date {value!r}, expected YYYY-MM-DD"
        raise argparse.ArgumentTypeError(msg) from e
    if parsed < EARLIEST_START_DATE:
        msg = f"start date has to be equal or greater than {EARLIEST_START_DATE}"
        raise argparse.ArgumentTypeError(msg)
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clockrules", description="Work time balance from Clockify."
    )
    parser.add_argument(
        "command",
        nargs="?",
        choices=("run", "config", "reset-cache"),
        default="run",
        help="run the balance calculation (default), store a token, or forget cached start dates",
    )
    parser.add_argument("-t", "--token", help="Clockify API token")
    parser.add_argument(
        "-s", "--start-date", type=start_date, help="start date in the format YYYY-MM-DD"
    )
    parser.add_argument(
        "-b", "--start-balance", type=int, help="start balance in minutes, needs --start-date"
    )
    parser.add_argument(
        "-i", "--include-today", action="store_true", help="include today in calculations"
    )
    parser.add_argument(
        "--plain", action="store_true", help="print the results instead of starting the TUI"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help=f"write raw Clockify payloads to {DEFAULT_DEBUG_DIR}/",
    )
    parser.add_argument("--settings", type=Path, default=DEFAULT_SETTINGS_PATH)
    parser.add_argument("--log-file", type=Path, default=DEFAULT_LOG_FILE)
    parser.add_argument("--log-level", choices=LOG_LEVELS, default="WARNING")
    return parser


def parse_options(argv: list[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.start_balance is not None and args.start_date is None:
        parser.error("--start-balance requires --start-date")
    return args


def resolve_token(args: argparse.Namespace) -> str:
    """Token from the command line, the environment or the config file."""
    if args.token:
        return args.token
    config = Config.from_env() or Config.load()
    if not config:
        if not sys.stdin.isatty():
            msg = "Clockify API token is missing, run 'clockrules config' or pass --token"
            raise ConfigNotFoundError(msg)
        config = configure()
    return config.clockify_token


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = parse_options(argv)
    if args.command == "config":
        configure()
        return
    if args.command == "reset-cache":
        FirstDateCache().clear_all()
        sys.stdout.write("Cached start dates cleared.\n")
        return

    setup_logging(args.log_file, args.log_level)

    try:
        options = RunOptions(
            token=resolve_token(args),
            start_date=args.start_date,
            start_balance_minutes=args.start_balance,
            include_today=args.include_today,
            debug=args.debug,
            settings_path=args.settings,
        )
        settings = GlobalSettings.load(options.settings_path)
        cache = FirstDateCache()

        if args.plain:
            report = asyncio.run(build_report(options, settings, cache))
            print_report(report)
            return
    except ClockRulesError as e:
        logger.exception("Balance calculation failed")
        sys.stderr.write(f"Error: {e}\n")
        sys.exit(1)

    # Run the TUI
    app = ClockRulesApp(options, settings, cache)
    app.run()


if __name__ == "__main__":
    main()
