"""Command-line entry point for one-shot AWS diagnosis."""

from __future__ import annotations

import argparse
import logging
import os
import sys
import tomllib
from importlib import metadata
from pathlib import Path

from botocore.exceptions import BotoCoreError

from .aws import AwsClients
from .config import load_config
from .diagnosis import create_client
from .errors import ConfigError, DiagnosisError, NoUsableDataError
from .orchestrator import DEFAULT_MAX_WORKERS
from .runner import run
from .timewindow import (
    DEFAULT_DURATION_SECONDS,
    TIME_FORMAT,
    load_time_zone,
    parse_local_time,
)

LOGGER = logging.getLogger("autodiag")

EXIT_OK = 0
EXIT_CONFIG = 2
EXIT_NO_DATA = 3
EXIT_DIAGNOSIS = 4
EXIT_INTERRUPTED = 130


def package_version() -> str:
    """Return the installed package version or ``0.0.0``."""

    try:
        return metadata.version("autodiag")
    except metadata.PackageNotFoundError:  # pragma: no cover - source checkout
        try:
            pyproject = Path(__file__).resolve().parents[1] / "pyproject.toml"
            data = tomllib.loads(pyproject.read_text())
            return data["project"]["version"]
        except (OSError, KeyError, tomllib.TOMLDecodeError):
            return "0.0.0"


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""

    parser = argparse.ArgumentParser(
        prog="autodiag",
        description="Diagnose an AWS environment with an LLM",
    )
    parser.add_argument("file", type=Path, help="Configuration file (TOML or YAML)")
    parser.add_argument(
        "--duration",
        type=int,
        default=DEFAULT_DURATION_SECONDS,
        help="Duration in seconds, counted back from now (default: %(default)s)",
    )
    parser.add_argument(
        "--start",
        help=f"Start time [{TIME_FORMAT}]; requires --end and ignores --duration",
    )
    parser.add_argument(
        "--end",
        help=f"End time [{TIME_FORMAT}]; requires --start and ignores --duration",
    )
    parser.add_argument(
        "--print-prompt-data",
        action="store_true",
        help="Print the assembled prompt",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Fetch and assemble data without requesting a diagnosis",
    )
    parser.add_argument(
        "--max-workers",
        type=int,
        default=DEFAULT_MAX_WORKERS,
        help="Maximum concurrent datasource fetches (default: %(default)s)",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {package_version()}"
    )
    return parser.parse_args(args)


def main(argv: list[str] | None = None) -> int:
    """Run one diagnosis and return the process exit code."""

    log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(level=getattr(logging, log_level, logging.INFO))
    args = parse_args(argv)

    try:
        config = load_config(args.file)
        time_zone = load_time_zone(config.general.time_zone)
        start = parse_local_time(args.start, time_zone) if args.start else None
        end = parse_local_time(args.end, time_zone) if args.end else None
        if args.max_workers < 1:
            raise ConfigError("--max-workers must be at least 1")
        diagnosis_client = (
            None if args.dry_run else create_client(api_key=config.open_ai.api_key)
        )
    except ConfigError as exc:
        LOGGER.error("configuration error: %s", exc)
        return EXIT_CONFIG

    print(f"autodiag {package_version()}")
    try:
        clients = AwsClients(config.general.profile)
    except BotoCoreError as exc:
        LOGGER.error("cannot create AWS clients: %s", exc)
        return EXIT_CONFIG
    try:
        result = run(
            config,
            clients,
            diagnosis_client,
            duration=args.duration,
            start=start,
            end=end,
            dry_run=args.dry_run,
            print_prompt=args.print_prompt_data,
            max_workers=args.max_workers,
        )
    except ConfigError as exc:
        LOGGER.error("configuration error: %s", exc)
        return EXIT_CONFIG
    except NoUsableDataError as exc:
        LOGGER.error("nothing to diagnose: %s", exc)
        return EXIT_NO_DATA
    except DiagnosisError as exc:
        LOGGER.error("diagnosis failed: %s", exc)
        return EXIT_DIAGNOSIS
    except KeyboardInterrupt:
        LOGGER.warning("interrupted")
        return EXIT_INTERRUPTED

    if result.failures:
        LOGGER.warning(
            "%d datasource(s) were skipped; the diagnosis may be incomplete",
            len(result.failures),
        )
    if result.diagnosis is not None:
        print(result.diagnosis)
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover - manual entry
    sys.exit(main())
