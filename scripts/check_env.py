"""Utility for verifying the dashboard's endpoint configuration.

The tool performs two checks:

1. ``check`` instantiates ``AppSettings`` from the provided ``.env`` file and
   prints the resolved upstream and model endpoints, including whether
   predictions will be answered in demo mode.
2. ``probe`` additionally runs one summary request and reports whether live
   or demo data was served, which tells a deployer the upstream is reachable
   from this host.

Example usages::

    python -m scripts.check_env check --env-file /opt/agri/.env
    python -m scripts.check_env probe --env-file /opt/agri/.env --year 2025 --month 8
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Callable

from pydantic import ValidationError

from agri_dashboard.clients import IbabiClient
from agri_dashboard.core.config import AppSettings, _load_env_file
from agri_dashboard.core.logging import configure_logging
from agri_dashboard.schemas import SummaryQuery
from agri_dashboard.services import PredictionService, SummaryService

EXIT_OK = 0
EXIT_VALIDATION_ERROR = 2
EXIT_DEMO_DATA = 4
EXIT_RUNTIME_ERROR = 5


def _load_settings(env_file: Path) -> AppSettings:
    """Load settings, letting values in ``env_file`` fill unset variables."""
    _load_env_file(str(env_file))
    return AppSettings()


def _describe(settings: AppSettings) -> None:
    prediction = PredictionService(settings.prediction)
    print(f"Environment:       {settings.environment}")
    print(f"Data base URL:     {settings.upstream.data_base_url or '(unset)'}")
    print(f"Summary URL:       {settings.upstream.summary_url or '(unset)'}")
    print(f"Model endpoint:    {settings.prediction.endpoint or '(unset)'}")
    print(f"Prediction mode:   {'demo' if prediction.demo_mode else 'live'}")


def _probe(settings: AppSettings, query: SummaryQuery) -> int:
    """Run one summary request and report where the data came from."""
    configure_logging(settings.log_level)
    service = SummaryService(
        settings.upstream,
        IbabiClient(timeout=settings.upstream.timeout_seconds),
    )
    summary = asyncio.run(service.get_summary(query))
    print(
        f"Summary: {len(summary.harvest)} harvest / "
        f"{len(summary.livestock)} livestock entries"
    )
    if summary.note:
        print(f"Upstream not used: {summary.note}", file=sys.stderr)
        return EXIT_DEMO_DATA
    print("Live upstream data OK.")
    return EXIT_OK


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate dashboard settings and probe the upstream data API."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_common_arguments(subparser: argparse.ArgumentParser) -> None:
        subparser.add_argument(
            "--env-file",
            default=".env",
            type=Path,
            help="Path to the environment file (default: .env in the repo root).",
        )

    check_parser = subparsers.add_parser(
        "check",
        help="Validate settings and print the resolved endpoints.",
    )
    add_common_arguments(check_parser)

    probe_parser = subparsers.add_parser(
        "probe",
        help="Validate settings and fetch one summary from the upstream.",
    )
    add_common_arguments(probe_parser)
    probe_parser.add_argument("--year", type=int, default=None)
    probe_parser.add_argument("--month", type=int, default=None)

    return parser


def _ensure_env_file(env_file: Path) -> None:
    if not env_file.exists():
        raise FileNotFoundError(
            f"Environment file {env_file} does not exist. "
            "Ensure the path is correct or create it before running this tool."
        )


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    env_file: Path = args.env_file

    try:
        _ensure_env_file(env_file)
        settings = _load_settings(env_file)
    except FileNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except ValidationError as exc:
        print(
            "Settings validation failed. Missing or invalid values detected:\n"
            f"{exc.json(indent=2)}",
            file=sys.stderr,
        )
        return EXIT_VALIDATION_ERROR
    except Exception as exc:  # pylint: disable=broad-except
        print(f"Unexpected error during validation: {exc}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    _describe(settings)

    command: str = args.command
    handlers: dict[str, Callable[[], int]] = {
        "check": lambda: EXIT_OK,
        "probe": lambda: _probe(
            settings, SummaryQuery(year=args.year, month=args.month)
        ),
    }
    return handlers[command]()


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
