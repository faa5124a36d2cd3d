"""CLI entrypoint for the weekly study planner."""

from __future__ import annotations

import argparse
import logging
from datetime import date
from pathlib import Path
from typing import Any

from studyplan.engine import run_planner
from studyplan.io import read_json, write_json
from studyplan.logging_config import configure_logging, set_request_id
from studyplan.metrics import collect_metrics
from studyplan.normalization import normalize_request, resolve_effective_config
from studyplan.reporting import (
    build_error_report,
    build_error_report_with_validation,
    build_success_report,
    build_summary_report,
)
from studyplan.validation import (
    ValidationError,
    ValidationReport,
    validate_domain_inputs,
    validate_inputs_with_schema,
    validate_plan_request,
)

logger = logging.getLogger(__name__)


def _resolve_input_path(request_file: Path, value: str) -> Path:
    path = Path(value)
    if path.is_absolute():
        return path
    return (request_file.parent / path).resolve()


def _load_referenced_inputs(request_file: Path, request: dict[str, Any]) -> tuple[dict[str, Any], list[ValidationError]]:
    loaded: dict[str, Any] = {}
    errors: list[ValidationError] = []

    mapping = {
        "tasks_path": "tasks",
        "settings_path": "settings",
    }

    for path_field, target_field in mapping.items():
        resolved = _resolve_input_path(request_file, request[path_field])
        try:
            loaded[target_field] = read_json(resolved)
        except FileNotFoundError:
            errors.append(
                ValidationError(
                    code="file_not_found",
                    message=f"Referenced file not found: {resolved}",
                    path=f"$.{path_field}",
                )
            )
        except ValueError as exc:
            errors.append(
                ValidationError(
                    code="invalid_json",
                    message=str(exc),
                    path=f"$.{path_field}",
                )
            )

    return loaded, errors


def _prepare(request_path: str, today: str | None) -> tuple[dict[str, Any] | None, dict[str, Any] | None, ValidationReport]:
    """Load and validate inputs; return (loaded_payload, error_report, validation_report)."""
    validation_report = ValidationReport()

    try:
        request_payload = read_json(request_path)
    except (OSError, ValueError) as exc:
        logger.error("Cannot read plan request %s: %s", request_path, exc)
        error = build_error_report(
            [ValidationError(code="invalid_request", message=str(exc), path="$.request")],
            code="request_read_error",
        )
        return None, error, validation_report

    if today is not None:
        request_payload["today"] = today
    request_payload = normalize_request(request_payload)
    set_request_id(str(request_payload.get("request_id") or "") or None)

    errors = validate_plan_request(request_payload)
    if errors:
        logger.warning("Plan request rejected with %d error(s)", len(errors))
        return None, build_error_report(errors), validation_report

    loaded_request, load_errors = _load_referenced_inputs(Path(request_path), request_payload)
    if load_errors:
        logger.warning("Could not load %d referenced input file(s)", len(load_errors))
        return (
            None,
            build_error_report_with_validation(load_errors, validation_report=validation_report, code="input_load_error"),
            validation_report,
        )

    loaded_request["plan_request"] = request_payload
    validation_report.extend(validate_inputs_with_schema(loaded_request))
    validation_report.extend(validate_domain_inputs(loaded_request))
    loaded_request["effective_config"] = resolve_effective_config(loaded_request, validation_report)

    if validation_report.errors:
        logger.warning("Inputs failed validation with %d error(s)", len(validation_report.errors))
        errors = [issue.to_error() for issue in validation_report.errors]
        return (
            None,
            build_error_report_with_validation(errors, validation_report=validation_report, code="validation_error"),
            validation_report,
        )

    return loaded_request, None, validation_report


def run_plan_command(request_path: str, output_path: str, today: str | None = None) -> int:
    loaded_request, error_report, validation_report = _prepare(request_path, today)
    if error_report is not None or loaded_request is None:
        write_json(output_path, error_report or build_error_report([]))
        return 2

    result = run_planner(loaded_request)
    metrics = collect_metrics(result)
    write_json(output_path, build_success_report(result, metrics, validation_report))
    return 0


def run_summary_command(request_path: str, output_path: str, today: str | None = None) -> int:
    loaded_request, error_report, validation_report = _prepare(request_path, today)
    if error_report is not None or loaded_request is None:
        write_json(output_path, error_report or build_error_report([]))
        return 2

    write_json(output_path, build_summary_report(run_planner(loaded_request), validation_report))
    return 0


def _iso_date(value: str) -> str:
    try:
        date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}, expected YYYY-MM-DD") from exc
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="studyplan", description="Weekly study planner CLI")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Console log level",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    plan_parser = subparsers.add_parser("plan", help="Generate a weekly plan from plan_request JSON")
    summary_parser = subparsers.add_parser("summary", help="Write only the dashboard summary for the week")
    for sub in (plan_parser, summary_parser):
        sub.add_argument("--request", required=True, help="Path to plan_request.json")
        sub.add_argument("--output", required=True, help="Path to the output JSON")
        sub.add_argument("--today", type=_iso_date, default=None, help="Reference date (YYYY-MM-DD)")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(log_level=args.log_level)

    if args.command == "plan":
        return run_plan_command(args.request, args.output, today=args.today)
    if args.command == "summary":
        return run_summary_command(args.request, args.output, today=args.today)

    parser.error("Unknown command")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
