"""Reporting utilities."""

from .reports import (
    build_error_report,
    build_error_report_with_validation,
    build_plan_output,
    build_success_report,
    build_summary_report,
)

__all__ = [
    "build_error_report",
    "build_error_report_with_validation",
    "build_plan_output",
    "build_success_report",
    "build_summary_report",
]
