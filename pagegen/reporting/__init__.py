"""Caller-facing reports for stage outcomes."""

from pagegen.reporting.formatter import FailureReport, Report, SuccessReport, format_outcome, render_report, report_payload

__all__ = ["FailureReport", "Report", "SuccessReport", "format_outcome", "render_report", "report_payload"]
