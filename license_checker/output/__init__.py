"""Output formatters for license-checker."""

from license_checker.output.report_html import HtmlReportFormatter
from license_checker.output.report_json import JsonReportFormatter
from license_checker.output.terminal import TerminalFormatter

__all__ = [
    "HtmlReportFormatter",
    "JsonReportFormatter",
    "TerminalFormatter",
]
