"""JSON output formatter for license reports."""

import json
from typing import Any

from license_checker import __version__
from license_checker.constants import LEGAL_DISCLAIMER
from license_checker.models.dependency import Ecosystem, FlatDependencyRecord
from license_checker.models.report import LicenseReport


class JsonReportFormatter:
    """Format a license report as JSON.

    Carries the flat records for tabular consumers and one nested tree
    document per ecosystem for tree visualization.
    """

    def format_report(self, report: LicenseReport) -> str:
        """Format report as JSON string.

        Args:
            report: The report to format.

        Returns:
            JSON string representation of the report.
        """
        return json.dumps(self._build_output(report), indent=2)

    def _build_output(self, report: LicenseReport) -> dict[str, Any]:
        """Build the output dictionary structure."""
        return {
            "report_metadata": {
                "generated_at": report.generated_at.strftime("%Y-%m-%dT%H:%M:%SZ"),
                "tool_version": __version__,
                "disclaimer": LEGAL_DISCLAIMER,
            },
            "summary": {
                "total_packages": report.total_packages,
                "copyleft": report.copyleft_count,
                "unknown": report.unknown_count,
                "direct_dependencies": {
                    ecosystem.value: report.direct_count(ecosystem)
                    for ecosystem in Ecosystem
                },
                "errors": len(report.errors),
            },
            "dependencies": [self._record_to_dict(r) for r in report.records],
            "trees": report.tree_documents(),
            "errors": [
                {
                    "ecosystem": error.ecosystem.value,
                    "name": error.name,
                    "version_specifier": error.version_specifier,
                    "message": error.message,
                }
                for error in report.errors
            ],
        }

    @staticmethod
    def _record_to_dict(record: FlatDependencyRecord) -> dict[str, Any]:
        """Convert a flat record to a dictionary."""
        return {
            "name": record.name,
            "version": record.version,
            "license": record.license,
            "is_copyleft": record.is_copyleft,
            "category": record.category.value,
            "details_url": record.details_url,
            "ecosystem": record.ecosystem.value,
            "parent": record.parent,
        }
