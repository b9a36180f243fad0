"""Tests for the JSON report formatter."""
import json

from license_checker import __version__
from license_checker.constants import LEGAL_DISCLAIMER
from license_checker.models.dependency import DependencyForest, Ecosystem
from license_checker.models.report import LicenseReport
from license_checker.output.report_json import JsonReportFormatter


class TestJsonReportFormatter:
    """Tests for JsonReportFormatter."""

    def test_valid_json(self, sample_report: LicenseReport) -> None:
        """Test output parses as JSON."""
        output = JsonReportFormatter().format_report(sample_report)
        assert isinstance(json.loads(output), dict)

    def test_metadata(self, sample_report: LicenseReport) -> None:
        """Test report metadata block."""
        data = json.loads(JsonReportFormatter().format_report(sample_report))

        assert data["report_metadata"] == {
            "generated_at": "2024-05-01T12:00:00Z",
            "tool_version": __version__,
            "disclaimer": LEGAL_DISCLAIMER,
        }

    def test_summary(self, sample_report: LicenseReport) -> None:
        """Test summary counts."""
        data = json.loads(JsonReportFormatter().format_report(sample_report))

        assert data["summary"] == {
            "total_packages": 3,
            "copyleft": 1,
            "unknown": 1,
            "direct_dependencies": {"node": 1, "python": 1},
            "errors": 1,
        }

    def test_dependencies(self, sample_report: LicenseReport) -> None:
        """Test flat records keep order and parent annotation."""
        data = json.loads(JsonReportFormatter().format_report(sample_report))

        deps = data["dependencies"]
        assert [d["name"] for d in deps] == ["express", "gnu-dep", "flask"]
        assert deps[1] == {
            "name": "gnu-dep",
            "version": "1.0.0",
            "license": "GPL-3.0",
            "is_copyleft": True,
            "category": "copyleft",
            "details_url": "https://www.npmjs.com/package/gnu-dep",
            "ecosystem": "node",
            "parent": "express",
        }
        assert deps[2]["category"] == "unknown"
        assert deps[2]["parent"] == "Direct"

    def test_trees(self, sample_report: LicenseReport) -> None:
        """Test one nested tree document per ecosystem."""
        data = json.loads(JsonReportFormatter().format_report(sample_report))

        trees = data["trees"]
        assert [t["name"] for t in trees] == [
            "Node.js Dependencies",
            "Python Dependencies",
        ]
        express = trees[0]["children"][0]
        assert express["children"][0]["name"] == "gnu-dep"

    def test_errors(self, sample_report: LicenseReport) -> None:
        """Test unresolved packages are listed."""
        data = json.loads(JsonReportFormatter().format_report(sample_report))

        assert data["errors"] == [
            {
                "ecosystem": "python",
                "name": "ghost",
                "version_specifier": "1.0",
                "message": "Registry returned HTTP 404 for ghost",
            }
        ]

    def test_empty_forest_placeholder(self) -> None:
        """Test an empty ecosystem still produces a tree root."""
        report = LicenseReport(forests=[DependencyForest(ecosystem=Ecosystem.NODE)])

        data = json.loads(JsonReportFormatter().format_report(report))

        assert data["dependencies"] == []
        assert data["trees"][0]["children"][0]["name"] == "No dependencies found"
