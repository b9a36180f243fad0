"""HTML output formatter for license reports.

Produces a single self-contained page: a summary, a table of every flat
record, and one collapsible tree per ecosystem. The tree documents are also
embedded as JSON (``#dependency-trees``) for client-side tree rendering.
"""

import json
from html import escape
from typing import Any

from license_checker.analysis.copyleft import LicenseCategory
from license_checker.constants import LEGAL_DISCLAIMER
from license_checker.models.dependency import DependencyForest, DependencyNode
from license_checker.models.report import LicenseReport

STYLE = """\
body{font-family:Arial,sans-serif;margin:20px;}
h1,h2{color:#2c3e50;}
table{width:100%;border-collapse:collapse;margin-bottom:20px;}
th,td{border:1px solid #ddd;padding:8px;text-align:left;}
th{background:#f2f2f2;}
.copyleft{background:#f8d7da;color:#721c24;}
.non-copyleft{background:#d4edda;color:#155724;}
.unknown{background:#ffff99;color:#333;}
.disclaimer{color:#666;font-size:0.9em;}
details{margin:4px 0;}
summary{cursor:pointer;font-weight:bold;}"""

# License cell CSS class per category
CATEGORY_CLASSES = {
    LicenseCategory.COPYLEFT: "copyleft",
    LicenseCategory.PERMISSIVE: "non-copyleft",
    LicenseCategory.UNKNOWN: "unknown",
}


class HtmlReportFormatter:
    """Format a license report as a standalone HTML document."""

    def format_report(self, report: LicenseReport) -> str:
        """Format report as HTML string.

        Args:
            report: The report to format.

        Returns:
            Complete HTML document.
        """
        lines: list[str] = [
            "<!DOCTYPE html>",
            "<html>",
            "<head>",
            '<meta charset="UTF-8">',
            "<title>Dependency License Report</title>",
            f"<style>\n{STYLE}\n</style>",
            "</head>",
            "<body>",
            "<h1>Dependency License Report</h1>",
            f'<p class="disclaimer">{escape(LEGAL_DISCLAIMER)}</p>',
            "<h2>Summary</h2>",
            f"<p>{escape(report.summary_line())}</p>",
        ]
        lines.extend(self._format_table(report))
        for forest in report.forests:
            lines.extend(self._format_forest(forest))
        if report.errors:
            lines.extend(self._format_errors(report))
        lines.append(self._embed_trees(report.tree_documents()))
        lines.extend(["</body>", "</html>", ""])
        return "\n".join(lines)

    def _format_table(self, report: LicenseReport) -> list[str]:
        """Format the dependencies table."""
        lines = [
            "<h2>Dependencies Table</h2>",
            "<table>",
            "<tr>",
            "  <th>Name</th>",
            "  <th>Version</th>",
            "  <th>License</th>",
            "  <th>Parent</th>",
            "  <th>Language</th>",
            "  <th>Details</th>",
            "</tr>",
        ]
        for record in report.records:
            css_class = CATEGORY_CLASSES[record.category]
            url = escape(record.details_url)
            lines.extend(
                [
                    "<tr>",
                    f"  <td>{escape(record.name)}</td>",
                    f"  <td>{escape(record.version)}</td>",
                    f'  <td class="{css_class}">{escape(record.license)}</td>',
                    f"  <td>{escape(record.parent)}</td>",
                    f"  <td>{escape(record.ecosystem.value)}</td>",
                    f'  <td><a href="{url}">{url}</a></td>',
                    "</tr>",
                ]
            )
        lines.append("</table>")
        return lines

    def _format_forest(self, forest: DependencyForest) -> list[str]:
        """Format one ecosystem's trees as nested details elements."""
        lines = [f"<h2>{escape(forest.ecosystem.label)} Dependencies</h2>", "<div>"]
        if not forest.roots:
            lines.append(
                f"<p>No {escape(forest.ecosystem.label)} dependencies found.</p>"
            )
        for root in forest.roots:
            lines.append(self._format_node(root))
        lines.append("</div>")
        return lines

    def _format_node(self, node: DependencyNode) -> str:
        """Format a node and its subtree."""
        summary = escape(f"{node.name}@{node.version} (License: {node.license})")
        parts = [f"<details><summary>{summary}</summary>"]
        if node.children:
            parts.append("<ul>")
            for child in node.children:
                parts.append(f"<li>{self._format_node(child)}</li>")
            parts.append("</ul>")
        parts.append("</details>")
        return "\n".join(parts)

    def _format_errors(self, report: LicenseReport) -> list[str]:
        """Format packages that could not be resolved."""
        lines = ["<h2>Unresolved Packages</h2>", "<ul>"]
        for error in report.errors:
            label = error.name
            if error.version_specifier:
                label = f"{label}@{error.version_specifier}"
            lines.append(
                f"<li>{escape(error.ecosystem.label)}: {escape(label)} "
                f"({escape(error.message)})</li>"
            )
        lines.append("</ul>")
        return lines

    @staticmethod
    def _embed_trees(documents: list[dict[str, Any]]) -> str:
        """Embed tree documents as a JSON data block."""
        payload = json.dumps(documents).replace("</", "<\\/")
        return (
            '<script type="application/json" id="dependency-trees">'
            f"{payload}</script>"
        )
