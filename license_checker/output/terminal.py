"""Terminal output formatter using Rich."""
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from license_checker.analysis.copyleft import LicenseCategory
from license_checker.constants import LEGAL_DISCLAIMER
from license_checker.models.dependency import DependencyForest, DependencyNode
from license_checker.models.report import LicenseReport
from license_checker.models.scan import Verbosity


class TerminalFormatter:
    """Format a license report for terminal display.

    Shows a table of flat records, one color-coded tree per ecosystem and
    summary statistics.
    """

    # Color mapping for license categories
    LICENSE_COLORS = {
        LicenseCategory.PERMISSIVE: "green",
        LicenseCategory.COPYLEFT: "red",
        LicenseCategory.UNKNOWN: "dim yellow",
    }

    WARNING_MARKER = " [red]⚠[/red]"

    def __init__(
        self,
        console: Optional[Console] = None,
        verbosity: Verbosity = Verbosity.NORMAL,
    ) -> None:
        """Initialize the formatter with a Rich console.

        Args:
            console: Optional Rich Console instance. If not provided,
                a new Console will be created.
            verbosity: Output verbosity level.
        """
        self._console = console if console is not None else Console()
        self._verbosity = verbosity

    def format_report(self, report: LicenseReport) -> None:
        """Format and display a report.

        Args:
            report: The report to display.
        """
        if self._verbosity == Verbosity.QUIET:
            self._print_quiet_output(report)
            return

        if not report.records:
            self._console.print("[yellow]No dependencies found[/yellow]")
            self._print_errors(report)
            return

        self._console.print(self._build_table(report))
        for forest in report.forests:
            if forest.roots:
                self._console.print(self._build_tree(forest))
        self._print_errors(report)
        self._print_summary(report)

    def _print_quiet_output(self, report: LicenseReport) -> None:
        """Print only the summary line and copyleft packages."""
        if report.has_copyleft:
            self._console.print(
                f"[red]COPYLEFT FOUND[/red] - {report.total_packages} packages, "
                f"{report.copyleft_count} copyleft"
            )
            for record in report.records:
                if record.is_copyleft:
                    self._console.print(
                        f"  - {escape(record.name)}@{escape(record.version)}: "
                        f"[red]{escape(record.license)}[/red]"
                    )
        else:
            self._console.print(
                f"[green]PASS[/green] - {report.total_packages} packages"
            )

    def _license_markup(self, license_text: str, category: LicenseCategory) -> str:
        color = self.LICENSE_COLORS[category]
        return f"[{color}]{escape(license_text)}[/{color}]"

    def _build_table(self, report: LicenseReport) -> Table:
        """Build the dependencies table."""
        table = Table(title="Dependency Licenses")
        table.add_column("Package", style="cyan")
        table.add_column("Version")
        table.add_column("License")
        table.add_column("Parent")
        table.add_column("Language")
        if self._verbosity == Verbosity.VERBOSE:
            table.add_column("Details")

        for record in report.records:
            row = [
                record.name,
                record.version,
                self._license_markup(record.license, record.category),
                record.parent,
                record.ecosystem.value,
            ]
            if self._verbosity == Verbosity.VERBOSE:
                row.append(record.details_url)
            table.add_row(*row)
        return table

    def _build_tree(self, forest: DependencyForest) -> Tree:
        """Build a Rich tree for one ecosystem."""
        tree = Tree(f"[bold]{forest.ecosystem.label} Dependencies[/bold]")
        for root in forest.roots:
            self._add_node_to_tree(tree, root)
        return tree

    def _add_node_to_tree(self, parent: Tree, node: DependencyNode) -> None:
        """Recursively add a node and its children to the tree."""
        warning = self.WARNING_MARKER if node.is_copyleft else ""
        label = (
            f"{escape(node.name)}@{escape(node.version)} "
            f"({self._license_markup(node.license, node.category)}){warning}"
        )
        branch = parent.add(label)
        for child in node.children:
            self._add_node_to_tree(branch, child)

    def _print_errors(self, report: LicenseReport) -> None:
        """List packages that could not be resolved."""
        if not report.errors or self._verbosity == Verbosity.QUIET:
            return
        self._console.print()
        self._console.print(
            f"[bold yellow]Unresolved packages:[/bold yellow] {len(report.errors)}"
        )
        for error in report.errors:
            self._console.print(
                f"  [dim]{escape(error.name)}[/dim]: {escape(error.message)}"
            )

    def _print_summary(self, report: LicenseReport) -> None:
        """Print summary statistics."""
        self._console.print()
        self._console.print(f"[bold]Total packages:[/bold] {report.total_packages}")
        if report.has_copyleft:
            self._console.print(
                f"[bold red]Copyleft licenses:[/bold red] {report.copyleft_count}"
            )
        else:
            self._console.print("[bold green]Copyleft licenses:[/bold green] 0")
        self._console.print(f"[bold]Unknown licenses:[/bold] {report.unknown_count}")
        self._console.print()
        self._console.print(f"[dim]{LEGAL_DISCLAIMER}[/dim]")
