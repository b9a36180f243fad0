"""Dependency graph models for license-checker.

A resolution run produces one :class:`DependencyForest` per ecosystem. The
forest is a tree structure: cycles and repeated packages are cut while it is
built, never represented.
"""

from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field, computed_field

from license_checker.constants import DIRECT_PARENT, UNKNOWN_LICENSE

if TYPE_CHECKING:
    from license_checker.analysis.copyleft import LicenseCategory


class Ecosystem(Enum):
    """Package source a dependency was resolved from."""

    NODE = "node"
    PYTHON = "python"

    @property
    def label(self) -> str:
        """Human-readable ecosystem name."""
        return {"node": "Node.js", "python": "Python"}[self.value]


class RequirementSpec(BaseModel):
    """One top-level requirement extracted from a manifest or requirement list."""

    model_config = {"extra": "forbid", "frozen": True}

    name: str = Field(description="Package name as declared")
    version_specifier: str = Field(
        default="",
        description="Requested version; empty means the registry default",
    )


class DependencyNode(BaseModel):
    """One resolved package at one version in one ecosystem."""

    name: str = Field(description="Package name")
    requested_version: str = Field(
        default="",
        description="Version specifier as requested, after prefix stripping",
    )
    version: str = Field(description="Version actually resolved and used")
    license: str = Field(
        default=UNKNOWN_LICENSE,
        description="License text from the first succeeding inference strategy",
    )
    details_url: str = Field(default="", description="Package page for manual review")
    ecosystem: Ecosystem = Field(description="Package source")
    children: list["DependencyNode"] = Field(
        default_factory=list,
        description="Direct runtime dependencies of this package",
    )

    model_config = {"extra": "forbid"}

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_copyleft(self) -> bool:
        """True if the license belongs to a copyleft family."""
        # Lazy import to avoid circular dependency
        from license_checker.analysis.copyleft import is_copyleft

        return is_copyleft(self.license)

    @property
    def category(self) -> "LicenseCategory":
        """Risk category of the license (copyleft, permissive, unknown)."""
        from license_checker.analysis.copyleft import get_license_category

        return get_license_category(self.license)

    def get_all_descendants(self) -> list["DependencyNode"]:
        """Get all descendant nodes in pre-order.

        Returns:
            List of all nodes below this node in the tree.
        """
        result: list[DependencyNode] = []
        for child in self.children:
            result.append(child)
            result.extend(child.get_all_descendants())
        return result


class ResolutionError(BaseModel):
    """A package that could not be resolved, kept for diagnostics."""

    model_config = {"extra": "forbid"}

    ecosystem: Ecosystem
    name: str
    version_specifier: str = ""
    message: str


class DependencyForest(BaseModel):
    """All trees resolved for one ecosystem in one run."""

    ecosystem: Ecosystem = Field(description="Ecosystem of every node in the forest")
    roots: list[DependencyNode] = Field(
        default_factory=list,
        description="One root per successfully resolved top-level requirement",
    )
    errors: list[ResolutionError] = Field(
        default_factory=list,
        description="Packages omitted because they could not be resolved",
    )

    model_config = {"extra": "forbid"}

    def get_all_nodes(self) -> list[DependencyNode]:
        """Get all nodes in the forest in pre-order."""
        result: list[DependencyNode] = []
        for root in self.roots:
            result.append(root)
            result.extend(root.get_all_descendants())
        return result

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_count(self) -> int:
        """Total number of packages in the forest."""
        return len(self.get_all_nodes())

    @computed_field  # type: ignore[prop-decorator]
    @property
    def copyleft_count(self) -> int:
        """Number of packages with a copyleft license."""
        return sum(1 for node in self.get_all_nodes() if node.is_copyleft)


class FlatDependencyRecord(BaseModel):
    """Parent-annotated projection of one DependencyNode for tabular display."""

    model_config = {"extra": "forbid", "frozen": True}

    name: str
    version: str
    license: str
    details_url: str
    ecosystem: Ecosystem
    parent: str = Field(
        default=DIRECT_PARENT,
        description="Name of the immediate parent, or 'Direct' for roots",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_copyleft(self) -> bool:
        """True if the license belongs to a copyleft family."""
        from license_checker.analysis.copyleft import is_copyleft

        return is_copyleft(self.license)

    @property
    def category(self) -> "LicenseCategory":
        """Risk category of the license, used for report coloring."""
        from license_checker.analysis.copyleft import get_license_category

        return get_license_category(self.license)

    @property
    def is_direct(self) -> bool:
        """True for top-level dependencies."""
        return self.parent == DIRECT_PARENT
