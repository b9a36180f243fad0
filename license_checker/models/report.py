"""Report model handed from the scanner to the renderers."""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, computed_field

from license_checker.constants import UNKNOWN_LICENSE
from license_checker.models.dependency import (
    DependencyForest,
    Ecosystem,
    FlatDependencyRecord,
    ResolutionError,
)


class LicenseReport(BaseModel):
    """Flattened records plus the forests they were derived from."""

    forests: list[DependencyForest] = Field(
        default_factory=list,
        description="One forest per scanned ecosystem",
    )
    records: list[FlatDependencyRecord] = Field(
        default_factory=list,
        description="Pre-order flat records across all forests",
    )
    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Report creation time (UTC)",
    )

    model_config = {"extra": "forbid"}

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_packages(self) -> int:
        """Number of flat records in the report."""
        return len(self.records)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def copyleft_count(self) -> int:
        """Number of records with a copyleft license."""
        return sum(1 for record in self.records if record.is_copyleft)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def unknown_count(self) -> int:
        """Number of records whose license could not be determined."""
        return sum(1 for record in self.records if record.license == UNKNOWN_LICENSE)

    @property
    def has_copyleft(self) -> bool:
        """True if any dependency carries a copyleft license."""
        return self.copyleft_count > 0

    @property
    def errors(self) -> list[ResolutionError]:
        """All resolution errors across ecosystems."""
        return [error for forest in self.forests for error in forest.errors]

    def direct_count(self, ecosystem: Ecosystem) -> int:
        """Number of top-level dependencies resolved for an ecosystem."""
        for forest in self.forests:
            if forest.ecosystem == ecosystem:
                return len(forest.roots)
        return 0

    def tree_documents(self) -> list[dict[str, Any]]:
        """Nested tree documents, one per forest."""
        # Lazy import to avoid circular dependency
        from license_checker.analysis.flatten import to_tree_document

        return [to_tree_document(forest) for forest in self.forests]

    def summary_line(self) -> str:
        """One-line summary of the report contents."""
        return (
            f"{self.direct_count(Ecosystem.NODE)} Node.js top-level dependencies, "
            f"{self.direct_count(Ecosystem.PYTHON)} Python top-level dependencies, "
            f"{self.total_packages} packages total, "
            f"Copyleft: {self.copyleft_count}, Unknown: {self.unknown_count}"
        )
