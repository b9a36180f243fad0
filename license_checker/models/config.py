"""Configuration Pydantic models for license-checker."""
from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field, field_validator

# Known license tokens scanned for on package pages, in priority order.
# Each entry is (token, canonical form); more specific tokens come first.
DEFAULT_SCRAPE_KEYWORDS: List[List[str]] = [
    ["MIT", "MIT"],
    ["ISC", "ISC"],
    ["BSD-3-CLAUSE", "BSD-3-Clause"],
    ["BSD-2-CLAUSE", "BSD-2-Clause"],
    ["BSD", "BSD"],
    ["APACHE", "Apache"],
    ["ARTISTIC", "Artistic"],
    ["ZLIB", "Zlib"],
    ["WTFPL", "WTFPL"],
    ["CDDL", "CDDL"],
    ["UNLICENSE", "Unlicense"],
    ["EUPL", "EUPL"],
    ["MPL", "MPL"],
    ["CC0", "CC0"],
    ["LGPL", "LGPL"],
    ["AGPL", "AGPL"],
    ["X11", "X11"],
]


class CheckerConfig(BaseModel):
    """Configuration for license-checker.

    Every field has a working default so an absent or empty configuration
    file behaves the same as no file at all.
    """

    model_config = {"extra": "forbid"}

    max_concurrent_requests: int = Field(
        default=10,
        ge=1,
        description="Maximum number of in-flight registry requests per ecosystem.",
    )
    request_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Per-request network timeout in seconds.",
    )
    scrape_window_lines: int = Field(
        default=10,
        ge=0,
        description="Lines scanned after the first 'license' line of a package page.",
    )
    scrape_keywords: List[List[str]] = Field(
        default_factory=lambda: [list(pair) for pair in DEFAULT_SCRAPE_KEYWORDS],
        description="Ordered [token, canonical] pairs matched on package pages.",
    )
    npm_registry_url: str = Field(
        default="https://registry.npmjs.org",
        description="Base URL of the npm registry metadata API.",
    )
    npm_package_url: str = Field(
        default="https://www.npmjs.com/package",
        description="Base URL of human-facing npm package pages.",
    )
    pypi_registry_url: str = Field(
        default="https://pypi.org/pypi",
        description="Base URL of the PyPI JSON API.",
    )
    pypi_package_url: str = Field(
        default="https://pypi.org/project",
        description="Base URL of human-facing PyPI project pages.",
    )
    manifest_names: List[str] = Field(
        default_factory=lambda: ["package.json"],
        description="Node.js manifest file names, searched in order.",
    )
    requirement_names: List[str] = Field(
        default_factory=lambda: ["requirements.txt", "requirement.txt"],
        description="Python requirement list file names, searched in order.",
    )
    ignored_packages: List[str] = Field(
        default_factory=list,
        description="Package names skipped during resolution.",
    )

    @field_validator("scrape_keywords")
    @classmethod
    def _check_keyword_pairs(cls, value: List[List[str]]) -> List[List[str]]:
        """Each entry must be a [token, canonical] pair of non-empty strings."""
        for pair in value:
            if len(pair) != 2 or not all(item.strip() for item in pair):
                raise ValueError(
                    f"expected [token, canonical] pair, got {pair!r}"
                )
        return value
