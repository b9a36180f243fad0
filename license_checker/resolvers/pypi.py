"""PyPI registry adapter."""
import logging
import re
from typing import Any, Optional

from packaging.requirements import InvalidRequirement, Requirement
from packaging.specifiers import SpecifierSet

from license_checker.constants import UNKNOWN_LICENSE
from license_checker.models.dependency import Ecosystem
from license_checker.resolvers.registry import BaseRegistryClient, PackageMetadata

logger = logging.getLogger(__name__)

PYPI_REGISTRY_URL = "https://pypi.org/pypi"
PYPI_PACKAGE_URL = "https://pypi.org/project"

# Mapping of PyPI classifiers to SPDX identifiers
CLASSIFIER_TO_SPDX: dict[str, str] = {
    "License :: OSI Approved :: MIT License": "MIT",
    "License :: OSI Approved :: Apache Software License": "Apache-2.0",
    "License :: OSI Approved :: BSD License": "BSD-3-Clause",
    "License :: OSI Approved :: GNU General Public License v3 (GPLv3)": ("GPL-3.0"),
    "License :: OSI Approved :: GNU General Public License v2 (GPLv2)": ("GPL-2.0"),
    "License :: OSI Approved :: GNU Lesser General Public License v3 (LGPLv3)": (
        "LGPL-3.0"
    ),
    "License :: OSI Approved :: GNU Lesser General Public License v2 (LGPLv2)": (
        "LGPL-2.0"
    ),
    "License :: OSI Approved :: GNU Affero General Public License v3": "AGPL-3.0",
    "License :: OSI Approved :: ISC License (ISCL)": "ISC",
    "License :: OSI Approved :: Mozilla Public License 2.0 (MPL 2.0)": "MPL-2.0",
    "License :: OSI Approved :: Python Software Foundation License": "PSF-2.0",
    "License :: OSI Approved :: The Unlicense (Unlicense)": "Unlicense",
    "License :: OSI Approved :: zlib/libpng License": "Zlib",
}

# License field values that mean "not declared"
EMPTY_LICENSE_VALUES = ("UNKNOWN", "NONE", "")

# Operators whose version is taken as the specifier, in priority order
PINNING_OPERATORS = ("===", "==", ">=", "~=")


def normalize_name(name: str) -> str:
    """Normalize package name per PEP 503."""
    return re.sub(r"[-_.]+", "-", name).lower()


def specifier_to_version(specifier: SpecifierSet) -> str:
    """Reduce a specifier set to a single version string.

    No range solving happens: the version of the most pinning clause is used
    as if it were exact, and anything else means "latest".

    Args:
        specifier: Parsed specifier set of a requirement.

    Returns:
        A version string, or "" for the registry default.
    """
    clauses = {spec.operator: spec.version for spec in specifier}
    for operator in PINNING_OPERATORS:
        version = clauses.get(operator)
        if version and "*" not in version:
            return version
    return ""


def _is_extras_only_marker(marker: Optional[object]) -> bool:
    """Check if a marker only applies when an extra is requested."""
    if marker is None:
        return False
    return "extra" in str(marker)


def extract_license_from_info(info: dict[str, Any]) -> str:
    """Extract a license from the ``info`` block of a PyPI response.

    Tries ``license_expression``, then ``license`` (first non-empty line,
    since some projects paste the full text), then trove classifiers.

    Args:
        info: PyPI JSON API ``info`` dict.

    Returns:
        License string, or the "Unknown" sentinel.
    """
    expression = info.get("license_expression")
    if isinstance(expression, str) and expression.strip():
        return expression.strip()

    license_str = info.get("license")
    if isinstance(license_str, str):
        first_line = next(
            (line.strip() for line in license_str.splitlines() if line.strip()), ""
        )
        if first_line.upper() not in EMPTY_LICENSE_VALUES:
            return first_line

    classifiers = info.get("classifiers")
    if not isinstance(classifiers, list):
        classifiers = []
    for classifier in classifiers:
        if isinstance(classifier, str) and classifier in CLASSIFIER_TO_SPDX:
            return CLASSIFIER_TO_SPDX[classifier]

    return UNKNOWN_LICENSE


class PyPIRegistryClient(BaseRegistryClient):
    """Adapter for the PyPI JSON API."""

    ecosystem = Ecosystem.PYTHON

    def metadata_url(self, name: str) -> str:
        """Project JSON URL."""
        return f"{self._registry_url}/{name}/json"

    def version_url(self, name: str, version: str) -> str:
        """Release JSON URL."""
        return f"{self._registry_url}/{name}/{version}/json"

    def page_url(self, name: str) -> str:
        """pypi.org project page."""
        return f"{self._package_url}/{name}/"

    def normalize_name(self, name: str) -> str:
        """PEP 503 normalization."""
        return normalize_name(name)

    def parse_metadata(self, name: str, payload: dict[str, Any]) -> PackageMetadata:
        """Build the version index from a project response.

        ``releases`` only lists versions; the ``info`` block describes the
        latest release and is attached to it. Other versions are loaded on
        demand by :meth:`load_version_data`.
        """
        info = payload.get("info")
        if not isinstance(info, dict):
            info = {}
        latest = info.get("version")
        default_version = latest if isinstance(latest, str) and latest else None

        releases = payload.get("releases")
        versions: dict[str, Optional[dict[str, Any]]] = {}
        if isinstance(releases, dict):
            versions = {version: None for version in releases}
        if default_version:
            versions[default_version] = info

        return PackageMetadata(
            name=name,
            versions=versions,
            default_version=default_version,
        )

    async def load_version_data(
        self, metadata: PackageMetadata, version: str
    ) -> dict[str, Any]:
        """Return the ``info`` block of a release, fetching it if needed.

        Raises:
            RegistryUnavailable: If the release document cannot be fetched.
        """
        data = metadata.versions.get(version)
        if data is not None:
            return data

        payload = await self.get_json(
            self.version_url(metadata.name, version), metadata.name
        )
        info = payload.get("info")
        return info if isinstance(info, dict) else {}

    def extract_license(self, version_data: dict[str, Any]) -> str:
        """License from ``info`` fields and classifiers."""
        return extract_license_from_info(version_data)

    def extract_dependencies(self, version_data: dict[str, Any]) -> dict[str, str]:
        """Runtime requirements from ``requires_dist``.

        Extras-only requirements and requirements whose environment marker
        does not match the running interpreter are skipped.
        """
        requires_dist = version_data.get("requires_dist")
        if not isinstance(requires_dist, list):
            requires_dist = []

        dependencies: dict[str, str] = {}
        for req_str in requires_dist:
            if not isinstance(req_str, str):
                logger.debug("Skipping non-string requirement %r", req_str)
                continue
            try:
                req = Requirement(req_str)
            except InvalidRequirement:
                logger.debug("Skipping malformed requirement %r", req_str)
                continue

            if _is_extras_only_marker(req.marker):
                continue
            if req.marker and not req.marker.evaluate():
                continue

            dependencies[req.name] = specifier_to_version(req.specifier)
        return dependencies

    def details_url(self, name: str, version: str) -> str:
        """Release page on pypi.org."""
        return f"{self._package_url}/{name}/{version}/"
