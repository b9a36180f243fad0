"""npm registry adapter."""
from typing import Any
from urllib.parse import quote

from license_checker.models.dependency import Ecosystem
from license_checker.resolvers.license import extract_structured_license
from license_checker.resolvers.registry import BaseRegistryClient, PackageMetadata

NPM_REGISTRY_URL = "https://registry.npmjs.org"
NPM_PACKAGE_URL = "https://www.npmjs.com/package"

# Package-level fields used when the default version has no index entry
PACKAGE_LEVEL_FIELDS = ("license", "licenses", "dependencies")


def strip_range_prefix(specifier: str) -> str:
    """Remove leading ``^``/``~`` range shorthand from an npm specifier.

    No range solving happens: the remainder is looked up as an exact version.

    Args:
        specifier: Version specifier as declared, e.g. "^1.3.0".

    Returns:
        The specifier without range prefixes, e.g. "1.3.0".
    """
    return specifier.strip().lstrip("^~").strip()


class NpmRegistryClient(BaseRegistryClient):
    """Adapter for the public npm registry."""

    ecosystem = Ecosystem.NODE

    def metadata_url(self, name: str) -> str:
        """Packument URL; scoped names keep the @ and escape the slash."""
        return f"{self._registry_url}/{quote(name, safe='@')}"

    def page_url(self, name: str) -> str:
        """npmjs.com package page."""
        return f"{self._package_url}/{name}"

    def normalize_specifier(self, specifier: str) -> str:
        """Strip ``^``/``~`` prefixes."""
        return strip_range_prefix(specifier)

    def parse_metadata(self, name: str, payload: dict[str, Any]) -> PackageMetadata:
        """Build the version index from a packument.

        Args:
            name: Package name.
            payload: Registry response with ``versions`` and ``dist-tags``.

        Returns:
            PackageMetadata with ``dist-tags.latest`` as default version.
        """
        versions = payload.get("versions")
        if not isinstance(versions, dict):
            versions = {}

        dist_tags = payload.get("dist-tags")
        latest = dist_tags.get("latest") if isinstance(dist_tags, dict) else None

        default_data = {
            key: payload[key] for key in PACKAGE_LEVEL_FIELDS if key in payload
        }

        return PackageMetadata(
            name=name,
            versions={
                version: data if isinstance(data, dict) else None
                for version, data in versions.items()
            },
            default_version=latest if isinstance(latest, str) and latest else None,
            default_data=default_data or None,
        )

    def extract_license(self, version_data: dict[str, Any]) -> str:
        """License from ``license``/``licenses`` fields."""
        return extract_structured_license(version_data)

    def extract_dependencies(self, version_data: dict[str, Any]) -> dict[str, str]:
        """Runtime ``dependencies`` map with specifiers stripped of prefixes."""
        declared = version_data.get("dependencies")
        if not isinstance(declared, dict):
            return {}
        return {
            dep_name: self.normalize_specifier(spec) if isinstance(spec, str) else ""
            for dep_name, spec in declared.items()
        }
