"""Registry client adapter base class.

One adapter exists per ecosystem. Adapters fetch a package's version index,
pick the version to use, and extract its declared license and direct
dependencies.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx
from pydantic import BaseModel, Field

from license_checker.exceptions import RegistryUnavailable
from license_checker.models.dependency import Ecosystem

logger = logging.getLogger(__name__)


class PackageMetadata(BaseModel):
    """Version index of one package as served by a registry.

    A version maps to its metadata, or to None when the registry only lists
    the version and its data has to be loaded separately.
    """

    name: str
    versions: dict[str, Optional[dict[str, Any]]] = Field(default_factory=dict)
    default_version: Optional[str] = None
    default_data: Optional[dict[str, Any]] = Field(
        default=None,
        description="Package-level metadata used for the default version "
        "when the version index has no entry for it",
    )


class ResolvedPackage(BaseModel):
    """One package at the version actually used for license and dependencies."""

    name: str
    version: str
    license: str
    dependencies: dict[str, str] = Field(default_factory=dict)
    details_url: str
    page_url: str


class BaseRegistryClient(ABC):
    """Abstract registry adapter."""

    ecosystem: Ecosystem

    def __init__(
        self,
        client: httpx.AsyncClient,
        registry_url: str,
        package_url: str,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the adapter.

        Args:
            client: Shared httpx.AsyncClient.
            registry_url: Base URL of the metadata API.
            package_url: Base URL of human-facing package pages.
            timeout: Per-request timeout in seconds.
        """
        self._client = client
        self._registry_url = registry_url.rstrip("/")
        self._package_url = package_url.rstrip("/")
        self._timeout = timeout

    @abstractmethod
    def metadata_url(self, name: str) -> str:
        """URL of the package's metadata document."""

    @abstractmethod
    def page_url(self, name: str) -> str:
        """URL of the package's public web page."""

    @abstractmethod
    def parse_metadata(self, name: str, payload: dict[str, Any]) -> PackageMetadata:
        """Build the version index from a registry response."""

    @abstractmethod
    def extract_license(self, version_data: dict[str, Any]) -> str:
        """Extract the declared license, or the "Unknown" sentinel."""

    @abstractmethod
    def extract_dependencies(self, version_data: dict[str, Any]) -> dict[str, str]:
        """Extract declared direct runtime dependencies (name -> specifier)."""

    def normalize_specifier(self, specifier: str) -> str:
        """Normalize a version specifier before lookup and dedup."""
        return specifier.strip()

    def normalize_name(self, name: str) -> str:
        """Normalize a package name for identity comparisons."""
        return name

    def details_url(self, name: str, version: str) -> str:
        """Reference for manual verification of a resolved package."""
        return self.page_url(name)

    async def get_json(self, url: str, name: str) -> dict[str, Any]:
        """GET a JSON document from the registry.

        Args:
            url: Document URL.
            name: Package name, for error messages.

        Returns:
            Decoded JSON object.

        Raises:
            RegistryUnavailable: On network failure, non-2xx status or an
                undecodable body.
        """
        try:
            response = await self._client.get(
                url, timeout=httpx.Timeout(self._timeout)
            )
        except httpx.RequestError as e:
            raise RegistryUnavailable(f"Failed to fetch {name}: {e}") from e

        if not 200 <= response.status_code < 300:
            raise RegistryUnavailable(
                f"Registry returned HTTP {response.status_code} for {name}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise RegistryUnavailable(f"Malformed registry response for {name}") from e

        if not isinstance(payload, dict):
            raise RegistryUnavailable(f"Malformed registry response for {name}")
        return payload

    async def fetch_metadata(self, name: str) -> PackageMetadata:
        """Fetch the version index of a package.

        Raises:
            RegistryUnavailable: If the registry cannot serve the package.
        """
        payload = await self.get_json(self.metadata_url(name), name)
        return self.parse_metadata(name, payload)

    def resolve_version(self, metadata: PackageMetadata, requested: str) -> str:
        """Pick the version to use for a requested specifier.

        An empty specifier, or one that is not in the version index (a range,
        a yanked or deprecated release), resolves to the default version.

        Raises:
            RegistryUnavailable: If neither the requested nor a default
                version is available.
        """
        if requested and requested in metadata.versions:
            return requested

        if metadata.default_version:
            if requested:
                logger.debug(
                    "%s@%s not in version index, using %s",
                    metadata.name,
                    requested,
                    metadata.default_version,
                )
            return metadata.default_version

        raise RegistryUnavailable(
            f"No resolvable version for {metadata.name}@{requested or 'latest'}"
        )

    async def load_version_data(
        self, metadata: PackageMetadata, version: str
    ) -> dict[str, Any]:
        """Return metadata for one version of the package."""
        data = metadata.versions.get(version)
        if data is None and version == metadata.default_version:
            data = metadata.default_data
        return data or {}

    async def fetch_package(self, name: str, requested: str) -> ResolvedPackage:
        """Fetch and resolve one package.

        The returned version is always the one whose data supplied the
        license and dependencies.

        Args:
            name: Package name.
            requested: Normalized version specifier, possibly empty.

        Raises:
            RegistryUnavailable: If the package cannot be resolved.
        """
        metadata = await self.fetch_metadata(name)
        version = self.resolve_version(metadata, requested)
        version_data = await self.load_version_data(metadata, version)

        return ResolvedPackage(
            name=name,
            version=version,
            license=self.extract_license(version_data),
            dependencies=self.extract_dependencies(version_data),
            details_url=self.details_url(name, version),
            page_url=self.page_url(name),
        )
