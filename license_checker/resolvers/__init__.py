"""Registry adapters, license inference and dependency resolution."""

from license_checker.resolvers.base import BaseResolver
from license_checker.resolvers.dependency import DependencyResolver, VisitedSet
from license_checker.resolvers.license import (
    LicenseInferenceChain,
    MetadataLicenseResolver,
    PageLicenseResolver,
    extract_structured_license,
    scan_for_license,
)
from license_checker.resolvers.npm import NpmRegistryClient, strip_range_prefix
from license_checker.resolvers.pypi import PyPIRegistryClient
from license_checker.resolvers.registry import (
    BaseRegistryClient,
    PackageMetadata,
    ResolvedPackage,
)

__all__ = [
    "BaseRegistryClient",
    "BaseResolver",
    "DependencyResolver",
    "LicenseInferenceChain",
    "MetadataLicenseResolver",
    "NpmRegistryClient",
    "PackageMetadata",
    "PageLicenseResolver",
    "PyPIRegistryClient",
    "ResolvedPackage",
    "VisitedSet",
    "extract_structured_license",
    "scan_for_license",
    "strip_range_prefix",
]
