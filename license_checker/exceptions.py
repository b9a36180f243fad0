"""Custom exceptions for license-checker."""


class LicenseCheckerError(Exception):
    """Base exception for all license-checker errors."""

    pass


class NetworkError(LicenseCheckerError):
    """Exception raised when a network request fails."""

    pass


class RegistryUnavailable(NetworkError):
    """Exception raised when a registry cannot serve usable package metadata.

    Covers transport failures, non-2xx responses, undecodable bodies and
    packages with no resolvable version.
    """

    pass


class ConfigurationError(LicenseCheckerError):
    """Exception raised when configuration is invalid."""

    pass


class ManifestError(LicenseCheckerError):
    """Exception raised when a manifest or requirement file cannot be read."""

    pass


class ReportError(LicenseCheckerError):
    """Exception raised when the report cannot be written."""

    pass
