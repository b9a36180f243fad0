"""Base license strategy interface."""

from abc import ABC, abstractmethod
from typing import Optional


class BaseResolver(ABC):
    """Abstract base class for license inference strategies.

    Each strategy either produces a license string or None, in which case the
    inference chain falls through to the next strategy.
    """

    @abstractmethod
    async def resolve(self, package_name: str, version: str) -> Optional[str]:
        """Resolve license for a package.

        Args:
            package_name: The package name to resolve.
            version: The resolved package version.

        Returns:
            License string (e.g., "MIT", "Apache-2.0"),
            or None if this strategy cannot determine it.

        Raises:
            NetworkError: If a network request fails.
        """
