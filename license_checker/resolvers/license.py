"""License inference chain.

Strategies run in order and the first non-empty answer wins:

1. structured registry metadata (already fetched by the registry client),
2. a heuristic scan of the package's public web page,
3. the "Unknown" sentinel.
"""
import logging
import re
from typing import Any, Callable, Optional, Sequence

import httpx

from license_checker.constants import UNKNOWN_LICENSE
from license_checker.exceptions import NetworkError
from license_checker.models.config import DEFAULT_SCRAPE_KEYWORDS
from license_checker.resolvers.base import BaseResolver

logger = logging.getLogger(__name__)

# Lines scanned after the first line mentioning "license"
DEFAULT_WINDOW_LINES = 10

LICENSE_MARKER = "license"


def _license_from_object(value: Any) -> Optional[str]:
    """Read ``type`` then ``name`` from a license object."""
    if not isinstance(value, dict):
        return None
    for key in ("type", "name"):
        text = value.get(key)
        if isinstance(text, str) and text.strip():
            return text.strip()
    return None


def extract_structured_license(version_data: Optional[dict[str, Any]]) -> str:
    """Extract a license from npm-style version metadata.

    Shapes are tried in priority order: ``license`` as a plain string,
    ``license`` as an object with ``type``/``name``, and the first element of
    a ``licenses`` array of such objects.

    Args:
        version_data: Metadata of one package version.

    Returns:
        The license string, or the "Unknown" sentinel.
    """
    if not version_data:
        return UNKNOWN_LICENSE

    declared = version_data.get("license")
    if isinstance(declared, str) and declared.strip():
        return declared.strip()

    from_object = _license_from_object(declared)
    if from_object:
        return from_object

    licenses = version_data.get("licenses")
    if isinstance(licenses, list) and licenses:
        from_array = _license_from_object(licenses[0])
        if from_array:
            return from_array

    return UNKNOWN_LICENSE


def _token_pattern(token: str) -> re.Pattern[str]:
    """Compile a token matcher bounded by non-letters.

    A trailing version suffix like "v3" is allowed so "LGPLv3" still matches
    "LGPL", while "MIT" does not match inside "permitted".
    """
    return re.compile(rf"(?<![A-Z]){re.escape(token.upper())}(?!(?!V\d)[A-Z])")


def scan_for_license(
    text: str,
    keywords: Optional[Sequence[Sequence[str]]] = None,
    window_lines: int = DEFAULT_WINDOW_LINES,
) -> Optional[str]:
    """Scan unstructured page text for a known license token.

    Only the first line containing "license" (case-insensitive) anchors the
    scan. That line and the following ``window_lines`` lines are checked line
    by line, each against the keywords in list order.

    Args:
        text: Page content.
        keywords: Ordered (token, canonical form) pairs.
        window_lines: Number of lines after the anchor line to inspect.

    Returns:
        Canonical form of the first token found, or None.
    """
    if not text:
        return None

    pairs = keywords if keywords is not None else DEFAULT_SCRAPE_KEYWORDS
    matchers = [(_token_pattern(token), canonical) for token, canonical in pairs]

    lines = text.splitlines()
    for index, line in enumerate(lines):
        if LICENSE_MARKER not in line.lower():
            continue
        for candidate in lines[index : index + window_lines + 1]:
            upper = candidate.upper()
            for matcher, canonical in matchers:
                if matcher.search(upper):
                    return canonical
        return None

    return None


class MetadataLicenseResolver(BaseResolver):
    """Strategy 1: license already extracted from registry metadata."""

    def __init__(self, license_text: Optional[str]) -> None:
        """Initialize with the structured license, if any.

        Args:
            license_text: License from registry metadata, possibly the sentinel.
        """
        self._license = license_text

    async def resolve(self, package_name: str, version: str) -> Optional[str]:
        """Return the structured license unless it is missing or the sentinel."""
        if not self._license or not self._license.strip():
            return None
        if self._license.strip() == UNKNOWN_LICENSE:
            return None
        return self._license.strip()


class PageLicenseResolver(BaseResolver):
    """Strategy 2: scrape the package's public web page for a license token."""

    def __init__(
        self,
        page_url: str,
        client: Optional[httpx.AsyncClient] = None,
        keywords: Optional[Sequence[Sequence[str]]] = None,
        window_lines: int = DEFAULT_WINDOW_LINES,
        timeout: float = 30.0,
    ) -> None:
        """Initialize with the page to scan.

        Args:
            page_url: Human-facing package page URL.
            client: Optional shared httpx.AsyncClient for connection reuse.
            keywords: Ordered (token, canonical form) pairs.
            window_lines: Lines scanned after the first "license" line.
            timeout: Request timeout in seconds.
        """
        self._page_url = page_url
        self._client = client
        self._keywords = keywords
        self._window_lines = window_lines
        self._timeout = timeout

    async def resolve(self, package_name: str, version: str) -> Optional[str]:
        """Fetch the package page and scan it for a license token."""
        content = await self._fetch_page()
        if not content:
            return None
        return scan_for_license(content, self._keywords, self._window_lines)

    async def _fetch_page(self) -> Optional[str]:
        """Fetch page content.

        Returns:
            Page text, or None on a non-2xx response.

        Raises:
            NetworkError: If the request fails.
        """

        async def do_fetch(client: httpx.AsyncClient) -> Optional[str]:
            try:
                response = await client.get(
                    self._page_url, timeout=httpx.Timeout(self._timeout)
                )
            except httpx.RequestError as e:
                raise NetworkError(f"Failed to fetch {self._page_url}: {e}") from e
            if not 200 <= response.status_code < 300:
                return None
            return response.text  # type: ignore[no-any-return]

        if self._client:
            return await do_fetch(self._client)

        async with httpx.AsyncClient(follow_redirects=True) as new_client:
            return await do_fetch(new_client)


class LicenseInferenceChain:
    """Ordered license inference with a guaranteed answer.

    Strategy failures, including network errors, fall through to the next
    strategy; the chain itself never raises.
    """

    def __init__(
        self,
        page_resolver_factory: Callable[[str], BaseResolver],
    ) -> None:
        """Initialize the chain.

        Args:
            page_resolver_factory: Builds the page-scrape strategy for a
                package page URL.
        """
        self._page_resolver_factory = page_resolver_factory

    async def infer(
        self,
        package_name: str,
        version: str,
        structured_license: Optional[str],
        page_url: str,
    ) -> str:
        """Infer the license of one package.

        Args:
            package_name: The package name.
            version: The resolved version.
            structured_license: License from registry metadata, or the sentinel.
            page_url: Public page scanned when metadata has no license.

        Returns:
            The license string, or "Unknown" when every strategy failed.
        """
        strategies: list[BaseResolver] = [
            MetadataLicenseResolver(structured_license),
            self._page_resolver_factory(page_url),
        ]
        for strategy in strategies:
            try:
                license_text = await strategy.resolve(package_name, version)
            except NetworkError as e:
                logger.debug(
                    "License strategy %s failed for %s@%s: %s",
                    type(strategy).__name__,
                    package_name,
                    version,
                    e,
                )
                continue
            if license_text:
                return license_text

        logger.debug("No license found for %s@%s", package_name, version)
        return UNKNOWN_LICENSE
