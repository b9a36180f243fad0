"""Shared fixtures for license-checker tests."""
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Iterator, Optional, Union
from unittest.mock import MagicMock

import pytest
from click.testing import CliRunner

from license_checker.analysis.flatten import flatten_all
from license_checker.models.dependency import (
    DependencyForest,
    DependencyNode,
    Ecosystem,
    ResolutionError,
)
from license_checker.models.report import LicenseReport


def _make_response(
    status_code: int = 200,
    json_data: Any = None,
    text: str = "",
) -> MagicMock:
    """Build a mock httpx.Response."""
    response = MagicMock()
    response.status_code = status_code
    if isinstance(json_data, Exception):
        response.json.side_effect = json_data
    else:
        response.json.return_value = json_data
    response.text = text
    return response


class FakeHttpClient:
    """Stand-in for httpx.AsyncClient routing GET requests by URL.

    Unknown URLs answer 404; exception values are raised.
    """

    def __init__(
        self, routes: Optional[dict[str, Union[MagicMock, Exception]]] = None
    ) -> None:
        self.routes = dict(routes or {})
        self.requested: list[str] = []

    async def get(self, url: str, **kwargs: Any) -> MagicMock:
        self.requested.append(url)
        outcome = self.routes.get(url)
        if outcome is None:
            return _make_response(404)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def _npm_packument(
    name: str,
    versions: dict[str, dict[str, Any]],
    latest: Optional[str] = None,
    **extra: Any,
) -> dict[str, Any]:
    """Build an npm registry document.

    Args:
        name: Package name.
        versions: Version -> version metadata (license, dependencies, ...).
        latest: dist-tags.latest value.
        extra: Additional package-level fields.
    """
    document: dict[str, Any] = {"name": name, "versions": versions}
    if latest is not None:
        document["dist-tags"] = {"latest": latest}
    document.update(extra)
    return document


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def make_response() -> Callable[..., MagicMock]:
    """Factory for mock HTTP responses."""
    return _make_response


@pytest.fixture
def fake_http() -> type[FakeHttpClient]:
    """The FakeHttpClient class, instantiated with a route table."""
    return FakeHttpClient


@pytest.fixture
def npm_packument() -> Callable[..., dict[str, Any]]:
    """Factory for npm registry documents."""
    return _npm_packument


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    """Undo configure_logging() so caplog sees package records."""
    yield
    logger = logging.getLogger("license_checker")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def sample_report() -> LicenseReport:
    """Report with one Node.js tree, one Python root and one unresolved package."""
    node_forest = DependencyForest(
        ecosystem=Ecosystem.NODE,
        roots=[
            DependencyNode(
                name="express",
                requested_version="4.18.2",
                version="4.18.2",
                license="MIT",
                details_url="https://www.npmjs.com/package/express",
                ecosystem=Ecosystem.NODE,
                children=[
                    DependencyNode(
                        name="gnu-dep",
                        requested_version="1.0.0",
                        version="1.0.0",
                        license="GPL-3.0",
                        details_url="https://www.npmjs.com/package/gnu-dep",
                        ecosystem=Ecosystem.NODE,
                    )
                ],
            )
        ],
    )
    python_forest = DependencyForest(
        ecosystem=Ecosystem.PYTHON,
        roots=[
            DependencyNode(
                name="flask",
                requested_version="2.0.1",
                version="2.0.1",
                details_url="https://pypi.org/project/flask/2.0.1/",
                ecosystem=Ecosystem.PYTHON,
            )
        ],
        errors=[
            ResolutionError(
                ecosystem=Ecosystem.PYTHON,
                name="ghost",
                version_specifier="1.0",
                message="Registry returned HTTP 404 for ghost",
            )
        ],
    )
    forests = [node_forest, python_forest]
    return LicenseReport(
        forests=forests,
        records=flatten_all(forests),
        generated_at=datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc),
    )
