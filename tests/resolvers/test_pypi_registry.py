"""Tests for the PyPI registry adapter."""
from typing import Any, Optional

import pytest
from packaging.specifiers import SpecifierSet

from license_checker.constants import UNKNOWN_LICENSE
from license_checker.exceptions import RegistryUnavailable
from license_checker.models.dependency import Ecosystem
from license_checker.resolvers.pypi import (
    PYPI_PACKAGE_URL,
    PYPI_REGISTRY_URL,
    PyPIRegistryClient,
    extract_license_from_info,
    normalize_name,
    specifier_to_version,
)


def _client(http) -> PyPIRegistryClient:
    return PyPIRegistryClient(http, PYPI_REGISTRY_URL, PYPI_PACKAGE_URL)


def _project(
    name: str,
    version: str,
    releases: Optional[list[str]] = None,
    **info: Any,
) -> dict[str, Any]:
    """Build a PyPI project JSON document."""
    return {
        "info": {"name": name, "version": version, **info},
        "releases": {release: [] for release in (releases or [version])},
    }


class TestNormalizeName:
    """Tests for PEP 503 normalization."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("Flask", "flask"),
            ("zope.interface", "zope-interface"),
            ("typing_extensions", "typing-extensions"),
            ("Foo__Bar..baz", "foo-bar-baz"),
        ],
    )
    def test_normalize(self, name: str, expected: str) -> None:
        """Test names collapse to lowercase dash-separated form."""
        assert normalize_name(name) == expected


class TestSpecifierToVersion:
    """Tests for specifier reduction."""

    @pytest.mark.parametrize(
        ("specifier", "expected"),
        [
            ("==2.0.1", "2.0.1"),
            (">=1.4", "1.4"),
            (">=1.4,<2", "1.4"),
            ("~=3.1", "3.1"),
            ("<3", ""),
            ("", ""),
            ("==2.*", ""),
            (">=1.0,==1.2.0", "1.2.0"),
        ],
    )
    def test_reduce(self, specifier: str, expected: str) -> None:
        """Test the most pinning clause wins and ranges mean latest."""
        assert specifier_to_version(SpecifierSet(specifier)) == expected


class TestExtractLicenseFromInfo:
    """Tests for license extraction from the info block."""

    def test_license_expression_first(self) -> None:
        """Test license_expression takes priority."""
        info = {"license_expression": "Apache-2.0", "license": "MIT"}
        assert extract_license_from_info(info) == "Apache-2.0"

    def test_license_field(self) -> None:
        """Test the license field is used."""
        assert extract_license_from_info({"license": "BSD-3-Clause"}) == "BSD-3-Clause"

    def test_full_text_uses_first_line(self) -> None:
        """Test a pasted license text is reduced to its first line."""
        info = {"license": "\nMIT License\n\nCopyright (c) 2024 Someone\n"}
        assert extract_license_from_info(info) == "MIT License"

    @pytest.mark.parametrize("value", ["UNKNOWN", "None", "", None])
    def test_empty_values_fall_through_to_classifiers(
        self, value: Optional[str]
    ) -> None:
        """Test placeholder values defer to trove classifiers."""
        info = {
            "license": value,
            "classifiers": [
                "Programming Language :: Python",
                "License :: OSI Approved :: GNU General Public License v3 (GPLv3)",
            ],
        }
        assert extract_license_from_info(info) == "GPL-3.0"

    def test_nothing_declared(self) -> None:
        """Test the sentinel when nothing is declared."""
        assert extract_license_from_info({"classifiers": []}) == UNKNOWN_LICENSE

    @pytest.mark.parametrize("classifiers", [5, "MIT", {"a": 1}])
    def test_classifiers_not_a_list(self, classifiers: Any) -> None:
        """Test a non-list classifiers value is treated as empty."""
        info = {"license": None, "classifiers": classifiers}
        assert extract_license_from_info(info) == UNKNOWN_LICENSE

    def test_non_string_classifiers_skipped(self) -> None:
        """Test unhashable and null classifier entries are ignored."""
        info = {
            "classifiers": [
                None,
                ["nested"],
                {"k": "v"},
                "License :: OSI Approved :: MIT License",
            ]
        }
        assert extract_license_from_info(info) == "MIT"


class TestPyPIUrls:
    """Tests for URL construction."""

    def test_urls(self, fake_http) -> None:
        """Test metadata, page and details URLs."""
        client = _client(fake_http())

        assert client.metadata_url("requests") == "https://pypi.org/pypi/requests/json"
        assert client.version_url("requests", "2.31.0") == (
            "https://pypi.org/pypi/requests/2.31.0/json"
        )
        assert client.page_url("requests") == "https://pypi.org/project/requests/"
        assert client.details_url("requests", "2.31.0") == (
            "https://pypi.org/project/requests/2.31.0/"
        )

    def test_ecosystem_and_name_normalization(self, fake_http) -> None:
        """Test the adapter's ecosystem and name identity."""
        client = _client(fake_http())

        assert client.ecosystem == Ecosystem.PYTHON
        assert client.normalize_name("Typing_Extensions") == "typing-extensions"


class TestPyPIDependencies:
    """Tests for requires_dist handling."""

    def test_plain_requirements(self, fake_http) -> None:
        """Test requirement names and reduced specifiers."""
        deps = _client(fake_http()).extract_dependencies(
            {"requires_dist": ["Werkzeug>=2.0", "Jinja2 (>=3.0)", "click"]}
        )
        assert deps == {"Werkzeug": "2.0", "Jinja2": "3.0", "click": ""}

    def test_extras_skipped(self, fake_http) -> None:
        """Test extras-only requirements are not runtime dependencies."""
        deps = _client(fake_http()).extract_dependencies(
            {"requires_dist": ["pytest>=7; extra == 'test'", "idna"]}
        )
        assert deps == {"idna": ""}

    def test_non_matching_marker_skipped(self, fake_http) -> None:
        """Test requirements for other interpreters are skipped."""
        deps = _client(fake_http()).extract_dependencies(
            {"requires_dist": ["legacy-shim; python_version < '3.0'"]}
        )
        assert deps == {}

    def test_invalid_requirement_skipped(self, fake_http) -> None:
        """Test malformed entries do not break extraction."""
        deps = _client(fake_http()).extract_dependencies(
            {"requires_dist": ["not a valid ((requirement", "six"]}
        )
        assert deps == {"six": ""}

    def test_missing_requires_dist(self, fake_http) -> None:
        """Test a null requires_dist means no dependencies."""
        assert _client(fake_http()).extract_dependencies({"requires_dist": None}) == {}

    @pytest.mark.parametrize("requires_dist", [5, "six", {"six": ">=1"}])
    def test_requires_dist_not_a_list(self, fake_http, requires_dist: Any) -> None:
        """Test a non-list requires_dist means no dependencies."""
        deps = _client(fake_http()).extract_dependencies(
            {"requires_dist": requires_dist}
        )
        assert deps == {}

    def test_non_string_requirements_skipped(self, fake_http) -> None:
        """Test null and numeric entries are skipped before parsing."""
        deps = _client(fake_http()).extract_dependencies(
            {"requires_dist": [None, 42, ["six"], "idna>=3.4"]}
        )
        assert deps == {"idna": "3.4"}


class TestPyPIFetchPackage:
    """Tests for end-to-end package fetching."""

    @pytest.mark.asyncio
    async def test_latest_uses_project_info(self, fake_http, make_response) -> None:
        """Test the latest release needs a single request."""
        http = fake_http(
            {
                "https://pypi.org/pypi/flask/json": make_response(
                    json_data=_project(
                        "flask",
                        "3.0.0",
                        releases=["2.0.1", "3.0.0"],
                        license="BSD-3-Clause",
                        requires_dist=["click>=8.1.3"],
                    )
                )
            }
        )

        package = await _client(http).fetch_package("flask", "")

        assert package.version == "3.0.0"
        assert package.license == "BSD-3-Clause"
        assert package.dependencies == {"click": "8.1.3"}
        assert package.details_url == "https://pypi.org/project/flask/3.0.0/"
        assert http.requested == ["https://pypi.org/pypi/flask/json"]

    @pytest.mark.asyncio
    async def test_older_release_fetched_separately(
        self, fake_http, make_response
    ) -> None:
        """Test a pinned older release loads its own metadata."""
        http = fake_http(
            {
                "https://pypi.org/pypi/flask/json": make_response(
                    json_data=_project(
                        "flask", "3.0.0", releases=["2.0.1", "3.0.0"], license="BSD"
                    )
                ),
                "https://pypi.org/pypi/flask/2.0.1/json": make_response(
                    json_data={
                        "info": {
                            "name": "flask",
                            "version": "2.0.1",
                            "license": "BSD-3-Clause",
                            "requires_dist": ["Werkzeug>=2.0"],
                        }
                    }
                ),
            }
        )

        package = await _client(http).fetch_package("flask", "2.0.1")

        assert package.version == "2.0.1"
        assert package.license == "BSD-3-Clause"
        assert package.dependencies == {"Werkzeug": "2.0"}

    @pytest.mark.asyncio
    async def test_unknown_release_uses_latest(self, fake_http, make_response) -> None:
        """Test a version absent from releases resolves to latest."""
        http = fake_http(
            {
                "https://pypi.org/pypi/six/json": make_response(
                    json_data=_project("six", "1.16.0", license="MIT")
                )
            }
        )

        package = await _client(http).fetch_package("six", "1.99.0")

        assert package.version == "1.16.0"
        assert package.license == "MIT"

    @pytest.mark.asyncio
    async def test_release_document_failure_raises(
        self, fake_http, make_response
    ) -> None:
        """Test a failing release document makes the package unresolvable."""
        http = fake_http(
            {
                "https://pypi.org/pypi/flask/json": make_response(
                    json_data=_project("flask", "3.0.0", releases=["2.0.1", "3.0.0"])
                )
            }
        )

        with pytest.raises(RegistryUnavailable, match="404"):
            await _client(http).fetch_package("flask", "2.0.1")

    @pytest.mark.asyncio
    async def test_missing_info(self, fake_http, make_response) -> None:
        """Test a document without info or releases is unresolvable."""
        http = fake_http(
            {"https://pypi.org/pypi/odd/json": make_response(json_data={})}
        )

        with pytest.raises(RegistryUnavailable):
            await _client(http).fetch_package("odd", "")
