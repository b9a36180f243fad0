"""Scanner module: locate manifests, resolve dependencies, build the report."""
import asyncio
import logging
from functools import partial
from pathlib import Path
from typing import Callable, Iterable, Optional

import httpx
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from license_checker.analysis.flatten import flatten_all
from license_checker.discovery import (
    find_first,
    parse_package_json,
    parse_requirements_txt,
)
from license_checker.exceptions import ManifestError
from license_checker.models.config import CheckerConfig
from license_checker.models.dependency import (
    DependencyForest,
    Ecosystem,
    RequirementSpec,
)
from license_checker.models.report import LicenseReport
from license_checker.resolvers.base import BaseResolver
from license_checker.resolvers.dependency import DependencyResolver
from license_checker.resolvers.license import (
    LicenseInferenceChain,
    PageLicenseResolver,
)
from license_checker.resolvers.npm import NpmRegistryClient
from license_checker.resolvers.pypi import PyPIRegistryClient
from license_checker.resolvers.registry import BaseRegistryClient

logger = logging.getLogger(__name__)

ALL_ECOSYSTEMS: tuple[Ecosystem, ...] = (Ecosystem.NODE, Ecosystem.PYTHON)


def collect_requirements(
    root: Path,
    config: CheckerConfig,
    ecosystems: Iterable[Ecosystem] = ALL_ECOSYSTEMS,
) -> dict[Ecosystem, list[RequirementSpec]]:
    """Locate manifests below a root directory and extract requirements.

    An ecosystem whose file is missing or unreadable contributes no
    requirements; it never prevents the other ecosystem from being scanned.

    Args:
        root: Project root directory.
        config: Checker configuration.
        ecosystems: Ecosystems to scan.

    Returns:
        Top-level requirements per ecosystem, in ``ecosystems`` order.
    """
    requirements: dict[Ecosystem, list[RequirementSpec]] = {}
    for ecosystem in ecosystems:
        if ecosystem == Ecosystem.NODE:
            names, parse = config.manifest_names, parse_package_json
        else:
            names, parse = config.requirement_names, parse_requirements_txt

        path = find_first(root, names)
        if path is None:
            logger.info("No %s manifest found under %s", ecosystem.label, root)
            requirements[ecosystem] = []
            continue

        try:
            specs = parse(path)
        except ManifestError as e:
            logger.error("%s parse error: %s", ecosystem.label, e)
            specs = []
        logger.info(
            "Found %d %s requirements in %s", len(specs), ecosystem.label, path
        )
        requirements[ecosystem] = specs
    return requirements


def build_registry_client(
    ecosystem: Ecosystem, client: httpx.AsyncClient, config: CheckerConfig
) -> BaseRegistryClient:
    """Create the registry adapter for an ecosystem."""
    if ecosystem == Ecosystem.NODE:
        return NpmRegistryClient(
            client,
            registry_url=config.npm_registry_url,
            package_url=config.npm_package_url,
            timeout=config.request_timeout,
        )
    return PyPIRegistryClient(
        client,
        registry_url=config.pypi_registry_url,
        package_url=config.pypi_package_url,
        timeout=config.request_timeout,
    )


def build_inference_chain(
    client: httpx.AsyncClient, config: CheckerConfig
) -> LicenseInferenceChain:
    """Create the license inference chain sharing the HTTP client."""

    def page_resolver(page_url: str) -> BaseResolver:
        return PageLicenseResolver(
            page_url,
            client=client,
            keywords=config.scrape_keywords,
            window_lines=config.scrape_window_lines,
            timeout=config.request_timeout,
        )

    return LicenseInferenceChain(page_resolver)


def build_resolver(
    ecosystem: Ecosystem, client: httpx.AsyncClient, config: CheckerConfig
) -> DependencyResolver:
    """Create a dependency resolver for one ecosystem."""
    return DependencyResolver(
        build_registry_client(ecosystem, client, config),
        build_inference_chain(client, config),
        max_concurrent_requests=config.max_concurrent_requests,
        ignored_packages=config.ignored_packages,
    )


async def resolve_forests(
    requirements: dict[Ecosystem, list[RequirementSpec]],
    config: CheckerConfig,
    console: Optional[Console] = None,
    show_progress: bool = True,
) -> list[DependencyForest]:
    """Resolve every ecosystem concurrently.

    Args:
        requirements: Top-level requirements per ecosystem.
        config: Checker configuration.
        console: Optional Rich Console for progress display.
        show_progress: Whether to show progress indicator (default: True).

    Returns:
        One DependencyForest per ecosystem, in ``requirements`` order.
    """
    async with httpx.AsyncClient(follow_redirects=True) as client:

        async def run_all(
            callbacks: dict[Ecosystem, Optional[Callable[[], None]]],
        ) -> list[DependencyForest]:
            return list(
                await asyncio.gather(
                    *(
                        build_resolver(ecosystem, client, config).resolve(
                            specs, on_root_done=callbacks.get(ecosystem)
                        )
                        for ecosystem, specs in requirements.items()
                    )
                )
            )

        total = sum(len(specs) for specs in requirements.values())
        if console is None or not show_progress or total == 0:
            return await run_all({})

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            callbacks: dict[Ecosystem, Optional[Callable[[], None]]] = {}
            for ecosystem, specs in requirements.items():
                if not specs:
                    continue
                task_id = progress.add_task(
                    f"Resolving {len(specs)} {ecosystem.label} dependencies...",
                    total=len(specs),
                )
                callbacks[ecosystem] = partial(progress.advance, task_id)
            return await run_all(callbacks)


def build_report(forests: list[DependencyForest]) -> LicenseReport:
    """Flatten forests into a report."""
    return LicenseReport(forests=forests, records=flatten_all(forests))


async def scan_project(
    root: Path,
    config: CheckerConfig,
    ecosystems: Iterable[Ecosystem] = ALL_ECOSYSTEMS,
    console: Optional[Console] = None,
    show_progress: bool = True,
) -> LicenseReport:
    """Scan a project directory and build its license report.

    Args:
        root: Project root directory.
        config: Checker configuration.
        ecosystems: Ecosystems to scan.
        console: Optional Rich Console for progress display.
        show_progress: Whether to show progress indicator.

    Returns:
        LicenseReport with forests and flat records.
    """
    requirements = collect_requirements(root, config, ecosystems)
    forests = await resolve_forests(
        requirements, config, console=console, show_progress=show_progress
    )
    return build_report(forests)
