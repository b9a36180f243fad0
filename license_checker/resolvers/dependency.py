"""Transitive dependency resolution against package registries.

Builds one dependency forest per ecosystem. Top-level requirements are
resolved concurrently, one task each; within a task the subtree is expanded
breadth-first from an explicit work queue.

A visited set shared by all tasks of a run cuts cycles and repeats: a
package reached a second time, by any path, is not expanded again and is
omitted at that position. The result is a forest, never a DAG.
"""
import asyncio
import logging
from collections import deque
from typing import Callable, Iterable, Optional

from license_checker.exceptions import NetworkError, RegistryUnavailable
from license_checker.models.dependency import (
    DependencyForest,
    DependencyNode,
    Ecosystem,
    RequirementSpec,
    ResolutionError,
)
from license_checker.resolvers.license import LicenseInferenceChain
from license_checker.resolvers.registry import BaseRegistryClient, ResolvedPackage

logger = logging.getLogger(__name__)

# Rate limiting for concurrent HTTP requests
MAX_CONCURRENT_REQUESTS = 10

VisitedKey = tuple[str, str]


class VisitedSet:
    """Set of (name, version) keys shared across concurrent tasks.

    :meth:`claim` performs check-then-mark under a lock so two tasks can
    never both expand the same key.
    """

    def __init__(self) -> None:
        """Initialize an empty set."""
        self._keys: set[VisitedKey] = set()
        self._lock = asyncio.Lock()

    async def claim(self, key: VisitedKey) -> bool:
        """Mark a key as visited.

        Args:
            key: (normalized name, version) pair.

        Returns:
            True if the caller claimed the key, False if it was already visited.
        """
        async with self._lock:
            if key in self._keys:
                return False
            self._keys.add(key)
            return True

    def __contains__(self, key: object) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)


class DependencyResolver:
    """Resolves the transitive dependency forest of one ecosystem."""

    def __init__(
        self,
        registry: BaseRegistryClient,
        inference: LicenseInferenceChain,
        max_concurrent_requests: int = MAX_CONCURRENT_REQUESTS,
        ignored_packages: Optional[Iterable[str]] = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            registry: Registry adapter of the ecosystem.
            inference: License inference chain.
            max_concurrent_requests: Bound on in-flight package resolutions.
            ignored_packages: Package names never resolved.
        """
        self._registry = registry
        self._inference = inference
        self._max_concurrent = max_concurrent_requests
        self._ignored = {
            registry.normalize_name(name) for name in (ignored_packages or [])
        }

    @property
    def ecosystem(self) -> Ecosystem:
        """Ecosystem this resolver works on."""
        return self._registry.ecosystem

    async def resolve(
        self,
        requirements: list[RequirementSpec],
        on_root_done: Optional[Callable[[], None]] = None,
    ) -> DependencyForest:
        """Resolve a forest, one tree per top-level requirement.

        A requirement that cannot be resolved is omitted and recorded in
        ``DependencyForest.errors``; it never aborts the others.

        Args:
            requirements: Top-level requirements of the project.
            on_root_done: Called once per finished top-level requirement.

        Returns:
            DependencyForest with resolved roots and collected errors.
        """
        visited = VisitedSet()
        semaphore = asyncio.Semaphore(self._max_concurrent)
        results: asyncio.Queue[DependencyNode] = asyncio.Queue()
        errors: asyncio.Queue[ResolutionError] = asyncio.Queue()

        async def resolve_root(spec: RequirementSpec) -> None:
            try:
                node = await self._resolve_tree(spec, visited, semaphore, errors)
                if node is not None:
                    await results.put(node)
            finally:
                if on_root_done is not None:
                    on_root_done()

        await asyncio.gather(*(resolve_root(spec) for spec in requirements))

        roots: list[DependencyNode] = []
        while not results.empty():
            roots.append(results.get_nowait())
        collected: list[ResolutionError] = []
        while not errors.empty():
            collected.append(errors.get_nowait())

        logger.info(
            "Resolved %d of %d %s top-level dependencies (%d errors)",
            len(roots),
            len(requirements),
            self.ecosystem.label,
            len(collected),
        )
        return DependencyForest(
            ecosystem=self.ecosystem, roots=roots, errors=collected
        )

    async def _resolve_tree(
        self,
        spec: RequirementSpec,
        visited: VisitedSet,
        semaphore: asyncio.Semaphore,
        errors: asyncio.Queue[ResolutionError],
    ) -> Optional[DependencyNode]:
        """Resolve one top-level requirement and its subtree.

        Returns:
            The root node, or None if the root was already visited, ignored
            or unresolvable.
        """
        expanded = await self._expand(
            spec.name, spec.version_specifier, visited, semaphore, errors
        )
        if expanded is None:
            return None

        root, declared = expanded
        pending: deque[tuple[DependencyNode, dict[str, str]]] = deque(
            [(root, declared)]
        )
        while pending:
            parent, dependencies = pending.popleft()
            for dep_name, dep_specifier in dependencies.items():
                child_expanded = await self._expand(
                    dep_name, dep_specifier, visited, semaphore, errors
                )
                if child_expanded is None:
                    continue
                child, child_dependencies = child_expanded
                parent.children.append(child)
                pending.append((child, child_dependencies))

        return root

    async def _expand(
        self,
        name: str,
        specifier: str,
        visited: VisitedSet,
        semaphore: asyncio.Semaphore,
        errors: asyncio.Queue[ResolutionError],
    ) -> Optional[tuple[DependencyNode, dict[str, str]]]:
        """Resolve a single candidate without its children.

        Returns:
            The node and its declared dependencies, or None if the candidate
            is ignored, already visited or unresolvable.
        """
        normalized = self._registry.normalize_name(name)
        if normalized in self._ignored:
            logger.debug("Skipping ignored package %s", name)
            return None

        requested = self._registry.normalize_specifier(specifier)
        if not await visited.claim((normalized, requested)):
            logger.debug("Already visited %s@%s", name, requested or "latest")
            return None

        try:
            async with semaphore:
                package = await self._fetch(name, requested)
                # One expansion per concrete release, whatever the specifier
                if package.version != requested and not await visited.claim(
                    (normalized, package.version)
                ):
                    logger.debug("Already visited %s@%s", name, package.version)
                    return None
                license_text = await self._inference.infer(
                    name, package.version, package.license, package.page_url
                )
        except NetworkError as e:
            logger.warning(
                "Could not resolve %s@%s: %s", name, requested or "latest", e
            )
            await errors.put(
                ResolutionError(
                    ecosystem=self.ecosystem,
                    name=name,
                    version_specifier=requested,
                    message=str(e),
                )
            )
            return None

        node = DependencyNode(
            name=name,
            requested_version=requested,
            version=package.version,
            license=license_text,
            details_url=package.details_url,
            ecosystem=self.ecosystem,
        )
        return node, package.dependencies

    async def _fetch(self, name: str, requested: str) -> ResolvedPackage:
        """Fetch one package from the registry adapter.

        A registry document that decodes but does not have the shape the
        adapter expects fails only this package.

        Raises:
            NetworkError: If the package cannot be fetched or parsed.
        """
        try:
            return await self._registry.fetch_package(name, requested)
        except (TypeError, ValueError, AttributeError, KeyError) as e:
            raise RegistryUnavailable(
                f"Malformed registry response for {name}: {e}"
            ) from e
