"""Projection of dependency forests into flat records and tree documents."""
from typing import Any, Iterable, Union

from license_checker.constants import DIRECT_PARENT
from license_checker.models.dependency import (
    DependencyForest,
    DependencyNode,
    FlatDependencyRecord,
)

# Child used when a forest has no roots so tree renderers always get one root
EMPTY_TREE_PLACEHOLDER = "No dependencies found"


def flatten(
    forest: Union[DependencyForest, Iterable[DependencyNode]],
    parent: str = DIRECT_PARENT,
) -> list[FlatDependencyRecord]:
    """Flatten a forest into parent-annotated records.

    Traversal is pre-order: a node's record precedes the records of its
    children. Roots are annotated with ``parent``.

    Args:
        forest: A DependencyForest or an iterable of root nodes.
        parent: Parent label for the roots.

    Returns:
        One FlatDependencyRecord per node.
    """
    roots = forest.roots if isinstance(forest, DependencyForest) else forest
    records: list[FlatDependencyRecord] = []
    for node in roots:
        records.append(
            FlatDependencyRecord(
                name=node.name,
                version=node.version,
                license=node.license,
                details_url=node.details_url,
                ecosystem=node.ecosystem,
                parent=parent,
            )
        )
        if node.children:
            records.extend(flatten(node.children, parent=node.name))
    return records


def flatten_all(forests: Iterable[DependencyForest]) -> list[FlatDependencyRecord]:
    """Flatten several forests, one ecosystem after another."""
    records: list[FlatDependencyRecord] = []
    for forest in forests:
        records.extend(flatten(forest))
    return records


def node_to_dict(node: DependencyNode) -> dict[str, Any]:
    """Convert a dependency node to a nested dictionary.

    Args:
        node: The node to convert.

    Returns:
        Dictionary representation of the node and its subtree.
    """
    return {
        "name": node.name,
        "version": node.version,
        "license": node.license,
        "is_copyleft": node.is_copyleft,
        "category": node.category.value,
        "details_url": node.details_url,
        "ecosystem": node.ecosystem.value,
        "children": [node_to_dict(child) for child in node.children],
    }


def to_tree_document(forest: DependencyForest) -> dict[str, Any]:
    """Wrap a forest under a single synthetic root for tree visualization.

    Args:
        forest: The forest of one ecosystem.

    Returns:
        ``{"name": "<Label> Dependencies", "children": [...]}``; an empty
        forest gets a single placeholder child.
    """
    children = [node_to_dict(root) for root in forest.roots]
    if not children:
        children = [{"name": EMPTY_TREE_PLACEHOLDER, "children": []}]
    return {
        "name": f"{forest.ecosystem.label} Dependencies",
        "ecosystem": forest.ecosystem.value,
        "children": children,
    }
