"""Manifest discovery and requirement extraction."""
import json
import logging
import re
from collections import deque
from pathlib import Path
from typing import Iterable, Optional

from license_checker.exceptions import ManifestError
from license_checker.models.dependency import RequirementSpec

logger = logging.getLogger(__name__)

# Directories never searched for manifests
SKIPPED_DIRS = frozenset(
    {
        ".git",
        ".hg",
        ".svn",
        "node_modules",
        "__pycache__",
        ".venv",
        "venv",
        "venvpython",
        ".tox",
        ".nox",
        ".mypy_cache",
        ".pytest_cache",
    }
)

# Separators recognized in requirement list lines, first match wins
REQUIREMENT_SEPARATORS = ("===", "==", ">=")

_EXTRAS = re.compile(r"\[.*?\]")
_OPTION_TAIL = re.compile(r"\s+--")
# Never part of a distribution name or a single version
_OPERATOR_CHARS = re.compile(r"[<>=!~,]")


def find_file(root: Path, target: str) -> Optional[Path]:
    """Find a file by name below a root directory.

    The search is breadth-first, so the shallowest match wins; entries within
    one directory are visited in sorted order.

    Args:
        root: Directory to search.
        target: Exact file name.

    Returns:
        Path to the file, or None if not found.
    """
    if not root.is_dir():
        return None

    queue: deque[Path] = deque([root])
    while queue:
        directory = queue.popleft()
        try:
            entries = sorted(directory.iterdir())
        except OSError as e:
            logger.debug("Cannot list %s: %s", directory, e)
            continue

        subdirs: list[Path] = []
        for entry in entries:
            if entry.is_dir():
                if entry.name not in SKIPPED_DIRS and not entry.is_symlink():
                    subdirs.append(entry)
            elif entry.name == target:
                return entry
        queue.extend(subdirs)

    return None


def find_first(root: Path, targets: Iterable[str]) -> Optional[Path]:
    """Find the first of several file names, tried in order."""
    for target in targets:
        found = find_file(root, target)
        if found is not None:
            return found
    return None


def parse_package_json(path: Path) -> list[RequirementSpec]:
    """Extract top-level dependencies from a package.json manifest.

    Args:
        path: Path to package.json.

    Returns:
        One RequirementSpec per entry of the ``dependencies`` map.

    Raises:
        ManifestError: If the file cannot be read or is not a JSON object.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError(f"Cannot read manifest '{path}': {e}") from e

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ManifestError(f"Invalid JSON in '{path}': {e}") from e

    if not isinstance(data, dict):
        raise ManifestError(
            f"Invalid manifest '{path}': expected an object at root level, "
            f"got {type(data).__name__}"
        )

    dependencies = data.get("dependencies")
    if not dependencies:
        logger.info("No dependencies declared in %s", path)
        return []
    if not isinstance(dependencies, dict):
        raise ManifestError(f"Invalid manifest '{path}': 'dependencies' is not a map")

    return [
        RequirementSpec(
            name=name,
            version_specifier=version if isinstance(version, str) else "",
        )
        for name, version in dependencies.items()
    ]


def parse_requirement_line(line: str) -> Optional[RequirementSpec]:
    """Parse one requirement list line.

    Only the first clause is read: comments, environment markers, trailing
    ``--option`` flags and further comma-separated clauses are dropped.

    Args:
        line: A line of the form ``name==version`` or ``name>=version``,
            optionally with extras, an environment marker or a comment.

    Returns:
        RequirementSpec, or None if no recognized separator is present or
        the first clause is not a plain name and version.
    """
    text = line.split("#", 1)[0].split(";", 1)[0]
    text = _OPTION_TAIL.split(text, 1)[0]
    text = text.split(",", 1)[0].strip()
    for separator in REQUIREMENT_SEPARATORS:
        if separator not in text:
            continue
        name, version = text.split(separator, 1)
        name = _EXTRAS.sub("", name).strip()
        version_tokens = version.split()
        version = version_tokens[0] if version_tokens else ""
        if (
            not name
            or name.startswith("-")
            or _OPERATOR_CHARS.search(name)
            or _OPERATOR_CHARS.search(version)
        ):
            return None
        return RequirementSpec(name=name, version_specifier=version)
    return None


def parse_requirements_txt(path: Path) -> list[RequirementSpec]:
    """Extract top-level requirements from a plain-text requirement list.

    Blank lines and comments are ignored. Lines without a recognized
    separator are skipped with a warning.

    Args:
        path: Path to the requirement list.

    Returns:
        One RequirementSpec per recognized line.

    Raises:
        ManifestError: If the file cannot be read.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError(f"Cannot read requirement list '{path}': {e}") from e

    specs: list[RequirementSpec] = []
    for lineno, raw_line in enumerate(content.splitlines(), start=1):
        stripped = raw_line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        spec = parse_requirement_line(stripped)
        if spec is None:
            logger.warning(
                "Skipping unrecognized requirement at %s:%d: %r",
                path,
                lineno,
                stripped,
            )
            continue
        specs.append(spec)
    return specs
