# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""
Script discovery - turn source roots and include/exclude patterns into files.

Patterns use directory-glob syntax on root-relative, '/'-separated paths:
- '*' and '?' match within a single path segment
- '**' matches zero or more whole segments
- a trailing '/' is shorthand for '/**'
- matching is case-sensitive

Roots are scanned in the order given. Within a root, directory entries are
visited in sorted name order and subdirectories are descended into where
their name sorts, so the resulting order is stable for a given file tree.
Files found under several roots are returned once per root.
"""

import logging
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, List, Sequence, Set, Tuple, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScriptFile:
    """A discovered script, qualified by the root it was found under."""
    root: Path
    relative_path: str  # '/'-separated, relative to root

    @property
    def path(self) -> Path:
        return self.root / self.relative_path

    @property
    def extension(self) -> str:
        """Text after the last '.' of the file name, '' if there is none."""
        name = self.relative_path.rsplit("/", 1)[-1]
        _, dot, extension = name.rpartition(".")
        return extension if dot else ""


@dataclass(frozen=True)
class FilterSpec:
    """Include and exclude patterns. No includes means include everything."""
    includes: Tuple[str, ...] = field(default_factory=tuple)
    excludes: Tuple[str, ...] = field(default_factory=tuple)

    def matches(self, relative_path: str) -> bool:
        if self.includes and not any(match_path(p, relative_path) for p in self.includes):
            return False
        return not any(match_path(p, relative_path) for p in self.excludes)


def _split(value: str) -> List[str]:
    return [part for part in value.replace("\\", "/").split("/") if part]


def _match_segments(pattern: Sequence[str], path: Sequence[str]) -> bool:
    if not pattern:
        return not path

    head = pattern[0]
    if head == "**":
        rest = pattern[1:]
        return any(_match_segments(rest, path[i:]) for i in range(len(path) + 1))

    if not path:
        return False
    return fnmatchcase(path[0], head) and _match_segments(pattern[1:], path[1:])


def match_path(pattern: str, path: str) -> bool:
    """
    Match a root-relative path against a directory-glob pattern.

    Example:
        >>> match_path("**/*.py", "build/setup.py")
        True
        >>> match_path("*.py", "build/setup.py")
        False
        >>> match_path("build/", "build/setup.py")
        True
    """
    normalized = pattern.replace("\\", "/")
    if normalized.endswith("/"):
        normalized += "**"
    return _match_segments(_split(normalized), _split(path))


def _scan(
    directory: Path,
    prefix: str,
    filter_spec: FilterSpec,
    found: List[str],
    visited: Set[Path],
) -> None:
    # Symlinked directories are followed once; a link back into the tree is not
    visited.add(directory.resolve())
    for entry in sorted(directory.iterdir(), key=lambda p: p.name):
        relative = f"{prefix}{entry.name}"
        if entry.is_dir():
            if entry.resolve() in visited:
                logger.debug(f"Skipping already scanned directory: {entry}")
                continue
            _scan(entry, f"{relative}/", filter_spec, found, visited)
        elif entry.is_file() and filter_spec.matches(relative):
            found.append(relative)


def discover(
    roots: Iterable[Union[str, Path]],
    filter_spec: FilterSpec = FilterSpec(),
) -> List[ScriptFile]:
    """
    Find the script files under each root that pass the filter.

    Args:
        roots: Directories to scan, in order
        filter_spec: Include/exclude patterns applied to root-relative paths

    Returns:
        ScriptFiles in scan order. Roots that are not directories contribute
        nothing and are reported as a warning.
    """
    scripts: List[ScriptFile] = []

    for root in roots:
        root = Path(root)
        if not root.is_dir():
            logger.warning(f"Script directory not found, skipping: {root}")
            continue

        found: List[str] = []
        _scan(root, "", filter_spec, found, set())
        logger.debug(f"Found {len(found)} script(s) under {root}")
        scripts.extend(ScriptFile(root=root, relative_path=rel) for rel in found)

    return scripts
