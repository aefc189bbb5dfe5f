"""Glob matching for corpus-relative note paths.

Patterns are matched against POSIX-style paths relative to the notes root:

- ``archive/**`` hides everything below ``archive/``
- ``*.backup/**`` hides any top-level directory ending in ``.backup``
- ``**/drafts/*`` hides a ``drafts`` directory at any depth
- ``scratch.md`` hides a single file
"""

from __future__ import annotations

import fnmatch
from collections.abc import Iterable
from pathlib import PurePath

__all__ = ["is_path_ignored", "matches_glob", "to_relative_posix"]


def matches_glob(rel_path: str, pattern: str) -> bool:
    """Check if a path matches a glob pattern, with ** support."""
    if fnmatch.fnmatchcase(rel_path, pattern):
        return True
    # Handle **/pattern for any-depth matching
    if pattern.startswith("**/"):
        return fnmatch.fnmatchcase(rel_path, pattern[3:])
    # dir/** also matches the directory itself
    if pattern.endswith("/**"):
        return fnmatch.fnmatchcase(rel_path, pattern[:-3])
    return False


def to_relative_posix(path: str | PurePath, root: str | PurePath | None = None) -> str:
    """Return ``path`` relative to ``root`` with forward slashes.

    Paths outside ``root`` (or with no root given) are returned unchanged
    apart from separator normalisation.
    """
    p = PurePath(path)
    if root is not None:
        try:
            p = p.relative_to(PurePath(root))
        except ValueError:
            pass
    return p.as_posix()


def is_path_ignored(rel_path: str, patterns: Iterable[str]) -> bool:
    """Return True when ``rel_path`` matches any ignore pattern."""
    rel = rel_path.replace("\\", "/").lstrip("/")
    return any(matches_glob(rel, pattern) for pattern in patterns if pattern)
