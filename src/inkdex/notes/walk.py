"""Note file discovery."""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

from inkdex.config.constants import NOTE_EXTENSION, WALK_MAX_DEPTH


def has_extension(path: Path, extension: str = NOTE_EXTENSION) -> bool:
    return path.name.endswith(extension)


def walk_files(
    root: Path,
    recurse: bool = True,
    max_depth: int = WALK_MAX_DEPTH,
    extension: str = NOTE_EXTENSION,
) -> Iterator[Path]:
    """Yield note files under ``root`` in sorted order.

    Depth counts like ``find -maxdepth``: files directly in ``root`` are at
    depth 1. With ``recurse`` off only depth 1 is visited.
    """
    root = Path(root)
    if not root.is_dir():
        return
    limit = max_depth if recurse else 1

    for dirpath, dirnames, filenames in os.walk(root):
        current = Path(dirpath)
        depth = len(current.relative_to(root).parts) + 1
        if depth >= limit:
            dirnames.clear()
        else:
            dirnames.sort()
        for name in sorted(filenames):
            path = current / name
            if has_extension(path, extension) and path.is_file():
                yield path
