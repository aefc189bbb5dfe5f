"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import os
import sys
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local inkdex package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of inkdex modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("inkdex"):
        del sys.modules[module_name]


NoteWriter = Callable[..., Path]


@pytest.fixture
def notes_dir(tmp_path: Path) -> Path:
    """Empty note collection root."""
    root = tmp_path / "notes"
    root.mkdir()
    return root


@pytest.fixture
def index_dir(tmp_path: Path) -> Path:
    """Index location (not created; the indexer creates it)."""
    return tmp_path / "cache" / "inkdex"


@pytest.fixture
def write_note(notes_dir: Path) -> NoteWriter:
    """Write a markdown note with optional front matter.

    ``write_note("trip.md", "body", title="Trip", tags=["travel"])``
    """

    def _write(
        rel_path: str,
        body: str = "",
        *,
        title: str | None = None,
        tags: list[str] | None = None,
        url: str | None = None,
        frontmatter: str | None = None,
        mtime: datetime | None = None,
    ) -> Path:
        path = notes_dir / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)

        meta_lines: list[str] = []
        if title is not None:
            meta_lines.append(f'title: "{title}"')
        if tags is not None:
            meta_lines.append("tags: [" + ", ".join(f'"{t}"' for t in tags) + "]")
        if url is not None:
            meta_lines.append(f"url: {url}")
        if frontmatter is not None:
            meta_lines.append(frontmatter)

        text = body
        if meta_lines:
            text = "---\n" + "\n".join(meta_lines) + "\n---\n" + body
        path.write_text(text, encoding="utf-8")

        if mtime is not None:
            ts = mtime.timestamp()
            os.utime(path, (ts, ts))
        return path

    return _write
