"""Core Note model.

A :class:`Note` is the canonical record for one note, whether it came from a
markdown file, a search hit, or a query typed at the prompt. Identity and tag
hygiene are settled here, at construction, so every later consumer (the index
schema in particular) can rely on them:

- ``id`` is a slug: lowercase ASCII letters, digits and single hyphens.
- ``tags`` are lowercase, non-empty and free of control characters and
  backslashes, so ``/tag/<name>`` is always a valid facet path.
"""

from __future__ import annotations

import hashlib
import re
import unicodedata
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

from inkdex.config.constants import BOOKMARK_TAG, HIDDEN_TAG, NOTE_EXTENSION
from inkdex.core.errors import NoteError
from inkdex.notes.frontmatter import parse_frontmatter
from inkdex.notes.ignore import is_path_ignored, to_relative_posix

if TYPE_CHECKING:
    from inkdex.index.query import ParsedQuery

logger = structlog.get_logger()

_SLUG_STRIP_RE = re.compile(r"[^a-z0-9]+")
_SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def slugify(text: str) -> str:
    """Lowercase ASCII slug: ``"Special & Characters!"`` -> ``"special-characters"``."""
    ascii_text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    return _SLUG_STRIP_RE.sub("-", ascii_text.lower()).strip("-")


def is_valid_slug(value: str) -> bool:
    return bool(_SLUG_RE.match(value))


def id_from_path(path: str | Path) -> str:
    """Slug for a note file; stems with nothing slug-able get a stable hash id."""
    stem = Path(path).stem
    slug = slugify(stem)
    if slug:
        return slug
    digest = hashlib.sha1(stem.encode("utf-8")).hexdigest()[:8]
    return f"note-{digest}"


def normalize_tag(tag: Any) -> str:
    """Facet-safe tag: control characters and backslashes stripped, lowercased.

    ``/`` becomes ``-`` so every tag is a single facet segment.

    Returns an empty string when nothing usable is left.
    """
    text = str(tag)
    cleaned = "".join(
        ch for ch in text if ch != "\\" and unicodedata.category(ch) != "Cc"
    )
    cleaned = cleaned.strip().lstrip("#").strip().lower()
    cleaned = cleaned.replace("/", "-")
    if cleaned != text.strip().lstrip("#").strip().lower():
        logger.debug("tag_sanitized", original=repr(text), sanitized=cleaned)
    return cleaned


def normalize_tags(tags: Iterable[Any]) -> set[str]:
    result: set[str] = set()
    for tag in tags:
        cleaned = normalize_tag(tag)
        if cleaned:
            result.add(cleaned)
    return result


def is_hidden(
    tags: Iterable[str],
    relative_path: str | None,
    ignore_patterns: Iterable[str] = (),
) -> bool:
    """A note is hidden if tagged ``hidden`` or its corpus-relative path is ignored."""
    if HIDDEN_TAG in tags:
        return True
    if relative_path is None:
        return False
    return is_path_ignored(relative_path, ignore_patterns)


def _file_times(path: Path) -> tuple[datetime | None, datetime | None]:
    try:
        st = path.stat()
    except OSError:
        return None, None
    # st_birthtime where the platform reports it, else inode change time
    created_ts = getattr(st, "st_birthtime", None) or st.st_ctime
    return (
        datetime.fromtimestamp(created_ts, tz=UTC),
        datetime.fromtimestamp(st.st_mtime, tz=UTC),
    )


@dataclass
class Note:
    """A single note in the collection."""

    id: str
    title: str
    path: str | None = None
    body: str | None = None
    tags: set[str] = field(default_factory=set)
    url: str | None = None
    created: datetime | None = None
    modified: datetime | None = None
    # Visibility as classified at index time; None for notes read from disk.
    hidden: bool | None = None

    def __post_init__(self) -> None:
        if not is_valid_slug(self.id):
            self.id = slugify(self.id) or id_from_path(self.id)
        if not self.title:
            self.title = self.id
        self.tags = normalize_tags(self.tags)

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def new(cls, title: str, slug: str | None = None) -> Note:
        """Transient note with no file behind it yet."""
        return cls(id=slug or slugify(title) or id_from_path(title), title=title)

    @classmethod
    def from_markdown_file(cls, path: str | Path) -> Note:
        """Read and parse a note file.

        Raises:
            NoteError: The file cannot be read or decoded.
        """
        path = Path(path)
        try:
            raw = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise NoteError.read_error(str(path), str(e)) from e

        parsed = parse_frontmatter(raw)
        created, modified = _file_times(path)
        note_id = id_from_path(path)
        return cls(
            id=note_id,
            title=parsed.title or path.stem,
            path=str(path),
            body=parsed.content,
            tags=set(parsed.tags),
            url=parsed.url,
            created=created,
            modified=modified,
        )

    @classmethod
    def from_parsed_query(cls, parsed: ParsedQuery) -> Note:
        """Note skeleton for a prompt like ``"Read later #books https://…"``."""
        note_id = parsed.slug or id_from_path(parsed.query)
        return cls(
            id=note_id,
            title=parsed.query,
            path=f"{note_id}{NOTE_EXTENSION}",
            tags=set(parsed.tags),
            url=parsed.url,
        )

    @classmethod
    def new_bookmark(
        cls,
        url: str,
        title: str | None = None,
        slug: str | None = None,
        description: str | None = None,
    ) -> Note:
        """Bookmark note; the title falls back to the URL itself."""
        title = title or url
        note_id = slug or slugify(title) or id_from_path(title)
        return cls(
            id=note_id,
            title=title,
            path=f"{note_id}{NOTE_EXTENSION}",
            body=description,
            tags={BOOKMARK_TAG},
            url=url,
        )

    # ------------------------------------------------------------------
    # Behaviour
    # ------------------------------------------------------------------

    def add_tag(self, tag: str) -> None:
        cleaned = normalize_tag(tag)
        if cleaned:
            self.tags.add(cleaned)

    def file_path(self, notes_root: Path | None = None) -> Path:
        """Absolute-or-rooted file location.

        Raises:
            NoteError: The note has no path.
        """
        if self.path is None:
            raise NoteError.no_path(self.id)
        path = Path(self.path)
        if notes_root is not None and not path.is_absolute():
            return Path(notes_root) / path
        return path

    def relative_path(self, notes_root: Path | None = None) -> str | None:
        if self.path is None:
            return None
        return to_relative_posix(self.path, notes_root)

    def is_hidden(
        self,
        ignore_patterns: Iterable[str] = (),
        notes_root: Path | None = None,
    ) -> bool:
        if self.hidden is not None:
            return self.hidden
        return is_hidden(self.tags, self.relative_path(notes_root), ignore_patterns)

    def to_dict(
        self,
        ignore_patterns: Iterable[str] = (),
        notes_root: Path | None = None,
    ) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "body": self.body,
            "hidden": self.is_hidden(ignore_patterns, notes_root),
            "tags": sorted(self.tags),
            "url": self.url,
            "path": str(self.file_path(notes_root)) if self.path is not None else None,
            "created": self.created.isoformat() if self.created else None,
            "modified": self.modified.isoformat() if self.modified else None,
        }
