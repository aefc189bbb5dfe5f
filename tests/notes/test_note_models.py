"""Tests for the Note model and its normalisation helpers."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

import pytest

from inkdex.core.errors import ErrorCode, NoteError
from inkdex.index.query import ParsedQuery
from inkdex.notes.models import (
    Note,
    id_from_path,
    is_hidden,
    is_valid_slug,
    normalize_tag,
    normalize_tags,
    slugify,
)


class TestSlugs:
    """slugify / id_from_path tests."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("Trip to Japan", "trip-to-japan"),
            ("Special & Characters!", "special-characters"),
            ("  --leading and trailing--  ", "leading-and-trailing"),
            ("Café Notes", "cafe-notes"),
            ("2024 Plans", "2024-plans"),
        ],
    )
    def test_slugify(self, text: str, expected: str) -> None:
        """Slugs are lowercase ASCII words joined by single hyphens."""
        assert slugify(text) == expected
        assert is_valid_slug(expected)

    def test_id_from_path_uses_stem(self) -> None:
        """The file stem becomes the id."""
        assert id_from_path("/notes/Meeting Notes.md") == "meeting-notes"

    def test_id_from_path_hash_fallback_is_stable(self) -> None:
        """Stems with nothing slug-able get a stable hash id."""
        first = id_from_path("/notes/日本.md")
        second = id_from_path("/elsewhere/日本.md")

        assert first.startswith("note-")
        assert first == second
        assert is_valid_slug(first)


class TestTagNormalisation:
    """normalize_tag / normalize_tags tests."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("Work", "work"),
            ("#travel", "travel"),
            ("  spaced  ", "spaced"),
            ("work\x00", "work"),
            ("a\\b", "ab"),
            ("tab\tbed", "tabbed"),
            ("\x00", ""),
            ("#", ""),
            ("work/project", "work-project"),
            ("a//b", "a--b"),
        ],
    )
    def test_normalize_tag(self, raw: str, expected: str) -> None:
        """Control characters and backslashes are stripped, case folded."""
        assert normalize_tag(raw) == expected

    def test_normalize_tags_drops_empties_and_dedupes(self) -> None:
        """Empty results are dropped; duplicates collapse."""
        assert normalize_tags(["Work", "work", "\x00", 2024]) == {"work", "2024"}


class TestIsHidden:
    """Pure visibility rule."""

    def test_hidden_tag(self) -> None:
        """The 'hidden' tag hides regardless of path."""
        assert is_hidden({"hidden"}, "notes/a.md")

    def test_ignored_path(self) -> None:
        """A path matching an ignore pattern hides the note."""
        assert is_hidden(set(), "archive/old.md", ["archive/**"])

    def test_visible(self) -> None:
        """No hidden tag, no matching pattern: visible."""
        assert not is_hidden({"work"}, "projects/a.md", ["archive/**"])

    def test_no_path_only_tags_count(self) -> None:
        """Transient notes are hidden only by tag."""
        assert not is_hidden(set(), None, ["**"])

    def test_recorded_visibility_wins(self, tmp_path: Path) -> None:
        """A note read back from the index keeps the visibility it was indexed with."""
        note = Note(id="a", title="A", path=str(tmp_path / "archive" / "a.md"), hidden=True)

        assert note.is_hidden()
        assert note.to_dict()["hidden"] is True


class TestNote:
    """Note construction and behaviour."""

    def test_post_init_normalises(self) -> None:
        """Ids become slugs, titles default to the id, tags are cleaned."""
        note = Note(id="My Note", title="", tags={"Work", "bad\x00"})

        assert note.id == "my-note"
        assert note.title == "my-note"
        assert note.tags == {"work", "bad"}

    def test_from_markdown_file(self, tmp_path: Path) -> None:
        """Front matter fills title, tags and url; body is the rest."""
        # Given
        path = tmp_path / "Trip Plan.md"
        path.write_text(
            "---\ntitle: Trip to Japan\ntags: [travel, Japan]\nurl: https://example.com\n---\n"
            "Pack light.\n",
            encoding="utf-8",
        )

        # When
        note = Note.from_markdown_file(path)

        # Then
        assert note.id == "trip-plan"
        assert note.title == "Trip to Japan"
        assert note.tags == {"travel", "japan"}
        assert note.url == "https://example.com"
        assert note.body == "Pack light.\n"
        assert note.path == str(path)
        assert note.modified is not None and note.modified.tzinfo is not None
        assert note.created is not None

    def test_from_markdown_file_title_defaults_to_stem(self, tmp_path: Path) -> None:
        """Without front matter the file stem is the title."""
        path = tmp_path / "groceries.md"
        path.write_text("eggs\n", encoding="utf-8")

        note = Note.from_markdown_file(path)

        assert note.title == "groceries"
        assert note.body == "eggs\n"

    def test_from_markdown_file_unreadable(self, tmp_path: Path) -> None:
        """Undecodable files raise NoteError."""
        path = tmp_path / "binary.md"
        path.write_bytes(b"\xff\xfe\xfa")

        with pytest.raises(NoteError) as exc_info:
            Note.from_markdown_file(path)
        assert exc_info.value.code == ErrorCode.NOTE_READ_ERROR

    def test_from_parsed_query(self) -> None:
        """A prompt becomes a note skeleton with tags and url."""
        parsed = ParsedQuery.from_query("Read later #books https://example.com/a")

        note = Note.from_parsed_query(parsed)

        assert note.id == "read-later"
        assert note.title == "Read later"
        assert note.tags == {"books"}
        assert note.url == "https://example.com/a"
        assert note.path == "read-later.md"

    def test_new_bookmark(self) -> None:
        """Bookmarks carry the bookmark tag and fall back to the url as title."""
        note = Note.new_bookmark("https://example.com/page")

        assert note.tags == {"bookmark"}
        assert note.title == "https://example.com/page"
        assert note.url == "https://example.com/page"
        assert is_valid_slug(note.id)

    def test_file_path_requires_path(self) -> None:
        """Transient notes have no file."""
        with pytest.raises(NoteError) as exc_info:
            Note.new("Draft").file_path()
        assert exc_info.value.code == ErrorCode.NOTE_NO_PATH

    def test_file_path_rooted(self, tmp_path: Path) -> None:
        """Relative paths are resolved against the notes root."""
        note = Note(id="a", title="A", path="a.md")

        assert note.file_path(tmp_path) == tmp_path / "a.md"

    def test_add_tag(self) -> None:
        """add_tag normalises and ignores empties."""
        note = Note.new("X")
        note.add_tag("#Later")
        note.add_tag("\x00")

        assert note.tags == {"later"}

    def test_to_dict_is_flat_record(self, tmp_path: Path) -> None:
        """Serialised form has every field, tags sorted, ISO dates."""
        # Given
        when = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
        note = Note(
            id="a",
            title="A",
            path=str(tmp_path / "archive" / "a.md"),
            tags={"b", "a"},
            created=when,
            modified=when,
        )

        # When
        record = note.to_dict(["archive/**"], tmp_path)

        # Then
        assert record == {
            "id": "a",
            "title": "A",
            "body": None,
            "hidden": True,
            "tags": ["a", "b"],
            "url": None,
            "path": str(tmp_path / "archive" / "a.md"),
            "created": "2024-05-01T12:00:00+00:00",
            "modified": "2024-05-01T12:00:00+00:00",
        }
