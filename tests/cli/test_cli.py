"""Tests for the ink command group."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from inkdex.cli.main import cli
from inkdex.index.engine import NoteEngine

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_env(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, notes_dir: Path, index_dir: Path
) -> list[list[str]]:
    """Point config at the test corpus and stub out background launches."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.setenv("INKDEX__NOTES__NOTES_DIR", str(notes_dir))
    monkeypatch.setenv("INKDEX__INDEX__INDEX_PATH", str(index_dir))
    launched: list[list[str]] = []

    def fake_popen(command, **kwargs):
        launched.append(list(command))

    monkeypatch.setattr("inkdex.index.freshness.subprocess.Popen", fake_popen)
    return launched


@pytest.fixture
def corpus(write_note) -> None:
    write_note("trip-planning.md", "Flights.", title="Trip Planning", tags=["travel"])
    write_note("trip-journal.md", "Day one.", title="Trip Journal", tags=["travel", "hidden"])
    write_note("grocery-list.md", "Milk.", title="Grocery List", tags=["errands"])
    write_note(
        "sub/link.md", "A good read.", title="Good Read", url="https://example.com/read"
    )


class TestIndexCommand:
    """ink index tests."""

    def test_index_reports_count(self, corpus: None) -> None:
        """A rebuild prints the document count."""
        result = runner.invoke(cli, ["index"])

        assert result.exit_code == 0, result.output
        assert "Indexed 4 notes" in result.output

    def test_index_quiet(self, corpus: None) -> None:
        """--quiet prints nothing."""
        result = runner.invoke(cli, ["index", "-q"])

        assert result.exit_code == 0
        assert result.output == ""

    def test_index_dir_options(self, tmp_path: Path, write_note) -> None:
        """--notes-dir and --index-dir override the config."""
        other = tmp_path / "other-notes"
        other.mkdir()
        (other / "x.md").write_text("x", encoding="utf-8")

        result = runner.invoke(
            cli,
            ["index", "--notes-dir", str(other), "--index-dir", str(tmp_path / "other-idx")],
        )

        assert result.exit_code == 0, result.output
        assert "Indexed 1 note " in result.output
        assert (tmp_path / "other-idx" / "index_metadata.txt").exists()

    def test_storage_failure_exits_1(self, tmp_path: Path, corpus: None) -> None:
        """Storage errors exit with status 1."""
        blocker = tmp_path / "blocker"
        blocker.write_text("file")

        result = runner.invoke(cli, ["index", "--index-dir", str(blocker / "idx")])

        assert result.exit_code == 1
        assert "INDEX_OPEN_FAILED" in result.output

    def test_refresh_command_keeps_ignored_notes_hidden(
        self, notes_dir: Path, index_dir: Path, write_note
    ) -> None:
        """A background rebuild classifies notes with the launching engine's patterns."""
        # Given
        write_note("new.md", "trip", title="New Trip")
        write_note("archive/old.md", "trip", title="Old Trip")
        engine = NoteEngine(
            notes_dir, index_dir, ignore_patterns=["archive/**"], auto_refresh=False
        )
        engine.rebuild()
        assert [n.title for n in engine.search("trip")] == ["New Trip"]

        # When
        command = engine.refresh_command()
        result = runner.invoke(cli, command[3:])

        # Then
        assert result.exit_code == 0, result.output
        assert [n.title for n in engine.search("trip")] == ["New Trip"]

    def test_ignore_and_no_ignore_conflict(self) -> None:
        """--ignore with --no-ignore is a usage error."""
        result = runner.invoke(cli, ["index", "--ignore", "a/**", "--no-ignore"])

        assert result.exit_code == 2


class TestSearchCommand:
    """ink search tests."""

    def test_search_lines(self, corpus: None, notes_dir: Path) -> None:
        """Results print as title<TAB>path."""
        runner.invoke(cli, ["index", "-q"])

        result = runner.invoke(cli, ["search", "trip"])

        assert result.exit_code == 0, result.output
        assert result.stdout.splitlines() == [
            f"Trip Planning\t{notes_dir / 'trip-planning.md'}"
        ]

    def test_search_json(self, corpus: None) -> None:
        """--json prints flat records."""
        runner.invoke(cli, ["index", "-q"])

        result = runner.invoke(cli, ["search", "--json", "--include-hidden", "trip"])

        assert result.exit_code == 0, result.output
        records = json.loads(result.stdout)
        assert sorted(r["title"] for r in records) == ["Trip Journal", "Trip Planning"]
        journal = next(r for r in records if r["title"] == "Trip Journal")
        assert journal["hidden"] is True
        assert journal["tags"] == ["hidden", "travel"]
        assert set(journal) == {
            "id", "title", "body", "hidden", "tags", "url", "path", "created", "modified"
        }

    def test_search_sort_and_limit(self, corpus: None) -> None:
        """-s title -l 2 gives the first two titles."""
        runner.invoke(cli, ["index", "-q"])

        result = runner.invoke(cli, ["search", "-s", "title", "-l", "2"])

        assert result.exit_code == 0, result.output
        titles = [line.split("\t")[0] for line in result.stdout.splitlines()]
        assert titles == ["Good Read", "Grocery List"]

    def test_bad_query_is_usage_error(self, corpus: None) -> None:
        """Query errors exit with status 2."""
        runner.invoke(cli, ["index", "-q"])

        result = runner.invoke(cli, ["search", "nosuchfield:x"])

        assert result.exit_code == 2

    def test_bad_limit_is_usage_error(self, corpus: None) -> None:
        """limit 0 is rejected as a usage error."""
        runner.invoke(cli, ["index", "-q"])

        result = runner.invoke(cli, ["search", "-l", "0", "trip"])

        assert result.exit_code == 2

    def test_unknown_sort_rejected_by_click(self) -> None:
        """Sort names are validated by click."""
        result = runner.invoke(cli, ["search", "-s", "newest", "x"])

        assert result.exit_code == 2

    def test_stale_search_launches_refresh(self, isolated_env: list[list[str]]) -> None:
        """Searching before any index exists launches a background index run."""
        result = runner.invoke(cli, ["search", "anything"])

        assert result.exit_code == 0, result.output
        assert len(isolated_env) == 1
        assert isolated_env[0][1:4] == ["-m", "inkdex", "index"]


class TestListCommand:
    """ink list tests."""

    def test_list_all(self, corpus: None) -> None:
        """Hidden notes are left out by default."""
        result = runner.invoke(cli, ["list"])

        assert result.exit_code == 0, result.output
        titles = [line.split("\t")[0] for line in result.stdout.splitlines()]
        assert titles == ["Grocery List", "Trip Planning", "Good Read"]

    def test_list_no_recurse_with_hidden(self, corpus: None) -> None:
        """--no-recurse stays in the root; --include-hidden adds the journal."""
        result = runner.invoke(cli, ["list", "--no-recurse", "--include-hidden"])

        titles = [line.split("\t")[0] for line in result.stdout.splitlines()]
        assert titles == ["Grocery List", "Trip Journal", "Trip Planning"]

    def test_list_tags(self, corpus: None) -> None:
        """-t filters by any of the given tags."""
        result = runner.invoke(cli, ["list", "-t", "errands,nothing"])

        assert [line.split("\t")[0] for line in result.stdout.splitlines()] == ["Grocery List"]


class TestMarkCommand:
    """ink mark list tests."""

    def test_mark_list(self, corpus: None) -> None:
        """Bookmarks print as title<TAB>url."""
        result = runner.invoke(cli, ["mark", "list"])

        assert result.exit_code == 0, result.output
        assert result.stdout.splitlines() == ["Good Read\thttps://example.com/read"]

    def test_mark_list_json(self, corpus: None) -> None:
        """--json prints note records."""
        result = runner.invoke(cli, ["mark", "list", "--json"])

        records = json.loads(result.stdout)
        assert [r["url"] for r in records] == ["https://example.com/read"]

    def test_mark_list_honours_recurse(
        self, corpus: None, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """With notes.recurse off, bookmarks in sub-directories are not listed."""
        monkeypatch.setenv("INKDEX__NOTES__RECURSE", "false")

        result = runner.invoke(cli, ["mark", "list"])

        assert result.exit_code == 0, result.output
        assert result.stdout == ""


class TestConfigErrors:
    """Config problems surface as click errors."""

    def test_invalid_config_file(self, tmp_path: Path) -> None:
        """A broken config file exits 1 with the error code."""
        bad = tmp_path / "bad.yaml"
        bad.write_text("limits: [unclosed")

        result = runner.invoke(cli, ["-c", str(bad), "list"])

        assert result.exit_code == 1
        assert "CONFIG_PARSE_ERROR" in result.output

    def test_version(self) -> None:
        """--version prints the program name."""
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "ink" in result.output
