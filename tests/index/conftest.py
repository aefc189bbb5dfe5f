"""Shared fixtures for index tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from inkdex.index.engine import NoteEngine


class RecordingLauncher:
    """Stands in for the detached-process launcher; records commands."""

    def __init__(self, fail: bool = False) -> None:
        self.commands: list[list[str]] = []
        self.fail = fail

    def __call__(self, command: list[str]) -> None:
        if self.fail:
            raise OSError("exec format error")
        self.commands.append(list(command))


@pytest.fixture
def launcher() -> RecordingLauncher:
    return RecordingLauncher()


@pytest.fixture
def engine(notes_dir: Path, index_dir: Path, launcher: RecordingLauncher) -> NoteEngine:
    """Engine over the test corpus; background refresh is recorded, not run."""
    return NoteEngine(notes_dir, index_dir, launcher=launcher)
