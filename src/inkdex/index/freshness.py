"""Index freshness tracking and background refresh.

Two small files live in the index location next to the tantivy directory:

- ``index_metadata.txt``: epoch seconds of the last successful commit
- ``refresh.pending``: epoch seconds at which a background refresh was launched

A search that finds the index older than the staleness window launches a
detached ``inkdex index`` process and carries on with the current generation.
The pending marker keeps bursts of searches from launching one refresh each;
it expires after one staleness window so a crashed refresh does not block
later ones forever.
"""

from __future__ import annotations

import os
import subprocess
import sys
import tempfile
import time
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path

import structlog

from inkdex.config.constants import (
    MARKER_FILENAME,
    PENDING_FILENAME,
    STALENESS_WINDOW_SEC,
    WALK_MAX_DEPTH,
)

logger = structlog.get_logger()

Launcher = Callable[[Sequence[str]], object]


def default_launcher(command: Sequence[str]) -> subprocess.Popen[bytes]:
    """Start ``command`` detached from this process; no handle is kept."""
    return subprocess.Popen(
        list(command),
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        start_new_session=True,
        close_fds=True,
    )


def refresh_command(
    notes_dir: Path,
    index_dir: Path,
    *,
    ignore_patterns: Iterable[str] = (),
    recurse: bool = True,
    max_depth: int = WALK_MAX_DEPTH,
) -> list[str]:
    """``python -m inkdex index`` for the given corpus and index location.

    Walk and visibility settings are always spelled out; the child's own
    config never decides them.
    """
    command = [
        sys.executable,
        "-m",
        "inkdex",
        "index",
        "--quiet",
        "--notes-dir",
        str(notes_dir),
        "--index-dir",
        str(index_dir),
        "--recurse" if recurse else "--no-recurse",
        "--max-depth",
        str(max_depth),
    ]
    patterns = list(ignore_patterns)
    if not patterns:
        command.append("--no-ignore")
    for pattern in patterns:
        command.extend(["--ignore", pattern])
    return command


def _read_epoch(path: Path) -> float | None:
    try:
        text = path.read_text(encoding="utf-8").strip()
    except OSError:
        return None
    try:
        return float(text)
    except ValueError:
        logger.debug("freshness_marker_unparsable", path=str(path), content=text[:40])
        return None


def _write_atomic(path: Path, content: str) -> None:
    """Write via a temp file in the same directory, then ``os.replace``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp, path)
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise


class FreshnessTracker:
    """Last-built bookkeeping for one index location."""

    def __init__(
        self,
        index_location: Path,
        staleness_window: float = STALENESS_WINDOW_SEC,
        clock: Callable[[], float] = time.time,
        launcher: Launcher = default_launcher,
    ) -> None:
        self.index_location = Path(index_location)
        self.staleness_window = staleness_window
        self._clock = clock
        self._launcher = launcher

    @property
    def marker_path(self) -> Path:
        return self.index_location / MARKER_FILENAME

    @property
    def pending_path(self) -> Path:
        return self.index_location / PENDING_FILENAME

    def last_built(self) -> float | None:
        """Epoch seconds of the last successful rebuild, if recorded."""
        return _read_epoch(self.marker_path)

    def is_stale(self) -> bool:
        """True when no usable marker exists or it is older than the window."""
        built = self.last_built()
        if built is None:
            return True
        return self._clock() - built > self.staleness_window

    def mark_fresh(self) -> None:
        """Record a successful commit and clear any in-flight marker."""
        _write_atomic(self.marker_path, f"{int(self._clock())}\n")
        self.pending_path.unlink(missing_ok=True)
        logger.debug("index_marked_fresh", path=str(self.marker_path))

    def refresh_in_flight(self) -> bool:
        """A refresh was launched within the last staleness window."""
        launched = _read_epoch(self.pending_path)
        if launched is None:
            return False
        return self._clock() - launched <= self.staleness_window

    def trigger_background_refresh(self, command: Sequence[str]) -> bool:
        """Launch ``command`` detached. Launch failures are logged, never raised."""
        try:
            self._launcher(command)
        except OSError as e:
            logger.warning("refresh_launch_failed", command=command[0], error=str(e))
            return False

        try:
            _write_atomic(self.pending_path, f"{int(self._clock())}\n")
        except OSError as e:
            logger.debug("pending_marker_write_failed", error=str(e))
        logger.info("refresh_launched", index=str(self.index_location))
        return True

    def refresh_if_stale(self, command: Sequence[str]) -> bool:
        """Launch a refresh when stale and none is in flight. Returns True if launched."""
        if not self.is_stale():
            return False
        if self.refresh_in_flight():
            logger.debug("refresh_already_pending", index=str(self.index_location))
            return False
        return self.trigger_background_refresh(command)
