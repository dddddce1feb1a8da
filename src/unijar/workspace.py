from __future__ import annotations

import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator


@dataclass(frozen=True)
class Workspace:
    root: Path
    first: Path  # Intel extraction
    second: Path  # ARM extraction
    merged: Path

    @staticmethod
    def under(root: Path) -> "Workspace":
        return Workspace(
            root=root,
            first=root / "d1",
            second=root / "d2",
            merged=root / "d3",
        )


@contextmanager
def merge_workspace(tmp_root: Path | None = None) -> Iterator[Workspace]:
    """
    Temporary directories for one merge run.

    Removed on every exit path (return, MergeError, KeyboardInterrupt).
    `tmp_root` selects the parent directory; default is the system temp dir.
    """
    if tmp_root is not None:
        Path(tmp_root).mkdir(parents=True, exist_ok=True)
    tmp_ctx = tempfile.TemporaryDirectory(
        prefix="unijar-", dir=str(tmp_root) if tmp_root is not None else None
    )
    try:
        ws = Workspace.under(Path(tmp_ctx.name))
        for d in (ws.first, ws.second, ws.merged):
            d.mkdir()
        yield ws
    finally:
        print("Cleaning up temp directories...")
        tmp_ctx.cleanup()
