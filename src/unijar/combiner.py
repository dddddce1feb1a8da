from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from typing import Callable, Dict, List, Protocol

from .errors import CombineError


class BinaryCombiner(Protocol):
    """Builds one multi-architecture binary out of two single-arch ones."""

    def combine(self, first: Path, second: Path, output: Path) -> None: ...

    def describe(self, path: Path) -> str: ...


def parse_lipo_info(text: str) -> List[str]:
    """Architecture names from `lipo -info` output.

    Formats:
      - "Architectures in the fat file: <path> are: x86_64 arm64"
      - "Non-fat file: <path> is architecture: arm64"
    """
    line = text.strip().splitlines()[-1] if text.strip() else ""
    if ": " not in line:
        return []
    return line.rsplit(": ", 1)[1].split()


class LipoCombiner:
    def __init__(self, tool: str = "lipo") -> None:
        self.tool = tool

    def _run(self, args: List[str]) -> str:
        cmd = [self.tool, *args]
        try:
            proc = subprocess.run(cmd, text=True, capture_output=True)
        except FileNotFoundError as e:
            raise CombineError(f"{self.tool} not found; use --combiner copy-first on non-macOS hosts") from e
        if proc.returncode != 0:
            msg = f"{' '.join(cmd)} failed (exit={proc.returncode})"
            if proc.stderr.strip():
                msg += "\n" + proc.stderr.rstrip("\n")
            raise CombineError(msg)
        return proc.stdout

    def combine(self, first: Path, second: Path, output: Path) -> None:
        self._run(["-create", str(first), str(second), "-output", str(output)])

    def describe(self, path: Path) -> str:
        return self._run(["-info", str(path)]).strip()


class CopyFirstCombiner:
    """Stand-in for hosts without lipo: keeps the Intel library as-is."""

    def combine(self, first: Path, second: Path, output: Path) -> None:
        shutil.copyfile(first, output)

    def describe(self, path: Path) -> str:
        return f"{Path(path).name}: copied from Intel input (not universal)"


COMBINERS: Dict[str, Callable[[], BinaryCombiner]] = {
    "lipo": LipoCombiner,
    "copy-first": CopyFirstCombiner,
}


def get_combiner(name: str) -> BinaryCombiner:
    try:
        return COMBINERS[name]()
    except KeyError:
        raise CombineError(f"unknown combiner: {name!r}") from None
