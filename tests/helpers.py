from __future__ import annotations

import hashlib
import zipfile
from pathlib import Path
from typing import Dict, List


def sha256_hex(b: bytes) -> str:
    return hashlib.sha256(b).hexdigest()


def make_jar(path: Path, entries: Dict[str, bytes]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as zf:
        for name, data in entries.items():
            zf.writestr(name, data)
    return path


def read_jar(path: Path) -> Dict[str, bytes]:
    with zipfile.ZipFile(path) as zf:
        return {n: zf.read(n) for n in zf.namelist() if not n.endswith("/")}


class FakeCombiner:
    """Joins both inputs with '|'; each input's bytes name its architecture."""

    def __init__(self) -> None:
        self.calls: List[str] = []

    def combine(self, first: Path, second: Path, output: Path) -> None:
        self.calls.append(first.name)
        output.write_bytes(first.read_bytes() + b"|" + second.read_bytes())

    def describe(self, path: Path) -> str:
        archs = " ".join(p.decode() for p in path.read_bytes().split(b"|"))
        return f"Architectures in the fat file: {path} are: {archs}"
