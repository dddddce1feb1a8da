"""Zip archive access behind narrow reader/writer interfaces.

The merge core only talks to `ArchiveReader` and `ArchiveWriter`; the zip
implementations here are the defaults. Output archives are reproducible:
entries are sorted and carry a fixed timestamp and fixed permissions.
"""

from __future__ import annotations

import zipfile
import zlib
from pathlib import Path, PurePosixPath
from typing import List, Protocol

from .errors import InputError, OutputError

# Earliest timestamp the zip format can represent.
FIXED_DATE_TIME = (1980, 1, 1, 0, 0, 0)
FILE_MODE = 0o644
DIR_MODE = 0o755


class ArchiveReader(Protocol):
    def extract(self, archive: Path, dest: Path) -> None: ...

    def list_names(self, archive: Path) -> List[str]: ...


class ArchiveWriter(Protocol):
    def write(self, src_dir: Path, archive: Path) -> None: ...


def _unsafe_member(name: str) -> bool:
    p = PurePosixPath(name.replace("\\", "/"))
    return p.is_absolute() or ".." in p.parts or (len(name) > 1 and name[1] == ":")


class ZipArchiveReader:
    def _open(self, archive: Path) -> zipfile.ZipFile:
        p = Path(archive)
        if not p.is_file():
            raise InputError(f"input archive not found: {p}")
        try:
            return zipfile.ZipFile(p)
        except (zipfile.BadZipFile, OSError) as e:
            raise InputError(f"not a readable zip archive: {p}: {e}") from e

    def extract(self, archive: Path, dest: Path) -> None:
        dest = Path(dest)
        dest.mkdir(parents=True, exist_ok=True)
        with self._open(archive) as zf:
            bad = [n for n in zf.namelist() if _unsafe_member(n)]
            if bad:
                raise InputError(f"archive member escapes extraction dir: {archive}: {bad[0]}")
            try:
                zf.extractall(dest)
            except (zipfile.BadZipFile, zlib.error, EOFError, OSError) as e:
                raise InputError(f"failed to extract {archive}: {e}") from e

    def list_names(self, archive: Path) -> List[str]:
        with self._open(archive) as zf:
            return zf.namelist()


class ZipArchiveWriter:
    def __init__(self, compression: int = zipfile.ZIP_DEFLATED) -> None:
        self.compression = compression

    def _entries(self, src_dir: Path) -> List[tuple[str, Path]]:
        out: List[tuple[str, Path]] = []
        for p in src_dir.rglob("*"):
            rel = p.relative_to(src_dir).as_posix()
            out.append((rel + "/" if p.is_dir() else rel, p))
        out.sort(key=lambda e: e[0])
        return out

    def write(self, src_dir: Path, archive: Path) -> None:
        src_dir = Path(src_dir)
        dst = Path(archive)
        dst.parent.mkdir(parents=True, exist_ok=True)

        # Write to a sibling temp file, then rename; a failed run leaves no output.
        tmp = dst.with_name(dst.name + ".tmp")
        try:
            with zipfile.ZipFile(tmp, "w", compression=self.compression) as zf:
                for name, p in self._entries(src_dir):
                    info = zipfile.ZipInfo(name, date_time=FIXED_DATE_TIME)
                    if name.endswith("/"):
                        info.external_attr = (0o040000 | DIR_MODE) << 16 | 0x10
                        zf.writestr(info, b"")
                    else:
                        info.external_attr = (0o100000 | FILE_MODE) << 16
                        info.compress_type = self.compression
                        zf.writestr(info, p.read_bytes())
            tmp.replace(dst)
        except OSError as e:
            tmp.unlink(missing_ok=True)
            raise OutputError(f"failed to write {dst}: {e}") from e
        except BaseException:
            tmp.unlink(missing_ok=True)
            raise
