from __future__ import annotations

from pathlib import Path

from .digest import sha256_file
from .errors import ConsistencyError


def check_class_parity(first: Path, second: Path, class_suffix: str = ".class") -> int:
    """Compare every class file of `first` with the same path under `second`.

    Files missing from `second` are not checked. Raises ConsistencyError on the
    first mismatch (sorted path order). Returns the number of pairs compared.
    """

    compared = 0
    for p in sorted(first.rglob(f"*{class_suffix}")):
        if not p.is_file():
            continue
        rel = p.relative_to(first)
        other = second / rel
        if not other.is_file():
            continue
        d1 = sha256_file(p)
        d2 = sha256_file(other)
        if d1 != d2:
            raise ConsistencyError(rel.as_posix(), d1, d2)
        compared += 1
    return compared
