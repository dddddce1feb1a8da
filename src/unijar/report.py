from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

from .errors import MergeWarning, ReportError

# Entry kinds recorded while merging the top level of the Intel tree.
SKIPPED = "skipped"
COMBINED = "combined"
COPIED_DIR = "copied-dir"
COPIED_FILE = "copied-file"
COPIED_UNPAIRED = "copied-unpaired"


@dataclass(frozen=True)
class EntryAction:
    name: str
    kind: str
    detail: str | None = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"name": self.name, "kind": self.kind}
        if self.detail is not None:
            d["detail"] = self.detail
        return d


@dataclass
class MergeResult:
    intel: Path
    arm: Path
    output: Path
    size: int = 0
    classes_compared: int = 0
    actions: List[EntryAction] = field(default_factory=list)
    warnings: List[MergeWarning] = field(default_factory=list)
    removed_signatures: List[str] = field(default_factory=list)
    native_entries: List[str] = field(default_factory=list)

    def names(self, kind: str) -> List[str]:
        return [a.name for a in self.actions if a.kind == kind]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "inputs": {"intel": str(self.intel), "arm": str(self.arm)},
            "output": {"path": str(self.output), "size": self.size},
            "classes_compared": self.classes_compared,
            "entries": [a.to_dict() for a in self.actions],
            "warnings": [{"name": w.name, "message": w.message} for w in self.warnings],
            "removed_signatures": list(self.removed_signatures),
            "native_entries": list(self.native_entries),
        }


def write_report(path: Path, result: MergeResult) -> Path:
    p = Path(path)
    txt = json.dumps(result.to_dict(), indent=2, sort_keys=True) + "\n"
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(txt, encoding="utf-8")
    except OSError as e:
        raise ReportError(f"cannot write report {p}: {e}") from e
    return p
