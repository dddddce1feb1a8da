"""Universal JAR merge pipeline.

  extract both JARs -> compare class files -> merge top-level entries ->
  write marker -> drop META-INF signatures -> zip -> validate output

Known quirks kept on purpose:
  - only the Intel tree's top level is enumerated; entries that exist only in
    the ARM JAR are dropped without notice.
  - directories are copied from the Intel tree; apart from the class-file
    check their contents are not compared, and nested native libraries are
    not combined.
"""

from __future__ import annotations

import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Tuple

from .archive import ArchiveReader, ArchiveWriter, ZipArchiveReader, ZipArchiveWriter
from .combiner import BinaryCombiner, LipoCombiner
from .config import MergeConfig
from .errors import MergeError, MergeWarning, OutputError
from .parity import check_class_parity
from .report import (
    COMBINED,
    COPIED_DIR,
    COPIED_FILE,
    COPIED_UNPAIRED,
    SKIPPED,
    EntryAction,
    MergeResult,
)
from .workspace import merge_workspace


def resolve_output_path(path: Path, cwd: Path | None = None) -> Path:
    p = Path(path)
    if p.is_absolute():
        return p
    return (cwd or Path.cwd()) / p


def _copy_entry(src: Path, dst: Path) -> None:
    if src.is_dir():
        shutil.copytree(src, dst, symlinks=True)
    else:
        shutil.copy2(src, dst)


def merge_trees(
    first: Path,
    second: Path,
    dest: Path,
    config: MergeConfig,
    combiner: BinaryCombiner,
) -> Tuple[List[EntryAction], List[MergeWarning]]:
    actions: List[EntryAction] = []
    warnings: List[MergeWarning] = []

    for a1 in sorted(first.iterdir(), key=lambda p: p.name):
        name = a1.name
        a2 = second / name
        a3 = dest / name

        if config.is_skipped(name):
            print(f"  Skipping: {name}")
            actions.append(EntryAction(name, SKIPPED))
            continue

        if not a2.exists():
            w = MergeWarning(name, f"Missing in ARM JAR: {name} (copied from Intel JAR)")
            print(f"  Warning: {w.message}")
            warnings.append(w)
            _copy_entry(a1, a3)
            actions.append(EntryAction(name, COPIED_UNPAIRED))
            continue

        if config.is_native(name) and a1.is_file():
            print(f"  Creating universal binary: {name}")
            combiner.combine(a1, a2, a3)
            info = combiner.describe(a3)
            print(f"    Architectures: {info}")
            actions.append(EntryAction(name, COMBINED, info))
        elif a1.is_dir():
            print(f"  Copying directory: {name}")
            _copy_entry(a1, a3)
            actions.append(EntryAction(name, COPIED_DIR))
        else:
            print(f"  Copying file: {name}")
            _copy_entry(a1, a3)
            actions.append(EntryAction(name, COPIED_FILE))

    return actions, warnings


def marker_text(now: datetime) -> str:
    return f"Universal binary created {now.strftime('%a %b %d %H:%M:%S %Z %Y')}\n"


def write_marker(dest: Path, config: MergeConfig, now: datetime | None = None) -> Path:
    p = dest / config.marker_name
    p.write_text(marker_text(now or datetime.now(timezone.utc)), encoding="utf-8")
    return p


def scrub_signatures(dest: Path, config: MergeConfig) -> List[str]:
    """Delete signature files directly under the signature dir.

    Merging changes the signed bytes, so old signatures would fail verification.
    """
    sig_dir = dest / config.signature_dir
    if not sig_dir.is_dir():
        return []

    removed: List[str] = []
    for p in sorted(sig_dir.iterdir()):
        if p.is_file() and config.is_signature(p.name):
            p.unlink()
            removed.append(f"{config.signature_dir}/{p.name}")
    print(f"✓ Removed signature files ({len(removed)})")
    return removed


def validate_output(output: Path, reader: ArchiveReader, config: MergeConfig) -> Tuple[int, List[str]]:
    if not output.is_file():
        raise OutputError(f"Failed to create JAR: {output}")

    try:
        names = reader.list_names(output)
    except MergeError as e:
        output.unlink(missing_ok=True)
        raise OutputError(f"Failed to create JAR: {output} is not a readable archive") from e

    size = output.stat().st_size
    print(f"✓ Created universal JAR: {output} ({size} bytes)")

    natives = [n for n in names if config.is_native(n)]
    print("")
    print("Universal binaries in JAR:")
    for n in natives:
        print(n)
    return size, natives


def merge_archives(
    intel: Path,
    arm: Path,
    output: Path,
    config: MergeConfig | None = None,
    reader: ArchiveReader | None = None,
    writer: ArchiveWriter | None = None,
    combiner: BinaryCombiner | None = None,
    tmp_root: Path | None = None,
    now: datetime | None = None,
) -> MergeResult:
    """Merge an Intel JAR and an ARM JAR into one universal JAR at `output`.

    Raises a MergeError subclass on any failure; the temporary workspace is
    removed either way and `output` is only written when every step passed.
    """

    config = config or MergeConfig()
    reader = reader or ZipArchiveReader()
    writer = writer or ZipArchiveWriter()
    combiner = combiner or LipoCombiner()

    intel = Path(intel)
    arm = Path(arm)
    output = resolve_output_path(output)
    result = MergeResult(intel=intel, arm=arm, output=output)

    print("Creating Universal Binary JAR")
    print(f"  Intel JAR: {intel}")
    print(f"  ARM JAR:   {arm}")
    print(f"  Output:    {output}")

    with merge_workspace(tmp_root) as ws:
        print("Extracting Intel JAR...")
        reader.extract(intel, ws.first)
        print("Extracting ARM JAR...")
        reader.extract(arm, ws.second)

        print("Comparing class files...")
        result.classes_compared = check_class_parity(ws.first, ws.second, config.class_suffix)
        print(f"✓ All class files match ({result.classes_compared} compared)")

        print("Creating universal binary...")
        actions, warnings = merge_trees(ws.first, ws.second, ws.merged, config, combiner)
        result.actions.extend(actions)
        result.warnings.extend(warnings)

        write_marker(ws.merged, config, now)

        print("Cleaning manifest signatures...")
        result.removed_signatures = scrub_signatures(ws.merged, config)

        print(f"Creating JAR: {output}")
        writer.write(ws.merged, output)

    result.size, result.native_entries = validate_output(output, reader, config)
    print("✓ Universal binary creation complete")
    return result
