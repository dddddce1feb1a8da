from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List

from .combiner import COMBINERS, get_combiner
from .config import CONFIG_ENV, resolve_config
from .errors import EXIT_INTERRUPTED, EXIT_OK, MergeError
from .merge import merge_archives
from .report import write_report


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="unijar",
        description="Merge an Intel and an ARM macOS JAR into one universal JAR.",
    )
    p.add_argument("intel_jar", help="JAR built for x86_64.")
    p.add_argument("arm_jar", help="JAR built for aarch64.")
    p.add_argument("output_jar", help="Universal JAR to write (relative to the current directory).")
    p.add_argument(
        "--config",
        help=f"JSON file overriding skip names, suffixes and marker name (default: ${CONFIG_ENV}).",
    )
    p.add_argument(
        "--combiner",
        choices=sorted(COMBINERS),
        default="lipo",
        help="Native library combiner; copy-first keeps the Intel library (non-macOS hosts).",
    )
    p.add_argument("--report", help="Write a JSON report of the merge to this path.")
    return p


def run(args: argparse.Namespace) -> int:
    config = resolve_config(args.config)
    combiner = get_combiner(args.combiner)
    result = merge_archives(
        Path(args.intel_jar),
        Path(args.arm_jar),
        Path(args.output_jar),
        config=config,
        combiner=combiner,
    )
    if args.report:
        write_report(Path(args.report), result)
    return EXIT_OK


def main(argv: List[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return run(args)
    except KeyboardInterrupt:
        return EXIT_INTERRUPTED
    except MergeError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        for line in e.details():
            print(line, file=sys.stderr)
        return e.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
