from __future__ import annotations

import json
import tempfile
from pathlib import Path

import pytest

from helpers import make_jar, read_jar, sha256_hex
from unijar.cli import main
from unijar.errors import EXIT_CONSISTENCY, EXIT_INPUT, EXIT_OK, EXIT_REPORT, EXIT_USAGE


@pytest.mark.parametrize("argv", [[], ["a.jar"], ["a.jar", "b.jar"], ["a.jar", "b.jar", "c.jar", "d.jar"]])
def test_wrong_argument_count_is_usage_error(argv: list, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as ei:
        main(argv)
    assert ei.value.code == EXIT_USAGE
    captured = capsys.readouterr()
    assert "usage: unijar" in captured.err
    assert "Cleaning up" not in captured.out


def test_merge_with_copy_first_and_report() -> None:
    with tempfile.TemporaryDirectory() as td:
        root = Path(td)
        intel = make_jar(root / "intel.jar", {"Foo.class": b"X", "lib.jnilib": b"x86_64", "only-intel.txt": b"i"})
        arm = make_jar(root / "arm.jar", {"Foo.class": b"X", "lib.jnilib": b"arm64"})
        out = root / "universal.jar"
        report = root / "report.json"

        code = main([str(intel), str(arm), str(out), "--combiner", "copy-first", "--report", str(report)])

        assert code == EXIT_OK
        assert read_jar(out)["lib.jnilib"] == b"x86_64"
        r = json.loads(report.read_text(encoding="utf-8"))
        assert r["output"]["size"] == out.stat().st_size
        assert r["native_entries"] == ["lib.jnilib"]
        assert [w["name"] for w in r["warnings"]] == ["only-intel.txt"]
        assert {"name": "lib.jnilib", "kind": "combined"}.items() <= r["entries"][1].items()


def test_config_file_changes_skip_set() -> None:
    with tempfile.TemporaryDirectory() as td:
        root = Path(td)
        files = {"fragment.properties": b"k=v", "notes.txt": b"n"}
        intel = make_jar(root / "intel.jar", files)
        arm = make_jar(root / "arm.jar", files)
        cfg = root / "unijar.json"
        cfg.write_text(json.dumps({"skip_names": ["notes.txt"]}), encoding="utf-8")
        out = root / "u.jar"

        assert main([str(intel), str(arm), str(out), "--config", str(cfg), "--combiner", "copy-first"]) == EXIT_OK
        assert sorted(read_jar(out)) == ["fragment.properties", "universal.txt"]


def test_class_mismatch_reports_path_and_digests(capsys: pytest.CaptureFixture[str]) -> None:
    with tempfile.TemporaryDirectory() as td:
        root = Path(td)
        intel = make_jar(root / "intel.jar", {"Foo.class": b"X"})
        arm = make_jar(root / "arm.jar", {"Foo.class": b"Y"})
        out = root / "u.jar"

        code = main([str(intel), str(arm), str(out), "--combiner", "copy-first"])

        assert code == EXIT_CONSISTENCY
        assert not out.exists()
        err = capsys.readouterr().err
        assert "ERROR: Class files differ: Foo.class" in err
        assert sha256_hex(b"X") in err
        assert sha256_hex(b"Y") in err


def test_missing_input_exit_code(capsys: pytest.CaptureFixture[str]) -> None:
    with tempfile.TemporaryDirectory() as td:
        root = Path(td)
        code = main([str(root / "a.jar"), str(root / "b.jar"), str(root / "u.jar")])
        assert code == EXIT_INPUT
        assert "input archive not found" in capsys.readouterr().err


def test_unwritable_report_is_report_error(capsys: pytest.CaptureFixture[str]) -> None:
    with tempfile.TemporaryDirectory() as td:
        root = Path(td)
        intel = make_jar(root / "intel.jar", {"a.txt": b"a"})
        arm = make_jar(root / "arm.jar", {"a.txt": b"a"})
        blocker = root / "blocker"
        blocker.write_text("a file, not a directory", encoding="utf-8")

        code = main([str(intel), str(arm), str(root / "u.jar"), "--report", str(blocker / "report.json")])

        assert code == EXIT_REPORT
        assert "ERROR: cannot write report" in capsys.readouterr().err
