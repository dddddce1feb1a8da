from __future__ import annotations

from dataclasses import dataclass
from typing import List

# ---- Exit codes ----
EXIT_OK = 0
EXIT_USAGE = 2
EXIT_INPUT = 10
EXIT_CONSISTENCY = 11
EXIT_COMBINE = 12
EXIT_OUTPUT = 13
EXIT_CONFIG = 14
EXIT_REPORT = 15
EXIT_INTERRUPTED = 130


class MergeError(Exception):
    """Fatal failure of a merge run. `exit_code` is what the CLI exits with."""

    exit_code = 1

    def details(self) -> List[str]:
        return []


class InputError(MergeError):
    exit_code = EXIT_INPUT


class ConfigError(MergeError):
    exit_code = EXIT_CONFIG


class CombineError(MergeError):
    exit_code = EXIT_COMBINE


class OutputError(MergeError):
    exit_code = EXIT_OUTPUT


class ReportError(MergeError):
    exit_code = EXIT_REPORT


class ConsistencyError(MergeError):
    """A class file differs between the two inputs."""

    exit_code = EXIT_CONSISTENCY

    def __init__(self, path: str, first_digest: str, second_digest: str) -> None:
        super().__init__(f"Class files differ: {path}")
        self.path = path
        self.first_digest = first_digest
        self.second_digest = second_digest

    def details(self) -> List[str]:
        return [
            f"  Intel SHA: {self.first_digest}",
            f"  ARM SHA:   {self.second_digest}",
        ]


@dataclass(frozen=True)
class MergeWarning:
    """Non-fatal asymmetry between the inputs; the run continues."""

    name: str
    message: str
