from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Tuple

from jsonschema import Draft202012Validator

from .errors import ConfigError

CONFIG_ENV = "UNIJAR_CONFIG"

_NAME_LIST = {
    "type": "array",
    "items": {"type": "string", "minLength": 1},
    "uniqueItems": True,
}

CONFIG_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "unijar merge configuration",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "skip_names": _NAME_LIST,
        "native_suffixes": {**_NAME_LIST, "minItems": 1},
        "class_suffix": {"type": "string", "minLength": 1},
        "signature_dir": {"type": "string", "minLength": 1},
        "signature_suffixes": _NAME_LIST,
        "marker_name": {"type": "string", "minLength": 1, "pattern": "^[^/\\\\]+$"},
    },
}


@dataclass(frozen=True)
class MergeConfig:
    skip_names: Tuple[str, ...] = ("fragment.properties", ".api_description")
    native_suffixes: Tuple[str, ...] = (".jnilib",)
    class_suffix: str = ".class"
    # Signature files live directly under this top-level directory.
    signature_dir: str = "META-INF"
    signature_suffixes: Tuple[str, ...] = (".SF", ".RSA", ".DSA", ".EC")
    marker_name: str = "universal.txt"

    def is_skipped(self, name: str) -> bool:
        return name in self.skip_names

    def is_native(self, name: str) -> bool:
        return name.endswith(self.native_suffixes)

    def is_signature(self, name: str) -> bool:
        return name.endswith(self.signature_suffixes)


def validate_config(obj: Any) -> None:
    v = Draft202012Validator(CONFIG_SCHEMA)
    errs = sorted(v.iter_errors(obj), key=lambda e: list(e.path))
    if errs:
        msg = "; ".join([f"{list(e.path)}: {e.message}" for e in errs[:5]])
        raise ConfigError(f"invalid config: {msg}")


def config_from_dict(obj: Dict[str, Any], base: MergeConfig | None = None) -> MergeConfig:
    """Overlay validated keys on `base` (defaults when omitted)."""

    validate_config(obj)
    fields: Dict[str, Any] = {}
    for k, v in obj.items():
        fields[k] = tuple(v) if isinstance(v, list) else v
    return replace(base or MergeConfig(), **fields)


def load_config(path: Path) -> MergeConfig:
    p = Path(path)
    try:
        obj = json.loads(p.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"cannot read config {p}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"config is not valid JSON: {p}: {e}") from e
    return config_from_dict(obj)


def resolve_config(cli_path: str | None = None) -> MergeConfig:
    """
    Config precedence:
      - CLI: --config PATH
      - Env: UNIJAR_CONFIG=PATH
      - built-in defaults
    """
    if cli_path:
        return load_config(Path(cli_path))

    v = os.environ.get(CONFIG_ENV)
    if v is not None and v.strip():
        return load_config(Path(v.strip()))

    return MergeConfig()
