"""Dot-plot option files."""

from __future__ import annotations

import json
from dataclasses import fields
from pathlib import Path
from typing import Any

from biodot.core.types import DotPlotConfig
from biodot.legacy import LEGACY_OPTIONS

OPTION_NAMES: frozenset[str] = frozenset(f.name for f in fields(DotPlotConfig)) | frozenset(
    LEGACY_OPTIONS
)


def load_dot_options(path: str | Path) -> dict[str, Any]:
    """Read dot-plot options from a JSON object, keeping deprecated names.

    Unknown option names are reported together with the file they came from.
    """
    option_path = Path(path)
    if option_path.suffix.lower() != ".json":
        raise ValueError(f"Dot-plot options must be a .json file, got '{option_path.name}'.")
    if not option_path.is_file():
        raise FileNotFoundError(f"Dot-plot option file not found: {option_path}")

    text = option_path.read_text(encoding="utf-8")
    try:
        options = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(
            f"{option_path.name}: malformed JSON at line {exc.lineno}, column {exc.colno} ({exc.msg})."
        ) from exc
    if not isinstance(options, dict):
        raise ValueError(
            f"{option_path.name}: top level must map option names to values, "
            f"not {type(options).__name__}."
        )

    unknown = sorted(set(options) - OPTION_NAMES)
    if unknown:
        raise ValueError(f"{option_path.name}: unknown dot-plot option(s) {', '.join(unknown)}.")
    return options


def load_dot_config(path: str | Path) -> DotPlotConfig:
    """Build a `DotPlotConfig` from an option file, translating deprecated names."""
    return DotPlotConfig.from_dict(load_dot_options(path))
