"""Typed configuration and result containers for dot-plot statistics."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Mapping

import numpy as np
import pandas as pd

from biodot.legacy import translate_legacy_options

SEQUENTIAL = "sequential"
DIVERGING = "diverging"


@dataclass(frozen=True)
class DotPlotConfig:
    """All options of one dot-plot computation.

    - `layer`: assay for the statistics (`None` uses `X`).
    - `detection_limit`: values strictly above it count as detected.
    - `zlim`: explicit `(low, high)` clamp for the colour channel.
    - `colors`: colour override, passed through to the renderer.
    - `max_detected`: cap on the detected proportion.
    - `center`, `scale`: row-wise centering and scaling of averages.
    - `swap_rownames`: `adata.var` column whose values name the features.
    - `by_exprs_values`: assay for auxiliary fields (`None` follows `layer`).
    - `group_sentinel`: group name used when no group label is given.
    """

    layer: str | None = None
    detection_limit: float = 0.0
    zlim: tuple[float, float] | None = None
    colors: tuple[str, ...] | None = None
    max_detected: float | None = None
    center: bool = False
    scale: bool = False
    swap_rownames: str | None = None
    by_exprs_values: str | None = None
    group_sentinel: str = "all"

    @property
    def aux_layer(self) -> str | None:
        return self.by_exprs_values if self.by_exprs_values is not None else self.layer

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DotPlotConfig":
        """Build a config from plain values, translating deprecated keys."""
        opts = translate_legacy_options(data)
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(opts) - known)
        if unknown:
            raise ValueError(f"Unknown dot-plot option(s): {', '.join(unknown)}.")
        if opts.get("zlim") is not None:
            opts["zlim"] = tuple(float(v) for v in opts["zlim"])
        if opts.get("colors") is not None:
            colors = opts["colors"]
            opts["colors"] = (str(colors),) if isinstance(colors, str) else tuple(str(c) for c in colors)
        return cls(**opts)


@dataclass(frozen=True)
class ColorScaleSpec:
    """Colour-scale description matching the clamped averages."""

    kind: str
    low: float
    high: float
    midpoint: float | None = None
    colors: tuple[str, ...] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "low": float(self.low),
            "high": float(self.high),
            "midpoint": None if self.midpoint is None else float(self.midpoint),
            "colors": None if self.colors is None else list(self.colors),
        }


@dataclass(frozen=True)
class GroupedStats:
    """Per-(feature, combination) statistics.

    - `average`, `detected`: features x combinations.
    - `ncells`: observations per combination.
    - `combinations`: one row per column with `group` (and `block`) labels.
    """

    average: pd.DataFrame
    detected: pd.DataFrame
    ncells: np.ndarray
    combinations: pd.DataFrame


@dataclass(frozen=True)
class DotPlotData:
    """Long-form table and colour scale handed to a renderer."""

    table: pd.DataFrame
    color_scale: ColorScaleSpec
    detected_max: float
    groups: tuple[str, ...]
    features: tuple[str, ...]
    metadata: dict[str, Any] = field(default_factory=dict)
