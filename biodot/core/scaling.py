"""Centering, scaling and clamping of group averages for colour encoding."""

from __future__ import annotations

import logging
from typing import Any, Sequence

import numpy as np
import pandas as pd

from biodot.core.types import DIVERGING, SEQUENTIAL, ColorScaleSpec
from biodot.core.utils import finite_pair
from biodot.errors import InvalidRangeError

logger = logging.getLogger(__name__)


def validate_zlim(zlim: Any) -> tuple[float, float]:
    try:
        low, high = finite_pair("zlim", zlim)
    except (TypeError, ValueError) as exc:
        raise InvalidRangeError(str(exc)) from exc
    if low > high:
        raise InvalidRangeError(f"zlim lower bound {low} exceeds upper bound {high}.")
    return low, high


def _default_limits(values: np.ndarray, center: bool) -> tuple[float, float]:
    finite = values[np.isfinite(values)]
    if finite.size == 0:
        return 0.0, 0.0
    if center:
        extreme = float(np.max(np.abs(finite)))
        return -extreme, extreme
    return float(np.min(finite)), float(np.max(finite))


def heatmap_scale(
    x: pd.DataFrame,
    *,
    center: bool = False,
    scale: bool = False,
    zlim: Sequence[float] | None = None,
    colors: Sequence[str] | None = None,
) -> tuple[pd.DataFrame, ColorScaleSpec]:
    """Transform a features x groups matrix for colour encoding.

    Rows are optionally centered on their mean and divided by
    `sqrt(sum(x**2) / (n_groups - 1))`, which is the standard deviation of a
    centered row. Rows with a zero or undefined divisor stay unscaled. Values
    are then clamped into `zlim`, or into limits derived from the data.
    """
    limits = None if zlim is None else validate_zlim(zlim)
    values = x.to_numpy(dtype=float, copy=True)

    if center:
        values = values - values.mean(axis=1, keepdims=True)
    if scale:
        n_groups = values.shape[1]
        with np.errstate(divide="ignore", invalid="ignore"):
            divisor = np.sqrt(np.sum(values**2, axis=1) / (n_groups - 1))
        flat = ~np.isfinite(divisor) | (divisor == 0)
        if flat.any():
            logger.debug("Leaving %d constant row(s) unscaled.", int(flat.sum()))
        divisor[flat] = 1.0
        values = values / divisor[:, None]

    if limits is None:
        limits = _default_limits(values, center)
    values = np.clip(values, limits[0], limits[1])

    palette = None if colors is None else tuple(str(c) for c in colors)
    if center and palette is None:
        spec = ColorScaleSpec(kind=DIVERGING, low=limits[0], high=limits[1], midpoint=0.0)
    else:
        spec = ColorScaleSpec(kind=SEQUENTIAL, low=limits[0], high=limits[1], colors=palette)
    return pd.DataFrame(values, index=x.index, columns=x.columns), spec
