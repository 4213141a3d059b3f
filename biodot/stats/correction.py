"""Removal of block effects from per-(group, block) summaries."""

from __future__ import annotations

import logging
from typing import Any

import numpy as np
import pandas as pd

from biodot.errors import DimensionMismatchError, InsufficientBlockDataError

logger = logging.getLogger(__name__)

TRANSFORMS = ("raw", "log", "logit")
DEFAULT_OFFSETS = {"log": 1.0, "logit": 0.01}


def _as_categorical(name: str, values: Any, n_cols: int) -> pd.Categorical:
    cat = values if isinstance(values, pd.Categorical) else pd.Categorical(np.asarray(values, dtype=object).ravel())
    if len(cat) != n_cols:
        raise DimensionMismatchError(f"{name} has length {len(cat)}, expected {n_cols} columns.")
    if (cat.codes < 0).any():
        raise InsufficientBlockDataError(f"{name} contains missing labels.")
    return cat


def _forward(values: np.ndarray, transform: str, offset: float) -> np.ndarray:
    if transform == "log":
        return np.log(values + offset)
    if transform == "logit":
        squeezed = values * (1.0 - 2.0 * offset) + offset
        return np.log(squeezed / (1.0 - squeezed))
    return values


def _backward(values: np.ndarray, transform: str, offset: float) -> np.ndarray:
    if transform == "log":
        return np.exp(values) - offset
    if transform == "logit":
        prop = 1.0 / (1.0 + np.exp(-values))
        return np.clip((prop - offset) / (1.0 - 2.0 * offset), 0.0, 1.0)
    return values


def _design_matrix(group: pd.Categorical, block: pd.Categorical) -> np.ndarray:
    n_groups = len(group.categories)
    design = np.zeros((len(group), n_groups), dtype=float)
    design[np.arange(len(group)), group.codes] = 1.0
    n_blocks = len(block.categories)
    if n_blocks > 1:
        # Treatment coding, first block level as the reference.
        extra = np.zeros((len(block), n_blocks - 1), dtype=float)
        rows = np.flatnonzero(block.codes > 0)
        extra[rows, block.codes[rows] - 1] = 1.0
        design = np.hstack([design, extra])
    return design


def correct_group_summary(
    x: pd.DataFrame | np.ndarray,
    group: Any,
    block: Any,
    *,
    transform: str = "raw",
    offset: float | None = None,
    weights: Any = None,
) -> pd.DataFrame:
    """Collapse per-(group, block) summaries into block-corrected per-group values.

    Fits `~ 0 + group + block` per feature by least squares on the transformed
    scale and reports the group coefficients, back-transformed. The first
    category of `block` is the reference level; pass a categorical to fix it. Use
    `transform="logit"` for proportions so results stay within [0, 1].
    """
    if transform not in TRANSFORMS:
        raise ValueError(f"transform must be one of {TRANSFORMS}, got '{transform}'.")
    frame = x if isinstance(x, pd.DataFrame) else pd.DataFrame(np.asarray(x, dtype=float))
    values = frame.to_numpy(dtype=float)
    n_cols = values.shape[1]

    grp = _as_categorical("group", group, n_cols)
    blk = _as_categorical("block", block, n_cols).remove_unused_categories()
    observed = np.bincount(grp.codes, minlength=len(grp.categories))
    empty = [str(c) for c, n in zip(grp.categories, observed) if n == 0]
    if empty:
        raise InsufficientBlockDataError(
            f"No observed block level for group(s): {', '.join(empty)}."
        )

    design = _design_matrix(grp, blk)
    if np.linalg.matrix_rank(design) < design.shape[1]:
        raise InsufficientBlockDataError(
            "Group effects are confounded with block effects; correction is undefined."
        )

    off = DEFAULT_OFFSETS.get(transform, 0.0) if offset is None else float(offset)
    response = _forward(values, transform, off).T
    if weights is not None:
        w = np.asarray(weights, dtype=float).ravel()
        if w.size != n_cols:
            raise DimensionMismatchError(f"weights has length {w.size}, expected {n_cols} columns.")
        root = np.sqrt(w)
        design = design * root[:, None]
        response = response * root[:, None]

    coefs, _, _, _ = np.linalg.lstsq(design, response, rcond=None)
    out = _backward(coefs[: len(grp.categories)].T, transform, off)
    logger.debug(
        "Corrected %d feature(s) for %d block level(s) with %s link.",
        values.shape[0],
        len(blk.categories),
        transform,
    )
    return pd.DataFrame(out, index=frame.index, columns=[str(c) for c in grp.categories])
