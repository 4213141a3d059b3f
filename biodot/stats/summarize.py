"""Per-group mean and detection-rate summaries of an expression matrix."""

from __future__ import annotations

import logging
from typing import Any, Sequence

import numpy as np
import pandas as pd
import scipy.sparse as sp

from biodot.core.types import GroupedStats
from biodot.errors import DimensionMismatchError

logger = logging.getLogger(__name__)


def _as_categorical(values: Any) -> pd.Categorical:
    if isinstance(values, pd.Categorical):
        return values
    return pd.Categorical(np.asarray(values, dtype=object).ravel())


def _combination_ids(
    group: pd.Categorical, block: pd.Categorical | None
) -> tuple[np.ndarray, pd.DataFrame, np.ndarray]:
    keys = ["group"] if block is None else ["group", "block"]
    frame = pd.DataFrame({"group": group})
    if block is not None:
        frame["block"] = block
    grouped = frame.groupby(keys, observed=True, sort=True)
    ids = grouped.ngroup().to_numpy()
    sizes = grouped.size()
    combos = sizes.index.to_frame(index=False)
    for key in keys:
        combos[key] = combos[key].astype(str)
    return ids, combos, sizes.to_numpy().astype(float)


def _combination_labels(combos: pd.DataFrame) -> list[str]:
    if "block" not in combos.columns:
        return combos["group"].tolist()
    return [f"{g}.{b}" for g, b in zip(combos["group"], combos["block"])]


def _detected_counts(sub: Any, indicator: sp.csr_matrix, ncells: np.ndarray, threshold: float) -> np.ndarray:
    if not sp.issparse(sub):
        hits = (np.asarray(sub, dtype=float) > threshold).astype(float)
        return np.asarray(indicator @ hits)

    # Implicit zeros are detected only when the threshold is negative.
    csr = sp.csr_matrix(sub)
    flags = csr.copy()
    if threshold >= 0:
        flags.data = (csr.data > threshold).astype(float)
        return np.asarray((indicator @ flags).todense())
    flags.data = (csr.data <= threshold).astype(float)
    misses = np.asarray((indicator @ flags).todense())
    return ncells[:, None] - misses


def summarize_by_group(
    matrix: Any,
    groups: Any,
    *,
    subset_rows: Sequence[int] | np.ndarray | None = None,
    blocks: Any = None,
    threshold: float = 0.0,
    feature_names: Sequence[str] | None = None,
) -> GroupedStats:
    """Compute mean and proportion detected per feature and group.

    `matrix` is observations x features (dense or sparse). `subset_rows` picks
    feature positions in order, duplicates allowed. With `blocks`, statistics
    are reported for every observed (group, block) pair only.
    """
    n_obs, n_vars = matrix.shape
    group = _as_categorical(groups)
    if len(group) != n_obs:
        raise DimensionMismatchError(
            f"groups has length {len(group)}, expected {n_obs} observations."
        )
    block = None
    if blocks is not None:
        block = _as_categorical(blocks)
        if len(block) != n_obs:
            raise DimensionMismatchError(
                f"blocks has length {len(block)}, expected {n_obs} observations."
            )

    rows = np.arange(n_vars) if subset_rows is None else np.asarray(subset_rows, dtype=np.intp).ravel()
    if rows.size and (rows.min() < -n_vars or rows.max() >= n_vars):
        raise IndexError(f"subset_rows out of bounds for {n_vars} features.")
    if feature_names is None:
        feature_names = [str(r) for r in rows]
    elif len(feature_names) != rows.size:
        raise DimensionMismatchError(
            f"feature_names has length {len(feature_names)}, expected {rows.size}."
        )

    ids, combos, ncells = _combination_ids(group, block)
    indicator = sp.csr_matrix(
        (np.ones(n_obs, dtype=float), (ids, np.arange(n_obs))),
        shape=(len(combos), n_obs),
    )

    sub = matrix[:, rows]
    if sp.issparse(sub):
        sums = np.asarray((indicator @ sp.csr_matrix(sub, dtype=float)).todense())
    else:
        sums = np.asarray(indicator @ np.asarray(sub, dtype=float))
    counts = _detected_counts(sub, indicator, ncells, float(threshold))

    labels = _combination_labels(combos)
    index = pd.Index([str(f) for f in feature_names])
    average = pd.DataFrame((sums / ncells[:, None]).T, index=index, columns=labels)
    detected = pd.DataFrame((counts / ncells[:, None]).T, index=index, columns=labels)
    logger.debug(
        "Summarized %d feature(s) over %d combination(s) at threshold %s.",
        rows.size,
        len(labels),
        threshold,
    )
    return GroupedStats(average=average, detected=detected, ncells=ncells, combinations=combos)
