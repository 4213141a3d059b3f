"""Feature namespace resolution and expression-source access."""

from __future__ import annotations

import warnings
from typing import Any, Sequence

import numpy as np
import pandas as pd

from biodot.core.utils import dense_1d
from biodot.errors import UnknownLabelError


def _feature_namespace(adata_like: Any, swap_rownames: str | None) -> pd.Index:
    if swap_rownames is None:
        return pd.Index(adata_like.var_names).astype(str)
    if swap_rownames not in adata_like.var.columns:
        raise UnknownLabelError(f"adata.var['{swap_rownames}'] not found.")
    raw = adata_like.var[swap_rownames].astype("string").fillna("").astype(str).str.strip()
    non_empty = raw[raw != ""]
    counts = non_empty.value_counts()
    if (counts > 1).any():
        warnings.warn(
            (
                f"Duplicate symbols detected in {swap_rownames}; "
                "resolution keeps first occurrence."
            ),
            RuntimeWarning,
            stacklevel=3,
        )
    return pd.Index(raw.to_numpy())


def resolve_feature_positions(
    adata_like: Any,
    features: Sequence[str],
    swap_rownames: str | None = None,
) -> np.ndarray:
    """Map feature ids to row positions of the expression source.

    Order is preserved and duplicates are allowed. With `swap_rownames`, ids
    are looked up in that `adata.var` column instead of `var_names`; the first
    occurrence wins.
    """
    names = _feature_namespace(adata_like, swap_rownames)
    positions: list[int] = []
    missing: list[str] = []
    first: dict[str, int] = {}
    for i, name in enumerate(names):
        if name != "" and name not in first:
            first[name] = i
    for feature in features:
        key = str(feature).strip()
        if key not in first:
            missing.append(str(feature))
            continue
        positions.append(first[key])
    if missing:
        where = "var_names" if swap_rownames is None else f"adata.var['{swap_rownames}']"
        raise UnknownLabelError(f"Feature(s) not found in {where}: {', '.join(missing)}.")
    return np.asarray(positions, dtype=np.intp)


def get_expression_matrix(adata_like: Any, layer: str | None = None) -> Any:
    """Return the observations x features matrix for an assay name."""
    if layer:
        if layer not in adata_like.layers:
            raise UnknownLabelError(f"Layer '{layer}' not found in adata.layers.")
        return adata_like.layers[layer]
    if adata_like.X is None:
        raise UnknownLabelError("adata.X is empty; pass a layer name.")
    return adata_like.X


def get_observation_vector(
    adata_like: Any,
    obs_name: str,
    feature_index: np.ndarray,
    layer: str | None = None,
) -> np.ndarray:
    """Expression of the selected features in a single observation."""
    obs_names = pd.Index(adata_like.obs_names)
    if obs_name not in obs_names:
        raise UnknownLabelError(f"Observation '{obs_name}' not found in obs_names.")
    loc = obs_names.get_loc(obs_name)
    if not isinstance(loc, (int, np.integer)):
        raise UnknownLabelError(f"Observation '{obs_name}' did not resolve uniquely in obs_names.")
    mat = get_expression_matrix(adata_like, layer)
    row = dense_1d(mat[int(loc), :]).astype(float)
    return row[np.asarray(feature_index, dtype=np.intp)]
