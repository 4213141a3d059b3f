"""Long-form assembly of per-(feature, group) statistics."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence

import numpy as np
import pandas as pd

from biodot.core.features import get_observation_vector
from biodot.errors import DimensionMismatchError, UnknownLabelError

CORE_COLUMNS: tuple[str, ...] = ("Feature", "Group", "NumDetected", "Average")


def assemble_long_table(
    detected: pd.DataFrame,
    average: pd.DataFrame,
    *,
    features: Sequence[str] | None = None,
    max_detected: float | None = None,
    aux: Mapping[str, Any] | None = None,
) -> pd.DataFrame:
    """Flatten two features x groups matrices into one row per (group, feature).

    Rows run through every feature of the first group, then the second group,
    and so on. Auxiliary per-feature vectors are tiled across groups.
    """
    if detected.shape != average.shape:
        raise DimensionMismatchError(
            f"Detected has shape {detected.shape} but Average has shape {average.shape}."
        )
    n_features, n_groups = detected.shape
    labels = list(detected.index) if features is None else list(features)
    if len(labels) != n_features:
        raise DimensionMismatchError(
            f"Got {len(labels)} feature label(s) for {n_features} feature row(s)."
        )

    # Column-major ravel keeps features varying fastest within each group.
    num = detected.to_numpy(dtype=float).ravel(order="F")
    if max_detected is not None:
        num = np.minimum(num, float(max_detected))

    table = pd.DataFrame(
        {
            "Feature": np.tile(np.asarray(labels, dtype=object), n_groups),
            "Group": np.repeat(np.asarray([str(g) for g in detected.columns], dtype=object), n_features),
            "NumDetected": num,
            "Average": average.to_numpy(dtype=float).ravel(order="F"),
        }
    )

    for name, values in (aux or {}).items():
        if name in CORE_COLUMNS:
            raise ValueError(f"Auxiliary field '{name}' collides with a core column.")
        arr = values.to_numpy() if isinstance(values, pd.Series) else np.asarray(values)
        if arr.ndim != 1 or arr.size != n_features:
            raise DimensionMismatchError(
                f"Auxiliary field '{name}' has length {arr.size}, expected {n_features}."
            )
        table[name] = np.tile(arr, n_groups)
    return table


def _field_values(
    adata: Any,
    name: str,
    values: Any,
    feature_index: np.ndarray,
) -> np.ndarray:
    arr = values.to_numpy() if isinstance(values, pd.Series) else np.asarray(values)
    if arr.ndim != 1:
        raise DimensionMismatchError(f"Field '{name}' must be one-dimensional.")
    if arr.size == adata.n_vars:
        return arr[feature_index]
    if arr.size == feature_index.size:
        return arr
    raise DimensionMismatchError(
        f"Field '{name}' has length {arr.size}; expected {adata.n_vars} or {feature_index.size}."
    )


def resolve_other_fields(
    adata: Any,
    fields: Iterable[Any] | Mapping[str, Any],
    *,
    feature_index: np.ndarray,
    layer: str | None = None,
) -> dict[str, np.ndarray]:
    """Resolve extra per-feature columns for the long table.

    A string names an `adata.var` column or, failing that, an observation whose
    expression in `layer` is reported per feature. `(name, values)` pairs and
    mapping entries supply values directly, of length `n_vars` or of the
    feature subset.
    """
    index = np.asarray(feature_index, dtype=np.intp)
    items = fields.items() if isinstance(fields, Mapping) else fields
    out: dict[str, np.ndarray] = {}
    for item in items:
        if isinstance(item, str):
            if item in adata.var.columns:
                out[item] = adata.var[item].to_numpy()[index]
            elif item in adata.obs_names:
                out[item] = get_observation_vector(adata, item, index, layer=layer)
            else:
                raise UnknownLabelError(
                    f"Field '{item}' not found in adata.var columns or obs_names."
                )
            continue
        name, values = item
        out[str(name)] = _field_values(adata, str(name), values, index)
    return out
