"""Small pure helpers for core computations."""

from __future__ import annotations

from typing import Any

import numpy as np
import scipy.sparse as sp


def finite_pair(name: str, values: Any) -> tuple[float, float]:
    arr = np.asarray(values, dtype=float).ravel()
    if arr.size != 2:
        raise ValueError(f"{name} must contain exactly two values.")
    if not np.isfinite(arr).all():
        raise ValueError(f"{name} must be finite.")
    return float(arr[0]), float(arr[1])


def dense_1d(values: Any) -> np.ndarray:
    if sp.issparse(values):
        return values.toarray().ravel()
    return np.asarray(values).ravel()
