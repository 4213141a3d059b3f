from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from biodot.core.scaling import heatmap_scale
from biodot.core.types import DIVERGING, SEQUENTIAL
from biodot.errors import InvalidRangeError


def _averages() -> pd.DataFrame:
    return pd.DataFrame(
        [[1.0, 2.0, 6.0], [0.5, 0.5, 0.5], [5.0, -1.0, 1.0]],
        index=["f1", "f2", "f3"],
        columns=["A", "B", "C"],
    )


def test_no_options_is_identity():
    x = _averages()
    out, spec = heatmap_scale(x)
    pd.testing.assert_frame_equal(out, x)
    assert out is not x
    assert spec.kind == SEQUENTIAL
    assert (spec.low, spec.high) == (-1.0, 6.0)
    assert spec.midpoint is None


def test_centering_round_trips_with_row_means():
    x = _averages()
    out, spec = heatmap_scale(x, center=True)
    np.testing.assert_allclose(out.mean(axis=1).to_numpy(), 0.0, atol=1e-12)
    restored = out.to_numpy() + x.to_numpy().mean(axis=1, keepdims=True)
    np.testing.assert_allclose(restored, x.to_numpy(), atol=1e-12)
    assert spec.kind == DIVERGING
    assert spec.midpoint == 0.0
    assert spec.low == -spec.high
    assert spec.high == pytest.approx(np.max(np.abs(out.to_numpy())))


def test_scaling_gives_unit_sd_and_leaves_constant_rows():
    out, _ = heatmap_scale(_averages(), center=True, scale=True)
    sds = out.to_numpy().std(axis=1, ddof=1)
    assert sds[0] == pytest.approx(1.0)
    assert sds[2] == pytest.approx(1.0)
    np.testing.assert_array_equal(out.loc["f2"].to_numpy(), [0.0, 0.0, 0.0])


def test_scaling_single_group_is_left_unscaled():
    x = pd.DataFrame([[2.0], [0.0]], columns=["all"])
    out, _ = heatmap_scale(x, scale=True)
    np.testing.assert_array_equal(out.to_numpy(), x.to_numpy())


def test_zlim_clamps_and_sets_bounds():
    out, spec = heatmap_scale(_averages(), zlim=(0, 2))
    assert out.loc["f3", "A"] == 2.0
    assert out.loc["f3", "B"] == 0.0
    assert out.loc["f1", "A"] == 1.0
    assert (spec.low, spec.high) == (0.0, 2.0)
    assert out.to_numpy().min() >= 0.0 and out.to_numpy().max() <= 2.0


def test_color_override_forces_sequential():
    _, spec = heatmap_scale(_averages(), center=True, colors=["white", "red"])
    assert spec.kind == SEQUENTIAL
    assert spec.colors == ("white", "red")
    assert spec.to_dict()["colors"] == ["white", "red"]


def test_malformed_zlim():
    with pytest.raises(InvalidRangeError, match="exceeds"):
        heatmap_scale(_averages(), zlim=(3, 1))
    with pytest.raises(InvalidRangeError):
        heatmap_scale(_averages(), zlim=(0, 1, 2))
    with pytest.raises(InvalidRangeError):
        heatmap_scale(_averages(), zlim=(0, float("nan")))
