from __future__ import annotations

import numpy as np
import pandas as pd
import pytest
import scipy.sparse as sp

from biodot.errors import DimensionMismatchError
from biodot.stats.summarize import summarize_by_group


def _scenario_matrix() -> np.ndarray:
    by_feature = np.array(
        [
            [1.0, 0.0, 2.0, 0.0, 0.0],
            [0.0, 0.0, 0.0, 0.0, 0.0],
            [3.0, 3.0, 3.0, 0.0, 0.0],
        ]
    )
    return by_feature.T.copy()


GROUPS = ["A", "A", "A", "B", "B"]


def test_detection_and_mean_scenario():
    stats = summarize_by_group(
        _scenario_matrix(),
        GROUPS,
        subset_rows=[0, 1, 2],
        threshold=0.0,
        feature_names=["f1", "f2", "f3"],
    )
    det = stats.detected
    assert list(det.columns) == ["A", "B"]
    assert list(det.index) == ["f1", "f2", "f3"]
    assert det.loc["f1", "A"] == pytest.approx(2.0 / 3.0)
    assert det.loc["f2", "A"] == 0.0
    assert det.loc["f3", "A"] == pytest.approx(1.0)
    assert np.all(det["B"].to_numpy() == 0.0)
    assert stats.average.loc["f3", "A"] == pytest.approx(3.0)
    assert stats.average.loc["f1", "A"] == pytest.approx(1.0)
    np.testing.assert_array_equal(stats.ncells, [3.0, 2.0])


def test_threshold_is_strict():
    stats = summarize_by_group(_scenario_matrix(), GROUPS, subset_rows=[0, 2], threshold=2.0)
    assert stats.detected.iloc[0].tolist() == [0.0, 0.0]
    assert stats.detected.iloc[1, 0] == pytest.approx(1.0)


def test_sparse_matches_dense_for_any_threshold():
    rng = np.random.default_rng(0)
    dense = rng.poisson(0.7, size=(40, 6)).astype(float)
    groups = rng.choice(["x", "y", "z"], size=40)
    rows = [5, 0, 3, 3]
    for threshold in (-0.5, 0.0, 1.0):
        d = summarize_by_group(dense, groups, subset_rows=rows, threshold=threshold)
        s = summarize_by_group(sp.csr_matrix(dense), groups, subset_rows=rows, threshold=threshold)
        np.testing.assert_allclose(d.average.to_numpy(), s.average.to_numpy())
        np.testing.assert_allclose(d.detected.to_numpy(), s.detected.to_numpy())


def test_negative_threshold_counts_zeros_as_detected():
    stats = summarize_by_group(sp.csr_matrix(_scenario_matrix()), GROUPS, threshold=-1.0)
    assert np.all(stats.detected.to_numpy() == 1.0)


def test_duplicate_rows_keep_request_order():
    stats = summarize_by_group(
        _scenario_matrix(), GROUPS, subset_rows=[2, 0, 2], feature_names=["f3", "f1", "f3"]
    )
    assert list(stats.average.index) == ["f3", "f1", "f3"]
    np.testing.assert_allclose(stats.average["A"].to_numpy(), [3.0, 1.0, 3.0])


def test_blocks_report_only_observed_combinations():
    blocks = ["b1", "b2", "b1", "b1", "b1"]
    stats = summarize_by_group(_scenario_matrix(), GROUPS, blocks=blocks)
    assert list(stats.average.columns) == ["A.b1", "A.b2", "B.b1"]
    assert stats.combinations["group"].tolist() == ["A", "A", "B"]
    assert stats.combinations["block"].tolist() == ["b1", "b2", "b1"]
    np.testing.assert_array_equal(stats.ncells, [2.0, 1.0, 2.0])
    assert stats.average.loc["0", "A.b1"] == pytest.approx(1.5)


def test_group_order_follows_categorical():
    groups = pd.Categorical(GROUPS, categories=["B", "A"])
    stats = summarize_by_group(_scenario_matrix(), groups)
    assert list(stats.detected.columns) == ["B", "A"]


def test_length_and_index_errors():
    with pytest.raises(DimensionMismatchError):
        summarize_by_group(_scenario_matrix(), ["A", "B"])
    with pytest.raises(DimensionMismatchError):
        summarize_by_group(_scenario_matrix(), GROUPS, blocks=["b1"])
    with pytest.raises(IndexError):
        summarize_by_group(_scenario_matrix(), GROUPS, subset_rows=[7])
    with pytest.raises(DimensionMismatchError):
        summarize_by_group(_scenario_matrix(), GROUPS, subset_rows=[0, 1], feature_names=["a"])
