from __future__ import annotations

import anndata as ad
import numpy as np
import pandas as pd
import pytest

from biodot.legacy import reset_legacy_warnings


@pytest.fixture(autouse=True)
def _fresh_legacy_warnings():
    reset_legacy_warnings()
    yield
    reset_legacy_warnings()


@pytest.fixture
def scenario_adata() -> ad.AnnData:
    """3 features x 5 cells; group A holds the first three cells."""
    by_feature = np.array(
        [
            [1.0, 0.0, 2.0, 0.0, 0.0],
            [0.0, 0.0, 0.0, 0.0, 0.0],
            [3.0, 3.0, 3.0, 0.0, 0.0],
        ]
    )
    obs = pd.DataFrame(
        {
            "cluster": ["A", "A", "A", "B", "B"],
            "batch": ["b1", "b2", "b1", "b1", "b2"],
        },
        index=[f"c{i}" for i in range(5)],
    )
    var = pd.DataFrame(
        {
            "hugo_symbol": ["TNNT2", "VWF", "COL1A1"],
            "length": [1000, 2000, 3000],
        },
        index=["ENSG01", "ENSG02", "ENSG03"],
    )
    return ad.AnnData(X=by_feature.T.copy(), obs=obs, var=var)
