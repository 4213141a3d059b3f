"""Observation label selectors and group assignment."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Union

import numpy as np
import pandas as pd

from biodot.errors import InvalidGroupError, UnknownLabelError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ObsColumn:
    """Select an `obs` column by name."""

    name: str

    def resolve(self, obs: pd.DataFrame) -> pd.Series:
        if self.name not in obs.columns:
            raise UnknownLabelError(f"adata.obs['{self.name}'] not found.")
        return obs[self.name]


@dataclass(frozen=True)
class ObsIndex:
    """Select an `obs` column by position (negative positions count from the end)."""

    position: int

    def resolve(self, obs: pd.DataFrame) -> pd.Series:
        n_cols = obs.shape[1]
        if not -n_cols <= self.position < n_cols:
            raise UnknownLabelError(
                f"obs column position {self.position} is out of bounds for {n_cols} column(s)."
            )
        return obs.iloc[:, self.position]


@dataclass(frozen=True)
class ObsValues:
    """Explicit per-observation labels."""

    values: Any

    def resolve(self, obs: pd.DataFrame) -> Any:
        return self.values


ObsSelector = Union[ObsColumn, ObsIndex, ObsValues]


def as_obs_selector(source: Any) -> ObsSelector:
    """Promote a name, position or label vector to a typed selector."""
    if isinstance(source, (ObsColumn, ObsIndex, ObsValues)):
        return source
    if isinstance(source, str):
        return ObsColumn(source)
    if isinstance(source, (int, np.integer)) and not isinstance(source, bool):
        return ObsIndex(int(source))
    return ObsValues(source)


def _as_categorical(values: Any, what: str) -> pd.Categorical:
    if isinstance(values, pd.Series):
        values = values.array
    if isinstance(values, pd.Categorical) or isinstance(
        getattr(values, "dtype", None), pd.CategoricalDtype
    ):
        cat = pd.Categorical(values)
    else:
        arr = np.asarray(values, dtype=object).ravel()
        cat = pd.Categorical(arr)
    if (cat.codes < 0).any():
        raise InvalidGroupError(f"{what} labels contain missing values.")
    cat = cat.remove_unused_categories()
    names = [str(c) for c in cat.categories]
    if len(set(names)) != len(names):
        raise InvalidGroupError(f"{what} labels collide once converted to strings.")
    return cat.rename_categories(names)


def assign_groups(
    obs: pd.DataFrame | None,
    n_obs: int,
    selector: Any = None,
    *,
    sentinel: str = "all",
    what: str = "group",
) -> pd.Categorical:
    """Resolve per-observation labels into a categorical grouping key.

    Without a selector every observation lands in one `sentinel` group.
    Categories are sorted, except that categorical sources keep their order.
    """
    if selector is None:
        return pd.Categorical([sentinel] * int(n_obs), categories=[sentinel])

    sel = as_obs_selector(selector)
    frame = obs if obs is not None else pd.DataFrame(index=pd.RangeIndex(n_obs))
    values = sel.resolve(frame)
    length = len(values)
    if length != int(n_obs):
        raise InvalidGroupError(
            f"{what} labels have length {length}, expected {int(n_obs)} observations."
        )
    cat = _as_categorical(values, what)
    logger.debug("Resolved %s labels into %d level(s).", what, len(cat.categories))
    return cat


def assign_blocks(obs: pd.DataFrame | None, n_obs: int, selector: Any) -> pd.Categorical:
    """Resolve block labels with the same contract as group labels."""
    return assign_groups(obs, n_obs, selector, what="block")
