"""Core compute subpackage."""

from biodot.core.compute import compute_dot_data, resolve_config
from biodot.core.features import (
    get_expression_matrix,
    get_observation_vector,
    resolve_feature_positions,
)
from biodot.core.groups import (
    ObsColumn,
    ObsIndex,
    ObsValues,
    as_obs_selector,
    assign_blocks,
    assign_groups,
)
from biodot.core.scaling import heatmap_scale, validate_zlim
from biodot.core.table import assemble_long_table, resolve_other_fields
from biodot.core.types import ColorScaleSpec, DotPlotConfig, DotPlotData, GroupedStats

__all__ = [
    "DotPlotConfig",
    "DotPlotData",
    "ColorScaleSpec",
    "GroupedStats",
    "ObsColumn",
    "ObsIndex",
    "ObsValues",
    "as_obs_selector",
    "assign_groups",
    "assign_blocks",
    "resolve_feature_positions",
    "get_expression_matrix",
    "get_observation_vector",
    "heatmap_scale",
    "validate_zlim",
    "assemble_long_table",
    "resolve_other_fields",
    "compute_dot_data",
    "resolve_config",
]
