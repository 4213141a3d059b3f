"""biodot public API."""

from biodot._version import __version__
from biodot.core.compute import compute_dot_data
from biodot.core.features import resolve_feature_positions
from biodot.core.groups import ObsColumn, ObsIndex, ObsValues, assign_groups
from biodot.core.scaling import heatmap_scale
from biodot.core.table import assemble_long_table
from biodot.core.types import ColorScaleSpec, DotPlotConfig, DotPlotData
from biodot.errors import (
    BioDotError,
    DimensionMismatchError,
    InsufficientBlockDataError,
    InvalidGroupError,
    InvalidRangeError,
    UnknownLabelError,
)
from biodot.legacy import translate_legacy_options
from biodot.stats.correction import correct_group_summary
from biodot.stats.summarize import summarize_by_group

__all__ = [
    "__version__",
    "compute_dot_data",
    "DotPlotConfig",
    "DotPlotData",
    "ColorScaleSpec",
    "ObsColumn",
    "ObsIndex",
    "ObsValues",
    "assign_groups",
    "resolve_feature_positions",
    "summarize_by_group",
    "correct_group_summary",
    "heatmap_scale",
    "assemble_long_table",
    "translate_legacy_options",
    "BioDotError",
    "InvalidGroupError",
    "UnknownLabelError",
    "InsufficientBlockDataError",
    "InvalidRangeError",
    "DimensionMismatchError",
]
