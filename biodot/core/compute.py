"""Dot-plot statistics pipeline (no plotting, no filesystem I/O)."""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, Callable, Iterable, Mapping, Sequence

import pandas as pd

from biodot.core.features import get_expression_matrix, resolve_feature_positions
from biodot.core.groups import assign_blocks, assign_groups
from biodot.core.scaling import heatmap_scale
from biodot.core.table import assemble_long_table, resolve_other_fields
from biodot.core.types import DotPlotConfig, DotPlotData, GroupedStats
from biodot.stats.correction import correct_group_summary
from biodot.stats.summarize import summarize_by_group

logger = logging.getLogger(__name__)

Summarizer = Callable[..., GroupedStats]
Corrector = Callable[..., pd.DataFrame]


def resolve_config(config: DotPlotConfig | None, options: Mapping[str, Any]) -> DotPlotConfig:
    """Merge keyword options (legacy names included) over a base config."""
    if config is None and not options:
        return DotPlotConfig()
    merged = asdict(config) if config is not None else {}
    merged.update(options)
    return DotPlotConfig.from_dict(merged)


def compute_dot_data(
    adata: Any,
    features: Sequence[str],
    *,
    group: Any = None,
    block: Any = None,
    config: DotPlotConfig | None = None,
    other_fields: Iterable[Any] | Mapping[str, Any] = (),
    summarizer: Summarizer = summarize_by_group,
    corrector: Corrector = correct_group_summary,
    **options: Any,
) -> DotPlotData:
    """Compute the long-form dot-plot table for `features` grouped by `group`.

    `group` and `block` accept an `obs` column name, an `obs` column position,
    explicit labels or a selector from `biodot.core.groups`. Keyword `options`
    override fields of `config`; deprecated option names are translated first.
    """
    cfg = resolve_config(config, options)
    labels = [str(f) for f in features]
    if not labels:
        raise ValueError("features must contain at least one feature.")

    positions = resolve_feature_positions(adata, labels, cfg.swap_rownames)
    matrix = get_expression_matrix(adata, cfg.layer)
    group_key = assign_groups(adata.obs, adata.n_obs, group, sentinel=cfg.group_sentinel)
    block_key = None if block is None else assign_blocks(adata.obs, adata.n_obs, block)

    stats = summarizer(
        matrix,
        group_key,
        subset_rows=positions,
        blocks=block_key,
        threshold=cfg.detection_limit,
        feature_names=labels,
    )
    average, detected = stats.average, stats.detected
    if block_key is not None:
        combo_group = pd.Categorical(
            stats.combinations["group"], categories=[str(c) for c in group_key.categories]
        )
        combo_block = pd.Categorical(
            stats.combinations["block"], categories=[str(c) for c in block_key.categories]
        )
        average = corrector(average, combo_group, combo_block, transform="raw")
        detected = corrector(detected, combo_group, combo_block, transform="logit")

    scaled, color_scale = heatmap_scale(
        average,
        center=cfg.center,
        scale=cfg.scale,
        zlim=cfg.zlim,
        colors=cfg.colors,
    )
    aux = resolve_other_fields(adata, other_fields, feature_index=positions, layer=cfg.aux_layer)
    table = assemble_long_table(
        detected,
        scaled,
        features=labels,
        max_detected=cfg.max_detected,
        aux=aux,
    )

    groups = tuple(str(g) for g in detected.columns)
    logger.info(
        "Dot-plot statistics for %d feature(s) across %d group(s)%s.",
        len(labels),
        len(groups),
        " with block correction" if block_key is not None else "",
    )
    meta: dict[str, Any] = {
        "layer": cfg.layer,
        "detection_limit": float(cfg.detection_limit),
        "block_corrected": block_key is not None,
        "n_obs": int(adata.n_obs),
        "ncells": [int(n) for n in stats.ncells],
    }
    return DotPlotData(
        table=table,
        color_scale=color_scale,
        detected_max=float(table["NumDetected"].max()),
        groups=groups,
        features=tuple(labels),
        metadata=meta,
    )
