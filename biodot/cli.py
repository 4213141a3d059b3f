"""Command-line interface for dot-plot tables."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any, Iterable

import scanpy as sc

from biodot.config import load_dot_options
from biodot.core.compute import compute_dot_data
from biodot.core.types import DotPlotConfig
from biodot.pipeline_utils import setup_logger


def _read_adata(h5ad_path: str):
    path = Path(h5ad_path)
    if not path.exists():
        raise FileNotFoundError(f"Input file '{h5ad_path}' not found.")
    return sc.read_h5ad(path)


def _cli_options(args: argparse.Namespace) -> dict[str, Any]:
    opts: dict[str, Any] = {}
    if args.layer is not None:
        opts["layer"] = args.layer
    if args.detection_limit is not None:
        opts["detection_limit"] = args.detection_limit
    if args.zlim is not None:
        opts["zlim"] = tuple(args.zlim)
    if args.max_detected is not None:
        opts["max_detected"] = args.max_detected
    if args.swap_rownames is not None:
        opts["swap_rownames"] = args.swap_rownames
    if args.center:
        opts["center"] = True
    if args.scale:
        opts["scale"] = True
    return opts


def table_main(argv: Iterable[str] | None = None) -> int:
    """Write the long-form dot-plot table and its colour scale.

    Args:
        argv: Command-line arguments (if None, uses sys.argv).

    Returns:
        Exit code (0 for success).
    """
    parser = argparse.ArgumentParser(description="biodot dot-plot table")
    parser.add_argument("--h5ad", required=True, help="Path to .h5ad file")
    parser.add_argument("--features", nargs="+", required=True, help="Feature ids")
    parser.add_argument("--group", default=None, help="adata.obs column for groups")
    parser.add_argument("--block", default=None, help="adata.obs column for blocks")
    parser.add_argument("--config", default=None, help="JSON config with dot-plot options")
    parser.add_argument("--out", default="dotplot_table.csv", help="Output CSV path")
    parser.add_argument("--log", default=None, help="Optional log file")
    parser.add_argument("--layer", default=None, help="adata.layers key (default: X)")
    parser.add_argument("--detection-limit", type=float, default=None)
    parser.add_argument("--zlim", type=float, nargs=2, default=None, metavar=("LOW", "HIGH"))
    parser.add_argument("--max-detected", type=float, default=None)
    parser.add_argument("--swap-rownames", default=None, help="adata.var column of aliases")
    parser.add_argument("--center", action="store_true", help="Center averages per feature")
    parser.add_argument("--scale", action="store_true", help="Scale averages per feature")
    args = parser.parse_args(list(argv) if argv is not None else None)

    logger = setup_logger(Path(args.log) if args.log else None, "biodot")
    base = load_dot_options(args.config) if args.config else {}
    base.update(_cli_options(args))
    config = DotPlotConfig.from_dict(base)

    adata = _read_adata(args.h5ad)
    result = compute_dot_data(
        adata,
        args.features,
        group=args.group,
        block=args.block,
        config=config,
    )

    out_csv = Path(args.out)
    out_csv.parent.mkdir(parents=True, exist_ok=True)
    result.table.to_csv(out_csv.as_posix(), index=False)
    scale_path = out_csv.with_suffix(".scale.json")
    payload = {
        "color_scale": result.color_scale.to_dict(),
        "detected_max": result.detected_max,
        "groups": list(result.groups),
    }
    scale_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    logger.info("Wrote %d row(s) to %s", len(result.table), out_csv.as_posix())
    return 0


def main(argv: Iterable[str] | None = None) -> int:
    """Main CLI entry point.

    Args:
        argv: Command-line arguments (if None, uses sys.argv).

    Returns:
        Exit code.
    """
    parser = argparse.ArgumentParser(description="biodot CLI")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("table", help="Compute a dot-plot table from an .h5ad file")

    args, remainder = parser.parse_known_args(list(argv) if argv is not None else None)
    if args.command == "table":
        return table_main(remainder)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
