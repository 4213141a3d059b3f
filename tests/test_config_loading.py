from __future__ import annotations

import json
from pathlib import Path

import pytest

from biodot.config import load_dot_config, load_dot_options
from biodot.core.types import DotPlotConfig


def _write(tmp_path: Path, name: str, text: str) -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_load_dot_config_converts_sequences(tmp_path: Path):
    cfg_path = _write(
        tmp_path,
        "dot.json",
        json.dumps({"layer": "logcounts", "zlim": [-2, 2], "colors": ["blue", "red"], "center": True}),
    )
    cfg = load_dot_config(cfg_path)
    assert cfg == DotPlotConfig(
        layer="logcounts", zlim=(-2.0, 2.0), colors=("blue", "red"), center=True
    )
    assert cfg.aux_layer == "logcounts"


def test_deprecated_names_survive_loading_and_translate(tmp_path: Path):
    cfg_path = _write(tmp_path, "legacy.json", '{"detection_limit": 1, "max_ave": 3}')
    assert load_dot_options(cfg_path) == {"detection_limit": 1, "max_ave": 3}
    with pytest.warns(FutureWarning, match="max_ave"):
        cfg = load_dot_config(cfg_path)
    assert cfg.zlim == (1.0, 3.0)


def test_unknown_option_names_point_at_file(tmp_path: Path):
    cfg_path = _write(tmp_path, "typo.json", '{"zlimit": [0, 1], "center": true}')
    with pytest.raises(ValueError, match=r"typo\.json: unknown dot-plot option\(s\) zlimit"):
        load_dot_options(cfg_path)


def test_missing_option_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError, match="absent.json"):
        load_dot_options(tmp_path / "absent.json")


def test_malformed_json_reports_position(tmp_path: Path):
    cfg_path = _write(tmp_path, "bad.json", '{"center": true,}\n')
    with pytest.raises(ValueError, match=r"bad\.json: malformed JSON at line 1, column \d+"):
        load_dot_options(cfg_path)


def test_top_level_must_be_object(tmp_path: Path):
    cfg_path = _write(tmp_path, "list.json", json.dumps(["center"]))
    with pytest.raises(ValueError, match="not list"):
        load_dot_options(cfg_path)


def test_only_json_files_accepted(tmp_path: Path):
    cfg_path = _write(tmp_path, "dot.yaml", "{}")
    with pytest.raises(ValueError, match=r"must be a \.json file"):
        load_dot_options(cfg_path)
