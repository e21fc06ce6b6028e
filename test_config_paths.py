import json
import tempfile
from pathlib import Path

import config_paths


def _load_with(payload):
    with tempfile.TemporaryDirectory() as tmp:
        cfg_dir = Path(tmp) / "tabula"
        cfg_dir.mkdir(parents=True, exist_ok=True)
        cfg_path = cfg_dir / "config.json"
        if payload is not None:
            cfg_path.write_text(payload if isinstance(payload, str) else json.dumps(payload))
        # point module paths to temp
        orig_dir = config_paths.CONFIG_DIR
        orig_json = config_paths.CONFIG_JSON
        try:
            config_paths.CONFIG_DIR = str(cfg_dir)
            config_paths.CONFIG_JSON = str(cfg_path)
            return config_paths.load_config()
        finally:
            config_paths.CONFIG_DIR = orig_dir
            config_paths.CONFIG_JSON = orig_json


def test_load_config_defaults_without_json():
    cfg = _load_with(None)
    assert cfg == config_paths.DEFAULT_CONFIG
    assert cfg.row_heights == (60, 45, 35)
    assert cfg.default_view_mode == 1
    assert cfg.loading_row_count == 5
    assert cfg.empty_label == "No items to display"
    assert cfg.column_widths is None


def test_load_config_reads_json_overrides():
    cfg = _load_with(
        {
            "view_mode": "Compact",
            "loading_row_count": 8,
            "empty_label": "Nothing yet",
            "column_widths": {"base": [12, None, "x"], "md": [20]},
            "breakpoints": {"md": 90, "base": 0},
        }
    )
    assert cfg.default_view_mode == 2
    assert cfg.loading_row_count == 8
    assert cfg.empty_label == "Nothing yet"
    assert cfg.column_widths == {"base": [12, None, None], "md": [20]}
    assert cfg.breakpoints == {"md": 90}


def test_invalid_values_are_ignored():
    cfg = _load_with(
        {
            "view_mode": "dense",
            "loading_row_count": -1,
            "empty_label": "   ",
            "column_widths": [1, 2],
            "breakpoints": {"md": "wide"},
        }
    )
    assert cfg == config_paths.DEFAULT_CONFIG


def test_malformed_json_falls_back_to_defaults():
    assert _load_with("{not json") == config_paths.DEFAULT_CONFIG
    assert _load_with("[1, 2]") == config_paths.DEFAULT_CONFIG
