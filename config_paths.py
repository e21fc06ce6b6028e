import json
import os
from dataclasses import dataclass, field, replace

HOME = os.path.expanduser("~")
XDG_CONFIG_HOME = os.environ.get("XDG_CONFIG_HOME")
CONFIG_HOME = XDG_CONFIG_HOME if XDG_CONFIG_HOME else os.path.join(HOME, ".config")
CONFIG_DIR = os.path.join(CONFIG_HOME, "tabula")
CONFIG_JSON = os.path.join(CONFIG_DIR, "config.json")

VIEW_MODE_NAMES = ("sparse", "comfy", "compact")

# default settings
ROW_HEIGHTS_DEFAULT = (60, 45, 35)
DEFAULT_VIEW_MODE_DEFAULT = 1
LOADING_ROW_COUNT_DEFAULT = 5
EMPTY_LABEL_DEFAULT = "No items to display"
HEADER_ROW_HEIGHT_DEFAULT = 45
HEADER_FILTERS_HEIGHT_DEFAULT = 55
BREAKPOINTS_DEFAULT = {"sm": 60, "md": 100, "lg": 140, "xl": 180}


@dataclass(frozen=True)
class EngineConfig:
    """Constants owned by a table engine instance.

    Widths in ``breakpoints`` are viewport columns; the host decides what a
    column is (terminal cells here).
    """

    row_heights: tuple = ROW_HEIGHTS_DEFAULT
    default_view_mode: int = DEFAULT_VIEW_MODE_DEFAULT
    loading_row_count: int = LOADING_ROW_COUNT_DEFAULT
    empty_label: str = EMPTY_LABEL_DEFAULT
    header_row_height: int = HEADER_ROW_HEIGHT_DEFAULT
    header_filters_height: int = HEADER_FILTERS_HEIGHT_DEFAULT
    placeholder_multiplier: int = 137
    placeholder_modulus: int = 11
    placeholder_floor: int = 4
    placeholder_height: int = 20
    breakpoints: dict = field(default_factory=lambda: dict(BREAKPOINTS_DEFAULT))
    column_widths: dict | None = None


DEFAULT_CONFIG = EngineConfig()


def ensure_config_dirs():
    try:
        os.makedirs(CONFIG_DIR, exist_ok=True)
    except OSError:
        pass


def _parse_width_map(value):
    if not isinstance(value, dict):
        return None
    widths = {}
    for name, seq in value.items():
        if not isinstance(name, str) or not isinstance(seq, list):
            continue
        widths[name] = [
            w if isinstance(w, int) and not isinstance(w, bool) and w > 0 else None
            for w in seq
        ]
    return widths or None


def _parse_breakpoints(value):
    if not isinstance(value, dict):
        return None
    points = {}
    for name, min_width in value.items():
        if name == "base" or not isinstance(name, str):
            continue
        if isinstance(min_width, (int, float)) and not isinstance(min_width, bool):
            points[name] = int(min_width)
    return points or None


def load_config() -> EngineConfig:
    cfg = EngineConfig()

    if not os.path.exists(CONFIG_JSON):
        return cfg

    try:
        with open(CONFIG_JSON, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return cfg

    if not isinstance(data, dict):
        return cfg

    overrides = {}
    view_mode = data.get("view_mode")
    if isinstance(view_mode, str) and view_mode.lower() in VIEW_MODE_NAMES:
        overrides["default_view_mode"] = VIEW_MODE_NAMES.index(view_mode.lower())

    count = data.get("loading_row_count")
    if isinstance(count, int) and not isinstance(count, bool) and count > 0:
        overrides["loading_row_count"] = count

    label = data.get("empty_label")
    if isinstance(label, str) and label.strip():
        overrides["empty_label"] = label

    widths = _parse_width_map(data.get("column_widths"))
    if widths is not None:
        overrides["column_widths"] = widths

    points = _parse_breakpoints(data.get("breakpoints"))
    if points is not None:
        overrides["breakpoints"] = points

    return replace(cfg, **overrides) if overrides else cfg
