import logging
import math
import zlib
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from typing import Any, Callable, Optional

import pandas as pd

from config_paths import DEFAULT_CONFIG, EngineConfig
from row_records import is_missing

logger = logging.getLogger(__name__)

BASE = "base"


@dataclass
class Column:
    key: Any
    name: str = ""
    editable: Optional[bool] = None
    filterable: Optional[bool] = None
    sortable: Optional[bool] = None
    formatter: Optional[Callable] = None
    placeholder_formatter: Optional[Callable] = None
    width: Optional[int] = None
    tooltip: Optional[str] = None
    header_renderer: Any = None
    dtype: Any = None
    filter_values: Optional[Callable] = None

    @classmethod
    def from_mapping(cls, data: Mapping) -> "Column":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass(frozen=True)
class HelpHeader:
    """Header content with a help marker next to it."""

    name: str
    tooltip: str
    renderer: Any = None

    @property
    def text(self) -> str:
        return str(self.renderer) if self.renderer is not None else self.name


@dataclass(frozen=True)
class Placeholder:
    width_pct: float
    height: int


@dataclass
class FormatterProps:
    value: Any
    row: Mapping = field(default_factory=dict)
    column: Any = None
    row_index: int = -1


@dataclass
class RenderColumn:
    key: Any
    name: str
    idx: int
    editable: bool
    filterable: bool
    sortable: bool
    width: Optional[int]
    formatter: Callable[[FormatterProps], Any]
    header: Any = None
    tooltip: Optional[str] = None
    dtype: Any = None
    filter_values: Optional[Callable] = None

    @property
    def header_text(self) -> str:
        if isinstance(self.header, HelpHeader):
            return self.header.text
        return str(self.header) if self.header is not None else self.name

    def format(self, value, row=None, row_index: int = -1):
        return self.formatter(
            FormatterProps(value=value, row=row or {}, column=self, row_index=row_index)
        )


def as_column(column) -> Column:
    if isinstance(column, Column):
        return column
    if isinstance(column, Mapping):
        return Column.from_mapping(column)
    raise TypeError(f"column must be a Column or mapping, got {type(column).__name__}")


def _is_unset(value) -> bool:
    return value is None or (isinstance(value, str) and value == "")


def merge_base_meta(column: Column, base_meta: Mapping | None) -> Column:
    """Fill the fields a column leaves unset from ``base_meta``."""
    if not base_meta:
        return replace(column)
    known = {f.name for f in fields(Column)} - {"key"}
    defaults = {
        k: v
        for k, v in base_meta.items()
        if k in known and _is_unset(getattr(column, k))
    }
    return replace(column, **defaults)


def with_help_header(column: Column) -> Column:
    if column.tooltip is None or isinstance(column.header_renderer, HelpHeader):
        return column
    header = HelpHeader(
        name=column.name or str(column.key),
        tooltip=column.tooltip,
        renderer=column.header_renderer,
    )
    return replace(column, header_renderer=header)


def resolve_widths(width_map, active_breakpoint, count: int) -> list:
    if not width_map:
        return [None] * count
    if active_breakpoint is not None and active_breakpoint in width_map:
        seq = width_map[active_breakpoint]
    else:
        if active_breakpoint is not None:
            logger.warning(
                "no column widths for breakpoint %r; using base", active_breakpoint
            )
        seq = width_map.get(BASE) or []
    seq = list(seq)[:count]
    return seq + [None] * (count - len(seq))


def active_breakpoint(viewport_width: int, width_map, breakpoints=None):
    """Largest breakpoint in ``width_map`` whose minimum fits the viewport."""
    if not width_map:
        return None
    points = breakpoints if breakpoints is not None else DEFAULT_CONFIG.breakpoints
    best = None
    best_min = None
    for name in width_map:
        if name == BASE or name not in points:
            continue
        min_width = points[name]
        if viewport_width >= min_width and (best_min is None or min_width > best_min):
            best, best_min = name, min_width
    return best


def placeholder_width(value, config: EngineConfig = DEFAULT_CONFIG) -> float:
    p = config.placeholder_multiplier
    q = config.placeholder_modulus
    floor = config.placeholder_floor
    if is_missing(value):
        seed = 0
    elif pd.api.types.is_integer(value):
        seed = int(value)
    elif pd.api.types.is_float(value) and math.isfinite(value):
        seed = int(value)
    else:
        seed = zlib.crc32(str(value).encode("utf-8"))
    length = (seed * p) % q + floor
    return round(length / (floor + q) * 100, 3)


def placeholder_formatter(props: FormatterProps, config: EngineConfig = DEFAULT_CONFIG):
    return Placeholder(
        width_pct=placeholder_width(props.value, config),
        height=config.placeholder_height,
    )


def default_formatter(props: FormatterProps) -> str:
    return "" if is_missing(props.value) else str(props.value)


def make_formatter(column: Column, is_loading: bool, config: EngineConfig = DEFAULT_CONFIG):
    def formatter(props: FormatterProps):
        if is_loading:
            if column.placeholder_formatter is not None:
                return column.placeholder_formatter(props)
            return placeholder_formatter(props, config)
        if column.formatter is not None:
            return column.formatter(props)
        return default_formatter(props)

    return formatter


def column_meta(columns, base_meta=None, width_map=None, breakpoint=None) -> list[Column]:
    """Columns with base meta, help headers and responsive widths applied."""
    merged = [with_help_header(merge_base_meta(as_column(c), base_meta)) for c in columns]
    widths = resolve_widths(width_map, breakpoint, len(merged))
    return [
        replace(c, width=w) if w is not None else c for c, w in zip(merged, widths)
    ]


def resolve_columns(
    columns,
    base_meta=None,
    width_map=None,
    breakpoint=None,
    is_loading: bool = False,
    config: EngineConfig = DEFAULT_CONFIG,
) -> list[RenderColumn]:
    resolved = []
    for idx, c in enumerate(column_meta(columns, base_meta, width_map, breakpoint)):
        resolved.append(
            RenderColumn(
                key=c.key,
                name=c.name or str(c.key),
                idx=idx,
                editable=not is_loading and bool(c.editable),
                filterable=not is_loading and bool(c.filterable),
                sortable=not is_loading and bool(c.sortable),
                width=c.width,
                formatter=make_formatter(c, is_loading, config),
                header=c.header_renderer,
                tooltip=c.tooltip,
                dtype=c.dtype,
                filter_values=c.filter_values,
            )
        )
    return resolved
