from collections.abc import Mapping
from typing import Callable, Iterable

import numpy as np
import pandas as pd


class RawRow(dict):
    """A record as produced by the data source."""


class Row(dict):
    """A record in the shape the grid renders."""


def is_missing(value) -> bool:
    if value is None:
        return True
    # array-like values are never "missing" as a whole
    if not pd.api.types.is_scalar(value):
        return False
    return bool(pd.isna(value))


def identity_transform(row: RawRow) -> Row:
    return Row(row)


def transform_row(raw, transform: Callable[[RawRow], Mapping] | None = None) -> Row:
    if not isinstance(raw, Mapping):
        raise TypeError(f"row must be a mapping, got {type(raw).__name__}")
    fn = transform or identity_transform
    out = fn(raw if isinstance(raw, RawRow) else RawRow(raw))
    if not isinstance(out, Mapping):
        raise TypeError(
            f"transform_row must return a mapping, got {type(out).__name__}"
        )
    return out if isinstance(out, Row) else Row(out)


def transform_rows(
    rows: Iterable, transform: Callable[[RawRow], Mapping] | None = None
) -> list[Row]:
    return [transform_row(raw, transform) for raw in rows]


def rows_from_frame(df: pd.DataFrame) -> list[RawRow]:
    if df is None or df.columns.size == 0:
        return []
    return [RawRow(rec) for rec in df.to_dict("records")]


def columns_from_frame(df: pd.DataFrame, **meta):
    """Build one Column per DataFrame column, in frame order."""
    from column_resolution import Column

    columns = []
    for name, dtype in df.dtypes.items():
        columns.append(
            Column(
                key=name,
                name=str(name),
                editable=meta.get("editable", True),
                filterable=meta.get("filterable", True),
                sortable=meta.get("sortable", True),
                dtype=dtype,
            )
        )
    return columns


def blank_row(columns) -> RawRow:
    """Default values for a new row, typed by each column's dtype."""
    row = RawRow()
    for col in columns:
        dtype = getattr(col, "dtype", None)
        if dtype is not None and pd.api.types.is_datetime64_any_dtype(dtype):
            row[col.key] = pd.NaT
        elif dtype is not None and pd.api.types.is_numeric_dtype(dtype):
            row[col.key] = np.nan
        else:
            row[col.key] = pd.NA
    return row
