import math

import numpy as np
import pandas as pd
import pytest

from column_resolution import Column
from row_records import (
    RawRow,
    Row,
    blank_row,
    columns_from_frame,
    is_missing,
    rows_from_frame,
    transform_rows,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, True),
        (math.nan, True),
        (pd.NA, True),
        (pd.NaT, True),
        (0, False),
        ("", False),
        ([None], False),
    ],
)
def test_is_missing(value, expected):
    assert is_missing(value) is expected


def test_transform_defaults_to_identity():
    out = transform_rows([{"a": 1}])
    assert out == [{"a": 1}]
    assert isinstance(out[0], Row)


def test_transform_receives_raw_rows():
    seen = []

    def fn(raw):
        seen.append(type(raw))
        return {"b": raw["a"] * 2}

    assert transform_rows([{"a": 2}], fn) == [{"b": 4}]
    assert seen == [RawRow]


@pytest.mark.parametrize("rows, fn", [([1], None), ([{"a": 1}], lambda raw: [1])])
def test_transform_rejects_non_mappings(rows, fn):
    with pytest.raises(TypeError):
        transform_rows(rows, fn)


def test_rows_and_columns_from_frame():
    df = pd.DataFrame({"a": [1, 2], "b": ["x", "y"]})
    assert rows_from_frame(df) == [{"a": 1, "b": "x"}, {"a": 2, "b": "y"}]
    cols = columns_from_frame(df, editable=False)
    assert [c.key for c in cols] == ["a", "b"]
    assert not cols[0].editable
    assert cols[0].sortable
    assert pd.api.types.is_integer_dtype(cols[0].dtype)
    assert rows_from_frame(pd.DataFrame()) == []


def test_blank_row_matches_dtypes():
    cols = [
        Column(key="t", dtype=pd.Series([], dtype="datetime64[ns]").dtype),
        Column(key="n", dtype=pd.Series([], dtype="float64").dtype),
        Column(key="s"),
    ]
    row = blank_row(cols)
    assert row["t"] is pd.NaT
    assert np.isnan(row["n"])
    assert row["s"] is pd.NA
