import pandas as pd
import pytest

from file_type_handler import FileTypeHandler, UnsupportedFileType


def test_rejects_unknown_extension(tmp_path):
    with pytest.raises(UnsupportedFileType):
        FileTypeHandler(str(tmp_path / "data.txt"))


def test_missing_file_creates_default_frame(tmp_path):
    handler = FileTypeHandler(str(tmp_path / "new.csv"))
    assert not handler.exists()
    assert handler.peek_columns() == []
    df = handler.load_or_create()
    assert list(df.columns) == ["name", "qty", "price"]


def test_csv_round_trip_and_peek(tmp_path):
    path = tmp_path / "data.CSV"
    handler = FileTypeHandler(str(path))
    handler.save(pd.DataFrame({"x": [1, 2], "y": ["a", "b"]}))
    assert handler.peek_columns() == ["x", "y"]
    df = handler.load_or_create()
    assert df["y"].tolist() == ["a", "b"]


def test_empty_csv_falls_back_to_default(tmp_path):
    path = tmp_path / "blank.csv"
    path.write_text("\n")
    df = FileTypeHandler(str(path)).load_or_create()
    assert list(df.columns) == ["name", "qty", "price"]
