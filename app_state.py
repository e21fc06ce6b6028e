import pandas as pd

from cell_actions import RowUpdate
from row_records import RawRow, blank_row, columns_from_frame, is_missing

ROW_ID = "__row_id__"


class AppState:
    """Owns the DataFrame behind the grid and applies accepted edits to it."""

    def __init__(self, df, file_path=None, file_handler=None):
        self.file_path = file_path
        self.file_handler = file_handler
        self.df = df if isinstance(df, pd.DataFrame) else pd.DataFrame()
        self.dirty = False

    def columns(self, **meta):
        return columns_from_frame(self.df, **meta)

    def raw_rows(self) -> list[RawRow]:
        """Rows tagged with their frame index so edits find their way back."""
        records = self.df.to_dict("records")
        return [RawRow({**rec, ROW_ID: idx}) for idx, rec in zip(self.df.index, records)]

    @staticmethod
    def strip_row_id(row) -> dict:
        return {k: v for k, v in row.items() if k != ROW_ID}

    def build_default_row(self):
        return dict(blank_row(self.columns()))

    def apply_update(self, update: RowUpdate) -> None:
        """Write an accepted edit into the frame.

        Raises ValueError when the value does not fit the column.
        """
        row_id = update.previous_row[ROW_ID]
        col = update.column_key
        dtype = self.df[col].dtype
        if is_missing(update.updated_value):
            # NA does not fit numpy int or bool columns
            if pd.api.types.is_bool_dtype(dtype):
                self.df[col] = self.df[col].astype("boolean")
            elif pd.api.types.is_integer_dtype(dtype):
                self.df[col] = self.df[col].astype("Int64")
        try:
            self.df.at[row_id, col] = update.updated_value
        except (TypeError, ValueError) as e:
            raise ValueError(f"'{col}' cannot hold {update.updated_value!r}: {e}") from e
        self.dirty = True

    def append_row(self, values) -> None:
        row = self.build_default_row()
        row.update({k: v for k, v in values.items() if k in self.df.columns})
        new_rows = pd.DataFrame([row], columns=self.df.columns)
        for col in self.df.columns:
            try:
                new_rows[col] = new_rows[col].astype(self.df[col].dtype)
            except (TypeError, ValueError):
                pass
        self.df = pd.concat([self.df, new_rows], ignore_index=True)
        self.dirty = True

    def delete_row(self, row) -> None:
        row_id = row[ROW_ID]
        self.df = self.df.drop(index=row_id).reset_index(drop=True)
        self.dirty = True

    def save(self) -> bool:
        if self.file_handler is None:
            return False
        self.file_handler.save(self.df)
        self.dirty = False
        return True
