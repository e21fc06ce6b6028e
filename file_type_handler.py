import os

import pandas as pd

from default_df_initializer import DefaultDfInitializer

SUPPORTED_EXTENSIONS = (".csv", ".parquet", ".xlsx")


class UnsupportedFileType(ValueError):
    pass


class FileTypeHandler:
    def __init__(self, path: str):
        self.path = path
        _, ext = os.path.splitext(path)
        self.ext = ext.lower()

        if self.ext not in SUPPORTED_EXTENSIONS:
            raise UnsupportedFileType(
                "Unsupported file type (use .csv, .parquet, or .xlsx)"
            )

    def exists(self) -> bool:
        return os.path.exists(self.path) and os.path.getsize(self.path) > 0

    def peek_columns(self) -> list[str]:
        """Column names without reading the rows; [] when unknown."""
        if not self.exists() or self.ext != ".csv":
            return []
        try:
            return [str(c) for c in pd.read_csv(self.path, nrows=0).columns]
        except (pd.errors.EmptyDataError, pd.errors.ParserError, OSError):
            return []

    def load_or_create(self) -> pd.DataFrame:
        if not self.exists():
            return self._default_df()

        if self.ext == ".csv":
            try:
                df = pd.read_csv(self.path)
            except pd.errors.EmptyDataError:
                return self._default_df()
        elif self.ext == ".parquet":
            self._ensure_engine("pyarrow", "Parquet")
            df = pd.read_parquet(self.path)
        else:
            self._ensure_engine("openpyxl", "XLSX")
            df = pd.read_excel(self.path, sheet_name=0)
        return self._ensure_columns(df)

    def save(self, df: pd.DataFrame) -> None:
        if self.ext == ".csv":
            df.to_csv(self.path, index=False)
        elif self.ext == ".parquet":
            self._ensure_engine("pyarrow", "Parquet")
            df.to_parquet(self.path)
        else:
            self._ensure_engine("openpyxl", "XLSX")
            df.to_excel(self.path, index=False)

    def _ensure_columns(self, df: pd.DataFrame) -> pd.DataFrame:
        if df is None or df.shape[1] == 0:
            return self._default_df()
        return df

    def _default_df(self) -> pd.DataFrame:
        return DefaultDfInitializer().create()

    @staticmethod
    def _ensure_engine(module: str, label: str):
        try:
            __import__(module)
        except ImportError:
            raise RuntimeError(
                f"{label} support requires {module}. Install via: pip install {module}"
            ) from None
