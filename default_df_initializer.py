import pandas as pd


class DefaultDfInitializer:
    def create(self) -> pd.DataFrame:
        return pd.DataFrame(
            {
                "name": pd.Series(["alpha", "beta", "gamma"], dtype="object"),
                "qty": pd.Series([3, 1, 2], dtype="Int64"),
                "price": pd.Series([2.5, 10.0, 4.25], dtype="float64"),
            }
        )
