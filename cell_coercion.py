import pandas as pd

TRUE_WORDS = {"1", "true", "t", "yes", "y", "on"}
FALSE_WORDS = {"0", "false", "f", "no", "n", "off"}


def coerce_cell_value(dtype, text):
    """Turn editor text into a value of the column's dtype."""
    text = "" if text is None else str(text)
    if dtype is None:
        dtype = object

    stripped = text.strip()
    if pd.api.types.is_bool_dtype(dtype):
        if stripped == "":
            return pd.NA
        lowered = stripped.lower()
        if lowered in TRUE_WORDS:
            return True
        if lowered in FALSE_WORDS:
            return False
        raise ValueError(f"Cannot coerce '{text}' to boolean")

    if pd.api.types.is_integer_dtype(dtype):
        if stripped == "":
            return pd.NA
        return int(stripped)

    if pd.api.types.is_float_dtype(dtype):
        if stripped == "":
            return float("nan")
        return float(stripped)

    if pd.api.types.is_datetime64_any_dtype(dtype):
        if stripped == "":
            return pd.NaT
        return pd.to_datetime(stripped, errors="raise")

    return text


def coerce_row(columns, values: dict) -> dict:
    """Coerce every text value of an add-row form by its column dtype."""
    by_key = {c.key: c for c in columns}
    row = {}
    for key, text in values.items():
        col = by_key.get(key)
        row[key] = coerce_cell_value(getattr(col, "dtype", None), text)
    return row
