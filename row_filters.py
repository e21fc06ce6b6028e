import re
from dataclasses import dataclass, field
from typing import Any, Callable

import pandas as pd

from row_records import is_missing

_RANGE = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*-\s*(-?\d+(?:\.\d+)?)\s*$")
_BOUND = re.compile(r"^\s*([<>])\s*(-?\d+(?:\.\d+)?)\s*$")
_NUMBER = re.compile(r"^\s*-?\d+(?:\.\d+)?\s*$")


@dataclass
class NumericRule:
    kind: str  # value | range | gt | lt
    value: float | None = None
    begin: float | None = None
    end: float | None = None

    def matches(self, number: float) -> bool:
        if self.kind == "value":
            return number == self.value
        if self.kind == "range":
            return self.begin <= number <= self.end
        if self.kind == "gt":
            return number > self.value
        if self.kind == "lt":
            return number < self.value
        return False


@dataclass
class FilterTerm:
    column_key: Any
    filter_term: Any
    rules: list[NumericRule] | None = None
    filter_values: Callable[[dict, "FilterTerm", Any], bool] | None = field(
        default=None, repr=False
    )


def parse_numeric_rules(term) -> list[NumericRule] | None:
    """Parse "5", "1,3", "2-8", ">3" and "<10" style terms.

    Returns None when any comma-separated part is not numeric.
    """
    text = str(term).strip()
    if not text:
        return None
    rules = []
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        m = _RANGE.match(part)
        if m:
            begin, end = float(m.group(1)), float(m.group(2))
            rules.append(NumericRule("range", begin=min(begin, end), end=max(begin, end)))
            continue
        m = _BOUND.match(part)
        if m:
            kind = "gt" if m.group(1) == ">" else "lt"
            rules.append(NumericRule(kind, value=float(m.group(2))))
            continue
        if _NUMBER.match(part):
            rules.append(NumericRule("value", value=float(part)))
            continue
        return None
    return rules or None


def handle_filter_change(filters: dict, new_filter: FilterTerm) -> dict:
    next_filters = dict(filters or {})
    if new_filter.filter_term:
        next_filters[new_filter.column_key] = new_filter
    else:
        next_filters.pop(new_filter.column_key, None)
    return next_filters


def clear_filters() -> dict:
    return {}


def _as_number(value):
    if isinstance(value, bool):
        return None
    if pd.api.types.is_number(value):
        return float(value)
    try:
        return float(str(value).strip())
    except ValueError:
        return None


def row_matches(row, term: FilterTerm) -> bool:
    if term.filter_values is not None:
        return bool(term.filter_values(row, term, term.column_key))

    value = row.get(term.column_key) if hasattr(row, "get") else None
    if is_missing(value):
        return False

    if term.rules:
        number = _as_number(value)
        if number is None:
            return False
        return any(rule.matches(number) for rule in term.rules)

    return str(term.filter_term).lower() in str(value).lower()


def get_rows(rows, filters: dict) -> list:
    """Keep the rows that satisfy every active filter."""
    if not filters:
        return list(rows)
    active = [t for t in filters.values() if isinstance(t, FilterTerm) and t.filter_term]
    return [row for row in rows if all(row_matches(row, t) for t in active)]


def make_filter(column, term) -> FilterTerm:
    """Build the filter a column's header input produces for ``term``."""
    rules = None
    dtype = getattr(column, "dtype", None)
    if (
        dtype is not None
        and pd.api.types.is_numeric_dtype(dtype)
        and not pd.api.types.is_bool_dtype(dtype)
    ):
        rules = parse_numeric_rules(term)
    return FilterTerm(
        column.key,
        term,
        rules=rules,
        filter_values=getattr(column, "filter_values", None),
    )
