import logging
from dataclasses import dataclass
from enum import Enum
from functools import cmp_to_key
from typing import Callable, Sequence

from row_filters import get_rows
from row_records import Row, is_missing

logger = logging.getLogger(__name__)


class SortDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"
    NONE = "NONE"


@dataclass(frozen=True)
class SortState:
    sort_column: int | str = 0
    sort_direction: SortDirection = SortDirection.NONE


def next_sort_direction(direction: SortDirection) -> SortDirection:
    order = [SortDirection.NONE, SortDirection.ASC, SortDirection.DESC]
    return order[(order.index(SortDirection(direction)) + 1) % len(order)]


def compare_strings(a: str, b: str) -> int:
    return 1 if a.lower().strip() > b.lower().strip() else -1


def compare_values(a, b) -> int:
    if isinstance(a, str) and isinstance(b, str):
        return compare_strings(a, b)
    # missing values sort ahead of everything else
    if is_missing(a):
        return -1
    if is_missing(b):
        return 1
    try:
        return 1 if a > b else -1
    except TypeError:
        return compare_strings(str(a), str(b))


def _sort_key(sort_column, columns):
    if isinstance(sort_column, int) and not isinstance(sort_column, bool) and columns:
        if 0 <= sort_column < len(columns):
            return columns[sort_column].key
    return sort_column


def sort_rows(rows: Sequence, sort: SortState, columns=None) -> list:
    if SortDirection(sort.sort_direction) == SortDirection.NONE:
        return list(rows)
    modifier = 1 if SortDirection(sort.sort_direction) == SortDirection.ASC else -1
    key = _sort_key(sort.sort_column, columns)

    def comparator(a, b):
        return compare_values(a.get(key), b.get(key)) * modifier

    return sorted(rows, key=cmp_to_key(comparator))


def generate_fake_row(columns, row_idx: int) -> Row:
    return Row({col.key: row_idx + i for i, col in enumerate(columns)})


def placeholder_rows(columns, count: int) -> list[Row]:
    stride = len(columns) + 1
    return [generate_fake_row(columns, i * stride) for i in range(max(0, count))]


def compute_visible_rows(
    rows: Sequence,
    sort: SortState,
    filters: dict,
    columns=None,
    filter_rows: Callable[[list, dict], list] = get_rows,
    is_loading: bool = False,
    loading_row_count: int = 5,
) -> list:
    """Sort, then filter, the rows the grid should show.

    While loading, the real rows are ignored and ``loading_row_count``
    synthetic rows are returned instead. The input sequence is never
    mutated.
    """
    if is_loading:
        return placeholder_rows(columns or [], loading_row_count)

    ordered = sort_rows(rows, sort, columns)
    result = filter_rows(ordered, filters or {})
    if not isinstance(result, (list, tuple)):
        logger.warning(
            "filter returned %s instead of a row sequence; showing no rows",
            type(result).__name__,
        )
        return []
    return list(result)
