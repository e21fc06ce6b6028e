import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Mapping, Optional, Sequence

import pandas as pd

from cell_actions import (
    AddRowDialog,
    CellEditor,
    EditCoordinator,
    EditorPosition,
    RowUpdateEvent,
)
from column_resolution import (
    BASE,
    RenderColumn,
    active_breakpoint,
    column_meta,
    resolve_columns,
)
from config_paths import DEFAULT_CONFIG, EngineConfig
from render_scheduler import AfterCommitScheduler
from row_filters import (
    FilterTerm,
    clear_filters,
    get_rows,
    handle_filter_change,
    make_filter,
)
from row_pipeline import SortDirection, SortState, compute_visible_rows
from row_records import Row, rows_from_frame, transform_rows
from view_mode import ToolbarState, ViewMode, ViewModeState, ViewportController

logger = logging.getLogger(__name__)


@dataclass
class TableProps:
    data: Any = field(default_factory=list)
    columns: Sequence = field(default_factory=list)
    base_column_meta: Optional[Mapping] = None
    is_loading: bool = False
    loading_row_count: Optional[int] = None
    empty_label: Optional[str] = None
    add_row_button: bool = False
    view_mode_button: bool = True
    dialog_title: Optional[str] = None
    column_widths: Optional[Mapping] = None

    transform_row: Optional[Callable] = None
    can_delete_row: Optional[Callable] = None
    get_row_actions: Optional[Callable] = None
    filter_rows: Callable = get_rows

    on_row_add: Optional[Callable] = None
    on_row_update: Optional[Callable] = None
    on_row_delete: Optional[Callable] = None


@dataclass
class TableView:
    """Everything the host needs to draw one frame."""

    columns: list[RenderColumn]
    rows: list
    rows_count: int
    row_height: int
    header_row_height: int
    header_filters_height: int
    editor_position: EditorPosition
    show_filters: bool
    is_loading: bool
    is_empty: bool
    empty_label: str
    sort: SortState
    view_mode: ViewMode = ViewMode.COMFY


class TableEngine:
    def __init__(
        self,
        props: TableProps,
        config: EngineConfig = DEFAULT_CONFIG,
        editor: Optional[CellEditor] = None,
        viewport: Optional[ViewportController] = None,
        scheduler: Optional[AfterCommitScheduler] = None,
    ):
        self.props = props
        self.config = config
        self.scheduler = scheduler or AfterCommitScheduler()

        self.sort = SortState()
        self.filters: dict = {}
        self.breakpoint = None
        self._visible_cache = None

        self.view = ViewModeState(config, self.scheduler, viewport)
        self.toolbar = ToolbarState(
            add_row_button=props.add_row_button,
            view_mode_button=props.view_mode_button,
        )
        self.coordinator = EditCoordinator(editor)
        self.add_row_dialog = AddRowDialog(title=props.dialog_title)
        self._wire_callbacks()

    def _wire_callbacks(self):
        p = self.props
        self.coordinator.can_delete_row = p.can_delete_row
        self.coordinator.get_row_actions = p.get_row_actions
        self.coordinator.on_row_update = p.on_row_update
        self.coordinator.on_row_delete = p.on_row_delete
        self.add_row_dialog.on_row_add = p.on_row_add
        self.add_row_dialog.title = p.dialog_title
        self.toolbar.add_row_button = p.add_row_button
        self.toolbar.view_mode_button = p.view_mode_button

    def update(self, **changes) -> None:
        """Swap in new props from the host; engine-owned state is kept."""
        self.props = replace(self.props, **changes)
        self._wire_callbacks()

    # ---------- inputs ----------
    @property
    def is_loading(self) -> bool:
        return bool(self.props.is_loading)

    @property
    def loading_row_count(self) -> int:
        count = self.props.loading_row_count
        return self.config.loading_row_count if count is None else max(0, count)

    @property
    def empty_label(self) -> str:
        label = self.props.empty_label
        return self.config.empty_label if label is None else label

    @property
    def width_map(self):
        widths = self.props.column_widths
        if widths is None:
            widths = self.config.column_widths
        if widths is None:
            return {BASE: [None] * len(self.props.columns)}
        return widths

    def set_viewport_width(self, width: int):
        breakpoint = active_breakpoint(width, self.width_map, self.config.breakpoints)
        if breakpoint != self.breakpoint:
            logger.debug(
                "breakpoint %r -> %r at width %d", self.breakpoint, breakpoint, width
            )
        self.breakpoint = breakpoint
        return breakpoint

    def rows(self) -> list[Row]:
        data = self.props.data
        if isinstance(data, pd.DataFrame):
            data = rows_from_frame(data)
        return transform_rows(data or [], self.props.transform_row)

    # ---------- derived ----------
    def column_meta(self):
        return column_meta(
            self.props.columns,
            self.props.base_column_meta,
            self.width_map,
            self.breakpoint,
        )

    def columns(self) -> list[RenderColumn]:
        return resolve_columns(
            self.props.columns,
            self.props.base_column_meta,
            self.width_map,
            self.breakpoint,
            self.is_loading,
            self.config,
        )

    def visible_rows(self) -> list:
        """Sorted, filtered rows; recomputed only when props, sort or filters change.

        Hosts pass new data through ``update``; rows mutated in place are
        not seen until then.
        """
        key = (self.props, self.sort, self.filters, self.breakpoint)
        if self._visible_cache is not None:
            cached_key, rows = self._visible_cache
            if all(a is b for a, b in zip(cached_key, key)):
                return rows
        rows = compute_visible_rows(
            [] if self.is_loading else self.rows(),
            self.sort,
            self.filters,
            columns=self.column_meta(),
            filter_rows=self.props.filter_rows,
            is_loading=self.is_loading,
            loading_row_count=self.loading_row_count,
        )
        self._visible_cache = (key, rows)
        return rows

    @property
    def rows_count(self) -> int:
        return len(self.visible_rows())

    def row_getter(self, i: int):
        return self.visible_rows()[i]

    @property
    def row_height(self) -> int:
        return self.view.row_height

    @staticmethod
    def row_class(idx: int) -> str:
        return "row-even" if idx % 2 else "row-odd"

    def render(self) -> TableView:
        rows = self.visible_rows()
        return TableView(
            columns=self.columns(),
            rows=rows,
            rows_count=len(rows),
            row_height=self.row_height,
            header_row_height=self.config.header_row_height,
            header_filters_height=self.config.header_filters_height,
            editor_position=self.coordinator.last_edited,
            show_filters=self.toolbar.show_filters,
            is_loading=self.is_loading,
            is_empty=not self.is_loading and not rows,
            empty_label=self.empty_label,
            sort=self.sort,
            view_mode=self.view.view_mode,
        )

    # ---------- grid callbacks ----------
    def on_grid_sort(self, sort_column, sort_direction) -> SortState:
        self.sort = SortState(sort_column, SortDirection(sort_direction))
        return self.sort

    def on_add_filter(self, new_filter: FilterTerm) -> dict:
        self.filters = handle_filter_change(self.filters, new_filter)
        return self.filters

    def add_column_filter(self, column_idx: int, term) -> dict:
        column = self.column_meta()[column_idx]
        return self.on_add_filter(make_filter(column, term))

    def on_clear_filters(self) -> dict:
        self.filters = clear_filters()
        return self.filters

    def on_cell_selected(self, row_idx: int, idx: int) -> None:
        self.coordinator.on_cell_selected(EditorPosition(row_idx, idx))

    def on_row_click(self, row_idx: int, row, column_idx) -> bool:
        return self.coordinator.on_row_click(row_idx, row, column_idx)

    def on_grid_rows_updated(self, event: RowUpdateEvent):
        return self.coordinator.handle_row_update(event)

    def get_cell_actions(self, column_idx: int, row) -> list:
        return self.coordinator.get_cell_actions(
            column_idx, row, len(self.props.columns)
        )

    # ---------- add row ----------
    def open_add_row(self) -> None:
        self.add_row_dialog.open(self.visible_rows(), self.column_meta())

    def confirm_add_row(self, payload) -> None:
        self.add_row_dialog.confirm(payload)

    def cancel_add_row(self) -> None:
        self.add_row_dialog.cancel()

    # ---------- toolbar ----------
    def set_view_mode(self, mode):
        return self.view.set_view_mode(mode)

    def toggle_filters(self) -> bool:
        return self.toolbar.toggle_filters(self.is_loading)

    def after_render(self) -> int:
        """Host calls this once a frame has been committed."""
        return self.scheduler.flush()
