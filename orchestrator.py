# ~/Apps/tabula/orchestrator.py
import curses
import logging
import time

from app_state import AppState
from cell_actions import CELL_UPDATE, RowUpdateEvent
from cell_coercion import coerce_cell_value, coerce_row
from column_resolution import Column
from config_paths import DEFAULT_CONFIG, ensure_config_dirs
from data_loader import DataLoader
from grid_pane import GridPane
from line_prompt import LinePrompt
from row_pipeline import SortDirection, next_sort_direction
from screen_layout import ScreenLayout
from status_bar import render_status
from table_engine import TableEngine, TableProps
from view_mode import ViewMode

logger = logging.getLogger(__name__)

VIEW_MODE_KEYS = {
    ord("1"): ViewMode.SPARSE,
    ord("2"): ViewMode.COMFY,
    ord("3"): ViewMode.COMPACT,
}


class Orchestrator:
    def __init__(
        self, stdscr, load_fn, file_path=None, file_handler=None, config=DEFAULT_CONFIG
    ):
        self.stdscr = stdscr
        try:
            curses.curs_set(0)
        except curses.error:
            pass
        curses.raw()
        self.stdscr.nodelay(False)
        self.stdscr.timeout(100)

        ensure_config_dirs()

        self.file_path = file_path
        self.file_handler = file_handler
        self.state = None

        self.layout = ScreenLayout(stdscr)
        self.grid = GridPane()
        self.prompt = LinePrompt(self._set_status)

        # ---- status ----
        self.status_msg = None
        self.status_msg_until = 0

        placeholder_cols = file_handler.peek_columns() if file_handler else []
        columns = [Column(key=name, name=name) for name in placeholder_cols] or [
            Column(key=i, name="") for i in range(3)
        ]
        self.engine = TableEngine(
            TableProps(
                columns=columns,
                is_loading=True,
                add_row_button=True,
                dialog_title="Add Row",
                can_delete_row=lambda row: True,
                on_row_add=self._on_row_add,
                on_row_update=self._on_row_update,
                on_row_delete=self._on_row_delete,
            ),
            config=config,
            editor=self,
            viewport=self.grid,
        )
        self.engine.set_viewport_width(self.layout.W)

        self.loader = DataLoader(load_fn)
        self.loader.start()

    # ---------------- helpers ----------------

    def _set_status(self, msg, seconds=3):
        self.status_msg = msg
        self.status_msg_until = time.time() + seconds

    def _sync_rows(self):
        self.engine.update(data=self.state.raw_rows())

    def _poll_loader(self):
        if not self.engine.is_loading or not self.loader.done:
            return
        if self.loader.state.error:
            # nothing to add rows to
            self.engine.update(is_loading=False, data=[], add_row_button=False)
            self._set_status(f"Load failed: {self.loader.state.error}", 6)
            return
        self.state = AppState(self.loader.state.df, self.file_path, self.file_handler)
        self.engine.update(
            data=self.state.raw_rows(),
            columns=self.state.columns(),
            is_loading=False,
        )
        logger.debug("loaded %d rows", len(self.state.df))

    def _current_row(self, view):
        if not view.rows or view.is_loading:
            return None
        return view.rows[min(self.grid.curr_row, view.rows_count - 1)]

    # ---------------- engine collaborators ----------------

    def open_cell_editor(self, row_idx, idx):
        view = self.engine.render()
        if not (0 <= row_idx < view.rows_count) or not (0 <= idx < len(view.columns)):
            return
        col = view.columns[idx]
        if not col.editable:
            self._set_status(f"'{col.name}' is read-only", 2)
            return
        row = view.rows[row_idx]
        current = col.format(row.get(col.key), row, row_idx)
        self.prompt.start(
            [(f"{col.name}: ", current)],
            on_submit=lambda values: self._commit_cell(row, row_idx, col, values[0]),
        )

    def _commit_cell(self, row, row_idx, col, text):
        try:
            value = coerce_cell_value(col.dtype, text)
        except (TypeError, ValueError) as e:
            return f"Invalid value: {e}"
        updated = dict(row)
        updated[col.key] = value
        accepted = self.engine.on_grid_rows_updated(
            RowUpdateEvent(CELL_UPDATE, row, updated, col.key, row_idx)
        )
        if accepted is None:
            self._set_status("No change", 2)
        return None

    def _has_data(self) -> bool:
        if self.state is None:
            self._set_status("No data loaded", 3)
            return False
        return True

    def _on_row_update(self, update):
        if not self._has_data():
            return
        try:
            self.state.apply_update(update)
        except ValueError as e:
            logger.debug("edit rejected: %s", e)
            self._set_status(f"Edit failed: {e}", 4)
            return
        self._sync_rows()
        self._set_status(f"Updated '{update.column_key}'", 2)

    def _on_row_add(self, payload):
        if not self._has_data():
            return
        self.state.append_row(payload)
        self._sync_rows()
        self._set_status("Row added", 2)

    def _on_row_delete(self, row):
        if not self._has_data():
            return
        self.state.delete_row(row)
        self._sync_rows()
        self._set_status("Row deleted", 2)

    # ---------------- actions ----------------

    def _sort_current_column(self, view):
        col = view.columns[self.grid.curr_col]
        if not col.sortable:
            self._set_status("Column is not sortable", 2)
            return
        current = SortDirection.NONE
        if view.sort.sort_column == col.idx:
            current = view.sort.sort_direction
        direction = next_sort_direction(current)
        self.engine.on_grid_sort(col.idx, direction)
        self._set_status(f"Sort {col.name} {direction.value}", 2)

    def _start_filter(self, view):
        col = view.columns[self.grid.curr_col]
        if not col.filterable:
            self._set_status("Column is not filterable", 2)
            return
        existing = self.engine.filters.get(col.key)

        def submit(values):
            self.engine.add_column_filter(col.idx, values[0].strip())
            self.grid.curr_row = 0
            return None

        self.prompt.start(
            [(f"Filter {col.name}: ", existing.filter_term if existing else "")],
            on_submit=submit,
        )

    def _start_add_row(self):
        if not self.engine.toolbar.add_row_button or self.engine.is_loading:
            return
        self.engine.open_add_row()
        dialog = self.engine.add_row_dialog
        steps = [(f"{dialog.title or 'Add'} {c.name}: ", "") for c in dialog.columns]

        def submit(values):
            texts = {c.key: v for c, v in zip(dialog.columns, values)}
            try:
                payload = coerce_row(dialog.columns, texts)
            except (TypeError, ValueError) as e:
                return f"Invalid value: {e}"
            if dialog.is_duplicate(payload):
                return "Row already exists"
            self.engine.confirm_add_row(payload)
            return None

        self.prompt.start(steps, on_submit=submit, on_cancel=self.engine.cancel_add_row)

    def _run_row_action(self, view):
        row = self._current_row(view)
        if row is None:
            return
        actions = self.engine.get_cell_actions(len(view.columns) - 1, row)
        if not actions:
            self._set_status("No actions for this row", 2)
            return
        actions[0]()

    def _save(self):
        if self.state is None:
            return
        try:
            if self.state.save():
                self._set_status(f"Saved {self.file_path}", 3)
            else:
                self._set_status("No file to save to", 3)
        except Exception as e:
            msg = f"Save failed: {e}"[: self.layout.W - 2]
            self._set_status(msg, 4)

    # ---------------- UI ----------------

    def _draw_grid(self, view):
        self.grid.draw(
            self.layout.table_win, view, self.engine.toolbar, self.engine.filters
        )

    @staticmethod
    def _sort_label(view) -> str:
        sort = view.sort
        if sort.sort_direction == SortDirection.NONE:
            return ""
        name = sort.sort_column
        if isinstance(name, int) and 0 <= name < len(view.columns):
            name = view.columns[name].name
        return f"{name} {sort.sort_direction.value}"

    def redraw(self):
        view = self.engine.render()
        self._draw_grid(view)
        if self.engine.after_render():
            # row height changed; draw again with the refreshed metrics
            self._draw_grid(view)

        sw = self.layout.status_win
        sw.erase()
        h, w = sw.getmaxyx()
        if self.prompt.active:
            try:
                curses.curs_set(1)
            except curses.error:
                pass
            self.prompt.draw(sw)
            return
        try:
            curses.curs_set(0)
        except curses.error:
            pass

        text = render_status(
            {
                "status_msg": self.status_msg,
                "status_until": self.status_msg_until,
                "loading": view.is_loading,
                "file_path": self.file_path,
                "dirty": bool(self.state and self.state.dirty),
                "visible_rows": view.rows_count,
                "total_rows": len(self.state.df) if self.state is not None else 0,
                "sort": self._sort_label(view),
                "filter_count": len(self.engine.filters),
                "view_mode": view.view_mode.label,
            },
            w,
        )
        try:
            sw.addnstr(0, 0, text, w - 1)
        except curses.error:
            pass
        sw.refresh()

    # ---------------- main loop ----------------

    def handle_key(self, ch) -> bool:
        """Returns False when the app should exit."""
        if ch in (3, 24):  # Ctrl+C / Ctrl+X
            return False

        if self.prompt.active:
            self.prompt.handle_key(ch)
            return True

        if ch == -1:
            return True

        if ch == curses.KEY_RESIZE:
            self.engine.set_viewport_width(self.layout.resize())
            return True

        view = self.engine.render()
        if ch in (curses.KEY_LEFT, ord("h")):
            self.grid.move_left()
        elif ch in (curses.KEY_RIGHT, ord("l")):
            self.grid.move_right()
        elif ch in (curses.KEY_DOWN, ord("j")):
            self.grid.move_down()
        elif ch in (curses.KEY_UP, ord("k")):
            self.grid.move_up()
        elif ch in VIEW_MODE_KEYS:
            mode = self.engine.set_view_mode(VIEW_MODE_KEYS[ch])
            self._set_status(f"{mode.label} rows", 2)
        elif ch == ord("f"):
            if view.is_loading:
                self._set_status("Filters are disabled while loading", 2)
            else:
                self.engine.toggle_filters()
        elif view.is_loading or not view.columns:
            return True
        elif ch in (10, 13, curses.KEY_ENTER):
            row = self._current_row(view)
            if row is not None and not self.engine.on_row_click(
                self.grid.curr_row, row, self.grid.curr_col
            ):
                self.engine.on_cell_selected(self.grid.curr_row, self.grid.curr_col)
        elif ch == ord("s"):
            self._sort_current_column(view)
        elif ch == ord("/"):
            self._start_filter(view)
        elif ch == ord("F"):
            self.engine.on_clear_filters()
            self._set_status("Filters cleared", 2)
        elif ch == ord("a"):
            self._start_add_row()
        elif ch == ord("x"):
            self._run_row_action(view)
        elif ch in (ord("w"), 19):  # w / Ctrl+S
            self._save()
        return True

    def run(self):
        self.stdscr.clear()
        self.stdscr.refresh()
        self.redraw()

        while True:
            ch = self.stdscr.getch()
            self._poll_loader()
            if not self.handle_key(ch):
                self.loader.abort()
                break
            self.redraw()
