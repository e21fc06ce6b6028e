# ~/Apps/tabula/grid_pane.py
import curses

from column_resolution import Placeholder
from row_pipeline import SortDirection
from view_mode import ViewMode

PIXELS_PER_LINE = 20
PLACEHOLDER_GLYPH = "░"


def lines_for_height(pixels: int) -> int:
    return max(1, int(pixels) // PIXELS_PER_LINE)


def _wrap_cell(text: str, width: int, max_lines: int):
    if width <= 0:
        return [""] * max_lines
    lines: list[str] = []
    for part in (text.split("\n") if text else [""]):
        current = ""
        for word in part.split(" "):
            while len(word) > width:
                # hard-break overlong word
                if current:
                    lines.append(current)
                    current = ""
                lines.append(word[:width])
                word = word[width:]
            if current == "":
                current = word
            elif len(current) + 1 + len(word) <= width:
                current = f"{current} {word}"
            else:
                lines.append(current)
                current = word
        lines.append(current)
        if len(lines) >= max_lines:
            break
    lines = lines[:max_lines]
    while len(lines) < max_lines:
        lines.append("")
    return lines


class GridPane:
    PAIR_CELL_TEXT = 1
    PAIR_ROW_EVEN = 2
    PAIR_PLACEHOLDER = 3
    MAX_COL_WIDTH = 40
    MIN_COL_WIDTH = 4

    def __init__(self):
        try:
            curses.start_color()
            curses.use_default_colors()
            curses.init_pair(self.PAIR_CELL_TEXT, curses.COLOR_WHITE, -1)
            curses.init_pair(
                self.PAIR_ROW_EVEN, curses.COLOR_WHITE, curses.COLOR_BLACK
            )
            curses.init_pair(self.PAIR_PLACEHOLDER, curses.COLOR_BLACK, -1)
        except curses.error:
            pass

        self.view = None
        self.filters: dict = {}
        self.curr_row = 0
        self.curr_col = 0
        self.row_offset = 0
        self.col_offset = 0
        self.lines_per_row = lines_for_height(45)
        self.body_lines = 20

        self.rendered_col_widths = {}

    # ---------- viewport controller ----------
    @property
    def scroll_offset(self) -> int:
        return self.row_offset

    def refresh_metrics(self):
        if self.view is not None:
            self.lines_per_row = lines_for_height(self.view.row_height)

    def rescroll_to(self, offset: int):
        self.row_offset = max(0, min(offset, self.max_row_offset()))
        self._keep_cursor_visible()

    def visible_row_capacity(self) -> int:
        return max(1, self.body_lines // max(1, self.lines_per_row))

    def max_row_offset(self) -> int:
        total = self.view.rows_count if self.view is not None else 0
        return max(0, total - self.visible_row_capacity())

    def _keep_cursor_visible(self):
        cap = self.visible_row_capacity()
        if self.curr_row < self.row_offset:
            self.row_offset = self.curr_row
        elif self.curr_row >= self.row_offset + cap:
            self.row_offset = self.curr_row - cap + 1
        self.row_offset = max(0, min(self.row_offset, self.max_row_offset()))

    # ---------- navigation ----------
    def set_view(self, view, filters=None):
        self.view = view
        self.filters = filters or {}
        self.curr_row = min(self.curr_row, max(0, view.rows_count - 1))
        self.curr_col = min(self.curr_col, max(0, len(view.columns) - 1))

    def move_left(self):
        self.curr_col = max(0, self.curr_col - 1)

    def move_right(self):
        if self.view is not None:
            self.curr_col = min(len(self.view.columns) - 1, self.curr_col + 1)

    def move_down(self):
        if self.view is not None:
            self.curr_row = min(max(0, self.view.rows_count - 1), self.curr_row + 1)
            self._keep_cursor_visible()

    def move_up(self):
        self.curr_row = max(0, self.curr_row - 1)
        self._keep_cursor_visible()

    # ---------- widths ----------
    def get_col_width(self, col_idx):
        if self.view is None or not (0 <= col_idx < len(self.view.columns)):
            return self.MAX_COL_WIDTH
        col = self.view.columns[col_idx]
        if col.width is not None:
            return max(self.MIN_COL_WIDTH, int(col.width))
        max_len = len(self._header_label(col))
        if self.view.is_loading:
            return max(max_len + 2, 12)
        for i, row in enumerate(self.view.rows):
            text = self._cell_text(col, row, i)
            max_len = max(max_len, max((len(s) for s in text.split("\n")), default=0))
        return min(self.MAX_COL_WIDTH, max_len + 2)

    @staticmethod
    def _cell_text(col, row, row_index):
        out = col.format(row.get(col.key), row, row_index)
        if isinstance(out, Placeholder):
            return ""
        return "" if out is None else str(out)

    def _header_label(self, col):
        label = col.header_text
        if self.view is not None and self.view.sort.sort_direction != SortDirection.NONE:
            if self.view.sort.sort_column in (col.idx, col.key):
                asc = self.view.sort.sort_direction == SortDirection.ASC
                label += " ▲" if asc else " ▼"
        if col.tooltip is not None:
            label += " ?"
        return label

    # ---------- rendering ----------
    @staticmethod
    def _attr(pair):
        try:
            return curses.color_pair(pair)
        except curses.error:
            return 0

    def _toolbar_text(self, view, toolbar) -> str:
        parts = [f"[{'x' if view.show_filters else ' '}] Show Filters"]
        if toolbar is not None and toolbar.add_row_button:
            parts.append("(+) Add Row")
        if toolbar is None or toolbar.view_mode_button:
            parts.append(
                " ".join(
                    f"[{mode.label}]" if mode == view.view_mode else mode.label
                    for mode in ViewMode
                )
            )
        return "  ".join(parts)

    def _fit_columns(self, widths, avail_w) -> int:
        used = 0
        count = 0
        for cw in widths[self.col_offset :]:
            if used + cw + 1 > avail_w:
                break
            used += cw + 1
            count += 1
        return max(1, count)

    def draw(self, win, view=None, toolbar=None, filters=None):
        if view is not None:
            self.set_view(view, filters)
        view = self.view
        win.erase()
        try:
            win.bkgd(" ", self._attr(self.PAIR_CELL_TEXT))
        except curses.error:
            pass
        h, w = win.getmaxyx()
        if view is None:
            win.refresh()
            return

        total_rows = view.rows_count
        row_w = max(3, len(str(max(total_rows - 1, 0))) + 1)
        avail_w = w - (row_w + 1)

        widths = [self.get_col_width(c) for c in range(len(view.columns))]

        # Column adjustment so curr_col stays on screen
        max_cols = self._fit_columns(widths, avail_w)
        if self.curr_col < self.col_offset:
            self.col_offset = self.curr_col
        elif self.curr_col >= self.col_offset + max_cols:
            self.col_offset = self.curr_col - max_cols + 1
        self.col_offset = max(0, self.col_offset)
        max_cols = self._fit_columns(widths, avail_w)
        visible_cols = tuple(
            range(self.col_offset, min(len(view.columns), self.col_offset + max_cols))
        )

        y = 0
        self._addstr(win, y, 0, self._toolbar_text(view, toolbar), w, curses.A_DIM)
        y += 1

        # header
        x = row_w + 1
        self.rendered_col_widths = {}
        for c in visible_cols:
            eff_cw = min(widths[c], max(1, w - x - 1))
            self.rendered_col_widths[c] = eff_cw
            name = self._header_label(view.columns[c])[:eff_cw].ljust(eff_cw)
            self._addstr(win, y, x, name, eff_cw, curses.A_BOLD)
            x += eff_cw + 1
        y += 1

        if view.show_filters:
            x = row_w + 1
            for c in visible_cols:
                eff_cw = self.rendered_col_widths[c]
                term = self.filters.get(view.columns[c].key)
                text = str(term.filter_term) if term is not None else ""
                cell = ("/" + text)[:eff_cw].ljust(eff_cw)
                self._addstr(win, y, x, cell, eff_cw, curses.A_UNDERLINE)
                x += eff_cw + 1
            y += 1

        self.body_lines = max(1, h - y - 1)
        self._keep_cursor_visible()

        if view.is_empty:
            label = f" {view.empty_label} "
            label_y = y + self.body_lines // 2
            label_x = max(0, (w - len(label)) // 2)
            self._addstr(win, label_y, label_x, label, w, curses.A_REVERSE)
            self._footer(win, h, w)
            win.refresh()
            return

        cap = self.visible_row_capacity()
        for r in range(self.row_offset, min(total_rows, self.row_offset + cap)):
            row = view.rows[r]
            self._addstr(win, y, 0, str(r).rjust(row_w), row_w)
            stripe = self._attr(self.PAIR_ROW_EVEN if r % 2 else self.PAIR_CELL_TEXT)
            x = row_w + 1
            for c in visible_cols:
                col = view.columns[c]
                eff_cw = self.rendered_col_widths[c]
                attr = stripe
                if r == self.curr_row and c == self.curr_col:
                    attr = stripe | curses.A_REVERSE
                out = col.format(row.get(col.key), row, r)
                if isinstance(out, Placeholder):
                    bar = PLACEHOLDER_GLYPH * max(1, int(eff_cw * out.width_pct / 100))
                    lines = [bar.ljust(eff_cw)] + [""] * (self.lines_per_row - 1)
                    attr = self._attr(self.PAIR_PLACEHOLDER) | curses.A_DIM
                else:
                    text = "" if out is None else str(out)
                    lines = _wrap_cell(text, eff_cw, self.lines_per_row)
                for li, line in enumerate(lines):
                    if y + li >= h - 1:
                        break
                    self._addstr(win, y + li, x, line.ljust(eff_cw), eff_cw, attr)
                x += eff_cw + 1
            y += self.lines_per_row
            if y >= h - 1:
                break

        self._footer(win, h, w)
        win.refresh()

    @staticmethod
    def _addstr(win, y, x, text, n, attr=0):
        try:
            win.addnstr(y, x, text, n, attr)
        except curses.error:
            pass

    @staticmethod
    def _footer(win, h, w):
        try:
            win.hline(h - 1, 0, " ", w)
        except curses.error:
            pass
