import curses

STATUS_LINES = 1


class ScreenLayout:
    """Grid window on top, one status/prompt line below it."""

    def __init__(self, stdscr):
        self.stdscr = stdscr
        self.resize()

    def resize(self) -> int:
        self.H, self.W = self.stdscr.getmaxyx()
        self.table_h = max(1, self.H - STATUS_LINES)

        self.table_win = curses.newwin(self.table_h, self.W, 0, 0)
        # only the prompt line shows a cursor
        self.table_win.leaveok(True)
        self.status_win = curses.newwin(STATUS_LINES, self.W, self.table_h, 0)
        return self.W
