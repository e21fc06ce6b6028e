import curses
from typing import Callable, Optional


class LinePrompt:
    """One-line text prompt drawn in the status bar.

    A prompt may have several steps (one label each); the collected texts
    are handed to ``on_submit`` after the last step. ``on_submit`` returns
    an error message to keep the prompt open, or None to close it.
    """

    def __init__(self, set_status_cb: Callable[[str, int], None]):
        self._set_status = set_status_cb
        self._reset()

    def _reset(self):
        self.active = False
        self.steps: list[tuple[str, str]] = []
        self.step = 0
        self.values: list[str] = []
        self.on_submit: Optional[Callable[[list], Optional[str]]] = None
        self.on_cancel: Optional[Callable[[], None]] = None
        self.buffer = ""
        self.cursor = 0
        self.hscroll = 0

    # ---------- public API ----------
    def start(self, steps, on_submit, on_cancel=None):
        self._reset()
        self.steps = [
            (label, "" if initial is None else str(initial)) for label, initial in steps
        ]
        if not self.steps:
            return
        self.on_submit = on_submit
        self.on_cancel = on_cancel
        self.active = True
        self._load_step()

    def _load_step(self):
        _, initial = self.steps[self.step]
        self.buffer = initial
        self.cursor = len(self.buffer)
        self.hscroll = 0

    @property
    def label(self) -> str:
        if not self.active:
            return ""
        return self.steps[self.step][0]

    def handle_key(self, ch):
        if not self.active:
            return

        if ch in (10, 13):  # Enter
            self._handle_enter()
            return

        if ch == 27:  # Esc
            on_cancel = self.on_cancel
            self._reset()
            if on_cancel is not None:
                on_cancel()
            return

        if ch in (curses.KEY_BACKSPACE, 127, 8):
            if self.cursor > 0:
                self.buffer = self.buffer[: self.cursor - 1] + self.buffer[self.cursor :]
                self.cursor -= 1
            return

        if ch == curses.KEY_LEFT:
            self.cursor = max(0, self.cursor - 1)
            return

        if ch == curses.KEY_RIGHT:
            self.cursor = min(len(self.buffer), self.cursor + 1)
            return

        if ch == curses.KEY_HOME:
            self.cursor = 0
            return

        if ch == curses.KEY_END:
            self.cursor = len(self.buffer)
            return

        if 32 <= ch <= 126:
            self.buffer = self.buffer[: self.cursor] + chr(ch) + self.buffer[self.cursor :]
            self.cursor += 1
            return

    def _handle_enter(self):
        self.values.append(self.buffer)
        if self.step + 1 < len(self.steps):
            self.step += 1
            self._load_step()
            return

        on_submit = self.on_submit
        values = list(self.values)
        error = on_submit(values) if on_submit is not None else None
        if error:
            self._set_status(error, 4)
            # stay on the last step so the user can fix the text
            self.values.pop()
            return
        self._reset()

    def draw(self, win):
        if not self.active:
            return

        prompt = self.label
        h, w = win.getmaxyx()
        text_w = max(1, w - len(prompt) - 1)

        if self.cursor < self.hscroll:
            self.hscroll = self.cursor
        elif self.cursor > self.hscroll + text_w:
            self.hscroll = self.cursor - text_w

        start = self.hscroll
        end = start + text_w
        visible = self.buffer[start:end]

        try:
            win.addnstr(0, 0, prompt, len(prompt))
            win.addnstr(0, len(prompt), visible, text_w)
            win.move(0, len(prompt) + (self.cursor - self.hscroll))
        except curses.error:
            pass
        win.refresh()
