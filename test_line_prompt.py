import curses
import unittest

from line_prompt import LinePrompt


def _type(prompt, text):
    for ch in text:
        prompt.handle_key(ord(ch))


class LinePromptTests(unittest.TestCase):
    def setUp(self):
        self.status = []
        self.prompt = LinePrompt(lambda msg, secs: self.status.append(msg))

    def test_single_step_submit(self):
        got = []
        self.prompt.start([("Name: ", "ab")], on_submit=lambda v: got.append(v))
        self.assertEqual(self.prompt.label, "Name: ")
        _type(self.prompt, "c")
        self.prompt.handle_key(10)
        self.assertEqual(got, [["abc"]])
        self.assertFalse(self.prompt.active)

    def test_multi_step_collects_each_value(self):
        got = []
        self.prompt.start([("A: ", ""), ("B: ", "x")], on_submit=got.append)
        _type(self.prompt, "1")
        self.prompt.handle_key(13)
        self.assertEqual(self.prompt.label, "B: ")
        self.assertEqual(self.prompt.buffer, "x")
        self.prompt.handle_key(10)
        self.assertEqual(got, [["1", "x"]])

    def test_error_keeps_prompt_open(self):
        calls = []

        def submit(values):
            calls.append(list(values))
            return "bad" if values[0] == "no" else None

        self.prompt.start([("V: ", "no")], on_submit=submit)
        self.prompt.handle_key(10)
        self.assertTrue(self.prompt.active)
        self.assertEqual(self.status, ["bad"])
        self.prompt.handle_key(127)
        self.prompt.handle_key(127)
        _type(self.prompt, "ok")
        self.prompt.handle_key(10)
        self.assertFalse(self.prompt.active)
        self.assertEqual(calls, [["no"], ["ok"]])

    def test_escape_cancels(self):
        cancelled = []
        self.prompt.start(
            [("V: ", "")], on_submit=lambda v: None, on_cancel=lambda: cancelled.append(1)
        )
        self.prompt.handle_key(27)
        self.assertFalse(self.prompt.active)
        self.assertEqual(cancelled, [1])

    def test_cursor_editing(self):
        self.prompt.start([("V: ", "ac")], on_submit=lambda v: None)
        self.prompt.handle_key(curses.KEY_LEFT)
        _type(self.prompt, "b")
        self.assertEqual(self.prompt.buffer, "abc")
        self.prompt.handle_key(curses.KEY_HOME)
        self.prompt.handle_key(curses.KEY_BACKSPACE)
        self.assertEqual(self.prompt.buffer, "abc")
        self.prompt.handle_key(curses.KEY_END)
        self.assertEqual(self.prompt.cursor, 3)

    def test_no_steps_stays_inactive(self):
        self.prompt.start([], on_submit=lambda v: None)
        self.assertFalse(self.prompt.active)
        self.assertEqual(self.prompt.label, "")


if __name__ == "__main__":
    unittest.main()
