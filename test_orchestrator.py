import unittest

from cell_actions import RowUpdate
from column_resolution import Column
from data_loader import DataLoader
from orchestrator import Orchestrator
from table_engine import TableEngine, TableProps


class DummyState:
    def __init__(self, error=None):
        self.error = error
        self.applied = []

    def apply_update(self, update):
        if self.error:
            raise ValueError(self.error)
        self.applied.append(update)

    def raw_rows(self):
        return []


def _orchestrator(state=None):
    """An Orchestrator without a terminal; only the callback state is set up."""
    orch = Orchestrator.__new__(Orchestrator)
    orch.state = state
    orch.status_msg = None
    orch.status_msg_until = 0
    orch.engine = TableEngine(
        TableProps(
            columns=[Column(key=i, name="") for i in range(3)],
            is_loading=True,
            add_row_button=True,
            on_row_add=orch._on_row_add,
            on_row_update=orch._on_row_update,
            on_row_delete=orch._on_row_delete,
        )
    )
    return orch


class MissingDataTests(unittest.TestCase):
    def test_add_row_without_loaded_data_reports_status(self):
        orch = _orchestrator()
        orch.engine.update(is_loading=False)
        orch.engine.open_add_row()
        orch.engine.confirm_add_row({0: "x"})
        self.assertEqual(orch.status_msg, "No data loaded")

    def test_update_and_delete_without_loaded_data(self):
        orch = _orchestrator()
        orch._on_row_update(RowUpdate(0, 0, {}, "x"))
        orch._on_row_delete({})
        self.assertEqual(orch.status_msg, "No data loaded")

    def test_failed_load_hides_add_row(self):
        def boom():
            raise OSError("unreadable")

        orch = _orchestrator()
        orch.file_path = "broken.csv"
        orch.loader = DataLoader(boom)
        orch.loader.start()
        orch.loader.join(5)
        orch._poll_loader()
        self.assertFalse(orch.engine.is_loading)
        self.assertFalse(orch.engine.toolbar.add_row_button)
        self.assertIsNone(orch.state)
        self.assertIn("unreadable", orch.status_msg)


class RejectedEditTests(unittest.TestCase):
    def test_frame_rejection_becomes_status(self):
        state = DummyState(error="bad value")
        orch = _orchestrator(state)
        orch._on_row_update(RowUpdate(0, 0, {}, "x"))
        self.assertIn("bad value", orch.status_msg)
        self.assertTrue(orch.status_msg.startswith("Edit failed"))

    def test_accepted_edit_syncs_rows(self):
        state = DummyState()
        orch = _orchestrator(state)
        orch.engine.update(is_loading=False)
        orch._on_row_update(RowUpdate(0, "k", {}, "x"))
        self.assertEqual(len(state.applied), 1)
        self.assertEqual(orch.status_msg, "Updated 'k'")


if __name__ == "__main__":
    unittest.main()
