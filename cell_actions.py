import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Protocol

from row_records import is_missing

logger = logging.getLogger(__name__)

CELL_UPDATE = "CELL_UPDATE"


@dataclass(frozen=True)
class EditorPosition:
    row_idx: int = -1
    idx: int = -1


@dataclass
class CellAction:
    label: str
    callback: Callable[[], Any]
    icon: Optional[str] = None
    actions: list["CellAction"] = field(default_factory=list)

    def __call__(self):
        return self.callback()


@dataclass
class RowUpdateEvent:
    action: str
    from_row_data: Mapping
    updated: Mapping
    cell_key: Any
    to_row: int


@dataclass(frozen=True)
class RowUpdate:
    row_index: int
    column_key: Any
    previous_row: Mapping
    updated_value: Any


class CellEditor(Protocol):
    def open_cell_editor(self, row_idx: int, idx: int) -> None: ...


def same_value(a, b) -> bool:
    """Strict equality: ``1`` and ``True`` differ, any two missing values match."""
    if is_missing(a) and is_missing(b):
        return True
    if type(a) is not type(b):
        return False
    try:
        return bool(a == b)
    except (TypeError, ValueError):
        return False


class EditCoordinator:
    """Decides what selecting, clicking, updating or deleting a cell does."""

    def __init__(
        self,
        editor: Optional[CellEditor] = None,
        can_delete_row: Optional[Callable[[Mapping], bool]] = None,
        get_row_actions: Optional[Callable[[Mapping], list]] = None,
        on_row_update: Optional[Callable[[RowUpdate], None]] = None,
        on_row_delete: Optional[Callable[[Mapping], None]] = None,
    ):
        self.editor = editor
        self.can_delete_row = can_delete_row
        self.get_row_actions = get_row_actions
        self.on_row_update = on_row_update
        self.on_row_delete = on_row_delete
        self.last_edited = EditorPosition()

    # ---------- selection ----------
    def on_cell_selected(self, pos: EditorPosition) -> None:
        if self.editor is not None:
            self.editor.open_cell_editor(pos.row_idx, pos.idx)
        self.last_edited = pos

    def on_row_click(self, row_idx: int, row, column_idx: Optional[int]) -> bool:
        """Reopen the editor when a re-render lands on the last edited cell."""
        if column_idx is None:
            return False
        if row_idx == self.last_edited.row_idx and column_idx == self.last_edited.idx:
            if self.editor is not None:
                self.editor.open_cell_editor(row_idx, column_idx)
            return True
        return False

    # ---------- actions ----------
    def get_cell_actions(self, column_idx: int, row, column_count: int) -> list[CellAction]:
        if column_idx != column_count - 1:
            return []

        actions: list[CellAction] = []
        if self.can_delete_row is not None and self.can_delete_row(row):
            actions.append(
                CellAction(
                    label="delete",
                    icon="times-circle",
                    callback=lambda: self._delete(row),
                )
            )
        if self.get_row_actions is not None:
            actions.extend(self.get_row_actions(row))
        return actions

    def _delete(self, row):
        if self.on_row_delete is not None:
            self.on_row_delete(row)

    # ---------- updates ----------
    def handle_row_update(self, event: RowUpdateEvent) -> Optional[RowUpdate]:
        if event.action != CELL_UPDATE:
            logger.debug("dropped %s update event", event.action)
            return None
        previous = event.from_row_data.get(event.cell_key)
        updated = event.updated.get(event.cell_key)
        if same_value(previous, updated):
            logger.debug("dropped no-op update of %r", event.cell_key)
            return None
        update = RowUpdate(
            row_index=event.to_row,
            column_key=event.cell_key,
            previous_row=event.from_row_data,
            updated_value=updated,
        )
        if self.on_row_update is not None:
            self.on_row_update(update)
        return update


class AddRowDialog:
    def __init__(
        self,
        on_row_add: Optional[Callable[[Mapping], None]] = None,
        title: str | None = None,
    ):
        self.on_row_add = on_row_add
        self.title = title
        self.visible = False
        self.data: list = []
        self.columns: list = []

    def open(self, data=None, columns=None) -> None:
        self.data = list(data or [])
        self.columns = list(columns or [])
        self.visible = True

    def confirm(self, payload: Mapping) -> None:
        self.visible = False
        if self.on_row_add is not None:
            self.on_row_add(payload)

    def cancel(self) -> None:
        self.visible = False

    def is_duplicate(self, payload: Mapping, keys=None) -> bool:
        """True when a row in the dialog's data already holds ``payload``."""
        keys = list(keys) if keys is not None else list(payload.keys())
        for row in self.data:
            if all(same_value(row.get(k), payload.get(k)) for k in keys):
                return True
        return False

    def choices(self, key) -> list:
        """Distinct non-missing values of ``key``, in first-seen order."""
        seen = []
        for row in self.data:
            value = row.get(key)
            if is_missing(value) or value in seen:
                continue
            seen.append(value)
        return seen
