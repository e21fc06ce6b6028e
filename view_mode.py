from enum import IntEnum
from typing import Callable, Optional, Protocol

from config_paths import DEFAULT_CONFIG, EngineConfig
from render_scheduler import AfterCommitScheduler

VIEWPORT_REFRESH = "viewport-refresh"


class ViewMode(IntEnum):
    SPARSE = 0
    COMFY = 1
    COMPACT = 2

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @classmethod
    def parse(cls, value) -> "ViewMode":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise ValueError(f"Unknown view mode '{value}'") from None
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown view mode '{value}'") from None


class ViewportController(Protocol):
    scroll_offset: int

    def refresh_metrics(self) -> None: ...

    def rescroll_to(self, offset: int) -> None: ...


class ViewModeState:
    """Density selector; height changes refresh the viewport after render."""

    def __init__(
        self,
        config: EngineConfig = DEFAULT_CONFIG,
        scheduler: Optional[AfterCommitScheduler] = None,
        viewport: Optional[ViewportController] = None,
    ):
        self.config = config
        self.scheduler = scheduler or AfterCommitScheduler()
        self.viewport = viewport
        self.view_mode = ViewMode.parse(config.default_view_mode)

    @property
    def row_height(self) -> int:
        return self.config.row_heights[int(self.view_mode)]

    def set_view_mode(self, mode) -> ViewMode:
        self.view_mode = ViewMode.parse(mode)
        self.scheduler.schedule(VIEWPORT_REFRESH, self._refresh_viewport)
        return self.view_mode

    def _refresh_viewport(self):
        if self.viewport is None:
            return
        self.viewport.refresh_metrics()
        self.viewport.rescroll_to(self.viewport.scroll_offset)


class ToolbarState:
    def __init__(
        self,
        add_row_button: bool = False,
        view_mode_button: bool = True,
        on_toggle_filter: Optional[Callable[[bool], None]] = None,
    ):
        self.add_row_button = add_row_button
        self.view_mode_button = view_mode_button
        self.on_toggle_filter = on_toggle_filter
        self.show_filters = False

    def toggle_filters(self, is_loading: bool = False) -> bool:
        # the switch is disabled while rows are loading
        if is_loading:
            return self.show_filters
        self.show_filters = not self.show_filters
        if self.on_toggle_filter is not None:
            self.on_toggle_filter(self.show_filters)
        return self.show_filters
