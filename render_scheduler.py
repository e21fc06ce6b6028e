import logging
from typing import Callable

logger = logging.getLogger(__name__)


class AfterCommitScheduler:
    """Runs callbacks once the host has finished its current render pass.

    Callbacks are keyed; scheduling a key that is already pending replaces
    the earlier callback, so a burst of requests fires exactly once.
    """

    def __init__(self):
        self._pending: dict[str, Callable[[], None]] = {}

    def schedule(self, key: str, fn: Callable[[], None]) -> None:
        if key in self._pending:
            logger.debug("collapsed pending %s callback", key)
            del self._pending[key]
        self._pending[key] = fn

    def cancel(self, key: str) -> bool:
        return self._pending.pop(key, None) is not None

    def is_pending(self, key: str | None = None) -> bool:
        if key is None:
            return bool(self._pending)
        return key in self._pending

    def flush(self) -> int:
        # callbacks may schedule work for the next pass
        pending = list(self._pending.values())
        self._pending = {}
        for fn in pending:
            fn()
        return len(pending)
