import logging
import threading

logger = logging.getLogger(__name__)


class LoadState:
    def __init__(self):
        self.loaded = False
        self.aborted = False
        self.df = None
        self.error = None


class DataLoader:
    """Loads a frame on a worker thread while the grid shows placeholders."""

    def __init__(self, loader_fn, load_state: LoadState | None = None):
        self.loader_fn = loader_fn
        self.state = load_state or LoadState()
        self._thread = None

    def start(self):
        self._thread = threading.Thread(target=self._load, daemon=True)
        self._thread.start()

    def _load(self):
        if self.state.aborted:
            return
        try:
            df = self.loader_fn()
        except Exception as exc:
            logger.exception("loading data failed")
            self.state.error = str(exc) or type(exc).__name__
            self.state.aborted = True
            return
        if not self.state.aborted:
            self.state.df = df
            self.state.loaded = True

    def abort(self):
        self.state.aborted = True

    @property
    def done(self) -> bool:
        return self.state.loaded or self.state.aborted

    def join(self, timeout=None):
        if self._thread is not None:
            self._thread.join(timeout)
