import threading
from collections.abc import Callable

from circulars.common.polling import wait_for
from circulars.logging.logger import Log


class OcrEngineLoader:
    """Loads the OCR engine in the background and reports readiness.

    The probe runs once on a daemon thread started at application start;
    request handlers only ever poll ``is_ready`` with a bounded wait.
    """

    def __init__(self, probe: Callable[[], object]) -> None:
        self._probe = probe
        self._ready = threading.Event()
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()
        self.failure: str | None = None

    def start(self) -> None:
        with self._lock:
            if self._thread is not None:
                return
            self._thread = threading.Thread(target=self._load, name="ocr-loader", daemon=True)
            self._thread.start()

    def _load(self) -> None:
        try:
            version = self._probe()
        except Exception as exc:
            self.failure = str(exc) or type(exc).__name__
            Log.error(f"OCR engine failed to load: {exc}")
            return
        self._ready.set()
        Log.info(f"OCR engine ready (version {version})")

    def is_ready(self) -> bool:
        return self._ready.is_set()

    def has_failed(self) -> bool:
        return self.failure is not None

    def wait_until_ready(self, timeout_seconds: float, interval_seconds: float) -> bool:
        """Wait within the bound; returns early with False once loading has failed."""
        wait_for(
            lambda: self.is_ready() or self.has_failed(),
            timeout_seconds,
            interval_seconds,
        )
        return self.is_ready()
