import logging
import os
import threading
import time

from .utils import timestamp_filename

log = logging.getLogger(__name__)

AUTOSAVE_PREFIX = "print_jobs_auto_save_"


class AutoSaveScheduler:
    """
    Periodically exports the ledger while collection is active.

    Lives on its own thread for the whole process lifetime. Elapsed time only
    accumulates while collection is active; once it reaches `interval` an
    export is written to `output_dir` and the countdown restarts.
    """

    def __init__(self, service, interval: float = 1800, step: float = 1.0, output_dir: str = "."):
        self.service = service
        self.interval = interval
        self.step = step
        self.output_dir = output_dir
        self._shutdown = threading.Event()
        self._thread = None

    def start(self):
        if self._thread is not None and self._thread.is_alive():
            return
        self._shutdown.clear()
        self._thread = threading.Thread(target=self._run, name="printmon-autosave", daemon=True)
        self._thread.start()

    def shutdown(self):
        self._shutdown.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None

    def _run(self):
        elapsed = 0.0
        while not self._shutdown.is_set():
            if not self.service.is_active:
                elapsed = 0.0
                self._shutdown.wait(self.step)
                continue

            started = time.monotonic()
            self._shutdown.wait(self.step)
            elapsed += time.monotonic() - started

            if elapsed >= self.interval and self.service.is_active and not self._shutdown.is_set():
                elapsed = 0.0
                self.save_now()

    def save_now(self) -> bool:
        path = os.path.join(self.output_dir, timestamp_filename(AUTOSAVE_PREFIX))
        return self.service.export(path)
