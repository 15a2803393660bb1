"""
CollectorService: owns the ledger, the shared active flag and the background
threads (collector + autosave scheduler), and drives the start/stop lifecycle.
"""
import logging
import os
import threading

from .collector import Collector
from .config import MonitorSettings
from .exporter import export_csv
from .ledger import JobLedger, LedgerStatistics
from .scheduler import AutoSaveScheduler
from .sources.base import JobSource
from .utils import timestamp_filename

log = logging.getLogger(__name__)

# Lifecycle states
STOPPED = "stopped"
STARTING = "starting"
ACTIVE = "active"
STOPPING = "stopping"

# start()/stop() results
STARTED = "started"
ALREADY_ACTIVE = "already_active"
FAILED = "failed"
NOT_ACTIVE = "not_active"

SAVE_PREFIX = "print_jobs_"
DEFAULT_EXPORT_FILE = "print_jobs_export.csv"


class CollectorService:

    def __init__(self, source: JobSource, settings: MonitorSettings = None):
        self.source = source
        self.settings = settings or MonitorSettings()
        self.ledger = JobLedger(self.settings.ledger_capacity, self.settings.eviction_batch)
        self._active = threading.Event()
        self._state = STOPPED
        self._lifecycle_lock = threading.Lock()
        self._collector_thread = None
        self.scheduler = AutoSaveScheduler(
            self,
            interval=self.settings.autosave_interval,
            step=self.settings.sleep_step,
            output_dir=self.settings.output_dir,
        )

    @property
    def state(self) -> str:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._active.is_set()

    # ---------- Process lifetime ----------
    def open(self):
        self.scheduler.start()
        return self

    def close(self):
        if self._state == ACTIVE:
            self.stop()
        self.scheduler.shutdown()

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # ---------- Collection lifecycle ----------
    def _make_collector(self) -> Collector:
        s = self.settings
        return Collector(
            self.source,
            self.ledger,
            self._active,
            sweep_interval=s.sweep_interval,
            backoff=s.backoff,
            max_jobs_per_printer=s.max_jobs_per_printer,
            sleep_step=s.sleep_step,
        )

    def start(self) -> str:
        with self._lifecycle_lock:
            if self._state != STOPPED:
                log.info("Monitoring is already active.")
                return ALREADY_ACTIVE
            self._state = STARTING
            try:
                self._active.set()
                thread = threading.Thread(
                    target=self._make_collector().run, name="printmon-collector", daemon=True
                )
                thread.start()
            except Exception as e:
                self._active.clear()
                self._state = STOPPED
                log.error(f"Failed to start monitoring thread: {e}")
                return FAILED
            self._collector_thread = thread
            self._state = ACTIVE
        log.info("Print job monitoring started.")
        return STARTED

    def stop(self) -> str:
        with self._lifecycle_lock:
            if self._state != ACTIVE:
                log.info("Monitoring is not active.")
                return NOT_ACTIVE
            self._state = STOPPING
            self._active.clear()
            thread, self._collector_thread = self._collector_thread, None
            if thread is not None and thread is not threading.current_thread():
                thread.join()
            self._state = STOPPED
        log.info("Print job monitoring stopped.")
        return STOPPED

    def sweep_once(self) -> bool:
        """Run one synchronous sweep on the calling thread while collection is stopped."""
        with self._lifecycle_lock:
            if self._state != STOPPED:
                log.info("Monitoring is already active.")
                return False
            self._active.set()
            try:
                return self._make_collector().sweep()
            finally:
                self._active.clear()

    # ---------- Ledger access ----------
    def statistics(self) -> LedgerStatistics:
        return self.ledger.statistics()

    def export(self, destination: str = None) -> bool:
        if not destination:
            destination = os.path.join(self.settings.output_dir, DEFAULT_EXPORT_FILE)
        return export_csv(self.ledger, destination)

    def save(self) -> bool:
        """Force a save to a timestamped file in the output directory."""
        return self.export(os.path.join(self.settings.output_dir, timestamp_filename(SAVE_PREFIX)))
