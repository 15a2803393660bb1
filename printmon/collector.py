import logging
import threading

from . import models
from .ledger import INSERTED, JobLedger
from .models import JobRecord, SourceJob
from .sources.base import JobSource, JobSourceError
from .utils import now_utc, sleep_while_set

log = logging.getLogger(__name__)

# DEVMODE codes
DMCOLOR_COLOR = 2

DUPLEX_CODES = {
    1: models.SIMPLEX,
    2: models.DUPLEX_VERTICAL,
    3: models.DUPLEX_HORIZONTAL,
}

PAPER_SIZE_CODES = {
    1: models.LETTER,
    5: models.LEGAL,
    9: models.A4,
    8: models.A3,
    11: models.A5,
}


def classify_status(flags) -> str:
    for status in models.STATUS_PRECEDENCE:
        if status in flags:
            return status
    return models.QUEUED


def color_mode(code) -> str:
    if code is None:
        return models.UNKNOWN
    return models.COLOR if code == DMCOLOR_COLOR else models.MONOCHROME


def duplex_mode(code) -> str:
    if code is None:
        return models.UNKNOWN
    return DUPLEX_CODES.get(code, models.UNKNOWN)


def paper_size(code) -> str:
    if code is None:
        return models.UNKNOWN
    # unrecognised codes are Custom
    return PAPER_SIZE_CODES.get(code, models.CUSTOM)


def normalize_job(printer_name: str, job: SourceJob, observed_at) -> JobRecord:
    settings = job.device_settings
    return JobRecord(
        printer_name=printer_name,
        job_id=job.job_id,
        observed_at=observed_at,
        status=classify_status(job.status_flags),
        pages=max(job.total_pages if job.total_pages > 0 else job.pages_printed, 0),
        document_size_bytes=max(job.size_bytes, 0),
        color_mode=color_mode(settings.color if settings else None),
        duplex_mode=duplex_mode(settings.duplex if settings else None),
        paper_size=paper_size(settings.paper_size if settings else None),
        user_account=job.user_account or models.UNKNOWN,
    )


class Collector:
    """Polls the job source and feeds new jobs into the ledger while `active` is set."""

    def __init__(
        self,
        source: JobSource,
        ledger: JobLedger,
        active: threading.Event,
        *,
        sweep_interval: float = 10,
        backoff: float = 5,
        max_jobs_per_printer: int = 1000,
        sleep_step: float = 1.0,
    ):
        self.source = source
        self.ledger = ledger
        self.active = active
        self.sweep_interval = sweep_interval
        self.backoff = backoff
        self.max_jobs_per_printer = max_jobs_per_printer
        self.sleep_step = sleep_step
        self._last_observed = None

    def _observed_at(self):
        now = now_utc()
        if self._last_observed is not None and now < self._last_observed:
            now = self._last_observed
        self._last_observed = now
        return now

    def run(self):
        while self.active.is_set():
            try:
                if not self.sweep():
                    sleep_while_set(self.active, self.backoff, self.sleep_step)
                    continue
            except Exception as e:
                log.error(f"Unexpected error during monitoring cycle: {e}")
                sleep_while_set(self.active, self.backoff, self.sleep_step)
                continue
            sleep_while_set(self.active, self.sweep_interval, self.sleep_step)
        log.debug("Collector loop exited.")

    def sweep(self) -> bool:
        """One pass over every printer. Returns False when printers could not be listed."""
        try:
            printers = self.source.list_printers()
        except JobSourceError as e:
            log.error(f"Failed to enumerate printers. Error: {e}")
            return False
        if not printers:
            log.warning("No printers found during monitoring cycle")
            return False

        for printer in printers:
            if not self.active.is_set():
                break
            self._collect_printer(printer.name)
        return True

    def _collect_printer(self, name: str):
        try:
            handle = self.source.open_printer(name)
        except JobSourceError as e:
            log.error(f"Could not open printer: {name}. Error: {e}")
            return

        try:
            try:
                jobs = self.source.list_jobs(handle, self.max_jobs_per_printer)
            except JobSourceError as e:
                log.error(f"Failed to enumerate jobs on {name}. Error: {e}")
                return

            for job in jobs:
                if not self.active.is_set():
                    break
                record = normalize_job(name, job, self._observed_at())
                if self.ledger.append(record) == INSERTED and self.active.is_set():
                    log.info(f"Detected print job: {record.job_id} on {name} - Status: {record.status}")
        finally:
            try:
                self.source.close_printer(handle)
            except JobSourceError as e:
                log.error(f"Could not close printer: {name}. Error: {e}")
