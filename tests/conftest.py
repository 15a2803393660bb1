import logging
import os
import sys
import threading
import time
from datetime import datetime, timezone

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from printmon.config import MonitorSettings
from printmon.models import JobRecord, PrinterInfo, SourceJob, PRINTING
from printmon.sources.base import JobSource, JobSourceError


class FakeHandle:
    def __init__(self, name):
        self.name = name


class FakeJobSource(JobSource):
    """In-memory spooler: {printer name: [SourceJob, ...]}."""

    def __init__(self, printers=None):
        self.printers = dict(printers or {})
        self.fail_list = False
        self.fail_open = set()
        self.fail_jobs = set()
        self.fail_close = set()
        self.on_list_jobs = None
        self.list_calls = 0
        self.opened = []
        self.closed = []
        self._lock = threading.Lock()

    def list_printers(self):
        self.list_calls += 1
        if self.fail_list:
            raise JobSourceError("spooler unavailable")
        return [PrinterInfo(name=n) for n in self.printers]

    def open_printer(self, name):
        if name in self.fail_open:
            raise JobSourceError("access denied")
        handle = FakeHandle(name)
        with self._lock:
            self.opened.append(handle)
        return handle

    def list_jobs(self, handle, max_count):
        if self.on_list_jobs is not None:
            self.on_list_jobs(handle.name)
        if handle.name in self.fail_jobs:
            raise JobSourceError("EnumJobs failed")
        return list(self.printers[handle.name])[:max_count]

    def close_printer(self, handle):
        with self._lock:
            self.closed.append(handle)
        if handle.name in self.fail_close:
            raise JobSourceError("ClosePrinter failed")


def make_record(job_id, printer="LaserA", status=PRINTING, pages=1, size=100):
    return JobRecord(
        printer_name=printer,
        job_id=str(job_id),
        observed_at=datetime(2025, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc),
        status=status,
        pages=pages,
        document_size_bytes=size,
    )


def wait_for(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


@pytest.fixture
def laser_job():
    return SourceJob(
        job_id="42",
        status_flags=frozenset({PRINTING}),
        total_pages=5,
        size_bytes=25000,
        user_account="alice",
    )


@pytest.fixture
def source(laser_job):
    return FakeJobSource({"LaserA": [laser_job]})


@pytest.fixture
def fast_settings(tmp_path):
    return MonitorSettings(
        sweep_interval=0.05,
        backoff=0.05,
        autosave_interval=3600,
        sleep_step=0.01,
        output_dir=str(tmp_path),
        log_file=str(tmp_path / "print_monitor.log"),
    )


@pytest.fixture
def settings_db(tmp_path, monkeypatch):
    db_file = tmp_path / "printmon.db"
    monkeypatch.setattr("printmon.db.DB_FILE", str(db_file))
    return db_file


@pytest.fixture(autouse=True)
def reset_printmon_logger():
    yield
    logger = logging.getLogger("printmon")
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
