import subprocess
from types import SimpleNamespace

import pytest

from printmon import models, sources
from printmon.sources import cups
from printmon.sources.base import JobSourceError
from printmon.sources.cups import CupsJobSource, parse_jobs, parse_printers
from printmon.sources.windows import (
    DM_COLOR, DM_DUPLEX, DM_PAPERSIZE, device_settings_from_devmode, status_flags_from_bits,
)


def test_status_bits_map_to_flags():
    flags = status_flags_from_bits(0x01 | 0x10)
    assert flags == {models.PAUSED, models.PRINTING}
    assert status_flags_from_bits(0) == frozenset()
    assert status_flags_from_bits(0x80) == frozenset()  # JOB_STATUS_PRINTED is not tracked


def test_devmode_fields_gate_settings():
    devmode = SimpleNamespace(Fields=DM_COLOR | DM_PAPERSIZE, Color=2, Duplex=2, PaperSize=9)
    settings = device_settings_from_devmode(devmode)
    assert settings == models.DeviceSettings(color=2, duplex=None, paper_size=9)

    devmode = SimpleNamespace(Fields=DM_DUPLEX, Color=1, Duplex=3, PaperSize=1)
    assert device_settings_from_devmode(devmode) == models.DeviceSettings(duplex=3)
    assert device_settings_from_devmode(None) is None


def test_parse_lpstat_printers():
    out = (
        "LaserA accepting requests since Mon 01 Jan 2024 10:00:00 AM UTC\n"
        "\n"
        "Plotter accepting requests since Mon 01 Jan 2024 10:00:00 AM UTC\n"
    )
    assert parse_printers(out) == [models.PrinterInfo("LaserA"), models.PrinterInfo("Plotter")]


def test_parse_lpstat_jobs():
    out = (
        "LaserA-42   alice   25600   Mon 01 Jan 2024 10:00:00 AM UTC\n"
        "LaserA-43   bob     1024    Mon 01 Jan 2024 10:01:00 AM UTC\n"
        "garbage\n"
    )
    jobs = parse_jobs("LaserA", out)
    assert [(j.job_id, j.user_account, j.size_bytes) for j in jobs] == [
        ("42", "alice", 25600),
        ("43", "bob", 1024),
    ]
    assert jobs[0].status_flags == frozenset()


def test_cups_source_wraps_lpstat_failures(monkeypatch):
    def missing(*args, **kwargs):
        raise FileNotFoundError("lpstat")

    monkeypatch.setattr(cups.subprocess, "run", missing)
    with pytest.raises(JobSourceError):
        CupsJobSource().list_printers()

    def failing(args, **kwargs):
        raise subprocess.CalledProcessError(1, args, stderr="lpstat: No destinations added.")

    monkeypatch.setattr(cups.subprocess, "run", failing)
    with pytest.raises(JobSourceError, match="No destinations"):
        CupsJobSource().list_jobs("LaserA", 10)


def test_cups_without_queues_lists_no_printers(monkeypatch):
    def no_destinations(args, **kwargs):
        raise subprocess.CalledProcessError(1, args, stderr="lpstat: No destinations added.\n")

    monkeypatch.setattr(cups.subprocess, "run", no_destinations)
    assert CupsJobSource().list_printers() == []


def test_cups_source_respects_max_count(monkeypatch):
    lines = "".join(f"LaserA-{i} alice 10 Mon\n" for i in range(5))
    monkeypatch.setattr(
        cups.subprocess, "run",
        lambda args, **kwargs: SimpleNamespace(stdout=lines, returncode=0),
    )
    src = CupsJobSource()
    handle = src.open_printer("LaserA")
    assert len(src.list_jobs(handle, 3)) == 3
    src.close_printer(handle)


def test_default_source_follows_platform(monkeypatch):
    monkeypatch.setattr(sources.platform, "system", lambda: "Linux")
    assert isinstance(sources.default_source(), CupsJobSource)

    monkeypatch.setattr(sources.platform, "system", lambda: "Windows")
    from printmon.sources.windows import WindowsJobSource
    assert isinstance(sources.default_source(), WindowsJobSource)
