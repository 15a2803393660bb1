from .base import JobSource, JobSourceError
from .. import models
from ..models import DeviceSettings, PrinterInfo, SourceJob

# winspool JOB_STATUS_* bits
JOB_STATUS_FLAGS = (
    (0x00000001, models.PAUSED),
    (0x00000002, models.ERROR),
    (0x00000004, models.DELETING),
    (0x00000008, models.SPOOLING),
    (0x00000010, models.PRINTING),
    (0x00000020, models.OFFLINE),
    (0x00000040, models.PAPER_OUT),
    (0x00000100, models.DELETED),
    (0x00000200, models.BLOCKED),
    (0x00000400, models.USER_INTERVENTION),
)

# DEVMODE dmFields bits
DM_PAPERSIZE = 0x00000002
DM_COLOR = 0x00000800
DM_DUPLEX = 0x00001000


def status_flags_from_bits(status: int) -> frozenset:
    return frozenset(name for bit, name in JOB_STATUS_FLAGS if status & bit)


def device_settings_from_devmode(devmode) -> DeviceSettings:
    if devmode is None:
        return None
    fields = devmode.Fields
    return DeviceSettings(
        color=devmode.Color if fields & DM_COLOR else None,
        duplex=devmode.Duplex if fields & DM_DUPLEX else None,
        paper_size=devmode.PaperSize if fields & DM_PAPERSIZE else None,
    )


class WindowsJobSource(JobSource):
    """Local and connected printers through the Windows print spooler (pywin32)."""

    def list_printers(self):
        import pywintypes
        import win32print
        flags = win32print.PRINTER_ENUM_LOCAL | win32print.PRINTER_ENUM_CONNECTIONS
        try:
            printers = win32print.EnumPrinters(flags)
        except pywintypes.error as e:
            raise JobSourceError(f"EnumPrinters failed: {e}") from e
        return [PrinterInfo(name=p[2]) for p in printers]

    def open_printer(self, name):
        import pywintypes
        import win32print
        try:
            return win32print.OpenPrinter(name, {"DesiredAccess": win32print.PRINTER_ACCESS_USE})
        except pywintypes.error as e:
            raise JobSourceError(f"OpenPrinter failed: {e}") from e

    def list_jobs(self, handle, max_count):
        import pywintypes
        import win32print
        try:
            jobs = win32print.EnumJobs(handle, 0, max_count, 2)
        except pywintypes.error as e:
            raise JobSourceError(f"EnumJobs failed: {e}") from e
        out = []
        for j in jobs:
            out.append(SourceJob(
                job_id=str(j["JobId"]),
                status_flags=status_flags_from_bits(j.get("Status", 0)),
                total_pages=j.get("TotalPages", 0),
                pages_printed=j.get("PagesPrinted", 0),
                size_bytes=j.get("Size", 0),
                user_account=j.get("pUserName") or models.UNKNOWN,
                device_settings=device_settings_from_devmode(j.get("pDevMode")),
            ))
        return out

    def close_printer(self, handle):
        import pywintypes
        import win32print
        try:
            win32print.ClosePrinter(handle)
        except pywintypes.error as e:
            raise JobSourceError(f"ClosePrinter failed: {e}") from e
