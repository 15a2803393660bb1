import platform

from .base import JobSource, JobSourceError


def default_source() -> JobSource:
    """Pick the job source backend for the host OS."""
    if platform.system() == "Windows":
        from .windows import WindowsJobSource
        return WindowsJobSource()
    from .cups import CupsJobSource
    return CupsJobSource()


__all__ = ["JobSource", "JobSourceError", "default_source"]
