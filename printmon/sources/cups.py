import subprocess

from .base import JobSource, JobSourceError
from ..models import PrinterInfo, SourceJob, UNKNOWN


def _lpstat(*args) -> str:
    try:
        result = subprocess.run(
            ["lpstat", *args],
            capture_output=True,
            text=True,
            check=True,
            timeout=10,
        )
    except subprocess.CalledProcessError as e:
        raise JobSourceError(f"lpstat {' '.join(args)} exited with {e.returncode}: {e.stderr.strip()}") from e
    except (OSError, subprocess.TimeoutExpired) as e:
        raise JobSourceError(f"lpstat {' '.join(args)} failed: {e}") from e
    return result.stdout


def parse_printers(output: str):
    # "LaserA accepting requests since Mon 01 Jan 2024 10:00:00 AM UTC"
    return [PrinterInfo(name=line.split()[0]) for line in output.splitlines() if line.strip()]


def parse_jobs(printer: str, output: str):
    # "LaserA-42  alice  25600  Mon 01 Jan 2024 10:00:00 AM UTC"
    jobs = []
    for line in output.splitlines():
        parts = line.split()
        if len(parts) < 3 or not parts[0].startswith(printer + "-"):
            continue
        size = int(parts[2]) if parts[2].isdigit() else 0
        jobs.append(SourceJob(
            job_id=parts[0][len(printer) + 1:],
            user_account=parts[1] or UNKNOWN,
            size_bytes=size,
        ))
    return jobs


class CupsJobSource(JobSource):
    """CUPS queues through the `lpstat` command line tool.

    lpstat exposes no per-job status bits, page counts or device settings, so
    jobs come back as queued with only size and owner filled in.
    """

    def list_printers(self):
        try:
            return parse_printers(_lpstat("-a"))
        except JobSourceError as e:
            # lpstat exits non-zero when no queues are configured
            if "No destinations added" in str(e):
                return []
            raise

    def open_printer(self, name):
        # lpstat is stateless; the printer name doubles as the handle
        return name

    def list_jobs(self, handle, max_count):
        return parse_jobs(handle, _lpstat("-o", handle))[:max_count]

    def close_printer(self, handle):
        pass
