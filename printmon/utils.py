from datetime import datetime, timezone
import re
import time

# e.g., "20s", "5m", "1h30m", "2d3h", "90m", "  2h  ", or a bare "10" (seconds)
DELAY_RE = re.compile(r"(?i)^\s*(?:(\d+)\s*d)?\s*(?:(\d+)\s*h)?\s*(?:(\d+)\s*m)?\s*(?:(\d+)\s*s?)?\s*$")

def parse_delay_to_seconds(s: str) -> int:
    """
    Parse delay strings like '20s', '5m', '1h30m', '2d3h', '90m' or '10'.
    Returns total seconds (int). Raises ValueError on bad input or zero.
    """
    if not s:
        raise ValueError("delay string is empty")
    m = DELAY_RE.match(s)
    if not m:
        raise ValueError(f"Invalid delay format: {s!r}")
    d, h, m_, s_ = m.groups()
    total = 0
    if d:  total += int(d) * 86400
    if h:  total += int(h) * 3600
    if m_: total += int(m_) * 60
    if s_: total += int(s_)
    if total <= 0:
        raise ValueError("delay must be > 0 seconds")
    return total

def now_utc() -> datetime:
    return datetime.now(timezone.utc)

def format_timestamp(dt: datetime) -> str:
    """UTC timestamp like '2025-11-06T09:12:34.123+00:00'."""
    dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S") + f".{dt.microsecond // 1000:03d}+00:00"

def timestamp_filename(prefix: str, dt: datetime = None) -> str:
    """'print_jobs_2025-11-06T09-12-34.csv' style name, safe on every filesystem."""
    stamp = format_timestamp(dt or now_utc())[:19].replace(":", "-")
    return f"{prefix}{stamp}.csv"

def sleep_while_set(flag, seconds: float, step: float = 1.0) -> bool:
    """
    Sleep up to `seconds` in `step` increments while `flag` (a threading.Event)
    stays set. Returns True if the full duration elapsed.
    """
    deadline = time.monotonic() + seconds
    while flag.is_set():
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            return True
        time.sleep(min(step, remaining))
    return False
