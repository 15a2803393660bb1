from dataclasses import dataclass
from datetime import datetime
from typing import FrozenSet, Optional

# Job statuses (also the source-side status flags)
QUEUED = "Queued"
SPOOLING = "Spooling"
PRINTING = "Printing"
PAUSED = "Paused"
PAPER_OUT = "Paper Out"
USER_INTERVENTION = "User Intervention Required"
BLOCKED = "Blocked"
ERROR = "Error"
DELETING = "Deleting"
DELETED = "Deleted"
OFFLINE = "Offline"

# First match wins when a source reports several flags at once
STATUS_PRECEDENCE = (
    PAUSED, ERROR, DELETING, SPOOLING, PRINTING,
    OFFLINE, PAPER_OUT, DELETED, BLOCKED, USER_INTERVENTION,
)

# Color modes
COLOR = "Color"
MONOCHROME = "Monochrome"

# Duplex modes
SIMPLEX = "Simplex"
DUPLEX_VERTICAL = "Duplex Vertical"
DUPLEX_HORIZONTAL = "Duplex Horizontal"

# Paper sizes
LETTER = "Letter"
LEGAL = "Legal"
A4 = "A4"
A3 = "A3"
A5 = "A5"
CUSTOM = "Custom"

UNKNOWN = "Unknown"


@dataclass(frozen=True)
class PrinterInfo:
    name: str


@dataclass(frozen=True)
class DeviceSettings:
    """Raw device-mode codes for a job; None means the field was not present."""
    color: Optional[int] = None
    duplex: Optional[int] = None
    paper_size: Optional[int] = None


@dataclass(frozen=True)
class SourceJob:
    job_id: str
    status_flags: FrozenSet[str] = frozenset()
    total_pages: int = 0
    pages_printed: int = 0
    size_bytes: int = 0
    user_account: str = UNKNOWN
    device_settings: Optional[DeviceSettings] = None


@dataclass(frozen=True)
class JobRecord:
    printer_name: str
    job_id: str
    observed_at: datetime
    status: str = QUEUED
    pages: int = 0
    document_size_bytes: int = 0
    color_mode: str = UNKNOWN
    duplex_mode: str = UNKNOWN
    paper_size: str = UNKNOWN
    user_account: str = UNKNOWN

    @property
    def key(self):
        return (self.printer_name, self.job_id)
