"""
In-memory job ledger.

Insertion-ordered, deduplicated on (printer_name, job_id) and bounded: when an
insert pushes the size past capacity the oldest `eviction_batch` records are
dropped in one go. Every operation runs under a single lock, so readers never
observe a half-applied append or eviction.
"""
import threading
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Set, Tuple

from .models import JobRecord

INSERTED = "inserted"
DUPLICATE_SKIPPED = "duplicate_skipped"

DEFAULT_CAPACITY = 1000
DEFAULT_EVICTION_BATCH = 100


@dataclass
class LedgerStatistics:
    count: int = 0
    count_by_status: Dict[str, int] = field(default_factory=dict)
    total_pages: int = 0
    total_document_size_bytes: int = 0

    @property
    def average_pages(self) -> float:
        return self.total_pages / self.count if self.count else 0.0


class JobLedger:

    def __init__(self, capacity: int = DEFAULT_CAPACITY, eviction_batch: int = DEFAULT_EVICTION_BATCH):
        if capacity <= 0:
            raise ValueError("capacity must be > 0")
        if not 0 < eviction_batch <= capacity:
            raise ValueError("eviction_batch must be between 1 and capacity")
        self.capacity = capacity
        self.eviction_batch = eviction_batch
        self._records: List[JobRecord] = []
        self._keys: Set[Tuple[str, str]] = set()
        self._lock = threading.Lock()

    def append(self, record: JobRecord) -> str:
        with self._lock:
            if record.key in self._keys:
                return DUPLICATE_SKIPPED
            self._records.append(record)
            self._keys.add(record.key)
            if len(self._records) > self.capacity:
                evicted = self._records[:self.eviction_batch]
                del self._records[:self.eviction_batch]
                for old in evicted:
                    self._keys.discard(old.key)
            return INSERTED

    def snapshot(self) -> Tuple[JobRecord, ...]:
        with self._lock:
            return tuple(self._records)

    def statistics(self) -> LedgerStatistics:
        records = self.snapshot()
        return LedgerStatistics(
            count=len(records),
            count_by_status=dict(Counter(r.status for r in records)),
            total_pages=sum(r.pages for r in records),
            total_document_size_bytes=sum(r.document_size_bytes for r in records),
        )

    def __len__(self):
        with self._lock:
            return len(self._records)
