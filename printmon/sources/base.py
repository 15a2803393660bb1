from abc import ABC, abstractmethod
from typing import Any, List

from ..models import PrinterInfo, SourceJob


class JobSourceError(Exception):
    """Raised by a job source when the spooler cannot answer a query."""


class JobSource(ABC):

    @abstractmethod
    def list_printers(self) -> List[PrinterInfo]:
        pass

    @abstractmethod
    def open_printer(self, name: str) -> Any:
        pass

    @abstractmethod
    def list_jobs(self, handle: Any, max_count: int) -> List[SourceJob]:
        pass

    @abstractmethod
    def close_printer(self, handle: Any):
        pass
