import csv
import logging
import os

from .ledger import JobLedger
from .utils import format_timestamp

log = logging.getLogger(__name__)

CSV_HEADER = (
    "Printer Name", "Timestamp", "Status", "Pages", "Document Size",
    "Color Mode", "Duplex Setting", "Paper Size", "User Account", "Job ID",
)


def record_row(record):
    # QUOTE_NONNUMERIC leaves the two int columns bare and quotes the rest
    return (
        record.printer_name,
        format_timestamp(record.observed_at),
        record.status,
        int(record.pages),
        int(record.document_size_bytes),
        record.color_mode,
        record.duplex_mode,
        record.paper_size,
        record.user_account,
        record.job_id,
    )


def export_csv(ledger: JobLedger, destination: str) -> bool:
    records = ledger.snapshot()
    try:
        parent = os.path.dirname(destination)
        if parent:
            os.makedirs(parent, exist_ok=True)
        f = open(destination, "w", encoding="utf-8", newline="")
    except OSError as e:
        log.error(f"Could not open file for writing: {destination} ({e})")
        return False

    try:
        with f:
            writer = csv.writer(f, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
            writer.writerow(CSV_HEADER)
            for record in records:
                writer.writerow(record_row(record))
    except Exception as e:
        log.error(f"Exception during CSV export: {e}")
        return False

    log.info(f"Data exported to: {destination} ({len(records)} records)")
    return True
