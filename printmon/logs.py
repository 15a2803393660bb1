import logging
import sys
from datetime import datetime, timezone

from .utils import format_timestamp

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"


class TimestampFormatter(logging.Formatter):
    def formatTime(self, record, datefmt=None):
        return format_timestamp(datetime.fromtimestamp(record.created, timezone.utc))


class _BelowError(logging.Filter):
    def filter(self, record):
        return record.levelno < logging.ERROR


def configure_logging(log_file: str = "print_monitor.log", level=logging.INFO) -> logging.Logger:
    """
    Send the `printmon` logger to `log_file` (appending) and mirror it to the
    console: ERROR and above on stderr, everything else on stdout.
    """
    logging.addLevelName(logging.WARNING, "WARN")
    formatter = TimestampFormatter(LOG_FORMAT)

    logger = logging.getLogger("printmon")
    logger.setLevel(level)
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    out = logging.StreamHandler(sys.stdout)
    out.addFilter(_BelowError())
    err = logging.StreamHandler(sys.stderr)
    err.setLevel(logging.ERROR)

    for h in (file_handler, out, err):
        h.setFormatter(formatter)
        logger.addHandler(h)
    logger.propagate = False
    return logger
