from dataclasses import dataclass

DEFAULT_CONFIG = {
    "sweep_interval": "10s",
    "backoff": "5s",
    "autosave_interval": "30m",
    "max_jobs_per_printer": "1000",
    "ledger_capacity": "1000",
    "eviction_batch": "100",
    "output_dir": ".",
    "log_file": "print_monitor.log",
}

ALLOWED_CONFIG_KEYS = set(DEFAULT_CONFIG.keys())

DURATION_KEYS = {"sweep_interval", "backoff", "autosave_interval"}
INT_KEYS = {"max_jobs_per_printer", "ledger_capacity", "eviction_batch"}


@dataclass
class MonitorSettings:
    sweep_interval: float = 10
    backoff: float = 5
    autosave_interval: float = 1800
    max_jobs_per_printer: int = 1000
    ledger_capacity: int = 1000
    eviction_batch: int = 100
    output_dir: str = "."
    log_file: str = "print_monitor.log"
    # granularity of every cooperative sleep
    sleep_step: float = 1.0
