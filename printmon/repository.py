from typing import Dict

from .config import ALLOWED_CONFIG_KEYS, DEFAULT_CONFIG, DURATION_KEYS, INT_KEYS, MonitorSettings
from .utils import parse_delay_to_seconds


def _validate(key: str, value: str):
    if key in DURATION_KEYS:
        parse_delay_to_seconds(value)
    elif key in INT_KEYS:
        try:
            n = int(value)
        except ValueError:
            raise ValueError(f"{key} must be an integer.")
        if n <= 0:
            raise ValueError(f"{key} must be > 0.")
    elif not value.strip():
        raise ValueError(f"{key} cannot be empty.")


# ---------- Config ----------
def get_config(conn) -> Dict[str, str]:
    cur = conn.execute("SELECT key, value FROM config")
    cfg = dict(DEFAULT_CONFIG)
    cfg.update({r["key"]: r["value"] for r in cur.fetchall()})
    return cfg


def set_config(conn, key: str, value: str):
    if key not in ALLOWED_CONFIG_KEYS:
        raise ValueError(f"Allowed keys: {', '.join(sorted(ALLOWED_CONFIG_KEYS))}")
    _validate(key, str(value))
    with conn:
        conn.execute(
            "INSERT INTO config(key,value) VALUES(?,?) "
            "ON CONFLICT(key) DO UPDATE SET value=excluded.value",
            (key, str(value)),
        )


def load_settings(conn) -> MonitorSettings:
    cfg = get_config(conn)
    settings = MonitorSettings(
        sweep_interval=parse_delay_to_seconds(cfg["sweep_interval"]),
        backoff=parse_delay_to_seconds(cfg["backoff"]),
        autosave_interval=parse_delay_to_seconds(cfg["autosave_interval"]),
        max_jobs_per_printer=int(cfg["max_jobs_per_printer"]),
        ledger_capacity=int(cfg["ledger_capacity"]),
        eviction_batch=int(cfg["eviction_batch"]),
        output_dir=cfg["output_dir"],
        log_file=cfg["log_file"],
    )
    if settings.eviction_batch > settings.ledger_capacity:
        raise ValueError("eviction_batch cannot exceed ledger_capacity.")
    return settings
