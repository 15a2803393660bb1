import os
import sqlite3
from .config import DEFAULT_CONFIG

DB_FILE = os.environ.get("PRINTMON_DB", "printmon.db")

SCHEMA = """
CREATE TABLE IF NOT EXISTS config (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""

def connect_db():
    conn = sqlite3.connect(DB_FILE)
    conn.row_factory = sqlite3.Row
    conn.executescript(SCHEMA)
    return conn

def init_db():
    conn = connect_db()
    with conn:
        # seed defaults
        for k, v in DEFAULT_CONFIG.items():
            conn.execute(
                "INSERT OR IGNORE INTO config(key, value) VALUES(?,?)", (k, v)
            )
    conn.close()
