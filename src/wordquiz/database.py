import os
import sqlite3
from typing import Any, Dict, List

from .config import Settings, settings as default_settings


def get_db_path(config: Settings = default_settings) -> str:
    return os.path.join(config.DB_DIR, config.DB_FILE)


def get_db_connection(db_path: str):
    """Opens the SQLite database with dict-like rows."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def init_db(config: Settings = default_settings) -> str:
    """Creates the database directory and the logs table. Returns the db path."""
    os.makedirs(config.DB_DIR, exist_ok=True)
    db_path = get_db_path(config)
    conn = get_db_connection(db_path)
    with conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS logs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                timestamp DATETIME DEFAULT CURRENT_TIMESTAMP,
                level TEXT,
                logger TEXT,
                message TEXT
            );
        """
        )
    conn.close()
    return db_path


def recent_logs(db_path: str, limit: int = 100) -> List[Dict[str, Any]]:
    conn = get_db_connection(db_path)
    try:
        rows = conn.execute(
            "SELECT timestamp, level, logger, message FROM logs "
            "ORDER BY id DESC LIMIT ?",
            (limit,),
        ).fetchall()
    finally:
        conn.close()
    return [dict(row) for row in rows]
