import logging
import os
import sqlite3
from contextlib import contextmanager

from .config import get_db_path

logger = logging.getLogger(__name__)

SCHEMA = [
    '''
    CREATE TABLE IF NOT EXISTS links (
        id TEXT PRIMARY KEY,
        title TEXT NOT NULL,
        url TEXT NOT NULL,
        subtitle TEXT NOT NULL DEFAULT '',
        icon_name TEXT NOT NULL DEFAULT 'link',
        icon_type TEXT NOT NULL DEFAULT 'simple',
        position INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL,
        updated_at TEXT
    )
    ''',
    'CREATE INDEX IF NOT EXISTS idx_links_position ON links(position)',
    '''
    CREATE TABLE IF NOT EXISTS site_config (
        key TEXT PRIMARY KEY,
        value TEXT,
        updated_at TEXT
    )
    ''',
    '''
    CREATE TABLE IF NOT EXISTS app_logs (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        timestamp TEXT NOT NULL,
        level TEXT NOT NULL,
        source TEXT NOT NULL,
        message TEXT NOT NULL,
        details TEXT,
        ip_address TEXT,
        user_agent TEXT,
        request_path TEXT
    )
    ''',
    'CREATE INDEX IF NOT EXISTS idx_logs_timestamp ON app_logs(timestamp DESC)',
    'CREATE INDEX IF NOT EXISTS idx_logs_level ON app_logs(level)',
]


class Database:

    @staticmethod
    @contextmanager
    def connect(path=None):
        """Open a connection, commit on success, roll back on error, always close."""
        conn = sqlite3.connect(path or get_db_path())
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    @staticmethod
    def init_schema(path=None):
        """Create the database file and all tables if they don't exist"""
        db_path = path or get_db_path()
        db_dir = os.path.dirname(db_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

        with Database.connect(db_path) as conn:
            cursor = conn.cursor()
            for statement in SCHEMA:
                cursor.execute(statement)
        logger.info("LinkCard database initialized at %s", db_path)

    @staticmethod
    def ping(path=None):
        """Return True when the database answers and the schema is in place"""
        try:
            with Database.connect(path) as conn:
                conn.execute('SELECT COUNT(*) FROM links').fetchone()
            return True
        except sqlite3.Error as e:
            logger.warning("Database ping failed: %s", e)
            return False
