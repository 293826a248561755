from __future__ import annotations

import logging
import os
import sqlite3
from typing import Callable

import bcrypt

from bjjfed.models import ADMIN_MEMBER_ID, ROLE_ADMIN

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_USERNAME = 'admin'
DEFAULT_ADMIN_PASSWORD = 'admin'


def make_db_factory(database_path: str) -> Callable[[], sqlite3.Connection]:
    """Return a connection factory bound to ``database_path``."""
    def get_db() -> sqlite3.Connection:
        return sqlite3.connect(database_path)
    return get_db


def init_db(database_path: str) -> None:
    """Initialize SQLite database."""
    conn = sqlite3.connect(database_path)
    cursor = conn.cursor()

    # Local login accounts, linked to federation members
    cursor.execute('''
        CREATE TABLE IF NOT EXISTS accounts (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            username TEXT NOT NULL UNIQUE,
            password_hash TEXT NOT NULL,
            role TEXT NOT NULL,
            member_id TEXT NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            last_login TIMESTAMP
        )
    ''')

    # Key-value mirror of the in-memory state
    cursor.execute('''
        CREATE TABLE IF NOT EXISTS kv_store (
            key TEXT PRIMARY KEY,
            value TEXT,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    cursor.execute('CREATE INDEX IF NOT EXISTS idx_accounts_member_id ON accounts(member_id)')

    cursor.execute('SELECT COUNT(*) FROM accounts')
    account_count = cursor.fetchone()[0]
    if account_count == 0:
        password_hash = bcrypt.hashpw(DEFAULT_ADMIN_PASSWORD.encode('utf-8'), bcrypt.gensalt())
        cursor.execute('''
            INSERT INTO accounts (username, password_hash, role, member_id)
            VALUES (?, ?, ?, ?)
        ''', (DEFAULT_ADMIN_USERNAME, password_hash.decode('utf-8'), ROLE_ADMIN, ADMIN_MEMBER_ID))
        logger.warning("Created default admin account (username: admin, password: admin) - PLEASE CHANGE THE PASSWORD!")

    conn.commit()
    conn.close()
    logger.info('Database initialized')


def ensure_data_dir(database_path: str) -> None:
    data_dir = os.path.dirname(database_path) or '.'
    os.makedirs(data_dir, exist_ok=True)
