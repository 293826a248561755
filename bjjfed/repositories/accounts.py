from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional, Tuple

import sqlite3


class AccountRepository:
    """Repository for login accounts."""
    def __init__(self, db_factory: Callable[[], sqlite3.Connection]):
        self._db_factory = db_factory

    def get_by_id(self, account_id: int) -> Optional[Tuple[int, str, str, str]]:
        conn = self._db_factory()
        try:
            cursor = conn.cursor()
            cursor.execute(
                'SELECT id, username, role, member_id FROM accounts WHERE id = ?',
                (account_id,),
            )
            return cursor.fetchone()
        finally:
            conn.close()

    def get_for_login(self, username: str) -> Optional[Tuple[int, str, str, str, str]]:
        conn = self._db_factory()
        try:
            cursor = conn.cursor()
            cursor.execute(
                'SELECT id, username, password_hash, role, member_id FROM accounts WHERE username = ?',
                (username,),
            )
            return cursor.fetchone()
        finally:
            conn.close()

    def create(self, username: str, password_hash: str, role: str, member_id: str) -> int:
        conn = self._db_factory()
        try:
            cursor = conn.cursor()
            cursor.execute(
                'INSERT INTO accounts (username, password_hash, role, member_id) VALUES (?, ?, ?, ?)',
                (username, password_hash, role, member_id),
            )
            account_id = cursor.lastrowid
            conn.commit()
            return account_id
        finally:
            conn.close()

    def delete_by_member(self, member_id: str) -> int:
        conn = self._db_factory()
        try:
            cursor = conn.cursor()
            cursor.execute('DELETE FROM accounts WHERE member_id = ?', (member_id,))
            conn.commit()
            return cursor.rowcount
        finally:
            conn.close()

    def update_last_login(self, account_id: int, when: datetime) -> None:
        conn = self._db_factory()
        try:
            cursor = conn.cursor()
            cursor.execute('UPDATE accounts SET last_login = ? WHERE id = ?', (when, account_id))
            conn.commit()
        finally:
            conn.close()

    def update_password(self, account_id: int, password_hash: str) -> None:
        conn = self._db_factory()
        try:
            cursor = conn.cursor()
            cursor.execute(
                'UPDATE accounts SET password_hash = ? WHERE id = ?',
                (password_hash, account_id),
            )
            conn.commit()
        finally:
            conn.close()

    def get_password_hash(self, account_id: int) -> Optional[str]:
        conn = self._db_factory()
        try:
            cursor = conn.cursor()
            cursor.execute('SELECT password_hash FROM accounts WHERE id = ?', (account_id,))
            result = cursor.fetchone()
            return result[0] if result else None
        finally:
            conn.close()
