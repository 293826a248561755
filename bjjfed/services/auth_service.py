from __future__ import annotations

import sqlite3
from datetime import datetime
from typing import Optional

import bcrypt

from bjjfed.models import ROLE_ADMIN, ROLE_TEACHER, Account, Member, admin_session_member
from bjjfed.repositories import AccountRepository
from bjjfed.services.base import ConflictError, ValidationError
from bjjfed.services.store import FederationStore

MIN_PASSWORD_LENGTH = 6


class AuthService:
    """Authentication and session resolution."""

    def __init__(self, account_repo: AccountRepository, store: FederationStore):
        self._account_repo = account_repo
        self._store = store

    def get_account(self, account_id: int) -> Optional[Account]:
        row = self._account_repo.get_by_id(account_id)
        if not row:
            return None
        return Account(id=row[0], username=row[1], role=row[2], member_id=row[3])

    def authenticate(self, username: str, password: str) -> Optional[Account]:
        row = self._account_repo.get_for_login(username)
        if not row or not bcrypt.checkpw(password.encode('utf-8'), row[2].encode('utf-8')):
            return None
        self._account_repo.update_last_login(row[0], datetime.now())
        return Account(id=row[0], username=row[1], role=row[3], member_id=row[4])

    def create_account(self, username: str, password: str, role: str, member_id: str) -> int:
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters')
        password_hash = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')
        try:
            return self._account_repo.create(username, password_hash, role, member_id)
        except sqlite3.IntegrityError:
            raise ConflictError(f'Username "{username}" is already taken')

    def delete_accounts_for(self, member_id: str) -> int:
        return self._account_repo.delete_by_member(member_id)

    def change_password(self, account_id: int, current_password: str, new_password: str) -> None:
        password_hash = self._account_repo.get_password_hash(account_id)
        if not password_hash:
            raise ValidationError('Account not found')
        if not bcrypt.checkpw(current_password.encode('utf-8'), password_hash.encode('utf-8')):
            raise ValidationError('Current password is incorrect')
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f'New password must be at least {MIN_PASSWORD_LENGTH} characters')
        new_hash = bcrypt.hashpw(new_password.encode('utf-8'), bcrypt.gensalt())
        self._account_repo.update_password(account_id, new_hash.decode('utf-8'))

    def resolve_session_member(self, account: Account) -> Member:
        """Return the freshest copy of the signed-in member.

        Administrator accounts always map to the admin pseudo-member; other
        accounts are looked up only in the collection matching their role, and
        fall back to the account itself.
        """
        if account.role == ROLE_ADMIN:
            return admin_session_member()
        if account.role == ROLE_TEACHER:
            member = self._store.get_teacher(account.member_id)
        else:
            member = self._store.get_student(account.member_id)
        if member is not None:
            return member
        return Member(id=account.member_id, name=account.username, role=account.role)
