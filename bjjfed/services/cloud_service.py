from __future__ import annotations

import logging
from typing import Any

import requests

from bjjfed.models import Announcement, Member, Teacher
from bjjfed.services.base import CloudSyncError, ValidationError

logger = logging.getLogger(__name__)

TABLE_TEACHERS = 'teachers'
TABLE_STUDENTS = 'students'
TABLE_ANNOUNCEMENTS = 'announcements'
MEMBER_TABLES = (TABLE_TEACHERS, TABLE_STUDENTS)
SYNCED_TABLES = (TABLE_TEACHERS, TABLE_STUDENTS, TABLE_ANNOUNCEMENTS)


class CloudService:
    """Client for the Supabase REST (PostgREST) tables."""

    def __init__(self, base_url: str, api_key: str, timeout: int = 10):
        self._base_url = (base_url or '').rstrip('/')
        self._api_key = api_key or ''
        self._timeout = timeout

    @property
    def enabled(self) -> bool:
        return bool(self._base_url and self._api_key)

    def _headers(self, prefer: str | None = None) -> dict[str, str]:
        headers = {
            'apikey': self._api_key,
            'Authorization': f'Bearer {self._api_key}',
            'Content-Type': 'application/json',
        }
        if prefer:
            headers['Prefer'] = prefer
        return headers

    def _table_url(self, table: str) -> str:
        return f'{self._base_url}/rest/v1/{table}'

    def _check(self, response, table: str, action: str) -> None:
        if response.status_code >= 400:
            raise CloudSyncError(
                f'{action} on {table} failed with status {response.status_code}: {response.text[:200]}'
            )

    def _select(self, table: str, order: str | None = None) -> list[dict[str, Any]]:
        params = {'select': '*'}
        if order:
            params['order'] = order
        try:
            response = requests.get(
                self._table_url(table),
                headers=self._headers(),
                params=params,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise CloudSyncError(f'Fetch of {table} failed: {e}') from e
        self._check(response, table, 'Fetch')
        try:
            rows = response.json()
        except ValueError as e:
            raise CloudSyncError(f'Invalid JSON from {table}: {e}') from e
        if not isinstance(rows, list):
            raise CloudSyncError(f'Unexpected payload from {table}')
        return rows

    def _upsert(self, table: str, record: dict[str, Any]) -> None:
        try:
            response = requests.post(
                self._table_url(table),
                headers=self._headers('resolution=merge-duplicates,return=minimal'),
                params={'on_conflict': 'id'},
                json=record,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise CloudSyncError(f'Upsert into {table} failed: {e}') from e
        self._check(response, table, 'Upsert')

    def get_teachers(self) -> list[Teacher]:
        return [Teacher.from_dict(row) for row in self._select(TABLE_TEACHERS)]

    def get_students(self) -> list[Member]:
        return [Member.from_dict(row) for row in self._select(TABLE_STUDENTS)]

    def get_announcements(self) -> list[Announcement]:
        rows = self._select(TABLE_ANNOUNCEMENTS, order='timestamp.desc')
        return [Announcement.from_dict(row) for row in rows]

    def upsert_teacher(self, teacher: Teacher) -> None:
        self._upsert(TABLE_TEACHERS, teacher.to_dict())

    def upsert_student(self, student: Member) -> None:
        self._upsert(TABLE_STUDENTS, student.to_dict())

    def post_announcement(self, announcement: Announcement) -> None:
        try:
            response = requests.post(
                self._table_url(TABLE_ANNOUNCEMENTS),
                headers=self._headers('return=minimal'),
                json=announcement.to_dict(),
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise CloudSyncError(f'Posting announcement failed: {e}') from e
        self._check(response, TABLE_ANNOUNCEMENTS, 'Insert')

    def delete_member(self, member_id: str, table: str) -> None:
        if table not in MEMBER_TABLES:
            raise ValidationError(f'Unknown member table: {table}')
        try:
            response = requests.delete(
                self._table_url(table),
                headers=self._headers(),
                params={'id': f'eq.{member_id}'},
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise CloudSyncError(f'Delete from {table} failed: {e}') from e
        self._check(response, table, 'Delete')
        logger.debug("Deleted %s from %s", member_id, table)
