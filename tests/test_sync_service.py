"""Tests for cloud refresh and change notifications"""
import pytest

from bjjfed.models import Announcement, Member, Teacher
from bjjfed.repositories import LocalCacheRepository
from bjjfed.services import CloudSyncError, FederationStore, SyncService


class DummyCloud:
    def __init__(self, teachers=None, students=None, announcements=None, enabled=True, fail=False):
        self.teachers = teachers or []
        self.students = students or []
        self.announcements = announcements or []
        self.enabled = enabled
        self.fail = fail
        self.calls = []

    def get_teachers(self):
        self.calls.append('teachers')
        if self.fail:
            raise CloudSyncError('boom')
        return self.teachers

    def get_students(self):
        self.calls.append('students')
        return self.students

    def get_announcements(self):
        self.calls.append('announcements')
        return self.announcements


@pytest.fixture
def store(services):
    store = FederationStore(LocalCacheRepository(services['db_factory']), 'pix')
    store.add_teacher(Teacher(id='t-local', name='Local teacher'))
    store.add_student(Member(id='s-local', name='Local student'))
    store.prepend_announcement(Announcement(id='a-local', content='hi', timestamp='1'))
    return store


def test_empty_remote_results_keep_local_state(store):
    service = SyncService(store, DummyCloud())
    assert service.refresh() is True

    assert [t.id for t in store.teachers()] == ['t-local']
    assert [s.id for s in store.students()] == ['s-local']
    assert [a.id for a in store.announcements()] == ['a-local']
    assert store.cloud_status == 'online'


def test_non_empty_remote_results_replace_local_state(store):
    cloud = DummyCloud(
        teachers=[Teacher(id='t-remote', name='Remote')],
        students=[Member(id='s-remote', name='Remote student')],
    )
    SyncService(store, cloud).refresh()

    assert [t.id for t in store.teachers()] == ['t-remote']
    assert [s.id for s in store.students()] == ['s-remote']
    assert [a.id for a in store.announcements()] == ['a-local']
    assert sorted(cloud.calls) == ['announcements', 'students', 'teachers']


def test_fetch_failure_switches_to_local(store):
    service = SyncService(store, DummyCloud(fail=True))
    assert service.refresh() is False
    assert store.cloud_status == 'local'
    assert [t.id for t in store.teachers()] == ['t-local']


def test_disabled_cloud_stays_local(store):
    cloud = DummyCloud(enabled=False)
    assert SyncService(store, cloud).refresh() is False
    assert cloud.calls == []
    assert store.cloud_status == 'local'


@pytest.mark.parametrize('table', ['teachers', 'students', 'announcements'])
def test_change_on_synced_table_triggers_full_refresh(store, table):
    cloud = DummyCloud()
    service = SyncService(store, cloud)
    assert service.handle_change({'type': 'UPDATE', 'table': table, 'schema': 'public'}) is True
    assert sorted(cloud.calls) == ['announcements', 'students', 'teachers']


def test_change_on_other_table_is_ignored(store):
    cloud = DummyCloud()
    service = SyncService(store, cloud)
    assert service.handle_change({'type': 'INSERT', 'table': 'payments'}) is False
    assert service.handle_change({'type': 'TRUNCATE', 'table': 'teachers'}) is False
    assert cloud.calls == []
