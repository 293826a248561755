"""Tests for the in-memory store and its local cache mirror"""
import pytest

from bjjfed.models import Announcement, Member, Teacher
from bjjfed.repositories import LocalCacheRepository
from bjjfed.services import ConflictError, FederationStore, NotFoundError
from bjjfed.services.store import KEY_STUDENTS, KEY_TEACHERS


@pytest.fixture
def cache_repo(services):
    return LocalCacheRepository(services['db_factory'])


@pytest.fixture
def store(cache_repo):
    store = FederationStore(cache_repo, 'pix@federation.example')
    store.load()
    return store


def test_state_survives_reload(cache_repo, store):
    teacher = Teacher(id='t1', name='Rolls', branch='Leblon', classes=['Kids'])
    student = Member(id='s1', name='Ana', teacher_id='t1', payment_status='unpaid')
    announcement = Announcement(id='a1', content='Belt exam', timestamp='2024-05-01T10:00:00+00:00')

    store.add_teacher(teacher)
    store.add_student(student)
    store.prepend_announcement(announcement)
    store.set_pay_key('new-key@federation.example')

    reloaded = FederationStore(cache_repo, 'pix@federation.example')
    reloaded.load()
    assert reloaded.teachers() == [teacher]
    assert reloaded.students() == [student]
    assert reloaded.announcements() == [announcement]
    assert reloaded.pay_key() == 'new-key@federation.example'


def test_empty_cache_uses_defaults(store):
    assert store.teachers() == []
    assert store.students() == []
    assert store.pay_key() == 'pix@federation.example'
    assert store.cloud_status == 'local'


def test_corrupt_cache_entry_falls_back(cache_repo):
    cache_repo.set(KEY_TEACHERS, 'not-json')
    cache_repo.save_json(KEY_STUDENTS, [{'id': 's1', 'name': 'Ana'}, {'unexpected': True}])

    store = FederationStore(cache_repo, 'pix')
    store.load()
    assert store.teachers() == []
    assert [s.id for s in store.students()] == ['s1']


def test_announcements_are_prepended(store):
    first = Announcement(id='a1', content='first', timestamp='1')
    second = Announcement(id='a2', content='second', timestamp='2')
    store.prepend_announcement(first)
    store.prepend_announcement(second)
    assert [a.id for a in store.announcements()] == ['a2', 'a1']


def test_ids_are_unique_per_collection(store):
    store.add_student(Member(id='s1', name='Ana'))
    with pytest.raises(ConflictError):
        store.add_student(Member(id='s1', name='Other'))


def test_remove_student(store, cache_repo):
    store.add_student(Member(id='s1', name='Ana'))
    store.add_student(Member(id='s2', name='Bia'))
    store.remove_student('s1')
    assert [s.id for s in store.students()] == ['s2']
    assert [s['id'] for s in cache_repo.load_json(KEY_STUDENTS, [])] == ['s2']

    with pytest.raises(NotFoundError):
        store.remove_student('s1')


def test_update_unknown_member_raises(store):
    with pytest.raises(NotFoundError):
        store.update_teacher(Teacher(id='missing', name='Nobody'))


def test_merge_audit_results_only_touches_payment_fields(store):
    store.add_student(Member(id='s1', name='Ana', belt='blue'))
    audited = Member(id='s1', name='Stale name', belt='white', payment_status='unpaid', last_ai_audit='Overdue')
    ghost = Member(id='gone', name='Removed meanwhile', payment_status='unpaid')

    store.merge_audit_results([], [audited, ghost])

    [student] = store.students()
    assert student.name == 'Ana'
    assert student.belt == 'blue'
    assert student.payment_status == 'unpaid'
    assert student.last_ai_audit == 'Overdue'
