"""Tests for announcement endpoints"""
import json

from bjjfed.repositories import LocalCacheRepository


def test_teacher_posts_announcement(teacher_client, services):
    response = teacher_client.post('/api/announcements', json={'content': 'Seminar on Saturday'})
    data = json.loads(response.data)
    assert response.status_code == 201
    assert data['announcement']['author_name'] == 'Carlos Gracie'

    announcements = [n for n in services['notification_service'].active() if n.type == 'announcement']
    assert [n.message for n in announcements] == ['Seminar on Saturday']


def test_newest_announcement_first(authenticated_client):
    authenticated_client.post('/api/announcements', json={'content': 'first'})
    authenticated_client.post('/api/announcements', json={'content': 'second'})

    data = json.loads(authenticated_client.get('/api/announcements').data)
    assert [a['content'] for a in data] == ['second', 'first']


def test_student_reads_but_cannot_post(student_client, authenticated_client):
    authenticated_client.post('/api/announcements', json={'content': 'Belt exam'})

    assert student_client.post('/api/announcements', json={'content': 'hi'}).status_code == 403
    data = json.loads(student_client.get('/api/announcements').data)
    assert data[0]['content'] == 'Belt exam'


def test_empty_announcement_rejected(authenticated_client):
    response = authenticated_client.post('/api/announcements', json={'content': '   '})
    assert response.status_code == 400


def test_announcements_persist_to_local_cache(authenticated_client, services):
    authenticated_client.post('/api/announcements', json={'content': 'Cached'})
    cached = LocalCacheRepository(services['db_factory']).load_json('bjj_announcements', [])
    assert cached[0]['content'] == 'Cached'
