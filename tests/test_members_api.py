"""
Tests for teacher and student endpoints
"""
import json

from bjjfed.models import Member, Teacher


class TestTeachersApi:

    def test_admin_creates_teacher(self, authenticated_client, services):
        response = authenticated_client.post('/api/teachers', json={
            'name': 'Rickson Gracie',
            'branch': 'Zona Sul',
            'classes': ['Advanced'],
        })
        data = json.loads(response.data)
        assert response.status_code == 201
        assert data['teacher']['role'] == 'PROFESSOR'
        assert data['teacher']['status'] == 'active'
        assert data['teacher']['payment_status'] == 'paid'
        assert data['cloud_status'] == 'local'
        assert services['store'].get_teacher(data['teacher']['id']).branch == 'Zona Sul'

    def test_create_teacher_requires_name(self, authenticated_client):
        response = authenticated_client.post('/api/teachers', json={'branch': 'Centro'})
        assert response.status_code == 400
        assert 'name' in json.loads(response.data)['error']

    def test_create_teacher_rejects_invalid_status(self, authenticated_client):
        response = authenticated_client.post('/api/teachers', json={'name': 'X', 'status': 'banned'})
        assert response.status_code == 400

    def test_duplicate_id_conflicts(self, authenticated_client, teacher):
        response = authenticated_client.post('/api/teachers', json={'id': teacher.id, 'name': 'Copy'})
        assert response.status_code == 409

    def test_toggle_teacher(self, authenticated_client, teacher):
        response = authenticated_client.post(f'/api/teachers/{teacher.id}/toggle')
        assert json.loads(response.data)['status'] == 'paused'
        response = authenticated_client.post(f'/api/teachers/{teacher.id}/toggle')
        assert json.loads(response.data)['status'] == 'active'

    def test_admin_sets_payment_status(self, authenticated_client, teacher, services):
        response = authenticated_client.put(f'/api/teachers/{teacher.id}', json={'payment_status': 'unpaid'})
        assert response.status_code == 200
        assert services['store'].get_teacher(teacher.id).payment_status == 'unpaid'

    def test_teacher_edits_own_branch(self, teacher_client, teacher, services):
        response = teacher_client.put(f'/api/teachers/{teacher.id}', json={'branch': 'Barra'})
        assert response.status_code == 200
        assert services['store'].get_teacher(teacher.id).branch == 'Barra'

    def test_teacher_cannot_mark_self_paid(self, teacher_client, teacher):
        response = teacher_client.put(f'/api/teachers/{teacher.id}', json={'payment_status': 'paid'})
        assert response.status_code == 403

    def test_teacher_cannot_create_teacher(self, teacher_client):
        response = teacher_client.post('/api/teachers', json={'name': 'Someone'})
        assert response.status_code == 403

    def test_delete_teacher_removes_member_and_login(self, authenticated_client, teacher, services):
        response = authenticated_client.delete(f'/api/teachers/{teacher.id}')
        assert response.status_code == 200
        assert services['store'].get_teacher(teacher.id) is None
        assert services['auth_service'].authenticate('carlos', 'secret-pass') is None

        titles = [n.title for n in services['notification_service'].active()]
        assert 'Cloud update' in titles

    def test_delete_missing_teacher(self, authenticated_client):
        assert authenticated_client.delete('/api/teachers/missing').status_code == 404


class TestStudentsApi:

    def test_teacher_creates_student_for_self(self, teacher_client, teacher):
        response = teacher_client.post('/api/students', json={'name': 'Royler', 'teacher_id': 'other'})
        data = json.loads(response.data)
        assert response.status_code == 201
        assert data['student']['teacher_id'] == teacher.id
        assert data['student']['role'] == 'ALUNO'

    def test_teacher_sees_only_own_students(self, teacher_client, authenticated_client, student):
        authenticated_client.post('/api/students', json={'name': 'Unassigned'})

        names = [s['name'] for s in json.loads(teacher_client.get('/api/students').data)]
        assert names == ['Helio Souza']

        admin_names = [s['name'] for s in json.loads(authenticated_client.get('/api/students').data)]
        assert sorted(admin_names) == ['Helio Souza', 'Unassigned']

    def test_student_sees_only_self(self, student_client, student):
        data = json.loads(student_client.get('/api/students').data)
        assert [s['id'] for s in data] == [student.id]

    def test_student_updates_own_profile(self, student_client, student, services):
        response = student_client.put(f'/api/students/{student.id}', json={'belt': 'purple'})
        assert response.status_code == 200
        assert services['store'].get_student(student.id).belt == 'purple'

    def test_student_cannot_change_payment_status(self, student_client, student):
        response = student_client.put(f'/api/students/{student.id}', json={'payment_status': 'paid'})
        assert response.status_code == 403

    def test_student_cannot_create_student(self, student_client):
        assert student_client.post('/api/students', json={'name': 'Friend'}).status_code == 403

    def test_teacher_cannot_manage_other_students(self, teacher_client, authenticated_client):
        response = authenticated_client.post('/api/students', json={'name': 'Elsewhere'})
        other_id = json.loads(response.data)['student']['id']

        assert teacher_client.post(f'/api/students/{other_id}/toggle').status_code == 403
        assert teacher_client.delete(f'/api/students/{other_id}').status_code == 403

    def test_paused_student_is_blocked(self, teacher_client, student_client, student):
        response = teacher_client.post(f'/api/students/{student.id}/toggle')
        assert json.loads(response.data)['status'] == 'paused'

        response = student_client.get('/api/students')
        assert response.status_code == 403
        assert json.loads(response.data)['blocked'] is True

    def test_teacher_deletes_student(self, teacher_client, student, services):
        response = teacher_client.delete(f'/api/students/{student.id}')
        assert response.status_code == 200
        assert services['store'].get_student(student.id) is None

    def test_invalid_email_rejected(self, authenticated_client):
        response = authenticated_client.post('/api/students', json={'name': 'A', 'email': 'not-an-email'})
        assert response.status_code == 400


class TestCloudPush:

    def test_failed_push_keeps_local_change(self, authenticated_client, services, monkeypatch):
        cloud = services['cloud']
        monkeypatch.setattr(type(cloud), 'enabled', property(lambda self: True))

        def fail(*args, **kwargs):
            raise RuntimeError('offline')

        monkeypatch.setattr(cloud, 'upsert_teacher', fail)

        response = authenticated_client.post('/api/teachers', json={'name': 'Offline Teacher'})
        data = json.loads(response.data)
        assert response.status_code == 201
        assert data['cloud_status'] == 'local'
        assert services['store'].get_teacher(data['teacher']['id']) is not None

        alerts = [n for n in services['notification_service'].active() if n.type == 'alert']
        assert alerts and alerts[0].title == 'Network error'


class TestMemberIds:

    def test_admin_id_is_reserved(self, teacher_client, authenticated_client):
        response = teacher_client.post('/api/students', json={'id': 'admin-1', 'name': 'Impostor'})
        assert response.status_code == 409

        data = json.loads(authenticated_client.get('/api/session').data)
        assert data['role'] == 'ADM'
        assert data['view'] == 'admin'
        assert data['blocked'] is False

    def test_student_id_cannot_reuse_teacher_id(self, authenticated_client, teacher, services):
        response = authenticated_client.post('/api/students', json={
            'id': teacher.id,
            'name': 'Shadow',
            'username': 'shadow',
            'password': 'secret-pass',
        })
        assert response.status_code == 409
        assert services['store'].get_student(teacher.id) is None
        assert services['auth_service'].authenticate('shadow', 'secret-pass') is None

    def test_teacher_id_cannot_reuse_student_id(self, authenticated_client, student):
        response = authenticated_client.post('/api/teachers', json={'id': student.id, 'name': 'Shadow'})
        assert response.status_code == 409

    def test_admin_session_ignores_member_records(self, authenticated_client, services):
        services['store'].add_student(Member(id='admin-1', name='Synced', status='paused'))

        data = json.loads(authenticated_client.get('/api/session').data)
        assert data['role'] == 'ADM'
        assert data['blocked'] is False

    def test_student_account_resolves_to_student_record(self, student_client, student, services):
        services['store'].add_teacher(Teacher(id=student.id, name='Same Id'))

        data = json.loads(student_client.get('/api/session').data)
        assert data['role'] == 'ALUNO'
        assert data['user']['name'] == 'Helio Souza'

    def test_unsafe_id_characters_rejected(self, teacher_client, services):
        response = teacher_client.post('/api/students', json={
            'id': "x');alert(document.cookie);('",
            'name': 'Mallory',
        })
        assert response.status_code == 400
        assert services['store'].get_student("x');alert(document.cookie);('") is None

    def test_ids_are_not_interpolated_into_scripts(self, authenticated_client, services):
        services['store'].add_student(Member(id="x');alert(1);('", name='Synced'))

        response = authenticated_client.get('/')
        assert response.status_code == 200
        assert b"/api/students/x&#39;" not in response.data
        assert b"/api/students/x'" not in response.data
        assert b'data-id="x&#39;);alert(1);(&#39;"' in response.data
