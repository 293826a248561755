"""Tests for the role-based dashboard router and blocking gate"""


def test_admin_sees_admin_dashboard(authenticated_client, teacher):
    response = authenticated_client.get('/')
    assert response.status_code == 200
    assert b'Teachers' in response.data
    assert b'Carlos Gracie' in response.data
    assert b'Federation pay key' in response.data


def test_teacher_sees_teacher_dashboard(teacher_client):
    response = teacher_client.get('/')
    assert response.status_code == 200
    assert b'Post announcement' in response.data
    assert b'Centro' in response.data


def test_student_sees_student_dashboard(student_client):
    response = student_client.get('/')
    assert response.status_code == 200
    assert b'My profile' in response.data


def test_session_endpoint(student_client, student):
    data = student_client.get('/api/session').get_json()
    assert data['view'] == 'student'
    assert data['blocked'] is False
    assert data['user']['id'] == student.id
    assert data['cloud_status'] == 'local'


def test_unpaid_student_sees_blocking_screen(student_client, services, student):
    services['store'].update_student(
        type(student).from_dict({**student.to_dict(), 'payment_status': 'unpaid', 'last_ai_audit': 'Fee overdue since March'})
    )
    response = student_client.get('/')
    assert response.status_code == 200
    assert b'Access Blocked' in response.data
    assert b'Fee overdue since March' in response.data
    assert b'https://buy.stripe.com/' in response.data

    assert student_client.get('/api/session').get_json()['blocked'] is True
    assert student_client.get('/api/announcements').status_code == 403


def test_paused_teacher_sees_default_block_message(teacher_client, authenticated_client, teacher):
    authenticated_client.post(f'/api/teachers/{teacher.id}/toggle')
    response = teacher_client.get('/')
    assert b'Access Blocked' in response.data
    assert b'Pending payment detected' in response.data


def test_admin_is_never_blocked(authenticated_client):
    data = authenticated_client.get('/api/session').get_json()
    assert data['role'] == 'ADM'
    assert data['blocked'] is False
    assert data['view'] == 'admin'
