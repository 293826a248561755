"""
Pytest fixtures for bjjfed tests
"""
import os
import tempfile

import pytest

from bjjfed import create_app
from bjjfed.config import TestingConfig


class FakeResponse:
    """Minimal stand-in for requests.Response."""
    def __init__(self, status_code=200, payload=None, text=''):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError('No JSON body')
        return self._payload


@pytest.fixture
def app():
    """Create application for testing"""
    # Use a temporary database for tests
    db_fd, db_path = tempfile.mkstemp(suffix='.db')

    class Config(TestingConfig):
        DATABASE_PATH = db_path
        SECRET_KEY = 'test-secret-key-for-testing'

    flask_app = create_app(Config)

    yield flask_app

    # Cleanup
    os.close(db_fd)
    os.unlink(db_path)


@pytest.fixture
def services(app):
    return app.extensions['bjjfed']


@pytest.fixture
def client(app):
    """Create a test client"""
    return app.test_client()


def login_as(client, account_id):
    with client.session_transaction() as sess:
        sess['_user_id'] = str(account_id)
        sess['_fresh'] = True
    return client


@pytest.fixture
def authenticated_client(app, client):
    """Test client signed in as the default admin account"""
    return login_as(client, 1)


@pytest.fixture
def teacher(services):
    return services['member_service'].create_teacher({
        'name': 'Carlos Gracie',
        'branch': 'Centro',
        'classes': ['Kids', 'Adults'],
        'username': 'carlos',
        'password': 'secret-pass',
    })


@pytest.fixture
def teacher_client(app, services, teacher):
    account = services['auth_service'].authenticate('carlos', 'secret-pass')
    return login_as(app.test_client(), account.id)


@pytest.fixture
def student(services, teacher):
    return services['member_service'].create_student(teacher, {
        'name': 'Helio Souza',
        'belt': 'blue',
        'username': 'helio',
        'password': 'secret-pass',
    })


@pytest.fixture
def student_client(app, services, student):
    account = services['auth_service'].authenticate('helio', 'secret-pass')
    return login_as(app.test_client(), account.id)
