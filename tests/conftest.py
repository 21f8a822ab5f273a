"""
Shared fixtures: a fresh application with an in-memory SQLite database per test,
its injected services, and helpers for owners and credential payloads.
"""
import pytest

from application import create_app

TEST_CONFIG = {
    "TESTING": True,
    "SECRET_KEY": "test-secret",
    "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
    "SESSION_COOKIE_SECURE": False,
    "PASSWORD_HASH_METHOD": "pbkdf2:sha256:1000",
}

OWNER_PASSWORD = "Str0ng!Pass"


@pytest.fixture
def app():
    app = create_app(TEST_CONFIG)
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def credential_service(app):
    return app.extensions['credential_service']


@pytest.fixture
def duplicate_checker(app):
    return app.extensions['duplicate_checker']


@pytest.fixture
def csv_import_service(app):
    return app.extensions['csv_import_service']


@pytest.fixture
def csv_export_service(app):
    return app.extensions['csv_export_service']


@pytest.fixture
def health_service(app):
    return app.extensions['health_service']


@pytest.fixture
def auth_service(app):
    return app.extensions['auth_service']


@pytest.fixture
def owner(auth_service):
    return auth_service.register_user("owner@example.com", OWNER_PASSWORD)


@pytest.fixture
def other_owner(auth_service):
    return auth_service.register_user("other@example.com", OWNER_PASSWORD)


@pytest.fixture
def logged_in_client(client, owner):
    response = client.post('/auth/login', json={"username": owner.username, "password": OWNER_PASSWORD})
    assert response.status_code == 200
    return client


def make_credential_data(**overrides):
    data = {
        'platform': "GitHub",
        'username': "a@b.com",
        'password': "x",
        'account_identity': "a@b.com",
        'account_type': "#1-TopPriority",
        'status': "Active",
    }
    data.update(overrides)
    return data


@pytest.fixture
def credential_data():
    return make_credential_data
