import pytest

from app import create_app
from config import TestConfig
from extensions import db
from services.notifier import Notifier


class RecordingNotifier(Notifier):
    def __init__(self):
        self.events = []

    def emit(self, channel, payload):
        self.events.append((channel, payload))


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def app(notifier):
    app = create_app(TestConfig, notifier=notifier)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def register_user(client):
    """Registers a user and returns (user, headers)."""
    def _register(name="Jane Doe", email="jane@x.com", password="secret1"):
        res = client.post('/auth/register', json={"name": name, "email": email, "password": password})
        assert res.status_code == 201, res.get_json()
        data = res.get_json()["data"]
        return data["user"], {"Authorization": f"Bearer {data['token']}"}
    return _register


@pytest.fixture
def auth_headers(register_user):
    _, headers = register_user()
    return headers


@pytest.fixture
def other_headers(register_user):
    _, headers = register_user(name="Mallory", email="mallory@x.com")
    return headers


@pytest.fixture
def make_company(client):
    def _make(headers, name="Acme Support", **overrides):
        body = {
            "name": name,
            "notifications": [{"provider": "email", "value": "alerts@acme.com"}],
            "brandLogoUrl": "https://cdn.acme.com/logo.png",
            "brandColor": "#FF5733",
        }
        body.update(overrides)
        res = client.post('/companies', json=body, headers=headers)
        assert res.status_code == 201, res.get_json()
        return res.get_json()["data"]
    return _make


@pytest.fixture
def make_agent(client):
    def _make(headers, company_id, name="Support Bot", description="Answers customer questions"):
        res = client.post('/agents', json={
            "name": name,
            "description": description,
            "companyId": company_id,
        }, headers=headers)
        assert res.status_code == 201, res.get_json()
        return res.get_json()["data"]
    return _make


@pytest.fixture
def company(make_company, auth_headers):
    return make_company(auth_headers)


@pytest.fixture
def agent(make_agent, auth_headers, company):
    return make_agent(auth_headers, company["id"])
