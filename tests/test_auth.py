from datetime import datetime, timedelta, timezone

from extensions import db
from models.user import User
from services.token_service import generate_token


def test_register_login_me_flow(client):
    res = client.post('/auth/register', json={"name": "Jane Doe", "email": "jane@x.com", "password": "secret1"})
    assert res.status_code == 201
    body = res.get_json()
    assert body["success"] is True
    assert body["data"]["token"]
    assert "password" not in body["data"]["user"]

    res = client.post('/auth/login', json={"email": "jane@x.com", "password": "secret1"})
    assert res.status_code == 200
    token = res.get_json()["data"]["token"]

    res = client.get('/auth/me', headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 200
    user = res.get_json()["data"]["user"]
    assert user["name"] == "Jane Doe"
    assert user["email"] == "jane@x.com"


def test_duplicate_registration_conflicts(app, client):
    payload = {"name": "Jane Doe", "email": "jane@x.com", "password": "secret1"}
    assert client.post('/auth/register', json=payload).status_code == 201

    res = client.post('/auth/register', json=dict(payload, email="JANE@x.com"))
    assert res.status_code == 409
    assert res.get_json() == {"success": False, "message": "User with this email already exists"}

    with app.app_context():
        assert User.query.count() == 1


def test_register_validation_reports_fields(client):
    res = client.post('/auth/register', json={"name": "J", "email": "not-an-email", "password": "123"})
    assert res.status_code == 400
    body = res.get_json()
    assert body["success"] is False
    fields = {e["field"] for e in body["errors"]}
    assert fields == {"name", "email", "password"}


def test_register_rejects_non_json_body(client):
    res = client.post('/auth/register', data="name=jane", content_type="text/plain")
    assert res.status_code == 400
    assert res.get_json()["success"] is False


def test_login_with_wrong_password(client, register_user):
    register_user()
    res = client.post('/auth/login', json={"email": "jane@x.com", "password": "wrong-pass"})
    assert res.status_code == 401
    assert res.get_json()["message"] == "Invalid email or password"


def test_login_unknown_email(client):
    res = client.post('/auth/login', json={"email": "ghost@x.com", "password": "secret1"})
    assert res.status_code == 401


def test_me_requires_token(client):
    res = client.get('/auth/me')
    assert res.status_code == 401
    assert res.get_json() == {"success": False, "message": "Access token is required"}


def test_me_rejects_malformed_token(client):
    res = client.get('/auth/me', headers={"Authorization": "Bearer not.a.jwt"})
    assert res.status_code == 401
    assert res.get_json()["message"] == "Invalid or expired token"


def test_expired_token_is_rejected(app, client, register_user):
    register_user()
    with app.app_context():
        user = User.query.filter_by(email="jane@x.com").first()
        issued = datetime.now(timezone.utc) - timedelta(days=7, minutes=1)
        token = generate_token(user, now=issued)

    res = client.get('/auth/me', headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 401
    assert res.get_json()["message"] == "Invalid or expired token"


def test_token_still_valid_before_expiry(app, client, register_user):
    register_user()
    with app.app_context():
        user = User.query.filter_by(email="jane@x.com").first()
        issued = datetime.now(timezone.utc) - timedelta(days=6, hours=23)
        token = generate_token(user, now=issued)

    res = client.get('/auth/me', headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 200


def test_token_for_deleted_user_is_rejected(app, client, register_user):
    _, headers = register_user()
    with app.app_context():
        db.session.delete(User.query.filter_by(email="jane@x.com").first())
        db.session.commit()

    res = client.get('/auth/me', headers=headers)
    assert res.status_code == 401
    assert res.get_json()["message"] == "User not found"


def test_welcome_accepts_missing_or_bad_token(client, auth_headers):
    res = client.get('/')
    assert res.status_code == 200
    assert res.get_json()["user"] is None

    res = client.get('/', headers={"Authorization": "Bearer garbage"})
    assert res.status_code == 200
    assert res.get_json()["user"] is None

    res = client.get('/', headers=auth_headers)
    assert res.get_json()["user"]["email"] == "jane@x.com"


def test_health(client):
    res = client.get('/health')
    assert res.status_code == 200
    assert res.get_json()["data"]["status"] == "healthy"


def test_list_users_requires_auth_and_paginates(client, register_user):
    _, headers = register_user()
    register_user(name="John Roe", email="john@x.com")

    assert client.get('/users').status_code == 401

    res = client.get('/users?limit=1&search=x.com', headers=headers)
    assert res.status_code == 200
    data = res.get_json()["data"]
    assert len(data["users"]) == 1
    assert data["pagination"]["totalUsers"] == 2
    assert data["pagination"]["totalPages"] == 2
    assert data["pagination"]["hasNextPage"] is True


def test_register_rejects_overlong_email(client):
    res = client.post('/auth/register', json={"name": "Jane Doe", "email": "j" * 120 + "@x.com", "password": "secret1"})
    assert res.status_code == 400
    assert [e["field"] for e in res.get_json()["errors"]] == ["email"]
