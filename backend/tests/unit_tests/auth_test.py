import jwt
import pytest
from fastapi.testclient import TestClient
from heliclockter import datetime_utc, timedelta

from clubhub.app import create_app
from clubhub.config import config
from clubhub.models.db.admin import AdminInDB
from clubhub.routes import auth
from clubhub.routes.auth import create_access_token, decode_access_token
from clubhub.utils.dummy_records import DUMMY_MOCK_TIME
from clubhub.utils.id_types import AdminId
from clubhub.utils.security import hash_password, verify_password

ADMIN_PASSWORD = "correct-horse"


def build_admin() -> AdminInDB:
    return AdminInDB(
        id=AdminId(1),
        username="admin",
        email="admin@example.com",
        password_hash=hash_password(ADMIN_PASSWORD),
        created=DUMMY_MOCK_TIME,
    )


def valid_token() -> str:
    return create_access_token({"admin": "admin"}, expires_delta=timedelta(minutes=5))


@pytest.fixture
def admin_lookup(monkeypatch: pytest.MonkeyPatch) -> None:
    admin = build_admin()

    async def fake_get_admin_by_username(username: str) -> AdminInDB | None:
        return admin if username == admin.username else None

    monkeypatch.setattr(auth, "get_admin_by_username", fake_get_admin_by_username)


def test_password_hashing() -> None:
    hashed = hash_password("secret-value")
    assert verify_password("secret-value", hashed)
    assert not verify_password("other-value", hashed)
    assert not verify_password("secret-value", "not-a-bcrypt-hash")


def test_access_token_round_trip() -> None:
    token_data = decode_access_token(valid_token())
    assert token_data is not None
    assert token_data.username == "admin"


def test_expired_or_tampered_tokens_are_rejected() -> None:
    expired = create_access_token({"admin": "admin"}, expires_delta=timedelta(minutes=-1))
    assert decode_access_token(expired) is None
    assert decode_access_token(valid_token() + "x") is None
    assert decode_access_token(create_access_token({"user": 1}, timedelta(minutes=5))) is None


def test_gate_rejects_api_requests_without_token() -> None:
    response = TestClient(create_app()).get(f"{config.api_prefix}/clubs")

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


def test_gate_redirects_dashboard_to_login() -> None:
    client = TestClient(create_app(), follow_redirects=False)

    response = client.get("/dashboard/clubs")

    assert response.status_code == 303
    assert response.headers["location"] == "/login"


def test_gate_allows_public_pages() -> None:
    response = TestClient(create_app()).get("/login")

    assert response.status_code == 200
    assert "Administrator login" in response.text


@pytest.mark.usefixtures("admin_lookup")
def test_bearer_token_grants_access() -> None:
    client = TestClient(create_app())

    response = client.get(
        f"{config.api_prefix}/admins/me", headers={"Authorization": f"Bearer {valid_token()}"}
    )

    assert response.status_code == 200
    assert response.json()["username"] == "admin"
    assert "password_hash" not in response.json()


@pytest.mark.usefixtures("admin_lookup")
def test_token_endpoint_sets_session_cookie() -> None:
    client = TestClient(create_app())

    response = client.post(
        f"{config.api_prefix}/token", data={"username": "admin", "password": ADMIN_PASSWORD}
    )

    assert response.status_code == 200
    assert response.json()["token_type"] == "bearer"
    assert config.session_cookie_name in response.cookies

    me = client.get(f"{config.api_prefix}/admins/me")
    assert me.status_code == 200


@pytest.mark.usefixtures("admin_lookup")
def test_token_endpoint_rejects_wrong_password() -> None:
    response = TestClient(create_app()).post(
        f"{config.api_prefix}/token", data={"username": "admin", "password": "wrong"}
    )

    assert response.status_code == 401
    assert response.json() == {"error": "Incorrect username or password"}


@pytest.mark.usefixtures("admin_lookup")
def test_login_page_redirects_to_dashboard() -> None:
    client = TestClient(create_app(), follow_redirects=False)

    response = client.post("/login", data={"username": "admin", "password": ADMIN_PASSWORD})

    assert response.status_code == 303
    assert response.headers["location"] == "/dashboard"
    assert config.session_cookie_name in response.cookies


def test_token_for_unknown_admin_is_rejected_by_route(monkeypatch: pytest.MonkeyPatch) -> None:
    async def fake_get_admin_by_username(_: str) -> None:
        return None

    monkeypatch.setattr(auth, "get_admin_by_username", fake_get_admin_by_username)

    response = TestClient(create_app()).get(
        f"{config.api_prefix}/admins/me", headers={"Authorization": f"Bearer {valid_token()}"}
    )

    assert response.status_code == 401
    assert response.json() == {"error": "Could not validate credentials"}


def test_token_expiry_is_in_the_future() -> None:
    payload = jwt.decode(valid_token(), config.jwt_secret, algorithms=[auth.ALGORITHM])
    assert payload["exp"] > datetime_utc.now().timestamp()
