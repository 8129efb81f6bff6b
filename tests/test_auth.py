import pytest

from planboard.auth import Principal, authorize, get_policy, parse_bearer, role_based_policy
from planboard.config import get_settings
from planboard.errors import Forbidden, Unauthorized
from planboard.main import app

from conftest import USER


@pytest.mark.parametrize("header", [None, "", "Basic abc", "Bearer ", "Bearer    "])
def test_parse_bearer_rejects(header):
    with pytest.raises(Unauthorized):
        parse_bearer(header)


def test_parse_bearer():
    assert parse_bearer(f"Bearer {USER}") == USER


def test_viewer_cannot_write(monkeypatch):
    monkeypatch.setenv("READ_ONLY_USERS", f"{USER}, someone-else")
    get_settings.cache_clear()
    try:
        assert authorize(USER, "read") == Principal(id=USER, role="viewer")
        with pytest.raises(Forbidden):
            authorize(USER, "write")
    finally:
        get_settings.cache_clear()


def test_role_based_policy():
    assert role_based_policy(Principal("u", "user"), "write")
    assert not role_based_policy(Principal("u", "viewer"), "write")
    assert not role_based_policy(Principal("u", "stranger"), "read")


def test_missing_token_is_unauthorized(client):
    res = client.get("/v1/boards")
    assert res.status_code == 401
    assert res.json()["code"] == "unauthorized"


def test_auth_runs_before_validation(client):
    res = client.post("/v1/boards", json={"owner": "bad"})
    assert res.status_code == 401


def test_denied_permission_is_forbidden(client, auth):
    app.dependency_overrides[get_policy] = lambda: (lambda principal, permission: permission == "read")
    res = client.post("/v1/boards", json={"name": "Treasury Bonds"}, headers=auth)
    assert res.status_code == 403
    assert res.json()["code"] == "forbidden"
    assert client.get("/v1/boards", headers=auth).json()["totalResults"] == 0
