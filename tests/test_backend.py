import pytest
from postgrest.exceptions import APIError

from backend import SupabaseClient, UserSession
from errors import AuthError, BackendError


def test_sign_in_builds_session(client, fake_backend):
    session = client.sign_in("owner@example.com", "secret")

    assert session == UserSession(
        user_id="user-1",
        email="owner@example.com",
        access_token="token-1",
        refresh_token="refresh-1",
        name="",
    )
    assert fake_backend.calls[-1] == ("sign_in", {"email": "owner@example.com", "password": "secret"})
    assert client.created[-1] == ("https://demo.supabase.co", "anon-key")


def test_sign_in_bad_password_raises_auth_error(client):
    with pytest.raises(AuthError, match="Invalid login credentials") as exc:
        client.sign_in("owner@example.com", "wrong")

    assert exc.value.status_code == 400


def test_sign_up_returns_session_with_name(client, fake_backend):
    session = client.sign_up("new@example.com", "secret", "Jane Doe")

    assert session.name == "Jane Doe"
    assert fake_backend.calls[-1][1]["options"] == {"data": {"name": "Jane Doe"}}


def test_sign_up_pending_confirmation_returns_none(client, fake_backend):
    fake_backend.require_confirmation = True

    assert client.sign_up("new@example.com", "secret", "Jane") is None


def test_refresh_issues_new_tokens(client, fake_backend, session):
    fake_backend.expire_all()

    fresh = client.refresh(session)

    assert fresh.user_id == session.user_id
    assert fresh.access_token != session.access_token
    assert fresh.access_token in fake_backend.valid_tokens
    assert fake_backend.calls[-1] == ("refresh", session.refresh_token)


def test_refresh_with_used_token_is_auth_error(client, session):
    client.refresh(session)

    with pytest.raises(AuthError, match="Refresh Token Not Found"):
        client.refresh(session)


def test_sign_out_revokes_session(client, fake_backend, session):
    client.sign_out(session)

    assert fake_backend.calls[-1] == ("sign_out", (session.access_token, session.refresh_token))
    assert session.access_token not in fake_backend.valid_tokens


def test_table_queries_carry_session_token(client, fake_backend, session):
    client.execute(client.table(session, "sales_entries").select("*"))

    assert fake_backend.queries[-1].token == session.access_token


def test_network_failure_raises_backend_error(client, fake_backend, session):
    fake_backend.fail = True

    with pytest.raises(BackendError, match="Could not reach backend") as exc:
        client.execute(client.table(session, "sales_entries").select("*"))

    assert not isinstance(exc.value, AuthError)
    assert exc.value.status_code is None


def test_query_error_keeps_message_and_code(settings):
    class Failing:
        def execute(self):
            raise APIError({"message": 'relation "sales_entries" does not exist', "code": "42P01"})

    client = SupabaseClient(settings, factory=lambda url, key: None)

    with pytest.raises(BackendError, match="does not exist") as exc:
        client.execute(Failing())

    assert not isinstance(exc.value, AuthError)
    assert exc.value.code == "42P01"


def test_expired_token_is_auth_error(client, fake_backend, session):
    fake_backend.expire_all()

    with pytest.raises(AuthError, match="JWT expired") as exc:
        client.execute(client.table(session, "sales_entries").select("*"))

    assert exc.value.code == "PGRST301"
