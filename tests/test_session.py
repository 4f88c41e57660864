import pytest

from conftest import ADMIN_EMAIL, PASSWORD, USER_EMAIL
from services.errors import AuthError, PermissionDeniedError
from services.models import UserProfile
from services.session import (
    SESSION_KEYS,
    SessionContext,
    clear_session,
    get_current_user,
    refresh_session,
    require_admin,
    sign_in,
    sign_out,
)


def test_sign_in_returns_context(fake_db):
    ctx = sign_in(fake_db.for_token(), f"  {ADMIN_EMAIL} ", PASSWORD)
    assert ctx == SessionContext(
        user_id="u-admin",
        email=ADMIN_EMAIL,
        access_token="token-u-admin",
        refresh_token="refresh-u-admin",
    )


@pytest.mark.parametrize(
    "email, password", [(ADMIN_EMAIL, "wrong"), ("nobody@x.test", PASSWORD), ("", PASSWORD)]
)
def test_sign_in_rejects_bad_credentials(fake_db, email, password):
    with pytest.raises(AuthError):
        sign_in(fake_db, email, password)


def test_sign_in_without_client():
    with pytest.raises(AuthError):
        sign_in(None, ADMIN_EMAIL, PASSWORD)


def test_context_round_trips_through_session_dict():
    ctx = SessionContext("u1", "a@b.test", "tok", "ref")
    sess = {"flash": {"type": "info", "message": "hi"}}
    ctx.store(sess)
    assert SessionContext.from_session(sess) == ctx

    clear_session(sess)
    assert not any(key in sess for key in SESSION_KEYS)
    assert "flash" in sess
    assert SessionContext.from_session(sess) is None


def test_partial_session_is_not_signed_in():
    assert SessionContext.from_session({"auth": True, "user_id": "u1"}) is None
    assert SessionContext.from_session(None) is None


def test_sign_out_revokes_only_the_callers_token(fake_db):
    admin = sign_in(fake_db.for_token(), ADMIN_EMAIL, PASSWORD)
    # The shared client holds someone else's session
    fake_db.auth.sign_in_with_password({"email": USER_EMAIL, "password": PASSWORD})

    sign_out(fake_db, admin)

    assert fake_db.auth_server.revoked == ["token-u-admin"]
    assert get_current_user(fake_db, admin) is None
    assert fake_db.auth.get_session().access_token == "token-u-user"


def test_sign_in_leaves_shared_client_without_session(fake_db):
    sign_in(fake_db.for_token(), ADMIN_EMAIL, PASSWORD)
    assert fake_db.auth.get_session() is None


def test_get_current_user(fake_db):
    valid = SessionContext("u-admin", ADMIN_EMAIL, "token-u-admin")
    stale = SessionContext("u-admin", ADMIN_EMAIL, "expired")
    assert get_current_user(fake_db, valid).id == "u-admin"
    assert get_current_user(fake_db, stale) is None


def test_refresh_session_replaces_expired_token(fake_db):
    ctx = sign_in(fake_db.for_token(), ADMIN_EMAIL, PASSWORD)
    fake_db.auth_server.expire(ctx.access_token)

    fresh = refresh_session(fake_db.for_token(), ctx)

    assert fresh.user_id == "u-admin"
    assert fresh.email == ADMIN_EMAIL
    assert fresh.access_token != ctx.access_token
    assert fresh.refresh_token != ctx.refresh_token
    assert get_current_user(fake_db, fresh).id == "u-admin"


def test_refresh_session_rejected(fake_db):
    used = SessionContext("u-admin", ADMIN_EMAIL, "expired", "refresh-unknown")
    assert refresh_session(fake_db.for_token(), used) is None
    assert refresh_session(fake_db.for_token(), SessionContext("u", "e", "t")) is None
    assert refresh_session(None, used) is None


def test_require_admin():
    admin = UserProfile(id="a", role="admin")
    assert require_admin(admin) is admin
    with pytest.raises(PermissionDeniedError):
        require_admin(UserProfile(id="u", role="user"))
    with pytest.raises(PermissionDeniedError):
        require_admin(None)
