# services/session.py
"""
Supabase email/password sessions.

A SessionContext is created once at sign-in, stored in the signed FastHTML
session cookie, rebuilt read-only on every request, and cleared at sign-out.
Every store operation that needs the caller's identity receives it explicitly.
"""

import logging
from dataclasses import dataclass
from typing import Any, MutableMapping, Optional

from services.errors import AuthError, PermissionDeniedError
from services.models import UserProfile

logger = logging.getLogger(__name__)

SESSION_KEYS = (
    "auth",
    "user_id",
    "user_email",
    "access_token",
    "refresh_token",
)


@dataclass(frozen=True)
class SessionContext:
    """Identity of the signed-in user for one request."""

    user_id: str
    email: str
    access_token: str
    refresh_token: str = ""

    def store(self, sess: MutableMapping[str, Any]) -> None:
        sess["auth"] = True
        sess["user_id"] = self.user_id
        sess["user_email"] = self.email
        sess["access_token"] = self.access_token
        sess["refresh_token"] = self.refresh_token

    @classmethod
    def from_session(
        cls, sess: Optional[MutableMapping[str, Any]]
    ) -> Optional["SessionContext"]:
        """Rebuild the context from a session dict; None if not signed in."""
        if not sess or not sess.get("auth"):
            return None
        user_id = sess.get("user_id")
        token = sess.get("access_token")
        if not user_id or not token:
            return None
        return cls(
            user_id=user_id,
            email=sess.get("user_email") or "",
            access_token=token,
            refresh_token=sess.get("refresh_token") or "",
        )


def clear_session(sess: Optional[MutableMapping[str, Any]]) -> None:
    if not sess:
        return
    for key in SESSION_KEYS:
        sess.pop(key, None)


def _context_from_auth(response, email: str) -> Optional[SessionContext]:
    user = getattr(response, "user", None)
    session = getattr(response, "session", None)
    if user is None or session is None:
        return None
    return SessionContext(
        user_id=str(user.id),
        email=getattr(user, "email", None) or email,
        access_token=session.access_token,
        refresh_token=getattr(session, "refresh_token", None) or "",
    )


def sign_in(client, email: str, password: str) -> SessionContext:
    """
    Sign in with an email/password pair.

    Args:
        client: Throwaway Supabase client (or compatible fake); the session
            it receives is not shared with other requests
        email: Account email
        password: Account password

    Returns:
        SessionContext for the new session

    Raises:
        AuthError: Invalid credentials or auth service unavailable
    """
    if client is None:
        raise AuthError("Authentication service is not configured")

    email = (email or "").strip()
    if not email or not password:
        raise AuthError("Email and password are required")

    try:
        response = client.auth.sign_in_with_password(
            {"email": email, "password": password}
        )
    except Exception as e:
        logger.warning(f"Sign-in failed for {email}: {e}")
        raise AuthError("Invalid email or password") from e

    ctx = _context_from_auth(response, email)
    if ctx is None:
        logger.warning(f"Sign-in for {email} returned no session")
        raise AuthError("Invalid email or password")

    logger.info(f"User signed in: {email}")
    return ctx


def refresh_session(client, ctx: Optional[SessionContext]) -> Optional[SessionContext]:
    """Trade the context's refresh token for a new session; None if it is rejected."""
    if client is None or ctx is None or not ctx.refresh_token:
        return None
    try:
        response = client.auth.refresh_session(ctx.refresh_token)
    except Exception as e:
        logger.info(f"Session refresh rejected for {ctx.email}: {e}")
        return None
    refreshed = _context_from_auth(response, ctx.email)
    if refreshed is not None:
        logger.info(f"Session refreshed: {ctx.email}")
    return refreshed


def sign_out(client, ctx: Optional[SessionContext]) -> None:
    """Revoke only the caller's session. Local session clearing is the caller's job."""
    if client is None or ctx is None:
        return
    try:
        client.auth.admin.sign_out(ctx.access_token, "local")
        logger.info(f"User signed out: {ctx.email}")
    except Exception as e:
        # The local session is dropped regardless
        logger.warning(f"Remote sign-out failed for {ctx.email}: {e}")


def get_current_user(client, ctx: Optional[SessionContext]):
    """Return the auth user for the context's token, or None if it is no longer valid."""
    if client is None or ctx is None:
        return None
    try:
        response = client.auth.get_user(ctx.access_token)
    except Exception as e:
        logger.info(f"Session token rejected for {ctx.email}: {e}")
        return None
    return getattr(response, "user", None) if response else None


def require_admin(profile: Optional[UserProfile]) -> UserProfile:
    if profile is None or not profile.is_admin:
        raise PermissionDeniedError("Admin access required")
    return profile
