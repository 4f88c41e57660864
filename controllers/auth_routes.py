"""
Authentication route handlers and utilities.
Note: @rt decorators stay in main.py, but business logic goes here.
"""

import logging
from typing import Optional

from fasthtml.common import *

from db import auth_client, get_supabase
from services.errors import AuthError
from services.session import (
    SessionContext,
    clear_session,
    get_current_user,
    refresh_session,
    sign_in,
    sign_out,
)
from views.login import LOGIN_ERROR, render_login_page

logger = logging.getLogger(__name__)


# --- Flash messages ---
def set_flash(sess, message: str, type: str = "error") -> None:
    """Stash a one-shot message for the next page render."""
    if sess is not None:
        sess["flash"] = {"type": type, "message": message}


def pop_flash(sess) -> Optional[dict]:
    return sess.pop("flash", None) if sess is not None else None


# --- Session guard ---
def current_session(sess) -> Optional[SessionContext]:
    """Signed-in identity stored in the cookie, unchecked."""
    return SessionContext.from_session(sess)


def verified_session(sess) -> Optional[SessionContext]:
    """
    Signed-in identity whose token the auth service still accepts.

    An expired access token is traded for a new one through the stored refresh
    token. When that fails as well the local session is cleared, so the user
    lands on the login page instead of a page that can only fail.
    """
    ctx = current_session(sess)
    client = get_supabase()
    if ctx is None or client is None:
        return ctx
    if get_current_user(client, ctx) is not None:
        return ctx

    refreshed = refresh_session(auth_client(), ctx)
    if refreshed is None:
        logger.info(f"Session expired for {ctx.email}, signing out locally")
        clear_session(sess)
        return None
    refreshed.store(sess)
    return refreshed


def redirect_to_login():
    return RedirectResponse("/", status_code=303)


# --- Handlers ---
def build_login_page(sess):
    """Login page, or straight to the dashboard when already signed in."""
    if verified_session(sess) is not None:
        return RedirectResponse("/dashboard", status_code=303)
    return render_login_page()


def login_controller(sess, email: str, password: str):
    try:
        ctx = sign_in(auth_client(), email, password)
    except AuthError as e:
        logger.info(f"Login rejected: {e}")
        return render_login_page(error=LOGIN_ERROR, email=(email or "").strip())

    clear_session(sess)
    ctx.store(sess)
    return RedirectResponse("/dashboard", status_code=303)


def build_logout_response(sess):
    """Sign out remotely, drop the local session and go back to the login page."""
    sign_out(get_supabase(), current_session(sess))
    clear_session(sess)
    sess.pop("flash", None)
    return redirect_to_login()
