"""
Admin controller: agency, user and uploaded-batch management.

Every handler checks the admin role first; non-admins are sent back to the
dashboard. Mutations redirect to the admin tab they came from with a flash
message describing the outcome.
"""

import logging
from typing import Callable, Optional, Tuple

from fasthtml.common import *

from controllers.auth_routes import pop_flash, redirect_to_login, set_flash, verified_session
from db import (
    create_agency,
    delete_agency,
    delete_batch,
    delete_profile,
    fetch_agencies,
    fetch_batches,
    fetch_profile,
    fetch_profiles,
    update_profile_agency,
    update_profile_role,
)
from services.errors import (
    CascadeDeleteError,
    DashboardError,
    PermissionDeniedError,
    PersistenceError,
    ValidationError,
)
from services.session import SessionContext, require_admin
from validators import (
    AgencyForm,
    AgencyValidator,
    RoleChange,
    RoleValidator,
)
from views.admin import TAB_AGENCIES, TAB_DATA, TAB_USERS, normalize_admin_tab, render_admin_page

logger = logging.getLogger(__name__)


def _admin_guard(sess) -> Tuple[Optional[SessionContext], Optional[RedirectResponse]]:
    """Return (ctx, None) for an admin, or (None, redirect) otherwise."""
    ctx = verified_session(sess)
    if ctx is None:
        return None, redirect_to_login()
    try:
        require_admin(fetch_profile(ctx))
    except PermissionDeniedError:
        logger.info(f"Non-admin {ctx.email} sent back to the dashboard")
        return None, RedirectResponse("/dashboard", status_code=303)
    except PersistenceError as e:
        set_flash(sess, str(e))
        return None, RedirectResponse("/dashboard", status_code=303)
    return ctx, None


def _admin_action(
    sess,
    tab: str,
    action: Callable[[SessionContext], Optional[str]],
    failure_prefix: str,
):
    """Run one admin mutation and redirect back to ``tab`` with a flash message."""
    ctx, redirect = _admin_guard(sess)
    if redirect is not None:
        return redirect

    try:
        done = action(ctx)
    except CascadeDeleteError as e:
        logger.error(f"Cascade delete by {ctx.email} incomplete: {e}")
        set_flash(sess, f"{failure_prefix}: {e}")
    except DashboardError as e:
        logger.warning(f"Admin action by {ctx.email} failed: {e}")
        set_flash(sess, f"{failure_prefix}: {e}")
    else:
        if done:
            set_flash(sess, done, "success")

    return RedirectResponse(f"/admin?tab={tab}", status_code=303)


# --- Page ---
def admin_controller(sess, tab: str = ""):
    ctx, redirect = _admin_guard(sess)
    if redirect is not None:
        return redirect

    tab = normalize_admin_tab(tab)
    profiles, batches = [], []
    try:
        agencies = fetch_agencies(ctx, order_by_name=True)
        if tab == TAB_USERS:
            profiles = fetch_profiles(ctx)
        elif tab == TAB_DATA:
            batches = fetch_batches(ctx)
    except PersistenceError as e:
        set_flash(sess, str(e))
        agencies = []

    return render_admin_page(
        email=ctx.email,
        tab=tab,
        agencies=agencies,
        profiles=profiles,
        batches=batches,
        flash=pop_flash(sess),
    )


# --- Agencies ---
def create_agency_controller(sess, name: str):
    def _create(ctx):
        form = AgencyForm(name=name)
        errors = AgencyValidator.validate(form)
        if errors:
            raise ValidationError(errors)
        create_agency(ctx, form.name)
        return f"'{form.name}' 에이전시를 추가했습니다"

    return _admin_action(sess, TAB_AGENCIES, _create, "추가 실패")


def delete_agency_controller(sess, agency_id: str):
    def _delete(ctx):
        delete_agency(ctx, agency_id)
        return "에이전시를 삭제했습니다"

    return _admin_action(sess, TAB_AGENCIES, _delete, "삭제 실패")


# --- Users ---
def update_user_agency_controller(sess, user_id: str, agency_id: str = ""):
    def _update(ctx):
        update_profile_agency(ctx, user_id, agency_id)
        return "에이전시를 변경했습니다"

    return _admin_action(sess, TAB_USERS, _update, "변경 실패")


def update_user_role_controller(sess, user_id: str, role: str):
    def _update(ctx):
        errors = RoleValidator.validate(RoleChange(user_id=user_id, role=role))
        if errors:
            raise ValidationError(errors)
        update_profile_role(ctx, user_id, role)
        return "역할을 변경했습니다"

    return _admin_action(sess, TAB_USERS, _update, "변경 실패")


def delete_user_controller(sess, user_id: str):
    def _delete(ctx):
        delete_profile(ctx, user_id)
        return "사용자를 삭제했습니다"

    return _admin_action(sess, TAB_USERS, _delete, "삭제 실패")


# --- Uploaded data ---
def delete_batch_controller(sess, period: str, agency_id: str):
    def _delete(ctx):
        delete_batch(ctx, period, agency_id)
        return f"{period} 데이터를 삭제했습니다"

    return _admin_action(sess, TAB_DATA, _delete, "삭제 실패")
