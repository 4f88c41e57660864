"""
Main entry point for the agency dashboard web app.
Routes stay thin; controllers hold the request logic.
"""

import logging

from dotenv import load_dotenv
from fasthtml.common import *
from monsterui.all import Theme

from controllers import (
    admin_controller,
    build_login_page,
    build_logout_response,
    create_agency_controller,
    dashboard_controller,
    delete_agency_controller,
    delete_batch_controller,
    delete_user_controller,
    login_controller,
    update_user_agency_controller,
    update_user_role_controller,
    upload_controller,
)
from db import init_supabase, setup_logging
from services.config import DashboardConfig

# Get logger instance
logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()
config = DashboardConfig.from_env()

# --- App Initialization ---
hdrs = Theme.blue.headers()

app, rt = fast_app(
    hdrs=hdrs,
    title="에이전시 대시보드",
    secret_key=config.session_secret or None,
    meta=[
        {"charset": "UTF-8"},
        {"name": "viewport", "content": "width=device-width, initial-scale=1.0"},
    ],
)


# Initialize application components
def init_app():
    """Initialize application components.

    This function should be called at application startup.
    It sets up logging and initializes the Supabase client.
    """
    setup_logging()

    client = init_supabase(config)
    if client is not None:
        logger.info("Supabase integration enabled successfully")
    else:
        logger.warning("Running without Supabase integration")


init_app()


# --- Auth ---
@rt("/")
def index(sess):
    return build_login_page(sess)


@rt("/login", methods=["POST"])
def login(sess, email: str = "", password: str = ""):
    return login_controller(sess, email, password)


@rt("/logout")
def logout(sess):
    return build_logout_response(sess)


# --- Dashboard ---
@rt("/dashboard")
def dashboard(sess, period: str = "", group: str = "", tab: str = ""):
    return dashboard_controller(sess, period=period, group=group, tab=tab)


@rt("/dashboard/upload", methods=["POST"])
async def dashboard_upload(
    sess, period: str = "", agency_id: str = "", file: UploadFile = None
):
    content = await file.read() if file is not None else b""
    filename = file.filename if file is not None else None
    return upload_controller(sess, period, agency_id, filename, content)


# --- Admin ---
@rt("/admin")
def admin(sess, tab: str = ""):
    return admin_controller(sess, tab)


@rt("/admin/agencies", methods=["POST"])
def admin_create_agency(sess, name: str = ""):
    return create_agency_controller(sess, name)


@rt("/admin/agencies/{agency_id}/delete", methods=["POST"])
def admin_delete_agency(sess, agency_id: str):
    return delete_agency_controller(sess, agency_id)


@rt("/admin/users/{user_id}/agency", methods=["POST"])
def admin_user_agency(sess, user_id: str, agency_id: str = ""):
    return update_user_agency_controller(sess, user_id, agency_id)


@rt("/admin/users/{user_id}/role", methods=["POST"])
def admin_user_role(sess, user_id: str, role: str = ""):
    return update_user_role_controller(sess, user_id, role)


@rt("/admin/users/{user_id}/delete", methods=["POST"])
def admin_delete_user(sess, user_id: str):
    return delete_user_controller(sess, user_id)


@rt("/admin/batches/delete", methods=["POST"])
def admin_delete_batch(sess, period: str = "", agency_id: str = ""):
    return delete_batch_controller(sess, period, agency_id)


serve()
