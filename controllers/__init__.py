"""
Controller functions for route handlers.

All controllers are plain functions that:
- Take the session and request data as parameters
- Return FT components or Response objects
- Report outcomes to the next page through session flash messages
- Don't use @rt decorators (those stay in main.py)
"""

from .admin import (
    admin_controller,
    create_agency_controller,
    delete_agency_controller,
    delete_batch_controller,
    delete_user_controller,
    update_user_agency_controller,
    update_user_role_controller,
)
from .auth_routes import (
    build_login_page,
    build_logout_response,
    login_controller,
)
from .dashboard import dashboard_controller, upload_controller

__all__ = [
    # Auth
    "build_login_page",
    "build_logout_response",
    "login_controller",
    # Dashboard
    "dashboard_controller",
    "upload_controller",
    # Admin
    "admin_controller",
    "create_agency_controller",
    "delete_agency_controller",
    "delete_batch_controller",
    "delete_user_controller",
    "update_user_agency_controller",
    "update_user_role_controller",
]
