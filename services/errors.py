"""
errors.py
---------
Exception hierarchy for the dashboard services.
"""

from typing import Sequence


class DashboardError(Exception):
    """Base exception for dashboard errors."""


class AuthError(DashboardError):
    """Raised when sign-in fails or no valid session is present."""


class PermissionDeniedError(DashboardError):
    """Raised when a non-admin user calls an admin-only operation."""


class MalformedInputError(DashboardError):
    """Raised when an uploaded workbook cannot be decoded."""


class ValidationError(DashboardError):
    """Raised when form input fails a pre-call check."""

    def __init__(self, errors: Sequence[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class PersistenceError(DashboardError):
    """Raised when a Supabase store operation fails."""


class CascadeDeleteError(PersistenceError):
    """Raised when one step of an agency cascade delete fails.

    Steps listed in ``completed`` were already committed; there is no rollback.
    """

    def __init__(self, failed_step: str, completed: Sequence[str], cause: Exception):
        self.failed_step = failed_step
        self.completed = list(completed)
        self.cause = cause
        done = ", ".join(self.completed) if self.completed else "none"
        super().__init__(
            f"Cascade delete stopped at '{failed_step}' (committed: {done}): {cause}"
        )
