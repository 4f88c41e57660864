# services/config.py
import os
from dataclasses import dataclass


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


@dataclass(frozen=True)
class DashboardConfig:
    """Configuration for the dashboard app and CLI."""

    # Supabase
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_service_key: str = ""
    # FastHTML session signing
    session_secret: str = ""
    # Aggregation
    creator_view_limit: int = 50
    new_creator_days: int = 30

    @classmethod
    def from_env(cls) -> "DashboardConfig":
        """Build config from the current environment (call after load_dotenv)."""
        return cls(
            supabase_url=os.getenv("NEXT_PUBLIC_SUPABASE_URL", ""),
            supabase_anon_key=os.getenv("NEXT_PUBLIC_SUPABASE_ANON_KEY", ""),
            supabase_service_key=os.getenv("SUPABASE_SERVICE_ROLE_KEY", ""),
            session_secret=os.getenv("SESSION_SECRET", ""),
            creator_view_limit=_int_env("CREATOR_VIEW_LIMIT", 50),
            new_creator_days=_int_env("NEW_CREATOR_DAYS", 30),
        )
