"""
Database operations module.
Handles Supabase client initialization, logging setup, and table operations
for agencies, profiles and uploaded creator data.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Protocol

from supabase import Client, ClientOptions, create_client
from tenacity import retry, stop_after_attempt, wait_exponential

from constants import (
    AGENCIES_TABLE,
    AGENCY_JOIN,
    CREATOR_DATA_TABLE,
    PROFILES_TABLE,
    ROLES,
)
from services.config import DashboardConfig
from services.errors import CascadeDeleteError, PersistenceError
from services.models import Agency, BatchSummary, CreatorRecord, UserProfile
from services.session import SessionContext

# Use a dedicated DB logger
logger = logging.getLogger("dash_db")

# PostgREST caps a single select at this many rows
PAGE_SIZE = 1000


# ==============================================================
# 🧩 Protocol-based Dependency Injection
# ==============================================================


class SupabaseLike(Protocol):
    """Protocol to allow fake/mocked Supabase clients in tests."""

    def table(self, name: str) -> Any: ...


# Global Supabase client
supabase_client: Optional[SupabaseLike] = None

# Builds a private client carrying one user's token (None for an anonymous one)
UserClientFactory = Callable[[Optional[str]], SupabaseLike]
user_client_factory: Optional[UserClientFactory] = None


def set_supabase_client(
    client: Optional[SupabaseLike],
    user_factory: Optional[UserClientFactory] = None,
) -> None:
    """Dependency injection hook for tests."""
    global supabase_client, user_client_factory
    supabase_client = client
    user_client_factory = user_factory
    logger.info("[DB] Supabase client overridden")


def get_supabase() -> Optional[SupabaseLike]:
    """Return the current client (None when running without Supabase)."""
    return supabase_client


def auth_client() -> Optional[SupabaseLike]:
    """Return a fresh anonymous client for sign-in and token refresh.

    Sessions obtained through it stay on that throwaway client, so the shared
    client never holds any user's session.
    """
    if user_client_factory is None:
        return None
    return user_client_factory(None)


def _user_factory(url: str, key: str) -> UserClientFactory:
    def build(access_token: Optional[str] = None) -> Client:
        options = ClientOptions(persist_session=False, auto_refresh_token=False)
        if access_token:
            options = ClientOptions(
                headers={"Authorization": f"Bearer {access_token}"},
                persist_session=False,
                auto_refresh_token=False,
            )
        return create_client(url, key, options=options)

    return build


def setup_logging():
    """Configure logging for the application.

    This function should be called at application startup.
    It configures the logging format and level.
    """
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=4, max=10),
    reraise=True,
)
def _connect(url: str, key: str) -> Client:
    client = create_client(url, key)
    # Test the connection
    client.auth.get_session()
    return client


def init_supabase(
    config: Optional[DashboardConfig] = None, service_role: bool = False
) -> Optional[SupabaseLike]:
    """Initialize the Supabase client once.

    Args:
        config: Settings to use (defaults to the environment)
        service_role: Use the service-role key instead of the anon key (CLI only)

    Returns:
        Optional[Client]: Supabase client if initialization succeeds, None otherwise

    Note:
        - Client creation is retried up to 3 times with exponential backoff
        - Returns None instead of raising so the app can run without Supabase
    """
    global supabase_client, user_client_factory

    # Return existing client if already initialized
    if supabase_client is not None:
        return supabase_client

    config = config or DashboardConfig.from_env()
    key = config.supabase_service_key if service_role else config.supabase_anon_key
    if not config.supabase_url or not key:
        logger.warning(
            "Missing Supabase environment variables - running without Supabase"
        )
        return None

    try:
        supabase_client = _connect(config.supabase_url, key)
        if config.supabase_anon_key:
            user_client_factory = _user_factory(
                config.supabase_url, config.supabase_anon_key
            )
        logger.info("Supabase client initialized successfully")
        return supabase_client
    except Exception as e:
        logger.error(f"Failed to initialize Supabase client: {e}")
        return None


# --- General DB Helpers ---
def _scoped(ctx: Optional[SessionContext]) -> SupabaseLike:
    """Return a client that runs queries as the caller for row-level security.

    Signed-in callers get their own client per call and the shared client is
    never re-authenticated. Without a context (CLI) the shared client is used.
    """
    client = supabase_client
    if client is None:
        raise PersistenceError("Supabase client not available")
    if ctx is None:
        return client
    if user_client_factory is None:
        raise PersistenceError("Per-user Supabase client not available")
    return user_client_factory(ctx.access_token)


def _failure(action: str, e: Exception) -> PersistenceError:
    logger.exception(f"[DB] {action} failed: {e}")
    return PersistenceError(f"{action} failed: {e}")


def _select_all(build: Callable[[], Any]) -> List[Dict[str, Any]]:
    """Run a select page by page until a short page comes back."""
    rows: List[Dict[str, Any]] = []
    start = 0
    while True:
        response = build().range(start, start + PAGE_SIZE - 1).execute()
        page = response.data or []
        rows.extend(page)
        if len(page) < PAGE_SIZE:
            return rows
        start += PAGE_SIZE


# --- Profiles ---
def fetch_profile(ctx: SessionContext) -> Optional[UserProfile]:
    """Return the signed-in user's profile (with agency name), or None."""
    client = _scoped(ctx)
    try:
        response = (
            client.table(PROFILES_TABLE)
            .select(f"*, {AGENCY_JOIN}")
            .eq("id", ctx.user_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        raise _failure(f"Loading profile {ctx.user_id}", e) from e

    if not response.data:
        logger.warning(f"[DB] No profile row for user {ctx.user_id}")
        return None
    return UserProfile.from_row(response.data[0])


def fetch_profiles(ctx: SessionContext) -> List[UserProfile]:
    client = _scoped(ctx)
    try:
        response = client.table(PROFILES_TABLE).select(f"*, {AGENCY_JOIN}").execute()
    except Exception as e:
        raise _failure("Loading profiles", e) from e
    return [UserProfile.from_row(row) for row in response.data or []]


def update_profile_agency(
    ctx: SessionContext, user_id: str, agency_id: Optional[str]
) -> None:
    """Assign a user to an agency; an empty agency id unassigns them."""
    client = _scoped(ctx)
    try:
        client.table(PROFILES_TABLE).update({"agency_id": agency_id or None}).eq(
            "id", user_id
        ).execute()
    except Exception as e:
        raise _failure(f"Updating agency of user {user_id}", e) from e
    logger.info(f"[DB] User {user_id} agency -> {agency_id or 'none'}")


def update_profile_role(ctx: SessionContext, user_id: str, role: str) -> None:
    if role not in ROLES:
        raise PersistenceError(f"Unknown role: {role}")
    client = _scoped(ctx)
    try:
        client.table(PROFILES_TABLE).update({"role": role}).eq("id", user_id).execute()
    except Exception as e:
        raise _failure(f"Updating role of user {user_id}", e) from e
    logger.info(f"[DB] User {user_id} role -> {role}")


def delete_profile(ctx: SessionContext, user_id: str) -> None:
    client = _scoped(ctx)
    try:
        client.table(PROFILES_TABLE).delete().eq("id", user_id).execute()
    except Exception as e:
        raise _failure(f"Deleting user {user_id}", e) from e
    logger.info(f"[DB] Deleted profile {user_id}")


# --- Agencies ---
def fetch_agencies(ctx: SessionContext, order_by_name: bool = False) -> List[Agency]:
    client = _scoped(ctx)
    try:
        query = client.table(AGENCIES_TABLE).select("*")
        if order_by_name:
            query = query.order("name")
        response = query.execute()
    except Exception as e:
        raise _failure("Loading agencies", e) from e
    return [Agency.from_row(row) for row in response.data or []]


def create_agency(ctx: SessionContext, name: str) -> Optional[Agency]:
    """Insert a new agency; the name is expected to be validated already."""
    client = _scoped(ctx)
    try:
        response = client.table(AGENCIES_TABLE).insert({"name": name.strip()}).execute()
    except Exception as e:
        raise _failure(f"Creating agency '{name}'", e) from e
    logger.info(f"[DB] Created agency '{name.strip()}'")
    return Agency.from_row(response.data[0]) if response.data else None


@dataclass(frozen=True)
class CascadeStep:
    """Delete every row of ``table`` whose ``column`` equals the agency id."""

    name: str
    table: str
    column: str


# Dependents first, the agency row last
AGENCY_CASCADE: tuple = (
    CascadeStep("creator_data", CREATOR_DATA_TABLE, "agency_id"),
    CascadeStep("profiles", PROFILES_TABLE, "agency_id"),
    CascadeStep("agency", AGENCIES_TABLE, "id"),
)


def delete_agency(
    ctx: SessionContext, agency_id: str, steps: Iterable[CascadeStep] = AGENCY_CASCADE
) -> List[str]:
    """
    Delete an agency and everything that references it.

    Steps run in order as independent calls. The first failing step stops the
    cascade; earlier steps stay committed.

    Returns:
        Names of the completed steps

    Raises:
        CascadeDeleteError: Naming the failed step and the committed ones
    """
    client = _scoped(ctx)
    completed: List[str] = []
    for step in steps:
        try:
            client.table(step.table).delete().eq(step.column, agency_id).execute()
        except Exception as e:
            logger.exception(
                f"[DB] Agency {agency_id} cascade failed at {step.name} "
                f"(completed: {completed}): {e}"
            )
            raise CascadeDeleteError(step.name, completed, e) from e
        completed.append(step.name)
        logger.info(f"[DB] Agency {agency_id} cascade: {step.name} deleted")
    return completed


# --- Creator data ---
def fetch_creator_data(ctx: Optional[SessionContext]) -> List[CreatorRecord]:
    """All visible creator records, diamonds descending, with agency names."""
    client = _scoped(ctx)
    try:
        rows = _select_all(
            lambda: client.table(CREATOR_DATA_TABLE)
            .select(f"*, {AGENCY_JOIN}")
            .order("diamonds", desc=True)
        )
    except Exception as e:
        raise _failure("Loading creator data", e) from e
    logger.debug(f"[DB] Loaded {len(rows)} creator rows")
    return [CreatorRecord.from_row(row) for row in rows]


def insert_creator_records(
    ctx: Optional[SessionContext], records: List[CreatorRecord]
) -> int:
    """Insert a parsed upload as one batch call. Returns the number of rows sent."""
    if not records:
        return 0
    client = _scoped(ctx)
    try:
        client.table(CREATOR_DATA_TABLE).insert([r.to_row() for r in records]).execute()
    except Exception as e:
        raise _failure(f"Inserting {len(records)} creator rows", e) from e
    logger.info(
        f"[DB] Inserted {len(records)} rows for period={records[0].period}, "
        f"agency={records[0].agency_id}"
    )
    return len(records)


def summarize_batches(rows: Iterable[Dict[str, Any]]) -> List[BatchSummary]:
    """Count rows per (period, agency_id) in first-seen order."""
    batches: Dict[tuple, BatchSummary] = {}
    for row in rows:
        key = (row.get("period") or "", str(row.get("agency_id") or ""))
        batch = batches.get(key)
        if batch is None:
            joined = row.get("agencies")
            batch = BatchSummary(
                period=key[0],
                agency_id=key[1],
                agency_name=joined.get("name") if isinstance(joined, dict) else None,
            )
            batches[key] = batch
        batch.count += 1
    return list(batches.values())


def fetch_batches(ctx: Optional[SessionContext]) -> List[BatchSummary]:
    """Uploaded batches, most recent upload first."""
    client = _scoped(ctx)
    try:
        rows = _select_all(
            lambda: client.table(CREATOR_DATA_TABLE)
            .select(f"period, agency_id, {AGENCY_JOIN}")
            .order("created_at", desc=True)
        )
    except Exception as e:
        raise _failure("Loading uploaded batches", e) from e
    return summarize_batches(rows)


def delete_batch(ctx: SessionContext, period: str, agency_id: str) -> None:
    client = _scoped(ctx)
    try:
        client.table(CREATOR_DATA_TABLE).delete().eq("period", period).eq(
            "agency_id", agency_id
        ).execute()
    except Exception as e:
        raise _failure(f"Deleting batch {period}/{agency_id}", e) from e
    logger.info(f"[DB] Deleted batch period={period}, agency={agency_id}")
