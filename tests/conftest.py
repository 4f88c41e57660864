"""
Pytest configuration for agency dashboard tests.
"""

import io
import os
import sys
from types import SimpleNamespace
from typing import Any, Dict, List, Optional, Sequence

import pytest
import xlsxwriter

# Ensure project root is importable
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

# Tests never talk to a real Supabase project; empty values also stop
# load_dotenv() from filling these in from a developer .env file.
os.environ["NEXT_PUBLIC_SUPABASE_URL"] = ""
os.environ["NEXT_PUBLIC_SUPABASE_ANON_KEY"] = ""
os.environ["SUPABASE_SERVICE_ROLE_KEY"] = ""
os.environ.setdefault("SESSION_SECRET", "test-session-secret")

import db  # noqa: E402
from constants import HEADER_FIELD_MAP  # noqa: E402

HEADERS = list(HEADER_FIELD_MAP)


# ==============================================================
# 🧠  Minimal in-memory Supabase stub
# ==============================================================
class FakeQuery:
    """Chainable query builder over FakeSupabase tables; runs on execute()."""

    def __init__(self, db: "FakeSupabase", name: str, token: Optional[str] = None):
        self.db = db
        self.name = name
        self.token = token
        self._op = "select"
        self._columns = "*"
        self._payload: Any = None
        self._filters: List[tuple] = []
        self._order: Optional[tuple] = None
        self._range: Optional[tuple] = None
        self._limit: Optional[int] = None

    def select(self, columns="*", **kwargs):
        self._op = "select"
        self._columns = columns
        return self

    def insert(self, payload):
        self._op = "insert"
        self._payload = payload
        return self

    def update(self, values):
        self._op = "update"
        self._payload = values
        return self

    def delete(self):
        self._op = "delete"
        return self

    def eq(self, key, val):
        self._filters.append((key, val))
        return self

    def order(self, column, desc=False, **kwargs):
        self._order = (column, desc)
        return self

    def range(self, start, end):
        self._range = (start, end)
        return self

    def limit(self, n):
        self._limit = n
        return self

    def _matches(self, row):
        return all(row.get(k) == v for k, v in self._filters)

    def _with_join(self, row):
        row = dict(row)
        if "agencies(" in self._columns and self.name != "agencies":
            agency = next(
                (a for a in self.db.tables["agencies"] if a["id"] == row.get("agency_id")),
                None,
            )
            row["agencies"] = {"name": agency["name"]} if agency else None
        return row

    def execute(self):
        self.db.calls.append((self.name, self._op, tuple(self._filters)))
        self.db.tokens.append(self.token)
        if (self.name, self._op) in self.db.fail_on:
            raise RuntimeError(f"{self._op} on {self.name} rejected")

        table = self.db.tables.setdefault(self.name, [])

        if self._op == "insert":
            payload = self._payload if isinstance(self._payload, list) else [self._payload]
            inserted = []
            for row in payload:
                row = dict(row)
                row.setdefault("id", self.db.next_id(self.name))
                row.setdefault("created_at", self.db.next_timestamp())
                table.append(row)
                inserted.append(dict(row))
            return SimpleNamespace(data=inserted)

        if self._op == "update":
            updated = []
            for row in table:
                if self._matches(row):
                    row.update(self._payload)
                    updated.append(dict(row))
            return SimpleNamespace(data=updated)

        if self._op == "delete":
            removed = [dict(r) for r in table if self._matches(r)]
            self.db.tables[self.name] = [r for r in table if not self._matches(r)]
            return SimpleNamespace(data=removed)

        rows = [self._with_join(r) for r in table if self._matches(r)]
        if self._order:
            column, desc = self._order
            rows = sorted(rows, key=lambda r: r.get(column) or 0, reverse=desc)
        if self._range:
            start, end = self._range
            rows = rows[start : end + 1]
        if self._limit is not None:
            rows = rows[: self._limit]
        return SimpleNamespace(data=rows)


class FakeAuthServer:
    """Token bookkeeping shared by every client built from one FakeSupabase.

    Each user starts with ``token-<user id>`` / ``refresh-<user id>``; a refresh
    issues ``token-<user id>-<n>``.
    """

    def __init__(self, users: Dict[str, tuple]):
        self.users = users  # email -> (password, user_id)
        self.access: Dict[str, str] = {}  # access token -> user id
        self.refresh: Dict[str, str] = {}  # refresh token -> user id
        self.revoked: List[str] = []
        self._issued = 0
        for _, user_id in users.values():
            self.access[f"token-{user_id}"] = user_id
            self.refresh[f"refresh-{user_id}"] = user_id

    def email_for(self, user_id: str) -> str:
        return next(e for e, (_, uid) in self.users.items() if uid == user_id)

    def session_for(self, user_id: str, fresh: bool = False):
        access, refresh = f"token-{user_id}", f"refresh-{user_id}"
        if fresh:
            self._issued += 1
            access, refresh = f"{access}-{self._issued}", f"{refresh}-{self._issued}"
        self.access[access] = user_id
        self.refresh[refresh] = user_id
        return SimpleNamespace(
            user=SimpleNamespace(id=user_id, email=self.email_for(user_id)),
            session=SimpleNamespace(access_token=access, refresh_token=refresh),
        )

    def expire(self, access_token: str) -> None:
        self.access.pop(access_token, None)

    def revoke(self, access_token: str) -> None:
        self.access.pop(access_token, None)
        self.revoked.append(access_token)


class FakeAuthAdmin:
    def __init__(self, server: FakeAuthServer):
        self.server = server

    def sign_out(self, jwt, scope="global"):
        self.server.revoke(jwt)


class FakeAuth:
    """Email/password auth stub; keeps the last session like a real client."""

    def __init__(self, server: FakeAuthServer):
        self.server = server
        self.admin = FakeAuthAdmin(server)
        self.current_session = None

    def sign_in_with_password(self, credentials):
        entry = self.server.users.get(credentials.get("email"))
        if entry is None or entry[0] != credentials.get("password"):
            raise RuntimeError("Invalid login credentials")
        response = self.server.session_for(entry[1])
        self.current_session = response.session
        return response

    def refresh_session(self, refresh_token=None):
        user_id = self.server.refresh.pop(refresh_token, None)
        if user_id is None:
            raise RuntimeError("Invalid Refresh Token")
        response = self.server.session_for(user_id, fresh=True)
        self.current_session = response.session
        return response

    def sign_out(self):
        # Revokes whatever session this client happens to hold
        if self.current_session is not None:
            self.server.revoke(self.current_session.access_token)
            self.current_session = None

    def get_session(self):
        return self.current_session

    def get_user(self, jwt=None):
        user_id = self.server.access.get(jwt)
        if user_id is None:
            raise RuntimeError("invalid JWT")
        return SimpleNamespace(
            user=SimpleNamespace(id=user_id, email=self.server.email_for(user_id))
        )


class FakeUserClient:
    """A client bound to one access token, sharing the parent fake's tables."""

    def __init__(self, db: "FakeSupabase", access_token: Optional[str]):
        self.db = db
        self.access_token = access_token
        self.auth = FakeAuth(db.auth_server)

    def table(self, name):
        return FakeQuery(self.db, name, self.access_token)


class FakeSupabase:
    """In-memory stand-in for the Supabase client used by db.py."""

    def __init__(self, users: Optional[Dict[str, tuple]] = None):
        self.tables: Dict[str, List[dict]] = {
            "agencies": [],
            "profiles": [],
            "creator_data": [],
        }
        self.calls: List[tuple] = []
        # Token each executed query ran with (None for the shared client)
        self.tokens: List[Optional[str]] = []
        self.fail_on: set = set()
        self.auth_server = FakeAuthServer(users or {})
        self.auth = FakeAuth(self.auth_server)
        self._ids = 0
        self._clock = 0

    def next_id(self, table: str) -> str:
        self._ids += 1
        return f"{table}-{self._ids}"

    def next_timestamp(self) -> str:
        self._clock += 1
        return f"2024-12-01T00:00:{self._clock:02d}+00:00"

    def table(self, name):
        return FakeQuery(self, name)

    def for_token(self, access_token: Optional[str] = None) -> FakeUserClient:
        return FakeUserClient(self, access_token)


def creator_row(
    period="12월1주",
    agency_id="ag-star",
    creator_id="c1",
    group_name="A",
    diamonds=0,
    new_followers=0,
    days_joined=100,
    **extra,
) -> dict:
    row = {
        "period": period,
        "agency_id": agency_id,
        "creator_id": creator_id,
        "creator_username": extra.pop("creator_username", f"user_{creator_id}"),
        "group_name": group_name,
        "agent": extra.pop("agent", "agent1"),
        "days_joined": days_joined,
        "diamonds": diamonds,
        "last_month_diamonds": 0,
        "new_followers": new_followers,
        "live_hours": "",
        "live_days": 0,
    }
    row.update(extra)
    return row


# ==============================================================
# 🔧 Shared fixtures
# ==============================================================
ADMIN_EMAIL = "admin@agency.test"
USER_EMAIL = "user@agency.test"
PASSWORD = "secret-pass"


@pytest.fixture
def fake_db():
    """Seeded fake with two agencies, an admin, a regular user and a few rows."""
    fake = FakeSupabase(
        users={ADMIN_EMAIL: (PASSWORD, "u-admin"), USER_EMAIL: (PASSWORD, "u-user")}
    )
    fake.tables["agencies"] = [
        {"id": "ag-star", "name": "Star"},
        {"id": "ag-nova", "name": "Nova"},
    ]
    fake.tables["profiles"] = [
        {"id": "u-admin", "email": ADMIN_EMAIL, "role": "admin", "agency_id": None},
        {"id": "u-user", "email": USER_EMAIL, "role": "user", "agency_id": "ag-star"},
        {"id": "u-nova", "email": "nova@agency.test", "role": "user", "agency_id": "ag-nova"},
    ]
    fake.tables["creator_data"] = [
        creator_row(creator_id="c1", group_name="A", diamonds=500, created_at="2024-12-01T00:00:01+00:00"),
        creator_row(creator_id="c2", group_name="B", diamonds=300, created_at="2024-12-01T00:00:02+00:00"),
        creator_row(
            period="12월2주",
            agency_id="ag-nova",
            creator_id="c3",
            group_name="A",
            diamonds=100,
            created_at="2024-12-08T00:00:01+00:00",
        ),
    ]
    return fake


@pytest.fixture
def use_fake_db(fake_db):
    """Install the fake as the global client for the duration of a test."""
    db.set_supabase_client(fake_db, fake_db.for_token)
    yield fake_db
    db.set_supabase_client(None)


@pytest.fixture
def make_workbook():
    """Build .xlsx bytes from a header row and value rows."""

    def _make(rows: Sequence[Sequence[Any]], headers: Sequence[str] = HEADERS) -> bytes:
        buf = io.BytesIO()
        workbook = xlsxwriter.Workbook(buf, {"in_memory": True})
        sheet = workbook.add_worksheet("Sheet1")
        sheet.write_row(0, 0, list(headers))
        for i, row in enumerate(rows, start=1):
            for j, value in enumerate(row):
                if value is not None:
                    sheet.write(i, j, value)
        workbook.close()
        return buf.getvalue()

    return _make
