# services/models.py
"""Row models for agencies, profiles and uploaded creator records."""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional

from constants import ROLE_ADMIN, ROLE_USER


def _joined_name(row: Dict[str, Any]) -> Optional[str]:
    """Read the name out of an ``agencies(name)`` join expansion."""
    joined = row.get("agencies")
    if isinstance(joined, dict):
        return joined.get("name")
    return None


@dataclass(frozen=True)
class CreatorRecord:
    """One creator's metrics for a single (period, agency) batch."""

    period: str
    agency_id: str
    creator_id: str = ""
    creator_username: str = ""
    group_name: str = ""
    agent: str = ""
    days_joined: int = 0
    diamonds: int = 0
    last_month_diamonds: int = 0
    new_followers: int = 0
    live_hours: str = ""
    live_days: int = 0
    # Read-side extras, never written back
    agency_name: Optional[str] = field(default=None, compare=False)
    created_at: Optional[str] = field(default=None, compare=False)

    def to_row(self) -> Dict[str, Any]:
        """Insert payload for the creator_data table."""
        row = asdict(self)
        row.pop("agency_name")
        row.pop("created_at")
        return row

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "CreatorRecord":
        def _int(key: str) -> int:
            value = row.get(key)
            return int(value) if value is not None else 0

        def _str(key: str) -> str:
            value = row.get(key)
            return str(value) if value is not None else ""

        return cls(
            period=_str("period"),
            agency_id=_str("agency_id"),
            creator_id=_str("creator_id"),
            creator_username=_str("creator_username"),
            group_name=_str("group_name"),
            agent=_str("agent"),
            days_joined=_int("days_joined"),
            diamonds=_int("diamonds"),
            last_month_diamonds=_int("last_month_diamonds"),
            new_followers=_int("new_followers"),
            live_hours=_str("live_hours"),
            live_days=_int("live_days"),
            agency_name=_joined_name(row),
            created_at=row.get("created_at"),
        )


@dataclass(frozen=True)
class Agency:
    id: str
    name: str

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Agency":
        return cls(id=str(row.get("id", "")), name=row.get("name") or "")


@dataclass(frozen=True)
class UserProfile:
    """A signed-in user's profile row."""

    id: str
    email: str = ""
    role: str = ROLE_USER
    agency_id: Optional[str] = None
    agency_name: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "UserProfile":
        agency_id = row.get("agency_id")
        return cls(
            id=str(row.get("id", "")),
            email=row.get("email") or "",
            role=row.get("role") or ROLE_USER,
            agency_id=str(agency_id) if agency_id else None,
            agency_name=_joined_name(row),
        )


@dataclass
class BatchSummary:
    """Row count for one uploaded (period, agency) batch."""

    period: str
    agency_id: str
    agency_name: Optional[str] = None
    count: int = 0

    @property
    def key(self) -> tuple:
        return (self.period, self.agency_id)
