"""Table components for the dashboard and admin pages."""

from typing import List, Optional, Sequence, Tuple

from fasthtml.common import *

from components.base import ConfirmForm, Panel
from constants import ROLES, STYLES
from utils import format_count, format_followers, format_number


# =============================================================================
# Table helpers
# =============================================================================
def _head(*labels: str, align_right: Sequence[int] = ()) -> Thead:
    return Thead(
        Tr(
            *[
                Th(
                    label,
                    cls=f"{STYLES['th']} {'text-right' if i in align_right else 'text-left'}",
                )
                for i, label in enumerate(labels)
            ],
            cls="text-slate-400 text-xs border-b border-slate-700/30",
        )
    )


def _table(head: Thead, rows: List[Tr], empty_text: str, colspan: int) -> Div:
    if not rows:
        rows = [
            Tr(
                Td(
                    empty_text,
                    colspan=str(colspan),
                    cls="px-4 py-8 text-center text-slate-500",
                )
            )
        ]
    return Panel(
        Div(
            Table(head, Tbody(*rows), cls="w-full text-sm"),
            cls="overflow-x-auto",
        ),
        cls="overflow-hidden",
    )


def _agency_options(agencies, selected: Optional[str], empty_label: str):
    return [Option(empty_label, value="", selected=not selected)] + [
        Option(a.name, value=a.id, selected=a.id == selected) for a in agencies
    ]


# =============================================================================
# Dashboard tables
# =============================================================================
def GroupTable(rollups: List[Tuple[str, object]]) -> Div:
    """Per-group totals, already sorted by diamonds descending."""
    rows = [
        Tr(
            Td(name, cls=f"{STYLES['td']} font-medium"),
            Td(format_count(rollup.count), cls=f"{STYLES['td']} text-right"),
            Td(
                format_number(rollup.diamonds),
                cls=f"{STYLES['td']} text-right text-indigo-300 font-semibold",
            ),
            cls=STYLES["row"],
        )
        for name, rollup in rollups
    ]
    return _table(
        _head("그룹", "크리에이터", "다이아몬드", align_right=(1, 2)),
        rows,
        "데이터가 없습니다",
        3,
    )


def CreatorTable(creator_rows) -> Div:
    """Top creators for the current selection with a NEW badge for recent joiners."""
    rows = []
    for rank, row in enumerate(creator_rows, start=1):
        record = row.record
        rows.append(
            Tr(
                Td(str(rank), cls=f"{STYLES['td']} text-slate-500"),
                Td(
                    Span(record.creator_username or record.creator_id, cls="font-medium"),
                    Span("NEW", cls=f"ml-2 {STYLES['badge_new']}") if row.is_new else None,
                    cls=STYLES["td"],
                ),
                Td(record.agent or "-", cls=f"{STYLES['td']} text-slate-400"),
                Td(record.group_name or "-", cls=f"{STYLES['td']} text-slate-400"),
                Td(
                    format_number(record.diamonds),
                    cls=f"{STYLES['td']} text-right text-indigo-300 font-semibold",
                ),
                Td(
                    format_followers(record.new_followers),
                    cls=f"{STYLES['td']} text-right text-emerald-400",
                ),
                cls=STYLES["row"],
            )
        )
    return _table(
        _head("#", "크리에이터", "에이전트", "그룹", "다이아몬드", "팔로워", align_right=(4, 5)),
        rows,
        "데이터가 없습니다",
        6,
    )


# =============================================================================
# Admin tables
# =============================================================================
def AgencyTable(agencies) -> Div:
    rows = [
        Tr(
            Td(agency.name, cls=f"{STYLES['td']} font-medium"),
            Td(
                ConfirmForm(
                    f"/admin/agencies/{agency.id}/delete",
                    "삭제",
                    f"'{agency.name}' 에이전시와 관련된 모든 데이터가 삭제됩니다. 계속할까요?",
                ),
                cls=f"{STYLES['td']} text-right",
            ),
            cls=STYLES["row"],
        )
        for agency in agencies
    ]
    return _table(_head("에이전시", "", align_right=(1,)), rows, "등록된 에이전시가 없습니다", 2)


def UserTable(profiles, agencies) -> Div:
    """Profiles with inline agency/role selects that submit on change."""
    rows = []
    for profile in profiles:
        agency_select = Form(
            Select(
                *_agency_options(agencies, profile.agency_id, "미지정"),
                name="agency_id",
                onchange="this.form.submit()",
                cls=STYLES["select_sm"],
            ),
            action=f"/admin/users/{profile.id}/agency",
            method="post",
        )
        role_select = Form(
            Select(
                *[Option(role, value=role, selected=role == profile.role) for role in ROLES],
                name="role",
                onchange="this.form.submit()",
                cls=STYLES["select_sm"],
            ),
            action=f"/admin/users/{profile.id}/role",
            method="post",
        )
        rows.append(
            Tr(
                Td(profile.email or profile.id, cls=f"{STYLES['td']} font-medium"),
                Td(agency_select, cls=STYLES["td"]),
                Td(role_select, cls=STYLES["td"]),
                Td(
                    ConfirmForm(
                        f"/admin/users/{profile.id}/delete",
                        "삭제",
                        f"{profile.email or profile.id} 사용자를 삭제할까요?",
                    ),
                    cls=f"{STYLES['td']} text-right",
                ),
                cls=STYLES["row"],
            )
        )
    return _table(
        _head("이메일", "에이전시", "역할", "", align_right=(3,)),
        rows,
        "등록된 사용자가 없습니다",
        4,
    )


def BatchTable(batches) -> Div:
    rows = [
        Tr(
            Td(batch.period, cls=f"{STYLES['td']} font-medium"),
            Td(batch.agency_name or batch.agency_id, cls=f"{STYLES['td']} text-slate-400"),
            Td(format_count(batch.count, "개"), cls=f"{STYLES['td']} text-right"),
            Td(
                ConfirmForm(
                    "/admin/batches/delete",
                    "삭제",
                    f"{batch.period} / {batch.agency_name or batch.agency_id} 데이터를 삭제할까요?",
                    Hidden(name="period", value=batch.period),
                    Hidden(name="agency_id", value=batch.agency_id),
                ),
                cls=f"{STYLES['td']} text-right",
            ),
            cls=STYLES["row"],
        )
        for batch in batches
    ]
    return _table(
        _head("기간", "에이전시", "행 수", "", align_right=(2, 3)),
        rows,
        "업로드된 데이터가 없습니다",
        4,
    )
