from typing import List, Optional

from fasthtml.common import *

from components import (
    AgencyTable,
    BatchTable,
    FlashAlert,
    PageShell,
    Panel,
    TabBar,
    UserTable,
)
from constants import HEADER_BASE, MAIN_BASE, STYLES

TAB_AGENCIES = "agencies"
TAB_USERS = "users"
TAB_DATA = "data"
ADMIN_TABS = [
    (TAB_AGENCIES, "🏢 에이전시"),
    (TAB_USERS, "👥 사용자"),
    (TAB_DATA, "📁 데이터"),
]


def normalize_admin_tab(tab: Optional[str]) -> str:
    return tab if tab in dict(ADMIN_TABS) else TAB_AGENCIES


def _render_header(email: str) -> Header:
    return Header(
        Div(
            Div(
                H1("관리자", cls="text-lg font-bold"),
                P(email, cls="text-xs text-slate-400"),
            ),
            Div(
                A("← 대시보드", href="/dashboard", cls=STYLES["btn_ghost"]),
                A("로그아웃", href="/logout", cls=STYLES["btn_ghost"]),
                cls="flex items-center gap-2",
            ),
            cls="max-w-7xl mx-auto px-4 py-3 flex justify-between items-center",
        ),
        cls=HEADER_BASE,
    )


def _render_agency_form() -> Div:
    return Panel(
        Form(
            Input(
                name="name",
                placeholder="새 에이전시 이름",
                cls=STYLES["input"],
            ),
            Button("추가", type="submit", cls=f"shrink-0 {STYLES['btn_primary']}"),
            action="/admin/agencies",
            method="post",
            cls="flex gap-3",
        ),
        cls="p-4 mb-4",
    )


def render_admin_page(
    *,
    email: str,
    tab: str,
    agencies: List,
    profiles: List,
    batches: List,
    flash: Optional[dict] = None,
):
    """Admin screen with agency, user and uploaded-data tabs."""
    tab = normalize_admin_tab(tab)

    if tab == TAB_AGENCIES:
        body = Div(_render_agency_form(), AgencyTable(agencies))
    elif tab == TAB_USERS:
        body = UserTable(profiles, agencies)
    else:
        body = BatchTable(batches)

    return PageShell(
        "관리자",
        _render_header(email),
        Main(
            FlashAlert(flash),
            TabBar(ADMIN_TABS, tab, lambda key: f"/admin?tab={key}"),
            body,
            cls=MAIN_BASE,
        ),
    )
