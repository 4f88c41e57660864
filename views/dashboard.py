from typing import List, Optional
from urllib.parse import urlencode

from fasthtml.common import *

from components import (
    CreatorTable,
    FlashAlert,
    GroupTable,
    PageShell,
    SummaryCards,
    TabBar,
    UploadModal,
    open_modal_js,
)
from constants import FILTER_ALL, HEADER_BASE, MAIN_BASE, STYLES

TAB_GROUPS = "groups"
TAB_CREATORS = "creators"
DASHBOARD_TABS = [
    (TAB_GROUPS, "📊 그룹별 현황"),
    (TAB_CREATORS, "👤 크리에이터"),
]


def normalize_tab(tab: Optional[str]) -> str:
    return tab if tab in dict(DASHBOARD_TABS) else TAB_GROUPS


def dashboard_url(filters, tab: str) -> str:
    params = {"period": filters.period, "group": filters.group, "tab": tab}
    return f"/dashboard?{urlencode(params)}"


def _render_header(profile, email: str) -> Header:
    title = (profile.agency_name if profile else None) or "대시보드"
    is_admin = bool(profile and profile.is_admin)

    return Header(
        Div(
            Div(
                H1(title, cls="text-lg font-bold"),
                P(email, cls="text-xs text-slate-400"),
            ),
            Div(
                (
                    Button(
                        "📤 업로드",
                        type="button",
                        onclick=open_modal_js("upload-modal"),
                        cls=STYLES["btn_primary"],
                    )
                    if is_admin
                    else None
                ),
                A("⚙️ 관리", href="/admin", cls=STYLES["btn_ghost"]) if is_admin else None,
                A("로그아웃", href="/logout", cls=STYLES["btn_ghost"]),
                cls="flex items-center gap-2",
            ),
            cls="max-w-7xl mx-auto px-4 py-3 flex justify-between items-center",
        ),
        cls=HEADER_BASE,
    )


def _render_filter_bar(view, tab: str) -> Form:
    """Period and group selects; options come from the unfiltered data."""
    return Form(
        Select(
            Option("전체", value=FILTER_ALL, selected=view.filters.period == FILTER_ALL),
            *[
                Option(p, value=p, selected=p == view.filters.period)
                for p in view.periods
            ],
            name="period",
            onchange="this.form.submit()",
            cls=STYLES["select_sm"],
        ),
        Select(
            Option("전체 그룹", value=FILTER_ALL, selected=view.filters.group == FILTER_ALL),
            *[Option(g, value=g, selected=g == view.filters.group) for g in view.groups],
            name="group",
            onchange="this.form.submit()",
            cls=STYLES["select_sm"],
        ),
        Hidden(name="tab", value=tab),
        action="/dashboard",
        method="get",
        cls="flex flex-wrap gap-3 mb-6",
    )


def render_dashboard_page(
    *,
    profile,
    email: str,
    view,
    agencies: List,
    tab: str = TAB_GROUPS,
    flash: Optional[dict] = None,
):
    """
    Full dashboard page for one filter selection.

    Args:
        profile: UserProfile of the signed-in user (None if the row is missing)
        email: Signed-in email, shown in the header
        view: DashboardView from the aggregation engine
        agencies: Agencies offered in the upload form (admins only)
        tab: Selected tab key
        flash: One-shot message from the previous request
    """
    tab = normalize_tab(tab)
    is_admin = bool(profile and profile.is_admin)
    body = GroupTable(view.group_rollups) if tab == TAB_GROUPS else CreatorTable(view.creator_view)

    return PageShell(
        "대시보드",
        _render_header(profile, email),
        Main(
            FlashAlert(flash),
            _render_filter_bar(view, tab),
            SummaryCards(view.summary),
            TabBar(DASHBOARD_TABS, tab, lambda key: dashboard_url(view.filters, key)),
            body,
            cls=MAIN_BASE,
        ),
        UploadModal(agencies) if is_admin else None,
    )
