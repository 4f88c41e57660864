"""
Application constants for the agency dashboard.
Centralized configuration for tables, spreadsheet headers, and styling.
"""

# =============================================================================
# SUPABASE TABLES
# =============================================================================
AGENCIES_TABLE = "agencies"
PROFILES_TABLE = "profiles"
CREATOR_DATA_TABLE = "creator_data"

# Join expansion of the agencies foreign key
AGENCY_JOIN = "agencies(name)"

# =============================================================================
# ROLES & FILTERS
# =============================================================================
ROLE_USER = "user"
ROLE_ADMIN = "admin"
ROLES = (ROLE_USER, ROLE_ADMIN)

FILTER_ALL = "all"

# =============================================================================
# AGGREGATION DEFAULTS
# =============================================================================
NEW_CREATOR_DAYS = 30
CREATOR_VIEW_LIMIT = 50

# =============================================================================
# SPREADSHEET HEADERS
# =============================================================================
# Localized export header -> canonical CreatorRecord field
HEADER_FIELD_MAP = {
    "크리에이터 ID": "creator_id",
    "크리에이터 아이디": "creator_username",
    "그룹": "group_name",
    "에이전트": "agent",
    "가입 일수": "days_joined",
    "다이아몬드": "diamonds",
    "지난달 다이아몬드": "last_month_diamonds",
    "새 팔로워 수": "new_followers",
    "라이브 진행 시간": "live_hours",
    "유효 라이브 진행 일수": "live_days",
}

INT_FIELDS = (
    "days_joined",
    "diamonds",
    "last_month_diamonds",
    "new_followers",
    "live_days",
)
TEXT_FIELDS = (
    "creator_id",
    "creator_username",
    "group_name",
    "agent",
    "live_hours",
)

UPLOAD_ACCEPT = ".xlsx,.xls"

# =============================================================================
# CSS CLASS CONSTANTS
# =============================================================================
FLEX_COL = "flex flex-col"

PAGE_BASE = "min-h-screen bg-slate-900 text-white"
MAIN_BASE = "max-w-7xl mx-auto px-4 py-6"
HEADER_BASE = "sticky top-0 z-50 bg-slate-900/90 backdrop-blur border-b border-slate-700/50"
PANEL_BASE = "bg-slate-800/40 border border-slate-700/30 rounded-2xl"

STYLES = {
    "input": "w-full px-4 py-3 bg-slate-900 border border-slate-600 rounded-xl text-white",
    "select_sm": "px-3 py-2 bg-slate-700 border border-slate-600 rounded-lg text-sm",
    "btn_primary": "px-4 py-2 bg-indigo-600 hover:bg-indigo-500 rounded-xl text-sm font-medium",
    "btn_ghost": "px-3 py-2 text-slate-400 hover:text-white hover:bg-slate-800 rounded-xl text-sm",
    "btn_danger": "px-3 py-1 bg-red-500/20 text-red-400 hover:bg-red-500/30 rounded-lg text-xs",
    "tab_active": "px-4 py-2 rounded-lg text-sm font-medium bg-indigo-600 text-white",
    "tab_idle": "px-4 py-2 rounded-lg text-sm font-medium text-slate-400 hover:text-white",
    "th": "px-4 py-3",
    "td": "px-4 py-3",
    "row": "border-b border-slate-700/20 hover:bg-slate-700/20",
    "badge_new": "px-2 py-0.5 bg-blue-500/20 text-blue-400 rounded text-xs",
}

# Summary card gradients: (title, icon, color)
SUMMARY_CARDS = [
    ("총 다이아몬드", "💎", "indigo"),
    ("크리에이터", "👥", "purple"),
    ("신규", "🆕", "emerald"),
    ("팔로워", "➕", "amber"),
]
