from fasthtml.common import *

from constants import FLEX_COL, PAGE_BASE, PANEL_BASE, STYLES


def DivCentered(*args, cls: str = "", **kwargs) -> Div:
    """Center content horizontally and vertically."""
    return Div(*args, cls=f"{FLEX_COL} items-center justify-center {cls}".strip(), **kwargs)


def Panel(*children, cls: str = "", **kwargs) -> Div:
    """Rounded dark panel used for tables and forms."""
    return Div(*children, cls=f"{PANEL_BASE} {cls}".strip(), **kwargs)


def TabLink(label: str, href: str, active: bool = False) -> A:
    return A(
        label,
        href=href,
        cls=STYLES["tab_active"] if active else STYLES["tab_idle"],
    )


def TabBar(tabs, active: str, href_for) -> Div:
    """
    Row of link tabs.

    Args:
        tabs: (key, label) pairs in display order
        active: Key of the selected tab
        href_for: Callable building the link for a tab key
    """
    return Div(
        *[TabLink(label, href_for(key), key == active) for key, label in tabs],
        cls="flex gap-2 mb-6",
    )


def ConfirmForm(action: str, label: str, confirm: str, *fields, cls: str = "") -> Form:
    """POST form behind a single button, guarded by a browser confirm dialog."""
    return Form(
        *fields,
        Button(label, type="submit", cls=cls or STYLES["btn_danger"]),
        action=action,
        method="post",
        onsubmit=f"return confirm({confirm!r})",
        cls="inline",
    )


def PageShell(title: str, *content):
    """Full dark page: document title plus the page body."""
    return Title(title), Div(*content, cls=PAGE_BASE)
