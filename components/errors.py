"""
Unified error and alert components.
Standardizes error display across the application.
"""

from typing import Optional

from fasthtml.common import *
from monsterui.all import *


def ErrorAlert(
    title: str,
    message: str,
    type: str = "error",
    show_home_link: bool = True,
    show_logout_link: bool = False,
) -> Div:
    """
    Standardized full-page error display.

    Args:
        title: Error title (e.g., "서비스를 사용할 수 없습니다")
        message: Detailed error message
        type: Alert type - "error", "warning", "info", "success"
        show_home_link: Whether to show link back to the login page
        show_logout_link: Whether to offer signing out (for signed-in pages)

    Returns:
        Styled alert Div component

    Example:
        >>> ErrorAlert("데이터 로드 실패", "Loading creator data failed: timeout")
    """
    color_schemes = {
        "error": {
            "bg": "bg-red-500/10",
            "border": "border-red-500/30",
            "text": "text-red-300",
            "icon": "⚠️",
        },
        "warning": {
            "bg": "bg-amber-500/10",
            "border": "border-amber-500/30",
            "text": "text-amber-300",
            "icon": "⚠️",
        },
        "info": {
            "bg": "bg-blue-500/10",
            "border": "border-blue-500/30",
            "text": "text-blue-300",
            "icon": "ℹ️",
        },
        "success": {
            "bg": "bg-emerald-500/10",
            "border": "border-emerald-500/30",
            "text": "text-emerald-300",
            "icon": "✓",
        },
    }

    scheme = color_schemes.get(type, color_schemes["error"])

    content = [
        Div(
            Span(scheme["icon"], cls="text-3xl mb-3"),
            H2(title, cls=f"text-2xl font-bold mb-2 {scheme['text']}"),
            cls="flex flex-col items-center",
        ),
        P(message, cls=f"text-sm mb-4 {scheme['text']}"),
    ]

    links = []
    if show_home_link:
        links.append(
            A(
                Button("← 처음으로", cls=ButtonT.secondary),
                href="/",
                cls="no-underline",
            )
        )
    if show_logout_link:
        links.append(
            A(
                Button("로그아웃", cls=ButtonT.secondary),
                href="/logout",
                cls="no-underline",
            )
        )
    if links:
        content.append(Div(*links, cls="mt-4 flex justify-center gap-3"))

    return Div(
        *content,
        cls=f"max-w-xl mx-auto mt-24 text-center p-8 rounded-lg border {scheme['bg']} {scheme['border']}",
    )


ALERT_TYPES = {
    "error": AlertT.error,
    "warning": AlertT.warning,
    "info": AlertT.info,
    "success": AlertT.success,
}


def FlashAlert(flash: Optional[dict]):
    """Inline alert for a one-shot flash message, or None when there is none."""
    if not flash or not flash.get("message"):
        return None
    return Alert(
        P(flash["message"]),
        cls=(ALERT_TYPES.get(flash.get("type"), AlertT.info), "mb-4"),
    )
