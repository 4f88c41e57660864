from typing import Optional

from fasthtml.common import *

from components import DivCentered, PageShell
from constants import STYLES

LOGIN_ERROR = "이메일 또는 비밀번호가 틀렸습니다"


def render_login_page(error: Optional[str] = None, email: str = ""):
    """Email/password sign-in form; ``error`` is shown inline above the button."""
    return PageShell(
        "로그인 - 에이전시 대시보드",
        DivCentered(
            Div(
                Div(
                    Div("💎", cls="text-4xl mb-3"),
                    H1("에이전시 대시보드", cls="text-2xl font-bold text-white"),
                    P("크리에이터 성과 관리", cls="text-slate-400 text-sm mt-1"),
                    cls="text-center mb-8",
                ),
                Form(
                    Div(
                        Label("이메일", cls="block text-sm text-slate-400 mb-2"),
                        Input(
                            type="email",
                            name="email",
                            value=email,
                            required=True,
                            autocomplete="email",
                            cls=STYLES["input"],
                        ),
                        cls="mb-4",
                    ),
                    Div(
                        Label("비밀번호", cls="block text-sm text-slate-400 mb-2"),
                        Input(
                            type="password",
                            name="password",
                            required=True,
                            autocomplete="current-password",
                            cls=STYLES["input"],
                        ),
                        cls="mb-6",
                    ),
                    (
                        P(error, id="login-error", cls="text-red-400 text-sm mb-4")
                        if error
                        else None
                    ),
                    Button(
                        "로그인",
                        type="submit",
                        cls=f"w-full py-3 {STYLES['btn_primary']}",
                    ),
                    action="/login",
                    method="post",
                ),
                cls="w-full max-w-sm bg-slate-800/50 border border-slate-700 rounded-2xl p-8",
            ),
            cls="min-h-screen px-4",
        ),
    )
