"""
Reusable modal components with glass backdrop.
"""

from fasthtml.common import *
from monsterui.all import UkIcon

from constants import STYLES, UPLOAD_ACCEPT


def Modal(title: str, *content, modal_id: str = "modal", show_close: bool = True):
    """
    Reusable modal component with backdrop blur. Starts hidden.

    Args:
        title: Modal header title
        *content: Child elements for modal body
        modal_id: Unique ID for the modal (default: "modal")
        show_close: Whether to show the X close button (default: True)

    Example:
        >>> Modal("엑셀 업로드", P("..."), modal_id="upload-modal")
    """
    hide = f"document.getElementById('{modal_id}').classList.add('hidden')"

    return Div(
        Div(
            Div(
                Div(
                    H2(title, cls="text-lg font-bold text-white"),
                    (
                        Button(
                            UkIcon("x", cls="w-5 h-5"),
                            onclick=hide,
                            cls="text-slate-400 hover:text-white rounded-lg p-1.5",
                            type="button",
                            aria_label="Close modal",
                        )
                        if show_close
                        else None
                    ),
                    cls="flex items-center justify-between mb-4",
                ),
                Div(*content),
                cls="bg-slate-800 rounded-2xl p-6 w-full max-w-md mx-4 border border-slate-700",
            ),
            # Click outside to close
            onclick=f"if(event.target === this) {hide}",
            cls="fixed inset-0 z-50 flex items-center justify-center bg-black/70 backdrop-blur-sm",
        ),
        id=modal_id,
        cls="hidden",
    )


def open_modal_js(modal_id: str) -> str:
    return f"document.getElementById('{modal_id}').classList.remove('hidden')"


def UploadModal(agencies, modal_id: str = "upload-modal"):
    """Admin workbook upload: period label, target agency, and the file."""
    return Modal(
        "엑셀 업로드",
        Form(
            Div(
                Label("기간 구분", cls="block text-sm text-slate-400 mb-2"),
                Input(
                    name="period",
                    placeholder="예: 12월1주",
                    required=True,
                    cls=STYLES["input"],
                ),
                cls="mb-4",
            ),
            Div(
                Label("에이전시", cls="block text-sm text-slate-400 mb-2"),
                Select(
                    Option("선택하세요", value=""),
                    *[Option(a.name, value=a.id) for a in agencies],
                    name="agency_id",
                    required=True,
                    cls=STYLES["input"],
                ),
                cls="mb-4",
            ),
            Div(
                Label("엑셀 파일", cls="block text-sm text-slate-400 mb-2"),
                Input(
                    type="file",
                    name="file",
                    accept=UPLOAD_ACCEPT,
                    required=True,
                    cls=f"{STYLES['input']} text-sm",
                ),
                cls="mb-6",
            ),
            Button("업로드", type="submit", cls=f"w-full {STYLES['btn_primary']}"),
            action="/dashboard/upload",
            method="post",
            enctype="multipart/form-data",
        ),
        modal_id=modal_id,
    )
