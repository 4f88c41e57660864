# components/__init__.py
# Re-exports for clean imports

from components.base import (
    # Base structural helpers
    ConfirmForm,
    DivCentered,
    PageShell,
    Panel,
    TabBar,
    TabLink,
)
from components.cards import (
    # Card components
    MetricCard,
    SummaryCards,
)
from components.errors import ErrorAlert, FlashAlert
from components.modals import Modal, UploadModal, open_modal_js
from components.tables import (
    AgencyTable,
    BatchTable,
    CreatorTable,
    GroupTable,
    UserTable,
)

__all__ = [
    "AgencyTable",
    "BatchTable",
    "ConfirmForm",
    "CreatorTable",
    "DivCentered",
    "ErrorAlert",
    "FlashAlert",
    "GroupTable",
    "MetricCard",
    "Modal",
    "PageShell",
    "Panel",
    "SummaryCards",
    "TabBar",
    "TabLink",
    "UploadModal",
    "UserTable",
    "open_modal_js",
]
