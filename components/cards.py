"""Card components for the dashboard summary row."""

from fasthtml.common import *
from monsterui.all import *

from constants import SUMMARY_CARDS
from utils import format_count, format_number


def MetricCard(
    title: str,
    value: str,
    icon: str,
    color: str = "indigo",
) -> Div:
    """Create a gradient metric card with a title, icon and value."""
    return Div(
        Div(
            Span(title, cls="text-white/70 text-xs"),
            Span(icon, cls="text-xl"),
            cls="flex justify-between items-start mb-1",
        ),
        P(value, cls="text-2xl font-bold text-white"),
        cls=f"bg-gradient-to-br from-{color}-600 to-{color}-800 rounded-2xl p-4",
    )


def SummaryCards(summary) -> Div:
    """The four headline numbers for the current filter selection."""
    values = [
        format_number(summary.total_diamonds),
        format_count(summary.total_creators),
        format_count(summary.new_creators),
        format_number(summary.total_followers),
    ]
    return Div(
        *[
            MetricCard(title, value, icon, color)
            for (title, icon, color), value in zip(SUMMARY_CARDS, values)
        ],
        cls="grid grid-cols-2 lg:grid-cols-4 gap-4 mb-6",
    )
