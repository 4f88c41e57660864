"""
Utility functions for the agency dashboard.

This package contains pure utility functions organized by domain:
- formatting: Number and count display helpers
"""

from .formatting import format_count, format_followers, format_number

__all__ = [
    "format_count",
    "format_followers",
    "format_number",
]
