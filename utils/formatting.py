"""
Number and string formatting utilities.
"""

EOK = 100_000_000  # 억
MAN = 10_000  # 만


def format_number(num: float) -> str:
    """
    Convert a large number into an abbreviated Korean display string.

    Args:
        num (float): The input number.

    Returns:
        str: "2.0억" for >= 1억, "150.0만" for >= 1만, otherwise "1,234".

    Examples:
        format_number(200_000_000)  # → "2.0억"
        format_number(1_500_000)    # → "150.0만"
        format_number(9_999)        # → "9,999"
        format_number(None)         # → "0"
    """
    if not num:
        return "0"
    if num >= EOK:
        return f"{num / EOK:.1f}억"
    elif num >= MAN:
        return f"{num / MAN:.1f}만"
    return f"{num:,.0f}"


def format_count(num: int, unit: str = "명") -> str:
    """Plain count with a counter suffix, e.g. 12명 or 3개."""
    return f"{num or 0:,}{unit}"


def format_followers(num: int) -> str:
    """New-follower delta as shown in the creator table."""
    return f"+{format_number(num)}"
