"""
Display Formatting Utilities

Compact price, rent and percentage strings used by the CLI reports.
"""

from typing import Optional, Union

Number = Union[int, float, None]


def format_price(price: Number, empty: str = "Contact Agent") -> str:
    """Format a price in the dashboard's compact style.

    Args:
        price: Price value to format.
        empty: Text used when there is no price.

    Returns:
        Formatted price string.

    Example:
        >>> format_price(1250000)
        "$1.25M"
        >>> format_price(845000)
        "$845K"
        >>> format_price(None)
        "Contact Agent"
    """
    if not price:
        return empty

    if price >= 1_000_000:
        return f"${price / 1_000_000:.2f}M"
    if price >= 1_000:
        return f"${round(price / 1_000):.0f}K"
    return f"${price:.0f}"


def format_weekly_rent(rent: Number) -> str:
    """Format a weekly rent, e.g. "$650pw"."""
    if not rent:
        return "N/A"
    return f"${rent:.0f}pw"


def format_percent(value: Number, decimals: int = 1, signed: bool = False) -> str:
    """Format a percentage, e.g. "3.6%" or "+4.2%"."""
    if value is None:
        return "N/A"
    text = f"{value:+.{decimals}f}%" if signed else f"{value:.{decimals}f}%"
    return text


def format_count(value: Optional[int]) -> str:
    return "-" if value is None else f"{value:,}"
