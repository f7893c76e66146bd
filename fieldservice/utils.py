"""Shared utilities used across the field service core."""

from typing import Optional


def is_blank(value: Optional[str]) -> bool:
    """True for None, empty, or whitespace-only strings.

    Examples:
        >>> is_blank("   ")
        True
        >>> is_blank("Ana")
        False
    """
    return value is None or not value.strip()


def format_order_number(number: int, prefix: str = "OS", width: int = 4) -> str:
    """Format a sequential service order number.

    Examples:
        >>> format_order_number(7)
        'OS-0007'
        >>> format_order_number(12345)
        'OS-12345'
    """
    return f"{prefix}-{str(number).zfill(width)}"
