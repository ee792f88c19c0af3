"""
Formatting helpers for amounts and quantities shown in messages and print intents.
"""
from decimal import Decimal, InvalidOperation
from typing import Union, Optional

Number = Union[int, float, Decimal, str, None]


def format_number(value: Number, decimals: Optional[int] = None) -> str:
    """
    Format a number with a comma thousands separator and a dot decimal separator.
    Trailing zeros in the decimal part are dropped.

    Args:
        value: Number to format
        decimals: Fixed number of decimals (None = automatic)

    Returns:
        Formatted string, "-" for empty or invalid input

    Examples:
        format_number(1500) -> "1,500"
        format_number(1500.5) -> "1,500.5"
        format_number(12.000) -> "12"
        format_number(None) -> "-"
    """
    if value is None or value == "":
        return "-"

    try:
        num = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return "-"

    if num == 0:
        return "0"

    if decimals is not None:
        num = num.quantize(Decimal(10) ** -decimals)

    # Fixed-point notation, never scientific
    num_str = format(num, 'f')

    if '.' in num_str:
        integer_part, decimal_part = num_str.split('.')
        decimal_part = decimal_part.rstrip('0')
    else:
        integer_part, decimal_part = num_str, ""

    sign = ''
    if integer_part.startswith('-'):
        sign = '-'
        integer_part = integer_part[1:]

    integer_formatted = f"{int(integer_part):,}"

    if decimal_part:
        return f"{sign}{integer_formatted}.{decimal_part}"
    return f"{sign}{integer_formatted}"


def format_quantity(value: Number) -> str:
    """Quantities are fractional (0.5 kg...) but usually whole: 3 -> "3", 2.50 -> "2.5"."""
    return format_number(value)


def format_money(value: Number, symbol: str = 'DH') -> str:
    """
    Format a monetary amount with exactly 2 decimals and the currency symbol.

    Examples:
        format_money(1500) -> "1,500.00 DH"
        format_money(-12.5, '$') -> "-12.50 $"
    """
    if value is None or value == "":
        return "-"
    try:
        num = Decimal(str(value)).quantize(Decimal('0.01'))
    except (InvalidOperation, ValueError, TypeError):
        return "-"
    text = f"{num:,.2f}"
    return f"{text} {symbol}" if symbol else text
