"""
Currency formatting for display.

The ledger works in raw Decimal amounts in a single unnamed currency.
This module only decides how those amounts look on screen; it never
converts between currencies.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union


CENT = Decimal("0.01")

# code -> (symbol, symbol goes before the number)
SUPPORTED_CURRENCIES = {
    "USD": ("$", True),
    "EUR": ("€", True),
    "GBP": ("£", True),
    "MAD": ("DH", False),
}


def format_currency(amount: Union[Decimal, int, float, str], currency: str = "USD") -> str:
    """
    Format an amount for display, e.g. "$1,234.50", "-£12.00", "99.90 DH".

    Unknown currency codes are shown as a prefix ("CHF 10.00").
    """
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"Cannot format {amount!r} as currency") from e
    if not value.is_finite():
        raise ValueError(f"Cannot format {amount!r} as currency")
    value = value.quantize(CENT, rounding=ROUND_HALF_UP)

    sign = "-" if value < 0 else ""
    number = f"{abs(value):,.2f}"

    code = (currency or "").upper()
    if code in SUPPORTED_CURRENCIES:
        symbol, prefix = SUPPORTED_CURRENCIES[code]
    else:
        symbol, prefix = f"{code} ", True

    if prefix:
        return f"{sign}{symbol}{number}"
    return f"{sign}{number} {symbol}"
