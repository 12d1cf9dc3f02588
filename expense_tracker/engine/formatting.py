"""Display helpers shared by the CLI and the desktop form."""

from __future__ import annotations

from datetime import date

from .records import coerce_amount

DEFAULT_CURRENCY = "€"


def format_currency(amount: object, symbol: str = DEFAULT_CURRENCY) -> str:
    """Format ``amount`` with thousands separators and no forced decimals.

    ``4.5`` renders as ``€4.5``, ``1200`` as ``€1,200`` and ``3.456`` as
    ``€3.46``.
    """

    value = round(coerce_amount(amount), 2)
    digits = f"{abs(value):,.2f}"
    if "." in digits:
        digits = digits.rstrip("0").rstrip(".")
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{digits}"


def format_date(day: date) -> str:
    """Render ``day`` as ``D MMM YYYY`` using the locale's month abbreviation."""

    return f"{day.day} {day.strftime('%b')} {day.year}"


__all__ = ["DEFAULT_CURRENCY", "format_currency", "format_date"]
