from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP


def to_decimal(x) -> Decimal:
    if isinstance(x, Decimal):
        return x
    if x is None:
        return Decimal(0)
    return Decimal(str(x))


def round_money(amount, places: int = 2) -> Decimal:
    q = Decimal(10) ** -places
    return to_decimal(amount).quantize(q, rounding=ROUND_HALF_UP)


def money(amount, symbol: str = "$", places: int = 2, thousands: str = ".", decimal: str = ",") -> str:
    """Format an amount the Argentine way: ``$100.000,90``."""
    val = round_money(amount, places)
    parts = f"{val:.{places}f}".split(".")
    whole = parts[0]
    frac = parts[1] if len(parts) > 1 else ""
    sign = ""
    if whole.startswith("-"):
        sign = "-"
        whole = whole[1:]
    whole_grouped = "{:,}".format(int(whole)).replace(",", thousands)
    if not frac:
        return f"{sign}{symbol}{whole_grouped}"
    return f"{sign}{symbol}{whole_grouped}{decimal}{frac}"


def price_label(amount, symbol: str = "") -> str:
    # Remitos show whole units only
    return money(amount, symbol=symbol, places=0)
