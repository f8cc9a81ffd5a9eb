from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Mapping, Optional, Tuple

from ..models import CatalogEntry, CostRecord, PriceSuggestion
from ..utils import to_decimal
from .tax import compose, decompose


def suggest(production_cost, margin_percent, tax_rate_percent) -> PriceSuggestion:
    """Suggested tax-inclusive sale price for a tax-inclusive production cost.

    The tax is taken out first, the margin is applied as a markup on the net
    cost, and the tax is added back on top.
    """
    production_cost = to_decimal(production_cost)
    split = decompose(production_cost, tax_rate_percent)
    cost_with_margin = split.net * (Decimal(1) + to_decimal(margin_percent) / Decimal(100))
    return PriceSuggestion(
        production_cost=production_cost,
        net_cost=split.net,
        contained_tax=split.tax,
        cost_with_margin=cost_with_margin,
        final_price=compose(cost_with_margin, tax_rate_percent),
    )


def suggest_for_record(record: CostRecord, tax_rate_percent) -> PriceSuggestion:
    return suggest(record.production_cost, record.profit_margin, tax_rate_percent)


def unit_price_with_tax(unit_price, tax_rate_percent) -> Decimal:
    return compose(unit_price, tax_rate_percent)


def real_margin(sale_price, production_cost) -> Optional[Decimal]:
    """Markup of the current sale price over cost, in percent. None without a cost."""
    cost = to_decimal(production_cost)
    if cost <= 0:
        return None
    return (to_decimal(sale_price) - cost) / cost * Decimal(100)


def average_real_margin(
    entries: Iterable[CatalogEntry],
    costs: Mapping[str, CostRecord],
) -> Tuple[Decimal, int]:
    """Mean real margin over entries that have both a price and a cost.

    Returns (average, count); (0, 0) when no entry qualifies.
    """
    total = Decimal(0)
    count = 0
    for e in entries:
        rec = costs.get(e.id)
        if rec is None or rec.production_cost <= 0 or e.price <= 0:
            continue
        total += real_margin(e.price, rec.production_cost)
        count += 1
    if count == 0:
        return Decimal(0), 0
    return total / count, count


def combo_price(unit_price, quantity: int, discount_percent=5) -> Decimal:
    """Suggested price for a bundle of ``quantity`` units with a percentage discount."""
    total = to_decimal(unit_price) * int(quantity)
    return total - total * to_decimal(discount_percent) / Decimal(100)


def combo_price_for(product_id: str, catalog: Iterable[CatalogEntry], quantity: int, discount_percent=5) -> Decimal:
    for e in catalog:
        if e.id == product_id:
            return combo_price(e.price, quantity, discount_percent)
    return Decimal(0)
