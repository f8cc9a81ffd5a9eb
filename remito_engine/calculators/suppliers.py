from __future__ import annotations

from decimal import Decimal
from typing import Dict, Iterable, List

from ..models import EstriboSpec, Supplier, SupplierComparison, SupplierQuote
from ..utils import to_decimal
from . import estribos, tax as tax_calc


def weight_from_geometry(
    medida: str,
    shape,
    kg_per_meter,
    bend_allowance_cm=estribos.DEFAULT_BEND_ALLOWANCE_CM,
    bends: int = estribos.DEFAULT_BENDS,
) -> Decimal:
    """Weight of one estribo (kg) from its size and the wire's linear weight."""
    return estribos.estimate(
        medida, shape, kg_per_meter=kg_per_meter, bend_allowance_cm=bend_allowance_cm, bends=bends
    ).weight_kg


def quotes(
    specs: Iterable[EstriboSpec],
    suppliers: Iterable[Supplier],
    margin_percent,
    tax_rate_percent,
) -> List[SupplierQuote]:
    """Price every estribo with every supplier that has a recorded weight for it.

    Supplier prices per kg are net, so the margin goes on the net base cost
    and tax is added on top.
    """
    suppliers = list(suppliers)
    margin = Decimal(1) + to_decimal(margin_percent) / Decimal(100)
    out: List[SupplierQuote] = []
    for spec in specs:
        for sup in suppliers:
            weight = spec.weights.get(sup.id)
            if not weight:
                continue
            base = weight * sup.price_per_kg
            with_margin = base * margin
            gross = tax_calc.compose(with_margin, tax_rate_percent)
            out.append(
                SupplierQuote(
                    estribo_id=spec.id,
                    medida=spec.medida,
                    supplier_id=sup.id,
                    supplier=sup.name,
                    weight_kg=weight,
                    base_cost=base,
                    cost_with_margin=with_margin,
                    tax=gross - with_margin,
                    price_gross=gross,
                )
            )
    return out


def compare(quote_list: Iterable[SupplierQuote], net: bool = False) -> List[SupplierComparison]:
    """Cheapest vs most expensive supplier per medida, with the savings between them.

    ``net=True`` compares prices without tax.
    """

    def price(q: SupplierQuote) -> Decimal:
        return q.price_net if net else q.price_gross

    grouped: Dict[str, List[SupplierQuote]] = {}
    for q in quote_list:
        grouped.setdefault(q.medida, []).append(q)

    out: List[SupplierComparison] = []
    for medida, group in grouped.items():
        cheapest = min(group, key=price)
        dearest = max(group, key=price)
        savings = price(dearest) - price(cheapest)
        pct = savings / price(dearest) * Decimal(100) if price(dearest) > 0 else Decimal(0)
        out.append(
            SupplierComparison(
                medida=medida,
                quotes=group,
                cheapest=cheapest,
                most_expensive=dearest,
                savings=savings,
                savings_percent=pct,
            )
        )
    return out
