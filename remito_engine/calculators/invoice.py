from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable, List

from ..logic.line_cost import CostStore, index_costs, resolve_line
from ..models import CatalogEntry, Invoice, InvoiceAnalysis, InvoiceLineItem, LineCost
from .tax import decompose

logger = logging.getLogger(__name__)


def resolve_lines(
    items: Iterable[InvoiceLineItem],
    catalog: Iterable[CatalogEntry],
    costs: CostStore,
    strict: bool = False,
) -> List[LineCost]:
    catalog = list(catalog)
    costs = index_costs(costs)
    return [resolve_line(item, catalog, costs, strict=strict) for item in items]


def cost_total(lines: Iterable[LineCost]) -> Decimal:
    return sum((line.amount for line in lines), Decimal(0))


def vat_debit(lines: Iterable[LineCost], tax_rate_percent) -> Decimal:
    """Tax embedded in the resolved line costs."""
    return sum(
        (decompose(line.cost, tax_rate_percent).tax for line in lines if line.resolved),
        Decimal(0),
    )


def analyze(
    invoice: Invoice,
    catalog: Iterable[CatalogEntry],
    costs: CostStore,
    tax_rate_percent,
    strict: bool = False,
) -> InvoiceAnalysis:
    """Cost, real profit and VAT figures for one remito.

    Lines that cannot be resolved count as zero cost; ``costs_configured`` on
    the result is False when no line resolved at all, so callers can show
    an advisory instead of a zero-expense profit.
    """
    lines = resolve_lines(invoice.items, catalog, costs, strict=strict)
    sale = invoice.sale_total
    cost = cost_total(lines)
    analysis = InvoiceAnalysis(
        invoice_id=invoice.id,
        client=invoice.client,
        sale_total=sale,
        cost_total=cost,
        real_profit=sale - cost,
        vat_on_sale=decompose(sale, tax_rate_percent).tax,
        vat_on_cost=vat_debit(lines, tax_rate_percent),
        lines=lines,
    )
    if analysis.unresolved:
        logger.debug("Invoice %s: %d of %d lines without cost",
                     invoice.id, len(analysis.unresolved), len(lines))
    return analysis
