from __future__ import annotations

from decimal import Decimal
from typing import Dict, Iterable, List

from ..logic.line_cost import CostStore, index_costs
from ..models import CatalogEntry, Invoice, InvoiceAnalysis, PortfolioSummary
from . import invoice as invoice_calc


def summarize(analyses: Iterable[InvoiceAnalysis]) -> PortfolioSummary:
    """Sum per-invoice analyses field by field. An empty input gives all zeros."""
    count = 0
    sales = cost = profit = credit = debit = Decimal(0)
    unresolved = 0
    configured = False
    for a in analyses:
        count += 1
        sales += a.sale_total
        cost += a.cost_total
        profit += a.real_profit
        credit += a.vat_on_sale
        debit += a.vat_on_cost
        unresolved += len(a.unresolved)
        configured = configured or a.costs_configured
    return PortfolioSummary(
        invoice_count=count,
        total_sales=sales,
        total_cost=cost,
        total_profit=profit,
        total_vat_credit=credit,
        total_vat_debit=debit,
        net_vat=credit - debit,
        unresolved_lines=unresolved,
        costs_configured=configured,
    )


def combine(summaries: Iterable[PortfolioSummary]) -> PortfolioSummary:
    """Merge partial summaries (e.g. computed over disjoint sets of invoices)."""
    out = PortfolioSummary()
    for s in summaries:
        out = PortfolioSummary(
            invoice_count=out.invoice_count + s.invoice_count,
            total_sales=out.total_sales + s.total_sales,
            total_cost=out.total_cost + s.total_cost,
            total_profit=out.total_profit + s.total_profit,
            total_vat_credit=out.total_vat_credit + s.total_vat_credit,
            total_vat_debit=out.total_vat_debit + s.total_vat_debit,
            net_vat=out.net_vat + s.net_vat,
            unresolved_lines=out.unresolved_lines + s.unresolved_lines,
            costs_configured=out.costs_configured or s.costs_configured,
        )
    return out


def analyze_all(
    invoices: Iterable[Invoice],
    catalog: Iterable[CatalogEntry],
    costs: CostStore,
    tax_rate_percent,
    strict: bool = False,
) -> List[InvoiceAnalysis]:
    catalog = list(catalog)
    costs = index_costs(costs)
    return [invoice_calc.analyze(inv, catalog, costs, tax_rate_percent, strict=strict) for inv in invoices]


def aggregate(
    invoices: Iterable[Invoice],
    catalog: Iterable[CatalogEntry],
    costs: CostStore,
    tax_rate_percent,
    strict: bool = False,
) -> PortfolioSummary:
    """Running totals across a set of remitos, e.g. a client's full history."""
    return summarize(analyze_all(invoices, catalog, costs, tax_rate_percent, strict=strict))


def aggregate_by_client(
    invoices: Iterable[Invoice],
    catalog: Iterable[CatalogEntry],
    costs: CostStore,
    tax_rate_percent,
    strict: bool = False,
    unknown_client: str = "",
) -> Dict[str, PortfolioSummary]:
    grouped: Dict[str, List[Invoice]] = {}
    for inv in invoices:
        grouped.setdefault(inv.client or unknown_client, []).append(inv)
    catalog = list(catalog)
    costs = index_costs(costs)
    return {
        client: aggregate(group, catalog, costs, tax_rate_percent, strict=strict)
        for client, group in grouped.items()
    }
