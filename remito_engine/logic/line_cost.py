from __future__ import annotations

import logging
from decimal import Decimal
from typing import Dict, Iterable, Mapping, Optional, Sequence, Union

from ..models import CatalogEntry, CostRecord, InvoiceLineItem, LineCost
from ..normalize.medida import descriptor_for
from .catalog_match import match

logger = logging.getLogger(__name__)

CostStore = Union[Mapping[str, CostRecord], Iterable[CostRecord]]


def index_costs(costs: CostStore) -> Mapping[str, CostRecord]:
    """Key cost records by product id; a mapping is returned as is."""
    if isinstance(costs, Mapping):
        return costs
    out: Dict[str, CostRecord] = {}
    for rec in costs or []:
        out.setdefault(rec.product_id, rec)
    return out


def resolve_line(
    item: InvoiceLineItem,
    catalog: Sequence[CatalogEntry],
    costs: CostStore,
    strict: bool = False,
) -> LineCost:
    """Resolve the recorded production cost of one sold line, scaled by quantity.

    The result is tagged: ``ok`` carries the cost, ``unmatched`` means no
    catalog entry fits the line and ``missing_cost`` means the entry has no
    cost record yet.
    """
    base = {"medida": item.medida, "product": item.product, "quantity": item.quantity}
    if not (item.medida or "").strip():
        return LineCost(status="invalid_input", **base)

    entry = match(descriptor_for(item), catalog, strict=strict)
    if entry is None:
        return LineCost(status="unmatched", **base)

    record: Optional[CostRecord] = index_costs(costs).get(entry.id)
    if record is None:
        logger.debug("No cost record for %s (%s %s)", entry.id, entry.name, entry.size)
        return LineCost(status="missing_cost", product_id=entry.id, **base)

    return LineCost(
        status="ok",
        product_id=entry.id,
        cost=record.production_cost * item.quantity,
        **base,
    )


def resolve_cost(
    item: InvoiceLineItem,
    catalog: Sequence[CatalogEntry],
    costs: CostStore,
    strict: bool = False,
) -> Decimal:
    """Recorded cost of a line, or 0 when the line cannot be resolved."""
    return resolve_line(item, catalog, costs, strict=strict).amount
