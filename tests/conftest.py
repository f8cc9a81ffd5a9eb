from __future__ import annotations

from decimal import Decimal

import pytest

from remito_engine.models import CatalogEntry, CostRecord, Invoice, InvoiceLineItem


@pytest.fixture
def catalog():
    return [
        CatalogEntry(id="e-12-6", name="Estribo", size="12x12", diameter="6", shape="Cuadrado", price=Decimal("350"), category="Estribos"),
        CatalogEntry(id="e-12-42", name="Estribo", size="12x12", diameter="4.2", shape="Cuadrado", price=Decimal("250"), category="Estribos"),
        CatalogEntry(id="e-10x20-6", name="Estribo", size="10x20", diameter="6", shape="Rectangular", price=Decimal("400"), category="Estribos"),
        CatalogEntry(id="clavo-2", name="Clavo", size="2 pulgadas", price=Decimal("1200"), category="Clavos"),
        CatalogEntry(id="alambre-17", name="Alambre", size="17/15", price=Decimal("9000"), category="Alambres"),
    ]


@pytest.fixture
def costs():
    return {
        "e-12-6": CostRecord(product_id="e-12-6", production_cost=Decimal("121"), profit_margin=Decimal("90")),
        "e-12-42": CostRecord(product_id="e-12-42", production_cost=Decimal("96.8"), profit_margin=Decimal("90")),
        "clavo-2": CostRecord(product_id="clavo-2", production_cost=Decimal("605"), profit_margin=Decimal("50")),
    }


def line(qty, medida, product, unit_price):
    unit_price = Decimal(str(unit_price))
    return InvoiceLineItem(quantity=qty, medida=medida, product=product, unit_price=unit_price, line_total=unit_price * qty)


@pytest.fixture
def invoices():
    a_items = [
        line(10, "12x12-Ø6mm", "Estribo", 350),
        line(4, "2 pulgadas", "Clavo", 1200),
    ]
    b_items = [
        line(20, "12x12-Ø4.2mm", "Estribo", 250),
        line(2, "17/15", "Alambre", 9000),  # no cost record
        line(5, "12x12-Ø8mm", "Estribo", 500),  # no such diameter
    ]
    c_items = [line(3, "10x20-Ø6mm", "Estribo", 400)]  # no cost record
    return [
        Invoice(id="r-1", number="0001", client="Obra Norte", items=a_items, total=sum(i.total for i in a_items)),
        Invoice(id="r-2", number="0002", client="Obra Norte", items=b_items, total=sum(i.total for i in b_items)),
        Invoice(id="r-3", number="0003", client="Corralón Sur", items=c_items, total=sum(i.total for i in c_items)),
    ]
