from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


LineStatus = Literal["ok", "unmatched", "missing_cost", "invalid_input"]


class CatalogEntry(BaseModel):
    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    id: str
    name: str
    size: str
    diameter: Optional[str] = None
    shape: Optional[str] = None  # Cuadrado | Rectangular | Triangular | other
    price: Decimal = Decimal(0)
    category: Optional[str] = None


class CostRecord(BaseModel):
    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    product_id: str
    production_cost: Decimal = Decimal(0)  # tax-inclusive
    profit_margin: Decimal = Decimal(0)  # percent


class MedidaDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    size: str
    diameter: Optional[str] = None
    name: str


class InvoiceLineItem(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    quantity: int = Field(gt=0)
    medida: str
    product: str
    unit_price: Decimal = Decimal(0)
    line_total: Optional[Decimal] = None  # stored at creation, never recomputed

    @property
    def total(self) -> Decimal:
        if self.line_total is not None:
            return self.line_total
        return self.unit_price * self.quantity


class Invoice(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    number: Optional[str] = None
    client: Optional[str] = None
    date: Optional[dt.date] = None
    items: List[InvoiceLineItem] = Field(default_factory=list)
    total: Optional[Decimal] = None

    @property
    def sale_total(self) -> Decimal:
        if self.total is not None:
            return self.total
        return sum((item.total for item in self.items), Decimal(0))


class Supplier(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    name: str
    price_per_kg: Decimal = Decimal(0)  # net of tax


class EstriboSpec(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    medida: str
    shape: Optional[str] = None
    weights: Dict[str, Decimal] = Field(default_factory=dict)  # supplier id -> kg per unit


class EngineConfig(BaseModel):
    tax_rate: Decimal = Field(default=Decimal(21), ge=0)
    default_margin: Decimal = Field(default=Decimal(90), ge=0)
    bend_allowance_cm: Decimal = Field(default=Decimal(6), ge=0)
    bends: int = Field(default=2, ge=0)
    currency_symbol: str = "$"
    strict_matching: bool = False


# Results


class TaxSplit(BaseModel):
    net: Decimal
    tax: Decimal


class EstriboEstimate(BaseModel):
    size: str
    shape: Optional[str] = None
    dimensions_cm: List[Decimal] = Field(default_factory=list)
    perimeter_cm: Decimal = Decimal(0)
    length_cm: Decimal = Decimal(0)
    meters: Decimal = Decimal(0)
    weight_kg: Decimal = Decimal(0)
    cost: Decimal = Decimal(0)

    @property
    def valid(self) -> bool:
        return self.perimeter_cm > 0


class PriceSuggestion(BaseModel):
    production_cost: Decimal
    net_cost: Decimal
    contained_tax: Decimal
    cost_with_margin: Decimal
    final_price: Decimal


class LineCost(BaseModel):
    medida: str
    product: str
    quantity: int
    status: LineStatus
    product_id: Optional[str] = None
    cost: Optional[Decimal] = None  # None unless status == "ok"

    @property
    def resolved(self) -> bool:
        return self.status == "ok"

    @property
    def amount(self) -> Decimal:
        return self.cost if self.cost is not None else Decimal(0)


class InvoiceAnalysis(BaseModel):
    invoice_id: str
    client: Optional[str] = None
    sale_total: Decimal = Decimal(0)
    cost_total: Decimal = Decimal(0)
    real_profit: Decimal = Decimal(0)
    vat_on_sale: Decimal = Decimal(0)  # credit
    vat_on_cost: Decimal = Decimal(0)  # debit
    lines: List[LineCost] = Field(default_factory=list)

    @property
    def net_vat(self) -> Decimal:
        return self.vat_on_sale - self.vat_on_cost

    @property
    def costs_configured(self) -> bool:
        return any(line.resolved for line in self.lines)

    @property
    def complete(self) -> bool:
        return all(line.resolved for line in self.lines)

    @property
    def unresolved(self) -> List[LineCost]:
        return [line for line in self.lines if not line.resolved]


class PortfolioSummary(BaseModel):
    invoice_count: int = 0
    total_sales: Decimal = Decimal(0)
    total_cost: Decimal = Decimal(0)
    total_profit: Decimal = Decimal(0)
    total_vat_credit: Decimal = Decimal(0)
    total_vat_debit: Decimal = Decimal(0)
    net_vat: Decimal = Decimal(0)
    unresolved_lines: int = 0
    costs_configured: bool = False


class SupplierQuote(BaseModel):
    estribo_id: str
    medida: str
    supplier_id: str
    supplier: str
    weight_kg: Decimal
    base_cost: Decimal
    cost_with_margin: Decimal
    tax: Decimal
    price_gross: Decimal

    @property
    def price_net(self) -> Decimal:
        return self.cost_with_margin


class SupplierComparison(BaseModel):
    medida: str
    quotes: List[SupplierQuote] = Field(default_factory=list)
    cheapest: SupplierQuote
    most_expensive: SupplierQuote
    savings: Decimal = Decimal(0)
    savings_percent: Decimal = Decimal(0)
