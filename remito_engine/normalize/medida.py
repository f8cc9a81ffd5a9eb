from __future__ import annotations

from typing import Optional

from ..models import InvoiceLineItem, MedidaDescriptor

DIAMETER_MARKER = "-Ø"
DIAMETER_UNIT = "mm"


def parse_medida(medida: str, name: str) -> MedidaDescriptor:
    """Parse a stored medida like '12x12-Ø6mm' into size '12x12' and diameter '6'.

    Medidas without the diameter marker (nails, wire) are all size.
    """
    medida = (medida or "").strip()
    if DIAMETER_MARKER in medida:
        size, diameter_part = medida.split(DIAMETER_MARKER, 1)
        diameter = diameter_part.strip()
        if diameter.lower().endswith(DIAMETER_UNIT):
            diameter = diameter[: -len(DIAMETER_UNIT)].strip()
        return MedidaDescriptor(size=size.strip(), diameter=diameter or None, name=name)
    return MedidaDescriptor(size=medida, diameter=None, name=name)


def descriptor_for(item: InvoiceLineItem) -> MedidaDescriptor:
    return parse_medida(item.medida, item.product)


def format_medida(size: str, diameter: Optional[str] = None) -> str:
    if not diameter:
        return size
    return f"{size}{DIAMETER_MARKER}{diameter}{DIAMETER_UNIT}"


def display_medida(medida: str) -> str:
    # '12x12-Ø6mm' -> '12x12 Ø6mm'
    return medida.replace(DIAMETER_MARKER, " Ø")
