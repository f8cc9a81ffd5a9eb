from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from ..models import EstriboEstimate
from ..utils import to_decimal

logger = logging.getLogger(__name__)

DEFAULT_BEND_ALLOWANCE_CM = Decimal(6)
DEFAULT_BENDS = 2

SHAPE_SQUARE = "square"
SHAPE_RECTANGLE = "rectangle"
SHAPE_TRIANGLE = "triangle"

# Labels used by the catalog (and the feminine forms the product form uses)
SHAPE_ALIASES = {
    "cuadrado": SHAPE_SQUARE,
    "cuadrada": SHAPE_SQUARE,
    "rectangular": SHAPE_RECTANGLE,
    "triangular": SHAPE_TRIANGLE,
}


def parse_dimensions(size: str) -> List[Decimal]:
    """Parse sizes like '10x20' or '10 X 10 x 10 cm' into centimetre values.

    Returns an empty list when the label has no dimensions, more than three,
    or any token that is not a positive number.
    """
    if not size:
        return []
    t = size.lower().replace("×", "x").replace("cm", "").replace(",", ".")
    tokens = [s.strip() for s in t.split("x")]
    if not 1 <= len(tokens) <= 3:
        return []
    dims: List[Decimal] = []
    for tok in tokens:
        if not tok:
            return []
        try:
            value = Decimal(tok)
        except InvalidOperation:
            return []
        if not value.is_finite() or value <= 0:
            return []
        dims.append(value)
    return dims


def shape_kind(shape: Optional[str]) -> Optional[str]:
    if not shape:
        return None
    return SHAPE_ALIASES.get(shape.strip().lower())


def perimeter_cm(dims: List[Decimal], shape: Optional[str] = None) -> Decimal:
    """Perimeter of the bent shape. An explicit shape hint wins over the dimension count.

    1 dimension or Cuadrado   -> 4 * d1
    2 dimensions or Rectangular -> 2 * (d1 + d2)
    3 dimensions or Triangular  -> d1 + d2 + d3
    Anything else falls back to the rectangular rule when exactly two
    numbers are present, else 0.
    """
    n = len(dims)
    kind = shape_kind(shape)
    if kind is None:
        kind = {1: SHAPE_SQUARE, 2: SHAPE_RECTANGLE, 3: SHAPE_TRIANGLE}.get(n)

    if kind == SHAPE_SQUARE and n >= 1:
        return 4 * dims[0]
    if kind == SHAPE_RECTANGLE and n == 2:
        return 2 * (dims[0] + dims[1])
    if kind == SHAPE_TRIANGLE and n == 3:
        return dims[0] + dims[1] + dims[2]
    if n == 2:
        return 2 * (dims[0] + dims[1])
    return Decimal(0)


def with_bends(perimeter, bend_allowance_cm=DEFAULT_BEND_ALLOWANCE_CM, bends: int = DEFAULT_BENDS) -> Decimal:
    """Add the material consumed by each bend. Zero perimeter stays zero."""
    perimeter = to_decimal(perimeter)
    if perimeter <= 0:
        return Decimal(0)
    return perimeter + bends * to_decimal(bend_allowance_cm)


def cm_to_m(length_cm) -> Decimal:
    return to_decimal(length_cm) / Decimal(100)


def material_cost(meters, kg_per_meter, price_per_kg) -> Decimal:
    return to_decimal(meters) * to_decimal(kg_per_meter) * to_decimal(price_per_kg)


def estimate(
    size: str,
    shape: Optional[str] = None,
    kg_per_meter=0,
    price_per_kg=0,
    bend_allowance_cm=DEFAULT_BEND_ALLOWANCE_CM,
    bends: int = DEFAULT_BENDS,
) -> EstriboEstimate:
    """Estimate the raw-material cost of one estribo from its size label.

    Unparseable sizes give a zero estimate (``valid`` is False) so a batch of
    estimates keeps going.
    """
    dims = parse_dimensions(size)
    perimeter = perimeter_cm(dims, shape)
    if perimeter <= 0:
        logger.debug("No usable dimensions in size %r (shape=%r)", size, shape)
    length = with_bends(perimeter, bend_allowance_cm, bends)
    meters = cm_to_m(length)
    return EstriboEstimate(
        size=size,
        shape=shape,
        dimensions_cm=dims,
        perimeter_cm=perimeter,
        length_cm=length,
        meters=meters,
        weight_kg=meters * to_decimal(kg_per_meter),
        cost=material_cost(meters, kg_per_meter, price_per_kg),
    )
