from __future__ import annotations

from decimal import Decimal

import pytest

from remito_engine.calculators import estribos


@pytest.mark.parametrize(
    "size,expected",
    [
        ("10", [Decimal("10")]),
        ("10x20", [Decimal("10"), Decimal("20")]),
        ("10X20", [Decimal("10"), Decimal("20")]),
        ("10 × 20 cm", [Decimal("10"), Decimal("20")]),
        ("10x10x10", [Decimal("10")] * 3),
        ("12,5x20", [Decimal("12.5"), Decimal("20")]),
    ],
)
def test_parse_dimensions(size: str, expected) -> None:
    assert estribos.parse_dimensions(size) == expected


@pytest.mark.parametrize("size", ["", "x", "10x", "abc", "1.5 pulgadas", "10x10x10x10", "0x10", "-5x10", "nanx2"])
def test_parse_dimensions_rejects_malformed(size: str) -> None:
    assert estribos.parse_dimensions(size) == []


def test_perimeter_by_dimension_count() -> None:
    d = estribos.parse_dimensions
    assert estribos.perimeter_cm(d("15")) == 60
    assert estribos.perimeter_cm(d("10x10")) == 40
    assert estribos.perimeter_cm(d("10x20")) == 60
    assert estribos.perimeter_cm(d("10x10x10")) == 30


def test_shape_hint_takes_precedence() -> None:
    d = estribos.parse_dimensions
    assert estribos.perimeter_cm(d("10x10"), "Cuadrado") == 40
    # square only needs the first side
    assert estribos.perimeter_cm(d("10x20"), "Cuadrado") == 40
    assert estribos.perimeter_cm(d("10x20"), "cuadrada") == 40
    assert estribos.perimeter_cm(d("10x20"), "Rectangular") == 60
    assert estribos.perimeter_cm(d("10x20x25"), "Triangular") == 55


def test_unrecognized_combination_falls_back_to_rectangle_or_zero() -> None:
    d = estribos.parse_dimensions
    assert estribos.perimeter_cm(d("10x20"), "Triangular") == 60
    assert estribos.perimeter_cm(d("10"), "Rectangular") == 0
    assert estribos.perimeter_cm(d("10x20x30"), "Rectangular") == 0
    # unknown labels are ignored
    assert estribos.perimeter_cm(d("10x20x30"), "Ovalado") == 60
    assert estribos.perimeter_cm([], None) == 0


def test_two_bends_are_added() -> None:
    assert estribos.with_bends(Decimal(60)) == Decimal(72)
    assert estribos.with_bends(Decimal(60), bend_allowance_cm=5) == Decimal(70)
    assert estribos.with_bends(Decimal(60), bends=3) == Decimal(78)
    assert estribos.with_bends(Decimal(0)) == 0


def test_unit_conversion_and_pricing() -> None:
    assert estribos.cm_to_m(72) == Decimal("0.72")
    assert estribos.material_cost(Decimal("0.72"), 0.395, 1500) == Decimal("426.60")


def test_estimate_end_to_end() -> None:
    est = estribos.estimate("10x20", kg_per_meter=0.395, price_per_kg=1500)
    assert est.valid
    assert est.perimeter_cm == 60
    assert est.length_cm == 72
    assert est.meters == Decimal("0.72")
    assert est.weight_kg == pytest.approx(Decimal("0.2844"))
    assert est.cost == pytest.approx(Decimal("426.60"))


def test_estimate_malformed_size_is_zero_not_error() -> None:
    est = estribos.estimate("sin medida", kg_per_meter=0.395, price_per_kg=1500)
    assert not est.valid
    assert est.meters == 0
    assert est.cost == 0
