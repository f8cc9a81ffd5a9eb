from __future__ import annotations

from remito_engine.logic.catalog_order import group_by_category, is_triangular, leading_number, sort_entries
from remito_engine.models import CatalogEntry


def _e(id, size, diameter=None, category=None):
    return CatalogEntry(id=id, name="Estribo", size=size, diameter=diameter, category=category)


def test_helpers() -> None:
    assert leading_number("15x20") == 15.0
    assert leading_number("4.5 pulgadas") == 4.5
    assert leading_number("doble") == 0.0
    assert is_triangular("10x10x10")
    assert not is_triangular("10x10")


def test_sort_entries() -> None:
    entries = [
        _e("tri", "10x10x10", "4.2"),
        _e("none", "8x8"),
        _e("d8", "8x8", "8"),
        _e("d6-20", "20x20", "6"),
        _e("d6-8", "8x8", "6"),
        _e("d42", "30x30", "4.2"),
    ]
    assert [e.id for e in sort_entries(entries)] == ["d42", "d6-8", "d6-20", "d8", "none", "tri"]


def test_group_by_category_puts_estribos_first() -> None:
    entries = [
        _e("a", "1", category="Alambres"),
        _e("b", "2", category="Clavos"),
        _e("c", "3", category="Estribos"),
        _e("d", "4"),
    ]
    groups = group_by_category(entries)
    assert list(groups) == ["Estribos", "Alambres", "Clavos", "Sin categoría"]
