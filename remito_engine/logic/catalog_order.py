from __future__ import annotations

import re
from typing import Dict, Iterable, List, Tuple

from ..models import CatalogEntry

# Most sold wire diameters first
DIAMETER_PRIORITY = ("4.2", "6")
NO_DIAMETER = "999"


def leading_number(size: str) -> float:
    m = re.search(r"(\d+(?:\.\d+)?)", size or "")
    return float(m.group(1)) if m else 0.0


def is_triangular(size: str) -> bool:
    # 3 dimensions means 2 'x' markers
    return len(re.findall(r"x", size or "", re.IGNORECASE)) >= 2


def sort_key(entry: CatalogEntry) -> Tuple:
    diameter = entry.diameter or NO_DIAMETER
    if diameter in DIAMETER_PRIORITY:
        rank = DIAMETER_PRIORITY.index(diameter)
    else:
        rank = len(DIAMETER_PRIORITY)
    return (is_triangular(entry.size), rank, diameter, leading_number(entry.size))


def sort_entries(entries: Iterable[CatalogEntry]) -> List[CatalogEntry]:
    """Order entries for display: triangular sizes last, 4.2 then 6 mm diameters, then by size."""
    return sorted(entries, key=sort_key)


def category_key(name: str) -> Tuple[bool, str]:
    return ("estribo" not in name.lower(), name)


def group_by_category(entries: Iterable[CatalogEntry], default: str = "Sin categoría") -> Dict[str, List[CatalogEntry]]:
    """Group entries by category, estribos first, each group display-ordered."""
    grouped: Dict[str, List[CatalogEntry]] = {}
    for e in entries:
        grouped.setdefault(e.category or default, []).append(e)
    return {name: sort_entries(grouped[name]) for name in sorted(grouped, key=category_key)}
