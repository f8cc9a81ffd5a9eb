from __future__ import annotations

from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Dict, List, Optional

import csv
import re

from ..errors import SnapshotError
from ..models import CatalogEntry

_GROUPED = re.compile(r"^-?\d{1,3}(\.\d{3})+$")


def _to_price(x: str) -> Decimal:
    # Accept 1500.50, the local 1.500,50 and whole-unit 1.500
    x = (x or "").strip().replace("$", "").replace(" ", "")
    if "," in x:
        x = x.replace(".", "").replace(",", ".")
    elif _GROUPED.match(x):
        x = x.replace(".", "")
    try:
        return Decimal(x)
    except InvalidOperation:
        return Decimal(0)


def _norm(s: str) -> str:
    return "".join(ch for ch in s.lower() if ch.isalnum())


def parse(path: Optional[Path]) -> List[CatalogEntry]:
    """Read a catalog export (one product per row) into catalog entries.

    Header names are matched loosely (Spanish or English, any case/spacing).
    Rows without an id, name or size are skipped.
    """
    if not path:
        return []
    rows: List[CatalogEntry] = []
    try:
        f = open(path, newline="", encoding="utf-8")
    except OSError as e:
        raise SnapshotError(f"cannot read {path}: {e}") from e
    with f:
        reader = csv.DictReader(f)
        headers = {h: _norm(h) for h in reader.fieldnames or []}
        inv = {v: k for k, v in headers.items()}

        def get(row: Dict[str, str], key_variants: List[str]) -> str:
            for k in key_variants:
                if k in inv:
                    return (row.get(inv[k]) or "").strip()
            return ""

        for row in reader:
            pid = get(row, ["id", "productid", "codigo", "código", "code"])
            name = get(row, ["name", "nombre", "producto", "product"])
            size = get(row, ["size", "medida"])
            if not (pid and name and size):
                continue
            rows.append(
                CatalogEntry(
                    id=pid,
                    name=name,
                    size=size,
                    diameter=get(row, ["diameter", "diametro", "diámetro"]) or None,
                    shape=get(row, ["shape", "forma"]) or None,
                    price=_to_price(get(row, ["price", "precio"])),
                    category=get(row, ["category", "categoria", "categoría"]) or None,
                )
            )
    return rows
