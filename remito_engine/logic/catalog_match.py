from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional, Tuple

from rapidfuzz import fuzz, process

from ..errors import AmbiguousMatchError
from ..models import CatalogEntry, MedidaDescriptor

logger = logging.getLogger(__name__)


def _matches(entry: CatalogEntry, descriptor: MedidaDescriptor) -> bool:
    if entry.size != descriptor.size or entry.name != descriptor.name:
        return False
    if descriptor.diameter:
        return entry.diameter == descriptor.diameter
    # No diameter on the line: diameter plays no part
    return True


def find_all(descriptor: MedidaDescriptor, catalog: Iterable[CatalogEntry]) -> List[CatalogEntry]:
    return [e for e in catalog if _matches(e, descriptor)]


def match(
    descriptor: MedidaDescriptor,
    catalog: Iterable[CatalogEntry],
    strict: bool = False,
) -> Optional[CatalogEntry]:
    """Resolve a line descriptor to its catalog entry by exact (size, diameter, name).

    Returns None when nothing matches. Duplicate entries are a data problem
    upstream: by default the first one wins (and a warning is logged); with
    ``strict=True`` an AmbiguousMatchError is raised instead.
    """
    found = find_all(descriptor, catalog)
    if not found:
        logger.debug("No catalog entry for %s", descriptor)
        return None
    if len(found) > 1:
        ids = [e.id for e in found]
        if strict:
            raise AmbiguousMatchError(descriptor, ids)
        logger.warning("Ambiguous catalog match for %r %r (diameter=%r): %s; using %s",
                       descriptor.name, descriptor.size, descriptor.diameter, ids, ids[0])
    return found[0]


def _normalize(s: str) -> str:
    s = s.lower().replace("-", " ").replace("ø", " ")
    s = re.sub(r"mm\b", " ", s)
    s = re.sub(r"\s+", " ", s).strip()
    return s


def _label(name: str, size: str, diameter: Optional[str]) -> str:
    return _normalize(" ".join(p for p in (name, size, diameter or "") if p))


def suggest(
    descriptor: MedidaDescriptor,
    catalog: Iterable[CatalogEntry],
    limit: int = 3,
    min_score: int = 60,
) -> List[Tuple[CatalogEntry, int]]:
    """Closest catalog entries for a descriptor that did not match exactly.

    Advisory only, for administrators fixing catalog or invoice data.
    """
    entries = list(catalog)
    if not entries:
        return []
    query = _label(descriptor.name, descriptor.size, descriptor.diameter)
    choices = {i: _label(e.name, e.size, e.diameter) for i, e in enumerate(entries)}
    results = process.extract(query, choices, scorer=fuzz.token_set_ratio, limit=limit)
    # results: list of (choice, score, key)
    out: List[Tuple[CatalogEntry, int]] = []
    for _, score, key in results:
        if score >= min_score:
            out.append((entries[key], int(score)))
    return out
