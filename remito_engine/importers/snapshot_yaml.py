from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar

import yaml
from pydantic import BaseModel, ValidationError

from ..errors import SnapshotError
from ..models import CatalogEntry, CostRecord, EngineConfig, EstriboSpec, Invoice, Supplier

M = TypeVar("M", bound=BaseModel)


def _load(path: Path) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                return json.load(f)
            return yaml.safe_load(f)
    except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
        raise SnapshotError(f"cannot read {path}: {e}") from e


def _records(data: Any, key: str, path: Path) -> List[Dict[str, Any]]:
    # Accept either a bare list or a mapping with the list under `key`
    if data is None:
        return []
    if isinstance(data, dict):
        data = data.get(key) or []
    if not isinstance(data, list):
        raise SnapshotError(f"{path}: expected a list of {key}")
    return data


def _parse(model: Type[M], rows: List[Dict[str, Any]], path: Path) -> List[M]:
    out: List[M] = []
    for i, row in enumerate(rows):
        try:
            out.append(model.model_validate(row))
        except ValidationError as e:
            raise SnapshotError(f"{path}: record {i} is not a valid {model.__name__}: {e}") from e
    return out


def load_catalog(path: Path) -> List[CatalogEntry]:
    return _parse(CatalogEntry, _records(_load(path), "products", path), path)


def load_costs(path: Path) -> List[CostRecord]:
    return _parse(CostRecord, _records(_load(path), "costs", path), path)


def load_invoices(path: Path) -> List[Invoice]:
    return _parse(Invoice, _records(_load(path), "remitos", path), path)


def load_suppliers(path: Path) -> Tuple[List[Supplier], List[EstriboSpec]]:
    data = _load(path) or {}
    if not isinstance(data, dict):
        raise SnapshotError(f"{path}: expected 'suppliers' and 'estribos' sections")
    suppliers = _parse(Supplier, _records(data, "suppliers", path), path)
    specs = _parse(EstriboSpec, _records(data, "estribos", path), path)
    return suppliers, specs


def load_config(path: Optional[Path]) -> EngineConfig:
    """Engine settings from YAML; defaults when the file is absent."""
    if path is None or not path.exists():
        return EngineConfig()
    data = _load(path) or {}
    try:
        return EngineConfig.model_validate(data)
    except ValidationError as e:
        raise SnapshotError(f"{path}: invalid engine config: {e}") from e
