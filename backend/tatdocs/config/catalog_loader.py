"""
Utilities for loading the product catalog / regulatory tables configuration.
"""
from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

CONFIG_PATH = Path(__file__).resolve().parent / "catalog.yaml"


def _config_path() -> Path:
    override = os.getenv("CATALOG_PATH")
    return Path(override) if override else CONFIG_PATH


@lru_cache()
def load_catalog_config() -> Dict[str, Any]:
    path = _config_path()
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}


def get_section(name: str) -> Dict[str, Any]:
    return dict(load_catalog_config().get(name) or {})


def get_product_rows() -> List[Dict[str, Any]]:
    return [dict(row) for row in load_catalog_config().get("products") or []]


def get_max_gross_weight_kg(default: float = 21000) -> float:
    value: Optional[Any] = load_catalog_config().get("max_gross_weight_kg")
    return float(value) if value is not None else float(default)


def get_default_hts_code() -> str:
    return str(load_catalog_config().get("default_hts_code") or "")
