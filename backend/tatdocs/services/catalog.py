"""
Product catalog and regulatory lookup tables, held in memory for the calculation engine.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from datetime import date, datetime
from threading import Lock
from typing import Dict, List, Optional

from tatdocs.config.catalog_loader import (
    get_default_hts_code,
    get_max_gross_weight_kg,
    get_product_rows,
    get_section,
    load_catalog_config,
)
from tatdocs.schemas.catalog import (
    NOT_FOUND,
    EmergencyContact,
    ExporterInfo,
    PackagingStandard,
    Personnel,
    Product,
    ShippingName,
)

logger = logging.getLogger(__name__)

DEFAULT_PH = 7.5
SG_LOWER_FACTOR = 0.98
SG_UPPER_FACTOR = 1.02


class CatalogError(ValueError):
    """Raised when the catalog configuration is inconsistent."""


@dataclass
class Catalog:
    products: List[Product]
    packaging: PackagingStandard
    max_gross_weight_kg: float
    exporter: ExporterInfo
    personnel: Personnel
    emergency_contact: EmergencyContact
    erg_numbers: Dict[str, str] = field(default_factory=dict)
    shipping_names: Dict[str, ShippingName] = field(default_factory=dict)
    default_hts_code: str = ""
    _by_id: Dict[str, Product] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self):
        if not self.products:
            raise CatalogError("Catalog must contain at least one product")
        for product in self.products:
            if product.id in self._by_id:
                raise CatalogError(f"Duplicate product id {product.id}")
            if product.density <= 0:
                raise CatalogError(f"Product {product.id} has non-positive density")
            self._by_id[product.id] = product
        pack = self.packaging
        if min(pack.drum_tare_kg, pack.tote_tare_kg, pack.drums_per_pallet, pack.totes_per_pallet) <= 0:
            raise CatalogError("Packaging standards must all be positive")

    @property
    def default_product(self) -> Product:
        return self.products[0]

    def find_product(self, product_id: Optional[str]) -> Optional[Product]:
        if product_id is None:
            return None
        return self._by_id.get(str(product_id))

    def get_product(self, product_id: Optional[str]) -> Product:
        """Resolve a product id; unknown ids fall back to the first catalog entry."""
        product = self.find_product(product_id)
        if product is None:
            logger.debug("Unknown product id %r, using %s", product_id, self.default_product.id)
            return self.default_product
        return product

    def get_erg_number(self, un_number: Optional[str]) -> str:
        return self.erg_numbers.get(un_number or "", NOT_FOUND)

    def get_shipping_name(self, un_number: Optional[str]) -> ShippingName:
        name = self.shipping_names.get(un_number or "")
        return name if name is not None else ShippingName()


def _build_product(row: Dict) -> Product:
    density = float(row["density"])
    return Product(
        id=str(row["id"]),
        name=row["name"],
        un_number=row["un_number"],
        hazard_class=str(row["hazard_class"]),
        packing_group=str(row["packing_group"]),
        density=density,
        kg_per_tote=float(row["kg_per_tote"]),
        kg_per_drum=float(row["kg_per_drum"]),
        hts_code=str(row["hts_code"]),
        ph=float(row.get("ph", DEFAULT_PH)),
        min_sg=float(row.get("min_sg", density * SG_LOWER_FACTOR)),
        max_sg=float(row.get("max_sg", density * SG_UPPER_FACTOR)),
    )


def _load_catalog() -> Catalog:
    catalog = Catalog(
        products=[_build_product(row) for row in get_product_rows()],
        packaging=PackagingStandard(**get_section("packaging")),
        max_gross_weight_kg=get_max_gross_weight_kg(),
        exporter=ExporterInfo(**get_section("exporter")),
        personnel=Personnel(**get_section("personnel")),
        emergency_contact=EmergencyContact(**get_section("emergency_contact")),
        erg_numbers={str(k): str(v) for k, v in get_section("erg_numbers").items()},
        shipping_names={
            str(k): ShippingName(**v) for k, v in get_section("proper_shipping_names").items()
        },
        default_hts_code=get_default_hts_code(),
    )
    logger.info("Loaded product catalog with %d products", len(catalog.products))
    return catalog


_CATALOG: Optional[Catalog] = None
_CATALOG_LOCK = Lock()


def get_catalog(force_reload: bool = False) -> Catalog:
    global _CATALOG
    with _CATALOG_LOCK:
        if force_reload:
            load_catalog_config.cache_clear()
        if _CATALOG is None or force_reload:
            _CATALOG = _load_catalog()
        return _CATALOG


def get_product_by_id(product_id: Optional[str]) -> Product:
    return get_catalog().get_product(product_id)


def get_erg_number(un_number: Optional[str]) -> str:
    return get_catalog().get_erg_number(un_number)


def get_proper_shipping_name(un_number: Optional[str]) -> ShippingName:
    return get_catalog().get_shipping_name(un_number)


def generate_lot_number() -> str:
    return f"LOT-{random.randint(0, 99999):05d}"


def parse_ship_date(ship_date: Optional[str]) -> Optional[date]:
    if not ship_date:
        return None
    try:
        return datetime.strptime(ship_date.strip(), "%Y-%m-%d").date()
    except ValueError:
        return None


def generate_lab_id(ship_date: Optional[str]) -> str:
    """Lab id printed on the certificate of quality: MMDDYY of the ship date."""
    parsed = parse_ship_date(ship_date)
    return parsed.strftime("%m%d%y") if parsed else ""


def current_year(ship_date: Optional[str]) -> int:
    parsed = parse_ship_date(ship_date)
    return parsed.year if parsed else date.today().year
