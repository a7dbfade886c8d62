"""
Catalog schemas - products, packaging standards and regulatory lookups.
"""
from pydantic import BaseModel
from typing import List

NOT_REGULATED = "Not regulated"
NOT_FOUND = "N/A"


class Product(BaseModel):
    id: str
    name: str
    un_number: str
    hazard_class: str
    packing_group: str
    density: float
    kg_per_tote: float
    kg_per_drum: float
    hts_code: str
    ph: float
    min_sg: float
    max_sg: float

    class Config:
        frozen = True

    @property
    def is_hazmat(self) -> bool:
        return self.un_number != NOT_REGULATED


class PackagingStandard(BaseModel):
    drum_tare_kg: float
    tote_tare_kg: float
    drums_per_pallet: int
    totes_per_pallet: int = 1

    class Config:
        frozen = True


class ExporterInfo(BaseModel):
    name: str
    address: str
    city: str
    phone: str
    email: str
    tax_id: str
    lab_address: str = ""
    lab_city: str = ""

    class Config:
        frozen = True


class Personnel(BaseModel):
    general_manager: str
    shipper_contact: str
    qa_technician: str
    receiver_contact: str
    contact_phone: str
    contact_email: str

    class Config:
        frozen = True


class EmergencyContact(BaseModel):
    chemtrec_phone: str
    ccn: str
    international_phone: str

    class Config:
        frozen = True


class ShippingName(BaseModel):
    """DOT (English) and NOM-002-SCT (Spanish) proper shipping names."""
    dot: str = NOT_FOUND
    nom: str = NOT_FOUND
    desc: str = ""

    class Config:
        frozen = True


class HazmatLookupResponse(BaseModel):
    un_number: str
    erg_number: str
    shipping_name: ShippingName


class PackagingResponse(BaseModel):
    packaging: PackagingStandard
    max_gross_weight_kg: float


class ProductListResponse(BaseModel):
    products: List[Product]
    count: int
