"""
Shipment schemas - form data (the editable source of truth) and derived calculations.
"""
from pydantic import BaseModel, Field
from typing import Any, List, Optional, Union
import enum
from tatdocs.schemas.catalog import Product

# Raw numeric form input; the calculation engine coerces anything non-numeric to 0
NumericInput = Union[int, float, str, None]


class PackagingType(str, enum.Enum):
    DRUMS = "drums"
    TOTES = "totes"


class LineItem(BaseModel):
    id: Union[int, str]
    product_id: str
    quantity: NumericInput = 0
    unit_type: PackagingType = PackagingType.TOTES
    unit_price: NumericInput = 0
    lot_number: str = ""


class ShipmentFormData(BaseModel):
    items: List[LineItem] = Field(default_factory=list)
    customer_name: str = ""
    mexico_address: str = ""
    laredo_address: str = ""
    customer_phone: str = ""
    customer_email: str = ""
    rfc: str = ""
    laredo_contact_name: str = ""
    laredo_contact_phone: str = ""
    ship_date: str = ""  # ISO YYYY-MM-DD
    po_number: str = ""
    carrier: str = ""
    broker: str = ""
    load_number: str = ""
    itn_number: str = ""
    base_invoice: str = ""
    sequence: str = ""

    @property
    def invoice_number(self) -> str:
        # String concatenation: sequence "01" stays "01"
        return f"{self.base_invoice}.{self.sequence}"


class ShipmentFieldsUpdate(BaseModel):
    """Partial update of shipment header fields (never items)."""
    customer_name: Optional[str] = None
    mexico_address: Optional[str] = None
    laredo_address: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
    rfc: Optional[str] = None
    laredo_contact_name: Optional[str] = None
    laredo_contact_phone: Optional[str] = None
    ship_date: Optional[str] = None
    po_number: Optional[str] = None
    carrier: Optional[str] = None
    broker: Optional[str] = None
    load_number: Optional[str] = None
    itn_number: Optional[str] = None
    base_invoice: Optional[str] = None
    sequence: Optional[str] = None


class LineItemUpdate(BaseModel):
    field: str  # product_id, quantity, unit_type, unit_price, lot_number
    value: Any = None


class CalculatedLineItem(LineItem):
    product: Product
    quantity: float
    unit_price: float
    net_weight: float
    tare_weight: float
    gross_weight: float
    total_value: float
    pallets: float
    is_hazmat: bool


class ShipmentCalculations(BaseModel):
    items: List[CalculatedLineItem]
    total_net_weight: float
    total_tare_weight: float
    total_gross_weight: float
    total_value: float
    total_pallets: float
    total_quantity: float
    has_hazmat: bool
    invoice_number: str
    is_overweight: bool


class ShipmentStateResponse(BaseModel):
    form_data: ShipmentFormData
    calculations: ShipmentCalculations
