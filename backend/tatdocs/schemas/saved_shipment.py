"""
Saved Shipment schemas.
"""
from pydantic import BaseModel
from datetime import datetime
from typing import List, Optional
from tatdocs.schemas.shipment import ShipmentFormData


class SavedShipmentResponse(BaseModel):
    id: str
    invoice_number: str
    customer_name: str
    ship_date: Optional[str] = None
    total_value: float
    total_gross_weight: float
    item_count: int
    products: List[str] = []
    created_at: datetime

    class Config:
        from_attributes = True


class SavedShipmentDetail(SavedShipmentResponse):
    form_data: ShipmentFormData


class SavedShipmentList(BaseModel):
    shipments: List[SavedShipmentResponse]
    count: int
    error: Optional[str] = None
