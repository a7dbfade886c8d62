"""
Shipment store - persists named snapshots of the shipment form.

Only the form input plus a denormalized summary is stored; calculations are
always recomputed from the form after loading.
"""
from __future__ import annotations

import logging
from typing import List

from sqlalchemy.orm import Session

from tatdocs.models import SavedShipment
from tatdocs.schemas.shipment import ShipmentCalculations, ShipmentFormData

logger = logging.getLogger(__name__)

UNKNOWN_CUSTOMER = "Unknown Customer"


class SavedShipmentNotFoundError(LookupError):
    pass


class ShipmentStore:
    def __init__(self, db: Session):
        self.db = db

    def save(self, form_data: ShipmentFormData, calculations: ShipmentCalculations) -> SavedShipment:
        record = SavedShipment(
            invoice_number=calculations.invoice_number,
            customer_name=form_data.customer_name or UNKNOWN_CUSTOMER,
            ship_date=form_data.ship_date,
            total_value=calculations.total_value,
            total_gross_weight=calculations.total_gross_weight,
            item_count=len(calculations.items),
            products=[item.product.name for item in calculations.items],
            form_data=form_data.model_dump(mode="json"),
        )
        try:
            self.db.add(record)
            self.db.commit()
            self.db.refresh(record)
        except Exception:
            self.db.rollback()
            raise
        logger.info(
            "Saved shipment %s invoice=%s items=%d",
            record.id,
            record.invoice_number,
            record.item_count,
        )
        return record

    def list(self) -> List[SavedShipment]:
        return (
            self.db.query(SavedShipment)
            .order_by(SavedShipment.created_at.desc())
            .all()
        )

    def get(self, shipment_id: str) -> SavedShipment:
        record = self.db.query(SavedShipment).filter(SavedShipment.id == shipment_id).first()
        if not record:
            raise SavedShipmentNotFoundError(f"Saved shipment {shipment_id} not found")
        return record

    def load(self, shipment_id: str) -> ShipmentFormData:
        """Return a fresh copy of the stored form; edits never reach the record."""
        record = self.get(shipment_id)
        logger.info("Loading saved shipment %s", shipment_id)
        return ShipmentFormData.model_validate(record.form_data)

    def delete(self, shipment_id: str) -> None:
        record = self.get(shipment_id)
        try:
            self.db.delete(record)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info("Deleted saved shipment %s", shipment_id)
