"""
Saved Shipment model - self-contained snapshot of a shipment form.
"""
from sqlalchemy import Column, String, DateTime, Integer, Float, JSON
import uuid
from datetime import datetime
from tatdocs.db.database import Base


class SavedShipment(Base):
    __tablename__ = "saved_shipments"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Denormalized summary for the shipment history list
    invoice_number = Column(String, nullable=False)
    customer_name = Column(String, nullable=False)
    ship_date = Column(String, nullable=True)  # ISO YYYY-MM-DD, as entered on the form
    total_value = Column(Float, default=0)
    total_gross_weight = Column(Float, default=0)
    item_count = Column(Integer, default=0)
    products = Column(JSON, nullable=True)  # ["TATI Y-07", ...]

    # Complete ShipmentFormData; no foreign keys
    form_data = Column(JSON, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)
