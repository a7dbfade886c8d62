"""
Script to save a sample shipment for testing.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from tatdocs.db.database import Base, SessionLocal, engine
from tatdocs.models import SavedShipment
from tatdocs.schemas.shipment import PackagingType, ShipmentFieldsUpdate
from tatdocs.services.shipment_session import ShipmentSession
from tatdocs.services.shipment_store import ShipmentStore

SAMPLE_CUSTOMER = "Quimicos del Norte SA de CV"


def create_sample_shipment():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        existing = db.query(SavedShipment).filter(SavedShipment.customer_name == SAMPLE_CUSTOMER).first()
        if existing:
            print(f"Sample shipment for '{SAMPLE_CUSTOMER}' already exists with ID: {existing.id}")
            return

        session = ShipmentSession()
        session.update_fields(ShipmentFieldsUpdate(
            customer_name=SAMPLE_CUSTOMER,
            mexico_address="Av. Industrial 120, Monterrey, N.L., Mexico",
            rfc="QNO010101ABC",
            po_number="PO-2041",
            load_number="L-5531",
        ))
        drum_item = session.add_item()
        session.update_item(drum_item.id, "unit_type", PackagingType.DRUMS.value)
        session.update_item(drum_item.id, "quantity", 10)
        session.update_item(drum_item.id, "unit_price", 100)

        record = ShipmentStore(db).save(session.form_data, session.calculations)
        print(
            f"Saved shipment {record.invoice_number} for {record.customer_name} "
            f"(ID: {record.id}, gross {record.total_gross_weight:,.0f} KG)"
        )
    except Exception as e:
        print(f"Error: {e}")
        db.rollback()
    finally:
        db.close()

if __name__ == "__main__":
    create_sample_shipment()
