"""
Shared fixtures. Environment is pinned before the application is imported so the
engine binds to an in-memory database and exports land in a temp directory.
"""
import os
import tempfile

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["EXPORT_DIR"] = tempfile.mkdtemp(prefix="tatdocs-exports-")
os.environ.pop("OPENAI_API_KEY", None)

import pytest
from fastapi.testclient import TestClient

from tatdocs.db.database import Base, SessionLocal, engine
from tatdocs.models import SavedShipment
from tatdocs.schemas.shipment import LineItem, PackagingType, ShipmentFormData
from tatdocs.services.catalog import get_catalog
from tatdocs.services.shipment_session import ShipmentSession


def make_item(item_id=1, product_id="P13", quantity=20, unit_type=PackagingType.TOTES, unit_price=2450, lot="LOT-00001"):
    return LineItem(
        id=item_id,
        product_id=product_id,
        quantity=quantity,
        unit_type=unit_type,
        unit_price=unit_price,
        lot_number=lot,
    )


def make_form(*items, **fields):
    defaults = dict(
        customer_name="Quimicos del Norte SA de CV",
        mexico_address="Av. Industrial 120, Monterrey, N.L.",
        rfc="QNO010101ABC",
        ship_date="2026-01-05",
        po_number="PO-2041",
        carrier="ARMSTRONG",
        broker="BRAX LOGISTICS",
        load_number="L-5531",
        base_invoice="9400",
        sequence="01",
    )
    defaults.update(fields)
    return ShipmentFormData(items=list(items) or [make_item()], **defaults)


@pytest.fixture
def catalog():
    return get_catalog()


@pytest.fixture
def p13_form():
    """20 totes of TATI Y-07 at $2,450."""
    return make_form(make_item())


@pytest.fixture
def mixed_form():
    """Hazmat totes plus non-regulated drums."""
    return make_form(
        make_item(1, "P13", 20, PackagingType.TOTES, 2450, "LOT-00001"),
        make_item(2, "P01", 10, PackagingType.DRUMS, 100, "LOT-00002"),
    )


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.query(SavedShipment).delete()
        session.commit()
        session.close()


@pytest.fixture
def client(db):
    from tatdocs.main import app

    app.state.shipment_session = ShipmentSession()
    with TestClient(app) as test_client:
        yield test_client
