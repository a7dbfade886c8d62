"""
Unit Tests for the Live Shipment Session

Run with: pytest backend/tests/test_shipment_session.py -v
"""

from datetime import date

import pytest

from conftest import make_form, make_item
from tatdocs.schemas.shipment import PackagingType, ShipmentFieldsUpdate
from tatdocs.services.catalog import get_catalog
from tatdocs.services.shipment_session import (
    LastLineItemError,
    LineItemNotFoundError,
    ShipmentSession,
    default_form_data,
)


@pytest.fixture
def session(p13_form):
    return ShipmentSession(p13_form)


# =============================================================================
# DEFAULTS
# =============================================================================

class TestDefaults:
    """A new session starts from the default shipment."""

    def test_default_form(self):
        form = default_form_data()
        assert len(form.items) == 1
        item = form.items[0]
        assert item.product_id == "P13"
        assert item.quantity == 20
        assert item.unit_type == PackagingType.TOTES
        assert item.unit_price == 2450.0
        assert item.lot_number.startswith("LOT-")
        assert form.carrier == "ARMSTRONG"
        assert form.broker == "BRAX LOGISTICS"
        assert form.ship_date == date.today().isoformat()

    def test_default_invoice_number(self):
        assert ShipmentSession().calculations.invoice_number == "9400.1"

    def test_constructor_copies_form(self, p13_form):
        session = ShipmentSession(p13_form)
        session.update_fields(ShipmentFieldsUpdate(customer_name="Other"))
        assert p13_form.customer_name == "Quimicos del Norte SA de CV"


# =============================================================================
# LINE ITEM EDITING
# =============================================================================

class TestLineItemEditing:
    """Adding, editing and removing line items."""

    def test_add_item(self, session):
        item = session.add_item()
        assert len(session.form_data.items) == 2
        assert item.product_id == "P01"
        assert item.quantity == 1
        assert item.unit_type == PackagingType.TOTES
        assert item.unit_price == 0
        assert session.form_data.items[-1].id == item.id

    def test_added_items_have_unique_ids(self, session):
        ids = {session.add_item().id for _ in range(5)}
        assert len(ids) == 5

    def test_remove_item(self, session):
        item = session.add_item()
        session.remove_item(item.id)
        assert [i.id for i in session.form_data.items] == [1]

    def test_cannot_remove_last_item(self, session):
        with pytest.raises(LastLineItemError):
            session.remove_item(1)
        assert len(session.form_data.items) == 1

    def test_remove_unknown_item(self, session):
        session.add_item()
        with pytest.raises(LineItemNotFoundError):
            session.remove_item("missing")

    def test_update_quantity_recalculates(self, session):
        assert session.calculations.total_net_weight == pytest.approx(17220)
        session.update_item(1, "quantity", "10")
        assert session.form_data.items[0].quantity == 10.0
        assert session.calculations.total_net_weight == pytest.approx(8610)

    def test_blank_numeric_input_is_zero(self, session):
        session.update_item(1, "unit_price", "")
        assert session.form_data.items[0].unit_price == 0
        assert session.calculations.total_value == 0

    def test_update_unit_type(self, session):
        session.update_item(1, "unit_type", "drums")
        assert session.form_data.items[0].unit_type == PackagingType.DRUMS
        assert session.calculations.total_pallets == 5  # ceil(20 / 4)

    def test_invalid_unit_type(self, session):
        with pytest.raises(ValueError):
            session.update_item(1, "unit_type", "boxes")

    def test_update_product(self, session):
        session.update_item(1, "product_id", "P01")
        assert session.calculations.has_hazmat is False

    def test_update_lot_number(self, session):
        session.update_item(1, "lot_number", "LOT-12345")
        assert session.calculations.items[0].lot_number == "LOT-12345"

    def test_field_not_editable(self, session):
        with pytest.raises(ValueError, match="not editable"):
            session.update_item(1, "id", 5)

    def test_item_ids_match_across_types(self, session):
        """Path parameters arrive as strings; integer ids still resolve."""
        session.update_item("1", "quantity", 2)
        assert session.form_data.items[0].quantity == 2


# =============================================================================
# FORM STATE
# =============================================================================

class TestFormState:
    """Header updates, replacement, reset and memoized totals."""

    def test_update_fields_partial(self, session):
        session.update_fields(ShipmentFieldsUpdate(rfc="NEW010101AAA", sequence="2"))
        assert session.form_data.rfc == "NEW010101AAA"
        assert session.form_data.customer_name == "Quimicos del Norte SA de CV"
        assert session.calculations.invoice_number == "9400.2"

    def test_replace_copies_input(self, session, mixed_form):
        session.replace(mixed_form)
        mixed_form.items[0].quantity = 1
        assert session.form_data.items[0].quantity == 20
        assert len(session.calculations.items) == 2

    def test_reset(self, session):
        session.add_item()
        session.reset()
        assert len(session.form_data.items) == 1
        assert session.form_data.customer_name == ""

    def test_calculations_memoized(self, session):
        first = session.calculations
        assert session.calculations is first
        session.update_item(1, "quantity", 3)
        assert session.calculations is not first

    def test_calculations_follow_form_after_replace(self, session):
        session.replace(make_form(make_item(quantity=1)))
        assert session.calculations.total_quantity == 1

    def test_replace_rejects_empty_items(self, session):
        with pytest.raises(LastLineItemError):
            session.replace(make_form().model_copy(update={"items": []}))
        assert len(session.form_data.items) == 1
        assert session.calculations.total_net_weight == pytest.approx(17220)

    def test_constructor_rejects_empty_items(self):
        with pytest.raises(LastLineItemError):
            ShipmentSession(make_form().model_copy(update={"items": []}))

    def test_calculations_follow_catalog_reload(self, p13_form):
        session = ShipmentSession(p13_form)
        previous = get_catalog()
        first = session.calculations
        assert session.calculations is first

        reloaded = get_catalog(force_reload=True)
        assert reloaded is not previous
        assert session.calculations is not first
        assert session.calculations is session.calculations
