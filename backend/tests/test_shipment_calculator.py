"""
Unit Tests for the Shipment Calculation Engine

Tests weights, pallets, value totals, hazmat and overweight flags, and input coercion.

Run with: pytest backend/tests/test_shipment_calculator.py -v
"""

import math

import pytest

from conftest import make_form, make_item
from tatdocs.schemas.catalog import PackagingStandard
from tatdocs.schemas.shipment import PackagingType
from tatdocs.services.catalog import Catalog
from tatdocs.services.shipment_calculator import calculate_shipment, to_number


# =============================================================================
# SCENARIOS
# =============================================================================

class TestScenarios:
    """End-to-end shipments with known totals."""

    def test_p13_twenty_totes(self, p13_form, catalog):
        """20 totes of TATI Y-07 at $2,450."""
        calc = calculate_shipment(p13_form, catalog)
        assert calc.total_net_weight == pytest.approx(17220)   # 861 * 20
        assert calc.total_tare_weight == pytest.approx(1200)   # 60 * 20
        assert calc.total_gross_weight == pytest.approx(18420)
        assert calc.total_value == pytest.approx(49000)
        assert calc.total_pallets == 20
        assert calc.has_hazmat is True
        assert calc.is_overweight is False

    def test_p01_ten_drums(self, catalog):
        """10 drums of TATI ANTIFOAM-07 at $100."""
        form = make_form(make_item(1, "P01", 10, PackagingType.DRUMS, 100))
        calc = calculate_shipment(form, catalog)
        assert calc.total_net_weight == pytest.approx(2080)    # 208 * 10
        assert calc.total_tare_weight == pytest.approx(250)    # 25 * 10
        assert calc.total_gross_weight == pytest.approx(2330)
        assert calc.total_value == pytest.approx(1000)
        assert calc.total_pallets == 3                          # ceil(10 / 4)
        assert calc.has_hazmat is False

    def test_mixed_shipment(self, mixed_form, catalog):
        calc = calculate_shipment(mixed_form, catalog)
        assert calc.total_gross_weight == pytest.approx(18420 + 2330)
        assert calc.total_value == pytest.approx(50000)
        assert calc.total_pallets == 23
        assert calc.total_quantity == 30
        assert [item.product.id for item in calc.items] == ["P13", "P01"]


# =============================================================================
# LINE ITEM TESTS
# =============================================================================

class TestLineItems:
    """Per-line derived fields."""

    def test_gross_is_net_plus_tare(self, mixed_form, catalog):
        for item in calculate_shipment(mixed_form, catalog).items:
            assert item.gross_weight == item.net_weight + item.tare_weight

    def test_total_value_is_price_times_quantity(self, catalog):
        form = make_form(make_item(quantity=3, unit_price="12.5"))
        item = calculate_shipment(form, catalog).items[0]
        assert item.total_value == pytest.approx(37.5)
        assert item.unit_price == 12.5

    @pytest.mark.parametrize("qty,expected", [(1, 1), (4, 1), (5, 2), (8, 2), (9, 3), (0, 0)])
    def test_drum_pallets_round_up(self, catalog, qty, expected):
        form = make_form(make_item(product_id="P01", quantity=qty, unit_type=PackagingType.DRUMS))
        assert calculate_shipment(form, catalog).items[0].pallets == expected

    def test_tote_pallets_equal_quantity(self, catalog):
        form = make_form(make_item(quantity=7))
        assert calculate_shipment(form, catalog).items[0].pallets == 7

    def test_hazmat_follows_un_number(self, mixed_form, catalog):
        items = calculate_shipment(mixed_form, catalog).items
        assert items[0].is_hazmat is True      # UN1992
        assert items[1].is_hazmat is False     # Not regulated

    def test_unknown_product_falls_back_to_first(self, catalog):
        form = make_form(make_item(product_id="P99", quantity=1))
        item = calculate_shipment(form, catalog).items[0]
        assert item.product.id == catalog.products[0].id
        assert item.product_id == "P99"
        assert item.net_weight == pytest.approx(catalog.products[0].kg_per_tote)


# =============================================================================
# SHIPMENT TOTALS
# =============================================================================

class TestTotals:
    """Shipment-level aggregation."""

    def test_gross_is_net_plus_tare(self, mixed_form, catalog):
        calc = calculate_shipment(mixed_form, catalog)
        assert calc.total_gross_weight == calc.total_net_weight + calc.total_tare_weight
        assert calc.total_gross_weight == (
            sum(item.net_weight for item in calc.items) + sum(item.tare_weight for item in calc.items)
        )

    def test_value_is_sum_of_lines(self, mixed_form, catalog):
        calc = calculate_shipment(mixed_form, catalog)
        assert calc.total_value == sum(item.total_value for item in calc.items)

    def test_invoice_number_keeps_sequence_text(self, catalog):
        calc = calculate_shipment(make_form(base_invoice="9400", sequence="01"), catalog)
        assert calc.invoice_number == "9400.01"

    def test_empty_items(self, catalog):
        form = make_form()
        form = form.model_copy(update={"items": []})
        calc = calculate_shipment(form, catalog)
        assert calc.total_gross_weight == 0
        assert calc.total_pallets == 0
        assert calc.has_hazmat is False
        assert calc.is_overweight is False

    def test_overweight_boundary(self, catalog):
        """Exactly at the limit is allowed; any excess is overweight."""
        form = make_form(make_item(quantity=1, product_id="P01"))
        gross = calculate_shipment(form, catalog).total_gross_weight
        assert calculate_shipment(form, catalog, max_gross_weight_kg=gross).is_overweight is False
        assert calculate_shipment(form, catalog, max_gross_weight_kg=gross - 0.001).is_overweight is True

    def test_overweight_with_catalog_limit(self, catalog):
        form = make_form(make_item(quantity=25))  # 25 * 921 = 23025 KG
        assert calculate_shipment(form, catalog).is_overweight is True

    def test_custom_packaging(self, catalog):
        packaging = PackagingStandard(drum_tare_kg=30, tote_tare_kg=70, drums_per_pallet=2)
        form = make_form(make_item(product_id="P01", quantity=3, unit_type=PackagingType.DRUMS))
        calc = calculate_shipment(form, catalog, packaging=packaging)
        assert calc.total_tare_weight == pytest.approx(90)
        assert calc.total_pallets == 2

    def test_custom_catalog(self, catalog):
        product = catalog.products[0].model_copy(update={"id": "X1", "kg_per_tote": 500.0})
        small = Catalog(
            products=[product],
            packaging=catalog.packaging,
            max_gross_weight_kg=1000,
            exporter=catalog.exporter,
            personnel=catalog.personnel,
            emergency_contact=catalog.emergency_contact,
        )
        calc = calculate_shipment(make_form(make_item(product_id="X1", quantity=2)), small)
        assert calc.total_net_weight == pytest.approx(1000)
        assert calc.is_overweight is True  # 1000 net + 120 tare


# =============================================================================
# INPUT COERCION
# =============================================================================

class TestCoercion:
    """Non-numeric form input counts as zero."""

    @pytest.mark.parametrize("raw,expected", [
        (None, 0.0),
        ("", 0.0),
        ("  ", 0.0),
        ("abc", 0.0),
        ("12", 12.0),
        (" 3.5 ", 3.5),
        (7, 7.0),
        (math.inf, 0.0),
        (math.nan, 0.0),
        ("nan", 0.0),
    ])
    def test_to_number(self, raw, expected):
        assert to_number(raw) == expected

    def test_non_numeric_quantity_counts_as_zero(self, catalog):
        form = make_form(make_item(quantity="lots", unit_price="n/a"))
        item = calculate_shipment(form, catalog).items[0]
        assert item.quantity == 0
        assert item.net_weight == 0
        assert item.total_value == 0
