"""
Live shipment form state with memoized calculations.

The form data is the only mutable state; calculations are recomputed
synchronously whenever the form changes and are never patched in place.
"""
from __future__ import annotations

import hashlib
import logging
import uuid
from datetime import date
from typing import Any, Optional, Tuple, Union

from tatdocs.schemas.shipment import (
    LineItem,
    PackagingType,
    ShipmentCalculations,
    ShipmentFieldsUpdate,
    ShipmentFormData,
)
from tatdocs.services.catalog import Catalog, generate_lot_number, get_catalog
from tatdocs.services.shipment_calculator import calculate_shipment, to_number

logger = logging.getLogger(__name__)

DEFAULT_CARRIER = "ARMSTRONG"
DEFAULT_BROKER = "BRAX LOGISTICS"
DEFAULT_BASE_INVOICE = "9400"
DEFAULT_SEQUENCE = "1"

EDITABLE_ITEM_FIELDS = ("product_id", "quantity", "unit_type", "unit_price", "lot_number")
NUMERIC_ITEM_FIELDS = ("quantity", "unit_price")


class LastLineItemError(ValueError):
    """A shipment must keep at least one line item."""


class LineItemNotFoundError(KeyError):
    pass


def new_item_id() -> str:
    return uuid.uuid4().hex


def new_line_item(
    product_id: str = "P01",
    quantity: Any = 1,
    unit_type: PackagingType = PackagingType.TOTES,
    unit_price: Any = 0,
) -> LineItem:
    return LineItem(
        id=new_item_id(),
        product_id=product_id,
        quantity=quantity,
        unit_type=unit_type,
        unit_price=unit_price,
        lot_number=generate_lot_number(),
    )


def default_form_data() -> ShipmentFormData:
    return ShipmentFormData(
        items=[new_line_item("P13", 20, PackagingType.TOTES, 2450.0)],
        ship_date=date.today().isoformat(),
        carrier=DEFAULT_CARRIER,
        broker=DEFAULT_BROKER,
        base_invoice=DEFAULT_BASE_INVOICE,
        sequence=DEFAULT_SEQUENCE,
    )


def _coerce_numeric_input(value: Any) -> float:
    if isinstance(value, str) and value.strip() == "":
        return 0.0
    return to_number(value)


class ShipmentSession:
    """Single-editor application state: the shipment form and its derived totals."""

    def __init__(
        self,
        form_data: Optional[ShipmentFormData] = None,
        catalog: Optional[Catalog] = None,
    ):
        self._catalog = catalog
        self._form_data = default_form_data()
        # (form fingerprint, catalog the totals were computed with, totals)
        self._cached: Optional[Tuple[str, Catalog, ShipmentCalculations]] = None
        if form_data is not None:
            self.replace(form_data)

    @property
    def catalog(self) -> Catalog:
        return self._catalog or get_catalog()

    @property
    def form_data(self) -> ShipmentFormData:
        return self._form_data

    @property
    def calculations(self) -> ShipmentCalculations:
        key = self._fingerprint()
        catalog = self.catalog
        if self._cached is None or self._cached[0] != key or self._cached[1] is not catalog:
            self._cached = (key, catalog, calculate_shipment(self._form_data, catalog))
        return self._cached[2]

    def _fingerprint(self) -> str:
        payload = self._form_data.model_dump_json()
        return hashlib.sha256(payload.encode("utf-8")).hexdigest()

    def replace(self, form_data: ShipmentFormData) -> ShipmentFormData:
        if not form_data.items:
            raise LastLineItemError("A shipment must contain at least one line item")
        self._form_data = form_data.model_copy(deep=True)
        return self._form_data

    def reset(self) -> ShipmentFormData:
        return self.replace(default_form_data())

    def _find_index(self, item_id: Union[int, str]) -> int:
        for idx, item in enumerate(self._form_data.items):
            if str(item.id) == str(item_id):
                return idx
        raise LineItemNotFoundError(f"Line item {item_id} not found")

    def add_item(self) -> LineItem:
        item = new_line_item()
        self._form_data = self._form_data.model_copy(
            update={"items": [*self._form_data.items, item]}
        )
        return item

    def remove_item(self, item_id: Union[int, str]) -> None:
        if len(self._form_data.items) <= 1:
            raise LastLineItemError("A shipment must contain at least one line item")
        idx = self._find_index(item_id)
        items = list(self._form_data.items)
        del items[idx]
        self._form_data = self._form_data.model_copy(update={"items": items})

    def update_item(self, item_id: Union[int, str], field: str, value: Any) -> LineItem:
        if field not in EDITABLE_ITEM_FIELDS:
            raise ValueError(f"Field '{field}' is not editable")
        idx = self._find_index(item_id)

        if field in NUMERIC_ITEM_FIELDS:
            value = _coerce_numeric_input(value)
        elif field == "unit_type":
            value = PackagingType(value)
        elif value is None:
            value = ""
        else:
            value = str(value)

        items = list(self._form_data.items)
        items[idx] = items[idx].model_copy(update={field: value})
        self._form_data = self._form_data.model_copy(update={"items": items})
        return items[idx]

    def update_fields(self, update: ShipmentFieldsUpdate) -> ShipmentFormData:
        changes = update.model_dump(exclude_none=True)
        if changes:
            self._form_data = self._form_data.model_copy(update=changes)
        return self._form_data
