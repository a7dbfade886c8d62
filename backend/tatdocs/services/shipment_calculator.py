"""
Shipment calculation engine - derives weights, values, pallets and hazmat flags.

Business rules:
1. net weight = kg per container (tote or drum, per product) * quantity
2. tare weight = container tare (tote 60 kg, drum 25 kg) * quantity
3. gross weight = net + tare
4. totes ride one per pallet; drums share pallets, rounded up (ceil(qty / drums_per_pallet))
5. shipment gross = total net + total tare, never a separate sum of item gross
6. shipment is overweight when gross > border truck limit (advisory only)

Every document renders these numbers as-is. No rounding happens here; formatting
is the caller's job.
"""
import math
from typing import Any, Optional

from tatdocs.schemas.catalog import PackagingStandard, Product
from tatdocs.schemas.shipment import (
    CalculatedLineItem,
    LineItem,
    PackagingType,
    ShipmentCalculations,
    ShipmentFormData,
)
from tatdocs.services.catalog import Catalog, get_catalog


def to_number(value: Any) -> float:
    """Coerce raw form input to a float; blank, non-numeric and non-finite input become 0."""
    if value is None or value == "":
        return 0.0
    if isinstance(value, str):
        value = value.strip()
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def calculate_line_item(
    item: LineItem,
    product: Product,
    packaging: PackagingStandard,
) -> CalculatedLineItem:
    qty = to_number(item.quantity)
    price = to_number(item.unit_price)
    is_tote = item.unit_type == PackagingType.TOTES

    if is_tote:
        net_weight = product.kg_per_tote * qty
        tare_weight = packaging.tote_tare_kg * qty
        pallets = qty
    else:
        net_weight = product.kg_per_drum * qty
        tare_weight = packaging.drum_tare_kg * qty
        # A partial last pallet still counts as one
        pallets = math.ceil(qty / packaging.drums_per_pallet)

    return CalculatedLineItem(
        id=item.id,
        product_id=item.product_id,
        quantity=qty,
        unit_type=item.unit_type,
        unit_price=price,
        lot_number=item.lot_number,
        product=product,
        net_weight=net_weight,
        tare_weight=tare_weight,
        gross_weight=net_weight + tare_weight,
        total_value=price * qty,
        pallets=pallets,
        is_hazmat=product.is_hazmat,
    )


def calculate_shipment(
    form_data: ShipmentFormData,
    catalog: Optional[Catalog] = None,
    packaging: Optional[PackagingStandard] = None,
    max_gross_weight_kg: Optional[float] = None,
) -> ShipmentCalculations:
    """
    Compute the full derived shipment.

    Pure and total: unknown product ids resolve to the catalog's first product and
    non-numeric quantities/prices count as 0, so any structurally valid form yields
    a result.
    """
    catalog = catalog or get_catalog()
    packaging = packaging or catalog.packaging
    limit = catalog.max_gross_weight_kg if max_gross_weight_kg is None else max_gross_weight_kg

    total_net_weight = 0.0
    total_tare_weight = 0.0
    total_value = 0.0
    total_pallets = 0.0
    total_quantity = 0.0
    has_hazmat = False

    items = []
    for item in form_data.items:
        calculated = calculate_line_item(item, catalog.get_product(item.product_id), packaging)

        total_net_weight += calculated.net_weight
        total_tare_weight += calculated.tare_weight
        total_value += calculated.total_value
        total_pallets += calculated.pallets
        total_quantity += calculated.quantity
        if calculated.is_hazmat:
            has_hazmat = True

        items.append(calculated)

    total_gross_weight = total_net_weight + total_tare_weight

    return ShipmentCalculations(
        items=items,
        total_net_weight=total_net_weight,
        total_tare_weight=total_tare_weight,
        total_gross_weight=total_gross_weight,
        total_value=total_value,
        total_pallets=total_pallets,
        total_quantity=total_quantity,
        has_hazmat=has_hazmat,
        invoice_number=form_data.invoice_number,
        is_overweight=total_gross_weight > limit,
    )
