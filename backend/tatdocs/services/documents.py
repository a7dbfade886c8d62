"""
Document projections - read-only views of one shipment for each export document.

Each builder receives the engine output plus the form data and only formats
numbers; no document recomputes weights or values, so every document shows
exactly the same figures.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Callable, Dict, List, Optional

from tatdocs.schemas.shipment import CalculatedLineItem, ShipmentCalculations, ShipmentFormData
from tatdocs.services.catalog import Catalog, current_year, generate_lab_id, get_catalog
from tatdocs.services.formatting import (
    format_currency,
    format_date,
    format_quantity,
    format_spanish_decimal,
    format_unit_price,
    format_weight,
)

DASH = "—"
UNCHECKED = "☐"
CHECKED = "☑"
DEFAULT_LAREDO_ADDRESS = "Laredo, TX 78045"
INCOTERMS = "CFR Laredo"
USMCA_CRITERION = "A"
ORIGIN_COUNTRY = "USA"

DOCUMENT_TITLES = {
    "summary": "Shipment Summary",
    "invoice": "Commercial Invoice",
    "packing": "Packing List",
    "usmca": "USMCA Certificate of Origin",
    "bol": "Straight Bill of Lading",
    "coq": "Certificado de Calidad",
    "hazmat": "Hazardous Materials Information",
    "reminders": "Critical Next Steps — Laredo Border Workflow",
}


@dataclass
class DocField:
    label: str
    value: str


@dataclass
class FieldBlock:
    heading: str
    fields: List[DocField]
    kind: str = field(default="fields", init=False)


@dataclass
class TableBlock:
    heading: str
    columns: List[str]
    rows: List[List[str]]
    footer: List[List[str]] = field(default_factory=list)
    kind: str = field(default="table", init=False)


@dataclass
class TextBlock:
    heading: str
    lines: List[str]
    kind: str = field(default="text", init=False)


@dataclass
class DocumentView:
    doc_type: str
    title: str
    subtitle: str = ""
    blocks: List = field(default_factory=list)

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class DocumentContext:
    calculations: ShipmentCalculations
    form_data: ShipmentFormData
    catalog: Catalog

    @property
    def year(self) -> int:
        return current_year(self.form_data.ship_date)

    @property
    def lab_id(self) -> str:
        return generate_lab_id(self.form_data.ship_date)


def _or(value: Optional[str], fallback: str = DASH) -> str:
    return value if value else fallback


def _kg(value: float) -> str:
    return f"{format_weight(value)} KG"


def _usd(value: float) -> str:
    return f"${format_currency(value)}"


def _qty_unit(item: CalculatedLineItem) -> str:
    return f"{format_quantity(item.quantity)} {item.unit_type.value}"


def _exporter_fields(ctx: DocumentContext, with_tax_id: bool = True) -> List[DocField]:
    exporter = ctx.catalog.exporter
    fields = [
        DocField("Name", exporter.name),
        DocField("Address", exporter.address),
        DocField("City", exporter.city),
    ]
    if with_tax_id:
        fields.append(DocField("Tax ID", exporter.tax_id))
    return fields


def _emergency_block(ctx: DocumentContext, heading: str) -> TextBlock:
    contact = ctx.catalog.emergency_contact
    return TextBlock(heading, [
        f"CHEMTREC 24/7 (USA/Canada): {contact.chemtrec_phone}",
        f"CCN: {contact.ccn}",
        f"International: {contact.international_phone}",
    ])


def _hazmat_description(ctx: DocumentContext, item: CalculatedLineItem) -> str:
    product = item.product
    shipping_name = ctx.catalog.get_shipping_name(product.un_number)
    return f"{product.un_number}, {shipping_name.dot}, {product.hazard_class}, {product.packing_group}"


def build_summary(ctx: DocumentContext) -> DocumentView:
    calc, form = ctx.calculations, ctx.form_data
    return DocumentView("summary", DOCUMENT_TITLES["summary"], ctx.catalog.exporter.name, [
        FieldBlock("Customer", [
            DocField("Name", _or(form.customer_name, "[Customer Name]")),
            DocField("Address", _or(form.mexico_address, "[Mexico Address]")),
            DocField("RFC", _or(form.rfc)),
        ]),
        FieldBlock("Shipment Details", [
            DocField("Invoice", calc.invoice_number),
            DocField("PO", _or(form.po_number)),
            DocField("Ship Date", format_date(form.ship_date, "long")),
            DocField("Carrier", form.carrier),
        ]),
        TableBlock(
            f"Products ({len(calc.items)} line items)",
            ["Qty", "Product", "Value"],
            [[_qty_unit(item), item.product.name, _usd(item.total_value)] for item in calc.items],
        ),
        FieldBlock("Totals", [
            DocField("Total Net", _kg(calc.total_net_weight)),
            DocField("Total Gross", _kg(calc.total_gross_weight)),
            DocField("Total Value", _usd(calc.total_value)),
            DocField("Total Pallets", format_quantity(calc.total_pallets)),
            DocField("Hazmat", "YES" if calc.has_hazmat else "NO"),
        ]),
        FieldBlock("Border Compliance", [
            DocField("Total Gross Weight", _kg(calc.total_gross_weight)),
            DocField("Max Gross Weight", _kg(ctx.catalog.max_gross_weight_kg)),
            DocField("Status", "OVERWEIGHT" if calc.is_overweight else "OK"),
        ]),
    ])


def build_invoice(ctx: DocumentContext) -> DocumentView:
    calc, form = ctx.calculations, ctx.form_data
    exporter, personnel = ctx.catalog.exporter, ctx.catalog.personnel

    bill_to = [
        DocField("Name", _or(form.customer_name, "[Customer Name]")),
        DocField("Address", _or(form.mexico_address, "[Mexico Address]")),
    ]
    if form.customer_phone:
        bill_to.append(DocField("Tel", form.customer_phone))
    bill_to.append(DocField("RFC", _or(form.rfc)))

    ship_to = [
        DocField("Name", _or(form.customer_name, "[Customer Name]")),
        DocField("Address", _or(form.laredo_address, DEFAULT_LAREDO_ADDRESS)),
        DocField("Attn", _or(form.laredo_contact_name, "Logistics Desk")),
    ]
    if form.laredo_contact_phone:
        ship_to.append(DocField("Tel", form.laredo_contact_phone))

    notes = [f"Certified correct by {personnel.general_manager} - General Manager"]
    if form.itn_number:
        notes.append(f"EEI/AES ITN: {form.itn_number}")

    return DocumentView("invoice", DOCUMENT_TITLES["invoice"], exporter.name.upper(), [
        FieldBlock("Exporter", [
            DocField("Address", exporter.address),
            DocField("City", exporter.city),
            DocField("Tax ID", exporter.tax_id),
            DocField("Tel", exporter.phone),
        ]),
        FieldBlock("Invoice", [
            DocField("Invoice Number", calc.invoice_number),
            DocField("Date of Export", format_date(form.ship_date, "long")),
        ]),
        FieldBlock("Bill To (Mexico)", bill_to),
        FieldBlock("Ship To (Laredo Transfer)", ship_to),
        FieldBlock("Terms", [
            DocField("Incoterms", INCOTERMS),
            DocField("Carrier", _or(form.carrier)),
            DocField("Broker", _or(form.broker)),
            DocField("Load #", _or(form.load_number)),
        ]),
        TableBlock(
            "Line Items",
            ["Qty", "Description of Goods", "Unit Value", "Total (USD)"],
            [
                [
                    format_quantity(item.quantity),
                    f"{item.product.name} | HTS: {item.product.hts_code} | Lot: {item.lot_number}",
                    f"${format_unit_price(item.unit_price)}",
                    _usd(item.total_value),
                ]
                for item in calc.items
            ],
            footer=[
                ["", "", "Subtotal:", _usd(calc.total_value)],
                ["", "", "Sales Tax:", _usd(0)],
                ["", "", "Total Due (USD):", _usd(calc.total_value)],
            ],
        ),
        TextBlock("Certification", notes),
    ])


def build_packing_list(ctx: DocumentContext) -> DocumentView:
    calc, form = ctx.calculations, ctx.form_data
    return DocumentView("packing", DOCUMENT_TITLES["packing"], ctx.catalog.exporter.name, [
        FieldBlock("Shipper", _exporter_fields(ctx, with_tax_id=False)),
        FieldBlock("Consignee", [
            DocField("Name", form.customer_name),
            DocField("Address", form.mexico_address),
        ]),
        FieldBlock("References", [
            DocField("Invoice", calc.invoice_number),
            DocField("PO Number", _or(form.po_number)),
            DocField("Ship Date", form.ship_date),
        ]),
        TableBlock(
            "Contents",
            ["Product / Description", "Qty", "Net (KG)", "Gross (KG)"],
            [
                [
                    f"{item.product.name} | Lot: {item.lot_number}",
                    _qty_unit(item),
                    format_weight(item.net_weight),
                    format_weight(item.gross_weight),
                ]
                for item in calc.items
            ],
            footer=[
                ["Total Net", "", _kg(calc.total_net_weight), ""],
                ["Total Tare", "", _kg(calc.total_tare_weight), ""],
                ["Total Gross", "", "", _kg(calc.total_gross_weight)],
            ],
        ),
        TextBlock("Load", [
            f"Total Pallets: {format_quantity(calc.total_pallets)} | Carrier: {form.carrier} | Load: {form.load_number}",
        ]),
    ])


def build_usmca(ctx: DocumentContext) -> DocumentView:
    calc, form = ctx.calculations, ctx.form_data
    personnel = ctx.catalog.personnel
    year = ctx.year
    return DocumentView("usmca", DOCUMENT_TITLES["usmca"].upper(), "", [
        FieldBlock("1. Certifier Name and Address", _exporter_fields(ctx)),
        FieldBlock("2. Exporter Name and Address", _exporter_fields(ctx)),
        FieldBlock("3. Producer Name and Address", _exporter_fields(ctx, with_tax_id=False)),
        FieldBlock("4. Importer Name and Address", [
            DocField("Name", _or(form.customer_name)),
            DocField("Address", _or(form.mexico_address)),
            DocField("RFC", _or(form.rfc)),
        ]),
        TableBlock(
            "Goods",
            ["5. Description of Goods", "6. HS Classification", "7. Criterion", "8. Origin", "9. Blanket Period"],
            [
                [
                    f"{item.product.name} (CHEMICAL ADDITIVE)",
                    item.product.hts_code,
                    USMCA_CRITERION,
                    ORIGIN_COUNTRY,
                    f"01/01/{year} TO 12/31/{year}",
                ]
                for item in calc.items
            ],
        ),
        TextBlock("Certification", [
            "I certify that the goods described in this document qualify as originating and "
            "the information contained in this document is true and accurate. I assume "
            "responsibility for proving such representations and agree to maintain and present "
            "upon request or to make available during a verification visit, documentation "
            "necessary to support this certification.",
        ]),
        FieldBlock("Signature", [
            DocField("Certifier's Signature", "_______________________"),
            DocField("Name", f"{personnel.general_manager} - GENERAL MANAGER"),
            DocField("Date", format_date(form.ship_date, "long")),
            DocField("Company", ctx.catalog.exporter.name.upper()),
        ]),
    ])


def build_bill_of_lading(ctx: DocumentContext) -> DocumentView:
    calc, form = ctx.calculations, ctx.form_data
    personnel = ctx.catalog.personnel

    header = [
        DocField("BOL #", calc.invoice_number),
        DocField("Date", form.ship_date),
    ]
    if form.itn_number:
        header.append(DocField("ITN", form.itn_number))

    consignee = [
        DocField("Name", _or(form.customer_name)),
        DocField("Address", _or(form.laredo_address, DEFAULT_LAREDO_ADDRESS)),
        DocField("Attn", _or(form.laredo_contact_name, "Receiving Dept")),
    ]
    if form.laredo_contact_phone:
        consignee.append(DocField("Tel", form.laredo_contact_phone))

    rows = []
    for item in calc.items:
        if item.is_hazmat:
            description = f"[HM] {item.product.name} | {_hazmat_description(ctx, item)}"
        else:
            description = f"{item.product.name} | Petroleum Chemical Additives, Not Regulated"
        description += f" | Lot: {item.lot_number} | Density: {item.product.density:g} S.G."
        rows.append([format_quantity(item.quantity), description, format_weight(item.gross_weight)])

    blocks = [
        FieldBlock("Shipment", header),
        FieldBlock("From (Shipper)", _exporter_fields(ctx, with_tax_id=False) + [
            DocField("Contact", personnel.shipper_contact),
        ]),
        FieldBlock("Consigned To (Laredo Transfer)", consignee),
    ]
    if calc.has_hazmat:
        blocks.append(_emergency_block(ctx, "Hazardous Materials Incident"))
    blocks += [
        TableBlock(
            "Articles",
            ["Qty", "Kind of Package / Description of Articles", "Weight (KG)"],
            rows,
            footer=[["", "Shipment Gross Weight (KG)", format_weight(calc.total_gross_weight)]],
        ),
        TextBlock("Certification", [
            "I hereby certify that the above named materials are properly classified, "
            "described, packaged, marked and labeled according to DOT regulations.",
            f"Shipper Sign: {personnel.shipper_contact} (for TAT)",
            f"Carrier: {form.carrier} | Load: {form.load_number}",
            "Driver Sign: ___________________________",
        ]),
    ]
    return DocumentView("bol", DOCUMENT_TITLES["bol"], "ORIGINAL - NOT NEGOTIABLE", blocks)


def build_certificate_of_quality(ctx: DocumentContext) -> DocumentView:
    calc, form = ctx.calculations, ctx.form_data
    exporter = ctx.catalog.exporter
    blocks = []
    for item in calc.items:
        product = item.product
        blocks.append(FieldBlock(product.name, [
            DocField("Fabricante", exporter.name),
            DocField("Nombre de producto", product.name),
            DocField("Fecha de produccion", format_date(form.ship_date, "spanish")),
            DocField("Numero de lote", item.lot_number),
            DocField("Lab ID No.", ctx.lab_id),
        ]))
        blocks.append(TableBlock(
            "Resultados del laboratorio",
            ["Prueba", "Metodo", "Minimo", "Maximo", "Resultado"],
            [
                ["Apariencia, Color", "ASTM D1544", DASH, DASH, "Amber"],
                ["pH", "ASTM E70", DASH, DASH, format_spanish_decimal(product.ph, 1)],
                [
                    "Gravedad especifica @ 72F",
                    "ASTM D891B",
                    format_spanish_decimal(product.min_sg, 2),
                    format_spanish_decimal(product.max_sg, 2),
                    format_spanish_decimal(product.density, 2),
                ],
                ["Presencia de Silicio Organico", "ID-142-7500", DASH, "0,00", "0,00"],
            ],
        ))
    blocks.append(TextBlock("Certificacion", [
        f"{exporter.name} certifica que el producto cumple o excede las "
        "especificaciones establecidas en este certificado de calidad y analisis.",
    ]))
    blocks.append(FieldBlock("Firma", [
        DocField("Tecnico", ctx.catalog.personnel.qa_technician),
        DocField("Fecha", format_date(form.ship_date, "mmddyyyy")),
    ]))
    subtitle = f"{exporter.lab_address}, {exporter.lab_city}".strip(", ")
    return DocumentView("coq", DOCUMENT_TITLES["coq"], subtitle, blocks)


def build_hazmat(ctx: DocumentContext) -> DocumentView:
    calc = ctx.calculations
    if not calc.has_hazmat:
        raise ValueError("Hazmat declaration requires at least one regulated product")

    blocks = [_emergency_block(ctx, "24-Hour Emergency Contact")]
    for item in calc.items:
        if not item.is_hazmat:
            continue
        product = item.product
        shipping_name = ctx.catalog.get_shipping_name(product.un_number)
        blocks.append(FieldBlock(product.name, [
            DocField("UN Number", product.un_number),
            DocField("Hazard Class", product.hazard_class),
            DocField("Packing Group", product.packing_group),
            DocField("ERG Guide #", ctx.catalog.get_erg_number(product.un_number)),
            DocField("DOT Proper Shipping Name", shipping_name.dot),
            DocField("Spanish Shipping Name (NOM-002-SCT)", shipping_name.nom),
            DocField("Quantity", f"{_qty_unit(item)} ({format_weight(item.net_weight)} KG net)"),
        ]))
    blocks.append(TextBlock("Mexican Requirements (NOM-002-SCT)", [
        "All hazmat information must appear in SPANISH on Mexican documents",
        "Spanish SDS (Hoja de Datos de Seguridad) required",
        "NOM-002-SCT compliant labeling required",
        "Mexican emergency contact number must be provided",
    ]))
    return DocumentView("hazmat", DOCUMENT_TITLES["hazmat"], "", blocks)


def build_reminders(ctx: DocumentContext) -> DocumentView:
    calc, form = ctx.calculations, ctx.form_data
    blocks = []

    default_hts = ctx.catalog.default_hts_code
    if default_hts and any(item.product.hts_code == default_hts for item in calc.items):
        blocks.append(TextBlock("HTS Code Verification Needed", [
            f"Some products use the default HTS code ({default_hts}). Please verify the correct "
            "HTS code with your customs broker before finalizing documents.",
        ]))

    before = [
        f"{UNCHECKED} Verify customer's RFC number is correct",
        f"{UNCHECKED} File EEI/AES to get ITN number",
        f"{CHECKED if form.itn_number else UNCHECKED} Add ITN number to Bill of Lading",
        f"{UNCHECKED} Confirm US carrier to Laredo",
        f"{UNCHECKED} Confirm customs broker has all documents in advance",
    ]
    if calc.has_hazmat:
        before.append(f"{UNCHECKED} Verify Spanish SDS is with shipment")
    before += [
        f"{UNCHECKED} Verify Certificate of Quality (Spanish) is with shipment",
        f"{UNCHECKED} Confirm pricing on Commercial Invoice",
        f"{UNCHECKED} Get authorized signature on Certificate of Origin",
    ]
    blocks.append(TextBlock("Before Shipment to Laredo", before))

    blocks.append(TextBlock("At Laredo Border (Transfer Point)", [
        f"{UNCHECKED} Weight accuracy is CRITICAL - Texas vs Mexico truck weight limits differ",
        f"{UNCHECKED} All documents must be ready for border inspection",
        f"{UNCHECKED} Commercial Invoice will be scrutinized - ensure 100% accuracy",
        f"{UNCHECKED} Mexican carrier must have Carta Porte ready",
        f"{UNCHECKED} Customs broker processes Numero de Pedimento and Clave Trafico",
    ]))

    accuracy = [
        f"{UNCHECKED} Customer name/address/RFC EXACTLY matches across all documents",
        f"{UNCHECKED} Weights match between Invoice, Packing List, and BOL",
        f"{UNCHECKED} Product description and HTS code consistent across all forms",
        f"{UNCHECKED} Lot/Batch numbers match on all documents",
    ]
    if calc.has_hazmat:
        accuracy.append(f"{UNCHECKED} Hazmat info matches EXACTLY on all documents")
    blocks.append(TextBlock("Document Accuracy (Gets Scrutinized at Border)", accuracy))

    return DocumentView("reminders", DOCUMENT_TITLES["reminders"], "", blocks)


DOCUMENT_BUILDERS: Dict[str, Callable[[DocumentContext], DocumentView]] = {
    "summary": build_summary,
    "invoice": build_invoice,
    "packing": build_packing_list,
    "usmca": build_usmca,
    "bol": build_bill_of_lading,
    "coq": build_certificate_of_quality,
    "hazmat": build_hazmat,
    "reminders": build_reminders,
}


def available_documents(calculations: ShipmentCalculations) -> List[Dict[str, str]]:
    """Document tabs for a shipment; the hazmat declaration only when it applies."""
    return [
        {"id": doc_type, "title": DOCUMENT_TITLES[doc_type]}
        for doc_type in DOCUMENT_BUILDERS
        if doc_type != "hazmat" or calculations.has_hazmat
    ]


def build_document(
    doc_type: str,
    calculations: ShipmentCalculations,
    form_data: ShipmentFormData,
    catalog: Optional[Catalog] = None,
) -> DocumentView:
    builder = DOCUMENT_BUILDERS.get(doc_type)
    if builder is None:
        raise ValueError(f"Unknown document type '{doc_type}'")
    return builder(DocumentContext(calculations, form_data, catalog or get_catalog()))


def render_text(view: DocumentView) -> str:
    """Plain-text rendering of a document view, for copying into email or the clipboard."""
    lines = [view.title.upper()]
    if view.subtitle:
        lines.append(view.subtitle)
    for block in view.blocks:
        lines.append("")
        if block.heading:
            lines.append(block.heading)
        if isinstance(block, FieldBlock):
            lines.extend(f"{f.label}: {f.value}" for f in block.fields)
        elif isinstance(block, TableBlock):
            lines.append(" | ".join(block.columns))
            lines.extend(" | ".join(row) for row in block.rows)
            lines.extend(" | ".join(cell for cell in row if cell) for row in block.footer)
        else:
            lines.extend(block.lines)
    return "\n".join(lines) + "\n"
