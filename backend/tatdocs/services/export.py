"""
Export services for PDF documents and the Excel shipment workbook.
"""
import logging
import time
from pathlib import Path
from typing import Optional
from xml.sax.saxutils import escape

import pandas as pd
from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from tatdocs.db.database import settings
from tatdocs.schemas.shipment import ShipmentCalculations, ShipmentFormData
from tatdocs.services.documents import DocumentView, FieldBlock, TableBlock
from tatdocs.services.formatting import format_date

logger = logging.getLogger(__name__)


def get_export_dir() -> Path:
    export_dir = Path(settings.export_dir)
    export_dir.mkdir(parents=True, exist_ok=True)
    return export_dir


def _file_stem(doc_type: str, invoice_number: str) -> str:
    safe_invoice = "".join(c if c.isalnum() or c in ".-" else "_" for c in invoice_number) or "draft"
    return f"{doc_type}_{safe_invoice}"


def generate_document_pdf(view: DocumentView, invoice_number: str, export_dir: Optional[Path] = None) -> str:
    """
    Render a document view to PDF:
    - title and subtitle
    - field blocks as label/value tables
    - table blocks with a shaded header row and bold footer rows
    - text blocks as paragraphs
    """
    start_time = time.perf_counter()
    file_path = (export_dir or get_export_dir()) / f"{_file_stem(view.doc_type, invoice_number)}.pdf"
    doc = SimpleDocTemplate(str(file_path), pagesize=letter)
    story = []

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        'DocumentTitle',
        parent=styles['Heading1'],
        fontSize=18,
        textColor=colors.HexColor('#1a1a1a'),
        spaceAfter=6,
    )
    cell_style = ParagraphStyle('Cell', parent=styles['Normal'], fontSize=8, leading=10)

    story.append(Paragraph(escape(view.title), title_style))
    if view.subtitle:
        story.append(Paragraph(escape(view.subtitle), styles['Normal']))
    story.append(Spacer(1, 0.2*inch))

    for block in view.blocks:
        if block.heading:
            story.append(Paragraph(escape(block.heading), styles['Heading3']))
        if isinstance(block, FieldBlock):
            rows = [
                [Paragraph(escape(f.label), cell_style), Paragraph(escape(f.value), cell_style)]
                for f in block.fields
            ]
            if rows:
                table = Table(rows, colWidths=[2*inch, doc.width - 2*inch])
                table.setStyle(TableStyle([
                    ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
                    ('VALIGN', (0, 0), (-1, -1), 'TOP'),
                ]))
                story.append(table)
        elif isinstance(block, TableBlock):
            data = [block.columns]
            data += [[Paragraph(escape(cell), cell_style) for cell in row] for row in block.rows]
            data += block.footer
            col_width = doc.width / len(block.columns)
            table = Table(data, colWidths=[col_width] * len(block.columns), repeatRows=1)
            style = [
                ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#e5e7eb')),
                ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
                ('FONTSIZE', (0, 0), (-1, -1), 8),
                ('GRID', (0, 0), (-1, len(block.rows)), 0.5, colors.grey),
                ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ]
            if block.footer:
                style.append(('FONTNAME', (0, len(block.rows) + 1), (-1, -1), 'Helvetica-Bold'))
            table.setStyle(TableStyle(style))
            story.append(table)
        else:
            for line in block.lines:
                story.append(Paragraph(escape(line), styles['Normal']))
        story.append(Spacer(1, 0.15*inch))

    doc.build(story)
    duration = round(time.perf_counter() - start_time, 3)
    logger.info("PDF %s generated for invoice %s in %.2fs", view.doc_type, invoice_number, duration)

    return str(file_path)


def generate_excel_workbook(
    form_data: ShipmentFormData,
    calculations: ShipmentCalculations,
    export_dir: Optional[Path] = None,
) -> str:
    """
    Generate Excel workbook with sheets:
    - Summary
    - Invoice
    - Packing List
    """
    start_time = time.perf_counter()
    file_path = (export_dir or get_export_dir()) / f"{_file_stem('shipment', calculations.invoice_number)}.xlsx"

    with pd.ExcelWriter(file_path, engine='openpyxl') as writer:
        summary_data = {
            "Field": [
                "Invoice Number",
                "Customer",
                "RFC",
                "Ship Date",
                "PO Number",
                "Carrier",
                "Broker",
                "Load Number",
                "ITN",
                "Total Net Weight (KG)",
                "Total Tare Weight (KG)",
                "Total Gross Weight (KG)",
                "Total Value (USD)",
                "Total Pallets",
                "Hazmat",
                "Overweight",
            ],
            "Value": [
                calculations.invoice_number,
                form_data.customer_name,
                form_data.rfc,
                format_date(form_data.ship_date, "long"),
                form_data.po_number,
                form_data.carrier,
                form_data.broker,
                form_data.load_number,
                form_data.itn_number,
                calculations.total_net_weight,
                calculations.total_tare_weight,
                calculations.total_gross_weight,
                calculations.total_value,
                calculations.total_pallets,
                "YES" if calculations.has_hazmat else "NO",
                "YES" if calculations.is_overweight else "NO",
            ],
        }
        pd.DataFrame(summary_data).to_excel(writer, sheet_name="Summary", index=False)

        invoice_rows = [
            {
                "Quantity": item.quantity,
                "Unit": item.unit_type.value,
                "Product": item.product.name,
                "HTS Code": item.product.hts_code,
                "Lot Number": item.lot_number,
                "Unit Price (USD)": item.unit_price,
                "Total (USD)": item.total_value,
            }
            for item in calculations.items
        ]
        pd.DataFrame(invoice_rows).to_excel(writer, sheet_name="Invoice", index=False)

        packing_rows = [
            {
                "Product": item.product.name,
                "Lot Number": item.lot_number,
                "Quantity": item.quantity,
                "Unit": item.unit_type.value,
                "Net Weight (KG)": item.net_weight,
                "Tare Weight (KG)": item.tare_weight,
                "Gross Weight (KG)": item.gross_weight,
                "Pallets": item.pallets,
                "UN Number": item.product.un_number,
            }
            for item in calculations.items
        ]
        pd.DataFrame(packing_rows).to_excel(writer, sheet_name="Packing List", index=False)

    duration = round(time.perf_counter() - start_time, 3)
    logger.info(
        "Excel workbook generated for invoice %s items=%d in %.2fs",
        calculations.invoice_number,
        len(calculations.items),
        duration,
    )

    return str(file_path)
