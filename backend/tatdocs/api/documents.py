"""
Document endpoints (views, plain text, PDF, Excel) for the current shipment.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import FileResponse, PlainTextResponse
from tatdocs.api.shipments import get_shipment_session
from tatdocs.services.documents import DOCUMENT_BUILDERS, DocumentView, available_documents, build_document, render_text
from tatdocs.services.export import generate_document_pdf, generate_excel_workbook
from tatdocs.services.shipment_session import ShipmentSession

router = APIRouter()
logger = logging.getLogger(__name__)


def _build_view(doc_type: str, session: ShipmentSession) -> DocumentView:
    if doc_type not in DOCUMENT_BUILDERS:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown document type '{doc_type}'"
        )
    try:
        return build_document(doc_type, session.calculations, session.form_data, session.catalog)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )


@router.get("/")
async def list_documents(session: ShipmentSession = Depends(get_shipment_session)):
    """Documents available for the current shipment."""
    documents = available_documents(session.calculations)
    return {"documents": documents, "count": len(documents)}


@router.get("/export/excel")
async def download_excel_workbook(session: ShipmentSession = Depends(get_shipment_session)):
    """Download the shipment workbook (summary, invoice, packing list)."""
    calculations = session.calculations
    try:
        file_path = generate_excel_workbook(session.form_data, calculations)
    except Exception as e:
        logger.exception("Excel export failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error generating Excel workbook: {str(e)}"
        )
    return FileResponse(
        file_path,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        filename=f"shipment_{calculations.invoice_number}.xlsx"
    )


@router.get("/{doc_type}")
async def get_document(
    doc_type: str,
    session: ShipmentSession = Depends(get_shipment_session)
):
    return _build_view(doc_type, session).to_dict()


@router.get("/{doc_type}/text", response_class=PlainTextResponse)
async def get_document_text(
    doc_type: str,
    session: ShipmentSession = Depends(get_shipment_session)
):
    return render_text(_build_view(doc_type, session))


@router.get("/{doc_type}/pdf")
async def download_document_pdf(
    doc_type: str,
    session: ShipmentSession = Depends(get_shipment_session)
):
    view = _build_view(doc_type, session)
    invoice_number = session.calculations.invoice_number
    try:
        file_path = generate_document_pdf(view, invoice_number)
    except Exception as e:
        logger.exception("PDF export failed for %s", doc_type)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error generating PDF: {str(e)}"
        )
    return FileResponse(
        file_path,
        media_type="application/pdf",
        filename=f"{doc_type}_{invoice_number}.pdf"
    )
