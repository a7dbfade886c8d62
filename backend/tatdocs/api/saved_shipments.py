"""
Saved shipment API endpoints.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from tatdocs.api.shipments import get_shipment_session
from tatdocs.db.database import get_db
from tatdocs.schemas.saved_shipment import SavedShipmentDetail, SavedShipmentList, SavedShipmentResponse
from tatdocs.schemas.shipment import ShipmentStateResponse
from tatdocs.services.shipment_session import LastLineItemError, ShipmentSession
from tatdocs.services.shipment_store import SavedShipmentNotFoundError, ShipmentStore

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/", response_model=SavedShipmentResponse, status_code=status.HTTP_201_CREATED)
async def save_current_shipment(
    db: Session = Depends(get_db),
    session: ShipmentSession = Depends(get_shipment_session)
):
    """Save a snapshot of the current shipment form."""
    try:
        return ShipmentStore(db).save(session.form_data, session.calculations)
    except SQLAlchemyError as e:
        logger.exception("Failed to save shipment")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error saving shipment: {str(e)}"
        )


@router.get("/", response_model=SavedShipmentList)
async def list_saved_shipments(db: Session = Depends(get_db)):
    """List saved shipments, newest first. Storage failures give an empty list."""
    try:
        shipments = ShipmentStore(db).list()
    except SQLAlchemyError as e:
        logger.error("Failed to list saved shipments: %s", e)
        return SavedShipmentList(shipments=[], count=0, error="Saved shipments are unavailable")
    return SavedShipmentList(
        shipments=[SavedShipmentResponse.model_validate(s) for s in shipments],
        count=len(shipments),
    )


@router.get("/{shipment_id}", response_model=SavedShipmentDetail)
async def get_saved_shipment(
    shipment_id: str,
    db: Session = Depends(get_db)
):
    try:
        return ShipmentStore(db).get(shipment_id)
    except SavedShipmentNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Saved shipment {shipment_id} not found"
        )


@router.post("/{shipment_id}/load", response_model=ShipmentStateResponse)
async def load_saved_shipment(
    shipment_id: str,
    db: Session = Depends(get_db),
    session: ShipmentSession = Depends(get_shipment_session)
):
    """Replace the current form with a copy of the saved one."""
    try:
        form_data = ShipmentStore(db).load(shipment_id)
    except SavedShipmentNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Saved shipment {shipment_id} not found"
        )
    try:
        session.replace(form_data)
    except LastLineItemError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    return ShipmentStateResponse(form_data=session.form_data, calculations=session.calculations)


@router.delete("/{shipment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_saved_shipment(
    shipment_id: str,
    db: Session = Depends(get_db)
):
    try:
        ShipmentStore(db).delete(shipment_id)
    except SavedShipmentNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Saved shipment {shipment_id} not found"
        )
