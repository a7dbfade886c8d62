"""
Shipment form endpoints - the live editing session and the stateless calculator.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, Request, status
from tatdocs.schemas.shipment import (
    LineItemUpdate,
    ShipmentCalculations,
    ShipmentFieldsUpdate,
    ShipmentFormData,
    ShipmentStateResponse,
)
from tatdocs.services.shipment_calculator import calculate_shipment
from tatdocs.services.shipment_session import (
    LastLineItemError,
    LineItemNotFoundError,
    ShipmentSession,
)

router = APIRouter()
logger = logging.getLogger(__name__)


def get_shipment_session(request: Request) -> ShipmentSession:
    """Dependency for the application's shipment session."""
    return request.app.state.shipment_session


def _state(session: ShipmentSession) -> ShipmentStateResponse:
    return ShipmentStateResponse(form_data=session.form_data, calculations=session.calculations)


@router.post("/calculate", response_model=ShipmentCalculations)
async def calculate(form_data: ShipmentFormData):
    """Calculate totals for a form without touching the current shipment."""
    return calculate_shipment(form_data)


@router.get("/current", response_model=ShipmentStateResponse)
async def get_current_shipment(session: ShipmentSession = Depends(get_shipment_session)):
    return _state(session)


@router.put("/current", response_model=ShipmentStateResponse)
async def replace_current_shipment(
    form_data: ShipmentFormData,
    session: ShipmentSession = Depends(get_shipment_session)
):
    """Replace the whole form; it must keep at least one line item."""
    try:
        session.replace(form_data)
    except LastLineItemError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    return _state(session)


@router.patch("/current", response_model=ShipmentStateResponse)
async def update_current_shipment(
    update: ShipmentFieldsUpdate,
    session: ShipmentSession = Depends(get_shipment_session)
):
    """Update shipment header fields; omitted fields are left unchanged."""
    session.update_fields(update)
    return _state(session)


@router.post("/current/items", response_model=ShipmentStateResponse, status_code=status.HTTP_201_CREATED)
async def add_line_item(session: ShipmentSession = Depends(get_shipment_session)):
    session.add_item()
    return _state(session)


@router.patch("/current/items/{item_id}", response_model=ShipmentStateResponse)
async def update_line_item(
    item_id: str,
    update: LineItemUpdate,
    session: ShipmentSession = Depends(get_shipment_session)
):
    try:
        session.update_item(item_id, update.field, update.value)
    except LineItemNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Line item {item_id} not found"
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    return _state(session)


@router.delete("/current/items/{item_id}", response_model=ShipmentStateResponse)
async def remove_line_item(
    item_id: str,
    session: ShipmentSession = Depends(get_shipment_session)
):
    try:
        session.remove_item(item_id)
    except LastLineItemError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except LineItemNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Line item {item_id} not found"
        )
    return _state(session)


@router.post("/current/reset", response_model=ShipmentStateResponse)
async def reset_current_shipment(session: ShipmentSession = Depends(get_shipment_session)):
    """Start a new shipment from the default form."""
    session.reset()
    logger.info("Shipment form reset")
    return _state(session)
