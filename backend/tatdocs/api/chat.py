"""
Chat assistant endpoint.
"""
from fastapi import APIRouter, Depends
from tatdocs.api.shipments import get_shipment_session
from tatdocs.schemas.chat import ChatRequest, ChatResponse
from tatdocs.services.chat_assistant import send_chat_message
from tatdocs.services.shipment_session import ShipmentSession

router = APIRouter()


@router.post("/", response_model=ChatResponse)
def chat(
    request: ChatRequest,
    session: ShipmentSession = Depends(get_shipment_session)
):
    """Send a message to the assistant; a returned command updates the current shipment."""
    return send_chat_message(session, request.messages, request.message)
