from .catalog import Product, PackagingStandard, ShippingName, ExporterInfo, Personnel, EmergencyContact
from .shipment import (
    PackagingType,
    LineItem,
    ShipmentFormData,
    ShipmentFieldsUpdate,
    LineItemUpdate,
    CalculatedLineItem,
    ShipmentCalculations,
    ShipmentStateResponse,
)
from .saved_shipment import SavedShipmentResponse, SavedShipmentDetail, SavedShipmentList
from .chat import ChatMessage, ChatRequest, ChatResponse, CreateShipmentCommand, UpdateCustomerCommand

__all__ = [
    "Product",
    "PackagingStandard",
    "ShippingName",
    "ExporterInfo",
    "Personnel",
    "EmergencyContact",
    "PackagingType",
    "LineItem",
    "ShipmentFormData",
    "ShipmentFieldsUpdate",
    "LineItemUpdate",
    "CalculatedLineItem",
    "ShipmentCalculations",
    "ShipmentStateResponse",
    "SavedShipmentResponse",
    "SavedShipmentDetail",
    "SavedShipmentList",
    "ChatMessage",
    "ChatRequest",
    "ChatResponse",
    "CreateShipmentCommand",
    "UpdateCustomerCommand",
]
