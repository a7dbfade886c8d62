from .saved_shipment import SavedShipment

__all__ = [
    "SavedShipment",
]
