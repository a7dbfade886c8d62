"""
Chat schemas - transport messages and the structured commands the assistant may emit.
"""
from pydantic import BaseModel, Field, field_validator
from typing import Annotated, List, Literal, Optional, Union
from tatdocs.schemas.shipment import NumericInput, PackagingType, ShipmentCalculations


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    messages: List[ChatMessage] = []
    message: str


class ChatResponse(BaseModel):
    content: str
    action: Optional[str] = None
    shipment: Optional[ShipmentCalculations] = None


class CommandLineItem(BaseModel):
    product_id: str = Field(alias="productId")
    quantity: NumericInput = 0
    # Anything but "totes" (including a missing key) ships in drums
    unit_type: PackagingType = Field(PackagingType.DRUMS, alias="unitType")
    unit_price: NumericInput = Field(None, alias="unitPrice")

    class Config:
        populate_by_name = True

    @field_validator("unit_type", mode="before")
    @classmethod
    def _normalize_unit_type(cls, value):
        if isinstance(value, PackagingType):
            return value
        if isinstance(value, str) and value.strip().lower() == PackagingType.TOTES.value:
            return PackagingType.TOTES
        return PackagingType.DRUMS


class CustomerPatch(BaseModel):
    customer_name: Optional[str] = Field(None, alias="customerName")
    mexico_address: Optional[str] = Field(None, alias="mexicoAddress")
    rfc: Optional[str] = None

    class Config:
        populate_by_name = True


class CreateShipmentCommand(CustomerPatch):
    action: Literal["create_shipment"]
    items: List[CommandLineItem] = Field(min_length=1)


class UpdateCustomerCommand(CustomerPatch):
    action: Literal["update_customer"]


ChatCommand = Annotated[
    Union[CreateShipmentCommand, UpdateCustomerCommand],
    Field(discriminator="action"),
]
