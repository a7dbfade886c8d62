"""
Chat command interpreter - turns assistant text into validated shipment commands.

The assistant may embed one fenced ```json block with an "action" key. The text is
untrusted: anything that does not validate as a known command is ignored and the
form data is left untouched.
"""
from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Optional, Union

from pydantic import TypeAdapter, ValidationError

from tatdocs.schemas.chat import (
    ChatCommand,
    CreateShipmentCommand,
    CustomerPatch,
    UpdateCustomerCommand,
)
from tatdocs.schemas.shipment import LineItem, ShipmentFormData
from tatdocs.services.catalog import generate_lot_number
from tatdocs.services.shipment_session import new_item_id

logger = logging.getLogger(__name__)

JSON_BLOCK_RE = re.compile(r"```json[ \t]*\r?\n(.*?)\r?\n?```", re.DOTALL)
APPLIED_FALLBACK_TEXT = "Done! I've updated the shipment for you."

_command_adapter = TypeAdapter(ChatCommand)

Command = Union[CreateShipmentCommand, UpdateCustomerCommand]


@dataclass
class ParsedReply:
    text: str
    command: Optional[Command] = None


def parse_command(content: str) -> Optional[Command]:
    """Extract the first json block and validate it; malformed payloads give None."""
    match = JSON_BLOCK_RE.search(content or "")
    if not match:
        return None
    try:
        payload = json.loads(match.group(1))
    except json.JSONDecodeError:
        logger.debug("Ignoring malformed json block in assistant reply")
        return None
    if not isinstance(payload, dict):
        return None
    try:
        return _command_adapter.validate_python(payload)
    except ValidationError as e:
        logger.debug("Ignoring invalid chat command: %s", e.errors())
        return None


def strip_command_blocks(content: str) -> str:
    return JSON_BLOCK_RE.sub("", content or "").strip()


def parse_reply(content: str) -> ParsedReply:
    command = parse_command(content)
    if command is None:
        return ParsedReply(text=content)
    return ParsedReply(text=strip_command_blocks(content) or APPLIED_FALLBACK_TEXT, command=command)


def _customer_changes(command: CustomerPatch) -> dict:
    # Empty strings keep the current value, as with a missing key
    changes = {}
    for field in ("customer_name", "mexico_address", "rfc"):
        value = getattr(command, field)
        if value:
            changes[field] = value
    return changes


def apply_command(form_data: ShipmentFormData, command: Optional[Command]) -> ShipmentFormData:
    """Pure merge of a command into a copy of the form data."""
    if command is None:
        return form_data
    changes = _customer_changes(command)
    if isinstance(command, CreateShipmentCommand):
        changes["items"] = [
            LineItem(
                id=new_item_id(),
                product_id=item.product_id,
                quantity=item.quantity,
                unit_type=item.unit_type,
                unit_price=item.unit_price or 0,
                lot_number=generate_lot_number(),
            )
            for item in command.items
        ]
    return form_data.model_copy(update=changes, deep=True)
