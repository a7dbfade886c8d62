"""
Unit Tests for the Chat Command Interpreter

Run with: pytest backend/tests/test_chat_commands.py -v
"""

import json
import re

import pytest

from conftest import make_form
from tatdocs.schemas.chat import CreateShipmentCommand, UpdateCustomerCommand
from tatdocs.schemas.shipment import PackagingType
from tatdocs.services.chat_commands import (
    APPLIED_FALLBACK_TEXT,
    apply_command,
    parse_command,
    parse_reply,
    strip_command_blocks,
)
from tatdocs.services.shipment_calculator import calculate_shipment

CREATE_REPLY = """Here is your shipment:
```json
{
  "action": "create_shipment",
  "items": [
    {"productId": "P13", "quantity": 20, "unitType": "totes", "unitPrice": 2450},
    {"productId": "P01", "quantity": 10, "unitType": "DRUMS"}
  ],
  "customerName": "Acme MX",
  "rfc": "ACM010101XYZ"
}
```
Let me know if anything else is needed."""

UPDATE_REPLY = """```json
{"action": "update_customer", "customerName": "Nuevo Cliente", "mexicoAddress": "", "rfc": "NCL020202AAA"}
```"""


# =============================================================================
# PARSING
# =============================================================================

class TestParseCommand:
    """Only well-formed, known commands are recognized."""

    def test_create_shipment(self):
        command = parse_command(CREATE_REPLY)
        assert isinstance(command, CreateShipmentCommand)
        assert [item.product_id for item in command.items] == ["P13", "P01"]
        assert command.items[1].unit_type == PackagingType.DRUMS
        assert command.items[1].unit_price is None
        assert command.customer_name == "Acme MX"

    def test_update_customer(self):
        command = parse_command(UPDATE_REPLY)
        assert isinstance(command, UpdateCustomerCommand)
        assert command.rfc == "NCL020202AAA"

    @pytest.mark.parametrize("content", [
        "No commands here.",
        "```json\n{not valid json}\n```",
        "```json\n[1, 2, 3]\n```",
        '```json\n{"action": "delete_everything"}\n```',
        '```json\n{"action": "create_shipment", "items": []}\n```',
        '```json\n{"action": "create_shipment", "items": [{"quantity": 1}]}\n```',
        '```json\n{"customerName": "No action"}\n```',
        "",
    ])
    def test_rejected_payloads(self, content):
        assert parse_command(content) is None

    @pytest.mark.parametrize("unit_type,expected", [
        ("totes", PackagingType.TOTES),
        (" Totes ", PackagingType.TOTES),
        ("TOTES", PackagingType.TOTES),
        ("drums", PackagingType.DRUMS),
        ("drum", PackagingType.DRUMS),
        ("tote", PackagingType.DRUMS),
        ("ibc", PackagingType.DRUMS),
        (None, PackagingType.DRUMS),
        (5, PackagingType.DRUMS),
    ])
    def test_unit_type_is_totes_or_drums(self, unit_type, expected):
        item = json.dumps({"productId": "P01", "quantity": 10, "unitType": unit_type})
        content = '```json\n{"action": "create_shipment", "items": [' + item + ']}\n```'
        command = parse_command(content)
        assert command is not None
        assert command.items[0].unit_type == expected

    def test_missing_unit_type_is_drums(self):
        content = '```json\n{"action": "create_shipment", "items": [{"productId": "P01", "quantity": 10}]}\n```'
        command = parse_command(content)
        assert command.items[0].unit_type == PackagingType.DRUMS

    def test_only_first_block_is_read(self):
        content = UPDATE_REPLY + "\n" + '```json\n{"action": "update_customer", "rfc": "SECOND"}\n```'
        assert parse_command(content).rfc == "NCL020202AAA"


class TestParseReply:
    """Display text handling."""

    def test_block_is_stripped(self):
        reply = parse_reply(CREATE_REPLY)
        assert "```" not in reply.text
        assert reply.text.startswith("Here is your shipment:")
        assert reply.text.endswith("anything else is needed.")

    def test_fallback_text_when_only_a_block(self):
        assert parse_reply(UPDATE_REPLY).text == APPLIED_FALLBACK_TEXT

    def test_malformed_block_keeps_text(self):
        content = "Try this:\n```json\n{oops\n```"
        reply = parse_reply(content)
        assert reply.command is None
        assert reply.text == content

    def test_strip_command_blocks(self):
        assert strip_command_blocks("a\n```json\n{}\n```\nb") == "a\n\nb"


# =============================================================================
# APPLYING
# =============================================================================

class TestApplyCommand:
    """Merging commands into the form is pure."""

    def test_create_replaces_items(self):
        form = make_form(customer_name="Old", mexico_address="Old address")
        updated = apply_command(form, parse_command(CREATE_REPLY))

        assert len(updated.items) == 2
        first, second = updated.items
        assert first.product_id == "P13"
        assert first.quantity == 20
        assert first.unit_price == 2450
        assert second.unit_type == PackagingType.DRUMS
        assert second.unit_price == 0
        assert first.id != second.id
        assert re.fullmatch(r"LOT-\d{5}", first.lot_number)

        assert updated.customer_name == "Acme MX"
        assert updated.rfc == "ACM010101XYZ"
        assert updated.mexico_address == "Old address"  # not in the command

    def test_missing_unit_type_rates_as_drums(self):
        content = '```json\n{"action": "create_shipment", "items": [{"productId": "P01", "quantity": 10}]}\n```'
        updated = apply_command(make_form(), parse_command(content))
        assert updated.items[0].unit_type == PackagingType.DRUMS

        calc = calculate_shipment(updated)
        assert calc.total_net_weight == 2080    # 208 * 10
        assert calc.total_pallets == 3          # ceil(10 / 4)

    def test_update_customer_keeps_items(self, mixed_form):
        updated = apply_command(mixed_form, parse_command(UPDATE_REPLY))
        assert updated.items == mixed_form.items
        assert updated.customer_name == "Nuevo Cliente"
        assert updated.rfc == "NCL020202AAA"
        assert updated.mexico_address == mixed_form.mexico_address  # empty string ignored

    def test_input_form_untouched(self, mixed_form):
        before = mixed_form.model_copy(deep=True)
        apply_command(mixed_form, parse_command(CREATE_REPLY))
        assert mixed_form == before

    def test_no_command(self, mixed_form):
        assert apply_command(mixed_form, None) is mixed_form
