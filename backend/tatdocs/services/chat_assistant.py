"""
LLM chat assistant for shipment questions and form updates.
"""
import logging
import os
import time
from typing import Any, Dict, List, Optional

from openai import OpenAI

from tatdocs.schemas.chat import ChatMessage, ChatResponse
from tatdocs.schemas.shipment import ShipmentCalculations, ShipmentFormData
from tatdocs.services.catalog import Catalog
from tatdocs.services.chat_commands import apply_command, parse_reply
from tatdocs.services.formatting import format_number, format_quantity
from tatdocs.services.shipment_session import ShipmentSession

# Lazy initialization of OpenAI client
_openai_client = None
logger = logging.getLogger(__name__)

NOT_CONFIGURED_MESSAGE = "OpenAI API key not configured. Please set OPENAI_API_KEY environment variable."
EMPTY_REPLY_MESSAGE = "Sorry, I could not process that request."


def get_openai_client():
    """Get or initialize OpenAI client lazily."""
    global _openai_client
    if _openai_client is None:
        openai_api_key = os.getenv("OPENAI_API_KEY")
        if openai_api_key:
            try:
                _openai_client = OpenAI(api_key=openai_api_key)
            except Exception as e:
                # Log error but don't crash the app
                logger.warning("Failed to initialize OpenAI client: %s", e)
                _openai_client = False  # Use False to indicate initialization failed
    return _openai_client if _openai_client is not False else None


def build_shipment_context(form_data: ShipmentFormData, calculations: ShipmentCalculations) -> Dict[str, Any]:
    """Read-only digest of the current shipment handed to the assistant."""
    return {
        "invoice_number": calculations.invoice_number,
        "customer_name": form_data.customer_name,
        "ship_date": form_data.ship_date,
        "products": ", ".join(
            f"{format_quantity(item.quantity)} {item.unit_type.value} of {item.product.name}"
            for item in calculations.items
        ),
        "total_value": calculations.total_value,
        "total_gross_weight": calculations.total_gross_weight,
        "has_hazmat": calculations.has_hazmat,
    }


def build_system_prompt(catalog: Catalog, context: Optional[Dict[str, Any]] = None) -> str:
    exporter = catalog.exporter
    packaging = catalog.packaging
    product_lines = "\n".join(
        f"- {p.name} (ID: {p.id}): UN# {p.un_number}, Hazard Class: {p.hazard_class}, "
        f"Density: {p.density:g}, Tote: {p.kg_per_tote:g}kg, Drum: {p.kg_per_drum:g}kg"
        for p in catalog.products
    )

    prompt = f"""You are a helpful assistant for {exporter.name} (TATI), a company that exports petroleum chemical additives from Houston, TX to Mexico via Laredo.

COMPANY INFO:
- Name: {exporter.name}
- Address: {exporter.address}, {exporter.city}
- Phone: {exporter.phone}
- Tax ID: {exporter.tax_id}
- Contact: {catalog.personnel.general_manager} (General Manager)

PRODUCTS DATABASE ({len(catalog.products)} products):
{product_lines}

PACKAGING:
- TOTES: 1000L IBC containers, ~{packaging.tote_tare_kg:g}kg tare weight, {packaging.totes_per_pallet} per pallet
- DRUMS: 208L steel drums, ~{packaging.drum_tare_kg:g}kg tare weight, {packaging.drums_per_pallet} per pallet
- Max load weight: {format_number(catalog.max_gross_weight_kg)} KG gross

DOCUMENTS GENERATED:
1. Commercial Invoice - billing document with product details
2. Packing List - physical contents for customs
3. USMCA Certificate - origin certificate for duty-free trade
4. Bill of Lading - carrier contract and receipt
5. Certificate of Quality (Spanish) - quality certification
6. Hazmat Declaration - required for UN-numbered products
7. Reminders Checklist - pre-shipment verification

HAZMAT RULES:
- Products with UN numbers require hazmat documentation
- UN1992, UN1219, UN1268, UN1299 = Flammable (Class 3)
- UN2735 = Corrosive (Class 8)
- UN2924 = Flammable + Corrosive (Class 8)

When users ask to CREATE a shipment, respond with a JSON block in this format:
```json
{{
  "action": "create_shipment",
  "items": [{{"productId": "P13", "quantity": 20, "unitType": "totes", "unitPrice": 2450}}],
  "customerName": "Customer Name",
  "mexicoAddress": "Address in Mexico",
  "rfc": "RFC123456ABC"
}}
```

When users ask to UPDATE customer info, respond with:
```json
{{
  "action": "update_customer",
  "customerName": "New Name",
  "mexicoAddress": "New Address",
  "rfc": "RFC123"
}}
```

Use markdown tables for structured data.

Be helpful, concise, and knowledgeable about international shipping, hazmat regulations, and Mexican customs requirements."""

    if context:
        prompt += f"""

CURRENT SHIPMENT INFO:
- Invoice: {context.get('invoice_number') or 'Not set'}
- Customer: {context.get('customer_name') or 'Not set'}
- Ship Date: {context.get('ship_date') or 'Not set'}
- Products: {context.get('products') or 'None'}
- Total Value: ${format_number(context.get('total_value') or 0)}
- Total Weight: {format_number(context.get('total_gross_weight') or 0)} KG
- Has Hazmat: {'Yes' if context.get('has_hazmat') else 'No'}"""

    return prompt


def _model_settings() -> Dict[str, Any]:
    return {
        "model": os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
        "max_tokens": int(os.getenv("OPENAI_MAX_TOKENS", "1000")),
        "temperature": float(os.getenv("OPENAI_TEMPERATURE", "0.7")),
    }


def send_chat_message(
    session: ShipmentSession,
    history: List[ChatMessage],
    message: str,
    client=None,
) -> ChatResponse:
    """
    Ask the assistant about the current shipment and apply any command it returns.

    The session's form data is replaced only when the reply carries a valid
    command; the calculations are then recomputed from the new form.
    """
    client = client or get_openai_client()
    if not client:
        return ChatResponse(content=NOT_CONFIGURED_MESSAGE)

    start_time = time.perf_counter()
    context = build_shipment_context(session.form_data, session.calculations)
    messages = [{"role": "system", "content": build_system_prompt(session.catalog, context)}]
    messages += [{"role": m.role, "content": m.content} for m in history]
    messages.append({"role": "user", "content": message})

    try:
        response = client.chat.completions.create(messages=messages, **_model_settings())
        content = response.choices[0].message.content or EMPTY_REPLY_MESSAGE
    except Exception as e:
        logger.error("Chat request failed: %s", e)
        return ChatResponse(content=f"Error: {str(e)}")

    reply = parse_reply(content)
    action = None
    if reply.command is not None:
        session.replace(apply_command(session.form_data, reply.command))
        action = reply.command.action
        logger.info("Applied chat command %s", action)

    duration = round(time.perf_counter() - start_time, 3)
    logger.info("Chat reply generated in %.2fs action=%s", duration, action)
    return ChatResponse(content=reply.text, action=action, shipment=session.calculations)
