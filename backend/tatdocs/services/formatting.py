"""
Display formatting for document values. Rounding happens only here.
"""
from typing import Optional

from tatdocs.services.catalog import parse_ship_date

SPANISH_MONTHS = [
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
]

DATE_STYLES = ("long", "short", "mmddyy", "mmddyyyy", "spanish", "iso")


def format_number(value: float, max_decimals: int = 3) -> str:
    """Locale-style grouping with up to max_decimals fraction digits (12,345.5)."""
    text = f"{value:,.{max_decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def format_weight(value: float) -> str:
    return format_number(value)


def format_currency(value: float) -> str:
    return f"{value:,.2f}"


def format_unit_price(value: float) -> str:
    return f"{value:.2f}"


def format_quantity(value: float) -> str:
    return format_number(value).replace(",", "")


def format_spanish_decimal(value: float, digits: int) -> str:
    return f"{value:.{digits}f}".replace(".", ",")


def format_date(ship_date: Optional[str], style: str) -> str:
    if not ship_date:
        return ""
    if style == "iso":
        return ship_date
    parsed = parse_ship_date(ship_date)
    if parsed is None:
        return ship_date
    if style == "long":
        return f"{parsed.strftime('%B').upper()} {parsed.day}, {parsed.year}"
    if style == "short":
        return f"{parsed.strftime('%b').upper()} {parsed.day}, {parsed.year}"
    if style == "mmddyy":
        return parsed.strftime("%m/%d/%y")
    if style == "mmddyyyy":
        return parsed.strftime("%m/%d/%Y")
    if style == "spanish":
        return f"{parsed.day} de {SPANISH_MONTHS[parsed.month - 1]} de {parsed.year}"
    raise ValueError(f"Unknown date style '{style}'")
