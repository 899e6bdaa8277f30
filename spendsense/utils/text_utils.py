# spendsense/utils/text_utils.py
import re
from typing import Any, Union

BARCODE_PATTERN = re.compile(r"^\d{8,14}$")


def is_valid_barcode(barcode: Any) -> bool:
    """EAN/UPC style barcodes: 8 to 14 decimal digits, nothing else.
    Ex: "4800016644290" -> True
    Ex: "12345" -> False (too short)
    Ex: "48000-1664" -> False
    """
    if not isinstance(barcode, str):
        return False
    return bool(BARCODE_PATTERN.match(barcode.strip()))


def clean_text(value: Any) -> str:
    """Trims form input; None and non-strings become ""."""
    if not isinstance(value, str):
        return ""
    return value.strip()


def parse_amount(value: Any) -> Union[float, None]:
    """Reads a positive amount from form/JSON input.

    Accepts numbers and numeric strings ("1,250.50" included). Returns None for
    anything missing, non-numeric, zero or negative.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().replace(",", "")
        if not value:
            return None
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return None
    if amount != amount or amount in (float("inf"), float("-inf")) or amount <= 0:
        return None
    return amount


def format_peso(amount: float) -> str:
    """Ex: 1234.5 -> "₱1,234.50"; negative values keep their sign in front."""
    sign = "-" if amount < 0 else ""
    return f"{sign}₱{abs(amount):,.2f}"
