"""Total conversions from raw cells to canonical field types.

Each function accepts any cell (str, int, float, bool or None) and never
raises. Booleans are never read as numbers and numbers are never read as
booleans unless a function says so explicitly.
"""

import math
import re

from salon_import.extraction.models import CellValue

_CURRENCY_PREFIX = re.compile(r"^(r\$|us\$|\$)\s*", re.IGNORECASE)
_INACTIVE_WORDS = frozenset(
    {"false", "0", "n", "no", "nao", "não", "f", "inativo", "inactive"}
)


def to_text(value: CellValue) -> str | None:
    """Trimmed text, or None when the cell is null or blank."""
    if value is None:
        return None
    if isinstance(value, bool):
        text = "true" if value else "false"
    elif isinstance(value, float) and value.is_integer():
        text = str(int(value))
    else:
        text = str(value)
    return text.strip() or None


def to_email(value: CellValue) -> str | None:
    text = to_text(value)
    return text.lower() if text else None


def to_number(value: CellValue, default: float = 0.0) -> float:
    """Number from a cell; null/blank gives ``default``, garbage gives 0.

    Accepts Brazilian formatting ("1.234,56", "R$ 35,00").
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else 0.0
    text = value.strip()
    if not text:
        return default
    text = _CURRENCY_PREFIX.sub("", text).replace(" ", "")
    if "," in text:
        if "." in text and text.rfind(",") < text.rfind("."):
            text = text.replace(",", "")
        else:
            text = text.replace(".", "").replace(",", ".")
    try:
        number = float(text)
    except ValueError:
        return 0.0
    return number if math.isfinite(number) else 0.0


def to_active(value: CellValue) -> bool:
    """Active unless the cell explicitly says otherwise."""
    if value is None:
        return True
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    return value.strip().lower() not in _INACTIVE_WORDS
