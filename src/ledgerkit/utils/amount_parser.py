"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import re

ORE = Decimal("0.01")


def round_ore(amount: Decimal) -> Decimal:
    """Round an amount half-up to whole öre (two decimals)."""
    return amount.quantize(ORE, rounding=ROUND_HALF_UP)


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles Swedish and plain formats:
    - "123.45", "123,45"
    - "1 234,56 kr", "1 234,56 SEK", "500:-"
    - "1,234.56", "1.234,56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if amount_str is None or not str(amount_str).strip():
        raise ValueError("Empty amount string")

    text = str(amount_str).strip()

    is_negative = False
    if text.startswith("(") and text.endswith(")"):
        is_negative = True
        text = text[1:-1]

    text = re.sub(r"(?i)kr|sek|:-", "", text)
    # Unicode minus sign
    text = text.replace("−", "-")
    # Thousands separators, including non-breaking and thin spaces
    text = re.sub(r"\s", "", text)

    if "," in text and "." in text:
        # The separator that comes last is the decimal one
        if text.rfind(",") > text.rfind("."):
            text = text.replace(".", "").replace(",", ".")
        else:
            text = text.replace(",", "")
    elif "," in text:
        text = text.replace(",", ".")

    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")

    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")

    return -amount if is_negative else amount
