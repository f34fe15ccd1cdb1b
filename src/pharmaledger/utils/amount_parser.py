"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

from pharmaledger.domain.money import MAX_AMOUNT

CURRENCY_PATTERN = re.compile(r"(?i)[$€£¥]|\b(?:egp|usd|eur|gbp)\b")


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a two-place Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45", "EGP 123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount rounded to cents

    Raises:
        ValueError: If amount string cannot be parsed or has more than two decimals
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    cleaned = CURRENCY_PATTERN.sub("", amount_str).replace(",", "").strip()

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")

    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if abs(amount) > MAX_AMOUNT:
        raise ValueError(f"Amount '{amount_str}' exceeds the maximum of {MAX_AMOUNT:,}")
    if amount != amount.quantize(Decimal("0.01")):
        raise ValueError(f"Amount '{amount_str}' has more than two decimal places")

    amount = amount.quantize(Decimal("0.01"))
    return -amount if is_negative else amount
