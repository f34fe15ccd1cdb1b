"""Money normalisation.

Amounts are Decimals with at most two fractional digits, matching the
Numeric(14, 2) columns they are stored in.
"""

from decimal import Decimal, InvalidOperation
from typing import Union

from pharmaledger.domain.errors import ValidationError

CENT = Decimal("0.01")

# Largest magnitude a Numeric(14, 2) column holds
MAX_AMOUNT = Decimal("999999999999.99")

MoneyLike = Union[Decimal, int, str, float]


def to_money(value: MoneyLike, field_name: str = "amount") -> Decimal:
    """Convert a value to a two-place Decimal.

    Floats go through their string form so 0.1 becomes Decimal("0.10")
    rather than the binary expansion.

    Raises:
        ValidationError: If the value is not a finite number or has more
            than two decimal places, or is larger than MAX_AMOUNT
    """
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {field_name}: {value!r}")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Invalid {field_name}: {value!r}")

    if not amount.is_finite():
        raise ValidationError(f"Invalid {field_name}: {value!r}")
    if abs(amount) > MAX_AMOUNT:
        raise ValidationError(f"{field_name} {value} exceeds the maximum of {MAX_AMOUNT:,}")
    if amount != amount.quantize(CENT):
        raise ValidationError(f"{field_name} {value} has more than two decimal places")
    return amount.quantize(CENT)


def money_sum(amounts) -> Decimal:
    """Sum Decimal amounts, 0.00 for an empty iterable."""
    return sum(amounts, Decimal("0.00"))
