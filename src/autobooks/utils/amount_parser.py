"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str: str) -> Decimal:
    """Parse a positive money amount into a Decimal rounded to cents.

    Handles "123.45", "R123.45", "1,234.56" and "1 234.56".

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount with two decimal places

    Raises:
        ValueError: If the string is not a positive amount
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    cleaned = re.sub(r"^[R$€£]", "", amount_str.strip())
    cleaned = cleaned.replace(",", "").replace(" ", "")

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")

    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    amount = amount.quantize(Decimal("0.01"))
    if amount <= 0:
        raise ValueError(f"Amount must be positive, got '{amount_str}'")
    return amount
