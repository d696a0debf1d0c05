"""Fixed-point money arithmetic.

Amounts are held as ``Decimal`` while computing and stored/serialised as
plain numbers rounded to two places, so ``total = subtotal + tax + shipping``
holds exactly at two decimal places.
"""

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")
GST_RATE = Decimal("0.18")


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize(value) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def as_number(value) -> float:
    """Round to cents and convert for storage / JSON."""
    return float(quantize(value))


def discounted_price(price, discount) -> Decimal:
    """Unit price after a percentage discount: ``price x (1 - discount/100)``."""
    return quantize(to_decimal(price) * (Decimal(100) - to_decimal(discount or 0)) / Decimal(100))


def line_total(unit_price, quantity: int) -> Decimal:
    return quantize(to_decimal(unit_price) * quantity)


def tax_for(subtotal) -> Decimal:
    return quantize(to_decimal(subtotal) * GST_RATE)
