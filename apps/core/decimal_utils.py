# apps/core/decimal_utils.py

import logging
import math
from decimal import Context, Decimal, InvalidOperation, Overflow

from .exceptions import InvalidNumericValue

logger = logging.getLogger(__name__)

# Same precision and exponent range as IEEE 754 decimal128
DECIMAL128_CONTEXT = Context(prec=34, Emax=6144, Emin=-6143)


def _canonical_float_string(number: float) -> str:
    """
    Shortest string that round-trips to ``number`` ('0.1', not the binary expansion).
    """
    text = repr(number)
    if text.endswith('.0'):
        text = text[:-2]
    return text


def to_decimal128_equivalent(value) -> Decimal:
    """
    Convert a number (or numeric string) into a 34-digit Decimal.

    The decimal is built from the canonical string form of the number, never
    from the raw binary float, so ``0.1`` becomes ``Decimal('0.1')``.
    Raises InvalidNumericValue for NaN, infinities, booleans and strings that
    are not numbers (including the empty string).
    """
    if isinstance(value, bool):
        raise InvalidNumericValue(f"Boolean {value!r} is not a numeric value.")

    if isinstance(value, Decimal):
        if not value.is_finite():
            raise InvalidNumericValue(f"Value {value} is not finite.")
        text = str(value)
    elif isinstance(value, int):
        text = str(value)
    elif isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidNumericValue(f"Value {value} is not finite.")
        text = _canonical_float_string(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            raise InvalidNumericValue(f"Value {value!r} is not a number.")
        if not math.isfinite(number):
            raise InvalidNumericValue(f"Value {value!r} is not finite.")
        text = _canonical_float_string(number)
    else:
        raise InvalidNumericValue(f"Unsupported type {type(value).__name__} for numeric conversion.")

    try:
        return DECIMAL128_CONTEXT.create_decimal(text)
    except (InvalidOperation, Overflow):
        logger.warning(f"Value {text} is outside the decimal128 range.")
        raise InvalidNumericValue(f"Value {text} is outside the decimal128 range.")


def decimal_to_number(value) -> float:
    """
    Widen a Decimal, numeric string or number to a float for display or summation.

    This is lossy: a float keeps about 15-17 significant digits. Code that needs
    exact accumulation (ledgers, totals that are stored back) must stay in Decimal.
    """
    if isinstance(value, bool):
        raise InvalidNumericValue(f"Boolean {value!r} is not a numeric value.")
    if isinstance(value, (Decimal, int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            raise InvalidNumericValue(f"Value {value!r} is not a number.")
    raise InvalidNumericValue(f"Unsupported type {type(value).__name__} for numeric conversion.")
