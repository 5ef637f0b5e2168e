# apps/core/serializers.py

"""
Strict input fields and the bridge from serializer errors to FieldValidationError.

DRF's stock fields coerce their input ('yes' -> True, 12 -> '12', '5' -> 5).
Write payloads of admin resources are typed JSON, so the fields below reject
values of the wrong JSON type instead of converting them.
"""

import math
from decimal import Decimal

from rest_framework import serializers

from .decimal_utils import to_decimal128_equivalent
from .exceptions import FieldValidationError, FieldViolation, InvalidNumericValue


class StrictCharField(serializers.CharField):
    default_error_messages = {
        'invalid': 'Must be a string.',
    }

    def to_internal_value(self, data):
        if not isinstance(data, str):
            self.fail('invalid')
        return super().to_internal_value(data)


class StrictBooleanField(serializers.BooleanField):
    default_error_messages = {
        'invalid': 'Must be a boolean.',
    }

    def to_internal_value(self, data):
        if not isinstance(data, bool):
            self.fail('invalid')
        return data


class StrictIntegerField(serializers.IntegerField):
    """Accepts ints and integral floats (3.0); booleans and strings are rejected."""
    default_error_messages = {
        'invalid': 'Must be an integer.',
    }

    def to_internal_value(self, data):
        if isinstance(data, bool) or not isinstance(data, (int, float)):
            self.fail('invalid')
        if isinstance(data, float) and not (math.isfinite(data) and data.is_integer()):
            self.fail('invalid')
        return int(data)


class StrictDecimalField(serializers.DecimalField):
    """
    A JSON number converted to a 34-digit Decimal through to_decimal128_equivalent,
    so 0.1 arrives as Decimal('0.1'). Strings, booleans and non-finite numbers are rejected.
    """
    default_error_messages = {
        'invalid': 'Must be a finite number.',
    }

    def __init__(self, **kwargs):
        kwargs.setdefault('max_digits', None)
        kwargs.setdefault('decimal_places', None)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        if isinstance(data, bool) or not isinstance(data, (int, float, Decimal)):
            self.fail('invalid')
        if isinstance(data, (float, Decimal)) and not math.isfinite(data):
            self.fail('invalid')
        try:
            return to_decimal128_equivalent(data)
        except InvalidNumericValue:
            self.fail('invalid')


def _violations(errors, prefix=''):
    for name, messages in errors.items():
        field = f"{prefix}{name}"
        if isinstance(messages, dict):
            yield from _violations(messages, prefix=f"{field}.")
            continue
        if not isinstance(messages, (list, tuple)):
            messages = [messages]
        for message in messages:
            if isinstance(message, dict):
                yield from _violations(message, prefix=f"{field}.")
            else:
                yield FieldViolation(field, getattr(message, 'code', 'invalid'), str(message))


def validate_input(serializer_class, data, **kwargs) -> dict:
    """
    Run ``serializer_class`` on ``data`` and return its validated data.

    Every field is checked before anything is raised; the errors are reported
    as one FieldValidationError with the DRF error code of each failure as the
    violated constraint ('required', 'min_length', 'invalid_choice', ...).
    """
    serializer = serializer_class(data=data, **kwargs)
    if not serializer.is_valid():
        raise FieldValidationError(list(_violations(serializer.errors)))
    return dict(serializer.validated_data)
