# apps/calculator/serializers.py

from rest_framework import serializers

from .state import CalculatorItem, CalculatorState, ItemType, SetCurrentDate, UpdateAllPrices


class CalculatorItemSerializer(serializers.Serializer):
    id = serializers.CharField(max_length=64)
    type = serializers.ChoiceField(choices=ItemType.ALL)
    name = serializers.CharField(max_length=100)
    quantity = serializers.DecimalField(max_digits=34, decimal_places=8, min_value=0)
    unit_price = serializers.DecimalField(max_digits=34, decimal_places=8, min_value=0)
    total_value = serializers.DecimalField(max_digits=40, decimal_places=8, read_only=True)
    sub_type = serializers.CharField(max_length=50, required=False, allow_null=True, allow_blank=True)
    variant_code = serializers.CharField(max_length=50, required=False, allow_null=True, allow_blank=True)
    variant_name = serializers.CharField(max_length=100, required=False, allow_null=True, allow_blank=True)
    date = serializers.CharField(max_length=10, required=False, allow_null=True)


class CalculatorStateSerializer(serializers.Serializer):
    """
    Converts between the JSON calculator state and CalculatorState.
    """
    items = CalculatorItemSerializer(many=True)
    current_date = serializers.DateField(required=False, allow_null=True, format='%Y-%m-%d')
    is_calculator_mode = serializers.BooleanField(default=True)
    total_value = serializers.DecimalField(max_digits=40, decimal_places=8, read_only=True)


def state_from_data(data) -> CalculatorState:
    """Build a CalculatorState from CalculatorStateSerializer.validated_data."""
    current_date = data.get('current_date')
    return CalculatorState(
        items=tuple(CalculatorItem(**item) for item in data['items']),
        current_date=current_date.isoformat() if current_date else None,
        is_calculator_mode=data['is_calculator_mode'],
    )


class SnapshotQuerySerializer(serializers.Serializer):
    date = serializers.DateField(required=False, allow_null=True)


class SyncRequestSerializer(serializers.Serializer):
    state = CalculatorStateSerializer()
    date = serializers.DateField(required=False, allow_null=True)


def serialize_effect(effect) -> dict:
    if isinstance(effect, SetCurrentDate):
        return {'type': 'set_current_date', 'date': effect.date}
    if isinstance(effect, UpdateAllPrices):
        return {'type': 'update_all_prices', 'prices': {k: str(v) for k, v in effect.prices.items()}}
    raise TypeError(f"Unknown calculator effect: {effect!r}")
