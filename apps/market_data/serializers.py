# apps/market_data/serializers.py

from rest_framework import serializers

from .helpers import classify_freshness
from .models import DigitalCurrency
from .services import DigitalCurrencyService


class DigitalCurrencySerializer(serializers.ModelSerializer):
    """
    Serializer for DigitalCurrency.
    ``freshness`` is derived from last_updated (fresh < 1h, stale > 24h).
    """
    freshness = serializers.SerializerMethodField()

    class Meta:
        model = DigitalCurrency
        fields = [
            'id', 'symbol', 'name', 'price_in_toman',
            'market_cap_in_toman', 'volume_in_toman_24h',
            'change_percentage_24h', 'change_amount_24h', 'change_percentage_7d',
            'circulating_supply', 'total_supply', 'max_supply',
            'last_updated', 'is_active', 'freshness',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'last_updated', 'freshness', 'created_at', 'updated_at']
        extra_kwargs = {
            # یکتایی symbol در سرویس بررسی می‌شود (پاسخ 409 به جای 400)
            'symbol': {'validators': []},
        }

    def get_freshness(self, obj):
        return classify_freshness(obj.last_updated)

    def validate_symbol(self, value):
        return value.upper()

    def create(self, validated_data):
        return DigitalCurrencyService.create(**validated_data)

    def update(self, instance, validated_data):
        validated_data.pop('symbol', None)  # symbol پس از ایجاد تغییر نمی‌کند
        return super().update(instance, validated_data)


class PriceUpdateSerializer(serializers.Serializer):
    price = serializers.DecimalField(max_digits=34, decimal_places=8, min_value=0)
    market_cap_in_toman = serializers.DecimalField(max_digits=40, decimal_places=2, required=False)
    volume_in_toman_24h = serializers.DecimalField(max_digits=40, decimal_places=2, required=False)
    change_percentage_24h = serializers.DecimalField(max_digits=12, decimal_places=4, required=False)
    change_amount_24h = serializers.DecimalField(max_digits=34, decimal_places=8, required=False)
    change_percentage_7d = serializers.DecimalField(max_digits=12, decimal_places=4, required=False)


class OhlcPointSerializer(serializers.Serializer):
    timestamp = serializers.CharField()
    open = serializers.DecimalField(max_digits=34, decimal_places=8, coerce_to_string=False)
    high = serializers.DecimalField(max_digits=34, decimal_places=8, coerce_to_string=False)
    low = serializers.DecimalField(max_digits=34, decimal_places=8, coerce_to_string=False)
    close = serializers.DecimalField(max_digits=34, decimal_places=8, coerce_to_string=False)


class TodayOhlcSerializer(serializers.Serializer):
    item_code = serializers.CharField()
    date = serializers.CharField()
    open = serializers.DecimalField(max_digits=34, decimal_places=8, coerce_to_string=False)
    high = serializers.DecimalField(max_digits=34, decimal_places=8, coerce_to_string=False)
    low = serializers.DecimalField(max_digits=34, decimal_places=8, coerce_to_string=False)
    close = serializers.DecimalField(max_digits=34, decimal_places=8, coerce_to_string=False)
    change = serializers.DecimalField(max_digits=12, decimal_places=2, coerce_to_string=False)
    data_points = OhlcPointSerializer(many=True)
    update_count = serializers.IntegerField()
    last_update = serializers.CharField(allow_null=True)
