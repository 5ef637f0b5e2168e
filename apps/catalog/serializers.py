# apps/catalog/serializers.py

from django.core.validators import RegexValidator
from rest_framework import serializers

from apps.core.serializers import (
    StrictBooleanField,
    StrictCharField,
    StrictDecimalField,
    StrictIntegerField,
    validate_input,
)

from .models import (
    DEFAULT_OVERRIDE_DURATION,
    OVERRIDE_DURATION_OPTIONS,
    ItemCategory,
    ItemSource,
    ItemVariant,
    ManagedItem,
)

DEFAULT_DISPLAY_ORDER = 999

code_validator = RegexValidator(
    r'^[a-z0-9_]+$',
    message='Code may contain only lowercase letters, digits and underscores.',
    code='pattern',
)

# null روی این فیلدها مقدار را پاک می‌کند؛ روی بقیه یعنی «ارسال نشده»
CLEARABLE_FIELDS = ('parent_code', 'variant', 'override_price')


class ManagedItemSerializer(serializers.ModelSerializer):
    """
    Read representation of a managed item. Writes go through
    ManagedItemService, which validates the raw payload with the input
    serializers below.
    """
    override_by = serializers.SerializerMethodField()
    override_active = serializers.SerializerMethodField()

    class Meta:
        model = ManagedItem
        fields = [
            'id', 'code', 'ohlc_code', 'parent_code',
            'name', 'name_ar', 'name_fa',
            'variant', 'category', 'icon', 'display_order', 'is_active',
            'source', 'has_api_data', 'last_api_update',
            'is_overridden', 'override_active', 'override_price', 'override_change',
            'override_by', 'override_at', 'override_expires_at', 'override_reason',
            'metadata', 'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_override_by(self, obj):
        return obj.override_by.get_username() if obj.override_by else None

    def get_override_active(self, obj):
        return obj.is_override_active()


class ManagedItemInputSerializer(serializers.Serializer):
    """
    Optional fields shared by the create and update payloads.
    Unknown keys are ignored; every field is checked before errors are reported.
    """
    ohlc_code = StrictCharField(max_length=50, required=False, allow_null=True)
    parent_code = StrictCharField(max_length=50, required=False, allow_null=True)
    name_ar = StrictCharField(min_length=2, max_length=100, required=False, allow_null=True)
    name_fa = StrictCharField(min_length=2, max_length=100, required=False, allow_null=True)
    variant = serializers.ChoiceField(choices=ItemVariant.choices, required=False, allow_null=True)
    icon = StrictCharField(max_length=50, required=False, allow_null=True)
    display_order = StrictIntegerField(min_value=0, max_value=9999, required=False, allow_null=True)
    is_active = StrictBooleanField(required=False, allow_null=True)
    source = serializers.ChoiceField(choices=ItemSource.choices, required=False, allow_null=True)
    has_api_data = StrictBooleanField(required=False, allow_null=True)
    override_price = StrictDecimalField(min_value=0, required=False, allow_null=True)

    def validate_ohlc_code(self, value):
        return value.upper() if value else value

    def validate_parent_code(self, value):
        return value.lower() if value else value

    def validate(self, attrs):
        return {
            field: value for field, value in attrs.items()
            if value is not None or field in CLEARABLE_FIELDS
        }


class CreateManagedItemSerializer(ManagedItemInputSerializer):
    code = StrictCharField(min_length=2, max_length=50, validators=[code_validator])
    name = StrictCharField(min_length=2, max_length=100)
    category = serializers.ChoiceField(choices=ItemCategory.choices)

    def validate(self, attrs):
        """
        Fill in the creation defaults: ``ohlc_code`` is the upper-cased code,
        ``display_order`` 999, ``is_active`` true, ``source`` api, and
        ``has_api_data`` is true unless the item is manual.
        """
        attrs = super().validate(attrs)
        code = attrs['code']
        source = attrs.get('source', ItemSource.API.value)
        return {
            'code': code,
            'ohlc_code': attrs.get('ohlc_code') or code.upper(),
            'parent_code': attrs.get('parent_code'),
            'name': attrs['name'],
            'name_ar': attrs.get('name_ar', ''),
            'name_fa': attrs.get('name_fa', ''),
            'variant': attrs.get('variant'),
            'category': attrs['category'],
            'icon': attrs.get('icon', ''),
            'display_order': attrs.get('display_order', DEFAULT_DISPLAY_ORDER),
            'is_active': attrs.get('is_active', True),
            'source': source,
            'has_api_data': attrs.get('has_api_data', source != ItemSource.MANUAL.value),
            'override_price': attrs.get('override_price'),
        }


class UpdateManagedItemSerializer(ManagedItemInputSerializer):
    code = serializers.JSONField(required=False, allow_null=True)
    name = StrictCharField(min_length=2, max_length=100, required=False, allow_null=True)
    category = serializers.ChoiceField(choices=ItemCategory.choices, required=False, allow_null=True)
    metadata = serializers.DictField(required=False, allow_null=True)

    def validate_code(self, value):
        raise serializers.ValidationError('Code cannot be changed after creation.', code='immutable')


class PriceOverrideSerializer(serializers.Serializer):
    price = StrictDecimalField(min_value=0)
    change = StrictDecimalField(required=False, allow_null=True)
    duration_minutes = serializers.ChoiceField(choices=OVERRIDE_DURATION_OPTIONS, default=DEFAULT_OVERRIDE_DURATION)
    reason = StrictCharField(max_length=200, allow_blank=True, default='')


def validate_create_managed_item(data) -> dict:
    """Normalized creation record; raises FieldValidationError with every violation found."""
    return validate_input(CreateManagedItemSerializer, data)


def validate_update_managed_item(data) -> dict:
    """
    Only the keys present in ``data`` are returned; ``code`` is rejected.
    An explicit null clears parent_code, variant and override_price and is
    ignored for every other field.
    """
    return validate_input(UpdateManagedItemSerializer, data)


def validate_price_override(data) -> dict:
    return validate_input(PriceOverrideSerializer, data)
