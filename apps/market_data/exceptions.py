# apps/market_data/exceptions.py

from django.utils.translation import gettext_lazy as _
from rest_framework import status

from apps.core.exceptions import CoreSystemException, ResourceNotFound


class DigitalCurrencyNotFound(ResourceNotFound):
    default_detail = _('Digital currency not found.')
    default_code = 'digital_currency_not_found'


class OhlcDataNotFound(ResourceNotFound):
    """
    Raised when an item has no OHLC data for the current market day.
    """
    default_detail = _('No OHLC data found for today.')
    default_code = 'ohlc_not_found'


class InvalidItemCode(CoreSystemException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = _('Item code must be 1-50 letters, digits, underscores or hyphens.')
    default_code = 'invalid_item_code'
