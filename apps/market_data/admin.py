# apps/market_data/admin.py

from django.contrib import admin

from .models import DigitalCurrency, OhlcRecord


@admin.register(DigitalCurrency)
class DigitalCurrencyAdmin(admin.ModelAdmin):
    list_display = ('symbol', 'name', 'price_in_toman', 'market_cap_in_toman', 'change_percentage_24h', 'last_updated', 'is_active')
    list_filter = ('is_active',)
    search_fields = ('symbol', 'name')
    ordering = ('-market_cap_in_toman',)
    readonly_fields = ('id', 'created_at', 'updated_at')


@admin.register(OhlcRecord)
class OhlcRecordAdmin(admin.ModelAdmin):
    list_display = ('item_code', 'timeframe', 'timestamp', 'open', 'high', 'low', 'close', 'update_count')
    list_filter = ('timeframe',)
    search_fields = ('item_code',)
    date_hierarchy = 'timestamp'
    ordering = ('-timestamp',)
