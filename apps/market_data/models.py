# apps/market_data/models.py

from decimal import Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.core.models import BaseModel

from .managers import DigitalCurrencyQuerySet, OhlcRecordQuerySet


class DigitalCurrency(BaseModel):
    """
    A tracked digital currency priced in Toman.
    Written by the ingestion pipeline on every price refresh; read by the API.
    """
    symbol = models.CharField(max_length=20, unique=True, verbose_name=_("Symbol"))  # e.g. BTC
    name = models.CharField(max_length=100, verbose_name=_("Name"))
    price_in_toman = models.DecimalField(max_digits=34, decimal_places=8, verbose_name=_("Price (Toman)"))
    market_cap_in_toman = models.DecimalField(max_digits=40, decimal_places=2, null=True, blank=True, verbose_name=_("Market Cap (Toman)"))
    volume_in_toman_24h = models.DecimalField(max_digits=40, decimal_places=2, null=True, blank=True, verbose_name=_("24h Volume (Toman)"))
    change_percentage_24h = models.DecimalField(max_digits=12, decimal_places=4, default=Decimal('0'), verbose_name=_("24h Change (%)"))
    change_amount_24h = models.DecimalField(max_digits=34, decimal_places=8, default=Decimal('0'), verbose_name=_("24h Change (Toman)"))
    change_percentage_7d = models.DecimalField(max_digits=12, decimal_places=4, default=Decimal('0'), verbose_name=_("7d Change (%)"))
    circulating_supply = models.DecimalField(max_digits=40, decimal_places=8, null=True, blank=True, verbose_name=_("Circulating Supply"))
    total_supply = models.DecimalField(max_digits=40, decimal_places=8, null=True, blank=True, verbose_name=_("Total Supply"))
    max_supply = models.DecimalField(max_digits=40, decimal_places=8, null=True, blank=True, verbose_name=_("Max Supply"))
    last_updated = models.DateTimeField(null=True, blank=True, verbose_name=_("Last Updated"))
    is_active = models.BooleanField(default=True, verbose_name=_("Is Active"))

    objects = DigitalCurrencyQuerySet.as_manager()

    class Meta:
        verbose_name = _("Digital Currency")
        verbose_name_plural = _("Digital Currencies")
        ordering = ['symbol']
        indexes = [
            models.Index(fields=['is_active'], name='md_dc_is_active_idx'),
            models.Index(fields=['-last_updated'], name='md_dc_last_updated_idx'),
            models.Index(fields=['-market_cap_in_toman'], name='md_dc_market_cap_idx'),
        ]

    def __str__(self):
        return f"{self.symbol} - {self.name}"

    def save(self, *args, **kwargs):
        self.symbol = self.symbol.upper()
        super().save(*args, **kwargs)


class OhlcRecord(BaseModel):
    """
    One OHLC candle of a managed item for a timeframe bucket.
    ``item_code`` is the item's upper-case ohlc_code.
    """
    TIMEFRAME_CHOICES = [
        ('1m', '1 Minute'),
        ('5m', '5 Minutes'),
        ('15m', '15 Minutes'),
        ('30m', '30 Minutes'),
        ('1h', '1 Hour'),
        ('4h', '4 Hours'),
        ('1d', '1 Day'),
    ]

    item_code = models.CharField(max_length=50, verbose_name=_("Item Code"))
    timeframe = models.CharField(max_length=3, choices=TIMEFRAME_CHOICES, verbose_name=_("Timeframe"))
    timestamp = models.DateTimeField(verbose_name=_("Bucket Start"))
    open = models.DecimalField(max_digits=34, decimal_places=8, verbose_name=_("Open"))
    high = models.DecimalField(max_digits=34, decimal_places=8, verbose_name=_("High"))
    low = models.DecimalField(max_digits=34, decimal_places=8, verbose_name=_("Low"))
    close = models.DecimalField(max_digits=34, decimal_places=8, verbose_name=_("Close"))
    update_count = models.PositiveIntegerField(default=1, verbose_name=_("Update Count"))

    objects = OhlcRecordQuerySet.as_manager()

    class Meta:
        verbose_name = _("OHLC Record")
        verbose_name_plural = _("OHLC Records")
        ordering = ['-timestamp']
        unique_together = ('item_code', 'timeframe', 'timestamp')
        indexes = [
            models.Index(fields=['item_code', 'timeframe', '-timestamp'], name='md_ohlc_item_tf_ts_idx'),
        ]

    def __str__(self):
        return f"{self.item_code} {self.timeframe} @ {self.timestamp}"

    def save(self, *args, **kwargs):
        self.item_code = self.item_code.upper()
        super().save(*args, **kwargs)
