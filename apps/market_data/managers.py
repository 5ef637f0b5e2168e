# apps/market_data/managers.py

from datetime import timedelta

from django.db import models
from django.utils import timezone

# آستانه‌های تازگی داده
FRESH_THRESHOLD = timedelta(hours=1)
STALE_THRESHOLD = timedelta(hours=24)


class DigitalCurrencyQuerySet(models.QuerySet):
    """
    Custom QuerySet for DigitalCurrency.
    The filters here are the queries served by the is_active, last_updated
    and market_cap_in_toman indexes.
    """

    def active(self):
        return self.filter(is_active=True)

    def top_by_market_cap(self, limit: int = 10):
        """
        Active currencies with a known market cap, largest first.
        """
        return (
            self.active()
            .filter(market_cap_in_toman__isnull=False)
            .order_by('-market_cap_in_toman')[:limit]
        )

    def fresh(self, now=None):
        """
        Updated less than an hour ago.
        """
        now = now or timezone.now()
        return self.filter(last_updated__gt=now - FRESH_THRESHOLD)

    def stale(self, now=None):
        """
        Updated more than 24 hours ago. Records that were never updated are not included.
        """
        now = now or timezone.now()
        return self.filter(last_updated__lt=now - STALE_THRESHOLD)

    def recently_updated(self):
        return self.filter(last_updated__isnull=False).order_by('-last_updated')


class OhlcRecordQuerySet(models.QuerySet):

    def for_item(self, item_code: str):
        return self.filter(item_code=item_code.upper())

    def for_timeframe(self, timeframe: str):
        return self.filter(timeframe=timeframe)

    def between(self, start, end):
        """
        Records with start <= timestamp < end, oldest first.
        """
        return self.filter(timestamp__gte=start, timestamp__lt=end).order_by('timestamp')
