# apps/market_data/helpers.py

import logging
from datetime import datetime, time, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional
from zoneinfo import ZoneInfo

from django.conf import settings
from django.utils import timezone

from .managers import FRESH_THRESHOLD, STALE_THRESHOLD

logger = logging.getLogger(__name__)


class Freshness:
    FRESH = 'fresh'
    RECENT = 'recent'
    STALE = 'stale'
    UNKNOWN = 'unknown'


def classify_freshness(last_updated: Optional[datetime], now: Optional[datetime] = None) -> str:
    """
    fresh: updated less than an hour ago; stale: more than 24 hours ago;
    recent: in between. A record that was never updated is 'unknown'.
    """
    if last_updated is None:
        return Freshness.UNKNOWN
    age = (now or timezone.now()) - last_updated
    if age < FRESH_THRESHOLD:
        return Freshness.FRESH
    if age > STALE_THRESHOLD:
        return Freshness.STALE
    return Freshness.RECENT


def market_timezone() -> ZoneInfo:
    return ZoneInfo(getattr(settings, 'MARKET_TIMEZONE', 'Asia/Tehran'))


def market_day_bounds(now: Optional[datetime] = None):
    """
    Start and end (exclusive) of the current trading day in the market timezone,
    plus the market date itself.
    """
    tz = market_timezone()
    local_now = (now or timezone.now()).astimezone(tz)
    start = datetime.combine(local_now.date(), time.min, tzinfo=tz)
    return start, start + timedelta(days=1), local_now.date()


def daily_change_percent(open_price: Decimal, close_price: Decimal) -> Decimal:
    """
    (close - open) / open * 100 rounded to two places; 0 when open is 0.
    """
    if not open_price:
        return Decimal('0')
    change = (Decimal(close_price) - Decimal(open_price)) / Decimal(open_price) * 100
    return change.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)


def aggregate_candles(candles) -> Optional[dict]:
    """
    Merge time-ordered candles into one: first open, max high, min low, last close.
    """
    candles = list(candles)
    if not candles:
        return None
    return {
        'open': candles[0].open,
        'high': max(c.high for c in candles),
        'low': min(c.low for c in candles),
        'close': candles[-1].close,
        'update_count': sum(c.update_count for c in candles),
        'last_update': max(c.updated_at for c in candles),
    }
