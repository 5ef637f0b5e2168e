# apps/market_data/services.py

import logging
import re
from datetime import date, datetime, time, timedelta

from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.catalog.models import ItemCategory, ManagedItem
from apps.catalog.services import ManagedItemService
from apps.core.decimal_utils import to_decimal128_equivalent
from apps.core.exceptions import StorageUniquenessViolation

from .exceptions import DigitalCurrencyNotFound, InvalidItemCode, OhlcDataNotFound
from .helpers import aggregate_candles, daily_change_percent, market_day_bounds, market_timezone
from .models import DigitalCurrency, OhlcRecord

logger = logging.getLogger(__name__)

ITEM_CODE_PATTERN = re.compile(r'^[a-zA-Z0-9_-]{1,50}$')

# فیلدهایی که همراه با قیمت از سمت ingestion قابل به‌روزرسانی هستند
PRICE_EXTRA_FIELDS = (
    'name',
    'market_cap_in_toman',
    'volume_in_toman_24h',
    'change_percentage_24h',
    'change_amount_24h',
    'change_percentage_7d',
    'circulating_supply',
    'total_supply',
    'max_supply',
    'is_active',
)


class DigitalCurrencyService:
    """
    Read and ingestion-side write operations on tracked digital currencies.
    """

    @staticmethod
    def create(symbol: str, name: str, price_in_toman, **fields) -> DigitalCurrency:
        symbol = symbol.upper()
        if DigitalCurrency.objects.filter(symbol=symbol).exists():
            raise StorageUniquenessViolation(f"Digital currency '{symbol}' already exists.")
        currency = DigitalCurrency(
            symbol=symbol,
            name=name,
            price_in_toman=to_decimal128_equivalent(price_in_toman),
            last_updated=fields.pop('last_updated', None) or timezone.now(),
            **fields,
        )
        try:
            with transaction.atomic():
                currency.save()
        except IntegrityError:
            raise StorageUniquenessViolation(f"Digital currency '{symbol}' already exists.")
        logger.info(f"Digital currency {symbol} created at {currency.price_in_toman} Toman.")
        return currency

    @staticmethod
    def get_by_symbol(symbol: str) -> DigitalCurrency:
        try:
            return DigitalCurrency.objects.get(symbol=symbol.upper())
        except DigitalCurrency.DoesNotExist:
            raise DigitalCurrencyNotFound(f"Digital currency '{symbol}' not found.")

    @staticmethod
    def get_top_by_market_cap(limit: int = 10):
        return DigitalCurrency.objects.top_by_market_cap(limit)

    @staticmethod
    def update_price(symbol: str, price, now=None, **extra) -> DigitalCurrency:
        """
        Ingestion entry point: set the price (and optional metrics) and stamp last_updated.
        Unknown keys in ``extra`` are ignored.
        """
        currency = DigitalCurrencyService.get_by_symbol(symbol)
        currency.price_in_toman = to_decimal128_equivalent(price)
        for field in PRICE_EXTRA_FIELDS:
            if field in extra and extra[field] is not None:
                value = extra[field]
                if field not in ('name', 'is_active'):
                    value = to_decimal128_equivalent(value)
                setattr(currency, field, value)
        currency.last_updated = now or timezone.now()
        currency.save()
        logger.info(f"Price of {currency.symbol} updated to {currency.price_in_toman} Toman.")
        return currency


class OhlcService:
    """
    Today's OHLC summary per item, computed in the market timezone.
    """

    @staticmethod
    def validate_item_code(item_code: str) -> str:
        if not item_code or not ITEM_CODE_PATTERN.match(item_code):
            raise InvalidItemCode()
        return item_code

    @staticmethod
    def get_today_ohlc(item_code: str, now=None) -> dict:
        """
        Uses the day's 1d candle when present, otherwise aggregates the 1m candles.
        Raises OhlcDataNotFound when neither exists.
        """
        OhlcService.validate_item_code(item_code)
        start, end, market_date = market_day_bounds(now)
        records = OhlcRecord.objects.for_item(item_code)

        minute_candles = list(records.for_timeframe('1m').between(start, end))
        daily = records.for_timeframe('1d').filter(timestamp__gte=start, timestamp__lt=end).order_by('-timestamp').first()

        if daily is not None:
            summary = {
                'open': daily.open,
                'high': daily.high,
                'low': daily.low,
                'close': daily.close,
                'update_count': daily.update_count,
                'last_update': daily.updated_at,
            }
        else:
            summary = aggregate_candles(minute_candles)
            if summary is None:
                raise OhlcDataNotFound(f"No OHLC data for '{item_code}' on {market_date.isoformat()}.")
            logger.debug(f"Aggregated {len(minute_candles)} 1m candles for {item_code.upper()}.")

        return {
            'item_code': item_code.lower(),
            'date': market_date.isoformat(),
            'open': summary['open'],
            'high': summary['high'],
            'low': summary['low'],
            'close': summary['close'],
            'change': daily_change_percent(summary['open'], summary['close']),
            'data_points': [
                {
                    'timestamp': candle.timestamp.isoformat(),
                    'open': candle.open,
                    'high': candle.high,
                    'low': candle.low,
                    'close': candle.close,
                }
                for candle in minute_candles
            ],
            'update_count': summary['update_count'],
            'last_update': summary['last_update'].isoformat() if summary['last_update'] else None,
        }

    @staticmethod
    def get_all_today_ohlc(now=None) -> list:
        """
        Today's summary for every item code that has candles in the current market day.
        """
        start, end, _ = market_day_bounds(now)
        codes = (
            OhlcRecord.objects.filter(timestamp__gte=start, timestamp__lt=end)
            .order_by('item_code')
            .values_list('item_code', flat=True)
            .distinct()
        )
        return [OhlcService.get_today_ohlc(code, now=now) for code in codes]


class MarketSnapshotService:
    """
    Builds the price snapshot consumed by the calculator: three sources
    (currencies, gold, crypto), each a mapping of lowercase code to an entry
    with at least a ``value``.
    """

    @staticmethod
    def _day_end(target_date):
        tz = market_timezone()
        return datetime.combine(target_date, time.min, tzinfo=tz) + timedelta(days=1)

    @staticmethod
    def build_snapshot(target_date=None, now=None) -> dict:
        now = now or timezone.now()
        _, _, today = market_day_bounds(now)
        if isinstance(target_date, str):
            target_date = date.fromisoformat(target_date)
        target_date = target_date or today
        day_end = MarketSnapshotService._day_end(target_date)
        is_today = target_date == today

        sources = {'currencies': {}, 'gold': {}, 'crypto': {}}
        source_by_category = {
            ItemCategory.CURRENCY: 'currencies',
            ItemCategory.GOLD: 'gold',
            ItemCategory.CRYPTO: 'crypto',
        }

        for item in ManagedItem.objects.active():
            candle = (
                OhlcRecord.objects.for_item(item.ohlc_code)
                .filter(timestamp__lt=day_end)
                .order_by('-timestamp')
                .first()
            )
            if candle is None:
                continue
            sources[source_by_category[item.category]][item.code] = {
                'value': candle.close,
                'change': daily_change_percent(candle.open, candle.close),
                'timestamp': candle.timestamp.isoformat(),
            }

        if is_today:
            # override ادمین و قیمت لحظه‌ای رمزارزها فقط برای امروز معتبر است
            for name in sources:
                sources[name] = ManagedItemService.apply_overrides(sources[name], now=now)
            for currency in DigitalCurrency.objects.active():
                sources['crypto'].setdefault(currency.symbol.lower(), {
                    'value': currency.price_in_toman,
                    'change': currency.change_percentage_24h,
                    'timestamp': currency.last_updated.isoformat() if currency.last_updated else None,
                })

        logger.debug(
            f"Snapshot for {target_date}: {len(sources['currencies'])} currencies, "
            f"{len(sources['gold'])} gold, {len(sources['crypto'])} crypto."
        )
        return {'date': target_date.isoformat(), **sources}
