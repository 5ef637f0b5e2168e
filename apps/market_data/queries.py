# apps/market_data/queries.py

"""
Read-through wrapper around today's OHLC summary of one item.

``OhlcDataQuery.read`` never raises on fetch problems: failures are reported
through ``is_error``/``error`` on the returned result, alongside whatever
data was last known for that item.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable, Optional

from django.conf import settings
from django.core.cache import cache as default_cache
from rest_framework.exceptions import APIException

from apps.core.exceptions import FetchFailure

from .services import OhlcService

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = 'ohlc:today'
# داده قدیمی تا یک روز به عنوان «آخرین مقدار معلوم» نگه داشته می‌شود
LAST_KNOWN_TTL_SECONDS = 24 * 60 * 60


@dataclass
class OhlcQueryResult:
    ohlc: Optional[dict]
    daily_change_percent: Optional[Decimal]
    data_points: list
    has_data: bool
    is_loading: bool
    is_error: bool
    error: Optional[Exception]
    is_stale: bool
    refetch: Callable[[], 'OhlcQueryResult'] = field(repr=False)


class _InFlight:
    """A fetch in progress; concurrent readers of the same key wait on it."""

    def __init__(self):
        self.done = threading.Event()
        self.data = None
        self.error = None


# مشترک بین همه نمونه‌ها (هر درخواست HTTP نمونه جدید می‌سازد)
_in_flight = {}
_in_flight_lock = threading.Lock()


class OhlcDataQuery:
    """
    Cached, de-duplicated reads of today's OHLC for an item code.

    A cached value younger than ``freshness_seconds`` is served without
    fetching. Concurrent reads of the same code share a single fetch, also
    across instances. Last-known data is kept per item code.
    """

    def __init__(self, fetcher: Optional[Callable[[str], Any]] = None, cache=None,
                 freshness_seconds: Optional[int] = None, clock: Callable[[], float] = time.time):
        self.fetcher = fetcher or OhlcService.get_today_ohlc
        self.cache = cache if cache is not None else default_cache
        if freshness_seconds is None:
            freshness_seconds = getattr(settings, 'OHLC_QUERY_FRESHNESS_SECONDS', 60)
        self.freshness_seconds = freshness_seconds
        self.clock = clock
        self._last_known = {}

    @staticmethod
    def cache_key(item_code: str) -> str:
        return f"{CACHE_KEY_PREFIX}:{item_code.lower()}"

    def read(self, item_code: Optional[str], enabled: bool = True) -> OhlcQueryResult:
        code = (item_code or '').strip()
        if not enabled or not code:
            # بدون درخواست و بدون دسترسی به کش
            last_known = self._last_known.get(self.cache_key(code)) if code else None
            return self._build_result(last_known, code, is_stale=True)
        return self._read(code, force=False)

    def refetch(self, item_code: str) -> OhlcQueryResult:
        """
        Fetch now, ignoring the freshness window.
        """
        return self._read(item_code.strip(), force=True)

    def _read(self, code: str, force: bool) -> OhlcQueryResult:
        key = self.cache_key(code)
        entry = self.cache.get(key)

        if entry is not None and not force and self._is_fresh(entry):
            self._last_known[key] = entry
            return self._build_result(entry, code)

        try:
            data = self._fetch(code, key)
        except Exception as exc:
            error = exc if isinstance(exc, APIException) else FetchFailure(str(exc))
            logger.warning(f"OHLC fetch for '{code}' failed: {exc}")
            return self._build_result(entry, code, is_stale=True, error=error)

        entry = {'data': data, 'fetched_at': self.clock()}
        self.cache.set(key, entry, LAST_KNOWN_TTL_SECONDS)
        self._last_known[key] = entry
        return self._build_result(entry, code)

    def _is_fresh(self, entry) -> bool:
        return self.clock() - entry['fetched_at'] < self.freshness_seconds

    def _fetch(self, code: str, key: str):
        with _in_flight_lock:
            pending = _in_flight.get(key)
            owner = pending is None
            if owner:
                pending = _in_flight[key] = _InFlight()

        if not owner:
            pending.done.wait()
            if pending.error is not None:
                raise pending.error
            return pending.data

        try:
            pending.data = self.fetcher(code)
            return pending.data
        except Exception as exc:
            pending.error = exc
            raise
        finally:
            with _in_flight_lock:
                _in_flight.pop(key, None)
            pending.done.set()

    def _build_result(self, entry, code: str, is_stale: bool = False, error: Optional[Exception] = None) -> OhlcQueryResult:
        data = entry['data'] if entry else None
        return OhlcQueryResult(
            ohlc=data,
            daily_change_percent=data.get('change') if data else None,
            data_points=list(data.get('data_points', [])) if data else [],
            has_data=data is not None,
            is_loading=False,
            is_error=error is not None,
            error=error,
            is_stale=is_stale,
            refetch=lambda: self._read(code, force=True) if code else self._build_result(entry, code, is_stale=True),
        )
