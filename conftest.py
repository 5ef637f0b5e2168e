# conftest.py

import pytest
from django.core.cache import cache


@pytest.fixture(autouse=True)
def clear_cache():
    """
    هر تست با کش خالی شروع می‌شود (کوئری OHLC از کش جنگو استفاده می‌کند).
    """
    cache.clear()
    yield
    cache.clear()
