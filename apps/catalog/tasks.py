# apps/catalog/tasks.py

import logging

from celery import shared_task

from .services import ManagedItemService

logger = logging.getLogger(__name__)


@shared_task
def expire_price_overrides_task():
    """
    Periodic task (celery beat): clears admin price overrides whose duration has elapsed.
    """
    count = ManagedItemService.expire_overrides()
    if count:
        logger.info(f"expire_price_overrides_task cleared {count} overrides.")
    return count
