# apps/catalog/services.py

import logging
from datetime import timedelta

from django.db import IntegrityError, transaction
from django.db.models import Q
from django.utils import timezone

from apps.core.exceptions import StorageUniquenessViolation
from apps.core.logging import log_admin_action

from .exceptions import ItemGroupNotFound, ManagedItemNotFound
from .models import ItemSource, ManagedItem
from .serializers import (
    validate_create_managed_item,
    validate_price_override,
    validate_update_managed_item,
)

logger = logging.getLogger(__name__)


def item_search_q(term: str) -> Q:
    """Case-insensitive match on code and the three localized names."""
    return (
        Q(name__icontains=term)
        | Q(code__icontains=term)
        | Q(name_ar__icontains=term)
        | Q(name_fa__icontains=term)
    )


_CLEARED_OVERRIDE = {
    'is_overridden': False,
    'override_price': None,
    'override_change': None,
    'override_by': None,
    'override_at': None,
    'override_expires_at': None,
    'override_reason': '',
}


class ManagedItemService:
    """
    Admin operations on managed items: CRUD, grouping and price overrides.
    Every write is recorded in the audit log.
    """

    @staticmethod
    def create_item(data, user=None) -> ManagedItem:
        record = validate_create_managed_item(data)
        code = record['code']

        if ManagedItem.objects.filter(code=code).exists():
            raise StorageUniquenessViolation(f"Item with code '{code}' already exists.")

        item = ManagedItem(**record)
        if record['source'] == ItemSource.MANUAL and record['override_price'] is not None:
            # قیمت اولیه آیتم دستی به عنوان override ثبت می‌شود
            item.is_overridden = True
            item.override_at = timezone.now()
            item.override_by = user if getattr(user, 'is_authenticated', False) else None

        try:
            with transaction.atomic():
                item.save()
        except IntegrityError:
            # رقابت دو درخواست هم‌زمان روی یک کد
            raise StorageUniquenessViolation(f"Item with code '{code}' already exists.")

        logger.info(f"Managed item '{code}' created (category={item.category}, source={item.source}).")
        log_admin_action(user, 'CREATE_ITEM', 'ManagedItem', code, details={'category': item.category})
        return item

    @staticmethod
    def get_item(code: str) -> ManagedItem:
        try:
            return ManagedItem.objects.get(code=code.lower())
        except ManagedItem.DoesNotExist:
            raise ManagedItemNotFound(f"Item with code '{code}' not found.")

    @staticmethod
    def list_items(category=None, source=None, is_active=None, is_overridden=None,
                   parent_code=None, search=None, queryset=None):
        """
        Filtered queryset ordered by category, display order and code.
        Filters left empty are not applied. ``queryset`` narrows the starting set
        (the list endpoint passes its own through ManagedItemFilter).
        """
        queryset = ManagedItem.objects.all() if queryset is None else queryset
        if category:
            queryset = queryset.filter(category=category)
        if source:
            queryset = queryset.filter(source=source)
        if is_active is not None:
            queryset = queryset.filter(is_active=is_active)
        if is_overridden is not None:
            queryset = queryset.filter(is_overridden=is_overridden)
        if parent_code:
            queryset = queryset.filter(parent_code=parent_code.lower())
        if search:
            queryset = queryset.filter(item_search_q(search))
        return queryset.order_by('category', 'display_order', 'code')

    @staticmethod
    def get_items_by_group(parent_code: str):
        items = ManagedItem.objects.in_group(parent_code).order_by('display_order', 'code')
        if not items.exists():
            raise ItemGroupNotFound(f"No items found for group '{parent_code}'.")
        return items

    @staticmethod
    def update_item(code: str, data, user=None) -> ManagedItem:
        changes = validate_update_managed_item(data)
        item = ManagedItemService.get_item(code)

        for field, value in changes.items():
            setattr(item, field, value)

        if 'override_price' in changes and item.source == ItemSource.MANUAL:
            if changes['override_price'] is None:
                for field, value in _CLEARED_OVERRIDE.items():
                    setattr(item, field, value)
            else:
                item.is_overridden = True
                item.override_at = timezone.now()
                item.override_by = user if getattr(user, 'is_authenticated', False) else None

        item.save()
        logger.info(f"Managed item '{item.code}' updated: {sorted(changes)}.")
        log_admin_action(user, 'UPDATE_ITEM', 'ManagedItem', item.code, details={'fields': sorted(changes)})
        return item

    @staticmethod
    def delete_item(code: str, user=None) -> None:
        item = ManagedItemService.get_item(code)
        item.delete()
        logger.info(f"Managed item '{item.code}' deleted.")
        log_admin_action(user, 'DELETE_ITEM', 'ManagedItem', item.code)

    @staticmethod
    def override_price(code: str, data, user=None, now=None) -> ManagedItem:
        """
        Pin an item's price for a limited time.
        ``duration_minutes`` must be one of OVERRIDE_DURATION_OPTIONS (default 60).
        """
        override = validate_price_override(data)
        item = ManagedItemService.get_item(code)
        now = now or timezone.now()

        item.is_overridden = True
        item.override_price = override['price']
        item.override_change = override.get('change')
        item.override_by = user if getattr(user, 'is_authenticated', False) else None
        item.override_at = now
        item.override_expires_at = now + timedelta(minutes=override['duration_minutes'])
        item.override_reason = override['reason']
        item.save()

        logger.info(
            f"Price of '{item.code}' overridden to {item.override_price} "
            f"for {override['duration_minutes']} minutes."
        )
        log_admin_action(
            user, 'OVERRIDE_PRICE', 'ManagedItem', item.code,
            details={
                'price': str(item.override_price),
                'duration_minutes': override['duration_minutes'],
                'reason': item.override_reason,
            },
        )
        return item

    @staticmethod
    def clear_override(code: str, user=None) -> ManagedItem:
        item = ManagedItemService.get_item(code)
        for field, value in _CLEARED_OVERRIDE.items():
            setattr(item, field, value)
        item.save()
        logger.info(f"Price override of '{item.code}' cleared.")
        log_admin_action(user, 'CLEAR_OVERRIDE', 'ManagedItem', item.code)
        return item

    @staticmethod
    def expire_overrides(now=None) -> int:
        """
        Clear every override whose expiry time has passed. Returns the number cleared.
        """
        expired = ManagedItem.objects.with_expired_override(now)
        codes = list(expired.values_list('code', flat=True))
        if not codes:
            return 0
        count = expired.update(**_CLEARED_OVERRIDE, updated_at=timezone.now())
        logger.info(f"Expired {count} price overrides: {', '.join(codes)}.")
        return count

    @staticmethod
    def apply_overrides(prices: dict, now=None) -> dict:
        """
        Return a copy of ``prices`` (lowercase code -> {'value', 'change', ...})
        with active admin overrides replacing value and change.
        """
        result = {code: dict(entry) for code, entry in prices.items()}
        now = now or timezone.now()
        for item in ManagedItem.objects.overridden().filter(code__in=list(result)):
            if not item.is_override_active(now) or item.override_price is None:
                continue
            entry = result[item.code]
            entry['value'] = item.override_price
            if item.override_change is not None:
                entry['change'] = item.override_change
            entry['is_overridden'] = True
        return result
