# tests/test_catalog/test_services.py

from datetime import timedelta
from decimal import Decimal
from unittest.mock import patch

import pytest
from django.db import IntegrityError
from django.utils import timezone

from apps.catalog.exceptions import ItemGroupNotFound, ManagedItemNotFound
from apps.catalog.models import ManagedItem
from apps.catalog.services import ManagedItemService
from apps.core.exceptions import FieldValidationError, StorageUniquenessViolation
from apps.core.models import AuditLog

pytestmark = pytest.mark.django_db


class TestCreateItem:
    def test_creates_normalized_item(self, staff_user_factory):
        staff = staff_user_factory()
        item = ManagedItemService.create_item(
            {'code': 'usd', 'name': 'US Dollar', 'category': 'currency', 'parent_code': 'FX'},
            user=staff,
        )
        item.refresh_from_db()
        assert item.ohlc_code == 'USD'
        assert item.parent_code == 'fx'
        assert item.display_order == 999
        assert item.is_overridden is False
        assert AuditLog.objects.filter(action='CREATE_ITEM', target_id='usd').exists()

    def test_duplicate_code_is_conflict(self, managed_item_factory):
        managed_item_factory(code='eur')
        with pytest.raises(StorageUniquenessViolation):
            ManagedItemService.create_item({'code': 'eur', 'name': 'Euro', 'category': 'currency'})

    def test_integrity_error_is_conflict(self):
        with patch.object(ManagedItem, 'save', side_effect=IntegrityError('duplicate key')):
            with pytest.raises(StorageUniquenessViolation):
                ManagedItemService.create_item({'code': 'gbp', 'name': 'Pound', 'category': 'currency'})

    def test_invalid_payload_creates_nothing(self):
        with pytest.raises(FieldValidationError):
            ManagedItemService.create_item({'code': 'X', 'name': 'Bad', 'category': 'currency'})
        assert ManagedItem.objects.count() == 0

    def test_manual_item_with_price_is_overridden(self, staff_user_factory):
        staff = staff_user_factory()
        item = ManagedItemService.create_item(
            {'code': 'coin_emami', 'name': 'Emami Coin', 'category': 'gold',
             'source': 'manual', 'override_price': 650000000},
            user=staff,
        )
        assert item.is_overridden is True
        assert item.override_price == Decimal('650000000')
        assert item.override_by == staff
        assert item.override_at is not None
        assert item.has_api_data is False

    def test_api_item_with_price_is_not_overridden(self):
        item = ManagedItemService.create_item(
            {'code': 'aed', 'name': 'Dirham', 'category': 'currency', 'override_price': 10}
        )
        assert item.is_overridden is False


class TestQueries:
    def test_get_item_is_case_insensitive(self, managed_item_factory):
        managed_item_factory(code='usd')
        assert ManagedItemService.get_item('USD').code == 'usd'

    def test_get_missing_item(self):
        with pytest.raises(ManagedItemNotFound):
            ManagedItemService.get_item('nope')

    def test_list_items_filters_and_order(self, managed_item_factory):
        managed_item_factory(code='gold_18', category='gold', display_order=1)
        managed_item_factory(code='eur', category='currency', display_order=2)
        managed_item_factory(code='usd', category='currency', display_order=1)
        managed_item_factory(code='old', category='currency', display_order=0, is_active=False)

        codes = [i.code for i in ManagedItemService.list_items(category='currency', is_active=True)]
        assert codes == ['usd', 'eur']

        all_codes = [i.code for i in ManagedItemService.list_items()]
        assert all_codes == ['old', 'usd', 'eur', 'gold_18']

    def test_list_items_narrows_given_queryset(self, managed_item_factory):
        managed_item_factory(code='usd_buy', parent_code='usd')
        managed_item_factory(code='usd_sell', parent_code='usd', is_active=False)
        managed_item_factory(code='eur_sell', parent_code='eur')

        base = ManagedItem.objects.filter(is_active=True)
        assert [i.code for i in ManagedItemService.list_items(parent_code='USD', queryset=base)] == ['usd_buy']

    def test_list_items_search(self, managed_item_factory):
        managed_item_factory(code='usd', name='US Dollar', name_fa='دلار')
        managed_item_factory(code='eur', name='Euro', name_fa='یورو')
        assert [i.code for i in ManagedItemService.list_items(search='دلار')] == ['usd']
        assert [i.code for i in ManagedItemService.list_items(search='EUR')] == ['eur']

    def test_group(self, managed_item_factory):
        managed_item_factory(code='usd_buy', parent_code='usd', display_order=2)
        managed_item_factory(code='usd_sell', parent_code='usd', display_order=1)
        managed_item_factory(code='eur_sell', parent_code='eur')
        assert [i.code for i in ManagedItemService.get_items_by_group('USD')] == ['usd_sell', 'usd_buy']

    def test_empty_group(self):
        with pytest.raises(ItemGroupNotFound):
            ManagedItemService.get_items_by_group('nothing')


class TestUpdateAndDelete:
    def test_update_fields(self, managed_item_factory):
        managed_item_factory(code='usd')
        item = ManagedItemService.update_item('usd', {'name': 'Dollar', 'display_order': 5})
        assert item.name == 'Dollar'
        assert item.display_order == 5

    def test_update_rejects_code_change(self, managed_item_factory):
        managed_item_factory(code='usd')
        with pytest.raises(FieldValidationError):
            ManagedItemService.update_item('usd', {'code': 'dollar'})
        assert ManagedItem.objects.filter(code='usd').exists()

    def test_null_override_price_clears_manual_price(self, managed_item_factory):
        ManagedItemService.create_item(
            {'code': 'coin_emami', 'name': 'Emami Coin', 'category': 'gold',
             'source': 'manual', 'override_price': 52000000},
        )

        item = ManagedItemService.update_item('coin_emami', {'override_price': None})

        item.refresh_from_db()
        assert item.override_price is None
        assert item.is_overridden is False
        assert item.override_at is None

    def test_null_is_ignored_for_other_fields(self, managed_item_factory):
        managed_item_factory(code='usd', name='US Dollar')
        item = ManagedItemService.update_item('usd', {'name': None, 'icon': 'flag-us'})
        assert item.name == 'US Dollar'
        assert item.icon == 'flag-us'

    def test_delete(self, managed_item_factory):
        managed_item_factory(code='usd')
        ManagedItemService.delete_item('usd')
        assert not ManagedItem.objects.filter(code='usd').exists()
        assert AuditLog.objects.filter(action='DELETE_ITEM').exists()


class TestOverrides:
    def test_override_price(self, managed_item_factory, staff_user_factory):
        managed_item_factory(code='usd')
        staff = staff_user_factory()
        now = timezone.now()

        item = ManagedItemService.override_price(
            'usd', {'price': 600000, 'change': 1.5, 'duration_minutes': 15, 'reason': 'feed down'},
            user=staff, now=now,
        )
        assert item.is_overridden is True
        assert item.override_price == Decimal('600000')
        assert item.override_change == Decimal('1.5')
        assert item.override_expires_at == now + timedelta(minutes=15)
        assert item.is_override_active(now) is True
        assert item.is_override_active(now + timedelta(minutes=16)) is False

    def test_clear_override(self, managed_item_factory):
        managed_item_factory(code='usd')
        ManagedItemService.override_price('usd', {'price': 1})
        item = ManagedItemService.clear_override('usd')
        assert item.is_overridden is False
        assert item.override_price is None

    def test_expire_overrides(self, managed_item_factory):
        managed_item_factory(code='usd')
        managed_item_factory(code='eur')
        now = timezone.now()
        ManagedItemService.override_price('usd', {'price': 1, 'duration_minutes': 1}, now=now - timedelta(minutes=5))
        ManagedItemService.override_price('eur', {'price': 2, 'duration_minutes': 60}, now=now)

        assert ManagedItemService.expire_overrides(now) == 1
        assert ManagedItem.objects.get(code='usd').is_overridden is False
        assert ManagedItem.objects.get(code='eur').is_overridden is True

    def test_apply_overrides(self, managed_item_factory):
        managed_item_factory(code='usd')
        managed_item_factory(code='eur')
        ManagedItemService.override_price('usd', {'price': 600000, 'change': 2})
        prices = {
            'usd': {'value': Decimal('500000'), 'change': Decimal('0')},
            'eur': {'value': Decimal('550000'), 'change': Decimal('1')},
        }

        result = ManagedItemService.apply_overrides(prices)

        assert result['usd']['value'] == Decimal('600000')
        assert result['usd']['change'] == Decimal('2')
        assert result['usd']['is_overridden'] is True
        assert result['eur'] == prices['eur']
        assert prices['usd']['value'] == Decimal('500000')
