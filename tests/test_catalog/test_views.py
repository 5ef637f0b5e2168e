# tests/test_catalog/test_views.py

import pytest
from django.urls import reverse
from rest_framework import status

from apps.catalog.models import ManagedItem
from apps.catalog.services import ManagedItemService

pytestmark = pytest.mark.django_db


class TestManagedItemViewSet:
    def test_list_is_public_and_paginated(self, api_client, managed_item_factory):
        managed_item_factory.create_batch(3)
        response = api_client.get(reverse('catalog:managed-item-list'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 3
        assert len(response.data['results']) == 3

    def test_list_filters(self, api_client, managed_item_factory):
        managed_item_factory(code='usd', category='currency')
        managed_item_factory(code='gold_18', category='gold')
        managed_item_factory(code='eur', category='currency', is_active=False)

        response = api_client.get(reverse('catalog:managed-item-list'), {'category': 'currency', 'is_active': 'true'})
        assert [item['code'] for item in response.data['results']] == ['usd']

    def test_list_filters_go_through_service(self, api_client, managed_item_factory, mocker):
        managed_item_factory(code='usd_buy', parent_code='usd', name='Dollar Buy')
        managed_item_factory(code='usd_sell', parent_code='usd', name='Dollar Sell')
        managed_item_factory(code='eur_sell', parent_code='eur', name='Euro Sell')
        spy = mocker.spy(ManagedItemService, 'list_items')

        response = api_client.get(reverse('catalog:managed-item-list'), {'parent_code': 'usd', 'search': 'sell'})

        assert [item['code'] for item in response.data['results']] == ['usd_sell']
        assert any(call.kwargs.get('search') == 'sell' for call in spy.call_args_list)

    def test_retrieve_by_code(self, api_client, managed_item_factory):
        managed_item_factory(code='usd')
        response = api_client.get(reverse('catalog:managed-item-detail', kwargs={'code': 'USD'}))
        assert response.status_code == status.HTTP_200_OK
        assert response.data['code'] == 'usd'

    def test_retrieve_missing(self, api_client):
        response = api_client.get(reverse('catalog:managed-item-detail', kwargs={'code': 'nope'}))
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_create_requires_admin(self, user_api_client):
        client, _ = user_api_client
        response = client.post(
            reverse('catalog:managed-item-list'),
            {'code': 'usd', 'name': 'US Dollar', 'category': 'currency'},
            format='json',
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_create_anonymous_rejected(self, api_client):
        response = api_client.post(
            reverse('catalog:managed-item-list'),
            {'code': 'usd', 'name': 'US Dollar', 'category': 'currency'},
            format='json',
        )
        assert response.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN)

    def test_create_as_admin(self, staff_api_client):
        client, _ = staff_api_client
        response = client.post(
            reverse('catalog:managed-item-list'),
            {'code': 'usd', 'name': 'US Dollar', 'category': 'currency'},
            format='json',
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['ohlc_code'] == 'USD'
        assert ManagedItem.objects.filter(code='usd').exists()

    def test_create_validation_errors_per_field(self, staff_api_client):
        client, _ = staff_api_client
        response = client.post(
            reverse('catalog:managed-item-list'),
            {'code': 'AB', 'name': 'X', 'category': 'stocks'},
            format='json',
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert set(response.data) == {'code', 'name', 'category'}

    def test_create_duplicate_is_conflict(self, staff_api_client, managed_item_factory):
        managed_item_factory(code='usd')
        client, _ = staff_api_client
        response = client.post(
            reverse('catalog:managed-item-list'),
            {'code': 'usd', 'name': 'US Dollar', 'category': 'currency'},
            format='json',
        )
        assert response.status_code == status.HTTP_409_CONFLICT

    def test_partial_update(self, staff_api_client, managed_item_factory):
        managed_item_factory(code='usd')
        client, _ = staff_api_client
        response = client.patch(
            reverse('catalog:managed-item-detail', kwargs={'code': 'usd'}),
            {'display_order': 3},
            format='json',
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.data['display_order'] == 3

    def test_delete(self, staff_api_client, managed_item_factory):
        managed_item_factory(code='usd')
        client, _ = staff_api_client
        response = client.delete(reverse('catalog:managed-item-detail', kwargs={'code': 'usd'}))
        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not ManagedItem.objects.exists()

    def test_override_and_clear(self, staff_api_client, managed_item_factory):
        managed_item_factory(code='usd')
        client, staff = staff_api_client
        url = reverse('catalog:managed-item-override', kwargs={'code': 'usd'})

        response = client.post(url, {'price': 610000, 'duration_minutes': 30}, format='json')
        assert response.status_code == status.HTTP_200_OK
        assert response.data['is_overridden'] is True
        assert response.data['override_active'] is True
        assert response.data['override_by'] == staff.username

        response = client.delete(url)
        assert response.status_code == status.HTTP_200_OK
        assert response.data['is_overridden'] is False

    def test_override_invalid_duration(self, staff_api_client, managed_item_factory):
        managed_item_factory(code='usd')
        client, _ = staff_api_client
        response = client.post(
            reverse('catalog:managed-item-override', kwargs={'code': 'usd'}),
            {'price': 1, 'duration_minutes': 7},
            format='json',
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'duration_minutes' in response.data

    def test_group(self, api_client, managed_item_factory):
        managed_item_factory(code='usd_sell', parent_code='usd')
        managed_item_factory(code='usd_buy', parent_code='usd')
        response = api_client.get(reverse('catalog:managed-item-group', kwargs={'parent_code': 'usd'}))
        assert response.status_code == status.HTTP_200_OK
        assert {item['code'] for item in response.data} == {'usd_sell', 'usd_buy'}

    def test_group_not_found(self, api_client):
        response = api_client.get(reverse('catalog:managed-item-group', kwargs={'parent_code': 'xyz'}))
        assert response.status_code == status.HTTP_404_NOT_FOUND
