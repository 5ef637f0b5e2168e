# tests/conftest.py

import pytest
from pytest_factoryboy import register
from rest_framework.test import APIClient

from tests.factories import (
    DigitalCurrencyFactory,
    ManagedItemFactory,
    OhlcRecordFactory,
    StaffUserFactory,
    UserFactory,
)

# ثبت Factoryها به عنوان Fixture (user, user_factory, managed_item, ...)
register(UserFactory)
register(StaffUserFactory, 'staff_user')
register(ManagedItemFactory)
register(DigitalCurrencyFactory)
register(OhlcRecordFactory)


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def user_api_client(api_client, user_factory):
    """
    Client authenticated as a regular (non-staff) user.
    """
    user = user_factory()
    api_client.force_authenticate(user=user)
    return api_client, user


@pytest.fixture
def staff_api_client(api_client, staff_user_factory):
    """
    Client authenticated as an admin (is_staff) user.
    """
    staff = staff_user_factory()
    api_client.force_authenticate(user=staff)
    return api_client, staff
