# apps/catalog/exceptions.py

from django.utils.translation import gettext_lazy as _

from apps.core.exceptions import ResourceNotFound


class ManagedItemNotFound(ResourceNotFound):
    default_detail = _('Managed item not found.')
    default_code = 'managed_item_not_found'


class ItemGroupNotFound(ResourceNotFound):
    """
    Raised when no active item carries the requested parent code.
    """
    default_detail = _('No items found for this group.')
    default_code = 'item_group_not_found'
