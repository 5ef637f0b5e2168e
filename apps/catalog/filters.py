# apps/catalog/filters.py

import django_filters

from .models import ManagedItem
from .services import ManagedItemService


class ManagedItemFilter(django_filters.FilterSet):
    """
    Query parameters of the managed item list: category, source, visibility,
    override state, group and a free-text ``search`` over code and localized
    names. The filtering itself is ManagedItemService.list_items.
    """
    search = django_filters.CharFilter()

    class Meta:
        model = ManagedItem
        fields = ['category', 'source', 'is_active', 'is_overridden', 'parent_code']

    def filter_queryset(self, queryset):
        params = self.form.cleaned_data
        return ManagedItemService.list_items(
            category=params.get('category'),
            source=params.get('source'),
            is_active=params.get('is_active'),
            is_overridden=params.get('is_overridden'),
            parent_code=params.get('parent_code'),
            search=params.get('search'),
            queryset=queryset,
        )
