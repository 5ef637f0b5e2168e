# apps/catalog/admin.py

from django.contrib import admin

from .models import ManagedItem


@admin.register(ManagedItem)
class ManagedItemAdmin(admin.ModelAdmin):
    list_display = ('code', 'name', 'category', 'variant', 'source', 'display_order', 'is_active', 'is_overridden')
    list_filter = ('category', 'source', 'variant', 'is_active', 'is_overridden')
    search_fields = ('code', 'name', 'name_fa', 'name_ar')
    ordering = ('category', 'display_order', 'code')
    readonly_fields = ('id', 'created_at', 'updated_at', 'override_at', 'override_by')

    def get_readonly_fields(self, request, obj=None):
        # کد پس از ایجاد قابل تغییر نیست
        if obj is not None:
            return self.readonly_fields + ('code',)
        return self.readonly_fields
