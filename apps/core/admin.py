# apps/core/admin.py

from django.contrib import admin

from .models import AuditLog


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ('action', 'target_model', 'target_id', 'user', 'success', 'created_at')
    list_filter = ('action', 'target_model', 'success')
    search_fields = ('target_id', 'action')
    readonly_fields = ('id', 'user', 'action', 'target_model', 'target_id', 'details', 'success', 'created_at', 'updated_at')
    ordering = ('-created_at',)
