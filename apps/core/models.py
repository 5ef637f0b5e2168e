# apps/core/models.py

import uuid

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class BaseModel(models.Model):
    """
    Base model with common fields like id, created_at, updated_at.
    This model is abstract and should be inherited by other models.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("Created At"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("Updated At"))

    class Meta:
        abstract = True
        ordering = ['-created_at']


class AuditLog(BaseModel):
    """
    Audit trail for admin actions on catalog and market resources
    (item creation, edits, price overrides).
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,  # با حذف کاربر، لاگ باقی می‌ماند
        null=True,
        blank=True,
        related_name="audit_logs",
        verbose_name=_("User")
    )
    action = models.CharField(max_length=64, verbose_name=_("Action"))  # e.g. 'CREATE_ITEM', 'OVERRIDE_PRICE'
    target_model = models.CharField(max_length=128, verbose_name=_("Target Model"))
    target_id = models.CharField(max_length=64, blank=True, verbose_name=_("Target ID"))
    details = models.JSONField(default=dict, blank=True, verbose_name=_("Details (JSON)"))
    success = models.BooleanField(default=True, verbose_name=_("Success"))

    class Meta:
        verbose_name = _("Audit Log Entry")
        verbose_name_plural = _("Audit Log Entries")
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['action', '-created_at'], name='core_auditl_action_5f3a1c_idx'),
            models.Index(fields=['target_model', 'target_id'], name='core_auditl_target__9b2e47_idx'),
        ]

    def __str__(self):
        username = self.user.get_username() if self.user else "system"
        return f"Audit: {username} - {self.action} on {self.target_model} ({self.target_id})"
