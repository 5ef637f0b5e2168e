# apps/catalog/models.py

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from apps.core.models import BaseModel


class ItemCategory(models.TextChoices):
    CURRENCY = 'currency', _('Currency')
    CRYPTO = 'crypto', _('Crypto')
    GOLD = 'gold', _('Gold')


class ItemVariant(models.TextChoices):
    SELL = 'sell', _('Sell')
    BUY = 'buy', _('Buy')


class ItemSource(models.TextChoices):
    API = 'api', _('API feed')
    MANUAL = 'manual', _('Manual')


# مدت‌های مجاز برای override قیمت (دقیقه)
OVERRIDE_DURATION_OPTIONS = (1, 15, 30, 60, 120, 300, 720, 1440)
DEFAULT_OVERRIDE_DURATION = 60


class ManagedItemQuerySet(models.QuerySet):

    def active(self):
        return self.filter(is_active=True)

    def in_category(self, category):
        return self.filter(category=category)

    def in_group(self, parent_code):
        return self.filter(parent_code=parent_code.lower(), is_active=True)

    def overridden(self):
        return self.filter(is_overridden=True)

    def with_expired_override(self, now=None):
        """
        Overrides whose expiry time has passed.
        """
        now = now or timezone.now()
        return self.filter(is_overridden=True, override_expires_at__isnull=False, override_expires_at__lte=now)


class ManagedItem(BaseModel):
    """
    An admin-curated price item shown to end users (a currency, gold or coin,
    optionally a buy/sell variant of a parent asset).
    ``code`` is the public API key: unique, lower case and never changed after creation.
    """
    code = models.CharField(max_length=50, unique=True, verbose_name=_("Code"))
    ohlc_code = models.CharField(max_length=50, verbose_name=_("OHLC Code"))  # همیشه حروف بزرگ
    parent_code = models.CharField(max_length=50, null=True, blank=True, verbose_name=_("Parent Code"))

    name = models.CharField(max_length=100, verbose_name=_("Name"))
    name_ar = models.CharField(max_length=100, blank=True, default='', verbose_name=_("Arabic Name"))
    name_fa = models.CharField(max_length=100, blank=True, default='', verbose_name=_("Persian Name"))

    variant = models.CharField(max_length=10, choices=ItemVariant.choices, null=True, blank=True, verbose_name=_("Variant"))
    category = models.CharField(max_length=20, choices=ItemCategory.choices, verbose_name=_("Category"))
    icon = models.CharField(max_length=50, blank=True, default='', verbose_name=_("Icon"))
    display_order = models.PositiveIntegerField(default=999, verbose_name=_("Display Order"))
    is_active = models.BooleanField(default=True, verbose_name=_("Is Active"))

    source = models.CharField(max_length=10, choices=ItemSource.choices, default=ItemSource.API, verbose_name=_("Source"))
    has_api_data = models.BooleanField(default=True, verbose_name=_("Has API Data"))
    last_api_update = models.DateTimeField(null=True, blank=True, verbose_name=_("Last API Update"))

    # --- override قیمت توسط ادمین ---
    is_overridden = models.BooleanField(default=False, verbose_name=_("Is Overridden"))
    override_price = models.DecimalField(max_digits=30, decimal_places=8, null=True, blank=True, verbose_name=_("Override Price"))
    override_change = models.DecimalField(max_digits=12, decimal_places=4, null=True, blank=True, verbose_name=_("Override Change (%)"))
    override_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="price_overrides",
        verbose_name=_("Overridden By")
    )
    override_at = models.DateTimeField(null=True, blank=True, verbose_name=_("Overridden At"))
    override_expires_at = models.DateTimeField(null=True, blank=True, verbose_name=_("Override Expires At"))
    override_reason = models.CharField(max_length=200, blank=True, default='', verbose_name=_("Override Reason"))

    metadata = models.JSONField(default=dict, blank=True, verbose_name=_("Metadata"))

    objects = ManagedItemQuerySet.as_manager()

    class Meta:
        verbose_name = _("Managed Item")
        verbose_name_plural = _("Managed Items")
        ordering = ['category', 'display_order', 'code']
        indexes = [
            models.Index(fields=['category', 'is_active', 'display_order'], name='catalog_item_cat_active_idx'),
            models.Index(fields=['parent_code', 'is_active'], name='catalog_item_parent_idx'),
            models.Index(fields=['is_overridden', '-override_at'], name='catalog_item_override_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.code})"

    def is_override_active(self, now=None) -> bool:
        if not self.is_overridden:
            return False
        if self.override_expires_at is None:
            return True
        return self.override_expires_at > (now or timezone.now())
