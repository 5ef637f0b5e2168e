import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='ManagedItem',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
                ('code', models.CharField(max_length=50, unique=True, verbose_name='Code')),
                ('ohlc_code', models.CharField(max_length=50, verbose_name='OHLC Code')),
                ('parent_code', models.CharField(blank=True, max_length=50, null=True, verbose_name='Parent Code')),
                ('name', models.CharField(max_length=100, verbose_name='Name')),
                ('name_ar', models.CharField(blank=True, default='', max_length=100, verbose_name='Arabic Name')),
                ('name_fa', models.CharField(blank=True, default='', max_length=100, verbose_name='Persian Name')),
                ('variant', models.CharField(blank=True, choices=[('sell', 'Sell'), ('buy', 'Buy')], max_length=10, null=True, verbose_name='Variant')),
                ('category', models.CharField(choices=[('currency', 'Currency'), ('crypto', 'Crypto'), ('gold', 'Gold')], max_length=20, verbose_name='Category')),
                ('icon', models.CharField(blank=True, default='', max_length=50, verbose_name='Icon')),
                ('display_order', models.PositiveIntegerField(default=999, verbose_name='Display Order')),
                ('is_active', models.BooleanField(default=True, verbose_name='Is Active')),
                ('source', models.CharField(choices=[('api', 'API feed'), ('manual', 'Manual')], default='api', max_length=10, verbose_name='Source')),
                ('has_api_data', models.BooleanField(default=True, verbose_name='Has API Data')),
                ('last_api_update', models.DateTimeField(blank=True, null=True, verbose_name='Last API Update')),
                ('is_overridden', models.BooleanField(default=False, verbose_name='Is Overridden')),
                ('override_price', models.DecimalField(blank=True, decimal_places=8, max_digits=30, null=True, verbose_name='Override Price')),
                ('override_change', models.DecimalField(blank=True, decimal_places=4, max_digits=12, null=True, verbose_name='Override Change (%)')),
                ('override_at', models.DateTimeField(blank=True, null=True, verbose_name='Overridden At')),
                ('override_expires_at', models.DateTimeField(blank=True, null=True, verbose_name='Override Expires At')),
                ('override_reason', models.CharField(blank=True, default='', max_length=200, verbose_name='Override Reason')),
                ('metadata', models.JSONField(blank=True, default=dict, verbose_name='Metadata')),
                ('override_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='price_overrides', to=settings.AUTH_USER_MODEL, verbose_name='Overridden By')),
            ],
            options={
                'verbose_name': 'Managed Item',
                'verbose_name_plural': 'Managed Items',
                'ordering': ['category', 'display_order', 'code'],
                'indexes': [
                    models.Index(fields=['category', 'is_active', 'display_order'], name='catalog_item_cat_active_idx'),
                    models.Index(fields=['parent_code', 'is_active'], name='catalog_item_parent_idx'),
                    models.Index(fields=['is_overridden', '-override_at'], name='catalog_item_override_idx'),
                ],
            },
        ),
    ]
