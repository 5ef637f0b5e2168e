"""
Creates the market data tables together with their index set.

The DigitalCurrency indexes (unique symbol, is_active, last_updated desc,
market_cap_in_toman desc) back the freshness and top-by-market-cap queries
and are part of the storage contract.
"""

import uuid
from decimal import Decimal

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='DigitalCurrency',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
                ('symbol', models.CharField(max_length=20, unique=True, verbose_name='Symbol')),
                ('name', models.CharField(max_length=100, verbose_name='Name')),
                ('price_in_toman', models.DecimalField(decimal_places=8, max_digits=34, verbose_name='Price (Toman)')),
                ('market_cap_in_toman', models.DecimalField(blank=True, decimal_places=2, max_digits=40, null=True, verbose_name='Market Cap (Toman)')),
                ('volume_in_toman_24h', models.DecimalField(blank=True, decimal_places=2, max_digits=40, null=True, verbose_name='24h Volume (Toman)')),
                ('change_percentage_24h', models.DecimalField(decimal_places=4, default=Decimal('0'), max_digits=12, verbose_name='24h Change (%)')),
                ('change_amount_24h', models.DecimalField(decimal_places=8, default=Decimal('0'), max_digits=34, verbose_name='24h Change (Toman)')),
                ('change_percentage_7d', models.DecimalField(decimal_places=4, default=Decimal('0'), max_digits=12, verbose_name='7d Change (%)')),
                ('circulating_supply', models.DecimalField(blank=True, decimal_places=8, max_digits=40, null=True, verbose_name='Circulating Supply')),
                ('total_supply', models.DecimalField(blank=True, decimal_places=8, max_digits=40, null=True, verbose_name='Total Supply')),
                ('max_supply', models.DecimalField(blank=True, decimal_places=8, max_digits=40, null=True, verbose_name='Max Supply')),
                ('last_updated', models.DateTimeField(blank=True, null=True, verbose_name='Last Updated')),
                ('is_active', models.BooleanField(default=True, verbose_name='Is Active')),
            ],
            options={
                'verbose_name': 'Digital Currency',
                'verbose_name_plural': 'Digital Currencies',
                'ordering': ['symbol'],
                'indexes': [
                    models.Index(fields=['is_active'], name='md_dc_is_active_idx'),
                    models.Index(fields=['-last_updated'], name='md_dc_last_updated_idx'),
                    models.Index(fields=['-market_cap_in_toman'], name='md_dc_market_cap_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='OhlcRecord',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
                ('item_code', models.CharField(max_length=50, verbose_name='Item Code')),
                ('timeframe', models.CharField(choices=[('1m', '1 Minute'), ('5m', '5 Minutes'), ('15m', '15 Minutes'), ('30m', '30 Minutes'), ('1h', '1 Hour'), ('4h', '4 Hours'), ('1d', '1 Day')], max_length=3, verbose_name='Timeframe')),
                ('timestamp', models.DateTimeField(verbose_name='Bucket Start')),
                ('open', models.DecimalField(decimal_places=8, max_digits=34, verbose_name='Open')),
                ('high', models.DecimalField(decimal_places=8, max_digits=34, verbose_name='High')),
                ('low', models.DecimalField(decimal_places=8, max_digits=34, verbose_name='Low')),
                ('close', models.DecimalField(decimal_places=8, max_digits=34, verbose_name='Close')),
                ('update_count', models.PositiveIntegerField(default=1, verbose_name='Update Count')),
            ],
            options={
                'verbose_name': 'OHLC Record',
                'verbose_name_plural': 'OHLC Records',
                'ordering': ['-timestamp'],
                'unique_together': {('item_code', 'timeframe', 'timestamp')},
                'indexes': [
                    models.Index(fields=['item_code', 'timeframe', '-timestamp'], name='md_ohlc_item_tf_ts_idx'),
                ],
            },
        ),
    ]
