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
            name='AuditLog',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
                ('action', models.CharField(max_length=64, verbose_name='Action')),
                ('target_model', models.CharField(max_length=128, verbose_name='Target Model')),
                ('target_id', models.CharField(blank=True, max_length=64, verbose_name='Target ID')),
                ('details', models.JSONField(blank=True, default=dict, verbose_name='Details (JSON)')),
                ('success', models.BooleanField(default=True, verbose_name='Success')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='audit_logs', to=settings.AUTH_USER_MODEL, verbose_name='User')),
            ],
            options={
                'verbose_name': 'Audit Log Entry',
                'verbose_name_plural': 'Audit Log Entries',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['action', '-created_at'], name='core_auditl_action_5f3a1c_idx'),
                    models.Index(fields=['target_model', 'target_id'], name='core_auditl_target__9b2e47_idx'),
                ],
            },
        ),
    ]
