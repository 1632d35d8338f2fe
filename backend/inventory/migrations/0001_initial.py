# Generated manually for the inventory app

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='InventoryItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('location', models.CharField(max_length=255)),
                ('property_type', models.CharField(max_length=100)),
                ('floor', models.CharField(blank=True, default='', max_length=50)),
                ('size', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('size_unit', models.CharField(blank=True, default='', max_length=20)),
                ('rent', models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ('advance', models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ('security', models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ('commission', models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ('reoffered_by', models.CharField(blank=True, default='', max_length=255)),
                ('is_rented', models.BooleanField(default=False)),
                ('rent_coming', models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ('agreement_years', models.DecimalField(blank=True, decimal_places=1, max_digits=5, null=True)),
                ('tenant', models.CharField(blank=True, default='', max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'inventory_items',
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['property_type'], name='idx_inventory_type'),
                    models.Index(fields=['is_rented'], name='idx_inventory_is_rented'),
                ],
            },
        ),
        migrations.CreateModel(
            name='InventoryNote',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('text', models.TextField()),
                ('timestamp', models.DateTimeField(default=django.utils.timezone.now)),
                ('added_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('item', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='notes', to='inventory.inventoryitem')),
            ],
            options={
                'db_table': 'inventory_notes',
                'ordering': ['timestamp', 'id'],
                'abstract': False,
            },
        ),
    ]
