# Generated manually for the accounts app

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('projects', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='AccountEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField()),
                ('amount', models.DecimalField(decimal_places=2, max_digits=14, validators=[django.core.validators.MinValueValidator(0)])),
                ('entry_type', models.CharField(choices=[('income', 'Income'), ('expense', 'Expense'), ('incomingLoan', 'Incoming Loan'), ('outgoingLoan', 'Outgoing Loan'), ('payout', 'Payout')], max_length=20)),
                ('mode', models.CharField(default='Cash', max_length=100)),
                ('category', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('added_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='account_entries', to=settings.AUTH_USER_MODEL)),
                ('project', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='account_entries', to='projects.project')),
            ],
            options={
                'verbose_name_plural': 'account entries',
                'db_table': 'account_entries',
                'ordering': ['-date', '-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['project', 'date'], name='idx_account_project_date'),
                    models.Index(fields=['entry_type'], name='idx_account_type'),
                ],
            },
        ),
    ]
