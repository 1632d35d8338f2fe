# Generated manually for the leads app

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models

LEAD_STATUS_CHOICES = [
    ('fresh', 'Fresh'), ('contacted', 'Contacted'), ('requirement', 'Requirement'),
    ('offer given', 'Offer Given'), ('hot', 'Hot'), ('closed', 'Closed'), ('success', 'Success'),
    ('visit planned', 'Visit Planned'), ('visited', 'Visited'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('projects', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Lead',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('contact_no', models.CharField(max_length=50)),
                ('requirement', models.TextField(blank=True, default='')),
                ('status', models.CharField(choices=LEAD_STATUS_CHOICES, default='fresh', max_length=20)),
                ('referred_by', models.CharField(blank=True, default='', max_length=255)),
                ('lead_source', models.CharField(blank=True, default='', max_length=255)),
                ('last_updated_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('project', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='leads', to='projects.project')),
            ],
            options={
                'db_table': 'leads',
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['project', '-created_at'], name='leads_project_created_idx'),
                    models.Index(fields=['status'], name='leads_status_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='LeadStatusChange',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('status', models.CharField(choices=LEAD_STATUS_CHOICES, max_length=20)),
                ('timestamp', models.DateTimeField(default=django.utils.timezone.now)),
                ('changed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('lead', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='status_history', to='leads.lead')),
            ],
            options={
                'db_table': 'lead_status_history',
                'ordering': ['timestamp', 'id'],
                'indexes': [models.Index(fields=['status', 'timestamp'], name='lead_status_hist_ts_idx')],
            },
        ),
        migrations.CreateModel(
            name='LeadRemark',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('text', models.TextField()),
                ('timestamp', models.DateTimeField(default=django.utils.timezone.now)),
                ('added_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('lead', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='remarks', to='leads.lead')),
            ],
            options={
                'db_table': 'lead_remarks',
                'ordering': ['timestamp', 'id'],
                'abstract': False,
            },
        ),
    ]
