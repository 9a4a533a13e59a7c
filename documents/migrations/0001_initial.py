import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models

DIVISION_CHOICES = [
    ('CATCID', 'CATCID'), ('GACID', 'GACID'), ('MOOCSU', 'MOOCSU'), ('EARD', 'EARD'),
    ('Secretary', 'Secretary'), ('Admin', 'Admin'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Inspector',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=150, unique=True)),
                ('is_active', models.BooleanField(default=True)),
            ],
            options={
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Document',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('reference_number', models.CharField(max_length=30, unique=True)),
                ('reference_year', models.PositiveIntegerField(blank=True, editable=False, null=True)),
                ('reference_sequence', models.PositiveIntegerField(blank=True, editable=False, null=True)),
                ('subject', models.CharField(max_length=255)),
                ('originating_office', models.CharField(max_length=150)),
                ('date_of_document', models.DateField(blank=True, null=True)),
                ('fsis_reference_number', models.CharField(blank=True, max_length=100)),
                ('awd_received_date', models.DateField(blank=True, null=True)),
                ('forwarded_by', models.CharField(blank=True, max_length=200)),
                ('forwarded_to', models.CharField(blank=True, choices=DIVISION_CHOICES, max_length=20)),
                ('forwarded_to_name', models.CharField(blank=True, max_length=150)),
                ('remarks', models.TextField(blank=True)),
                ('status', models.CharField(choices=[('Open', 'Open'), ('Returned', 'Returned'), ('On Hold', 'On Hold'), ('Closed', 'Closed'), ('Deleted', 'Deleted')], db_index=True, default='Open', max_length=20)),
                ('working_days', models.PositiveSmallIntegerField(default=3)),
                ('start_date', models.DateTimeField(default=django.utils.timezone.now)),
                ('deadline', models.DateField(blank=True, null=True)),
                ('end_date', models.DateField(blank=True, null=True)),
                ('assigned_inspector', models.CharField(blank=True, max_length=150)),
                ('received_by', models.CharField(blank=True, max_length=150)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_documents', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-reference_sequence', '-reference_number'],
                'indexes': [
                    models.Index(fields=['status', 'forwarded_to'], name='documents_d_status_5b1f0e_idx'),
                    models.Index(fields=['reference_year', 'reference_sequence'], name='documents_d_referen_8c2a41_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='TrackingEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('reference_number', models.CharField(db_index=True, max_length=30)),
                ('action', models.CharField(max_length=30)),
                ('subject', models.CharField(max_length=255)),
                ('originating_office', models.CharField(blank=True, max_length=150)),
                ('forwarded_by', models.CharField(blank=True, max_length=200)),
                ('forwarded_to', models.CharField(blank=True, max_length=20)),
                ('forwarded_to_name', models.CharField(blank=True, max_length=150)),
                ('status', models.CharField(max_length=20)),
                ('remarks', models.TextField(blank=True)),
                ('working_days', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('assigned_inspector', models.CharField(blank=True, max_length=150)),
                ('action_timestamp', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('document', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='tracking_entries', to='documents.document')),
            ],
            options={
                'verbose_name_plural': 'Tracking Entries',
                'ordering': ['action_timestamp', 'id'],
            },
        ),
        migrations.CreateModel(
            name='MandayRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('reference_number', models.CharField(db_index=True, max_length=30)),
                ('original_working_days', models.PositiveSmallIntegerField()),
                ('actual_working_days', models.PositiveSmallIntegerField()),
                ('inspector_name', models.CharField(max_length=150)),
                ('division', models.CharField(blank=True, max_length=20)),
                ('start_date', models.DateField()),
                ('end_date', models.DateField()),
                ('date_recorded', models.DateTimeField(default=django.utils.timezone.now)),
                ('document', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='manday_records', to='documents.document')),
            ],
            options={
                'ordering': ['-date_recorded'],
            },
        ),
        migrations.CreateModel(
            name='ReturnRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('kind', models.CharField(choices=[('INSPECTOR', 'Returned to Inspector'), ('AWD', 'Returned to AWD')], max_length=20)),
                ('reference_number', models.CharField(db_index=True, max_length=30)),
                ('subject', models.CharField(max_length=255)),
                ('forwarded_by', models.CharField(blank=True, max_length=200)),
                ('forwarded_to', models.CharField(blank=True, max_length=20)),
                ('remarks', models.TextField(blank=True)),
                ('recorded_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('document', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='return_records', to='documents.document')),
            ],
        ),
    ]
