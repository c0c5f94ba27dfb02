import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('users', '0001_initial'),
        ('jobs', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Shift',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('clock_in_at', models.DateTimeField()),
                ('clock_out_at', models.DateTimeField(blank=True, null=True)),
                ('break_minutes', models.PositiveIntegerField(default=0)),
                ('status', models.CharField(choices=[('open', 'Open'), ('submitted', 'Submitted'), ('approved', 'Approved'), ('disputed', 'Disputed'), ('void', 'Void')], default='open', max_length=20)),
                ('clock_in_method', models.CharField(choices=[('manual', 'Manual'), ('qr', 'QR Code')], default='manual', max_length=10)),
                ('clock_out_method', models.CharField(blank=True, choices=[('manual', 'Manual'), ('qr', 'QR Code')], default='', max_length=10)),
                ('worker_note', models.TextField(blank=True, default='')),
                ('venue_note', models.TextField(blank=True, default='')),
                ('adjudicated_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('adjudicated_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('job', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='shifts', to='jobs.job')),
                ('venue', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='shifts', to='users.venue')),
                ('worker', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='shifts', to='users.worker')),
            ],
            options={
                'ordering': ['-clock_in_at'],
                'indexes': [models.Index(fields=['venue', 'status'], name='shift_venue_status_idx')],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('status', 'open')), fields=('worker',), name='one_open_shift_per_worker'),
                    models.CheckConstraint(condition=models.Q(models.Q(('clock_out_at__isnull', True), ('status', 'open')), models.Q(models.Q(('status', 'open'), _negated=True), ('clock_out_at__isnull', False)), _connector='OR'), name='clock_out_iff_closed'),
                ],
            },
        ),
    ]
