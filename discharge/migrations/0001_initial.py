from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Patient',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('first_name', models.CharField(max_length=100)),
                ('last_name', models.CharField(max_length=100)),
                ('gender', models.CharField(choices=[('male', 'male'), ('female', 'female'), ('other', 'other')], max_length=10)),
                ('date_of_birth', models.DateField()),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={'db_table': 'patients'},
        ),
        migrations.CreateModel(
            name='Doctor',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('first_name', models.CharField(max_length=100)),
                ('last_name', models.CharField(max_length=100)),
                ('specialty', models.CharField(max_length=100)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={'db_table': 'doctors'},
        ),
        migrations.CreateModel(
            name='Bed',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('ward', models.CharField(max_length=50)),
                ('bed_number', models.CharField(max_length=50)),
                ('status', models.CharField(choices=[('available', 'available'), ('occupied', 'occupied')], db_index=True, default='available', max_length=16)),
            ],
            options={'db_table': 'beds'},
        ),
        migrations.AddConstraint(
            model_name='bed',
            constraint=models.UniqueConstraint(fields=('ward', 'bed_number'), name='uniq_bed_ward_number'),
        ),
        migrations.CreateModel(
            name='Admission',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('admit_date', models.DateTimeField(auto_now_add=True)),
                ('discharge_date', models.DateTimeField(blank=True, null=True)),
                ('status', models.CharField(choices=[('active', 'active'), ('discharged', 'discharged')], default='active', max_length=16)),
                ('notes', models.TextField(blank=True, default='')),
                ('bed', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='admissions', to='discharge.bed')),
                ('patient', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='admissions', to='discharge.patient')),
            ],
            options={'db_table': 'admissions'},
        ),
        migrations.CreateModel(
            name='DischargeRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('doctor_id', models.PositiveIntegerField(db_index=True)),
                ('status', models.CharField(choices=[('medical_discharge_complete', 'medical_discharge_complete')], db_index=True, default='medical_discharge_complete', max_length=32)),
                ('discharge_notes', models.TextField()),
                ('discharge_date', models.DateTimeField()),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('admission', models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name='discharge', to='discharge.admission')),
                ('patient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='discharges', to='discharge.patient')),
            ],
            options={'db_table': 'discharge_records'},
        ),
        migrations.CreateModel(
            name='BillingRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('subtotal', models.FloatField(default=0)),
                ('discount_percentage', models.FloatField(default=0)),
                ('discount_amount', models.FloatField(default=0)),
                ('total_amount', models.FloatField(default=0)),
                ('status', models.CharField(choices=[('billing_complete', 'billing_complete')], default='billing_complete', max_length=32)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('discharge', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='billing', to='discharge.dischargerecord')),
                ('patient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='billings', to='discharge.patient')),
            ],
            options={'db_table': 'billing_records'},
        ),
        migrations.CreateModel(
            name='BillingItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('description', models.CharField(max_length=255)),
                ('amount', models.FloatField()),
                ('quantity', models.PositiveIntegerField(default=1)),
                ('item_type', models.CharField(blank=True, default='', max_length=50)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('billing', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='discharge.billingrecord')),
            ],
            options={'db_table': 'billing_items'},
        ),
        migrations.CreateModel(
            name='PaymentRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('payment_amount', models.FloatField()),
                ('payment_method', models.CharField(choices=[('cash', 'cash'), ('card', 'card'), ('check', 'check'), ('insurance', 'insurance')], max_length=16)),
                ('payment_status', models.CharField(choices=[('complete', 'complete')], default='complete', max_length=16)),
                ('remaining_balance', models.FloatField(default=0)),
                ('admin_id', models.PositiveIntegerField()),
                ('notes', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('billing', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='payment', to='discharge.billingrecord')),
            ],
            options={'db_table': 'payment_records'},
        ),
        migrations.CreateModel(
            name='BedRelease',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('status', models.CharField(choices=[('available', 'available')], default='available', max_length=16)),
                ('release_date', models.DateTimeField()),
                ('admin_id', models.PositiveIntegerField()),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('bed', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='releases', to='discharge.bed')),
                ('discharge', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='bed_release', to='discharge.dischargerecord')),
                ('patient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='bed_releases', to='discharge.patient')),
            ],
            options={'db_table': 'bed_releases'},
        ),
        migrations.CreateModel(
            name='DischargeAudit',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('action', models.CharField(max_length=64)),
                ('staff_id', models.PositiveIntegerField()),
                ('staff_name', models.CharField(max_length=255)),
                ('staff_role', models.CharField(blank=True, default='', max_length=32)),
                ('details', models.JSONField(blank=True, default=dict)),
                ('ip_address', models.GenericIPAddressField(blank=True, null=True)),
                ('user_agent', models.CharField(blank=True, default='', max_length=512)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('discharge', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='audit_rows', to='discharge.dischargerecord')),
            ],
            options={'db_table': 'discharge_audit'},
        ),
        migrations.AddIndex(
            model_name='dischargeaudit',
            index=models.Index(fields=['discharge', 'created_at'], name='discharge_a_dischar_7c1e2f_idx'),
        ),
        migrations.AddIndex(
            model_name='dischargeaudit',
            index=models.Index(fields=['staff_id', 'created_at'], name='discharge_a_staff_i_4b9d0a_idx'),
        ),
        migrations.AddIndex(
            model_name='dischargeaudit',
            index=models.Index(fields=['action', 'created_at'], name='discharge_a_action_9e3f51_idx'),
        ),
    ]
