"""
Database models for the discharge pipeline.

The pipeline takes an admitted patient through four stages: medical
discharge, billing, payment and bed release.  Each stage owns exactly one
record type below and every successful transition appends a
:class:`DischargeAudit` row.  Patients, doctors, beds and admissions are
owned by neighbouring workflows; they are modelled here only as wide as the
pipeline needs to read them.

Table names follow the legacy SQLite schema so that existing reporting
queries keep working.
"""
from __future__ import annotations

from django.db import models


class Patient(models.Model):
    GENDER_CHOICES = (('male', 'male'), ('female', 'female'), ('other', 'other'))

    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES)
    date_of_birth = models.DateField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'patients'

    def __str__(self) -> str:
        return f"{self.first_name} {self.last_name} (#{self.id})"


class Doctor(models.Model):
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    specialty = models.CharField(max_length=100)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'doctors'

    def __str__(self) -> str:
        return f"Dr. {self.last_name} ({self.specialty})"


class Bed(models.Model):
    STATUS_AVAILABLE = 'available'
    STATUS_OCCUPIED = 'occupied'
    STATUS_CHOICES = ((STATUS_AVAILABLE, 'available'), (STATUS_OCCUPIED, 'occupied'))

    ward = models.CharField(max_length=50)
    bed_number = models.CharField(max_length=50)
    # Bed listings are filtered by status.
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_AVAILABLE, db_index=True)

    class Meta:
        db_table = 'beds'
        constraints = [
            models.UniqueConstraint(fields=['ward', 'bed_number'], name='uniq_bed_ward_number'),
        ]

    def __str__(self) -> str:
        return f"{self.bed_number} [{self.status}]"


class Admission(models.Model):
    """An inpatient stay.  Closed only by the discharge stage."""
    STATUS_ACTIVE = 'active'
    STATUS_DISCHARGED = 'discharged'
    STATUS_CHOICES = ((STATUS_ACTIVE, 'active'), (STATUS_DISCHARGED, 'discharged'))

    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='admissions')
    bed = models.ForeignKey(Bed, null=True, blank=True, on_delete=models.SET_NULL, related_name='admissions')
    admit_date = models.DateTimeField(auto_now_add=True)
    discharge_date = models.DateTimeField(null=True, blank=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_ACTIVE)
    notes = models.TextField(blank=True, default='')

    class Meta:
        db_table = 'admissions'

    def __str__(self) -> str:
        return f"admission {self.id} p={self.patient_id} [{self.status}]"


# ---------------------------------------------------------------------------
# Pipeline records (order matters: each stage references its predecessor)
# ---------------------------------------------------------------------------

class DischargeRecord(models.Model):
    """Opened by a doctor; the key of the whole discharge case."""
    STATUS_MEDICAL_COMPLETE = 'medical_discharge_complete'
    STATUS_CHOICES = ((STATUS_MEDICAL_COMPLETE, 'medical_discharge_complete'),)

    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='discharges')
    # Staff ids come from the upstream identity layer; there is no staff table.
    doctor_id = models.PositiveIntegerField(db_index=True)
    admission = models.OneToOneField(Admission, on_delete=models.PROTECT, related_name='discharge')
    status = models.CharField(max_length=32, choices=STATUS_CHOICES, default=STATUS_MEDICAL_COMPLETE, db_index=True)
    discharge_notes = models.TextField()
    discharge_date = models.DateTimeField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    # Derived case states, in pipeline order.
    STATE_DISCHARGED_NO_BILLING = 'discharged_no_billing'
    STATE_BILLED_UNPAID = 'billed_unpaid'
    STATE_PAID_BED_HELD = 'paid_bed_held'
    STATE_COMPLETE = 'complete'

    class Meta:
        db_table = 'discharge_records'

    def pipeline_state(self) -> str:
        """Return the case state from which stage records exist."""
        db = self._state.db or 'default'
        if BedRelease.objects.using(db).filter(discharge_id=self.id).exists():
            return self.STATE_COMPLETE
        billing = BillingRecord.objects.using(db).filter(discharge_id=self.id).first()
        if billing is None:
            return self.STATE_DISCHARGED_NO_BILLING
        if PaymentRecord.objects.using(db).filter(billing_id=billing.id).exists():
            return self.STATE_PAID_BED_HELD
        return self.STATE_BILLED_UNPAID

    def __str__(self) -> str:
        return f"discharge {self.id} p={self.patient_id} a={self.admission_id}"


class BillingRecord(models.Model):
    STATUS_COMPLETE = 'billing_complete'
    STATUS_CHOICES = ((STATUS_COMPLETE, 'billing_complete'),)

    discharge = models.OneToOneField(DischargeRecord, on_delete=models.CASCADE, related_name='billing')
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='billings')
    subtotal = models.FloatField(default=0)
    discount_percentage = models.FloatField(default=0)
    discount_amount = models.FloatField(default=0)
    total_amount = models.FloatField(default=0)
    status = models.CharField(max_length=32, choices=STATUS_CHOICES, default=STATUS_COMPLETE)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'billing_records'

    def __str__(self) -> str:
        return f"billing {self.id} d={self.discharge_id} total={self.total_amount}"


class BillingItem(models.Model):
    """Descriptive line item; never re-aggregated into the subtotal."""
    billing = models.ForeignKey(BillingRecord, on_delete=models.CASCADE, related_name='items')
    description = models.CharField(max_length=255)
    amount = models.FloatField()
    quantity = models.PositiveIntegerField(default=1)
    item_type = models.CharField(max_length=50, blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'billing_items'


class PaymentRecord(models.Model):
    STATUS_COMPLETE = 'complete'
    STATUS_CHOICES = ((STATUS_COMPLETE, 'complete'),)

    METHOD_CHOICES = (
        ('cash', 'cash'),
        ('card', 'card'),
        ('check', 'check'),
        ('insurance', 'insurance'),
    )

    # One payment per bill; installments are not modelled.
    billing = models.OneToOneField(BillingRecord, on_delete=models.CASCADE, related_name='payment')
    payment_amount = models.FloatField()
    payment_method = models.CharField(max_length=16, choices=METHOD_CHOICES)
    payment_status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_COMPLETE)
    remaining_balance = models.FloatField(default=0)
    admin_id = models.PositiveIntegerField()
    notes = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'payment_records'

    def __str__(self) -> str:
        return f"payment {self.id} b={self.billing_id} amount={self.payment_amount}"


class BedRelease(models.Model):
    STATUS_AVAILABLE = 'available'
    STATUS_CHOICES = ((STATUS_AVAILABLE, 'available'),)

    discharge = models.OneToOneField(DischargeRecord, on_delete=models.CASCADE, related_name='bed_release')
    bed = models.ForeignKey(Bed, on_delete=models.PROTECT, related_name='releases')
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='bed_releases')
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_AVAILABLE)
    release_date = models.DateTimeField()
    admin_id = models.PositiveIntegerField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'bed_releases'

    def __str__(self) -> str:
        return f"release {self.id} d={self.discharge_id} bed={self.bed_id}"


class DischargeAudit(models.Model):
    """Append-only trail of pipeline transitions.

    ``details`` carries a per-action JSON payload, see the stage services
    for each schema.  Saved rows can be neither updated nor deleted through
    the ORM instance API.
    """
    ACTION_DISCHARGE_INITIATED = 'discharge_initiated'
    ACTION_BILLING_CALCULATED = 'billing_calculated'
    ACTION_PAYMENT_PROCESSED = 'payment_processed'
    ACTION_BED_RELEASED = 'bed_released'
    ACTION_AUTHORIZATION_DENIED = 'authorization_denied'

    discharge = models.ForeignKey(
        DischargeRecord, null=True, blank=True, on_delete=models.PROTECT, related_name='audit_rows'
    )
    action = models.CharField(max_length=64)
    staff_id = models.PositiveIntegerField()
    staff_name = models.CharField(max_length=255)
    staff_role = models.CharField(max_length=32, blank=True, default='')
    details = models.JSONField(default=dict, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.CharField(max_length=512, blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'discharge_audit'
        indexes = [
            models.Index(fields=['discharge', 'created_at'], name='discharge_a_dischar_7c1e2f_idx'),
            models.Index(fields=['staff_id', 'created_at'], name='discharge_a_staff_i_4b9d0a_idx'),
            models.Index(fields=['action', 'created_at'], name='discharge_a_action_9e3f51_idx'),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError('discharge audit rows are append-only')
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError('discharge audit rows are append-only')

    def __str__(self) -> str:
        return f"{self.action}:{self.staff_id}@{self.created_at:%F %T}"
