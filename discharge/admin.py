"""
Django admin registrations for the discharge models.

Collaborator records (patients, doctors, beds, admissions) can be edited
here during development.  Pipeline records are created only through the
stage services, so they are exposed read-only, and audit rows can never
be changed or removed from the admin.
"""

from django.contrib import admin

from .models import (
    Admission,
    Bed,
    BedRelease,
    BillingItem,
    BillingRecord,
    DischargeAudit,
    DischargeRecord,
    Doctor,
    Patient,
    PaymentRecord,
)


class ReadOnlyAdmin(admin.ModelAdmin):
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('id', 'first_name', 'last_name', 'gender', 'date_of_birth', 'created_at')
    search_fields = ('first_name', 'last_name')


@admin.register(Doctor)
class DoctorAdmin(admin.ModelAdmin):
    list_display = ('id', 'first_name', 'last_name', 'specialty')
    search_fields = ('first_name', 'last_name', 'specialty')


@admin.register(Bed)
class BedAdmin(admin.ModelAdmin):
    list_display = ('id', 'ward', 'bed_number', 'status')
    list_filter = ('ward', 'status')


@admin.register(Admission)
class AdmissionAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'bed', 'status', 'admit_date', 'discharge_date')
    list_filter = ('status',)
    search_fields = ('patient__first_name', 'patient__last_name')


class BillingItemInline(admin.TabularInline):
    model = BillingItem
    extra = 0
    can_delete = False
    readonly_fields = ('description', 'amount', 'quantity', 'item_type')


@admin.register(DischargeRecord)
class DischargeRecordAdmin(ReadOnlyAdmin):
    list_display = ('id', 'patient', 'doctor_id', 'admission', 'status', 'discharge_date')
    list_filter = ('status',)


@admin.register(BillingRecord)
class BillingRecordAdmin(ReadOnlyAdmin):
    list_display = ('id', 'discharge', 'subtotal', 'discount_percentage', 'total_amount', 'status')
    inlines = [BillingItemInline]


@admin.register(PaymentRecord)
class PaymentRecordAdmin(ReadOnlyAdmin):
    list_display = ('id', 'billing', 'payment_amount', 'payment_method', 'remaining_balance', 'admin_id')
    list_filter = ('payment_method',)


@admin.register(BedRelease)
class BedReleaseAdmin(ReadOnlyAdmin):
    list_display = ('id', 'discharge', 'bed', 'release_date', 'admin_id')


@admin.register(DischargeAudit)
class DischargeAuditAdmin(ReadOnlyAdmin):
    list_display = ('id', 'discharge', 'action', 'staff_id', 'staff_name', 'staff_role', 'created_at')
    list_filter = ('action', 'staff_role')
    search_fields = ('staff_name', 'discharge__id')
