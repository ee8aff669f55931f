"""
The discharge pipeline as one object bound to a database alias.

Stages run strictly in order::

    Admitted -> discharged_no_billing -> billed_unpaid -> paid_bed_held -> complete

Each stage checks only its predecessor, so running a stage twice or out of
order ends in Conflict/NotFound rather than a silent success.  Callers that
need a specific database (tests, maintenance scripts) construct their own
:class:`DischargePipeline`; nothing here reads a module-level connection.
"""
from __future__ import annotations

from typing import Iterable, Optional

from discharge.models import BedRelease, BillingRecord, DischargeRecord, PaymentRecord
from discharge.roles import StaffPrincipal
from discharge.services import bed_release, billing, discharge, payment
from discharge.services.audit import audit_trail


class DischargePipeline:
    def __init__(self, using: str = 'default'):
        self.using = using

    def initiate_discharge(self, staff: StaffPrincipal, *, patient_id: int, admission_id: int,
                           discharge_notes: str) -> DischargeRecord:
        return discharge.initiate_discharge(
            staff, patient_id=patient_id, admission_id=admission_id,
            discharge_notes=discharge_notes, using=self.using,
        )

    def calculate_billing(self, staff: StaffPrincipal, *, discharge_id: int, subtotal: float,
                          discount_percentage: float = 0,
                          items: Optional[Iterable[dict]] = None) -> BillingRecord:
        return billing.calculate_billing(
            staff, discharge_id=discharge_id, subtotal=subtotal,
            discount_percentage=discount_percentage, items=items, using=self.using,
        )

    def process_payment(self, staff: StaffPrincipal, *, billing_id: int, payment_amount: float,
                        payment_method: str, notes: Optional[str] = None) -> PaymentRecord:
        return payment.process_payment(
            staff, billing_id=billing_id, payment_amount=payment_amount,
            payment_method=payment_method, notes=notes, using=self.using,
        )

    def release_bed(self, staff: StaffPrincipal, *, discharge_id: int, bed_id: int) -> BedRelease:
        return bed_release.release_bed(staff, discharge_id=discharge_id, bed_id=bed_id, using=self.using)

    def get_discharge(self, discharge_id: int) -> Optional[DischargeRecord]:
        return DischargeRecord.objects.using(self.using).filter(id=discharge_id).first()

    def case_summary(self, record: DischargeRecord) -> dict:
        return discharge_case_summary(record, using=self.using)

    def audit_trail(self, record: DischargeRecord) -> list[dict]:
        return audit_trail(record, using=self.using)


def discharge_case_summary(record: DischargeRecord, *, using: str = 'default') -> dict:
    """The discharge record with every downstream stage record that exists."""
    bill = BillingRecord.objects.using(using).filter(discharge_id=record.id).first()
    paid = PaymentRecord.objects.using(using).filter(billing_id=bill.id).first() if bill else None
    release = BedRelease.objects.using(using).filter(discharge_id=record.id).first()
    return {
        **discharge.format_discharge(record),
        'state': record.pipeline_state(),
        'billing': billing.format_billing(bill) if bill else None,
        'payment': payment.format_payment(paid) if paid else None,
        'bedRelease': bed_release.format_release(release) if release else None,
    }
