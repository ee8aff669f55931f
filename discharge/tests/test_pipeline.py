import pytest

from discharge.models import DischargeRecord
from discharge.services.pipeline import DischargePipeline, discharge_case_summary

pytestmark = pytest.mark.django_db


def test_state_follows_stages(doctor, admin, patient, admission, bed):
    pipeline = DischargePipeline(using='default')
    record = pipeline.initiate_discharge(doctor, patient_id=patient.id, admission_id=admission.id,
                                         discharge_notes='stable')
    assert record.pipeline_state() == DischargeRecord.STATE_DISCHARGED_NO_BILLING

    billing = pipeline.calculate_billing(admin, discharge_id=record.id, subtotal=1000, discount_percentage=10)
    assert record.pipeline_state() == DischargeRecord.STATE_BILLED_UNPAID

    pipeline.process_payment(admin, billing_id=billing.id, payment_amount=400, payment_method='check')
    assert record.pipeline_state() == DischargeRecord.STATE_PAID_BED_HELD

    pipeline.release_bed(admin, discharge_id=record.id, bed_id=bed.id)
    assert record.pipeline_state() == DischargeRecord.STATE_COMPLETE

    trail = pipeline.audit_trail(record)
    assert [r['action'] for r in trail] == [
        'discharge_initiated', 'billing_calculated', 'payment_processed', 'bed_released',
    ]


def test_case_summary(doctor, admin, patient, admission):
    pipeline = DischargePipeline()
    record = pipeline.initiate_discharge(doctor, patient_id=patient.id, admission_id=admission.id,
                                         discharge_notes='stable')
    pipeline.calculate_billing(admin, discharge_id=record.id, subtotal=80,
                               items=[{'description': 'Meds', 'amount': 80}])

    summary = discharge_case_summary(pipeline.get_discharge(record.id))
    assert summary['id'] == record.id
    assert summary['state'] == 'billed_unpaid'
    assert summary['billing']['totalAmount'] == 80
    assert summary['billing']['items'][0]['description'] == 'Meds'
    assert summary['payment'] is None
    assert summary['bedRelease'] is None
    assert pipeline.case_summary(record)['billing'] == summary['billing']


def test_get_missing_discharge():
    assert DischargePipeline().get_discharge(12345) is None
