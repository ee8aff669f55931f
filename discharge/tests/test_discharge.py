import pytest

from discharge.exceptions import AuthorizationDenied, Conflict, InvalidInput, NotFound
from discharge.models import Admission, Bed, DischargeAudit, DischargeRecord, Patient
from discharge.services import discharge as discharge_service
from discharge.services.discharge import format_discharge, initiate_discharge

from .helpers import staff

pytestmark = pytest.mark.django_db


def test_doctor_discharges_active_admission(doctor, patient, admission, bed):
    record = initiate_discharge(doctor, patient_id=patient.id, admission_id=admission.id,
                                discharge_notes='  stable  ')

    assert record.status == DischargeRecord.STATUS_MEDICAL_COMPLETE
    assert record.doctor_id == doctor.staff_id
    assert record.discharge_notes == 'stable'
    admission.refresh_from_db()
    assert admission.status == Admission.STATUS_DISCHARGED
    assert admission.discharge_date is not None
    # The bed stays occupied until the bed-release stage.
    bed.refresh_from_db()
    assert bed.status == Bed.STATUS_OCCUPIED

    row = DischargeAudit.objects.get(discharge=record)
    assert row.action == DischargeAudit.ACTION_DISCHARGE_INITIATED
    assert row.staff_id == doctor.staff_id
    assert row.staff_role == 'doctor'
    assert row.details == {'patientId': patient.id, 'admissionId': admission.id, 'dischargeNotes': 'stable'}


def test_role_is_checked_before_anything_else(nurse):
    with pytest.raises(AuthorizationDenied):
        initiate_discharge(nurse, patient_id=999, admission_id=999, discharge_notes='x')
    assert DischargeRecord.objects.count() == 0


def test_unknown_role_is_denied():
    janitor = staff(5, 'janitor')
    assert janitor.role is None
    with pytest.raises(AuthorizationDenied):
        initiate_discharge(janitor, patient_id=1, admission_id=1, discharge_notes='x')


def test_missing_patient(doctor):
    with pytest.raises(NotFound) as exc:
        initiate_discharge(doctor, patient_id=999, admission_id=1, discharge_notes='x')
    assert str(exc.value.detail) == 'Patient not found'


def test_admission_must_belong_to_patient(doctor, admission):
    other = Patient.objects.create(first_name='B', last_name='C', gender='male', date_of_birth='1990-01-01')
    with pytest.raises(NotFound) as exc:
        initiate_discharge(doctor, patient_id=other.id, admission_id=admission.id, discharge_notes='x')
    assert str(exc.value.detail) == 'Admission not found for this patient'


def test_second_discharge_of_same_admission_conflicts(doctor, patient, admission):
    initiate_discharge(doctor, patient_id=patient.id, admission_id=admission.id, discharge_notes='stable')
    with pytest.raises(Conflict) as exc:
        initiate_discharge(doctor, patient_id=patient.id, admission_id=admission.id, discharge_notes='again')
    assert str(exc.value.detail) == 'Patient is not currently admitted'
    assert DischargeRecord.objects.count() == 1


def test_blank_notes_rejected(doctor, patient, admission):
    with pytest.raises(InvalidInput):
        initiate_discharge(doctor, patient_id=patient.id, admission_id=admission.id, discharge_notes='   ')


def test_notes_are_sanitized(doctor, patient, admission):
    record = initiate_discharge(doctor, patient_id=patient.id, admission_id=admission.id,
                                discharge_notes='<script>alert(1)</script>follow up in 2 weeks')
    assert '<script>' not in record.discharge_notes
    assert 'follow up in 2 weeks' in record.discharge_notes


def test_failed_audit_write_rolls_back_stage(doctor, patient, admission, monkeypatch):
    def boom(**kwargs):
        raise RuntimeError('audit store unavailable')

    monkeypatch.setattr(discharge_service, 'log_action', boom)
    with pytest.raises(RuntimeError):
        initiate_discharge(doctor, patient_id=patient.id, admission_id=admission.id, discharge_notes='stable')

    assert DischargeRecord.objects.count() == 0
    admission.refresh_from_db()
    assert admission.status == Admission.STATUS_ACTIVE


def test_format_discharge(doctor, patient, admission):
    record = initiate_discharge(doctor, patient_id=patient.id, admission_id=admission.id, discharge_notes='ok')
    data = format_discharge(record)
    assert data['patientId'] == patient.id
    assert data['admissionId'] == admission.id
    assert data['status'] == 'medical_discharge_complete'
    assert data['dischargeNotes'] == 'ok'


def test_concurrent_discharge_insert_conflicts(doctor, patient, admission):
    initiate_discharge(doctor, patient_id=patient.id, admission_id=admission.id, discharge_notes='stable')
    # Another request read the admission as active before ours committed.
    Admission.objects.filter(id=admission.id).update(status=Admission.STATUS_ACTIVE)

    with pytest.raises(Conflict) as exc:
        initiate_discharge(doctor, patient_id=patient.id, admission_id=admission.id, discharge_notes='again')
    assert str(exc.value.detail) == 'Patient is not currently admitted'
    assert DischargeRecord.objects.count() == 1
    assert DischargeAudit.objects.filter(action=DischargeAudit.ACTION_DISCHARGE_INITIATED).count() == 1
