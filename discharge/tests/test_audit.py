import pytest

from discharge.exceptions import AuthorizationDenied
from discharge.models import DischargeAudit
from discharge.services import discharge as discharge_service, notify
from discharge.services.audit import audit_trail, log_action, require_role
from discharge.services.discharge import initiate_discharge
from discharge.roles import ADMIN_ROLES, DOCTOR_ROLES

pytestmark = pytest.mark.django_db


def test_audit_rows_are_append_only(doctor):
    row = log_action(staff=doctor, action='discharge_initiated', details={'x': 1})
    row.details = {'x': 2}
    with pytest.raises(ValueError):
        row.save()
    with pytest.raises(ValueError):
        row.delete()
    assert DischargeAudit.objects.get(id=row.id).details == {'x': 1}


def test_denial_is_audited_without_a_case(nurse):
    with pytest.raises(AuthorizationDenied) as exc:
        require_role(nurse, DOCTOR_ROLES, operation='initiate_discharge')
    assert 'doctor' in str(exc.value.detail)

    row = DischargeAudit.objects.get()
    assert row.action == DischargeAudit.ACTION_AUTHORIZATION_DENIED
    assert row.discharge_id is None
    assert row.staff_id == nurse.staff_id
    assert row.staff_role == 'nurse'
    assert row.details == {'operation': 'initiate_discharge', 'requiredRoles': ['doctor']}


def test_allowed_role_writes_nothing(admin):
    require_role(admin, ADMIN_ROLES, operation='calculate_billing')
    assert DischargeAudit.objects.count() == 0


def test_staff_name_defaults_to_id(nurse):
    row = log_action(staff=nurse, action='x')
    assert row.staff_name == f'Staff {nurse.staff_id}'


def test_trail_is_oldest_first(doctor, patient, admission):
    record = initiate_discharge(doctor, patient_id=patient.id, admission_id=admission.id, discharge_notes='ok')
    log_action(staff=doctor, action='note_added', discharge=record)
    trail = audit_trail(record)
    assert [r['action'] for r in trail] == ['discharge_initiated', 'note_added']
    assert trail[0]['staffName'] == 'Dr. Grey'


def test_transition_is_broadcast_on_commit(doctor, patient, admission, monkeypatch, django_capture_on_commit_callbacks):
    sent = []
    monkeypatch.setattr(notify, '_send', sent.append)
    with django_capture_on_commit_callbacks(execute=True):
        record = initiate_discharge(doctor, patient_id=patient.id, admission_id=admission.id,
                                    discharge_notes='ok')
    assert sent == [{
        'type': 'discharge.updated',
        'dischargeId': record.id,
        'action': 'discharge_initiated',
        'state': 'discharged_no_billing',
    }]


def test_rolled_back_stage_is_not_broadcast(doctor, patient, admission, monkeypatch,
                                            django_capture_on_commit_callbacks):
    real = discharge_service.broadcast_transition

    def broadcast_then_fail(*args, **kwargs):
        real(*args, **kwargs)
        raise RuntimeError('lost connection')

    sent = []
    monkeypatch.setattr(notify, '_send', sent.append)
    monkeypatch.setattr(discharge_service, 'broadcast_transition', broadcast_then_fail)
    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        with pytest.raises(RuntimeError):
            initiate_discharge(doctor, patient_id=patient.id, admission_id=admission.id, discharge_notes='ok')
    assert callbacks == []
    assert sent == []
    assert DischargeAudit.objects.count() == 0
