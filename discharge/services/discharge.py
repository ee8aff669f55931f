"""Discharge stage: a doctor closes an active admission and opens a discharge case."""
import logging

import bleach
from django.db import IntegrityError, transaction
from django.utils import timezone

from discharge.exceptions import Conflict, InvalidInput, NotFound
from discharge.models import Admission, DischargeAudit, DischargeRecord, Patient
from discharge.roles import DOCTOR_ROLES, StaffPrincipal
from discharge.services.audit import log_action, require_role
from discharge.services.notify import broadcast_transition

logger = logging.getLogger(__name__)

ALLOWED_ROLES = DOCTOR_ROLES
OPERATION = 'initiate_discharge'


def initiate_discharge(staff: StaffPrincipal, *, patient_id: int, admission_id: int,
                       discharge_notes: str, using: str = 'default') -> DischargeRecord:
    require_role(staff, ALLOWED_ROLES, operation=OPERATION, using=using)

    notes = bleach.clean((discharge_notes or '').strip(), strip=True)
    if not notes:
        raise InvalidInput('Discharge notes are required')

    patient = Patient.objects.using(using).filter(id=patient_id).first()
    if patient is None:
        raise NotFound('Patient not found')
    admission = Admission.objects.using(using).filter(id=admission_id, patient_id=patient.id).first()
    if admission is None:
        raise NotFound('Admission not found for this patient')
    if admission.status != Admission.STATUS_ACTIVE:
        raise Conflict('Patient is not currently admitted')

    now = timezone.now()
    try:
        with transaction.atomic(using=using):
            record = DischargeRecord.objects.using(using).create(
                patient=patient,
                doctor_id=staff.staff_id,
                admission=admission,
                status=DischargeRecord.STATUS_MEDICAL_COMPLETE,
                discharge_notes=notes,
                discharge_date=now,
            )
            # Compare-and-set so a concurrent discharge of the same admission loses.
            closed = Admission.objects.using(using).filter(
                id=admission.id, status=Admission.STATUS_ACTIVE
            ).update(status=Admission.STATUS_DISCHARGED, discharge_date=now)
            if not closed:
                raise Conflict('Patient is not currently admitted')
            log_action(
                staff=staff,
                action=DischargeAudit.ACTION_DISCHARGE_INITIATED,
                discharge=record,
                details={'patientId': patient.id, 'admissionId': admission.id, 'dischargeNotes': notes},
                using=using,
            )
            broadcast_transition(record.id, DischargeAudit.ACTION_DISCHARGE_INITIATED,
                                 DischargeRecord.STATE_DISCHARGED_NO_BILLING, using=using)
    except IntegrityError as exc:
        if DischargeRecord.objects.using(using).filter(admission_id=admission.id).first() is None:
            raise
        logger.warning('discharge of admission %s rejected: %s', admission.id, exc)
        raise Conflict('Patient is not currently admitted') from exc

    logger.info('discharge %s opened by doctor %s for admission %s', record.id, staff.staff_id, admission.id)
    return record


def format_discharge(record: DischargeRecord) -> dict:
    return {
        'id': record.id,
        'patientId': record.patient_id,
        'doctorId': record.doctor_id,
        'admissionId': record.admission_id,
        'status': record.status,
        'dischargeNotes': record.discharge_notes,
        'dischargeDate': record.discharge_date.isoformat(),
        'createdAt': record.created_at.isoformat(),
        'updatedAt': record.updated_at.isoformat(),
    }
