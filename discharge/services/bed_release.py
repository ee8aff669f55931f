"""Bed-release stage: frees the bed once the case is billed and paid.  Terminal."""
import logging

from django.db import IntegrityError, transaction
from django.utils import timezone

from discharge.exceptions import Conflict, NotFound
from discharge.models import Bed, BedRelease, BillingRecord, DischargeAudit, DischargeRecord, PaymentRecord
from discharge.roles import ADMIN_ROLES, StaffPrincipal
from discharge.services.audit import log_action, require_role
from discharge.services.notify import broadcast_transition

logger = logging.getLogger(__name__)

ALLOWED_ROLES = ADMIN_ROLES
OPERATION = 'release_bed'


def release_bed(staff: StaffPrincipal, *, discharge_id: int, bed_id: int,
                using: str = 'default') -> BedRelease:
    require_role(staff, ALLOWED_ROLES, operation=OPERATION, using=using)

    discharge = DischargeRecord.objects.using(using).select_related('admission').filter(id=discharge_id).first()
    if discharge is None:
        raise NotFound('Discharge record not found')
    bed = Bed.objects.using(using).filter(id=bed_id).first()
    if bed is None:
        raise NotFound('Bed not found')
    billing = BillingRecord.objects.using(using).filter(discharge_id=discharge.id).first()
    if billing is None:
        raise Conflict('Billing not calculated for this discharge')
    if not PaymentRecord.objects.using(using).filter(billing_id=billing.id).exists():
        raise Conflict('Payment not processed for this billing')
    if BedRelease.objects.using(using).filter(discharge_id=discharge.id).exists():
        raise Conflict('Bed already released for this discharge')

    if discharge.admission.bed_id not in (None, bed.id):
        # Bed choice belongs to the caller; flag it for the ward office.
        logger.warning('discharge %s releases bed %s but the admission held bed %s',
                       discharge.id, bed.id, discharge.admission.bed_id)

    release_date = timezone.now()
    try:
        with transaction.atomic(using=using):
            release = BedRelease.objects.using(using).create(
                discharge=discharge,
                bed=bed,
                patient_id=discharge.patient_id,
                status=BedRelease.STATUS_AVAILABLE,
                release_date=release_date,
                admin_id=staff.staff_id,
            )
            Bed.objects.using(using).filter(id=bed.id).update(status=Bed.STATUS_AVAILABLE)
            log_action(
                staff=staff,
                action=DischargeAudit.ACTION_BED_RELEASED,
                discharge=discharge,
                details={
                    'bedId': bed.id,
                    'patientId': discharge.patient_id,
                    'releaseDate': release_date.isoformat(),
                },
                using=using,
            )
            broadcast_transition(discharge.id, DischargeAudit.ACTION_BED_RELEASED,
                                 DischargeRecord.STATE_COMPLETE, using=using)
    except IntegrityError as exc:
        if BedRelease.objects.using(using).filter(discharge_id=discharge.id).first() is None:
            raise
        logger.warning('bed release for discharge %s rejected: %s', discharge.id, exc)
        raise Conflict('Bed already released for this discharge') from exc

    logger.info('bed %s released for discharge %s by admin %s', bed.id, discharge.id, staff.staff_id)
    return release


def format_release(release: BedRelease) -> dict:
    return {
        'id': release.id,
        'dischargeId': release.discharge_id,
        'bedId': release.bed_id,
        'patientId': release.patient_id,
        'status': release.status,
        'releaseDate': release.release_date.isoformat(),
        'adminId': release.admin_id,
        'createdAt': release.created_at.isoformat(),
    }
