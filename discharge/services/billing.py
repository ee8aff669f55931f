"""Billing stage: an administrator prices a discharge case."""
import logging
import math
from typing import Iterable, Optional, Tuple

import bleach
from django.db import IntegrityError, transaction

from discharge.exceptions import Conflict, InvalidInput, NotFound
from discharge.models import BillingItem, BillingRecord, DischargeAudit, DischargeRecord
from discharge.roles import ADMIN_ROLES, StaffPrincipal
from discharge.services.audit import log_action, require_role
from discharge.services.notify import broadcast_transition

logger = logging.getLogger(__name__)

ALLOWED_ROLES = ADMIN_ROLES
OPERATION = 'calculate_billing'


def compute_totals(subtotal: float, discount_percentage: float) -> Tuple[float, float]:
    """Return ``(discount_amount, total_amount)``.

    Plain float arithmetic, no rounding; callers comparing currency values
    should round or compare within a tolerance.
    """
    discount_amount = subtotal * discount_percentage / 100
    return discount_amount, subtotal - discount_amount


def calculate_billing(staff: StaffPrincipal, *, discharge_id: int, subtotal: float,
                      discount_percentage: float = 0, items: Optional[Iterable[dict]] = None,
                      using: str = 'default') -> BillingRecord:
    require_role(staff, ALLOWED_ROLES, operation=OPERATION, using=using)

    subtotal = float(subtotal)
    discount_percentage = float(discount_percentage or 0)
    if not (math.isfinite(subtotal) and math.isfinite(discount_percentage)):
        raise InvalidInput('Subtotal and discount percentage must be finite numbers')
    if subtotal < 0:
        raise InvalidInput('Subtotal cannot be negative')
    if not 0 <= discount_percentage <= 100:
        raise InvalidInput('Discount percentage must be between 0 and 100')
    items = list(items or [])
    for item in items:
        amount = float(item['amount'])
        if not math.isfinite(amount) or amount < 0:
            raise InvalidInput('Billing item amounts must be finite and non-negative')

    discharge = DischargeRecord.objects.using(using).filter(id=discharge_id).first()
    if discharge is None:
        raise NotFound('Discharge record not found')
    if BillingRecord.objects.using(using).filter(discharge_id=discharge.id).exists():
        raise Conflict('Billing already calculated for this discharge')

    discount_amount, total_amount = compute_totals(subtotal, discount_percentage)
    try:
        with transaction.atomic(using=using):
            billing = BillingRecord.objects.using(using).create(
                discharge=discharge,
                patient_id=discharge.patient_id,
                subtotal=subtotal,
                discount_percentage=discount_percentage,
                discount_amount=discount_amount,
                total_amount=total_amount,
                status=BillingRecord.STATUS_COMPLETE,
            )
            BillingItem.objects.using(using).bulk_create([
                BillingItem(
                    billing=billing,
                    description=bleach.clean(str(item['description']).strip(), strip=True),
                    amount=float(item['amount']),
                    quantity=int(item.get('quantity') or 1),
                    item_type=item.get('itemType') or '',
                )
                for item in items
            ])
            log_action(
                staff=staff,
                action=DischargeAudit.ACTION_BILLING_CALCULATED,
                discharge=discharge,
                details={
                    'subtotal': subtotal,
                    'discountPercentage': discount_percentage,
                    'discountAmount': discount_amount,
                    'totalAmount': total_amount,
                },
                using=using,
            )
            broadcast_transition(discharge.id, DischargeAudit.ACTION_BILLING_CALCULATED,
                                 DischargeRecord.STATE_BILLED_UNPAID, using=using)
    except IntegrityError as exc:
        if BillingRecord.objects.using(using).filter(discharge_id=discharge.id).first() is None:
            raise
        logger.warning('billing for discharge %s rejected: %s', discharge.id, exc)
        raise Conflict('Billing already calculated for this discharge') from exc

    logger.info('billing %s for discharge %s: total %s', billing.id, discharge.id, total_amount)
    return billing


def format_billing(billing: BillingRecord) -> dict:
    return {
        'id': billing.id,
        'dischargeId': billing.discharge_id,
        'patientId': billing.patient_id,
        'subtotal': billing.subtotal,
        'discountPercentage': billing.discount_percentage,
        'discountAmount': billing.discount_amount,
        'totalAmount': billing.total_amount,
        'status': billing.status,
        'createdAt': billing.created_at.isoformat(),
        'items': [{
            'id': i.id,
            'description': i.description,
            'amount': i.amount,
            'quantity': i.quantity,
            'itemType': i.item_type,
        } for i in billing.items.order_by('id')],
    }
