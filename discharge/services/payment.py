"""Payment stage: an administrator settles a bill, fully or partially, once."""
import logging
import math
from typing import Optional

import bleach
from django.db import IntegrityError, transaction

from discharge.exceptions import Conflict, InvalidInput, NotFound
from discharge.models import BillingRecord, DischargeAudit, DischargeRecord, PaymentRecord
from discharge.roles import ADMIN_ROLES, StaffPrincipal
from discharge.services.audit import log_action, require_role
from discharge.services.notify import broadcast_transition

logger = logging.getLogger(__name__)

ALLOWED_ROLES = ADMIN_ROLES
OPERATION = 'process_payment'
PAYMENT_METHODS = tuple(m for m, _ in PaymentRecord.METHOD_CHOICES)


def process_payment(staff: StaffPrincipal, *, billing_id: int, payment_amount: float,
                    payment_method: str, notes: Optional[str] = None,
                    using: str = 'default') -> PaymentRecord:
    require_role(staff, ALLOWED_ROLES, operation=OPERATION, using=using)

    payment_amount = float(payment_amount)
    if not math.isfinite(payment_amount):
        raise InvalidInput('Payment amount must be a finite number')
    if payment_amount < 0:
        raise InvalidInput('Payment amount cannot be negative')
    if payment_method not in PAYMENT_METHODS:
        raise InvalidInput(f"Payment method must be one of {', '.join(PAYMENT_METHODS)}")

    billing = BillingRecord.objects.using(using).filter(id=billing_id).first()
    if billing is None:
        raise NotFound('Billing record not found')
    if payment_amount > billing.total_amount:
        raise InvalidInput('Payment amount exceeds total bill')
    if PaymentRecord.objects.using(using).filter(billing_id=billing.id).exists():
        raise Conflict('Payment already processed for this billing')

    remaining_balance = billing.total_amount - payment_amount
    notes = bleach.clean((notes or '').strip(), strip=True)
    try:
        with transaction.atomic(using=using):
            payment = PaymentRecord.objects.using(using).create(
                billing=billing,
                payment_amount=payment_amount,
                payment_method=payment_method,
                payment_status=PaymentRecord.STATUS_COMPLETE,
                remaining_balance=remaining_balance,
                admin_id=staff.staff_id,
                notes=notes,
            )
            log_action(
                staff=staff,
                action=DischargeAudit.ACTION_PAYMENT_PROCESSED,
                discharge=DischargeRecord.objects.using(using).get(id=billing.discharge_id),
                details={
                    'billingId': billing.id,
                    'paymentAmount': payment_amount,
                    'paymentMethod': payment_method,
                    'remainingBalance': remaining_balance,
                },
                using=using,
            )
            broadcast_transition(billing.discharge_id, DischargeAudit.ACTION_PAYMENT_PROCESSED,
                                 DischargeRecord.STATE_PAID_BED_HELD, using=using)
    except IntegrityError as exc:
        if PaymentRecord.objects.using(using).filter(billing_id=billing.id).first() is None:
            raise
        logger.warning('payment for billing %s rejected: %s', billing.id, exc)
        raise Conflict('Payment already processed for this billing') from exc

    logger.info('payment %s for billing %s: paid %s, remaining %s',
                payment.id, billing.id, payment_amount, remaining_balance)
    return payment


def format_payment(payment: PaymentRecord) -> dict:
    return {
        'id': payment.id,
        'billingId': payment.billing_id,
        'paymentAmount': payment.payment_amount,
        'paymentMethod': payment.payment_method,
        'paymentStatus': payment.payment_status,
        'remainingBalance': payment.remaining_balance,
        'adminId': payment.admin_id,
        'notes': payment.notes,
        'createdAt': payment.created_at.isoformat(),
    }
