"""
Discharge pipeline endpoints.

One POST endpoint per stage plus read-only views of a discharge case.
Each stage endpoint checks the caller's role before it looks at the body,
so a rejected role always answers 403 whatever was posted.  Errors are
raised by the services and rendered by the unified exception handler.
"""
from __future__ import annotations

from django.conf import settings
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from ..exceptions import NotFound
from ..permissions import IsAdminRole, IsClinicalOrAdmin, IsStaff
from ..serializers.pipeline import (
    BedReleaseSerializer,
    BillingSerializer,
    DoctorDischargeSerializer,
    PaymentSerializer,
)
from ..services import bed_release, billing, discharge, payment
from ..services.audit import require_role
from ..services.pipeline import DischargePipeline


def _pipeline() -> DischargePipeline:
    return DischargePipeline(using=settings.DISCHARGE_DATABASE)


def _created(message: str, data: dict) -> Response:
    return Response({'ok': True, 'message': message, 'data': data}, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsStaff])
def initiate_discharge(request):
    """Doctor completes the medical discharge of an admitted patient."""
    pipeline = _pipeline()
    require_role(request.user, discharge.ALLOWED_ROLES, operation=discharge.OPERATION, using=pipeline.using)
    s = DoctorDischargeSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    record = pipeline.initiate_discharge(
        request.user,
        patient_id=s.validated_data['patientId'],
        admission_id=s.validated_data['admissionId'],
        discharge_notes=s.validated_data['dischargeNotes'],
    )
    return _created('Medical discharge completed successfully', discharge.format_discharge(record))


@api_view(['POST'])
@permission_classes([IsStaff])
def calculate_billing(request):
    pipeline = _pipeline()
    require_role(request.user, billing.ALLOWED_ROLES, operation=billing.OPERATION, using=pipeline.using)
    s = BillingSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    record = pipeline.calculate_billing(
        request.user,
        discharge_id=s.validated_data['dischargeId'],
        subtotal=s.validated_data['subtotal'],
        discount_percentage=s.validated_data.get('discountPercentage', 0),
        items=s.validated_data.get('items'),
    )
    return _created('Billing calculated successfully', billing.format_billing(record))


@api_view(['POST'])
@permission_classes([IsStaff])
def process_payment(request):
    pipeline = _pipeline()
    require_role(request.user, payment.ALLOWED_ROLES, operation=payment.OPERATION, using=pipeline.using)
    s = PaymentSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    record = pipeline.process_payment(
        request.user,
        billing_id=s.validated_data['billingId'],
        payment_amount=s.validated_data['paymentAmount'],
        payment_method=s.validated_data['paymentMethod'],
        notes=s.validated_data.get('notes'),
    )
    return _created('Payment processed successfully', payment.format_payment(record))


@api_view(['POST'])
@permission_classes([IsStaff])
def release_bed(request):
    pipeline = _pipeline()
    require_role(request.user, bed_release.ALLOWED_ROLES, operation=bed_release.OPERATION, using=pipeline.using)
    s = BedReleaseSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    record = pipeline.release_bed(
        request.user,
        discharge_id=s.validated_data['dischargeId'],
        bed_id=s.validated_data['bedId'],
    )
    return _created('Bed released successfully', bed_release.format_release(record))


@api_view(['GET'])
@permission_classes([IsStaff, IsClinicalOrAdmin])
def discharge_detail(request, pk: int):
    """Return the discharge case with its billing, payment, bed release and state."""
    pipeline = _pipeline()
    record = pipeline.get_discharge(pk)
    if record is None:
        raise NotFound('Discharge record not found')
    return Response({'ok': True, 'data': pipeline.case_summary(record)})


@api_view(['GET'])
@permission_classes([IsStaff, IsAdminRole])
def discharge_audit(request, pk: int):
    pipeline = _pipeline()
    record = pipeline.get_discharge(pk)
    if record is None:
        raise NotFound('Discharge record not found')
    return Response({'ok': True, 'data': pipeline.audit_trail(record)})
