from django.conf import settings
from rest_framework import serializers

from discharge.services.payment import PAYMENT_METHODS


class DoctorDischargeSerializer(serializers.Serializer):
    patientId = serializers.IntegerField(min_value=1)
    admissionId = serializers.IntegerField(min_value=1)
    dischargeNotes = serializers.CharField(max_length=settings.DISCHARGE_NOTES_MAX_LENGTH)

    def validate_dischargeNotes(self, v):
        v = (v or '').strip()
        if not v:
            raise serializers.ValidationError('Discharge notes are required')
        return v


class BillingItemSerializer(serializers.Serializer):
    description = serializers.CharField(max_length=255)
    amount = serializers.FloatField(min_value=0)
    quantity = serializers.IntegerField(min_value=1, required=False, default=1)
    itemType = serializers.CharField(max_length=50, required=False, allow_blank=True, default='')


class BillingSerializer(serializers.Serializer):
    dischargeId = serializers.IntegerField(min_value=1)
    subtotal = serializers.FloatField(min_value=0)
    discountPercentage = serializers.FloatField(min_value=0, max_value=100, required=False, default=0)
    items = BillingItemSerializer(many=True, required=False)


class PaymentSerializer(serializers.Serializer):
    billingId = serializers.IntegerField(min_value=1)
    paymentAmount = serializers.FloatField(min_value=0)
    paymentMethod = serializers.ChoiceField(choices=list(PAYMENT_METHODS))
    notes = serializers.CharField(max_length=2000, required=False, allow_blank=True)


class BedReleaseSerializer(serializers.Serializer):
    dischargeId = serializers.IntegerField(min_value=1)
    bedId = serializers.IntegerField(min_value=1)


class BedListQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=['available', 'occupied'], required=False)
