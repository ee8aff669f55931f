from django.conf import settings
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from ..models import Bed
from ..permissions import IsStaff
from ..serializers.pipeline import BedListQuerySerializer


@api_view(['GET'])
@permission_classes([IsStaff])
def list_beds(request):
    """List beds ordered by ward, optionally filtered by status."""
    q = BedListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = Bed.objects.using(settings.DISCHARGE_DATABASE)
    if q.validated_data.get('status'):
        qs = qs.filter(status=q.validated_data['status'])
    data = [{
        'id': b.id,
        'ward': b.ward,
        'bedNumber': b.bed_number,
        'status': b.status,
    } for b in qs.order_by('ward', 'bed_number')]
    return Response({'ok': True, 'data': data})
