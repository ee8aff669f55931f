from django.conf import settings
from django.db import DatabaseError, connections
from django.http import JsonResponse


def healthz(request):
    try:
        with connections[settings.DISCHARGE_DATABASE].cursor() as c:
            c.execute('SELECT 1')
            row = c.fetchone()
        return JsonResponse({'ok': True, 'db': bool(row and row[0] == 1)})
    except DatabaseError as e:
        return JsonResponse({'ok': False, 'error': str(e)}, status=500)
