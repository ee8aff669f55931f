from rest_framework.test import APIClient

from discharge.roles import StaffPrincipal, StaffRole


def staff(staff_id=1, role='doctor', name=''):
    return StaffPrincipal(staff_id=staff_id, role=StaffRole.parse(role), raw_role=role, name=name)


def as_staff(staff_id, role, name=None) -> APIClient:
    """Return an APIClient that sends the given staff identity headers."""
    client = APIClient()
    headers = {'HTTP_X_STAFF_ID': str(staff_id), 'HTTP_X_STAFF_ROLE': role}
    if name:
        headers['HTTP_X_STAFF_NAME'] = name
    client.credentials(**headers)
    return client


def miss_existence_check(monkeypatch, model):
    """Make ``exists()`` on ``model`` querysets answer False, as if a concurrent
    request inserted its row after our check ran."""
    from django.db.models import QuerySet

    original = QuerySet.exists

    def exists(qs):
        if qs.model is model:
            return False
        return original(qs)

    monkeypatch.setattr(QuerySet, 'exists', exists)
