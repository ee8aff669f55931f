"""
Header based staff authentication.

Staff identity is verified by an upstream layer (gateway / SSO) which
forwards the caller as ``X-Staff-Id``, ``X-Staff-Role`` and optionally
``X-Staff-Name``.  This class trusts those headers, parses them into a
:class:`~discharge.roles.StaffPrincipal` and leaves role enforcement to
the pipeline services.  Requests without the headers stay anonymous so
that permission classes can answer 401.
"""
from __future__ import annotations

from rest_framework import authentication, exceptions

from .roles import StaffPrincipal, StaffRole


class StaffHeaderAuthentication(authentication.BaseAuthentication):
    keyword = 'Staff'

    def authenticate(self, request):
        raw_id = (request.headers.get('X-Staff-Id') or '').strip()
        raw_role = (request.headers.get('X-Staff-Role') or '').strip()
        if not raw_id and not raw_role:
            return None
        if not raw_id or not raw_role:
            raise exceptions.AuthenticationFailed('Both X-Staff-Id and X-Staff-Role are required')
        try:
            staff_id = int(raw_id)
        except ValueError:
            raise exceptions.AuthenticationFailed('X-Staff-Id must be a positive integer')
        if staff_id <= 0:
            raise exceptions.AuthenticationFailed('X-Staff-Id must be a positive integer')

        principal = StaffPrincipal(
            staff_id=staff_id,
            role=StaffRole.parse(raw_role),
            raw_role=raw_role.lower(),
            name=(request.headers.get('X-Staff-Name') or '').strip()[:255],
            ip_address=_client_ip(request),
            user_agent=(request.headers.get('User-Agent') or '')[:512],
        )
        return principal, None

    def authenticate_header(self, request):
        return f'{self.keyword} realm="api"'


def _client_ip(request):
    forwarded = request.META.get('HTTP_X_FORWARDED_FOR', '')
    if forwarded:
        return forwarded.split(',')[0].strip() or None
    return request.META.get('REMOTE_ADDR') or None
