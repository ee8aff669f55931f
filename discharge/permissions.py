"""
Permission classes for the discharge API.

Only authentication is enforced here.  Which role may run which stage is
decided by the pipeline services so that denied attempts are audited in
one place, whatever surface the call came through.
"""
from rest_framework.permissions import BasePermission

from .roles import ADMIN_ROLES, DOCTOR_ROLES


class IsStaff(BasePermission):
    """Caller presented staff identity headers."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated)


class IsClinicalOrAdmin(BasePermission):
    """Doctors and administrators may read discharge cases."""
    message = 'Only doctors and administrators may view discharge cases'

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated and user.has_role(DOCTOR_ROLES | ADMIN_ROLES))


class IsAdminRole(BasePermission):
    """Allow access only to staff with an administrative role."""
    message = 'Administrator role required'

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated and user.has_role(ADMIN_ROLES))
