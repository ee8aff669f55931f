import logging
from typing import Any, Dict, Iterable, Optional

from discharge.exceptions import AuthorizationDenied
from discharge.models import DischargeAudit, DischargeRecord
from discharge.roles import StaffPrincipal

logger = logging.getLogger(__name__)


def log_action(*, staff: StaffPrincipal, action: str, discharge: Optional[DischargeRecord] = None,
               details: Optional[Dict[str, Any]] = None, using: str = 'default') -> DischargeAudit:
    """Append one audit row.  Call inside the stage's transaction."""
    return DischargeAudit.objects.using(using).create(
        discharge=discharge,
        action=action,
        staff_id=staff.staff_id,
        staff_name=staff.display_name,
        staff_role=staff.role_label,
        details=details or {},
        ip_address=staff.ip_address,
        user_agent=staff.user_agent,
    )


def require_role(staff: StaffPrincipal, allowed: Iterable, *, operation: str, using: str = 'default') -> None:
    """Raise AuthorizationDenied unless ``staff`` holds one of ``allowed``.

    Denials are written to the audit trail on their own, outside any stage
    transaction, so they survive the rejected request.
    """
    allowed = frozenset(allowed)
    if staff.has_role(allowed):
        return
    required = sorted(r.value for r in allowed)
    log_action(
        staff=staff,
        action=DischargeAudit.ACTION_AUTHORIZATION_DENIED,
        details={'operation': operation, 'requiredRoles': required},
        using=using,
    )
    logger.warning('denied %s for staff %s with role %r', operation, staff.staff_id, staff.raw_role)
    raise AuthorizationDenied(f"Only {' or '.join(required)} staff may perform {operation}")


def audit_trail(discharge: DischargeRecord, *, using: str = 'default') -> list[dict]:
    rows = DischargeAudit.objects.using(using).filter(discharge=discharge).order_by('created_at', 'id')
    return [format_audit(r) for r in rows]


def format_audit(row: DischargeAudit) -> dict:
    return {
        'id': row.id,
        'dischargeId': row.discharge_id,
        'action': row.action,
        'staffId': row.staff_id,
        'staffName': row.staff_name,
        'staffRole': row.staff_role,
        'details': row.details,
        'ipAddress': row.ip_address,
        'userAgent': row.user_agent,
        'createdAt': row.created_at.isoformat(),
    }
