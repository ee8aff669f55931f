"""
Staff roles and the caller identity carried by every pipeline call.

Roles arrive from the upstream authentication layer as free-form strings
("Doctor", "administrator", ...).  They are parsed once, here, into a
closed enumeration; business code never compares raw role strings.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional


class StaffRole(str, enum.Enum):
    DOCTOR = 'doctor'
    ADMIN = 'admin'
    NURSE = 'nurse'
    RECEPTIONIST = 'receptionist'

    @classmethod
    def parse(cls, raw: Optional[str]) -> Optional['StaffRole']:
        """Return the role for ``raw`` or None when it is not recognised."""
        value = (raw or '').strip().lower()
        if not value:
            return None
        value = ROLE_ALIASES.get(value, value)
        try:
            return cls(value)
        except ValueError:
            return None


ROLE_ALIASES = {
    'administrator': StaffRole.ADMIN.value,
}

DOCTOR_ROLES = frozenset({StaffRole.DOCTOR})
ADMIN_ROLES = frozenset({StaffRole.ADMIN})


@dataclass(frozen=True)
class StaffPrincipal:
    """The authenticated caller.

    ``role`` is None when the caller presented a role string that is not
    part of :class:`StaffRole`; ``raw_role`` keeps what was sent so that
    denials can be audited faithfully.
    """
    staff_id: int
    role: Optional[StaffRole]
    raw_role: str
    name: str = ''
    ip_address: Optional[str] = None
    user_agent: str = ''

    # DRF treats request.user as a user object.
    is_authenticated = True
    is_anonymous = False

    @property
    def id(self) -> int:
        return self.staff_id

    @property
    def display_name(self) -> str:
        return self.name or f"Staff {self.staff_id}"

    @property
    def role_label(self) -> str:
        return self.role.value if self.role else self.raw_role

    def has_role(self, allowed) -> bool:
        return self.role is not None and self.role in allowed

    def __str__(self) -> str:
        return f"{self.display_name} ({self.role_label})"
