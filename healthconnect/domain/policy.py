"""
Authorization policy.

One decision table shared by every handler that reads or mutates an
appointment or a medical record. It has no I/O and never raises: callers get
a boolean and turn a denial into a 403 themselves.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..core.security import UserRole


class Action(str, Enum):
    READ = "read"
    UPDATE = "update"
    CANCEL = "cancel"
    DELETE = "delete"
    CREATE_APPOINTMENT = "create_appointment"
    CREATE_MEDICAL_RECORD = "create_medical_record"


# Actions decided purely by whether the principal is one of the owners
OWNER_ACTIONS = frozenset({Action.READ, Action.UPDATE, Action.CANCEL, Action.DELETE})


@dataclass(frozen=True)
class Principal:
    """The authenticated actor of a single request."""
    id: int
    role: UserRole

    @classmethod
    def from_user(cls, user) -> "Principal":
        return cls(id=user.id, role=UserRole(user.role))


@dataclass(frozen=True)
class ResourceOwners:
    """
    Identities attached to a resource for an access decision.

    Appointments and medical-record reads pass both ids; medical-record
    writes pass only ``doctor_id`` so the patient does not count as an owner.
    """
    patient_id: Optional[int] = None
    doctor_id: Optional[int] = None

    def __contains__(self, user_id) -> bool:
        if user_id is None:
            return False
        return user_id in (self.patient_id, self.doctor_id)


NO_OWNERS = ResourceOwners()


def can_access(principal: Principal, owners: ResourceOwners, action: Action) -> bool:
    """Decide whether ``principal`` may perform ``action`` on a resource owned by ``owners``."""
    if principal.role == UserRole.ADMIN:
        return True

    if action == Action.CREATE_MEDICAL_RECORD:
        return principal.role == UserRole.DOCTOR

    if action == Action.CREATE_APPOINTMENT:
        return principal.role == UserRole.PATIENT

    if action in OWNER_ACTIONS:
        return principal.id in owners

    return False
