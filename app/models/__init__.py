from .user import User, DOCTOR, RECEPTIONIST, STAFF_ROLES
from .patient import Patient, BLOOD_GROUPS
from .visit import Visit, VisitStatus
from .counter import Counter, TOKEN_COUNTER
from .audit_log import AuditLog

__all__ = [
    "User", "DOCTOR", "RECEPTIONIST", "STAFF_ROLES",
    "Patient", "BLOOD_GROUPS",
    "Visit", "VisitStatus",
    "Counter", "TOKEN_COUNTER",
    "AuditLog",
]
