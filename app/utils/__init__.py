from .decorators import require_role, require_staff

from .audit import log_audit

__all__ = [
    # Decorators
    "require_role",
    "require_staff",
    # Audit
    "log_audit",
]
