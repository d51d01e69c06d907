import logging
from functools import wraps

from flask import g
from flask_jwt_extended import current_user

from app.errors import RoleError
from app.models import STAFF_ROLES

logger = logging.getLogger(__name__)


def require_role(*roles):
    """
    Decorator to require specific roles
    Usage: @require_role('doctor', 'receptionist')

    Must be used together with @jwt_required() on the route. The user row is
    loaded once per request by the JWT user lookup and reused here.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            user = current_user
            if user.role not in roles:
                logger.warning(
                    f"Insufficient permissions: user={user.id} role={user.role} required={','.join(roles)}"
                )
                raise RoleError(f'Permission denied. Required roles: {", ".join(roles)}')

            g.user_role = user.role
            return f(*args, **kwargs)
        return decorated_function
    return decorator


def require_staff(f):
    """Either role may call the route"""
    return require_role(*STAFF_ROLES)(f)
