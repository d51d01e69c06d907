from .auth import auth_bp
from .patient import patient_bp
from .prescription import prescription_bp
from .billing import billing_bp
from .token import token_bp
from .health import health_bp

__all__ = ['auth_bp', 'patient_bp', 'prescription_bp', 'billing_bp', 'token_bp', 'health_bp']
