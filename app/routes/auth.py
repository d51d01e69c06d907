from flask import Blueprint, request, jsonify
from flask_jwt_extended import create_access_token, jwt_required, current_user

from app.errors import AuthError, ValidationError
from app.extensions import db, limiter
from app.models import User
from app.models.base import utcnow
from app.schemas import LoginRequest
from app.utils.decorators import require_staff
import logging

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__, url_prefix='/api/auth')


@auth_bp.route('/login', methods=['POST'])
@limiter.limit('20 per minute')
def login():
    """Login endpoint - verifies staff credentials and returns a bearer token"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Request body must be JSON')

    credentials = LoginRequest.model_validate(data)
    user = User.query.filter_by(username=credentials.username).first()

    if not user or not user.check_password(credentials.password):
        logger.warning(f"Failed login for username '{credentials.username}'")
        raise AuthError('Invalid username or password')

    if not user.is_active:
        logger.warning(f"Login attempt on deactivated account {user.id}")
        raise AuthError('Account is deactivated', status_code=403)

    # Update login tracking
    user.last_login = utcnow()
    user.login_count = (user.login_count or 0) + 1
    db.session.commit()

    # Identity must be a string for the JWT "sub" claim. The role travels as a
    # claim for clients only; authorization always reads it from the user row.
    access_token = create_access_token(
        identity=str(user.id),
        additional_claims={'role': user.role},
    )

    logger.info(f"User {user.id} logged in ({user.role})")
    return jsonify({
        'success': True,
        'accessToken': access_token,
        'tokenType': 'bearer',
        'user': user.to_dict()
    }), 200


@auth_bp.route('/me', methods=['GET'])
@jwt_required()
@require_staff
def get_current_user():
    """Profile of the authenticated staff member"""
    return jsonify({
        'success': True,
        'user': current_user.to_dict()
    }), 200
