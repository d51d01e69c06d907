from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from app.services import token_service
from app.utils.decorators import require_staff

token_bp = Blueprint('token', __name__, url_prefix='/api/tokens')


@token_bp.route('/current', methods=['GET'])
@jwt_required()
@require_staff
def get_current_token():
    """Last issued token, for the waiting-room display"""
    return jsonify({
        'success': True,
        'current': token_service.current_token()
    }), 200
