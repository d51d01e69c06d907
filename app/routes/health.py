"""
Health check endpoints for monitoring and load balancers
"""
from flask import Blueprint, current_app, jsonify
from app.extensions import db, limiter
from app.models.base import utcnow, isoformat
import logging

logger = logging.getLogger(__name__)

health_bp = Blueprint('health', __name__, url_prefix='/health')


@health_bp.route('', methods=['GET'])
@limiter.exempt
def health_check():
    """Basic health check - no database connection"""
    return jsonify({
        'status': 'OK',
        'timestamp': isoformat(utcnow()),
        'service': current_app.config.get('SERVICE_NAME', 'clinic-frontdesk')
    }), 200


@health_bp.route('/ready', methods=['GET'])
@limiter.exempt
def readiness_check():
    """Readiness check - includes database connection"""
    try:
        db.session.execute(db.text('SELECT 1'))
        db_status = 'connected'
    except Exception as e:
        db.session.rollback()
        logger.error(f"Readiness check failed: {e}")
        db_status = 'unavailable'

    return jsonify({
        'status': 'ready' if db_status == 'connected' else 'not_ready',
        'database': db_status,
        'timestamp': isoformat(utcnow())
    }), 200 if db_status == 'connected' else 503
