from flask import Flask, jsonify
from .extensions import db, migrate, bcrypt, jwt, limiter
import logging
import os

logger = logging.getLogger(__name__)


def create_app(config_name=None):
    """Create Flask application factory"""
    app = Flask(__name__)

    # Load configuration
    if config_name:
        from app.config import config
        config_class = config.get(config_name, config['default'])
    else:
        from app.config import get_config
        config_class = get_config()
    if hasattr(config_class, 'validate'):
        config_class.validate()
    app.config.from_object(config_class)

    # Ensure production mode if FLASK_ENV is production
    if os.getenv('FLASK_ENV') == 'production':
        app.config['DEBUG'] = False
        app.config['TESTING'] = False

    from app.utils.logging_config import configure_logging
    configure_logging(app)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    bcrypt.init_app(app)
    jwt.init_app(app)
    limiter.init_app(app)

    from app.utils.cors import init_cors
    init_cors(app)

    from app.middleware import setup_middleware
    setup_middleware(app)

    _register_jwt_callbacks()

    from app.errors import register_error_handlers
    register_error_handlers(app)

    from app.commands import register_commands
    register_commands(app)

    with app.app_context():
        from . import models  # noqa: F401  register tables with SQLAlchemy

        from .routes import auth_bp, patient_bp, prescription_bp, billing_bp, token_bp, health_bp
        app.register_blueprint(health_bp)  # Register health check first
        app.register_blueprint(auth_bp)
        app.register_blueprint(patient_bp)
        app.register_blueprint(prescription_bp)
        app.register_blueprint(billing_bp)
        app.register_blueprint(token_bp)

    return app


def _register_jwt_callbacks():
    """JSON bodies for bearer-token failures, and the per-request user lookup"""

    @jwt.user_lookup_loader
    def load_user(jwt_header, jwt_data):
        from app.models import User
        try:
            user_id = int(jwt_data['sub'])
        except (KeyError, TypeError, ValueError):
            return None
        user = db.session.get(User, user_id)
        if user is None or not user.is_active:
            return None
        return user

    @jwt.user_lookup_error_loader
    def user_lookup_error(jwt_header, jwt_data):
        logger.warning(f"User profile not found or inactive for identity {jwt_data.get('sub')}")
        return jsonify({
            'success': False,
            'error': 'User role not found'
        }), 403

    @jwt.unauthorized_loader
    def missing_token(reason):
        logger.warning(f"No token provided in request: {reason}")
        return jsonify({
            'success': False,
            'error': 'Access token required'
        }), 401

    @jwt.invalid_token_loader
    def invalid_token(reason):
        logger.warning(f"Token authentication failed: {reason}")
        return jsonify({
            'success': False,
            'error': 'Invalid or expired token'
        }), 403

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_data):
        logger.warning(f"Expired token for identity {jwt_data.get('sub')}")
        return jsonify({
            'success': False,
            'error': 'Invalid or expired token'
        }), 403
