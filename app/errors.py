"""
Error taxonomy and the Flask handlers that turn it into JSON responses.

Services raise these exceptions; routes never build error responses by hand.
"""
import logging

from flask import jsonify
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.exc import OperationalError
from werkzeug.exceptions import HTTPException

from app.extensions import db

logger = logging.getLogger(__name__)


class ClinicError(Exception):
    """Base class for errors that are reported to the caller"""
    status_code = 500
    message = 'Internal server error'

    def __init__(self, message=None, status_code=None, details=None):
        self.message = message or self.message
        if status_code is not None:
            self.status_code = status_code
        self.details = details
        super().__init__(self.message)

    def to_dict(self):
        body = {'success': False, 'error': self.message}
        if self.details:
            body['details'] = self.details
        return body


class ValidationError(ClinicError):
    """Malformed or missing input"""
    status_code = 400
    message = 'Invalid request'


class NotFoundError(ClinicError):
    status_code = 404
    message = 'Not found'


class ConflictError(ClinicError):
    """The sub-record is already attached"""
    status_code = 409
    message = 'Conflict'


class PreconditionError(ClinicError):
    """Transition attempted out of order (billing before prescription)"""
    status_code = 400
    message = 'Precondition failed'


class AuthError(ClinicError):
    status_code = 401
    message = 'Authentication required'


class RoleError(ClinicError):
    status_code = 403
    message = 'Insufficient permissions'


def format_schema_errors(exc):
    """Flatten pydantic errors into (first message, details list)"""
    details = []
    for err in exc.errors():
        field = '.'.join(str(part) for part in err.get('loc', ()))
        details.append({'field': field, 'message': err.get('msg')})
    if not details:
        return 'Invalid request', details
    first = details[0]
    message = f"{first['field']}: {first['message']}" if first['field'] else first['message']
    return message, details


def register_error_handlers(app):
    @app.errorhandler(ClinicError)
    def handle_clinic_error(error):
        db.session.rollback()
        if error.status_code >= 500:
            logger.error(f"{error.__class__.__name__}: {error.message}", exc_info=True)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(SchemaValidationError)
    def handle_schema_error(error):
        message, details = format_schema_errors(error)
        logger.warning(f"Validation failed: {message}")
        return jsonify({
            'success': False,
            'error': message,
            'details': details
        }), 400

    @app.errorhandler(OperationalError)
    def handle_database_unavailable(error):
        db.session.rollback()
        logger.error(f"Database unavailable: {error}", exc_info=True)
        return jsonify({
            'success': False,
            'error': 'Service temporarily unavailable. Please retry.',
            'retryable': True
        }), 503

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({
            'success': False,
            'error': 'Route not found'
        }), 404

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        return jsonify({
            'success': False,
            'error': error.description or error.name
        }), error.code

    @app.errorhandler(Exception)
    def handle_exception(error):
        db.session.rollback()
        logger.error(f"Unhandled exception: {error}", exc_info=True)
        return jsonify({
            'success': False,
            'error': 'Internal server error'
        }), 500
