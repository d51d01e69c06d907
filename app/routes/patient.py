"""
Patient API Routes
Registration (with token) and patient lookup
"""
from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, current_user

from app.errors import ValidationError
from app.models import RECEPTIONIST
from app.schemas import PatientCreate
from app.services import patient_service
from app.utils.decorators import require_role, require_staff
from app.utils.audit import log_audit

patient_bp = Blueprint('patient', __name__, url_prefix='/api/patients')


@patient_bp.route('', methods=['POST'])
@jwt_required()
@require_role(RECEPTIONIST)
def register_patient():
    """
    Register a new patient and issue a visit token
    Access: receptionist
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Request body must be JSON')

    payload = PatientCreate.model_validate(data)
    patient, visit = patient_service.register_patient(payload, created_by=current_user.id)

    log_audit('patient', 'register', user_id=current_user.id, entity_id=patient.id,
              details={'visit_id': visit.id, 'token': visit.token})

    return jsonify({
        'success': True,
        'message': 'Patient registered successfully',
        'patientId': patient.id,
        'visitId': visit.id,
        'token': visit.token,
        'patient': patient.to_dict()
    }), 201


@patient_bp.route('', methods=['GET'])
@jwt_required()
@require_staff
def list_patients():
    """List all patients, newest first"""
    patients = patient_service.list_patients()
    return jsonify({
        'success': True,
        'patients': [p.to_dict() for p in patients]
    }), 200


@patient_bp.route('/search', methods=['GET'])
@jwt_required()
@require_staff
def search_patients():
    """
    Search patients by name or contact prefix
    Query params: query (at least 2 characters)
    """
    patients = patient_service.search_patients(request.args.get('query', '', type=str))
    return jsonify({
        'success': True,
        'patients': [p.to_dict() for p in patients]
    }), 200


@patient_bp.route('/<patient_id>', methods=['GET'])
@jwt_required()
@require_staff
def get_patient(patient_id):
    patient = patient_service.get_patient(patient_id)
    return jsonify({
        'success': True,
        'patient': patient.to_dict()
    }), 200


@patient_bp.route('/<patient_id>/history', methods=['GET'])
@jwt_required()
@require_staff
def get_patient_history(patient_id):
    """Patient details plus every visit, newest first"""
    patient, visits = patient_service.patient_history(patient_id)
    return jsonify({
        'success': True,
        'patient': patient.to_dict(),
        'visits': [v.to_dict() for v in visits]
    }), 200
