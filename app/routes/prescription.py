"""
Prescription API Routes
Doctor attaches prescriptions to visits; staff read them back
"""
from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, current_user

from app.errors import ValidationError
from app.models import DOCTOR
from app.models.base import isoformat
from app.schemas import PrescriptionCreate
from app.services import visit_service
from app.utils.decorators import require_role, require_staff
from app.utils.audit import log_audit

prescription_bp = Blueprint("prescription", __name__, url_prefix="/api/prescriptions")


@prescription_bp.route("", methods=["POST"])
@jwt_required()
@require_role(DOCTOR)
def add_prescription():
    """
    Attach a prescription to a visit

    Body:
        visitId: Visit ID (required)
        medicines: list of {name, dosage, instructions}, at least one (required)
        notes: free text (optional)

    Marks the visit completed. A visit takes one prescription only (409 on repeat).
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body is required")

    payload = PrescriptionCreate.model_validate(data)
    prescription = visit_service.attach_prescription(
        payload.visit_id,
        [m.model_dump() for m in payload.medicines],
        notes=payload.notes,
        created_by=current_user.id,
    )

    log_audit(
        "visit",
        "prescribe",
        user_id=current_user.id,
        entity_id=payload.visit_id,
        details={"medicine_count": len(payload.medicines)},
    )

    return jsonify({
        "success": True,
        "message": "Prescription added successfully",
        "prescription": prescription,
    }), 201


@prescription_bp.route("/visit/<visit_id>", methods=["GET"])
@jwt_required()
@require_staff
def get_prescription_by_visit(visit_id):
    prescription, visit = visit_service.get_prescription(visit_id)
    return jsonify({
        "success": True,
        "prescription": prescription,
        "visit": visit.summary_dict(),
    }), 200


@prescription_bp.route("/patient/<patient_id>", methods=["GET"])
@jwt_required()
@require_staff
def get_patient_prescriptions(patient_id):
    patient, visits = visit_service.list_patient_prescriptions(patient_id)
    return jsonify({
        "success": True,
        "patient": patient.to_dict(),
        "prescriptions": [
            {
                "visitId": v.id,
                "prescription": v.prescription,
                "visitDate": isoformat(v.visit_date),
                "token": v.token,
            }
            for v in visits
        ],
    }), 200


@prescription_bp.route("/pending", methods=["GET"])
@jwt_required()
@require_role(DOCTOR)
def get_pending_visits():
    """Visits waiting for the doctor, oldest first"""
    visits = visit_service.list_pending_visits()
    return jsonify({
        "success": True,
        "visits": [v.to_dict(include_patient=True) for v in visits],
    }), 200
