"""
Billing API Routes
Receptionist bills examined visits; billing queue and daily summary
"""
from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, current_user

from app.errors import ValidationError
from app.models import RECEPTIONIST
from app.models.base import isoformat
from app.schemas import BillCreate
from app.services import visit_service
from app.utils.decorators import require_role, require_staff
from app.utils.audit import log_audit

billing_bp = Blueprint("billing", __name__, url_prefix="/api/billing")


@billing_bp.route("", methods=["POST"])
@jwt_required()
@require_role(RECEPTIONIST)
def generate_bill():
    """
    Generate the bill for a visit

    Body:
        visitId: Visit ID (required)
        amount: positive number (required)
        description: free text (optional)

    400 if the visit has no prescription yet, 409 if it is already billed.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body is required")

    payload = BillCreate.model_validate(data)
    bill = visit_service.attach_billing(
        payload.visit_id,
        payload.amount,
        description=payload.description,
        created_by=current_user.id,
    )

    log_audit(
        "visit",
        "bill",
        user_id=current_user.id,
        entity_id=payload.visit_id,
        details={"amount": payload.amount},
    )

    return jsonify({
        "success": True,
        "message": "Bill generated successfully",
        "bill": bill,
    }), 201


@billing_bp.route("/visit/<visit_id>", methods=["GET"])
@jwt_required()
@require_staff
def get_bill_by_visit(visit_id):
    bill, visit = visit_service.get_bill(visit_id)
    return jsonify({
        "success": True,
        "bill": bill,
        "visit": visit.summary_dict(),
    }), 200


@billing_bp.route("/patient/<patient_id>", methods=["GET"])
@jwt_required()
@require_staff
def get_patient_bills(patient_id):
    patient, visits = visit_service.list_patient_bills(patient_id)
    return jsonify({
        "success": True,
        "patient": patient.to_dict(),
        "bills": [
            {
                "visitId": v.id,
                "bill": v.billing,
                "visitDate": isoformat(v.visit_date),
                "token": v.token,
            }
            for v in visits
        ],
    }), 200


@billing_bp.route("/completed", methods=["GET"])
@jwt_required()
@require_role(RECEPTIONIST)
def get_completed_visits():
    """Examined visits waiting for a bill, oldest first"""
    visits = visit_service.list_unbilled_visits()
    return jsonify({
        "success": True,
        "visits": [v.to_dict(include_patient=True) for v in visits],
    }), 200


@billing_bp.route("/summary", methods=["GET"])
@jwt_required()
@require_role(RECEPTIONIST)
def get_billing_summary():
    return jsonify({
        "success": True,
        "summary": visit_service.billing_summary(),
    }), 200
