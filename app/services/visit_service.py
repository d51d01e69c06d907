"""
Visit Service
Lifecycle of a visit: registered -> completed (prescription attached) -> billed.

Each transition is a single conditional UPDATE so that two concurrent callers
cannot both see the sub-record unset and both write it.
"""
import logging
import uuid
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import update

from app.errors import ConflictError, NotFoundError, PreconditionError
from app.extensions import db
from app.models import Patient, Visit, VisitStatus
from app.models.base import isoformat, utcnow

logger = logging.getLogger(__name__)


def _timestamp() -> str:
    """Timestamp stored inside embedded documents"""
    return datetime.now(timezone.utc).isoformat()


def _get_visit(visit_id: str) -> Visit:
    visit = db.session.get(Visit, visit_id)
    if visit is None:
        logger.warning(f"Visit not found: {visit_id}")
        raise NotFoundError('Visit not found')
    return visit


def _get_patient(patient_id: str) -> Patient:
    patient = db.session.get(Patient, patient_id)
    if patient is None:
        logger.warning(f"Patient not found: {patient_id}")
        raise NotFoundError('Patient not found')
    return patient


def register_visit(patient_id: str, token: int, created_by: Optional[int] = None) -> Visit:
    """
    Create a registered visit for an existing patient and commit.

    Anything already pending in the session (the patient row at registration
    time) is committed in the same transaction.
    """
    _get_patient(patient_id)

    visit = Visit(
        id=uuid.uuid4().hex,
        patient_id=patient_id,
        token=token,
        visit_date=utcnow(),
        status=VisitStatus.REGISTERED,
        prescription=None,
        billing=None,
        created_by=created_by,
    )
    db.session.add(visit)
    db.session.commit()

    logger.info(f"Visit {visit.id} registered for patient {patient_id} with token {token}")
    return visit


def _claim_prescription(visit_id: str, prescription: Dict[str, Any]) -> bool:
    """Set the prescription only if none is attached yet. True if this call won."""
    result = db.session.execute(
        update(Visit)
        .where(Visit.id == visit_id, Visit.prescription.is_(None))
        .values(prescription=prescription, status=VisitStatus.COMPLETED, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def _claim_billing(visit_id: str, bill: Dict[str, Any]) -> bool:
    """Set the bill only if the visit is prescribed and not yet billed. True if this call won."""
    result = db.session.execute(
        update(Visit)
        .where(
            Visit.id == visit_id,
            Visit.prescription.isnot(None),
            Visit.billing.is_(None),
        )
        .values(billing=bill, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def attach_prescription(
    visit_id: str,
    medicines: List[Dict[str, str]],
    notes: Optional[str] = None,
    created_by: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Attach the doctor's prescription to a visit.

    Raises:
        NotFoundError: no such visit
        ConflictError: the visit already has a prescription

    Returns:
        dict: the stored prescription
    """
    visit = _get_visit(visit_id)
    if visit.prescription is not None:
        logger.warning(f"Prescription already exists for visit {visit_id}")
        raise ConflictError('Prescription already exists for this visit')

    prescription = {
        'visitId': visit_id,
        'medicines': [dict(m) for m in medicines],
        'createdAt': _timestamp(),
        'createdBy': created_by,
        'patientId': visit.patient_id,
    }
    if notes is not None:
        prescription['notes'] = notes

    if not _claim_prescription(visit_id, prescription):
        db.session.rollback()
        logger.warning(f"Prescription for visit {visit_id} lost to a concurrent write")
        raise ConflictError('Prescription already exists for this visit')

    db.session.execute(
        update(Patient)
        .where(Patient.id == visit.patient_id)
        .values(last_visit=utcnow(), updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    db.session.commit()

    logger.info(f"Prescription added to visit {visit_id} for patient {visit.patient_id} by {created_by}")
    return prescription


def attach_billing(
    visit_id: str,
    amount: float,
    description: Optional[str] = None,
    created_by: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Bill an examined visit.

    The bill carries copies of the patient name, token, visit date and the
    prescription so it reads the same later on.

    Raises:
        NotFoundError: no such visit
        PreconditionError: the visit has no prescription yet
        ConflictError: the visit is already billed

    Returns:
        dict: the stored bill
    """
    visit = _get_visit(visit_id)
    if visit.prescription is None:
        logger.warning(f"No prescription found for billing visit {visit_id}")
        raise PreconditionError('Prescription must be added before generating bill')
    if visit.billing is not None:
        logger.warning(f"Bill already exists for visit {visit_id}")
        raise ConflictError('Bill already exists for this visit')

    patient = visit.patient
    bill = {
        'visitId': visit_id,
        'amount': amount,
        'patientId': visit.patient_id,
        'patientName': patient.name if patient else None,
        'token': visit.token,
        'visitDate': isoformat(visit.visit_date),
        'prescription': visit.prescription,
        'createdAt': _timestamp(),
        'createdBy': created_by,
    }
    if description is not None:
        bill['description'] = description

    if not _claim_billing(visit_id, bill):
        db.session.rollback()
        logger.warning(f"Bill for visit {visit_id} lost to a concurrent write")
        raise ConflictError('Bill already exists for this visit')

    db.session.commit()

    logger.info(f"Bill generated for visit {visit_id}: amount={amount} by {created_by}")
    return bill


def get_prescription(visit_id: str):
    """Return (prescription, visit) or raise NotFoundError"""
    visit = _get_visit(visit_id)
    if visit.prescription is None:
        raise NotFoundError('No prescription found for this visit')
    return visit.prescription, visit


def get_bill(visit_id: str):
    """Return (bill, visit) or raise NotFoundError"""
    visit = _get_visit(visit_id)
    if visit.billing is None:
        raise NotFoundError('No bill found for this visit')
    return visit.billing, visit


def list_patient_visits(patient_id: str) -> List[Visit]:
    """All visits of a patient, newest first"""
    _get_patient(patient_id)
    return (
        Visit.query
        .filter(Visit.patient_id == patient_id)
        .order_by(Visit.visit_date.desc())
        .all()
    )


def list_patient_prescriptions(patient_id: str):
    """Return (patient, [visit with prescription]) newest first"""
    patient = _get_patient(patient_id)
    visits = (
        Visit.query
        .filter(Visit.patient_id == patient_id, Visit.prescription.isnot(None))
        .order_by(Visit.visit_date.desc())
        .all()
    )
    return patient, visits


def list_patient_bills(patient_id: str):
    """Return (patient, [billed visit]) newest first"""
    patient = _get_patient(patient_id)
    visits = (
        Visit.query
        .filter(Visit.patient_id == patient_id, Visit.billing.isnot(None))
        .order_by(Visit.visit_date.desc())
        .all()
    )
    return patient, visits


def list_pending_visits() -> List[Visit]:
    """Doctor queue: registered visits, oldest first"""
    return (
        Visit.query
        .filter(Visit.status == VisitStatus.REGISTERED)
        .order_by(Visit.visit_date.asc())
        .all()
    )


def list_unbilled_visits() -> List[Visit]:
    """Front-desk queue: examined but not billed, oldest first"""
    return (
        Visit.query
        .filter(Visit.status == VisitStatus.COMPLETED, Visit.billing.is_(None))
        .order_by(Visit.visit_date.asc())
        .all()
    )


def _local_date(timestamp: str) -> Optional[date]:
    try:
        moment = datetime.fromisoformat(timestamp)
    except (TypeError, ValueError):
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone().date()


def billing_summary(today: Optional[date] = None) -> Dict[str, Any]:
    """
    Totals across all billed visits, plus the bills created today
    (server-local calendar day).
    """
    today = today or date.today()
    summary = {
        'totalAmount': 0,
        'totalBills': 0,
        'todayAmount': 0,
        'todayBills': 0,
    }

    for bill, in db.session.query(Visit.billing).filter(Visit.billing.isnot(None)):
        if not bill or not bill.get('createdAt'):
            continue
        amount = bill.get('amount') or 0
        summary['totalAmount'] += amount
        summary['totalBills'] += 1
        if _local_date(bill['createdAt']) == today:
            summary['todayAmount'] += amount
            summary['todayBills'] += 1

    return summary
