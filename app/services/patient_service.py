"""
Patient Service
Registration (patient + first visit + token) and patient lookup.
"""
import logging
import uuid
from typing import List, Optional, Tuple

from sqlalchemy import or_

from app.errors import NotFoundError, ValidationError
from app.extensions import db
from app.models import Patient, Visit
from app.models.base import utcnow
from app.schemas import PatientCreate
from app.services.token_service import next_token
from app.services.visit_service import list_patient_visits, register_visit

logger = logging.getLogger(__name__)

SEARCH_MIN_LENGTH = 2
SEARCH_LIMIT = 10


def register_patient(data: PatientCreate, created_by: Optional[int] = None) -> Tuple[Patient, Visit]:
    """
    Register a walk-in patient.

    The token is issued and committed first; the patient and its visit are
    then written together. If that write fails the token is simply skipped.
    """
    token = next_token()

    now = utcnow()
    patient = Patient(
        id=uuid.uuid4().hex,
        name=data.name,
        age=data.age,
        blood_group=data.blood_group,
        contact=data.contact,
        disease=data.disease,
        created_by=created_by,
        last_visit=now,
        created_at=now,
        updated_at=now,
    )
    db.session.add(patient)
    db.session.flush()

    visit = register_visit(patient.id, token, created_by=created_by)

    logger.info(f"Patient {patient.id} registered with visit {visit.id} and token {token} by {created_by}")
    return patient, visit


def list_patients() -> List[Patient]:
    return Patient.query.order_by(Patient.created_at.desc()).all()


def get_patient(patient_id: str) -> Patient:
    patient = db.session.get(Patient, patient_id)
    if patient is None:
        logger.warning(f"Patient not found: {patient_id}")
        raise NotFoundError('Patient not found')
    return patient


def patient_history(patient_id: str) -> Tuple[Patient, List[Visit]]:
    patient = get_patient(patient_id)
    return patient, list_patient_visits(patient_id)


def _escape_like(value: str) -> str:
    return value.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')


def search_patients(query: Optional[str]) -> List[Patient]:
    """
    Prefix search on name or contact, case-insensitive.

    Raises:
        ValidationError: query shorter than 2 characters
    """
    query = (query or '').strip()
    if len(query) < SEARCH_MIN_LENGTH:
        raise ValidationError(f'Search query must be at least {SEARCH_MIN_LENGTH} characters')

    pattern = f"{_escape_like(query)}%"
    patients = (
        Patient.query
        .filter(or_(
            Patient.name.ilike(pattern, escape='\\'),
            Patient.contact.ilike(pattern, escape='\\'),
        ))
        .order_by(Patient.name.asc())
        .limit(SEARCH_LIMIT)
        .all()
    )
    logger.info(f"Patient search '{query}' returned {len(patients)} result(s)")
    return patients
