"""
Visit Model
One walk-in visit of a patient: token, status, and the embedded prescription
and bill documents.
"""
from app.extensions import db
from .base import TimestampMixin, isoformat


class VisitStatus:
    REGISTERED = 'registered'
    # examined by the doctor; billing is tracked separately
    COMPLETED = 'completed'


class Visit(db.Model, TimestampMixin):
    """
    Visit record.

    ``status`` and ``billing`` are independent axes: a visit is pending for the
    doctor while ``status == registered`` and pending for the front desk while
    ``status == completed`` and ``billing`` is null. ``prescription`` and
    ``billing`` go from null to set exactly once and are never cleared.
    """
    __tablename__ = 'visits'

    id = db.Column(db.String(32), primary_key=True)  # uuid4 hex
    patient_id = db.Column(db.String(32), db.ForeignKey('patients.id'), nullable=False, index=True)

    # Sequential front-desk token, assigned once
    token = db.Column(db.Integer, unique=True, nullable=False, index=True)

    visit_date = db.Column(db.DateTime, nullable=False, index=True)
    status = db.Column(db.String(20), nullable=False, default=VisitStatus.REGISTERED, index=True)

    # Embedded sub-documents; Python None is stored as SQL NULL so IS NULL guards work
    prescription = db.Column(db.JSON(none_as_null=True), nullable=True)
    billing = db.Column(db.JSON(none_as_null=True), nullable=True)

    # Created by (receptionist)
    created_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True, index=True)

    patient = db.relationship('Patient', back_populates='visits', lazy='joined')

    def summary_dict(self):
        """Short form used next to a prescription or bill"""
        return {
            'id': self.id,
            'token': self.token,
            'visitDate': isoformat(self.visit_date),
            'status': self.status,
        }

    def to_dict(self, include_patient=False):
        """Convert to dictionary for API responses"""
        data = {
            'id': self.id,
            'patientId': self.patient_id,
            'token': self.token,
            'visitDate': isoformat(self.visit_date),
            'status': self.status,
            'prescription': self.prescription,
            'billing': self.billing,
            'createdBy': self.created_by,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }
        if include_patient:
            data['patient'] = self.patient.to_dict() if self.patient else None
        return data

    def __repr__(self):
        return f"<Visit {self.id} - Patient: {self.patient_id} - Token: {self.token}>"
