from app.extensions import db
from .base import TimestampMixin, isoformat

BLOOD_GROUPS = ('A+', 'A-', 'B+', 'B-', 'AB+', 'AB-', 'O+', 'O-')


class Patient(db.Model, TimestampMixin):
    __tablename__ = 'patients'

    id = db.Column(db.String(32), primary_key=True)  # uuid4 hex

    name = db.Column(db.String(100), nullable=False, index=True)
    age = db.Column(db.Integer, nullable=False)
    blood_group = db.Column(db.String(3), nullable=False)
    contact = db.Column(db.String(15), nullable=False, index=True)
    disease = db.Column(db.String(500), nullable=False)

    # Bumped whenever a prescription is attached to one of this patient's visits
    last_visit = db.Column(db.DateTime, nullable=True)

    created_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True, index=True)

    visits = db.relationship('Visit', back_populates='patient', lazy='dynamic')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'age': self.age,
            'bloodGroup': self.blood_group,
            'contact': self.contact,
            'disease': self.disease,
            'createdAt': isoformat(self.created_at),
            'createdBy': self.created_by,
            'lastVisit': isoformat(self.last_visit),
        }

    def __repr__(self):
        return f"<Patient {self.name} ({self.id})>"
