from app.extensions import db
from .base import utcnow

TOKEN_COUNTER = 'token'


class Counter(db.Model):
    """Named monotonic counter. The front-desk token sequence is the row named 'token'."""
    __tablename__ = 'counters'

    name = db.Column(db.String(32), primary_key=True)
    current = db.Column(db.Integer, nullable=False, default=0)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def __repr__(self):
        return f"<Counter {self.name}={self.current}>"
