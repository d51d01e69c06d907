from app.extensions import db, bcrypt
from .base import TimestampMixin, isoformat

DOCTOR = 'doctor'
RECEPTIONIST = 'receptionist'
STAFF_ROLES = (DOCTOR, RECEPTIONIST)


class User(db.Model, TimestampMixin):
    """Staff profile record; the role of an authenticated identity is read from here"""
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    email = db.Column(db.String(120), unique=True, nullable=True, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    name = db.Column(db.String(100), nullable=False)

    # Role - only 2 options: 'doctor', 'receptionist'
    role = db.Column(db.String(20), nullable=False, index=True)

    is_active = db.Column(db.Boolean, default=True, nullable=False)

    # Last login tracking
    last_login = db.Column(db.DateTime, nullable=True)
    login_count = db.Column(db.Integer, default=0)

    def set_password(self, password):
        """Hash and set password"""
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        """Check if provided password matches hash"""
        return bcrypt.check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'name': self.name,
            'role': self.role,
            'isActive': self.is_active,
            'lastLogin': isoformat(self.last_login),
            'loginCount': self.login_count or 0,
        }

    def __repr__(self):
        return f"<User {self.username} - {self.role}>"
