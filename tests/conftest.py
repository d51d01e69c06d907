import pytest
from flask_jwt_extended import create_access_token

from app import create_app
from app.extensions import db
from app.models import User, DOCTOR, RECEPTIONIST

ASHA = {
    "name": "Asha Rao",
    "age": 30,
    "bloodGroup": "O+",
    "contact": "9998887777",
    "disease": "fever",
}

PARACETAMOL = [{"name": "Paracetamol", "dosage": "500mg", "instructions": "twice daily"}]


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def _make_user(username, role, password='secret123'):
    user = User(username=username, name=username.title(), email=f"{username}@clinic.test", role=role, is_active=True)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def doctor(app):
    return _make_user('doctor1', DOCTOR)


@pytest.fixture
def receptionist(app):
    return _make_user('reception1', RECEPTIONIST)


def bearer(user):
    token = create_access_token(identity=str(user.id), additional_claims={'role': user.role})
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def doctor_headers(doctor):
    return bearer(doctor)


@pytest.fixture
def receptionist_headers(receptionist):
    return bearer(receptionist)
