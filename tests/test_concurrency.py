import threading

import pytest

from app import create_app
from app.config import TestingConfig
from app.errors import ConflictError
from app.extensions import db
from app.schemas import PatientCreate
from app.services import patient_service, token_service, visit_service

from tests.conftest import ASHA, PARACETAMOL

WORKERS = 8


@pytest.fixture
def file_app(tmp_path, monkeypatch):
    # threads need a shared database, which :memory: is not
    monkeypatch.setattr(TestingConfig, 'SQLALCHEMY_DATABASE_URI', f"sqlite:///{tmp_path / 'clinic.db'}")
    app = create_app('testing')
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


def run_in_threads(app, target, count=WORKERS):
    barrier = threading.Barrier(count)
    results, errors = [], []
    lock = threading.Lock()

    def worker():
        with app.app_context():
            barrier.wait()
            try:
                outcome = target()
            except Exception as exc:
                with lock:
                    errors.append(exc)
            else:
                with lock:
                    results.append(outcome)

    threads = [threading.Thread(target=worker) for _ in range(count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return results, errors


def test_concurrent_tokens_are_distinct(file_app):
    with file_app.app_context():
        start = token_service.reset_counter(10)

    def issue_many():
        return [token_service.next_token() for _ in range(5)]

    results, errors = run_in_threads(file_app, issue_many)

    assert errors == []
    tokens = [token for batch in results for token in batch]
    assert len(tokens) == WORKERS * 5
    assert len(set(tokens)) == len(tokens)
    assert min(tokens) > start
    with file_app.app_context():
        assert token_service.current_token() == start + len(tokens)


def test_concurrent_prescriptions_have_one_winner(file_app):
    with file_app.app_context():
        _, visit = patient_service.register_patient(PatientCreate.model_validate(ASHA))
        visit_id = visit.id

    def prescribe():
        visit_service.attach_prescription(visit_id, PARACETAMOL, notes=threading.current_thread().name)
        return threading.current_thread().name

    results, errors = run_in_threads(file_app, prescribe)

    assert len(results) == 1
    assert len(errors) == WORKERS - 1
    assert all(isinstance(exc, ConflictError) for exc in errors)
    with file_app.app_context():
        prescription, _ = visit_service.get_prescription(visit_id)
        assert prescription['notes'] == results[0]
