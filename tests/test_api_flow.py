from sqlalchemy.exc import OperationalError

from app.models import AuditLog
from app.services import token_service

from tests.conftest import ASHA, PARACETAMOL


def register(client, headers, **overrides):
    return client.post('/api/patients', json=dict(ASHA, **overrides), headers=headers)


def test_register_prescribe_bill_scenario(client, receptionist_headers, doctor_headers):
    response = register(client, receptionist_headers)
    assert response.status_code == 201
    body = response.get_json()
    assert body['token'] == 1
    patient_id, visit_id = body['patientId'], body['visitId']
    assert body['patient']['bloodGroup'] == 'O+'

    history = client.get(f'/api/patients/{patient_id}/history', headers=doctor_headers).get_json()
    assert history['visits'][0]['status'] == 'registered'
    registered_last_visit = history['patient']['lastVisit']

    pending = client.get('/api/prescriptions/pending', headers=doctor_headers).get_json()
    assert [v['id'] for v in pending['visits']] == [visit_id]
    assert pending['visits'][0]['patient']['name'] == 'Asha Rao'

    before = client.get('/api/billing/summary', headers=receptionist_headers).get_json()['summary']

    response = client.post('/api/prescriptions', json={'visitId': visit_id, 'medicines': PARACETAMOL},
                           headers=doctor_headers)
    assert response.status_code == 201
    prescription = response.get_json()['prescription']

    history = client.get(f'/api/patients/{patient_id}/history', headers=doctor_headers).get_json()
    assert history['visits'][0]['status'] == 'completed'
    assert history['patient']['lastVisit'] >= registered_last_visit

    completed = client.get('/api/billing/completed', headers=receptionist_headers).get_json()
    assert [v['id'] for v in completed['visits']] == [visit_id]

    response = client.post('/api/billing', json={'visitId': visit_id, 'amount': 250}, headers=receptionist_headers)
    assert response.status_code == 201
    bill = response.get_json()['bill']
    assert bill['amount'] == 250
    assert bill['prescription'] == prescription

    after = client.get('/api/billing/summary', headers=receptionist_headers).get_json()['summary']
    assert after['totalBills'] == before['totalBills'] + 1
    assert after['totalAmount'] == before['totalAmount'] + 250
    assert after['todayBills'] == before['todayBills'] + 1
    assert after['todayAmount'] == before['todayAmount'] + 250

    completed = client.get('/api/billing/completed', headers=receptionist_headers).get_json()
    assert completed['visits'] == []

    by_visit = client.get(f'/api/billing/visit/{visit_id}', headers=doctor_headers).get_json()
    assert by_visit['bill'] == bill
    assert by_visit['visit']['token'] == 1

    by_patient = client.get(f'/api/billing/patient/{patient_id}', headers=receptionist_headers).get_json()
    assert [b['visitId'] for b in by_patient['bills']] == [visit_id]

    rx = client.get(f'/api/prescriptions/visit/{visit_id}', headers=receptionist_headers).get_json()
    assert rx['prescription'] == prescription

    actions = {entry.action for entry in AuditLog.query.all()}
    assert {'register', 'prescribe', 'bill'} <= actions


def test_registration_validation(client, receptionist_headers):
    assert register(client, receptionist_headers, age=-1).status_code == 400
    assert register(client, receptionist_headers, age=True).status_code == 400
    response = register(client, receptionist_headers, bloodGroup='X+')
    assert response.status_code == 400
    assert response.get_json()['success'] is False
    assert register(client, receptionist_headers, age=150, bloodGroup='O-').status_code == 201


def test_registration_requires_json_body(client, receptionist_headers):
    response = client.post('/api/patients', data='name=x', headers=receptionist_headers)
    assert response.status_code == 400


def test_tokens_increase_per_registration(client, receptionist_headers, doctor_headers):
    tokens = [register(client, receptionist_headers).get_json()['token'] for _ in range(3)]
    assert tokens == [1, 2, 3]
    current = client.get('/api/tokens/current', headers=doctor_headers).get_json()
    assert current['current'] == 3


def test_duplicate_prescription_conflicts(client, receptionist_headers, doctor_headers):
    visit_id = register(client, receptionist_headers).get_json()['visitId']
    payload = {'visitId': visit_id, 'medicines': PARACETAMOL}
    assert client.post('/api/prescriptions', json=payload, headers=doctor_headers).status_code == 201
    response = client.post('/api/prescriptions', json=payload, headers=doctor_headers)
    assert response.status_code == 409
    assert 'already exists' in response.get_json()['error']


def test_prescription_for_unknown_visit(client, doctor_headers):
    response = client.post('/api/prescriptions', json={'visitId': 'missing', 'medicines': PARACETAMOL},
                           headers=doctor_headers)
    assert response.status_code == 404


def test_prescription_needs_medicines(client, receptionist_headers, doctor_headers):
    visit_id = register(client, receptionist_headers).get_json()['visitId']
    response = client.post('/api/prescriptions', json={'visitId': visit_id, 'medicines': []},
                           headers=doctor_headers)
    assert response.status_code == 400


def test_billing_guards(client, receptionist_headers, doctor_headers):
    visit_id = register(client, receptionist_headers).get_json()['visitId']
    bill = {'visitId': visit_id, 'amount': 250}

    response = client.post('/api/billing', json=bill, headers=receptionist_headers)
    assert response.status_code == 400
    assert 'Prescription must be added' in response.get_json()['error']

    client.post('/api/prescriptions', json={'visitId': visit_id, 'medicines': PARACETAMOL}, headers=doctor_headers)
    assert client.post('/api/billing', json={'visitId': visit_id, 'amount': True},
                       headers=receptionist_headers).status_code == 400
    assert client.post('/api/billing', json=bill, headers=receptionist_headers).status_code == 201
    assert client.post('/api/billing', json=bill, headers=receptionist_headers).status_code == 409
    assert client.post('/api/billing', json={'visitId': 'missing', 'amount': 10},
                       headers=receptionist_headers).status_code == 404
    assert client.post('/api/billing', json={'visitId': visit_id, 'amount': 0},
                       headers=receptionist_headers).status_code == 400


def test_search_patients(client, receptionist_headers, doctor_headers):
    register(client, receptionist_headers)
    register(client, receptionist_headers, name='Ravi Kumar', contact='8887776666')

    found = client.get('/api/patients/search?query=As', headers=doctor_headers).get_json()['patients']
    assert [p['name'] for p in found] == ['Asha Rao']

    by_contact = client.get('/api/patients/search?query=888', headers=doctor_headers).get_json()['patients']
    assert [p['name'] for p in by_contact] == ['Ravi Kumar']

    assert client.get('/api/patients/search?query=A', headers=doctor_headers).status_code == 400
    assert client.get('/api/patients/search?query=%25%25', headers=doctor_headers).get_json()['patients'] == []


def test_patient_lookup(client, receptionist_headers, doctor_headers):
    patient_id = register(client, receptionist_headers).get_json()['patientId']

    listing = client.get('/api/patients', headers=doctor_headers).get_json()
    assert [p['id'] for p in listing['patients']] == [patient_id]
    assert client.get(f'/api/patients/{patient_id}', headers=doctor_headers).get_json()['patient']['name'] == 'Asha Rao'

    assert client.get('/api/patients/missing', headers=doctor_headers).status_code == 404
    assert client.get('/api/patients/missing/history', headers=doctor_headers).status_code == 404
    assert client.get('/api/prescriptions/patient/missing', headers=doctor_headers).status_code == 404
    assert client.get('/api/billing/patient/missing', headers=doctor_headers).status_code == 404


def test_reads_for_unprescribed_visit(client, receptionist_headers, doctor_headers):
    visit_id = register(client, receptionist_headers).get_json()['visitId']
    assert client.get(f'/api/prescriptions/visit/{visit_id}', headers=doctor_headers).status_code == 404
    assert client.get(f'/api/billing/visit/{visit_id}', headers=doctor_headers).status_code == 404
    assert client.get('/api/billing/visit/missing', headers=doctor_headers).status_code == 404


def test_unknown_route_is_404(client):
    response = client.get('/api/nothing-here')
    assert response.status_code == 404
    assert response.get_json()['success'] is False


def test_database_timeout_is_retryable_503(client, doctor_headers, monkeypatch):
    def unavailable():
        raise OperationalError('SELECT current FROM counters', {}, Exception('timeout expired'))

    monkeypatch.setattr(token_service, 'current_token', unavailable)
    response = client.get('/api/tokens/current', headers=doctor_headers)
    assert response.status_code == 503
    assert response.get_json()['retryable'] is True


def test_unhandled_error_hides_detail(client, doctor_headers, monkeypatch):
    def broken():
        raise RuntimeError('connection string postgres://secret')

    monkeypatch.setattr(token_service, 'current_token', broken)
    response = client.get('/api/tokens/current', headers=doctor_headers)
    assert response.status_code == 500
    assert response.get_json()['error'] == 'Internal server error'
    assert 'secret' not in response.get_data(as_text=True)
