"""
Tests for the RideCalc REST API
"""
import pytest

import api
from session_manager import SessionManager


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(api, 'session_manager', SessionManager())
    api.app.config['TESTING'] = True
    with api.app.test_client() as client:
        yield client


def open_session(client, field='tips', **extra):
    response = client.post('/api/sessions', json={'field': field, **extra})
    assert response.status_code == 201
    return response.get_json()['data']


def test_list_fields(client):
    response = client.get('/api/fields')
    body = response.get_json()
    assert body['success'] is True
    names = [field['name'] for field in body['data']]
    assert 'gas_price' in names
    assert 'tips' in names


def test_get_unknown_field(client):
    response = client.get('/api/fields/nope')
    assert response.status_code == 404
    assert response.get_json()['success'] is False


def test_update_field_value_and_text(client):
    response = client.put('/api/fields/tips', json={'value': 7.5})
    assert response.get_json()['data']['value'] == 7.5

    response = client.put('/api/fields/tips', json={'text': '45+5'})
    assert response.status_code == 200
    assert response.get_json()['data']['value'] == 50.0


def test_update_field_rejects_bad_text(client):
    client.put('/api/fields/tips', json={'value': 3})
    response = client.put('/api/fields/tips', json={'text': '5-10'})
    assert response.status_code == 400
    assert client.get('/api/fields/tips').get_json()['data']['value'] == 3.0


@pytest.mark.parametrize("value", [-5, "nan", "inf"])
def test_update_field_rejects_negative_and_non_finite_value(client, value):
    client.put('/api/fields/tips', json={'value': 3})
    response = client.put('/api/fields/tips', json={'value': value})
    assert response.status_code == 400
    assert client.get('/api/fields/tips').get_json()['data']['value'] == 3.0


def test_update_field_needs_body(client):
    assert client.put('/api/fields/tips', json={}).status_code == 400


def test_session_flow_commits_to_field(client):
    client.put('/api/fields/tips', json={'value': 4})
    session = open_session(client)
    assert session['display'] == '4'
    assert session['state'] == 'open'

    response = client.post(f"/api/sessions/{session['id']}/actions", json={'keys': ['+', '1', '=']})
    assert response.get_json()['data']['display'] == '5'

    tape = client.get(f"/api/sessions/{session['id']}/tape").get_json()['data']
    assert tape['lines'] == ['4+1 = 5']
    assert tape['steps'][0]['result'] == 5.0

    response = client.post(f"/api/sessions/{session['id']}/done")
    data = response.get_json()['data']
    assert data['state'] == 'committed'
    assert data['committed_value'] == 5.0
    assert data['field_value'] == 5.0

    assert client.get(f"/api/sessions/{session['id']}").status_code == 404
    assert client.post(f"/api/sessions/{session['id']}/done").status_code == 404


def test_cancel_leaves_field_alone(client):
    client.put('/api/fields/tolls', json={'value': 2})
    session = open_session(client, 'tolls')
    client.post(f"/api/sessions/{session['id']}/actions", json={'key': '9'})
    response = client.post(f"/api/sessions/{session['id']}/cancel")
    assert response.get_json()['data']['state'] == 'cancelled'
    assert client.get('/api/fields/tolls').get_json()['data']['value'] == 2.0


def test_negative_result_commits_zero(client):
    session = open_session(client)
    client.post(f"/api/sessions/{session['id']}/actions", json={'keys': ['3', '-', '8', '=']})
    data = client.post(f"/api/sessions/{session['id']}/done").get_json()['data']
    assert data['field_value'] == 0.0


def test_unknown_key_rejects_whole_batch(client):
    session = open_session(client)
    response = client.post(f"/api/sessions/{session['id']}/actions", json={'keys': ['7', 'sqrt']})
    assert response.status_code == 400
    assert client.get(f"/api/sessions/{session['id']}").get_json()['data']['display'] == '0'


def test_open_session_errors(client):
    assert client.post('/api/sessions', json={}).status_code == 400
    assert client.post('/api/sessions', json={'field': 'nope'}).status_code == 404


def test_open_session_with_decimal_places(client):
    session = open_session(client, 'gas_price', decimal_places=3)
    assert session['decimal_places'] == 3


def test_evaluate(client):
    data = client.post('/api/evaluate', json={'expression': '(2+3)*4'}).get_json()['data']
    assert data['result'] == 20.0
    assert data['valid'] is True

    data = client.post('/api/evaluate', json={'expression': '5/0'}).get_json()['data']
    assert data['result'] is None
