import pytest

from app import app
from database.db import SessionLocal
from database.models import OfferLetterDB
from processors.offer_letter_processor import OfferLetterProcessor


@pytest.fixture
def client():
    app.config['TESTING'] = True
    with app.test_client() as client:
        yield client

    db = SessionLocal()
    db.query(OfferLetterDB).delete()
    db.commit()
    db.close()


def create_offer(client, offer_data, **overrides):
    response = client.post('/api/offer-letters', json=dict(offer_data, **overrides))
    assert response.status_code == 201, response.get_json()
    return response.get_json()['data']


# ============================================================================
# Salary Breakup
# ============================================================================

def test_breakup_preview(client):
    response = client.post('/api/salary/breakup', json={'ctc': 650000})
    assert response.status_code == 200

    body = response.get_json()
    assert body['success'] is True
    assert body['breakup']['basic'] == {'monthly': 32500.0, 'annual': 390000.0}
    assert body['breakup']['flexi'] == {'monthly': 4017.0, 'annual': 48200.0}
    assert body['breakup']['net_take_home'] == {'monthly': 49866.67}
    assert body['fields']['net_salary'] == 598400.0
    assert body['fields']['special_allowance'] == 0.0


def test_breakup_preview_with_tds(client):
    body = client.post('/api/salary/breakup', json={'ctc': '2000000', 'tds': '120000'}).get_json()
    assert body['breakup']['deductions']['tds'] == {'monthly': 10000.0, 'annual': 120000.0}
    assert body['breakup']['net_take_home'] == {'monthly': 152366.67}


@pytest.mark.parametrize("payload", [{}, {'ctc': 0}, {'ctc': 'abc'}, {'ctc': 650000, 'tds': -5}])
def test_breakup_preview_rejects_bad_input(client, payload):
    response = client.post('/api/salary/breakup', json=payload)
    assert response.status_code == 400
    assert response.get_json()['success'] is False


# ============================================================================
# Offer Letters
# ============================================================================

def test_create_and_fetch_offer(client, offer_data):
    response = client.post('/api/offer-letters', json=offer_data)
    assert response.status_code == 201

    body = response.get_json()
    offer = body['data']
    assert offer['status'] == 'draft'
    assert offer['basic_salary'] == 390000.0
    assert offer['gross_salary'] == 628400.0
    assert offer['joining_date'] == '2025-09-01'
    assert body['salaryBreakdown']['employer_pf'] == {'monthly': 1800.0, 'annual': 21600.0}

    fetched = client.get(f"/api/offer-letters/{offer['id']}").get_json()
    assert fetched['id'] == offer['id']

    listed = client.get('/api/offer-letters').get_json()
    assert [o['id'] for o in listed] == [offer['id']]

    by_application = client.get('/api/applications/app-777/offer-letters').get_json()
    assert [o['id'] for o in by_application] == [offer['id']]


def test_create_offer_missing_fields(client, offer_data):
    del offer_data['ctc']
    response = client.post('/api/offer-letters', json=offer_data)
    assert response.status_code == 400
    assert 'ctc' in response.get_json()['message']


def test_duplicate_offer_for_application(client, offer_data):
    create_offer(client, offer_data)
    response = client.post('/api/offer-letters', json=offer_data)
    assert response.status_code == 400
    assert 'already exists' in response.get_json()['message']


def test_unknown_offer_is_404(client):
    assert client.get('/api/offer-letters/missing').status_code == 404
    assert client.delete('/api/offer-letters/missing').status_code == 404
    assert client.post('/api/offer-letters/missing/send').status_code == 404


def test_update_recalculates_draft(client, offer_data):
    offer = create_offer(client, offer_data)

    response = client.put(f"/api/offer-letters/{offer['id']}",
                          json={'designation': 'Senior Engineer', 'ctc': 2000000})
    assert response.status_code == 200
    updated = response.get_json()
    assert updated['designation'] == 'Senior Engineer'
    assert updated['basic_salary'] == 1200000.0
    assert updated['flexi_pay'] == 264200.0


def test_update_tds_keeps_ctc(client, offer_data):
    offer = create_offer(client, offer_data)

    updated = client.put(f"/api/offer-letters/{offer['id']}", json={'tds': 24000}).get_json()
    assert updated['ctc'] == 650000.0
    assert updated['income_tax'] == 24000.0


def test_status_flow_and_locking(client, offer_data):
    offer = create_offer(client, offer_data)
    offer_id = offer['id']

    sent = client.post(f'/api/offer-letters/{offer_id}/send').get_json()
    assert sent['status'] == 'sent'
    assert sent['email_sent'] is True

    response = client.put(f'/api/offer-letters/{offer_id}', json={'ctc': 700000})
    assert response.status_code == 400

    accepted = client.post(f'/api/offer-letters/{offer_id}/accept').get_json()
    assert accepted['status'] == 'accepted'

    response = client.post(f'/api/offer-letters/{offer_id}/reject')
    assert response.status_code == 400


def test_unknown_action(client, offer_data):
    offer = create_offer(client, offer_data)
    assert client.post(f"/api/offer-letters/{offer['id']}/withdraw").status_code == 404


def test_delete_and_bulk_delete(client, offer_data):
    first = create_offer(client, offer_data)
    second = create_offer(client, offer_data, application_id='app-778')
    third = create_offer(client, offer_data, application_id='app-779')

    assert client.delete(f"/api/offer-letters/{first['id']}").status_code == 200

    response = client.post('/api/offer-letters/bulk-delete', json={'ids': [second['id'], third['id']]})
    assert response.get_json()['message'] == '2 offer letters deleted successfully'
    assert client.get('/api/offer-letters').get_json() == []

    assert client.post('/api/offer-letters/bulk-delete', json={'ids': []}).status_code == 400


def test_bulk_import(client, offer_data):
    rows = [offer_data, dict(offer_data, application_id='app-778', ctc='300000')]
    response = client.post('/api/offer-letters/bulk-import', json={'offerLetters': rows})

    assert response.status_code == 201
    body = response.get_json()
    assert body['message'] == '2 offer letters imported successfully'
    assert body['offerLetters'][1]['flexi_pay'] == -7800.0

    assert client.post('/api/offer-letters/bulk-import', json={}).status_code == 400


def test_download_annexure(client, offer_data):
    offer = create_offer(client, offer_data)

    response = client.get(f"/api/offer-letters/{offer['id']}/annexure")
    assert response.status_code == 200
    assert response.headers['Content-Disposition'].startswith('attachment')
    assert f"{offer['id']}_salary_annexure.xlsx" in response.headers['Content-Disposition']
    response.close()


def test_preview_rejects_amount_beyond_column_size(client):
    response = client.post('/api/salary/breakup', json={'ctc': '1e30'})
    assert response.status_code == 400
    assert 'less than 10,000,000,000' in response.get_json()['message']


def test_failed_update_leaves_draft_untouched(client, offer_data):
    offer = create_offer(client, offer_data)

    response = client.put(f"/api/offer-letters/{offer['id']}",
                          json={'designation': 'CHANGED', 'ctc': 'abc'})
    assert response.status_code == 400

    stored = client.get(f"/api/offer-letters/{offer['id']}").get_json()
    assert stored['designation'] == offer['designation']
    assert stored['ctc'] == 650000.0


def test_non_object_body_is_400(client, offer_data):
    offer = create_offer(client, offer_data)

    response = client.put(f"/api/offer-letters/{offer['id']}", json=['designation', 'x'])
    assert response.status_code == 400
    assert response.get_json()['message'] == 'Request body must be a JSON object'
    assert client.post('/api/salary/breakup', json=[650000]).status_code == 400


def test_unexpected_error_hides_details(client, monkeypatch):
    def broken_preview(self, ctc, tds=0):
        raise RuntimeError("connection string with secrets")

    monkeypatch.setattr(OfferLetterProcessor, 'preview', broken_preview)
    response = client.post('/api/salary/breakup', json={'ctc': 650000})

    assert response.status_code == 500
    assert response.get_json() == {'success': False, 'message': 'Internal server error'}
