import pytest
from fastapi.testclient import TestClient

from coffee_finder.core.dependencies import ServiceContainer
from coffee_finder.main import create_app
from tests.helpers import NYC


@pytest.fixture
def client(geocoding_backend, places_backend, location_service, launcher):
    container = ServiceContainer(
        geocoding_backend=geocoding_backend,
        places_backend=places_backend,
        location_service=location_service,
        launcher=launcher,
    )
    with TestClient(create_app(container)) as c:
        yield c


def test_initial_state_is_idle(client):
    r = client.get('/search/state')
    assert r.status_code == 200
    body = r.json()
    assert body['status'] == 'ok'
    assert body['data']['status']['kind'] == 'idle'
    assert body['data']['places'] == []


def test_search_by_postal_code(client):
    r = client.post('/search', json={'postal_code': '10001'})
    assert r.status_code == 200
    data = r.json()['data']
    assert data['status'] == {'kind': 'success', 'count': 2, 'reason': None, 'message': None}
    assert data['status_text'] == 'Found 2 places.'
    assert [p['name'] for p in data['places']] == ['Joe Coffee', 'Blue Bottle']
    assert data['places'][0]['distance_miles'] <= data['places'][1]['distance_miles']
    assert data['focused_place']['id'] == data['places'][0]['id']
    assert data['region']['latitude'] == pytest.approx(NYC.latitude)
    assert data['is_searching'] is False


def test_invalid_postal_code_is_a_failed_status(client, places_backend):
    r = client.post('/search', json={'postal_code': '00000'})
    assert r.status_code == 200
    data = r.json()['data']
    assert data['status']['kind'] == 'failed'
    assert data['status']['reason'] == 'geocode'
    assert data['status_text'] == 'Search failed: Invalid ZIP code'
    assert places_backend.calls == []


def test_backend_crash_is_a_failed_status(client, places_backend):
    places_backend.error = RuntimeError('backend bug')
    r = client.post('/search', json={'postal_code': '10001'})
    assert r.status_code == 200
    data = r.json()['data']
    assert data['status']['kind'] == 'failed'
    assert data['status']['reason'] == 'search'
    assert data['is_searching'] is False


def test_search_without_origin_raises_alert(client):
    r = client.post('/search', json={})
    assert r.status_code == 200
    data = r.json()['data']
    assert data['status']['reason'] == 'no_origin'
    assert data['alert_message'] is not None

    r = client.post('/search/alert/dismiss')
    assert r.json()['data']['alert_message'] is None


def test_pushed_fix_enables_device_search(client):
    r = client.post('/location/fix', json={'latitude': NYC.latitude, 'longitude': NYC.longitude})
    assert r.status_code == 200
    assert r.json()['data']['status_text'] == 'Location updated.'

    r = client.post('/search', json={'postal_code': '  '})
    data = r.json()['data']
    assert data['status']['kind'] == 'success'
    assert data['status']['count'] == 2


def test_out_of_range_fix_is_rejected(client):
    r = client.post('/location/fix', json={'latitude': 120.0, 'longitude': 0.0})
    assert r.status_code == 422
    body = r.json()
    assert body['error_code'] == 'VALIDATION_ERROR'
    assert body['request_id']


def test_location_failure_sets_alert(client):
    r = client.post('/location/failure', json={'reason': 'denied'})
    assert r.status_code == 200
    assert r.json()['data']['alert_message'].startswith('Couldn')


def test_authorization_change_sets_advisory(client):
    r = client.post('/location/authorization', json={'state': 'denied'})
    assert r.status_code == 200
    assert r.json()['data']['status_text'] == 'Location disabled. You can still search by ZIP.'


def test_use_my_location(client):
    r = client.post('/location/request')
    assert r.status_code == 200
    assert r.json()['data']['status_text'] == 'Getting your location…'


def test_focus_and_directions(client, launcher):
    places = client.post('/search', json={'postal_code': '10001'}).json()['data']['places']
    target = places[1]

    r = client.post(f"/search/places/{target['id']}/focus")
    assert r.status_code == 200
    data = r.json()['data']
    assert data['focused_place']['id'] == target['id']
    assert data['region']['latitude'] == pytest.approx(target['latitude'])

    r = client.post(f"/search/places/{target['id']}/directions")
    assert r.status_code == 200
    data = r.json()['data']
    assert data['mode'] == 'driving'
    assert 'dirflg=d' in data['url']
    assert list(launcher.launched) == [data['url']]


def test_unknown_place_returns_404(client):
    client.post('/search', json={'postal_code': '10001'})
    r = client.post('/search/places/nope/directions')
    assert r.status_code == 404
    body = r.json()
    assert body['error_code'] == 'PLACE_NOT_FOUND'
    assert body['details'] == {'place_id': 'nope'}


def test_clear_resets_results(client):
    client.post('/search', json={'postal_code': '10001'})
    r = client.post('/search/clear')
    assert r.status_code == 200
    data = r.json()['data']
    assert data['status']['kind'] == 'idle'
    assert data['places'] == []
    assert data['generation'] == 2


def test_health_and_metrics(client):
    r = client.get('/health')
    assert r.status_code == 200
    assert r.json()['status'] == 'ok'

    client.post('/search', json={'postal_code': '10001'})
    r = client.get('/metrics/search')
    assert r.status_code == 200
    data = r.json()['data']
    assert data['search']['count'] >= 1
    assert data['outcomes'].get('success', 0) >= 1


def test_request_id_header(client):
    r = client.get('/')
    assert r.status_code == 200
    assert r.json()['status'] == 'running'
    assert r.headers['X-Request-ID']
    assert float(r.headers['X-Response-Time-Ms']) >= 0


def test_client_request_id_is_echoed(client):
    r = client.post('/location/fix', headers={'X-Request-ID': 'trace-123'}, json={'latitude': 999, 'longitude': 0})
    assert r.status_code == 422
    assert r.headers['X-Request-ID'] == 'trace-123'
    assert r.json()['request_id'] == 'trace-123'
