"""
Tests for the map API and page
"""

import json
import os

import pytest

from app import create_app
from routes.api import ERROR_STATUS
from models.errors import ErrorKind, GeoError
from services.geolocator import IpGeolocator
from tests.helpers import StubClient, location_payload


def _line(address):
    return json.dumps({"peerInfo": {"gossipAddress": {"address": address}}})


@pytest.fixture
def cache_client(data_file):
    """Test client over a cache-backed geolocator holding 1.2.3.4"""
    geoip = IpGeolocator(str(data_file), enable_api=False)
    return create_app(geoip).test_client()


class TestLocationsEndpoint:

    def test_lists_markers(self, cache_client):
        response = cache_client.get('/api/locations')

        assert response.status_code == 200
        assert response.get_json() == {
            "count": 1,
            "markers": [{"ip": "1.2.3.4", "lat": 10.0, "lon": 20.0, "city": "Mountain View", "country": "US"}],
        }

    def test_skips_entries_that_fail(self, data_file):
        """Test that a broken entry is left off the map"""
        geoip = IpGeolocator(str(data_file), enable_api=False)
        geoip._locations["5.6.7.8"] = None

        response = create_app(geoip).test_client().get('/api/locations')

        assert [m["ip"] for m in response.get_json()["markers"]] == ["1.2.3.4"]

    def test_watch_reprocesses_changed_log(self, tmp_path, api_key):
        """Test that a modified hub log is merged on the next poll"""
        log = tmp_path / "hub.log"
        log.write_text(_line("1.1.1.1"))
        os.utime(log, (1_600_000_000, 1_600_000_000))
        client = StubClient()
        geoip = IpGeolocator(str(tmp_path / "geoip.json"), enable_api=True, client=client)
        app = create_app(geoip, hub_log_file=str(log), watch=True)

        assert app.test_client().get('/api/locations').get_json()["count"] == 0

        log.write_text(_line("1.1.1.1") + "\n" + _line("2.2.2.2"))
        os.utime(log, (1_700_000_000, 1_700_000_000))
        data = app.test_client().get('/api/locations').get_json()

        assert data["count"] == 2
        assert sorted(client.calls) == ["1.1.1.1", "2.2.2.2"]


class TestLookupEndpoint:

    def test_hit(self, cache_client):
        response = cache_client.get('/api/lookup?ip=1.2.3.4')

        assert response.status_code == 200
        assert response.get_json() == {**location_payload("1.2.3.4"), "latitude": 10.0, "longitude": 20.0}

    def test_miss(self, cache_client):
        response = cache_client.get('/api/lookup?ip=5.6.7.8')

        assert response.status_code == 404
        assert response.get_json()["kind"] == "not_found"

    def test_status_table_has_only_lookup_kinds(self):
        """Test that every mapped kind is one a lookup can return"""
        lookup_kinds = {
            ErrorKind.INVALID_ADDRESS,
            ErrorKind.NOT_FOUND,
            ErrorKind.RESPONSE_PARSE_ERROR,
            ErrorKind.TRANSPORT_ERROR,
            ErrorKind.CORRUPT_ENTRY,
        }

        assert set(ERROR_STATUS) == lookup_kinds

    def test_missing_parameter(self, cache_client):
        assert cache_client.get('/api/lookup').status_code == 400

    def test_invalid_address(self, tmp_path, api_key):
        geoip = IpGeolocator(str(tmp_path / "geoip.json"), enable_api=True)

        response = create_app(geoip).test_client().get('/api/lookup?ip=999.1')

        assert response.status_code == 400
        assert response.get_json()["kind"] == ErrorKind.INVALID_ADDRESS.value

    def test_transport_error(self, tmp_path, api_key):
        client = StubClient({"9.9.9.9": GeoError(ErrorKind.TRANSPORT_ERROR, "Request failed", ip="9.9.9.9")})
        geoip = IpGeolocator(str(tmp_path / "geoip.json"), enable_api=True, client=client)

        response = create_app(geoip).test_client().get('/api/lookup?ip=9.9.9.9')

        assert response.status_code == 502


class TestRefreshAndSave:

    def test_refresh_without_log(self, cache_client):
        assert cache_client.post('/api/refresh').status_code == 400

    def test_refresh_merges_log(self, tmp_path, api_key):
        log = tmp_path / "hub.log"
        log.write_text(_line("3.3.3.3"))
        geoip = IpGeolocator(str(tmp_path / "geoip.json"), enable_api=True, client=StubClient())

        response = create_app(geoip, hub_log_file=str(log)).test_client().post('/api/refresh')

        assert response.get_json() == {"count": 1}

    def test_refresh_missing_log(self, tmp_path, api_key):
        geoip = IpGeolocator(str(tmp_path / "geoip.json"), enable_api=True, client=StubClient())

        response = create_app(geoip, hub_log_file=str(tmp_path / "gone.log")).test_client().post('/api/refresh')

        assert response.status_code == 404

    def test_save(self, tmp_path):
        path = tmp_path / "geoip.json"
        geoip = IpGeolocator(str(path), enable_api=False)

        response = create_app(geoip).test_client().post('/api/save')

        assert response.get_json() == {"saved": True}
        assert json.loads(path.read_text()) == {}


class TestPages:

    def test_health(self, cache_client):
        data = cache_client.get('/api/health').get_json()

        assert data["status"] == "healthy"
        assert data["locations"] == 1
        assert data["api_enabled"] is False

    def test_map_page(self, cache_client):
        response = cache_client.get('/')

        assert response.status_code == 200
        assert b"/api/locations" in response.data
        assert b"setInterval" not in response.data

    def test_map_popup_does_not_render_html(self, cache_client):
        """Test that popup text is inserted as text nodes, not markup"""
        response = cache_client.get('/')

        assert b"createTextNode" in response.data
        assert b"<b>${m.ip}</b>" not in response.data
