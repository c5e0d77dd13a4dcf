import pytest
import requests

from app.config import settings
from app.services import geocoding_service


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


@pytest.fixture()
def api_key(monkeypatch):
    monkeypatch.setattr(settings, "GOOGLE_MAPS_API_KEY", "test-key")


@pytest.fixture()
def fake_get(monkeypatch):
    calls = []

    def install(payload=None, status_code=200, exc=None):
        def _get(url, params=None, timeout=None):
            calls.append({"url": url, "params": params, "timeout": timeout})
            if exc is not None:
                raise exc
            return FakeResponse(payload, status_code)

        monkeypatch.setattr(geocoding_service.requests, "get", _get)
        return calls

    return install


OK_PAYLOAD = {
    "status": "OK",
    "results": [{
        "formatted_address": "221 Lake View Rd, Hyderabad, Telangana 500001, India",
        "geometry": {"location": {"lat": 17.385, "lng": 78.4867}},
        "address_components": [
            {"long_name": "221", "types": ["street_number"]},
            {"long_name": "Lake View Road", "types": ["route"]},
            {"long_name": "Banjara Hills", "types": ["sublocality_level_2", "sublocality"]},
            {"long_name": "Hyderabad", "types": ["locality", "political"]},
            {"long_name": "Telangana", "types": ["administrative_area_level_1", "political"]},
            {"long_name": "500001", "types": ["postal_code"]},
        ],
    }],
}


def test_geocode_returns_coordinates(api_key, fake_get):
    calls = fake_get(OK_PAYLOAD)

    result = geocoding_service.geocode_address("221 Lake View Road, Hyderabad")

    assert result == {
        "latitude": 17.385,
        "longitude": 78.4867,
        "formatted_address": "221 Lake View Rd, Hyderabad, Telangana 500001, India",
    }
    assert calls[0]["params"] == {"address": "221 Lake View Road, Hyderabad", "key": "test-key"}
    assert calls[0]["timeout"] == settings.GEOCODING_TIMEOUT_SECONDS


def test_geocode_without_api_key_skips_request(fake_get):
    calls = fake_get(OK_PAYLOAD)

    assert geocoding_service.geocode_address("anywhere") is None
    assert calls == []


@pytest.mark.parametrize("payload", [
    {"status": "ZERO_RESULTS", "results": []},
    {"status": "REQUEST_DENIED", "error_message": "The provided API key is invalid."},
    {"status": "OK", "results": []},
    {"status": "OK", "results": [{"geometry": {}}]},
    ["not", "an", "object"],
])
def test_geocode_unusable_payload_returns_none(api_key, fake_get, payload):
    fake_get(payload)
    assert geocoding_service.geocode_address("221 Lake View Road") is None


def test_geocode_network_error_returns_none(api_key, fake_get):
    fake_get(exc=requests.Timeout("timed out"))
    assert geocoding_service.geocode_address("221 Lake View Road") is None


def test_geocode_http_error_returns_none(api_key, fake_get):
    fake_get({"status": "OK"}, status_code=503)
    assert geocoding_service.geocode_address("221 Lake View Road") is None


def test_geocode_non_json_body_returns_none(api_key, fake_get):
    fake_get(ValueError("no json"))
    assert geocoding_service.geocode_address("221 Lake View Road") is None


def test_reverse_geocode_parses_components(api_key, fake_get):
    calls = fake_get(OK_PAYLOAD)

    result = geocoding_service.reverse_geocode(17.385, 78.4867)

    assert calls[0]["params"]["latlng"] == "17.385,78.4867"
    assert result["address_line1"] == "Banjara Hills, 221 Lake View Road"
    assert result["city"] == "Hyderabad"
    assert result["state"] == "Telangana"
    assert result["pincode"] == "500001"


def test_reverse_geocode_falls_back_to_city(api_key, fake_get):
    fake_get({"status": "OK", "results": [{
        "formatted_address": "Hyderabad, India",
        "address_components": [{"long_name": "Hyderabad", "types": ["locality"]}],
    }]})

    result = geocoding_service.reverse_geocode(17.0, 78.0)

    assert result["address_line1"] == "Hyderabad"
    assert result["state"] == "Unknown State"
    assert result["pincode"] == ""
