import pytest
import requests

from localfinder.core.taxonomy import Domain
from localfinder.models import Coordinate
from localfinder.vendors import nearby_api

ORIGIN = Coordinate(17.3850, 78.4867)


class DummyResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class DummySession:
    def __init__(self):
        self.calls = []
        self.response = DummyResponse(payload={"data": []})
        self.error = None

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params, timeout))
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture(autouse=True)
def patch_session(monkeypatch):
    session = DummySession()
    monkeypatch.setattr(nearby_api, "_SESSION", session)
    return session


def test_search_nearby_builds_request(patch_session):
    patch_session.response = DummyResponse(
        payload={"success": True, "data": [{"_id": "r1", "name": "Chutneys", "latitude": 17.41, "longitude": 78.43}]}
    )

    records = nearby_api.search_nearby(Domain.FOOD, ORIGIN, 10.0, "https://api.test/")

    url, params, timeout = patch_session.calls[0]
    assert url == "https://api.test/getNearby"
    assert params == {"latitude": 17.3850, "longitude": 78.4867, "distance": 10.0}
    assert timeout == 10
    assert [r.name for r in records] == ["Chutneys"]
    assert records[0].source == "live"


def test_real_estate_uses_range_param(patch_session):
    nearby_api.search_nearby(Domain.REAL_ESTATE, ORIGIN, 5.0, "https://api.test")

    url, params, _ = patch_session.calls[0]
    assert url.endswith("/getNearbyRealEstates")
    assert params["range"] == 5.0
    assert "distance" not in params


def test_workers_send_subcategory(patch_session):
    nearby_api.search_nearby(Domain.WORKER_GENERIC, ORIGIN, 20.0, "https://api.test", subcategory="plumbers", timeout=3)

    url, params, timeout = patch_session.calls[0]
    assert url.endswith("/getNearbyWorkers")
    assert params["subcategory"] == "plumbers"
    assert params["range"] == 20.0
    assert timeout == 3


def test_subcategory_ignored_for_other_domains(patch_session):
    nearby_api.search_nearby(Domain.AUTOMOTIVE, ORIGIN, 2.0, "https://api.test", subcategory="car-wash")

    _, params, _ = patch_session.calls[0]
    assert "subcategory" not in params


def test_place_generic_has_no_endpoint(patch_session):
    with pytest.raises(nearby_api.NearbyApiError):
        nearby_api.search_nearby(Domain.PLACE_GENERIC, ORIGIN, 10.0, "https://api.test")
    assert patch_session.calls == []


def test_requires_base_url_and_positive_radius(patch_session):
    with pytest.raises(nearby_api.NearbyApiError):
        nearby_api.search_nearby(Domain.FOOD, ORIGIN, 10.0, "")
    with pytest.raises(ValueError):
        nearby_api.search_nearby(Domain.FOOD, ORIGIN, 0, "https://api.test")
    assert patch_session.calls == []


def test_non_2xx_raises(patch_session, caplog):
    patch_session.response = DummyResponse(status_code=503, text="unavailable")

    with caplog.at_level("ERROR"):
        with pytest.raises(nearby_api.NearbyApiError):
            nearby_api.search_nearby(Domain.HOTEL, ORIGIN, 10.0, "https://api.test")
    assert "non-2xx" in " ".join(caplog.messages)


def test_non_json_body_raises(patch_session):
    patch_session.response = DummyResponse(payload=None, text="<html>")

    with pytest.raises(nearby_api.NearbyApiError):
        nearby_api.search_nearby(Domain.HOTEL, ORIGIN, 10.0, "https://api.test")


def test_unsuccessful_search_raises(patch_session):
    patch_session.response = DummyResponse(payload={"success": False, "message": "invalid coordinates"})

    with pytest.raises(nearby_api.NearbyApiError) as excinfo:
        nearby_api.search_nearby(Domain.BEAUTY, ORIGIN, 10.0, "https://api.test")
    assert "invalid coordinates" in str(excinfo.value)


def test_transport_errors_are_wrapped(patch_session):
    patch_session.error = requests.ConnectionError("refused")

    with pytest.raises(nearby_api.NearbyApiError):
        nearby_api.search_nearby(Domain.SHOPPING, ORIGIN, 10.0, "https://api.test")


def test_every_backend_domain_has_an_endpoint():
    assert set(nearby_api.ENDPOINTS) == set(Domain) - {Domain.PLACE_GENERIC}
