import httpx
import pytest

from geopal.errors import LookupFailure, MissingCredential
from geopal.services.geocoding import PlaceName, parse_place, resolve_place

BERLIN = {
    "status": "OK",
    "results": [
        {"address_components": [
            {"long_name": "Mitte", "types": ["sublocality"]},
            {"long_name": "Berlin", "types": ["locality", "political"]},
            {"long_name": "Germany", "types": ["country", "political"]},
        ]},
        {"address_components": [
            {"long_name": "Germany", "types": ["country", "political"]},
        ]},
    ],
}


def client_returning(status_code, body, seen=None):
    def handler(request):
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, json=body)
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestParsePlace:
    def test_city_and_country(self):
        assert parse_place(BERLIN) == PlaceName(city="Berlin", country="Germany")

    def test_missing_components_default(self):
        place = parse_place({"status": "ZERO_RESULTS", "results": []})

        assert str(place) == "N/A, N/A"

    def test_later_results_win(self):
        body = {"results": [
            {"address_components": [{"long_name": "Paris", "types": ["locality"]}]},
            {"address_components": [{"long_name": "Lyon", "types": ["locality"]}]},
        ]}

        assert parse_place(body).city == "Lyon"


class TestResolvePlace:
    def test_resolves(self, run):
        seen = []

        place = run(resolve_place(52.52, 13.405, client=client_returning(200, BERLIN, seen), api_key="KEY"))

        assert str(place) == "Berlin, Germany"
        assert seen[0].url.params["latlng"] == "52.52,13.405"
        assert seen[0].url.params["key"] == "KEY"

    def test_missing_key(self, run):
        with pytest.raises(MissingCredential):
            run(resolve_place(0, 0, client=client_returning(200, BERLIN), api_key=""))

    def test_denied_request(self, run):
        body = {"status": "REQUEST_DENIED", "error_message": "invalid key"}

        with pytest.raises(LookupFailure):
            run(resolve_place(0, 0, client=client_returning(200, body), api_key="KEY"))

    def test_http_error(self, run):
        with pytest.raises(LookupFailure):
            run(resolve_place(0, 0, client=client_returning(500, {}), api_key="KEY"))
