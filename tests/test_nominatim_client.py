import requests

from routing.nominatim_client import NominatimClient, PlaceResult, format_address

from conftest import FakeResponse, FakeSession

SEARCH_PAYLOAD = [
    {
        "name": "Cairo Tower",
        "display_name": "Cairo Tower, Zamalek, Cairo, Egypt",
        "lat": "30.0459",
        "lon": "31.2243",
    },
    {
        "name": "",
        "display_name": "City Stars Mall, Nasr City, Cairo, Egypt",
        "lat": "30.0732",
        "lon": "31.3413",
    },
]


def make_client(session):
    return NominatimClient(base_url="https://geo.example/", country_codes="eg", session=session)


def test_search_places_normalizes_results():
    session = FakeSession(FakeResponse(SEARCH_PAYLOAD))
    client = make_client(session)

    results = client.search_places("cairo")

    assert results == [
        PlaceResult("Cairo Tower", "Cairo Tower, Zamalek, Cairo, Egypt", (30.0459, 31.2243)),
        # name falls back to the first part of the display name
        PlaceResult("City Stars Mall", "City Stars Mall, Nasr City, Cairo, Egypt", (30.0732, 31.3413)),
    ]

    call = session.calls[0]
    assert call["url"] == "https://geo.example/search"
    assert call["params"]["q"] == "cairo"
    assert call["params"]["countrycodes"] == "eg"
    assert call["params"]["limit"] == 5
    assert call["timeout"] == client.timeout
    assert "User-Agent" in session.headers


def test_short_query_skips_the_request():
    session = FakeSession(FakeResponse(SEARCH_PAYLOAD))

    assert make_client(session).search_places("ca") == []
    assert session.calls == []


def test_search_failures_return_empty():
    assert make_client(FakeSession(error=requests.ConnectionError("down"))).search_places("cairo") == []
    assert make_client(FakeSession(FakeResponse(status_code=503))).search_places("cairo") == []
    assert make_client(FakeSession(FakeResponse(invalid_json=True))).search_places("cairo") == []
    assert make_client(FakeSession(FakeResponse([{"lat": "x"}]))).search_places("cairo") == []


def test_reverse_geocode_builds_label():
    payload = {"address": {"road": "Tahrir Street", "city": "Cairo"}}
    session = FakeSession(FakeResponse(payload))

    label = make_client(session).reverse_geocode((30.0444, 31.2357))

    assert label == "Tahrir Street, Cairo"
    params = session.calls[0]["params"]
    assert (params["lat"], params["lon"], params["zoom"]) == (30.0444, 31.2357, 18)


def test_address_fields_fall_back_in_order():
    assert format_address({"suburb": "Zamalek", "state": "Cairo Governorate"}) == "Zamalek, Cairo Governorate"
    assert format_address({"city_district": "Maadi", "city": "Cairo"}) == "Maadi, Cairo"
    assert format_address({"village": "Abu Rawash"}) == "Abu Rawash, "
    assert format_address({}) == "Unknown Road, "


def test_reverse_geocode_failure_returns_pinned_label():
    coords = (30.04441, 31.23571)

    timed_out = make_client(FakeSession(error=requests.Timeout("slow"))).reverse_geocode(coords)
    malformed = make_client(FakeSession(FakeResponse({"error": "Unable to geocode"}))).reverse_geocode(coords)

    assert timed_out == "Pinned Location (30.0444, 31.2357)"
    assert malformed == "Pinned Location (30.0444, 31.2357)"
