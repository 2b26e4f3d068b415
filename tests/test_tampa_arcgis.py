import httpx
import pytest
from decimal import Decimal

from parkfinder.domain.common import SpotSource
from parkfinder.infrastructure.external.tampa_arcgis import TampaArcGISParkingSource, parse_rate, QUERY_PARAMS

FEED_URL = "https://example.test/arcgis/query"

FEATURES = {
    "type": "FeatureCollection",
    "features": [
        {
            "type": "Feature",
            "geometry": {"type": "Point", "coordinates": [-82.4571, 27.9478]},
            "properties": {
                "OBJECTID": 7,
                "NAME": "Fort Brooke Garage",
                "ADDRESS": "107 N Franklin St",
                "RATE": "$1.60",
                "SPACES": 1200,
            },
        },
        {
            "type": "Feature",
            "geometry": None,
            "properties": {"OBJECTID": 8, "LAT": 27.95, "LON": -82.46, "RATE": "free"},
        },
        {"type": "Feature", "geometry": None},
    ],
}


def _source(handler):
    return TampaArcGISParkingSource(
        url=FEED_URL,
        timeout=5,
        city="Tampa",
        default_available_spots=50,
        default_rating=4.0,
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.parametrize("rate,expected", [
    ("$2.50", Decimal("2.50")),
    ("1.75", Decimal("1.75")),
    ("$ 3", Decimal("3")),
    ("free", Decimal("0")),
    ("", Decimal("0")),
    (None, Decimal("0")),
    ("-1", Decimal("0")),
    ("NaN", Decimal("0")),
])
def test_parse_rate(rate, expected):
    assert parse_rate(rate) == expected


class TestTampaArcGISParkingSource:
    async def test_fetch_maps_features(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json=FEATURES)

        spots = await _source(handler).fetch()

        assert len(spots) == 2
        assert dict(requests[0].url.params) == QUERY_PARAMS

        garage = spots[0]
        assert garage.name == "Fort Brooke Garage"
        assert garage.address == "107 N Franklin St"
        assert garage.city == "Tampa"
        assert garage.price == Decimal("1.60")
        assert garage.available_spots == 1200
        assert garage.latitude == 27.9478
        assert garage.longitude == -82.4571
        assert garage.source == SpotSource.EXTERNAL_API
        assert garage.external_id == "7"
        assert garage.rating == 4.0
        assert garage.id is None

    async def test_missing_fields_get_defaults(self):
        spots = await _source(lambda request: httpx.Response(200, json=FEATURES)).fetch()

        lot = spots[1]
        assert lot.name == "Unknown Parking"
        assert lot.address == "No address provided"
        assert lot.price == Decimal("0")
        assert lot.available_spots == 50
        assert (lot.latitude, lot.longitude) == (27.95, -82.46)
        assert lot.external_id == "8"

    async def test_esri_attributes_are_accepted(self):
        payload = {"features": [{"attributes": {"OBJECTID": 3, "NAME": "Poe Garage", "SPACES": "abc"}}]}

        spots = await _source(lambda request: httpx.Response(200, json=payload)).fetch()

        assert spots[0].name == "Poe Garage"
        assert spots[0].available_spots == 50
        assert spots[0].latitude is None

    async def test_unreadable_coordinates_keep_the_rest_of_the_feed(self):
        payload = {"features": [
            FEATURES["features"][0],
            {"geometry": None, "properties": {"OBJECTID": 9, "NAME": "Lot A", "LAT": "n/a", "LON": "-82.46"}},
            {
                "geometry": {"type": "Polygon", "coordinates": [[[-82.45, 27.94], [-82.44, 27.94], [-82.45, 27.95]]]},
                "properties": {"OBJECTID": 10, "NAME": "Lot B"},
            },
            {
                "geometry": {"type": "Point", "coordinates": ["x", "y"]},
                "properties": {"OBJECTID": 11, "NAME": "Lot C", "LAT": 27.96, "LON": -82.47},
            },
        ]}

        spots = await _source(lambda request: httpx.Response(200, json=payload)).fetch()

        assert [s.external_id for s in spots] == ["7", "9", "10", "11"]
        assert (spots[0].latitude, spots[0].longitude) == (27.9478, -82.4571)
        assert (spots[1].latitude, spots[1].longitude) == (None, None)
        assert (spots[2].latitude, spots[2].longitude) == (None, None)
        assert (spots[3].latitude, spots[3].longitude) == (27.96, -82.47)

    async def test_server_error_returns_empty(self):
        assert await _source(lambda request: httpx.Response(503)).fetch() == []

    async def test_invalid_json_returns_empty(self):
        assert await _source(lambda request: httpx.Response(200, content=b"<html>")).fetch() == []

    async def test_empty_features_returns_empty(self):
        assert await _source(lambda request: httpx.Response(200, json={"features": []})).fetch() == []

    async def test_transport_error_returns_empty(self):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        assert await _source(handler).fetch() == []
