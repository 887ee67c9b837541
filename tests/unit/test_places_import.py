"""
Unit tests for the Google Places import
"""
import httpx
import pytest
from sqlalchemy import select

from app.config.settings import PlacesSettings
from app.core.exceptions import InvalidQueryError, ProviderError
from app.models.establishment import Establishment
from app.schemas.establishment import ImportNearbyRequest
from app.services.places_client import GooglePlacesClient
from app.services.places_import import (
    PlacesImportService,
    infer_commune_from_address,
    map_google_types_to_category,
)


def place(place_id, name, types, vicinity="Boulevard VGE, Marcory", lat=5.30, lng=-3.99, photos=None):
    return {
        "place_id": place_id,
        "name": name,
        "types": types,
        "vicinity": vicinity,
        "geometry": {"location": {"lat": lat, "lng": lng}},
        "photos": photos or [],
    }


class PlacesApi:
    """MockTransport handler serving Nearby Search pages keyed by page token."""

    def __init__(self, first, pages=None):
        self.first = first
        self.pages = pages or {}
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        token = request.url.params.get("pagetoken")
        body = self.pages.get(token, {"status": "INVALID_REQUEST"}) if token else self.first
        return httpx.Response(200, json=body)


@pytest.fixture
def make_importer():
    def _make(api, api_key="test-places-key"):
        sleeps = []

        async def fake_sleep(seconds):
            sleeps.append(seconds)

        client = GooglePlacesClient(
            settings=PlacesSettings(api_key=api_key),
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(api)),
            sleep=fake_sleep,
        )
        importer = PlacesImportService(client)
        importer.sleeps = sleeps
        return importer
    return _make


@pytest.mark.parametrize("types,expected", [
    (["lodging", "restaurant"], "hotel"),
    (["liquor_store"], "cave"),
    (["drugstore"], "pharmacy"),
    (["police"], "police"),
    (["doctor", "health"], "hospital"),
    (["fire_station"], "emergency"),
    (["restaurant", "bar"], "restaurant"),
    (["night_club", "bar"], "lounge"),
    (["CAFE"], "bar"),
    (["point_of_interest"], "other"),
    (None, "other"),
])
def test_map_google_types_to_category(types, expected):
    assert map_google_types_to_category(types) == expected


@pytest.mark.parametrize("address,expected", [
    ("Rue des Jardins, Deux Plateaux", "Cocody"),
    ("Angré 8e tranche", "Cocody"),
    ("Avenue Chardy, Plateau", "Plateau"),
    ("Zone 4, Marcory", "Marcory"),
    ("Port Bouet, route de Bassam", "Port-Bouët"),
    ("Adjame Liberté", "Adjamé"),
    ("Grand-Bassam", None),
    (None, None),
])
def test_infer_commune_from_address(address, expected):
    assert infer_commune_from_address(address) == expected


@pytest.mark.asyncio
async def test_import_pages_and_upserts(db_session, make_importer):
    api = PlacesApi(
        first={
            "status": "OK",
            "results": [
                place("p1", "Maquis Chez Tante", ["restaurant"],
                      photos=[{"photo_reference": f"ref{i}"} for i in range(5)]),
                {"place_id": "no-location", "name": "Ghost"},
            ],
            "next_page_token": "page2",
        },
        pages={
            "page2": {"status": "OK", "results": [place("p2", "Hotel Ivoire", ["lodging"])],
                      "next_page_token": "page3"},
        },
    )
    importer = make_importer(api)

    result = await importer.import_nearby(
        db_session, ImportNearbyRequest(lat=5.30, lng=-3.99, types=["restaurant"])
    )

    assert result.ok is True
    assert result.scanned == 2
    assert result.upserted == 2
    # page 3 failed with INVALID_REQUEST: paging stops without failing the import
    assert len(api.requests) == 3
    assert importer.sleeps == [2.1, 2.1]

    rows = (await db_session.execute(select(Establishment).order_by(Establishment.name))).scalars().all()
    assert [(r.name, r.category, r.commune, r.published) for r in rows] == [
        ("Hotel Ivoire", "hotel", "Marcory", True),
        ("Maquis Chez Tante", "restaurant", "Marcory", True),
    ]
    maquis = rows[1]
    assert len(maquis.photos) == 3
    assert "photo_reference=ref0" in maquis.photos[0]
    assert maquis.provider == "google"


@pytest.mark.asyncio
async def test_reimport_updates_existing_row(db_session, make_importer):
    request = ImportNearbyRequest(lat=5.30, lng=-3.99, types=["bar"])
    first = await make_importer(PlacesApi({"status": "OK", "results": [place("p1", "Old Name", ["bar"])]})) \
        .import_nearby(db_session, request)
    second = await make_importer(PlacesApi({"status": "OK", "results": [place("p1", "New Name", ["bar"])]})) \
        .import_nearby(db_session, request)

    assert first.ids == second.ids
    rows = (await db_session.execute(select(Establishment))).scalars().all()
    assert [r.name for r in rows] == ["New Name"]


@pytest.mark.asyncio
async def test_unknown_type_rejected_before_calling_provider(db_session, make_importer):
    api = PlacesApi({"status": "OK", "results": []})

    with pytest.raises(InvalidQueryError) as exc_info:
        await make_importer(api).import_nearby(
            db_session, ImportNearbyRequest(lat=5.3, lng=-4.0, types=["restaurant", "casino"])
        )

    assert "casino" in exc_info.value.message
    assert api.requests == []


@pytest.mark.asyncio
async def test_first_page_error_raises_provider_error(db_session, make_importer):
    api = PlacesApi({"status": "REQUEST_DENIED", "error_message": "The provided API key is invalid."})

    with pytest.raises(ProviderError) as exc_info:
        await make_importer(api).import_nearby(
            db_session, ImportNearbyRequest(lat=5.3, lng=-4.0, types=["bar"])
        )

    assert exc_info.value.status_code == 502
    assert "API key is invalid" in exc_info.value.message


@pytest.mark.asyncio
async def test_missing_api_key_raises_provider_error(db_session, make_importer):
    api = PlacesApi({"status": "OK", "results": []})

    with pytest.raises(ProviderError):
        await make_importer(api, api_key=None).import_nearby(
            db_session, ImportNearbyRequest(lat=5.3, lng=-4.0, types=["bar"])
        )
    assert api.requests == []
