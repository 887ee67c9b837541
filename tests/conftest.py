"""
Shared fixtures: in-memory sqlite storage, settings, fake clock and
Mapbox/Google payload builders for httpx.MockTransport handlers.
"""
import pytest
import pytest_asyncio

from app.config.settings import (
    DatabaseSettings,
    DirectionsSettings,
    PlacesSettings,
    ProximitySettings,
    SecuritySettings,
    Settings,
)
from app.core import metrics_proximity
from app.core.db import Database
from app.models.establishment import Establishment

SQLITE_URL = "sqlite+aiosqlite:///:memory:"
ADMIN_TOKEN = "test-admin-token"

# Abidjan, Plateau
ORIGIN_LAT = 5.3261
ORIGIN_LNG = -4.0200


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_settings(**overrides) -> Settings:
    values = dict(
        database=DatabaseSettings(url=SQLITE_URL, create_tables=True),
        proximity=ProximitySettings(),
        directions=DirectionsSettings(access_token="test-mapbox-token"),
        places=PlacesSettings(api_key="test-places-key", page_delay_seconds=0),
        security=SecuritySettings(admin_token=ADMIN_TOKEN),
    )
    values.update(overrides)
    return Settings(**values)


def make_establishment(name: str, lat: float, lng: float, **fields) -> Establishment:
    values = dict(
        name=name,
        category="restaurant",
        address=None,
        commune=None,
        photos=None,
        lat=lat,
        lng=lng,
        published=True,
    )
    values.update(fields)
    return Establishment(**values)


def mapbox_route_payload(distance=5200.0, duration=780.0, steps=None):
    """Directions v5 response body with one route and one leg."""
    if steps is None:
        steps = [
            {"distance": 3000.0, "duration": 400.0, "name": "Boulevard Lagunaire",
             "maneuver": {"location": [-4.0200, 5.3261], "type": "depart",
                          "instruction": "Head east", "bearing_after": 90}},
            {"distance": 2200.0, "duration": 380.0, "name": "Rue du Commerce",
             "maneuver": {"location": [-4.0100, 5.3300], "type": "turn", "modifier": "left",
                          "instruction": "Turn left", "bearing_before": 90, "bearing_after": 0}},
            {"distance": 0.0, "duration": 0.0, "name": "",
             "maneuver": {"location": [-3.9980, 5.2950], "type": "arrive",
                          "instruction": "You have arrived"}},
        ]
    return {
        "code": "Ok",
        "routes": [
            {
                "distance": distance,
                "duration": duration,
                "geometry": {
                    "type": "LineString",
                    "coordinates": [[-4.0200, 5.3261], [-4.0100, 5.3300], [-3.9980, 5.2950]],
                },
                "legs": [{"steps": steps}],
            }
        ],
    }


@pytest.fixture(autouse=True)
def reset_proximity_metrics():
    metrics_proximity.reset_metrics()
    yield
    metrics_proximity.reset_metrics()


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest_asyncio.fixture
async def database():
    db = Database(SQLITE_URL)
    await db.create_all()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def db_session(database):
    async with database.session() as session:
        yield session


@pytest_asyncio.fixture
async def seed(db_session):
    """Insert establishments and commit; returns the created rows."""
    async def _seed(*establishments):
        db_session.add_all(establishments)
        await db_session.commit()
        return list(establishments)
    return _seed


@pytest.fixture
def settings_factory():
    return make_settings


@pytest.fixture
def establishment_factory():
    return make_establishment


@pytest.fixture
def route_payload():
    return mapbox_route_payload
