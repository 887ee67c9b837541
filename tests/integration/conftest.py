"""
Application fixture wired to in-memory sqlite and mock provider transports.
"""
from dataclasses import dataclass, field

import httpx
import pytest
from fastapi.testclient import TestClient

from app.core.db import Database
from app.core.dependencies import ServiceContainer
from app.main import create_app


@dataclass
class MockProvider:
    """Synchronous MockTransport handler with a swappable JSON response."""
    payload: dict
    status_code: int = 200
    requests: list = field(default_factory=list)

    def __call__(self, request):
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.payload)


@dataclass
class Api:
    client: TestClient
    directions: MockProvider
    places: MockProvider
    admin_headers: dict

    def create_venue(self, name, lat, lng, **fields):
        body = {"name": name, "category": "restaurant", "lat": lat, "lng": lng, **fields}
        r = self.client.post("/api/establishments", json=body, headers={"X-User-Id": "owner-1"})
        assert r.status_code == 201, r.text
        return r.json()["establishment"]


@pytest.fixture
def api(settings_factory, route_payload):
    directions = MockProvider(route_payload())
    places = MockProvider({"status": "ZERO_RESULTS", "results": []})

    async def no_sleep(seconds):
        return None

    settings = settings_factory()
    container = ServiceContainer(
        settings,
        database=Database(settings.database.url),
        directions_http=httpx.AsyncClient(transport=httpx.MockTransport(directions)),
        places_http=httpx.AsyncClient(transport=httpx.MockTransport(places)),
        places_sleep=no_sleep,
    )
    with TestClient(create_app(container)) as client:
        yield Api(
            client=client,
            directions=directions,
            places=places,
            admin_headers={"X-Admin-Token": settings.security.admin_token},
        )
