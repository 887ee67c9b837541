"""
Integration tests for public establishment endpoints
"""

NEARBY = "/api/establishments?lat=5.3261&lng=-4.0200&radiusKm=10&category=all"


def test_nearby_returns_sorted_venues_with_cache_headers(api):
    api.create_venue("Middle", 5.3400, -4.0200)
    api.create_venue("Near", 5.3270, -4.0200)
    api.create_venue("Far away", 5.6000, -4.0200)

    r = api.client.get(NEARBY)

    assert r.status_code == 200
    names = [v["name"] for v in r.json()["establishments"]]
    assert names == ["Near", "Middle"]
    assert r.headers["X-Cache"] == "MISS"
    assert r.headers["Cache-Control"] == "public, max-age=10, s-maxage=30, stale-while-revalidate=60"
    assert r.headers["ETag"].startswith('W/"')
    assert "X-Request-ID" in r.headers


def test_repeated_nearby_is_cache_hit_with_identical_body(api):
    api.create_venue("Near", 5.3270, -4.0200)

    first = api.client.get(NEARBY)
    second = api.client.get(NEARBY)

    assert second.headers["X-Cache"] == "HIT"
    assert second.content == first.content
    assert second.headers["ETag"] == first.headers["ETag"]


def test_if_none_match_returns_304(api):
    etag = api.client.get(NEARBY).headers["ETag"]

    r = api.client.get(NEARBY, headers={"If-None-Match": etag})

    assert r.status_code == 304
    assert r.content == b""
    assert r.headers["ETag"] == etag


def test_missing_coordinates_is_400(api):
    r = api.client.get("/api/establishments?lng=-4.02")

    assert r.status_code == 400
    body = r.json()
    assert body["error_code"] == "INVALID_COORDINATES"
    assert "Latitude" in body["message"]


def test_non_numeric_coordinates_is_400(api):
    r = api.client.get("/api/establishments?lat=abc&lng=-4.02")
    assert r.status_code == 400


def test_creating_venue_invalidates_nearby_cache(api):
    api.client.get(NEARBY)
    api.create_venue("Fresh", 5.3270, -4.0200)

    r = api.client.get(NEARBY)

    assert r.headers["X-Cache"] == "MISS"
    assert [v["name"] for v in r.json()["establishments"]] == ["Fresh"]


def test_get_published_establishment(api):
    created = api.create_venue("Chez Ambroise", 5.3270, -4.0200, commune="Plateau")

    r = api.client.get(f"/api/establishments/{created['id']}")

    assert r.status_code == 200
    venue = r.json()["establishment"]
    assert venue["name"] == "Chez Ambroise"
    assert venue["commune"] == "Plateau"
    assert venue["published"] is True


def test_unknown_establishment_is_404(api):
    r = api.client.get("/api/establishments/does-not-exist")
    assert r.status_code == 404
    assert r.json()["error_code"] == "NOT_FOUND"


def test_create_requires_user_header(api):
    r = api.client.post(
        "/api/establishments",
        json={"name": "Chez Ambroise", "category": "restaurant", "lat": 5.33, "lng": -4.02},
    )
    assert r.status_code == 401
    assert r.json()["error_code"] == "MISSING_USER"


def test_create_validates_payload(api):
    r = api.client.post(
        "/api/establishments",
        json={"name": "X", "category": "restaurant", "lat": 120, "lng": -4.02},
        headers={"X-User-Id": "owner-1"},
    )
    assert r.status_code == 422
    assert r.json()["error_code"] == "VALIDATION_ERROR"


def test_submission_stays_hidden_until_approved(api):
    r = api.client.post(
        "/api/establishments/submissions",
        json={"name": "Maquis en attente", "category": "restaurant", "lat": 5.3270, "lng": -4.0200},
    )
    assert r.status_code == 201
    submitted = r.json()["establishment"]
    assert submitted["published"] is False

    assert api.client.get(NEARBY).json()["establishments"] == []
    assert api.client.get(f"/api/establishments/{submitted['id']}").status_code == 404
