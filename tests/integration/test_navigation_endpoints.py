"""
Integration tests for route lookup and navigation progress
"""

ROUTE = "/navigation/route?originLng=-4.0200&originLat=5.3261&destLng=-3.9980&destLat=5.2950&mode=driving"


def test_route_found_with_formatted_summary(api):
    r = api.client.get(ROUTE)

    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert body["route"]["distanceMeters"] == 5200.0
    assert len(body["route"]["steps"]) == 3
    assert body["formatted"] == {"distance": "5.2 km", "duration": "13 min"}


def test_route_is_cached(api):
    api.client.get(ROUTE)
    # sub-threshold jitter on the origin reuses the cached route
    api.client.get(ROUTE.replace("originLat=5.3261", "originLat=5.32612"))

    assert len(api.directions.requests) == 1


def test_no_route_is_a_normal_response(api):
    api.directions.payload = {"code": "NoRoute", "message": "No route found", "routes": []}

    r = api.client.get(ROUTE)

    assert r.status_code == 200
    assert r.json() == {"status": "not_found", "reason": "provider_NoRoute"}


def test_invalid_mode_is_422(api):
    r = api.client.get(ROUTE.replace("mode=driving", "mode=teleport"))
    assert r.status_code == 422


def test_progress_advances_one_step(api):
    route = api.client.get(ROUTE).json()["route"]

    r = api.client.post(
        "/navigation/progress",
        json={"route": route, "stepIndex": 0, "position": {"lat": 5.3262, "lng": -4.0200}},
    )

    assert r.status_code == 200
    snapshot = r.json()
    assert snapshot["advanced"] is True
    assert snapshot["stepIndex"] == 1
    assert snapshot["stepCount"] == 3
    assert snapshot["currentStep"]["instruction"] == "Turn left"
    assert snapshot["remainingDistance"] == 2200.0
    assert snapshot["formattedRemaining"] == {"distance": "2.2 km", "duration": "6 min"}


def test_progress_far_from_maneuver_stays(api):
    route = api.client.get(ROUTE).json()["route"]

    r = api.client.post(
        "/navigation/progress",
        json={"route": route, "stepIndex": 1, "position": {"lat": 5.3261, "lng": -4.0200}},
    )

    snapshot = r.json()
    assert snapshot["advanced"] is False
    assert snapshot["stepIndex"] == 1
    assert snapshot["distanceToNextManeuver"] > 35


def test_health_and_metrics(api):
    api.client.get(ROUTE)

    health = api.client.get("/health")
    assert health.status_code == 200
    assert health.json()["components"]["storage"] is True

    metrics = api.client.get("/metrics").json()
    assert metrics["caches"]["routes"]["size"] == 1
    assert metrics["latency"]["counters"]["route_provider_calls"] == 1
