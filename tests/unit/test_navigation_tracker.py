"""
Unit tests for the turn-by-turn step tracker
"""
import pytest

from app.core.geo import EARTH_RADIUS_M
from app.schemas.route import Maneuver, Position, Route, RouteStep
from app.services.navigation_tracker import NavigationTracker

METERS_PER_DEG_LAT = EARTH_RADIUS_M * 3.141592653589793 / 180

MANEUVERS = [(-4.0200, 5.3261), (-4.0100, 5.3300), (-4.0000, 5.3350), (-3.9980, 5.2950)]


def make_route(distance=5200.0, duration=780.0, with_steps=True):
    steps = [
        RouteStep(
            distance_meters=d,
            duration_seconds=t,
            instruction=f"Step {i}",
            maneuver=Maneuver(location=loc, type="turn"),
        )
        for i, (loc, d, t) in enumerate(zip(MANEUVERS, [2000.0, 1800.0, 1400.0, 0.0], [300.0, 280.0, 200.0, 0.0]))
    ] if with_steps else []
    return Route(
        distance_meters=distance,
        duration_seconds=duration,
        geometry=[MANEUVERS[0], MANEUVERS[-1]],
        steps=steps,
    )


def north_of(step_index, meters):
    lng, lat = MANEUVERS[step_index]
    return Position(lat=lat + meters / METERS_PER_DEG_LAT, lng=lng)


@pytest.fixture
def tracker():
    t = NavigationTracker()
    t.start(make_route())
    return t


def test_advances_within_threshold(tracker):
    assert tracker.advance(north_of(0, 34.9)) is True
    assert tracker.step_index == 1


def test_does_not_advance_at_36_meters(tracker):
    assert tracker.advance(north_of(0, 36)) is False
    assert tracker.step_index == 0


def test_single_step_per_evaluation(tracker):
    # standing on step 1's maneuver while step 0 is current: only one step forward
    tracker.advance(north_of(0, 0))
    assert tracker.step_index == 1
    tracker.advance(north_of(2, 0))
    assert tracker.step_index == 1


def test_repeated_evaluations_walk_forward(tracker):
    for i in range(3):
        tracker.advance(north_of(i, 5))
    assert tracker.step_index == 3


def test_never_passes_last_step(tracker):
    for i in range(3):
        tracker.advance(north_of(i, 0))
    assert tracker.advance(north_of(3, 0)) is False
    assert tracker.step_index == 3


def test_inactive_tracker_does_not_move(tracker):
    tracker.stop()
    assert tracker.advance(north_of(0, 0)) is False
    assert tracker.step_index == 0


def test_route_without_steps_does_not_move():
    tracker = NavigationTracker()
    tracker.start(make_route(with_steps=False))
    assert tracker.advance(north_of(0, 0)) is False
    assert tracker.remaining_distance == 5200.0
    assert tracker.remaining_duration == 780.0


def test_new_route_signature_resets_index(tracker):
    tracker.advance(north_of(0, 0))
    tracker.set_route(make_route(distance=6100.0, duration=900.0))
    assert tracker.step_index == 0


def test_same_signature_keeps_index(tracker):
    tracker.advance(north_of(0, 0))
    tracker.set_route(make_route())
    assert tracker.step_index == 1


def test_same_signature_with_fewer_steps_clamps_index(tracker):
    tracker.restore(3)
    shorter = make_route()
    shorter.steps = shorter.steps[:2]
    tracker.set_route(shorter)
    assert tracker.step_index == 1
    assert tracker.current_step is shorter.steps[1]
    assert tracker.remaining_distance == 1800.0


def test_remaining_sums_steps_from_current_index(tracker):
    assert tracker.remaining_distance == 5200.0
    tracker.advance(north_of(0, 0))
    assert tracker.remaining_distance == 3200.0
    assert tracker.remaining_duration == 480.0


def test_distance_to_next_maneuver(tracker):
    assert tracker.distance_to_next_maneuver(north_of(0, 120)) == pytest.approx(120, abs=0.5)


def test_missing_maneuver_location_counts_as_reached():
    route = make_route()
    route.steps[0].maneuver.location = None
    tracker = NavigationTracker()
    tracker.start(route)

    assert tracker.advance(north_of(3, 0)) is True
    assert tracker.step_index == 1


def test_snapshot_contains_display_values(tracker):
    tracker.advance(north_of(0, 10))
    snapshot = tracker.snapshot(advanced=True)

    assert snapshot.step_index == 1
    assert snapshot.step_count == 4
    assert snapshot.advanced is True
    assert snapshot.current_step.instruction == "Step 1"
    assert snapshot.formatted_remaining.distance == "3.2 km"
    assert snapshot.formatted_remaining.duration == "8 min"
    assert snapshot.distance_to_next_maneuver is not None


def test_restore_clamps_client_index(tracker):
    tracker.restore(99)
    assert tracker.step_index == 3
    tracker.restore(-1)
    assert tracker.step_index == 0
