"""
Navigation step tracker.

Follows a user's position along a route's turn-by-turn steps. One tracker
per navigation session; it holds no shared state.
"""

import logging
from typing import Optional

from app.core.geo import haversine_m
from app.schemas.route import (
    FormattedRoute,
    Position,
    ProgressSnapshot,
    Route,
    RouteStep,
)
from app.services.formatting import format_distance, format_duration

logger = logging.getLogger(__name__)

DEFAULT_ADVANCE_THRESHOLD_M = 35.0


class NavigationTracker:
    """
    Step index state machine over a fixed route.

    ``advance`` moves at most one step per call, and never past the last
    step. Replacing the route with one of a different (distance, duration)
    signature restarts at step 0.
    """

    def __init__(
        self,
        route: Optional[Route] = None,
        advance_threshold_m: float = DEFAULT_ADVANCE_THRESHOLD_M,
        active: bool = False,
    ):
        self.advance_threshold_m = advance_threshold_m
        self.route: Optional[Route] = route
        self.step_index = 0
        self.active = active
        self.last_position: Optional[Position] = None

    # Session control

    def start(self, route: Route) -> None:
        self.set_route(route)
        self.active = True

    def stop(self) -> None:
        self.active = False

    def reset(self) -> None:
        self.step_index = 0

    def set_route(self, route: Optional[Route]) -> None:
        previous = self.route.signature if self.route is not None else None
        current = route.signature if route is not None else None
        self.route = route
        if previous != current:
            logger.debug(f"Route signature changed {previous} -> {current}, restarting at step 0")
            self.step_index = 0
        else:
            self.step_index = min(self.step_index, self.last_step_index)

    def restore(self, step_index: int) -> None:
        """Resume at a step index reported by a client, clamped to the route."""
        self.step_index = min(max(step_index, 0), self.last_step_index)

    # Derived state

    @property
    def steps(self) -> list[RouteStep]:
        return self.route.steps if self.route is not None else []

    @property
    def last_step_index(self) -> int:
        return max(len(self.steps) - 1, 0)

    @property
    def current_step(self) -> Optional[RouteStep]:
        if self.step_index < len(self.steps):
            return self.steps[self.step_index]
        return None

    def distance_to_next_maneuver(self, position: Optional[Position] = None) -> Optional[float]:
        position = position or self.last_position
        step = self.current_step
        if position is None or step is None or step.maneuver.location is None:
            return None
        lng, lat = step.maneuver.location
        return haversine_m(position.lat, position.lng, lat, lng)

    @property
    def remaining_distance(self) -> Optional[float]:
        if self.route is None:
            return None
        if not self.steps:
            return self.route.distance_meters
        return sum(s.distance_meters for s in self.steps[self.step_index:])

    @property
    def remaining_duration(self) -> Optional[float]:
        if self.route is None:
            return None
        if not self.steps:
            return self.route.duration_seconds
        return sum(s.duration_seconds for s in self.steps[self.step_index:])

    # Transition

    def advance(self, position: Position) -> bool:
        """
        Evaluate one position update.

        Returns:
            True if the step index moved forward by one
        """
        self.last_position = position
        if not self.active or not self.steps:
            return False
        if self.step_index >= len(self.steps) - 1:
            return False

        step = self.steps[self.step_index]
        if step.maneuver.location is None:
            # A step without a maneuver point counts as reached
            distance = 0.0
        else:
            lng, lat = step.maneuver.location
            distance = haversine_m(position.lat, position.lng, lat, lng)

        if distance < self.advance_threshold_m:
            self.step_index += 1
            logger.debug(f"Advanced to step {self.step_index} ({distance:.1f} m from maneuver)")
            return True
        return False

    def snapshot(self, advanced: bool = False) -> ProgressSnapshot:
        distance_to_next = self.distance_to_next_maneuver()
        remaining_distance = self.remaining_distance
        remaining_duration = self.remaining_duration
        formatted_remaining = None
        if remaining_distance is not None and remaining_duration is not None:
            formatted_remaining = FormattedRoute(
                distance=format_distance(remaining_distance),
                duration=format_duration(remaining_duration),
            )
        return ProgressSnapshot(
            active=self.active,
            step_index=self.step_index,
            step_count=len(self.steps),
            advanced=advanced,
            current_step=self.current_step,
            distance_to_next_maneuver=distance_to_next,
            remaining_distance=remaining_distance,
            remaining_duration=remaining_duration,
            formatted_distance_to_next=(
                format_distance(distance_to_next) if distance_to_next is not None else None
            ),
            formatted_remaining=formatted_remaining,
        )
