"""
Route planning strategies for the elevator controller.

A planner turns the bag of pending requests into an ordered list of
waypoints for the car's current position, and decides which pending
requests a stop at a waypoint fulfills. Planners are stateless: the
controller calls them again after every change to the requests or the
route.
"""
from typing import TYPE_CHECKING, Dict, Iterable, List, NamedTuple, Protocol, Type
import logging

from elevator_config import LOGGER_NAME, RoutingStrategy
from elevator_interface import Direction

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from elevator_controller import Request

logger = logging.getLogger(LOGGER_NAME)


class Waypoint(NamedTuple):
    """One intended stop of the planned route."""
    floor: int
    direction: Direction


class RoutePlanner(Protocol):
    """Strategy interface for ordering pending requests into a route."""

    def plan(self, requests: Iterable["Request"], current_floor: int) -> List[Waypoint]:
        """
        Return the waypoints to visit, in order, from the current floor.

        Requests that do not fit the strategy's route shape may be left out;
        they remain pending.
        """
        ...

    def fulfills(self, request: "Request", floor: int, waypoint: Waypoint) -> bool:
        """Return True if stopping at `floor` for `waypoint` satisfies `request`."""
        ...


class SweepRoutePlanner:
    """
    One upward sweep followed by one downward sweep.

    Up requests above the car are visited in ascending order, then down
    requests below the car in descending order. A stop only satisfies
    requests travelling in the waypoint's direction.
    """

    def plan(self, requests: Iterable["Request"], current_floor: int) -> List[Waypoint]:
        requests = list(requests)
        up_floors = sorted({r.floor for r in requests
                            if r.direction == Direction.Up and r.floor > current_floor})
        down_floors = sorted({r.floor for r in requests
                              if r.direction == Direction.Down and r.floor < current_floor},
                             reverse=True)

        route = [Waypoint(f, Direction.Up) for f in up_floors]
        route.extend(Waypoint(f, Direction.Down) for f in down_floors)

        scheduled = set(route)
        unscheduled = sum(1 for r in requests if (r.floor, r.direction) not in scheduled)
        if unscheduled:
            logger.debug(f"Sweep from floor {current_floor} leaves {unscheduled} request(s) unscheduled")
        return route

    def fulfills(self, request: "Request", floor: int, waypoint: Waypoint) -> bool:
        return request.floor == floor and request.direction == waypoint.direction


class NearestRequestPlanner:
    """
    Greedy strategy: head for the closest pending request.

    The route holds at most one waypoint. Distance ties go to the request
    submitted first. A stop satisfies every request at that floor,
    whatever direction it asked for.
    """

    def plan(self, requests: Iterable["Request"], current_floor: int) -> List[Waypoint]:
        requests = list(requests)
        if not requests:
            return []
        # min() keeps the first of equal keys, so submission order breaks ties
        nearest = min(requests, key=lambda r: abs(r.floor - current_floor))
        return [Waypoint(nearest.floor, nearest.direction)]

    def fulfills(self, request: "Request", floor: int, waypoint: Waypoint) -> bool:
        return request.floor == floor


ROUTE_PLANNER_REGISTRY: Dict[str, Type[RoutePlanner]] = {
    RoutingStrategy.SWEEP.value: SweepRoutePlanner,
    RoutingStrategy.NEAREST.value: NearestRequestPlanner,
}


def get_route_planner(name: str) -> RoutePlanner:
    """
    Build the route planner registered under `name`.

    Args:
        name: Strategy name (see RoutingStrategy)

    Raises:
        ValueError: If no planner is registered under that name
    """
    cls = ROUTE_PLANNER_REGISTRY.get(name.lower())
    if cls is None:
        raise ValueError(f"Unknown routing strategy '{name}'. Available: {', '.join(ROUTE_PLANNER_REGISTRY)}")
    return cls()
