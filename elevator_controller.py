from typing import List, Optional, Dict, Any
import logging
import time
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Import base enums and collaborator interfaces
from elevator_interface import (Direction, ElevatorMode, ErrorCode, ElevatorEvent, EventCallback,
                                LogSink, StepPacer, NullLogSink, FileLogSink, NoDelayPacer, wait)
from elevator_routing import Waypoint, RoutePlanner, get_route_planner

# Import configuration and constants
from elevator_config import LOGGER_NAME, get_config

# Get system configuration
CONFIG = get_config()

logger = logging.getLogger(LOGGER_NAME)


class Request(BaseModel):
    """
    Model representing a floor request.

    Attributes:
        floor: The requested floor (range is checked by the controller)
        direction: Direction the rider wants to travel (Up or Down)
        priority: Informational priority, higher is more urgent; does not affect routing
        user_id: Optional requester identifier
        timestamp: Monotonic creation time, assigned at construction
    """
    model_config = ConfigDict(frozen=True)

    floor: int
    direction: Direction
    priority: int = 0
    user_id: str = ""
    timestamp: float = Field(default_factory=time.monotonic)

    def __init__(self, floor: int, direction: Direction, priority: int = 0,
                 user_id: str = "", **data: Any) -> None:
        super().__init__(floor=floor, direction=direction, priority=priority,
                         user_id=user_id, **data)

    @field_validator('floor', mode='before')
    @classmethod
    def validate_floor(cls, v: Any) -> int:
        """
        Validate that floor is an integer.

        Raises:
            ValueError: If floor is not an integer
        """
        if not isinstance(v, int) or isinstance(v, bool):
            raise ValueError("Floor must be an integer")
        return v

    @field_validator('direction')
    @classmethod
    def validate_direction(cls, v: Direction) -> Direction:
        """
        Validate that the request asks for a travel direction.

        Raises:
            ValueError: If direction is Idle
        """
        if v == Direction.Idle:
            raise ValueError("Request direction must be Up or Down")
        return v


class ElevatorController:
    """
    Elevator controller class responsible for handling requests and movement.

    The controller owns the car's position, direction and operational mode
    together with the pending requests. It re-plans the route whenever the
    requests change or a waypoint is fulfilled, and advances the car at most
    one floor per call to step().
    """

    def __init__(self, num_floors: int = CONFIG["building"]["num_floors"],
                 routing_strategy: str = CONFIG["routing"]["strategy"],
                 log_sink: Optional[LogSink] = None,
                 pacer: Optional[StepPacer] = None,
                 step_duration: float = CONFIG["timing"]["step_duration"]) -> None:
        """
        Initialize the elevator controller.

        Args:
            num_floors: Number of floors in the building (floors 0 .. num_floors - 1)
            routing_strategy: Name of the route planning strategy
            log_sink: Text log collaborator (defaults to discarding lines)
            pacer: Realizes the passage of time in step() (defaults to no delay)
            step_duration: Default seconds of simulated time per step

        Raises:
            ValueError: If num_floors is not a positive integer or the strategy is unknown
        """
        if not isinstance(num_floors, int) or isinstance(num_floors, bool) or num_floors <= 0:
            raise ValueError(f"num_floors must be a positive integer, got {num_floors!r}")

        self.num_floors = num_floors
        self.routing_strategy = routing_strategy
        self._planner: RoutePlanner = get_route_planner(routing_strategy)
        self.log_sink: LogSink = log_sink or NullLogSink()
        self.pacer: StepPacer = pacer or NoDelayPacer()
        self.step_duration = step_duration

        # Car state
        self._current_floor = 0
        self._direction = Direction.Idle
        self._mode = ElevatorMode.Normal

        # Pending requests in submission order, and the route derived from them
        self._requests: List[Request] = []
        self._route: List[Waypoint] = []

        self._event_callback: Optional[EventCallback] = None

        details = f"num_floors={num_floors}"
        logger.info(f"ElevatorController initialized with {details}")
        logger.info(f"Using routing strategy: {routing_strategy}")

    def add_request(self, request: Request) -> ErrorCode:
        """
        Submit a floor request.

        Args:
            request: The request to enqueue

        Returns:
            ErrorCode.SUCCESS if the request was enqueued, otherwise the reason it was rejected
        """
        if self._mode != ElevatorMode.Normal:
            logger.warning(f"Rejected request for floor {request.floor}: elevator is in {self._mode.value} mode",
                           extra={"floor": request.floor, "action": "add_request"})
            return ErrorCode.ELEVATOR_STOPPED

        if not (0 <= request.floor < self.num_floors):
            logger.warning(f"Rejected request for invalid floor {request.floor}",
                           extra={"floor": request.floor, "action": "add_request"})
            return ErrorCode.INVALID_FLOOR

        if request.floor == self._current_floor:
            logger.warning(f"Rejected request for floor {request.floor}: elevator is already there",
                           extra={"floor": request.floor, "action": "add_request"})
            return ErrorCode.ALREADY_AT_FLOOR

        self._requests.append(request)
        logger.info(f"Added {request.direction.value} request for floor {request.floor}",
                    extra={"floor": request.floor, "action": "add_request"})
        self._log(f"Request added: floor={request.floor}, direction={request.direction.value}, "
                  f"priority={request.priority}, userId={request.user_id}")
        self._plan_route()
        return ErrorCode.SUCCESS

    def step(self, step_duration: Optional[float] = None) -> None:
        """
        Advance the elevator by one step.

        A step either moves the car one floor toward the head of the route
        (fulfilling it at once if the car lands on it) or fulfills a
        waypoint at the current floor. Does nothing unless the mode is Normal.

        Args:
            step_duration: Seconds of simulated time for this step (defaults to the configured duration)
        """
        if self._mode != ElevatorMode.Normal:
            logger.debug(f"Step ignored in {self._mode.value} mode")
            return

        if self._direction == Direction.Idle:
            if not self._route:
                return
            self._direction = self._route[0].direction

        self.pacer.pause(self.step_duration if step_duration is None else step_duration)

        if self._route:
            if self._route[0].floor == self._current_floor:
                self._fulfill_head()
            else:
                self._move_towards(self._route[0].floor)
                if self._route and self._route[0].floor == self._current_floor:
                    self._fulfill_head()

        if not self._route:
            self._direction = Direction.Idle

    def get_current_floor(self) -> int:
        """Get the floor where the car is located"""
        return self._current_floor

    def get_direction(self) -> Direction:
        """Get the current direction of the car"""
        return self._direction

    def is_idle(self) -> bool:
        """Check whether the car has no active direction"""
        return self._direction == Direction.Idle

    def get_mode(self) -> ElevatorMode:
        """Get the current operational mode"""
        return self._mode

    def get_pending_requests(self) -> List[Request]:
        """Get a copy of all pending requests, in submission order"""
        return list(self._requests)

    def get_planned_route(self) -> List[Waypoint]:
        """Get a copy of the currently planned route"""
        return list(self._route)

    def snapshot(self) -> Dict[str, Any]:
        """
        Get a plain-data view of the elevator state for drivers and UIs.

        Returns:
            Dictionary with floor, direction, mode, pending request count and route
        """
        return {
            "floor": self._current_floor,
            "direction": self._direction.value,
            "mode": self._mode.value,
            "pending_requests": len(self._requests),
            "route": [(w.floor, w.direction.value) for w in self._route],
        }

    def trigger_emergency(self) -> None:
        """Halt the elevator; pending requests and the route are kept"""
        self._mode = ElevatorMode.Emergency
        logger.warning(f"Emergency triggered at floor {self._current_floor}",
                       extra={"floor": self._current_floor, "action": "trigger_emergency"})
        self._log(f"Emergency triggered at floor {self._current_floor}")
        self._emit(ElevatorEvent.EMERGENCY)

    def clear_emergency(self) -> None:
        """Return the elevator to Normal mode"""
        self._mode = ElevatorMode.Normal
        logger.info(f"Emergency cleared at floor {self._current_floor}",
                    extra={"floor": self._current_floor, "action": "clear_emergency"})
        self._log(f"Emergency cleared at floor {self._current_floor}")
        self._emit(ElevatorEvent.EMERGENCY_CLEARED)

    def set_maintenance(self, on: bool) -> None:
        """
        Switch maintenance mode on or off.

        Args:
            on: True to enter Maintenance mode, False to restore Normal mode
        """
        self._mode = ElevatorMode.Maintenance if on else ElevatorMode.Normal
        state = "enabled" if on else "disabled"
        logger.info(f"Maintenance mode {state} at floor {self._current_floor}",
                    extra={"floor": self._current_floor, "action": "set_maintenance"})
        self._log(f"Maintenance mode {state} at floor {self._current_floor}")
        self._emit(ElevatorEvent.MAINTENANCE_ON if on else ElevatorEvent.MAINTENANCE_OFF)

    def set_event_callback(self, callback: Optional[EventCallback]) -> None:
        """
        Register the event handler, replacing any previous one.

        Args:
            callback: Called with (event, current_floor); None removes the handler
        """
        self._event_callback = callback

    def enable_logging(self, filename: str) -> None:
        """
        Append the controller's text log to a file.

        Args:
            filename: Log file path
        """
        self.log_sink = FileLogSink(filename)
        logger.info(f"Text log enabled: {filename}")
        self._log("Logging started.")

    def _move_towards(self, target_floor: int) -> None:
        """
        Move the car one floor toward the target floor.

        Args:
            target_floor: Floor of the next waypoint
        """
        previous_floor = self._current_floor
        if target_floor > self._current_floor:
            self._current_floor += 1
            self._direction = Direction.Up
        else:
            self._current_floor -= 1
            self._direction = Direction.Down

        logger.debug(f"Elevator moved from floor {previous_floor} to floor {self._current_floor}",
                     extra={"floor": self._current_floor, "action": "move"})
        self._emit(ElevatorEvent.ARRIVED)
        self._log(f"Moved from floor {previous_floor} to {self._current_floor}")

    def _fulfill_head(self) -> None:
        """
        Fulfill the waypoint at the head of the route and re-plan.
        """
        waypoint = self._route[0]
        floor = self._current_floor
        remaining = [r for r in self._requests if not self._planner.fulfills(r, floor, waypoint)]
        fulfilled = len(self._requests) - len(remaining)
        self._requests = remaining

        logger.info(f"Fulfilled {fulfilled} request(s) at floor {floor}, direction {waypoint.direction.value}",
                    extra={"floor": floor, "action": "fulfill"})
        self._log(f"Fulfilled {fulfilled} request(s) at floor {floor}, direction={waypoint.direction.value}")

        # State must be consistent before the callback runs; it may raise
        self._route.pop(0)
        self._plan_route()
        if not self._route:
            self._direction = Direction.Idle

        self._emit(ElevatorEvent.REQUEST_FULFILLED)

    def _plan_route(self) -> None:
        """
        Rebuild the route from the pending requests and the current floor.
        """
        self._route = self._planner.plan(self._requests, self._current_floor)
        logger.debug(f"Planned route from floor {self._current_floor}: "
                     f"{[(w.floor, w.direction.value) for w in self._route]}")

    def _emit(self, event: ElevatorEvent) -> None:
        if self._event_callback is not None:
            self._event_callback(event, self._current_floor)

    def _log(self, message: str) -> None:
        try:
            self.log_sink.append(message)
        except Exception as e:
            logger.warning(f"Log sink failed: {e}", extra={"action": "log_sink"})


async def drive_until_idle(controller: ElevatorController,
                           step_duration: float = CONFIG["timing"]["demo_step_duration"],
                           max_steps: int = CONFIG["simulation"]["max_steps"]) -> List[int]:
    """
    Step the controller until it has no route left and is idle.

    Time passes between steps through the async wait() helper, so the
    controller's own pacer should normally be left at its no-delay default.

    Args:
        controller: The controller to drive
        step_duration: Seconds awaited between steps
        max_steps: Upper bound on the number of steps

    Returns:
        Floors where the car stood after each step

    Raises:
        RuntimeError: If the elevator is still busy after max_steps steps
    """
    floors: List[int] = []
    for _ in range(max_steps):
        if not controller.get_planned_route() and controller.is_idle():
            return floors
        if controller.get_mode() != ElevatorMode.Normal:
            logger.warning(f"Driver stopped: elevator is in {controller.get_mode().value} mode")
            return floors
        controller.step(0)
        floors.append(controller.get_current_floor())
        await wait(step_duration)

    if controller.get_planned_route() or not controller.is_idle():
        raise RuntimeError(f"Elevator still busy after {max_steps} steps")
    return floors
