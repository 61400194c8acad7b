from enum import Enum
from typing import Protocol, Callable
import asyncio
import logging
import time

from elevator_config import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)


class Direction(Enum):
    """
    Represents the direction of elevator movement or of a request.

    Attributes:
        Up: The elevator is moving (or the rider wants to travel) upward
        Down: The elevator is moving (or the rider wants to travel) downward
        Idle: The elevator has no active route; never valid for a request
    """
    Up = 'Up'
    Down = 'Down'
    Idle = 'Idle'


class ElevatorMode(Enum):
    """
    Represents the operational mode of the elevator.

    Attributes:
        Normal: The elevator accepts requests and moves
        Emergency: The elevator is halted until the emergency is cleared
        Maintenance: The elevator is halted until maintenance is switched off
    """
    Normal = 'Normal'
    Emergency = 'Emergency'
    Maintenance = 'Maintenance'


class ErrorCode(Enum):
    """
    Result of a request submission.

    Attributes:
        SUCCESS: The request was enqueued
        INVALID_FLOOR: The requested floor is outside the building
        ALREADY_AT_FLOOR: The car is standing at the requested floor
        ELEVATOR_STOPPED: The elevator is in emergency or maintenance mode
    """
    SUCCESS = 'Success'
    INVALID_FLOOR = 'InvalidFloor'
    ALREADY_AT_FLOOR = 'AlreadyAtFloor'
    ELEVATOR_STOPPED = 'ElevatorStopped'


class ElevatorEvent(str, Enum):
    """Names of the lifecycle events passed to the event callback."""
    ARRIVED = 'Arrived'
    REQUEST_FULFILLED = 'RequestFulfilled'
    EMERGENCY = 'Emergency'
    EMERGENCY_CLEARED = 'EmergencyCleared'
    MAINTENANCE_ON = 'MaintenanceOn'
    MAINTENANCE_OFF = 'MaintenanceOff'


# Signature of the single registered event handler: (event, current_floor)
EventCallback = Callable[[ElevatorEvent, int], None]


class LogSink(Protocol):
    """
    Protocol for the append-only text log used by the controller.

    Implementations must never raise; logging is best-effort.
    """
    def append(self, line: str) -> None:
        """Append one line of diagnostic text"""
        ...


class StepPacer(Protocol):
    """
    Protocol for realizing the passage of simulated time during a step.
    """
    def pause(self, seconds: float) -> None:
        """Let `seconds` of simulated time pass"""
        ...


class NullLogSink:
    """Log sink that discards every line."""

    def append(self, line: str) -> None:
        pass


class FileLogSink:
    """
    Log sink appending lines to a text file.

    The file is opened per line in append mode, so the sink holds no open
    handle between calls. Write failures are reported through the standard
    logger and otherwise ignored.
    """

    def __init__(self, path: str) -> None:
        """
        Initialize the file log sink.

        Args:
            path: Path of the log file, created on first append
        """
        self.path = path

    def append(self, line: str) -> None:
        try:
            with open(self.path, "a", encoding="utf-8", errors="backslashreplace") as log_file:
                log_file.write(line + "\n")
        except OSError as e:
            logger.warning(f"Could not write to log file {self.path}: {e}",
                           extra={"action": "log_sink", "path": self.path})


class NoDelayPacer:
    """Pacer that lets steps complete instantly (tests, fast simulations)."""

    def pause(self, seconds: float) -> None:
        pass


class SleepPacer:
    """Pacer that blocks the calling thread for the step duration."""

    def pause(self, seconds: float) -> None:
        if seconds > 0:
            time.sleep(seconds)


async def wait(seconds: float) -> None:
    """
    Helper function to let simulated time pass between steps in async drivers.

    Args:
        seconds: Time to wait before the next step
    """
    await asyncio.sleep(seconds)
