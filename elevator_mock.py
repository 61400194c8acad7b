from typing import List, Tuple
import logging

from elevator_config import LOGGER_NAME
from elevator_interface import ElevatorEvent

logger = logging.getLogger(LOGGER_NAME)


class RecordingEventHandler:
    """
    Event handler that records every controller event.

    Register an instance with ElevatorController.set_event_callback(); it is
    callable with (event, floor) like any plain function handler.
    """

    def __init__(self) -> None:
        self.events: List[Tuple[ElevatorEvent, int]] = []

    def __call__(self, event: ElevatorEvent, floor: int) -> None:
        logger.debug(f"Event {event.value} at floor {floor}")
        self.events.append((event, floor))

    def names(self) -> List[str]:
        """Event names in the order they were received"""
        return [event.value for event, _ in self.events]

    def floors_for(self, event: ElevatorEvent) -> List[int]:
        """
        Floors at which a given event fired.

        Args:
            event: The event to filter on

        Returns:
            Floors in the order the event was received
        """
        return [floor for received, floor in self.events if received == event]


class MemoryLogSink:
    """Log sink keeping lines in memory."""

    def __init__(self) -> None:
        self.lines: List[str] = []

    def append(self, line: str) -> None:
        self.lines.append(line)


class RecordingPacer:
    """Pacer that records requested step durations without waiting."""

    def __init__(self) -> None:
        self.pauses: List[float] = []

    def pause(self, seconds: float) -> None:
        self.pauses.append(seconds)
