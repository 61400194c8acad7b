"""
Elevator Console Scenario

This script drives the elevator controller through a small scenario and draws
the building on the console after each step:
- User A requests UP at floor 3, User B requests DOWN at floor 1, car idle at floor 0
- The car sweeps up to floor 3 first, then comes back down to floor 1
"""
import asyncio
import logging
from typing import List, Optional

from elevator_interface import Direction, ElevatorEvent, ErrorCode, wait
from elevator_controller import ElevatorController, Request
from elevator_config import get_config, configure_logging

logger = logging.getLogger("ElevatorScenario")


def render_building(num_floors: int, elevator_floor: int) -> str:
    """
    Draw the building as text, top floor first, marking the car with <E>.

    Args:
        num_floors: Number of floors in the building
        elevator_floor: Floor where the car is located

    Returns:
        Multi-line drawing of the building
    """
    rows = []
    for floor in range(num_floors - 1, -1, -1):
        rows.append(f"[{floor}] <E>" if floor == elevator_floor else f"[{floor}] ")
    rows.append("-------------------")
    return "\n".join(rows)


class ConsoleScenario:
    """Console elevator scenario with stop tracking"""

    def __init__(self, log_file: Optional[str] = None):
        """
        Initialize the scenario environment

        Args:
            log_file: Optional path for the controller's text log
        """
        self.config = get_config()
        self.num_floors = self.config["building"]["num_floors"]
        self.step_duration = self.config["timing"]["demo_step_duration"]

        self.controller = ElevatorController(self.num_floors,
                                             routing_strategy=self.config["routing"]["strategy"])
        log_file = log_file or self.config["logging"]["file"]
        if log_file:
            self.controller.enable_logging(log_file)

        # Record elevator stops
        self.stops: List[int] = []
        self.controller.set_event_callback(self.on_event)

        self.expected_stops = [3, 1]

    def on_event(self, event: ElevatorEvent, floor: int) -> None:
        """Print every event and record fulfilled stops"""
        print(f"Event: {event.value} at floor {floor}")
        if event == ElevatorEvent.REQUEST_FULFILLED:
            self.stops.append(floor)

    def press_button(self, floor: int, direction: Direction, priority: int, user_id: str) -> ErrorCode:
        """Submit a request and report the result"""
        result = self.controller.add_request(Request(floor, direction, priority, user_id))
        logger.info(f"{user_id} requests {direction.value} at floor {floor}: {result.value}")
        return result

    def has_work(self) -> bool:
        """Whether the car still has a route to follow"""
        return bool(self.controller.get_planned_route()) or not self.controller.is_idle()

    async def run_scenario(self) -> None:
        """Run the scenario until the elevator is idle"""
        logger.info("=== Starting Console Elevator Scenario ===")

        self.press_button(3, Direction.Up, 1, "userA")
        self.press_button(1, Direction.Down, 2, "userB")

        max_steps = self.config["simulation"]["max_steps"]
        steps = 0
        while self.has_work() and steps < max_steps:
            print(render_building(self.num_floors, self.controller.get_current_floor()))
            self.controller.step(0)
            steps += 1
            await wait(self.step_duration)

        print(render_building(self.num_floors, self.controller.get_current_floor()))
        print("Elevator is idle.")

        self.verify_results()
        logger.info("=== Console Elevator Scenario Completed ===")

    def verify_results(self) -> bool:
        """Compare the observed stop sequence with the expected one"""
        logger.info(f"Elevator stop sequence: {self.stops}")
        if self.stops == self.expected_stops:
            logger.info("✅ Elevator stopped at the expected floors in order")
            return True
        logger.warning(f"❌ Expected stops {self.expected_stops}, got {self.stops}")
        return False


async def main():
    """Main function"""
    configure_logging()
    scenario = ConsoleScenario()
    await scenario.run_scenario()


if __name__ == "__main__":
    asyncio.run(main())
