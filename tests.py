import unittest
import logging
import os
import tempfile
from unittest.mock import MagicMock, AsyncMock, patch

from pydantic import ValidationError

from elevator_interface import (Direction, ElevatorMode, ErrorCode, ElevatorEvent,
                                FileLogSink, NullLogSink, SleepPacer)
from elevator_controller import ElevatorController, Request, drive_until_idle
from elevator_routing import (Waypoint, SweepRoutePlanner, NearestRequestPlanner,
                              get_route_planner)
from elevator_mock import RecordingEventHandler, MemoryLogSink, RecordingPacer
from elevator_config import RoutingStrategy, get_config, configure_logging
from run_realistic_scenario import ConsoleScenario, render_building


class FailingLogSink:
    """Log sink whose every write fails"""

    def append(self, line):
        raise RuntimeError("disk on fire")


class TestRequest(unittest.TestCase):
    """Unit tests for the request model"""

    def test_defaults(self):
        """Test optional request fields"""
        request = Request(3, Direction.Up)
        self.assertEqual(request.floor, 3)
        self.assertEqual(request.direction, Direction.Up)
        self.assertEqual(request.priority, 0)
        self.assertEqual(request.user_id, "")

    def test_keyword_and_string_direction(self):
        """Test keyword construction with a direction given by name"""
        request = Request(floor=2, direction="Down", priority=5, user_id="userA")
        self.assertEqual(request.direction, Direction.Down)
        self.assertEqual(request.priority, 5)
        self.assertEqual(request.user_id, "userA")

    def test_idle_direction_rejected(self):
        """Test that Idle is not a valid request direction"""
        with self.assertRaises(ValidationError):
            Request(2, Direction.Idle)

    def test_non_integer_floor_rejected(self):
        """Test floor type validation"""
        with self.assertRaises(ValueError):
            Request("two", Direction.Up)
        with self.assertRaises(ValueError):
            Request(True, Direction.Up)

    def test_request_is_immutable(self):
        """Test that requests cannot be modified"""
        request = Request(2, Direction.Up)
        with self.assertRaises(ValidationError):
            request.floor = 4

    def test_timestamps_non_decreasing(self):
        """Test creation timestamps follow construction order"""
        first = Request(1, Direction.Up)
        second = Request(2, Direction.Up)
        self.assertLessEqual(first.timestamp, second.timestamp)


class TestRoutePlanners(unittest.TestCase):
    """Unit tests for route planning strategies"""

    def test_sweep_up_then_down(self):
        """Test sweep ordering and exclusion of requests that do not fit the sweep"""
        requests = [
            Request(4, Direction.Up),
            Request(3, Direction.Up),
            Request(0, Direction.Down),
            Request(1, Direction.Down),
            Request(1, Direction.Up),    # up request below the car
            Request(4, Direction.Down),  # down request above the car
            Request(3, Direction.Up),    # duplicate
        ]
        route = SweepRoutePlanner().plan(requests, 2)
        self.assertEqual(route, [
            Waypoint(3, Direction.Up),
            Waypoint(4, Direction.Up),
            Waypoint(1, Direction.Down),
            Waypoint(0, Direction.Down),
        ])

    def test_sweep_excludes_current_floor(self):
        """Test that requests at the car's floor are not scheduled"""
        requests = [Request(2, Direction.Up), Request(2, Direction.Down)]
        self.assertEqual(SweepRoutePlanner().plan(requests, 2), [])

    def test_sweep_unscheduled_count_ignores_duplicates(self):
        """Test scheduled duplicates are not reported as unscheduled"""
        planner = SweepRoutePlanner()
        with self.assertLogs("ElevatorSystem", level="DEBUG") as captured:
            planner.plan([Request(3, Direction.Up), Request(3, Direction.Up), Request(1, Direction.Up)], 2)
            planner.plan([Request(4, Direction.Up), Request(1, Direction.Down)], 2)
            logging.getLogger("ElevatorSystem").debug("done")
        self.assertEqual(captured.output, [
            "DEBUG:ElevatorSystem:Sweep from floor 2 leaves 1 request(s) unscheduled",
            "DEBUG:ElevatorSystem:done",
        ])

    def test_sweep_fulfills_matching_direction_only(self):
        """Test sweep fulfillment requires matching floor and direction"""
        planner = SweepRoutePlanner()
        waypoint = Waypoint(3, Direction.Up)
        self.assertTrue(planner.fulfills(Request(3, Direction.Up), 3, waypoint))
        self.assertFalse(planner.fulfills(Request(3, Direction.Down), 3, waypoint))
        self.assertFalse(planner.fulfills(Request(2, Direction.Up), 3, waypoint))

    def test_nearest_picks_closest_with_submission_order_ties(self):
        """Test the greedy planner targets the closest request"""
        planner = NearestRequestPlanner()
        requests = [Request(4, Direction.Up), Request(1, Direction.Down), Request(3, Direction.Up)]
        self.assertEqual(planner.plan(requests, 2), [Waypoint(1, Direction.Down)])
        self.assertEqual(planner.plan([], 2), [])

    def test_nearest_fulfills_any_direction(self):
        """Test greedy fulfillment ignores request direction"""
        planner = NearestRequestPlanner()
        waypoint = Waypoint(2, Direction.Up)
        self.assertTrue(planner.fulfills(Request(2, Direction.Down), 2, waypoint))
        self.assertFalse(planner.fulfills(Request(3, Direction.Up), 2, waypoint))

    def test_registry(self):
        """Test planner lookup by name"""
        self.assertIsInstance(get_route_planner(RoutingStrategy.SWEEP.value), SweepRoutePlanner)
        self.assertIsInstance(get_route_planner("NEAREST"), NearestRequestPlanner)
        with self.assertRaises(ValueError):
            get_route_planner("look")


class TestElevatorController(unittest.TestCase):
    """Unit test class for elevator controller"""

    def setUp(self):
        """Setup before test execution"""
        self.events = RecordingEventHandler()
        self.sink = MemoryLogSink()
        self.controller = ElevatorController(5, log_sink=self.sink)
        self.controller.set_event_callback(self.events)

    def step_times(self, count):
        for _ in range(count):
            self.controller.step(0)

    def test_initial_state(self):
        """Test a new controller is idle at floor 0"""
        self.assertEqual(self.controller.get_current_floor(), 0)
        self.assertEqual(self.controller.get_direction(), Direction.Idle)
        self.assertTrue(self.controller.is_idle())
        self.assertEqual(self.controller.get_mode(), ElevatorMode.Normal)
        self.assertEqual(self.controller.get_pending_requests(), [])

    def test_invalid_building_height(self):
        """Test construction rejects non-positive heights and unknown strategies"""
        with self.assertRaises(ValueError):
            ElevatorController(0)
        with self.assertRaises(ValueError):
            ElevatorController(-3)
        with self.assertRaises(ValueError):
            ElevatorController(5, routing_strategy="zigzag")

    def test_error_handling(self):
        """Test request validation results"""
        self.assertEqual(self.controller.add_request(Request(-1, Direction.Up)), ErrorCode.INVALID_FLOOR)
        self.assertEqual(self.controller.add_request(Request(5, Direction.Down)), ErrorCode.INVALID_FLOOR)
        self.assertEqual(self.controller.add_request(Request(0, Direction.Up)), ErrorCode.ALREADY_AT_FLOOR)
        self.assertEqual(self.controller.add_request(Request(0, Direction.Down)), ErrorCode.ALREADY_AT_FLOOR)
        self.assertEqual(self.controller.get_pending_requests(), [])

    def test_every_other_floor_accepted(self):
        """Test any valid floor other than the current one is accepted"""
        for floor in range(1, 5):
            request = Request(floor, Direction.Down)
            self.assertEqual(self.controller.add_request(request), ErrorCode.SUCCESS)
            self.assertIn(request, self.controller.get_pending_requests())

    def test_already_at_floor_while_on_route(self):
        """Test the current floor is rejected even if the route passes it again"""
        self.controller.add_request(Request(4, Direction.Up))
        self.controller.add_request(Request(1, Direction.Down))
        self.step_times(2)
        self.assertEqual(self.controller.get_current_floor(), 2)
        self.assertEqual(self.controller.add_request(Request(2, Direction.Down)), ErrorCode.ALREADY_AT_FLOOR)

    def test_request_does_not_start_car_before_step(self):
        """Test the car adopts a direction on its first step"""
        self.controller.add_request(Request(3, Direction.Up))
        self.assertEqual(self.controller.get_planned_route(), [Waypoint(3, Direction.Up)])
        self.assertTrue(self.controller.is_idle())
        self.controller.step(0)
        self.assertEqual(self.controller.get_direction(), Direction.Up)

    def test_basic_movement(self):
        """Test one floor per step up to a single request"""
        self.assertEqual(self.controller.add_request(Request(3, Direction.Up)), ErrorCode.SUCCESS)
        self.controller.step(0)
        self.assertEqual(self.controller.get_current_floor(), 1)
        self.assertFalse(self.controller.is_idle())
        self.step_times(2)
        self.assertEqual(self.controller.get_current_floor(), 3)
        self.assertTrue(self.controller.is_idle())
        self.assertEqual(self.controller.get_pending_requests(), [])

    def test_distance_shrinks_by_one_per_step(self):
        """Test the car never moves more than one floor per step"""
        self.controller.add_request(Request(4, Direction.Up))
        distance = 4
        while distance > 0:
            self.controller.step(0)
            new_distance = 4 - self.controller.get_current_floor()
            self.assertEqual(new_distance, distance - 1)
            distance = new_distance
        self.assertTrue(self.controller.is_idle())

    def test_multiple_requests(self):
        """Test two up requests are served in ascending order"""
        self.controller.add_request(Request(2, Direction.Up))
        self.controller.add_request(Request(4, Direction.Up))
        self.assertEqual(self.controller.get_planned_route(),
                         [Waypoint(2, Direction.Up), Waypoint(4, Direction.Up)])
        self.step_times(2)
        self.assertEqual(self.controller.get_current_floor(), 2)
        self.assertEqual(len(self.controller.get_pending_requests()), 1)
        self.assertEqual(self.controller.get_direction(), Direction.Up)
        self.step_times(2)
        self.assertEqual(self.controller.get_current_floor(), 4)
        self.assertTrue(self.controller.is_idle())
        self.assertEqual(self.events.floors_for(ElevatorEvent.REQUEST_FULFILLED), [2, 4])

    def test_up_then_down_scenario(self):
        """Test an up sweep to floor 3 followed by a down sweep to floor 1"""
        self.controller.add_request(Request(3, Direction.Up, 1, "userA"))
        self.controller.add_request(Request(1, Direction.Down, 2, "userB"))
        self.assertEqual(self.controller.get_planned_route(), [Waypoint(3, Direction.Up)])

        self.step_times(3)
        self.assertEqual(self.controller.get_current_floor(), 3)
        self.assertEqual(self.controller.get_planned_route(), [Waypoint(1, Direction.Down)])

        self.step_times(2)
        self.assertEqual(self.controller.get_current_floor(), 1)
        self.assertTrue(self.controller.is_idle())
        self.assertEqual(self.controller.get_direction(), Direction.Idle)
        self.assertEqual(self.controller.get_pending_requests(), [])
        self.assertEqual(self.events.events, [
            (ElevatorEvent.ARRIVED, 1),
            (ElevatorEvent.ARRIVED, 2),
            (ElevatorEvent.ARRIVED, 3),
            (ElevatorEvent.REQUEST_FULFILLED, 3),
            (ElevatorEvent.ARRIVED, 2),
            (ElevatorEvent.ARRIVED, 1),
            (ElevatorEvent.REQUEST_FULFILLED, 1),
        ])

    def test_passing_floor_in_wrong_direction_does_not_fulfill(self):
        """Test a down request is skipped on the way up and served on the way down"""
        self.controller.add_request(Request(2, Direction.Down))
        self.controller.add_request(Request(4, Direction.Up))
        visited = []
        for _ in range(6):
            self.controller.step(0)
            visited.append(self.controller.get_current_floor())
        self.assertEqual(visited, [1, 2, 3, 4, 3, 2])
        self.assertEqual(self.events.floors_for(ElevatorEvent.REQUEST_FULFILLED), [4, 2])
        self.assertTrue(self.controller.is_idle())

    def test_unschedulable_request_stays_pending(self):
        """Test a request that fits no sweep is kept but not served"""
        request = Request(2, Direction.Down)
        self.assertEqual(self.controller.add_request(request), ErrorCode.SUCCESS)
        self.assertEqual(self.controller.get_planned_route(), [])
        self.controller.step(0)
        self.assertEqual(self.controller.get_current_floor(), 0)
        self.assertTrue(self.controller.is_idle())
        self.assertEqual(self.controller.get_pending_requests(), [request])
        self.assertEqual(self.events.events, [])

    def test_opposite_direction_request_left_at_stop(self):
        """Test only the waypoint's direction is fulfilled at a stop"""
        self.controller.add_request(Request(3, Direction.Up))
        down_request = Request(3, Direction.Down)
        self.controller.add_request(down_request)
        self.step_times(3)
        self.assertEqual(self.controller.get_current_floor(), 3)
        self.assertTrue(self.controller.is_idle())
        self.assertEqual(self.controller.get_pending_requests(), [down_request])

    def test_duplicates_fulfilled_together(self):
        """Test duplicate requests are kept and removed in one stop"""
        self.controller.add_request(Request(2, Direction.Up))
        self.controller.add_request(Request(2, Direction.Up))
        self.assertEqual(len(self.controller.get_pending_requests()), 2)
        self.assertEqual(self.controller.get_planned_route(), [Waypoint(2, Direction.Up)])
        self.step_times(2)
        self.assertEqual(self.controller.get_pending_requests(), [])
        self.assertEqual(self.events.names().count("RequestFulfilled"), 1)

    def test_new_request_replans_mid_route(self):
        """Test a request added while moving is merged into the route"""
        self.controller.add_request(Request(4, Direction.Up))
        self.controller.step(0)
        self.assertEqual(self.controller.add_request(Request(2, Direction.Up)), ErrorCode.SUCCESS)
        self.assertEqual(self.controller.get_planned_route(),
                         [Waypoint(2, Direction.Up), Waypoint(4, Direction.Up)])
        self.controller.step(0)
        self.assertEqual(self.events.floors_for(ElevatorEvent.REQUEST_FULFILLED), [2])

    def test_pending_requests_is_a_copy(self):
        """Test callers cannot mutate pending requests through the accessor"""
        self.controller.add_request(Request(2, Direction.Up))
        self.controller.get_pending_requests().clear()
        self.controller.get_planned_route().clear()
        self.assertEqual(len(self.controller.get_pending_requests()), 1)
        self.assertEqual(len(self.controller.get_planned_route()), 1)

    def test_priority_and_user_id_preserved(self):
        """Test informational request fields survive enqueueing"""
        self.controller.add_request(Request(2, Direction.Up, 10, "userA"))
        self.controller.add_request(Request(4, Direction.Up, 5, "userB"))
        requests = self.controller.get_pending_requests()
        self.assertEqual([r.priority for r in requests], [10, 5])
        self.assertEqual([r.user_id for r in requests], ["userA", "userB"])

    def test_emergency_blocks_requests_and_movement(self):
        """Test emergency mode freezes the car and preserves its work"""
        self.controller.add_request(Request(3, Direction.Up))
        self.controller.step(0)
        pending = self.controller.get_pending_requests()
        route = self.controller.get_planned_route()

        self.controller.trigger_emergency()
        self.assertEqual(self.controller.get_mode(), ElevatorMode.Emergency)
        self.assertEqual(self.controller.add_request(Request(2, Direction.Up)), ErrorCode.ELEVATOR_STOPPED)
        events_before = list(self.events.events)
        self.step_times(3)
        self.assertEqual(self.controller.get_current_floor(), 1)
        self.assertEqual(self.events.events, events_before)
        self.assertEqual(self.controller.get_pending_requests(), pending)
        self.assertEqual(self.controller.get_planned_route(), route)

        self.controller.clear_emergency()
        self.assertEqual(self.controller.get_mode(), ElevatorMode.Normal)
        self.step_times(2)
        self.assertEqual(self.controller.get_current_floor(), 3)
        self.assertTrue(self.controller.is_idle())

    def test_maintenance_blocks_requests_and_movement(self):
        """Test maintenance mode behaves like a halt until switched off"""
        self.controller.add_request(Request(2, Direction.Up))
        self.controller.set_maintenance(True)
        self.assertEqual(self.controller.get_mode(), ElevatorMode.Maintenance)
        self.assertEqual(self.controller.add_request(Request(3, Direction.Up)), ErrorCode.ELEVATOR_STOPPED)
        self.step_times(2)
        self.assertEqual(self.controller.get_current_floor(), 0)
        self.assertEqual(len(self.controller.get_pending_requests()), 1)

        self.controller.set_maintenance(False)
        self.assertEqual(self.controller.get_mode(), ElevatorMode.Normal)
        self.step_times(2)
        self.assertEqual(self.controller.get_current_floor(), 2)

    def test_mode_events(self):
        """Test every mode transition fires its event"""
        self.controller.trigger_emergency()
        self.controller.clear_emergency()
        self.controller.set_maintenance(True)
        self.controller.set_maintenance(False)
        self.assertEqual(self.events.names(),
                         ["Emergency", "EmergencyCleared", "MaintenanceOn", "MaintenanceOff"])

    def test_rapid_state_changes(self):
        """Test clearing an emergency restores Normal from any mode"""
        self.controller.add_request(Request(2, Direction.Up))
        self.controller.add_request(Request(2, Direction.Up))
        self.controller.trigger_emergency()
        self.controller.set_maintenance(True)
        self.controller.clear_emergency()
        self.controller.set_maintenance(False)
        self.assertEqual(self.controller.get_mode(), ElevatorMode.Normal)
        self.assertEqual(len(self.controller.get_pending_requests()), 2)

    def test_event_callback_receives_floor(self):
        """Test callbacks get the event name and the current floor"""
        callback = MagicMock()
        self.controller.set_event_callback(callback)
        self.controller.add_request(Request(2, Direction.Up))
        self.step_times(2)
        callback.assert_any_call(ElevatorEvent.ARRIVED, 2)
        callback.assert_called_with("RequestFulfilled", 2)
        self.controller.trigger_emergency()
        callback.assert_called_with(ElevatorEvent.EMERGENCY, 2)
        arrived = [c for c in callback.call_args_list if c.args[0] == "Arrived"]
        self.assertEqual(len(arrived), 2)

    def test_raising_callback_leaves_consistent_route(self):
        """Test a failing fulfillment handler cannot leave a stale waypoint"""
        def failing_callback(event, floor):
            if event == ElevatorEvent.REQUEST_FULFILLED:
                raise RuntimeError("handler failed")

        self.controller.set_event_callback(failing_callback)
        self.controller.add_request(Request(1, Direction.Up))
        with self.assertRaises(RuntimeError):
            self.controller.step(0)
        self.assertEqual(self.controller.get_pending_requests(), [])
        self.assertEqual(self.controller.get_planned_route(), [])
        self.assertTrue(self.controller.is_idle())

        self.controller.set_event_callback(None)
        self.controller.step(0)
        self.assertEqual(self.controller.get_current_floor(), 1)

    def test_raising_callback_keeps_remaining_route(self):
        """Test the route is re-planned before a failing handler runs"""
        self.controller.add_request(Request(1, Direction.Up))
        self.controller.add_request(Request(3, Direction.Up))
        def fail_on_fulfillment(event, floor):
            if event == ElevatorEvent.REQUEST_FULFILLED:
                raise RuntimeError("handler failed")

        self.controller.set_event_callback(MagicMock(side_effect=fail_on_fulfillment))
        with self.assertRaises(RuntimeError):
            self.controller.step(0)
        route = self.controller.get_planned_route()
        pending = {(r.floor, r.direction) for r in self.controller.get_pending_requests()}
        self.assertEqual(route, [Waypoint(3, Direction.Up)])
        for waypoint in route:
            self.assertIn(tuple(waypoint), pending)

    def test_last_callback_wins(self):
        """Test registering a callback replaces the previous one"""
        first = MagicMock()
        second = MagicMock()
        self.controller.set_event_callback(first)
        self.controller.set_event_callback(second)
        self.controller.trigger_emergency()
        first.assert_not_called()
        second.assert_called_once_with(ElevatorEvent.EMERGENCY, 0)

        self.controller.set_event_callback(None)
        self.controller.clear_emergency()
        second.assert_called_once()

    def test_log_sink_lines(self):
        """Test the text log records requests, moves and mode changes"""
        self.controller.add_request(Request(1, Direction.Up, 3, "userA"))
        self.controller.step(0)
        self.controller.set_maintenance(True)
        self.assertEqual(self.sink.lines[0], "Request added: floor=1, direction=Up, priority=3, userId=userA")
        self.assertIn("Moved from floor 0 to 1", self.sink.lines)
        self.assertEqual(self.sink.lines[-1], "Maintenance mode enabled at floor 1")

    def test_failing_log_sink_is_ignored(self):
        """Test a broken log sink does not affect the controller"""
        controller = ElevatorController(5, log_sink=FailingLogSink())
        with self.assertLogs("ElevatorSystem", level="WARNING"):
            self.assertEqual(controller.add_request(Request(1, Direction.Up)), ErrorCode.SUCCESS)
        controller.step(0)
        self.assertEqual(controller.get_current_floor(), 1)
        self.assertTrue(controller.is_idle())

    def test_step_pacing(self):
        """Test steps hand their duration to the pacer"""
        pacer = RecordingPacer()
        controller = ElevatorController(5, pacer=pacer, step_duration=1.0)
        controller.step()
        self.assertEqual(pacer.pauses, [])
        controller.add_request(Request(3, Direction.Up))
        controller.step(0.25)
        controller.step()
        self.assertEqual(pacer.pauses, [0.25, 1.0])
        controller.trigger_emergency()
        controller.step()
        self.assertEqual(pacer.pauses, [0.25, 1.0])

    def test_sleep_pacer_skips_non_positive(self):
        """Test the blocking pacer only sleeps for positive durations"""
        with patch("elevator_interface.time.sleep") as sleep:
            SleepPacer().pause(0)
            SleepPacer().pause(0.01)
        sleep.assert_called_once_with(0.01)

    def test_snapshot(self):
        """Test the plain-data state view"""
        self.controller.add_request(Request(2, Direction.Up))
        self.controller.step(0)
        self.assertEqual(self.controller.snapshot(), {
            "floor": 1,
            "direction": "Up",
            "mode": "Normal",
            "pending_requests": 1,
            "route": [(2, "Up")],
        })

    def test_default_sink(self):
        """Test the controller discards log lines by default"""
        controller = ElevatorController(3)
        self.assertIsInstance(controller.log_sink, NullLogSink)


class TestNearestStrategy(unittest.TestCase):
    """Unit tests for the greedy nearest-request strategy"""

    def setUp(self):
        self.events = RecordingEventHandler()
        self.controller = ElevatorController(5, routing_strategy=RoutingStrategy.NEAREST.value)
        self.controller.set_event_callback(self.events)

    def test_visits_closest_first(self):
        """Test the car serves the nearest request regardless of direction"""
        self.controller.add_request(Request(4, Direction.Up))
        self.controller.add_request(Request(1, Direction.Down))
        self.assertEqual(self.controller.get_planned_route(), [Waypoint(1, Direction.Down)])
        self.controller.step(0)
        self.assertEqual(self.events.floors_for(ElevatorEvent.REQUEST_FULFILLED), [1])
        for _ in range(3):
            self.controller.step(0)
        self.assertEqual(self.controller.get_current_floor(), 4)
        self.assertTrue(self.controller.is_idle())
        self.assertEqual(self.controller.get_pending_requests(), [])

    def test_removes_all_requests_at_floor(self):
        """Test a stop fulfills both directions at that floor"""
        self.controller.add_request(Request(2, Direction.Up))
        self.controller.add_request(Request(2, Direction.Down))
        self.controller.step(0)
        self.controller.step(0)
        self.assertEqual(self.controller.get_pending_requests(), [])
        self.assertTrue(self.controller.is_idle())


class TestFileLogging(unittest.TestCase):
    """Tests for the file log sink"""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)

    def test_enable_logging_writes_file(self):
        """Test enable_logging appends lines to the given file"""
        path = os.path.join(self.tmpdir.name, "elevator.log")
        controller = ElevatorController(5)
        controller.enable_logging(path)
        controller.add_request(Request(2, Direction.Up, 0, "userA"))
        controller.step(0)
        with open(path, encoding="utf-8") as log_file:
            lines = log_file.read().splitlines()
        self.assertEqual(lines[0], "Logging started.")
        self.assertEqual(lines[1], "Request added: floor=2, direction=Up, priority=0, userId=userA")
        self.assertEqual(lines[2], "Moved from floor 0 to 1")

    def test_unencodable_text_is_escaped(self):
        """Test lines that are not valid UTF-8 text are written escaped"""
        path = os.path.join(self.tmpdir.name, "elevator.log")
        sink = FileLogSink(path)
        sink.append("userId=\ud800")
        sink.append("next")
        with open(path, encoding="utf-8") as log_file:
            lines = log_file.read().splitlines()
        self.assertEqual(lines, ["userId=\\ud800", "next"])

    def test_unwritable_path_is_swallowed(self):
        """Test write failures only produce a warning"""
        sink = FileLogSink(self.tmpdir.name)  # a directory cannot be opened for appending
        with self.assertLogs("ElevatorSystem", level="WARNING") as captured:
            sink.append("hello")
        self.assertIn("Could not write to log file", captured.output[0])


class TestConfig(unittest.TestCase):
    """Tests for configuration helpers"""

    def test_get_config_returns_independent_copy(self):
        """Test callers cannot modify the shared defaults"""
        config = get_config()
        config["building"]["num_floors"] = 99
        self.assertEqual(get_config()["building"]["num_floors"], 5)
        self.assertEqual(get_config()["routing"]["strategy"], RoutingStrategy.SWEEP.value)

    def test_configure_logging(self):
        """Test logging is configured from the logging section"""
        with patch("elevator_config.logging.basicConfig") as basic_config:
            configure_logging()
        basic_config.assert_called_once()
        self.assertEqual(basic_config.call_args.kwargs["level"], logging.INFO)


class TestElevatorScenario(unittest.IsolatedAsyncioTestCase):
    """Integration test class for driven elevator scenarios"""

    async def test_drive_until_idle(self):
        """Test the async driver runs the up-then-down scenario to completion"""
        controller = ElevatorController(5)
        controller.add_request(Request(3, Direction.Up))
        controller.add_request(Request(1, Direction.Down))
        floors = await drive_until_idle(controller, step_duration=0)
        self.assertEqual(floors, [1, 2, 3, 2, 1])
        self.assertTrue(controller.is_idle())

    async def test_drive_until_idle_step_limit(self):
        """Test the driver refuses to run forever"""
        controller = ElevatorController(5)
        controller.add_request(Request(4, Direction.Up))
        with self.assertRaises(RuntimeError):
            await drive_until_idle(controller, step_duration=0, max_steps=2)

    async def test_drive_stops_on_emergency(self):
        """Test the driver returns when the car is halted"""
        controller = ElevatorController(5)
        controller.add_request(Request(4, Direction.Up))
        controller.step(0)
        controller.step(0)
        controller.trigger_emergency()
        floors = await drive_until_idle(controller, step_duration=0)
        self.assertEqual(floors, [])
        self.assertEqual(controller.get_current_floor(), 2)
        self.assertEqual(controller.get_mode(), ElevatorMode.Emergency)

    async def test_console_scenario(self):
        """Test the console scenario stops at floor 3 then floor 1"""
        with patch("run_realistic_scenario.wait", new=AsyncMock()), patch("builtins.print"):
            scenario = ConsoleScenario()
            await scenario.run_scenario()
        self.assertEqual(scenario.stops, [3, 1])
        self.assertTrue(scenario.verify_results())
        self.assertEqual(scenario.controller.get_current_floor(), 1)

    def test_render_building(self):
        """Test the text drawing marks the car's floor"""
        self.assertEqual(render_building(3, 1), "[2] \n[1] <E>\n[0] \n-------------------")


if __name__ == "__main__":
    unittest.main()
