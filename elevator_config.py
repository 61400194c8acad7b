"""
Elevator System Configuration File

This file contains all configuration parameters for the elevator system,
using configurable settings instead of hardcoded constants
"""
import copy
import logging
from enum import Enum
from typing import Dict, Any, Optional


class RoutingStrategy(Enum):
    """Elevator route planning strategy enumeration"""
    SWEEP = 'sweep'       # One upward sweep, then one downward sweep, matching request direction
    NEAREST = 'nearest'   # Greedy: always head for the closest pending request


# Default building configuration
DEFAULT_NUM_FLOORS = 5

# Step pacing (seconds of simulated time per step)
DEFAULT_STEP_DURATION = 1.0
DEMO_STEP_DURATION = 0.5

# Safety bound for drivers stepping the controller until idle
MAX_SIMULATION_STEPS = 1000

# Logging configuration
LOGGER_NAME = "ElevatorSystem"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Complete default configuration
DEFAULT_CONFIG = {
    "building": {
        "num_floors": DEFAULT_NUM_FLOORS
    },
    "routing": {
        "strategy": RoutingStrategy.SWEEP.value  # Default using the sweep route
    },
    "timing": {
        "step_duration": DEFAULT_STEP_DURATION,
        "demo_step_duration": DEMO_STEP_DURATION
    },
    "logging": {
        "level": DEFAULT_LOG_LEVEL,
        "format": DEFAULT_LOG_FORMAT,
        "file": None  # Optional path for the controller's text log sink
    },
    "simulation": {
        "max_steps": MAX_SIMULATION_STEPS
    }
}


def get_config() -> Dict[str, Any]:
    """
    Get elevator system configuration

    Returns:
        Dictionary containing complete configuration information
    """
    return copy.deepcopy(DEFAULT_CONFIG)


def configure_logging(config: Optional[Dict[str, Any]] = None) -> None:
    """
    Configure the root logger from the logging section of the configuration.

    Intended for scripts; library modules only fetch the named logger.

    Args:
        config: Configuration dictionary (defaults to get_config())
    """
    logging_config = (config or get_config())["logging"]
    logging.basicConfig(level=getattr(logging, logging_config["level"].upper(), logging.INFO),
                        format=logging_config["format"])
