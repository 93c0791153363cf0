"""
Engine constants and tunable settings.
"""

import os
import typing
from dataclasses import dataclass

# Constants
X = 'x'
Y = 'y'
LEFT = 'left'
RIGHT = 'right'
DOWN = 'down'
UP = 'up'

DIRECTIONS = [UP, DOWN, LEFT, RIGHT]

DIRECTION_DELTAS = {
    UP: (0, 1),
    DOWN: (0, -1),
    LEFT: (-1, 0),
    RIGHT: (1, 0),
}

DEFAULT_MOVE = DOWN

# Strategy thresholds
FOOD_URGENCY_HEALTH = 50  # Below this, food paths are halved in cost
HUNT_HEALTH_THRESHOLD = 50  # Smaller snakes become A* targets at/above this
HUNT_DETECTION_RADIUS = 5
MIN_PATH_AREA = 3  # Next cell of an A* path must open onto more than this

# Lookahead
DEFAULT_LOOKAHEAD_DEPTH = 2
MAX_LOOKAHEAD_DEPTH = 3

# Health bands used by the evaluator
MAX_HEALTH = 100
CRITICAL_HEALTH = 30
LOW_HEALTH = 50
WELL_FED_HEALTH = 80
CAN_HUNT_HEALTH = 70
EXPECTED_MAX_LENGTH = 20

# Threat radii (Manhattan distance to an opposing head)
IMMEDIATE_THREAT_DISTANCE = 2
POTENTIAL_THREAT_DISTANCE = 4
IMMEDIATE_THREAT_PENALTY = 0.3
POTENTIAL_THREAT_PENALTY = 0.1

# A head is trapped below max(TRAPPED_MIN_AREA, TRAPPED_AREA_RATIO * board area)
TRAPPED_MIN_AREA = 3
TRAPPED_AREA_RATIO = 0.1

# Evaluation weights
EVALUATION_WEIGHTS = {
    'health': 0.25,
    'foodAccess': 0.20,
    'spaceControl': 0.20,
    'threatLevel': 0.15,
    'position': 0.10,
    'pathSafety': 0.10,
}


@dataclass
class EngineConfig:
    """Per-decision settings for the move selector."""
    lookahead_depth: int = DEFAULT_LOOKAHEAD_DEPTH  # 0 disables the lookahead stage
    hunt_radius: int = HUNT_DETECTION_RADIUS
    min_path_area: int = MIN_PATH_AREA
    default_move: str = DEFAULT_MOVE
    hunt_health_threshold: int = HUNT_HEALTH_THRESHOLD
    food_urgency_health: int = FOOD_URGENCY_HEALTH

    def __post_init__(self):
        if not 0 <= self.lookahead_depth <= MAX_LOOKAHEAD_DEPTH:
            raise ValueError(
                f"lookahead_depth must be between 0 and {MAX_LOOKAHEAD_DEPTH}, "
                f"got {self.lookahead_depth}"
            )
        if self.default_move not in DIRECTIONS:
            raise ValueError(f"default_move must be one of {DIRECTIONS}, got {self.default_move!r}")

    @classmethod
    def from_env(cls, environ: typing.Optional[typing.Mapping[str, str]] = None) -> "EngineConfig":
        """
        Build a config from SNAKE_* environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            EngineConfig with unset variables left at their defaults
        """
        environ = os.environ if environ is None else environ
        return cls(
            lookahead_depth=int(environ.get("SNAKE_LOOKAHEAD_DEPTH", DEFAULT_LOOKAHEAD_DEPTH)),
            hunt_radius=int(environ.get("SNAKE_HUNT_RADIUS", HUNT_DETECTION_RADIUS)),
            default_move=environ.get("SNAKE_DEFAULT_MOVE", DEFAULT_MOVE),
        )
