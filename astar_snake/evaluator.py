"""
Game State Evaluator for Battlesnake

Scores a whole board from our snake's point of view. Six factors are each
scaled to [0, 1] and blended with fixed weights:
- health:       current health and length
- foodAccess:   how close and how roomy the best food is
- spaceControl: reachable area, centrality and escape routes
- threatLevel:  nearby heads of snakes at least as long as us
- position:     distance from walls and centre
- pathSafety:   the best of the four next cells

The evaluator only reads the Board it was built with.
"""

import typing
from dataclasses import dataclass, field

import numpy as np

from board import Board, Position, build_board
from config import (
    CAN_HUNT_HEALTH,
    CRITICAL_HEALTH,
    DIRECTIONS,
    EVALUATION_WEIGHTS,
    EXPECTED_MAX_LENGTH,
    IMMEDIATE_THREAT_DISTANCE,
    IMMEDIATE_THREAT_PENALTY,
    LOW_HEALTH,
    MAX_HEALTH,
    POTENTIAL_THREAT_DISTANCE,
    POTENTIAL_THREAT_PENALTY,
    TRAPPED_AREA_RATIO,
    TRAPPED_MIN_AREA,
    WELL_FED_HEALTH,
)
from flood_fill import flood_fill, reachable_area

HEALTHY = 'healthy'
LOW = 'low'
CRITICAL = 'critical'

WELL_FED_BONUS = 0.1
CRITICAL_HEALTH_MULTIPLIER = 0.8
FOOD_URGENCY_MULTIPLIER = 1.2


def _clamp(value: float) -> float:
    return float(np.clip(value, 0.0, 1.0))


@dataclass
class HealthEvaluation:
    score: float
    health: int
    length: int
    status: str
    is_critical: bool
    can_hunt: bool


@dataclass
class FoodOption:
    position: Position
    distance: int
    area: int
    safety: float


@dataclass
class FoodEvaluation:
    score: float
    best_target: typing.Optional[Position] = None
    nearest_distance: typing.Optional[int] = None
    options: typing.List[FoodOption] = field(default_factory=list)


@dataclass
class SpaceEvaluation:
    score: float
    area: int
    area_ratio: float
    territory: float
    escape_routes: int
    is_trapped: bool


@dataclass
class Threat:
    snake_id: str
    distance: int
    length: int
    is_dangerous: bool


@dataclass
class ThreatEvaluation:
    score: float
    immediate_threats: typing.List[Threat] = field(default_factory=list)
    potential_threats: typing.List[Threat] = field(default_factory=list)

    @property
    def hunting_opportunities(self) -> typing.List[Threat]:
        return [t for t in self.immediate_threats + self.potential_threats if not t.is_dangerous]


@dataclass
class PositionEvaluation:
    score: float
    wall_distance: int
    center_distance: float  # Normalized to [0, 1]
    escape_routes: int
    is_cornered: bool
    is_center: bool


@dataclass
class PathSafetyEvaluation:
    score: float
    safest_direction: typing.Optional[str]
    direction_scores: typing.Dict[str, float] = field(default_factory=dict)


@dataclass
class EvaluationResult:
    overall_score: float
    factors: typing.Dict[str, typing.Any]
    recommendations: typing.List[str]


# (predicate over the factor map, advice)
RECOMMENDATION_RULES = [
    (lambda f: f['health'].is_critical, "seek food immediately"),
    (lambda f: f['health'].status == LOW, "look for food soon"),
    (lambda f: f['spaceControl'].is_trapped, "find escape route"),
    (lambda f: f['position'].is_cornered, "move away from walls"),
    (lambda f: any(t.is_dangerous for t in f['threatLevel'].immediate_threats), "avoid larger snakes"),
    (lambda f: f['health'].can_hunt and bool(f['threatLevel'].hunting_opportunities), "hunt smaller snakes"),
    (lambda f: f['position'].is_center, "hold the center"),
]


class GameStateEvaluator:
    """
    Multi-factor evaluation of one board from the acting snake's view.
    """

    def __init__(self, board: Board):
        self.board = board
        self.you = board.you
        self.head = self.you.head

    @classmethod
    def from_game_state(cls, game_state: typing.Dict) -> "GameStateEvaluator":
        return cls(build_board(game_state))

    def evaluate_health(self) -> HealthEvaluation:
        health = self.you.health
        length = self.you.length

        score = 0.7 * (health / MAX_HEALTH) + 0.3 * min(1.0, length / EXPECTED_MAX_LENGTH)
        if health > WELL_FED_HEALTH:
            score += WELL_FED_BONUS
        if health <= CRITICAL_HEALTH:
            score *= CRITICAL_HEALTH_MULTIPLIER

        if health <= CRITICAL_HEALTH:
            status = CRITICAL
        elif health <= LOW_HEALTH:
            status = LOW
        else:
            status = HEALTHY

        return HealthEvaluation(
            score=_clamp(score),
            health=health,
            length=length,
            status=status,
            is_critical=status == CRITICAL,
            can_hunt=health >= CAN_HUNT_HEALTH,
        )

    def evaluate_food_access(self) -> FoodEvaluation:
        """
        Rate each food by closeness and by the room around it; the best one
        becomes the target. The score is inflated while health is critical.
        """
        if not self.board.food:
            return FoodEvaluation(score=0.0)

        max_distance = max(1, self.board.width + self.board.height - 2)
        options = []
        for food in self.board.food:
            distance = self.head.distance(food)
            area = flood_fill(self.board, food)
            distance_score = 1.0 - min(1.0, distance / max_distance)
            area_score = area / self.board.area
            options.append(FoodOption(
                position=food,
                distance=distance,
                area=area,
                safety=0.6 * distance_score + 0.4 * area_score,
            ))

        best = max(options, key=lambda option: option.safety)
        score = best.safety
        if self.you.health <= CRITICAL_HEALTH:
            score *= FOOD_URGENCY_MULTIPLIER

        return FoodEvaluation(
            score=_clamp(score),
            best_target=best.position,
            nearest_distance=min(option.distance for option in options),
            options=options,
        )

    def evaluate_space_control(self) -> SpaceEvaluation:
        area = reachable_area(self.board, self.head)
        area_ratio = area / self.board.area
        territory = 1.0 - self._normalized_center_distance(self.head)
        escape_routes = self.board.escape_routes(self.head)

        score = 0.5 * area_ratio + 0.25 * territory + 0.25 * (escape_routes / 4)
        trapped_below = max(TRAPPED_MIN_AREA, TRAPPED_AREA_RATIO * self.board.area)

        return SpaceEvaluation(
            score=_clamp(score),
            area=area,
            area_ratio=area_ratio,
            territory=territory,
            escape_routes=escape_routes,
            is_trapped=area < trapped_below,
        )

    def evaluate_threats(self) -> ThreatEvaluation:
        evaluation = ThreatEvaluation(score=1.0)
        penalty = 0.0

        for opponent in self.board.opponents:
            distance = self.head.distance(opponent.head)
            threat = Threat(
                snake_id=opponent.id,
                distance=distance,
                length=opponent.length,
                is_dangerous=opponent.length >= self.you.length,
            )
            if distance <= IMMEDIATE_THREAT_DISTANCE:
                evaluation.immediate_threats.append(threat)
                if threat.is_dangerous:
                    penalty += IMMEDIATE_THREAT_PENALTY
            elif distance <= POTENTIAL_THREAT_DISTANCE:
                evaluation.potential_threats.append(threat)
                if threat.is_dangerous:
                    penalty += POTENTIAL_THREAT_PENALTY

        evaluation.score = max(0.0, 1.0 - penalty)
        return evaluation

    def evaluate_position(self) -> PositionEvaluation:
        x, y = self.head.x, self.head.y
        wall_distance = min(x, y, self.board.width - 1 - x, self.board.height - 1 - y)
        max_wall_distance = max(1, (min(self.board.width, self.board.height) - 1) // 2)
        wall_score = min(1.0, max(0, wall_distance) / max_wall_distance)

        center_distance = self._normalized_center_distance(self.head)
        escape_routes = self.board.escape_routes(self.head)

        score = 0.4 * wall_score + 0.3 * (1.0 - center_distance) + 0.3 * (escape_routes / 4)

        return PositionEvaluation(
            score=_clamp(score),
            wall_distance=wall_distance,
            center_distance=center_distance,
            escape_routes=escape_routes,
            is_cornered=escape_routes <= 1,
            is_center=center_distance < 0.2,
        )

    def evaluate_path_safety(self) -> PathSafetyEvaluation:
        """Score each next cell by its room and its exposure to bigger heads."""
        dangerous_heads = [
            opponent.head for opponent in self.board.opponents
            if opponent.length >= self.you.length
        ]

        direction_scores = {}
        for direction in DIRECTIONS:
            destination = self.head.neighbor(direction)
            if not self.board.is_free(destination):
                direction_scores[direction] = 0.0
                continue

            area_score = flood_fill(self.board, destination) / self.board.area
            exposure = 0.0
            for head in dangerous_heads:
                distance = destination.distance(head)
                if distance <= 1:
                    exposure += 0.5
                elif distance == 2:
                    exposure += 0.25
            threat_score = max(0.0, 1.0 - exposure)
            direction_scores[direction] = _clamp(0.7 * area_score + 0.3 * threat_score)

        best_score = max(direction_scores.values())
        safest = None
        if best_score > 0:
            safest = max(direction_scores, key=direction_scores.get)

        return PathSafetyEvaluation(score=best_score, safest_direction=safest,
                                    direction_scores=direction_scores)

    def evaluate_game_state(self) -> EvaluationResult:
        factors = {
            'health': self.evaluate_health(),
            'foodAccess': self.evaluate_food_access(),
            'spaceControl': self.evaluate_space_control(),
            'threatLevel': self.evaluate_threats(),
            'position': self.evaluate_position(),
            'pathSafety': self.evaluate_path_safety(),
        }

        names = list(EVALUATION_WEIGHTS)
        scores = np.array([factors[name].score for name in names])
        weights = np.array([EVALUATION_WEIGHTS[name] for name in names])
        overall = _clamp(float(np.dot(scores, weights)))

        recommendations = [advice for applies, advice in RECOMMENDATION_RULES if applies(factors)]
        return EvaluationResult(overall_score=overall, factors=factors, recommendations=recommendations)

    def _normalized_center_distance(self, pos: Position) -> float:
        center_x = (self.board.width - 1) / 2
        center_y = (self.board.height - 1) / 2
        max_distance = center_x + center_y
        if max_distance == 0:
            return 0.0
        return min(1.0, (abs(pos.x - center_x) + abs(pos.y - center_y)) / max_distance)
