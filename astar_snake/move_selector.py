"""
Move selection for one turn.

Strategies are tried in order until one produces a move:
1. Lookahead: simulate our own moves a few turns ahead and keep the best
2. Hunting: close in on a nearby smaller snake
3. A*: follow the best path to food or prey if it opens onto enough room
4. Space: the safe move with the largest flood-fill area
5. Food direction: step toward the nearest food, else a random safe move

Bad snapshots and dead ends never raise; they fall back to a fixed move.
"""

import logging
import random
import typing
from dataclasses import dataclass

from board import Board, InvalidSnapshotError, Position, Snake, build_board
from config import DOWN, LEFT, RIGHT, UP, EngineConfig
from flood_fill import flood_fill
from lookahead import look_ahead
from pathfinding import AStar, build_targets
from safety import Candidates, evaluate_candidates, get_safe_moves

logger = logging.getLogger(__name__)

# Strategy labels
INVALID_SNAPSHOT = 'invalid-snapshot'
NO_SAFE_MOVE = 'no-safe-move'
LOOKAHEAD = 'lookahead'
HUNTING = 'hunting'
ASTAR = 'astar'
LARGEST_AREA = 'largest-area'
FOOD_DIRECTION = 'food-direction'


@dataclass
class MoveDecision:
    move: str
    strategy: str


@dataclass
class NearbySnake:
    snake: Snake
    distance: int

    @property
    def head(self) -> Position:
        return self.snake.head


def get_move_direction(current: Position, next_pos: Position) -> typing.Optional[str]:
    """Direction from current to an adjacent cell, or None if they coincide."""
    if next_pos.x > current.x:
        return RIGHT
    if next_pos.x < current.x:
        return LEFT
    if next_pos.y > current.y:
        return UP
    if next_pos.y < current.y:
        return DOWN
    return None


def find_nearby_smaller_snakes(board: Board, radius: int) -> typing.List[NearbySnake]:
    """Strictly shorter opponents whose head is within radius, closest first."""
    you = board.you
    nearby = []
    for opponent in board.opponents:
        if opponent.length >= you.length:
            continue
        distance = you.head.distance(opponent.head)
        if distance <= radius:
            nearby.append(NearbySnake(opponent, distance))
    return sorted(nearby, key=lambda n: n.distance)


def choose_hunting_move(board: Board, target: NearbySnake, candidates: Candidates,
                        safe_moves: typing.List[str]) -> str:
    """First safe move that gets closer to the target's head, else the first safe move."""
    current_distance = board.you.head.distance(target.head)
    for move in safe_moves:
        if candidates[move].destination.distance(target.head) < current_distance:
            return move
    return safe_moves[0]


def choose_astar_move(board: Board, safe_moves: typing.List[str],
                      config: EngineConfig) -> typing.Optional[str]:
    """
    First step of the best A* path, if it is safe and leads somewhere roomy.

    Returns:
        The direction to take, or None when no target is reachable or the
        path's first step fails the safety or area checks
    """
    targets = build_targets(board, config.food_urgency_health, config.hunt_health_threshold)
    if not targets:
        return None

    head = board.you.head
    pathfinder = AStar(board.width, board.height)
    path = pathfinder.find_best_path_to_targets(head, targets, board, config.food_urgency_health)
    if not path:
        return None

    next_position = path[0]
    direction = get_move_direction(head, next_position)
    if direction not in safe_moves:
        return None
    if flood_fill(board, next_position) <= config.min_path_area:
        return None
    return direction


def choose_largest_area_move(board: Board, candidates: Candidates,
                             safe_moves: typing.List[str]) -> typing.Tuple[str, int]:
    """Safe move with the largest flood-fill area; the first one wins ties."""
    best_move = safe_moves[0]
    best_area = 0
    for move in safe_moves:
        area = flood_fill(board, candidates[move].destination)
        if area > best_area:
            best_area = area
            best_move = move
    return best_move, best_area


def _food_directions(head: Position, food: Position) -> typing.Tuple[str, typing.Optional[str]]:
    distance_x = abs(head.x - food.x)
    distance_y = abs(head.y - food.y)
    x_direction = RIGHT if head.x - food.x < 0 else LEFT
    y_direction = UP if head.y - food.y < 0 else DOWN

    # Close the shorter non-zero gap first
    if distance_x < distance_y:
        if distance_x == 0:
            return y_direction, None
        return x_direction, y_direction
    if distance_y == 0:
        return x_direction, None
    return y_direction, x_direction


def choose_move_toward_food(board: Board, safe_moves: typing.List[str],
                            rng: random.Random) -> str:
    """
    Step toward the nearest food that has a safe primary or secondary direction.

    Falls back to a random safe move when there is no food or no food can be
    approached safely.
    """
    head = board.you.head
    foods = sorted(board.food, key=head.distance)

    for food in foods:
        primary, secondary = _food_directions(head, food)
        if primary in safe_moves:
            return primary
        if secondary is not None and secondary in safe_moves:
            return secondary

    return rng.choice(safe_moves)


def decide_move(game_state: typing.Dict, config: typing.Optional[EngineConfig] = None,
                rng: typing.Optional[random.Random] = None) -> MoveDecision:
    """
    Decide this turn's move.

    Args:
        game_state: Move request payload
        config: Engine settings (defaults to EngineConfig())
        rng: Random source for the final tie-break (defaults to a fresh
            random.Random)

    Returns:
        MoveDecision with the move and the strategy that produced it
    """
    config = config or EngineConfig()
    rng = rng or random.Random()

    try:
        board = build_board(game_state)
    except InvalidSnapshotError as e:
        logger.warning("Invalid snapshot, moving %s: %s", config.default_move, e)
        return MoveDecision(config.default_move, INVALID_SNAPSHOT)

    candidates = evaluate_candidates(board)
    safe_moves = get_safe_moves(candidates)
    if not safe_moves:
        logger.debug("No safe moves, moving %s", config.default_move)
        return MoveDecision(config.default_move, NO_SAFE_MOVE)

    if config.lookahead_depth > 0:
        move = look_ahead(board, config.lookahead_depth)
        if move in safe_moves:
            return MoveDecision(move, LOOKAHEAD)

    nearby_prey = find_nearby_smaller_snakes(board, config.hunt_radius)
    if nearby_prey:
        return MoveDecision(choose_hunting_move(board, nearby_prey[0], candidates, safe_moves), HUNTING)

    move = choose_astar_move(board, safe_moves, config)
    if move is not None:
        return MoveDecision(move, ASTAR)

    move, area = choose_largest_area_move(board, candidates, safe_moves)
    if area > 0:
        return MoveDecision(move, LARGEST_AREA)

    return MoveDecision(choose_move_toward_food(board, safe_moves, rng), FOOD_DIRECTION)


def choose_move(game_state: typing.Dict, config: typing.Optional[EngineConfig] = None,
                rng: typing.Optional[random.Random] = None) -> str:
    return decide_move(game_state, config, rng).move
