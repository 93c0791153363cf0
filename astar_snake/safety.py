"""
Safety filters for the four candidate moves.

Every filter takes the candidate map and the Board and may only switch a
candidate's `safe` flag off. Filters never turn a move back on, so the order
in SAFETY_FILTERS only affects which filter gets the blame in the debug log.
"""

import logging
import typing
from dataclasses import dataclass

from board import Board, Position
from config import DIRECTIONS

logger = logging.getLogger(__name__)


@dataclass
class MoveCandidate:
    direction: str
    destination: Position
    safe: bool = True


Candidates = typing.Dict[str, MoveCandidate]


def build_candidates(head: Position) -> Candidates:
    """One candidate per direction, in up/down/left/right order, all safe."""
    return {direction: MoveCandidate(direction, head.neighbor(direction)) for direction in DIRECTIONS}


def filter_backwards(candidates: Candidates, board: Board):
    """Disable the move that would re-enter our own neck."""
    you = board.you
    neck = you.neck
    if neck is None or neck == you.head:
        return
    for candidate in candidates.values():
        if candidate.destination == neck:
            candidate.safe = False


def filter_out_of_bounds(candidates: Candidates, board: Board):
    for candidate in candidates.values():
        if not board.in_bounds(candidate.destination):
            candidate.safe = False


def filter_collisions(candidates: Candidates, board: Board):
    """
    Disable moves onto any body segment of any snake, heads included.

    A snake's tail cell is left to filter_tail_collision unless another
    segment of the same snake also sits on it (the snake just ate and its
    tail will not retract).
    """
    for snake in board.snakes:
        segments = set(snake.body[:-1]) if snake.length > 1 else set(snake.body)
        for candidate in candidates.values():
            if candidate.destination in segments:
                candidate.safe = False


def filter_tail_collision(candidates: Candidates, board: Board):
    """
    Decide moves onto tail cells.

    An opposing tail is only safe if that snake cannot eat this turn: with food
    next to its head we assume it eats, its tail stays put, and the cell
    remains deadly. Our own tail always vacates when we step onto it.
    """
    for snake in board.snakes:
        if snake.id == board.you_id or snake.length < 2:
            continue
        will_eat = any(snake.head.distance(food) == 1 for food in board.food)
        if not will_eat:
            continue
        for candidate in candidates.values():
            if candidate.destination == snake.tail:
                candidate.safe = False


def filter_head_to_head(candidates: Candidates, board: Board):
    """Disable cells next to the head of any opponent at least as long as us."""
    my_length = board.you.length
    for opponent in board.opponents:
        if my_length > opponent.length:
            continue
        danger = set(opponent.head.neighbors())
        for candidate in candidates.values():
            if candidate.destination in danger:
                candidate.safe = False


SAFETY_FILTERS = (
    filter_backwards,
    filter_out_of_bounds,
    filter_collisions,
    filter_tail_collision,
    filter_head_to_head,
)


def apply_safety_filters(candidates: Candidates, board: Board) -> Candidates:
    for safety_filter in SAFETY_FILTERS:
        before = get_safe_moves(candidates)
        safety_filter(candidates, board)
        removed = [move for move in before if not candidates[move].safe]
        if removed:
            logger.debug("%s ruled out %s", safety_filter.__name__, removed)
    return candidates


def get_safe_moves(candidates: Candidates) -> typing.List[str]:
    """Directions still marked safe, in candidate order."""
    return [direction for direction, candidate in candidates.items() if candidate.safe]


def evaluate_candidates(board: Board) -> Candidates:
    """Build the four candidates around our head and run every filter."""
    return apply_safety_filters(build_candidates(board.you.head), board)


def find_safe_moves(board: Board) -> typing.List[str]:
    return get_safe_moves(evaluate_candidates(board))
