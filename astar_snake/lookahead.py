import logging
import typing

from board import Board, Snake
from config import DIRECTIONS, MAX_HEALTH, MAX_LOOKAHEAD_DEPTH
from evaluator import GameStateEvaluator
from safety import find_safe_moves

logger = logging.getLogger(__name__)

DEAD_END_SCORE = 0.0


def simulate_move(board: Board, move: str) -> Board:
    """
    Advance only our snake by one move.

    Eating removes the food, restores health and keeps the tail; otherwise the
    tail is dropped and health decays by 1. Opponents stay where they are.
    """
    if move not in DIRECTIONS:
        raise ValueError(f"Unknown move: {move!r}")

    you = board.you
    new_head = you.head.neighbor(move)

    if board.food_at(new_head):
        body = (new_head,) + you.body
        health = MAX_HEALTH
        food = [f for f in board.food if f != new_head]
    else:
        body = (new_head,) + you.body[:-1]
        health = you.health - 1
        food = None

    moved = Snake(id=you.id, body=body, health=health)
    return board.replace_you(moved, food=food, turn=board.turn + 1)


def score_state(board: Board) -> float:
    if board.you.health <= 0:
        return DEAD_END_SCORE
    return GameStateEvaluator(board).evaluate_game_state().overall_score


def look_ahead(board: Board, depth: int) -> typing.Optional[str]:
    """
    Pick the first move whose simulated future scores best.

    Args:
        board: Current board
        depth: Number of our own moves to simulate, 1..MAX_LOOKAHEAD_DEPTH

    Returns:
        Best first-level direction, or None if no move is safe now
    """
    if not 1 <= depth <= MAX_LOOKAHEAD_DEPTH:
        raise ValueError(f"Lookahead depth must be between 1 and {MAX_LOOKAHEAD_DEPTH}, got {depth}")

    best_move, best_score = _best_move(board, depth)
    if best_move is not None:
        logger.debug("Lookahead depth %d picked %s (%.3f)", depth, best_move, best_score)
    return best_move


def _best_move(board: Board, depth: int) -> typing.Tuple[typing.Optional[str], float]:
    best_move = None
    best_score = -float('inf')

    for move in find_safe_moves(board):
        simulated = simulate_move(board, move)

        if depth == 1:
            score = score_state(simulated)
        else:
            # Greedy rollout: the deeper choice is ours alone, no opponent replies
            deeper_move, _ = _best_move(simulated, depth - 1)
            if deeper_move is None:
                score = DEAD_END_SCORE
            else:
                score = score_state(simulate_move(simulated, deeper_move))

        if score > best_score:
            best_score = score
            best_move = move

    return best_move, best_score
