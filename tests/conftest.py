"""
Pytest configuration and fixtures for the move engine tests.

Snapshots are plain move-request dicts, built the way the game server sends
them: coordinates as {"x": .., "y": ..} with y growing upwards.
"""

import random

import pytest

from board import build_board


def make_snake(snake_id, body, health=100):
    """Snake dict from a list of (x, y) tuples, head first."""
    segments = [{"x": x, "y": y} for x, y in body]
    return {
        "id": snake_id,
        "name": snake_id,
        "health": health,
        "body": segments,
        "head": segments[0],
        "length": len(segments),
    }


def make_state(you, others=(), food=(), width=11, height=11, turn=0):
    """Move request with `you` listed first in board.snakes."""
    return {
        "game": {"id": "test-game"},
        "turn": turn,
        "board": {
            "width": width,
            "height": height,
            "food": [{"x": x, "y": y} for x, y in food],
            "hazards": [],
            "snakes": [you] + list(others),
        },
        "you": you,
    }


@pytest.fixture
def snake_factory():
    return make_snake


@pytest.fixture
def state_factory():
    return make_state


@pytest.fixture
def board_factory():
    """Build a Board straight from snake dicts."""
    def factory(you, others=(), food=(), width=11, height=11, turn=0):
        return build_board(make_state(you, others, food, width, height, turn))
    return factory


@pytest.fixture
def open_state():
    """Our length-3 snake in the middle of an 11x11 board facing up, one opponent far away."""
    you = make_snake("you", [(5, 5), (5, 4), (5, 3)])
    other = make_snake("other", [(9, 9), (9, 10), (10, 10)])
    return make_state(you, [other], food=[(2, 8)])


@pytest.fixture
def rng():
    return random.Random(1234)
