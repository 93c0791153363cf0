"""
Board model for a single turn.

Turns the raw Battlesnake move request into immutable value objects and a
numpy occupancy grid so obstacle lookups are O(1). A fresh Board is built for
every decision; nothing here survives between turns.
"""

import logging
import typing
from dataclasses import dataclass, field

import numpy as np

from config import DIRECTION_DELTAS, DIRECTIONS, MAX_HEALTH, X, Y

logger = logging.getLogger(__name__)


class InvalidSnapshotError(ValueError):
    """Raised when a move request cannot be turned into a Board."""


@dataclass(frozen=True)
class Position:
    x: int
    y: int

    def neighbor(self, direction: str) -> "Position":
        """Cell one step away in the given direction."""
        dx, dy = DIRECTION_DELTAS[direction]
        return Position(self.x + dx, self.y + dy)

    def neighbors(self) -> typing.List["Position"]:
        """The four adjacent cells in up/down/left/right order (bounds unchecked)."""
        return [self.neighbor(direction) for direction in DIRECTIONS]

    def distance(self, other: "Position") -> int:
        """Manhattan distance to another position."""
        return abs(self.x - other.x) + abs(self.y - other.y)

    def as_dict(self) -> typing.Dict[str, int]:
        return {X: self.x, Y: self.y}


@dataclass(frozen=True)
class Snake:
    id: str
    body: typing.Tuple[Position, ...]
    health: int = MAX_HEALTH

    @property
    def head(self) -> Position:
        return self.body[0]

    @property
    def neck(self) -> typing.Optional[Position]:
        return self.body[1] if len(self.body) > 1 else None

    @property
    def tail(self) -> Position:
        return self.body[-1]

    @property
    def length(self) -> int:
        return len(self.body)


@dataclass(frozen=True)
class Board:
    """
    Immutable snapshot of one turn.

    The occupancy grid is indexed [x, y] and marks every body segment of every
    snake, the acting snake included.
    """
    width: int
    height: int
    food: typing.Tuple[Position, ...]
    snakes: typing.Tuple[Snake, ...]
    you_id: str
    turn: int = 0
    _occupied: np.ndarray = field(init=False, repr=False, compare=False)
    _owners: typing.Dict[Position, Snake] = field(init=False, repr=False, compare=False)
    _food_cells: typing.FrozenSet[Position] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        occupied = np.zeros((self.width, self.height), dtype=bool)
        owners = {}
        for snake in self.snakes:
            for segment in snake.body:
                if self.in_bounds(segment):
                    occupied[segment.x, segment.y] = True
                owners.setdefault(segment, snake)
        # Frozen dataclass: derived lookups are attached once, here
        object.__setattr__(self, '_occupied', occupied)
        object.__setattr__(self, '_owners', owners)
        object.__setattr__(self, '_food_cells', frozenset(self.food))

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def you(self) -> Snake:
        for snake in self.snakes:
            if snake.id == self.you_id:
                return snake
        raise InvalidSnapshotError(f"Acting snake {self.you_id!r} is not on the board")

    @property
    def opponents(self) -> typing.List[Snake]:
        return [snake for snake in self.snakes if snake.id != self.you_id]

    @property
    def occupancy(self) -> np.ndarray:
        """Read-only view of the occupancy grid."""
        view = self._occupied.view()
        view.flags.writeable = False
        return view

    def in_bounds(self, pos: Position) -> bool:
        return 0 <= pos.x < self.width and 0 <= pos.y < self.height

    def is_occupied(self, pos: Position) -> bool:
        """True if any snake's body covers pos. Out-of-bounds cells are never occupied."""
        return self.in_bounds(pos) and bool(self._occupied[pos.x, pos.y])

    def is_free(self, pos: Position) -> bool:
        return self.in_bounds(pos) and not self._occupied[pos.x, pos.y]

    def snake_at(self, pos: Position) -> typing.Optional[Snake]:
        return self._owners.get(pos)

    def food_at(self, pos: Position) -> bool:
        return pos in self._food_cells

    def escape_routes(self, pos: Position) -> int:
        """Number of free cells adjacent to pos (0-4)."""
        return sum(1 for neighbor in pos.neighbors() if self.is_free(neighbor))

    def replace_you(self, snake: Snake, food: typing.Optional[typing.Iterable[Position]] = None,
                    turn: typing.Optional[int] = None) -> "Board":
        """
        Return a new Board with the acting snake swapped for `snake`.

        Args:
            snake: Replacement for the acting snake (same id)
            food: New food cells, or None to keep the current ones
            turn: New turn number, or None to keep the current one

        Returns:
            A new Board; self is left untouched
        """
        snakes = tuple(snake if s.id == self.you_id else s for s in self.snakes)
        return Board(
            width=self.width,
            height=self.height,
            food=self.food if food is None else tuple(food),
            snakes=snakes,
            you_id=self.you_id,
            turn=self.turn if turn is None else turn,
        )


def _parse_position(raw: typing.Dict) -> Position:
    return Position(int(raw[X]), int(raw[Y]))


def _parse_snake(raw: typing.Dict) -> Snake:
    body = tuple(_parse_position(segment) for segment in raw['body'])
    if not body:
        raise InvalidSnapshotError(f"Snake {raw.get('id')!r} has an empty body")
    health = raw.get('health', MAX_HEALTH)
    return Snake(id=str(raw['id']), body=body, health=int(health))


def build_board(game_state: typing.Dict) -> Board:
    """
    Build the Board for one move request.

    Args:
        game_state: Move request payload (turn, board, you)

    Returns:
        Board with the acting snake taken from `you`

    Raises:
        InvalidSnapshotError: dimensions are not positive, a field is missing
            or malformed, a body is empty, or the acting snake is not listed
            in board.snakes
    """
    try:
        raw_board = game_state['board']
        width = int(raw_board['width'])
        height = int(raw_board['height'])
        if width <= 0 or height <= 0:
            raise InvalidSnapshotError(f"Board dimensions must be positive, got {width}x{height}")

        you = _parse_snake(game_state['you'])
        snakes = []
        found_you = False
        for raw_snake in raw_board.get('snakes', []):
            if str(raw_snake['id']) == you.id:
                # The `you` entry is authoritative for our own body and health
                snakes.append(you)
                found_you = True
            else:
                snakes.append(_parse_snake(raw_snake))
        if not found_you:
            raise InvalidSnapshotError(f"Acting snake {you.id!r} is not listed in board.snakes")

        food = tuple(_parse_position(f) for f in raw_board.get('food', []))
        turn = int(game_state.get('turn', 0))
    except InvalidSnapshotError:
        raise
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise InvalidSnapshotError(f"Malformed move request: {e!r}") from e

    return Board(width=width, height=height, food=food, snakes=tuple(snakes), you_id=you.id, turn=turn)
