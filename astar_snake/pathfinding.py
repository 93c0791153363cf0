"""
A* Pathfinding for Battlesnake

This module finds short obstacle-avoiding routes from our head to:
- Food items
- Heads of smaller snakes (hunting)

Paths never enter an occupied cell. A prey head is itself occupied, so a
prey target only yields a path if that cell is free when the grid is built.

The grid is an arena of Nodes indexed [x][y] and rebuilt from the Board on
every call to update_grid, so no path data leaks from one turn to the next.
Each Node's parent is an (x, y) index into the same arena, not an owned
reference.
"""

import heapq
import logging
import typing
from dataclasses import dataclass

from board import Board, Position
from config import FOOD_URGENCY_HEALTH, HUNT_HEALTH_THRESHOLD
from flood_fill import flood_fill

logger = logging.getLogger(__name__)

# Target priorities (lower is more urgent)
URGENT_PRIORITY = 1
NORMAL_PRIORITY = 2


@dataclass
class Node:
    """A single grid cell and its search bookkeeping."""
    x: int
    y: int
    walkable: bool = True
    g: int = 0  # Cost from start
    h: int = 0  # Heuristic cost to goal
    f: int = 0  # g + h
    parent: typing.Optional[typing.Tuple[int, int]] = None
    order: typing.Optional[int] = None  # When the node first entered the open set

    def reset(self):
        self.walkable = True
        self.g = 0
        self.h = 0
        self.f = 0
        self.parent = None
        self.order = None

    @property
    def position(self) -> Position:
        return Position(self.x, self.y)


@dataclass(frozen=True)
class FoodTarget:
    position: Position
    priority: int
    area: int


@dataclass(frozen=True)
class PreyTarget:
    """The head of an opposing snake shorter than us."""
    position: Position
    priority: int
    area: int
    snake_id: str
    length: int


Target = typing.Union[FoodTarget, PreyTarget]
Path = typing.List[Position]


class AStar:
    """
    A* search over the board grid with a Manhattan heuristic.
    """

    def __init__(self, width: int, height: int):
        """
        Initialize an empty, fully walkable grid.

        Args:
            width: Board width
            height: Board height
        """
        self.width = width
        self.height = height
        self.grid = self._initialize_grid()

    @classmethod
    def for_board(cls, board: Board) -> "AStar":
        pathfinder = cls(board.width, board.height)
        pathfinder.update_grid(board)
        return pathfinder

    def _initialize_grid(self) -> typing.List[typing.List[Node]]:
        return [[Node(x, y) for y in range(self.height)] for x in range(self.width)]

    def update_grid(self, board: Board):
        """
        Reset every node and mark all snake bodies as unwalkable.

        The arena is reallocated when the board's dimensions differ from the
        current grid.
        """
        if (board.width, board.height) != (self.width, self.height):
            self.width = board.width
            self.height = board.height
            self.grid = self._initialize_grid()
        else:
            for column in self.grid:
                for node in column:
                    node.reset()

        for snake in board.snakes:
            for segment in snake.body:
                if self.in_bounds(segment.x, segment.y):
                    self.grid[segment.x][segment.y].walkable = False

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get_neighbors(self, node: Node) -> typing.List[Node]:
        """In-bounds walkable neighbours of node in up/down/left/right order."""
        neighbors = []
        for neighbor in node.position.neighbors():
            if not self.in_bounds(neighbor.x, neighbor.y):
                continue
            candidate = self.grid[neighbor.x][neighbor.y]
            if candidate.walkable:
                neighbors.append(candidate)
        return neighbors

    @staticmethod
    def heuristic(a: Position, b: Position) -> int:
        return a.distance(b)

    def find_path(self, start: Position, goal: Position) -> typing.Optional[Path]:
        """
        Find a shortest path from start to goal.

        Args:
            start: Starting cell (usually our head, which is itself occupied)
            goal: Target cell; an occupied goal, such as a prey snake's
                head, is unreachable

        Returns:
            Cells from the first step up to and including goal (start
            excluded), [] if start == goal, or None if goal is unreachable
        """
        if not self.in_bounds(start.x, start.y) or not self.in_bounds(goal.x, goal.y):
            return None
        if start == goal:
            return []

        goal_node = self.grid[goal.x][goal.y]
        if not goal_node.walkable:
            return None

        start_node = self.grid[start.x][start.y]
        start_node.g = 0
        start_node.h = self.heuristic(start, goal)
        start_node.f = start_node.h
        start_node.order = 0
        sequence = 1

        # Ties on f go to the node that entered the open set first
        open_heap = [(start_node.f, start_node.order, start_node.x, start_node.y)]
        closed = set()

        while open_heap:
            _, _, x, y = heapq.heappop(open_heap)
            if (x, y) in closed:
                continue
            current = self.grid[x][y]
            closed.add((x, y))

            if current is goal_node:
                return self.reconstruct_path(current)

            for neighbor in self.get_neighbors(current):
                if (neighbor.x, neighbor.y) in closed:
                    continue

                tentative_g = current.g + 1
                if neighbor.order is None:
                    neighbor.order = sequence
                    sequence += 1
                elif tentative_g >= neighbor.g:
                    continue

                neighbor.parent = (current.x, current.y)
                neighbor.g = tentative_g
                neighbor.h = self.heuristic(neighbor.position, goal)
                neighbor.f = neighbor.g + neighbor.h
                heapq.heappush(open_heap, (neighbor.f, neighbor.order, neighbor.x, neighbor.y))

        return None

    def reconstruct_path(self, node: Node) -> Path:
        """Walk parent indices back to the start; the start cell is dropped."""
        path = []
        current = node
        while current.parent is not None:
            path.append(current.position)
            parent_x, parent_y = current.parent
            current = self.grid[parent_x][parent_y]
        path.reverse()
        return path

    def find_best_path_to_targets(self, start: Position, targets: typing.Sequence[Target], board: Board,
                                  food_urgency_health: int = FOOD_URGENCY_HEALTH) -> typing.Optional[Path]:
        """
        Find the best-scoring path among several targets.

        Args:
            start: Starting cell
            targets: Candidate goals (food and prey)
            board: Board used to rebuild the grid and score paths
            food_urgency_health: Health below which food paths count half

        Returns:
            The path with the lowest score, or None if no target is reachable
        """
        best_path = None
        best_score = float('inf')
        best_target = None

        for target in targets:
            # Every search starts from a clean arena
            self.update_grid(board)
            path = self.find_path(start, target.position)
            if path is None:
                continue
            score = self.evaluate_path_score(path, target, board, food_urgency_health)
            if score < best_score:
                best_score = score
                best_path = path
                best_target = target

        if best_target is not None:
            logger.debug("Best target %s at score %.2f", best_target, best_score)
        return best_path

    @staticmethod
    def evaluate_path_score(path: Path, target: Target, board: Board,
                            food_urgency_health: int = FOOD_URGENCY_HEALTH) -> float:
        """
        Score a path; lower is better.

        Path length is the base. Food paths are halved while we are hungry;
        prey paths shrink with the prey's length relative to ours.
        """
        score = float(len(path))
        you = board.you

        if isinstance(target, FoodTarget):
            if you.health < food_urgency_health:
                score *= 0.5
        elif isinstance(target, PreyTarget):
            if you.length > target.length:
                score *= target.length / you.length

        return score


def build_targets(board: Board, food_urgency_health: int = FOOD_URGENCY_HEALTH,
                  hunt_health_threshold: int = HUNT_HEALTH_THRESHOLD) -> typing.List[Target]:
    """
    Collect A* goals for this turn.

    Every food cell is a target (urgent while health is below
    food_urgency_health). Heads of shorter opponents are added once health
    reaches hunt_health_threshold.
    """
    you = board.you
    targets: typing.List[Target] = []

    for food in board.food:
        targets.append(FoodTarget(
            position=food,
            priority=URGENT_PRIORITY if you.health < food_urgency_health else NORMAL_PRIORITY,
            area=flood_fill(board, food),
        ))

    if you.health >= hunt_health_threshold:
        for opponent in board.opponents:
            if opponent.length < you.length:
                targets.append(PreyTarget(
                    position=opponent.head,
                    priority=URGENT_PRIORITY,
                    area=flood_fill(board, opponent.head),
                    snake_id=opponent.id,
                    length=opponent.length,
                ))

    return targets
