import typing

import numpy as np

from board import Board, Position


def flood_fill(board: Board, start: Position) -> int:
    """
    Count the cells reachable from start through free, in-bounds cells.

    Start itself is counted when it is free. An occupied or out-of-bounds start
    yields 0. Iterative (explicit stack), so board size never hits the
    recursion limit. The board is not modified.
    """
    if not board.is_free(start):
        return 0
    return _fill(board, [start])


def reachable_area(board: Board, origin: Position) -> int:
    """
    Count the cells reachable from an occupied origin such as a snake's head.

    The fill is seeded from the free neighbours of origin; the origin cell is
    not counted.
    """
    seeds = [neighbor for neighbor in origin.neighbors() if board.is_free(neighbor)]
    if not seeds:
        return 0
    return _fill(board, seeds)


def _fill(board: Board, seeds: typing.List[Position]) -> int:
    visited = np.zeros((board.width, board.height), dtype=bool)
    stack = []
    for seed in seeds:
        if not visited[seed.x, seed.y]:
            visited[seed.x, seed.y] = True
            stack.append(seed)

    count = 0
    while stack:
        pos = stack.pop()
        count += 1

        for neighbor in pos.neighbors():
            if not board.is_free(neighbor):
                continue
            if visited[neighbor.x, neighbor.y]:
                continue
            visited[neighbor.x, neighbor.y] = True
            stack.append(neighbor)

    return count
