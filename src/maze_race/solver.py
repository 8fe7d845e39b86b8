from typing import List, Optional, Set, Tuple

from .maze import Cell, Grid, Position

# Neighbour try-order (row, col): up, down, left, right
SOLVE_STEPS: List[Tuple[int, int]] = [(-1, 0), (1, 0), (0, -1), (0, 1)]


def _rejected(grid: Grid, pos: Position, visited: Set[Position]) -> bool:
    r, c = pos
    return not grid.contains(r, c) or grid.cells[r, c] == Cell.WALL or pos in visited


def solve(grid: Grid, start: Position, goal: Position) -> Optional[List[Position]]:
    """Find a start-to-goal route with depth-first search.

    Frames on the explicit stack hold ``[position, next_direction_index]``;
    ``path`` mirrors the positions of the live frames, so popping a frame is
    the backtrack step. Neighbours are tried up, down, left, right and the
    first one that reaches the goal wins. Returns ``None`` if the goal is
    unreachable.
    """
    if start == goal:
        return [start]

    visited: Set[Position] = set()
    if _rejected(grid, start, visited):
        return None

    visited.add(start)
    path: List[Position] = [start]
    stack: List[list] = [[start, 0]]

    while stack:
        frame = stack[-1]
        (r, c), d = frame
        if d == len(SOLVE_STEPS):
            stack.pop()
            path.pop()
            continue
        frame[1] = d + 1

        dr, dc = SOLVE_STEPS[d]
        nxt = (r + dr, c + dc)
        if nxt == goal:
            path.append(nxt)
            return path
        if _rejected(grid, nxt, visited):
            continue
        visited.add(nxt)
        path.append(nxt)
        stack.append([nxt, 0])

    return None
