import pytest

from maze_race.maze import Cell, Grid, Maze
from maze_race.scheduler import VirtualClock


def carve(grid, cells):
    for r, c in cells:
        grid.set_cell(r, c, Cell.PATH)


@pytest.fixture
def corridor_maze():
    """15x21 maze with a single L-shaped corridor from (1,1) to (13,19).

    Row 1 is open for cols 1..3 only, so the fourth step right from the start
    hits a wall. The route is 31 cells long (30 moves).
    """
    grid = Grid.create_empty(15, 21)
    carve(grid, [(1, c) for c in range(1, 4)])
    carve(grid, [(r, 3) for r in range(1, 14)])
    carve(grid, [(13, c) for c in range(3, 20)])
    return Maze.from_grid(grid, start=(1, 1), goal=(13, 19))


@pytest.fixture
def clock():
    return VirtualClock()
