from enum import IntEnum
from typing import List, Tuple, Optional, Sequence
import random
import numpy as np

# matplotlib optional for rendering
try:
    import matplotlib.pyplot as plt
except Exception:
    plt = None  # render disabled if matplotlib missing

MAZE_ROWS = 15
MAZE_COLS = 21

Position = Tuple[int, int]

# Carving strides (row, col): up, down, left, right
CARVE_STEPS: List[Tuple[int, int]] = [(-2, 0), (2, 0), (0, -2), (0, 2)]


class Cell(IntEnum):
    PATH = 0
    WALL = 1


class OutOfBoundsError(IndexError):
    """Raised when a grid cell is addressed outside the full grid extent."""


class Grid:
    """Fixed-size rectangular array of Wall/Path cells backed by numpy."""

    def __init__(self, rows: int, cols: int) -> None:
        if rows < 3 or cols < 3:
            raise ValueError(f"grid must be at least 3x3, got {rows}x{cols}")
        self.rows = rows
        self.cols = cols
        self.cells: np.ndarray = np.full((rows, cols), Cell.WALL, dtype=np.int8)

    @classmethod
    def create_empty(cls, rows: int, cols: int) -> "Grid":
        return cls(rows, cols)

    @property
    def shape(self) -> Tuple[int, int]:
        return self.rows, self.cols

    def is_in_bounds(self, row: int, col: int) -> bool:
        """True for interior cells only; the outer border never qualifies."""
        return 1 <= row <= self.rows - 2 and 1 <= col <= self.cols - 2

    def contains(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def cell_at(self, row: int, col: int) -> Cell:
        if not self.contains(row, col):
            raise OutOfBoundsError(f"cell ({row}, {col}) outside {self.rows}x{self.cols} grid")
        return Cell(int(self.cells[row, col]))

    def set_cell(self, row: int, col: int, state: Cell) -> None:
        if not self.contains(row, col):
            raise OutOfBoundsError(f"cell ({row}, {col}) outside {self.rows}x{self.cols} grid")
        self.cells[row, col] = state

    def is_free(self, pos: Position) -> bool:
        r, c = pos
        return self.contains(r, c) and self.cells[r, c] == Cell.PATH

    def copy(self) -> "Grid":
        other = Grid(self.rows, self.cols)
        other.cells = self.cells.copy()
        return other


class Maze:
    """A grid maze with walls and free cells.
    A perfect maze is generated with a recursive backtracker, so exactly one
    simple path joins any two free cells.
    """

    def __init__(self, rows: int = MAZE_ROWS, cols: int = MAZE_COLS, seed: Optional[int] = None) -> None:
        if rows % 2 == 0 or cols % 2 == 0:
            raise ValueError(f"rows and cols must be odd, got {rows}x{cols}")
        self.rows = rows
        self.cols = cols
        self.seed = seed
        self.start: Position = (1, 1)
        self.goal: Position = (rows - 2, cols - 2)
        if self.start == self.goal:
            raise ValueError(f"a {rows}x{cols} maze has no room between start and goal")
        self.grid = Grid.create_empty(rows, cols)
        self._generate(random.Random(seed))

    @classmethod
    def from_grid(cls, grid: Grid, start: Position = (1, 1), goal: Optional[Position] = None) -> "Maze":
        """Wrap an already carved grid without running the generator."""
        maze = cls.__new__(cls)
        maze.rows, maze.cols = grid.shape
        maze.seed = None
        maze.grid = grid
        maze.start = start
        maze.goal = goal if goal is not None else (maze.rows - 2, maze.cols - 2)
        for r, c in (maze.start, maze.goal):
            if not grid.contains(r, c):
                raise ValueError(f"endpoint ({r}, {c}) outside {maze.rows}x{maze.cols} grid")
        if maze.start == maze.goal:
            raise ValueError(f"start and goal are the same cell {maze.start}")
        return maze

    def regenerate(self, seed: Optional[int] = None) -> None:
        self.seed = seed
        self.grid = Grid.create_empty(self.rows, self.cols)
        self._generate(random.Random(seed))

    def _generate(self, rng: random.Random) -> None:
        grid = self.grid
        stack: List[Position] = [(1, 1)]
        grid.set_cell(1, 1, Cell.PATH)
        while stack:
            r, c = stack[-1]
            neighbors: List[Position] = []
            # jump by 2 so the cell in between stays a wall until knocked down
            for dr, dc in CARVE_STEPS:
                nr, nc = r + dr, c + dc
                if grid.is_in_bounds(nr, nc) and grid.cells[nr, nc] == Cell.WALL:
                    neighbors.append((nr, nc))
            if neighbors:
                nr, nc = rng.choice(neighbors)
                grid.set_cell((r + nr) // 2, (c + nc) // 2, Cell.PATH)
                grid.set_cell(nr, nc, Cell.PATH)
                stack.append((nr, nc))
            else:
                stack.pop()

        for r, c in (self.start, self.goal):
            grid.set_cell(r, c, Cell.PATH)

    def is_free(self, pos: Position) -> bool:
        return self.grid.is_free(pos)

    def to_ascii(self, path_positions: Optional[Sequence[Position]] = None) -> str:
        on_path = set(path_positions or ())
        lines: List[str] = []
        for r in range(self.rows):
            row_chars: List[str] = []
            for c in range(self.cols):
                if (r, c) == self.start:
                    row_chars.append("S")
                elif (r, c) == self.goal:
                    row_chars.append("G")
                elif self.grid.cells[r, c] == Cell.WALL:
                    row_chars.append("#")
                elif (r, c) in on_path:
                    row_chars.append(".")
                else:
                    row_chars.append(" ")
            lines.append("".join(row_chars))
        return "\n".join(lines)

    def render(self, path_positions: Optional[Sequence[Position]] = None, savepath: Optional[str] = None, figsize: Tuple[int, int] = (7, 5)) -> None:
        if plt is None:
            print("matplotlib not available; render skipped.")
            return
        fig, ax = plt.subplots(figsize=figsize)
        ax.imshow(self.grid.cells, cmap="gray_r", interpolation="nearest")
        ax.set_xticks([])
        ax.set_yticks([])
        if path_positions:
            xs = [p[1] for p in path_positions]
            ys = [p[0] for p in path_positions]
            ax.plot(xs, ys, linewidth=2)
        ax.scatter([self.start[1], self.goal[1]], [self.start[0], self.goal[0]], c="red")
        if savepath:
            plt.savefig(savepath, bbox_inches="tight")
            print(f"Saved visual to {savepath}")
        plt.close(fig)
