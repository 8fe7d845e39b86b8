from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

import numpy as np

from .maze import MAZE_COLS, MAZE_ROWS, Maze, Position
from .race import COMPUTER_MOVE_SPEED, READY_LABEL, Agent, Direction, RaceController, RaceEvent, RaceState, Score
from .solver import solve

# Status messages shown by the presentation layer
STATUS_WELCOME = "Generate a maze to begin."
STATUS_MAZE_GENERATED = "Maze generated! Race against the computer or press 'Clear Path' to reset."
STATUS_PATH_CLEARED = "Path cleared. You can generate a new maze or start racing!"
STATUS_SOLVED = "Solution shown. Press 'Clear Path' to hide it."
STATUS_RACE_STARTED = "Race started! Use arrow keys or WASD to move."
STATUS_USER_WON = "You won! Press 'R' to race again."
STATUS_COMPUTER_WON = "The computer won! Press 'R' to try again."
STATUS_NOT_READY = "Generate a maze before starting a race."


@dataclass(frozen=True)
class RaceSnapshot:
    grid: np.ndarray
    start: Optional[Position]
    goal: Optional[Position]
    user: Optional[Position]
    computer: Optional[Position]
    state: RaceState
    winner: Optional[Agent]
    status: str
    score: Tuple[int, int]
    solution: Optional[List[Position]]


class RaceSession:
    """Owns one maze, one race controller and the running score.

    All inbound intents go through the methods here; each returns whether
    the request was honoured. Requests made in the wrong state are ignored.
    """

    def __init__(self, scheduler, rows: int = MAZE_ROWS, cols: int = MAZE_COLS,
                 move_interval_ms: int = COMPUTER_MOVE_SPEED, verbose: bool = False) -> None:
        self.rows = rows
        self.cols = cols
        self.verbose = verbose
        self.maze: Optional[Maze] = None
        self.score = Score()
        self.status = STATUS_WELCOME
        self.solution: Optional[List[Position]] = None
        self.race = RaceController(scheduler, score=self.score, move_interval_ms=move_interval_ms,
                                   on_event=self._on_race_event)
        self._listeners: List[Callable[[], Any]] = []

    @property
    def racing(self) -> bool:
        return self.race.state in (RaceState.COUNTING_DOWN, RaceState.ACTIVE)

    # --- inbound -----------------------------------------------------
    def generate_maze(self, seed: Optional[int] = None) -> bool:
        if self.racing:
            return False
        self._log("Generating new maze...")
        # a finished race is closed out here; its score is already recorded
        self.race.cancel()
        self.maze = Maze(self.rows, self.cols, seed=seed)
        self.solution = None
        self._set_status(STATUS_MAZE_GENERATED)
        return True

    def reveal_solution(self) -> Optional[List[Position]]:
        if self.maze is None or self.racing:
            return None
        self.solution = solve(self.maze.grid, self.maze.start, self.maze.goal)
        self._set_status(STATUS_SOLVED)
        return self.solution

    def clear_visualization(self) -> bool:
        if self.maze is None or self.racing:
            return False
        self.solution = None
        # also retires a finished race so its markers disappear; the score stays
        self.race.cancel()
        self._set_status(STATUS_PATH_CLEARED)
        return True

    def start_race(self) -> bool:
        if self.maze is None:
            self._set_status(STATUS_NOT_READY)
            return False
        self.solution = None
        return self.race.start(self.maze)

    def reset_race(self) -> bool:
        if self.maze is None:
            self._set_status(STATUS_NOT_READY)
            return False
        self.solution = None
        return self.race.reset(self.maze)

    def movement_intent(self, direction: Direction) -> bool:
        return self.race.apply_user_intent(direction)

    def restart_intent(self) -> bool:
        if self.race.state not in (RaceState.ACTIVE, RaceState.FINISHED):
            return False
        return self.reset_race()

    def close(self) -> None:
        self.race.cancel()
        self._listeners.clear()

    # --- outbound ----------------------------------------------------
    def add_listener(self, callback: Callable[[], Any]) -> None:
        self._listeners.append(callback)

    def snapshot(self) -> RaceSnapshot:
        if self.maze is not None:
            grid = self.maze.grid.cells.copy()
            start, goal = self.maze.start, self.maze.goal
        else:
            grid = np.zeros((0, 0), dtype=np.int8)
            start = goal = None
        in_race = self.race.state is not RaceState.IDLE
        return RaceSnapshot(
            grid=grid,
            start=start,
            goal=goal,
            user=self.race.user_pos if in_race else None,
            computer=self.race.computer_pos if in_race else None,
            state=self.race.state,
            winner=self.race.winner,
            status=self.status,
            score=self.score.as_tuple(),
            solution=list(self.solution) if self.solution else None,
        )

    def controls(self) -> Dict[str, bool]:
        """Which presentation controls are currently usable."""
        if self.race.state is RaceState.COUNTING_DOWN:
            return {"generate": False, "clear": False, "reset": False, "start": False}
        active = self.race.state is RaceState.ACTIVE
        has_maze = self.maze is not None
        return {
            "generate": not active,
            "clear": has_maze and self.solution is not None and not active,
            "reset": not active,
            "start": has_maze,
        }

    # --- internals ---------------------------------------------------
    def _on_race_event(self, event: RaceEvent, detail: Any) -> None:
        if event is RaceEvent.COUNTDOWN:
            if detail == READY_LABEL:
                self._log("Starting race...")
            self._set_status(detail)
        elif event is RaceEvent.STARTED:
            self._set_status(STATUS_RACE_STARTED)
        elif event is RaceEvent.FINISHED:
            self._log(f"Race over, {detail.value} wins. Score {self.score.user}-{self.score.computer}")
            self._set_status(STATUS_USER_WON if detail is Agent.USER else STATUS_COMPUTER_WON)
        else:
            self._notify()

    def _set_status(self, text: str) -> None:
        self.status = text
        self._notify()

    def _notify(self) -> None:
        for callback in list(self._listeners):
            callback()

    def _log(self, message: str) -> None:
        if self.verbose:
            print(message)
