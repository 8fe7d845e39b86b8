from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple

from .maze import Maze, Position
from .solver import solve

# Milliseconds between computer steps
COMPUTER_MOVE_SPEED = 300

# (delay before stage in ms, status label); a None label means the race goes live
COUNTDOWN_STAGES: List[Tuple[int, Optional[str]]] = [
    (500, "3..."),
    (1000, "2..."),
    (1000, "1..."),
    (1000, "GO!"),
    (500, None),
]
READY_LABEL = "Get ready..."


class RaceState(Enum):
    IDLE = "idle"
    COUNTING_DOWN = "counting_down"
    ACTIVE = "active"
    FINISHED = "finished"


class Agent(Enum):
    USER = "user"
    COMPUTER = "computer"


class Direction(Enum):
    UP = (-1, 0)
    DOWN = (1, 0)
    LEFT = (0, -1)
    RIGHT = (0, 1)


class RaceEvent(Enum):
    COUNTDOWN = "countdown"  # detail: stage label
    STARTED = "started"
    MOVED = "moved"  # detail: Agent
    FINISHED = "finished"  # detail: winning Agent


@dataclass
class Score:
    user: int = 0
    computer: int = 0

    def record(self, winner: Agent) -> None:
        if winner is Agent.USER:
            self.user += 1
        else:
            self.computer += 1

    def reset(self) -> None:
        self.user = 0
        self.computer = 0

    def as_tuple(self) -> Tuple[int, int]:
        return self.user, self.computer


class RaceController:
    """State machine for one user-vs-computer race at a time.

    IDLE -> COUNTING_DOWN -> ACTIVE -> FINISHED, and back through IDLE on the
    next start. The computer replays the solved route one cell per tick; the
    user moves on intents. At most one computer tick is pending at any time.
    """

    def __init__(self, scheduler, score: Optional[Score] = None, move_interval_ms: int = COMPUTER_MOVE_SPEED,
                 on_event: Optional[Callable[[RaceEvent, Any], None]] = None) -> None:
        if move_interval_ms <= 0:
            raise ValueError(f"move interval must be positive, got {move_interval_ms}")
        self.scheduler = scheduler
        self.score = score if score is not None else Score()
        self.move_interval_ms = move_interval_ms
        self.on_event = on_event

        self.state = RaceState.IDLE
        self.maze: Optional[Maze] = None
        self.route: List[Position] = []
        self.computer_index = 0
        self.user_pos: Optional[Position] = None
        self.computer_pos: Optional[Position] = None
        self.winner: Optional[Agent] = None

        self._tick_handle = None
        self._countdown_handle = None

    # --- lifecycle ---------------------------------------------------
    def start(self, maze: Optional[Maze]) -> bool:
        if maze is None or self.state not in (RaceState.IDLE, RaceState.FINISHED):
            return False

        route = solve(maze.grid, maze.start, maze.goal)
        if route is None:
            raise RuntimeError(f"no route from {maze.start} to {maze.goal}")

        self._cancel_tick()
        self.maze = maze
        self.route = route
        self.computer_index = 1
        self.winner = None
        self.user_pos = maze.start
        self.computer_pos = maze.start
        self.state = RaceState.COUNTING_DOWN
        self._emit(RaceEvent.COUNTDOWN, READY_LABEL)
        self._schedule_stage(0)
        return True

    def reset(self, maze: Optional[Maze]) -> bool:
        """Fast restart: drop the running race and start over."""
        if self.state is RaceState.COUNTING_DOWN:
            return False
        self._cancel_tick()
        self.state = RaceState.IDLE
        return self.start(maze)

    def cancel(self) -> None:
        """Drop every pending timer and return to IDLE."""
        self._cancel_tick()
        if self._countdown_handle is not None:
            self.scheduler.cancel(self._countdown_handle)
            self._countdown_handle = None
        self.state = RaceState.IDLE
        self.winner = None

    # --- countdown ---------------------------------------------------
    def _schedule_stage(self, index: int) -> None:
        delay, label = COUNTDOWN_STAGES[index]

        def fire() -> None:
            self._countdown_handle = None
            if label is None:
                self._go()
                return
            self._emit(RaceEvent.COUNTDOWN, label)
            self._schedule_stage(index + 1)

        self._countdown_handle = self.scheduler.after(delay, fire)

    def _go(self) -> None:
        self.state = RaceState.ACTIVE
        self._emit(RaceEvent.STARTED, None)
        self._tick_handle = self.scheduler.after(self.move_interval_ms, self._tick)

    # --- movement ----------------------------------------------------
    def apply_user_intent(self, direction: Direction) -> bool:
        if self.state is not RaceState.ACTIVE:
            return False
        dr, dc = direction.value
        r, c = self.user_pos
        candidate = (r + dr, c + dc)
        if not self.maze.is_free(candidate):
            return False
        self.user_pos = candidate
        self._emit(RaceEvent.MOVED, Agent.USER)
        self._check_win(Agent.USER)
        return True

    def _tick(self) -> None:
        self._tick_handle = None
        if self.state is not RaceState.ACTIVE:
            return
        if self.computer_index >= len(self.route):
            return  # route exhausted; only happens on the goal cell
        self.computer_pos = self.route[self.computer_index]
        self.computer_index += 1
        self._emit(RaceEvent.MOVED, Agent.COMPUTER)
        self._check_win(Agent.COMPUTER)
        if self.state is RaceState.ACTIVE:
            self._tick_handle = self.scheduler.after(self.move_interval_ms, self._tick)

    def _check_win(self, agent: Agent) -> None:
        pos = self.user_pos if agent is Agent.USER else self.computer_pos
        if pos != self.maze.goal:
            return
        self.state = RaceState.FINISHED
        self.winner = agent
        self._cancel_tick()
        self.score.record(agent)
        self._emit(RaceEvent.FINISHED, agent)

    # --- helpers -----------------------------------------------------
    def _cancel_tick(self) -> None:
        if self._tick_handle is not None:
            self.scheduler.cancel(self._tick_handle)
            self._tick_handle = None

    def _emit(self, event: RaceEvent, detail: Any) -> None:
        if self.on_event is not None:
            self.on_event(event, detail)
