import pytest

from maze_race.maze import Cell, Maze
from maze_race.race import (
    COMPUTER_MOVE_SPEED,
    COUNTDOWN_STAGES,
    READY_LABEL,
    Agent,
    Direction,
    RaceController,
    RaceEvent,
    RaceState,
    Score,
)

COUNTDOWN_MS = sum(delay for delay, _ in COUNTDOWN_STAGES)

# Moves that walk the corridor maze from start to goal
CORRIDOR_MOVES = [Direction.RIGHT] * 2 + [Direction.DOWN] * 12 + [Direction.RIGHT] * 16


@pytest.fixture
def events():
    return []


@pytest.fixture
def race(clock, events):
    return RaceController(clock, on_event=lambda event, detail: events.append((event, detail)))


def _go_live(race, clock, maze):
    assert race.start(maze)
    clock.advance(COUNTDOWN_MS)
    assert race.state is RaceState.ACTIVE


class TestCountdown:
    def test_start_without_maze_is_noop(self, race):
        assert not race.start(None)
        assert race.state is RaceState.IDLE

    def test_stage_order(self, race, clock, corridor_maze, events):
        race.start(corridor_maze)
        assert race.state is RaceState.COUNTING_DOWN
        assert race.user_pos == corridor_maze.start
        assert race.computer_pos == corridor_maze.start
        assert race.winner is None

        clock.advance(COUNTDOWN_MS - 1)
        assert race.state is RaceState.COUNTING_DOWN
        clock.advance(1)
        assert race.state is RaceState.ACTIVE

        labels = [detail for event, detail in events if event is RaceEvent.COUNTDOWN]
        assert labels == [READY_LABEL, "3...", "2...", "1...", "GO!"]
        assert events[-1] == (RaceEvent.STARTED, None)

    def test_controls_locked_during_countdown(self, race, clock, corridor_maze):
        race.start(corridor_maze)
        assert not race.start(corridor_maze)
        assert not race.reset(corridor_maze)
        assert not race.apply_user_intent(Direction.RIGHT)
        assert race.user_pos == corridor_maze.start

    def test_computer_waits_for_countdown(self, race, clock, corridor_maze):
        race.start(corridor_maze)
        clock.advance(COUNTDOWN_MS)
        assert race.computer_pos == corridor_maze.start
        clock.advance(COMPUTER_MOVE_SPEED)
        assert race.computer_pos == (1, 2)


class TestUserMoves:
    def test_bump_into_wall(self, race, clock, corridor_maze):
        _go_live(race, clock, corridor_maze)
        results = [race.apply_user_intent(Direction.RIGHT) for _ in range(3)]
        assert results == [True, True, False]
        assert race.user_pos == (1, 3)

    def test_border_is_not_enterable(self, race, clock, corridor_maze):
        _go_live(race, clock, corridor_maze)
        assert not race.apply_user_intent(Direction.UP)
        assert not race.apply_user_intent(Direction.LEFT)
        assert race.user_pos == (1, 1)

    @pytest.mark.parametrize("seed", [0, 1, 2])
    def test_move_accepted_iff_target_free(self, race, clock, seed):
        maze = Maze(seed=seed)
        _go_live(race, clock, maze)
        for r in range(1, maze.rows - 1):
            for c in range(1, maze.cols - 1):
                if not maze.is_free((r, c)) or (r, c) == maze.goal:
                    continue
                for direction in Direction:
                    race.user_pos = (r, c)
                    dr, dc = direction.value
                    target = (r + dr, c + dc)
                    if target == maze.goal:
                        continue
                    moved = race.apply_user_intent(direction)
                    assert moved == maze.is_free(target)
                    assert race.user_pos == (target if moved else (r, c))

    def test_user_wins(self, race, clock, corridor_maze, events):
        _go_live(race, clock, corridor_maze)
        for direction in CORRIDOR_MOVES:
            assert race.apply_user_intent(direction)
        assert race.state is RaceState.FINISHED
        assert race.winner is Agent.USER
        assert race.score.as_tuple() == (1, 0)
        assert events[-1] == (RaceEvent.FINISHED, Agent.USER)
        assert clock.pending == 0


class TestComputer:
    def test_computer_replays_route_and_wins(self, race, clock, corridor_maze):
        _go_live(race, clock, corridor_maze)
        moves = len(race.route) - 1
        clock.advance(COMPUTER_MOVE_SPEED * (moves - 1))
        assert race.state is RaceState.ACTIVE
        assert race.computer_pos == race.route[-2]
        clock.advance(COMPUTER_MOVE_SPEED)
        assert race.state is RaceState.FINISHED
        assert race.winner is Agent.COMPUTER
        assert race.computer_pos == corridor_maze.goal
        assert race.score.as_tuple() == (0, 1)
        assert clock.pending == 0

    def test_one_step_per_tick(self, race, clock, corridor_maze):
        _go_live(race, clock, corridor_maze)
        for i in range(1, 6):
            clock.advance(COMPUTER_MOVE_SPEED)
            assert race.computer_pos == race.route[i]
            assert race.computer_index == i + 1

    def test_user_input_does_not_move_computer(self, race, clock, corridor_maze):
        _go_live(race, clock, corridor_maze)
        race.apply_user_intent(Direction.RIGHT)
        assert race.computer_pos == corridor_maze.start


class TestFinish:
    def test_finished_race_is_frozen(self, race, clock, corridor_maze):
        _go_live(race, clock, corridor_maze)
        for direction in CORRIDOR_MOVES:
            race.apply_user_intent(direction)
        computer_pos = race.computer_pos
        assert not race.apply_user_intent(Direction.LEFT)
        clock.advance(COMPUTER_MOVE_SPEED * 50)
        assert race.state is RaceState.FINISHED
        assert race.winner is Agent.USER
        assert race.computer_pos == computer_pos
        assert race.user_pos == corridor_maze.goal

    def test_each_race_scores_exactly_once(self, race, clock, corridor_maze):
        _go_live(race, clock, corridor_maze)
        clock.run_until_idle()
        assert race.score.as_tuple() == (0, 1)

        _go_live(race, clock, corridor_maze)
        for direction in CORRIDOR_MOVES:
            race.apply_user_intent(direction)
        clock.run_until_idle()
        assert race.score.as_tuple() == (1, 1)

    def test_start_again_after_finish(self, race, clock, corridor_maze):
        _go_live(race, clock, corridor_maze)
        clock.run_until_idle()
        assert race.start(corridor_maze)
        assert race.winner is None
        assert race.computer_pos == corridor_maze.start


class TestReset:
    def test_reset_cancels_running_ticks(self, race, clock, corridor_maze):
        _go_live(race, clock, corridor_maze)
        clock.advance(COMPUTER_MOVE_SPEED * 3)
        race.apply_user_intent(Direction.RIGHT)
        assert race.reset(corridor_maze)

        assert race.state is RaceState.COUNTING_DOWN
        assert clock.pending == 1  # next countdown stage only
        assert race.user_pos == corridor_maze.start
        assert race.computer_pos == corridor_maze.start

        clock.advance(COUNTDOWN_MS)
        for i in range(1, 4):
            clock.advance(COMPUTER_MOVE_SPEED)
            assert race.computer_pos == race.route[i]
        assert clock.pending == 1

    def test_reset_from_idle_starts(self, race, corridor_maze):
        assert race.reset(corridor_maze)
        assert race.state is RaceState.COUNTING_DOWN

    def test_cancel_drops_countdown(self, race, clock, corridor_maze):
        race.start(corridor_maze)
        race.cancel()
        assert clock.pending == 0
        clock.advance(COUNTDOWN_MS * 2)
        assert race.state is RaceState.IDLE


def test_unsolvable_maze_raises(race, corridor_maze):
    corridor_maze.grid.set_cell(7, 3, Cell.WALL)
    with pytest.raises(RuntimeError):
        race.start(corridor_maze)
    assert race.state is RaceState.IDLE


def test_score_reset():
    score = Score(user=2, computer=3)
    score.record(Agent.COMPUTER)
    assert score.as_tuple() == (2, 4)
    score.reset()
    assert score.as_tuple() == (0, 0)


def test_move_interval_must_be_positive(clock):
    with pytest.raises(ValueError):
        RaceController(clock, move_interval_ms=0)
