"""Tests for VisualizerSession: the glue the web layer talks to."""

from concurrent.futures import Future

import pytest

from algorithms.errors import InvalidInput, PlaybackActive, UnsupportedOperation
from engine import SchedulerState, VisualizerSession
from engine.recorder import compile_run


class HeldRecorder:
    """Recorder stand-in whose compiles finish only when the test says so."""

    def __init__(self):
        self.pending = []

    def submit(self, algo, values):
        future = Future()
        self.pending.append((future, algo, tuple(values)))
        return future

    def finish(self, index: int = -1) -> None:
        future, algo, values = self.pending[index]
        future.set_result(compile_run(algo, values))

    def shutdown(self, wait=True):
        pass


@pytest.fixture
def held():
    return HeldRecorder()


@pytest.fixture
def held_session(timers, held):
    viz = VisualizerSession(size=10, timer_factory=timers, recorder=held, seed=1)
    viz.load_custom_array("5,3,8,1")
    yield viz
    viz.close()


class TestArraySource:
    """Tests for random and custom arrays."""

    def test_initial_array(self, session):
        assert len(session.sink) == 10
        assert session.status_text() == "Ready"

    def test_generate_random(self, session):
        session.generate_random(25, seed=4)

        assert len(session.sink) == 25
        assert session.status_text() == "Randomized"

    @pytest.mark.parametrize("size", [9, 301])
    def test_generate_random_size_bounds(self, session, size):
        with pytest.raises(InvalidInput):
            session.generate_random(size)

    def test_custom_array_status(self, session):
        assert session.load_custom_array("50,20,80,10") == 4
        assert session.status_text() == "Custom array loaded (4 elements)"

    def test_bad_custom_array_status(self, session):
        before = session.sink.array_copy()

        with pytest.raises(InvalidInput):
            session.load_custom_array("1,-2")

        assert session.status_text() == "Error parsing array."
        assert session.sink.array_copy() == before


class TestRuns:
    """Tests for starting, pausing and resetting a run."""

    def test_status_while_compiling(self, held_session):
        held_session.start_sorting("bubble")

        assert held_session.is_compiling()
        assert held_session.status_text() == "Generating operations..."

    def test_compile_hands_log_to_scheduler(self, held_session, held, timers):
        held_session.start_sorting("bubble")
        held.finish()

        assert not held_session.is_compiling()
        assert held_session.scheduler.state == SchedulerState.PLAYING
        assert held_session.status_text() == "Playing (Bubble Sort)"
        assert held_session.current_run.stats.total == 13

    def test_full_run(self, held_session, held, timers):
        held_session.start_sorting("quick")
        held.finish()
        timers.last.fire(1000)

        assert held_session.sink.array_copy() == [1, 3, 5, 8]
        assert held_session.status_text().startswith("Completed (")
        assert held_session.sink.marked == {0, 1, 2, 3}

    def test_second_start_while_compiling_is_ignored(self, held_session, held):
        assert held_session.start_sorting("bubble") is not None
        assert held_session.start_sorting("heap") is None
        assert len(held.pending) == 1

    def test_second_start_while_playing_is_ignored(self, held_session, held):
        held_session.start_sorting("bubble")
        held.finish()

        assert held_session.start_sorting("bubble") is None

    def test_array_locked_while_playing(self, held_session, held):
        held_session.start_sorting("bubble")
        held.finish()

        with pytest.raises(PlaybackActive):
            held_session.generate_random(20)
        with pytest.raises(PlaybackActive):
            held_session.load_custom_array("1,2")

    def test_new_array_after_completion(self, held_session, held, timers):
        held_session.start_sorting("bubble")
        held.finish()
        timers.last.fire(100)

        held_session.generate_random(12, seed=2)
        assert held_session.status_text() == "Randomized"
        assert held_session.scheduler.state == SchedulerState.IDLE

    def test_unknown_algorithm_runs_bubble(self, held_session, held):
        held_session.start_sorting("mystery")

        assert held.pending[0][1] == "bubble"
        assert held_session.algo_key == "bubble"

    def test_radix_negative_rejected_up_front(self, held_session, held):
        held_session.sink._replace([3, -1, 2])

        with pytest.raises(UnsupportedOperation):
            held_session.start_sorting("radix")

        assert held.pending == []
        assert not held_session.is_busy()

    def test_pause_and_step(self, held_session, held, timers):
        held_session.start_sorting("bubble")
        held.finish()
        timers.last.fire(1)

        assert held_session.toggle_pause()
        assert held_session.status_text() == "Paused"
        assert held_session.step()
        assert held_session.scheduler.cursor == 2
        assert held_session.sink.array_copy() == [3, 5, 8, 1]

    def test_step_rejected_while_playing(self, held_session, held):
        held_session.start_sorting("bubble")
        held.finish()

        assert held_session.step() is False

    def test_reset_restores_original(self, held_session, held, timers):
        held_session.start_sorting("bubble")
        held.finish()
        timers.last.fire(5)
        held_session.reset()

        assert held_session.sink.array_copy() == [5, 3, 8, 1]
        assert held_session.sink.marked == set()
        assert held_session.scheduler.state == SchedulerState.IDLE
        assert held_session.status_text() == "Reset"
        assert not timers.last.is_running

    def test_compile_landing_after_reset_is_discarded(self, held_session, held, timers):
        held_session.start_sorting("bubble")
        held_session.reset()
        held.finish()

        assert held_session.scheduler.state == SchedulerState.IDLE
        assert timers.created == []
        assert held_session.sink.array_copy() == [5, 3, 8, 1]

    def test_real_recorder(self, session, timers, wait_for_compile):
        session.load_custom_array("4,1,3,2")
        session.start_sorting("merge")
        wait_for_compile(session)
        timers.last.fire(500)

        assert session.sink.array_copy() == [1, 2, 3, 4]
        assert session.scheduler.is_finished


class TestSettings:
    """Tests for algorithm selection, speed and comparison."""

    def test_select_algorithm(self, session):
        assert session.select_algorithm("Heap Sort") == "heap"
        assert session.select_algorithm("nope") == "bubble"

    def test_set_speed(self, session):
        assert session.set_speed(1) == 2
        assert session.delay_ms == 2
        assert session.set_delay(999) == 200

    def test_set_preset(self, session):
        assert session.set_preset("fast") == 20
        assert session.delay_ms == 20

    def test_delay_carries_into_next_run(self, held_session, held, timers):
        held_session.set_delay(15)
        held_session.start_sorting("bubble")
        held.finish()

        assert timers.last.delay_ms == 15

    def test_compare(self, session):
        session.load_custom_array("9,8,7,6,5,4,3,2,1")
        result = session.compare("bubble", "merge")

        assert result.left.algo_key == "bubble"
        assert result.right.algo_key == "merge"
        assert result.winner_compares == "Merge Sort"

    def test_state_dict(self, held_session):
        state = held_session.state()

        assert state["algo_key"] == "bubble"
        assert state["compiling"] is False
        assert state["playback"]["state"] == "idle"
        assert state["sink"]["array"] == [5, 3, 8, 1]
        assert state["stats"] is None
