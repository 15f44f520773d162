import pytest

from graph import InvalidSourceError, UnknownAlgorithmError
from engine import Stepper, StepperState, SPEED_PRESETS
from engine.stepper import MIN_INTERVAL


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def stepper(simple, clock):
    s = Stepper(clock=clock)
    s.initialize(simple, "A", "classic")
    return s


def test_initialize_loads_only_the_first_step(stepper):
    assert stepper.state is StepperState.PAUSED
    assert stepper.current_idx == 0
    assert stepper.total_steps_fetched == 1
    assert stepper.current_step.kind == "init"
    assert not stepper.is_exhausted


def test_step_forward_pulls_lazily(stepper):
    assert stepper.step_forward()
    assert stepper.total_steps_fetched == 2
    assert stepper.current_step.kind == "extract-min"


def test_step_backward_reuses_cache(stepper):
    stepper.step_forward()
    stepper.step_forward()
    assert stepper.step_backward()
    assert stepper.current_idx == 1
    assert stepper.total_steps_fetched == 3

    # forward again replays the cached step instead of pulling
    stepper.step_forward()
    assert stepper.total_steps_fetched == 3
    assert stepper.current_step.kind == "examine-edge"


def test_step_backward_at_start_is_refused(stepper):
    assert not stepper.step_backward()
    assert stepper.current_idx == 0


def test_go_to_only_reaches_cached_steps(stepper):
    stepper.step_forward()
    stepper.step_forward()
    assert stepper.go_to(1)
    assert stepper.current_idx == 1
    assert not stepper.go_to(10)
    assert not stepper.go_to(-1)
    assert stepper.total_steps_fetched == 3


def test_run_to_completion_lands_on_done(stepper):
    final = stepper.run_to_completion()
    assert final.is_final
    assert stepper.is_complete
    assert stepper.is_exhausted
    assert stepper.is_finished
    assert not stepper.step_forward()

    stepper.rewind()
    assert stepper.current_idx == 0
    assert stepper.state is StepperState.PAUSED


def test_reset_restarts_with_same_inputs(stepper):
    stepper.run_to_completion()
    first = stepper.reset()
    assert first.kind == "init"
    assert stepper.total_steps_fetched == 1
    assert stepper.state is StepperState.PAUSED
    assert stepper.source == "A"


def test_reset_without_a_run_goes_idle():
    s = Stepper()
    assert s.reset() is None
    assert s.state is StepperState.IDLE


def test_tick_waits_for_interval(stepper, clock):
    stepper.play()
    assert stepper.is_playing

    clock.now += stepper.interval / 2
    assert not stepper.tick()

    clock.now += stepper.interval
    assert stepper.tick()
    assert stepper.current_idx == 1


def test_tick_does_nothing_when_paused(stepper, clock):
    clock.now += 10
    assert not stepper.tick()
    assert stepper.current_idx == 0


def test_playback_stops_on_done(stepper, clock):
    stepper.set_speed("turbo")
    stepper.play()
    for _ in range(100):
        clock.now += 1.0
        stepper.tick()
        if stepper.is_finished:
            break
    assert stepper.is_finished
    assert stepper.is_complete
    assert not stepper.tick()

    # finished runs don't start playing again
    stepper.play()
    assert not stepper.is_playing


def test_toggle_play(stepper):
    stepper.toggle_play()
    assert stepper.state is StepperState.PLAYING
    stepper.toggle_play()
    assert stepper.state is StepperState.PAUSED


def test_speed_and_interval(stepper):
    stepper.set_speed("slow")
    assert stepper.interval == SPEED_PRESETS["slow"]
    stepper.set_speed("warp")
    assert stepper.interval == SPEED_PRESETS["medium"]
    stepper.set_interval(0)
    assert stepper.interval == MIN_INTERVAL


def test_on_step_callback_sees_every_move(simple):
    seen = []
    s = Stepper(on_step=lambda step: seen.append(step.step_number))
    s.initialize(simple, "A", "pivot")
    s.step_forward()
    s.step_backward()
    assert seen == [0, 1, 0]


def test_bad_inputs_leave_stepper_untouched(simple):
    s = Stepper()
    with pytest.raises(UnknownAlgorithmError):
        s.initialize(simple, "A", "bogus")
    with pytest.raises(InvalidSourceError):
        s.initialize(simple, "Q", "classic")
    assert s.state is StepperState.IDLE
    assert s.steps == []
