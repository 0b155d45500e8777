import threading

from config import AnimationConfig
from visualization.animation import AnimationState, CancellationToken, PlaneAnimator


def test_token_wait_returns_when_cancelled() -> None:
    token = CancellationToken()
    assert not token.wait(0)
    token.cancel()
    assert token.cancelled
    assert token.wait(0)


def test_stop_when_idle_is_a_no_op() -> None:
    animator = PlaneAnimator(AnimationConfig(frame_interval_s=0.0))
    try:
        assert animator.state is AnimationState.IDLE
        assert not animator.stop()
    finally:
        animator.shutdown()


def test_runs_every_step_in_order() -> None:
    animator = PlaneAnimator(AnimationConfig(frame_interval_s=0.0))
    frames = []
    outcome = []
    try:
        assert animator.start(4, lambda i: i * 10, lambda i, frame: frames.append(frame), outcome.append)
        animator.wait(5)
        assert frames == [0, 10, 20, 30]
        assert outcome == [False]
        assert not animator.is_running
    finally:
        animator.shutdown()


def test_single_flight_and_cancel() -> None:
    animator = PlaneAnimator(AnimationConfig(frame_interval_s=0.0))
    gate = threading.Event()
    entered = threading.Event()
    frames = []
    outcome = []

    def step(position: int) -> int:
        entered.set()
        gate.wait(5)
        return position

    try:
        assert animator.start(5, step, lambda i, frame: frames.append(i), outcome.append)
        assert entered.wait(5)
        assert animator.state is AnimationState.RUNNING
        assert not animator.start(5, step)

        assert animator.stop()
        assert animator.state is AnimationState.CANCEL_REQUESTED
        assert not animator.stop()
        gate.set()
        animator.wait(5)

        # the frame in progress completes, nothing after it
        assert frames == [0]
        assert outcome == [True]
        assert animator.state is AnimationState.IDLE
    finally:
        gate.set()
        animator.shutdown()


def test_can_restart_after_finishing() -> None:
    animator = PlaneAnimator(AnimationConfig(frame_interval_s=0.0))
    try:
        assert animator.start(1, lambda i: i)
        animator.wait(5)
        assert animator.start(2, lambda i: i)
        animator.wait(5)
    finally:
        animator.shutdown()


def test_failing_step_stops_and_reports() -> None:
    animator = PlaneAnimator(AnimationConfig(frame_interval_s=0.0))
    frames = []
    errors = []
    outcome = []

    def step(position: int) -> int:
        if position == 1:
            raise RuntimeError("render failed")
        return position

    try:
        assert animator.start(3, step, lambda i, frame: frames.append(i), outcome.append, errors.append)
        animator.wait(5)
        assert frames == [0]
        assert [str(e) for e in errors] == ["render failed"]
        assert outcome == [True]
        assert animator.start(1, lambda i: i)
        animator.wait(5)
    finally:
        animator.shutdown()
