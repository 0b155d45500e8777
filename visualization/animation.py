"""
Plane Animation

Steps one fixed axis of a plane selection through all of its positions on
a background thread, handing a freshly rendered raster to a callback after
every step.
"""

import concurrent.futures
import logging
import threading
from enum import Enum
from typing import Any, Callable, Optional

from config import AnimationConfig


class AnimationState(Enum):
    """Lifecycle of a viewer's animation."""
    IDLE = "idle"
    RUNNING = "running"
    CANCEL_REQUESTED = "cancel_requested"


class CancellationToken:
    """Cooperative cancellation flag checked at frame boundaries."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float) -> bool:
        """Sleep up to ``timeout`` seconds; returns True if cancelled meanwhile."""
        return self._event.wait(timeout)


class PlaneAnimator:
    """
    Single-flight background animation for one viewer.

    The step callable does the actual work for a position (set it and
    render, under the viewer's lock) and returns the frame; the animator
    only sequences steps, paces them and handles cancellation.

    Example:
        animator = PlaneAnimator()
        animator.start(count=20, step=viewer_step, on_frame=show)
        ...
        animator.stop()
    """

    def __init__(self, config: Optional[AnimationConfig] = None):
        self._config = config or AnimationConfig()
        self._executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="plane-animator"
        )
        self._lock = threading.Lock()
        self._state = AnimationState.IDLE
        self._token: Optional[CancellationToken] = None
        self._future: Optional[concurrent.futures.Future] = None

    @property
    def state(self) -> AnimationState:
        with self._lock:
            return self._state

    @property
    def is_running(self) -> bool:
        return self.state is not AnimationState.IDLE

    def start(
        self,
        count: int,
        step: Callable[[int], Any],
        on_frame: Optional[Callable[[int, Any], None]] = None,
        on_finished: Optional[Callable[[bool], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None
    ) -> bool:
        """
        Run ``step(0) ... step(count - 1)`` in the background.

        Args:
            count: Number of positions to visit
            step: Called with each position; its result is the frame
            on_frame: Receives (position, frame) after each step
            on_finished: Receives True if the run stopped early (cancelled or failed)
            on_error: Receives the exception if a step raised

        Returns:
            False if an animation is already running (nothing started)
        """
        with self._lock:
            if self._state is not AnimationState.IDLE:
                logging.debug("Animation: already running, start ignored")
                return False
            self._state = AnimationState.RUNNING
            self._token = CancellationToken()
            self._future = self._executor.submit(
                self._run, count, step, on_frame, on_finished, on_error, self._token
            )

        logging.info(f"Animation: started over {count} position(s)")
        return True

    def stop(self) -> bool:
        """
        Request cancellation; the current frame is allowed to finish.

        Returns:
            False if nothing was running
        """
        with self._lock:
            if self._state is not AnimationState.RUNNING:
                return False
            self._state = AnimationState.CANCEL_REQUESTED
            self._token.cancel()
        logging.info("Animation: cancel requested")
        return True

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until the current run (if any) has finished."""
        future = self._future
        if future is not None:
            future.result(timeout=timeout)

    def shutdown(self) -> None:
        """Cancel any run and release the worker thread."""
        self.stop()
        self._executor.shutdown(wait=True)

    def _run(
        self,
        count: int,
        step: Callable[[int], Any],
        on_frame: Optional[Callable[[int, Any], None]],
        on_finished: Optional[Callable[[bool], None]],
        on_error: Optional[Callable[[Exception], None]],
        token: CancellationToken
    ) -> None:
        interval = self._config.frame_interval_s
        stopped = False
        try:
            for position in range(count):
                if token.cancelled:
                    stopped = True
                    break
                frame = step(position)
                if on_frame is not None:
                    on_frame(position, frame)
                if position < count - 1 and token.wait(interval):
                    stopped = True
                    break
        except Exception as e:
            import traceback
            logging.error(f"Animation error: {e}\n{traceback.format_exc()}")
            stopped = True
            if on_error is not None:
                on_error(e)
        finally:
            with self._lock:
                self._state = AnimationState.IDLE
                self._token = None
            logging.info(f"Animation: {'stopped' if stopped else 'finished'}")
            if on_finished is not None:
                on_finished(stopped)
