"""Live timer publishing elapsed time and provisional earnings.

A running timer owns exactly one background thread. stop() signals the
thread and joins it before returning, so no tick is published after stop()
returns and a new start() never overlaps a previous ticker.
"""

import math
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from loguru import logger

from tasktracker.core.calculator import earnings_for
from tasktracker.core.clock import Clock, local_now
from tasktracker.core.errors import InvalidState
from tasktracker.core.timefmt import validate_rate

DEFAULT_TICK_INTERVAL = 1.0


class TimerState(str, Enum):
    STOPPED = "stopped"
    RUNNING = "running"


@dataclass(frozen=True)
class TimerSnapshot:
    """Latest published timer value.

    Attributes:
        elapsed_seconds: Whole seconds since start
        earnings: Provisional earnings, None while no rate is set
        running: Whether the timer was running when this was published
    """

    elapsed_seconds: int
    earnings: float | None
    running: bool


IDLE_SNAPSHOT = TimerSnapshot(elapsed_seconds=0, earnings=None, running=False)


class TimerHandle:
    """Background ticker of one timer run, with its cancellation event."""

    def __init__(self, target: Callable[[threading.Event], None]) -> None:
        self.cancelled = threading.Event()
        self.thread = threading.Thread(
            target=target, args=(self.cancelled,), name="tasktracker-timer", daemon=True
        )

    def start(self) -> None:
        self.thread.start()

    def cancel(self) -> None:
        """Signal the ticker and wait until its thread has exited."""
        self.cancelled.set()
        if self.thread is not threading.current_thread():
            self.thread.join()

    @property
    def alive(self) -> bool:
        return self.thread.is_alive()


class LiveTimer:
    """Start/stop timer with a periodic background publisher.

    Args:
        clock: Returns the current instant (second precision).
        interval: Seconds between published ticks.
        on_tick: Optional callback invoked from the timer thread with each
            published snapshot.
    """

    def __init__(
        self,
        clock: Clock = local_now,
        interval: float = DEFAULT_TICK_INTERVAL,
        on_tick: Callable[[TimerSnapshot], None] | None = None,
    ) -> None:
        if interval <= 0:
            raise ValueError("Tick interval must be positive")
        self.clock = clock
        self.interval = interval
        self.on_tick = on_tick
        self.state = TimerState.STOPPED
        self.start_time: datetime | None = None
        self.end_time: datetime | None = None
        self._rate: float | None = None
        self._latest = IDLE_SNAPSHOT
        self._handle: TimerHandle | None = None
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self.state is TimerState.RUNNING

    @property
    def hourly_rate(self) -> float | None:
        return self._rate

    def start(self, hourly_rate: float | None = None) -> TimerHandle:
        """Start timing now and begin publishing ticks.

        Raises:
            InvalidState: If the timer is already running.
        """
        if hourly_rate is not None:
            hourly_rate = validate_rate(hourly_rate)
        with self._lock:
            if self.state is TimerState.RUNNING:
                raise InvalidState("Timer is already running")
            if self._handle is not None and self._handle.alive:
                raise InvalidState("Previous timer thread has not exited")
            self.start_time = self.clock()
            self.end_time = None
            self._rate = hourly_rate
            self.state = TimerState.RUNNING
            self._latest = self._snapshot(self.start_time)
            handle = TimerHandle(self._run)
            self._handle = handle
        handle.start()
        logger.debug(f"Timer started at {self.start_time}")
        return handle

    def set_rate(self, hourly_rate: float | None) -> None:
        """Change the rate used for provisional earnings."""
        if hourly_rate is not None:
            hourly_rate = validate_rate(hourly_rate)
        with self._lock:
            self._rate = hourly_rate

    def stop(self) -> tuple[datetime, datetime]:
        """Stop timing and return the (start, end) instants.

        The ticker thread is joined before this returns.

        Raises:
            InvalidState: If the timer is not running.
        """
        with self._lock:
            if self.state is not TimerState.RUNNING:
                raise InvalidState("Timer is not running")
            end = self.clock()
            # Clocks may step backwards; never report a negative interval.
            self.end_time = max(end, self.start_time)
            self.state = TimerState.STOPPED
            self._latest = self._snapshot(self.end_time, running=False)
            handle = self._handle
        handle.cancel()
        logger.debug(f"Timer stopped at {self.end_time}")
        return self.start_time, self.end_time

    def current_snapshot(self) -> TimerSnapshot:
        """Return the latest published snapshot."""
        with self._lock:
            return self._latest

    def _snapshot(self, now: datetime, running: bool = True) -> TimerSnapshot:
        elapsed = max(0, math.floor((now - self.start_time).total_seconds()))
        earnings = earnings_for(elapsed, self._rate) if self._rate is not None else None
        return TimerSnapshot(elapsed_seconds=elapsed, earnings=earnings, running=running)

    def _run(self, cancelled: threading.Event) -> None:
        while not cancelled.wait(self.interval):
            with self._lock:
                # stop() flips the state under the lock before signalling.
                if cancelled.is_set() or self.state is not TimerState.RUNNING:
                    return
                snapshot = self._snapshot(self.clock())
                self._latest = snapshot
            if self.on_tick is not None:
                try:
                    self.on_tick(snapshot)
                except Exception:
                    # A failing display must not stop the timer.
                    logger.exception("Timer tick callback failed")
