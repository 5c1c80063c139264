"""Tests for the live timer."""

import threading
import time
from datetime import datetime, timedelta

import pytest

from tasktracker.core.errors import InvalidState, ValidationError
from tasktracker.core.timer import IDLE_SNAPSHOT, LiveTimer, TimerState
from tests.helpers import FakeClock

START = datetime(2024, 1, 1, 9, 0, 0)
INTERVAL = 0.01


class TickRecorder:
    """Collects snapshots published from the timer thread."""

    def __init__(self, wanted: int = 3) -> None:
        self.snapshots = []
        self.wanted = wanted
        self.enough = threading.Event()
        self._lock = threading.Lock()

    def __call__(self, snapshot) -> None:
        with self._lock:
            self.snapshots.append(snapshot)
            if len(self.snapshots) >= self.wanted:
                self.enough.set()

    @property
    def count(self) -> int:
        with self._lock:
            return len(self.snapshots)


@pytest.fixture
def clock():
    return FakeClock(START)


def test_new_timer_is_stopped(clock):
    """Test a fresh timer is stopped with an idle snapshot."""
    timer = LiveTimer(clock=clock, interval=INTERVAL)
    assert timer.state is TimerState.STOPPED
    assert not timer.running
    assert timer.current_snapshot() == IDLE_SNAPSHOT


@pytest.mark.parametrize("interval", [0, -1])
def test_interval_must_be_positive(interval):
    """Test non-positive tick intervals are rejected."""
    with pytest.raises(ValueError):
        LiveTimer(interval=interval)


def test_start_publishes_initial_snapshot(clock):
    """Test start() records the start instant and publishes zero."""
    timer = LiveTimer(clock=clock, interval=60)
    handle = timer.start(hourly_rate=20.0)
    try:
        assert timer.running
        assert timer.start_time == START
        assert timer.end_time is None
        snapshot = timer.current_snapshot()
        assert snapshot.elapsed_seconds == 0
        assert snapshot.earnings == 0.0
        assert snapshot.running
        assert handle.alive
    finally:
        timer.stop()


def test_ticks_publish_elapsed_and_earnings(clock):
    """Test ticks report whole elapsed seconds and provisional earnings."""
    recorder = TickRecorder(wanted=3)
    timer = LiveTimer(clock=clock, interval=INTERVAL, on_tick=recorder)
    timer.start(hourly_rate=3600.0)
    try:
        assert recorder.enough.wait(5)
    finally:
        timer.stop()

    elapsed = [s.elapsed_seconds for s in recorder.snapshots]
    assert elapsed[:3] == [1, 2, 3]
    assert [s.earnings for s in recorder.snapshots[:3]] == [1.0, 2.0, 3.0]
    assert all(s.running for s in recorder.snapshots)


def test_ticks_without_rate(clock):
    """Test earnings are None while no rate is set."""
    recorder = TickRecorder(wanted=1)
    timer = LiveTimer(clock=clock, interval=INTERVAL, on_tick=recorder)
    timer.start()
    try:
        assert recorder.enough.wait(5)
    finally:
        timer.stop()
    assert recorder.snapshots[0].earnings is None


def test_set_rate_while_running(clock):
    """Test a rate set mid-run applies to later ticks."""
    recorder = TickRecorder(wanted=1)
    timer = LiveTimer(clock=clock, interval=INTERVAL, on_tick=recorder)
    timer.start()
    timer.set_rate(7200.0)
    try:
        assert recorder.enough.wait(5)
    finally:
        timer.stop()
    assert timer.hourly_rate == 7200.0
    final = timer.current_snapshot()
    assert final.earnings == 2.0 * final.elapsed_seconds


def test_stop_returns_interval(clock):
    """Test stop() returns (start, end) with end at or after start."""
    timer = LiveTimer(clock=clock, interval=60)
    timer.start()
    start, end = timer.stop()

    assert start == START
    assert end == START + timedelta(seconds=1)
    assert timer.end_time == end
    assert timer.state is TimerState.STOPPED
    final = timer.current_snapshot()
    assert final.elapsed_seconds == 1
    assert not final.running


def test_no_ticks_after_stop(clock):
    """Test the ticker thread is gone once stop() returns."""
    recorder = TickRecorder(wanted=2)
    timer = LiveTimer(clock=clock, interval=INTERVAL, on_tick=recorder)
    handle = timer.start(hourly_rate=10.0)
    assert recorder.enough.wait(5)
    timer.stop()

    assert not handle.alive
    count = recorder.count
    time.sleep(INTERVAL * 10)
    assert recorder.count == count


def test_clock_stepping_backwards():
    """Test a backwards clock never yields an end before the start."""
    timer = LiveTimer(clock=FakeClock(START, step=timedelta(seconds=-5)), interval=60)
    timer.start(hourly_rate=10.0)
    start, end = timer.stop()
    assert end == start
    assert timer.current_snapshot().elapsed_seconds == 0


def test_double_start(clock):
    """Test starting a running timer raises InvalidState."""
    timer = LiveTimer(clock=clock, interval=INTERVAL)
    timer.start()
    try:
        with pytest.raises(InvalidState):
            timer.start()
    finally:
        timer.stop()


def test_stop_when_stopped(clock):
    """Test stopping a stopped timer raises InvalidState."""
    timer = LiveTimer(clock=clock, interval=INTERVAL)
    with pytest.raises(InvalidState):
        timer.stop()
    timer.start()
    timer.stop()
    with pytest.raises(InvalidState):
        timer.stop()


def test_restart_after_stop(clock):
    """Test a stopped timer can be started again with a fresh thread."""
    timer = LiveTimer(clock=clock, interval=INTERVAL)
    first = timer.start()
    timer.stop()
    second = timer.start()
    try:
        assert second is not first
        assert second.alive
        assert not first.alive
        assert timer.current_snapshot().elapsed_seconds == 0
    finally:
        timer.stop()


def test_negative_rate_rejected(clock):
    """Test invalid rates are rejected before starting."""
    timer = LiveTimer(clock=clock, interval=INTERVAL)
    with pytest.raises(ValidationError):
        timer.start(hourly_rate=-1.0)
    assert not timer.running
    with pytest.raises(ValidationError):
        timer.set_rate(float("inf"))


def test_ticker_thread_is_daemon(clock):
    """Test the ticker never keeps the process alive."""
    timer = LiveTimer(clock=clock, interval=INTERVAL)
    handle = timer.start()
    try:
        assert handle.thread.daemon
        assert handle.thread.name == "tasktracker-timer"
    finally:
        timer.stop()


def test_failing_tick_callback_keeps_timer_running(clock):
    """Test an exception in on_tick is logged and ticking continues."""
    calls = []
    enough = threading.Event()

    def broken(snapshot):
        calls.append(snapshot)
        if len(calls) >= 3:
            enough.set()
        raise BrokenPipeError("stdout closed")

    timer = LiveTimer(clock=clock, interval=INTERVAL, on_tick=broken)
    handle = timer.start(hourly_rate=3600.0)
    try:
        assert enough.wait(5)
        assert handle.alive
        assert timer.running
    finally:
        timer.stop()
    assert [s.elapsed_seconds for s in calls[:3]] == [1, 2, 3]
    assert not handle.alive
