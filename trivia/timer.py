"""
Countdown timer for trivia questions.

The countdown runs as an asyncio task next to the turn engine. All mutable
timer fields are guarded by a single lock that is never held while the
countdown sleeps.
"""
import asyncio
import logging
import threading
import time
from enum import Enum
from typing import Callable, Optional

from .errors import TimerError

# Set up logger for timer operations
logger = logging.getLogger(__name__)


class TimerState(Enum):
    """Lifecycle states of a countdown timer."""
    IDLE = "idle"
    RUNNING = "running"
    EXPIRED = "expired"
    STOPPED = "stopped"


class TimerLifecycleLogger:
    """Structured logging for timer lifecycle events."""

    @staticmethod
    def log_timer_start(timer_id: str, duration: int) -> None:
        """Log timer countdown start."""
        logger.info(
            f"Timer lifecycle: COUNTDOWN_START - Timer {timer_id}, Duration {duration}s",
            extra={
                'event_type': 'timer_countdown_start',
                'timer_id': timer_id,
                'duration': duration,
                'timestamp': time.time()
            }
        )

    @staticmethod
    def log_timer_update(timer_id: str, remaining_time: int, total_duration: int) -> None:
        """Log timer update events (throttled to avoid spam)."""
        if remaining_time % 10 == 0 or remaining_time <= 5:
            progress_percent = ((total_duration - remaining_time) / total_duration) * 100
            logger.debug(
                f"Timer lifecycle: UPDATE - Timer {timer_id}, Remaining {remaining_time}s ({progress_percent:.1f}% complete)",
                extra={
                    'event_type': 'timer_update',
                    'timer_id': timer_id,
                    'remaining_time': remaining_time,
                    'total_duration': total_duration,
                    'progress_percent': progress_percent,
                    'timestamp': time.time()
                }
            )

    @staticmethod
    def log_timer_completion(timer_id: str, completion_type: str, total_duration: int) -> None:
        """Log timer completion (natural expiry or stop)."""
        logger.info(
            f"Timer lifecycle: COMPLETED - Timer {timer_id}, Type {completion_type}, Duration {total_duration}s",
            extra={
                'event_type': 'timer_completed',
                'timer_id': timer_id,
                'completion_type': completion_type,
                'total_duration': total_duration,
                'timestamp': time.time()
            }
        )

    @staticmethod
    def log_timer_state_transition(timer_id: str, from_state: str, to_state: str, reason: str = None) -> None:
        """Log timer state transitions."""
        logger.debug(
            f"Timer lifecycle: STATE_TRANSITION - Timer {timer_id}, {from_state} -> {to_state}" +
            (f" ({reason})" if reason else ""),
            extra={
                'event_type': 'timer_state_transition',
                'timer_id': timer_id,
                'from_state': from_state,
                'to_state': to_state,
                'reason': reason,
                'timestamp': time.time()
            }
        )

    @staticmethod
    def log_timer_error(timer_id: str, error_type: str, error_message: str, operation: str) -> None:
        """Log timer-related errors with context."""
        logger.error(
            f"Timer lifecycle: ERROR - Timer {timer_id}, Operation {operation}, Type {error_type}: {error_message}",
            extra={
                'event_type': 'timer_error',
                'timer_id': timer_id,
                'error_type': error_type,
                'error_message': error_message,
                'operation': operation,
                'timestamp': time.time()
            }
        )


class CountdownTimer:
    """Counts down whole seconds in the background until stopped or expired."""

    def __init__(
        self,
        seconds: int,
        tick: float = 1.0,
        on_tick: Optional[Callable[[int], None]] = None,
    ):
        """
        Initialize the timer in the idle state.

        Args:
            seconds: Countdown duration in time units
            tick: Length of one time unit in seconds
            on_tick: Called with the remaining time after every decrement

        Raises:
            ValueError: If seconds or tick is not positive
        """
        if seconds <= 0:
            raise ValueError("Timer duration must be positive")
        if tick <= 0:
            raise ValueError("Timer tick must be positive")

        self._lock = threading.Lock()
        self._seconds = seconds
        self._remaining = seconds
        self._running = False
        self._expired = False
        self._state = TimerState.IDLE
        self._tick = tick
        self._on_tick = on_tick
        self._task: Optional[asyncio.Task] = None
        self._timer_id = hex(id(self))

    @property
    def seconds(self) -> int:
        with self._lock:
            return self._seconds

    @property
    def state(self) -> TimerState:
        with self._lock:
            return self._state

    def get_remaining(self) -> int:
        """Get remaining time in time units."""
        with self._lock:
            return self._remaining

    def is_expired(self) -> bool:
        with self._lock:
            return self._expired

    def is_running(self) -> bool:
        with self._lock:
            return self._running

    def _transition(self, to_state: TimerState, reason: str) -> None:
        # Caller holds the lock
        TimerLifecycleLogger.log_timer_state_transition(
            self._timer_id, self._state.value, to_state.value, reason
        )
        self._state = to_state

    def start(self) -> None:
        """
        Start the countdown on the running event loop.

        Raises:
            TimerError: If the timer is already running
        """
        with self._lock:
            if self._running:
                raise TimerError("Timer is already running")
            self._running = True
            self._transition(TimerState.RUNNING, "start requested")
            duration = self._remaining

        try:
            self._task = asyncio.get_running_loop().create_task(self._countdown())
        except RuntimeError as e:
            with self._lock:
                self._running = False
                self._transition(TimerState.IDLE, "no running event loop")
            TimerLifecycleLogger.log_timer_error(self._timer_id, "start_error", str(e), "start")
            raise TimerError(f"Cannot start timer: {e}") from e

        TimerLifecycleLogger.log_timer_start(self._timer_id, duration)

    async def _countdown(self) -> None:
        while True:
            await asyncio.sleep(self._tick)

            with self._lock:
                if not self._running:
                    return
                self._remaining -= 1
                remaining = self._remaining
                total = self._seconds
                if remaining <= 0:
                    self._remaining = 0
                    self._expired = True
                    self._running = False
                    self._transition(TimerState.EXPIRED, "countdown reached zero")

            TimerLifecycleLogger.log_timer_update(self._timer_id, remaining, total)
            if self._on_tick is not None:
                self._on_tick(max(remaining, 0))

            if remaining <= 0:
                TimerLifecycleLogger.log_timer_completion(self._timer_id, "natural_expiry", total)
                return

    async def stop(self) -> None:
        """
        Stop the countdown and wait for it to finish.

        Safe to call when the timer is idle, stopped or already expired.
        """
        with self._lock:
            was_running = self._running
            self._running = False
            if was_running:
                self._transition(TimerState.STOPPED, "stop requested")
            total = self._seconds

        task = self._task
        if task is not None and not task.done():
            # Wake the countdown from its sleep instead of waiting out the tick
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
        self._task = None

        if was_running:
            TimerLifecycleLogger.log_timer_completion(self._timer_id, "stopped", total)

    async def reset(self, seconds: int) -> None:
        """
        Stop the timer if needed and reinitialize it for reuse.

        Raises:
            ValueError: If seconds is not positive
        """
        if seconds <= 0:
            raise ValueError("Timer duration must be positive")

        await self.stop()

        with self._lock:
            self._seconds = seconds
            self._remaining = seconds
            self._expired = False
            self._transition(TimerState.IDLE, "reset")

    async def wait(self) -> bool:
        """
        Wait until the current countdown finishes without cancelling it.

        Returns:
            True if the timer expired, False if it was stopped or never started
        """
        task = self._task
        if task is not None:
            await asyncio.gather(asyncio.shield(task), return_exceptions=True)
        return self.is_expired()
