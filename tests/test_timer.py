"""
Unit tests for the countdown timer and its lifecycle logging.
"""
import asyncio
import unittest
from unittest.mock import patch

from trivia.errors import TimerError
from trivia.timer import CountdownTimer, TimerLifecycleLogger, TimerState
from tests.test_fixtures import AsyncTestHelpers, async_test

TICK = 0.01


class TestCountdownTimerInit(unittest.TestCase):
    """Test cases for timer construction."""

    def test_initial_state(self):
        timer = CountdownTimer(10)
        self.assertEqual(timer.seconds, 10)
        self.assertEqual(timer.get_remaining(), 10)
        self.assertEqual(timer.state, TimerState.IDLE)
        self.assertFalse(timer.is_running())
        self.assertFalse(timer.is_expired())

    def test_rejects_non_positive_duration(self):
        with self.assertRaises(ValueError):
            CountdownTimer(0)
        with self.assertRaises(ValueError):
            CountdownTimer(-5)

    def test_rejects_non_positive_tick(self):
        with self.assertRaises(ValueError):
            CountdownTimer(5, tick=0)

    def test_start_without_event_loop(self):
        timer = CountdownTimer(5)
        with self.assertRaises(TimerError):
            timer.start()
        self.assertFalse(timer.is_running())
        self.assertEqual(timer.state, TimerState.IDLE)


class TestCountdownTimer(unittest.TestCase):
    """Test cases for the running countdown."""

    @async_test
    async def test_expires(self):
        timer = CountdownTimer(3, tick=TICK)
        timer.start()
        self.assertTrue(timer.is_running())

        expired = await AsyncTestHelpers.run_with_timeout(timer.wait())

        self.assertTrue(expired)
        self.assertTrue(timer.is_expired())
        self.assertFalse(timer.is_running())
        self.assertEqual(timer.get_remaining(), 0)
        self.assertEqual(timer.state, TimerState.EXPIRED)

    @async_test
    async def test_on_tick_receives_each_remaining_value(self):
        ticks = []
        timer = CountdownTimer(3, tick=TICK, on_tick=ticks.append)
        timer.start()
        await AsyncTestHelpers.run_with_timeout(timer.wait())
        self.assertEqual(ticks, [2, 1, 0])

    @async_test
    async def test_start_twice_rejected(self):
        timer = CountdownTimer(5, tick=TICK)
        timer.start()
        try:
            with self.assertRaises(TimerError):
                timer.start()
        finally:
            await timer.stop()

    @async_test
    async def test_stop_before_expiry(self):
        timer = CountdownTimer(100, tick=TICK)
        timer.start()
        await asyncio.sleep(TICK * 3)
        await timer.stop()

        remaining = timer.get_remaining()
        self.assertFalse(timer.is_running())
        self.assertFalse(timer.is_expired())
        self.assertEqual(timer.state, TimerState.STOPPED)
        self.assertGreater(remaining, 0)
        self.assertLess(remaining, 100)

        # No further decrements after stop
        await asyncio.sleep(TICK * 3)
        self.assertEqual(timer.get_remaining(), remaining)

    @async_test
    async def test_stop_is_idempotent(self):
        timer = CountdownTimer(5, tick=TICK)
        await timer.stop()
        timer.start()
        await timer.stop()
        await timer.stop()
        self.assertFalse(timer.is_running())

    @async_test
    async def test_stop_after_expiry_keeps_expired(self):
        timer = CountdownTimer(1, tick=TICK)
        timer.start()
        await timer.wait()
        await timer.stop()
        self.assertTrue(timer.is_expired())
        self.assertEqual(timer.state, TimerState.EXPIRED)

    @async_test
    async def test_wait_returns_false_when_stopped(self):
        timer = CountdownTimer(100, tick=TICK)
        timer.start()
        waiter = asyncio.ensure_future(timer.wait())
        await asyncio.sleep(TICK)
        await timer.stop()
        self.assertFalse(await AsyncTestHelpers.run_with_timeout(waiter))

    @async_test
    async def test_cancelled_wait_does_not_stop_countdown(self):
        timer = CountdownTimer(3, tick=TICK)
        timer.start()
        waiter = asyncio.ensure_future(timer.wait())
        await asyncio.sleep(0)
        waiter.cancel()
        await asyncio.gather(waiter, return_exceptions=True)

        self.assertTrue(await AsyncTestHelpers.run_with_timeout(timer.wait()))

    @async_test
    async def test_wait_without_start(self):
        timer = CountdownTimer(5)
        self.assertFalse(await timer.wait())

    @async_test
    async def test_reset_allows_reuse(self):
        timer = CountdownTimer(1, tick=TICK)
        timer.start()
        await timer.wait()
        self.assertTrue(timer.is_expired())

        await timer.reset(2)
        self.assertEqual(timer.seconds, 2)
        self.assertEqual(timer.get_remaining(), 2)
        self.assertFalse(timer.is_expired())
        self.assertEqual(timer.state, TimerState.IDLE)

        timer.start()
        self.assertTrue(await AsyncTestHelpers.run_with_timeout(timer.wait()))

    @async_test
    async def test_reset_running_timer(self):
        timer = CountdownTimer(100, tick=TICK)
        timer.start()
        await timer.reset(10)
        self.assertFalse(timer.is_running())
        self.assertEqual(timer.get_remaining(), 10)

    @async_test
    async def test_reset_rejects_non_positive(self):
        timer = CountdownTimer(5)
        with self.assertRaises(ValueError):
            await timer.reset(0)


class TestTimerLifecycleLogger(unittest.TestCase):
    """Test cases for structured timer logging."""

    def test_start_logged_with_event_type(self):
        with patch('trivia.timer.logger') as mock_logger:
            TimerLifecycleLogger.log_timer_start("t1", 30)
        mock_logger.info.assert_called_once()
        extra = mock_logger.info.call_args[1]['extra']
        self.assertEqual(extra['event_type'], 'timer_countdown_start')
        self.assertEqual(extra['duration'], 30)

    def test_updates_are_throttled(self):
        with patch('trivia.timer.logger') as mock_logger:
            TimerLifecycleLogger.log_timer_update("t1", 17, 30)
            mock_logger.debug.assert_not_called()
            TimerLifecycleLogger.log_timer_update("t1", 20, 30)
            TimerLifecycleLogger.log_timer_update("t1", 3, 30)
        self.assertEqual(mock_logger.debug.call_count, 2)

    def test_error_logged(self):
        with patch('trivia.timer.logger') as mock_logger:
            TimerLifecycleLogger.log_timer_error("t1", "start_error", "boom", "start")
        extra = mock_logger.error.call_args[1]['extra']
        self.assertEqual(extra['operation'], 'start')
        self.assertEqual(extra['error_message'], 'boom')


if __name__ == '__main__':
    unittest.main()
