"""Externally driven countdown for a single vesting purchase.

The ticker owns a background task, not vesting state: every tick reads the
clock function and recomputes the VestingClock from the immutable
(start_time, duration) pair. It stops on its own once the schedule is
COMPLETE, so finished purchases do not keep timers alive.
"""

import asyncio
import time
from collections.abc import Callable

from fxfsale.exceptions import VestingMisconfiguredError
from fxfsale.logging import get_logger
from fxfsale.models import VestingClock
from fxfsale.vesting.schedule import compute_clock

logger = get_logger(__name__)


class CountdownTicker:
    """Calls ``on_tick`` with a fresh VestingClock every ``interval`` seconds.

    Args:
        start_time: Purchase start, Unix seconds.
        duration: Vesting duration in seconds.
        on_tick: Receives each computed VestingClock.
        interval: Seconds between ticks.
        clock: Returns the current Unix time. Injected for tests.

    Raises:
        VestingMisconfiguredError: ``duration`` is zero or negative.
    """

    def __init__(
        self,
        start_time: int,
        duration: int,
        on_tick: Callable[[VestingClock], None],
        interval: float = 1.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if duration <= 0:
            raise VestingMisconfiguredError(
                f"vesting duration must be positive, got {duration}"
            )
        self._start_time = start_time
        self._duration = duration
        self._on_tick = on_tick
        self._interval = interval
        self._clock = clock
        self._running = False
        self._task: asyncio.Task | None = None  # type: ignore[type-arg]

    @property
    def is_running(self) -> bool:
        return self._running

    def tick(self) -> VestingClock:
        """Compute the clock once, deliver it, and return it."""
        now = int(self._clock())
        vesting_clock = compute_clock(now, self._start_time, self._duration)
        try:
            self._on_tick(vesting_clock)
        except Exception:
            logger.warning(
                "countdown_callback_error",
                start_time=self._start_time,
                exc_info=True,
            )
        return vesting_clock

    async def start(self) -> None:
        """Begin ticking in the background."""
        if self._running:
            logger.warning("countdown_already_running", start_time=self._start_time)
            return
        self._running = True
        self._task = asyncio.create_task(self._tick_loop())
        logger.debug(
            "countdown_started",
            start_time=self._start_time,
            interval=self._interval,
        )

    async def stop(self) -> None:
        """Stop the ticker and wait for its task to finish."""
        self._running = False
        if self._task is not None:
            if self._task is not asyncio.current_task():
                self._task.cancel()
                try:
                    await self._task
                except asyncio.CancelledError:
                    pass
            self._task = None
        logger.debug("countdown_stopped", start_time=self._start_time)

    async def _tick_loop(self) -> None:
        while self._running:
            vesting_clock = self.tick()
            if vesting_clock.is_complete:
                self._running = False
                logger.debug("countdown_complete", start_time=self._start_time)
                break
            await asyncio.sleep(self._interval)
