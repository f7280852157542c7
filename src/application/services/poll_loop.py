"""Bounded polling with interleaved instance health checks.

Every wait in a server monitor goes through `PollLoop.run`: the instance health is
checked before and after each delay, so an instance that stops or terminates is
noticed within one delay interval instead of after the phase deadline.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable

from domain.enums import PollStatus
from domain.value_object.monitoring import InstanceHealth, PollOutcome

log = logging.getLogger(__name__)

Action = Callable[[], Awaitable[bool]]
HealthCheck = Callable[[], Awaitable[InstanceHealth]]
Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]

CANCELLED_REASON = "cancelled"


class PollLoop:
    """Repeats an action with a fixed delay until it succeeds or a deadline elapses.

    The clock and sleep primitives are injectable so that deadlines can be
    exercised without waiting in real time.
    """

    def __init__(
        self,
        delay_seconds: float = 4.0,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
        cancellation: asyncio.Event | None = None,
    ):
        """Initialize the poll loop.

        Args:
            delay_seconds: Delay between attempts
            clock: Monotonic clock returning seconds
            sleep: Coroutine function sleeping for the given number of seconds
            cancellation: Optional event; once set, the loop aborts at its next health check
        """
        if delay_seconds <= 0:
            raise ValueError("delay_seconds must be positive")
        self.delay_seconds = delay_seconds
        self.clock = clock
        self.sleep = sleep
        self.cancellation = cancellation

    async def run(
        self,
        action: Action,
        health_check: HealthCheck,
        deadline_seconds: float,
        waiting_for: str = "action to succeed",
    ) -> PollOutcome:
        """Poll `action` until it returns True.

        Each attempt checks health, sleeps, checks health again, then runs the action.
        A timed out loop reports at an elapsed time in [deadline, deadline + delay).

        Args:
            action: Coroutine function returning True once the awaited condition holds
            health_check: Coroutine function returning the monitored instance's health
            deadline_seconds: Maximum time to wait, measured from loop entry
            waiting_for: Description used in log messages

        Returns:
            PollOutcome: COMPLETED, TIMED_OUT, or ABORTED with the reason
        """
        start = self.clock()
        attempts = 0

        while True:
            aborted = await self._abort_if_unhealthy(health_check, start, attempts)
            if aborted:
                return aborted

            log.info(f"Waiting {self.delay_seconds:g} seconds for {waiting_for}")
            await self.sleep(self.delay_seconds)

            aborted = await self._abort_if_unhealthy(health_check, start, attempts)
            if aborted:
                return aborted

            attempts += 1
            if await action():
                return PollOutcome(PollStatus.COMPLETED, attempts, self.clock() - start)

            elapsed = self.clock() - start
            if elapsed >= deadline_seconds:
                log.warning(f"Timed out after {elapsed:.0f}s ({attempts} attempts) waiting for {waiting_for}")
                return PollOutcome(PollStatus.TIMED_OUT, attempts, elapsed)

    async def _abort_if_unhealthy(
        self, health_check: HealthCheck, start: float, attempts: int
    ) -> PollOutcome | None:
        if self.cancellation is not None and self.cancellation.is_set():
            return PollOutcome(
                PollStatus.ABORTED, attempts, self.clock() - start, reason=CANCELLED_REASON, cancelled=True
            )

        health = await health_check()
        if health.is_terminal:
            return PollOutcome(PollStatus.ABORTED, attempts, self.clock() - start, reason=health.state_name)
        return None
