from __future__ import annotations

import asyncio
import math
import time

from ..domain.exceptions import AnalysisTimeoutError, PollExhaustedError
from ..domain.models import AnalysisHandle, AnalysisStatus
from ..ports import Clock, LoggerPort, Sleep, StatusCheck


MAX_REQUESTS = 10
# Sum of r**2 for r in 1..9: the backoff curve reaches the remaining budget
# by the last iteration.
_CURVE_NORM = 285


class PollScheduler:
    """Waits for a submitted analysis to reach a terminal state.

    Polls with a quadratically growing interval anchored to the deadline, so
    the cadence converges on the expected completion time while bounding the
    number of status requests to ``MAX_REQUESTS``.
    """

    def __init__(
        self,
        *,
        check_status: StatusCheck,
        logger: LoggerPort,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
        max_requests: int = MAX_REQUESTS,
    ) -> None:
        self._check_status = check_status
        self._logger = logger
        self._clock = clock
        self._sleep = sleep
        self._max_requests = max_requests

    async def await_terminal(
        self,
        handle: AnalysisHandle,
        initial_delay: float,
        timeout: float,
    ) -> AnalysisStatus:
        """Return the terminal status of ``handle``.

        Args:
            handle: Submitted job
            initial_delay: Seconds to wait before the first re-check
            timeout: Overall deadline in seconds, measured from this call

        Raises:
            AnalysisTimeoutError: deadline reached before a terminal status
            PollExhaustedError: all status checks used without a terminal status
        """
        status = await self._check_status(handle.uuid)
        if status.is_terminal:
            return status

        start = self._clock()
        deadline = start + timeout
        inverted = math.sqrt(max(timeout - initial_delay, 0)) / math.sqrt(_CURVE_NORM)

        for r in range(self._max_requests):
            backoff = initial_delay if r == 0 else (inverted * r) ** 2
            idle = max(min(backoff, deadline - self._clock()), 0.0)
            self._logger.debug("poll_wait", type="poll_wait", uuid=handle.uuid, attempt=r, idle=idle)
            await self._sleep(idle)

            if self._clock() - start >= timeout:
                raise AnalysisTimeoutError(timeout, status)

            status = await self._check_status(handle.uuid)
            self._logger.debug("poll_status", type="poll_status", uuid=handle.uuid, attempt=r, status=status.value)
            if status.is_terminal:
                return status

        raise PollExhaustedError(self._max_requests, status)
