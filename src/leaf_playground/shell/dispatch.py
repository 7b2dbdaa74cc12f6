"""
Run dispatch for the Leaf shell.

Every run is scheduled as an asyncio task on the shell's event loop, so its
result is merged into the session on the same thread that accepts input.
The dispatch policy decides what happens when a run is requested while
another one is still pending.
"""

import asyncio
import logging
from collections.abc import Callable, Coroutine
from enum import Enum
from typing import Any, Optional

logger = logging.getLogger(__name__)

RunJob = Callable[[], Coroutine[Any, Any, Any]]


class RunPolicy(str, Enum):
    """
    What to do with a run requested while another is pending.

    CONCURRENT: start it immediately; results land in completion order.
    SERIAL: queue it; runs execute one at a time in submission order.
    REJECT: refuse it until the pending run has finished.
    """

    CONCURRENT = "concurrent"
    SERIAL = "serial"
    REJECT = "reject"


BUSY_MESSAGE = "a run is already in progress"
NO_LOOP_MESSAGE = "cannot start a run: no event loop is running"


class RunRejected(Exception):
    """Raised by dispatch() when a run cannot be scheduled."""

    def __init__(self, message: str = BUSY_MESSAGE):
        super().__init__(message)
        self.message = message


class RunDispatcher:
    """
    Schedules run jobs on an event loop according to a RunPolicy.

    Jobs always start at least one loop iteration after dispatch() returns,
    so anything the caller appends synchronously is observed first.

    Attributes:
        policy: The active dispatch policy.
    """

    def __init__(
        self,
        policy: RunPolicy | str = RunPolicy.CONCURRENT,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        """
        Initialize the dispatcher.

        Args:
            policy: Dispatch policy (enum or its string value).
            loop: Event loop to schedule on. Defaults to the running loop at
                dispatch time.
        """
        self.policy = RunPolicy(policy)
        self._loop = loop
        self._tasks: set[asyncio.Task] = set()
        self._serial_lock = asyncio.Lock()
        self._dispatched = 0

    @property
    def pending(self) -> int:
        """Number of runs dispatched and not yet finished."""
        return len(self._tasks)

    @property
    def dispatched(self) -> int:
        """Total number of runs dispatched."""
        return self._dispatched

    def refusal(self) -> Optional[str]:
        """
        Return why a new run would be refused right now.

        Returns:
            The refusal message, or None if the run would be accepted.
        """
        if self.policy is RunPolicy.REJECT and self._tasks:
            return BUSY_MESSAGE
        if self._loop is not None:
            return NO_LOOP_MESSAGE if self._loop.is_closed() else None
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return NO_LOOP_MESSAGE
        return None

    def accepts(self) -> bool:
        """Return whether a new run would be accepted right now."""
        return self.refusal() is None

    def dispatch(self, job: RunJob) -> asyncio.Task:
        """
        Schedule a run job.

        Args:
            job: Zero-argument function returning the coroutine to run.

        Returns:
            The task wrapping the job.

        Raises:
            RunRejected: If the policy refuses the run or no event loop is
                available.
        """
        reason = self.refusal()
        if reason is not None:
            raise RunRejected(reason)

        loop = self._loop or asyncio.get_running_loop()
        self._dispatched += 1
        run_id = self._dispatched
        task = loop.create_task(self._execute(job, run_id), name=f"leaf-run-{run_id}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logger.debug(f"Dispatched run {run_id} ({self.policy.value}, {self.pending} pending)")
        return task

    async def _execute(self, job: RunJob, run_id: int) -> Any:
        # Yield once so the caller's synchronous work completes first
        await asyncio.sleep(0)

        if self.policy is RunPolicy.SERIAL:
            async with self._serial_lock:
                result = await job()
        else:
            result = await job()

        logger.debug(f"Run {run_id} finished")
        return result

    async def wait_idle(self) -> None:
        """Wait until every dispatched run has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def close(self) -> None:
        """
        Cancel all pending runs.

        Should be called when the session ends to release resources.
        """
        pending = list(self._tasks)
        for task in pending:
            task.cancel()
        if pending:
            logger.debug(f"Cancelled {len(pending)} pending run(s)")
