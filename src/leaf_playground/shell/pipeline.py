"""
Run pipeline for the Leaf shell.

One run cycle: snapshot the program buffer, call the execution engine once,
and turn the outcome into transcript entries. A cycle ends either in one
output entry per line or in exactly one error entry, never both.
"""

import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Optional, Union

from leaf_playground.core.buffer import TextBuffer
from leaf_playground.core.engine import ExecutionEngine, describe_error
from leaf_playground.core.session import SessionState
from leaf_playground.shell.dispatch import RunDispatcher

logger = logging.getLogger(__name__)

EMPTY_OUTPUT_TEXT = "program finished with no output"


@dataclass(frozen=True)
class Success:
    """The engine returned its output lines."""

    lines: tuple[str, ...]


@dataclass(frozen=True)
class Failure:
    """The engine raised; ``message`` is the display text."""

    message: str


RunResult = Union[Success, Failure]


def _line_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    try:
        return str(value)
    except Exception:
        return describe_error(value)


def _normalize_output(output: Any) -> tuple[str, ...]:
    """
    Coerce an engine's return value to a tuple of lines.

    Raises:
        TypeError: If the value is not a sequence of lines.
    """
    if output is None:
        return ()
    if isinstance(output, str):
        return tuple(output.splitlines())
    try:
        items = list(output)
    except TypeError:
        raise TypeError(
            f"engine returned {type(output).__name__}, expected a sequence of lines"
        ) from None
    return tuple(_line_text(item) for item in items)


class RunPipeline:
    """
    Runs the session's program and records the outcome.

    Attributes:
        session: Session whose transcript receives the results.
        buffer: Source of the program text.
        engine: The execution engine.
        dispatcher: Schedules run cycles on the event loop.
    """

    def __init__(
        self,
        session: SessionState,
        buffer: TextBuffer,
        engine: ExecutionEngine,
        dispatcher: Optional[RunDispatcher] = None,
        timeout: Optional[float] = None,
        offload: bool = True,
    ):
        """
        Initialize the pipeline.

        Args:
            session: Session state to write results into.
            buffer: Program buffer read at the start of each run.
            engine: Engine invoked once per run.
            dispatcher: Run dispatcher. Defaults to the concurrent policy.
            timeout: Seconds before a run fails as timed out. None waits
                forever.
            offload: Run synchronous engines in the default thread pool.
                When False they run on the event loop and block it, so
                ``timeout`` only applies to coroutine engines.
        """
        self.session = session
        self.buffer = buffer
        self.engine = engine
        self.dispatcher = dispatcher or RunDispatcher()
        self.timeout = timeout
        self.offload = offload

    def refusal(self) -> Optional[str]:
        """Return why the dispatcher would refuse a run now, or None."""
        return self.dispatcher.refusal()

    def start(self) -> asyncio.Task:
        """
        Start a run cycle without waiting for it.

        The program text is read now; the engine is called after at least
        one event-loop iteration.

        Returns:
            The task running the cycle.

        Raises:
            RunRejected: If the dispatch policy refuses the run.
        """
        try:
            source = self.buffer.get_current_text()
        except Exception as e:
            logger.warning(f"Could not read program buffer: {e}")
            failure = Failure(describe_error(e))

            async def report_failure() -> RunResult:
                self.apply(failure)
                return failure

            return self.dispatcher.dispatch(report_failure)

        return self.dispatcher.dispatch(lambda: self.run_cycle(source))

    async def run_cycle(self, source: str) -> RunResult:
        """Execute ``source`` and record the result."""
        result = await self.execute(source)
        self.apply(result)
        return result

    async def execute(self, source: str) -> RunResult:
        """
        Call the engine once and capture the outcome.

        Never raises for engine errors, including ``SystemExit`` from a
        program that exits; cancellation and Ctrl+C propagate.

        Args:
            source: Program text.

        Returns:
            Success with the output lines, or Failure with a display message.
        """
        try:
            if self.timeout is None:
                output = await self._call_engine(source)
            else:
                output = await asyncio.wait_for(self._call_engine(source), self.timeout)
            return Success(_normalize_output(output))
        except asyncio.TimeoutError:
            logger.warning(f"Run timed out after {self.timeout}s")
            return Failure(f"run timed out after {self.timeout:g}s")
        except Exception as e:
            logger.info(f"Run failed: {describe_error(e)}")
            return Failure(describe_error(e))
        except (asyncio.CancelledError, KeyboardInterrupt):
            raise
        except BaseException as e:
            logger.warning(f"Engine raised {type(e).__name__}: {describe_error(e)}")
            return Failure(describe_error(e))

    async def _call_engine(self, source: str) -> Any:
        run = self.engine.run
        if inspect.iscoroutinefunction(run):
            return await run(source)

        if self.offload:
            loop = asyncio.get_running_loop()
            output = await loop.run_in_executor(None, run, source)
        else:
            output = run(source)

        if inspect.isawaitable(output):
            output = await output
        return output

    def apply(self, result: RunResult) -> None:
        """
        Show the transcript and append the entries for ``result``.

        Visibility is set first so listeners see the entries as shown.

        Args:
            result: Outcome of one run.
        """
        self.session.show_transcript()
        transcript = self.session.transcript
        if isinstance(result, Success):
            if result.lines:
                for line in result.lines:
                    transcript.output(line)
            else:
                transcript.info(EMPTY_OUTPUT_TEXT)
        else:
            transcript.error(result.message)
