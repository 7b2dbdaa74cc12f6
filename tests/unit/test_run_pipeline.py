import asyncio

import pytest

from leaf_playground.core.buffer import FileTextBuffer, InMemoryTextBuffer
from leaf_playground.core.engine import (
    CallableEngine,
    EngineLoadError,
    ExecutionError,
    UnconfiguredEngine,
    describe_error,
    load_engine,
)
from leaf_playground.core.language import DEFAULT_BUFFER_TEXT
from leaf_playground.core.session import SessionState
from leaf_playground.core.transcript import OutputCategory
from leaf_playground.shell import (
    EMPTY_OUTPUT_TEXT,
    NO_LOOP_MESSAGE,
    Failure,
    RunDispatcher,
    RunPipeline,
    RunPolicy,
    RunRejected,
    Success,
)
from tests.support.engines import HangingEngine, RecordingEngine, exits


def _make_pipeline(engine, text="print 3", **kwargs) -> RunPipeline:
    return RunPipeline(SessionState(), InMemoryTextBuffer(text), engine, **kwargs)


def _pairs(pipeline: RunPipeline) -> list[tuple[OutputCategory, str]]:
    return [(e.category, e.text) for e in pipeline.session.transcript]


class _BrokenBuffer:
    def get_current_text(self) -> str:
        raise OSError("disk gone")


class _Unprintable(Exception):
    def __str__(self):
        raise RuntimeError("no str")


class _Opaque(Exception):
    def __str__(self):
        raise RuntimeError("no str")

    def __repr__(self):
        raise RuntimeError("no repr")


class TestExecute:
    """Engine call outcomes."""

    @pytest.mark.asyncio
    async def test_success_lines(self):
        pipeline = _make_pipeline(RecordingEngine(["3", "ok"]))
        assert await pipeline.execute("x") == Success(("3", "ok"))

    @pytest.mark.asyncio
    async def test_non_string_lines_are_stringified(self):
        pipeline = _make_pipeline(RecordingEngine([3, None, 1.5]))
        assert await pipeline.execute("x") == Success(("3", "None", "1.5"))

    @pytest.mark.asyncio
    async def test_string_output_is_split_into_lines(self):
        pipeline = _make_pipeline(CallableEngine(lambda source: "a\nb\n"))
        assert await pipeline.execute("x") == Success(("a", "b"))

    @pytest.mark.asyncio
    async def test_none_output_is_empty(self):
        pipeline = _make_pipeline(CallableEngine(lambda source: None))
        assert await pipeline.execute("x") == Success(())

    @pytest.mark.asyncio
    async def test_non_sequence_output_fails(self):
        pipeline = _make_pipeline(CallableEngine(lambda source: 5))
        result = await pipeline.execute("x")
        assert result == Failure("engine returned int, expected a sequence of lines")

    @pytest.mark.asyncio
    async def test_error_message_attribute_wins(self):
        pipeline = _make_pipeline(RecordingEngine(error=ExecutionError("bad token")))
        assert await pipeline.execute("x") == Failure("bad token")

    @pytest.mark.asyncio
    async def test_plain_exception_uses_str(self):
        pipeline = _make_pipeline(RecordingEngine(error=ZeroDivisionError("division by zero")))
        assert await pipeline.execute("x") == Failure("division by zero")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("offload", [True, False])
    async def test_program_exit_becomes_failure(self, offload):
        pipeline = _make_pipeline(CallableEngine(exits), offload=offload)
        assert await pipeline.execute("x") == Failure("program called exit")

    @pytest.mark.asyncio
    async def test_exit_without_message_uses_type_name(self):
        pipeline = _make_pipeline(RecordingEngine(error=SystemExit()))
        assert await pipeline.execute("x") == Failure("SystemExit")

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self):
        pipeline = _make_pipeline(HangingEngine())
        task = asyncio.ensure_future(pipeline.execute("x"))
        await asyncio.sleep(0)

        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

    @pytest.mark.asyncio
    async def test_coroutine_engine_is_awaited(self):
        async def run(source):
            await asyncio.sleep(0)
            return [source.upper()]

        pipeline = _make_pipeline(CallableEngine(run))
        assert await pipeline.execute("hi") == Success(("HI",))

    @pytest.mark.asyncio
    async def test_sync_engine_without_offload(self):
        engine = RecordingEngine(["inline"])
        pipeline = _make_pipeline(engine, offload=False)

        assert await pipeline.execute("src") == Success(("inline",))
        assert engine.calls == ["src"]

    @pytest.mark.asyncio
    async def test_timeout_reports_failure(self):
        pipeline = _make_pipeline(HangingEngine(), timeout=0.05)
        assert await pipeline.execute("x") == Failure("run timed out after 0.05s")

    @pytest.mark.asyncio
    async def test_unconfigured_engine_explains_itself(self):
        pipeline = _make_pipeline(UnconfiguredEngine())
        result = await pipeline.execute("x")
        assert isinstance(result, Failure)
        assert "LEAF_RUN_ENGINE" in result.message


class TestApply:
    """Merging a result into the session."""

    def test_success_appends_one_output_per_line(self):
        pipeline = _make_pipeline(RecordingEngine())
        pipeline.apply(Success(("a", "b", "c")))

        assert _pairs(pipeline) == [
            (OutputCategory.OUTPUT, "a"),
            (OutputCategory.OUTPUT, "b"),
            (OutputCategory.OUTPUT, "c"),
        ]
        assert pipeline.session.transcript_visible is True

    def test_empty_success_appends_info(self):
        pipeline = _make_pipeline(RecordingEngine())
        pipeline.apply(Success(()))

        assert _pairs(pipeline) == [(OutputCategory.INFO, EMPTY_OUTPUT_TEXT)]
        assert pipeline.session.transcript_visible is True

    def test_failure_appends_single_error(self):
        pipeline = _make_pipeline(RecordingEngine())
        pipeline.apply(Failure("line 1: oops"))

        assert _pairs(pipeline) == [(OutputCategory.ERROR, "line 1: oops")]
        assert pipeline.session.transcript_visible is True


class TestStart:
    """Full cycles started through the dispatcher."""

    @pytest.mark.asyncio
    async def test_start_reads_buffer_once(self):
        reads = []

        class CountingBuffer:
            def get_current_text(self):
                reads.append(1)
                return "print 3"

        engine = RecordingEngine(["3"])
        pipeline = RunPipeline(SessionState(), CountingBuffer(), engine)

        task = pipeline.start()
        result = await task

        assert result == Success(("3",))
        assert reads == [1]
        assert engine.calls == ["print 3"]

    @pytest.mark.asyncio
    async def test_unreadable_buffer_reports_error(self):
        engine = RecordingEngine(["never"])
        pipeline = RunPipeline(SessionState(), _BrokenBuffer(), engine)

        result = await pipeline.start()

        assert result == Failure("disk gone")
        assert engine.calls == []
        assert _pairs(pipeline) == [(OutputCategory.ERROR, "disk gone")]

    @pytest.mark.asyncio
    async def test_file_buffer_reread_each_run(self, tmp_path):
        program = tmp_path / "main.leaf"
        engine = RecordingEngine(["ok"])
        pipeline = RunPipeline(SessionState(), FileTextBuffer(program), engine)

        await pipeline.start()
        program.write_text("print 1", encoding="utf-8")
        await pipeline.start()

        assert engine.calls == [DEFAULT_BUFFER_TEXT, "print 1"]


class TestDispatcher:
    """Policies and lifecycle of RunDispatcher."""

    def test_policy_from_string(self):
        assert RunDispatcher("serial").policy is RunPolicy.SERIAL
        with pytest.raises(ValueError):
            RunDispatcher("parallel")

    @pytest.mark.asyncio
    async def test_reject_raises_while_pending(self):
        dispatcher = RunDispatcher(RunPolicy.REJECT)
        release = asyncio.Event()

        dispatcher.dispatch(release.wait)
        assert dispatcher.pending == 1
        assert dispatcher.accepts() is False
        with pytest.raises(RunRejected, match="a run is already in progress"):
            dispatcher.dispatch(release.wait)

        release.set()
        await dispatcher.wait_idle()
        assert dispatcher.pending == 0
        assert dispatcher.accepts() is True
        assert dispatcher.dispatched == 1

    @pytest.mark.asyncio
    async def test_job_starts_after_caller_yields(self):
        dispatcher = RunDispatcher()
        started = []

        async def job():
            started.append(1)

        dispatcher.dispatch(job)
        assert started == []

        await dispatcher.wait_idle()
        assert started == [1]

    @pytest.mark.asyncio
    async def test_close_cancels_pending_runs(self):
        dispatcher = RunDispatcher()
        task = dispatcher.dispatch(asyncio.Event().wait)

        dispatcher.close()
        await dispatcher.wait_idle()

        assert task.cancelled()
        assert dispatcher.pending == 0

    def test_dispatch_without_loop_is_refused(self):
        dispatcher = RunDispatcher()

        assert dispatcher.refusal() == NO_LOOP_MESSAGE
        assert dispatcher.accepts() is False
        with pytest.raises(RunRejected, match="no event loop"):
            dispatcher.dispatch(asyncio.Event().wait)
        assert dispatcher.dispatched == 0

    def test_closed_loop_is_refused(self):
        loop = asyncio.new_event_loop()
        loop.close()

        assert RunDispatcher(loop=loop).refusal() == NO_LOOP_MESSAGE


class TestDescribeError:
    """Conversion of raised values to display text."""

    def test_message_attribute(self):
        assert describe_error(ExecutionError("unexpected symbol '@'")) == "unexpected symbol '@'"

    def test_non_string_message_ignored(self):
        error = ValueError("fallback")
        error.message = 42
        assert describe_error(error) == "fallback"

    def test_empty_str_uses_type_name(self):
        assert describe_error(RuntimeError()) == "RuntimeError"

    def test_str_failure_falls_back_to_repr(self):
        assert describe_error(_Unprintable()) == "_Unprintable()"

    def test_total_failure_uses_type_name(self):
        assert describe_error(_Opaque()) == "_Opaque"

    def test_arbitrary_values(self):
        assert describe_error("plain text") == "plain text"
        assert describe_error(None) == "None"


class TestLoadEngine:
    """Resolving engines from import paths."""

    def test_empty_path_gives_unconfigured_engine(self):
        assert isinstance(load_engine(""), UnconfiguredEngine)
        assert isinstance(load_engine(None), UnconfiguredEngine)

    def test_function_is_wrapped(self):
        engine = load_engine("tests.support.engines:three_ok")
        assert isinstance(engine, CallableEngine)
        assert engine.run("anything") == ["3", "ok"]

    def test_class_is_instantiated(self):
        engine = load_engine("tests.support.engines:RecordingEngine")
        assert isinstance(engine, RecordingEngine)

    @pytest.mark.parametrize(
        "path",
        [
            "no_colon_here",
            ":three_ok",
            "tests.support.engines:",
            "leaf_missing_module_xyz:run",
            "tests.support.engines:does_not_exist",
            "leaf_playground.core.language:DEFAULT_BUFFER_TEXT",
        ],
    )
    def test_bad_paths_raise_load_error(self, path):
        with pytest.raises(EngineLoadError):
            load_engine(path)
