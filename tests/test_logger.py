"""Tests for the logger tree and event dispatch"""

import asyncio
from concurrent.futures import Future
from datetime import datetime
import functools
import inspect
import itertools
import os
import threading
import time
from unittest.mock import Mock, patch

import pytest

from treelog import LogEvent, LogLevel, Logger, ValidationError


def make_appender(accepts=True, failure=None):
    """Mock appender whose handle() returns a completed future."""
    appender = Mock()
    appender.will_handle.return_value = accepts
    future = Future()
    if failure is None:
        future.set_result(None)
    else:
        future.set_exception(failure)
    appender.handle.return_value = future
    return appender


def wait_until(predicate, timeout=5.0):
    """Poll predicate until it holds or timeout seconds have passed."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


class AsyncAppender:
    """Duck-typed appender with a coroutine handle()."""

    def __init__(self, failure=None, delay=0.0):
        self.events = []
        self.failure = failure
        self.delay = delay
        self.written = threading.Event()

    def will_handle(self, event):
        return True

    async def handle(self, event):
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.failure is not None:
            raise self.failure
        self.events.append(event)
        self.written.set()


class TestLogEvent:
    """Test log event creation."""

    def test_defaults(self):
        before = datetime.now().astimezone()
        event = LogEvent(LogLevel.INFO, "app", ("hello",))
        after = datetime.now().astimezone()
        assert before <= event.timestamp <= after
        assert event.call_site is None
        assert event.thread_id
        assert not event.is_lazy

    def test_list_payload_becomes_tuple(self):
        assert LogEvent(LogLevel.INFO, "app", ["a", 1]).payload == ("a", 1)

    def test_lazy_payload(self):
        assert LogEvent(LogLevel.INFO, "app", lambda: "later").is_lazy

    def test_invalid_level(self):
        with pytest.raises(TypeError):
            LogEvent("INFO", "app")

    def test_invalid_payload(self):
        with pytest.raises(TypeError):
            LogEvent(LogLevel.INFO, "app", "not a tuple")

    def test_immutable(self):
        event = LogEvent(LogLevel.INFO, "app")
        with pytest.raises(AttributeError):
            event.level = LogLevel.ERROR


class TestLoggerLevel:
    """Test level inheritance."""

    def test_root_default(self):
        logger = Logger("")
        assert logger.level == LogLevel.ERROR
        assert logger.own_level is None

    def test_own_level(self):
        logger = Logger("foo.bar", level=LogLevel.INFO)
        assert logger.level == LogLevel.INFO
        assert logger.own_level == LogLevel.INFO

    def test_inherits_dynamically(self):
        root = Logger("", level=LogLevel.INFO)
        child = Logger("a", root)
        grandchild = Logger("a.b", child)
        assert grandchild.level == LogLevel.INFO

        root.level = LogLevel.DEBUG
        assert grandchild.level == LogLevel.DEBUG

        child.level = LogLevel.WARN
        assert grandchild.level == LogLevel.WARN

        grandchild.level = LogLevel.ERROR
        assert grandchild.level == LogLevel.ERROR
        assert child.level == LogLevel.WARN

        child.level = None
        grandchild.level = None
        assert grandchild.level == LogLevel.DEBUG

    def test_level_names_and_numbers(self):
        logger = Logger("app")
        logger.level = "warn"
        assert logger.level == LogLevel.WARN
        logger.level = 12
        assert logger.level == 12

    def test_invalid_level(self):
        logger = Logger("app")
        with pytest.raises(ValidationError):
            logger.level = "bogus"

    @pytest.mark.parametrize("severity,threshold", list(itertools.product(list(LogLevel), repeat=2)))
    def test_should_log(self, severity, threshold):
        logger = Logger("app", level=threshold)
        assert logger.should_log(severity) == (severity >= threshold)

    def test_include_call_site_inherited(self):
        root = Logger("")
        child = Logger("a", root)
        assert child.include_call_site is False
        root.include_call_site = True
        assert child.include_call_site is True
        child.include_call_site = False
        assert child.include_call_site is False


class TestLoggerAppenders:
    """Test appender registration."""

    def test_add_appender(self):
        logger = Logger("app")
        appender = make_appender()
        assert logger.add_appender("MOCK", appender)
        assert logger.appenders["MOCK"] is appender

    def test_add_appender_keeps_existing(self):
        logger = Logger("app")
        first, second = make_appender(), make_appender()
        logger.add_appender("MOCK", first)
        assert not logger.add_appender("MOCK", second)
        assert logger.appenders["MOCK"] is first
        assert logger.add_appender("MOCK", second, overwrite=True)
        assert logger.appenders["MOCK"] is second

    def test_remove_appender(self):
        logger = Logger("app")
        logger.add_appender("MOCK", make_appender())
        assert logger.remove_appender("MOCK")
        assert not logger.remove_appender("MOCK")
        assert logger.appenders == {}

    def test_added_appender_is_used(self):
        logger = Logger("app", level=LogLevel.INFO)
        appender = make_appender()
        logger.add_appender("MOCK", appender)
        logger.info("test info")
        appender.will_handle.assert_called_once()
        appender.handle.assert_called_once()

    def test_removed_appender_is_not_used(self):
        logger = Logger("app", level=LogLevel.INFO)
        appender = make_appender()
        logger.add_appender("MOCK", appender)
        logger.remove_appender("MOCK")
        logger.info("test info")
        appender.handle.assert_not_called()


class TestLogging:
    """Test log methods and event creation."""

    @pytest.mark.parametrize(
        "method,level",
        [
            ("trace", LogLevel.TRACE),
            ("debug", LogLevel.DEBUG),
            ("info", LogLevel.INFO),
            ("warn", LogLevel.WARN),
            ("error", LogLevel.ERROR),
            ("fatal", LogLevel.FATAL),
        ],
    )
    def test_log_methods(self, method, level):
        logger = Logger("app", level=LogLevel.TRACE)
        with patch.object(logger, "emit") as emit:
            getattr(logger, method)("message", 42)
        emit.assert_called_once()
        event = emit.call_args[0][0]
        assert event.level == level
        assert event.payload == ("message", 42)

    def test_event_handed_to_parent(self):
        root = Logger("", level=LogLevel.TRACE)
        logger = Logger("foo", root, LogLevel.INFO)
        before = datetime.now().astimezone()
        with patch.object(root, "emit", wraps=root.emit) as emit:
            logger.info("Test info")
        after = datetime.now().astimezone()

        emit.assert_called_once()
        event = emit.call_args[0][0]
        assert event.level == LogLevel.INFO
        assert event.logger_name == "foo"
        assert event.payload == ("Test info",)
        assert before <= event.timestamp <= after

    def test_below_level_not_emitted(self):
        logger = Logger("app", level=LogLevel.WARN)
        with patch.object(logger, "emit") as emit:
            logger.info("ignored")
        emit.assert_not_called()

    def test_log_with_level_name(self):
        logger = Logger("app", level=LogLevel.INFO)
        with patch.object(logger, "emit") as emit:
            logger.log("error", "by name")
        assert emit.call_args[0][0].level == LogLevel.ERROR

    def test_off_is_never_emitted(self):
        logger = Logger("app", level=LogLevel.TRACE)
        with patch.object(logger, "emit") as emit:
            logger.log(LogLevel.OFF, "never")
        emit.assert_not_called()

    def test_exception_payload_kept_as_is(self):
        logger = Logger("app", level=LogLevel.ERROR)
        err = RuntimeError("test error")
        with patch.object(logger, "emit") as emit:
            logger.error("test error", err)
        payload = emit.call_args[0][0].payload
        assert payload[0] == "test error"
        assert payload[1] is err

    def test_lazy_message(self):
        logger = Logger("app", level=LogLevel.DEBUG)
        calls = []

        def message():
            calls.append(1)
            return "lazy log function"

        with patch.object(logger, "emit") as emit:
            logger.debug(message)
        assert calls == [1]
        assert emit.call_args[0][0].payload == ("lazy log function",)

    def test_lazy_lambda_and_method(self):
        class Greeter:
            def greet(self):
                return "from method"

        logger = Logger("app", level=LogLevel.DEBUG)
        with patch.object(logger, "emit") as emit:
            logger.debug(lambda: "from lambda")
            logger.debug(Greeter().greet)
        assert [c[0][0].payload for c in emit.call_args_list] == [("from lambda",), ("from method",)]

    def test_lazy_message_not_called_below_level(self):
        logger = Logger("app", level=LogLevel.ERROR)
        calls = []

        def message():
            calls.append(1)
            return "lazy log function"

        logger.debug(message)
        assert calls == []

    def test_class_argument_is_not_called(self):
        logger = Logger("app", level=LogLevel.INFO)
        with patch.object(logger, "emit") as emit:
            logger.info(ValueError)
        assert emit.call_args[0][0].payload == (ValueError,)

    def test_callable_objects_are_not_called(self):
        logger = Logger("app", level=LogLevel.INFO)
        handler = Mock(return_value="should not be used")
        bound_later = functools.partial(str, "x")
        with patch.object(logger, "emit") as emit:
            logger.info(handler)
            logger.info(bound_later)
        handler.assert_not_called()
        assert emit.call_args_list[0][0][0].payload == (handler,)
        assert emit.call_args_list[1][0][0].payload == (bound_later,)


class TestEmit:
    """Test delegation of events along the tree."""

    def event(self, level=LogLevel.INFO):
        return LogEvent(level, "child", ("message",))

    def test_accepted_locally_not_propagated(self):
        root = Logger("")
        child = Logger("child", root)
        local, upper = make_appender(), make_appender()
        child.add_appender("LOCAL", local)
        root.add_appender("UPPER", upper)

        assert child.emit(self.event())
        local.handle.assert_called_once()
        upper.handle.assert_not_called()

    def test_propagated_when_no_appender_accepts(self):
        root = Logger("")
        child = Logger("child", root)
        local, upper = make_appender(accepts=False), make_appender()
        child.add_appender("LOCAL", local)
        root.add_appender("UPPER", upper)

        assert child.emit(self.event())
        local.handle.assert_not_called()
        upper.handle.assert_called_once()

    def test_all_accepting_appenders_get_the_event(self):
        logger = Logger("app")
        first, second, declining = make_appender(), make_appender(), make_appender(accepts=False)
        for name, appender in (("FIRST", first), ("SECOND", second), ("DECLINING", declining)):
            logger.add_appender(name, appender)

        assert logger.emit(self.event())
        first.handle.assert_called_once()
        second.handle.assert_called_once()
        declining.handle.assert_not_called()

    def test_not_handled_anywhere(self):
        root = Logger("")
        child = Logger("child", root)
        assert not child.emit(self.event())

    def test_level_not_checked_by_emit(self):
        logger = Logger("app", level=LogLevel.FATAL)
        appender = make_appender()
        logger.add_appender("MOCK", appender)
        assert logger.emit(self.event(LogLevel.TRACE))


class TestErrorHandling:
    """Test that appender failures never reach the caller."""

    def test_exception_in_handle(self, capsys):
        logger = Logger("app", level=LogLevel.INFO)
        appender = make_appender()
        appender.handle.side_effect = RuntimeError("Reject for some reason")
        logger.add_appender("MockAppender", appender)

        logger.info("test info")

        err = capsys.readouterr().err
        assert "error in appender.handle of MockAppender: RuntimeError('Reject for some reason')" in err

    def test_failed_future(self, capsys):
        logger = Logger("app", level=LogLevel.INFO)
        logger.add_appender("MockAppender", make_appender(failure=RuntimeError("late failure")))

        logger.info("test info")

        err = capsys.readouterr().err
        assert "error in appender.handle of MockAppender: RuntimeError('late failure')" in err

    def test_failing_appender_does_not_stop_others(self, capsys):
        logger = Logger("app", level=LogLevel.INFO)
        failing = make_appender()
        failing.handle.side_effect = RuntimeError("broken")
        working = make_appender()
        logger.add_appender("FAILING", failing)
        logger.add_appender("WORKING", working)

        logger.info("test info")

        working.handle.assert_called_once()
        assert "FAILING" in capsys.readouterr().err


class TestAsyncAppenders:
    """Test appenders with coroutine handle()."""

    def test_without_running_loop(self):
        logger = Logger("app", level=LogLevel.INFO)
        appender = AsyncAppender()
        logger.add_appender("ASYNC", appender)

        logger.info("hello")

        assert appender.written.wait(timeout=5)
        assert [e.payload for e in appender.events] == [("hello",)]

    def test_slow_appender_does_not_block_caller(self):
        logger = Logger("app", level=LogLevel.INFO)
        appender = AsyncAppender(delay=1.0)
        logger.add_appender("ASYNC", appender)

        start = time.monotonic()
        logger.info("hello")
        elapsed = time.monotonic() - start

        assert elapsed < 0.5
        assert appender.written.wait(timeout=5)

    def test_failure_without_running_loop(self):
        logger = Logger("app", level=LogLevel.INFO)
        logger.add_appender("ASYNC", AsyncAppender(failure=RuntimeError("async failure")))

        with patch("treelog.core.dispatch.report_error") as report:
            logger.info("hello")
            assert wait_until(lambda: report.called)

        message, exc = report.call_args[0]
        assert message == "error in appender.handle of ASYNC"
        assert isinstance(exc, RuntimeError)
        assert str(exc) == "async failure"

    def test_scheduled_on_running_loop(self):
        logger = Logger("app", level=LogLevel.INFO)
        appender = AsyncAppender()
        logger.add_appender("ASYNC", appender)

        async def scenario():
            logger.info("hello")
            pending = len(appender.events)
            await asyncio.sleep(0)
            return pending, len(appender.events)

        assert asyncio.run(scenario()) == (0, 1)

    def test_failure_on_running_loop(self, capsys):
        logger = Logger("app", level=LogLevel.INFO)
        logger.add_appender("ASYNC", AsyncAppender(failure=RuntimeError("async failure")))

        async def scenario():
            logger.info("hello")
            await asyncio.sleep(0)
            await asyncio.sleep(0)

        asyncio.run(scenario())

        assert "error in appender.handle of ASYNC: RuntimeError('async failure')" in capsys.readouterr().err


class TestCallSite:
    """Test call site capture."""

    def test_not_captured_by_default(self):
        logger = Logger("app", level=LogLevel.INFO)
        with patch.object(logger, "emit") as emit:
            logger.info("here")
        assert emit.call_args[0][0].call_site is None

    def test_captured_when_enabled(self):
        logger = Logger("app", level=LogLevel.INFO)
        logger.include_call_site = True
        with patch.object(logger, "emit") as emit:
            line = inspect.currentframe().f_lineno + 1
            logger.info("here")

        call_site = emit.call_args[0][0].call_site
        assert os.path.basename(call_site.file) == os.path.basename(__file__)
        assert call_site.line == line
        assert call_site.function == "test_captured_when_enabled"
        assert call_site.column >= 0
