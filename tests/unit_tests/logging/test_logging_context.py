"""
LoggingContext unit tests: registry, root level, dispatch, lifecycle.
"""

from __future__ import annotations

import logging

import orjson
import structlog

from logbridge.config.logging import LoggingSettings
from logbridge.logging import EventSink, FileSink, Level, LogRecord, StdioSink, get_logger
from logbridge.logging.interceptors import RedirectStdLibHandler
from logbridge.logging.sinks import BaseSink


class ExplodingSink(BaseSink):
    def append(self, record: LogRecord) -> None:
        raise RuntimeError("sink is broken")


class TestRegistry:
    def test_add_and_get_sink(self, context):
        sink = EventSink("ui")
        context.add_sink(sink)
        assert context.get_sink("ui") is sink
        assert context.get_sink("missing") is None

    def test_same_name_registers_two_sinks(self, context):
        first, second = EventSink("ui"), EventSink("ui")
        context.add_sink(first)
        context.add_sink(second)

        assert context.sinks == (first, second)
        assert context.get_sink("ui") is first

    def test_remove_sink_removes_every_match(self, context):
        context.add_sink(EventSink("ui"))
        context.add_sink(EventSink("ui"))
        keep = EventSink("other")
        context.add_sink(keep)

        assert context.remove_sink("ui") == 2
        assert context.sinks == (keep,)
        assert context.remove_sink("ui") == 0


class TestDispatch:
    def test_record_fields(self, context, captured):
        context.get_logger("app.orders").warning("order delayed", order_id=42)

        assert len(captured) == 1
        record = captured[0]
        assert record.level is Level.WARN
        assert record.message == "order delayed"
        assert record.logger_name == "app.orders"
        assert record.extra["order_id"] == 42
        assert record.timestamp.tzinfo is not None
        assert record.error is None

    def test_default_logger_name_is_root(self, context, captured):
        context.get_logger().info("x")
        assert captured[0].logger_name == "root"

    def test_positional_args_are_interpolated(self, context, captured):
        context.get_logger("app").info("%d items", 3)
        assert captured[0].message == "3 items"

    def test_fatal_and_critical_map_to_fatal(self, context, captured):
        log = context.get_logger("app")
        log.critical("a")
        log.fatal("b")
        assert [r.level for r in captured] == [Level.FATAL, Level.FATAL]

    def test_exception_attaches_error(self, context, captured):
        log = context.get_logger("app")
        try:
            raise ValueError("boom")
        except ValueError as exc:
            log.exception("operation failed")
            raised = exc

        assert captured[0].level is Level.ERROR
        assert captured[0].error is raised

    def test_root_level_drops_records_before_sinks(self, context, captured):
        log = context.get_logger("app")
        log.debug("hidden")
        log.info("shown")

        context.root_level = Level.ALL
        log.debug("now shown")

        context.root_level = "error"
        log.warning("hidden again")

        assert [r.message for r in captured] == ["shown", "now shown"]

    def test_sinks_receive_in_registration_order(self, context):
        order = []
        for name in ("a", "b", "c"):
            sink = EventSink(name)
            sink.subscribe(lambda s, r: order.append(s.name))
            context.add_sink(sink)

        context.get_logger().info("x")

        assert order == ["a", "b", "c"]

    def test_failing_sink_does_not_block_others(self, context, captured):
        context.add_sink(ExplodingSink("broken"))
        after = EventSink("after")
        late = []
        after.subscribe(lambda s, r: late.append(r))
        context.add_sink(after)

        context.get_logger().error("still delivered")

        assert [r.message for r in captured] == ["still delivered"]
        assert [r.message for r in late] == ["still delivered"]

    def test_failing_observer_does_not_reach_caller(self, context, captured):
        sink = EventSink("ui")

        def bad_observer(s, r):
            raise RuntimeError("observer bug")

        sink.subscribe(bad_observer)
        context.add_sink(sink)

        context.get_logger().info("x")

        assert len(captured) == 1


class TestStdlibInterception:
    def test_stdlib_records_reach_sinks(self, context, captured):
        context.install_stdlib_handler()

        logging.getLogger("third.party").warning("disk %s", "full")

        assert len(captured) == 1
        assert captured[0].message == "disk full"
        assert captured[0].logger_name == "third.party"
        assert captured[0].level is Level.WARN

    def test_stdlib_exc_info_is_kept(self, context, captured):
        context.install_stdlib_handler()

        try:
            raise OSError("no space")
        except OSError as exc:
            logging.getLogger("third.party").exception("write failed")
            raised = exc

        assert captured[0].level is Level.ERROR
        assert captured[0].error is raised

    def test_install_is_idempotent_and_removable(self, context):
        context.install_stdlib_handler()
        context.install_stdlib_handler()

        handlers = [h for h in logging.getLogger().handlers if isinstance(h, RedirectStdLibHandler)]
        assert len(handlers) == 1

        context.uninstall_stdlib_handler()
        assert not any(isinstance(h, RedirectStdLibHandler) for h in logging.getLogger().handlers)

    def test_root_level_follows_context(self, context):
        context.install_stdlib_handler()
        context.root_level = Level.ALL
        assert logging.getLogger().level == logging.DEBUG
        context.root_level = Level.ERROR
        assert logging.getLogger().level == logging.ERROR

    def test_shutdown_restores_previous_root_level(self, context, monkeypatch):
        root_logger = logging.getLogger()
        monkeypatch.setattr(root_logger, "level", logging.CRITICAL)

        context.install_stdlib_handler()
        context.root_level = Level.ALL
        assert root_logger.level == logging.DEBUG

        context.shutdown()

        assert root_logger.level == logging.CRITICAL


class TestLifecycle:
    def test_initialize_builds_sinks_from_settings(self, context, tmp_path):
        settings = LoggingSettings(
            level="DEBUG",
            sinks="stdio, file",
            file_path=str(tmp_path / "logs" / "app.log"),
            intercept_stdlib=False,
        )

        context.initialize(settings)

        assert context.configured
        assert context.root_level is Level.DEBUG
        assert [type(s) for s in context.sinks] == [StdioSink, FileSink]
        assert context.get_sink("file").path == tmp_path / "logs" / "app.log"

    def test_initialize_routes_global_logger(self, context, tmp_path):
        log_path = tmp_path / "app.log"
        context.initialize(LoggingSettings(sinks="file", file_path=str(log_path), intercept_stdlib=False))

        get_logger("global").info("via structlog", user="ada")
        context.flush()

        lines = log_path.read_text(encoding="utf-8").splitlines()
        payload = orjson.loads(lines[-1])
        assert payload["message"] == "via structlog"
        assert payload["logger"] == "global"
        assert payload["user"] == "ada"

    def test_shutdown_closes_and_clears(self, context, tmp_path):
        context.initialize(LoggingSettings(sinks="file", file_path=str(tmp_path / "app.log")))
        file_sink = context.get_sink("file")

        context.shutdown()

        assert context.sinks == ()
        assert not context.configured
        assert file_sink._file.closed
        assert not any(isinstance(h, RedirectStdLibHandler) for h in logging.getLogger().handlers)
        assert structlog.is_configured() is False

    def test_context_manager(self, tmp_path):
        from logbridge.logging import LoggingContext

        with LoggingContext() as ctx:
            ctx.add_sink(FileSink(tmp_path / "app.log"))
            sink = ctx.get_sink("file")
        assert ctx.sinks == ()
        assert sink._file.closed
