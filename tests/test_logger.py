from unittest.mock import Mock, patch

import logroute
from logroute import (
    LoggerHandle,
    LogRouter,
    RouterConfig,
    create_logger,
    get_default_router,
    set_default_router,
)


def previews(router):
    return [entry.preview for entry in router.get_buffer()]


class TestLoggerHandle:
    def test_level_methods(self, router):
        log = create_logger("app", router=router)
        router.set_level("trace")
        for method in ("trace", "debug", "log", "info", "warn", "error"):
            record = getattr(log, method)(method, "call")
            assert record.level == method
            assert record.namespace == "app"
        assert len(router.get_buffer()) == 6

    def test_threshold_applies(self, router):
        log = create_logger("app", router=router)
        router.set_level("warn")
        assert log.info("quiet") is None
        assert log.warn("loud") is not None

    def test_empty_namespace_is_global(self, router):
        assert create_logger("", router=router).namespace == "global"
        assert create_logger(None, router=router).namespace == "global"

    def test_once(self, router):
        log = create_logger("db", router=router)
        log.once("slow-query", "slow query", 1500)
        log.once("slow-query", "slow query", 1600)
        assert previews(router) == ["slow query 1500"]

        router.reset_once()
        log.once("slow-query", "slow query", 1700)
        assert previews(router) == ["slow query 1500", "slow query 1700"]

    def test_once_is_scoped_to_namespace(self, router):
        create_logger("db", router=router).once("k", "db")
        create_logger("cache", router=router).once("k", "cache")
        assert previews(router) == ["db", "cache"]

    def test_count(self, router):
        log = create_logger("app", router=router)
        log.count()
        log.count()
        log.count("hits")
        log.count_reset()
        log.count()
        assert previews(router) == [
            "count default: 1",
            "count default: 2",
            "count hits: 1",
            "countReset default: 0",
            "count default: 1",
        ]
        assert {entry.level for entry in router.get_buffer()} == {"info"}

    def test_counters_are_per_logger(self, router):
        create_logger("app", router=router).count()
        create_logger("app", router=router).count()
        assert previews(router) == ["count default: 1", "count default: 1"]

    def test_time_end(self, router):
        log = create_logger("app", router=router)
        with patch("time.perf_counter", side_effect=[5.0, 5.1234]):
            log.time("load")
            record = log.time_end("load")
        assert record.preview == "Timer load: 123.4ms"
        assert log.time_end("load") is None

    def test_time_end_without_timer(self, router):
        log = create_logger("app", router=router)
        assert log.time_end() is None
        assert router.get_buffer() == []

    def test_assert(self, router):
        log = create_logger("app", router=router)
        assert log.assert_(True, "fine") is None
        record = log.assert_(0 == 1, "math is broken")
        assert record.level == "error"
        assert record.preview == "Assertion failed: math is broken"

    def test_table_uses_handle_namespace(self, router):
        log = create_logger("report", router=router)
        record = log.table([1, 2])
        assert record.namespace == "report"
        assert record.preview == "TABLE rows 2"

    def test_with_context(self, router):
        sink = Mock()
        router.add_transport(sink)
        base = create_logger("api", context={"service": "billing"}, router=router)
        child = base.with_context({"request_id": "r-1"}, user="u-9")

        child.info("handled")
        base.info("plain")

        child_record = sink.call_args_list[0][0][0]
        base_record = sink.call_args_list[1][0][0]
        assert dict(child_record.context) == {
            "service": "billing",
            "request_id": "r-1",
            "user": "u-9",
        }
        assert dict(base_record.context) == {"service": "billing"}
        assert child.namespace == "api"
        assert child.router is router

    def test_color_reaches_presenter(self):
        presenter = Mock()
        router = LogRouter(RouterConfig(sticky_install=False), presenter=presenter)
        create_logger("ui", color="cyan", router=router).info("x")
        assert presenter.call_args[1]["color"] == "cyan"


class TestDefaultRouter:
    def test_default_router_is_lazy_and_replaceable(self):
        set_default_router(None)
        first = get_default_router()
        assert get_default_router() is first

        replacement = LogRouter(RouterConfig(print_to_native=False, sticky_install=False))
        set_default_router(replacement)
        assert get_default_router() is replacement

    def test_default_router_reads_environment(self, monkeypatch):
        monkeypatch.setenv("LOGROUTE_LEVEL", "error")
        set_default_router(None)
        assert get_default_router().get_level() == "error"

    def test_module_level_api(self):
        set_default_router(LogRouter(RouterConfig(print_to_native=False, sticky_install=False)))
        sink = Mock()
        logroute.add_transport(sink)
        logroute.set_level("info")
        logroute.set_namespace_levels({"db:*": "debug"})
        logroute.enable_namespaces("db:*, app")

        log = create_logger("db:query")
        assert isinstance(log, LoggerHandle)
        log.debug("select 1")
        create_logger("app").debug("hidden")
        create_logger("other").error("hidden too")

        assert logroute.get_level() == "info"
        assert logroute.is_namespace_enabled("app")
        assert [entry.preview for entry in logroute.get_buffer()] == ["select 1"]
        sink.assert_called_once()

        exported = logroute.export_buffer()
        logroute.clear_buffer()
        assert logroute.get_buffer() == []
        assert logroute.import_buffer(exported, append=False)
        assert len(logroute.get_buffer()) == 1

        logroute.remove_transport(sink)
        logroute.set_sampling({"db:*": 0})
        log.error("dropped by sampling")
        assert len(logroute.get_buffer()) == 1

    def test_module_level_redactor_and_once(self):
        set_default_router(LogRouter(RouterConfig(print_to_native=False, sticky_install=False)))
        logroute.set_redactor(lambda args, meta: ["[hidden]"])
        log = create_logger("auth")
        log.once("login", "password", "hunter2")
        log.once("login", "password", "hunter2")
        assert [entry.preview for entry in logroute.get_buffer()] == ["[hidden]"]
        logroute.reset_once()
        log.once("login", "x")
        assert len(logroute.get_buffer()) == 2
