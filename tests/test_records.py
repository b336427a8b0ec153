from datetime import datetime, timezone

from logroute.records import (
    UNDEFINED,
    BufferedEntry,
    LogRecord,
    RecordBuilder,
    apply_redaction,
    build_preview,
    format_timestamp,
    maybe_capture_stack,
    normalize_stack_policy,
    stringify_for_preview,
)

FIXED = datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)


def fixed_clock():
    return FIXED


class TestStringify:
    def test_scalars(self):
        assert stringify_for_preview("plain text") == "plain text"
        assert stringify_for_preview(42) == "42"
        assert stringify_for_preview(1.5) == "1.5"
        assert stringify_for_preview(True) == "true"
        assert stringify_for_preview(False) == "false"
        assert stringify_for_preview(None) == "null"
        assert stringify_for_preview(UNDEFINED) == "undefined"

    def test_callables_and_symbols(self):
        assert stringify_for_preview(len) == "[function]"
        assert stringify_for_preview(lambda: None) == "[function]"
        assert stringify_for_preview(object()) == "[symbol]"

    def test_structured_values_use_compact_json(self):
        assert stringify_for_preview({"a": 1}) == '{"a":1}'
        assert stringify_for_preview([1, "two", None]) == '[1,"two",null]'
        assert stringify_for_preview({"name": "café"}) == '{"name":"café"}'

    def test_unserializable_values_fall_back(self):
        assert stringify_for_preview({1, 2}) == "[object]"
        circular = []
        circular.append(circular)
        assert stringify_for_preview(circular) == "[object]"

    def test_exceptions_render_type_and_message(self):
        assert stringify_for_preview(ValueError("boom")) == "ValueError: boom"


class TestBuildPreview:
    def test_joins_with_single_spaces(self):
        assert build_preview(["count", 42, {"a": 1}]) == 'count 42 {"a":1}'

    def test_empty_arguments(self):
        assert build_preview([]) == ""

    def test_stops_after_argument_crossing_limit(self):
        first, second, third = "a" * 200, "b" * 200, "c" * 10
        assert build_preview([first, second, third]) == f"{first} {second}"

    def test_long_single_argument_kept_whole(self):
        text = "x" * 1000
        assert build_preview([text, "tail"]) == text

    def test_exactly_at_limit_keeps_going(self):
        first = "a" * 300
        assert build_preview([first, "b"]) == f"{first} b"

    def test_unavailable_when_iteration_fails(self):
        class Exploding:
            def __iter__(self):
                raise RuntimeError("nope")

        assert build_preview(Exploding()) == "[unavailable]"


class TestRedaction:
    def test_no_redactor_keeps_arguments(self):
        assert apply_redaction(["a", 1], "info", "app") == ("a", 1)

    def test_redactor_receives_level_and_namespace(self):
        seen = {}

        def redactor(args, meta):
            seen.update(meta)
            return ["***" if arg == "secret" else arg for arg in args]

        result = apply_redaction(["token", "secret"], "warn", "auth", redactor)
        assert result == ("token", "***")
        assert seen == {"level": "warn", "namespace": "auth"}

    def test_redactor_may_change_length(self):
        assert apply_redaction(["a", "b", "c"], "info", "app", lambda args, meta: ["x"]) == ("x",)

    def test_failing_redactor_falls_back(self):
        def redactor(args, meta):
            raise RuntimeError("broken")

        assert apply_redaction(["keep"], "info", "app", redactor) == ("keep",)

    def test_non_sequence_result_falls_back(self):
        assert apply_redaction(["keep"], "info", "app", lambda args, meta: None) == ("keep",)
        assert apply_redaction(["keep"], "info", "app", lambda args, meta: "oops") == ("keep",)
        assert apply_redaction(["keep"], "info", "app", lambda args, meta: {"a": 1}) == ("keep",)


class TestStackCapture:
    def test_policies(self):
        assert maybe_capture_stack("error", "never") is None
        assert maybe_capture_stack("info", "on-error") is None
        assert "test_records.py" in maybe_capture_stack("info", "always")
        assert maybe_capture_stack("warn", "on-error")
        assert maybe_capture_stack("error", "on-error")

    def test_policy_aliases(self):
        assert normalize_stack_policy(True) == "always"
        assert normalize_stack_policy(False) == "never"
        assert normalize_stack_policy("error") == "on-error"
        assert normalize_stack_policy("sometimes") == "never"


class TestRecordBuilder:
    def test_build_record(self):
        builder = RecordBuilder(clock=fixed_clock)
        record = builder.build("info", "app", ["hello", 1], {"user": "u1"})

        assert isinstance(record, LogRecord)
        assert record.timestamp == "2024-01-02T03:04:05.678Z"
        assert record.level == "info"
        assert record.namespace == "app"
        assert record.raw_args == ("hello", 1)
        assert record.redacted_args == ("hello", 1)
        assert record.preview == "hello 1"
        assert record.stack is None
        assert dict(record.context) == {"user": "u1"}

    def test_preview_is_built_from_redacted_arguments(self):
        builder = RecordBuilder(
            redactor=lambda args, meta: [a if a != "hunter2" else "[redacted]" for a in args],
            clock=fixed_clock,
        )
        record = builder.build("info", "auth", ["password", "hunter2"])
        assert "hunter2" not in record.preview
        assert record.preview == "password [redacted]"
        assert record.raw_args == ("password", "hunter2")
        assert "hunter2" not in str(record.to_dict())

    def test_defaults_for_level_and_namespace(self):
        record = RecordBuilder(clock=fixed_clock).build("loud", "", [])
        assert record.level == "log"
        assert record.namespace == "global"

    def test_stack_attached_by_policy(self):
        builder = RecordBuilder(capture_stack="on-error", clock=fixed_clock)
        assert builder.build("info", "app", []).stack is None
        assert builder.build("error", "app", []).stack

    def test_entry_projection(self):
        record = RecordBuilder(clock=fixed_clock).build("warn", "db", ["slow", 1200])
        assert record.to_entry() == BufferedEntry(
            time="2024-01-02T03:04:05.678Z", level="warn", namespace="db", preview="slow 1200"
        )


class TestBufferedEntry:
    def test_from_dict_defaults(self):
        entry = BufferedEntry.from_dict({})
        assert entry.level == "log"
        assert entry.namespace == "global"
        assert entry.preview == ""
        assert entry.time.endswith("Z")

    def test_from_dict_coerces_to_strings(self):
        entry = BufferedEntry.from_dict({"time": "t", "level": "info", "namespace": "db", "preview": 5})
        assert entry.to_dict() == {"time": "t", "level": "info", "namespace": "db", "preview": "5"}

    def test_format_timestamp_treats_naive_as_utc(self):
        assert format_timestamp(datetime(2024, 5, 1, 12, 0, 0)) == "2024-05-01T12:00:00.000Z"
