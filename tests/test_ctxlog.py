import io

from mimirgraphite.ctxlog import (
    Context,
    Level,
    LevelLogger,
    Logger,
    Provider,
    baggage_from,
)


def _pairs(text):
    lines = text.splitlines()
    assert len(lines) == 1
    return [tuple(token.split("=", 1)) for token in lines[0].split(" ")]


def test_log_writes_pairs_in_order():
    buf = io.StringIO()
    Logger(buf).log("msg", "hello", "n", 3)
    assert _pairs(buf.getvalue()) == [("msg", "hello"), ("n", "3")]


def test_value_with_space_is_quoted():
    buf = io.StringIO()
    Logger(buf).log("msg", "a b")
    assert buf.getvalue() == 'msg="a b"\n'


def test_odd_keyvals_get_missing_marker():
    buf = io.StringIO()
    Logger(buf).log("msg", "x", "dangling")
    assert _pairs(buf.getvalue())[-1] == ("dangling", "(MISSING)")


def test_level_filter_drops_disallowed_levels():
    buf = io.StringIO()
    logger = LevelLogger(Logger(buf, allowed={Level.WARN, Level.ERROR}))
    logger.info("msg", "quiet")
    logger.debug("msg", "quiet")
    assert buf.getvalue() == ""
    logger.warn("msg", "loud")
    assert _pairs(buf.getvalue()) == [("level", Level.WARN.value), ("msg", "loud")]


def test_records_without_level_pass_filter():
    buf = io.StringIO()
    Logger(buf, allowed=set()).log("msg", "plain")
    assert _pairs(buf.getvalue()) == [("msg", "plain")]


def test_empty_allowed_set_drops_leveled_records():
    buf = io.StringIO()
    LevelLogger(Logger(buf, allowed=())).error("msg", "boom")
    assert buf.getvalue() == ""


def test_callable_context_values_are_evaluated_per_record():
    buf = io.StringIO()
    counter = iter(range(10))
    logger = Logger(buf).with_("n", lambda: next(counter))
    logger.log("msg", "a")
    logger.log("msg", "b")
    first, second = buf.getvalue().splitlines()
    assert first.startswith("n=0 ")
    assert second.startswith("n=1 ")


def test_filtered_returns_independent_logger():
    buf = io.StringIO()
    base = Logger(buf).with_("component", "x")
    strict = base.filtered({Level.ERROR})
    LevelLogger(strict).info("msg", "dropped")
    assert buf.getvalue() == ""
    LevelLogger(base).info("msg", "kept")
    assert _pairs(buf.getvalue()) == [
        ("level", Level.INFO.value),
        ("component", "x"),
        ("msg", "kept"),
    ]


def test_context_with_appends_and_keeps_original():
    provider = Provider(Logger(io.StringIO()))
    first = provider.context_with(Context(), "a", 1)
    second = provider.context_with(first, "b", 2)
    assert baggage_from(first) == ("a", 1)
    assert baggage_from(second) == ("a", 1, "b", 2)


def test_baggage_from_empty_context():
    assert baggage_from(Context()) == ()
    assert baggage_from(None) == ()


def test_for_includes_baggage_after_level():
    buf = io.StringIO()
    provider = Provider(Logger(buf))
    ctx = provider.context_with(None, "traceID", "abc")
    provider.for_(ctx).info("msg", "hi")
    assert _pairs(buf.getvalue()) == [
        ("level", Level.INFO.value),
        ("traceID", "abc"),
        ("msg", "hi"),
    ]


def test_provider_logger_returns_underlying():
    logger = Logger(io.StringIO())
    assert Provider(logger).logger() is logger