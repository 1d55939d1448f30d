"""Structured logfmt logging with level filtering and context baggage."""

from __future__ import annotations

import enum
import json
import threading
from dataclasses import dataclass
from typing import Any, Iterable, Optional, TextIO

LEVEL_KEY = "level"
_MISSING_VALUE = "(MISSING)"
_WRITE_LOCK = threading.Lock()


class Level(str, enum.Enum):
    """Severity attached to a log record under the ``level`` key."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


def _pad(keyvals: tuple) -> tuple:
    if len(keyvals) % 2:
        return keyvals + (_MISSING_VALUE,)
    return keyvals


def _format_value(value: Any) -> str:
    if value is None:
        text = "null"
    elif isinstance(value, bool):
        text = "true" if value else "false"
    elif isinstance(value, Level):
        text = value.value
    else:
        text = str(value)
    if any(ch <= " " or ch in '="' or ch == "\ufffd" for ch in text):
        return json.dumps(text, ensure_ascii=False)
    return text


class Logger:
    """A logfmt logger writing one line per record to a text stream.

    Values in the logger's own context that are callables are evaluated
    each time a record is written. Records carrying a level that is not
    in ``allowed`` are dropped; records without a level always pass.
    """

    def __init__(
        self,
        stream: TextIO,
        keyvals: Iterable[Any] = (),
        allowed: Optional[Iterable[Level]] = None,
    ) -> None:
        self._stream = stream
        self._keyvals = _pad(tuple(keyvals))
        self._allowed = None if allowed is None else frozenset(Level(a) for a in allowed)

    def log(self, *args: Any) -> None:
        """Write one record made of the logger's context followed by ``args``."""
        context = tuple(
            value() if position % 2 and callable(value) else value
            for position, value in enumerate(self._keyvals)
        )
        record = context + _pad(args)
        keys = record[::2]
        values = record[1::2]
        if self._allowed is not None:
            for key, value in zip(keys, values):
                if key == LEVEL_KEY and isinstance(value, Level):
                    if value not in self._allowed:
                        return
                    break
        line = " ".join(f"{key}={_format_value(value)}" for key, value in zip(keys, values))
        with _WRITE_LOCK:
            self._stream.write(line + "\n")

    def with_(self, *args: Any) -> "Logger":
        """Return a logger whose context has ``args`` appended."""
        return Logger(self._stream, self._keyvals + _pad(args), self._allowed)

    def _with_prefix(self, *args: Any) -> "Logger":
        return Logger(self._stream, _pad(args) + self._keyvals, self._allowed)

    def filtered(self, allowed: Optional[Iterable[Level]]) -> "Logger":
        """Return a logger with the same context that only allows ``allowed`` levels."""
        return Logger(self._stream, self._keyvals, allowed)


class LevelLogger:
    """Wraps a logger with one method per severity."""

    def __init__(self, logger: Logger) -> None:
        self._logger = logger

    def log(self, *args: Any) -> None:
        self._logger.log(*args)

    def _at(self, level: Level, args: tuple) -> None:
        self._logger._with_prefix(LEVEL_KEY, level).log(*args)

    def debug(self, *args: Any) -> None:
        self._at(Level.DEBUG, args)

    def info(self, *args: Any) -> None:
        self._at(Level.INFO, args)

    def warn(self, *args: Any) -> None:
        self._at(Level.WARN, args)

    def error(self, *args: Any) -> None:
        self._at(Level.ERROR, args)


@dataclass(frozen=True)
class Context:
    """An immutable carrier of logging baggage."""

    baggage: tuple = ()


def baggage_from(ctx: Optional[Context]) -> tuple:
    """Return the key/value baggage carried by ``ctx``."""
    if ctx is None:
        return ()
    return ctx.baggage


class Provider:
    """Hands out loggers enriched with the baggage of a context."""

    def __init__(self, logger: Logger) -> None:
        self._logger = logger

    def for_(self, ctx: Optional[Context]) -> LevelLogger:
        """Return a level logger carrying the baggage of ``ctx``."""
        return LevelLogger(self._logger.with_(*baggage_from(ctx)))

    def context_with(self, ctx: Optional[Context], *args: Any) -> Context:
        """Return a new context with ``args`` appended to its baggage."""
        return Context(baggage=baggage_from(ctx) + args)

    def logger(self) -> Logger:
        """Return the underlying logger, for use where no context exists."""
        return self._logger