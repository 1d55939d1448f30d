# mimirgraphite

Small, dependency-free building blocks for services that serve Graphite data
from Mimir. Everything here is plain library code; the package installs no
commands.

## What is inside

### `mimirgraphite.ctxlog` — structured logfmt logging

- `Logger(stream, keyvals=(), allowed=None)` writes one `key=value` line per
  record to a text stream. Values that contain spaces, `=` or `"` are quoted.
  Callable values in the logger's own context are evaluated at each write.
  An odd number of arguments is padded with `(MISSING)`.
- `Logger.with_(*keyvals)` returns a logger with extra context appended;
  `Logger.filtered(allowed)` returns one that drops records whose `level` is
  not in `allowed` (records without a level always pass; `None` allows all).
- `Level` is the set of severities: `DEBUG`, `INFO`, `WARN`, `ERROR`.
- `LevelLogger(logger)` adds `debug`, `info`, `warn` and `error` methods,
  each putting `level=<severity>` at the front of the record.
- `Context` is an immutable carrier of key/value baggage.
  `Provider(logger)` builds new contexts with `context_with(ctx, *keyvals)`
  and hands out a `LevelLogger` carrying a context's baggage with
  `for_(ctx)`; `logger()` returns the underlying logger.
  `baggage_from(ctx)` reads the baggage back (empty for `None`).

### `mimirgraphite.errorx` — typed errors with gRPC and HTTP mapping

- Error kinds, all subclasses of `ErrorxError`: `Internal`, `BadRequest`,
  `RequiresProxyRequest` (with a `reason`), `Disabled`, `Unimplemented`,
  `UnprocessableEntity`, `Conflict`, `UnsupportedMediaType`,
  `TooManyRequests`, `RequestTimeout`. Each has `message()`, `unwrap()`,
  `http_status_code()`, `grpc_status()` and `grpc_status_details()`.
  `str(err)` is `"<msg>: <wrapped error>"` when an error is wrapped.
- `Status`, `Code`, `ErrorxType` and `ErrorDetails` model a gRPC status and
  the detail that names the error kind. `Canceled` stands for a canceled
  operation.
- `error_as_grpc_status(err)` builds a `Status` from any exception (using the
  first error kind found in its `__cause__` chain, otherwise `Code.UNKNOWN`);
  `from_grpc_status(status)` turns it back into an error, chosen by the
  attached `ErrorDetails` — `None` for OK, `Canceled` for a canceled status,
  `Internal` when the detail is missing or unknown.
- `with_errorx_type_detail(status, *details)` and `try_unwrap(err)` are the
  helpers behind these.

### `mimirgraphite.http_translator` — safe HTTP error responses

`log_and_set_http_error(logger, err)` logs `err` and returns an
`HTTPErrorResponse` (`code`, `message`, `content_type`, and `body`, which is
the message plus a newline). Cancellation gives 499 "request canceled"; an
error kind gives its own status code and `message()` (logged at warn level
for 400, error level otherwise); anything else gives 500 "unknown error", so
internal details do not reach the client.

### `mimirgraphite.appcommon` — configuration and lifecycle

- `Config` holds `instrument_buckets`, `enable_auth` and `service_name`.
  `register_flags(parser)` and `register_flags_with_prefix(prefix, parser)`
  add `--instrument-buckets`, `--auth.enable` and `--service-name` to an
  `argparse` parser (a prefix gets a trailing `.` if it lacks one); parsed
  values are stored on the config object as well as in the namespace.
- `parse_floats(text)` reads a comma-separated list of floats, raising
  `ValueError` for an empty string or a bad value.
- `App(closers)` runs every closer on `close()` (or on leaving a `with`
  block) and raises one `AppError` listing every failure, formatted as
  `error 1: ..., error 2: ...`.

### `mimirgraphite.converter_cli` — converter argument helpers

- `parse_custom_labels(arg)` turns a CSV string of alternating names and
  values (`"env,prod,site,a"`) into a tuple of `(name, value)` pairs sorted
  by name; an odd number of strings or malformed CSV raises `ValueError`.
- `date_range(start, end)` lists every day from `start` to `end` inclusive,
  accepting `YYYY-MM-DD` strings or dates, and raises `ValueError` for a bad
  date or an end before the start.

## Example

```python
import sys

from mimirgraphite.ctxlog import Context, Level, Logger, Provider
from mimirgraphite.errorx import BadRequest, error_as_grpc_status, from_grpc_status
from mimirgraphite.http_translator import log_and_set_http_error

logger = Logger(sys.stderr, (), {Level.INFO, Level.WARN, Level.ERROR})
provider = Provider(logger)
ctx = provider.context_with(Context(), "request_id", "abc123")
provider.for_(ctx).info("msg", "handling request")
# level=info request_id=abc123 msg="handling request"

err = BadRequest("invalid target")
restored = from_grpc_status(error_as_grpc_status(err))
print(restored.message())          # grpc InvalidArgument: invalid target

response = log_and_set_http_error(logger, err)
print(response.code, response.body, end="")   # 400 invalid target
```

## What this package does not do

- It does not convert Whisper files into Mimir blocks: there is no
  converter command and no file listing, date-range scanning or block
  writing — only the argument helpers in `converter_cli`.
- It runs no HTTP or gRPC server, middleware, tracing or metrics; `Config`
  only registers and stores flags, and `App` only manages closers.
- `Status` is a plain data model; nothing here talks to a gRPC library.

## Tests

The test suite uses pytest, available through the `test` extra.