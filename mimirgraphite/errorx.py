"""Error kinds that map onto HTTP status codes and gRPC statuses."""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from http import HTTPStatus
from typing import Any, ClassVar, Iterator, List, Optional, Union


class Code(enum.IntEnum):
    """gRPC status codes."""

    OK = 0
    CANCELED = 1
    UNKNOWN = 2
    INVALID_ARGUMENT = 3
    DEADLINE_EXCEEDED = 4
    NOT_FOUND = 5
    ALREADY_EXISTS = 6
    PERMISSION_DENIED = 7
    RESOURCE_EXHAUSTED = 8
    FAILED_PRECONDITION = 9
    ABORTED = 10
    OUT_OF_RANGE = 11
    UNIMPLEMENTED = 12
    INTERNAL = 13
    UNAVAILABLE = 14
    DATA_LOSS = 15
    UNAUTHENTICATED = 16

    def __str__(self) -> str:
        if self is Code.OK:
            return "OK"
        return "".join(part.capitalize() for part in self.name.split("_"))


class ErrorxType(enum.IntEnum):
    """Error kind carried in the details of a gRPC status."""

    UNKNOWN = 0
    INTERNAL = 1
    BAD_REQUEST = 2
    REQUIRES_PROXY_REQUEST = 3
    RATE_LIMITED = 4
    DISABLED = 5
    UNIMPLEMENTED = 6
    UNPROCESSABLE_ENTITY = 7
    CONFLICT = 8
    TOO_MANY_REQUESTS = 9
    UNSUPPORTED_MEDIA_TYPE = 10
    REQUEST_TIMEOUT = 11


@dataclass(frozen=True)
class ErrorDetails:
    """Status detail naming the error kind, and a reason for proxy requests."""

    type: Union[ErrorxType, int] = ErrorxType.UNKNOWN
    reason: str = ""


@dataclass(frozen=True)
class Status:
    """A gRPC status: a code, a message and any attached details."""

    code: Code
    message: str = ""
    details: tuple = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "code", Code(self.code))
        object.__setattr__(self, "details", tuple(self.details))

    def with_details(self, *details: Any) -> "Status":
        """Return a copy with ``details`` appended; an OK status takes none."""
        if self.code is Code.OK:
            raise ValueError("no error details for status with code OK")
        return replace(self, details=self.details + details)


class Canceled(Exception):
    """The operation was canceled by its caller."""

    def __init__(self, msg: str = "context canceled") -> None:
        super().__init__(msg)


def _chain(err: Optional[BaseException]) -> Iterator[BaseException]:
    seen = set()
    while err is not None and id(err) not in seen:
        seen.add(id(err))
        yield err
        err = err.__cause__


class ErrorxError(Exception):
    """Base of all error kinds; reports an internal error unless overridden."""

    http_status: ClassVar[int] = HTTPStatus.INTERNAL_SERVER_ERROR
    grpc_code: ClassVar[Code] = Code.INTERNAL
    errorx_type: ClassVar[ErrorxType] = ErrorxType.INTERNAL
    _wraps: ClassVar[bool] = True

    def __init__(self, msg: str = "", err: Optional[BaseException] = None) -> None:
        super().__init__(msg)
        self.msg = msg
        self.err = err
        if err is not None:
            self.__cause__ = err

    def __str__(self) -> str:
        if self.err is not None:
            return f"{self.msg}: {self.err}"
        return self.msg

    def message(self) -> str:
        """The message without any wrapped error."""
        return self.msg

    def unwrap(self) -> Optional[BaseException]:
        """The wrapped error, if any."""
        return self.err

    def http_status_code(self) -> int:
        return int(self.http_status)

    def grpc_status(self) -> Status:
        return with_errorx_type_detail(Status(self.grpc_code, str(self)), *self.grpc_status_details())

    def grpc_status_details(self) -> List[ErrorDetails]:
        return [ErrorDetails(type=self.errorx_type)]


class Internal(ErrorxError):
    """An unexpected failure inside the service."""


class BadRequest(ErrorxError):
    http_status = HTTPStatus.BAD_REQUEST
    grpc_code = Code.INVALID_ARGUMENT
    errorx_type = ErrorxType.BAD_REQUEST


class RequiresProxyRequest(ErrorxError):
    """The request cannot be served locally and must be forwarded to a proxy.

    ``reason`` should be low cardinality; it labels metrics.
    """

    http_status = HTTPStatus.BAD_REQUEST
    grpc_code = Code.NOT_FOUND
    errorx_type = ErrorxType.REQUIRES_PROXY_REQUEST

    def __init__(self, msg: str = "", err: Optional[BaseException] = None, reason: str = "") -> None:
        super().__init__(msg, err)
        self.reason = reason

    def grpc_status_details(self) -> List[ErrorDetails]:
        return [ErrorDetails(type=self.errorx_type, reason=self.reason)]


class Disabled(ErrorxError):
    http_status = HTTPStatus.NOT_IMPLEMENTED
    grpc_code = Code.UNAVAILABLE
    errorx_type = ErrorxType.DISABLED
    _wraps = False

    def __init__(self) -> None:
        super().__init__("")

    def __str__(self) -> str:
        return "disabled"

    def message(self) -> str:
        return "feature disabled"


class Unimplemented(ErrorxError):
    http_status = HTTPStatus.NOT_IMPLEMENTED
    grpc_code = Code.UNIMPLEMENTED
    errorx_type = ErrorxType.UNIMPLEMENTED
    _wraps = False


class UnprocessableEntity(ErrorxError):
    http_status = HTTPStatus.UNPROCESSABLE_ENTITY
    grpc_code = Code.INVALID_ARGUMENT
    errorx_type = ErrorxType.UNPROCESSABLE_ENTITY
    _wraps = False


class Conflict(ErrorxError):
    http_status = HTTPStatus.CONFLICT
    grpc_code = Code.ABORTED
    errorx_type = ErrorxType.CONFLICT


class UnsupportedMediaType(ErrorxError):
    http_status = HTTPStatus.UNSUPPORTED_MEDIA_TYPE
    grpc_code = Code.UNIMPLEMENTED
    errorx_type = ErrorxType.UNSUPPORTED_MEDIA_TYPE


class TooManyRequests(ErrorxError):
    http_status = HTTPStatus.TOO_MANY_REQUESTS
    grpc_code = Code.RESOURCE_EXHAUSTED
    errorx_type = ErrorxType.TOO_MANY_REQUESTS


class RequestTimeout(ErrorxError):
    http_status = HTTPStatus.REQUEST_TIMEOUT
    grpc_code = Code.DEADLINE_EXCEEDED
    errorx_type = ErrorxType.REQUEST_TIMEOUT


_KIND_BY_TYPE = {
    ErrorxType.INTERNAL: Internal,
    ErrorxType.BAD_REQUEST: BadRequest,
    ErrorxType.RATE_LIMITED: TooManyRequests,
    ErrorxType.UNIMPLEMENTED: Unimplemented,
    ErrorxType.UNPROCESSABLE_ENTITY: UnprocessableEntity,
    ErrorxType.CONFLICT: Conflict,
    ErrorxType.TOO_MANY_REQUESTS: TooManyRequests,
    ErrorxType.UNSUPPORTED_MEDIA_TYPE: UnsupportedMediaType,
    ErrorxType.REQUEST_TIMEOUT: RequestTimeout,
}


def from_grpc_status(status: Status) -> Optional[BaseException]:
    """Convert a status into an error, or ``None`` for OK.

    The error kind comes from the attached :class:`ErrorDetails`, not from the
    status code; a status without details becomes :class:`Internal`.
    """
    if status.code is Code.OK:
        return None
    if status.code is Code.CANCELED:
        return Canceled()
    msg = f"grpc {status.code}: {status.message}"
    for detail in status.details:
        if not isinstance(detail, ErrorDetails):
            continue
        try:
            kind = ErrorxType(detail.type)
        except ValueError:
            return Internal("invalid errorx type specifier. " + msg)
        if kind is ErrorxType.UNKNOWN:
            return Internal("unknown errorx type specifier. " + msg)
        if kind is ErrorxType.REQUIRES_PROXY_REQUEST:
            return RequiresProxyRequest(msg, reason=detail.reason)
        if kind is ErrorxType.DISABLED:
            return Disabled()
        return _KIND_BY_TYPE[kind](msg)
    return Internal("missing errorx type specifier. " + msg)


def with_errorx_type_detail(status: Status, *args: Any) -> Status:
    """Attach details to ``status``; on failure return an internal status instead."""
    try:
        return status.with_details(*args)
    except ValueError as exc:
        return Status(Code.INTERNAL, str(exc))


def error_as_grpc_status(err: BaseException) -> Status:
    """Build a status from any error.

    If an error kind of this module is found in the cause chain, its code and
    details are used with the message of the outermost error. Other errors
    become :attr:`Code.UNKNOWN`.
    """
    errx = next((e for e in _chain(err) if isinstance(e, ErrorxError)), None)
    if errx is None:
        return Status(Code.UNKNOWN, str(err))
    status = Status(errx.grpc_status().code, str(err))
    try:
        return status.with_details(*errx.grpc_status_details())
    except ValueError as exc:
        return Status(
            Code.INTERNAL,
            f"problem encoding Details of underlying errorx.Error: {exc}",
        )


def try_unwrap(err: BaseException) -> Optional[BaseException]:
    """Return the error wrapped by ``err``, or ``err`` if it wraps nothing."""
    if isinstance(err, ErrorxError):
        return err.unwrap() if err._wraps else err
    if err.__cause__ is not None:
        return err.__cause__
    return err