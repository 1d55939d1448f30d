"""Turn internal errors into conservative HTTP error responses."""

from __future__ import annotations

from dataclasses import dataclass
from http import HTTPStatus

from mimirgraphite.ctxlog import LevelLogger, Logger
from mimirgraphite.errorx import Canceled, ErrorxError, _chain, try_unwrap

HTTP_STATUS_CANCELED = 499


@dataclass(frozen=True)
class HTTPErrorResponse:
    """Status code and plain-text message of an error response."""

    code: int
    message: str
    content_type: str = "text/plain; charset=utf-8"

    @property
    def body(self) -> str:
        return self.message + "\n"


def log_and_set_http_error(logger: Logger, err: BaseException) -> HTTPErrorResponse:
    """Log ``err`` and build the response to send for it.

    Only messages of this package's error kinds reach the response; anything
    else is reported with a fixed message so internal details do not leak.
    """
    log = LevelLogger(logger)
    chain = list(_chain(err))

    if any(isinstance(e, Canceled) for e in chain):
        code = HTTP_STATUS_CANCELED
        log.error("msg", "canceled", "response_code", code, "err", err)
        return HTTPErrorResponse(code, "request canceled")

    errx = next((e for e in chain if isinstance(e, ErrorxError)), None)
    if errx is not None:
        code = errx.http_status_code()
        report = log.warn if code == HTTPStatus.BAD_REQUEST else log.error
        report("msg", errx.message(), "response_code", code, "err", try_unwrap(errx))
        return HTTPErrorResponse(code, errx.message())

    code = int(HTTPStatus.INTERNAL_SERVER_ERROR)
    log.error("msg", "unknown error", "response_code", code, "err", err)
    return HTTPErrorResponse(code, "unknown error")