"""
Snippetbox Backend - Centralized Error Responses
=================================================

What:  Turns failures into safe HTTP responses.
Why:   Internal detail (tracebacks, SQL driver messages) must never reach a
       client, yet every server fault must be fully diagnosable from the log.
How:   `server_error` logs the exception with its traceback, attributed to
       the frame that raised it, and answers a bare 500. `client_error`
       answers the standard reason phrase for a status code.
Who:   Called by the exception handlers registered in main.py.

Response format (all errors):
    Content-Type: text/plain; charset=utf-8
    X-Content-Type-Options: nosniff
    Body: "<Reason Phrase>\\n", e.g. "Not Found\\n"
"""

import logging
import traceback
from http import HTTPStatus
from typing import Mapping, Optional

from fastapi.responses import PlainTextResponse

from snippetbox.middleware.request_id import request_id_var

logger = logging.getLogger("snippetbox.errors")


def client_error(
    status_code: int,
    headers: Optional[Mapping[str, str]] = None,
) -> PlainTextResponse:
    """Respond with the standard description of `status_code` as the body."""
    try:
        phrase = HTTPStatus(status_code).phrase
    except ValueError:
        phrase = "Error"

    response = PlainTextResponse(f"{phrase}\n", status_code=status_code, headers=headers)
    response.headers["X-Content-Type-Options"] = "nosniff"
    return response


def not_found() -> PlainTextResponse:
    return client_error(HTTPStatus.NOT_FOUND)


def server_error(exc: BaseException) -> PlainTextResponse:
    """
    Log `exc` with its full traceback and respond with a generic 500.

    The log record carries the file, line and function of the innermost
    traceback frame (where the error was raised), so the entry points at
    the code that detected the failure rather than at this module.
    """
    if logger.isEnabledFor(logging.ERROR):
        rid = request_id_var.get("")
        exc_info = (type(exc), exc, exc.__traceback__)
        frames = traceback.extract_tb(exc.__traceback__)
        if frames:
            origin = frames[-1]
            record = logger.makeRecord(
                logger.name,
                logging.ERROR,
                origin.filename,
                origin.lineno,
                "[%s] %s: %s",
                (rid, type(exc).__name__, exc),
                exc_info,
                func=origin.name,
            )
            logger.handle(record)
        else:
            # Never raised, so no traceback to point at; blame our caller
            logger.error(
                "[%s] %s: %s", rid, type(exc).__name__, exc,
                exc_info=exc_info, stacklevel=2,
            )

    return client_error(HTTPStatus.INTERNAL_SERVER_ERROR)
