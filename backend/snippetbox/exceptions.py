"""
Snippetbox Backend - Custom Exception Hierarchy
================================================

What:  Application-specific exceptions for the failure kinds a request can hit.
Why:   Callers branch on the exception *type*, never on message text, so
       "no such snippet" can never be mistaken for "database unreachable".
How:   Each exception carries a message and optional context dict. Global
       exception handlers (registered in main.py) turn them into responses
       through `snippetbox.error_responses`.

Exception Hierarchy:
    SnippetboxError (base)              → 500, logged with traceback
    ├── ClientInputError                → status_code (default 400), no traceback
    │   └── NotFoundError               → 404
    ├── StorageError                    → 500, logged with traceback
    ├── StorageInitError                → fatal at startup
    └── TemplateRenderError             → 500, logged with traceback
"""

from typing import Any, Dict, Mapping, Optional


class SnippetboxError(Exception):
    """
    Base exception for all Snippetbox application errors.

    Attributes:
        message:  Diagnostic description (logged server-side, never sent to clients)
        context:  Additional debug info (logged, never sent to clients)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ClientInputError(SnippetboxError):
    """
    The caller violated the protocol (bad method, malformed input).

    Not a bug on our side: answered with `status_code` and the standard
    reason phrase, logged without a stack trace.
    """

    status_code: int = 400

    def __init__(
        self,
        message: str = "Bad request",
        status_code: Optional[int] = None,
        headers: Optional[Mapping[str, str]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        if status_code is not None:
            self.status_code = status_code
        self.headers = dict(headers) if headers else None


class NotFoundError(ClientInputError):
    """
    No live record matches the request.

    Raised for absent ids, expired snippets, and malformed or non-positive
    ids alike, so the response never reveals which one it was.
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "snippet",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"no matching {resource} found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            message = f"no matching {resource} found for id {resource_id!r}"
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class StorageError(SnippetboxError):
    """
    A query, insert, or cursor read failed at runtime.

    The message keeps the driver's text for the server log; clients only
    ever see a generic 500. The driver exception is chained as __cause__.
    """

    def __init__(
        self,
        message: str = "storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StorageInitError(SnippetboxError):
    """
    The repository could not prepare its statements at startup.

    Fatal: without its statements the application cannot serve any request,
    so the lifespan handler logs it and lets the process exit.
    """

    def __init__(
        self,
        message: str = "could not prepare snippet statements",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class TemplateRenderError(SnippetboxError):
    """A page template could not be loaded or rendered."""

    def __init__(
        self,
        template: str,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["template"] = template
        super().__init__(
            message=message or f"could not render template '{template}'",
            context=ctx,
        )
