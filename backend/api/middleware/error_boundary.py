"""
Error boundaries for handlers.

Wraps a handler so any exception it raises becomes an empty 500 response:

    @error_boundary
    def handler(ctx): ...

    @checked_error_boundary
    def handler(ctx, checked): ...

On a fault the boundary:
1. Calls ctx.error_handler(error) if the request has one (reporting only)
2. Logs the error with traceback on 'api.middleware.error'
3. Returns 500 with no body, so internals never leak to clients

HTTP exceptions raised on purpose (abort(404), ...) are not faults; they go
to the app's HTTP error handlers. The boundary never re-raises.
"""

import functools
import inspect
import logging
from typing import Any, Callable

from flask import Response, current_app
from werkzeug.exceptions import HTTPException

from api.context import RequestContext


logger = logging.getLogger('api.middleware.error')

Handler = Callable[..., Any]


def default_error_handler(error: BaseException, ctx: RequestContext = None) -> Response:
    """Log a handler fault and build the empty 500 response."""
    request_id = ctx.request_id if ctx is not None else None
    path = ctx.request.path if ctx is not None else None
    logger.error(
        "Unhandled error: %s request_id=%s path=%s",
        error,
        request_id,
        path,
        exc_info=(type(error), error, error.__traceback__),
        extra={
            "event": "unhandled_error",
            "request_id": request_id,
            "error_type": type(error).__name__,
        },
    )
    return current_app.response_class(status=500)


def error_boundary(handler: Handler) -> Handler:
    """Guard a (ctx) handler."""
    return _guard(handler)


def checked_error_boundary(handler: Handler) -> Handler:
    """Guard a validated (ctx, checked) handler."""
    return _guard(handler)


def _guard(handler: Handler) -> Handler:
    if inspect.iscoroutinefunction(handler):
        @functools.wraps(handler)
        async def guarded_async(ctx: RequestContext, *args: Any) -> Any:
            try:
                return await handler(ctx, *args)
            except HTTPException as e:
                return current_app.handle_http_exception(e)
            except Exception as e:
                return _handle_fault(ctx, e)

        return guarded_async

    @functools.wraps(handler)
    def guarded(ctx: RequestContext, *args: Any) -> Any:
        try:
            return handler(ctx, *args)
        except HTTPException as e:
            return current_app.handle_http_exception(e)
        except Exception as e:
            return _handle_fault(ctx, e)

    return guarded


def _handle_fault(ctx: RequestContext, error: Exception) -> Response:
    callback = ctx.error_handler
    if callback is not None:
        try:
            callback(error)
        except Exception:
            logger.warning(
                "Request error callback failed request_id=%s",
                ctx.request_id,
                exc_info=True,
            )
    return default_error_handler(error, ctx)
