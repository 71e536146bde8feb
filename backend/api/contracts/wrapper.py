"""
Validated handlers.

check_request(shape, handler, on_error=None) adapts a handler that wants a
validated value into a plain chain handler:

    def create_user(ctx, checked):
        return {"name": checked.body.name}, 201

    router.post("/user", check_request(CreateUser, create_user))

On each request the adapter:
1. Collects the query/params/body/header facets
2. Validates them against the shape
3. On failure, calls on_error(ctx, messages) if given, otherwise answers
   400 {"errors": [...]} with the messages in validator order
4. On success, returns handler(ctx, value) untouched

validate(shape) is the chain-middleware form: it stores the validated
facets on the context (ctx["body"], ...) and lets the chain continue.
"""

import functools
import logging
from typing import Any, Callable, List, Optional, Type

from flask import jsonify

from api.context import RequestContext
from api.routing.chain import invoke
from .facets import collect_facets
from .shape import RequestShape
from .validate import Failure, Validator, check, validate_request


logger = logging.getLogger('api.contracts')

CheckedHandler = Callable[[RequestContext, Any], Any]
FailureHandler = Callable[[RequestContext, List[str]], Any]


def check_request(
    shape: Type[RequestShape],
    handler: CheckedHandler,
    on_error: Optional[FailureHandler] = None,
    *,
    validator: Validator = validate_request,
) -> Callable[[RequestContext], Any]:
    """
    Wrap a (ctx, checked) handler with request validation.

    Args:
        shape: RequestShape describing the expected request
        handler: Called with the validated shape instance on success
        on_error: Optional (ctx, messages) handler replacing the default 400
        validator: Validation capability (pydantic by default)

    Returns:
        A (ctx) handler usable in any chain
    """
    checker = check(shape, validator)

    @functools.wraps(handler)
    def adapter(ctx: RequestContext) -> Any:
        outcome = checker(collect_facets(ctx.request))
        if isinstance(outcome, Failure):
            return _reject(ctx, shape, outcome.messages, on_error)
        return invoke(handler, ctx, outcome.value)

    return adapter


def validate(
    shape: Type[RequestShape],
    on_error: Optional[FailureHandler] = None,
    *,
    validator: Validator = validate_request,
) -> Callable[[RequestContext], Any]:
    """
    Chain middleware validating the request against shape.

    On success each declared facet is provided on the context under its
    facet name and the chain continues. A route using it as entry point must
    list at least one more handler.
    """
    checker = check(shape, validator)
    facets = shape.facets()

    def middleware(ctx: RequestContext) -> Any:
        outcome = checker(collect_facets(ctx.request))
        if isinstance(outcome, Failure):
            return _reject(ctx, shape, outcome.messages, on_error)
        for facet in facets:
            ctx.provide(facet, getattr(outcome.value, facet))
        return None

    middleware.__name__ = f"validate_{shape.__name__}"
    middleware.__qualname__ = middleware.__name__
    middleware.__provides__ = frozenset(facets)
    middleware.__validates__ = True
    return middleware


def _reject(
    ctx: RequestContext,
    shape: Type[RequestShape],
    messages: List[str],
    on_error: Optional[FailureHandler],
) -> Any:
    logger.info(
        "Request validation failed: shape=%s path=%s errors=%d request_id=%s",
        shape.__name__,
        ctx.request.path,
        len(messages),
        ctx.request_id,
        extra={
            "event": "validation_failed",
            "shape": shape.__name__,
            "request_id": ctx.request_id,
        },
    )
    if on_error is not None:
        return invoke(on_error, ctx, messages)
    return jsonify(errors=messages), 400
