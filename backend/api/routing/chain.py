"""
Handler chains.

A chain is the ordered list of handlers registered for one route. Each
handler receives the RequestContext and returns either:
- None: continue with the next handler
- a Flask response value: finish the request

This is the contract Flask uses for before_request functions. A chain that
runs out of handlers without a response falls through to 404.
"""

import logging
from typing import Any, Callable, FrozenSet, Iterable, Mapping, Optional, Sequence, Tuple

from flask import current_app
from werkzeug.exceptions import NotFound

from api.context import (
    RequestContext,
    current_context,
    declared_provides,
    declared_requires,
)


logger = logging.getLogger('api.routing')

Handler = Callable[..., Any]


class ChainCompositionError(TypeError):
    """A chain was registered that cannot be satisfied."""


def invoke(handler: Handler, *args: Any) -> Any:
    """Call a handler, running coroutine functions to completion."""
    return current_app.ensure_sync(handler)(*args)


def handler_name(handler: Handler) -> str:
    return getattr(handler, '__qualname__', None) or getattr(handler, '__name__', repr(handler))


def is_validating(handler: Handler) -> bool:
    return bool(getattr(handler, '__validates__', False))


def fold_context(
    handlers: Sequence[Handler],
    established: FrozenSet[str],
    where: str,
) -> FrozenSet[str]:
    """
    Walk a sequence of handlers, checking each one's requirements.

    Args:
        handlers: Handlers in execution order
        established: Fields known to be present before the first handler
        where: Description used in error messages (e.g. "POST /user")

    Returns:
        Fields established after the last handler

    Raises:
        ChainCompositionError: If a handler needs a field nothing provides
    """
    available = frozenset(established)
    for handler in handlers:
        missing = declared_requires(handler) - available
        if missing:
            raise ChainCompositionError(
                f"{where}: '{handler_name(handler)}' requires "
                f"{', '.join(sorted(missing))}, which no earlier middleware provides"
            )
        available |= declared_provides(handler)
    return available


class Chain:
    """View function running an ordered list of handlers."""

    def __init__(self, handlers: Iterable[Handler], established: FrozenSet[str] = frozenset(),
                 where: str = "route", positions: Optional[Mapping[Any, int]] = None):
        self.handlers: Tuple[Handler, ...] = tuple(handlers)
        if not self.handlers:
            raise ChainCompositionError(f"{where}: a route needs at least one handler")
        if is_validating(self.handlers[0]) and len(self.handlers) == 1:
            raise ChainCompositionError(
                f"{where}: validating entry point '{handler_name(self.handlers[0])}' "
                "must be followed by at least one handler"
            )
        self.where = where
        # Registration position per enclosing router, innermost first
        self.positions: Mapping[Any, int] = dict(positions or {})
        self.established = fold_context(self.handlers, established, where)
        self.requires = frozenset().union(*(declared_requires(h) for h in self.handlers))
        self.provides = frozenset().union(*(declared_provides(h) for h in self.handlers))
        self.__name__ = getattr(self.handlers[-1], '__name__', 'chain')
        self.__doc__ = getattr(self.handlers[-1], '__doc__', None)

    def __call__(self, **view_args: Any) -> Any:
        ctx = current_context()
        return self.run(ctx)

    def run(self, ctx: RequestContext) -> Any:
        rv = run_handlers(self.handlers, ctx)
        if rv is not None:
            return rv

        logger.debug("Chain %s finished without a response", self.where)
        raise NotFound()

    def __repr__(self) -> str:
        names = ", ".join(handler_name(h) for h in self.handlers)
        return f"<Chain {self.where} [{names}]>"


def run_handlers(handlers: Sequence[Handler], ctx: RequestContext) -> Optional[Any]:
    """Run handlers in order; the first non-None return finishes the request."""
    for handler in handlers:
        needed = declared_requires(handler)
        if needed:
            ctx.require(*needed, handler_name=handler_name(handler))
        rv = invoke(handler, ctx)
        if rv is not None:
            return rv
    return None
