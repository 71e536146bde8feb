"""
Per-request context.

Every handler receives a RequestContext as its first argument. It carries:
- the Flask request
- a request id (X-Request-ID header, or a generated UUID)
- an optional error callback used by error boundaries
- named fields established by middleware earlier in the chain

Handlers declare the fields they read with @requires and middleware declares
the fields it sets with @provides. Routers check those declarations when a
chain is registered, and the chain re-checks them before each handler runs.
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, FrozenSet, Optional

from flask import Request, g, request


REQUEST_ID_HEADER = 'X-Request-ID'

ErrorCallback = Callable[[BaseException], None]


class MissingContextError(RuntimeError):
    """A handler ran without a field it declared as required."""

    def __init__(self, missing, handler_name: Optional[str] = None):
        self.missing = tuple(sorted(missing))
        self.handler_name = handler_name
        target = f" for '{handler_name}'" if handler_name else ""
        super().__init__(
            f"Request context is missing {', '.join(self.missing)}{target}"
        )


@dataclass
class RequestContext:
    """Request-scoped state passed explicitly to every handler."""
    request: Request
    request_id: str
    error_handler: Optional[ErrorCallback] = None
    state: Dict[str, Any] = field(default_factory=dict)

    def provide(self, name: str, value: Any) -> None:
        """Establish a named field for handlers later in the chain."""
        self.state[name] = value

    def require(self, *names: str, handler_name: Optional[str] = None) -> None:
        """
        Assert that fields are present.

        Raises:
            MissingContextError: If any name was never provided
        """
        missing = [name for name in names if name not in self.state]
        if missing:
            raise MissingContextError(missing, handler_name)

    def get(self, name: str, default: Any = None) -> Any:
        return self.state.get(name, default)

    def __getitem__(self, name: str) -> Any:
        try:
            return self.state[name]
        except KeyError:
            raise MissingContextError([name]) from None

    def __contains__(self, name: str) -> bool:
        return name in self.state


def current_context() -> RequestContext:
    """
    Get the context for the current request, creating it on first use.

    Must be called inside a Flask request context.
    """
    ctx = g.get('request_context')
    if ctx is None:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        ctx = RequestContext(request=request._get_current_object(), request_id=request_id)
        g.request_context = ctx
    return ctx


def provides(*names: str):
    """Declare the context fields a middleware establishes."""
    def decorator(fn):
        fn.__provides__ = declared_provides(fn) | frozenset(names)
        return fn
    return decorator


def requires(*names: str):
    """Declare the context fields a handler reads."""
    def decorator(fn):
        fn.__requires__ = declared_requires(fn) | frozenset(names)
        return fn
    return decorator


def declared_provides(fn) -> FrozenSet[str]:
    return frozenset(getattr(fn, '__provides__', ()))


def declared_requires(fn) -> FrozenSet[str]:
    return frozenset(getattr(fn, '__requires__', ()))
