"""
Typed router facade over Flask blueprints.

TypedRouter is a Blueprint with three additions:
- child(prefix): create a sub-router nested under a path prefix
- use(...): router-level middleware run before every chain of the router
- get/put/post/patch/delete(rule, *handlers): register handler chains

Registration and dispatch stay Flask's. What the facade adds is context
tracking: every router knows which context fields its middleware establishes,
and each chain is checked against them when it is registered. A handler that
reads a field nothing earlier provides fails at import time, not mid-request.

Usage:
    router = TypedRouter("api", __name__)
    router.use(load_user)                       # @provides("user")

    admin = router.child("/admin")
    admin.get("/stats", require_admin, stats)   # require_admin: @requires("user")

    @router.get("/ping")
    def ping(ctx):
        return {"status": "ok"}
"""

import itertools
import logging
import re
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from flask import Blueprint, current_app, request
from flask.blueprints import BlueprintSetupState

from api.context import current_context, declared_provides
from .chain import Chain, ChainCompositionError, Handler, fold_context, run_handlers


logger = logging.getLogger('api.routing')

_NON_WORD = re.compile(r"[^0-9A-Za-z]+")


class TypedRouter(Blueprint):
    """Flask blueprint that tracks established request context fields."""

    def __init__(self, name: str, import_name: str, *, context=(), **options: Any):
        super().__init__(name, import_name, **options)
        self.context_fields: FrozenSet[str] = frozenset(context)
        self._middleware: List[Tuple[int, Optional[str], Handler]] = []
        self._children: Dict[str, "TypedRouter"] = {}
        self._mount_prefixes: List[str] = []
        # One counter per router orders its middleware, chains and children
        self._order = itertools.count(1)
        self._parent: Optional["TypedRouter"] = None
        self._position: Optional[int] = None
        self.record(self._remember_mount)
        self.before_request(self._run_middleware)

    # ------------------------------------------------------------------
    # Tree
    # ------------------------------------------------------------------

    def child(self, prefix: str) -> "TypedRouter":
        """
        Create a sub-router mounted under prefix.

        The child starts with the context fields this router has established
        so far. Requests to prefix + subpath reach the child's handler for
        subpath; subpath alone does not.
        """
        sub = TypedRouter(self._child_name(prefix), self.import_name, context=self.context_fields)
        sub._parent = self
        sub._position = next(self._order)
        self.register_blueprint(sub, url_prefix=prefix)
        self._children[sub.name] = sub
        return sub

    def _child_name(self, prefix: str) -> str:
        base = _NON_WORD.sub("_", prefix).strip("_") or "child"
        name = base
        index = 1
        while name in self._children:
            index += 1
            name = f"{base}_{index}"
        return name

    # ------------------------------------------------------------------
    # Middleware
    # ------------------------------------------------------------------

    def use(self, *middleware: Any) -> "TypedRouter":
        """
        Add router-level middleware.

        use(mw1, mw2) runs for every chain of this router and its children
        registered after this call. use("/prefix", mw) runs only for rules
        under /prefix.

        Returns:
            The router, so calls can chain

        Raises:
            ChainCompositionError: If middleware needs fields not yet provided
        """
        prefix: Optional[str] = None
        if middleware and isinstance(middleware[0], str):
            prefix, middleware = middleware[0], middleware[1:]
        if not middleware:
            raise ChainCompositionError(f"{self.name}: use() needs at least one middleware")

        where = f"{self.name} use({prefix})" if prefix else f"{self.name} use()"
        established = fold_context(middleware, self._context_for(prefix or "/"), where)
        self._middleware.extend((next(self._order), prefix, mw) for mw in middleware)
        if prefix is None:
            self.context_fields = established
        return self

    def _run_middleware(self) -> Optional[Any]:
        if not self._middleware:
            return None
        rule = self._relative_rule()
        position = self._matched_position()
        active = [
            mw for order, prefix, mw in self._middleware
            if (position is None or order < position)
            and (prefix is None or (rule is not None and _is_under(rule, prefix)))
        ]
        return run_handlers(active, current_context())

    def _matched_position(self) -> Optional[int]:
        """Where the matched chain (or the child holding it) sits in this router."""
        view = current_app.view_functions.get(request.endpoint)
        return getattr(view, 'positions', {}).get(self)

    def _lineage(self, position: int) -> Dict["TypedRouter", int]:
        positions = {}
        router: Optional[TypedRouter] = self
        while router is not None:
            positions[router] = position
            position = router._position
            router = router._parent
        return positions

    def _context_for(self, rule: str) -> FrozenSet[str]:
        fields = set(self.context_fields)
        for _, prefix, mw in self._middleware:
            if prefix is not None and _is_under(rule, prefix):
                fields |= declared_provides(mw)
        return frozenset(fields)

    def _remember_mount(self, state: BlueprintSetupState) -> None:
        self._mount_prefixes.append(state.url_prefix or "")

    def _relative_rule(self) -> Optional[str]:
        """Matched rule relative to where this router is mounted."""
        if request.url_rule is None:
            return None
        rule = request.url_rule.rule
        for prefix in self._mount_prefixes:
            if _is_under(rule, prefix):
                return rule[len(prefix.rstrip("/")):] or "/"
        return None

    # ------------------------------------------------------------------
    # Routes
    # ------------------------------------------------------------------

    def get(self, rule: str, *handlers: Handler, **options: Any):
        return self._register("GET", rule, handlers, options)

    def put(self, rule: str, *handlers: Handler, **options: Any):
        return self._register("PUT", rule, handlers, options)

    def post(self, rule: str, *handlers: Handler, **options: Any):
        return self._register("POST", rule, handlers, options)

    def patch(self, rule: str, *handlers: Handler, **options: Any):
        return self._register("PATCH", rule, handlers, options)

    def delete(self, rule: str, *handlers: Handler, **options: Any):
        return self._register("DELETE", rule, handlers, options)

    def _register(self, method: str, rule: str, handlers: Tuple[Handler, ...], options: Dict[str, Any]):
        if "methods" in options:
            raise TypeError("Use the 'route' decorator to use the 'methods' argument.")

        if not handlers:
            def decorator(fn: Handler) -> Handler:
                self._add_chain(method, rule, (fn,), options)
                return fn
            return decorator

        self._add_chain(method, rule, handlers, options)
        return self

    def _add_chain(self, method: str, rule: str, handlers: Tuple[Handler, ...], options: Dict[str, Any]) -> Chain:
        chain = Chain(handlers, self._context_for(rule), where=f"{method} {rule}",
                      positions=self._lineage(next(self._order)))
        endpoint = options.pop("endpoint", None) or _endpoint_for(method, rule)
        self.add_url_rule(rule, endpoint, chain, methods=[method], **options)
        logger.debug("Registered %r on router '%s'", chain, self.name)
        return chain


def _is_under(rule: str, prefix: str) -> bool:
    prefix = prefix.rstrip("/")
    return not prefix or rule == prefix or rule.startswith(prefix + "/")


def _endpoint_for(method: str, rule: str) -> str:
    slug = _NON_WORD.sub("_", rule).strip("_") or "root"
    return f"{method.lower()}_{slug}"
