"""
Raw request facets.

Collects the four facets a shape may constrain from a Flask request:
- query:  query string, with extended bracket syntax (a[b]=1, a[]=1)
- params: URL rule variables (already converted by the URL map)
- body:   JSON (any JSON value) or form fields with bracket syntax
- header: headers with lower-cased names

Bracket expansion follows the qs library that Express uses:
    a=1&a=2        -> {"a": ["1", "2"]}
    a[b]=1         -> {"a": {"b": "1"}}
    a[]=1&a[]=2    -> {"a": ["1", "2"]}
    a[b][c]=1      -> {"a": {"b": {"c": "1"}}}
    a[1]=y&a[0]=x  -> {"a": ["x", "y"]}
    a[][b]=1       -> {"a": [{"b": "1"}]}
Indices above ARRAY_LIMIT stay object keys, and mixing indices with named
keys gives an object with string keys. Nesting deeper than MAX_DEPTH keeps
the remaining brackets in the last key.
"""

import re
from typing import Any, Dict, List, Optional

from flask import Request, request
from werkzeug.datastructures import Headers, MultiDict


MAX_DEPTH = 5
ARRAY_LIMIT = 20

_BRACKET = re.compile(r"\[([^\[\]]*)\]")


def collect_facets(req: Optional[Request] = None) -> Dict[str, Any]:
    """Collect raw facets from the given request, or the current one."""
    req = req if req is not None else request
    return {
        "query": expand_brackets(req.args),
        "params": dict(req.view_args or {}),
        "body": read_body(req),
        "header": header_facet(req.headers),
    }


def read_body(req: Request) -> Any:
    """
    Parse the request body.

    JSON is parsed non-strictly: scalars, arrays and null are all accepted.
    Malformed JSON gives None, which fails any body shape. Requests without
    a body give an empty dict.
    """
    if req.is_json:
        return req.get_json(silent=True)
    return expand_brackets(req.form)


def header_facet(headers: Headers) -> Dict[str, str]:
    return {name.lower(): value for name, value in headers.items()}


def expand_brackets(pairs: MultiDict) -> Dict[str, Any]:
    """Expand a MultiDict with bracketed keys into nested dicts and lists."""
    result: Dict[Any, Any] = {}
    for key in pairs:
        values = pairs.getlist(key)
        path = _split_key(key)
        if len(path) == 1:
            result[key] = values[0] if len(values) == 1 else list(values)
            continue
        _assign(result, path, values)
    return {key: _finalize(value) for key, value in result.items()}


def _split_key(key: str) -> List[str]:
    head, bracket, rest = key.partition("[")
    if not bracket or not head:
        return [key]

    parts = [head]
    remainder = bracket + rest
    while remainder and len(parts) <= MAX_DEPTH:
        match = _BRACKET.match(remainder)
        if not match:
            break
        parts.append(match.group(1))
        remainder = remainder[match.end():]
    if remainder:
        # Unparsed tail stays literal on the last segment
        parts[-1] = parts[-1] + remainder
    return parts


def _assign(target: Dict[Any, Any], path: List[str], values: List[str]) -> None:
    """
    Write values at path. While building, arrays are dicts keyed by int
    index; _finalize turns them into lists.
    """
    node = target
    for segment in path[:-1]:
        if node is target:
            key: Any = segment
        elif segment == "" and isinstance(node.get(0, {}), dict):
            # a[][b]=1&a[][c]=2 -> [{"b": "1", "c": "2"}]
            key = 0
        elif segment == "":
            key = _next_index(node)
        else:
            key = _index_or_key(segment)
        child = node.get(key)
        if not isinstance(child, dict):
            node[key] = child = _as_node(child)
        node = child

    leaf = path[-1]
    if leaf == "":
        start = _next_index(node)
        for offset, value in enumerate(values):
            node[start + offset] = value
        return
    node[_index_or_key(leaf)] = values[0] if len(values) == 1 else list(values)


def _index_or_key(segment: str) -> Any:
    # a[3] is a list position; a[03] and a[21] stay object keys
    if segment.isdigit() and str(int(segment)) == segment and int(segment) <= ARRAY_LIMIT:
        return int(segment)
    return segment


def _next_index(node: Dict[Any, Any]) -> int:
    indices = [key for key in node if isinstance(key, int)]
    return max(indices) + 1 if indices else 0


def _as_node(value: Any) -> Dict[Any, Any]:
    if value is None:
        return {}
    if isinstance(value, list):
        return dict(enumerate(value))
    return {0: value}


def _finalize(value: Any) -> Any:
    if isinstance(value, list):
        return [_finalize(item) for item in value]
    if not isinstance(value, dict):
        return value
    if value and all(isinstance(key, int) for key in value):
        # Sparse indices are compacted, in index order
        return [_finalize(value[key]) for key in sorted(value)]
    return {str(key): _finalize(item) for key, item in value.items()}
