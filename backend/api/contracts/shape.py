"""
Request shape descriptors.

A shape describes what a request must look like across up to four facets:
- query:  query string parameters
- params: URL rule variables
- body:   parsed request body
- header: request headers (lower-cased names)

Each facet is a pydantic model (or any annotation pydantic accepts). Shapes
are built once at import time and never mutated.

Usage:
    class CreateUserBody(ShapeModel):
        name: str
        age: Number

    CreateUser = request_shape("CreateUser", body=CreateUserBody)

    # or, for one-off shapes
    Lookup = request_shape("Lookup", query={"page": int, "q": (str, None)})
"""

from typing import Any, Dict, Mapping, Tuple, Type, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, create_model


FACETS = ("query", "params", "body", "header")

# JSON numbers only: strings and booleans are rejected, ints stay ints
Number = Union[StrictInt, StrictFloat]


class ShapeModel(BaseModel):
    """
    Base model for facet and shape definitions.

    - frozen=True: validated values cannot be mutated by handlers
    - populate_by_name=True: accept both alias and field name
    - extra='ignore': undeclared request fields are dropped
    """
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra='ignore',
    )


class RequestShape(ShapeModel):
    """Composed request shape. Fields are facet names only."""

    @classmethod
    def facets(cls) -> Tuple[str, ...]:
        """Declared facet names, in declaration order."""
        return tuple(name for name in cls.model_fields if name in FACETS)


def request_shape(
    name: str = "RequestShape",
    *,
    query: Any = None,
    params: Any = None,
    body: Any = None,
    header: Any = None,
) -> Type[RequestShape]:
    """
    Build a RequestShape model from facet descriptions.

    Args:
        name: Model name (shows up in reprs and schema titles)
        query/params/body/header: A pydantic model, a {field: type} mapping,
            or any other type annotation. Omitted facets are not validated.

    Returns:
        A RequestShape subclass whose declared facets are all required

    Raises:
        ValueError: If no facet is described
    """
    described = {
        facet: definition
        for facet, definition in zip(FACETS, (query, params, body, header))
        if definition is not None
    }
    if not described:
        raise ValueError(f"Shape '{name}' describes no request facet")

    fields = {
        facet: (_facet_type(f"{name}_{facet}", definition), ...)
        for facet, definition in described.items()
    }
    return create_model(name, __base__=RequestShape, **fields)


def _facet_type(model_name: str, definition: Any) -> Any:
    """Turn a facet description into something pydantic can validate."""
    if isinstance(definition, Mapping):
        return fields_model(model_name, definition)
    return definition


def fields_model(model_name: str, definition: Mapping[str, Any]) -> Type[ShapeModel]:
    """
    Build a ShapeModel from a {field: type} mapping.

    Values may be:
    - a type (required field)
    - a (type, default) tuple (optional field)
    - a nested mapping (nested object)

    Keys that are not identifiers (e.g. "x-api-key") become aliased fields.
    """
    fields: Dict[str, Tuple[Any, Any]] = {}
    for key, value in definition.items():
        attr = _identifier(key)
        default: Any = ...
        if isinstance(value, tuple):
            value, default = value
        if isinstance(value, Mapping):
            value = fields_model(f"{model_name}_{attr}", value)
        if attr != key:
            fields[attr] = (value, Field(default, alias=key))
        else:
            fields[attr] = (value, default)
    return create_model(model_name, __base__=ShapeModel, **fields)


def _identifier(key: str) -> str:
    attr = key.replace('-', '_')
    return attr if attr.isidentifier() else f"field_{attr}"
