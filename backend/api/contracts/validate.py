"""
Request validation outcomes.

The validator is a narrow capability:

    Validator = (shape, raw_facets) -> Outcome

where Outcome is either Failure(messages) or Success(value). Validation
problems are ordinary outcomes, never exceptions. The default validator
delegates to pydantic; any callable with the same signature can replace it.
"""

from dataclasses import dataclass
from typing import Any, Callable, Generic, List, Mapping, Type, TypeVar, Union

from pydantic import ValidationError

from .shape import RequestShape


T = TypeVar('T')


@dataclass(frozen=True)
class Failure:
    """Request did not match its shape. Messages keep validator order."""
    messages: List[str]


@dataclass(frozen=True)
class Success(Generic[T]):
    """Request matched its shape; value is the narrowed shape instance."""
    value: T


Outcome = Union[Failure, Success[T]]
Validator = Callable[[Type[RequestShape], Mapping[str, Any]], Outcome]
Checker = Callable[[Mapping[str, Any]], Outcome]


def validate_request(shape: Type[RequestShape], raw: Mapping[str, Any]) -> Outcome:
    """
    Validate raw request facets against a shape with pydantic.

    Args:
        shape: RequestShape subclass
        raw: {"query": ..., "params": ..., "body": ..., "header": ...}

    Returns:
        Success with the validated shape instance, or Failure with one
        message per pydantic error
    """
    try:
        value = shape.model_validate(dict(raw))
    except ValidationError as e:
        return Failure(messages=format_errors(e))
    return Success(value=value)


def check(shape: Type[RequestShape], validator: Validator = validate_request) -> Checker:
    """Bind a shape to a validator, giving a one-argument checker."""
    def checker(raw: Mapping[str, Any]) -> Outcome:
        return validator(shape, raw)

    checker.__name__ = f"check_{shape.__name__}"
    return checker


def format_errors(error: ValidationError) -> List[str]:
    """
    Flatten a pydantic ValidationError into human-readable messages.

    Each message is "<location>: <reason>", e.g. "body.age: Field required".
    """
    messages = []
    for item in error.errors(include_url=False):
        location = ".".join(str(part) for part in item.get("loc", ()))
        reason = item.get("msg", "Invalid value")
        messages.append(f"{location}: {reason}" if location else reason)
    return messages


def is_failure(outcome: Outcome) -> bool:
    return isinstance(outcome, Failure)
