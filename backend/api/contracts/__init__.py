"""
Request contracts.

Provides request shapes, the validation capability, and the adapters that
put validated values in front of handlers.
"""

from .shape import FACETS, Number, RequestShape, ShapeModel, fields_model, request_shape
from .validate import Failure, Success, check, format_errors, is_failure, validate_request
from .facets import collect_facets
from .wrapper import check_request, validate

__all__ = [
    'FACETS',
    'Number',
    'RequestShape',
    'ShapeModel',
    'fields_model',
    'request_shape',
    'Failure',
    'Success',
    'check',
    'format_errors',
    'is_failure',
    'validate_request',
    'collect_facets',
    'check_request',
    'validate',
]
