"""
API package - typed request validation and routing over Flask.

This package provides:
- Request shapes and validation outcomes (contracts)
- The typed router facade (routing)
- Per-request context with declared fields
- Error boundaries and global middleware
"""

from .context import RequestContext, current_context, provides, requires
from .contracts import check_request, request_shape, validate
from .middleware import checked_error_boundary, error_boundary
from .routing import TypedRouter

__all__ = [
    'RequestContext',
    'current_context',
    'provides',
    'requires',
    'check_request',
    'request_shape',
    'validate',
    'checked_error_boundary',
    'error_boundary',
    'TypedRouter',
]
