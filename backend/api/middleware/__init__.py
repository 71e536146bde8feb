"""
Global middleware and error boundaries.

Provides:
- Request context opening (X-Request-ID)
- Per-request logging
- App-level error handlers
- Handler error boundaries
"""

from .request_id import setup_request_id_middleware
from .request_logging import setup_request_logging_middleware
from .error_envelope import setup_error_handlers
from .error_boundary import checked_error_boundary, default_error_handler, error_boundary

__all__ = [
    'setup_request_id_middleware',
    'setup_request_logging_middleware',
    'setup_error_handlers',
    'error_boundary',
    'checked_error_boundary',
    'default_error_handler',
]
