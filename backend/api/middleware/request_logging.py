"""
Request logging middleware - one line per request.

Logs method, path, status, duration and response size for every request
(sampled if configured), with the request id for correlation.

Config keys (see config.Config):
  - REQUEST_LOG_ENABLED (default: True)
  - REQUEST_LOG_SAMPLE_RATE (default: 1.0)
  - REQUEST_LOG_ENDPOINTS (path prefixes always logged; when set, only these)
"""

import logging
import random
import time
from typing import Iterable, List

from flask import Flask, g, request

from api.context import current_context


logger = logging.getLogger("api.request")


def _parse_watchlist(raw) -> List[str]:
    if not raw:
        return []
    if isinstance(raw, str):
        raw = raw.split(",")
    return [p.strip() for p in raw if p and p.strip()]


def _should_log(path: str, watchlist: Iterable[str], sample_rate: float) -> bool:
    if watchlist:
        return any(path.startswith(prefix) for prefix in watchlist)
    if sample_rate <= 0:
        return False
    if sample_rate >= 1:
        return True
    return random.random() <= sample_rate


def setup_request_logging_middleware(app: Flask) -> None:
    """
    Set up request logging middleware on Flask app.

    Args:
        app: Flask application instance
    """
    if not app.config.get("REQUEST_LOG_ENABLED", True):
        return

    try:
        sample_rate = float(app.config.get("REQUEST_LOG_SAMPLE_RATE", 1.0))
    except (TypeError, ValueError):
        sample_rate = 1.0
    watchlist = _parse_watchlist(app.config.get("REQUEST_LOG_ENDPOINTS"))

    @app.before_request
    def _start_timer():
        g.request_start = time.perf_counter()

    @app.after_request
    def _log_request(response):
        path = request.path
        if not _should_log(path, watchlist, sample_rate):
            return response

        duration_ms = None
        if hasattr(g, "request_start"):
            duration_ms = round((time.perf_counter() - g.request_start) * 1000, 2)

        logger.info(
            "%s %s %s duration_ms=%s length=%s request_id=%s",
            request.method,
            path,
            response.status_code,
            duration_ms,
            response.calculate_content_length(),
            current_context().request_id,
        )
        return response
